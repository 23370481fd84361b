"""
Реестр WebSocket-соединений relay: добавление, удаление,
рассылка количества игроков и пересылка сообщений всем, кроме отправителя.
"""
import logging
import uuid

from fastapi import WebSocket

from .protocol import player_count_payload

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, ws: WebSocket):
        self.ws = ws
        self.conn_id = uuid.uuid4().hex[:8]


class RelayRegistry:
    def __init__(self):
        self._all: list[Connection] = []

    @property
    def count(self) -> int:
        return len(self._all)

    def add(self, ws: WebSocket) -> Connection:
        conn = Connection(ws)
        self._all.append(conn)
        return conn

    def remove(self, conn: Connection) -> None:
        if conn in self._all:
            self._all.remove(conn)

    async def broadcast_count(self) -> None:
        await self._broadcast_json(player_count_payload(self.count))

    async def forward(self, sender: Connection, raw: str) -> int:
        """Переслать сырой текст всем, кроме отправителя. Возвращает число получателей."""
        delivered = 0
        dead = []
        for conn in list(self._all):
            if conn is sender:
                continue
            try:
                await conn.ws.send_text(raw)
                delivered += 1
            except Exception as e:
                logger.warning("forward to %s failed: %s", conn.conn_id, e)
                dead.append(conn)
        for conn in dead:
            self.remove(conn)
        return delivered

    async def _broadcast_json(self, payload: dict) -> None:
        dead = []
        for conn in list(self._all):
            try:
                await conn.ws.send_json(payload)
            except Exception:
                dead.append(conn)
        for conn in dead:
            self.remove(conn)

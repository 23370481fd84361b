"""
Цикл relay для одного WebSocket: подключение, пересылка сообщений, отключение.
Правил игры сервер не знает.
"""
import json
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .protocol import JOIN
from .ws_manager import Connection, RelayRegistry

logger = logging.getLogger(__name__)


async def handle_ws_message(registry: RelayRegistry, conn: Connection, raw: str) -> int:
    """
    Обрабатывает одно сообщение клиента.
    Возвращает число получателей (0 для join и для мусора).
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("WS: invalid JSON from %s: %s", conn.conn_id, e)
        return 0
    # не-объекты (массивы, числа) тоже пересылаются: у них просто нет type
    t = data.get("type") if isinstance(data, dict) else None
    if t == JOIN:
        logger.info("WS: join from %s id=%s", conn.conn_id, data.get("id"))
        return 0
    delivered = await registry.forward(conn, raw)
    logger.debug("WS: %s type=%s forwarded to %s", conn.conn_id, t, delivered)
    return delivered


async def receive_frame(ws: WebSocket, conn: Connection) -> str | None:
    """
    Следующий кадр как текст. Бинарный кадр декодируется из UTF-8,
    не декодируемый отбрасывается (None). Закрытие — WebSocketDisconnect.
    """
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    if message.get("text") is not None:
        return message["text"]
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("WS: undecodable binary frame from %s", conn.conn_id)
        return None


async def ws_relay_loop(ws: WebSocket, registry: RelayRegistry) -> None:
    conn = None
    try:
        await ws.accept()
        conn = registry.add(ws)
        logger.info("Client connected %s (total=%s)", conn.conn_id, registry.count)
        await registry.broadcast_count()
        while True:
            raw = await receive_frame(ws, conn)
            if raw is not None:
                await handle_ws_message(registry, conn, raw)
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s conn=%s", e.code, conn and conn.conn_id)
    except Exception as e:
        logger.exception("WS: error conn=%s: %s", conn and conn.conn_id, e)
    finally:
        if conn:
            registry.remove(conn)
            await registry.broadcast_count()
            logger.info("Client disconnected %s (total=%s)", conn.conn_id, registry.count)

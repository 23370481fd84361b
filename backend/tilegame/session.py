"""
Сессия клиента: роль, локальная копия партии, выбор фишки и репликация.
После каждого локального изменения в relay уходит полный снимок состояния;
чужой снимок целиком заменяет локальный (последний записавший побеждает).
"""
import logging
import uuid
from typing import Callable

from .constants import DEFAULT_GEOMETRY, Geometry
from .match import (
    ACTIVE,
    MSG_STARTED,
    MSG_WAITING,
    IllegalMove,
    MatchState,
    can_start,
    new_match,
    outcome_message,
    place_tile,
    start_match,
    tick,
)
from .protocol import Join, Message, PlayerCount, StateUpdate, encode, join_payload, parse_message, state_payload
from .roles import RoleSlot

logger = logging.getLogger(__name__)


def new_player_id() -> str:
    return uuid.uuid4().hex[:12]


class PeerSession:
    def __init__(
        self,
        player_id: str | None = None,
        send: Callable[[str], None] | None = None,
        geometry: Geometry = DEFAULT_GEOMETRY,
    ):
        self.player_id = player_id or new_player_id()
        self.geometry = geometry
        self._send = send
        self.transport_open = False
        self.roles = RoleSlot()
        self.player_count = 0
        self.state: MatchState = new_match(geometry)
        self.selected_tile: int | None = None
        self.message = ""
        self.assets_loaded = False
        self.on_change: Callable[["PeerSession"], None] | None = None

    @property
    def role(self) -> str | None:
        return self.roles.role

    @property
    def can_start(self) -> bool:
        return can_start(self.state, self.role, self.player_count)

    # --- транспорт ---

    def connection_opened(self) -> None:
        self.transport_open = True
        self._deliver(encode(join_payload(self.player_id)))

    def connection_closed(self) -> None:
        self.transport_open = False

    def _deliver(self, text: str) -> bool:
        if not self.transport_open or self._send is None:
            logger.debug("send skipped: transport not open")
            return False
        self._send(text)
        return True

    def broadcast_state(self) -> bool:
        return self._deliver(encode(state_payload(self.player_id, self.state)))

    def _changed(self) -> None:
        if self.on_change:
            self.on_change(self)

    # --- жизненный цикл ---

    def assets_ready(self) -> None:
        """Первая инициализация партии после загрузки ресурсов (один раз)."""
        if self.assets_loaded:
            return
        self.assets_loaded = True
        self.reset()

    def reset(self) -> None:
        self.state = new_match(self.geometry)
        self.selected_tile = None
        self.message = MSG_WAITING
        self._changed()

    # --- входящие сообщения ---

    def handle_raw(self, raw: str) -> bool:
        msg = parse_message(raw)
        if msg is None:
            logger.debug("dropped unparseable message")
            return False
        return self.handle(msg)

    def handle(self, msg: Message) -> bool:
        if isinstance(msg, PlayerCount):
            self.on_player_count(msg.count)
            return True
        if isinstance(msg, StateUpdate):
            return self.apply_remote(msg)
        if isinstance(msg, Join):
            # relay не пересылает join
            return False
        raise TypeError(f"unhandled message {msg!r}")

    def on_player_count(self, count: int) -> None:
        self.player_count = count
        if self.roles.assign(count):
            self.message = self.roles.status_message()
            logger.info("role assigned: %s (count=%s)", self.role, count)
        self._changed()

    def apply_remote(self, update: StateUpdate) -> bool:
        if update.id == self.player_id:
            return False
        update.state.cols = self.state.cols
        self.state = update.state
        self.selected_tile = None
        if self.state.game_over and self.state.winner:
            self.message = outcome_message(self.state.winner)
        self._changed()
        return True

    # --- локальные действия ---

    def start(self) -> bool:
        if not start_match(self.state, self.role, self.player_count):
            return False
        self.message = MSG_STARTED
        logger.info("match started by %s", self.role)
        self.broadcast_state()
        self._changed()
        return True

    def select(self, tile: int) -> bool:
        """Выбрать фишку из своего пула (только в свой ход)."""
        s = self.state
        if s.phase != ACTIVE or self.role != s.current_turn:
            return False
        if tile not in s.pool(self.role):
            return False
        self.selected_tile = tile
        self._changed()
        return True

    def place(self, slot: int) -> bool:
        try:
            place_tile(self.state, self.role, self.selected_tile, slot)
        except IllegalMove as e:
            self.message = str(e)
            self._changed()
            return False
        self.selected_tile = None
        if self.state.game_over:
            self.message = outcome_message(self.state.winner)
        else:
            self.message = f"{self.state.current_turn.upper()} player's turn."
        self.broadcast_state()
        self._changed()
        return True

    def tick(self) -> bool:
        """
        Тик таймера. Финиш по времени засчитывает только клиент,
        чья сторона сейчас ходит; остальные узнают о нём из снимка.
        """
        s = self.state
        if s.phase != ACTIVE:
            return False
        owns_clock = self.role == s.current_turn
        finished = tick(s, expire=owns_clock)
        if finished:
            self.message = outcome_message(s.winner)
            logger.info("match finished on time: winner=%s", s.winner)
            self.broadcast_state()
        self._changed()
        return finished

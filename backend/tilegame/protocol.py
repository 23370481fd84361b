"""
Сообщения WebSocket: join, playerCount, state.
Разбор в dataclass'ы; всё, что не разобралось, — шум (None).
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Union

from .constants import SIDES, TIE
from .match import MatchState

logger = logging.getLogger(__name__)

JOIN = "join"
PLAYER_COUNT = "playerCount"
STATE = "state"


@dataclass
class Join:
    id: str


@dataclass
class PlayerCount:
    count: int


@dataclass
class StateUpdate:
    id: str
    state: MatchState


Message = Union[Join, PlayerCount, StateUpdate]


def join_payload(player_id: str) -> dict:
    return {"type": JOIN, "id": player_id}


def player_count_payload(count: int) -> dict:
    return {"type": PLAYER_COUNT, "count": count}


def state_payload(player_id: str, s: MatchState) -> dict:
    """Собрать полный снимок состояния для рассылки другим клиентам."""
    return {
        "type": STATE,
        "id": player_id,
        "board": list(s.board),
        "leftPool": list(s.left_pool),
        "rightPool": list(s.right_pool),
        "leftScore": s.left_score,
        "rightScore": s.right_score,
        "currentTurn": s.current_turn,
        "leftTime": s.left_time,
        "rightTime": s.right_time,
        "gameOver": s.game_over,
        "winner": s.winner,
        "timerRunning": s.timer_running,
    }


def _state_from_payload(data: dict[str, Any]) -> MatchState | None:
    try:
        board = [None if cell is None else int(cell) for cell in data["board"]]
        s = MatchState(
            board=board,
            left_pool=[int(t) for t in data["leftPool"]],
            right_pool=[int(t) for t in data["rightPool"]],
            left_score=int(data["leftScore"]),
            right_score=int(data["rightScore"]),
            current_turn=data["currentTurn"],
            left_time=int(data["leftTime"]),
            right_time=int(data["rightTime"]),
            timer_running=bool(data["timerRunning"]),
            game_over=bool(data["gameOver"]),
            winner=data.get("winner"),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("state: bad snapshot: %s", e)
        return None
    if s.current_turn not in SIDES or s.winner not in (None, TIE, *SIDES):
        logger.warning("state: bad turn/winner %r/%r", s.current_turn, s.winner)
        return None
    return s


def parse_message(raw: str) -> Message | None:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    t = data.get("type")
    if t == JOIN:
        return Join(id=str(data.get("id", "")))
    if t == PLAYER_COUNT:
        count = data.get("count")
        if not isinstance(count, int) or isinstance(count, bool):
            return None
        return PlayerCount(count=count)
    if t == STATE:
        sender = data.get("id")
        if not isinstance(sender, str):
            return None
        s = _state_from_payload(data)
        if s is None:
            return None
        return StateUpdate(id=sender, state=s)
    logger.debug("unknown message type %r", t)
    return None


def encode(payload: dict) -> str:
    return json.dumps(payload)

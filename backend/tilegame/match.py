"""
Состояние партии (in-memory) и переходы: старт, ход, тик часов, финиш.
Каждый клиент держит свою копию; сервер о правилах ничего не знает.
"""
from dataclasses import dataclass, field

from .constants import DEFAULT_GEOMETRY, LEFT, RIGHT, SIDES, TIE, Geometry, other_side

WAITING = "waiting"
ACTIVE = "active"
FINISHED = "finished"

MSG_WAITING = "Connect two players, then press Start Game to begin."
MSG_STARTED = "Game started! LEFT player's turn."
MSG_TIE = "Game over: tie (same score and same time left)."


class IllegalMove(Exception):
    """Ход отклонён; текст исключения показывается игроку."""


@dataclass
class MatchState:
    board: list[int | None]
    left_pool: list[int]
    right_pool: list[int]
    left_score: int = 0
    right_score: int = 0
    current_turn: str = LEFT
    left_time: int = 0
    right_time: int = 0
    timer_running: bool = False
    game_over: bool = False
    winner: str | None = None  # None | "left" | "right" | "tie"
    cols: int = field(default=DEFAULT_GEOMETRY["cols"], compare=False)

    @property
    def phase(self) -> str:
        if self.game_over:
            return FINISHED
        if self.timer_running:
            return ACTIVE
        return WAITING

    @property
    def total_tiles(self) -> int:
        return len(self.board)

    def pool(self, side: str) -> list[int]:
        return self.left_pool if side == LEFT else self.right_pool

    def is_board_full(self) -> bool:
        return all(cell is not None for cell in self.board)


def new_match(geometry: Geometry = DEFAULT_GEOMETRY) -> MatchState:
    """
    Reset: пустое поле, первая половина id у LEFT, вторая у RIGHT,
    нулевой счёт, полные часы.
    """
    total = geometry["cols"] * geometry["rows"]
    half = total // 2
    return MatchState(
        board=[None] * total,
        left_pool=list(range(half)),
        right_pool=list(range(half, total)),
        left_time=geometry["turn_seconds"],
        right_time=geometry["turn_seconds"],
        cols=geometry["cols"],
    )


def can_start(state: MatchState, role: str | None, player_count: int) -> bool:
    return role in SIDES and state.phase == WAITING and player_count >= 2


def start_match(state: MatchState, role: str | None, player_count: int) -> bool:
    """Start. Возвращает False (без изменений), если старт не разрешён."""
    if not can_start(state, role, player_count):
        return False
    state.timer_running = True
    state.current_turn = LEFT
    return True


def place_tile(state: MatchState, role: str | None, tile: int | None, slot: int) -> None:
    """
    Place: перенести tile из пула стороны role в ячейку slot.
    При отказе бросает IllegalMove, состояние не меняется.
    """
    if state.phase != ACTIVE:
        raise IllegalMove("Game is not active.")
    if role != state.current_turn:
        raise IllegalMove("Not your turn.")
    if tile is None:
        raise IllegalMove("No tile selected.")
    pool = state.pool(role)
    if tile not in pool:
        raise IllegalMove("Tile is not in your pool.")
    if not 0 <= slot < state.total_tiles:
        raise IllegalMove("Cell out of range.")
    if state.board[slot] is not None:
        raise IllegalMove("Cell already filled.")

    state.board[slot] = tile
    pool.remove(tile)
    if role == LEFT:
        state.left_score += 1
    else:
        state.right_score += 1

    if state.is_board_full():
        finish_match(state)
        return
    state.current_turn = other_side(state.current_turn)


def tick(state: MatchState, expire: bool = True) -> bool:
    """
    Один тик часов активной стороны (не ниже нуля).
    Возвращает True, если тик завершил партию.
    С expire=False часы идут, но финиш по времени остаётся за владельцем часов.
    """
    if state.phase != ACTIVE:
        return False
    if state.current_turn == LEFT:
        state.left_time = max(0, state.left_time - 1)
    else:
        state.right_time = max(0, state.right_time - 1)
    if expire and (state.left_time == 0 or state.right_time == 0):
        finish_match(state)
        return True
    return False


def evaluate_winner(left_score: int, right_score: int, left_time: int, right_time: int) -> str:
    # счёт, затем оставшееся время, затем ничья
    if left_score != right_score:
        return LEFT if left_score > right_score else RIGHT
    if left_time != right_time:
        return LEFT if left_time > right_time else RIGHT
    return TIE


def finish_match(state: MatchState) -> None:
    if state.game_over:
        return
    state.winner = evaluate_winner(
        state.left_score, state.right_score, state.left_time, state.right_time
    )
    state.game_over = True
    state.timer_running = False


def outcome_message(winner: str | None) -> str:
    if winner == TIE:
        return MSG_TIE
    return f"Game over: {(winner or '').upper()} wins."


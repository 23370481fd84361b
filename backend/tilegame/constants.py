"""Константы партии: стороны, роли, размеры поля."""
from typing import TypedDict

LEFT = "left"
RIGHT = "right"
SPECTATOR = "spectator"
TIE = "tie"

SIDES = (LEFT, RIGHT)

BOARD_COLS = 5
BOARD_ROWS = 6
TURN_SECONDS = 60
TICK_INTERVAL = 1.0


class Geometry(TypedDict):
    cols: int
    rows: int
    turn_seconds: int


DEFAULT_GEOMETRY: Geometry = {
    "cols": BOARD_COLS,
    "rows": BOARD_ROWS,
    "turn_seconds": TURN_SECONDS,
}


def other_side(side: str) -> str:
    return RIGHT if side == LEFT else LEFT

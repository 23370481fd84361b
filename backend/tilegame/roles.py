"""
Назначение ролей по порядку подключения:
первый — LEFT, второй — RIGHT, остальные — зрители.
"""
from .constants import LEFT, RIGHT, SIDES, SPECTATOR


def role_for_count(count: int) -> str | None:
    if count <= 0:
        return None
    if count == 1:
        return LEFT
    if count == 2:
        return RIGHT
    return SPECTATOR


class RoleSlot:
    """Роль сессии: назначается один раз и больше не меняется."""

    def __init__(self):
        self.role: str | None = None

    def assign(self, count: int) -> bool:
        if self.role is not None:
            return False
        self.role = role_for_count(count)
        return self.role is not None

    @property
    def is_player(self) -> bool:
        return self.role in SIDES

    def status_message(self) -> str:
        if self.role == LEFT:
            return "You are LEFT. Waiting for second player..."
        if self.role == RIGHT:
            return "You are RIGHT. You need to move right pieces."
        if self.role == SPECTATOR:
            return "You are a spectator."
        return ""

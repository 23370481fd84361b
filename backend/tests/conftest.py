import os
import sys
import pytest

# backend/ (с пакетом `tilegame`) должен быть в sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from fastapi.testclient import TestClient

from tilegame.main import create_app
from tilegame.session import PeerSession

SMALL_GEOMETRY = {"cols": 2, "rows": 2, "turn_seconds": 5}


@pytest.fixture()
def relay_app():
    return create_app(frontend_dir="")


@pytest.fixture()
def client(relay_app):
    return TestClient(relay_app)


class Wire:
    """Связывает две сессии напрямую, как relay: всё, что отправил один, получает другой."""

    def __init__(self):
        self.sessions = []
        self.sent = []

    def attach(self, session):
        self.sessions.append(session)

    def sender(self, owner_index):
        def send(text):
            self.sent.append((owner_index, text))
        return send

    def flush(self):
        while self.sent:
            owner, text = self.sent.pop(0)
            for i, s in enumerate(self.sessions):
                if i != owner:
                    s.handle_raw(text)


@pytest.fixture()
def wired_pair():
    wire = Wire()
    left = PeerSession(player_id="left-id", send=wire.sender(0), geometry=SMALL_GEOMETRY)
    right = PeerSession(player_id="right-id", send=wire.sender(1), geometry=SMALL_GEOMETRY)
    for s in (left, right):
        wire.attach(s)
        s.assets_ready()
        s.connection_opened()
    wire.sent.clear()  # join'ы relay не пересылает
    left.on_player_count(1)
    left.on_player_count(2)
    right.on_player_count(2)
    return wire, left, right


def tiles_accounted(state):
    """Поле и оба пула не пересекаются и вместе дают весь диапазон id."""
    on_board = [t for t in state.board if t is not None]
    everything = on_board + state.left_pool + state.right_pool
    return len(everything) == len(set(everything)) and set(everything) == set(range(state.total_tiles))

from conftest import SMALL_GEOMETRY
from tilegame.constants import LEFT, RIGHT
from tilegame.peer import handle_command, render_text
from tilegame.session import PeerSession


def _left_player():
    s = PeerSession(player_id="me", geometry=SMALL_GEOMETRY)
    s.assets_ready()
    s.on_player_count(1)
    s.on_player_count(2)
    return s


def test_commands_drive_a_turn():
    s = _left_player()
    assert handle_command(s, "start")
    assert s.state.current_turn == LEFT
    assert handle_command(s, "select 1")
    assert s.selected_tile == 1
    assert handle_command(s, "place 1 0")
    assert s.state.board[2] == 1
    assert s.state.current_turn == RIGHT


def test_bad_commands_set_status():
    s = _left_player()
    handle_command(s, "place 0")
    assert s.message == "Game is not active."
    handle_command(s, "select x")
    assert s.message == "Expected a number."
    handle_command(s, "dance")
    assert s.message == "Unknown command."
    handle_command(s, "start")
    handle_command(s, "select 3")
    assert s.message == "Cannot select that tile."
    handle_command(s, "select 0")
    handle_command(s, "place 0 5")
    assert s.message == "Cell out of range."
    assert not handle_command(s, "quit")


def test_render_marks_selection_and_state():
    s = _left_player()
    handle_command(s, "start")
    handle_command(s, "select 0")
    text = render_text(s)
    assert "LEFT  pool: [0] 1" in text
    assert "RIGHT pool: 2 3" in text
    assert "turn=left" in text
    assert "you=left" in text
    assert "  .   ." in text


def test_render_offers_start_only_when_possible():
    s = _left_player()
    assert "Type 'start' to begin." in render_text(s)
    handle_command(s, "start")
    assert "Type 'start' to begin." not in render_text(s)

    alone = PeerSession(geometry=SMALL_GEOMETRY)
    alone.on_player_count(1)
    assert "Type 'start' to begin." not in render_text(alone)


def test_spectator_cannot_start():
    s = PeerSession(geometry=SMALL_GEOMETRY)
    s.on_player_count(3)
    handle_command(s, "start")
    assert s.message == "Spectators cannot start."
    assert s.state.phase == "waiting"

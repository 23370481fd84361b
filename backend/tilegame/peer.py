"""
Терминальный клиент: подключение к relay, команды из stdin, таймер и
текстовая отрисовка состояния.

Команды: start | select <tile> | place <slot> | place <row> <col> | show | quit
"""
import argparse
import asyncio
import logging
import sys
import threading

import websockets
from websockets.exceptions import ConnectionClosed

from .clock import run_clock
from .config import get_config
from .session import PeerSession

logger = logging.getLogger(__name__)


def render_text(session: PeerSession) -> str:
    s = session.state
    cols = s.cols
    lines = []
    for row_start in range(0, s.total_tiles, cols):
        cells = s.board[row_start:row_start + cols]
        lines.append(" ".join("  ." if c is None else f"{c:3d}" for c in cells))

    def pool_line(pool: list[int]) -> str:
        return " ".join(f"[{t}]" if t == session.selected_tile else str(t) for t in pool)

    lines.append(f"LEFT  pool: {pool_line(s.left_pool)}")
    lines.append(f"RIGHT pool: {pool_line(s.right_pool)}")
    lines.append(
        f"score {s.left_score}:{s.right_score}  time {s.left_time}:{s.right_time}"
        f"  turn={s.current_turn}  phase={s.phase}  you={session.role}"
        f"  players={session.player_count}"
    )
    if session.message:
        lines.append(session.message)
    if session.can_start:
        lines.append("Type 'start' to begin.")
    return "\n".join(lines)


def _print_state(session: PeerSession) -> None:
    print(render_text(session), flush=True)


def handle_command(session: PeerSession, line: str) -> bool:
    """Выполнить одну команду. Возвращает False для quit."""
    parts = line.split()
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]
    try:
        if cmd == "quit":
            return False
        if cmd == "start":
            if not session.roles.is_player:
                session.message = "Spectators cannot start."
            elif not session.start():
                session.message = "Cannot start now."
        elif cmd == "select" and len(args) == 1:
            if not session.select(int(args[0])):
                session.message = "Cannot select that tile."
        elif cmd == "place" and len(args) == 1:
            session.place(int(args[0]))
        elif cmd == "place" and len(args) == 2:
            row, col = int(args[0]), int(args[1])
            if not 0 <= col < session.state.cols:
                session.message = "Cell out of range."
            else:
                session.place(row * session.state.cols + col)
        elif cmd != "show":
            session.message = "Unknown command."
    except ValueError:
        session.message = "Expected a number."
    return True


def _stdin_lines(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue) -> None:
    for line in sys.stdin:
        loop.call_soon_threadsafe(lines.put_nowait, line)
    loop.call_soon_threadsafe(lines.put_nowait, "")


async def _read_commands(session: PeerSession, stop: asyncio.Event) -> None:
    lines: asyncio.Queue = asyncio.Queue()
    # daemon-поток: блокирующий stdin не держит выход из asyncio.run
    threading.Thread(
        target=_stdin_lines, args=(asyncio.get_running_loop(), lines), daemon=True
    ).start()
    while not stop.is_set():
        line = await lines.get()
        if not line or not handle_command(session, line):
            stop.set()
            return
        _print_state(session)


async def _receive(session: PeerSession, ws, stop: asyncio.Event) -> None:
    try:
        async for raw in ws:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8", errors="replace")
            if session.handle_raw(raw):
                _print_state(session)
    except ConnectionClosed as e:
        logger.info("relay connection closed: %s", e)
    finally:
        session.connection_closed()
        stop.set()


async def run_peer(url: str, tick_interval: float) -> None:
    config = get_config()
    geometry = {
        "cols": config.board_cols,
        "rows": config.board_rows,
        "turn_seconds": config.turn_seconds,
    }
    outbox: asyncio.Queue[str] = asyncio.Queue()
    session = PeerSession(send=outbox.put_nowait, geometry=geometry)
    session.assets_ready()
    stop = asyncio.Event()

    async with websockets.connect(url) as ws:
        logger.info("connected to %s as %s", url, session.player_id)
        session.connection_opened()

        async def pump() -> None:
            while True:
                text = await outbox.get()
                try:
                    await ws.send(text)
                except ConnectionClosed:
                    logger.warning("send dropped: connection closed")

        tasks = [
            asyncio.create_task(_receive(session, ws, stop)),
            asyncio.create_task(run_clock(session, tick_interval, stop, on_tick=_print_state)),
            asyncio.create_task(_read_commands(session, stop)),
            asyncio.create_task(pump()),
        ]
        _print_state(session)
        await stop.wait()
        session.connection_closed()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def main(argv: list[str] | None = None) -> None:
    config = get_config()
    parser = argparse.ArgumentParser(description="Tile relay terminal client")
    parser.add_argument("--url", default=config.relay_url)
    parser.add_argument("--tick", type=float, default=config.tick_interval)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        asyncio.run(run_peer(args.url, args.tick))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

import asyncio

from conftest import SMALL_GEOMETRY
from tilegame.clock import run_clock
from tilegame.session import PeerSession


def _started_session():
    s = PeerSession(geometry=SMALL_GEOMETRY)
    s.on_player_count(1)
    s.on_player_count(2)
    s.start()
    return s


def test_run_clock_ticks_until_stopped():
    s = _started_session()

    async def scenario():
        stop = asyncio.Event()
        task = asyncio.create_task(run_clock(s, 0.01, stop))
        await asyncio.sleep(0.1)
        stop.set()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(scenario())
    assert s.state.left_time < SMALL_GEOMETRY["turn_seconds"]
    assert s.state.right_time == SMALL_GEOMETRY["turn_seconds"]


def test_run_clock_does_nothing_while_waiting():
    s = PeerSession(geometry=SMALL_GEOMETRY)

    async def scenario():
        stop = asyncio.Event()
        task = asyncio.create_task(run_clock(s, 0.01, stop))
        await asyncio.sleep(0.05)
        stop.set()
        await task

    asyncio.run(scenario())
    assert s.state.left_time == SMALL_GEOMETRY["turn_seconds"]


def test_run_clock_reports_each_tick():
    s = _started_session()
    seen = []

    async def scenario():
        stop = asyncio.Event()
        task = asyncio.create_task(run_clock(s, 0.01, stop, on_tick=lambda sess: seen.append(sess.state.left_time)))
        await asyncio.sleep(0.1)
        stop.set()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(scenario())
    assert seen
    assert seen == sorted(seen, reverse=True)
    assert seen[-1] == s.state.left_time


def test_run_clock_silent_while_waiting():
    s = PeerSession(geometry=SMALL_GEOMETRY)
    seen = []

    async def scenario():
        stop = asyncio.Event()
        task = asyncio.create_task(run_clock(s, 0.01, stop, on_tick=seen.append))
        await asyncio.sleep(0.05)
        stop.set()
        await task

    asyncio.run(scenario())
    assert seen == []

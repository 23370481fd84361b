"""Таймер клиента: раз в interval секунд тикает часы активной стороны."""
import asyncio
import logging
from typing import Callable

from .match import ACTIVE
from .session import PeerSession

logger = logging.getLogger(__name__)


async def run_clock(
    session: PeerSession,
    interval: float,
    stop: asyncio.Event | None = None,
    on_tick: Callable[[PeerSession], None] | None = None,
) -> None:
    stop = stop or asyncio.Event()
    while not stop.is_set():
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval)
        except asyncio.TimeoutError:
            if session.state.phase != ACTIVE:
                continue
            session.tick()
            if on_tick:
                on_tick(session)
    logger.debug("clock stopped for %s", session.player_id)

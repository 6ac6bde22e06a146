"""Periodic refresh with a re-entrancy guard.

The host decides what a tick does (usually redraw a status line from
``SkillEngine.refresh``); the ticker only re-arms it on a fixed interval
and skips ticks while a previous one is still running.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Any]


class RefreshTicker:
    """Runs a callback every ``interval`` seconds, never concurrently."""

    def __init__(self, callback: TickCallback, interval: float = 60.0) -> None:
        if interval <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval}")
        self.callback = callback
        self.interval = interval
        self.ticks = 0
        self.skipped = 0
        self._running = False
        self._task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> bool:
        return self._running

    @property
    def started(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> bool:
        """Run one refresh. Returns False when skipped or failed."""
        if self._running:
            self.skipped += 1
            logger.debug("Refresh skipped; previous tick still running")
            return False

        self._running = True
        try:
            result = self.callback()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Refresh callback failed")
            return False
        finally:
            self._running = False
        self.ticks += 1
        return True

    async def _loop(self) -> None:
        while True:
            pending = asyncio.ensure_future(self.tick())
            self._pending.add(pending)
            pending.add_done_callback(self._pending.discard)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.started:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info("Refresh ticker started (interval=%ss)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()
        logger.info("Refresh ticker stopped after %d tick(s)", self.ticks)

"""Flush scheduler -- asyncio loop that periodically drains the delivery queue.

Every `interval` seconds it calls the flush callable. The loop runs on the
same event loop as registration, and registration never awaits, so a
flush can never interleave with a register_event() call.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class FlushScheduler:
    """Cancellable periodic task around a flush callable.

    Usage:
        scheduler = FlushScheduler(queue.flush, interval=10)
        await scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(self, flush: Callable[[], Any], interval: float = 10.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._flush = flush
        self._interval = interval
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the flush loop. A no-op if already running."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("Flush scheduler started (every %.3gs)", self._interval)

    async def stop(self) -> None:
        """Stop the flush loop and wait for it to exit."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Flush scheduler stopped")

    async def _loop(self) -> None:
        """Main flush loop."""
        while self._running:
            await asyncio.sleep(self._interval)
            try:
                self._flush()
            except Exception:
                logger.exception("Error in flush loop")

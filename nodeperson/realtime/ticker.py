# -*- coding: utf-8 -*-
"""Periodic driver for the breathing engine."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from ..breathing.engine import BreathingSessionEngine

logger = logging.getLogger(__name__)


class SessionTicker:
    """Calls ``engine.advance`` every ``interval`` seconds with the measured elapsed time."""

    def __init__(
        self,
        engine: BreathingSessionEngine,
        interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.engine = engine
        self.interval = interval or engine.tick_interval
        self._clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Session ticker started (interval=%.3fs)", self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        last = self._clock()
        try:
            while True:
                await asyncio.sleep(self.interval)
                now = self._clock()
                try:
                    self.engine.advance(now - last)
                except Exception as exc:
                    logger.error("Session ticker error: %s", exc)
                last = now
        except asyncio.CancelledError:
            logger.info("Session ticker cancelled")
            raise

from __future__ import annotations

import asyncio
import logging
import math
import typing as tp
from enum import Enum

log = logging.getLogger(__name__)

FINE_PERIOD = 0.01      # one tick
REFRESH_PERIOD = 0.1

class ClockState(Enum):
    Stopped = 'stopped'
    Running = 'running'

class ClockEngine:
    '''
    Two periodic sources on the running asyncio loop:
    - fine: every `fine_period`, first firing one period after `start()`,
      counts 1, 2, 3, ... into `ticks`.
    - refresh: every `refresh_period`, calls `onRefresh`, which is
      expected to sample `ticks`.
    '''

    def __init__(
        self,
        onRefresh: tp.Callable[[], None],
        fine_period: float = FINE_PERIOD,
        refresh_period: float = REFRESH_PERIOD,
    ) -> None:
        self.onRefresh = onRefresh
        self.fine_period = fine_period
        self.refresh_period = refresh_period

        self.ticks = 0
        self.fineTask: asyncio.Task | None = None
        self.refreshTask: asyncio.Task | None = None

    @property
    def state(self) -> ClockState:
        if self.fineTask is None:
            return ClockState.Stopped
        return ClockState.Running

    def start(self) -> None:
        self.stop()
        self.fineTask = asyncio.create_task(self.fine())
        self.refreshTask = asyncio.create_task(self.refresh())
        log.debug('clock started')

    def stop(self) -> None:
        if self.fineTask is None:
            return
        assert self.refreshTask is not None
        self.fineTask.cancel()
        self.refreshTask.cancel()
        self.fineTask = None
        self.refreshTask = None
        self.ticks = 0
        log.debug('clock stopped')

    async def fine(self) -> None:
        loop = asyncio.get_running_loop()
        origin = loop.time()
        n = 0
        try:
            while True:
                n += 1
                await asyncio.sleep(max(
                    0.0, origin + n * self.fine_period - loop.time(),
                ))
                # a late wake-up jumps to the count the wall clock implies
                n = max(n, math.floor(
                    (loop.time() - origin) / self.fine_period,
                ))
                self.ticks = n
        except asyncio.CancelledError:
            return

    async def refresh(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.refresh_period)
                self.onRefresh()
        except asyncio.CancelledError:
            return

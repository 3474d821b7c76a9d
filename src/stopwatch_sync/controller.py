from __future__ import annotations

import logging
import typing as tp
from datetime import datetime, timezone

from .shared import Corrupt, DisplayTime, InvalidIndex
from .time_format import formatTime
from .elapsed import elapsedFromTicks, catchUp
from .persistent import PersistentState, StateStore
from .store_interface import Unsubscribe
from .clock_engine import ClockEngine, ClockState

log = logging.getLogger(__name__)

def utcNow() -> datetime:
    return datetime.now(timezone.utc)

class StopwatchController:
    '''
    One stopwatch instance. Several instances may share `store`;
    whichever writes last wins, and every other instance pauses its
    clock and re-derives itself from the store when notified.

    Must be driven from inside a running asyncio loop.
    '''

    def __init__(
        self,
        store: StateStore,
        onDisplay: tp.Callable[[DisplayTime], None] | None = None,
        now: tp.Callable[[], datetime] = utcNow,
        engine: ClockEngine | None = None,
    ) -> None:
        self.store = store
        self.onDisplay = onDisplay
        self.now = now
        self.engine = engine or ClockEngine(self.refreshDisplay)

        self.state = PersistentState.Default()
        self.display = formatTime(0)
        self.unsubscribe: Unsubscribe | None = None

    @property
    def running(self) -> bool:
        return self.engine.state is ClockState.Running

    def initialize(self) -> None:
        self.adoptStored()
        if self.unsubscribe is None:
            self.unsubscribe = self.store.onChange(self.onExternalChange)
        log.info('initialized: %s', self.state)

    def adoptStored(self) -> None:
        try:
            stored = self.store.load()
        except Corrupt as e:
            log.warning('Discarding corrupt stored state: %s', e)
            stored = None
        if stored is None:
            log.info('No stored state; writing the default one')
            self.state = PersistentState.Default()
            self.store.save(self.state)
        else:
            self.state = stored
        if self.state.running:
            if self.state.start_instant is not None:
                self.state = catchUp(self.state, self.now())
            self.engine.start()
        elif self.state.accumulated_elapsed == 0:
            self.reset()
        else:
            self.engine.stop()
        self.refreshDisplay()

    def refreshDisplay(self) -> None:
        self.display = formatTime(elapsedFromTicks(
            self.state.accumulated_elapsed, self.engine.ticks,
        ))
        if self.onDisplay is not None:
            self.onDisplay(self.display)

    def togglePlay(self) -> None:
        if not self.state.running:
            self.state = self.state.started(self.now())
            self.store.save(self.state)
            self.engine.start()
            log.debug('started at %s', self.state.start_instant)
        else:
            self.refreshDisplay()
            self.state = self.state.paused(self.display.elapsed)
            self.store.save(self.state)
            self.engine.stop()
            log.debug('paused at %d ticks', self.display.elapsed)
        self.refreshDisplay()

    def onExternalChange(self) -> None:
        log.debug('store changed elsewhere; re-deriving')
        self.engine.stop()
        self.adoptStored()

    def reset(self) -> None:
        self.engine.stop()
        self.state = PersistentState.Reset()
        self.store.save(self.state)
        self.refreshDisplay()
        log.info('reset')

    def addLap(self) -> None:
        self.refreshDisplay()
        lap = self.display
        if lap.elapsed == 0:
            log.debug('refusing a lap at zero')
            return
        self.state = self.state.withLap(lap)
        self.store.save(self.state)
        log.debug('lap %s', lap.render())

    def removeLap(self, index: int) -> None:
        try:
            self.state = self.state.withoutLap(index)
        except InvalidIndex as e:
            log.debug('%s; ignored', e)
            return
        self.store.save(self.state)

    def teardown(self) -> None:
        self.store.save(self.state)
        self.engine.stop()
        if self.unsubscribe is not None:
            self.unsubscribe()
            self.unsubscribe = None
        log.info('torn down')

from __future__ import annotations

from datetime import datetime
import typing as tp

from .shared import TICK

if tp.TYPE_CHECKING:
    from .persistent import PersistentState

def elapsedFromTicks(accumulated: int | None, ticks: int) -> int:
    '''
    Tick-accumulation mode: banked ticks plus what the running
    fine source has counted since it was (re)started.
    '''
    return (accumulated or 0) + ticks

def lostTicks(start: datetime, now: datetime) -> int:
    # floor division discards the sub-tick remainder
    return max(0, (now - start) // TICK)

def catchUp(state: PersistentState, now: datetime) -> PersistentState:
    '''
    Wall-clock catch-up mode, applied once when a running record is
    (re)loaded.
    The start instant moves forward by exactly the banked ticks, so
    persisting the result again does not count the same time twice.
    '''
    if state.start_instant is None:
        return state
    lost = lostTicks(state.start_instant, now)
    return state.model_copy(update=dict(
        accumulated_elapsed=elapsedFromTicks(state.accumulated_elapsed, lost),
        start_instant=state.start_instant + lost * TICK,
    ))

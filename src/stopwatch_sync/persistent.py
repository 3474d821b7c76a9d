from __future__ import annotations

import json
import logging
import typing as tp
from datetime import datetime, timezone

from pydantic import (
    BaseModel, ConfigDict, Field, ValidationError, field_validator,
)

from .shared import Corrupt, InvalidIndex, LapRecord
from .store_interface import KeyValueStore, Unsubscribe

log = logging.getLogger(__name__)

DEFAULT_KEY = 'state'

def asUTC(when: datetime | None) -> datetime | None:
    if when is not None and when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when

class PersistentState(BaseModel):
    running: bool = Field(default=False, alias='timerOn')
    start_instant: datetime | None = Field(default=None, alias='startTime')
    accumulated_elapsed: int | None = Field(
        default=None, ge=0, alias='elapsedTime',
    )
    laps: list[LapRecord] = Field(default_factory=list, alias='lapTimes')

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    @field_validator('start_instant')
    @classmethod
    def assumeUTC(cls, v: datetime | None) -> datetime | None:
        return asUTC(v)

    @classmethod
    def Default(cls) -> PersistentState:
        return PersistentState()

    @classmethod
    def Reset(cls) -> PersistentState:
        return PersistentState(
            running=False,
            start_instant=None,
            accumulated_elapsed=0,
            laps=[],
        )

    def started(self, now: datetime) -> PersistentState:
        # model_copy skips validators, so apply the UTC rule here too
        return self.model_copy(update=dict(
            running=True, start_instant=asUTC(now),
        ))

    def paused(self, elapsed: int) -> PersistentState:
        return self.model_copy(update=dict(
            running=False,
            start_instant=None,
            accumulated_elapsed=elapsed,
        ))

    def withLap(self, lap: LapRecord) -> PersistentState:
        return self.model_copy(update=dict(laps=[lap, *self.laps]))

    def withoutLap(self, index: int) -> PersistentState:
        if not 0 <= index < len(self.laps):
            raise InvalidIndex(f'No lap at index {index} (have {len(self.laps)})')
        return self.model_copy(update=dict(
            laps=[*self.laps[:index], *self.laps[index + 1:]],
        ))

    def serialize(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def deserialize(cls, payload: str) -> PersistentState:
        try:
            return cls.model_validate_json(payload)
        except ValidationError as e:
            raise Corrupt(f'Stored state is not a valid record: {e}') from e

class StateStore:
    '''
    Reads and writes one `PersistentState` under `key` of a shared
    key-value store.
    '''

    def __init__(self, kv: KeyValueStore, /, key: str = DEFAULT_KEY) -> None:
        self.kv = kv
        self.key = key

    def load(self) -> PersistentState | None:
        '''
        Returns `None` when nothing is stored. Raises `Corrupt`.
        '''
        payload = self.kv.getItem(self.key)
        if payload is None:
            return None
        # `null` is what a browser writes for a cleared state
        try:
            if json.loads(payload) is None:
                return None
        except json.JSONDecodeError as e:
            raise Corrupt(f'Stored state is not JSON: {e}') from e
        return PersistentState.deserialize(payload)

    def save(self, state: PersistentState) -> None:
        self.kv.setItem(self.key, state.serialize())
        log.debug('saved %s', state)

    def onChange(self, callback: tp.Callable[[], None]) -> Unsubscribe:
        return self.kv.subscribe(callback)

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field
from textual.widget import Widget

TICK = timedelta(milliseconds=10)
TICKS_PER_SECOND = 100
TICKS_PER_MINUTE = 60 * TICKS_PER_SECOND

class Corrupt(ValueError):
    '''
    The stored payload is not a valid serialized state record.
    Recoverable: callers treat it as absent.
    '''

class InvalidIndex(IndexError):
    pass

class DisplayTime(BaseModel):
    elapsed: int
    minutes: str
    seconds: str
    hundredths: str = Field(alias='millis')

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    def render(self) -> str:
        return f'{self.minutes}:{self.seconds}.{self.hundredths}'

# A lap is a snapshot of what was on display.
LapRecord = DisplayTime

def titled(
    w: Widget, /, title: str, skip_bottom: bool = True,
    style = ('round', '#999'), padding = (0, 1),
):
    w.styles.border = style
    if skip_bottom:
        w.styles.border_bottom = None
    w.border_title = title
    w.styles.padding = padding
    return w

from .UI import UI as StopwatchUI
from .controller import StopwatchController
from .clock_engine import ClockEngine, ClockState
from .persistent import PersistentState, StateStore
from .store_memory import MemoryStore
from .store_file import FileStore
from .time_format import formatTime

__all__ = [
    "StopwatchUI", "StopwatchController", "ClockEngine", "ClockState",
    "PersistentState", "StateStore", "MemoryStore", "FileStore", "formatTime",
]

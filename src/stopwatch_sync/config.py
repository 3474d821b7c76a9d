from __future__ import annotations

import os
from pathlib import Path

import dotenv
from pydantic import BaseModel, ConfigDict, Field

from .persistent import DEFAULT_KEY

class Config(BaseModel):
    store_path: Path = Field(
        default_factory=lambda: Path.home() / '.stopwatch_sync' / 'store.json',
    )
    store_key: str = DEFAULT_KEY
    poll_interval: float = Field(default=0.25, gt=0)    # seconds
    log_level: str = 'WARNING'
    log_file: Path | None = None

    model_config = ConfigDict(
        frozen=True,
    )

def loadConfig() -> Config:
    '''
    Reads `STOPWATCH_*` variables, after loading a `.env` file if present.
    Unset variables keep their defaults.
    '''
    dotenv.load_dotenv()

    env = {
        'store_path':    os.getenv('STOPWATCH_STORE_PATH'),
        'store_key':     os.getenv('STOPWATCH_STORE_KEY'),
        'poll_interval': os.getenv('STOPWATCH_POLL_INTERVAL'),
        'log_level':     os.getenv('STOPWATCH_LOG_LEVEL'),
        'log_file':      os.getenv('STOPWATCH_LOG_FILE'),
    }
    return Config.model_validate({k: v for k, v in env.items() if v})

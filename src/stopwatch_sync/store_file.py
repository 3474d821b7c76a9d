from __future__ import annotations

import json
import logging
import os
import tempfile
import typing as tp
from pathlib import Path

import tenacity

from .store_interface import KeyValueStore, Unsubscribe

log = logging.getLogger(__name__)

# On Windows, `os.replace` fails while another process has the file open.
retryReplace = tenacity.retry(
    retry=tenacity.retry_if_exception_type(PermissionError),
    wait=tenacity.wait_random_exponential(multiplier=0.01, max=0.5),
    stop=tenacity.stop_after_attempt(5),
    before_sleep=tenacity.before_sleep_log(log, logging.WARNING),
    reraise=True,
)

Signature = tuple[int, int, int] | None

def signatureOf(s: os.stat_result) -> Signature:
    # each replace lands a fresh inode, even within one mtime tick
    return (s.st_ino, s.st_mtime_ns, s.st_size)

class FileStore(KeyValueStore):
    '''
    A key-value store kept as one JSON object file, shared by every
    process that opens the same path.

    Other processes' writes are discovered by `poll()`, which the host
    calls periodically. Writes made through this handle are remembered,
    so they never come back as notifications.
    '''

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self.callbacks: list[tp.Callable[[], None]] = []
        self.signature: Signature = self.stat()
        self.seen: dict[str, str] = self.readAll()

    def stat(self) -> Signature:
        try:
            s = self.path.stat()
        except FileNotFoundError:
            return None
        return signatureOf(s)

    def readAll(self) -> dict[str, str]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = f.read()
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            # Not ours to repair; the state layer reports it per key.
            log.warning('Store file %s is not valid JSON', self.path)
            return {}
        if not isinstance(data, dict):
            log.warning('Store file %s does not hold a JSON object', self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def getItem(self, key: str) -> str | None:
        return self.readAll().get(key)

    def setItem(self, key: str, value: str) -> None:
        data = self.readAll()
        if data.get(key) == value:
            return
        data[key] = value
        self.signature = self.writeAll(data)
        self.seen = data

    def writeAll(self, data: dict[str, str]) -> Signature:
        '''
        Returns the signature of what this handle wrote. It is taken from
        the temp file, so a foreign write landing right after the replace
        still differs from it.
        '''
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent, prefix=self.path.name, suffix='.tmp',
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
                f.flush()
                signature = signatureOf(os.fstat(f.fileno()))
            retryReplace(os.replace)(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        return signature

    def subscribe(self, callback: tp.Callable[[], None]) -> Unsubscribe:
        self.callbacks.append(callback)
        def unsubscribe() -> None:
            if callback in self.callbacks:
                self.callbacks.remove(callback)
        return unsubscribe

    def poll(self) -> bool:
        '''
        Notify subscribers if another writer changed the file since we
        last looked. Returns whether a notification went out.
        '''
        signature = self.stat()
        if signature == self.signature:
            return False
        self.signature = signature
        data = self.readAll()
        if data == self.seen:
            return False
        self.seen = data
        log.debug('%s changed on disk', self.path)
        for callback in list(self.callbacks):
            callback()
        return True

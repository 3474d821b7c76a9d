from __future__ import annotations

import asyncio
import logging
import typing as tp

from .store_interface import KeyValueStore, Unsubscribe

log = logging.getLogger(__name__)

class MemoryStore:
    '''
    One in-process key-value space seen through any number of
    `Observer` handles, each standing in for one instance (tab).
    '''

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.observers: list[MemoryStore.Observer] = []

    def observer(self) -> MemoryStore.Observer:
        o = MemoryStore.Observer(self)
        self.observers.append(o)
        return o

    def broadcast(self, writer: MemoryStore.Observer) -> None:
        for o in self.observers:
            if o is writer:
                continue
            for callback in list(o.callbacks):
                deliver(callback)

    class Observer(KeyValueStore):
        def __init__(self, space: MemoryStore) -> None:
            self.space = space
            self.callbacks: list[tp.Callable[[], None]] = []

        def getItem(self, key: str) -> str | None:
            return self.space.data.get(key)

        def setItem(self, key: str, value: str) -> None:
            if self.space.data.get(key) == value:
                return
            self.space.data[key] = value
            self.space.broadcast(self)

        def subscribe(self, callback: tp.Callable[[], None]) -> Unsubscribe:
            self.callbacks.append(callback)
            def unsubscribe() -> None:
                if callback in self.callbacks:
                    self.callbacks.remove(callback)
            return unsubscribe

        def close(self) -> None:
            '''Detach from the space. Safe to call twice.'''
            self.callbacks.clear()
            if self in self.space.observers:
                self.space.observers.remove(self)

def deliver(callback: tp.Callable[[], None]) -> None:
    '''
    Queue onto the running loop so a notification never runs in the
    middle of the writer's callback.
    '''
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        callback()
        return
    loop.call_soon(callback)

import typing as tp
from abc import ABC, abstractmethod

Unsubscribe = tp.Callable[[], None]

class KeyValueStore(ABC):
    '''
    A string key-value store shared by several observers.
    A write notifies every *other* observer; the writer is never told
    about its own writes, and re-writing an identical value notifies no one.
    Notifications carry no payload: consumers re-read the store.
    '''

    @abstractmethod
    def getItem(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def setItem(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, callback: tp.Callable[[], None]) -> Unsubscribe:
        raise NotImplementedError

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Generic, Hashable, Iterator, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)


class KeyedLock(Generic[K]):
    """Per-key mutual exclusion.

    - Callers holding different keys never block each other.
    - A key's lock is dropped from the registry once no caller holds or waits on it.
    """

    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._locks: Dict[K, Tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, key: K) -> Iterator[None]:
        with self._mutex:
            lock, users = self._locks.get(key, (threading.Lock(), 0))
            self._locks[key] = (lock, users + 1)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._mutex:
                lock, users = self._locks[key]
                if users <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        with self._mutex:
            return len(self._locks)

# core/locks.py
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class KeyedLocks:
    """
    One lock per key, alive only while someone holds or waits for it.

    Used to serialize payment dispatch per invoice and wallet activation per
    project inside a single process.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: Dict[str, List] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _acquire_entry(self, key: str) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
            return entry[0]

    def _release_entry(self, key: str) -> None:
        with self._guard:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)


payment_locks = KeyedLocks()
wallet_locks = KeyedLocks()

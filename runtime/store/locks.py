"""Lazily created per-key locks."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class KeyedLocks:
    """One ``threading.Lock`` per key, created on first use.

    The registry lock is only held while looking up / inserting the
    per-key lock, so work on different keys never contends.
    """

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._lock_for(key):
            yield

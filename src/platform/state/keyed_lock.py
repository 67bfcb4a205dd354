"""
Keyed Lock

In-process critical sections keyed by an arbitrary hashable value
(ticket type id, ticket id, (owner, event) pair, ...). Operations on
different keys never wait on each other; operations on the same key are
serialized.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable

import anyio

from src.platform.logging.loguru_io import Logger


class KeyedLock:
    def __init__(self, *, name: str = 'lock') -> None:
        self.name = name
        self._locks: Dict[Hashable, anyio.Lock] = {}
        self._waiters: Dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """
        Hold the lock for ``key`` for the duration of the ``async with`` block.

        Locks are created on first use and dropped once nobody holds or waits
        on them, so the table does not grow with every ticket ever touched.
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = anyio.Lock()
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                Logger.base.debug(f'🔒 [LOCK] {self.name} acquired: {key}')
                yield
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]
                Logger.base.debug(f'🔓 [LOCK] {self.name} released: {key}')

    def is_held(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

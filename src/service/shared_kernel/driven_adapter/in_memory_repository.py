"""
In-memory Repository Implementation

Dict-backed adapter for IRepository used by the single-process deployment
and by tests. A durable adapter only has to honour the same four calls.
"""

from typing import Callable, Dict, Iterable, List, Optional

import anyio

from src.service.shared_kernel.app.interface.i_repository import K, V, IRepository


class InMemoryRepository(IRepository[K, V]):
    def __init__(self, *, key_of: Callable[[V], K], initial: Iterable[V] = ()) -> None:
        self._key_of = key_of
        self._records: Dict[K, V] = {key_of(value): value for value in initial}

    async def get(self, key: K) -> Optional[V]:
        # Yield to the loop like real I/O would, so unlocked read-then-write
        # sequences interleave in tests exactly as they would against a database
        await anyio.sleep(0)
        return self._records.get(key)

    async def list(self, *, where: Optional[Callable[[V], bool]] = None) -> List[V]:
        await anyio.sleep(0)
        if where is None:
            return list(self._records.values())
        return [value for value in self._records.values() if where(value)]

    async def upsert(self, value: V) -> V:
        await anyio.sleep(0)
        self._records[self._key_of(value)] = value
        return value

    async def delete(self, key: K) -> bool:
        await anyio.sleep(0)
        return self._records.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._records)

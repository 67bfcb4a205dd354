"""
Repository Interface

Key/value persistence port shared by every bounded context. Adapters only
store and fetch; all invariant checks stay in the services that call them.
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, Hashable, List, Optional, TypeVar


K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


class IRepository(ABC, Generic[K, V]):
    @abstractmethod
    async def get(self, key: K) -> Optional[V]:
        """Return the record stored under ``key`` or None"""
        pass

    @abstractmethod
    async def list(self, *, where: Optional[Callable[[V], bool]] = None) -> List[V]:
        """Return every record (matching ``where`` when given), in insertion order"""
        pass

    @abstractmethod
    async def upsert(self, value: V) -> V:
        """Insert or replace the record, keyed by the adapter's key function"""
        pass

    @abstractmethod
    async def delete(self, key: K) -> bool:
        """Remove the record; True if something was removed"""
        pass

from abc import ABC, abstractmethod

from src.service.shared_kernel.domain.entity.event_entity import Event


class IEventCatalog(ABC):
    """Read-only lookup of event metadata, the source of truth for event facts"""

    @abstractmethod
    async def get_event(self, event_id: str) -> Event:
        """
        Args:
            event_id: Catalog identifier

        Returns:
            The event

        Raises:
            EventNotFoundError: If no event has this identifier
        """
        pass

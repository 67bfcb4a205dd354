from abc import abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.shared_kernel.app.interface.i_repository import IRepository
from src.service.ticketing.domain.entity.ticket_entity import Ticket


class ITicketRepo(IRepository[UUID, Ticket]):
    """
    Issued-ticket store.

    Tickets are never deleted once issued; ``delete`` exists only so a
    purchase that fails half-way can roll its own writes back.
    """

    @abstractmethod
    async def list_by_event(self, *, event_id: str) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_owner(self, *, owner_id: str) -> List[Ticket]:
        pass

    @abstractmethod
    async def find_by_credential_fields(
        self, *, event_id: str, owner_id: str, sequence_index: int
    ) -> Optional[Ticket]:
        """
        Args:
            event_id: Event the credential names
            owner_id: Owner the credential names
            sequence_index: Position of the ticket among the owner's tickets for the event

        Returns:
            The matching ticket or None
        """
        pass

    @abstractmethod
    async def find_by_ticket_number(self, *, ticket_number: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def count_for_owner_and_event(self, *, owner_id: str, event_id: str) -> int:
        """Every ticket ever issued to the owner for the event, canceled ones included"""
        pass

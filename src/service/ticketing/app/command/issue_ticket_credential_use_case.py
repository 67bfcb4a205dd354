from typing import Self

from dependency_injector.wiring import Provide, inject
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.service.ticket_ledger_service import TicketLedger
from src.service.ticketing.domain.credential_issuer import CredentialIssuer
from src.service.ticketing.domain.value_object.issued_credential import IssuedCredential


class IssueTicketCredentialUseCase:
    def __init__(self, *, ticket_ledger: TicketLedger, credential_issuer: CredentialIssuer) -> None:
        self.ticket_ledger = ticket_ledger
        self.credential_issuer = credential_issuer

    @classmethod
    @inject
    def depends(
        cls,
        ticket_ledger: TicketLedger = Provide[Container.ticket_ledger],
        credential_issuer: CredentialIssuer = Provide[Container.credential_issuer],
    ) -> Self:
        return cls(ticket_ledger=ticket_ledger, credential_issuer=credential_issuer)

    @Logger.io
    async def issue_for_ticket(self, *, ticket_id: UUID) -> IssuedCredential:
        """
        Credential of a confirmed ticket, derived and stored on first request.

        Later requests return the stored value, which equals a fresh
        derivation because the derivation is deterministic.

        Raises:
            TicketNotFoundError: Unknown ticket
            AlreadyUsedError: Ticket was already checked in
            TicketCanceledError: Ticket was canceled
        """
        ticket = await self.ticket_ledger.get_ticket(ticket_id=ticket_id)
        ticket.ensure_confirmed_for_check_in()
        if ticket.credential is None:
            ticket = await self.ticket_ledger.attach_credential(
                ticket_id=ticket.id, credential=self.credential_issuer.issue(ticket)
            )
        return IssuedCredential(
            ticket_id=ticket.id,
            credential=ticket.credential,
            scannable_uri=self.credential_issuer.render_as_scannable(ticket.credential),
        )

from src.service.ticketing.domain.value_object.credential_payload import CredentialPayload
from src.service.ticketing.domain.value_object.issued_credential import IssuedCredential
from src.service.ticketing.domain.value_object.purchase_result import PurchaseResult
from src.service.ticketing.domain.value_object.ticket_stats import (
    EventTicketStats,
    TicketTypeStats,
)

__all__ = [
    'CredentialPayload',
    'EventTicketStats',
    'IssuedCredential',
    'PurchaseResult',
    'TicketTypeStats',
]

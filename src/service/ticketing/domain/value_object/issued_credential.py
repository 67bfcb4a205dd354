import attrs
from uuid_utils import UUID


@attrs.frozen
class IssuedCredential:
    ticket_id: UUID
    credential: str
    scannable_uri: str

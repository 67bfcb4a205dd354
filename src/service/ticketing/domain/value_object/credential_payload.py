from datetime import datetime, timezone

import attrs


@attrs.frozen
class CredentialPayload:
    """Facts a ticket credential encodes; enough to find the ticket again"""

    event_id: str
    owner_id: str
    purchased_at_ms: int
    sequence_index: int

    @property
    def issuance_nonce(self) -> tuple[int, int]:
        return (self.purchased_at_ms, self.sequence_index)

    @staticmethod
    def to_epoch_ms(moment: datetime) -> int:
        return int(moment.astimezone(timezone.utc).timestamp() * 1000)

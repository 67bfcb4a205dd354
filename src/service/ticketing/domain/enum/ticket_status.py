from enum import StrEnum


class TicketStatus(StrEnum):
    """
    Ticket lifecycle.

    CONFIRMED -> USED (check-in), CONFIRMED -> CANCELED (cancellation).
    USED and CANCELED are terminal.
    """

    CONFIRMED = 'confirmed'
    USED = 'used'
    CANCELED = 'canceled'

    @property
    def is_terminal(self) -> bool:
        return self is not TicketStatus.CONFIRMED

from enum import StrEnum


class ErrorKind(StrEnum):
    """Stable, transport-neutral names for every failure the core reports"""

    EVENT_NOT_FOUND = 'event_not_found'
    UNKNOWN_TICKET_TYPE = 'unknown_ticket_type'
    INSUFFICIENT_INVENTORY = 'insufficient_inventory'
    INVALID_QUANTITY = 'invalid_quantity'
    PAYMENT_DECLINED = 'payment_declined'
    ALREADY_USED = 'already_used'
    TICKET_CANCELED = 'ticket_canceled'
    CANNOT_CANCEL_USED_TICKET = 'cannot_cancel_used_ticket'
    MALFORMED_CREDENTIAL = 'malformed_credential'
    CREDENTIAL_EVENT_MISMATCH = 'credential_event_mismatch'
    TICKET_NOT_FOUND = 'ticket_not_found'
    ALREADY_IN_CALENDAR = 'already_in_calendar'
    NOT_IN_CALENDAR = 'not_in_calendar'
    INVALID_REMINDER_OFFSET = 'invalid_reminder_offset'
    REMINDER_IN_PAST = 'reminder_in_past'
    REMINDER_NOT_FOUND = 'reminder_not_found'
    DUPLICATE_REMINDER = 'duplicate_reminder'
    MALFORMED_CALENDAR = 'malformed_calendar'

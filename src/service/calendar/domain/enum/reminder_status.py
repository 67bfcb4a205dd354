from enum import StrEnum


class ReminderStatus(StrEnum):
    PENDING = 'pending'
    SENT = 'sent'

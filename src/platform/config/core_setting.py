from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Ticket Issuance Core'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_TO_FILE: bool = False

    # Tracing
    TRACING_ENABLED: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None
    OTEL_CONSOLE_EXPORT: bool = False

    # Ticket inventory
    DEFAULT_TICKET_TYPE_NAME: str = 'Standard Admission'

    # Event catalog
    DEFAULT_EVENT_DURATION_MINUTES: int = 60

    # Ticket ledger
    TICKET_NUMBER_PREFIX: str = 'TKT'

    # Credentials
    CREDENTIAL_SCHEME_VERSION: str = 'TKT1'
    QR_RENDER_BASE_URL: str = 'https://api.qrserver.com/v1/create-qr-code/'
    QR_RENDER_SIZE: str = '300x300'

    # Calendar
    DEFAULT_REMINDER_OFFSETS_MINUTES: Annotated[List[int], NoDecode] = [1440, 120]
    CALENDAR_UID_DOMAIN: str = 'tickets.local'
    CALENDAR_PRODID: str = '-//Ticket Issuance Core//Calendar Export//EN'

    @field_validator('DEFAULT_REMINDER_OFFSETS_MINUTES', mode='before')
    @classmethod
    def assemble_reminder_offsets(cls, v: str | List[int]) -> List[int]:
        if isinstance(v, str):
            v = v.strip()
            if v.startswith('['):
                v = v.strip('[]')
            return [int(i.strip()) for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return [int(i) for i in v]
        return [1440, 120]

    @field_validator('DEFAULT_REMINDER_OFFSETS_MINUTES')
    @classmethod
    def reject_non_positive_offsets(cls, v: List[int]) -> List[int]:
        if any(offset <= 0 for offset in v):
            raise ValueError('Reminder offsets must be positive minutes')
        return v


settings = Settings()  # type: ignore

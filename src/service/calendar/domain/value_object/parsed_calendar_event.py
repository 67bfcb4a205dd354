from datetime import datetime
from typing import Optional

import attrs


@attrs.frozen
class ParsedCalendarEvent:
    uid: str
    start: datetime
    end: datetime
    summary: str
    location: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

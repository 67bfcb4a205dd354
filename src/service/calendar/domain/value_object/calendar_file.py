import attrs


@attrs.frozen
class CalendarFile:
    filename: str
    content: str
    media_type: str = 'text/calendar'

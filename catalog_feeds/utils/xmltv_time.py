"""
XMLTV date and time formatting

XMLTV timestamps look like '20080715003000 -0600'; the document date is
'YYYYMMDD'.
"""
from datetime import date, datetime, timezone


def _as_aware(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def format_xmltv_time(dt: datetime) -> str:
    """
    Format an instant as 'YYYYMMDDHHMMSS +ZZZZ' keeping its own offset

    Args:
        dt: Datetime to format; naive values are treated as UTC

    Returns:
        XMLTV timestamp string
    """
    dt = _as_aware(dt)
    # strftime does not zero-pad years below 1000 on every platform
    return f"{dt.year:04d}{dt:%m%d%H%M%S} {dt:%z}"


def format_xmltv_date(day: date) -> str:
    """Format a calendar date as 'YYYYMMDD'"""
    return f"{day.year:04d}{day:%m%d}"

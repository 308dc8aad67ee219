"""ISO 8601 timestamp helpers.

Timestamps are kept as strings in the records (``2024-01-15T10:30:00.000Z``)
so that persisted and exported pages round-trip without reformatting.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as UTC with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp back into an aware datetime.

    Raises:
        ValueError: If the string is not an ISO 8601 timestamp
    """
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def display_timestamp(value: str) -> str:
    """Human-readable form of a stored timestamp, or the raw value if unparseable."""
    try:
        return parse_timestamp(value).strftime('%Y-%m-%d %H:%M:%S UTC')
    except ValueError:
        return value

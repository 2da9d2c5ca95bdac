"""
Date normalization helpers shared by the cycle and calendar services.

Persisted records carry dates in several shapes: bare ``YYYY-MM-DD`` strings
for date columns, ISO timestamps for timestamp columns, and native
``date``/``datetime`` values once deserialized. Everything is reduced to a
local calendar ``date`` before comparison.
"""
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]

def to_local_date(value: datetime) -> date:
    """
    Truncate a datetime to its local calendar date.

    Aware datetimes are converted to the local timezone first, naive ones are
    taken as already local.
    """
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()

def parse_date_value(value: Optional[DateLike], local: bool = True) -> Optional[date]:
    """
    Parse a persisted date representation into a local calendar date.

    Args:
        value: Date, datetime, ``YYYY-MM-DD`` string or ISO timestamp string
        local: Convert aware timestamps to local time before truncating.
            When False the timestamp's own calendar date is kept, so the
            result does not depend on the server timezone.

    Returns:
        Calendar date, or None when no value is given

    Raises:
        ValueError: If a string value cannot be parsed

    Example:
        >>> parse_date_value("2024-03-05")
        datetime.date(2024, 3, 5)
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_local_date(value) if local else value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text or " " in text:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
            return to_local_date(parsed) if local else parsed.date()
        parts = text.split("-")
        if len(parts) > 3:
            raise ValueError(f"Invalid date value: {value}")
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 and parts[1] else 1
        day = int(parts[2]) if len(parts) > 2 and parts[2] else 1
        return date(year, month, day)
    raise ValueError(f"Unsupported date value: {value!r}")

def is_same_day(value: Optional[DateLike], compare: DateLike) -> bool:
    """
    Check whether a persisted date value falls on the given calendar day.

    Missing or unparsable values never match.
    """
    try:
        left = parse_date_value(value)
    except ValueError:
        return False
    if left is None:
        return False
    return left == parse_date_value(compare)

def to_timestamp_key(value: DateLike) -> str:
    """
    Exact-instant key for a date value, used to compare appointment times.

    Aware values at the same instant produce the same key regardless of
    their offset. Unparsable strings are keyed by their raw text.
    """
    if isinstance(value, datetime):
        return str(value.timestamp())
    if isinstance(value, date):
        return str(datetime(value.year, value.month, value.day).timestamp())
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return str(datetime.fromisoformat(text).timestamp())
    except ValueError:
        return value

"""
UTC-first datetime utilities.

- All timestamps are stored and compared as timezone-aware UTC datetimes
- Naive datetimes are assumed to already be UTC
- Calendar-day boundaries are resolved in an explicit timezone

Usage:
    from vitals_tracker.core.datetime_utils import to_utc, start_of_day

    midnight = start_of_day(date(2024, 1, 15), ZoneInfo("Europe/Lisbon"))
"""
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Union


# =============================================================================
# CORE UTILITIES
# =============================================================================

def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC

    Example:
        >>> from datetime import timedelta
        >>> ist = timezone(timedelta(hours=5, minutes=30))
        >>> to_utc(datetime(2024, 1, 15, 16, 0, tzinfo=ist)).hour
        10
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_zone(dt: datetime, tz: tzinfo) -> datetime:
    """Express ``dt`` in ``tz`` (naive input is treated as UTC)."""
    return to_utc(dt).astimezone(tz)


# =============================================================================
# CALENDAR DAY BOUNDARIES
# =============================================================================

def start_of_day(day: date, tz: tzinfo) -> datetime:
    """First instant of ``day`` in ``tz``."""
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    """
    Last representable instant of ``day`` in ``tz``, as UTC.

    Taken as one microsecond before the next local midnight, so a repeated
    late-evening hour on a DST fall-back day still belongs to ``day``.
    """
    return to_utc(start_of_day(day + timedelta(days=1), tz)) - timedelta(microseconds=1)


def calendar_day(value: Union[date, datetime], tz: tzinfo) -> date:
    """
    Calendar date of ``value`` as seen in ``tz``.

    Plain ``date`` objects are returned unchanged; naive datetimes are
    treated as UTC before conversion.
    """
    if isinstance(value, datetime):
        return to_zone(value, tz).date()
    return value


# =============================================================================
# PARSING
# =============================================================================

def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse a datetime value to UTC datetime.

    Accepts a datetime object or an ISO 8601 string (with or without
    timezone, 'Z' suffix allowed).

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return to_utc(datetime.fromisoformat(value))
    except ValueError:
        raise ValueError(f"Cannot parse datetime: '{value}'") from None


# =============================================================================
# FORMATTING
# =============================================================================

def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with UTC 'Z' suffix.

    Microseconds are kept so that stored timestamps round-trip exactly.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.000000Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def format_for_display(dt: datetime, tz: tzinfo, include_time: bool = True) -> str:
    """
    Format datetime for tables and reports, in the user's timezone.

    Example:
        >>> format_for_display(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc), timezone.utc)
        '15/01/2024 10:30'
    """
    local = to_zone(dt, tz)
    if include_time:
        return local.strftime("%d/%m/%Y %H:%M")
    return local.strftime("%d/%m/%Y")

"""
Date-range filtering for health records.

A DateFilter is resolved against "now" into an inclusive DateWindow, then
records whose timestamp falls inside the window are selected. Everything
here is pure: callers pass records and "now" in, nothing is read from
global state.

Calendar days are taken in now's timezone (naive "now" is UTC), so
"today" for a user in UTC-3 ends at 02:59:59.999999 UTC the next day.

Usage:
    from vitals_tracker.analytics.date_filters import DateFilter, apply_date_filter

    recent = apply_date_filter(records, DateFilter.last_7_days(), now)
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, List, Optional, Union

from vitals_tracker.core.datetime_utils import calendar_day, end_of_day, start_of_day, to_utc
from vitals_tracker.models.health_record import HealthRecord

logger = logging.getLogger(__name__)

LABEL_DATE_FORMAT = "%d/%m/%Y"


class DateFilterType(str, Enum):
    """Kinds of date filter a user can pick."""
    TODAY = "today"
    LAST_7_DAYS = "last7days"
    LAST_30_DAYS = "last30days"
    CUSTOM = "custom"


# Number of calendar days before today that a preset window reaches back.
_PRESET_LOOKBACK_DAYS = {
    DateFilterType.TODAY: 0,
    DateFilterType.LAST_7_DAYS: 6,
    DateFilterType.LAST_30_DAYS: 29,
}

_PRESET_LABELS = {
    DateFilterType.TODAY: "Today",
    DateFilterType.LAST_7_DAYS: "Last 7 days",
    DateFilterType.LAST_30_DAYS: "Last 30 days",
}

CUSTOM_RANGE_LABEL = "Custom range"


@dataclass(frozen=True)
class DateFilter:
    """
    Tagged date filter.

    Only CUSTOM uses start_date/end_date. start_date after end_date is
    allowed and resolves to a window that matches nothing.
    """
    type: DateFilterType
    start_date: Optional[Union[date, datetime]] = None
    end_date: Optional[Union[date, datetime]] = None

    @classmethod
    def today(cls) -> "DateFilter":
        return cls(DateFilterType.TODAY)

    @classmethod
    def last_7_days(cls) -> "DateFilter":
        return cls(DateFilterType.LAST_7_DAYS)

    @classmethod
    def last_30_days(cls) -> "DateFilter":
        return cls(DateFilterType.LAST_30_DAYS)

    @classmethod
    def custom(
        cls,
        start_date: Optional[Union[date, datetime]],
        end_date: Optional[Union[date, datetime]],
    ) -> "DateFilter":
        return cls(DateFilterType.CUSTOM, start_date=start_date, end_date=end_date)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [start, end] range of instants."""
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        """True if ``moment`` lies within the window, both ends included."""
        return self.start <= to_utc(moment) <= self.end

    def is_empty(self) -> bool:
        return self.start > self.end


def _zone_of(now: datetime):
    return now.tzinfo if now.tzinfo is not None else timezone.utc


def resolve_window(date_filter: DateFilter, now: datetime) -> Optional[DateWindow]:
    """
    Resolve ``date_filter`` to a UTC window relative to ``now``.

    Returns None when the filter does not restrict anything: a custom
    filter missing a bound, or an unrecognized filter type.
    """
    tz = _zone_of(now)
    today = calendar_day(now, tz)

    if date_filter.type in _PRESET_LOOKBACK_DAYS:
        first_day = today - timedelta(days=_PRESET_LOOKBACK_DAYS[date_filter.type])
        return DateWindow(
            start=to_utc(start_of_day(first_day, tz)),
            end=to_utc(end_of_day(today, tz)),
        )

    if date_filter.type == DateFilterType.CUSTOM:
        if date_filter.start_date is None or date_filter.end_date is None:
            return None
        return DateWindow(
            start=to_utc(start_of_day(calendar_day(date_filter.start_date, tz), tz)),
            end=to_utc(end_of_day(calendar_day(date_filter.end_date, tz), tz)),
        )

    logger.warning("Unrecognized date filter type, not filtering", extra={"filter_type": str(date_filter.type)})
    return None


def apply_date_filter(
    records: Iterable[HealthRecord],
    date_filter: DateFilter,
    now: datetime,
) -> List[HealthRecord]:
    """
    Select the records whose timestamp falls inside the filter's window.

    Input order is preserved. A filter that resolves to no window
    returns every record.
    """
    window = resolve_window(date_filter, now)
    if window is None:
        return list(records)
    return [record for record in records if window.contains(record.timestamp)]


def filter_label(date_filter: DateFilter) -> str:
    """Human-readable description of a filter ('' for unknown types)."""
    if date_filter.type in _PRESET_LABELS:
        return _PRESET_LABELS[date_filter.type]

    if date_filter.type == DateFilterType.CUSTOM:
        if date_filter.start_date is None or date_filter.end_date is None:
            return CUSTOM_RANGE_LABEL
        start = date_filter.start_date.strftime(LABEL_DATE_FORMAT)
        end = date_filter.end_date.strftime(LABEL_DATE_FORMAT)
        return f"{start} – {end}"

    return ""

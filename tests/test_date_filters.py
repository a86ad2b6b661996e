"""
Unit tests for date-range filtering.

Tests cover:
- Window boundaries for today / last 7 days / last 30 days / custom
- Timezone handling of calendar days
- Graceful fallbacks (missing custom bound, unknown type)
- Set properties: subset, idempotence, containment
- Filter labels

These tests are pure: no database, no Plotly.
"""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from vitals_tracker.analytics.date_filters import (
    CUSTOM_RANGE_LABEL,
    DateFilter,
    DateFilterType,
    apply_date_filter,
    filter_label,
    resolve_window,
)
from vitals_tracker.core.datetime_utils import to_zone

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
UTC_MINUS_3 = timezone(timedelta(hours=-3))


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def ids(records):
    return [record.id for record in records]


@pytest.fixture
def spread_records(make_record):
    """One record every 7 hours across the 40 days up to NOW's day end."""
    start = utc(2023, 12, 7, 0, 0)
    records = []
    moment = start
    while moment <= utc(2024, 1, 15, 23, 59):
        records.append(make_record(moment, glycemia=100))
        moment += timedelta(hours=7)
    return records


# =============================================================================
# WINDOW BOUNDARIES
# =============================================================================

class TestToday:

    def test_window_is_whole_calendar_day(self):
        window = resolve_window(DateFilter.today(), NOW)
        assert window.start == utc(2024, 1, 15, 0, 0, 0, 0)
        assert window.end == utc(2024, 1, 15, 23, 59, 59, 999999)

    def test_both_ends_inclusive(self, make_record):
        records = [
            make_record(utc(2024, 1, 14, 23, 59, 59, 999999), glycemia=90),
            make_record(utc(2024, 1, 15, 0, 0, 0), glycemia=91),
            make_record(utc(2024, 1, 15, 23, 59, 59, 999999), glycemia=92),
            make_record(utc(2024, 1, 16, 0, 0, 0), glycemia=93),
        ]
        result = apply_date_filter(records, DateFilter.today(), NOW)
        assert [r.glycemia for r in result] == [91, 92]

    def test_future_records_later_today_are_included(self, make_record):
        later = make_record(utc(2024, 1, 15, 20, 0), heart_rate=70)
        assert apply_date_filter([later], DateFilter.today(), NOW) == [later]


class TestPresetWindows:

    def test_last_7_days_spans_seven_calendar_days(self):
        window = resolve_window(DateFilter.last_7_days(), NOW)
        assert window.start == utc(2024, 1, 9, 0, 0)
        assert window.end == utc(2024, 1, 15, 23, 59, 59, 999999)

    def test_last_7_days_boundary(self, make_record):
        outside = make_record(utc(2024, 1, 8, 23, 59, 59, 999999), systolic=120)
        first = make_record(utc(2024, 1, 9, 0, 0), systolic=121)
        assert apply_date_filter([outside, first], DateFilter.last_7_days(), NOW) == [first]

    def test_last_30_days_spans_thirty_calendar_days(self):
        window = resolve_window(DateFilter.last_30_days(), NOW)
        assert window.start == utc(2023, 12, 17, 0, 0)
        assert window.end == utc(2024, 1, 15, 23, 59, 59, 999999)

    def test_last_30_days_boundary(self, make_record):
        outside = make_record(utc(2023, 12, 16, 23, 59), diastolic=80)
        first = make_record(utc(2023, 12, 17, 0, 0), diastolic=81)
        assert apply_date_filter([outside, first], DateFilter.last_30_days(), NOW) == [first]


class TestCustom:

    def test_custom_window_covers_whole_bound_days(self):
        window = resolve_window(DateFilter.custom(date(2024, 1, 5), date(2024, 1, 10)), NOW)
        assert window.start == utc(2024, 1, 5, 0, 0)
        assert window.end == utc(2024, 1, 10, 23, 59, 59, 999999)

    def test_custom_selects_records_inside_range(self, make_record):
        records = [
            make_record(utc(2024, 1, 4, 23, 0), glycemia=100),
            make_record(utc(2024, 1, 5, 0, 0), glycemia=101),
            make_record(utc(2024, 1, 10, 23, 59), glycemia=102),
            make_record(utc(2024, 1, 11, 0, 0), glycemia=103),
        ]
        result = apply_date_filter(records, DateFilter.custom(date(2024, 1, 5), date(2024, 1, 10)), NOW)
        assert [r.glycemia for r in result] == [101, 102]

    def test_inverted_range_matches_nothing(self, spread_records):
        date_filter = DateFilter.custom(date(2024, 1, 10), date(2024, 1, 5))
        assert resolve_window(date_filter, NOW).is_empty()
        assert apply_date_filter(spread_records, date_filter, NOW) == []

    @pytest.mark.parametrize("start, end", [
        (None, date(2024, 1, 5)),
        (date(2024, 1, 5), None),
        (None, None),
    ])
    def test_missing_bound_returns_input_unfiltered(self, spread_records, start, end):
        date_filter = DateFilter.custom(start, end)
        assert resolve_window(date_filter, NOW) is None
        assert apply_date_filter(spread_records, date_filter, NOW) == spread_records

    def test_datetime_bounds_use_their_calendar_day(self):
        date_filter = DateFilter.custom(utc(2024, 1, 5, 18, 30), utc(2024, 1, 6, 1, 0))
        window = resolve_window(date_filter, NOW)
        assert window.start == utc(2024, 1, 5, 0, 0)
        assert window.end == utc(2024, 1, 6, 23, 59, 59, 999999)


class TestUnknownType:

    def test_unknown_type_returns_input_unfiltered(self, spread_records):
        date_filter = DateFilter(type="fortnight")
        assert resolve_window(date_filter, NOW) is None
        assert apply_date_filter(spread_records, date_filter, NOW) == spread_records

    def test_plain_string_type_is_accepted(self):
        assert resolve_window(DateFilter(type="today"), NOW) == resolve_window(DateFilter.today(), NOW)


# =============================================================================
# TIMEZONES
# =============================================================================

class TestTimezones:

    def test_calendar_day_follows_now_timezone(self, make_record):
        # 22:00 on the 15th in UTC-3 is 01:00 UTC on the 16th
        now = datetime(2024, 1, 15, 22, 0, tzinfo=UTC_MINUS_3)
        late_local = make_record(utc(2024, 1, 16, 1, 30), glycemia=110)
        early_local = make_record(utc(2024, 1, 15, 2, 0), glycemia=111)  # 23:00 on the 14th locally

        assert apply_date_filter([late_local, early_local], DateFilter.today(), now) == [late_local]

    def test_window_is_expressed_in_utc(self):
        now = datetime(2024, 1, 15, 22, 0, tzinfo=UTC_MINUS_3)
        window = resolve_window(DateFilter.today(), now)
        assert window.start == utc(2024, 1, 15, 3, 0)
        assert window.end == utc(2024, 1, 16, 2, 59, 59, 999999)

    def test_naive_now_is_treated_as_utc(self):
        naive = datetime(2024, 1, 15, 12, 0)
        assert resolve_window(DateFilter.today(), naive) == resolve_window(DateFilter.today(), NOW)

    def test_naive_record_timestamp_is_treated_as_utc(self, make_record):
        record = make_record(datetime(2024, 1, 15, 0, 0), heart_rate=60)
        assert apply_date_filter([record], DateFilter.today(), NOW) == [record]

    def test_naive_custom_bound_is_treated_as_utc(self):
        now = datetime(2024, 1, 15, 12, 0, tzinfo=UTC_MINUS_3)
        naive = datetime(2024, 1, 10, 1, 0)
        aware = naive.replace(tzinfo=timezone.utc)

        naive_window = resolve_window(DateFilter.custom(naive, naive), now)
        assert naive_window == resolve_window(DateFilter.custom(aware, aware), now)
        # 01:00 UTC on the 10th is still the 9th in UTC-3
        assert naive_window.start == utc(2024, 1, 9, 3, 0)
        assert naive_window.end == utc(2024, 1, 10, 2, 59, 59, 999999)

    def test_repeated_hour_on_dst_fall_back_stays_in_its_day(self, make_record):
        # Sao Paulo left DST at midnight on 2019-02-17, repeating 23:00-23:59 on the 16th
        sao_paulo = ZoneInfo("America/Sao_Paulo")
        second_pass = make_record(utc(2019, 2, 17, 2, 30), glycemia=100)
        assert to_zone(second_pass.timestamp, sao_paulo).day == 16

        on_16th = apply_date_filter([second_pass], DateFilter.today(), datetime(2019, 2, 16, 12, 0, tzinfo=sao_paulo))
        on_17th = apply_date_filter([second_pass], DateFilter.today(), datetime(2019, 2, 17, 12, 0, tzinfo=sao_paulo))
        assert on_16th == [second_pass]
        assert on_17th == []

    def test_fall_back_day_window_ends_at_next_local_midnight(self):
        sao_paulo = ZoneInfo("America/Sao_Paulo")
        window = resolve_window(DateFilter.today(), datetime(2019, 2, 16, 12, 0, tzinfo=sao_paulo))
        assert window.start == utc(2019, 2, 16, 2, 0)
        assert window.end == utc(2019, 2, 17, 2, 59, 59, 999999)


# =============================================================================
# PROPERTIES
# =============================================================================

ALL_FILTERS = [
    DateFilter.today(),
    DateFilter.last_7_days(),
    DateFilter.last_30_days(),
    DateFilter.custom(date(2023, 12, 20), date(2024, 1, 2)),
    DateFilter.custom(date(2024, 1, 10), date(2024, 1, 5)),
    DateFilter.custom(None, date(2024, 1, 5)),
    DateFilter(type="fortnight"),
]


class TestProperties:

    @pytest.mark.parametrize("date_filter", ALL_FILTERS)
    def test_result_is_subset_of_input(self, spread_records, date_filter):
        result = apply_date_filter(spread_records, date_filter, NOW)
        source_ids = set(ids(spread_records))
        assert set(ids(result)) <= source_ids
        assert len(result) <= len(spread_records)

    @pytest.mark.parametrize("date_filter", ALL_FILTERS)
    def test_order_is_preserved(self, spread_records, date_filter):
        shuffled = spread_records[1::2] + spread_records[::2]
        result = apply_date_filter(shuffled, date_filter, NOW)
        positions = [shuffled.index(record) for record in result]
        assert positions == sorted(positions)

    def test_today_is_idempotent(self, spread_records):
        once = apply_date_filter(spread_records, DateFilter.today(), NOW)
        twice = apply_date_filter(once, DateFilter.today(), NOW)
        assert once
        assert twice == once

    @pytest.mark.parametrize("hour", [0, 5, 12, 23])
    def test_last_7_days_contains_today(self, spread_records, hour):
        now = utc(2024, 1, 15, hour, 0)
        today = set(ids(apply_date_filter(spread_records, DateFilter.today(), now)))
        week = set(ids(apply_date_filter(spread_records, DateFilter.last_7_days(), now)))
        assert today <= week

    def test_last_30_days_contains_last_7_days(self, spread_records):
        week = set(ids(apply_date_filter(spread_records, DateFilter.last_7_days(), NOW)))
        month = set(ids(apply_date_filter(spread_records, DateFilter.last_30_days(), NOW)))
        assert week <= month

    def test_empty_input_gives_empty_output(self):
        for date_filter in ALL_FILTERS:
            assert apply_date_filter([], date_filter, NOW) == []


# =============================================================================
# LABELS
# =============================================================================

class TestFilterLabel:

    @pytest.mark.parametrize("date_filter, expected", [
        (DateFilter.today(), "Today"),
        (DateFilter.last_7_days(), "Last 7 days"),
        (DateFilter.last_30_days(), "Last 30 days"),
    ])
    def test_preset_labels(self, date_filter, expected):
        assert filter_label(date_filter) == expected

    def test_custom_label_formats_both_days(self):
        date_filter = DateFilter.custom(date(2024, 1, 5), date(2024, 1, 10))
        assert filter_label(date_filter) == "05/01/2024 – 10/01/2024"

    def test_custom_label_with_missing_bound(self):
        assert filter_label(DateFilter.custom(date(2024, 1, 5), None)) == CUSTOM_RANGE_LABEL

    def test_unknown_type_label_is_empty(self):
        assert filter_label(DateFilter(type="fortnight")) == ""

    def test_filter_types_match_query_values(self):
        assert [t.value for t in DateFilterType] == ["today", "last7days", "last30days", "custom"]

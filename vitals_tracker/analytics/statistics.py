"""
Derived statistics over health records.

Missing measurements are skipped, never counted as zero. An average over
no measurements is None, which renders as a blank cell.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from vitals_tracker.analytics.date_filters import DateFilter, apply_date_filter
from vitals_tracker.core.metric_registry import MetricDefinition, list_metrics
from vitals_tracker.models.health_record import HealthRecord

_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class MetricAverage:
    """All-time and trailing-7-day averages for one metric."""
    metric: MetricDefinition
    all_time: Optional[float]
    last_7_days: Optional[float]


def average(records: Iterable[HealthRecord], field: str) -> Optional[float]:
    """
    Arithmetic mean of ``field`` over the records that have it.

    The result is rounded half-up to one decimal place (120.25 -> 120.3).
    Returns None when no record carries the field.

    Raises:
        KeyError: If ``field`` is not a measurement field
    """
    values = [value for value in (record.value_of(field) for record in records) if value is not None]
    if not values:
        return None
    mean = Decimal(str(sum(values) / len(values)))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def format_average(value: Optional[float]) -> str:
    """Render an average with one decimal, or '' when absent."""
    return "" if value is None else f"{value:.1f}"


def summarize(records: Iterable[HealthRecord], now: datetime) -> List[MetricAverage]:
    """
    All-time and last-7-days averages for every registered metric.

    The 7-day subset is filtered independently from the same input.
    """
    records = list(records)
    recent = apply_date_filter(records, DateFilter.last_7_days(), now)
    return [
        MetricAverage(
            metric=metric,
            all_time=average(records, name),
            last_7_days=average(recent, name),
        )
        for name, metric in list_metrics().items()
    ]

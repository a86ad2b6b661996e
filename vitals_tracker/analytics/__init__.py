"""
Pure data-transformation layer: date filtering, averages and abnormality flags.

Nothing in this package performs I/O or touches global state; records and
"now" are always passed in by the caller.
"""
from vitals_tracker.analytics.classifier import (
    Classification,
    classify,
    is_abnormal,
    is_blood_pressure_abnormal,
    is_diastolic_abnormal,
    is_glycemia_abnormal,
    is_heart_rate_abnormal,
    is_systolic_abnormal,
)
from vitals_tracker.analytics.date_filters import (
    DateFilter,
    DateFilterType,
    DateWindow,
    apply_date_filter,
    filter_label,
    resolve_window,
)
from vitals_tracker.analytics.statistics import MetricAverage, average, format_average, summarize

__all__ = [
    # Date filtering
    "DateFilter",
    "DateFilterType",
    "DateWindow",
    "apply_date_filter",
    "filter_label",
    "resolve_window",
    # Statistics
    "MetricAverage",
    "average",
    "format_average",
    "summarize",
    # Classification
    "Classification",
    "classify",
    "is_abnormal",
    "is_blood_pressure_abnormal",
    "is_diastolic_abnormal",
    "is_glycemia_abnormal",
    "is_heart_rate_abnormal",
    "is_systolic_abnormal",
]

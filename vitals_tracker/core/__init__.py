"""
Core module for application configuration, logging, and shared utilities.

This module provides:
- Settings: Application configuration via pydantic-settings (core.config)
- Dependency injection: FastAPI Depends() functions (core.dependencies)
- Exceptions: Domain-specific exception classes with HTTP status codes (core.exceptions)
- Datetime utilities: UTC-first datetime handling
- Metric registry: Health metric definitions and normal ranges

Only the framework-free helpers are re-exported here, so the models and
analytics layers can import them without loading settings or FastAPI.
"""
# UTC datetime utilities
from vitals_tracker.core.datetime_utils import (
    to_utc,
    to_zone,
    parse_datetime,
    format_iso,
    format_for_display,
)

# Metric registry exports
from vitals_tracker.core.metric_registry import (
    MetricDefinition,
    get_metric,
    list_metrics,
    get_normal_range,
    get_palette,
    format_metric_value,
)

__all__ = [
    # Datetime utilities
    "to_utc",
    "to_zone",
    "parse_datetime",
    "format_iso",
    "format_for_display",
    # Metric registry exports
    "MetricDefinition",
    "get_metric",
    "list_metrics",
    "get_normal_range",
    "get_palette",
    "format_metric_value",
]

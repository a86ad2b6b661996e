"""
Abnormality classification against fixed clinical reference bands.

Bands come from the metric registry and are inclusive: a glycemia of 70
or 180 is normal, 69.9 is low, 180.1 is high. An absent value is never
abnormal, and metrics without a band (heart rate) are never flagged.
"""
from enum import Enum
from typing import Optional

from vitals_tracker.core.metric_registry import get_metric


class Classification(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


def classify(metric_name: str, value: Optional[float]) -> Optional[Classification]:
    """
    Place ``value`` relative to the metric's normal band.

    Returns None for an absent value.

    Raises:
        KeyError: If the metric is not found in the registry
    """
    if value is None:
        return None
    band = get_metric(metric_name).range
    if band is None:
        return Classification.NORMAL
    low, high = band
    if value < low:
        return Classification.LOW
    if value > high:
        return Classification.HIGH
    return Classification.NORMAL


def is_abnormal(metric_name: str, value: Optional[float]) -> bool:
    """True if ``value`` is present and outside the metric's band."""
    return classify(metric_name, value) in (Classification.LOW, Classification.HIGH)


def is_systolic_abnormal(systolic: Optional[float]) -> bool:
    return is_abnormal("systolic", systolic)


def is_diastolic_abnormal(diastolic: Optional[float]) -> bool:
    return is_abnormal("diastolic", diastolic)


def is_glycemia_abnormal(glycemia: Optional[float]) -> bool:
    return is_abnormal("glycemia", glycemia)


def is_heart_rate_abnormal(heart_rate: Optional[float]) -> bool:
    return is_abnormal("heart_rate", heart_rate)


def is_blood_pressure_abnormal(systolic: Optional[float], diastolic: Optional[float]) -> bool:
    """
    A reading is abnormal if either half is outside its band.

    A missing half contributes nothing, so (85, None) is abnormal and
    (None, None) is not.
    """
    return is_systolic_abnormal(systolic) or is_diastolic_abnormal(diastolic)

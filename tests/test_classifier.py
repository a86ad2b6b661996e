"""
Unit tests for the abnormality classifier.

Bands are inclusive: the boundary values themselves are normal.
"""
import pytest

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


class TestClassify:

    @pytest.mark.parametrize("metric, value, expected", [
        ("glycemia", 69.9, Classification.LOW),
        ("glycemia", 70, Classification.NORMAL),
        ("glycemia", 180, Classification.NORMAL),
        ("glycemia", 181, Classification.HIGH),
        ("systolic", 89, Classification.LOW),
        ("systolic", 90, Classification.NORMAL),
        ("systolic", 139, Classification.NORMAL),
        ("systolic", 140, Classification.HIGH),
        ("diastolic", 59, Classification.LOW),
        ("diastolic", 60, Classification.NORMAL),
        ("diastolic", 90, Classification.NORMAL),
        ("diastolic", 91, Classification.HIGH),
    ])
    def test_bands(self, metric, value, expected):
        assert classify(metric, value) == expected

    def test_absent_value_is_unclassified(self):
        assert classify("glycemia", None) is None

    @pytest.mark.parametrize("value", [20, 72, 250])
    def test_metric_without_band_is_always_normal(self, value):
        assert classify("heart_rate", value) == Classification.NORMAL

    def test_aliases_resolve(self):
        assert classify("glucose", 200) == Classification.HIGH

    def test_unknown_metric_raises(self):
        with pytest.raises(KeyError):
            classify("weight", 80)


class TestPredicates:

    def test_glycemia_example(self):
        flags = [is_glycemia_abnormal(value) for value in (70, 180, 181)]
        assert flags == [False, False, True]

    def test_absent_input_is_never_abnormal(self):
        assert not is_systolic_abnormal(None)
        assert not is_diastolic_abnormal(None)
        assert not is_glycemia_abnormal(None)
        assert not is_heart_rate_abnormal(None)
        assert not is_abnormal("glycemia", None)

    def test_heart_rate_never_flagged(self):
        assert not is_heart_rate_abnormal(30)
        assert not is_heart_rate_abnormal(220)


class TestBloodPressure:

    def test_both_halves_abnormal(self):
        assert is_blood_pressure_abnormal(85, 95)

    @pytest.mark.parametrize("systolic, diastolic", [
        (150, 80),
        (120, 50),
        (85, 70),
        (120, 95),
    ])
    def test_either_half_abnormal(self, systolic, diastolic):
        assert is_blood_pressure_abnormal(systolic, diastolic)

    @pytest.mark.parametrize("systolic, diastolic", [
        (120, 80),
        (90, 60),
        (139, 90),
    ])
    def test_normal_reading(self, systolic, diastolic):
        assert not is_blood_pressure_abnormal(systolic, diastolic)

    def test_missing_half_contributes_nothing(self):
        assert is_blood_pressure_abnormal(85, None)
        assert is_blood_pressure_abnormal(None, 95)
        assert not is_blood_pressure_abnormal(120, None)
        assert not is_blood_pressure_abnormal(None, None)

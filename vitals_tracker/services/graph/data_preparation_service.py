"""
Data preparation for health record visualization.

Responsible for:
- Splitting records into per-metric series, oldest first
- Dropping points where the metric was not measured
- Pairing systolic/diastolic readings
- Computing abnormal flags via the classifier

This module is visualization-agnostic; PlotlyBuilder consumes its output.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Optional, Sequence, Tuple

from vitals_tracker.analytics.classifier import is_abnormal
from vitals_tracker.core.datetime_utils import to_zone
from vitals_tracker.core.metric_registry import MetricDefinition, get_metric
from vitals_tracker.models.health_record import HealthRecord

logger = logging.getLogger(__name__)

# Single-series metrics; blood pressure is handled as a pair.
SERIES_METRICS = ("glycemia", "heart_rate")


# =============================================================================
# NORMALIZED DATA STRUCTURES
# =============================================================================

@dataclass
class MetricDataPoint:
    """A single measured value."""
    timestamp: datetime
    value: float
    is_abnormal: bool


@dataclass
class PreparedMetricData:
    """All measured points of one metric, oldest first."""
    metric: MetricDefinition
    data_points: List[MetricDataPoint] = field(default_factory=list)

    @property
    def timestamps(self) -> List[datetime]:
        return [dp.timestamp for dp in self.data_points]

    @property
    def values(self) -> List[float]:
        return [dp.value for dp in self.data_points]

    @property
    def is_abnormal(self) -> List[bool]:
        return [dp.is_abnormal for dp in self.data_points]

    def is_empty(self) -> bool:
        return len(self.data_points) == 0


@dataclass
class BloodPressureDataPoint:
    """A reading where both systolic and diastolic were measured."""
    timestamp: datetime
    systolic: float
    diastolic: float
    systolic_abnormal: bool
    diastolic_abnormal: bool


@dataclass
class PreparedBloodPressureData:
    """Paired blood pressure readings, oldest first."""
    data_points: List[BloodPressureDataPoint] = field(default_factory=list)

    @property
    def timestamps(self) -> List[datetime]:
        return [dp.timestamp for dp in self.data_points]

    @property
    def systolic_values(self) -> List[float]:
        return [dp.systolic for dp in self.data_points]

    @property
    def diastolic_values(self) -> List[float]:
        return [dp.diastolic for dp in self.data_points]

    def is_empty(self) -> bool:
        return len(self.data_points) == 0


@dataclass
class PreparedDataset:
    """Everything the chart builder needs."""
    metrics: Dict[str, PreparedMetricData]
    blood_pressure: PreparedBloodPressureData
    date_range: Optional[Tuple[datetime, datetime]]

    def is_empty(self) -> bool:
        return self.blood_pressure.is_empty() and all(m.is_empty() for m in self.metrics.values())


# =============================================================================
# DATA PREPARATION SERVICE
# =============================================================================

class DataPreparationService:
    """Turns record lists into chart-ready series."""

    def prepare_dataset(
        self, records: Sequence[HealthRecord], tz: tzinfo = timezone.utc
    ) -> PreparedDataset:
        """
        Build per-metric series from records in any order.

        Timestamps are expressed in ``tz`` so axes show the user's wall-clock time.
        """
        ordered = [
            replace(record, timestamp=to_zone(record.timestamp, tz))
            for record in sorted(records, key=lambda record: record.timestamp)
        ]

        metrics = {name: self._prepare_metric(ordered, name) for name in SERIES_METRICS}
        blood_pressure = self._prepare_blood_pressure(ordered)
        date_range = (ordered[0].timestamp, ordered[-1].timestamp) if ordered else None

        logger.debug(
            "Dataset prepared",
            extra={
                "records": len(ordered),
                "bp_points": len(blood_pressure.data_points),
                **{f"{name}_points": len(data.data_points) for name, data in metrics.items()},
            }
        )
        return PreparedDataset(metrics=metrics, blood_pressure=blood_pressure, date_range=date_range)

    def _prepare_metric(self, ordered: Sequence[HealthRecord], name: str) -> PreparedMetricData:
        prepared = PreparedMetricData(metric=get_metric(name))
        for record in ordered:
            value = record.value_of(name)
            if value is None:
                continue
            prepared.data_points.append(MetricDataPoint(
                timestamp=record.timestamp,
                value=value,
                is_abnormal=is_abnormal(name, value),
            ))
        return prepared

    def _prepare_blood_pressure(self, ordered: Sequence[HealthRecord]) -> PreparedBloodPressureData:
        prepared = PreparedBloodPressureData()
        for record in ordered:
            if record.systolic is None or record.diastolic is None:
                continue
            prepared.data_points.append(BloodPressureDataPoint(
                timestamp=record.timestamp,
                systolic=record.systolic,
                diastolic=record.diastolic,
                systolic_abnormal=is_abnormal("systolic", record.systolic),
                diastolic_abnormal=is_abnormal("diastolic", record.diastolic),
            ))
        return prepared

"""
Central metric registry - single source of truth for health metric definitions.

This module provides:
- YAML-based configuration loading and validation
- MetricDefinition dataclass for metric configuration
- Metric lookup by canonical name or alias
- Normal range checking

YAML access is encapsulated here - no other module should read metrics.yaml directly.

Usage:
    from vitals_tracker.core.metric_registry import get_metric, list_metrics, get_normal_range

    metric = get_metric("glycemia")
    metric.range                 # (70.0, 180.0)
    get_normal_range("pulse")    # None - heart rate has no reference band
"""
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


# =============================================================================
# METRIC DEFINITION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class MetricDefinition:
    """
    Immutable definition for a health metric.

    Attributes:
        canonical_name: HealthRecord attribute holding the value
        display_name: Human-readable name
        color: Hex color code for visualization
        range: Inclusive normal band as (low, high), or None if never flagged
        unit: Measurement unit (e.g., "mg/dL", "mmHg")
        description: Tooltip text
        aliases: Alternative names that resolve to this metric
    """
    canonical_name: str
    display_name: str
    color: str
    range: Optional[Tuple[float, float]]
    unit: str
    description: str
    aliases: Tuple[str, ...]

    @property
    def label(self) -> str:
        """Display name with unit, e.g. 'Glycemia (mg/dL)'."""
        return f"{self.display_name} ({self.unit})" if self.unit else self.display_name


@dataclass(frozen=True)
class RegistryPalette:
    """Colors shared by every chart and report."""
    abnormal_color: str
    normal_color: str
    range_band_color: str


# =============================================================================
# YAML CONFIGURATION LOADING & VALIDATION
# =============================================================================

def _get_config_path() -> Path:
    """Get the path to the metrics configuration file."""
    return Path(__file__).parent / "metrics.yaml"


def _load_yaml_config() -> Dict[str, Any]:
    """
    Load and parse the YAML configuration file.

    Raises:
        FileNotFoundError: If metrics.yaml is not found
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = _get_config_path()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        logger.error("Metrics config file not found", extra={"path": str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse metrics config", extra={"path": str(config_path), "error": str(e)})
        raise


def _validate_metric_entry(raw: Dict[str, Any], index: int) -> None:
    """
    Validate a single metric entry from YAML.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    for field in ("canonical_name", "color"):
        if field not in raw:
            raise ValueError(f"Metric at index {index} is missing required field: '{field}'")

    color = raw.get("color", "")
    if not re.match(r"^#[0-9A-Fa-f]{6}$", color):
        raise ValueError(f"Metric '{raw['canonical_name']}' has invalid color format: '{color}'")

    range_val = raw.get("range")
    if range_val is not None:
        if not isinstance(range_val, (list, tuple)) or len(range_val) != 2:
            raise ValueError(f"Metric '{raw['canonical_name']}' has invalid range: must be [low, high]")
        try:
            low, high = float(range_val[0]), float(range_val[1])
        except (TypeError, ValueError):
            raise ValueError(f"Metric '{raw['canonical_name']}' has non-numeric range values")
        if low > high:
            raise ValueError(f"Metric '{raw['canonical_name']}' has range low above high")


def _parse_metric_entry(raw: Dict[str, Any]) -> MetricDefinition:
    """Parse a single metric entry from YAML into a MetricDefinition."""
    range_val = raw.get("range")
    parsed_range: Optional[Tuple[float, float]] = None
    if range_val is not None:
        parsed_range = (float(range_val[0]), float(range_val[1]))

    canonical_name = raw["canonical_name"]
    return MetricDefinition(
        canonical_name=canonical_name,
        display_name=raw.get("display_name", canonical_name.replace("_", " ").title()),
        color=raw["color"],
        range=parsed_range,
        unit=raw.get("unit", ""),
        description=raw.get("description", ""),
        aliases=tuple(raw.get("aliases") or ()),
    )


@lru_cache(maxsize=1)
def _load_registry() -> Tuple[Tuple[MetricDefinition, ...], RegistryPalette]:
    """
    Load and cache the complete metric registry from YAML.

    The YAML file is read exactly once for the lifetime of the process.
    """
    config = _load_yaml_config()

    metric_definitions: List[MetricDefinition] = []
    for i, raw in enumerate(config.get("metrics", [])):
        _validate_metric_entry(raw, i)
        metric_definitions.append(_parse_metric_entry(raw))

    palette = RegistryPalette(
        abnormal_color=config.get("abnormal_color", "#EF4444"),
        normal_color=config.get("normal_color", "#22C55E"),
        range_band_color=config.get("range_band_color", "rgba(34, 197, 94, 0.08)"),
    )
    return tuple(metric_definitions), palette


# =============================================================================
# METRIC NORMALIZATION & LOOKUP
# =============================================================================

def _normalize_metric_name(name: str) -> str:
    """
    Normalize a metric name for consistent lookup.

    Lowercases, turns underscores into spaces, drops other punctuation
    and collapses whitespace.
    """
    if not name:
        return ""
    normalized = name.lower().strip().replace("_", " ")
    normalized = re.sub(r"[^a-z0-9\s]", "", normalized)
    return re.sub(r"\s+", " ", normalized).strip()


@lru_cache(maxsize=1)
def _build_metric_lookup() -> Dict[str, MetricDefinition]:
    """Build a normalized lookup map from all canonical names and aliases."""
    metric_definitions, _ = _load_registry()

    lookup: Dict[str, MetricDefinition] = {}
    for metric in metric_definitions:
        canonical_normalized = _normalize_metric_name(metric.canonical_name)
        if canonical_normalized in lookup:
            logger.warning(
                "Duplicate metric key detected",
                extra={"key": canonical_normalized, "existing": lookup[canonical_normalized].canonical_name}
            )
        lookup[canonical_normalized] = metric

        for alias in metric.aliases:
            alias_normalized = _normalize_metric_name(alias)
            if alias_normalized and alias_normalized not in lookup:
                lookup[alias_normalized] = metric
            elif alias_normalized in lookup and lookup[alias_normalized] != metric:
                logger.warning(
                    "Alias collision detected",
                    extra={"alias": alias_normalized, "existing": lookup[alias_normalized].canonical_name}
                )
    return lookup


# =============================================================================
# PUBLIC API
# =============================================================================

def get_metric(metric_name: str) -> MetricDefinition:
    """
    Get metric definition by canonical name or alias (case-insensitive).

    Raises:
        KeyError: If the metric is not found in the registry
    """
    normalized = _normalize_metric_name(metric_name)
    lookup = _build_metric_lookup()

    if normalized not in lookup:
        raise KeyError(f"Unknown metric: '{metric_name}' (normalized: '{normalized}')")
    return lookup[normalized]


def list_metrics() -> Dict[str, MetricDefinition]:
    """Map canonical metric names to definitions, in YAML order."""
    metric_definitions, _ = _load_registry()
    return {m.canonical_name: m for m in metric_definitions}


def get_normal_range(metric_name: str) -> Optional[Tuple[float, float]]:
    """
    Get the normal reference band for a metric, or None if it has none.

    Raises:
        KeyError: If the metric is not found in the registry
    """
    return get_metric(metric_name).range


def get_palette() -> RegistryPalette:
    """Colors used for abnormal/normal markers and range bands."""
    _, palette = _load_registry()
    return palette


def format_metric_value(value: Optional[float]) -> str:
    """Render a measurement without a trailing '.0' ('' when absent)."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"

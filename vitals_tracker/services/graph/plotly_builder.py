"""
Plotly figure builder for health record visualization.

Responsibilities:
- Three stacked panels: glycemia, blood pressure, heart rate
- Abnormal points drawn in the warning color
- Normal-band shading for metrics that have one
- Layout and empty-state rendering

This module encapsulates all Plotly-specific figure construction logic,
allowing GraphService to focus on orchestration.
"""
import logging
from typing import Any, Dict, List

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from vitals_tracker.core.metric_registry import MetricDefinition, get_metric, get_palette
from vitals_tracker.services.graph.data_preparation_service import (
    PreparedBloodPressureData,
    PreparedMetricData,
)

logger = logging.getLogger(__name__)

GLYCEMIA_ROW = 1
BLOOD_PRESSURE_ROW = 2
HEART_RATE_ROW = 3

PANEL_TITLES = ("Glycemia (mg/dL)", "Blood pressure (mmHg)", "Heart rate (bpm)")


class PlotlyBuilder:
    """
    Builder for the three-panel vitals figure.

    Usage:
        builder = PlotlyBuilder()
        fig = builder.create_figure()
        builder.add_metric_trace(fig, glycemia_data, row=GLYCEMIA_ROW)
        builder.add_blood_pressure_traces(fig, bp_data)
        builder.apply_layout(fig, "Last 7 days")
    """

    def __init__(self) -> None:
        self._palette = get_palette()

    def create_figure(self) -> go.Figure:
        """Create an empty figure with three rows sharing the time axis."""
        return make_subplots(
            rows=3,
            cols=1,
            shared_xaxes=True,
            vertical_spacing=0.08,
            subplot_titles=PANEL_TITLES,
        )

    def create_empty_figure(self) -> go.Figure:
        """Create a bare figure for the no-records placeholder."""
        return go.Figure()

    def _marker_colors(self, flags: List[bool], base_color: str) -> List[str]:
        return [self._palette.abnormal_color if flag else base_color for flag in flags]

    def _hovertemplate(self, metric: MetricDefinition) -> str:
        range_line = ""
        if metric.range:
            low, high = metric.range
            range_line = f"<span style='color:#666'>Normal: {low:g}–{high:g} {metric.unit}</span><br>"
        return (
            f"<b>{metric.display_name}</b><br>"
            f"{range_line}"
            "%{x|%d/%m/%Y %H:%M}<br>"
            f"<b>%{{y}} {metric.unit}</b>"
            "<extra></extra>"
        )

    def add_reference_band(self, fig: go.Figure, metric: MetricDefinition, row: int) -> None:
        """Shade the metric's normal band across the whole panel."""
        if metric.range is None:
            return
        low, high = metric.range
        fig.add_hrect(
            y0=low, y1=high,
            fillcolor=self._palette.range_band_color,
            line_width=0,
            layer="below",
            row=row, col=1,
        )

    def add_metric_trace(self, fig: go.Figure, metric_data: PreparedMetricData, row: int) -> None:
        """Add a single-metric line with abnormal points highlighted."""
        metric = metric_data.metric
        self.add_reference_band(fig, metric, row)
        fig.add_trace(
            go.Scatter(
                x=metric_data.timestamps,
                y=metric_data.values,
                name=metric.display_name,
                mode="lines+markers",
                line=dict(color=metric.color, width=2),
                marker=dict(
                    size=8,
                    color=self._marker_colors(metric_data.is_abnormal, self._palette.normal_color),
                    line=dict(width=1, color="white"),
                ),
                hovertemplate=self._hovertemplate(metric),
            ),
            row=row, col=1,
        )

    def add_blood_pressure_traces(self, fig: go.Figure, bp_data: PreparedBloodPressureData) -> None:
        """Add systolic and diastolic lines, each point colored by its own band."""
        systolic = get_metric("systolic")
        diastolic = get_metric("diastolic")

        self.add_reference_band(fig, systolic, BLOOD_PRESSURE_ROW)
        self.add_reference_band(fig, diastolic, BLOOD_PRESSURE_ROW)

        series = (
            (systolic, bp_data.systolic_values, [dp.systolic_abnormal for dp in bp_data.data_points], "triangle-up"),
            (diastolic, bp_data.diastolic_values, [dp.diastolic_abnormal for dp in bp_data.data_points], "triangle-down"),
        )
        for metric, values, flags, symbol in series:
            fig.add_trace(
                go.Scatter(
                    x=bp_data.timestamps,
                    y=values,
                    name=metric.display_name,
                    mode="lines+markers",
                    line=dict(color=metric.color, width=2),
                    marker=dict(
                        size=9,
                        symbol=symbol,
                        color=self._marker_colors(flags, self._palette.normal_color),
                        line=dict(width=1, color="white"),
                    ),
                    hovertemplate=self._hovertemplate(metric),
                ),
                row=BLOOD_PRESSURE_ROW, col=1,
            )

    def add_no_data_note(self, fig: go.Figure, row: int, message: str) -> None:
        """Centered note inside an empty panel."""
        axis_suffix = "" if row == 1 else str(row)
        fig.add_annotation(
            text=message,
            xref=f"x{axis_suffix} domain", yref=f"y{axis_suffix} domain",
            x=0.5, y=0.5,
            showarrow=False,
            font=dict(size=12, color="#9E9E9E"),
        )

    def apply_layout(self, fig: go.Figure, subtitle: str) -> None:
        """Titles, axes, legend."""
        fig.update_layout(
            title=dict(
                text=f"<b>Health Trends</b><br><sup style='color:#757575'>{subtitle}</sup>",
                font=dict(size=18),
                x=0.5, xanchor="center",
            ),
            height=900,
            margin=dict(l=60, r=30, t=100, b=60),
            template="plotly_white",
            paper_bgcolor="#FAFAFA",
            plot_bgcolor="#FFFFFF",
            hovermode="closest",
            legend=dict(orientation="h", x=0.5, xanchor="center", y=-0.06, yanchor="top"),
        )
        fig.update_xaxes(type="date", tickformat="%d/%m %H:%M", gridcolor="rgba(0,0,0,0.06)")
        fig.update_yaxes(gridcolor="rgba(0,0,0,0.06)")

    def apply_empty_layout(self, fig: go.Figure, subtitle: str) -> None:
        """Layout for a figure built from zero records."""
        fig.update_layout(
            title=dict(
                text=f"<b>Health Trends</b><br><sup>{subtitle}</sup>",
                font=dict(size=20),
                x=0.5, xanchor="center",
            ),
            height=450,
            template="plotly_white",
            paper_bgcolor="#FAFAFA",
            plot_bgcolor="#FFFFFF",
            annotations=[
                dict(text="<b>No health records found</b>", xref="paper", yref="paper",
                     x=0.5, y=0.55, showarrow=False, font=dict(size=18, color="#424242")),
                dict(text="Log a measurement to see your trends",
                     xref="paper", yref="paper", x=0.5, y=0.42,
                     showarrow=False, font=dict(size=14, color="#757575")),
            ],
        )
        fig.update_xaxes(showgrid=False, showticklabels=False, zeroline=False)
        fig.update_yaxes(showgrid=False, showticklabels=False, zeroline=False)

    def get_config(self) -> Dict[str, Any]:
        """Plotly client config for the HTML view."""
        return {
            "displayModeBar": True,
            "displaylogo": False,
            "modeBarButtonsToRemove": ["lasso2d", "select2d", "autoScale2d"],
            "responsive": True,
            "toImageButtonOptions": {
                "format": "png",
                "filename": "health_trends",
                "height": 900,
                "width": 1200,
                "scale": 2,
            },
        }

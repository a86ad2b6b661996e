"""
Service layer for generating health record charts.

Orchestrates data preparation and Plotly figure construction:
- DataPreparationService turns records into per-metric series
- PlotlyBuilder draws them
- GraphService renders the figure as HTML or as a PNG (kaleido) for reports
"""
import logging
from datetime import timezone, tzinfo
from typing import Optional, Sequence

import plotly.graph_objects as go
import plotly.io as pio

from vitals_tracker.models.health_record import HealthRecord
from vitals_tracker.services.graph.data_preparation_service import DataPreparationService
from vitals_tracker.services.graph.plotly_builder import (
    BLOOD_PRESSURE_ROW,
    GLYCEMIA_ROW,
    HEART_RATE_ROW,
    PlotlyBuilder,
)

logger = logging.getLogger(__name__)

NO_DATA_MESSAGES = {
    "glycemia": "No glycemia data to display",
    "heart_rate": "No heart rate data to display",
}
NO_BLOOD_PRESSURE_MESSAGE = "No blood pressure data to display"

_METRIC_ROWS = {"glycemia": GLYCEMIA_ROW, "heart_rate": HEART_RATE_ROW}

DEFAULT_IMAGE_WIDTH = 1400
DEFAULT_IMAGE_HEIGHT = 900


class GraphService:
    """
    Public entry point for chart generation.

    Records are expected to be already date-filtered by the caller.
    """

    def __init__(
        self,
        data_preparation_service: Optional[DataPreparationService] = None,
        plotly_builder: Optional[PlotlyBuilder] = None,
        tz: tzinfo = timezone.utc,
    ):
        """
        Args:
            data_preparation_service: Optional data preparation; default instance if omitted.
            plotly_builder: Optional figure builder; default instance if omitted.
            tz: Timezone in which the time axis is drawn.
        """
        self._data_prep = data_preparation_service or DataPreparationService()
        self._builder = plotly_builder or PlotlyBuilder()
        self._tz = tz

    def build_figure(self, records: Sequence[HealthRecord], subtitle: str) -> go.Figure:
        """Build the three-panel figure (or the empty placeholder)."""
        dataset = self._data_prep.prepare_dataset(records, tz=self._tz)

        if dataset.is_empty():
            fig = self._builder.create_empty_figure()
            self._builder.apply_empty_layout(fig, subtitle)
            return fig

        fig = self._builder.create_figure()
        for name, metric_data in dataset.metrics.items():
            row = _METRIC_ROWS[name]
            if metric_data.is_empty():
                self._builder.add_no_data_note(fig, row, NO_DATA_MESSAGES[name])
            else:
                self._builder.add_metric_trace(fig, metric_data, row=row)

        if dataset.blood_pressure.is_empty():
            self._builder.add_no_data_note(fig, BLOOD_PRESSURE_ROW, NO_BLOOD_PRESSURE_MESSAGE)
        else:
            self._builder.add_blood_pressure_traces(fig, dataset.blood_pressure)

        self._builder.apply_layout(fig, subtitle)
        return fig

    def generate_html_graph(self, records: Sequence[HealthRecord], subtitle: str) -> str:
        """Generate a standalone HTML page with the interactive chart."""
        fig = self.build_figure(records, subtitle)
        return pio.to_html(
            fig,
            include_plotlyjs="cdn",
            config=self._builder.get_config(),
            div_id="health-graph",
        )

    def render_png(
        self,
        records: Sequence[HealthRecord],
        subtitle: str,
        width: int = DEFAULT_IMAGE_WIDTH,
        height: int = DEFAULT_IMAGE_HEIGHT,
    ) -> bytes:
        """
        Render the chart to PNG bytes.

        Uses the kaleido engine; raises whatever kaleido raises if it
        cannot start (callers decide whether that is fatal).
        """
        fig = self.build_figure(records, subtitle)
        logger.debug("Rendering chart image", extra={"width": width, "height": height})
        return pio.to_image(fig, format="png", width=width, height=height, scale=2)

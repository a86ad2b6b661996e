"""
PDF report generation for health records.

Layout (landscape A4):
- Title and generation time
- Trend chart rendered by GraphService (optional, skipped if rendering fails)
- Summary table: all-time and 7-day averages per metric
- Records table, newest first, abnormal readings in red
- "Page i of n" footer on every page
"""
import logging
from datetime import datetime, timezone, tzinfo
from io import BytesIO
from typing import Callable, List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from vitals_tracker.analytics.classifier import is_blood_pressure_abnormal, is_glycemia_abnormal
from vitals_tracker.analytics.statistics import MetricAverage, format_average, summarize
from vitals_tracker.core.datetime_utils import format_for_display
from vitals_tracker.core.exceptions import ReportGenerationError
from vitals_tracker.core.metric_registry import format_metric_value, get_palette
from vitals_tracker.models.health_record import HealthRecord
from vitals_tracker.services.graph.graph_service import GraphService

logger = logging.getLogger(__name__)

PAGE_SIZE = landscape(A4)
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE
MARGIN = 1.5 * cm
# SimpleDocTemplate frames pad 6pt on each side
FRAME_WIDTH = PAGE_WIDTH - 2 * MARGIN - 12

CHART_MAX_WIDTH = FRAME_WIDTH
CHART_MAX_HEIGHT = 13 * cm

HEADER_BACKGROUND = colors.HexColor("#2C3E50")
GRID_COLOR = colors.HexColor("#BDC3C7")
STRIPE_COLOR = colors.HexColor("#F4F6F7")

SUMMARY_HEADERS = ["Metric", "All-time average", "7-day average"]
RECORD_HEADERS = ["Date / time", "Blood pressure (mmHg)", "Glycemia (mg/dL)", "Heart rate (bpm)", "Note"]

_BP_COLUMN = 1
_GLYCEMIA_COLUMN = 2


class NumberedCanvas(canvas.Canvas):
    """
    Canvas that defers page output so the footer can show the total page count.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        self.saveState()
        self.setStrokeColor(GRID_COLOR)
        self.setLineWidth(0.5)
        self.line(MARGIN, MARGIN - 0.4 * cm, PAGE_WIDTH - MARGIN, MARGIN - 0.4 * cm)
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawCentredString(PAGE_WIDTH / 2, MARGIN - 0.8 * cm, f"Page {self.getPageNumber()} of {total}")
        self.restoreState()


class ReportService:
    """
    Builds the downloadable PDF report.

    Records are passed in by the caller; the service never reads the store.
    """

    def __init__(
        self,
        graph_service: Optional[GraphService] = None,
        tz: tzinfo = timezone.utc,
        title: str = "Health Report",
        include_charts: bool = True,
        clock: Optional[Callable[[tzinfo], datetime]] = None,
    ):
        """
        Args:
            graph_service: Chart renderer; a default instance in ``tz`` if omitted.
            tz: Timezone used for every date printed in the report.
            title: Heading on the first page.
            include_charts: Embed the trend chart image when True.
            clock: Returns the current time in a timezone; defaults to datetime.now.
        """
        self._graph_service = graph_service or GraphService(tz=tz)
        self._tz = tz
        self._title = title
        self._include_charts = include_charts
        self._clock = clock or datetime.now
        self._setup_styles()

    def _setup_styles(self) -> None:
        self.styles = getSampleStyleSheet()
        self.styles.add(ParagraphStyle(
            name="ReportTitle",
            parent=self.styles["Title"],
            fontSize=20,
            leading=24,
            spaceAfter=4,
            textColor=HEADER_BACKGROUND,
        ))
        self.styles.add(ParagraphStyle(
            name="ReportMeta",
            parent=self.styles["Normal"],
            fontSize=9,
            alignment=1,
            textColor=colors.grey,
            spaceAfter=12,
        ))
        self.styles.add(ParagraphStyle(
            name="SectionHeading",
            parent=self.styles["Heading2"],
            textColor=HEADER_BACKGROUND,
            spaceBefore=10,
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name="Cell",
            parent=self.styles["Normal"],
            fontSize=9,
            leading=11,
        ))

    def generate_pdf(self, records: Sequence[HealthRecord], now: Optional[datetime] = None) -> bytes:
        """
        Render the report for ``records``.

        Args:
            records: Records to include, any order.
            now: Reference time for "Generated at" and the 7-day window.

        Returns:
            PDF document bytes

        Raises:
            ReportGenerationError: If reportlab fails to build the document.
        """
        now = now or self._clock(self._tz)
        ordered = sorted(records, key=lambda record: record.timestamp, reverse=True)

        story = []
        story.append(Paragraph(escape(self._title), self.styles["ReportTitle"]))
        story.append(Paragraph(
            f"Generated at {format_for_display(now, self._tz)}", self.styles["ReportMeta"]
        ))

        chart = self._build_chart(ordered) if self._include_charts else None
        if chart is not None:
            story.append(chart)
            story.append(Spacer(1, 12))

        story.append(Paragraph("Summary", self.styles["SectionHeading"]))
        story.append(self._build_summary_table(summarize(ordered, now)))

        story.append(PageBreak())
        story.append(Paragraph("Records", self.styles["SectionHeading"]))
        story.append(self._build_records_table(ordered))

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=PAGE_SIZE,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=self._title,
        )
        try:
            doc.build(story, canvasmaker=NumberedCanvas)
        except Exception as e:
            logger.error(f"Failed to build PDF report: {e}", exc_info=True)
            raise ReportGenerationError("Failed to build PDF report", reason=str(e)) from e

        pdf_content = buffer.getvalue()
        buffer.close()
        logger.info("PDF report generated", extra={"records": len(ordered), "bytes": len(pdf_content)})
        return pdf_content

    def _build_chart(self, records: Sequence[HealthRecord]) -> Optional[Image]:
        """Chart image scaled to the page, or None if rendering is unavailable."""
        if not records:
            return None
        try:
            png = self._graph_service.render_png(records, subtitle="All records")
        except Exception as e:
            logger.warning(f"Chart rendering failed, report will have no charts: {e}")
            return None

        image = Image(BytesIO(png))
        scale = min(CHART_MAX_WIDTH / image.imageWidth, CHART_MAX_HEIGHT / image.imageHeight)
        image.drawWidth = image.imageWidth * scale
        image.drawHeight = image.imageHeight * scale
        return image

    def _build_summary_table(self, averages: Sequence[MetricAverage]) -> Table:
        data = [SUMMARY_HEADERS]
        for item in averages:
            data.append([
                item.metric.label,
                format_average(item.all_time),
                format_average(item.last_7_days),
            ])

        table = Table(data, colWidths=[8 * cm, 5 * cm, 5 * cm], hAlign="LEFT")
        table.setStyle(TableStyle(self._base_table_style(len(data)) + [
            ("ALIGN", (1, 0), (-1, -1), "CENTER"),
        ]))
        return table

    def _build_records_table(self, records: Sequence[HealthRecord]) -> Table:
        abnormal = colors.HexColor(get_palette().abnormal_color)
        data: List[list] = [RECORD_HEADERS]
        highlights = []

        for row, record in enumerate(records, start=1):
            data.append([
                format_for_display(record.timestamp, self._tz),
                _format_blood_pressure(record.systolic, record.diastolic),
                format_metric_value(record.glycemia),
                format_metric_value(record.heart_rate),
                Paragraph(escape(record.note or ""), self.styles["Cell"]),
            ])
            if is_blood_pressure_abnormal(record.systolic, record.diastolic):
                highlights.append(("TEXTCOLOR", (_BP_COLUMN, row), (_BP_COLUMN, row), abnormal))
                highlights.append(("FONTNAME", (_BP_COLUMN, row), (_BP_COLUMN, row), "Helvetica-Bold"))
            if is_glycemia_abnormal(record.glycemia):
                highlights.append(("TEXTCOLOR", (_GLYCEMIA_COLUMN, row), (_GLYCEMIA_COLUMN, row), abnormal))
                highlights.append(("FONTNAME", (_GLYCEMIA_COLUMN, row), (_GLYCEMIA_COLUMN, row), "Helvetica-Bold"))

        if not records:
            data.append(["No records", "", "", "", ""])

        fixed_widths = [4 * cm, 4.5 * cm, 3.5 * cm, 3.5 * cm]
        note_width = FRAME_WIDTH - sum(fixed_widths)
        table = Table(
            data,
            colWidths=fixed_widths + [note_width],
            repeatRows=1,
            hAlign="LEFT",
        )
        table.setStyle(TableStyle(self._base_table_style(len(data)) + [
            ("ALIGN", (1, 0), (3, -1), "CENTER"),
        ] + highlights))
        return table

    @staticmethod
    def _base_table_style(row_count: int) -> list:
        style = [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        for row in range(2, row_count, 2):
            style.append(("BACKGROUND", (0, row), (-1, row), STRIPE_COLOR))
        return style


def _format_blood_pressure(systolic: Optional[float], diastolic: Optional[float]) -> str:
    """'120/80', one half blank when missing, '' when both are."""
    if systolic is None and diastolic is None:
        return ""
    return f"{format_metric_value(systolic)}/{format_metric_value(diastolic)}"

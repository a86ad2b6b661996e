"""
PDF report package.

Usage:
    from vitals_tracker.services.report import ReportService

    pdf_bytes = ReportService(include_charts=False).generate_pdf(records)
"""
from vitals_tracker.services.report.pdf_report import ReportService

__all__ = ["ReportService"]

"""Report building and rendering."""

from report.models import SCHEMA_VERSION, Report, ReportRecord, ReportSummary
from report.render import render_structured, render_text
from report.reporter import build_report

__all__ = [
    "SCHEMA_VERSION",
    "Report",
    "ReportRecord",
    "ReportSummary",
    "build_report",
    "render_structured",
    "render_text",
]

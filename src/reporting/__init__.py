"""Reporting module — JSON session reports for search runs."""

from .report import ReportGenerator, SearchRunReport, SessionReport

__all__ = [
    "ReportGenerator",
    "SearchRunReport",
    "SessionReport",
]

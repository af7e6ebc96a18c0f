"""Completed Todoist tasks, grouped by project, as Markdown for daily notes."""

from todoist_completed.config import Settings, load_settings
from todoist_completed.pipeline import build_report, report_for_note, report_for_note_async

__all__ = [
    "Settings",
    "load_settings",
    "build_report",
    "report_for_note",
    "report_for_note_async",
]

# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Fetch-and-format pipeline for completed tasks."""

import asyncio
import logging
from datetime import date, tzinfo

from todoist_completed.config import Settings
from todoist_completed.dates import DateResolution, resolve_target_date
from todoist_completed.integrations import todoist
from todoist_completed.report import Report, aggregate

logger = logging.getLogger(__name__)


def build_report(
    settings: Settings,
    resolution: DateResolution,
    tz: tzinfo | None = None,
) -> Report:
    """Fetch projects and completed tasks for a resolved date and format them.

    Any failure propagates unchanged; nothing is returned on error.

    Args:
        settings: Settings carrying the API token
        resolution: Target date from resolve_target_date
        tz: Zone that defines the day (defaults to local)

    Returns:
        Report with the Markdown fragment and status message
    """
    settings.require_token()

    projects = todoist.fetch_projects(settings)
    tasks = todoist.fetch_completed_tasks(settings, resolution.target, tz=tz)

    report = aggregate(tasks, projects, resolution.target, resolution.is_today)
    logger.info(report.message)
    return report


def report_for_note(
    settings: Settings,
    hint: str | None = None,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> Report:
    """Resolve the date from a note name and build its report."""
    resolution = resolve_target_date(hint, settings.date_format, today=today)
    return build_report(settings, resolution, tz=tz)


async def report_for_note_async(
    settings: Settings,
    hint: str | None = None,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> Report:
    """Run report_for_note in a worker thread."""
    return await asyncio.to_thread(report_for_note, settings, hint, today, tz)

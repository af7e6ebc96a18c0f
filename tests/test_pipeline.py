"""Tests for the fetch-and-format pipeline."""

import asyncio
from datetime import UTC, date, datetime
from unittest.mock import patch

import pytest

from todoist_completed.config import Settings
from todoist_completed.dates import DateResolution
from todoist_completed.errors import ConfigurationError, RemoteServiceError
from todoist_completed.integrations.todoist import CompletedTask
from todoist_completed.pipeline import build_report, report_for_note, report_for_note_async

SETTINGS = Settings(api_token="secret-token")
TODAY = date(2024, 5, 1)


def _task(task_id, project_id, content):
    return CompletedTask(
        id=task_id,
        project_id=project_id,
        content=content,
        completed_at=datetime(2024, 5, 1, 10, tzinfo=UTC),
    )


class TestBuildReport:
    """Test the orchestrated pipeline."""

    @patch("todoist_completed.pipeline.todoist.fetch_completed_tasks")
    @patch("todoist_completed.pipeline.todoist.fetch_projects")
    def test_report_for_today(self, mock_projects, mock_tasks):
        """Fetched data flows through to the rendered report."""
        mock_projects.return_value = {"1": "Work"}
        mock_tasks.return_value = [_task("a", "1", "Write spec")]

        report = build_report(SETTINGS, DateResolution(TODAY, "today", True), tz=UTC)

        assert report.markdown == (
            "## Tasks Completed Today\n\n### Work\n"
            "- [Write spec](https://todoist.com/showTask?id=a)\n\n"
        )
        assert report.message == "Inserted 1 tasks completed on 2024-05-01."
        mock_tasks.assert_called_once_with(SETTINGS, TODAY, tz=UTC)

    @patch("todoist_completed.pipeline.todoist.fetch_completed_tasks")
    @patch("todoist_completed.pipeline.todoist.fetch_projects")
    def test_group_order(self, mock_projects, mock_tasks):
        """Groups come out as Alpha, Zeta, No Project."""
        mock_projects.return_value = {"1": "Zeta", "2": "Alpha"}
        mock_tasks.return_value = [
            _task("a", None, "Loose"),
            _task("b", "1", "Z task"),
            _task("c", "2", "A task"),
        ]

        report = build_report(SETTINGS, DateResolution(TODAY, "today", True))

        headings = [line for line in report.markdown.splitlines() if line.startswith("### ")]
        assert headings == ["### Alpha", "### Zeta", "### No Project"]

    @patch("todoist_completed.pipeline.todoist.fetch_completed_tasks")
    @patch("todoist_completed.pipeline.todoist.fetch_projects")
    def test_no_tasks_is_empty_report(self, mock_projects, mock_tasks):
        """Zero tasks gives an empty fragment and a no-tasks message."""
        mock_projects.return_value = {}
        mock_tasks.return_value = []

        report = build_report(SETTINGS, DateResolution(date(2024, 4, 30), "x", False))

        assert report.markdown == ""
        assert report.count == 0
        assert report.message == "No tasks completed on 2024-04-30 found in Todoist."

    @patch("todoist_completed.pipeline.todoist.fetch_completed_tasks")
    @patch("todoist_completed.pipeline.todoist.fetch_projects")
    def test_missing_token_stops_before_fetch(self, mock_projects, mock_tasks):
        """No token aborts before any fetch."""
        with pytest.raises(ConfigurationError):
            build_report(Settings(), DateResolution(TODAY, "today", True))

        mock_projects.assert_not_called()
        mock_tasks.assert_not_called()

    @patch("todoist_completed.pipeline.todoist.fetch_completed_tasks")
    @patch("todoist_completed.pipeline.todoist.fetch_projects")
    def test_fetch_error_propagates(self, mock_projects, mock_tasks):
        """A failed project fetch aborts the run unchanged."""
        error = RemoteServiceError("Get Projects", 503, "unavailable")
        mock_projects.side_effect = error

        with pytest.raises(RemoteServiceError) as exc_info:
            build_report(SETTINGS, DateResolution(TODAY, "today", True))

        assert exc_info.value is error
        mock_tasks.assert_not_called()


class TestReportForNote:
    """Test resolving the date from a note name."""

    @patch("todoist_completed.pipeline.todoist.fetch_completed_tasks")
    @patch("todoist_completed.pipeline.todoist.fetch_projects")
    def test_note_name_picks_date(self, mock_projects, mock_tasks):
        """A daily note name selects its day."""
        mock_projects.return_value = {}
        mock_tasks.return_value = [_task("b", None, "")]

        report = report_for_note(SETTINGS, "2024-04-30", today=TODAY)

        assert report.target == date(2024, 4, 30)
        assert report.markdown.startswith("## Tasks Completed 2024-04-30\n")
        assert mock_tasks.call_args.args[1] == date(2024, 4, 30)

    @patch("todoist_completed.pipeline.todoist.fetch_completed_tasks")
    @patch("todoist_completed.pipeline.todoist.fetch_projects")
    def test_async_runs_same_pipeline(self, mock_projects, mock_tasks):
        """The async wrapper returns the same report."""
        mock_projects.return_value = {"1": "Work"}
        mock_tasks.return_value = [_task("a", "1", "Write spec")]

        report = asyncio.run(report_for_note_async(SETTINGS, None, today=TODAY))

        assert report.is_today is True
        assert "### Work\n" in report.markdown

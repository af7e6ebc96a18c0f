# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Todoist API integration for completed-task reports."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo

import requests

from todoist_completed.config import Settings
from todoist_completed.errors import (
    MalformedResponseError,
    NetworkError,
    RemoteServiceError,
    TruncatedResultError,
)

logger = logging.getLogger(__name__)

API_BASE = "https://api.todoist.com/api/v1"
TASK_URL = "https://todoist.com/showTask?id={task_id}"

PROJECT_PAGE_SIZE = 200
COMPLETED_PAGE_SIZE = 100
MAX_PAGES = 50


@dataclass(frozen=True)
class Project:
    id: str
    name: str


@dataclass(frozen=True)
class CompletedTask:
    """A task marked done, as reported by Todoist."""

    id: str
    project_id: str | None
    content: str
    completed_at: datetime

    @property
    def url(self) -> str:
        return TASK_URL.format(task_id=self.id)


def _to_utc_z(dt: datetime) -> str:
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _midnight(day: date, tz: tzinfo | None) -> datetime:
    # astimezone() on a naive datetime applies the system zone rules for that date
    if tz is None:
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def day_bounds(target: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Return the first and last instant of a calendar day.

    With no zone given, the system local zone's rules for that date apply,
    so days across a DST change from today get their own offset.
    """
    start = _midnight(target, tz)
    end = _midnight(target + timedelta(days=1), tz) - timedelta(milliseconds=1)
    return start, end


def parse_timestamp(value: str) -> datetime:
    """Parse a Todoist ISO timestamp into an aware UTC datetime.

    Naive timestamps are treated as UTC, which is what Todoist returns.
    """
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _get_json(settings: Settings, path: str, params: dict, endpoint: str) -> dict:
    """GET an API path and return the decoded JSON object.

    Raises:
        NetworkError: Transport failure (connection, DNS, timeout)
        RemoteServiceError: Non-200 status
        MalformedResponseError: Body is not a JSON object
    """
    token = settings.require_token()
    try:
        response = requests.get(
            f"{API_BASE}{path}",
            headers={"Authorization": f"Bearer {token}"},
            params=params,
            timeout=settings.timeout,
        )
    except requests.RequestException as e:
        raise NetworkError(f"Could not reach Todoist {endpoint} API: {e}") from e

    if response.status_code != 200:
        raise RemoteServiceError(endpoint, response.status_code, response.text)

    try:
        data = response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Todoist {endpoint} API returned invalid JSON: {e}"
        ) from e

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Todoist {endpoint} API returned {type(data).__name__}, expected an object"
        )
    return data


def _next_cursor(data: dict, page_len: int, limit: int, endpoint: str) -> str | None:
    """Read the continuation cursor, refusing to guess when it is absent."""
    if "next_cursor" not in data and page_len >= limit:
        raise TruncatedResultError(
            f"Todoist {endpoint} API returned a full page of {page_len} "
            "without a continuation cursor; results may be incomplete"
        )
    return data.get("next_cursor") or None


def _parse_project(raw) -> Project:
    if not isinstance(raw, dict) or raw.get("id") in (None, ""):
        raise MalformedResponseError(f"Project record without an id: {raw!r}")
    return Project(id=str(raw["id"]), name=str(raw.get("name") or ""))


def _parse_completed_task(raw) -> CompletedTask:
    if not isinstance(raw, dict) or raw.get("id") in (None, ""):
        raise MalformedResponseError(f"Completed task record without an id: {raw!r}")

    completed_at = raw.get("completed_at")
    if not isinstance(completed_at, str):
        raise MalformedResponseError(
            f"Completed task {raw['id']} has no completed_at timestamp"
        )
    try:
        timestamp = parse_timestamp(completed_at)
    except ValueError as e:
        raise MalformedResponseError(
            f"Completed task {raw['id']} has bad completed_at {completed_at!r}"
        ) from e

    project_id = raw.get("project_id")
    return CompletedTask(
        id=str(raw["id"]),
        project_id=str(project_id) if project_id else None,
        content=str(raw.get("content") or ""),
        completed_at=timestamp,
    )


def fetch_projects(settings: Settings) -> dict[str, str]:
    """Get all Todoist projects as an ID -> name map.

    Follows next_cursor until every page has been read.

    Args:
        settings: Settings carrying the API token and timeout

    Returns:
        Dict mapping project_id to project_name (empty if there are none)

    Raises:
        ConfigurationError: No API token configured
        RemoteServiceError, NetworkError, MalformedResponseError, TruncatedResultError
    """
    settings.require_token()

    projects: dict[str, str] = {}
    cursor = None
    for page in range(MAX_PAGES):
        params: dict = {"limit": PROJECT_PAGE_SIZE}
        if cursor:
            params["cursor"] = cursor

        data = _get_json(settings, "/projects", params, "Get Projects")
        results = data.get("results") or []
        if not isinstance(results, list):
            raise MalformedResponseError("Todoist projects response 'results' is not a list")

        for raw in results:
            project = _parse_project(raw)
            projects[project.id] = project.name
        logger.debug(f"Projects page {page + 1}: {len(results)} project(s)")

        cursor = _next_cursor(data, len(results), PROJECT_PAGE_SIZE, "Get Projects")
        if not cursor:
            break
    else:
        raise TruncatedResultError(f"Gave up on projects after {MAX_PAGES} pages")

    logger.info(f"Fetched {len(projects)} Todoist project(s)")
    return projects


def fetch_completed_tasks(
    settings: Settings,
    target: date,
    tz: tzinfo | None = None,
) -> list[CompletedTask]:
    """Get tasks completed on a calendar day.

    Sends the day's bounds to Todoist and then filters locally, so only
    records whose completion time falls on the target day in the local zone
    are returned.

    Args:
        settings: Settings carrying the API token and timeout
        target: Calendar day to report on
        tz: Zone that defines the day (defaults to the system local zone)

    Returns:
        Completed tasks in the order Todoist returned them; empty if none

    Raises:
        ConfigurationError: No API token configured
        RemoteServiceError, NetworkError, MalformedResponseError, TruncatedResultError
    """
    settings.require_token()
    start, end = day_bounds(target, tz)

    tasks: list[CompletedTask] = []
    dropped = 0
    cursor = None
    for page in range(MAX_PAGES):
        params: dict = {
            "since": _to_utc_z(start),
            "until": _to_utc_z(end),
            "limit": COMPLETED_PAGE_SIZE,
        }
        if cursor:
            params["cursor"] = cursor

        data = _get_json(
            settings, "/tasks/completed/by_completion_date", params, "Activity"
        )
        items = data.get("items")
        if not isinstance(items, list):
            raise MalformedResponseError(
                "Invalid response structure from Todoist completed tasks API"
            )

        for raw in items:
            task = _parse_completed_task(raw)
            if task.completed_at.astimezone(tz).date() == target:
                tasks.append(task)
            else:
                dropped += 1
        logger.debug(f"Completed tasks page {page + 1}: {len(items)} item(s)")

        cursor = _next_cursor(data, len(items), COMPLETED_PAGE_SIZE, "Activity")
        if not cursor:
            break
    else:
        raise TruncatedResultError(
            f"Gave up on completed tasks after {MAX_PAGES} pages"
        )

    if dropped:
        logger.debug(f"Dropped {dropped} completed task(s) outside {target.isoformat()}")
    logger.info(f"Fetched {len(tasks)} task(s) completed on {target.isoformat()}")
    return tasks

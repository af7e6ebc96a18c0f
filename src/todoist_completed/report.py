# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Group completed tasks by project and render them as Markdown."""

from dataclasses import dataclass, field
from datetime import date

from todoist_completed.integrations.todoist import CompletedTask

NO_PROJECT = "No Project"


@dataclass
class TaskGroup:
    project_id: str | None
    name: str
    tasks: list[CompletedTask] = field(default_factory=list)


@dataclass(frozen=True)
class Report:
    """Rendered Markdown plus the status line to show the user."""

    markdown: str
    count: int
    target: date
    is_today: bool
    message: str


def _display_name(project_id: str | None, projects: dict[str, str]) -> str:
    if project_id is None:
        return NO_PROJECT
    name = projects.get(project_id)
    if name:
        return name
    return f"Unknown Project (ID: {project_id})"


def group_tasks(
    tasks: list[CompletedTask],
    projects: dict[str, str],
) -> list[TaskGroup]:
    """Partition tasks by project and order the groups.

    Groups sort by display name, case-insensitively; the no-project group is
    always last. Tasks keep their fetch order within a group.

    Args:
        tasks: Completed tasks in fetch order
        projects: Project id -> name map

    Returns:
        Ordered list of TaskGroup
    """
    grouped: dict[str | None, TaskGroup] = {}
    for task in tasks:
        group = grouped.get(task.project_id)
        if group is None:
            group = TaskGroup(task.project_id, _display_name(task.project_id, projects))
            grouped[task.project_id] = group
        group.tasks.append(task)

    def sort_key(group: TaskGroup):
        # Name ties fall back to the exact name and then the id
        return (
            group.project_id is None,
            group.name.casefold(),
            group.name,
            group.project_id or "",
        )

    return sorted(grouped.values(), key=sort_key)


def render_markdown(groups: list[TaskGroup], target: date, is_today: bool) -> str:
    """Render grouped tasks; an empty group list renders as ""."""
    if not groups:
        return ""

    heading = "Today" if is_today else target.isoformat()
    lines = [f"## Tasks Completed {heading}\n", "\n"]
    for group in groups:
        lines.append(f"### {group.name}\n")
        for task in group.tasks:
            label = task.content or f"Task ID {task.id}"
            lines.append(f"- [{label}]({task.url})\n")
        lines.append("\n")
    return "".join(lines)


def status_message(count: int, target: date, is_today: bool) -> str:
    if count == 0:
        friendly = "today" if is_today else target.isoformat()
        return f"No tasks completed on {friendly} found in Todoist."
    return f"Inserted {count} tasks completed on {target.isoformat()}."


def aggregate(
    tasks: list[CompletedTask],
    projects: dict[str, str],
    target: date,
    is_today: bool,
) -> Report:
    """Aggregate tasks into a Report.

    Args:
        tasks: Completed tasks for the target day
        projects: Project id -> name map
        target: Day being reported
        is_today: Whether target is the current day

    Returns:
        Report with the Markdown fragment and a status message
    """
    groups = group_tasks(tasks, projects)
    return Report(
        markdown=render_markdown(groups, target, is_today),
        count=len(tasks),
        target=target,
        is_today=is_today,
        message=status_message(len(tasks), target, is_today),
    )

# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Command line interface for completed-task reports.

Markdown goes to stdout; notices and errors go to stderr.
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from todoist_completed.config import load_settings
from todoist_completed.errors import TodoistError

logger = logging.getLogger(__name__)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (api_token, date_format, timeout)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None):
    """Todoist completed-task reports for daily notes."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command("insert")
@click.option(
    "--note",
    "note_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Daily note; its name picks the date",
)
@click.option("--date-hint", default=None, help="Note name to match instead of --note")
@click.option("--date-format", default=None, help="Daily note format, e.g. YYYY-MM-DD")
@click.option("--after", default=None, help="Insert after this line of the note")
@click.option("--write", is_flag=True, help="Write into --note instead of printing")
@click.pass_context
def insert_cmd(
    ctx: click.Context,
    note_path: Path | None,
    date_hint: str | None,
    date_format: str | None,
    after: str | None,
    write: bool,
):
    """Insert completed tasks for day."""
    from todoist_completed.dates import resolve_target_date
    from todoist_completed.notes import insert_fragment
    from todoist_completed.pipeline import build_report

    if write and note_path is None:
        raise click.UsageError("--write needs --note")

    hint = date_hint if date_hint is not None else (note_path.stem if note_path else None)

    try:
        settings = load_settings(ctx.obj["config_path"]).with_date_format(date_format)
        resolution = resolve_target_date(hint, settings.date_format)
        settings.require_token()

        click.echo(f"Fetching Todoist tasks completed for {resolution.source}...", err=True)
        report = build_report(settings, resolution)
    except TodoistError as e:
        logger.debug(f"Report failed: {e}")
        _fail(str(e))
    except Exception as e:
        logger.exception(f"Unexpected error building report: {e}")
        _fail(str(e))

    if write:
        try:
            insert_fragment(note_path, report.markdown, after=after)
        except OSError as e:
            _fail(f"Could not write {note_path}: {e}")
    else:
        click.echo(report.markdown, nl=False)
    click.echo(report.message, err=True)


@cli.command("projects")
@click.pass_context
def projects_cmd(ctx: click.Context):
    """List Todoist projects as JSON."""
    from todoist_completed.integrations.todoist import fetch_projects

    try:
        settings = load_settings(ctx.obj["config_path"])
        projects = fetch_projects(settings)
    except TodoistError as e:
        _fail(str(e))
    click.echo(json.dumps(projects, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()

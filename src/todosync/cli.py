"""todosync CLI - push a task list into Todoist."""

import json
import logging
import sys

import click

from .adapters.file_tasks import FileTaskSource
from .config import CONFIG_FILE, ConfigurationError, load_config
from .core.tasks import TaskParseError
from .workflows import SyncReport, run_sync

EXIT_FAILED = 1
EXIT_USAGE = 2


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


def _show_report(report: SyncReport, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    for result in report.results:
        if report.dry_run:
            marker = "-"
        else:
            marker = "ok" if result.submitted else "FAILED"
        reminder = f" (reminder {result.task.due_time})" if result.task.due_time else ""
        click.echo(f"[{marker:6}] {result.task.name}{reminder}")
        if result.error:
            click.echo(f"         {result.error}")
        elif result.decode_error:
            click.echo(f"         response not decoded: {result.decode_error}")

    if not report.dry_run:
        submitted = len(report.results) - len(report.failed)
        click.echo(f"\n{submitted}/{len(report.results)} tasks submitted.")


@click.group()
@click.version_option()
def main():
    """todosync - Sync a task list into Todoist."""
    pass


@main.command()
@click.option("--tasks-file", "-f", type=click.Path(dir_okay=False), default=None,
              help="Task list JSON (defaults to the configured tasks_file)")
@click.option("--batch/--no-batch", default=None,
              help="Send every task in one request (defaults to the configured batch)")
@click.option("--dry-run", is_flag=True, help="Build requests without sending them")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def sync(tasks_file: str | None, batch: bool | None, dry_run: bool, as_json: bool, debug: bool):
    """Create every task (and its reminder) in Todoist."""
    _setup_logging(debug)

    try:
        report = run_sync(tasks_file=tasks_file, batch=batch, dry_run=dry_run)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_USAGE)
    except TaskParseError as e:
        click.echo(f"Task list error: {e}", err=True)
        sys.exit(EXIT_USAGE)

    _show_report(report, as_json)
    if not report.ok:
        sys.exit(EXIT_FAILED)


@main.command()
@click.option("--tasks-file", "-f", type=click.Path(dir_okay=False), default=None,
              help="Task list JSON (defaults to the configured tasks_file)")
@click.option("--batch/--no-batch", default=None, help="Show a single batched request")
def preview(tasks_file: str | None, batch: bool | None):
    """Print the request bodies that would be sent."""
    try:
        report = run_sync(tasks_file=tasks_file, batch=batch, dry_run=True)
    except (ConfigurationError, TaskParseError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_USAGE)

    click.echo(json.dumps([r.to_dict() for r in report.requests], indent=2))


@main.command()
@click.option("--tasks-file", "-f", type=click.Path(dir_okay=False), default=None,
              help="Task list JSON (defaults to the configured tasks_file)")
def check(tasks_file: str | None):
    """Validate configuration and the task list."""
    try:
        config = load_config()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_USAGE)
    problems = []

    click.echo(f"Config file: {CONFIG_FILE}{'' if CONFIG_FILE.exists() else ' (not found)'}")
    click.echo(f"Timezone:    {config.timezone}")
    click.echo(f"Sync URL:    {config.sync_url}")
    click.echo(f"Token:       {'set' if config.todoist_token else 'MISSING'}")

    try:
        config.validate()
    except ConfigurationError as e:
        problems.append(str(e))

    path = tasks_file or config.tasks_file
    try:
        tasks = FileTaskSource(path).load()
        reminders = sum(1 for t in tasks if t.has_reminder)
        click.echo(f"Tasks:       {len(tasks)} in {path} ({reminders} with reminders)")
    except TaskParseError as e:
        problems.append(str(e))

    if problems:
        click.echo()
        for problem in problems:
            click.echo(f"Error: {problem}", err=True)
        sys.exit(EXIT_USAGE)

    click.echo("\nAll good.")

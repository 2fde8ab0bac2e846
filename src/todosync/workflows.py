"""Shared sync workflow between the CLI and the scheduled handler.

Load -> for each task: build -> send -> decode. Each task's outcome is
recorded on its own TaskResult; a failed submission never stops the
remaining tasks.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .adapters.file_tasks import FileTaskSource
from .adapters.todoist_sync import SyncError, TodoistSyncAdapter
from .config import Config, load_config
from .core.commands import (
    Command,
    RequestEnvelope,
    ResponseDecodeError,
    ResponseEnvelope,
    build_commands,
    build_request,
    decode_response,
)
from .core.tasks import TaskDescriptor
from .ports import SyncService, TaskSource

logger = logging.getLogger(__name__)


@dataclass
class TaskResult:
    """Outcome of syncing one task."""

    task: TaskDescriptor
    commands: list[Command]
    submitted: bool = False
    error: str | None = None
    decode_error: str | None = None
    responses: list[ResponseEnvelope] = field(default_factory=list)

    @property
    def item_temp_id(self) -> str:
        return self.commands[0].temp_id

    @property
    def item_real_id(self) -> str | None:
        """Server id assigned to the item, if the response reported one."""
        for response in self.responses:
            if self.item_temp_id in response.temp_id_mapping:
                return response.temp_id_mapping[self.item_temp_id]
        return None

    def to_dict(self) -> dict:
        data = self.task.to_dict()
        data.update({
            "commands": [c.type for c in self.commands],
            "submitted": self.submitted,
            "item_id": self.item_real_id,
            "error": self.error,
            "decode_error": self.decode_error,
        })
        return data


@dataclass
class SyncReport:
    """Per-task results of one run."""

    results: list[TaskResult] = field(default_factory=list)
    requests: list[RequestEnvelope] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        """True when every task was submitted (always True for a dry run)."""
        return self.dry_run or all(r.submitted for r in self.results)

    @property
    def failed(self) -> list[TaskResult]:
        if self.dry_run:
            return []
        return [r for r in self.results if not r.submitted]

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "dry_run": self.dry_run,
            "submitted": sum(1 for r in self.results if r.submitted),
            "failed": len(self.failed),
            "tasks": [r.to_dict() for r in self.results],
        }


def _dispatch(service: SyncService, request: RequestEnvelope, results: list[TaskResult]) -> None:
    """Send one request and record the outcome on every result it carries."""
    names = ", ".join(r.task.name for r in results)
    try:
        body = service.submit(request)
    except SyncError as e:
        logger.error(f"Failed to submit {names}: {e}")
        for result in results:
            result.error = str(e)
        return

    for result in results:
        result.submitted = True
    logger.info(f"Submitted {len(request.commands)} commands for {names}")

    try:
        responses = decode_response(body)
    except ResponseDecodeError as e:
        logger.warning(f"Submitted {names} but could not decode the response: {e}")
        for result in results:
            result.decode_error = str(e)
        return

    for response in responses:
        for command_uuid, status in response.failed_commands.items():
            logger.warning(f"Command {command_uuid} was not applied: {status}")
        logger.debug(f"temp_id_mapping: {response.temp_id_mapping}")
    for result in results:
        result.responses = list(responses)


def build_results(
    tasks: list[TaskDescriptor],
    config: Config,
    now: datetime | None = None,
) -> list[TaskResult]:
    """Build every task's commands against a single reference time."""
    now = now or datetime.now(config.zone())
    return [
        TaskResult(
            task=task,
            commands=build_commands(
                task,
                now,
                timezone=config.timezone,
                lang=config.language,
                priority=config.priority,
            ),
        )
        for task in tasks
    ]


def sync_tasks(
    tasks: list[TaskDescriptor],
    service: SyncService | None,
    config: Config,
    now: datetime | None = None,
    batch: bool = False,
    dry_run: bool = False,
) -> SyncReport:
    """
    Build and submit commands for every task.

    One request per task by default; ``batch`` puts every task's commands
    in a single request. ``dry_run`` builds the requests without sending.
    """
    results = build_results(tasks, config, now)
    report = SyncReport(results=results, dry_run=dry_run)

    if batch:
        groups = [results] if results else []
    else:
        groups = [[r] for r in results]

    for group in groups:
        request = build_request([c for r in group for c in r.commands])
        report.requests.append(request)
        if dry_run:
            continue
        if service is None:
            raise ValueError("A sync service is required unless dry_run is set")
        _dispatch(service, request, group)

    if not dry_run:
        logger.info(
            f"Sync finished: {len(results) - len(report.failed)}/{len(results)} tasks submitted"
        )
    return report


def run_sync(
    config: Config | None = None,
    tasks: list[TaskDescriptor] | None = None,
    tasks_file: Path | str | None = None,
    batch: bool | None = None,
    dry_run: bool = False,
    service: SyncService | None = None,
    source: TaskSource | None = None,
    now: datetime | None = None,
) -> SyncReport:
    """
    Validate configuration, load tasks, and run the sync.

    Raises ConfigurationError or TaskParseError before any network call.
    """
    config = config or load_config()
    config.validate(require_token=not dry_run)

    if tasks is None:
        source = source or FileTaskSource(tasks_file or config.tasks_file)
        tasks = source.load()

    if service is None and not dry_run:
        service = TodoistSyncAdapter(config)

    return sync_tasks(
        tasks,
        service,
        config,
        now=now,
        batch=config.batch if batch is None else batch,
        dry_run=dry_run,
    )

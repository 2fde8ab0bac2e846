"""Scheduled-function entry point (AWS Lambda style handler)."""

import logging

from .config import ConfigurationError, load_config, parse_bool
from .core.tasks import TaskParseError, parse_tasks
from .workflows import run_sync

logger = logging.getLogger(__name__)


def handler(event: dict | None = None, context: object = None) -> dict:
    """
    Run one sync and return a JSON-serializable summary.

    ``event`` may carry ``tasks`` (an inline task list in the task file
    format) and ``batch``. Configuration and input errors are reported in
    the summary instead of raised, so the scheduler sees a clean result.
    """
    event = event or {}
    try:
        config = load_config()
        tasks = parse_tasks(event["tasks"]) if "tasks" in event else None
        batch = event.get("batch")
        if batch is not None:
            batch = parse_bool("batch", batch)
        report = run_sync(config, tasks=tasks, batch=batch)
    except (ConfigurationError, TaskParseError) as e:
        logger.error(f"Sync aborted: {e}")
        return {"ok": False, "error": str(e), "tasks": []}

    return report.to_dict()

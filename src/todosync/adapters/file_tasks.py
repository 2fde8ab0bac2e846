"""File-based task list adapter."""

import json
import logging
from pathlib import Path

from todosync.core.tasks import TaskDescriptor, TaskParseError, parse_tasks

logger = logging.getLogger(__name__)


class FileTaskSource:
    """
    JSON file task source.

    Implements TaskSource protocol. The file holds an array of
    ``{"name": ..., "due_time": "HH:MM"}`` objects.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> list[TaskDescriptor]:
        """Read and parse the task file."""
        if not self.path.exists():
            raise TaskParseError(f"Task file not found: {self.path}")

        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise TaskParseError(f"Failed to parse {self.path}: {e}") from e
        except OSError as e:
            raise TaskParseError(f"Failed to read {self.path}: {e}") from e

        tasks = parse_tasks(data)
        logger.info(f"Loaded {len(tasks)} tasks from {self.path}")
        return tasks

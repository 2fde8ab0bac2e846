"""Pure task descriptor logic - no I/O dependencies."""

import re
from dataclasses import dataclass

DUE_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class TaskParseError(Exception):
    """Raised when the task list cannot be read or is malformed."""

    pass


@dataclass(frozen=True)
class TaskDescriptor:
    """One to-do item to create, with an optional HH:MM reminder time."""

    name: str
    due_time: str | None = None

    @property
    def has_reminder(self) -> bool:
        return self.due_time is not None

    @classmethod
    def from_dict(cls, data: dict, index: int = 0) -> "TaskDescriptor":
        """Create a TaskDescriptor from one entry of the task list."""
        if not isinstance(data, dict):
            raise TaskParseError(f"Task #{index} must be an object, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise TaskParseError(f"Task #{index} is missing a name")

        due_time = data.get("due_time") or None
        if due_time is not None:
            if not isinstance(due_time, str) or not DUE_TIME_PATTERN.match(due_time.strip()):
                raise TaskParseError(
                    f"Task #{index} ({name!r}) has invalid due_time {due_time!r}, expected HH:MM"
                )
            due_time = due_time.strip()

        return cls(name=name.strip(), due_time=due_time)

    def to_dict(self) -> dict:
        data = {"name": self.name}
        if self.due_time:
            data["due_time"] = self.due_time
        return data


def parse_tasks(data: object) -> list[TaskDescriptor]:
    """
    Parse a decoded task list into descriptors, preserving order.

    Pure function - no I/O.
    """
    if not isinstance(data, list):
        raise TaskParseError(f"Task list must be a JSON array, got {type(data).__name__}")
    return [TaskDescriptor.from_dict(item, i) for i, item in enumerate(data)]

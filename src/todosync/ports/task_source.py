"""Task source interface."""

from typing import Protocol

from todosync.core.tasks import TaskDescriptor


class TaskSource(Protocol):
    """Interface for loading task descriptors from any store."""

    def load(self) -> list[TaskDescriptor]:
        """Load all task descriptors, in order."""
        ...

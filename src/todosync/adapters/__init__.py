"""Adapters - I/O implementations of ports."""

from .file_tasks import FileTaskSource
from .todoist_sync import SyncError, TodoistSyncAdapter

__all__ = [
    "FileTaskSource",
    "SyncError",
    "TodoistSyncAdapter",
]

"""Ports - interfaces/protocols for external dependencies."""

from .task_source import TaskSource
from .sync_service import SyncService

__all__ = [
    "TaskSource",
    "SyncService",
]

"""Sync service interface."""

from typing import Protocol

from todosync.core.commands import RequestEnvelope


class SyncService(Protocol):
    """Interface for submitting command batches to a to-do service."""

    def submit(self, request: RequestEnvelope) -> str:
        """Send one request. Returns the raw response body."""
        ...

"""Todoist Sync API adapter - HTTP client for command submission."""

import logging

import requests

from todosync.config import Config, load_config
from todosync.core.commands import RequestEnvelope

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """Raised when a request could not be delivered or was rejected."""

    pass


class TodoistSyncAdapter:
    """
    Todoist Sync API adapter.

    Implements SyncService protocol. One authenticated POST per request,
    no retries. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._token = self.config.require_token()
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._token}",
        }

    def submit(self, request: RequestEnvelope) -> str:
        """POST the request envelope and return the response body."""
        logger.debug(f"Submitting {len(request.commands)} commands to {self.config.sync_url}")
        try:
            resp = self._session.post(
                self.config.sync_url,
                data=request.to_json(),
                headers=self._headers(),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise SyncError(f"Request to {self.config.sync_url} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise SyncError(f"Sync API returned {resp.status_code}: {resp.text[:200]}")

        return resp.text

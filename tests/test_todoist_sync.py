"""Tests for the Todoist Sync API adapter."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from todosync.adapters.todoist_sync import SyncError, TodoistSyncAdapter
from todosync.config import Config, ConfigurationError
from todosync.core.commands import build_commands, build_request
from todosync.core.tasks import TaskDescriptor


@pytest.fixture
def session():
    session = MagicMock()
    response = MagicMock()
    response.status_code = 200
    response.text = '{"sync_status": {}, "temp_id_mapping": {}}'
    session.post.return_value = response
    return session


@pytest.fixture
def request_envelope(now):
    return build_request(build_commands(TaskDescriptor("Buy milk", "09:30"), now, "Asia/Singapore"))


class TestTodoistSyncAdapter:
    def test_requires_token(self, session):
        with pytest.raises(ConfigurationError):
            TodoistSyncAdapter(Config(), session=session)
        session.post.assert_not_called()

    def test_posts_json_with_bearer_token(self, config, session, request_envelope):
        adapter = TodoistSyncAdapter(config, session=session)
        body = adapter.submit(request_envelope)

        assert body == session.post.return_value.text
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == config.sync_url
        assert kwargs["headers"] == {
            "Content-Type": "application/json",
            "Authorization": "Bearer test-token",
        }
        assert kwargs["timeout"] == config.request_timeout
        sent = json.loads(kwargs["data"])
        assert sent["sync_token"] == "*"
        assert [c["type"] for c in sent["commands"]] == ["item_add", "reminder_add"]

    def test_http_error_status(self, config, session, request_envelope):
        session.post.return_value.status_code = 403
        session.post.return_value.text = "Forbidden"
        adapter = TodoistSyncAdapter(config, session=session)

        with pytest.raises(SyncError, match="403"):
            adapter.submit(request_envelope)

    @pytest.mark.parametrize("status", [101, 302, 304])
    def test_non_2xx_status_is_an_error(self, config, session, request_envelope, status):
        session.post.return_value.status_code = status
        adapter = TodoistSyncAdapter(config, session=session)

        with pytest.raises(SyncError, match=str(status)):
            adapter.submit(request_envelope)

    def test_transport_error(self, config, session, request_envelope):
        session.post.side_effect = requests.ConnectionError("connection refused")
        adapter = TodoistSyncAdapter(config, session=session)

        with pytest.raises(SyncError, match="connection refused") as exc_info:
            adapter.submit(request_envelope)
        assert "test-token" not in str(exc_info.value)

    def test_custom_sync_url(self, session, request_envelope):
        config = Config(todoist_token="t", sync_url="https://example.test/sync")
        TodoistSyncAdapter(config, session=session).submit(request_envelope)
        assert session.post.call_args[0][0] == "https://example.test/sync"

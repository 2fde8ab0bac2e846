"""Shared fixtures."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from todosync.config import Config


@pytest.fixture
def now():
    return datetime(2024, 3, 15, 8, 0, tzinfo=ZoneInfo("Asia/Singapore"))


@pytest.fixture
def config(tmp_path):
    return Config(
        todoist_token="test-token",
        timezone="Asia/Singapore",
        tasks_file=str(tmp_path / "task.json"),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials out of tests and undo anything .env loading sets."""
    for key in ("TODOIST_KEY", "TODOSYNC_TIMEZONE", "TODOSYNC_TASKS_FILE"):
        # setenv first so teardown removes values set behind monkeypatch's back
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)

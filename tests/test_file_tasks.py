"""Tests for the JSON file task source."""

import json

import pytest

from todosync.adapters.file_tasks import FileTaskSource
from todosync.core.tasks import TaskDescriptor, TaskParseError


class TestFileTaskSource:
    def test_loads_tasks(self, tmp_path):
        path = tmp_path / "task.json"
        path.write_text(json.dumps([
            {"name": "Drink water", "due_time": "10:00"},
            {"name": "Stretch"},
        ]))
        tasks = FileTaskSource(path).load()
        assert tasks == [TaskDescriptor("Drink water", "10:00"), TaskDescriptor("Stretch")]

    def test_accepts_string_path(self, tmp_path):
        path = tmp_path / "task.json"
        path.write_text("[]")
        assert FileTaskSource(str(path)).load() == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(TaskParseError, match="not found"):
            FileTaskSource(tmp_path / "task.json").load()

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "task.json"
        path.write_text('[{"name": "x",')
        with pytest.raises(TaskParseError, match="Failed to parse"):
            FileTaskSource(path).load()

    def test_invalid_entries(self, tmp_path):
        path = tmp_path / "task.json"
        path.write_text('[{"name": "x", "due_time": "8pm"}]')
        with pytest.raises(TaskParseError, match="due_time"):
            FileTaskSource(path).load()

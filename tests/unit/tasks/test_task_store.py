"""
Tests for the task and complexity report models and their JSON storage.
"""

import json

import pytest

from task_master.exceptions import TasksFileError
from task_master.tasks.models import ComplexityReport, Task, TaskStore
from task_master.tasks.storage import (
    load_complexity_report,
    load_tasks,
    save_complexity_report,
    save_tasks,
)


class TestModels:
    def test_task_round_trip_keeps_unknown_keys(self):
        raw = {
            "id": 7,
            "title": "Ship it",
            "status": "in-progress",
            "dependencies": [1, "2.1"],
            "testStrategy": "manual",
            "owner": "ops",
            "subtasks": [{"id": 1, "title": "Tag release", "dependencies": []}],
        }

        task = Task.from_dict(raw)
        data = task.to_dict()

        assert task.test_strategy == "manual"
        assert task.subtasks[0].status == "pending"
        assert data["owner"] == "ops"
        assert data["dependencies"] == [1, "2.1"]
        assert data["subtasks"][0]["title"] == "Tag release"

    def test_task_without_id_is_rejected(self):
        with pytest.raises(ValueError):
            Task.from_dict({"title": "No id"})

    def test_next_subtask_id(self):
        task = Task(id=1, title="t", subtasks=[Task(id=2, title="a"), Task(id=5, title="b")])

        assert task.next_subtask_id() == 6
        assert Task(id=2, title="empty").next_subtask_id() == 1

    def test_store_requires_task_list(self):
        with pytest.raises(ValueError):
            TaskStore.from_dict({"meta": {}})

    def test_report_lookup(self, sample_report):
        report = ComplexityReport.from_dict(sample_report)

        assert report.score_for(3) == 8
        assert report.find(2).recommended_subtasks == 3
        assert report.find(99) is None
        assert report.to_dict()["complexityAnalysis"][1]["complexityScore"] == 8


class TestStorage:
    def test_load_and_save_tasks(self, project_dir):
        path = project_dir / "tasks" / "tasks.json"
        store = load_tasks(path)
        store.get(2).status = "done"

        save_tasks(path, store)

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["tasks"][1]["status"] == "done"
        assert saved["meta"] == {"projectName": "Sample Project"}

    def test_missing_tasks_file(self, tmp_path):
        with pytest.raises(TasksFileError) as exc_info:
            load_tasks(tmp_path / "tasks" / "tasks.json")
        assert "Tasks file not found" in str(exc_info.value)

    def test_invalid_tasks_file(self, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text('{"tasks": "nope"}', encoding="utf-8")

        with pytest.raises(TasksFileError):
            load_tasks(path)

    def test_report_save_creates_directories(self, tmp_path, sample_report):
        path = tmp_path / "scripts" / "task-complexity-report.json"

        save_complexity_report(path, ComplexityReport.from_dict(sample_report))

        assert load_complexity_report(path).score_for(2) == 4

    def test_unreadable_report_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "report.json"
        path.write_text("not json", encoding="utf-8")

        assert load_complexity_report(path) is None
        assert load_complexity_report(None) is None
        assert load_complexity_report(tmp_path / "missing.json") is None
        assert "Ignoring unreadable complexity report" in caplog.text

"""
Tests for list, next, show and expand.
"""

import json
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from task_master.cli.main import cli
from task_master.llm.exceptions import AllProvidersFailedError
from task_master.llm.service import TextResult


def run(runner, project_dir, *args):
    return runner.invoke(cli, ["--project-root", str(project_dir), *args])


def has_row(output, *cells):
    """True when some line of a plain table reads exactly ``cells``."""
    return any(line.split() == [str(cell) for cell in cells] for line in output.splitlines())


def write_config(project_dir, data):
    (project_dir / ".taskmasterconfig").write_text(json.dumps(data), encoding="utf-8")


class TestListCommand:
    def setup_method(self):
        self.runner = CliRunner()

    def test_list_all(self, project_dir):
        result = run(self.runner, project_dir, "list")

        assert result.exit_code == 0, result.output
        assert "Progress: 25% complete" in result.output
        assert "Implement task storage" in result.output
        assert "Complexity" not in result.output
        assert "Next Task: #3 - Build the CLI" in result.output

    def test_status_filter(self, project_dir):
        result = run(self.runner, project_dir, "list", "--status", "done")

        assert result.exit_code == 0
        assert "Set up repository" in result.output
        assert "Write documentation" not in result.output

    def test_complexity_column_from_report(self, project_dir, write_json, sample_report):
        write_json(project_dir / "reports" / "c.json", sample_report)

        result = run(self.runner, project_dir, "list", "--report-path", "reports/c.json")

        assert result.exit_code == 0
        assert "Complexity" in result.output

    def test_with_subtasks_and_tasks_file_alias(self, project_dir, write_json, sample_tasks):
        sample_tasks["tasks"][2]["subtasks"] = [{"id": 1, "title": "Add list command"}]
        write_json(project_dir / "alt.json", sample_tasks)

        result = run(self.runner, project_dir, "list", "--tasks-file", "alt.json", "--with-subtasks")

        assert result.exit_code == 0
        assert "3.1" in result.output
        assert "Add list command" in result.output

    def test_missing_tasks_file(self, tmp_path):
        result = run(self.runner, tmp_path, "list")

        assert result.exit_code == 1
        assert "Tasks file not found" in result.output


class TestNextAndShow:
    def setup_method(self):
        self.runner = CliRunner()

    def test_next(self, project_dir):
        result = run(self.runner, project_dir, "next")

        assert result.exit_code == 0
        assert "Next Task: #3 - Build the CLI" in result.output

    def test_next_when_all_done(self, project_dir, write_json, sample_tasks):
        for task in sample_tasks["tasks"]:
            task["status"] = "done"
        write_json(project_dir / "tasks" / "tasks.json", sample_tasks)

        result = run(self.runner, project_dir, "next")

        assert result.exit_code == 0
        assert "No eligible tasks found" in result.output

    def test_show_task_by_argument_and_option(self, project_dir):
        by_arg = run(self.runner, project_dir, "show", "2")
        by_opt = run(self.runner, project_dir, "show", "--id", "2")

        for result in (by_arg, by_opt):
            assert result.exit_code == 0
            assert "Task #2: Implement task storage" in result.output
            assert "Use JSON files" in result.output

    def test_show_subtask_and_status_filter(self, project_dir, write_json, sample_tasks):
        sample_tasks["tasks"][2]["subtasks"] = [
            {"id": 1, "title": "Add list command", "status": "done"},
            {"id": 2, "title": "Add show command", "status": "pending"},
        ]
        write_json(project_dir / "tasks" / "tasks.json", sample_tasks)

        sub = run(self.runner, project_dir, "show", "3.2")
        filtered = run(self.runner, project_dir, "show", "3", "--status", "pending")

        assert sub.exit_code == 0
        assert "Subtask #3.2: Add show command" in sub.output
        assert "Add show command" in filtered.output
        assert "Add list command" not in filtered.output

    def test_show_unknown_task(self, project_dir):
        result = run(self.runner, project_dir, "show", "99")

        assert result.exit_code == 1
        assert "Task with ID 99 not found." in result.output

    def test_show_requires_id(self, project_dir):
        result = run(self.runner, project_dir, "show")
        assert result.exit_code == 2


class TestReportResolution:
    """list, next and show find the report the same way analyze-complexity writes it."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_list_uses_config_entry(self, project_dir, write_json, sample_report):
        write_json(project_dir / "custom" / "report.json", sample_report)
        write_config(project_dir, {"paths": {"complexityReport": "custom/report.json"}})

        result = run(self.runner, project_dir, "list")

        assert result.exit_code == 0, result.output
        assert "Complexity" in result.output

    def test_list_uses_scripts_default(self, project_dir, write_json, sample_report):
        write_json(project_dir / "scripts" / "task-complexity-report.json", sample_report)

        result = run(self.runner, project_dir, "list")

        assert result.exit_code == 0, result.output
        assert "Complexity" in result.output

    def test_next_with_report_path(self, project_dir, write_json, sample_report):
        write_json(project_dir / "reports" / "c.json", sample_report)

        without = run(self.runner, project_dir, "next")
        result = run(self.runner, project_dir, "next", "--report-path", "reports/c.json")

        assert not has_row(without.output, "Complexity", 8)
        assert result.exit_code == 0, result.output
        assert has_row(result.output, "Complexity", 8)

    def test_next_uses_config_entry(self, project_dir, write_json, sample_report):
        write_json(project_dir / "custom" / "report.json", sample_report)
        write_config(project_dir, {"paths": {"complexityReport": "custom/report.json"}})

        result = run(self.runner, project_dir, "next")

        assert has_row(result.output, "Complexity", 8)

    def test_show_with_report_path(self, project_dir, write_json, sample_report):
        write_json(project_dir / "reports" / "c.json", sample_report)

        result = run(self.runner, project_dir, "show", "2", "--report-path", "reports/c.json")

        assert result.exit_code == 0, result.output
        assert has_row(result.output, "Complexity", 4)
        assert has_row(result.output, "Recommended", "subtasks", 3)

    def test_show_uses_scripts_default(self, project_dir, write_json, sample_report):
        write_json(project_dir / "scripts" / "task-complexity-report.json", sample_report)

        result = run(self.runner, project_dir, "show", "3")

        assert has_row(result.output, "Recommended", "subtasks", 6)

    def test_missing_report_path_warns(self, project_dir):
        result = run(self.runner, project_dir, "next", "--report-path", "missing.json")

        assert result.exit_code == 0
        assert "Complexity report not found:" in result.output
        assert "missing.json" in result.output

class TestExpandCommand:
    def setup_method(self):
        self.runner = CliRunner()

    @staticmethod
    def answer(count):
        items = [{"id": i + 1, "title": f"Step {i + 1}", "dependencies": []} for i in range(count)]
        return TextResult(main_result=json.dumps(items), telemetry={})

    def test_expand_without_report_warns_and_uses_default(self, project_dir):
        with patch(
            "task_master.tasks.expand.generate_text_service",
            new=AsyncMock(return_value=self.answer(5)),
        ):
            result = run(self.runner, project_dir, "expand", "--id", "2")

        assert result.exit_code == 0, result.output
        assert "Complexity report not found in default locations" in result.output
        assert "Added 5 subtasks to task 2" in result.output
        saved = json.loads((project_dir / "tasks" / "tasks.json").read_text(encoding="utf-8"))
        assert len(saved["tasks"][1]["subtasks"]) == 5

    def test_expand_has_no_report_path_option(self, project_dir):
        result = run(self.runner, project_dir, "expand", "--id", "2", "--report-path", "x.json")
        assert result.exit_code == 2

    def test_expand_requires_id_or_all(self, project_dir):
        result = run(self.runner, project_dir, "expand")
        assert result.exit_code == 2

    def test_expand_done_task(self, project_dir):
        result = run(self.runner, project_dir, "expand", "--id", "1")

        assert result.exit_code == 0
        assert "already done" in result.output

    def test_expand_all_with_num(self, project_dir):
        with patch(
            "task_master.tasks.expand.generate_text_service",
            new=AsyncMock(return_value=self.answer(2)),
        ):
            result = run(self.runner, project_dir, "expand", "--all", "-n", "2")

        assert result.exit_code == 0, result.output
        assert "Using default subtask count" not in result.output
        for task_id in (2, 3, 4):
            assert f"Added 2 subtasks to task {task_id}" in result.output

    def expand_with_report(self, project_dir, *args):
        service = AsyncMock(side_effect=lambda role, prompt, **kwargs: self.answer(
            int(prompt.split("exactly ")[1].split()[0])
        ))
        with patch("task_master.tasks.expand.generate_text_service", new=service):
            result = run(self.runner, project_dir, "expand", *args)
        return result, service

    def test_report_warning_logged_once(self, project_dir):
        result, _ = self.expand_with_report(project_dir, "--id", "2")

        assert result.output.count(
            "Complexity report not found in default locations; using default subtask count"
        ) == 1

    def test_expand_uses_config_entry_report(self, project_dir, write_json, sample_report):
        write_json(project_dir / "custom" / "report.json", sample_report)
        write_config(project_dir, {"paths": {"complexityReport": "custom/report.json"}})

        result, service = self.expand_with_report(project_dir, "--id", "2")

        assert result.exit_code == 0, result.output
        assert "exactly 3 specific subtasks" in service.await_args.args[1]
        assert "Added 3 subtasks to task 2" in result.output
        assert "Using default subtask count" not in result.output

    def test_expand_missing_config_entry_report_warns(self, project_dir):
        write_config(project_dir, {"paths": {"complexityReport": "gone.json"}})

        result, _ = self.expand_with_report(project_dir, "--id", "2")

        assert result.exit_code == 0, result.output
        assert "Complexity report not found:" in result.output
        assert "gone.json. Using default subtask count (5)." in result.output
        assert "Added 5 subtasks to task 2" in result.output

    def test_expand_prefers_scripts_report_over_tasks(self, project_dir, write_json, sample_report):
        legacy = json.loads(json.dumps(sample_report))
        legacy["complexityAnalysis"][0]["recommendedSubtasks"] = 7
        write_json(project_dir / "scripts" / "task-complexity-report.json", sample_report)
        write_json(project_dir / "tasks" / "task-complexity-report.json", legacy)

        result, service = self.expand_with_report(project_dir, "--id", "2")

        assert result.exit_code == 0, result.output
        assert "exactly 3 specific subtasks" in service.await_args.args[1]
        assert "Added 3 subtasks to task 2" in result.output

    def test_expand_uses_tasks_report_when_alone(self, project_dir, write_json, sample_report):
        write_json(project_dir / "tasks" / "task-complexity-report.json", sample_report)

        result, service = self.expand_with_report(project_dir, "--id", "3")

        assert result.exit_code == 0, result.output
        assert "exactly 6 specific subtasks" in service.await_args.args[1]
        assert "Added 6 subtasks to task 3" in result.output
        assert "not found" not in result.output

    def test_expand_all_keeps_subtasks_saved_before_failure(self, project_dir, write_json, sample_report):
        write_json(project_dir / "scripts" / "task-complexity-report.json", sample_report)

        with patch(
            "task_master.tasks.expand.generate_text_service",
            new=AsyncMock(side_effect=[self.answer(6), AllProvidersFailedError("main")]),
        ):
            result = run(self.runner, project_dir, "expand", "--all")

        assert result.exit_code == 1
        assert "All AI providers failed" in result.output
        saved = json.loads((project_dir / "tasks" / "tasks.json").read_text(encoding="utf-8"))
        assert len(saved["tasks"][2]["subtasks"]) == 6
        assert "subtasks" not in saved["tasks"][1] or saved["tasks"][1]["subtasks"] == []

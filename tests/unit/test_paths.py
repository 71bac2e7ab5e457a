"""
Tests for project root discovery and complexity report path resolution.
"""

import json
from pathlib import Path

import pytest

from task_master.paths import (
    DEFAULT_REPORT_PATH,
    LEGACY_REPORT_PATH,
    ReportPathResolver,
    find_complexity_report,
    find_project_root,
    resolve_tasks_path,
)


def touch_report(root: Path, relative: Path) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('{"complexityAnalysis": []}', encoding="utf-8")
    return path


def write_config(root: Path, content: str) -> None:
    (root / ".taskmasterconfig").write_text(content, encoding="utf-8")


class TestReportPathResolver:
    """Precedence: explicit flag, config entry, scripts/, tasks/, nothing."""

    def test_explicit_path_wins_without_existence_check(self, tmp_path):
        touch_report(tmp_path, DEFAULT_REPORT_PATH)
        write_config(tmp_path, json.dumps({"paths": {"complexityReport": "custom.json"}}))

        result = ReportPathResolver(tmp_path).resolve("reports/mine.json")

        assert result == tmp_path / "reports" / "mine.json"
        assert not result.exists()

    def test_explicit_absolute_path_is_kept(self, tmp_path):
        absolute = tmp_path / "elsewhere" / "report.json"
        assert ReportPathResolver(tmp_path / "project").resolve(str(absolute)) == absolute

    def test_config_entry_beats_default_locations(self, tmp_path):
        touch_report(tmp_path, DEFAULT_REPORT_PATH)
        write_config(tmp_path, json.dumps({"paths": {"complexityReport": "docs/report.json"}}))

        assert ReportPathResolver(tmp_path).resolve() == tmp_path / "docs" / "report.json"

    def test_scripts_location_beats_tasks_location(self, tmp_path):
        scripts = touch_report(tmp_path, DEFAULT_REPORT_PATH)
        touch_report(tmp_path, LEGACY_REPORT_PATH)

        assert ReportPathResolver(tmp_path).resolve() == scripts

    def test_legacy_tasks_location_used_when_alone(self, tmp_path):
        write_config(tmp_path, "{}")
        legacy = touch_report(tmp_path, LEGACY_REPORT_PATH)

        assert ReportPathResolver(tmp_path).resolve() == legacy

    def test_nothing_found_returns_none(self, tmp_path):
        assert ReportPathResolver(tmp_path).resolve() is None
        assert find_complexity_report(tmp_path) is None

    def test_malformed_config_falls_through(self, tmp_path):
        write_config(tmp_path, "{not json")
        scripts = touch_report(tmp_path, DEFAULT_REPORT_PATH)

        assert ReportPathResolver(tmp_path).resolve() == scripts

    @pytest.mark.parametrize(
        "config",
        [
            {"paths": {"complexityReport": ""}},
            {"paths": {"complexityReport": 42}},
            {"paths": "scripts"},
            ["not", "an", "object"],
        ],
    )
    def test_unusable_config_entries_are_ignored(self, tmp_path, config):
        write_config(tmp_path, json.dumps(config))
        legacy = touch_report(tmp_path, LEGACY_REPORT_PATH)

        assert ReportPathResolver(tmp_path).resolve() == legacy

    def test_resolve_has_no_side_effects(self, tmp_path):
        ReportPathResolver(tmp_path).resolve()
        ReportPathResolver(tmp_path).resolve_output()

        assert list(tmp_path.iterdir()) == []

    def test_resolve_output_falls_back_to_scripts_default(self, tmp_path):
        assert ReportPathResolver(tmp_path).resolve_output() == tmp_path / DEFAULT_REPORT_PATH

    def test_resolve_output_never_targets_legacy_location(self, tmp_path):
        touch_report(tmp_path, LEGACY_REPORT_PATH)

        assert ReportPathResolver(tmp_path).resolve() == tmp_path / LEGACY_REPORT_PATH
        assert ReportPathResolver(tmp_path).resolve_output() == tmp_path / DEFAULT_REPORT_PATH

    def test_resolve_output_uses_config_entry(self, tmp_path):
        write_config(tmp_path, json.dumps({"paths": {"complexityReport": "out/report.json"}}))

        assert ReportPathResolver(tmp_path).resolve_output() == tmp_path / "out" / "report.json"

    def test_resolve_output_prefers_explicit_path(self, tmp_path):
        assert ReportPathResolver(tmp_path).resolve_output("out.json") == tmp_path / "out.json"

    def test_candidates_lists_every_location_in_order(self, tmp_path):
        write_config(tmp_path, json.dumps({"paths": {"complexityReport": "cfg.json"}}))

        candidates = ReportPathResolver(tmp_path).candidates("flag.json")

        assert candidates == [
            tmp_path / "flag.json",
            tmp_path / "cfg.json",
            tmp_path / DEFAULT_REPORT_PATH,
            tmp_path / LEGACY_REPORT_PATH,
        ]


class TestProjectRoot:
    def test_finds_directory_with_config(self, tmp_path):
        write_config(tmp_path, "{}")
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == tmp_path.resolve()

    def test_finds_directory_with_tasks_file(self, tmp_path):
        (tmp_path / "tasks").mkdir()
        (tmp_path / "tasks" / "tasks.json").write_text("{}", encoding="utf-8")
        nested = tmp_path / "a"
        nested.mkdir()

        assert find_project_root(nested) == tmp_path.resolve()

    def test_tasks_path_defaults_under_root(self, tmp_path):
        assert resolve_tasks_path(tmp_path) == tmp_path / "tasks" / "tasks.json"
        assert resolve_tasks_path(tmp_path, "other.json") == tmp_path / "other.json"

"""
Tests for the models command.
"""

import json
from unittest.mock import patch

from click.testing import CliRunner

from task_master.cli.main import cli

COMMANDS = "task_master.cli.commands.model_commands"


class TestModelsCommand:
    """Validation, setter calls, and the configuration table."""

    def setup_method(self):
        self.runner = CliRunner()

    def invoke(self, project_root, *args):
        return self.runner.invoke(cli, ["--project-root", str(project_root), "models", *args])

    def test_set_main_known_model(self, tmp_path, small_catalog):
        with patch(f"{COMMANDS}.load_model_catalog", return_value=small_catalog), patch(
            f"{COMMANDS}.set_main_model", return_value=True
        ) as setter:
            result = self.invoke(tmp_path, "--set-main", "claude-3-opus")

        assert result.exit_code == 0
        setter.assert_called_once_with(
            "anthropic", "claude-3-opus", project_root=tmp_path.resolve()
        )
        assert "Main model set to: claude-3-opus (Provider: anthropic)" in result.output

    def test_set_main_unknown_model(self, tmp_path, small_catalog):
        with patch(f"{COMMANDS}.load_model_catalog", return_value=small_catalog), patch(
            f"{COMMANDS}.set_main_model"
        ) as setter:
            result = self.invoke(tmp_path, "--set-main", "non-existent-model")

        assert result.exit_code != 0
        setter.assert_not_called()
        assert 'Model ID "non-existent-model" not found in available models.' in result.output

    def test_blank_model_id(self, tmp_path, small_catalog):
        with patch(f"{COMMANDS}.load_model_catalog", return_value=small_catalog), patch(
            f"{COMMANDS}.set_fallback_model"
        ) as setter:
            result = self.invoke(tmp_path, "--set-fallback", "")

        assert result.exit_code == 1
        setter.assert_not_called()
        assert "cannot be empty" in result.output

    def test_model_not_allowed_for_role(self, tmp_path, small_catalog):
        with patch(f"{COMMANDS}.load_model_catalog", return_value=small_catalog), patch(
            f"{COMMANDS}.set_research_model"
        ) as setter:
            result = self.invoke(tmp_path, "--set-research", "claude-3-opus")

        assert result.exit_code == 1
        setter.assert_not_called()
        assert "cannot be used for the research role" in result.output

    def test_setter_failure(self, tmp_path, small_catalog):
        with patch(f"{COMMANDS}.load_model_catalog", return_value=small_catalog), patch(
            f"{COMMANDS}.set_main_model", return_value=False
        ):
            result = self.invoke(tmp_path, "--set-main", "gpt-4o")

        assert result.exit_code == 1
        assert "Failed to set main model." in result.output

    def test_roles_applied_in_order(self, tmp_path, small_catalog):
        with patch(f"{COMMANDS}.load_model_catalog", return_value=small_catalog), patch(
            f"{COMMANDS}.set_main_model", return_value=True
        ), patch(f"{COMMANDS}.set_research_model", return_value=True), patch(
            f"{COMMANDS}.set_fallback_model", return_value=True
        ):
            result = self.invoke(
                tmp_path, "--set-fallback", "gpt-4o", "--set-research", "sonar", "--set-main", "gpt-4o"
            )

        assert result.exit_code == 0
        main_at = result.output.index("Main model set to")
        research_at = result.output.index("Research model set to: sonar (Provider: perplexity)")
        fallback_at = result.output.index("Fallback model set to")
        assert main_at < research_at < fallback_at

    def test_set_main_persists_config(self, tmp_path):
        result = self.invoke(tmp_path, "--set-main", "gpt-4o")

        assert result.exit_code == 0
        saved = json.loads((tmp_path / ".taskmasterconfig").read_text(encoding="utf-8"))
        assert saved["models"]["main"] == {
            "provider": "openai",
            "modelId": "gpt-4o",
            "maxTokens": 16384,
            "temperature": 0.2,
        }

    def test_show_configuration(self, tmp_path, small_catalog):
        (tmp_path / ".taskmasterconfig").write_text(
            json.dumps({"models": {"main": {"provider": "openai", "modelId": "gpt-4o"}}}),
            encoding="utf-8",
        )
        with patch(f"{COMMANDS}.load_model_catalog", return_value=small_catalog):
            result = self.invoke(tmp_path)

        assert result.exit_code == 0
        assert "Active Model Configuration" in result.output
        assert "gpt-4o" in result.output
        assert "sonar" in result.output
        assert "✓" in result.output

    def test_empty_catalog(self, tmp_path):
        with patch(f"{COMMANDS}.load_model_catalog", return_value=()):
            result = self.invoke(tmp_path)

        assert result.exit_code == 0
        assert "No models defined in configuration." in result.output

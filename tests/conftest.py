"""
Pytest configuration and fixtures for testing.
"""

import json
from pathlib import Path

import pytest

from task_master.config.models_catalog import ModelInfo
from task_master.utils.logging import configure_logging

SAMPLE_TASKS = {
    "meta": {"projectName": "Sample Project"},
    "tasks": [
        {
            "id": 1,
            "title": "Set up repository",
            "description": "Create the project skeleton",
            "status": "done",
            "dependencies": [],
            "priority": "high",
            "details": "",
            "testStrategy": "",
        },
        {
            "id": 2,
            "title": "Implement task storage",
            "description": "Read and write tasks.json",
            "status": "pending",
            "dependencies": [1],
            "priority": "medium",
            "details": "Use JSON files",
            "testStrategy": "Unit tests",
        },
        {
            "id": 3,
            "title": "Build the CLI",
            "description": "Wire commands with click",
            "status": "pending",
            "dependencies": [1],
            "priority": "high",
            "details": "",
            "testStrategy": "",
        },
        {
            "id": 4,
            "title": "Write documentation",
            "description": "User guide",
            "status": "pending",
            "dependencies": [2, 3],
            "priority": "low",
            "details": "",
            "testStrategy": "",
        },
    ],
}

SAMPLE_REPORT = {
    "meta": {
        "generatedAt": "2025-01-01T00:00:00+00:00",
        "tasksAnalyzed": 2,
        "thresholdScore": 5,
        "projectName": "Sample Project",
        "usedResearch": False,
    },
    "complexityAnalysis": [
        {
            "taskId": 2,
            "taskTitle": "Implement task storage",
            "complexityScore": 4,
            "recommendedSubtasks": 3,
            "expansionPrompt": "Split reading and writing",
            "reasoning": "Small surface",
        },
        {
            "taskId": 3,
            "taskTitle": "Build the CLI",
            "complexityScore": 8,
            "recommendedSubtasks": 6,
            "expansionPrompt": "One subtask per command",
            "reasoning": "Many commands",
        },
    ],
}


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """No provider keys leak in from the developer's shell; logging reset after each test."""
    for key in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "PERPLEXITY_API_KEY"):
        monkeypatch.delenv(key, raising=False)
    yield
    # Restore the environment first so logging is rebuilt from the defaults
    monkeypatch.undo()
    configure_logging()


@pytest.fixture
def project_dir(tmp_path):
    """A project with a tasks file and no config or report."""
    _write_json(tmp_path / "tasks" / "tasks.json", SAMPLE_TASKS)
    return tmp_path


@pytest.fixture
def write_json():
    """Helper that writes a JSON file, creating parent directories."""
    return _write_json


@pytest.fixture
def sample_report():
    return json.loads(json.dumps(SAMPLE_REPORT))


@pytest.fixture
def sample_tasks():
    return json.loads(json.dumps(SAMPLE_TASKS))


@pytest.fixture
def small_catalog():
    """A catalog with one model per provider, plus a research-only model."""
    return (
        ModelInfo(
            id="claude-3-opus",
            name="Claude 3 Opus",
            provider="anthropic",
            allowed_roles=("main", "fallback"),
            max_tokens=4096,
            cost_per_1m={"input": 15.0, "output": 75.0},
        ),
        ModelInfo(
            id="gpt-4o",
            name="GPT-4o",
            provider="openai",
            allowed_roles=("main", "research", "fallback"),
            max_tokens=16384,
            cost_per_1m={"input": 2.5, "output": 10.0},
        ),
        ModelInfo(
            id="sonar",
            name="Sonar",
            provider="perplexity",
            allowed_roles=("research",),
            max_tokens=8700,
            cost_per_1m={"input": 1.0, "output": 1.0},
        ),
    )

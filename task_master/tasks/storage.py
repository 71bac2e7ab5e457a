"""
Persistence helpers for the tasks file and the complexity report.

Files are read wholesale and written back wholesale; there are no partial
updates and no locking (the last writer wins).
"""

import json
from pathlib import Path
from typing import Any, Optional, Union

from task_master.exceptions import TasksFileError
from task_master.tasks.models import ComplexityReport, TaskStore
from task_master.utils.logging import get_logger

logger = get_logger(__name__)

PathType = Union[str, Path]


def read_json(path: PathType) -> Any:
    """Load JSON from ``path``; raises OSError / json.JSONDecodeError."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: PathType, data: Any) -> None:
    """Persist ``data`` to ``path`` (pretty-printed), creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def load_tasks(path: PathType) -> TaskStore:
    """
    Load the task store.

    Raises:
        TasksFileError: If the file is missing, unreadable, or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise TasksFileError(path, "Tasks file not found")
    try:
        data = read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        raise TasksFileError(path, f"Could not read tasks file ({e})") from e
    if not isinstance(data, dict):
        raise TasksFileError(path, "Invalid tasks file")
    try:
        return TaskStore.from_dict(data)
    except ValueError as e:
        raise TasksFileError(path, f"Invalid tasks file ({e})") from e


def save_tasks(path: PathType, store: TaskStore) -> None:
    """Write the whole task store back to ``path``."""
    write_json(path, store.to_dict())
    logger.debug(f"Saved {len(store.tasks)} tasks to {path}")


def load_complexity_report(path: Optional[PathType]) -> Optional[ComplexityReport]:
    """
    Load a complexity report if one is available.

    Returns:
        The report, or None when ``path`` is None, missing, or unreadable
    """
    if path is None:
        return None
    path = Path(path)
    if not path.is_file():
        logger.debug(f"Complexity report does not exist: {path}")
        return None
    try:
        data = read_json(path)
        return ComplexityReport.from_dict(data)
    except (OSError, json.JSONDecodeError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning(f"Ignoring unreadable complexity report {path}: {e}")
        return None


def save_complexity_report(path: PathType, report: ComplexityReport) -> None:
    """Write the report to ``path``, replacing any previous report."""
    write_json(path, report.to_dict())
    logger.debug(f"Saved complexity report with {len(report.complexity_analysis)} entries to {path}")

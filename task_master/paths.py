"""
Project-root discovery and complexity-report path resolution.

Every command that reads or writes the complexity report goes through
``ReportPathResolver`` so they all agree on which file is authoritative:

    1. explicit path from the command line
    2. ``paths.complexityReport`` in ``.taskmasterconfig``
    3. ``scripts/task-complexity-report.json`` if it exists
    4. ``tasks/task-complexity-report.json`` if it exists
    5. not found (None)

Steps 1 and 2 are returned without an existence check: write commands create
the file, read commands report its absence later.
"""

import os
from pathlib import Path
from typing import List, Optional, Union

from task_master.config.project_config import CONFIG_FILENAME, read_config_file
from task_master.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TASKS_FILE = Path("tasks") / "tasks.json"
DEFAULT_REPORT_PATH = Path("scripts") / "task-complexity-report.json"
LEGACY_REPORT_PATH = Path("tasks") / "task-complexity-report.json"

PROJECT_MARKERS = (CONFIG_FILENAME, str(DEFAULT_TASKS_FILE), ".git")

PathLike = Union[str, os.PathLike]


def resolve_path(project_root: PathLike, raw_path: PathLike) -> Path:
    """Resolve ``raw_path`` against ``project_root`` unless it is absolute."""
    path = Path(raw_path).expanduser()
    if path.is_absolute():
        return path
    return Path(project_root) / path


def find_project_root(start: Optional[PathLike] = None) -> Path:
    """
    Locate the project root by walking up from ``start``.

    A directory counts as the root when it holds ``.taskmasterconfig``,
    ``tasks/tasks.json`` or ``.git``. Falls back to ``start`` (default: the
    current directory) when no marker is found.
    """
    origin = Path(start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        for marker in PROJECT_MARKERS:
            if (directory / marker).exists():
                return directory
    return origin


def resolve_tasks_path(project_root: PathLike, tasks_file: Optional[PathLike] = None) -> Path:
    """Path of the tasks file; ``tasks/tasks.json`` unless given."""
    return resolve_path(project_root, tasks_file or DEFAULT_TASKS_FILE)


class ReportPathResolver:
    """
    Decides where the complexity report lives for one command invocation.

    The resolver only computes paths; callers do the reading and writing.
    """

    def __init__(self, project_root: PathLike):
        self.project_root = Path(project_root)

    @property
    def default_path(self) -> Path:
        return self.project_root / DEFAULT_REPORT_PATH

    @property
    def legacy_path(self) -> Path:
        return self.project_root / LEGACY_REPORT_PATH

    def configured_path(self) -> Optional[Path]:
        """``paths.complexityReport`` from the project config, if set."""
        data = read_config_file(self.project_root)
        if data is None:
            return None
        paths = data.get("paths")
        if not isinstance(paths, dict):
            return None
        configured = paths.get("complexityReport")
        if not isinstance(configured, str) or not configured.strip():
            return None
        return resolve_path(self.project_root, configured.strip())

    def candidates(self, explicit_path: Optional[PathLike] = None) -> List[Path]:
        """All locations in precedence order (for diagnostics)."""
        paths = []
        if explicit_path:
            paths.append(resolve_path(self.project_root, explicit_path))
        configured = self.configured_path()
        if configured is not None:
            paths.append(configured)
        paths.extend([self.default_path, self.legacy_path])
        return paths

    def resolve(self, explicit_path: Optional[PathLike] = None) -> Optional[Path]:
        """
        Return the authoritative report path, or None when there is none.

        Args:
            explicit_path: Path given on the command line, if any

        Returns:
            Path of the report, or None if no source applies
        """
        if explicit_path:
            path = resolve_path(self.project_root, explicit_path)
            logger.debug(f"Using complexity report from command line: {path}")
            return path

        configured = self.configured_path()
        if configured is not None:
            logger.debug(f"Using complexity report from {CONFIG_FILENAME}: {configured}")
            return configured

        for candidate in (self.default_path, self.legacy_path):
            if candidate.is_file():
                logger.debug(f"Using complexity report at default location: {candidate}")
                return candidate

        return None

    def resolve_output(self, explicit_path: Optional[PathLike] = None) -> Path:
        """
        Write target: the explicit path, else the config entry, else the
        ``scripts/`` default. A report found only at the legacy ``tasks/``
        location is read but never written.
        """
        if explicit_path:
            return resolve_path(self.project_root, explicit_path)
        return self.configured_path() or self.default_path


def find_complexity_report(
    project_root: PathLike, explicit_path: Optional[PathLike] = None
) -> Optional[Path]:
    """Shortcut for ``ReportPathResolver(project_root).resolve(explicit_path)``."""
    return ReportPathResolver(project_root).resolve(explicit_path)

"""
Error kinds raised by Task Master operations.

Command handlers raise these; only the CLI dispatch in ``task_master.cli.main``
turns them into a message on stderr and a process exit status.
"""

from typing import Any, Dict, Optional


class TaskMasterError(Exception):
    """Base exception for all Task Master errors."""

    exit_code = 1
    # Follow-up suggestion printed after the message, if any
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        exit_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidModelIdError(TaskMasterError):
    """Model id missing from the catalog, blank, or not allowed for the role."""

    def __init__(self, model_id: str, role: Optional[str] = None, reason: str = ""):
        if not reason:
            reason = f'Model ID "{model_id}" not found in available models.'
        super().__init__(reason, {"model_id": model_id, "role": role})
        self.model_id = model_id
        self.role = role


class SetModelFailedError(TaskMasterError):
    """The config writer reported failure while binding a model to a role."""

    def __init__(self, role: str, model_id: str):
        super().__init__(
            f"Failed to set {role} model.", {"role": role, "model_id": model_id}
        )
        self.role = role
        self.model_id = model_id


class TaskNotFoundError(TaskMasterError):
    """No task or subtask with the requested id."""

    def __init__(self, task_id: str):
        super().__init__(f"Task with ID {task_id} not found.", {"task_id": task_id})
        self.task_id = task_id


class TasksFileError(TaskMasterError):
    """The tasks file is missing or does not hold a task list."""

    def __init__(self, path, reason: str):
        super().__init__(f"{reason}: {path}", {"path": str(path)})
        self.path = path


class ReportNotFoundError(TaskMasterError):
    """
    No complexity report could be located.

    Non-fatal: callers log it as a warning and continue without report data.
    """

    exit_code = 0
    hint = "Run 'task-master analyze-complexity' to generate a report."

    def __init__(self, searched=None, path=None):
        if path is not None:
            message = f"Complexity report not found: {path}"
        else:
            message = "Complexity report not found in default locations."
        super().__init__(message, {"searched": [str(p) for p in (searched or [])]})
        self.path = path

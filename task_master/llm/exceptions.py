"""
Exception classes surfaced by the LLM text service.

Provider-level failures are ``LLMError`` (see ``provider.py``); these are the
kinds that escape the service and reach the command layer.
"""

from typing import List, Optional

from task_master.exceptions import TaskMasterError


class AllProvidersFailedError(TaskMasterError):
    """Every provider in the role's sequence failed or was unavailable."""

    def __init__(self, role: str, attempts: Optional[List[str]] = None, last_error=None):
        attempts = attempts or []
        message = f"All AI providers failed for role '{role}'"
        if last_error is not None:
            message += f": {last_error}"
        elif not attempts:
            message += ": no provider has an API key configured"
        super().__init__(message, {"role": role, "attempts": attempts})
        self.role = role
        self.attempts = attempts
        self.last_error = last_error


class LLMResponseParseError(TaskMasterError):
    """The model answered, but not with the JSON we asked for."""

    def __init__(self, reason: str, content: str = ""):
        super().__init__(
            f"Could not parse AI response: {reason}", {"content": content[:500]}
        )
        self.content = content

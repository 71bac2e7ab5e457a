"""
Task Master: a command-line task tracker with AI-assisted planning.

Tasks live in a JSON file inside the project; the AI provider bindings and
optional paths live in ``.taskmasterconfig`` at the project root.
"""

__version__ = "0.1.0"

from .exceptions import TaskMasterError
from .paths import ReportPathResolver, find_complexity_report, find_project_root

__all__ = [
    "ReportPathResolver",
    "TaskMasterError",
    "find_complexity_report",
    "find_project_root",
    "__version__",
]

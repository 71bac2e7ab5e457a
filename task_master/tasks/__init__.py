"""
Task store, queries, and the AI-backed task operations.
"""

from .models import ComplexityAnalysis, ComplexityReport, Task, TaskStore
from .queries import TaskRef, filter_tasks, find_next_task, find_task_by_id
from .storage import load_complexity_report, load_tasks, save_complexity_report, save_tasks

__all__ = [
    "ComplexityAnalysis",
    "ComplexityReport",
    "Task",
    "TaskRef",
    "TaskStore",
    "filter_tasks",
    "find_next_task",
    "find_task_by_id",
    "load_complexity_report",
    "load_tasks",
    "save_complexity_report",
    "save_tasks",
]

"""
Read-only queries over a TaskStore: filtering, lookup, next-task selection.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Union

from task_master.exceptions import TaskNotFoundError
from task_master.tasks.models import (
    COMPLETED_STATUSES,
    PRIORITY_ORDER,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    TASK_STATUSES,
    Task,
    TaskStore,
)

ACTIONABLE_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS)


@dataclass
class TaskRef:
    """A task located in the store; ``parent`` is set for subtasks."""

    task: Task
    parent: Optional[Task] = None

    @property
    def display_id(self) -> str:
        if self.parent is not None:
            return f"{self.parent.id}.{self.task.id}"
        return str(self.task.id)

    @property
    def is_subtask(self) -> bool:
        return self.parent is not None


def parse_status_filter(status: Optional[str]) -> Optional[List[str]]:
    """``"pending,done"`` -> ``["pending", "done"]``; None/"all" -> None."""
    if not status:
        return None
    statuses = [s.strip().lower() for s in status.split(",") if s.strip()]
    if not statuses or "all" in statuses:
        return None
    return statuses


def filter_tasks(tasks: List[Task], status: Optional[str] = None) -> List[Task]:
    """Tasks whose status matches the (comma-separated) filter."""
    statuses = parse_status_filter(status)
    if statuses is None:
        return list(tasks)
    return [task for task in tasks if task.status.lower() in statuses]


def find_task_by_id(store: TaskStore, task_id: Union[int, str]) -> TaskRef:
    """
    Look up a task (``"3"``) or subtask (``"3.2"``).

    Raises:
        TaskNotFoundError: If there is no such task
    """
    raw = str(task_id).strip()
    parent_part, _, sub_part = raw.partition(".")
    try:
        parent_id = int(parent_part)
        sub_id = int(sub_part) if sub_part else None
    except ValueError:
        raise TaskNotFoundError(raw)

    parent = store.get(parent_id)
    if parent is None:
        raise TaskNotFoundError(raw)
    if sub_id is None:
        return TaskRef(parent)
    for sub in parent.subtasks:
        if sub.id == sub_id:
            return TaskRef(sub, parent)
    raise TaskNotFoundError(raw)


def completed_ids(store: TaskStore) -> Set[str]:
    """Ids of finished tasks and subtasks, as ``"3"`` / ``"3.2"`` strings."""
    done = set()
    for task in store.tasks:
        if task.status in COMPLETED_STATUSES:
            done.add(str(task.id))
        for sub in task.subtasks:
            if sub.status in COMPLETED_STATUSES:
                done.add(f"{task.id}.{sub.id}")
    return done


def _priority_rank(task: Task, parent: Optional[Task] = None) -> int:
    priority = task.priority or (parent.priority if parent else None) or "medium"
    return PRIORITY_ORDER.get(str(priority).lower(), PRIORITY_ORDER["medium"])


def _subtask_dependency_ids(parent: Task, sub: Task) -> List[str]:
    ids = []
    for dep in sub.dependencies:
        dep_str = str(dep)
        ids.append(dep_str if "." in dep_str else f"{parent.id}.{dep_str}")
    return ids


def find_next_task(store: TaskStore) -> Optional[TaskRef]:
    """
    Pick the next task to work on.

    Subtasks of in-progress parents come first; otherwise a top-level task.
    Only pending/in-progress items whose dependencies are all finished are
    eligible. Ties break on priority (high first), then fewer dependencies,
    then lower id.
    """
    done = completed_ids(store)

    subtask_candidates = []
    for parent in store.tasks:
        if parent.status != STATUS_IN_PROGRESS:
            continue
        for sub in parent.subtasks:
            if sub.status not in ACTIONABLE_STATUSES:
                continue
            deps = _subtask_dependency_ids(parent, sub)
            if all(dep in done for dep in deps):
                subtask_candidates.append((parent, sub, len(deps)))

    if subtask_candidates:
        parent, sub, _ = min(
            subtask_candidates,
            key=lambda c: (-_priority_rank(c[1], c[0]), c[2], c[0].id, c[1].id),
        )
        return TaskRef(sub, parent)

    task_candidates = [
        task
        for task in store.tasks
        if task.status in ACTIONABLE_STATUSES
        and all(str(dep) in done for dep in task.dependencies)
    ]
    if not task_candidates:
        return None
    best = min(
        task_candidates,
        key=lambda t: (-_priority_rank(t), len(t.dependencies), t.id),
    )
    return TaskRef(best)


def status_counts(tasks: List[Task]) -> Dict[str, int]:
    """Number of tasks per known status (unknown statuses are counted too)."""
    counts = {status: 0 for status in TASK_STATUSES}
    for task in tasks:
        counts[task.status] = counts.get(task.status, 0) + 1
    return counts


def completion_percentage(tasks: List[Task]) -> float:
    """Share of finished tasks, 0-100."""
    if not tasks:
        return 0.0
    finished = sum(1 for task in tasks if task.status in COMPLETED_STATUSES)
    return finished * 100.0 / len(tasks)

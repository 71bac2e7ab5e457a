"""
Data models for the tasks file and the complexity report.

Both files are JSON with camelCase keys. Keys these models do not know about
are carried in ``extra`` so a read/modify/write cycle does not drop them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_DONE = "done"
STATUS_REVIEW = "review"
STATUS_DEFERRED = "deferred"
STATUS_CANCELLED = "cancelled"

TASK_STATUSES = (
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_DONE,
    STATUS_REVIEW,
    STATUS_DEFERRED,
    STATUS_CANCELLED,
)

# Statuses that count as finished work for dependencies and progress
COMPLETED_STATUSES = (STATUS_DONE, STATUS_CANCELLED)

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

DependencyId = Union[int, str]

_TASK_KEYS = {
    "id",
    "title",
    "description",
    "status",
    "dependencies",
    "priority",
    "details",
    "testStrategy",
    "subtasks",
}


@dataclass
class Task:
    """
    A task or subtask.

    Subtasks use the same shape; their ids are unique within the parent and
    their dependencies may name sibling subtasks (int) or other tasks
    (``"parent.sub"`` strings).
    """

    id: int
    title: str
    description: str = ""
    status: str = STATUS_PENDING
    dependencies: List[DependencyId] = field(default_factory=list)
    priority: Optional[str] = None
    details: str = ""
    test_strategy: str = ""
    subtasks: List["Task"] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        try:
            task_id = int(data["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Task has no valid integer id: {data!r}") from e
        return cls(
            id=task_id,
            title=str(data.get("title", "")),
            description=str(data.get("description") or ""),
            status=str(data.get("status") or STATUS_PENDING),
            dependencies=list(data.get("dependencies") or []),
            priority=data.get("priority"),
            details=str(data.get("details") or ""),
            test_strategy=str(data.get("testStrategy") or ""),
            subtasks=[cls.from_dict(sub) for sub in data.get("subtasks") or []],
            extra={k: v for k, v in data.items() if k not in _TASK_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "dependencies": list(self.dependencies),
        }
        if self.priority is not None:
            data["priority"] = self.priority
        data["details"] = self.details
        data["testStrategy"] = self.test_strategy
        data.update(self.extra)
        if self.subtasks:
            data["subtasks"] = [sub.to_dict() for sub in self.subtasks]
        return data

    @property
    def is_complete(self) -> bool:
        return self.status in COMPLETED_STATUSES

    def next_subtask_id(self) -> int:
        return max((sub.id for sub in self.subtasks), default=0) + 1


@dataclass
class TaskStore:
    """Contents of ``tasks.json``: the full task list plus optional metadata."""

    tasks: List[Task] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskStore":
        raw_tasks = data.get("tasks")
        if not isinstance(raw_tasks, list):
            raise ValueError("tasks file has no 'tasks' list")
        return cls(
            tasks=[Task.from_dict(raw) for raw in raw_tasks],
            meta=dict(data.get("meta") or {}),
            extra={k: v for k, v in data.items() if k not in ("tasks", "meta")},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.meta:
            data["meta"] = dict(self.meta)
        data["tasks"] = [task.to_dict() for task in self.tasks]
        data.update(self.extra)
        return data

    def get(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


@dataclass
class ComplexityAnalysis:
    """Complexity assessment of a single task."""

    task_id: int
    complexity_score: float
    recommended_subtasks: int
    expansion_prompt: str = ""
    reasoning: str = ""
    task_title: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComplexityAnalysis":
        return cls(
            task_id=int(data["taskId"]),
            complexity_score=float(data.get("complexityScore") or 0),
            recommended_subtasks=int(data.get("recommendedSubtasks") or 0),
            expansion_prompt=str(data.get("expansionPrompt") or ""),
            reasoning=str(data.get("reasoning") or ""),
            task_title=str(data.get("taskTitle") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        score = self.complexity_score
        return {
            "taskId": self.task_id,
            "taskTitle": self.task_title,
            "complexityScore": int(score) if float(score).is_integer() else score,
            "recommendedSubtasks": self.recommended_subtasks,
            "expansionPrompt": self.expansion_prompt,
            "reasoning": self.reasoning,
        }


@dataclass
class ComplexityReport:
    """Contents of the complexity report file."""

    complexity_analysis: List[ComplexityAnalysis] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComplexityReport":
        raw_entries = data.get("complexityAnalysis")
        if not isinstance(raw_entries, list):
            raise ValueError("complexity report has no 'complexityAnalysis' list")
        return cls(
            complexity_analysis=[ComplexityAnalysis.from_dict(e) for e in raw_entries],
            meta=dict(data.get("meta") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": dict(self.meta),
            "complexityAnalysis": [entry.to_dict() for entry in self.complexity_analysis],
        }

    def find(self, task_id: int) -> Optional[ComplexityAnalysis]:
        for entry in self.complexity_analysis:
            if entry.task_id == task_id:
                return entry
        return None

    def score_for(self, task_id: int) -> Optional[float]:
        entry = self.find(task_id)
        return entry.complexity_score if entry else None

"""
Task expansion: break tasks into subtasks with the AI.

The subtask count comes from ``--num``, else the complexity report's
recommendation for the task, else the configured ``defaultSubtasks``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from task_master.config.project_config import ProjectConfig, load_project_config
from task_master.exceptions import TaskMasterError
from task_master.llm.parsing import expect_list, extract_json
from task_master.llm.service import generate_text_service
from task_master.paths import ReportPathResolver, resolve_tasks_path
from task_master.tasks.models import (
    STATUS_DONE,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    ComplexityReport,
    Task,
)
from task_master.tasks.prompts import EXPAND_SYSTEM_PROMPT, build_expand_prompt
from task_master.tasks.queries import find_task_by_id
from task_master.tasks.storage import load_complexity_report, load_tasks, save_tasks
from task_master.utils.logging import get_logger

logger = get_logger(__name__)

REPORT_NOT_FOUND_MESSAGE = "Complexity report not found in default locations"


@dataclass
class ExpansionResult:
    """Subtasks added to one task."""

    task_id: int
    subtasks: List[Task] = field(default_factory=list)
    num_requested: int = 0
    used_report: bool = False
    telemetry: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExpandOutcome:
    """What an ``expand`` invocation did, for display."""

    expanded: List[ExpansionResult] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    report_path: Optional[Path] = None
    report: Optional[ComplexityReport] = None

    @property
    def report_found(self) -> bool:
        return self.report is not None


def load_report_for_expansion(
    project_root: Union[str, Path],
) -> Tuple[Optional[Path], Optional[ComplexityReport]]:
    """
    Locate and load the complexity report for ``expand``.

    ``expand`` takes no report path flag; only the config entry and the
    default locations are consulted. The path is returned even when the
    report there cannot be loaded.
    """
    report_path = ReportPathResolver(project_root).resolve()
    if report_path is None:
        logger.warning(f"{REPORT_NOT_FOUND_MESSAGE}; using default subtask count")
        return None, None
    if not report_path.is_file():
        logger.warning(f"Complexity report not found: {report_path}; using default subtask count")
        return report_path, None
    return report_path, load_complexity_report(report_path)


def _safe_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _coerce_dependencies(raw: Any, valid_ids: set) -> List[int]:
    deps = []
    for dep in raw or []:
        try:
            dep_id = int(dep)
        except (TypeError, ValueError):
            logger.debug(f"Dropping non-numeric subtask dependency {dep!r}")
            continue
        if dep_id in valid_ids and dep_id not in deps:
            deps.append(dep_id)
    return deps


def parse_subtasks(content: str, next_id: int, existing_ids: List[int]) -> List[Task]:
    """
    Convert the AI answer into subtasks.

    Ids are reassigned sequentially from ``next_id``; dependencies that do not
    name an existing or earlier new subtask are dropped.
    """
    subtasks = []
    valid_ids = set(existing_ids)
    ai_to_new: Dict[int, int] = {}
    for offset, raw in enumerate(expect_list(extract_json(content), "subtasks")):
        if not isinstance(raw, dict) or not raw.get("title"):
            logger.warning(f"Skipping malformed subtask {raw!r}")
            continue
        new_id = next_id + len(subtasks)
        try:
            ai_to_new[int(raw.get("id", next_id + offset))] = new_id
        except (TypeError, ValueError):
            logger.debug(f"Subtask {raw.get('title')!r} has a non-numeric id")

        raw_deps = [ai_to_new.get(_safe_int(dep), dep) for dep in raw.get("dependencies") or []]
        subtasks.append(
            Task(
                id=new_id,
                title=str(raw["title"]),
                description=str(raw.get("description") or ""),
                status=STATUS_PENDING,
                dependencies=_coerce_dependencies(raw_deps, valid_ids),
                details=str(raw.get("details") or ""),
                test_strategy=str(raw.get("testStrategy") or ""),
            )
        )
        valid_ids.add(new_id)
    return subtasks


def subtask_count(
    task: Task,
    config: ProjectConfig,
    report: Optional[ComplexityReport],
    num: Optional[int] = None,
) -> int:
    """``num`` if given, else the report's recommendation, else ``defaultSubtasks``."""
    if num is not None:
        return num
    entry = report.find(task.id) if report else None
    if entry is not None and entry.recommended_subtasks > 0:
        return entry.recommended_subtasks
    return config.global_settings.default_subtasks


async def _expand_one(
    task: Task,
    project_root: Path,
    config: ProjectConfig,
    report: Optional[ComplexityReport],
    num: Optional[int] = None,
    use_research: bool = False,
    additional_context: Optional[str] = None,
    force: bool = False,
) -> ExpansionResult:
    if force and task.subtasks:
        logger.info(f"Clearing {len(task.subtasks)} existing subtasks of task {task.id}")
        task.subtasks = []

    count = subtask_count(task, config, report, num)
    entry = report.find(task.id) if report else None
    next_id = task.next_subtask_id()

    prompt = build_expand_prompt(
        task,
        count,
        next_id,
        expansion_prompt=entry.expansion_prompt if entry else None,
        additional_context=additional_context,
        use_research=use_research,
    )
    logger.info(f"Expanding task {task.id} into {count} subtasks")
    result = await generate_text_service(
        "research" if use_research else "main",
        prompt,
        system_prompt=EXPAND_SYSTEM_PROMPT,
        config=config,
        project_root=project_root,
    )

    new_subtasks = parse_subtasks(
        result.main_result, next_id, [sub.id for sub in task.subtasks]
    )
    if len(new_subtasks) != count:
        logger.warning(
            f"Requested {count} subtasks for task {task.id}, AI returned {len(new_subtasks)}"
        )
    task.subtasks.extend(new_subtasks)

    return ExpansionResult(
        task_id=task.id,
        subtasks=new_subtasks,
        num_requested=count,
        used_report=entry is not None,
        telemetry=result.telemetry,
    )


async def expand_task(
    project_root: Union[str, Path],
    task_id: Union[int, str],
    tasks_file: Optional[Union[str, Path]] = None,
    num: Optional[int] = None,
    use_research: bool = False,
    additional_context: Optional[str] = None,
    force: bool = False,
    config: Optional[ProjectConfig] = None,
) -> ExpandOutcome:
    """
    Expand one task into subtasks and save the tasks file.

    Raises:
        TasksFileError: If the tasks file cannot be loaded
        TaskNotFoundError: If ``task_id`` does not exist
        TaskMasterError: If the id names a subtask
    """
    project_root = Path(project_root)
    config = config or load_project_config(project_root)
    tasks_path = resolve_tasks_path(project_root, tasks_file)
    store = load_tasks(tasks_path)

    ref = find_task_by_id(store, task_id)
    if ref.is_subtask:
        raise TaskMasterError(f"Cannot expand subtask {ref.display_id}; expand its parent task.")

    report_path, report = load_report_for_expansion(project_root)
    outcome = ExpandOutcome(report_path=report_path, report=report)
    task = ref.task
    if task.status == STATUS_DONE:
        logger.info(f"Task {task.id} is done; not expanding")
        outcome.skipped.append(task.id)
        return outcome

    outcome.expanded.append(
        await _expand_one(
            task, project_root, config, report, num, use_research, additional_context, force
        )
    )
    save_tasks(tasks_path, store)
    return outcome


def tasks_to_expand(tasks: List[Task], report: Optional[ComplexityReport], force: bool = False) -> List[Task]:
    """
    Pending/in-progress tasks without subtasks (any subtasks with ``force``),
    highest complexity score first.
    """
    eligible = [
        task
        for task in tasks
        if task.status in (STATUS_PENDING, STATUS_IN_PROGRESS)
        and (force or not task.subtasks)
    ]

    def score(task: Task) -> float:
        value = report.score_for(task.id) if report else None
        return value if value is not None else 0.0

    return sorted(eligible, key=lambda task: (-score(task), task.id))


async def expand_all_tasks(
    project_root: Union[str, Path],
    tasks_file: Optional[Union[str, Path]] = None,
    num: Optional[int] = None,
    use_research: bool = False,
    additional_context: Optional[str] = None,
    force: bool = False,
    config: Optional[ProjectConfig] = None,
) -> ExpandOutcome:
    """
    Expand every eligible task, saving the tasks file after each one so a
    later failure keeps the subtasks already generated.

    Raises:
        TasksFileError: If the tasks file cannot be loaded
    """
    project_root = Path(project_root)
    config = config or load_project_config(project_root)
    tasks_path = resolve_tasks_path(project_root, tasks_file)
    store = load_tasks(tasks_path)

    report_path, report = load_report_for_expansion(project_root)
    outcome = ExpandOutcome(report_path=report_path, report=report)

    targets = tasks_to_expand(store.tasks, report, force)
    target_ids = {task.id for task in targets}
    outcome.skipped = [task.id for task in store.tasks if task.id not in target_ids]
    if not targets:
        logger.info("No tasks eligible for expansion")
        return outcome

    for task in targets:
        outcome.expanded.append(
            await _expand_one(
                task, project_root, config, report, num, use_research, additional_context, force
            )
        )
        save_tasks(tasks_path, store)

    return outcome

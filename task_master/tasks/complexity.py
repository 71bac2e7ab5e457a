"""
Task complexity analysis.

Asks the AI to score each open task and writes the results as the project's
complexity report, which ``expand`` later consults for subtask counts.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from task_master.config.project_config import ProjectConfig, load_project_config
from task_master.exceptions import TaskMasterError, TaskNotFoundError
from task_master.llm.parsing import expect_list, extract_json
from task_master.llm.service import generate_text_service
from task_master.paths import ReportPathResolver, resolve_tasks_path
from task_master.tasks.models import (
    STATUS_CANCELLED,
    STATUS_DEFERRED,
    STATUS_DONE,
    ComplexityAnalysis,
    ComplexityReport,
    Task,
)
from task_master.tasks.prompts import COMPLEXITY_SYSTEM_PROMPT, build_complexity_prompt
from task_master.tasks.storage import load_tasks, save_complexity_report
from task_master.utils.logging import get_logger

logger = get_logger(__name__)

SKIPPED_STATUSES = (STATUS_DONE, STATUS_CANCELLED, STATUS_DEFERRED)
DEFAULT_THRESHOLD = 5
HIGH_COMPLEXITY = 8


@dataclass
class AnalysisResult:
    """Outcome of an ``analyze_task_complexity`` run."""

    report: ComplexityReport
    output_path: Path
    missing_ids: List[int] = field(default_factory=list)
    telemetry: Dict[str, object] = field(default_factory=dict)


def parse_id_list(ids: Optional[str]) -> Optional[List[int]]:
    """``"1, 3,5"`` -> ``[1, 3, 5]``; None or blank -> None."""
    if not ids:
        return None
    parsed = []
    for part in ids.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            parsed.append(int(part))
        except ValueError:
            raise TaskNotFoundError(part)
    return parsed or None


def select_tasks_for_analysis(tasks: List[Task], ids: Optional[Iterable[int]] = None) -> List[Task]:
    """
    Tasks to analyze: the requested ids, or every task not done, cancelled
    or deferred.
    """
    if ids is not None:
        by_id = {task.id: task for task in tasks}
        selected = []
        for task_id in ids:
            if task_id not in by_id:
                raise TaskNotFoundError(str(task_id))
            selected.append(by_id[task_id])
        return selected
    return [task for task in tasks if task.status not in SKIPPED_STATUSES]


def complexity_level(score: float) -> str:
    if score >= HIGH_COMPLEXITY:
        return "high"
    if score >= DEFAULT_THRESHOLD:
        return "medium"
    return "low"


def summarize(report: ComplexityReport) -> Dict[str, int]:
    """Count analyses per complexity level."""
    counts = {"high": 0, "medium": 0, "low": 0}
    for entry in report.complexity_analysis:
        counts[complexity_level(entry.complexity_score)] += 1
    return counts


def _parse_analyses(content: str, tasks: List[Task]) -> List[ComplexityAnalysis]:
    titles = {task.id: task.title for task in tasks}
    analyses = []
    for raw in expect_list(extract_json(content), "complexityAnalysis"):
        try:
            entry = ComplexityAnalysis.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed analysis entry {raw!r}: {e}")
            continue
        if entry.task_id not in titles:
            logger.warning(f"AI returned an analysis for unknown task {entry.task_id}")
            continue
        if not entry.task_title:
            entry.task_title = titles[entry.task_id]
        analyses.append(entry)
    return analyses


async def analyze_task_complexity(
    project_root: Union[str, Path],
    tasks_file: Optional[Union[str, Path]] = None,
    output: Optional[Union[str, Path]] = None,
    threshold: float = DEFAULT_THRESHOLD,
    use_research: bool = False,
    ids: Optional[Iterable[int]] = None,
    config: Optional[ProjectConfig] = None,
) -> AnalysisResult:
    """
    Analyze task complexity and write the complexity report.

    Args:
        project_root: Project directory
        tasks_file: Tasks file (default ``tasks/tasks.json``)
        output: Report path; resolved with the report path precedence
        threshold: Minimum score at which expansion is recommended
        use_research: Start from the research role instead of main
        ids: Restrict analysis to these task ids
        config: Project config; loaded from ``project_root`` when omitted

    Returns:
        AnalysisResult with the written report and its path

    Raises:
        TasksFileError: If the tasks file cannot be loaded
        TaskNotFoundError: If a requested id does not exist
        TaskMasterError: If there is nothing to analyze
    """
    project_root = Path(project_root)
    config = config or load_project_config(project_root)
    tasks_path = resolve_tasks_path(project_root, tasks_file)
    store = load_tasks(tasks_path)

    tasks = select_tasks_for_analysis(store.tasks, ids)
    if not tasks:
        raise TaskMasterError("No tasks to analyze (all tasks are done, cancelled or deferred).")

    output_path = ReportPathResolver(project_root).resolve_output(output)
    logger.info(f"Analyzing complexity of {len(tasks)} tasks from {tasks_path}")

    role = "research" if use_research else "main"
    result = await generate_text_service(
        role,
        build_complexity_prompt(tasks, use_research),
        system_prompt=COMPLEXITY_SYSTEM_PROMPT,
        config=config,
        project_root=project_root,
    )

    analyses = _parse_analyses(result.main_result, tasks)
    analyzed = {entry.task_id for entry in analyses}
    missing = [task.id for task in tasks if task.id not in analyzed]
    for task_id in missing:
        logger.warning(f"AI response has no complexity analysis for task {task_id}")

    report = ComplexityReport(
        complexity_analysis=analyses,
        meta={
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "tasksAnalyzed": len(analyses),
            "thresholdScore": threshold,
            "projectName": config.global_settings.project_name,
            "usedResearch": use_research,
        },
    )
    save_complexity_report(output_path, report)
    logger.info(f"Complexity report written to {output_path}")

    return AnalysisResult(
        report=report,
        output_path=output_path,
        missing_ids=missing,
        telemetry=result.telemetry,
    )

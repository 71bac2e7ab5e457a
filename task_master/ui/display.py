"""
Terminal rendering for command output.

Everything here only formats and echoes; no function reads or writes project
files.
"""

from pathlib import Path
from typing import Dict, List, Optional

import click
from tabulate import tabulate

from task_master.config.models_catalog import ROLES, ModelInfo
from task_master.config.project_config import ProjectConfig
from task_master.tasks.models import ComplexityReport, Task
from task_master.tasks.queries import TaskRef, completion_percentage, status_counts

STATUS_COLORS = {
    "done": "green",
    "in-progress": "blue",
    "pending": "yellow",
    "review": "magenta",
    "deferred": "white",
    "cancelled": "red",
}

PRIORITY_COLORS = {"high": "red", "medium": "yellow", "low": "green"}

CHECK_MARK = "✓"


def styled_status(status: str) -> str:
    return click.style(status, fg=STATUS_COLORS.get(status, "white"))


def styled_priority(priority: Optional[str]) -> str:
    value = priority or "medium"
    return click.style(value, fg=PRIORITY_COLORS.get(value, "white"))


def styled_score(score: Optional[float]) -> str:
    if score is None:
        return "N/A"
    color = "red" if score >= 8 else "yellow" if score >= 5 else "green"
    text = str(int(score)) if float(score).is_integer() else f"{score:.1f}"
    return click.style(text, fg=color)


def format_dependencies(dependencies: List) -> str:
    if not dependencies:
        return "None"
    return ", ".join(str(dep) for dep in dependencies)


def header(title: str) -> None:
    click.echo()
    click.echo(click.style(title, bold=True))
    click.echo(click.style("=" * len(title), bold=True))


def display_models(config: ProjectConfig, catalog: List[ModelInfo]) -> None:
    """Active role bindings plus the catalog with check marks for bound models."""
    header("Active Model Configuration")
    active_rows = []
    for role in ROLES:
        binding = config.models[role]
        active_rows.append([role.capitalize(), binding.provider, binding.model_id])
    click.echo(tabulate(active_rows, headers=["Role", "Provider", "Model ID"], tablefmt="grid"))

    header("Available Models")
    if not catalog:
        click.echo("No models defined in configuration.")
        return

    rows = []
    for model in catalog:
        rows.append(
            [
                model.provider,
                model.id,
                CHECK_MARK if config.model_id("main") == model.id else "",
                CHECK_MARK if config.model_id("research") == model.id else "",
                CHECK_MARK if config.model_id("fallback") == model.id else "",
                ", ".join(model.allowed_roles),
            ]
        )
    click.echo(
        tabulate(
            rows,
            headers=["Provider", "Model ID", "Main", "Research", "Fallback", "Allowed Roles"],
            tablefmt="grid",
        )
    )


def display_progress(tasks: List[Task]) -> None:
    counts = status_counts(tasks)
    percentage = completion_percentage(tasks)
    click.echo(
        f"Progress: {percentage:.0f}% complete "
        f"({counts.get('done', 0)} done, {counts.get('in-progress', 0)} in progress, "
        f"{counts.get('pending', 0)} pending, {counts.get('review', 0)} review, "
        f"{counts.get('deferred', 0)} deferred, {counts.get('cancelled', 0)} cancelled)"
    )


def display_task_list(
    tasks: List[Task],
    report: Optional[ComplexityReport] = None,
    with_subtasks: bool = False,
    status_filter: Optional[str] = None,
    all_tasks: Optional[List[Task]] = None,
) -> None:
    """Progress line and the task table, complexity column when a report exists."""
    header("Tasks")
    display_progress(all_tasks if all_tasks is not None else tasks)
    if status_filter:
        click.echo(f"Filtered by status: {status_filter}")

    if not tasks:
        click.echo("No tasks found.")
        return

    headers = ["ID", "Title", "Status", "Priority", "Dependencies"]
    if report is not None:
        headers.append("Complexity")

    rows = []
    for task in tasks:
        row = [
            task.id,
            task.title,
            styled_status(task.status),
            styled_priority(task.priority),
            format_dependencies(task.dependencies),
        ]
        if report is not None:
            row.append(styled_score(report.score_for(task.id)))
        rows.append(row)

        if with_subtasks:
            for sub in task.subtasks:
                sub_row = [
                    f"  {task.id}.{sub.id}",
                    f"└ {sub.title}",
                    styled_status(sub.status),
                    "",
                    format_dependencies(sub.dependencies),
                ]
                if report is not None:
                    sub_row.append("")
                rows.append(sub_row)

    click.echo(tabulate(rows, headers=headers, tablefmt="grid"))


def display_next_task(ref: Optional[TaskRef], report: Optional[ComplexityReport] = None) -> None:
    """The next task suggestion, or a hint when nothing is actionable."""
    if ref is None:
        click.echo(
            "No eligible tasks found. All tasks are either done or blocked by dependencies."
        )
        return

    task = ref.task
    label = "Next Subtask" if ref.is_subtask else "Next Task"
    header(f"{label}: #{ref.display_id} - {task.title}")
    rows = [
        ["Status", styled_status(task.status)],
        ["Priority", styled_priority(task.priority or (ref.parent.priority if ref.parent else None))],
        ["Dependencies", format_dependencies(task.dependencies)],
    ]
    if ref.parent is not None:
        rows.append(["Parent", f"#{ref.parent.id} {ref.parent.title}"])
    elif report is not None:
        rows.append(["Complexity", styled_score(report.score_for(task.id))])
    if task.description:
        rows.append(["Description", task.description])
    click.echo(tabulate(rows, tablefmt="plain"))
    click.echo()
    click.echo(f"Run: task-master show {ref.display_id}")


def display_task_detail(
    ref: TaskRef,
    report: Optional[ComplexityReport] = None,
    status_filter: Optional[str] = None,
) -> None:
    """Full view of a task or subtask, with its subtasks when present."""
    task = ref.task
    kind = "Subtask" if ref.is_subtask else "Task"
    header(f"{kind} #{ref.display_id}: {task.title}")

    rows = [
        ["ID", ref.display_id],
        ["Status", styled_status(task.status)],
        ["Priority", styled_priority(task.priority)],
        ["Dependencies", format_dependencies(task.dependencies)],
        ["Description", task.description],
    ]
    if ref.parent is not None:
        rows.append(["Parent", f"#{ref.parent.id} {ref.parent.title}"])
    elif report is not None:
        entry = report.find(task.id)
        if entry is not None:
            rows.append(["Complexity", styled_score(entry.complexity_score)])
            rows.append(["Recommended subtasks", entry.recommended_subtasks])
    click.echo(tabulate(rows, tablefmt="plain"))

    if task.details:
        click.echo()
        click.echo(click.style("Implementation Details:", bold=True))
        click.echo(task.details)
    if task.test_strategy:
        click.echo()
        click.echo(click.style("Test Strategy:", bold=True))
        click.echo(task.test_strategy)

    if ref.is_subtask:
        return

    subtasks = task.subtasks
    if status_filter:
        statuses = [s.strip() for s in status_filter.split(",") if s.strip()]
        subtasks = [sub for sub in subtasks if sub.status in statuses]
        click.echo()
        click.echo(f"Subtasks filtered by status: {status_filter}")

    if subtasks:
        click.echo()
        click.echo(click.style("Subtasks:", bold=True))
        sub_rows = [
            [f"{task.id}.{sub.id}", sub.title, styled_status(sub.status), format_dependencies(sub.dependencies)]
            for sub in subtasks
        ]
        click.echo(tabulate(sub_rows, headers=["ID", "Title", "Status", "Dependencies"], tablefmt="grid"))
    elif not task.subtasks:
        click.echo()
        click.echo(f"No subtasks. Run: task-master expand --id={task.id}")


def display_complexity_report(report: ComplexityReport, path: Path) -> None:
    """Report meta and its analyses, highest score first."""
    header("Task Complexity Analysis Report")
    meta = report.meta
    threshold = meta.get("thresholdScore", 5)
    meta_rows = [
        ["Report", str(path)],
        ["Generated", meta.get("generatedAt", "unknown")],
        ["Tasks analyzed", meta.get("tasksAnalyzed", len(report.complexity_analysis))],
        ["Threshold score", threshold],
        ["Research-backed", "yes" if meta.get("usedResearch") else "no"],
    ]
    if meta.get("projectName"):
        meta_rows.insert(1, ["Project", meta["projectName"]])
    click.echo(tabulate(meta_rows, tablefmt="plain"))
    click.echo()

    if not report.complexity_analysis:
        click.echo("The report contains no task analyses.")
        return

    entries = sorted(report.complexity_analysis, key=lambda e: -e.complexity_score)
    rows = []
    for entry in entries:
        command = f"task-master expand --id={entry.task_id} --num={entry.recommended_subtasks}"
        rows.append(
            [
                entry.task_id,
                entry.task_title,
                styled_score(entry.complexity_score),
                entry.recommended_subtasks,
                command if entry.complexity_score >= float(threshold) else "",
            ]
        )
    click.echo(
        tabulate(
            rows,
            headers=["ID", "Title", "Score", "Subtasks", "Expansion Command"],
            tablefmt="grid",
        )
    )


def display_analysis_summary(counts: Dict[str, int], total: int, output_path: Path) -> None:
    header("Complexity Analysis Summary")
    rows = [
        ["Tasks analyzed", total],
        ["High complexity (8-10)", counts.get("high", 0)],
        ["Medium complexity (5-7)", counts.get("medium", 0)],
        ["Low complexity (1-4)", counts.get("low", 0)],
    ]
    click.echo(tabulate(rows, tablefmt="plain"))
    click.echo()
    click.echo(f"Report saved to: {output_path}")
    click.echo("Run 'task-master complexity-report' to view it.")


def display_new_subtasks(task_id: int, subtasks: List[Task]) -> None:
    rows = [
        [f"{task_id}.{sub.id}", sub.title, format_dependencies(sub.dependencies)]
        for sub in subtasks
    ]
    click.echo(tabulate(rows, headers=["ID", "Title", "Dependencies"], tablefmt="grid"))


def display_telemetry(telemetry: Dict[str, object]) -> None:
    if not telemetry:
        return
    click.echo(
        f"AI usage: {telemetry.get('provider')}/{telemetry.get('modelId')} "
        f"({telemetry.get('role')} role), "
        f"{telemetry.get('inputTokens', 0)} in / {telemetry.get('outputTokens', 0)} out tokens, "
        f"est. cost ${float(telemetry.get('totalCost') or 0):.6f}"
    )

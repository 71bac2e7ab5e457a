"""Task command implementations"""

from pathlib import Path
from typing import Optional

import click

from task_master.paths import ReportPathResolver, resolve_tasks_path
from task_master.tasks.expand import REPORT_NOT_FOUND_MESSAGE, expand_all_tasks, expand_task
from task_master.tasks.models import ComplexityReport
from task_master.tasks.queries import filter_tasks, find_next_task, find_task_by_id
from task_master.tasks.storage import load_complexity_report, load_tasks
from task_master.ui.display import (
    display_new_subtasks,
    display_next_task,
    display_task_detail,
    display_task_list,
    display_telemetry,
)
from task_master.utils.logging import get_logger

from ..utils import get_project_root, info_message, run_async, success_message, warning_message

logger = get_logger(__name__)


def load_report_for_display(
    project_root: Path, report_path: Optional[str] = None
) -> Optional[ComplexityReport]:
    """Complexity report for the read-only views; None when there is none."""
    path = ReportPathResolver(project_root).resolve(report_path)
    if path is None:
        logger.info("No complexity report found; complexity scores will not be shown")
        return None
    if report_path and not path.is_file():
        warning_message(f"Complexity report not found: {path}")
        return None
    return load_complexity_report(path)


@click.command("list")
@click.option("--status", "-s", help="Filter by status (comma-separated)")
@click.option("--with-subtasks", is_flag=True, help="Show subtasks under each task")
@click.option("--file", "-f", "--tasks-file", "tasks_file", help="Path to the tasks file")
@click.option("--report-path", "-r", help="Path to the complexity report")
@click.pass_context
def list_tasks(
    ctx,
    status: Optional[str],
    with_subtasks: bool,
    tasks_file: Optional[str],
    report_path: Optional[str],
):
    """List all tasks"""
    project_root = get_project_root(ctx)
    store = load_tasks(resolve_tasks_path(project_root, tasks_file))
    report = load_report_for_display(project_root, report_path)

    tasks = filter_tasks(store.tasks, status)
    display_task_list(tasks, report, with_subtasks, status, all_tasks=store.tasks)
    display_next_task(find_next_task(store), report)


@click.command("next")
@click.option("--file", "-f", "--tasks-file", "tasks_file", help="Path to the tasks file")
@click.option("--report-path", "-r", help="Path to the complexity report")
@click.pass_context
def next_task(ctx, tasks_file: Optional[str], report_path: Optional[str]):
    """Show the next task to work on"""
    project_root = get_project_root(ctx)
    store = load_tasks(resolve_tasks_path(project_root, tasks_file))
    report = load_report_for_display(project_root, report_path)
    display_next_task(find_next_task(store), report)


@click.command()
@click.argument("task_id", required=False)
@click.option("--id", "id_option", help="Task id (N or N.M for a subtask)")
@click.option("--status", "-s", help="Only show subtasks with this status")
@click.option("--file", "-f", "--tasks-file", "tasks_file", help="Path to the tasks file")
@click.option("--report-path", "-r", help="Path to the complexity report")
@click.pass_context
def show(
    ctx,
    task_id: Optional[str],
    id_option: Optional[str],
    status: Optional[str],
    tasks_file: Optional[str],
    report_path: Optional[str],
):
    """Show details of a task or subtask"""
    requested = task_id or id_option
    if not requested:
        raise click.UsageError("Please provide a task ID (e.g. 'show 3' or 'show --id=3.2').")

    project_root = get_project_root(ctx)
    store = load_tasks(resolve_tasks_path(project_root, tasks_file))
    ref = find_task_by_id(store, requested)
    report = load_report_for_display(project_root, report_path)
    display_task_detail(ref, report, status)


@click.command()
@click.option("--id", "task_id", help="Task to expand")
@click.option("--all", "expand_all", is_flag=True, help="Expand all eligible tasks")
@click.option("--num", "-n", type=click.IntRange(min=1), help="Number of subtasks to generate")
@click.option("--research", "-r", is_flag=True, help="Use the research model")
@click.option("--prompt", "-p", help="Additional context for subtask generation")
@click.option("--force", is_flag=True, help="Replace existing subtasks")
@click.option("--file", "-f", "tasks_file", help="Path to the tasks file")
@click.pass_context
def expand(
    ctx,
    task_id: Optional[str],
    expand_all: bool,
    num: Optional[int],
    research: bool,
    prompt: Optional[str],
    force: bool,
    tasks_file: Optional[str],
):
    """Break a task (or all tasks) into subtasks"""
    if not task_id and not expand_all:
        raise click.UsageError("Provide --id=<task id> or --all.")

    project_root = get_project_root(ctx)
    config = ctx.obj["config"]
    options = dict(
        tasks_file=tasks_file,
        num=num,
        use_research=research,
        additional_context=prompt,
        force=force,
        config=config,
    )

    if expand_all:
        outcome = run_async(expand_all_tasks(project_root, **options))
    else:
        outcome = run_async(expand_task(project_root, task_id, **options))

    if outcome.expanded and not outcome.report_found and num is None:
        if outcome.report_path is not None:
            missing = f"Complexity report not found: {outcome.report_path}"
        else:
            missing = REPORT_NOT_FOUND_MESSAGE
        warning_message(
            f"{missing}. Using default subtask count "
            f"({config.global_settings.default_subtasks})."
        )

    if not outcome.expanded:
        if expand_all:
            info_message("No tasks eligible for expansion.")
        else:
            info_message(f"Task {task_id} is already done; nothing to expand.")

    for result in outcome.expanded:
        success_message(f"Added {len(result.subtasks)} subtasks to task {result.task_id}")
        display_new_subtasks(result.task_id, result.subtasks)
        display_telemetry(result.telemetry)

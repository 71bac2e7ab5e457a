"""Complexity analysis command implementations"""

from typing import Optional

import click

from task_master.exceptions import ReportNotFoundError, TaskMasterError
from task_master.paths import ReportPathResolver
from task_master.tasks.complexity import (
    DEFAULT_THRESHOLD,
    analyze_task_complexity,
    parse_id_list,
    summarize,
)
from task_master.tasks.storage import load_complexity_report
from task_master.ui.display import (
    display_analysis_summary,
    display_complexity_report,
    display_telemetry,
)

from ..utils import get_project_root, info_message, run_async, success_message, warning_message


@click.command("analyze-complexity")
@click.option("--file", "-f", "tasks_file", help="Path to the tasks file")
@click.option("--output", "-o", help="Where to write the complexity report")
@click.option(
    "--threshold",
    "-t",
    type=click.FloatRange(1, 10),
    default=DEFAULT_THRESHOLD,
    show_default=True,
    help="Minimum complexity score that recommends expansion",
)
@click.option("--research", "-r", is_flag=True, help="Use the research model")
@click.option("--id", "ids", help="Comma-separated task ids to analyze")
@click.pass_context
def analyze_complexity(
    ctx,
    tasks_file: Optional[str],
    output: Optional[str],
    threshold: float,
    research: bool,
    ids: Optional[str],
):
    """Analyze task complexity and write a complexity report"""
    project_root = get_project_root(ctx)
    if research:
        info_message("Using the research model for complexity analysis")

    result = run_async(
        analyze_task_complexity(
            project_root,
            tasks_file=tasks_file,
            output=output,
            threshold=threshold,
            use_research=research,
            ids=parse_id_list(ids),
            config=ctx.obj["config"],
        )
    )

    for task_id in result.missing_ids:
        warning_message(f"No complexity analysis returned for task {task_id}")

    success_message(
        f"Analyzed {len(result.report.complexity_analysis)} tasks"
    )
    display_analysis_summary(
        summarize(result.report), len(result.report.complexity_analysis), result.output_path
    )
    display_telemetry(result.telemetry)


@click.command("complexity-report")
@click.option("--file", "-f", "report_file", help="Path to the complexity report")
@click.pass_context
def complexity_report(ctx, report_file: Optional[str]):
    """Display the complexity analysis report"""
    project_root = get_project_root(ctx)
    resolver = ReportPathResolver(project_root)
    report_path = resolver.resolve(report_file)

    if report_path is None:
        raise ReportNotFoundError(resolver.candidates())
    if not report_path.is_file():
        raise ReportNotFoundError([report_path], path=report_path)

    report = load_complexity_report(report_path)
    if report is None:
        raise TaskMasterError(f"Invalid complexity report: {report_path}")
    display_complexity_report(report, report_path)

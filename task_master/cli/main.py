#!/usr/bin/env python3
"""
Task Master CLI
Main entry point for all task management commands.
"""

from pathlib import Path

import click

from task_master import __version__
from task_master.config.project_config import load_project_config
from task_master.config.settings import load_environment
from task_master.exceptions import TaskMasterError
from task_master.paths import find_project_root
from task_master.utils.logging import configure_logging, get_logger, set_global_level

from .utils import error_message, info_message, warning_message

logger = get_logger(__name__)


class TaskMasterGroup(click.Group):
    """
    Command group that turns TaskMasterError into CLI output.

    Handlers raise; this is the only place an error becomes a message on
    stderr and a process exit status.
    """

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except TaskMasterError as e:
            logger.debug(f"Command failed: {e.message}", exc_info=True)
            if e.exit_code == 0:
                warning_message(e.message)
            else:
                error_message(e.message)
            if e.hint:
                info_message(e.hint)
            ctx.exit(e.exit_code)


@click.group(cls=TaskMasterGroup)
@click.version_option(version=__version__, prog_name="task-master")
@click.option(
    "--project-root",
    type=click.Path(file_okay=False),
    default=None,
    help="Project directory (default: discovered from the current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, project_root, verbose):
    """
    Task Master CLI

    AI-assisted task management: analyze complexity, expand tasks into
    subtasks, and pick the next task to work on.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)

    root = Path(project_root).resolve() if project_root else find_project_root()
    load_environment(root)
    configure_logging()
    config = load_project_config(root)

    if verbose or config.global_settings.debug:
        set_global_level("DEBUG")

    # Store global options in context
    ctx.obj["project_root"] = root
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    logger.debug(f"Project root: {root}")


# Import command modules
from .commands import complexity_commands, model_commands, task_commands  # noqa: E402

cli.add_command(model_commands.models)
cli.add_command(complexity_commands.analyze_complexity)
cli.add_command(complexity_commands.complexity_report)
cli.add_command(task_commands.list_tasks)
cli.add_command(task_commands.next_task)
cli.add_command(task_commands.show)
cli.add_command(task_commands.expand)


def main():
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()

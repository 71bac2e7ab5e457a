"""
Common utilities for CLI commands
Provides shared output formatting and project context across all commands.
"""

import asyncio
from pathlib import Path
from typing import Any, Coroutine

import click


def success_message(message: str) -> None:
    """
    Display success message with consistent formatting.

    Args:
        message: Success message to display
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def warning_message(message: str) -> None:
    """
    Display warning message with consistent formatting.

    Args:
        message: Warning message to display
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"), err=True)


def info_message(message: str) -> None:
    """
    Display info message with consistent formatting.

    Args:
        message: Info message to display
    """
    click.echo(f"ℹ️  {message}")


def error_message(message: str) -> None:
    """Display an error on stderr."""
    click.echo(click.style(f"❌ Error: {message}", fg="red"), err=True)


def get_project_root(ctx: click.Context) -> Path:
    """Project root chosen by the top-level group."""
    return ctx.obj["project_root"]


def run_async(coro: Coroutine) -> Any:
    """Run a coroutine from a synchronous click command."""
    return asyncio.run(coro)

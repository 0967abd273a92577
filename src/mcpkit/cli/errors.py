"""
Standardized error handling and exit codes for the mcpkit CLI.
"""

from enum import IntEnum
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from mcpkit.core.config import MCPKitConfig, load_config

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for mcpkit CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {escape(solution)}")


def format_validation_error(error: ValidationError) -> str:
    """One ``location: message`` line per validation error."""
    return "\n".join(
        f"{'.'.join(str(part) for part in err['loc']) or '(root)'}: {err['msg']}"
        for err in error.errors()
    )


def load_config_or_exit(project_dir: Path) -> MCPKitConfig:
    """
    Load configuration for a command, exiting with USER_ERROR if it is invalid.

    Args:
        project_dir: Directory holding .mcpkit.json and .env files

    Returns:
        The validated configuration
    """
    try:
        return load_config(project_dir.resolve(), use_cache=False)
    except ValidationError as e:
        print_error(
            "Invalid mcpkit configuration",
            reason=format_validation_error(e),
            solution="Fix .mcpkit.json, ~/.config/mcpkit/config.json or the MCPKIT_* variables",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

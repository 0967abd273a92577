"""
mcpkit CLI - Main application entry point.

Inspection commands for hook definitions, composed guidance and session
gating. The MCP server itself embeds the library; this CLI only helps
authors see what their hooks produce.
"""

import logging

import typer
from rich.console import Console

from mcpkit import __version__
from mcpkit.cli import hooks, session

app = typer.Typer(
    name="mcpkit",
    help="Inspect MCP guidance hooks and session gating",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    mcpkit - guidance composition and workflow gating for MCP servers.

    Examples:
        mcpkit hooks list                      # Show registered hooks
        mcpkit hooks compose session start     # Print composed guidance
        mcpkit session simulate my_tool        # Check init gating
    """
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    ctx.obj = {"debug": debug}


app.add_typer(hooks.app, name="hooks")
app.add_typer(session.app, name="session")


@app.command()
def version() -> None:
    """Show mcpkit version and exit."""
    console.print(f"mcpkit version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]

"""
Session gating commands.

Replays a sequence of tool calls against a fresh session state tracker
built from configuration, showing which calls would be refused and how
the session state moves.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from mcpkit.cli.errors import load_config_or_exit

app = typer.Typer(
    name="session",
    help="Check session initialization gating",
    no_args_is_help=True,
)

console = Console()


@app.command(name="simulate")
def simulate(
    tools: list[str] = typer.Argument(..., help="Tool names, in call order"),
    requires_init: list[str] = typer.Option(
        [], "--requires-init", "-r", help="Tool that requires initialization (repeatable)"
    ),
    project_dir: Path = typer.Option(
        Path("."), "--project", "-p", help="Project directory for .mcpkit.json"
    ),
) -> None:
    """
    Replay tool calls through the session state machine.

    Refused calls are shown but not recorded, as a host would do.

    Examples:
        mcpkit session simulate my_tool session_init my_tool -r my_tool
    """
    config = load_config_or_exit(project_dir)
    session_config = config.session
    if requires_init:
        session_config = session_config.model_copy(
            update={"requires_init": [*session_config.requires_init, *requires_init]}
        )
    tracker = session_config.create_tracker()

    table = Table(title="Session simulation")
    table.add_column("#", justify="right")
    table.add_column("Tool", style="cyan")
    table.add_column("Allowed")
    table.add_column("State")
    table.add_column("Note")

    for index, tool in enumerate(tools, start=1):
        refusal = tracker.check_tool_allowed(tool)
        if refusal is not None:
            table.add_row(str(index), tool, "[red]no[/red]", tracker.state.value, refusal)
            continue

        transition = tracker.record_tool_call(tool)
        state = transition.new_state.value
        if transition.transitioned:
            state = f"{transition.previous_state.value} → {state}"
        table.add_row(str(index), tool, "[green]yes[/green]", state, transition.guidance or "")

    console.print(table)

"""
Hook inspection commands.

Lists registered hook definitions and prints the guidance document a
lifecycle point would produce, including notices about skipped and
failed hooks.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from mcpkit.cli.errors import ExitCode, load_config_or_exit, print_error
from mcpkit.core.hooks import (
    CircularDependencyError,
    HookError,
    HookLifecycle,
    HookRegistry,
    HookType,
    create_core_hook_registry,
    extend_core_hooks,
    load_core_hooks,
)
from mcpkit.core.hooks.loader import HookContentLoader

app = typer.Typer(
    name="hooks",
    help="Inspect guidance hooks and composed output",
    no_args_is_help=True,
)

console = Console()


def _build_registry(hooks_file: Optional[Path], app_name: str) -> HookRegistry:
    """
    Core registry, extended with definitions from a JSON file if given.

    Definitions in the file that omit ``app`` are placed in app_name.
    """
    if hooks_file is None:
        return create_core_hook_registry()

    try:
        data = json.loads(hooks_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print_error(f"Cannot read hook definitions from {hooks_file}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    if not isinstance(data, list):
        print_error(
            f"Invalid hook definitions in {hooks_file}",
            reason="Expected a JSON array of hook objects",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    definitions = [
        {"app": app_name, **entry} if isinstance(entry, dict) else entry for entry in data
    ]

    try:
        return extend_core_hooks(definitions)
    except HookError as e:
        print_error(f"Invalid hook definitions in {hooks_file}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)


@app.command(name="list")
def list_hooks(
    hook_type: Optional[HookType] = typer.Option(None, "--type", "-t", help="Filter by hook type"),
    lifecycle: Optional[HookLifecycle] = typer.Option(
        None, "--lifecycle", "-l", help="Filter by lifecycle phase"
    ),
    hooks_file: Optional[Path] = typer.Option(
        None, "--hooks", help="JSON file with additional hook definitions"
    ),
    project_dir: Path = typer.Option(
        Path("."), "--project", "-p", help="Project directory for .mcpkit.json"
    ),
) -> None:
    """
    List registered hook definitions.

    Examples:
        mcpkit hooks list
        mcpkit hooks list --type session --lifecycle start
        mcpkit hooks list --hooks my-hooks.json
    """
    config = load_config_or_exit(project_dir)
    registry = _build_registry(hooks_file, config.hooks.app)
    hooks = [
        hook
        for hook in registry.all()
        if (hook_type is None or hook.type == hook_type)
        and (lifecycle is None or hook.lifecycle == lifecycle)
    ]

    if not hooks:
        console.print("[yellow]No hooks found.[/yellow]")
        return

    table = Table(title=f"Hooks ({len(hooks)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Level", style="magenta")
    table.add_column("Priority", justify="right")
    table.add_column("Blocking")

    for hook in hooks:
        table.add_row(
            hook.id,
            hook.name,
            hook.requirement_level.value,
            str(hook.priority),
            "yes" if hook.blocking else "",
        )

    console.print(table)


@app.command(name="compose")
def compose(
    hook_type: HookType = typer.Argument(..., help="Hook type (session, action, storage, config)"),
    lifecycle: HookLifecycle = typer.Argument(
        ..., help="Lifecycle phase (start, running, progress, cancel, end)"
    ),
    storage: Optional[str] = typer.Option(
        None, "--storage", "-s", help="Active storage backend (defaults to config)"
    ),
    feature: Optional[str] = typer.Option(None, "--feature", "-f", help="Current feature"),
    hooks_file: Optional[Path] = typer.Option(
        None, "--hooks", help="JSON file with additional hook definitions"
    ),
    content_path: Optional[Path] = typer.Option(
        None, "--content-path", "-c", help="Directory of hook content files"
    ),
    project_dir: Path = typer.Option(
        Path("."), "--project", "-p", help="Project directory for .mcpkit.json"
    ),
) -> None:
    """
    Print the composed guidance for a lifecycle point.

    Examples:
        mcpkit hooks compose session start
        mcpkit hooks compose session end --storage memory
        mcpkit hooks compose config start --hooks my-hooks.json -c ./content
    """
    config = load_config_or_exit(project_dir)
    registry = _build_registry(hooks_file, config.hooks.app)

    base_path = content_path or config.hooks.content_path
    loader = None
    if base_path is not None:
        loader = HookContentLoader(
            base_path, cache=config.hooks.cache, max_workers=config.hooks.max_workers
        )

    try:
        result = load_core_hooks(
            hook_type,
            lifecycle,
            registry=registry,
            storage=storage or config.storage.backend,
            feature=feature,
            loader=loader,
            composer_options=config.composer.to_options(),
        )
    except CircularDependencyError as e:
        print_error(
            "Hook dependencies form a cycle",
            reason=" -> ".join(e.cycle),
            solution="Remove one of the dependencies in the cycle",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    if result.composed.is_empty:
        console.print(f"[yellow]No hooks matched {hook_type.value}/{lifecycle.value}.[/yellow]")
    else:
        console.print(result.content, markup=False, highlight=False)

    for notice in result.composed.notices:
        console.print(notice, style="dim", markup=False)

    if result.composed.blocking_hooks:
        console.print(
            f"[yellow]Blocking hooks:[/yellow] {', '.join(result.composed.blocking_hooks)}"
        )

"""
Built-in session hooks and the query-load-compose pipeline.

Two core hooks ship with mcpkit:
- session-start-core: session/start, MUST, guidance for initialization
- session-end-core: session/end, SHOULD, guidance for handoff and cleanup

Their content lives in the ``content/`` directory beside this module.

Usage:
    from mcpkit.core.hooks.builtin import load_core_hooks

    result = load_core_hooks(HookType.SESSION, HookLifecycle.START, storage="memory")
    notification_text = result.content
    for notice in result.composed.notices:
        print(notice)
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcpkit.core.hooks.composer import ComposerOptions, HookComposer
from mcpkit.core.hooks.loader import FailedLoad, HookContentLoader
from mcpkit.core.hooks.models import (
    ComposedHooksResult,
    HookDefinition,
    HookDefinitionInput,
    HookLifecycle,
    HookQueryOptions,
    HookType,
    RequirementLevel,
    ResolvedHook,
)
from mcpkit.core.hooks.registry import HookRegistry, create_hook_registry

logger = logging.getLogger(__name__)

session_start_core_hook = HookDefinition(
    tag="session-start-core",
    type=HookType.SESSION,
    lifecycle=HookLifecycle.START,
    name="Session Initialization",
    description=(
        "Core guidance for session initialization including server status, "
        "ping handling, and workflow setup"
    ),
    requirement_level=RequirementLevel.MUST,
    priority=100,
    content_file="core.md",
)

session_end_core_hook = HookDefinition(
    tag="session-end-core",
    type=HookType.SESSION,
    lifecycle=HookLifecycle.END,
    name="Session Completion",
    description=(
        "Core guidance for session completion including context handoff, "
        "cleanup, and summary generation"
    ),
    requirement_level=RequirementLevel.SHOULD,
    priority=100,
    content_file="session-end-core.md",
)

core_hook_definitions: list[HookDefinition] = [
    session_start_core_hook,
    session_end_core_hook,
]


@dataclass
class CoreHooksLoadResult:
    """Everything produced by one run of the hook pipeline."""

    hooks: list[ResolvedHook]
    failed: list[FailedLoad]
    composed: ComposedHooksResult

    @property
    def content(self) -> str:
        """The composed markdown document."""
        return self.composed.content


def get_hooks_content_path() -> Path:
    """Get the directory holding built-in hook content."""
    return Path(__file__).parent / "content"


def create_core_hook_registry() -> HookRegistry:
    """Create a registry with the core hooks registered."""
    registry = create_hook_registry()
    registry.register_all(core_hook_definitions)
    return registry


def extend_core_hooks(
    hooks: Iterable[HookDefinitionInput],
    registry: HookRegistry | None = None,
) -> HookRegistry:
    """
    Register additional hooks on top of the core set.

    Args:
        hooks: Hook definitions to add
        registry: Registry to extend (defaults to a new core registry)

    Returns:
        The registry with all hooks registered
    """
    if registry is None:
        registry = create_core_hook_registry()
    registry.register_all(hooks)
    return registry


def get_core_hook(tag: str) -> HookDefinition | None:
    """Find a core hook definition by tag."""
    for hook in core_hook_definitions:
        if hook.tag == tag:
            return hook
    return None


def load_core_hooks(
    type: HookType,
    lifecycle: HookLifecycle,
    *,
    registry: HookRegistry | None = None,
    storage: str | None = None,
    feature: str | None = None,
    config: dict[str, Any] | None = None,
    session_id: str | None = None,
    request_id: str | None = None,
    content_path: str | Path | None = None,
    loader: HookContentLoader | None = None,
    composer: HookComposer | None = None,
    composer_options: ComposerOptions | None = None,
) -> CoreHooksLoadResult:
    """
    Query, load and compose hooks for one lifecycle point.

    Hooks whose conditions or scoping exclude them are reported as skipped;
    hooks whose content cannot be read are reported as failed. Neither
    aborts composition.

    Args:
        type: Hook type to select
        lifecycle: Lifecycle phase to select
        registry: Registry to query (defaults to the core registry)
        storage: Active storage backend for condition evaluation
        feature: Current feature for condition evaluation
        config: Current config for condition evaluation
        session_id: Current session, for scoped hooks
        request_id: Current request, for scoped hooks
        content_path: Base directory for content (defaults to built-in content)
        loader: Loader to use instead of building one from content_path
        composer: Composer to use instead of building one from composer_options
        composer_options: Options for the default composer

    Returns:
        CoreHooksLoadResult with resolved hooks, failures and composition

    Raises:
        CircularDependencyError: If the matched hooks form a dependency loop
    """
    if registry is None:
        registry = create_core_hook_registry()
    if loader is None:
        loader = HookContentLoader(content_path or get_hooks_content_path())
    if composer is None:
        composer = HookComposer(composer_options)

    options = HookQueryOptions(
        type=type,
        lifecycle=lifecycle,
        storage=storage,
        feature=feature,
        config=config,
        session_id=session_id,
        request_id=request_id,
    )

    matches = registry.query(options)
    skipped = registry.skipped(options)
    loaded = loader.load_all(matches)

    if loaded.failed:
        logger.warning(
            f"{len(loaded.failed)} hook(s) failed to load for {type.value}/{lifecycle.value}"
        )

    composed = composer.compose_with_transparency(
        loaded.resolved,
        skipped=skipped,
        failed=loaded.failed_summaries(),
    )

    return CoreHooksLoadResult(hooks=loaded.resolved, failed=loaded.failed, composed=composed)


def get_session_start_content(
    registry: HookRegistry | None = None,
    storage: str | None = None,
) -> str:
    """Composed guidance for session start."""
    return load_core_hooks(
        HookType.SESSION, HookLifecycle.START, registry=registry, storage=storage
    ).content


def get_session_end_content(
    registry: HookRegistry | None = None,
    storage: str | None = None,
) -> str:
    """Composed guidance for session end."""
    return load_core_hooks(
        HookType.SESSION, HookLifecycle.END, registry=registry, storage=storage
    ).content

"""
Composable guidance hooks for MCP servers.

Hooks attach normative guidance text to points in a session lifecycle.
This package stores hook definitions, resolves their content, and merges
the hooks that apply to a lifecycle point into one ordered document.

Key Classes:
    HookRegistry: Catalog of hook definitions with conditional queries
    HookContentLoader: Reads hook content with memoization
    HookComposer: Merges resolved hooks by RFC 2119 requirement level

Key Models:
    HookDefinition: Immutable hook metadata (ID computed from app/type/lifecycle/tag)
    ResolvedHook: HookDefinition plus loaded content
    ComposedHooksResult: Composed document plus included/skipped/failed hooks

Usage:
    from mcpkit.core.hooks import (
        HookComposer,
        HookContentLoader,
        HookLifecycle,
        HookRegistry,
        HookType,
    )

    registry = HookRegistry()
    registry.register({
        "tag": "start",
        "type": "session",
        "lifecycle": "start",
        "name": "Start",
        "requirement_level": "MUST",
    })

    hooks = registry.query(type=HookType.SESSION, lifecycle=HookLifecycle.START)
    loaded = HookContentLoader(base_path="hooks").load_all(hooks)
    result = HookComposer().compose(loaded.resolved)
"""

from mcpkit.core.hooks.builtin import (
    CoreHooksLoadResult,
    core_hook_definitions,
    create_core_hook_registry,
    extend_core_hooks,
    get_core_hook,
    get_hooks_content_path,
    get_session_end_content,
    get_session_start_content,
    load_core_hooks,
    session_end_core_hook,
    session_start_core_hook,
)
from mcpkit.core.hooks.composer import (
    ComposerOptions,
    HookComposer,
    compose_hooks,
    create_composer,
)
from mcpkit.core.hooks.exceptions import (
    CircularDependencyError,
    ContentNotFoundError,
    DuplicateHookError,
    HookError,
    HookValidationError,
)
from mcpkit.core.hooks.loader import (
    FailedLoad,
    HookContentLoader,
    LoadAllResult,
    create_content_loader,
)
from mcpkit.core.hooks.models import (
    ComposedHooksResult,
    FailedHook,
    Feature,
    HookConditions,
    HookDefinition,
    HookDefinitionInput,
    HookLifecycle,
    HookQueryOptions,
    HookSummary,
    HookType,
    RequirementLevel,
    ResolvedHook,
    SkippedHook,
    conditions_match,
)
from mcpkit.core.hooks.registry import HookRegistry, create_hook_registry

__all__ = [
    # Models
    "ComposedHooksResult",
    "FailedHook",
    "Feature",
    "HookConditions",
    "HookDefinition",
    "HookDefinitionInput",
    "HookLifecycle",
    "HookQueryOptions",
    "HookSummary",
    "HookType",
    "RequirementLevel",
    "ResolvedHook",
    "SkippedHook",
    "conditions_match",
    # Registry
    "HookRegistry",
    "create_hook_registry",
    # Loader
    "FailedLoad",
    "HookContentLoader",
    "LoadAllResult",
    "create_content_loader",
    # Composer
    "ComposerOptions",
    "HookComposer",
    "compose_hooks",
    "create_composer",
    # Exceptions
    "CircularDependencyError",
    "ContentNotFoundError",
    "DuplicateHookError",
    "HookError",
    "HookValidationError",
    # Core hooks
    "CoreHooksLoadResult",
    "core_hook_definitions",
    "create_core_hook_registry",
    "extend_core_hooks",
    "get_core_hook",
    "get_hooks_content_path",
    "get_session_end_content",
    "get_session_start_content",
    "load_core_hooks",
    "session_end_core_hook",
    "session_start_core_hook",
]

"""
In-memory hook registry.

The registry is the catalog of hook definitions for one session or
process. It validates definitions at registration time, computes their
IDs, and answers conditional queries for a lifecycle point.

Query filters are applied conjunctively:
- type / lifecycle: exact match
- tags: hook carries any of the requested tags
- session_id / request_id: hook is unscoped or scoped to the same value
- conditions: storage, feature and config requirements all hold

Results are ordered by priority descending. Ties keep registration order.

The registry does no locking. Hosts serving concurrent sessions must not
mutate one registry while queries run against it.

Example:
    >>> registry = HookRegistry()
    >>> registry.register({
    ...     "tag": "session-start-core",
    ...     "type": "session",
    ...     "lifecycle": "start",
    ...     "name": "Session Initialization",
    ...     "requirement_level": "MUST",
    ... })
    >>> hooks = registry.query(type=HookType.SESSION, lifecycle=HookLifecycle.START)
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pydantic import ValidationError

from mcpkit.core.hooks.exceptions import DuplicateHookError, HookValidationError
from mcpkit.core.hooks.models import (
    HookDefinition,
    HookDefinitionInput,
    HookQueryOptions,
    unmet_condition,
)

logger = logging.getLogger(__name__)


def _validate(hook_input: HookDefinitionInput) -> HookDefinition:
    if isinstance(hook_input, HookDefinition):
        return hook_input
    data = dict(hook_input) if isinstance(hook_input, Mapping) else hook_input
    try:
        return HookDefinition.model_validate(data)
    except ValidationError as e:
        raise HookValidationError(
            f"Invalid hook definition: {e.error_count()} validation error(s)",
            errors=[dict(err) for err in e.errors()],
        ) from e


class HookRegistry:
    """
    Catalog of hook definitions keyed by computed hook ID.

    No hidden state beyond the registration map. Every method is
    synchronous; only register, unregister and clear mutate.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, HookDefinition] = {}

    def register(self, hook_input: HookDefinitionInput) -> HookDefinition:
        """
        Validate and register a hook definition.

        Args:
            hook_input: A HookDefinition or a mapping of its fields

        Returns:
            The registered HookDefinition (with defaults applied)

        Raises:
            HookValidationError: If the definition is malformed
            DuplicateHookError: If a hook with the same ID is registered
        """
        hook = _validate(hook_input)

        if hook.id in self._hooks:
            raise DuplicateHookError(hook.id)

        self._hooks[hook.id] = hook
        logger.debug(f"Registered hook {hook.id} ({hook.requirement_level.value})")
        return hook

    def register_all(self, hook_inputs: Iterable[HookDefinitionInput]) -> list[HookDefinition]:
        """
        Register several hooks in order.

        Not atomic: if item k fails, items before it stay registered and
        the error propagates.

        Args:
            hook_inputs: Hook definitions or mappings

        Returns:
            The registered definitions in input order
        """
        return [self.register(hook_input) for hook_input in hook_inputs]

    def unregister(self, hook_id: str) -> bool:
        """
        Remove a hook by ID.

        Returns:
            True if the hook was removed, False if it wasn't registered
        """
        removed = self._hooks.pop(hook_id, None) is not None
        if removed:
            logger.debug(f"Unregistered hook {hook_id}")
        return removed

    def get(self, hook_id: str) -> HookDefinition | None:
        """Get a hook by ID, or None."""
        return self._hooks.get(hook_id)

    def has(self, hook_id: str) -> bool:
        """Check if a hook ID is registered."""
        return hook_id in self._hooks

    def all(self) -> list[HookDefinition]:
        """Get all hooks in registration order."""
        return list(self._hooks.values())

    def size(self) -> int:
        """Get the number of registered hooks."""
        return len(self._hooks)

    def clear(self) -> None:
        """Remove all hooks."""
        self._hooks.clear()

    def query(self, options: HookQueryOptions | None = None, **filters: Any) -> list[HookDefinition]:
        """
        Find hooks matching the query, highest priority first.

        Args:
            options: Query options. If omitted, built from keyword filters
            **filters: HookQueryOptions fields (type, lifecycle, tags, ...)

        Returns:
            Matching hooks sorted by priority descending (stable)
        """
        options = self._options(options, filters)
        matches = [
            hook
            for hook in self._hooks.values()
            if self._selects(hook, options) and self._exclusion_reason(hook, options) is None
        ]
        return sorted(matches, key=lambda hook: -hook.priority)

    def skipped(
        self, options: HookQueryOptions | None = None, **filters: Any
    ) -> list[tuple[HookDefinition, str]]:
        """
        Find hooks the query selects by type/lifecycle/tags but excludes.

        Used to report hooks that were skipped because their scoping or
        conditions did not match the runtime context.

        Returns:
            (hook, reason) pairs in registration order
        """
        options = self._options(options, filters)
        result: list[tuple[HookDefinition, str]] = []
        for hook in self._hooks.values():
            if not self._selects(hook, options):
                continue
            reason = self._exclusion_reason(hook, options)
            if reason is not None:
                result.append((hook, reason))
        return result

    @staticmethod
    def _options(options: HookQueryOptions | None, filters: dict[str, Any]) -> HookQueryOptions:
        if options is None:
            return HookQueryOptions(**filters)
        if filters:
            return HookQueryOptions(**{**options.model_dump(), **filters})
        return options

    @staticmethod
    def _selects(hook: HookDefinition, options: HookQueryOptions) -> bool:
        if options.type is not None and hook.type != options.type:
            return False
        if options.lifecycle is not None and hook.lifecycle != options.lifecycle:
            return False
        if options.tags and not any(tag in options.tags for tag in hook.tags):
            return False
        return True

    @staticmethod
    def _exclusion_reason(hook: HookDefinition, options: HookQueryOptions) -> str | None:
        if (
            options.session_id is not None
            and hook.session_id is not None
            and hook.session_id != options.session_id
        ):
            return f"scoped to session {hook.session_id}"
        if (
            options.request_id is not None
            and hook.request_id is not None
            and hook.request_id != options.request_id
        ):
            return f"scoped to request {hook.request_id}"
        return unmet_condition(hook.conditions, options.storage, options.feature, options.config)

    def __len__(self) -> int:
        return len(self._hooks)

    def __contains__(self, hook_id: object) -> bool:
        return hook_id in self._hooks

    def __iter__(self) -> Iterator[HookDefinition]:
        return iter(list(self._hooks.values()))


def create_hook_registry() -> HookRegistry:
    """Create a new, empty hook registry."""
    return HookRegistry()

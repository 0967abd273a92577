"""
Hook composer.

Merges resolved hooks into one markdown document grouped by RFC 2119
requirement level (MUST, MUST NOT, SHOULD, SHOULD NOT, MAY). Empty levels
are omitted.

Within a level, hooks are sorted by priority (higher first, stable on
input order) and then emitted depth-first so that any dependency present
in the same level comes out before the hook that depends on it.
Dependencies on hooks outside the level, or outside the composed set,
are ignored. A dependency loop inside a level raises
CircularDependencyError and nothing is rendered. Hooks sharing an ID are
composed once: the first one given wins.

Output shape:

    > The following sections use requirement levels defined in [RFC 2119](...).

    ---

    ## MUST

    These are absolute requirements. ...

    ### Hook Name

    <content>

Usage:
    from mcpkit.core.hooks.composer import HookComposer

    composer = HookComposer()
    result = composer.compose_with_transparency(
        loaded.resolved,
        skipped=registry.skipped(type=HookType.SESSION),
        failed=loaded.failed_summaries(),
    )
    print(result.content)
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Union

from mcpkit.core.hooks.exceptions import CircularDependencyError
from mcpkit.core.hooks.models import (
    ComposedHooksResult,
    FailedHook,
    HookDefinition,
    HookSummary,
    RequirementLevel,
    ResolvedHook,
    SkippedHook,
)

logger = logging.getLogger(__name__)

RFC2119_REFERENCE = (
    "> The following sections use requirement levels defined in "
    "[RFC 2119](https://www.rfc-editor.org/rfc/rfc2119)."
)

REQUIREMENT_PREAMBLES: dict[RequirementLevel, str] = {
    RequirementLevel.MUST: "These are absolute requirements. You must follow these instructions.",
    RequirementLevel.MUST_NOT: "These are absolute prohibitions. You must not do these things.",
    RequirementLevel.SHOULD: (
        "These are recommended actions. Follow unless you have good reason not to."
    ),
    RequirementLevel.SHOULD_NOT: "These are not recommended. May be done with good reason.",
    RequirementLevel.MAY: "These are optional. Use your judgment.",
}

REQUIREMENT_ORDER: list[RequirementLevel] = list(RequirementLevel)

HookRef = Union[HookDefinition, HookSummary]


@dataclass
class ComposerOptions:
    """
    Rendering options for the composer.

    Attributes:
        include_preambles: Add a sentence explaining each requirement level
        include_rfc2119_reference: Add the RFC 2119 reference line first
        separator: Placed between hooks inside one level section
        section_separator: Placed between level sections
    """

    include_preambles: bool = True
    include_rfc2119_reference: bool = True
    separator: str = "\n\n"
    section_separator: str = "\n\n---\n\n"


class HookComposer:
    """
    Compose resolved hooks into a single ordered document.

    Pure computation over its input; safe to share between sessions.
    """

    def __init__(self, options: ComposerOptions | None = None) -> None:
        self.options = options or ComposerOptions()

    def compose(self, hooks: Sequence[ResolvedHook]) -> ComposedHooksResult:
        """
        Compose hooks grouped by requirement level.

        Args:
            hooks: Resolved hooks in their original (query) order

        Returns:
            ComposedHooksResult with content and included hooks in output order

        Raises:
            CircularDependencyError: If hooks in one level depend on each other in a loop
        """
        if not hooks:
            return ComposedHooksResult()

        unique: dict[str, ResolvedHook] = {}
        for hook in hooks:
            if hook.id in unique:
                logger.debug(f"Dropping duplicate resolved hook {hook.id}")
                continue
            unique[hook.id] = hook

        ordered_groups: list[tuple[RequirementLevel, list[ResolvedHook]]] = []
        for level, group in self._group_by_requirement_level(list(unique.values())):
            ordered_groups.append((level, self._order_group(group)))

        sections: list[str] = []
        if self.options.include_rfc2119_reference:
            sections.append(RFC2119_REFERENCE)

        included: list[HookSummary] = []
        blocking: list[str] = []
        for level, group in ordered_groups:
            sections.append(self._render_section(level, group))
            for hook in group:
                included.append(HookSummary.from_hook(hook))
                if hook.blocking:
                    blocking.append(hook.id)

        logger.debug(f"Composed {len(included)} hook(s) into {len(ordered_groups)} section(s)")

        return ComposedHooksResult(
            content=self.options.section_separator.join(sections),
            included_hooks=included,
            blocking_hooks=blocking,
        )

    def compose_with_transparency(
        self,
        resolved: Sequence[ResolvedHook],
        skipped: Iterable[tuple[HookRef, str]] = (),
        failed: Iterable[tuple[HookRef, str]] = (),
    ) -> ComposedHooksResult:
        """
        Compose hooks and report the ones left out.

        Skipped and failed hooks are returned verbatim and summarized in
        notices. They never change ordering or content.

        Args:
            resolved: Hooks to compose
            skipped: (hook, reason) pairs for hooks whose conditions did not match
            failed: (hook, error) pairs for hooks whose content failed to load

        Returns:
            ComposedHooksResult including skipped/failed lists and notices
        """
        result = self.compose(resolved)

        skipped_hooks = [
            SkippedHook(**HookSummary.from_hook(hook).model_dump(), skip_reason=reason)
            for hook, reason in skipped
        ]
        failed_hooks = [
            FailedHook(**HookSummary.from_hook(hook).model_dump(), error=error)
            for hook, error in failed
        ]

        notices: list[str] = []
        if skipped_hooks:
            details = ", ".join(f"{h.name} ({h.skip_reason})" for h in skipped_hooks)
            notices.append(
                f"{len(skipped_hooks)} hook(s) were skipped (conditions not met): {details}"
            )
        if failed_hooks:
            details = ", ".join(f"{h.name} ({h.error})" for h in failed_hooks)
            notices.append(f"{len(failed_hooks)} hook(s) failed to load: {details}")

        return result.model_copy(
            update={
                "skipped_hooks": skipped_hooks,
                "failed_hooks": failed_hooks,
                "notices": notices,
            }
        )

    @staticmethod
    def _group_by_requirement_level(
        hooks: Sequence[ResolvedHook],
    ) -> list[tuple[RequirementLevel, list[ResolvedHook]]]:
        groups: dict[RequirementLevel, list[ResolvedHook]] = {
            level: [] for level in REQUIREMENT_ORDER
        }
        for hook in hooks:
            groups[hook.requirement_level].append(hook)
        return [(level, groups[level]) for level in REQUIREMENT_ORDER if groups[level]]

    @staticmethod
    def _order_group(group: list[ResolvedHook]) -> list[ResolvedHook]:
        """Priority order, then dependencies first, via DFS with an explicit path."""
        by_priority = sorted(group, key=lambda hook: -hook.priority)
        by_id = {hook.id: hook for hook in by_priority}

        ordered: list[ResolvedHook] = []
        finished: set[str] = set()
        path: list[str] = []
        on_path: set[str] = set()

        def visit(hook: ResolvedHook) -> None:
            if hook.id in finished:
                return
            if hook.id in on_path:
                start = path.index(hook.id)
                raise CircularDependencyError(path[start:] + [hook.id])

            path.append(hook.id)
            on_path.add(hook.id)
            for dependency_id in hook.dependencies:
                dependency = by_id.get(dependency_id)
                if dependency is not None:
                    visit(dependency)
            path.pop()
            on_path.discard(hook.id)

            finished.add(hook.id)
            ordered.append(hook)

        for hook in by_priority:
            visit(hook)

        return ordered

    def _render_section(self, level: RequirementLevel, group: list[ResolvedHook]) -> str:
        parts = [f"## {level.value}"]
        if self.options.include_preambles:
            parts.append(REQUIREMENT_PREAMBLES[level])
        header = "\n\n".join(parts)

        bodies = [f"### {hook.name}\n\n{hook.content}" for hook in group]
        return f"{header}\n\n{self.options.separator.join(bodies)}"


def create_composer(options: ComposerOptions | None = None) -> HookComposer:
    """Create a composer with the given options."""
    return HookComposer(options)


def compose_hooks(hooks: Sequence[ResolvedHook]) -> ComposedHooksResult:
    """Compose hooks with default options."""
    return HookComposer().compose(hooks)

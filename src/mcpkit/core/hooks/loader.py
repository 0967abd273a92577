"""
Hook content loader.

Turns hook definitions into resolved hooks by reading their markdown
content. Content is treated as opaque text.

Path resolution:
- Explicit ``content_file``: used as-is if absolute, otherwise joined to
  the definition location (when given) or the loader's base path
- Convention: ``<tag>.md`` beside the definition location, or in the
  base path. When the definition location names a file, its sibling with
  the same stem and a ``.md`` suffix is used instead

Batch loads fan out on a thread pool. A failed item never aborts the
batch; it is recorded with its error text.

Usage:
    from mcpkit.core.hooks.loader import HookContentLoader

    loader = HookContentLoader(base_path=Path("hooks/content"))
    result = loader.load_all(registry.query(type=HookType.SESSION))
    for failure in result.failed:
        print(f"{failure.hook.id}: {failure.error}")
"""

import logging
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from mcpkit.core.hooks.exceptions import ContentNotFoundError
from mcpkit.core.hooks.models import HookDefinition, HookSummary, ResolvedHook

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4

LoadItem = Union[HookDefinition, tuple[HookDefinition, Union[str, Path, None]]]


@dataclass
class FailedLoad:
    """A hook whose content could not be loaded."""

    hook: HookDefinition
    error: str


@dataclass
class LoadAllResult:
    """Outcome of a batch load. Both lists keep input order."""

    resolved: list[ResolvedHook] = field(default_factory=list)
    failed: list[FailedLoad] = field(default_factory=list)

    def failed_summaries(self) -> list[tuple[HookSummary, str]]:
        """Failures as (summary, error) pairs for transparent composition."""
        return [(HookSummary.from_hook(f.hook), f.error) for f in self.failed]


class HookContentLoader:
    """
    Resolve and read hook content with optional memoization.

    The cache is keyed by resolved path and only invalidated by
    clear_cache().

    Attributes:
        base_path: Directory used when no definition location is given
        cache_enabled: Whether file content is memoized
        max_workers: Thread pool size for load_all
    """

    def __init__(
        self,
        base_path: str | Path,
        cache: bool = True,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.base_path = Path(base_path)
        self.cache_enabled = cache
        self.max_workers = max(1, max_workers)
        self._cache: dict[str, str] = {}

    def resolve_content_path(
        self,
        hook: HookDefinition,
        definition_location: str | Path | None = None,
    ) -> Path:
        """
        Resolve where a hook's content lives.

        Args:
            hook: The hook definition
            definition_location: Directory or file the definition came from

        Returns:
            Path to the content file (not checked for existence)
        """
        location = Path(definition_location) if definition_location is not None else None
        names_file = location is not None and bool(location.suffix) and not location.is_dir()
        if names_file:
            directory = location.parent
        else:
            directory = location or self.base_path

        if hook.content_file:
            explicit = Path(hook.content_file)
            if explicit.is_absolute():
                return explicit
            return directory / explicit

        if names_file and location is not None:
            return location.with_suffix(".md")

        return directory / f"{hook.tag}.md"

    def load(
        self,
        hook: HookDefinition,
        definition_location: str | Path | None = None,
    ) -> ResolvedHook:
        """
        Load content for a hook.

        Args:
            hook: The hook definition
            definition_location: Directory or file the definition came from

        Returns:
            The resolved hook, stamped with resolved_at

        Raises:
            ContentNotFoundError: If the content file cannot be read
        """
        content_path = self.resolve_content_path(hook, definition_location)
        key = str(content_path)

        if self.cache_enabled and key in self._cache:
            logger.debug(f"Content cache hit for {hook.id}: {key}")
            return ResolvedHook.from_definition(hook, self._cache[key], key)

        try:
            content = content_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError, ValueError) as e:
            # ValueError covers paths the OS rejects outright, e.g. embedded NUL
            raise ContentNotFoundError(hook.id, key, str(e)) from e

        if self.cache_enabled:
            self._cache[key] = content

        return ResolvedHook.from_definition(hook, content, key)

    def load_all(self, items: Iterable[LoadItem]) -> LoadAllResult:
        """
        Load content for many hooks concurrently.

        Args:
            items: Hook definitions, or (definition, definition_location) pairs

        Returns:
            LoadAllResult with resolved hooks and per-item failures
        """
        pairs = [item if isinstance(item, tuple) else (item, None) for item in items]
        result = LoadAllResult()
        if not pairs:
            return result

        workers = min(self.max_workers, len(pairs))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures: list[tuple[HookDefinition, Future[ResolvedHook]]] = [
                (hook, executor.submit(self.load, hook, location)) for hook, location in pairs
            ]

            for hook, future in futures:
                try:
                    result.resolved.append(future.result())
                except ContentNotFoundError as e:
                    logger.warning(f"Failed to load content for hook {hook.id}: {e}")
                    result.failed.append(FailedLoad(hook=hook, error=str(e)))

        return result

    def load_inline(self, hook: HookDefinition, content: str) -> ResolvedHook:
        """Resolve a hook from an inline string, bypassing storage."""
        return ResolvedHook.from_definition(hook, content)

    def clear_cache(self) -> None:
        """Drop all memoized content."""
        self._cache.clear()

    def cache_size(self) -> int:
        """Number of memoized content files."""
        return len(self._cache)


def create_content_loader(
    base_path: str | Path,
    cache: bool = True,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> HookContentLoader:
    """Create a content loader rooted at base_path."""
    return HookContentLoader(base_path, cache=cache, max_workers=max_workers)

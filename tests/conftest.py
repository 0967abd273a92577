"""
Pytest configuration and shared fixtures.

Provides hook factories, registries, content directories and config
isolation used across the test suite.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from mcpkit.core.config import clear_cache
from mcpkit.core.hooks import (
    HookContentLoader,
    HookDefinition,
    HookRegistry,
    ResolvedHook,
)
from mcpkit.core.workflow import reset_default_workflow_tracker

# ==============================================================================
# Hook Fixtures
# ==============================================================================


def build_hook_fields(**overrides: Any) -> dict[str, Any]:
    """Minimal valid hook definition fields, with overrides."""
    fields: dict[str, Any] = {
        "tag": "test-hook",
        "type": "session",
        "lifecycle": "start",
        "name": "Test Hook",
        "requirement_level": "SHOULD",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def hook_fields() -> Callable[..., dict[str, Any]]:
    """Factory for raw hook definition mappings."""
    return build_hook_fields


@pytest.fixture
def make_hook() -> Callable[..., HookDefinition]:
    """Factory for hook definitions."""

    def _make(**overrides: Any) -> HookDefinition:
        return HookDefinition(**build_hook_fields(**overrides))

    return _make


@pytest.fixture
def make_resolved() -> Callable[..., ResolvedHook]:
    """Factory for resolved hooks; content defaults to '# <name>'."""

    def _make(content: str | None = None, **overrides: Any) -> ResolvedHook:
        hook = HookDefinition(**build_hook_fields(**overrides))
        return ResolvedHook.from_definition(hook, content if content is not None else f"# {hook.name}")

    return _make


@pytest.fixture
def registry() -> HookRegistry:
    """Provide an empty hook registry."""
    return HookRegistry()


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """
    Provide a directory of hook content files.

    Creates:
    - test-hook.md
    - other-hook.md
    - custom/explicit.md
    """
    directory = tmp_path / "content"
    directory.mkdir()
    (directory / "test-hook.md").write_text("Test hook content")
    (directory / "other-hook.md").write_text("Other hook content")
    (directory / "custom").mkdir()
    (directory / "custom" / "explicit.md").write_text("Explicit content")
    return directory


@pytest.fixture
def loader(content_dir: Path) -> HookContentLoader:
    """Provide a content loader rooted at content_dir."""
    return HookContentLoader(base_path=content_dir)


# ==============================================================================
# Isolation Fixtures
# ==============================================================================

MCPKIT_ENV_VARS = (
    "MCPKIT_STORAGE",
    "MCPKIT_CACHE",
    "MCPKIT_CONTENT_PATH",
    "MCPKIT_INIT_TOOL",
)


@pytest.fixture(autouse=True)
def isolate_global_state(tmp_path, monkeypatch):
    """Keep user config, env overrides and default trackers out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in MCPKIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_cache()
    reset_default_workflow_tracker()
    yield
    clear_cache()
    reset_default_workflow_tracker()

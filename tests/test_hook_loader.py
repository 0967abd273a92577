"""
Tests for hook content loading.

Covers path resolution, caching, batch loads with per-item failures,
and inline content.
"""

from pathlib import Path

import pytest

from mcpkit.core.hooks import ContentNotFoundError, HookContentLoader, create_content_loader


class TestResolveContentPath:
    """Test where content is looked up."""

    def test_convention_uses_tag(self, loader, content_dir, make_hook):
        """Test <tag>.md in the base path by default."""
        path = loader.resolve_content_path(make_hook())
        assert path == content_dir / "test-hook.md"

    def test_explicit_relative_file(self, loader, content_dir, make_hook):
        """Test a relative content_file is joined to the base path."""
        hook = make_hook(content_file="custom/explicit.md")
        assert loader.resolve_content_path(hook) == content_dir / "custom" / "explicit.md"

    def test_explicit_absolute_file(self, loader, tmp_path, make_hook):
        """Test an absolute content_file is used as-is."""
        target = tmp_path / "elsewhere.md"
        hook = make_hook(content_file=str(target))
        assert loader.resolve_content_path(hook) == target

    def test_definition_directory(self, loader, tmp_path, make_hook):
        """Test a definition directory replaces the base path."""
        definitions = tmp_path / "defs"
        definitions.mkdir()
        path = loader.resolve_content_path(make_hook(), definitions)
        assert path == definitions / "test-hook.md"

    def test_definition_file_uses_sibling(self, loader, tmp_path, make_hook):
        """Test a definition file resolves to the sibling .md with the same stem."""
        definition_file = tmp_path / "defs" / "greeting.json"
        path = loader.resolve_content_path(make_hook(), definition_file)
        assert path == tmp_path / "defs" / "greeting.md"

    def test_definition_file_with_explicit_content(self, loader, tmp_path, make_hook):
        """Test explicit content_file is relative to the definition file's directory."""
        definition_file = tmp_path / "defs" / "greeting.json"
        hook = make_hook(content_file="body.md")
        assert loader.resolve_content_path(hook, definition_file) == tmp_path / "defs" / "body.md"


class TestLoad:
    """Test single-hook loads."""

    def test_load_content(self, loader, content_dir, make_hook):
        """Test content is read and stamped on the resolved hook."""
        resolved = loader.load(make_hook())

        assert resolved.content == "Test hook content"
        assert resolved.content_path == str(content_dir / "test-hook.md")
        assert resolved.id == "mcp-toolkit:session:start:test-hook"
        assert resolved.resolved_at is not None

    def test_load_explicit_file(self, loader, make_hook):
        """Test explicit content_file is read."""
        resolved = loader.load(make_hook(content_file="custom/explicit.md"))
        assert resolved.content == "Explicit content"

    def test_missing_file_raises(self, loader, content_dir, make_hook):
        """Test a missing file raises ContentNotFoundError with the path."""
        hook = make_hook(tag="missing-hook")

        with pytest.raises(ContentNotFoundError) as exc_info:
            loader.load(hook)

        assert exc_info.value.hook_id == hook.id
        assert exc_info.value.path == str(content_dir / "missing-hook.md")

    def test_directory_instead_of_file_raises(self, loader, make_hook):
        """Test an unreadable path is reported as not found."""
        with pytest.raises(ContentNotFoundError):
            loader.load(make_hook(content_file="custom"))

    def test_invalid_path_raises_not_found(self, loader, make_hook):
        """Test a path the OS rejects is reported as not found."""
        hook = make_hook(content_file="bad\x00.md")

        with pytest.raises(ContentNotFoundError) as exc_info:
            loader.load(hook)

        assert exc_info.value.hook_id == hook.id

    def test_content_is_opaque(self, tmp_path, make_hook):
        """Test content is returned verbatim."""
        (tmp_path / "test-hook.md").write_text("## Heading\n\n{{not a template}}\n")
        resolved = HookContentLoader(tmp_path).load(make_hook())
        assert resolved.content == "## Heading\n\n{{not a template}}\n"


class TestCache:
    """Test content memoization."""

    def test_cache_hit_ignores_file_changes(self, loader, content_dir, make_hook):
        """Test cached content is returned after the file changes."""
        hook = make_hook()
        loader.load(hook)
        (content_dir / "test-hook.md").write_text("Changed")

        assert loader.load(hook).content == "Test hook content"
        assert loader.cache_size() == 1

    def test_clear_cache_rereads(self, loader, content_dir, make_hook):
        """Test clear_cache forces a fresh read."""
        hook = make_hook()
        loader.load(hook)
        (content_dir / "test-hook.md").write_text("Changed")

        loader.clear_cache()
        assert loader.cache_size() == 0
        assert loader.load(hook).content == "Changed"

    def test_cache_disabled(self, content_dir, make_hook):
        """Test every load reads the file when caching is off."""
        loader = HookContentLoader(content_dir, cache=False)
        hook = make_hook()
        loader.load(hook)
        (content_dir / "test-hook.md").write_text("Changed")

        assert loader.load(hook).content == "Changed"
        assert loader.cache_size() == 0

    def test_failed_loads_not_cached(self, loader, content_dir, make_hook):
        """Test a missing file is picked up once it appears."""
        hook = make_hook(tag="late-hook")
        with pytest.raises(ContentNotFoundError):
            loader.load(hook)

        (content_dir / "late-hook.md").write_text("Late content")
        assert loader.load(hook).content == "Late content"


class TestLoadAll:
    """Test batch loads."""

    def test_preserves_input_order(self, loader, make_hook):
        """Test resolved hooks come back in input order."""
        hooks = [
            make_hook(tag="other-hook"),
            make_hook(tag="test-hook"),
            make_hook(tag="explicit", content_file="custom/explicit.md"),
        ]

        result = loader.load_all(hooks)

        assert [h.tag for h in result.resolved] == ["other-hook", "test-hook", "explicit"]
        assert result.failed == []

    def test_failures_do_not_abort_batch(self, loader, make_hook):
        """Test missing content is recorded per item."""
        hooks = [
            make_hook(tag="test-hook"),
            make_hook(tag="missing-one"),
            make_hook(tag="other-hook"),
            make_hook(tag="missing-two"),
        ]

        result = loader.load_all(hooks)

        assert [h.tag for h in result.resolved] == ["test-hook", "other-hook"]
        assert [f.hook.tag for f in result.failed] == ["missing-one", "missing-two"]
        assert "missing-one.md" in result.failed[0].error

    def test_invalid_path_does_not_abort_batch(self, loader, make_hook):
        """Test an unusable content path fails only its own item."""
        hooks = [
            make_hook(tag="test-hook"),
            make_hook(tag="broken", content_file="bad\x00.md"),
            make_hook(tag="other-hook"),
        ]

        result = loader.load_all(hooks)

        assert [h.tag for h in result.resolved] == ["test-hook", "other-hook"]
        assert [f.hook.tag for f in result.failed] == ["broken"]

    def test_accepts_definition_locations(self, loader, tmp_path, make_hook):
        """Test (hook, location) pairs resolve against their location."""
        defs = tmp_path / "defs"
        defs.mkdir()
        (defs / "local.md").write_text("Local content")

        result = loader.load_all([(make_hook(tag="local"), defs), make_hook()])

        assert [h.content for h in result.resolved] == ["Local content", "Test hook content"]

    def test_empty_input(self, loader):
        """Test an empty batch returns an empty result."""
        result = loader.load_all([])
        assert result.resolved == []
        assert result.failed == []

    def test_failed_summaries(self, loader, make_hook):
        """Test failures convert to (summary, error) pairs."""
        result = loader.load_all([make_hook(tag="missing-hook", name="Missing")])

        [(summary, error)] = result.failed_summaries()
        assert summary.name == "Missing"
        assert summary.id == "mcp-toolkit:session:start:missing-hook"
        assert "missing-hook.md" in error

    def test_single_worker(self, content_dir, make_hook):
        """Test a pool of one still loads everything in order."""
        loader = HookContentLoader(content_dir, max_workers=1)
        result = loader.load_all([make_hook(tag="test-hook"), make_hook(tag="other-hook")])
        assert [h.content for h in result.resolved] == ["Test hook content", "Other hook content"]


class TestLoadInline:
    """Test inline content."""

    def test_load_inline(self, loader, make_hook):
        """Test inline content bypasses storage."""
        resolved = loader.load_inline(make_hook(tag="not-on-disk"), "Inline text")

        assert resolved.content == "Inline text"
        assert resolved.content_path is None
        assert loader.cache_size() == 0


def test_create_content_loader(tmp_path: Path):
    """Test the factory passes options through."""
    loader = create_content_loader(tmp_path, cache=False, max_workers=2)

    assert loader.base_path == tmp_path
    assert loader.cache_enabled is False
    assert loader.max_workers == 2

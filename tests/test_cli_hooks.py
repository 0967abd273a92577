"""
Tests for CLI hooks commands.

Tests `mcpkit hooks list` and `mcpkit hooks compose` against the built-in
hooks and user-supplied definition files.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mcpkit.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """Run every command from an empty project directory with a wide console."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    monkeypatch.setenv("COLUMNS", "200")
    return project


@pytest.fixture
def hooks_file(tmp_path: Path) -> Path:
    """Hook definitions with content beside them."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "sqlite-tips.md").write_text("Use WAL mode.")
    (content / "greeting.md").write_text("Say hello.")

    path = tmp_path / "hooks.json"
    path.write_text(
        json.dumps(
            [
                {
                    "tag": "greeting",
                    "type": "session",
                    "lifecycle": "start",
                    "name": "Greeting",
                    "requirement_level": "MAY",
                    "blocking": True,
                },
                {
                    "tag": "sqlite-tips",
                    "type": "session",
                    "lifecycle": "start",
                    "name": "SQLite Tips",
                    "requirement_level": "SHOULD",
                    "conditions": {"requires_storage": ["sqlite"]},
                },
            ]
        )
    )
    return path


class TestHooksList:
    """Test `mcpkit hooks list`."""

    def test_lists_core_hooks(self):
        """Test the built-in hooks are listed."""
        result = runner.invoke(app, ["hooks", "list"])

        assert result.exit_code == 0
        assert "Session Initialization" in result.output
        assert "Session Completion" in result.output

    def test_filter_by_lifecycle(self):
        """Test the lifecycle filter."""
        result = runner.invoke(app, ["hooks", "list", "--lifecycle", "end"])

        assert result.exit_code == 0
        assert "Session Completion" in result.output
        assert "Session Initialization" not in result.output

    def test_no_matches(self):
        """Test an empty listing."""
        result = runner.invoke(app, ["hooks", "list", "--type", "storage"])

        assert result.exit_code == 0
        assert "No hooks found" in result.output

    def test_with_hooks_file(self, hooks_file):
        """Test definitions from a file are added."""
        result = runner.invoke(app, ["hooks", "list", "--hooks", str(hooks_file)])

        assert result.exit_code == 0
        assert "Greeting" in result.output
        assert "SQLite Tips" in result.output
        assert "Hooks (4)" in result.output

    def test_invalid_hooks_file(self, tmp_path):
        """Test malformed JSON is a user error."""
        bad = tmp_path / "bad.json"
        bad.write_text("{ nope")

        result = runner.invoke(app, ["hooks", "list", "--hooks", str(bad)])

        assert result.exit_code == 2
        assert "Cannot read hook definitions" in result.output

    def test_hooks_file_not_a_list(self, tmp_path):
        """Test a JSON object instead of an array is rejected."""
        bad = tmp_path / "object.json"
        bad.write_text(json.dumps({"tag": "x"}))

        result = runner.invoke(app, ["hooks", "list", "--hooks", str(bad)])

        assert result.exit_code == 2
        assert "Expected a JSON array" in result.output

    def test_invalid_definition(self, tmp_path):
        """Test definitions failing validation are a user error."""
        bad = tmp_path / "invalid.json"
        bad.write_text(json.dumps([{"tag": "Bad Tag"}]))

        result = runner.invoke(app, ["hooks", "list", "--hooks", str(bad)])

        assert result.exit_code == 2
        assert "Invalid hook definitions" in result.output

    def test_non_object_entry(self, tmp_path):
        """Test array entries that are not objects are a user error."""
        bad = tmp_path / "strings.json"
        bad.write_text(json.dumps(["greeting"]))

        result = runner.invoke(app, ["hooks", "list", "--hooks", str(bad)])

        assert result.exit_code == 2
        assert "Invalid hook definitions" in result.output

    def test_app_from_config(self, hooks_file, project_dir):
        """Test the configured app namespace applies to file definitions."""
        (project_dir / ".mcpkit.json").write_text(json.dumps({"hooks": {"app": "my-server"}}))

        result = runner.invoke(app, ["hooks", "list", "--hooks", str(hooks_file)])

        assert result.exit_code == 0
        assert "my-server:session:start:greeting" in result.output
        assert "mcp-toolkit:session:start:session-start-core" in result.output

    def test_explicit_app_kept(self, tmp_path, project_dir):
        """Test a definition naming its own app keeps it."""
        (project_dir / ".mcpkit.json").write_text(json.dumps({"hooks": {"app": "my-server"}}))
        hooks = tmp_path / "own-app.json"
        hooks.write_text(
            json.dumps(
                [
                    {
                        "app": "other-app",
                        "tag": "note",
                        "type": "action",
                        "lifecycle": "end",
                        "name": "Note",
                        "requirement_level": "MAY",
                    }
                ]
            )
        )

        result = runner.invoke(app, ["hooks", "list", "--hooks", str(hooks)])

        assert result.exit_code == 0
        assert "other-app:action:end:note" in result.output

    def test_invalid_config(self, project_dir):
        """Test an invalid project config is reported, not raised."""
        (project_dir / ".mcpkit.json").write_text(json.dumps({"hooks": {"max_workers": 0}}))

        result = runner.invoke(app, ["hooks", "list"])

        assert result.exit_code == 2
        assert "Invalid mcpkit configuration" in result.output
        assert "hooks.max_workers" in result.output
        assert "Traceback" not in result.output


class TestHooksCompose:
    """Test `mcpkit hooks compose`."""

    def test_compose_session_start(self):
        """Test the built-in session start guidance."""
        result = runner.invoke(app, ["hooks", "compose", "session", "start"])

        assert result.exit_code == 0
        assert "## MUST" in result.output
        assert "### Session Initialization" in result.output

    def test_compose_nothing(self):
        """Test a lifecycle point without hooks."""
        result = runner.invoke(app, ["hooks", "compose", "action", "cancel"])

        assert result.exit_code == 0
        assert "No hooks matched action/cancel" in result.output

    def test_skipped_notice(self, hooks_file, tmp_path):
        """Test condition mismatches are reported."""
        result = runner.invoke(
            app,
            [
                "hooks",
                "compose",
                "session",
                "start",
                "--hooks",
                str(hooks_file),
                "--content-path",
                str(tmp_path / "content"),
            ],
        )

        assert result.exit_code == 0
        assert "Say hello." in result.output
        assert "SQLite Tips (requires storage sqlite)" in result.output
        assert "Blocking hooks: mcp-toolkit:session:start:greeting" in result.output

    def test_storage_option(self, hooks_file, tmp_path):
        """Test --storage satisfies storage conditions."""
        result = runner.invoke(
            app,
            [
                "hooks",
                "compose",
                "session",
                "start",
                "--hooks",
                str(hooks_file),
                "-c",
                str(tmp_path / "content"),
                "--storage",
                "sqlite",
            ],
        )

        assert result.exit_code == 0
        assert "Use WAL mode." in result.output

    def test_storage_from_project_config(self, hooks_file, tmp_path, project_dir):
        """Test the configured storage backend is used by default."""
        (project_dir / ".mcpkit.json").write_text(json.dumps({"storage": {"backend": "sqlite"}}))

        result = runner.invoke(
            app,
            [
                "hooks",
                "compose",
                "session",
                "start",
                "--hooks",
                str(hooks_file),
                "-c",
                str(tmp_path / "content"),
            ],
        )

        assert result.exit_code == 0
        assert "Use WAL mode." in result.output

    def test_failed_content_notice(self, hooks_file, tmp_path):
        """Test missing content is reported, not fatal."""
        result = runner.invoke(
            app, ["hooks", "compose", "session", "start", "--hooks", str(hooks_file)]
        )

        assert result.exit_code == 0
        assert "### Session Initialization" in result.output
        assert "failed to load: Greeting" in result.output

    def test_cycle_is_user_error(self, tmp_path):
        """Test a dependency loop exits with a user error."""
        content = tmp_path / "content"
        content.mkdir()
        (content / "one.md").write_text("1")
        (content / "two.md").write_text("2")
        hooks = tmp_path / "cycle.json"
        base = {"type": "config", "lifecycle": "start", "requirement_level": "MUST"}
        hooks.write_text(
            json.dumps(
                [
                    {**base, "tag": "one", "name": "One", "dependencies": ["mcp-toolkit:config:start:two"]},
                    {**base, "tag": "two", "name": "Two", "dependencies": ["mcp-toolkit:config:start:one"]},
                ]
            )
        )

        result = runner.invoke(
            app, ["hooks", "compose", "config", "start", "--hooks", str(hooks), "-c", str(content)]
        )

        assert result.exit_code == 2
        assert "Hook dependencies form a cycle" in result.output

    def test_invalid_config(self, project_dir):
        """Test an invalid project config is a user error."""
        (project_dir / ".mcpkit.json").write_text(json.dumps({"storage": {"backend": ""}}))

        result = runner.invoke(app, ["hooks", "compose", "session", "start"])

        assert result.exit_code == 2
        assert "Invalid mcpkit configuration" in result.output
        assert "storage.backend" in result.output


def test_version():
    """Test the version command."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "mcpkit version" in result.output

"""
Workflow data models for mcpkit.

A blocking hook gates every tool whose name starts with its tool prefix
until the hook is marked completed. Blocking hook definitions are
registered with the workflow tracker separately from hook definitions;
the two are linked only by hook ID.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class BlockingHookDef(BaseModel):
    """
    A hook that must complete before tools with a given prefix may run.

    Example:
        >>> BlockingHookDef(
        ...     hook_id="mcp-toolkit:config:start:config",
        ...     tool_prefix="toolkit:",
        ...     name="Toolkit Configuration",
        ...     block_message="Complete toolkit configuration first.",
        ... )
    """

    hook_id: str = Field(..., min_length=1, description="Hook ID that must complete")
    tool_prefix: str = Field(..., description="Literal prefix of tool names this hook blocks")
    name: str = Field(..., description="Human-readable name for error messages")
    block_message: str = Field(..., description="Message shown when a tool is blocked")


class HookCompletionStatus(BaseModel):
    """Record of a blocking hook having completed."""

    hook_id: str
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | None = Field(default=None, description="Opaque completion data")


class WorkflowCheckResult(BaseModel):
    """Whether a tool may run, and what blocks it if not."""

    allowed: bool
    blocked_by: str | None = None
    message: str | None = None
    hint: str | None = None

    @property
    def blocked(self) -> bool:
        """Check if the tool is blocked."""
        return not self.allowed

"""
Workflow state tracker for blocking hooks.

Tracks which blocking hooks have completed in a session and decides
whether a tool may run. A tool is blocked when its name starts with the
tool prefix of a registered blocking hook that has not completed yet.
Only the first unmet block (in registration order) is reported.

One tracker belongs to one session. The module-level default tracker is a
thin convenience for processes that serve a single session; library code
always takes a tracker instance.

Usage:
    tracker = WorkflowStateTracker()
    tracker.register_blocking_hook(BlockingHookDef(
        hook_id="mcp-toolkit:config:start:config",
        tool_prefix="toolkit:",
        name="Toolkit Configuration",
        block_message="Complete configuration before using toolkit tools.",
    ))

    check = tracker.check_tool_allowed("toolkit:model_design")
    if not check.allowed:
        return tracker.create_blocking_response(check)
"""

import json
import logging
from collections.abc import Iterable
from typing import Any

from mcpkit.core.hooks.models import HookDefinition
from mcpkit.core.workflow.models import BlockingHookDef, HookCompletionStatus, WorkflowCheckResult

logger = logging.getLogger(__name__)


class WorkflowStateTracker:
    """
    Per-session record of completed blocking hooks.

    reset() clears completions only; clear_blocking_hooks() clears
    definitions only. A full reset needs both.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id
        self._completed: dict[str, HookCompletionStatus] = {}
        self._blocking: dict[str, BlockingHookDef] = {}

    def register_blocking_hook(self, definition: BlockingHookDef) -> None:
        """Register a blocking hook. A later registration for the same ID replaces it."""
        self._blocking[definition.hook_id] = definition
        logger.debug(
            f"Registered blocking hook {definition.hook_id} for prefix '{definition.tool_prefix}'"
        )

    def register_blocking_hooks(self, definitions: Iterable[BlockingHookDef]) -> None:
        """Register several blocking hooks in order."""
        for definition in definitions:
            self.register_blocking_hook(definition)

    def register_blocking_hooks_from(
        self,
        hooks: Iterable[HookDefinition],
        tool_prefix: str,
        block_message: str | None = None,
    ) -> list[BlockingHookDef]:
        """
        Derive and register blocking hooks from hook definitions.

        Only hooks with ``blocking=True`` are registered.

        Args:
            hooks: Hook definitions (e.g. the blocking_hooks of a composition)
            tool_prefix: Prefix of tool names the hooks gate
            block_message: Message when blocked (defaults to one naming the hook)

        Returns:
            The registered BlockingHookDef objects
        """
        registered: list[BlockingHookDef] = []
        for hook in hooks:
            if not hook.blocking:
                continue
            definition = BlockingHookDef(
                hook_id=hook.id,
                tool_prefix=tool_prefix,
                name=hook.name,
                block_message=block_message
                or f'The "{hook.name}" step must be completed before using {tool_prefix}* tools.',
            )
            self.register_blocking_hook(definition)
            registered.append(definition)
        return registered

    def mark_hook_completed(self, hook_id: str, data: dict[str, Any] | None = None) -> None:
        """Mark a hook completed. Re-marking refreshes the timestamp and data."""
        self._completed[hook_id] = HookCompletionStatus(hook_id=hook_id, data=data)
        logger.debug(f"Blocking hook {hook_id} completed")

    def is_hook_completed(self, hook_id: str) -> bool:
        """Check if a hook has been marked completed."""
        return hook_id in self._completed

    def get_hook_completion(self, hook_id: str) -> HookCompletionStatus | None:
        """Get the completion record for a hook, or None."""
        return self._completed.get(hook_id)

    def check_tool_allowed(self, tool_name: str) -> WorkflowCheckResult:
        """
        Check if a tool may run given the blocking hooks completed so far.

        Args:
            tool_name: Name of the tool about to run

        Returns:
            WorkflowCheckResult; when blocked, carries the first unmet hook
        """
        for hook_id, definition in self._blocking.items():
            if not tool_name.startswith(definition.tool_prefix):
                continue
            if hook_id in self._completed:
                continue

            logger.info(f"Tool {tool_name} blocked by incomplete hook {hook_id}")
            return WorkflowCheckResult(
                allowed=False,
                blocked_by=hook_id,
                message=definition.block_message,
                hint=f'Complete the "{definition.name}" workflow first.',
            )

        return WorkflowCheckResult(allowed=True)

    def create_blocking_response(self, result: WorkflowCheckResult) -> dict[str, Any]:
        """
        Render a blocked check as a tool error envelope.

        Returns:
            ``{"isError": True, "content": [{"type": "text", "text": <json>}]}``
        """
        payload = {
            "success": False,
            "error": result.message or "Workflow requirement not met",
            "workflowViolation": True,
            "blockedBy": result.blocked_by,
            "hint": result.hint,
        }
        return {
            "isError": True,
            "content": [{"type": "text", "text": json.dumps(payload, indent=2)}],
        }

    def get_completed_hooks(self) -> list[HookCompletionStatus]:
        """All completion records, in completion order."""
        return list(self._completed.values())

    def get_blocking_hooks(self) -> list[BlockingHookDef]:
        """All registered blocking hooks, in registration order."""
        return list(self._blocking.values())

    def reset(self) -> None:
        """Forget all completions. Blocking hook definitions are kept."""
        self._completed.clear()

    def clear_blocking_hooks(self) -> None:
        """Forget all blocking hook definitions. Completions are kept."""
        self._blocking.clear()


def create_workflow_state_tracker(session_id: str | None = None) -> WorkflowStateTracker:
    """Create a workflow state tracker for one session."""
    return WorkflowStateTracker(session_id)


# Process-boundary convenience for single-session hosts
_default_tracker: WorkflowStateTracker | None = None


def get_default_workflow_tracker() -> WorkflowStateTracker:
    """Get (creating on first use) the process-wide default tracker."""
    global _default_tracker
    if _default_tracker is None:
        _default_tracker = WorkflowStateTracker()
    return _default_tracker


def reset_default_workflow_tracker() -> None:
    """Discard the process-wide default tracker."""
    global _default_tracker
    if _default_tracker is not None:
        _default_tracker.reset()
        _default_tracker.clear_blocking_hooks()
    _default_tracker = None

"""
Workflow enforcement for blocking hooks.

Gates tools on the completion of blocking hooks. Hosts check every tool
call against the tracker and render blocked calls with
create_blocking_response().
"""

from mcpkit.core.workflow.models import (
    BlockingHookDef,
    HookCompletionStatus,
    WorkflowCheckResult,
)
from mcpkit.core.workflow.tracker import (
    WorkflowStateTracker,
    create_workflow_state_tracker,
    get_default_workflow_tracker,
    reset_default_workflow_tracker,
)

__all__ = [
    "BlockingHookDef",
    "HookCompletionStatus",
    "WorkflowCheckResult",
    "WorkflowStateTracker",
    "create_workflow_state_tracker",
    "get_default_workflow_tracker",
    "reset_default_workflow_tracker",
]

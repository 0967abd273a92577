"""
Session state tracking for mcpkit.

Provides the init-gated session state machine that hosts consult before
running each tool.
"""

from mcpkit.core.session.models import (
    SessionState,
    SessionTimingInfo,
    StateTransitionResult,
    ToolAllowanceConfig,
)
from mcpkit.core.session.tracker import (
    INIT_GUIDANCE,
    SessionStateTracker,
    WorkflowViolationError,
    create_blocking_response,
    create_session_state_tracker,
)

__all__ = [
    "SessionState",
    "SessionTimingInfo",
    "StateTransitionResult",
    "ToolAllowanceConfig",
    "INIT_GUIDANCE",
    "SessionStateTracker",
    "WorkflowViolationError",
    "create_blocking_response",
    "create_session_state_tracker",
]

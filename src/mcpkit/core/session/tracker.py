"""
Session state tracker.

Enforces mandatory initialization: tools listed in ``requires_init`` are
refused until the init tool has been called. Complements prompt guidance
("you MUST call session_init first") with actual enforcement.

Usage:
    tracker = create_session_state_tracker("session_init", ["my_tool"])

    # Before tool execution
    error = tracker.check_tool_allowed("my_tool", request_id)
    if error:
        return create_blocking_response(error)

    # After tool execution
    result = tracker.record_tool_call("my_tool", request_id)
    if result.guidance:
        ...
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from mcpkit.core.session.models import (
    SessionState,
    SessionTimingInfo,
    StateTransitionResult,
    ToolAllowanceConfig,
)

logger = logging.getLogger(__name__)

INIT_GUIDANCE = "Session initialized. Ready to work."


class WorkflowViolationError(Exception):
    """
    Raised by hosts that prefer exceptions over sentinel checks.

    The tracker itself never raises this; check_tool_allowed() returns
    a message instead.

    Attributes:
        tool_name: Tool that was refused
        current_state: Session state at the time
        required_action: What must happen before the tool can run
    """

    def __init__(
        self,
        message: str,
        tool_name: str,
        current_state: SessionState,
        required_action: str,
    ) -> None:
        super().__init__(message)
        self.tool_name = tool_name
        self.current_state = current_state
        self.required_action = required_action


class SessionStateTracker:
    """
    Per-session init-gated state machine.

    Create one instance per session.
    """

    def __init__(self, config: ToolAllowanceConfig) -> None:
        self.config = config
        self._state = SessionState.UNINITIALIZED
        self._init_at: datetime | None = None
        self._session_id: str | None = None
        self._request_id: str | None = None

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def session_id(self) -> str | None:
        """Session identifier, if known."""
        return self._session_id

    @session_id.setter
    def session_id(self, value: str | None) -> None:
        self._session_id = value

    def is_initialized(self) -> bool:
        """Check if the init tool has run."""
        return self._state.is_initialized

    def check_tool_allowed(self, tool_name: str, request_id: str | None = None) -> str | None:
        """
        Check whether a tool may run in the current state.

        Args:
            tool_name: Tool about to run
            request_id: Optional request identifier, remembered for timing info

        Returns:
            None if allowed, otherwise a message naming the init tool(s)
        """
        if request_id:
            self._request_id = request_id

        if tool_name in self.config.init_tools:
            return None

        if tool_name in self.config.requires_init and self._state == SessionState.UNINITIALIZED:
            init_tool_names = " or ".join(sorted(self.config.init_tools))
            logger.info(f"Tool {tool_name} refused: session not initialized")
            return (
                f'Tool "{tool_name}" requires session initialization. '
                f"You MUST call {init_tool_names} first before using this tool."
            )

        return None

    def require_tool_allowed(self, tool_name: str, request_id: str | None = None) -> None:
        """
        Like check_tool_allowed(), but raise instead of returning a message.

        Raises:
            WorkflowViolationError: If the tool is refused
        """
        message = self.check_tool_allowed(tool_name, request_id)
        if message is not None:
            raise WorkflowViolationError(
                message,
                tool_name=tool_name,
                current_state=self._state,
                required_action=" or ".join(sorted(self.config.init_tools)),
            )

    def record_tool_call(self, tool_name: str, request_id: str | None = None) -> StateTransitionResult:
        """
        Record that a tool ran and advance the state machine.

        A configured trigger moves the session to its target state. Otherwise
        the first non-init tool after initialization moves it to working.

        Args:
            tool_name: Tool that ran
            request_id: Optional request identifier

        Returns:
            StateTransitionResult; guidance is set only on the first
            uninitialized -> initialized transition
        """
        if request_id:
            self._request_id = request_id

        previous = self._state

        target = self.config.transition_triggers.get(tool_name)
        if target is not None and target != self._state:
            self._state = target
            logger.debug(f"Session {self._session_id}: {previous.value} -> {target.value}")

            if target == SessionState.INITIALIZED and previous == SessionState.UNINITIALIZED:
                self._init_at = datetime.now(timezone.utc)
                return StateTransitionResult(
                    previous_state=previous,
                    new_state=self._state,
                    transitioned=True,
                    guidance=INIT_GUIDANCE,
                )

            return StateTransitionResult(
                previous_state=previous, new_state=self._state, transitioned=True
            )

        if (
            self._state in (SessionState.READY, SessionState.INITIALIZED)
            and tool_name not in self.config.init_tools
        ):
            self._state = SessionState.WORKING
            logger.debug(f"Session {self._session_id}: {previous.value} -> working")
            return StateTransitionResult(
                previous_state=previous, new_state=self._state, transitioned=True
            )

        return StateTransitionResult(
            previous_state=previous, new_state=self._state, transitioned=False
        )

    def get_timing_info(self) -> SessionTimingInfo:
        """Snapshot of state, init time and identifiers."""
        return SessionTimingInfo(
            state=self._state,
            init_at=self._init_at,
            session_id=self._session_id,
            request_id=self._request_id,
        )

    def reset(self) -> None:
        """Return to uninitialized and forget identifiers and init time."""
        self._state = SessionState.UNINITIALIZED
        self._init_at = None
        self._session_id = None
        self._request_id = None


def create_session_state_tracker(
    init_tool: str = "session_init",
    requires_init_tools: Iterable[str] = (),
    always_allowed: Iterable[str] = ("server_info",),
) -> SessionStateTracker:
    """
    Create a tracker with the standard configuration.

    Args:
        init_tool: Tool that initializes the session
        requires_init_tools: Tools refused until initialization
        always_allowed: Extra tools allowed in any state

    Returns:
        Configured SessionStateTracker
    """
    return SessionStateTracker(
        ToolAllowanceConfig(
            init_tools={init_tool, *always_allowed},
            requires_init=set(requires_init_tools),
            transition_triggers={init_tool: SessionState.INITIALIZED},
        )
    )


def create_blocking_response(message: str) -> dict[str, Any]:
    """Render a refusal message as a tool error envelope."""
    return {
        "isError": True,
        "content": [{"type": "text", "text": message}],
    }

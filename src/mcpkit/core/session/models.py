"""
Session state models for mcpkit.

Sessions move through a small state machine:

    uninitialized -> initialized -> working
                         |
                       ready (optional intermediate, via a configured trigger)

There is no teardown state; a finished session is simply discarded.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SessionState(str, Enum):
    """State of one MCP session.

    - UNINITIALIZED: No init tool called yet
    - INITIALIZED: Init tool called, ready for work
    - READY: Optional intermediate state
    - WORKING: Normal operation
    """

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    READY = "ready"
    WORKING = "working"

    @property
    def is_initialized(self) -> bool:
        """Check if the init tool has run."""
        return self != SessionState.UNINITIALIZED


class ToolAllowanceConfig(BaseModel):
    """
    Which tools may run in which session states.

    Attributes:
        init_tools: Tools that are always allowed
        requires_init: Tools refused until the session is initialized
        transition_triggers: Tool name -> state it moves the session to
    """

    init_tools: set[str] = Field(default_factory=set)
    requires_init: set[str] = Field(default_factory=set)
    transition_triggers: dict[str, SessionState] = Field(default_factory=dict)


class StateTransitionResult(BaseModel):
    """Outcome of recording a tool call."""

    previous_state: SessionState
    new_state: SessionState
    transitioned: bool
    guidance: str | None = Field(default=None, description="Message for the LLM, if any")


class SessionTimingInfo(BaseModel):
    """Snapshot of a session's state and identifiers."""

    state: SessionState
    init_at: datetime | None = None
    session_id: str | None = None
    request_id: str | None = None

"""
mcpkit - guidance composition and workflow gating for MCP servers

Hooks attach RFC 2119 guidance to session lifecycle points; mcpkit
composes the hooks that apply into one document and gates tools on
session initialization and blocking-hook completion.
"""

__version__ = "0.4.0"

# Re-export core entry points for convenience
from mcpkit.core.hooks import HookComposer, HookContentLoader, HookRegistry
from mcpkit.core.session import SessionStateTracker
from mcpkit.core.workflow import WorkflowStateTracker

__all__ = [
    "HookComposer",
    "HookContentLoader",
    "HookRegistry",
    "SessionStateTracker",
    "WorkflowStateTracker",
    "__version__",
]

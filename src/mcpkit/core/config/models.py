"""
Configuration data models for mcpkit.

These models define the structure of .mcpkit.json and
~/.config/mcpkit/config.json files, with validation via Pydantic.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mcpkit.core.hooks.composer import ComposerOptions
from mcpkit.core.hooks.models import DEFAULT_APP
from mcpkit.core.session.tracker import SessionStateTracker, create_session_state_tracker


class HooksConfig(BaseModel):
    """
    Where hook content comes from and how it is loaded.
    """

    app: str = Field(default=DEFAULT_APP, min_length=1, description="Namespace applied to hook definitions that omit one")
    content_path: str | None = Field(
        default=None,
        description="Directory of hook content files (defaults to the built-in content)",
    )
    cache: bool = Field(default=True, description="Memoize loaded content")
    max_workers: int = Field(default=4, ge=1, le=64, description="Threads for batch loads")


class ComposerConfig(BaseModel):
    """
    Rendering options for composed guidance.
    """

    include_preambles: bool = Field(
        default=True, description="Explain each requirement level under its header"
    )
    include_rfc2119_reference: bool = Field(
        default=True, description="Add the RFC 2119 reference line at the top"
    )
    separator: str = Field(default="\n\n", description="Between hooks inside a section")
    section_separator: str = Field(default="\n\n---\n\n", description="Between sections")

    def to_options(self) -> ComposerOptions:
        """Convert to composer options."""
        return ComposerOptions(
            include_preambles=self.include_preambles,
            include_rfc2119_reference=self.include_rfc2119_reference,
            separator=self.separator,
            section_separator=self.section_separator,
        )


class SessionConfig(BaseModel):
    """
    Init-gating for tool calls.
    """

    init_tool: str = Field(default="session_init", min_length=1)
    requires_init: list[str] = Field(
        default_factory=list, description="Tools refused until the session is initialized"
    )
    always_allowed: list[str] = Field(
        default_factory=lambda: ["server_info"],
        description="Tools allowed in any session state",
    )

    def create_tracker(self) -> SessionStateTracker:
        """Build a session state tracker from this config."""
        return create_session_state_tracker(
            self.init_tool, self.requires_init, self.always_allowed
        )


class StorageConfig(BaseModel):
    """
    Active storage backend, used for hook condition evaluation.
    """

    backend: str = Field(default="memory", min_length=1)

    @field_validator("backend")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        """Storage backend names are case-insensitive."""
        return v.strip().lower()


class MCPKitConfig(BaseModel):
    """
    Top-level mcpkit configuration.

    Example:
        >>> config = MCPKitConfig()
        >>> config.storage.backend
        'memory'
        >>> config.session.init_tool
        'session_init'
    """

    hooks: HooksConfig = Field(default_factory=HooksConfig)
    composer: ComposerConfig = Field(default_factory=ComposerConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = ConfigDict(
        extra="ignore",
    )

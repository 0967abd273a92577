"""
Hook data models for mcpkit.

Defines the Pydantic models for hook definitions, resolved hooks (with
content loaded), query options and composition results.

A hook is a unit of guidance text tied to a lifecycle phase and an
RFC 2119 requirement level:
- type: why the hook fires (session, action, storage, config)
- lifecycle: when it fires (start, running, progress, cancel, end)
- requirement_level: how strongly the guidance binds (MUST ... MAY)

Hook IDs are never supplied directly. They are computed from
``app:type:lifecycle:tag`` so two definitions with the same coordinates
always collide in a registry.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_APP = "mcp-toolkit"
DEFAULT_PRIORITY = 50
TAG_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"


class HookType(str, Enum):
    """Category of a hook, describing why it fires."""

    SESSION = "session"
    ACTION = "action"
    STORAGE = "storage"
    CONFIG = "config"


class HookLifecycle(str, Enum):
    """Phase of a session or operation at which a hook is eligible."""

    START = "start"
    RUNNING = "running"
    PROGRESS = "progress"
    CANCEL = "cancel"
    END = "end"


class RequirementLevel(str, Enum):
    """RFC 2119 requirement levels, declared strongest first.

    Declaration order is the order of sections in composed output.
    """

    MUST = "MUST"
    MUST_NOT = "MUST NOT"
    SHOULD = "SHOULD"
    SHOULD_NOT = "SHOULD NOT"
    MAY = "MAY"

    @property
    def is_mandatory(self) -> bool:
        """Check if hooks at this level cannot be skipped."""
        return self in (RequirementLevel.MUST, RequirementLevel.MUST_NOT)


class Feature(str, Enum):
    """Known client capabilities usable in ``requires_features``.

    Conditions store plain strings, so hosts may use names outside this set.
    """

    TOOLS = "tools"
    RESOURCES = "resources"
    PROMPTS = "prompts"
    SAMPLING = "sampling"
    ELICITATION = "elicitation"


class HookConditions(BaseModel):
    """
    Eligibility predicate for a hook.

    All present conditions must hold. Unset conditions impose no constraint.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    requires_storage: list[str] | None = Field(
        default=None, description="Only include if the active storage backend is one of these"
    )
    requires_features: list[str] | None = Field(
        default=None, description="Only include if the current feature is one of these"
    )
    requires_config: dict[str, Any] | None = Field(
        default=None, description="Only include if the supplied config has these key/values"
    )


def unmet_condition(
    conditions: HookConditions | None,
    storage: str | None = None,
    feature: str | None = None,
    config: Mapping[str, Any] | None = None,
) -> str | None:
    """
    Find the first condition that the supplied runtime context fails.

    ``requires_config`` is only checked when a config map is supplied.
    Missing storage or feature values fail the matching condition.

    Args:
        conditions: The hook's conditions (None means always eligible)
        storage: Active storage backend
        feature: Current feature/capability
        config: Current key/value config

    Returns:
        A human-readable reason, or None if every condition holds
    """
    if conditions is None:
        return None

    if conditions.requires_storage is not None and storage not in conditions.requires_storage:
        return f"requires storage {', '.join(conditions.requires_storage)}"

    if conditions.requires_features is not None and feature not in conditions.requires_features:
        return f"requires feature {', '.join(conditions.requires_features)}"

    if conditions.requires_config and config is not None:
        for key, expected in conditions.requires_config.items():
            if key not in config or config[key] != expected:
                return f"requires config {key}={expected!r}"

    return None


def conditions_match(
    conditions: HookConditions | None,
    storage: str | None = None,
    feature: str | None = None,
    config: Mapping[str, Any] | None = None,
) -> bool:
    """Check whether all of a hook's conditions hold for the given context."""
    return unmet_condition(conditions, storage, feature, config) is None


class HookDefinition(BaseModel):
    """
    Immutable hook definition.

    Example:
        >>> hook = HookDefinition(
        ...     tag="session-start-core",
        ...     type=HookType.SESSION,
        ...     lifecycle=HookLifecycle.START,
        ...     name="Session Initialization",
        ...     requirement_level=RequirementLevel.MUST,
        ... )
        >>> hook.id
        'mcp-toolkit:session:start:session-start-core'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    app: str = Field(default=DEFAULT_APP, min_length=1, description="Owning namespace")
    tag: str = Field(..., min_length=1, pattern=TAG_PATTERN, description="Kebab-case identifier")
    type: HookType = Field(..., description="Why the hook fires")
    lifecycle: HookLifecycle = Field(..., description="When the hook fires")
    name: str = Field(..., min_length=1, description="Human-readable label")
    description: str | None = Field(default=None, description="What this hook provides")
    requirement_level: RequirementLevel = Field(..., description="RFC 2119 strength")
    priority: int = Field(
        default=DEFAULT_PRIORITY,
        description="Order within a requirement level (higher = earlier)",
    )
    content_file: str | None = Field(
        default=None,
        description="Explicit content path. If omitted, resolves to <tag>.md by convention",
    )
    dependencies: list[str] = Field(
        default_factory=list, description="Hook IDs that must be emitted before this one"
    )
    blocking: bool = Field(
        default=False, description="Whether tools can be gated on this hook completing"
    )
    conditions: HookConditions | None = Field(
        default=None, description="Conditions that must hold for the hook to be eligible"
    )
    session_id: str | None = Field(default=None, description="Scope to one session")
    request_id: str | None = Field(default=None, description="Scope to one in-flight request")
    tags: list[str] = Field(default_factory=list, description="Labels for secondary filtering")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        """Registry key: ``app:type:lifecycle:tag``."""
        return f"{self.app}:{self.type.value}:{self.lifecycle.value}:{self.tag}"


HookDefinitionInput = Union[HookDefinition, Mapping[str, Any]]


class ResolvedHook(HookDefinition):
    """A hook definition with its content loaded, ready for composition."""

    content: str = Field(..., description="The resolved markdown content")
    content_path: str | None = Field(default=None, description="Where the content was read from")
    resolved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When content was resolved (UTC)",
    )

    @classmethod
    def from_definition(
        cls,
        hook: HookDefinition,
        content: str,
        content_path: str | None = None,
    ) -> "ResolvedHook":
        """Build a resolved hook from a definition and its content."""
        data = hook.model_dump(exclude={"id", "content", "content_path", "resolved_at"})
        return cls(**data, content=content, content_path=content_path)

    def to_definition(self) -> HookDefinition:
        """Strip content fields, returning the plain definition."""
        return HookDefinition(
            **self.model_dump(exclude={"id", "content", "content_path", "resolved_at"})
        )


class HookQueryOptions(BaseModel):
    """
    Filters for querying the hook registry.

    ``type``, ``lifecycle`` and ``tags`` select hooks. ``storage``,
    ``feature`` and ``config`` describe the host's runtime for condition
    evaluation. ``session_id`` and ``request_id`` exclude hooks scoped to
    a different session or request.
    """

    type: HookType | None = None
    lifecycle: HookLifecycle | None = None
    tags: list[str] | None = None
    storage: str | None = None
    feature: str | None = None
    config: dict[str, Any] | None = None
    session_id: str | None = None
    request_id: str | None = None


class HookSummary(BaseModel):
    """Identifying fields of a hook as reported in composition results."""

    id: str
    name: str
    requirement_level: RequirementLevel
    priority: int

    @classmethod
    def from_hook(cls, hook: Union[HookDefinition, "HookSummary"]) -> "HookSummary":
        """Summarize a definition (or copy an existing summary)."""
        return cls(
            id=hook.id,
            name=hook.name,
            requirement_level=hook.requirement_level,
            priority=hook.priority,
        )


class SkippedHook(HookSummary):
    """A hook excluded from composition because its conditions were not met."""

    skip_reason: str


class FailedHook(HookSummary):
    """A hook excluded from composition because its content failed to load."""

    error: str


class ComposedHooksResult(BaseModel):
    """
    Result of composing resolved hooks into one document.

    Recomputed on every composition and never cached.
    """

    content: str = Field(default="", description="Combined markdown content")
    included_hooks: list[HookSummary] = Field(
        default_factory=list, description="Composed hooks in final output order"
    )
    skipped_hooks: list[SkippedHook] = Field(default_factory=list)
    failed_hooks: list[FailedHook] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list, description="Transparency summary lines")
    blocking_hooks: list[str] = Field(
        default_factory=list, description="IDs of included hooks marked blocking"
    )
    composed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_empty(self) -> bool:
        """Check if nothing was composed."""
        return not self.included_hooks

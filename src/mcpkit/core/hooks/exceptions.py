"""
Custom exceptions for the hook system.

Only programmer-error conditions raise: malformed definitions, duplicate
registrations and dependency cycles. Content that cannot be read is
reported per hook by the loader and surfaced in composition notices.

Exception Hierarchy:
    HookError (base)
    ├── HookValidationError (malformed hook definition)
    ├── DuplicateHookError (hook ID already registered)
    ├── ContentNotFoundError (content file could not be read)
    └── CircularDependencyError (dependency cycle within a composition)

Example:
    >>> from mcpkit.core.hooks.exceptions import DuplicateHookError
    >>> try:
    ...     registry.register(hook)
    ... except DuplicateHookError as e:
    ...     print(f"Hook '{e.hook_id}' already exists")
"""


class HookError(Exception):
    """
    Base exception for all hook-related errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        """
        Initialize a hook error with message and context.

        Args:
            message: Human-readable error message
            **context: Additional context as keyword arguments
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class HookValidationError(HookError):
    """
    Raised when a hook definition fails validation at registration time.

    Wraps the underlying pydantic error so callers only need to handle
    HookError subclasses.

    Attributes:
        errors: List of validation error details from pydantic
    """

    def __init__(self, message: str, errors: list[dict[str, object]] | None = None) -> None:
        super().__init__(message, errors=errors or [])
        self.errors = errors or []


class DuplicateHookError(HookError):
    """
    Raised when registering a hook whose computed ID is already present.

    The registry is left unchanged when this is raised.

    Attributes:
        hook_id: The colliding hook ID
    """

    def __init__(self, hook_id: str) -> None:
        super().__init__(f"Hook with ID '{hook_id}' is already registered", hook_id=hook_id)
        self.hook_id = hook_id


class ContentNotFoundError(HookError):
    """
    Raised when a hook's content file cannot be read.

    Attributes:
        hook_id: The hook whose content was requested
        path: The resolved content path that failed
    """

    def __init__(self, hook_id: str, path: str, reason: str | None = None) -> None:
        message = f"Content for hook '{hook_id}' not found at {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, hook_id=hook_id, path=path)
        self.hook_id = hook_id
        self.path = path


class CircularDependencyError(HookError):
    """
    Raised when hooks in one requirement-level group depend on each other in a loop.

    Attributes:
        cycle: Hook IDs forming the loop, with the first ID repeated at the end
    """

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(
            f"Circular dependency detected: {' -> '.join(cycle)}",
            cycle=cycle,
        )
        self.cycle = cycle


__all__ = [
    "HookError",
    "HookValidationError",
    "DuplicateHookError",
    "ContentNotFoundError",
    "CircularDependencyError",
]

"""Error taxonomy for workflow steps.

Everything except ``SuppressedTargetFault`` fails the step it is raised in.
``SuppressedTargetFault`` is only ever recorded on a step outcome.
"""
from typing import Optional


class WorkflowError(Exception):
    """Base exception for workflow step failures."""
    kind = "error"


class MissingConfigurationError(WorkflowError):
    """Raised when a step's required configuration value is absent."""
    kind = "missing_configuration"

    def __init__(self, key: str, description: Optional[str] = None):
        self.key = key
        self.description = description or key
        super().__init__(f"{self.description} is missing as environment variable '{key}'.")


class AuthenticationError(WorkflowError):
    """Raised when an administrator session cannot be established."""
    kind = "authentication"


class UIInteractionError(WorkflowError):
    """Raised by engines when an element or page state is not reachable."""
    kind = "ui_interaction"


class CompletionTimeoutError(WorkflowError):
    """Raised when a completion predicate does not hold before its deadline."""
    kind = "completion_timeout"

    def __init__(self, description: str, timeout_ms: int):
        self.description = description
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out after {timeout_ms}ms waiting for: {description}")


class SuppressedTargetFault(WorkflowError):
    """A runtime error thrown by the target page's own scripts.

    Recorded on the step outcome and logged, never raised.
    """
    kind = "suppressed_target_fault"

    def __init__(self, message: str, origin: str):
        self.message = message
        self.origin = origin
        super().__init__(f"{message} ({origin})")

"""Execution domain errors.

Only programming/configuration mistakes are raised from the execution
path. Transient submission failures are absorbed by the retry policy
and surface as FAILED execution results instead.
"""

from __future__ import annotations

from forum_engine.domain.exceptions import ForumEngineError


class ExecutionError(ForumEngineError):
    """Base class for execution-related errors."""

    pass


class UnknownActionError(ExecutionError):
    """Raised when no submission capability handles an action kind.

    This is fatal and never retried.

    Attributes:
        kind: The unhandled action kind value.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unknown action: {kind}")


class NoExecutorError(ExecutionError):
    """Raised when an approved proposal has no executor to act for it."""

    def __init__(self, message: str = "No executor supplied for approved proposal") -> None:
        super().__init__(message)

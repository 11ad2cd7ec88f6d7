"""Exception types raised by compflow services and the workflow engine."""

from __future__ import annotations

from typing import Any, List


class CompflowError(Exception):
    """Base class for all compflow errors."""


class NotFoundError(CompflowError):
    """Raised when a workflow or component id is unknown."""

    def __init__(self, kind: str, identifier: Any) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found with ID: {identifier}")


class IllegalStateError(CompflowError):
    """Raised when an action is attempted from the wrong workflow status."""


class ConflictError(CompflowError):
    """Raised when a unique name is already taken."""


class ValidationFailed(CompflowError):
    """Aggregated list of workflow rule violations."""

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("Workflow validation failed: " + ", ".join(self.errors))


class StepExecutionFailed(CompflowError):
    """Wraps the error that made a single workflow step fail."""

    def __init__(self, step_name: str, cause: BaseException) -> None:
        self.step_name = step_name
        self.cause = cause
        super().__init__(f"Step execution failed: {step_name}: {cause}")

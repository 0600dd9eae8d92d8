"""Errors raised by the planning core.

Every error is a caller-input error scoped to the single requested
operation. Stores validate before they mutate, so a raised error leaves
the plan exactly as it was.
"""

from typing import Any


class ErrorCode:
    """Machine-readable error codes shared by the core and the tool layer."""

    # Input errors
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_REQUIRED = "MISSING_REQUIRED"

    # Plan errors
    NO_ACTIVE_PLAN = "NO_ACTIVE_PLAN"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PlanError(Exception):
    """Base error for task tree and checkpoint operations.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional error details
    """

    error_code: str = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class NoActivePlanError(PlanError):
    """Raised when a task is added before any plan was created."""

    error_code = ErrorCode.NO_ACTIVE_PLAN

    def __init__(self) -> None:
        super().__init__("No plan exists. Create a plan first.")


class ParentNotFoundError(PlanError):
    """Raised when the requested parent task does not exist."""

    error_code = ErrorCode.NOT_FOUND

    def __init__(self, parent_id: str | None):
        super().__init__(
            f"Parent task {parent_id} not found.",
            details={"parent_id": parent_id},
        )
        self.parent_id = parent_id


class TaskNotFoundError(PlanError):
    """Raised when an update targets a task id that does not exist."""

    error_code = ErrorCode.NOT_FOUND

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found.", details={"task_id": task_id})
        self.task_id = task_id


class InvalidStateError(PlanError):
    """Raised when a snapshot cannot be restored."""

    error_code = ErrorCode.INVALID_STATE

    def __init__(self, reason: str | None = None):
        message = "Invalid state to restore"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details={"reason": reason} if reason else None)
        self.reason = reason


class InvalidStatusError(PlanError, ValueError):
    """Raised when a status value is not one of the known task statuses."""

    error_code = ErrorCode.INVALID_INPUT

    def __init__(self, status: str, valid: list[str]):
        super().__init__(
            f"Invalid status: {status}. Valid: {', '.join(valid)}",
            details={"status": status, "valid": valid},
        )
        self.status = status

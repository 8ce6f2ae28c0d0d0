"""Domain exceptions raised by repositories and services.

Routers translate these into HTTP responses; nothing below the router layer
knows about status codes.
"""

from __future__ import annotations

from typing import Any


class PlannerError(RuntimeError):
    """Base class for every error raised by the planner domain."""


class NotFoundError(PlannerError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class TimeRangeError(PlannerError):
    """Raised when a todo time boundary violates a containment or ordering rule."""

    def __init__(self, rule: str, message: str):
        super().__init__(message)
        self.rule = rule


class MissingParentError(PlannerError):
    """Raised when a new record references a parent that does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"referenced {entity} {entity_id} does not exist")
        self.entity = entity
        self.entity_id = entity_id


class CascadeDeleteError(PlannerError):
    """Raised when removing dependent records failed and the delete was rolled back."""

    def __init__(self, dependents: str, cause: BaseException):
        super().__init__(f"failed to delete related {dependents}: {cause}")
        self.dependents = dependents


class StageError(PlannerError):
    """Wraps the failure of one stage of a multi-step operation.

    The underlying exception is kept as ``__cause__`` and exposed as ``cause``.
    """

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"failed to {stage}: {cause}")
        self.stage = stage
        self.cause = cause


class DuplicateUsernameError(PlannerError):
    """Raised when a username is already taken by another account."""


class InvalidCredentialsError(PlannerError):
    """Raised for failed logins or a wrong current password."""


class RoleChangeError(PlannerError):
    """Raised when promoting an admin or demoting a regular user."""


class InvalidPasswordError(PlannerError):
    """Raised when a new password cannot be hashed (bcrypt reads at most 72 bytes)."""


class StorageError(PlannerError):
    """Raised when the SQLite connection is unusable."""


__all__ = [
    "PlannerError",
    "NotFoundError",
    "TimeRangeError",
    "MissingParentError",
    "CascadeDeleteError",
    "StageError",
    "DuplicateUsernameError",
    "InvalidCredentialsError",
    "RoleChangeError",
    "InvalidPasswordError",
    "StorageError",
]

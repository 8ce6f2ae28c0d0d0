"""Translate domain exceptions into HTTP errors."""

from __future__ import annotations

import logging

from fastapi import HTTPException

from ..errors import (
    CascadeDeleteError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidPasswordError,
    MissingParentError,
    NotFoundError,
    PlannerError,
    RoleChangeError,
    StageError,
    TimeRangeError,
)
from ..services.auth import TokenError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[PlannerError], int], ...] = (
    (NotFoundError, 404),
    (TimeRangeError, 400),
    (MissingParentError, 400),
    (DuplicateUsernameError, 400),
    (RoleChangeError, 400),
    (InvalidPasswordError, 400),
    (InvalidCredentialsError, 401),
    (TokenError, 401),
    (CascadeDeleteError, 500),
)


def status_for(exc: BaseException) -> int:
    """Return the HTTP status for ``exc``; stage failures use their cause."""

    if isinstance(exc, StageError):
        return status_for(exc.cause)
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def to_http_error(exc: PlannerError) -> HTTPException:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Request failed: %s", exc)
    return HTTPException(status_code=status_code, detail=str(exc))


__all__ = ["status_for", "to_http_error"]

"""Request dependencies: services from app state and bearer authentication."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..planning import EventService, TaskService, TodoService
from ..services.auth import TokenClaims, TokenError, TokenIssuer
from ..services.signs import SignService
from ..services.users import Role, UserService

_bearer = HTTPBearer(auto_error=False)


def _state_service(request: Request, name: str, label: str) -> Any:
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail=f"{label} service not available")
    return service


def get_event_service(request: Request) -> EventService:
    return _state_service(request, "event_service", "Event")


def get_task_service(request: Request) -> TaskService:
    return _state_service(request, "task_service", "Task")


def get_todo_service(request: Request) -> TodoService:
    return _state_service(request, "todo_service", "Todo")


def get_sign_service(request: Request) -> SignService:
    return _state_service(request, "sign_service", "Sign")


def get_user_service(request: Request) -> UserService:
    return _state_service(request, "user_service", "User")


def get_token_issuer(request: Request) -> TokenIssuer:
    return _state_service(request, "token_issuer", "Token")


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Require a valid ``Authorization: Bearer`` token."""

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Missing authentication token")
    try:
        return issuer.decode(credentials.credentials)
    except TokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    if claims.role != Role.ADMIN.value:
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return claims


def planning_access(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> None:
    """Gate planning routes behind a token when ``require_auth`` is enabled."""

    settings = getattr(request.app.state, "settings", None)
    if settings is None or not settings.require_auth:
        return
    get_current_claims(credentials, get_token_issuer(request))


__all__ = [
    "get_event_service",
    "get_task_service",
    "get_todo_service",
    "get_sign_service",
    "get_user_service",
    "get_token_issuer",
    "get_current_claims",
    "require_admin",
    "planning_access",
]

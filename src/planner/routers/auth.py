"""Public registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..errors import PlannerError
from ..schemas.users import CredentialsRequest, LoginResponse, UserResource
from ..services.auth import TokenIssuer
from ..services.users import User, UserService
from .dependencies import get_token_issuer, get_user_service
from .errors import to_http_error

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _login_response(user: User, issuer: TokenIssuer) -> LoginResponse:
    token = issuer.issue(user.id, user.role.value)
    return LoginResponse(user=UserResource.from_entity(user), token=token)


@router.post("/register", response_model=LoginResponse, status_code=201)
async def register(
    body: CredentialsRequest,
    service: UserService = Depends(get_user_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> LoginResponse:
    try:
        user = await service.register(body.username, body.password)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return _login_response(user, issuer)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: CredentialsRequest,
    service: UserService = Depends(get_user_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> LoginResponse:
    try:
        user = await service.login(body.username, body.password)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return _login_response(user, issuer)


__all__ = ["router"]

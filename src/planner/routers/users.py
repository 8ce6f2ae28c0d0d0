"""Account endpoints for authenticated users and administrators."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from ..errors import InvalidCredentialsError, PlannerError
from ..schemas.users import PasswordChangeRequest, UserResource, UserUpdateRequest
from ..services.auth import TokenClaims
from ..services.users import Role, UserService
from .dependencies import get_current_claims, get_user_service, require_admin
from .errors import to_http_error

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserResource)
async def get_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    service: UserService = Depends(get_user_service),
) -> UserResource:
    try:
        user = await service.get_user(claims.user_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return UserResource.from_entity(user)


@router.put("/password", status_code=204)
async def change_password(
    body: PasswordChangeRequest,
    claims: TokenClaims = Depends(get_current_claims),
    service: UserService = Depends(get_user_service),
) -> Response:
    try:
        await service.change_password(claims.user_id, body.old_password, body.new_password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=204)


@router.get("", response_model=list[UserResource])
async def list_users(
    _: TokenClaims = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> list[UserResource]:
    return [UserResource.from_entity(user) for user in await service.list_users()]


@router.put("/{user_id}", response_model=UserResource)
async def update_user(
    user_id: int,
    body: UserUpdateRequest,
    claims: TokenClaims = Depends(get_current_claims),
    service: UserService = Depends(get_user_service),
) -> UserResource:
    """Users may edit themselves; only admins edit others or change roles."""
    is_admin = claims.role == Role.ADMIN.value
    if not is_admin and claims.user_id != user_id:
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    if not is_admin and body.role is not None:
        raise HTTPException(status_code=403, detail="Only administrators can change roles")

    try:
        user = await service.update_user(
            user_id,
            username=body.username or None,
            password=body.password or None,
            role=body.role,
        )
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return UserResource.from_entity(user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    _: TokenClaims = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> Response:
    try:
        await service.delete_user(user_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=204)


@router.post("/{user_id}/promote", response_model=UserResource)
async def promote_user(
    user_id: int,
    _: TokenClaims = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> UserResource:
    try:
        user = await service.promote_to_admin(user_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return UserResource.from_entity(user)


@router.post("/{user_id}/demote", response_model=UserResource)
async def demote_user(
    user_id: int,
    _: TokenClaims = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> UserResource:
    try:
        user = await service.demote_to_user(user_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return UserResource.from_entity(user)


__all__ = ["router"]

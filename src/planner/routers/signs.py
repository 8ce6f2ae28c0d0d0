"""REST API endpoints for signs."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ..errors import PlannerError
from ..schemas.signs import SignRequest, SignResource
from ..services.signs import SignService
from .dependencies import get_sign_service
from .errors import to_http_error

router = APIRouter(prefix="/api/signs", tags=["signs"])


@router.post("", response_model=SignResource, status_code=201)
async def create_sign(
    body: SignRequest, service: SignService = Depends(get_sign_service)
) -> SignResource:
    sign = await service.create_sign(body.to_entity())
    return SignResource.from_entity(sign)


@router.get("", response_model=list[SignResource])
async def list_signs(service: SignService = Depends(get_sign_service)) -> list[SignResource]:
    return [SignResource.from_entity(sign) for sign in await service.list_signs()]


@router.get("/{sign_id}", response_model=SignResource)
async def get_sign(sign_id: int, service: SignService = Depends(get_sign_service)) -> SignResource:
    try:
        sign = await service.get_sign(sign_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return SignResource.from_entity(sign)


@router.put("/{sign_id}", response_model=SignResource)
async def update_sign(
    sign_id: int, body: SignRequest, service: SignService = Depends(get_sign_service)
) -> SignResource:
    try:
        sign = await service.update_sign(body.to_entity(sign_id))
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return SignResource.from_entity(sign)


@router.delete("/{sign_id}", status_code=204)
async def delete_sign(sign_id: int, service: SignService = Depends(get_sign_service)) -> Response:
    try:
        await service.delete_sign(sign_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=204)


__all__ = ["router"]

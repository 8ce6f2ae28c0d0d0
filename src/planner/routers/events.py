"""REST API endpoints for events."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ..errors import PlannerError
from ..planning import EventService
from ..schemas.planning import EventRequest, EventResource
from .dependencies import get_event_service
from .errors import to_http_error

router = APIRouter(prefix="/api/events", tags=["events"])


@router.post("", response_model=EventResource, status_code=201)
async def create_event(
    body: EventRequest, service: EventService = Depends(get_event_service)
) -> EventResource:
    try:
        event = await service.create_event(body.to_entity())
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return EventResource.from_entity(event)


@router.get("", response_model=list[EventResource])
async def list_events(service: EventService = Depends(get_event_service)) -> list[EventResource]:
    try:
        events = await service.list_events()
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return [EventResource.from_entity(event) for event in events]


@router.get("/{event_id}", response_model=EventResource)
async def get_event(
    event_id: int, service: EventService = Depends(get_event_service)
) -> EventResource:
    try:
        event = await service.get_event(event_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return EventResource.from_entity(event)


@router.put("/{event_id}", response_model=EventResource)
async def update_event(
    event_id: int, body: EventRequest, service: EventService = Depends(get_event_service)
) -> EventResource:
    try:
        event = await service.update_event(body.to_entity(event_id))
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return EventResource.from_entity(event)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: int, service: EventService = Depends(get_event_service)
) -> Response:
    """Delete an event together with its tasks and their todos."""
    try:
        await service.delete_event(event_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=204)


__all__ = ["router"]

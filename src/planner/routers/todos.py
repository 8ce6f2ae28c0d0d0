"""REST API endpoints for todos."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from ..errors import PlannerError
from ..planning import TodoService
from ..schemas.planning import (
    EventResource,
    TaskResource,
    TodoRequest,
    TodoResource,
    TodoWithDetailsRequest,
    TodoWithDetailsResource,
)
from .dependencies import get_todo_service
from .errors import to_http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.post("", response_model=TodoResource, status_code=201)
async def create_todo(
    body: TodoRequest, service: TodoService = Depends(get_todo_service)
) -> TodoResource:
    logger.debug("Received create todo request: %s", body)
    try:
        todo = await service.create_todo(body.to_entity())
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return TodoResource.from_entity(todo)


@router.post("/with-details", response_model=TodoWithDetailsResource, status_code=201)
async def create_todo_with_details(
    body: TodoWithDetailsRequest, service: TodoService = Depends(get_todo_service)
) -> TodoWithDetailsResource:
    """Create an event, a task for it and a todo for that task in one step."""
    try:
        details = await service.create_todo_with_details(
            body.event.to_entity(), body.task.to_entity(), body.todo.to_entity()
        )
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return TodoWithDetailsResource(
        event=EventResource.from_entity(details.event),
        task=TaskResource.from_entity(details.task),
        todo=TodoResource.from_entity(details.todo),
    )


@router.get("", response_model=list[TodoResource])
async def list_todos(
    task_id: Optional[int] = Query(default=None, alias="taskId"),
    service: TodoService = Depends(get_todo_service),
) -> list[TodoResource]:
    try:
        todos = await service.list_todos(task_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return [TodoResource.from_entity(todo) for todo in todos]


@router.get("/{todo_id}", response_model=TodoResource)
async def get_todo(todo_id: int, service: TodoService = Depends(get_todo_service)) -> TodoResource:
    try:
        todo = await service.get_todo(todo_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return TodoResource.from_entity(todo)


@router.get("/{todo_id}/event", response_model=EventResource)
async def get_todo_event(
    todo_id: int, service: TodoService = Depends(get_todo_service)
) -> EventResource:
    """Return the todo's own event, falling back to its task's event."""
    try:
        event = await service.resolve_event(todo_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return EventResource.from_entity(event)


@router.put("/{todo_id}", response_model=TodoResource)
async def update_todo(
    todo_id: int, body: TodoRequest, service: TodoService = Depends(get_todo_service)
) -> TodoResource:
    try:
        todo = await service.update_todo(body.to_entity(todo_id))
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return TodoResource.from_entity(todo)


@router.delete("/{todo_id}", status_code=204)
async def delete_todo(todo_id: int, service: TodoService = Depends(get_todo_service)) -> Response:
    try:
        await service.delete_todo(todo_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=204)


__all__ = ["router"]

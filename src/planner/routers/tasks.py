"""REST API endpoints for tasks."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from ..errors import PlannerError
from ..planning import TaskService
from ..schemas.planning import TaskRequest, TaskResource
from .dependencies import get_task_service
from .errors import to_http_error

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.post("", response_model=TaskResource, status_code=201)
async def create_task(
    body: TaskRequest, service: TaskService = Depends(get_task_service)
) -> TaskResource:
    try:
        task = await service.create_task(body.to_entity())
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return TaskResource.from_entity(task)


@router.get("", response_model=list[TaskResource])
async def list_tasks(
    event_id: Optional[int] = Query(default=None, alias="eventId"),
    service: TaskService = Depends(get_task_service),
) -> list[TaskResource]:
    try:
        tasks = await service.list_tasks(event_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return [TaskResource.from_entity(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskResource)
async def get_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskResource:
    try:
        task = await service.get_task(task_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return TaskResource.from_entity(task)


@router.put("/{task_id}", response_model=TaskResource)
async def update_task(
    task_id: int, body: TaskRequest, service: TaskService = Depends(get_task_service)
) -> TaskResource:
    try:
        task = await service.update_task(body.to_entity(task_id))
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return TaskResource.from_entity(task)


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: int, service: TaskService = Depends(get_task_service)) -> Response:
    """Delete a task and its todos; child tasks are left in place."""
    try:
        await service.delete_task(task_id)
    except PlannerError as exc:
        raise to_http_error(exc) from exc
    return Response(status_code=204)


__all__ = ["router"]

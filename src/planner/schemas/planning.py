"""Request and response schemas for events, tasks and todos.

JSON bodies use camelCase names (``taskId``, ``plannedStart``...); Python
code uses the snake_case attribute names. Requests carry flat start/end
fields while responses nest them into ``{start, end}`` spans.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..planning.models import Event, Status, Task, TimeSpan, Todo


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TimeSpanResource(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def from_span(cls, span: TimeSpan) -> "TimeSpanResource":
        return cls(start=span.start, end=span.end)


class EventRequest(BaseModel):
    """Body for creating or replacing an event."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    location: str = ""
    priority: int = 0
    category: str = ""
    is_template: bool = Field(default=False, alias="isTemplate")

    def to_entity(self, event_id: Optional[int] = None) -> Event:
        return Event(
            id=event_id,
            title=self.title,
            description=self.description,
            location=self.location,
            priority=self.priority,
            category=self.category,
            is_template=self.is_template,
        )


class EventResource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    location: str
    priority: int
    category: str
    is_template: bool = Field(alias="isTemplate")

    @classmethod
    def from_entity(cls, event: Event) -> "EventResource":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            location=event.location,
            priority=event.priority,
            category=event.category,
            is_template=event.is_template,
        )


class TaskRequest(BaseModel):
    """Body for creating or replacing a task."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: int = Field(..., alias="eventId")
    parent_task_id: Optional[int] = Field(default=None, alias="parentTaskId")
    pre_task_ids: list[int] = Field(default_factory=list, alias="preTaskIds")
    description: str = ""
    allowed_start: Optional[datetime] = Field(default=None, alias="allowedStart")
    allowed_end: Optional[datetime] = Field(default=None, alias="allowedEnd")
    planned_start: Optional[datetime] = Field(default=None, alias="plannedStart")
    planned_end: Optional[datetime] = Field(default=None, alias="plannedEnd")
    status: Status = Status.PENDING

    @field_validator(
        "allowed_start", "allowed_end", "planned_start", "planned_end", mode="before"
    )
    @classmethod
    def _empty_as_missing(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return Status.PENDING if _blank_to_none(value) is None else value

    @field_validator("pre_task_ids", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_entity(self, task_id: Optional[int] = None) -> Task:
        return Task(
            id=task_id,
            event_id=self.event_id,
            parent_task_id=self.parent_task_id,
            pre_task_ids=list(self.pre_task_ids),
            description=self.description,
            allowed_time=TimeSpan(self.allowed_start, self.allowed_end),
            planned_time=TimeSpan(self.planned_start, self.planned_end),
            status=self.status,
        )


class TaskResource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    event_id: int = Field(alias="eventId")
    parent_task_id: Optional[int] = Field(default=None, alias="parentTaskId")
    pre_task_ids: list[int] = Field(default_factory=list, alias="preTaskIds")
    description: str
    allowed_time: TimeSpanResource = Field(alias="allowedTime")
    planned_time: TimeSpanResource = Field(alias="plannedTime")
    status: Status
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @classmethod
    def from_entity(cls, task: Task) -> "TaskResource":
        return cls(
            id=task.id,
            event_id=task.event_id,
            parent_task_id=task.parent_task_id,
            pre_task_ids=list(task.pre_task_ids),
            description=task.description,
            allowed_time=TimeSpanResource.from_span(task.allowed_time),
            planned_time=TimeSpanResource.from_span(task.planned_time),
            status=task.status,
            created_at=task.created_at,
        )


class TodoRequest(BaseModel):
    """Body for creating or replacing a todo."""

    model_config = ConfigDict(populate_by_name=True)

    task_id: int = Field(default=0, alias="taskId")
    event_id: Optional[int] = Field(default=None, alias="eventId")
    status: Status = Status.PENDING
    planned_start: Optional[datetime] = Field(default=None, alias="plannedStart")
    planned_end: Optional[datetime] = Field(default=None, alias="plannedEnd")
    actual_start: Optional[datetime] = Field(default=None, alias="actualStart")
    actual_end: Optional[datetime] = Field(default=None, alias="actualEnd")
    completed_time: Optional[datetime] = Field(default=None, alias="completedTime")

    @field_validator(
        "planned_start",
        "planned_end",
        "actual_start",
        "actual_end",
        "completed_time",
        mode="before",
    )
    @classmethod
    def _empty_as_missing(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return Status.PENDING if _blank_to_none(value) is None else value

    def to_entity(self, todo_id: Optional[int] = None) -> Todo:
        return Todo(
            id=todo_id,
            task_id=self.task_id,
            event_id=self.event_id,
            planned_time=TimeSpan(self.planned_start, self.planned_end),
            actual_time=TimeSpan(self.actual_start, self.actual_end),
            status=self.status,
            completed_at=self.completed_time,
        )


class TodoResource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    task_id: int = Field(alias="taskId")
    event_id: Optional[int] = Field(default=None, alias="eventId")
    status: Status
    planned_time: TimeSpanResource = Field(alias="plannedTime")
    actual_time: TimeSpanResource = Field(alias="actualTime")
    completed_time: Optional[datetime] = Field(default=None, alias="completedTime")

    @classmethod
    def from_entity(cls, todo: Todo) -> "TodoResource":
        return cls(
            id=todo.id,
            task_id=todo.task_id,
            event_id=todo.event_id,
            status=todo.status,
            planned_time=TimeSpanResource.from_span(todo.planned_time),
            actual_time=TimeSpanResource.from_span(todo.actual_time),
            completed_time=todo.completed_at,
        )


class TodoWithDetailsRequest(BaseModel):
    """Create an event, its task and a todo in one call.

    ``task.eventId`` and ``todo.taskId`` are filled in by the server.
    """

    event: EventRequest
    task: TaskRequest
    todo: TodoRequest

    @field_validator("task", mode="before")
    @classmethod
    def _placeholder_event(cls, value: Any) -> Any:
        if isinstance(value, dict) and "eventId" not in value and "event_id" not in value:
            return {**value, "eventId": 0}
        return value


class TodoWithDetailsResource(BaseModel):
    event: EventResource
    task: TaskResource
    todo: TodoResource


__all__ = [
    "TimeSpanResource",
    "EventRequest",
    "EventResource",
    "TaskRequest",
    "TaskResource",
    "TodoRequest",
    "TodoResource",
    "TodoWithDetailsRequest",
    "TodoWithDetailsResource",
]

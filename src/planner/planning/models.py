"""Domain models for events, tasks and todos."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..utils.datetime_utils import ensure_utc


class Status(str, Enum):
    """Progress state shared by tasks and todos.

    Any status may replace any other; no transition order is enforced.
    """

    PENDING = "pending"
    DOING = "doing"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class TimeSpan:
    """A pair of optional instants. A missing endpoint disables checks on it."""

    start: Optional[datetime.datetime] = None
    end: Optional[datetime.datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))

    @property
    def is_complete(self) -> bool:
        """Return True when both endpoints are set."""

        return self.start is not None and self.end is not None

    @property
    def duration(self) -> datetime.timedelta:
        if self.start is None or self.end is None:
            return datetime.timedelta(0)
        return self.end - self.start

    def contains(self, instant: datetime.datetime) -> bool:
        """Inclusive containment; only meaningful for a complete span."""

        if self.start is None or self.end is None:
            return False
        instant = ensure_utc(instant)
        return self.start <= instant <= self.end


@dataclass(slots=True)
class Event:
    """An activity definition, optionally reused as a template."""

    title: str
    description: str = ""
    location: str = ""
    priority: int = 0
    category: str = ""
    is_template: bool = False
    id: Optional[int] = None


@dataclass(slots=True)
class Task:
    """Execution plan for an event inside an allowed time window."""

    event_id: int
    description: str = ""
    parent_task_id: Optional[int] = None
    pre_task_ids: list[int] = field(default_factory=list)
    allowed_time: TimeSpan = field(default_factory=TimeSpan)
    planned_time: TimeSpan = field(default_factory=TimeSpan)
    status: Status = Status.PENDING
    created_at: Optional[datetime.datetime] = None
    id: Optional[int] = None


@dataclass(slots=True)
class Todo:
    """A schedulable slice of work against exactly one task."""

    task_id: int
    event_id: Optional[int] = None
    planned_time: TimeSpan = field(default_factory=TimeSpan)
    actual_time: TimeSpan = field(default_factory=TimeSpan)
    status: Status = Status.PENDING
    completed_at: Optional[datetime.datetime] = None
    id: Optional[int] = None

    def resolve_event_id(self, task: Task) -> int:
        """Return the override event when set, otherwise the task's event."""

        return self.event_id if self.event_id is not None else task.event_id


__all__ = ["Status", "TimeSpan", "Event", "Task", "Todo"]

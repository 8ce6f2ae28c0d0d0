"""Time-range rules a todo must satisfy against its parent task.

Every rule is applied only when all instants it needs are present. Missing
data skips the rule instead of failing it. Containment bounds are inclusive.
"""

from __future__ import annotations

import datetime
from typing import Optional

from ..errors import TimeRangeError
from .models import Task, TimeSpan, Todo


def _check_boundary(
    instant: Optional[datetime.datetime],
    window: TimeSpan,
    *,
    rule: str,
    label: str,
) -> None:
    if instant is None or not window.is_complete:
        return
    if not window.contains(instant):
        raise TimeRangeError(rule, f"todo {label} time must be within task time range")


def _check_order(span: TimeSpan, *, rule: str, kind: str) -> None:
    if span.start is None or span.end is None:
        return
    if span.end < span.start:
        raise TimeRangeError(rule, f"todo {kind} end time cannot be before start time")


def validate_todo_window(todo: Todo, task: Task) -> None:
    """Raise ``TimeRangeError`` for the first rule ``todo`` violates.

    Rules run in a fixed order: planned start, planned end, planned ordering,
    then the same three on the actual span. Todos are never compared with
    each other, so overlapping todos under one task are allowed.
    """

    window = task.planned_time
    for kind, span in (("planned", todo.planned_time), ("actual", todo.actual_time)):
        _check_boundary(span.start, window, rule=f"{kind}_start", label=f"{kind} start")
        _check_boundary(span.end, window, rule=f"{kind}_end", label=f"{kind} end")
        _check_order(span, rule=f"{kind}_order", kind=kind)


__all__ = ["validate_todo_window"]

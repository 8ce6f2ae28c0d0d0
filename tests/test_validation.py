from datetime import datetime, timedelta, timezone

import pytest

from planner.errors import TimeRangeError
from planner.planning import Task, TimeSpan, Todo, validate_todo_window

WINDOW_START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
WINDOW_END = datetime(2024, 1, 1, 17, 0, tzinfo=timezone.utc)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 1, hour, minute, tzinfo=timezone.utc)


def _task(start=WINDOW_START, end=WINDOW_END) -> Task:
    return Task(id=1, event_id=1, planned_time=TimeSpan(start, end))


def _rule(todo: Todo, task: Task) -> str:
    with pytest.raises(TimeRangeError) as excinfo:
        validate_todo_window(todo, task)
    return excinfo.value.rule


def test_todo_inside_window_is_accepted() -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(_at(10), _at(11)))

    validate_todo_window(todo, _task())


@pytest.mark.parametrize("boundary", [WINDOW_START, WINDOW_END])
def test_window_bounds_are_inclusive(boundary: datetime) -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(boundary, None))

    validate_todo_window(todo, _task())


def test_start_one_second_before_window_is_rejected() -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(WINDOW_START - timedelta(seconds=1), None))

    assert _rule(todo, _task()) == "planned_start"


def test_start_before_window_is_rejected() -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(_at(8), _at(9, 30)))

    with pytest.raises(TimeRangeError, match="planned start time must be within task time range"):
        validate_todo_window(todo, _task())


def test_end_after_window_is_rejected() -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(_at(16), _at(18)))

    assert _rule(todo, _task()) == "planned_end"


def test_end_before_start_is_rejected_inside_window() -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(_at(12), _at(11)))

    with pytest.raises(TimeRangeError, match="planned end time cannot be before start time"):
        validate_todo_window(todo, _task())


def test_end_before_start_is_rejected_without_task_window() -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(_at(12), _at(11)))

    assert _rule(todo, _task(None, None)) == "planned_order"


def test_unset_todo_times_skip_every_check() -> None:
    validate_todo_window(Todo(task_id=1), _task())


def test_partial_task_window_skips_containment() -> None:
    todo = Todo(task_id=1, planned_time=TimeSpan(_at(6), None))

    validate_todo_window(todo, _task(WINDOW_START, None))


def test_actual_span_is_checked_against_planned_window() -> None:
    todo = Todo(
        task_id=1,
        planned_time=TimeSpan(_at(10), _at(11)),
        actual_time=TimeSpan(_at(10), _at(18)),
    )

    assert _rule(todo, _task()) == "actual_end"


def test_actual_start_outside_window_is_rejected() -> None:
    todo = Todo(task_id=1, actual_time=TimeSpan(_at(7), None))

    assert _rule(todo, _task()) == "actual_start"


def test_actual_order_is_checked() -> None:
    todo = Todo(task_id=1, actual_time=TimeSpan(_at(15), _at(14)))

    assert _rule(todo, _task()) == "actual_order"


def test_planned_rules_run_before_actual_rules() -> None:
    todo = Todo(
        task_id=1,
        planned_time=TimeSpan(_at(8), None),
        actual_time=TimeSpan(_at(7), None),
    )

    assert _rule(todo, _task()) == "planned_start"

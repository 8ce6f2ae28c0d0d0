from __future__ import annotations

from datetime import datetime, timezone

import pytest

from planner.errors import NotFoundError
from planner.planning import Event, Status, Task, TimeSpan, Todo


@pytest.mark.anyio
async def test_event_fields_are_persisted(events):
    created = await events.create(
        Event(
            title="Piano practice",
            description="Scales then pieces",
            location="Home",
            priority=3,
            category="music",
            is_template=True,
        )
    )

    fetched = await events.get_by_id(created.id)

    assert fetched == created
    assert await events.exists(created.id)


@pytest.mark.anyio
async def test_task_spans_and_references_are_persisted(tasks):
    allowed = TimeSpan(
        datetime(2024, 1, 1, 8, tzinfo=timezone.utc),
        datetime(2024, 1, 1, 20, tzinfo=timezone.utc),
    )
    planned = TimeSpan(datetime(2024, 1, 1, 9, tzinfo=timezone.utc), None)

    created = await tasks.create(
        Task(
            event_id=1,
            parent_task_id=7,
            pre_task_ids=[3, 4],
            description="Plan",
            allowed_time=allowed,
            planned_time=planned,
            status=Status.DOING,
        )
    )
    fetched = await tasks.get_by_id(created.id)

    assert fetched.allowed_time == allowed
    assert fetched.planned_time == planned
    assert fetched.parent_task_id == 7
    assert fetched.pre_task_ids == [3, 4]
    assert fetched.status is Status.DOING
    assert fetched.created_at is not None


@pytest.mark.anyio
async def test_list_tasks_filters_by_event(tasks):
    await tasks.create(Task(event_id=1))
    second = await tasks.create(Task(event_id=2))

    assert [task.id for task in await tasks.list_all(2)] == [second.id]
    assert len(await tasks.list_all()) == 2


@pytest.mark.anyio
async def test_todo_completed_at_is_persisted(todos):
    completed = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    created = await todos.create(Todo(task_id=1, status=Status.DONE, completed_at=completed))

    fetched = await todos.get_by_id(created.id)

    assert fetched.completed_at == completed
    assert fetched.event_id is None
    assert fetched.planned_time == TimeSpan()


@pytest.mark.anyio
async def test_missing_rows_raise_not_found(events, tasks, todos):
    with pytest.raises(NotFoundError):
        await events.get_by_id(1)
    with pytest.raises(NotFoundError):
        await tasks.update(Task(id=1, event_id=1))
    with pytest.raises(NotFoundError):
        await todos.delete(1)
    assert not await tasks.exists(1)


@pytest.mark.anyio
async def test_cascade_helpers_report_removed_rows(tasks, todos):
    task = await tasks.create(Task(event_id=5))
    await tasks.create(Task(event_id=5))
    await todos.create(Todo(task_id=task.id))
    await todos.create(Todo(task_id=task.id))

    assert await todos.delete_by_event_id(5) == 2
    assert await tasks.delete_by_event_id(5) == 2
    assert await todos.delete_by_task_id(task.id) == 0

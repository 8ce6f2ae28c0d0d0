"""SQLite-backed gateways for events, tasks and todos.

Each repository maps its rows field by field. Every statement runs through
``Database.transaction()`` so a call made inside a service transaction joins
it, while a standalone call gets its own.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

import aiosqlite

from ..database import Database
from ..errors import NotFoundError
from ..utils.datetime_utils import from_storage, to_storage, utc_now
from .models import Event, Status, Task, TimeSpan, Todo


def _encode_ids(values: Iterable[int]) -> str:
    return json.dumps([int(value) for value in values])


def _decode_ids(value: str | None) -> list[int]:
    if not value:
        return []
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        return []
    if not isinstance(decoded, list):
        return []
    return [item for item in decoded if isinstance(item, int)]


def _span(row: aiosqlite.Row, prefix: str) -> TimeSpan:
    return TimeSpan(
        start=from_storage(row[f"{prefix}_start"]),
        end=from_storage(row[f"{prefix}_end"]),
    )


class EventRepository:
    """Persist and retrieve events."""

    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _row_to_event(row: aiosqlite.Row) -> Event:
        return Event(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            location=row["location"],
            priority=row["priority"],
            category=row["category"],
            is_template=bool(row["is_template"]),
        )

    async def create(self, event: Event) -> Event:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO events (title, description, location, priority, category, is_template)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    event.title,
                    event.description,
                    event.location,
                    event.priority,
                    event.category,
                    int(event.is_template),
                ),
            )
            event.id = cursor.lastrowid
            await cursor.close()
        return event

    async def get_by_id(self, event_id: int) -> Event:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM events WHERE id = ?", (event_id,))
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise NotFoundError("event", event_id)
        return self._row_to_event(row)

    async def list_all(self) -> list[Event]:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM events ORDER BY id ASC")
            rows = await cursor.fetchall()
            await cursor.close()
        return [self._row_to_event(row) for row in rows]

    async def update(self, event: Event) -> Event:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE events
                SET title = ?, description = ?, location = ?, priority = ?,
                    category = ?, is_template = ?
                WHERE id = ?
                """,
                (
                    event.title,
                    event.description,
                    event.location,
                    event.priority,
                    event.category,
                    int(event.is_template),
                    event.id,
                ),
            )
            updated = cursor.rowcount
            await cursor.close()
        if not updated:
            raise NotFoundError("event", event.id)
        return event

    async def delete(self, event_id: int) -> None:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("DELETE FROM events WHERE id = ?", (event_id,))
            deleted = cursor.rowcount
            await cursor.close()
        if not deleted:
            raise NotFoundError("event", event_id)

    async def exists(self, event_id: int) -> bool:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "SELECT EXISTS(SELECT 1 FROM events WHERE id = ?)", (event_id,)
            )
            row = await cursor.fetchone()
            await cursor.close()
        return bool(row[0]) if row is not None else False


class TaskRepository:
    """Persist and retrieve tasks."""

    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        return Task(
            id=row["id"],
            event_id=row["event_id"],
            parent_task_id=row["parent_task_id"],
            pre_task_ids=_decode_ids(row["pre_task_ids"]),
            description=row["description"],
            allowed_time=_span(row, "allowed"),
            planned_time=_span(row, "planned"),
            status=Status(row["status"]),
            created_at=from_storage(row["created_at"]),
        )

    @staticmethod
    def _columns(task: Task) -> tuple[Any, ...]:
        return (
            task.event_id,
            task.parent_task_id,
            _encode_ids(task.pre_task_ids),
            task.description,
            to_storage(task.allowed_time.start),
            to_storage(task.allowed_time.end),
            to_storage(task.planned_time.start),
            to_storage(task.planned_time.end),
            Status(task.status).value,
        )

    async def create(self, task: Task) -> Task:
        if task.created_at is None:
            task.created_at = utc_now()
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO tasks (
                    event_id, parent_task_id, pre_task_ids, description,
                    allowed_start, allowed_end, planned_start, planned_end,
                    status, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (*self._columns(task), to_storage(task.created_at)),
            )
            task.id = cursor.lastrowid
            await cursor.close()
        return task

    async def get_by_id(self, task_id: int) -> Task:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise NotFoundError("task", task_id)
        return self._row_to_task(row)

    async def list_all(self, event_id: int | None = None) -> list[Task]:
        query = "SELECT * FROM tasks"
        params: tuple[Any, ...] = ()
        if event_id is not None:
            query += " WHERE event_id = ?"
            params = (event_id,)
        query += " ORDER BY id ASC"
        async with self._db.transaction() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            await cursor.close()
        return [self._row_to_task(row) for row in rows]

    async def update(self, task: Task) -> Task:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE tasks
                SET event_id = ?, parent_task_id = ?, pre_task_ids = ?, description = ?,
                    allowed_start = ?, allowed_end = ?, planned_start = ?, planned_end = ?,
                    status = ?
                WHERE id = ?
                """,
                (*self._columns(task), task.id),
            )
            updated = cursor.rowcount
            await cursor.close()
        if not updated:
            raise NotFoundError("task", task.id)
        return task

    async def delete(self, task_id: int) -> None:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            deleted = cursor.rowcount
            await cursor.close()
        if not deleted:
            raise NotFoundError("task", task_id)

    async def delete_by_event_id(self, event_id: int) -> int:
        """Delete every task of an event and return how many were removed."""

        async with self._db.transaction() as conn:
            cursor = await conn.execute("DELETE FROM tasks WHERE event_id = ?", (event_id,))
            deleted = cursor.rowcount
            await cursor.close()
        return deleted

    async def exists(self, task_id: int) -> bool:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "SELECT EXISTS(SELECT 1 FROM tasks WHERE id = ?)", (task_id,)
            )
            row = await cursor.fetchone()
            await cursor.close()
        return bool(row[0]) if row is not None else False


class TodoRepository:
    """Persist and retrieve todos."""

    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _row_to_todo(row: aiosqlite.Row) -> Todo:
        return Todo(
            id=row["id"],
            event_id=row["event_id"],
            task_id=row["task_id"],
            planned_time=_span(row, "planned"),
            actual_time=_span(row, "actual"),
            status=Status(row["status"]),
            completed_at=from_storage(row["completed_at"]),
        )

    @staticmethod
    def _columns(todo: Todo) -> tuple[Any, ...]:
        return (
            todo.event_id,
            todo.task_id,
            Status(todo.status).value,
            to_storage(todo.planned_time.start),
            to_storage(todo.planned_time.end),
            to_storage(todo.actual_time.start),
            to_storage(todo.actual_time.end),
            to_storage(todo.completed_at),
        )

    async def create(self, todo: Todo) -> Todo:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO todos (
                    event_id, task_id, status, planned_start, planned_end,
                    actual_start, actual_end, completed_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._columns(todo),
            )
            todo.id = cursor.lastrowid
            await cursor.close()
        return todo

    async def get_by_id(self, todo_id: int) -> Todo:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,))
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise NotFoundError("todo", todo_id)
        return self._row_to_todo(row)

    async def list_all(self, task_id: int | None = None) -> list[Todo]:
        query = "SELECT * FROM todos"
        params: tuple[Any, ...] = ()
        if task_id is not None:
            query += " WHERE task_id = ?"
            params = (task_id,)
        query += " ORDER BY id ASC"
        async with self._db.transaction() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            await cursor.close()
        return [self._row_to_todo(row) for row in rows]

    async def update(self, todo: Todo) -> Todo:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE todos
                SET event_id = ?, task_id = ?, status = ?, planned_start = ?, planned_end = ?,
                    actual_start = ?, actual_end = ?, completed_at = ?
                WHERE id = ?
                """,
                (*self._columns(todo), todo.id),
            )
            updated = cursor.rowcount
            await cursor.close()
        if not updated:
            raise NotFoundError("todo", todo.id)
        return todo

    async def delete(self, todo_id: int) -> None:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("DELETE FROM todos WHERE id = ?", (todo_id,))
            deleted = cursor.rowcount
            await cursor.close()
        if not deleted:
            raise NotFoundError("todo", todo_id)

    async def delete_by_task_id(self, task_id: int) -> int:
        """Delete every todo of a task and return how many were removed."""

        async with self._db.transaction() as conn:
            cursor = await conn.execute("DELETE FROM todos WHERE task_id = ?", (task_id,))
            deleted = cursor.rowcount
            await cursor.close()
        return deleted

    async def delete_by_event_id(self, event_id: int) -> int:
        """Delete the todos of every task belonging to an event."""

        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM todos WHERE task_id IN (SELECT id FROM tasks WHERE event_id = ?)",
                (event_id,),
            )
            deleted = cursor.rowcount
            await cursor.close()
        return deleted

    async def clear_event_override(self, event_id: int) -> int:
        """Drop ``event_id`` overrides so those todos fall back to their task's event."""

        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE todos SET event_id = NULL WHERE event_id = ?", (event_id,)
            )
            cleared = cursor.rowcount
            await cursor.close()
        return cleared


__all__ = ["EventRepository", "TaskRepository", "TodoRepository"]

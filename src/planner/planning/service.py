"""Service layer coordinating event, task and todo operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..database import Database
from ..errors import CascadeDeleteError, MissingParentError, StageError
from .models import Event, Task, Todo
from .repository import EventRepository, TaskRepository, TodoRepository
from .validation import validate_todo_window


@dataclass(slots=True)
class TodoDetails:
    """Records produced by ``TodoService.create_todo_with_details``."""

    event: Event
    task: Task
    todo: Todo


class EventService:
    """Own the event lifecycle; deleting an event removes its tasks."""

    def __init__(
        self,
        database: Database,
        events: EventRepository,
        tasks: TaskRepository,
        todos: TodoRepository,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._database = database
        self._events = events
        self._tasks = tasks
        self._todos = todos
        self._logger = logger or logging.getLogger(__name__)

    async def create_event(self, event: Event) -> Event:
        created = await self._events.create(event)
        self._logger.info("Created event %s (%s)", created.id, created.title)
        return created

    async def list_events(self) -> list[Event]:
        return await self._events.list_all()

    async def get_event(self, event_id: int) -> Event:
        return await self._events.get_by_id(event_id)

    async def update_event(self, event: Event) -> Event:
        return await self._events.update(event)

    async def delete_event(self, event_id: int) -> None:
        """Delete an event together with its tasks and their todos.

        Todos under other events that override their event with ``event_id``
        lose the override and fall back to their task's event.

        The cascade runs in one transaction: when removing the dependents
        fails nothing is deleted and ``CascadeDeleteError`` is raised.
        """

        async with self._database.transaction():
            await self._events.get_by_id(event_id)
            try:
                todos_removed = await self._todos.delete_by_event_id(event_id)
                await self._todos.clear_event_override(event_id)
                tasks_removed = await self._tasks.delete_by_event_id(event_id)
            except Exception as exc:
                self._logger.error("Cascade delete for event %s failed: %s", event_id, exc)
                raise CascadeDeleteError("tasks", exc) from exc
            await self._events.delete(event_id)

        self._logger.info(
            "Deleted event %s with %d task(s) and %d todo(s)",
            event_id,
            tasks_removed,
            todos_removed,
        )


class TaskService:
    """Own the task lifecycle; deleting a task removes its todos."""

    def __init__(
        self,
        database: Database,
        tasks: TaskRepository,
        todos: TodoRepository,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._database = database
        self._tasks = tasks
        self._todos = todos
        self._logger = logger or logging.getLogger(__name__)

    async def create_task(self, task: Task) -> Task:
        # Parent and prerequisite ids are stored as given.
        created = await self._tasks.create(task)
        self._logger.info("Created task %s for event %s", created.id, created.event_id)
        return created

    async def list_tasks(self, event_id: Optional[int] = None) -> list[Task]:
        return await self._tasks.list_all(event_id)

    async def get_task(self, task_id: int) -> Task:
        return await self._tasks.get_by_id(task_id)

    async def has_task(self, task_id: int) -> bool:
        return await self._tasks.exists(task_id)

    async def update_task(self, task: Task) -> Task:
        async with self._database.transaction():
            existing = await self._tasks.get_by_id(task.id)
            task.created_at = existing.created_at
            return await self._tasks.update(task)

    async def delete_task(self, task_id: int) -> None:
        """Delete a task and its todos atomically.

        Child tasks pointing at ``task_id`` through ``parent_task_id`` are kept.
        """

        async with self._database.transaction():
            await self._tasks.get_by_id(task_id)
            try:
                removed = await self._todos.delete_by_task_id(task_id)
            except Exception as exc:
                self._logger.error("Cascade delete for task %s failed: %s", task_id, exc)
                raise CascadeDeleteError("todos", exc) from exc
            await self._tasks.delete(task_id)

        self._logger.info("Deleted task %s with %d todo(s)", task_id, removed)


class TodoService:
    """Own the todo lifecycle and enforce its time window against the task."""

    def __init__(
        self,
        database: Database,
        todos: TodoRepository,
        tasks: TaskRepository,
        events: EventRepository,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._database = database
        self._todos = todos
        self._tasks = tasks
        self._events = events
        self._logger = logger or logging.getLogger(__name__)

    async def _resolve_parent(self, task_id: int) -> Task:
        try:
            return await self._tasks.get_by_id(task_id)
        except Exception as exc:
            raise StageError("resolve parent task", exc) from exc

    async def _create_todo(self, todo: Todo) -> Todo:
        if not await self._tasks.exists(todo.task_id):
            raise MissingParentError("task", todo.task_id)
        task = await self._resolve_parent(todo.task_id)
        validate_todo_window(todo, task)
        return await self._todos.create(todo)

    async def create_todo(self, todo: Todo) -> Todo:
        async with self._database.transaction():
            created = await self._create_todo(todo)
        self._logger.info("Created todo %s for task %s", created.id, created.task_id)
        return created

    async def update_todo(self, todo: Todo) -> Todo:
        self._logger.debug("Checking todo %s against task %s", todo.id, todo.task_id)
        async with self._database.transaction():
            await self._todos.get_by_id(todo.id)
            task = await self._resolve_parent(todo.task_id)
            validate_todo_window(todo, task)
            return await self._todos.update(todo)

    async def list_todos(self, task_id: Optional[int] = None) -> list[Todo]:
        return await self._todos.list_all(task_id)

    async def get_todo(self, todo_id: int) -> Todo:
        return await self._todos.get_by_id(todo_id)

    async def delete_todo(self, todo_id: int) -> None:
        await self._todos.delete(todo_id)

    async def resolve_event(self, todo_id: int) -> Event:
        """Return the event a todo belongs to, honouring its override."""

        async with self._database.transaction():
            todo = await self._todos.get_by_id(todo_id)
            task = await self._resolve_parent(todo.task_id)
            return await self._events.get_by_id(todo.resolve_event_id(task))

    async def create_todo_with_details(self, event: Event, task: Task, todo: Todo) -> TodoDetails:
        """Create an event, a task linked to it and a todo linked to that task.

        Stages run in order inside one transaction; the first failure raises a
        ``StageError`` naming the stage and nothing is persisted.
        """

        async with self._database.transaction():
            try:
                await self._events.create(event)
            except Exception as exc:
                raise StageError("create event", exc) from exc

            task.event_id = event.id
            try:
                await self._tasks.create(task)
            except Exception as exc:
                raise StageError("create task", exc) from exc

            todo.task_id = task.id
            try:
                await self._create_todo(todo)
            except Exception as exc:
                raise StageError("create todo", exc) from exc

        self._logger.info(
            "Created event %s, task %s and todo %s together", event.id, task.id, todo.id
        )
        return TodoDetails(event=event, task=task, todo=todo)


__all__ = ["EventService", "TaskService", "TodoService", "TodoDetails"]

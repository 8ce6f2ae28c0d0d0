import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from planner.database import Database  # noqa: E402
from planner.planning import (  # noqa: E402
    EventRepository,
    EventService,
    TaskRepository,
    TaskService,
    TodoRepository,
    TodoService,
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def database(tmp_path):
    db = Database(tmp_path / "planner.db")
    await db.initialize()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
def events(database) -> EventRepository:
    return EventRepository(database)


@pytest.fixture
def tasks(database) -> TaskRepository:
    return TaskRepository(database)


@pytest.fixture
def todos(database) -> TodoRepository:
    return TodoRepository(database)


@pytest.fixture
def event_service(database, events, tasks, todos) -> EventService:
    return EventService(database, events, tasks, todos)


@pytest.fixture
def task_service(database, tasks, todos) -> TaskService:
    return TaskService(database, tasks, todos)


@pytest.fixture
def todo_service(database, todos, tasks, events) -> TodoService:
    return TodoService(database, todos, tasks, events)

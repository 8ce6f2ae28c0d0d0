"""SQLite connection shared by every repository."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from .errors import StorageError

logger = logging.getLogger(__name__)

_ACTIVE_DATABASE: ContextVar["Database | None"] = ContextVar(
    "planner_active_database", default=None
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    location TEXT NOT NULL DEFAULT '',
    priority INTEGER NOT NULL DEFAULT 0,
    category TEXT NOT NULL DEFAULT '',
    is_template INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER NOT NULL,
    parent_task_id INTEGER,
    pre_task_ids TEXT NOT NULL DEFAULT '[]',
    description TEXT NOT NULL DEFAULT '',
    allowed_start TEXT,
    allowed_end TEXT,
    planned_start TEXT,
    planned_end TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_tasks_event_id ON tasks(event_id);

CREATE TABLE IF NOT EXISTS todos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER,
    task_id INTEGER NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    planned_start TEXT,
    planned_end TEXT,
    actual_start TEXT,
    actual_end TEXT,
    completed_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_todos_task_id ON todos(task_id);

CREATE TABLE IF NOT EXISTS signs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    signifier TEXT NOT NULL,
    signified TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'user',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class Database:
    """Own the aiosqlite connection and hand out transactions.

    Statements run in autocommit mode; ``transaction()`` issues explicit
    ``BEGIN``/``COMMIT``/``ROLLBACK``. Transactions are serialised with a lock
    because every coroutine shares the one connection. Entering
    ``transaction()`` again from inside an open transaction of the same task
    joins it instead of nesting.
    """

    def __init__(self, database_path: Path):
        self._path = database_path
        self._connection: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def initialize(self) -> None:
        """Open the SQLite connection and ensure tables exist."""

        if self._connection is not None:
            return

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._path, isolation_level=None)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA journal_mode=WAL;")
        await self._connection.executescript(_SCHEMA)
        logger.info("Database ready at %s", self._path)

    async def close(self) -> None:
        """Close the database connection."""

        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise StorageError("database connection is not initialized")
        return self._connection

    @property
    def in_transaction(self) -> bool:
        return _ACTIVE_DATABASE.get() is self

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run the enclosed statements atomically, rolling back on any error."""

        connection = self.connection
        if self.in_transaction:
            yield connection
            return

        async with self._lock:
            token = _ACTIVE_DATABASE.set(self)
            try:
                await connection.execute("BEGIN")
                try:
                    yield connection
                except BaseException:
                    await connection.execute("ROLLBACK")
                    raise
                await connection.execute("COMMIT")
            finally:
                _ACTIVE_DATABASE.reset(token)


__all__ = ["Database"]

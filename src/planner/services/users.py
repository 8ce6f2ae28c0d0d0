"""User accounts: storage, registration, login and role management."""

from __future__ import annotations

import datetime
import logging
import sqlite3
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import aiosqlite

from ..database import Database
from ..errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    NotFoundError,
    RoleChangeError,
)
from ..utils.datetime_utils import from_storage, to_storage, utc_now
from .auth import hash_password, verify_password


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(slots=True)
class User:
    """A stored account. ``password_hash`` never leaves the service layer."""

    username: str
    password_hash: str
    role: Role = Role.USER
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None
    id: Optional[int] = None


class UserRepository:
    """Persist and retrieve users from SQLite."""

    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            role=Role(row["role"]),
            created_at=from_storage(row["created_at"]),
            updated_at=from_storage(row["updated_at"]),
        )

    async def create(self, user: User) -> User:
        async with self._db.transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO users (username, password_hash, role, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        user.username,
                        user.password_hash,
                        Role(user.role).value,
                        to_storage(user.created_at),
                        to_storage(user.updated_at),
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateUsernameError("username already exists") from exc
            user.id = cursor.lastrowid
            await cursor.close()
        return user

    async def _fetch_one(self, query: str, params: tuple) -> Optional[User]:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
            await cursor.close()
        return self._row_to_user(row) if row is not None else None

    async def get_by_id(self, user_id: int) -> User:
        user = await self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._fetch_one("SELECT * FROM users WHERE username = ?", (username,))

    async def list_all(self) -> list[User]:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM users ORDER BY id ASC")
            rows = await cursor.fetchall()
            await cursor.close()
        return [self._row_to_user(row) for row in rows]

    async def update(self, user: User) -> User:
        async with self._db.transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    UPDATE users
                    SET username = ?, password_hash = ?, role = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        user.username,
                        user.password_hash,
                        Role(user.role).value,
                        to_storage(user.updated_at),
                        user.id,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateUsernameError("username is used by another user") from exc
            updated = cursor.rowcount
            await cursor.close()
        if not updated:
            raise NotFoundError("user", user.id)
        return user

    async def delete(self, user_id: int) -> None:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            deleted = cursor.rowcount
            await cursor.close()
        if not deleted:
            raise NotFoundError("user", user_id)


class UserService:
    """Account operations used by the auth and user routers."""

    def __init__(self, repository: UserRepository, *, logger: Optional[logging.Logger] = None):
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)

    async def register(self, username: str, password: str, *, role: Role = Role.USER) -> User:
        """Create an account. Public registration always yields ``Role.USER``."""

        if await self._repository.get_by_username(username) is not None:
            raise DuplicateUsernameError("username already exists")

        now = utc_now()
        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            created_at=now,
            updated_at=now,
        )
        await self._repository.create(user)
        self._logger.info("Registered user %s (id=%s)", username, user.id)
        return user

    async def login(self, username: str, password: str) -> User:
        user = await self._repository.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("invalid username or password")
        self._logger.info("User %s logged in (id=%s)", username, user.id)
        return user

    async def get_user(self, user_id: int) -> User:
        return await self._repository.get_by_id(user_id)

    async def list_users(self) -> list[User]:
        return await self._repository.list_all()

    async def update_user(
        self,
        user_id: int,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> User:
        """Apply the provided fields; empty values leave a field unchanged."""

        user = await self._repository.get_by_id(user_id)

        if username:
            existing = await self._repository.get_by_username(username)
            if existing is not None and existing.id != user_id:
                raise DuplicateUsernameError("username is used by another user")
            user.username = username
        if password:
            user.password_hash = hash_password(password)
        if role is not None:
            user.role = role

        user.updated_at = utc_now()
        await self._repository.update(user)
        self._logger.info("Updated user %s (id=%s)", user.username, user.id)
        return user

    async def delete_user(self, user_id: int) -> None:
        await self._repository.delete(user_id)
        self._logger.info("Deleted user id=%s", user_id)

    async def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        user = await self._repository.get_by_id(user_id)
        if not verify_password(old_password, user.password_hash):
            raise InvalidCredentialsError("current password is incorrect")
        user.password_hash = hash_password(new_password)
        user.updated_at = utc_now()
        await self._repository.update(user)
        self._logger.info("Changed password for user %s (id=%s)", user.username, user.id)

    async def _set_role(self, user_id: int, role: Role) -> User:
        user = await self._repository.get_by_id(user_id)
        if user.role == role:
            raise RoleChangeError(f"user already has role '{role.value}'")
        user.role = role
        user.updated_at = utc_now()
        await self._repository.update(user)
        self._logger.info("Set role of user %s (id=%s) to %s", user.username, user.id, role.value)
        return user

    async def promote_to_admin(self, user_id: int) -> User:
        return await self._set_role(user_id, Role.ADMIN)

    async def demote_to_user(self, user_id: int) -> User:
        return await self._set_role(user_id, Role.USER)

    async def ensure_admin(self, username: str, password: str) -> Optional[User]:
        """Create the bootstrap admin when it does not exist yet."""

        if await self._repository.get_by_username(username) is not None:
            return None
        user = await self.register(username, password, role=Role.ADMIN)
        self._logger.info("Bootstrapped admin account %s", username)
        return user


__all__ = ["Role", "User", "UserRepository", "UserService"]

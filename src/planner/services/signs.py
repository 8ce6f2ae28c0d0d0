"""Signifier/signified records and the service that manages them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import aiosqlite

from ..database import Database
from ..errors import NotFoundError


@dataclass(slots=True)
class Sign:
    """A signifier paired with what it signifies."""

    signifier: str
    signified: str
    id: Optional[int] = None


class SignRepository:
    """Persist and retrieve signs from SQLite."""

    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _row_to_sign(row: aiosqlite.Row) -> Sign:
        return Sign(id=row["id"], signifier=row["signifier"], signified=row["signified"])

    async def create(self, sign: Sign) -> Sign:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO signs (signifier, signified) VALUES (?, ?)",
                (sign.signifier, sign.signified),
            )
            sign.id = cursor.lastrowid
            await cursor.close()
        return sign

    async def get_by_id(self, sign_id: int) -> Sign:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM signs WHERE id = ?", (sign_id,))
            row = await cursor.fetchone()
            await cursor.close()
        if row is None:
            raise NotFoundError("sign", sign_id)
        return self._row_to_sign(row)

    async def list_all(self) -> list[Sign]:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("SELECT * FROM signs ORDER BY id ASC")
            rows = await cursor.fetchall()
            await cursor.close()
        return [self._row_to_sign(row) for row in rows]

    async def update(self, sign: Sign) -> Sign:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE signs SET signifier = ?, signified = ? WHERE id = ?",
                (sign.signifier, sign.signified, sign.id),
            )
            updated = cursor.rowcount
            await cursor.close()
        if not updated:
            raise NotFoundError("sign", sign.id)
        return sign

    async def delete(self, sign_id: int) -> None:
        async with self._db.transaction() as conn:
            cursor = await conn.execute("DELETE FROM signs WHERE id = ?", (sign_id,))
            deleted = cursor.rowcount
            await cursor.close()
        if not deleted:
            raise NotFoundError("sign", sign_id)


class SignService:
    """Thin pass-through over ``SignRepository``."""

    def __init__(self, repository: SignRepository):
        self._repository = repository

    async def create_sign(self, sign: Sign) -> Sign:
        return await self._repository.create(sign)

    async def list_signs(self) -> list[Sign]:
        return await self._repository.list_all()

    async def get_sign(self, sign_id: int) -> Sign:
        return await self._repository.get_by_id(sign_id)

    async def update_sign(self, sign: Sign) -> Sign:
        return await self._repository.update(sign)

    async def delete_sign(self, sign_id: int) -> None:
        await self._repository.delete(sign_id)


__all__ = ["Sign", "SignRepository", "SignService"]

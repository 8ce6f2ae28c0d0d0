"""Schemas for the sign resource."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..services.signs import Sign


class SignRequest(BaseModel):
    signifier: str
    signified: str

    def to_entity(self, sign_id: Optional[int] = None) -> Sign:
        return Sign(id=sign_id, signifier=self.signifier, signified=self.signified)


class SignResource(BaseModel):
    id: int
    signifier: str
    signified: str

    @classmethod
    def from_entity(cls, sign: Sign) -> "SignResource":
        return cls(id=sign.id, signifier=sign.signifier, signified=sign.signified)


__all__ = ["SignRequest", "SignResource"]

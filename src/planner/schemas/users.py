"""Schemas for registration, login and account management."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..services.users import Role, User


class CredentialsRequest(BaseModel):
    """Body for register and login. Registration cannot choose a role."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdateRequest(BaseModel):
    username: str = ""
    password: str = ""
    role: Optional[Role] = None

    @field_validator("role", mode="before")
    @classmethod
    def _blank_role(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PasswordChangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field(..., min_length=1, alias="oldPassword")
    new_password: str = Field(..., min_length=1, alias="newPassword")


class UserResource(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    role: Role
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_entity(cls, user: User) -> "UserResource":
        return cls(
            id=user.id,
            username=user.username,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(BaseModel):
    user: UserResource
    token: str


__all__ = [
    "CredentialsRequest",
    "UserUpdateRequest",
    "PasswordChangeRequest",
    "UserResource",
    "LoginResponse",
]

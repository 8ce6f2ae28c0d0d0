"""Password hashing and bearer token helpers."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from ..errors import InvalidPasswordError, PlannerError
from ..utils.datetime_utils import utc_now

_ALGORITHM = "HS256"
MAX_PASSWORD_BYTES = 72


class TokenError(PlannerError):
    """Raised when a bearer token is malformed, expired or badly signed."""


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Identity carried by a bearer token."""

    user_id: int
    role: str


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise InvalidPasswordError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


class TokenIssuer:
    """Issue and validate HS256 tokens with ``userID``, ``role`` and ``exp`` claims."""

    def __init__(self, secret: str, ttl: datetime.timedelta = datetime.timedelta(hours=24)):
        self._secret = secret
        self._ttl = ttl

    def issue(self, user_id: int, role: str) -> str:
        payload: dict[str, Any] = {
            "userID": user_id,
            "role": role,
            "exp": utc_now() + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except jwt.PyJWTError as exc:
            raise TokenError("invalid authentication token") from exc

        user_id = payload.get("userID")
        if not isinstance(user_id, int):
            raise TokenError("token is missing the user id")
        role = payload.get("role")
        if not isinstance(role, str):
            raise TokenError("token is missing the user role")
        return TokenClaims(user_id=user_id, role=role)


__all__ = [
    "MAX_PASSWORD_BYTES",
    "TokenClaims",
    "TokenError",
    "TokenIssuer",
    "hash_password",
    "verify_password",
]

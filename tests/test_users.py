from __future__ import annotations

from datetime import timedelta

import pytest

from planner.errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidPasswordError,
    NotFoundError,
    RoleChangeError,
)
from planner.services.auth import TokenError, TokenIssuer, hash_password, verify_password
from planner.services.users import Role, UserRepository, UserService


@pytest.fixture
def user_service(database) -> UserService:
    return UserService(UserRepository(database))


@pytest.mark.anyio
async def test_register_and_login(user_service):
    user = await user_service.register("ada", "secret")

    assert user.role is Role.USER
    assert user.password_hash != "secret"
    assert (await user_service.login("ada", "secret")).id == user.id


@pytest.mark.anyio
async def test_login_failures_share_one_message(user_service):
    await user_service.register("ada", "secret")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await user_service.login("ada", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        await user_service.login("bob", "secret")

    assert str(wrong_password.value) == str(unknown_user.value)


@pytest.mark.anyio
async def test_duplicate_username_is_rejected(user_service):
    await user_service.register("ada", "secret")

    with pytest.raises(DuplicateUsernameError):
        await user_service.register("ada", "other")


@pytest.mark.anyio
async def test_update_user_checks_username_owner(user_service):
    ada = await user_service.register("ada", "secret")
    await user_service.register("bob", "secret")

    with pytest.raises(DuplicateUsernameError):
        await user_service.update_user(ada.id, username="bob")

    updated = await user_service.update_user(ada.id, username="ada2", password="new-secret")
    assert updated.username == "ada2"
    assert (await user_service.login("ada2", "new-secret")).id == ada.id


@pytest.mark.anyio
async def test_change_password_requires_current_password(user_service):
    ada = await user_service.register("ada", "secret")

    with pytest.raises(InvalidCredentialsError):
        await user_service.change_password(ada.id, "wrong", "next")

    await user_service.change_password(ada.id, "secret", "next")
    await user_service.login("ada", "next")


@pytest.mark.anyio
async def test_role_changes_reject_no_ops(user_service):
    ada = await user_service.register("ada", "secret")

    with pytest.raises(RoleChangeError):
        await user_service.demote_to_user(ada.id)

    promoted = await user_service.promote_to_admin(ada.id)
    assert promoted.role is Role.ADMIN

    with pytest.raises(RoleChangeError):
        await user_service.promote_to_admin(ada.id)


@pytest.mark.anyio
async def test_delete_user(user_service):
    ada = await user_service.register("ada", "secret")

    await user_service.delete_user(ada.id)

    with pytest.raises(NotFoundError):
        await user_service.get_user(ada.id)
    with pytest.raises(NotFoundError):
        await user_service.delete_user(ada.id)


@pytest.mark.anyio
async def test_ensure_admin_is_idempotent(user_service):
    first = await user_service.ensure_admin("root", "pw")
    second = await user_service.ensure_admin("root", "pw")

    assert first is not None and first.role is Role.ADMIN
    assert second is None
    assert len(await user_service.list_users()) == 1


def test_password_hash_roundtrip() -> None:
    hashed = hash_password("secret")

    assert verify_password("secret", hashed)
    assert not verify_password("other", hashed)
    assert not verify_password("secret", "not-a-bcrypt-hash")


def test_token_carries_user_and_role() -> None:
    issuer = TokenIssuer("test-secret")

    claims = issuer.decode(issuer.issue(12, "admin"))

    assert claims.user_id == 12
    assert claims.role == "admin"


def test_expired_or_foreign_tokens_are_rejected() -> None:
    expired = TokenIssuer("test-secret", ttl=timedelta(seconds=-5)).issue(1, "user")
    foreign = TokenIssuer("other-secret").issue(1, "user")
    issuer = TokenIssuer("test-secret")

    with pytest.raises(TokenError):
        issuer.decode(expired)
    with pytest.raises(TokenError):
        issuer.decode(foreign)
    with pytest.raises(TokenError):
        issuer.decode("not-a-token")


@pytest.mark.anyio
async def test_passwords_longer_than_bcrypt_limit_are_rejected(user_service):
    long_password = "x" * 73
    ada = await user_service.register("ada", "secret")

    with pytest.raises(InvalidPasswordError):
        await user_service.register("bob", long_password)
    with pytest.raises(InvalidPasswordError):
        await user_service.update_user(ada.id, password=long_password)
    with pytest.raises(InvalidPasswordError):
        await user_service.change_password(ada.id, "secret", long_password)

    assert [user.username for user in await user_service.list_users()] == ["ada"]
    await user_service.login("ada", "secret")


def test_password_limit_counts_utf8_bytes() -> None:
    assert verify_password("é" * 36, hash_password("é" * 36))

    with pytest.raises(InvalidPasswordError):
        hash_password("é" * 37)

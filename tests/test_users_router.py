from __future__ import annotations

from fastapi.testclient import TestClient

from planner.app import create_app
from planner.config import Settings


def make_client(tmp_path) -> TestClient:
    settings = Settings(
        database_path=tmp_path / "planner.db",
        admin_username="root",
        admin_password="root-pass",
    )
    return TestClient(create_app(settings))


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _register(client: TestClient, username: str) -> dict:
    response = client.post("/api/auth/register", json={"username": username, "password": "pw"})
    assert response.status_code == 201
    return response.json()


def _admin_token(client: TestClient) -> str:
    response = client.post("/api/auth/login", json={"username": "root", "password": "root-pass"})
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"
    return response.json()["token"]


def test_register_login_and_me(tmp_path) -> None:
    with make_client(tmp_path) as client:
        registered = _register(client, "ada")
        login = client.post("/api/auth/login", json={"username": "ada", "password": "pw"})
        me = client.get("/api/users/me", headers=_auth(login.json()["token"]))

    assert registered["user"]["role"] == "user"
    assert login.status_code == 200
    assert me.json()["username"] == "ada"


def test_register_rejects_role_and_duplicates(tmp_path) -> None:
    with make_client(tmp_path) as client:
        with_role = client.post(
            "/api/auth/register", json={"username": "eve", "password": "pw", "role": "admin"}
        )
        _register(client, "ada")
        duplicate = client.post("/api/auth/register", json={"username": "ada", "password": "x"})

    assert with_role.status_code == 422
    assert duplicate.status_code == 400


def test_bad_login_and_missing_token(tmp_path) -> None:
    with make_client(tmp_path) as client:
        bad_login = client.post("/api/auth/login", json={"username": "ada", "password": "pw"})
        no_token = client.get("/api/users/me")
        bad_token = client.get("/api/users/me", headers=_auth("garbage"))

    assert bad_login.status_code == 401
    assert no_token.status_code == 401
    assert bad_token.status_code == 401


def test_admin_only_routes(tmp_path) -> None:
    with make_client(tmp_path) as client:
        user_token = _register(client, "ada")["token"]
        admin_token = _admin_token(client)

        forbidden = client.get("/api/users", headers=_auth(user_token))
        listed = client.get("/api/users", headers=_auth(admin_token))

    assert forbidden.status_code == 403
    assert sorted(user["username"] for user in listed.json()) == ["ada", "root"]


def test_promote_and_demote(tmp_path) -> None:
    with make_client(tmp_path) as client:
        user = _register(client, "ada")["user"]
        admin_token = _admin_token(client)

        promoted = client.post(f"/api/users/{user['id']}/promote", headers=_auth(admin_token))
        again = client.post(f"/api/users/{user['id']}/promote", headers=_auth(admin_token))
        demoted = client.post(f"/api/users/{user['id']}/demote", headers=_auth(admin_token))

    assert promoted.json()["role"] == "admin"
    assert again.status_code == 400
    assert demoted.json()["role"] == "user"


def test_users_edit_themselves_but_not_roles(tmp_path) -> None:
    with make_client(tmp_path) as client:
        registered = _register(client, "ada")
        other = _register(client, "bob")["user"]
        token = registered["token"]
        user_id = registered["user"]["id"]

        renamed = client.put(
            f"/api/users/{user_id}", json={"username": "ada2"}, headers=_auth(token)
        )
        role_change = client.put(
            f"/api/users/{user_id}", json={"role": "admin"}, headers=_auth(token)
        )
        someone_else = client.put(
            f"/api/users/{other['id']}", json={"username": "x"}, headers=_auth(token)
        )

    assert renamed.json()["username"] == "ada2"
    assert role_change.status_code == 403
    assert someone_else.status_code == 403


def test_change_password(tmp_path) -> None:
    with make_client(tmp_path) as client:
        token = _register(client, "ada")["token"]

        wrong = client.put(
            "/api/users/password",
            json={"oldPassword": "nope", "newPassword": "next"},
            headers=_auth(token),
        )
        changed = client.put(
            "/api/users/password",
            json={"oldPassword": "pw", "newPassword": "next"},
            headers=_auth(token),
        )
        login = client.post("/api/auth/login", json={"username": "ada", "password": "next"})

    assert wrong.status_code == 400
    assert changed.status_code == 204
    assert login.status_code == 200


def test_admin_deletes_user(tmp_path) -> None:
    with make_client(tmp_path) as client:
        user = _register(client, "ada")["user"]
        admin_token = _admin_token(client)

        deleted = client.delete(f"/api/users/{user['id']}", headers=_auth(admin_token))
        missing = client.delete(f"/api/users/{user['id']}", headers=_auth(admin_token))

    assert deleted.status_code == 204
    assert missing.status_code == 404


def test_overlong_passwords_are_rejected(tmp_path) -> None:
    long_password = "x" * 100
    with make_client(tmp_path) as client:
        register = client.post(
            "/api/auth/register", json={"username": "eve", "password": long_password}
        )
        registered = _register(client, "ada")
        token = registered["token"]
        update = client.put(
            f"/api/users/{registered['user']['id']}",
            json={"password": long_password},
            headers=_auth(token),
        )
        change = client.put(
            "/api/users/password",
            json={"oldPassword": "pw", "newPassword": long_password},
            headers=_auth(token),
        )
        login = client.post("/api/auth/login", json={"username": "ada", "password": "pw"})

    assert register.status_code == 400
    assert "72 bytes" in register.json()["detail"]
    assert update.status_code == 400
    assert change.status_code == 400
    assert login.status_code == 200

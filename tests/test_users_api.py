"""
Pytest tests for the /users CRUD endpoints and /health.

All requests carry a valid bearer token unless a test is about auth.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest


def _create(client, auth_headers, **body):
    payload = {"username": "bob", "email": "BOB@X.com"}
    payload.update(body)
    return client.post("/users", json=payload, headers=auth_headers)


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "Healthy"}


def test_create_user(client, auth_headers, registry):
    r = _create(client, auth_headers, username="  bob ", fullName=" Bob Smith ")
    assert r.status_code == 201
    data = r.json()
    assert data["id"] == 1
    assert data["username"] == "bob"
    assert data["email"] == "bob@x.com"
    assert data["fullName"] == "Bob Smith"
    assert data["updatedAt"] is None
    assert data["createdAt"].startswith(str(datetime.now(timezone.utc).year))
    assert r.headers["location"] == "/users/1"
    assert registry.get(1).email == "bob@x.com"


def test_create_ids_increase(client, auth_headers):
    ids = [_create(client, auth_headers, username=f"u{i}").json()["id"] for i in range(3)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3


@pytest.mark.parametrize(
    "body, message",
    [
        ({"email": "bob@x.com"}, "Username and Email are required."),
        ({"username": "bob"}, "Username and Email are required."),
        ({"username": "   ", "email": "bob@x.com"}, "Username and Email are required."),
        ({"username": "bob", "email": "bob@x"}, "Invalid email format."),
    ],
)
def test_create_validation_errors(client, auth_headers, registry, body, message):
    r = client.post("/users", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"error": message}
    assert len(registry) == 0


def test_create_malformed_body_is_400(client, auth_headers, registry):
    headers = dict(auth_headers, **{"Content-Type": "application/json"})
    r = client.post("/users", content=b"{not json", headers=headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body."}
    assert len(registry) == 0


def test_list_users(client, auth_headers):
    assert client.get("/users", headers=auth_headers).json() == []
    _create(client, auth_headers, username="a", email="a@x.com")
    _create(client, auth_headers, username="b", email="b@x.com")
    r = client.get("/users", headers=auth_headers)
    assert r.status_code == 200
    assert sorted(u["username"] for u in r.json()) == ["a", "b"]


def test_get_user(client, auth_headers):
    created = _create(client, auth_headers).json()
    r = client.get(f"/users/{created['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == created


def test_get_missing_user_is_404(client, auth_headers):
    r = client.get("/users/42", headers=auth_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "User not found."}


def test_non_integer_id_is_404(client, auth_headers):
    r = client.get("/users/abc", headers=auth_headers)
    assert r.status_code == 404
    assert "error" in r.json()


def test_negative_id_is_user_not_found(client, auth_headers):
    """Negative ids match the id routes and fall through to the registry lookup."""
    for method in ("get", "delete"):
        r = getattr(client, method)("/users/-1", headers=auth_headers)
        assert r.status_code == 404
        assert r.json() == {"error": "User not found."}
    r = client.put("/users/-1", json={"username": "x", "email": "x@y.com"}, headers=auth_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "User not found."}


def test_update_user(client, auth_headers):
    created = _create(client, auth_headers, fullName="Bob").json()
    r = client.put(
        f"/users/{created['id']}",
        json={"username": "robert", "email": "Robert@X.com"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == created["id"]
    assert data["createdAt"] == created["createdAt"]
    assert data["updatedAt"] is not None
    assert data["username"] == "robert"
    assert data["email"] == "robert@x.com"
    assert data["fullName"] is None


def test_update_validation_checked_before_existence(client, auth_headers):
    r = client.put("/users/999", json={"username": "x", "email": "bad"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid email format."}


def test_update_missing_user_is_404(client, auth_headers, registry):
    created = _create(client, auth_headers).json()
    r = client.put("/users/999", json={"username": "x", "email": "x@y.com"}, headers=auth_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "User not found."}
    # Registry unchanged
    assert [u.username for u in registry.list_all()] == [created["username"]]


def test_update_conflict_is_500(client, auth_headers, registry, monkeypatch):
    from user_registry.core.exceptions import ConflictError

    created = _create(client, auth_headers).json()

    def lose_race(user_id, candidate):
        raise ConflictError("changed during update")

    monkeypatch.setattr(registry, "update", lose_race)
    r = client.put(
        f"/users/{created['id']}",
        json={"username": "x", "email": "x@y.com"},
        headers=auth_headers,
    )
    assert r.status_code == 500
    assert r.json() == {"error": "Update failed."}


def test_create_conflict_is_500(client, auth_headers, registry, monkeypatch):
    from user_registry.core.exceptions import ConflictError

    def collide(candidate):
        raise ConflictError("id taken")

    monkeypatch.setattr(registry, "create", collide)
    r = _create(client, auth_headers)
    assert r.status_code == 500
    assert r.json() == {"error": "Could not create user."}


def test_delete_user(client, auth_headers):
    created = _create(client, auth_headers).json()
    r = client.delete(f"/users/{created['id']}", headers=auth_headers)
    assert r.status_code == 204
    assert r.content == b""
    # Delete then get -> 404
    assert client.get(f"/users/{created['id']}", headers=auth_headers).status_code == 404
    assert client.delete(f"/users/{created['id']}", headers=auth_headers).status_code == 404


def test_deleted_id_not_reassigned(client, auth_headers):
    first = _create(client, auth_headers).json()
    client.delete(f"/users/{first['id']}", headers=auth_headers)
    second = _create(client, auth_headers).json()
    assert second["id"] > first["id"]


def test_method_not_allowed_is_json(client, auth_headers):
    r = client.patch("/users/1", json={}, headers=auth_headers)
    assert r.status_code == 405
    assert "error" in r.json()

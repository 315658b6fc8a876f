from app.core.security import get_password_hash
from app.db import dynamo


def test_register(anonymous_client, monkeypatch):
    saved = []
    monkeypatch.setattr(dynamo, "get_user_by_email", lambda email: None)
    monkeypatch.setattr(dynamo, "put_user", lambda item: saved.append(item) or True)

    response = anonymous_client.post(
        "/api/auth/register", json={"email": "ann@mail.com", "password": "secret1"}
    )

    assert response.status_code == 201
    assert response.json()["email"] == "ann@mail.com"
    assert saved[0]["password_hash"] != "secret1"


def test_register_duplicate(anonymous_client, monkeypatch):
    monkeypatch.setattr(dynamo, "get_user_by_email", lambda email: {"user_id": "u1", "email": email})

    response = anonymous_client.post(
        "/api/auth/register", json={"email": "ann@mail.com", "password": "secret1"}
    )

    assert response.status_code == 400


def test_register_short_password(anonymous_client):
    response = anonymous_client.post("/api/auth/register", json={"email": "ann@mail.com", "password": "abc"})

    assert response.status_code == 422
    assert "at least 6 characters" in response.text


def test_login_and_me(anonymous_client, monkeypatch):
    user = {
        "user_id": "u1",
        "email": "ann@mail.com",
        "password_hash": get_password_hash("secret1"),
        "created_at": "2025-11-01T00:00:00+00:00",
    }
    monkeypatch.setattr(dynamo, "get_user_by_email", lambda email: user if email == user["email"] else None)
    monkeypatch.setattr(dynamo, "get_user_by_id", lambda user_id: user if user_id == "u1" else None)

    response = anonymous_client.post("/api/auth/login", json={"email": "ann@mail.com", "password": "secret1"})
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["user"]["user_id"] == "u1"

    me = anonymous_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ann@mail.com"


def test_login_wrong_password(anonymous_client, monkeypatch):
    user = {"user_id": "u1", "email": "ann@mail.com", "password_hash": get_password_hash("secret1")}
    monkeypatch.setattr(dynamo, "get_user_by_email", lambda email: user)

    response = anonymous_client.post("/api/auth/login", json={"email": "ann@mail.com", "password": "wrong!"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_health(anonymous_client):
    response = anonymous_client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

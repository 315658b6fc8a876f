from app.db import dynamo
from app.models.category import DEFAULT_CATEGORIES
from app.models.transaction import TransactionType

USER_ID = "user-123"


def test_list_categories_by_type(client, monkeypatch):
    calls = []

    def get_categories_for_user(user_id, category_type=None):
        calls.append((user_id, category_type))
        return [{"user_id": user_id, "category_id": "c1", "name": "Salary", "type": "INCOME"}]

    monkeypatch.setattr(dynamo, "get_categories_for_user", get_categories_for_user)

    response = client.get("/api/categories/", params={"type": "INCOME"})

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Salary"
    assert calls[0][0] == USER_ID
    assert calls[0][1].value == "INCOME"


def test_create_category(client, monkeypatch):
    saved = []
    monkeypatch.setattr(dynamo, "put_category", lambda item: saved.append(item) or True)

    response = client.post("/api/categories/", json={"name": "  Coffee ", "icon": "local_cafe"})

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Coffee"
    assert body["type"] == "EXPENSE"
    assert saved[0]["user_id"] == USER_ID


def test_create_category_blank_name(client):
    response = client.post("/api/categories/", json={"name": "   "})

    assert response.status_code == 422
    assert "Category name cannot be empty" in response.text


def test_create_default_categories(client, monkeypatch):
    saved = []
    monkeypatch.setattr(dynamo, "get_categories_for_user", lambda user_id, category_type=None: [])
    monkeypatch.setattr(dynamo, "put_category", lambda item: saved.append(item) or True)

    response = client.post("/api/categories/defaults")

    assert response.status_code == 201
    assert len(response.json()) == len(DEFAULT_CATEGORIES)
    assert {TransactionType(item["type"]) for item in saved} == set(TransactionType)


def test_create_default_categories_when_some_exist(client, monkeypatch):
    monkeypatch.setattr(
        dynamo, "get_categories_for_user", lambda user_id, category_type=None: [{"category_id": "c1", "name": "Food"}]
    )

    response = client.post("/api/categories/defaults")

    assert response.status_code == 409


def test_update_category(client, monkeypatch):
    monkeypatch.setattr(
        dynamo,
        "update_category",
        lambda user_id, category_id, fields: {"category_id": category_id, "name": fields["name"], "type": "EXPENSE"},
    )

    response = client.put("/api/categories/c1", json={"name": "Groceries"})

    assert response.status_code == 200
    assert response.json()["name"] == "Groceries"


def test_update_missing_category(client, monkeypatch):
    monkeypatch.setattr(dynamo, "update_category", lambda user_id, category_id, fields: None)

    response = client.put("/api/categories/c9", json={"color": "#000000"})

    assert response.status_code == 404


def test_delete_category(client, monkeypatch):
    monkeypatch.setattr(dynamo, "delete_category", lambda user_id, category_id: False)

    response = client.delete("/api/categories/c9")

    assert response.status_code == 404
    assert response.json()["detail"] == "Category not found"

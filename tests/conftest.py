import pytest
from fastapi.testclient import TestClient

from app.core.security import get_current_user_id
from app.main import app

USER_ID = "user-123"


@pytest.fixture
def client():
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    return TestClient(app)

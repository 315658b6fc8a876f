from datetime import timedelta

import pytest
from fastapi import HTTPException

from app.core.security import (
    create_access_token,
    decode_access_token,
    get_current_user_id,
    get_password_hash,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)
    assert not verify_password("secret1", "not-a-bcrypt-hash")


def test_token_carries_subject():
    token = create_access_token({"sub": "user-1"})
    assert decode_access_token(token)["sub"] == "user-1"
    assert get_current_user_id(f"Bearer {token}") == "user-1"


def test_expired_token_rejected():
    token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401


def test_missing_bearer_prefix_rejected():
    with pytest.raises(HTTPException) as exc:
        get_current_user_id("Token abc")
    assert exc.value.detail == "Token required"


def test_token_without_subject_rejected():
    token = create_access_token({"role": "x"})
    with pytest.raises(HTTPException) as exc:
        get_current_user_id(f"Bearer {token}")
    assert exc.value.detail == "Invalid token"

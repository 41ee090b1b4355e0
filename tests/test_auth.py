"""인증 유틸 테스트"""
from datetime import timedelta

import pytest
from fastapi import HTTPException

from utils.auth import (
    DUMMY_HASH,
    create_access_token,
    create_user_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPassword:
    def test_hash_and_verify(self):
        hashed = hash_password("password1")

        assert hashed != "password1"
        assert verify_password("password1", hashed)
        assert not verify_password("password2", hashed)

    def test_invalid_hash_format(self):
        assert verify_password("password1", "not-a-bcrypt-hash") is False

    def test_dummy_hash_never_matches_user_password(self):
        assert not verify_password("password1", DUMMY_HASH)


class TestToken:
    def test_user_token_claims(self):
        payload = decode_access_token(create_user_token("u1", is_admin=True))

        assert payload["sub"] == "u1"
        assert payload["is_admin"] is True
        assert "exp" in payload

    def test_expired_token(self):
        token = create_access_token({"sub": "u1"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "token is expired"

    def test_invalid_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token("invalid_token")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "invalid token"

    def test_token_without_subject_rejected(self, client):
        token = create_access_token({"is_admin": True})

        response = client.get("/users", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

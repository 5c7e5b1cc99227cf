from __future__ import annotations

import jwt
import pytest

from catalog_api.core import config as core_config
from catalog_api.core.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    password_needs_rehash,
    verify_password,
)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
    core_config.get_settings.cache_clear()
    yield
    core_config.get_settings.cache_clear()


def test_hash_and_verify_password():
    stored = hash_password("s3cret-pass")
    assert stored.startswith("argon2$")
    assert verify_password("s3cret-pass", stored) is True
    assert verify_password("wrong", stored) is False
    assert password_needs_rehash(stored) is False


def test_verify_password_rejects_unknown_schemes():
    assert verify_password("anything", None) is False
    assert verify_password("anything", "plaintext") is False
    assert verify_password("anything", "argon2$not-a-hash") is False
    assert password_needs_rehash("plaintext") is True


def test_access_token_round_trip():
    token = create_access_token("user-1")
    claims = decode_access_token(token)
    assert claims["sub"] == "user-1"
    assert claims["type"] == "access"


def test_expired_token_is_rejected():
    token = create_access_token("user-1", expires_in=-10)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected():
    forged = jwt.encode({"sub": "user-1", "type": "access", "exp": 9999999999}, "other-secret-of-a-reasonable-length", algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        decode_access_token(forged)


def test_token_with_wrong_type_is_rejected():
    settings = core_config.get_settings()
    token = jwt.encode({"sub": "user-1", "type": "refresh", "exp": 9999999999}, settings.jwt_secret, algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)

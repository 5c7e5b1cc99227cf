"""Security helpers (password hashing and bearer tokens)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher, exceptions as argon_exc

from .config import get_settings

_ph = PasswordHasher()
_PREFIX = "argon2$"
ACCESS_TOKEN_TYPE = "access"


class InvalidTokenError(Exception):
    """Raised when a bearer token is malformed, tampered with or expired."""


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for scheme detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return False
    try:
        return _ph.verify(stored[len(_PREFIX) :], password or "")
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def password_needs_rehash(stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return True
    return _ph.check_needs_rehash(stored[len(_PREFIX) :])


def create_access_token(subject: str, expires_in: int | None = None) -> str:
    settings = get_settings()
    ttl = expires_in if expires_in is not None else settings.jwt_ttl_seconds
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(subject),
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Verify signature, expiry and token type; return the claims."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError("unexpected token type")
    return payload

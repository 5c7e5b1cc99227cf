"""Bearer-token helpers (issue tokens, resolve the caller)."""
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog_api.core.security import InvalidTokenError, create_access_token, decode_access_token
from catalog_api.db.models import User
from catalog_api.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
_repo = SQLRepository()

_AUTH_HEADERS = {"WWW-Authenticate": "Bearer"}


def issue_access_token(user_id: str) -> str:
    """Create a signed access token for the given user id."""
    return create_access_token(user_id)


def current_user_id(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> str:
    """Return the user id carried by the Authorization bearer token."""
    if credentials is None or (credentials.scheme or "").lower() != "bearer" or not credentials.credentials:
        raise HTTPException(401, "No token provided", headers=_AUTH_HEADERS)
    try:
        payload = decode_access_token(credentials.credentials)
    except InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise HTTPException(401, "Invalid token", headers=_AUTH_HEADERS)
    return str(payload["sub"])


def current_user(user_id: str = Depends(current_user_id)) -> User:
    """Resolve the caller's account; a token for a removed account is rejected."""
    user = _repo.get_user(user_id)
    if not user:
        raise HTTPException(401, "Invalid token", headers=_AUTH_HEADERS)
    return user

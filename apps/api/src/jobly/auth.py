"""Bearer-token checks for the jobs routes.

Tokens are issued elsewhere; this module only verifies them. The payload
carries ``username`` and ``isAdmin``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from jobly.config import get_settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    username: str
    is_admin: bool = False


def decode_token(token: str) -> CurrentUser | None:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.info("rejected bearer token: %s", exc)
        return None

    username = payload.get("username")
    if not isinstance(username, str) or not username:
        return None
    return CurrentUser(username=username, is_admin=payload.get("isAdmin") is True)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> CurrentUser | None:
    if credentials is None:
        return None
    return decode_token(credentials.credentials)


def require_admin(
    user: Annotated[CurrentUser | None, Depends(get_current_user)],
) -> CurrentUser:
    if user is None or not user.is_admin:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Identity resolved from an auth-service access token."""

    id: str
    email: str | None = None


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def create_access_token(
    subject: str,
    *,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode: dict[str, Any] = {"exp": expire, "sub": str(subject)}
    if email:
        to_encode["email"] = email
    if settings.AUTH_JWT_AUDIENCE:
        to_encode["aud"] = settings.AUTH_JWT_AUDIENCE
    return jwt.encode(to_encode, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def verify_access_token(token: str) -> AuthUser:
    """
    Decode and validate an access token.
    Raises `jwt.InvalidTokenError` (or a subclass) when the token cannot be trusted.
    """
    options: dict[str, Any] = {"require": ["exp", "sub"]}
    if not settings.AUTH_JWT_AUDIENCE:
        options["verify_aud"] = False
    payload = jwt.decode(
        token,
        settings.AUTH_JWT_SECRET,
        algorithms=[settings.AUTH_JWT_ALGORITHM],
        audience=settings.AUTH_JWT_AUDIENCE or None,
        options=options,
    )
    subject = payload.get("sub")
    if not subject:
        raise jwt.InvalidTokenError("Token has no subject")
    return AuthUser(id=str(subject), email=payload.get("email"))

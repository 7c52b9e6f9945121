"""Password hashing for staff accounts and the bearer tokens issued at login."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from school_admin.config.settings import settings

_SALT_BYTES = 16
_ITERATIONS = 120_000


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _ITERATIONS)


def _signing_key() -> str:
    return settings.security.jwt_secret_key.get_secret_value()


def hash_password(password: str) -> str:
    """Encode ``salt + PBKDF2 digest`` as base64 for the ``users.password`` column."""

    salt = os.urandom(_SALT_BYTES)
    return base64.b64encode(salt + _derive(password, salt)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        decoded = base64.b64decode(hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False

    salt, stored = decoded[:_SALT_BYTES], decoded[_SALT_BYTES:]
    return hmac.compare_digest(_derive(password, salt), stored)


class AuthenticationError(Exception):
    """The bearer token is expired, tampered with or not a login token."""


class TokenPayload(BaseModel):
    """Claims carried by a login token; ``sub`` is the user id as a string."""

    sub: str
    exp: datetime
    user: dict[str, Any] | None = None
    iat: datetime | None = None


def create_access_token(
    subject: str,
    name: str | None = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a login token for user ``subject``.

    The lifetime defaults to ``JWT_EXPIRATION_MINUTES``. A ``name`` is
    copied into the ``user`` claim for clients that decode the token.
    """

    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(
        minutes=settings.security.access_token_expires_minutes
    )
    claims: dict[str, Any] = {"sub": subject, "iat": issued, "exp": issued + lifetime}
    if name is not None:
        claims["user"] = {"id": subject, "name": name}
    return jwt.encode(claims, _signing_key(), algorithm=settings.security.jwt_algorithm)


def decode_access_token(token: str) -> TokenPayload:
    try:
        claims = jwt.decode(
            token, _signing_key(), algorithms=[settings.security.jwt_algorithm]
        )
        return TokenPayload.model_validate(claims)
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc


__all__ = [
    "AuthenticationError",
    "TokenPayload",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]

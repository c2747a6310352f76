"""Password hashing and bearer token helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from capaz.config import get_config
from capaz.core.errors import AuthenticationError


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash (salt included) as text."""
    if rounds is None:
        rounds = get_config().auth.bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    user_id: str,
    email: str,
    organization_id: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    auth = get_config().auth
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=auth.token_expire_days))
    payload = {
        "sub": user_id,
        "userId": user_id,
        "email": email,
        "organizationId": organization_id,
        "role": role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, auth.secret_key, algorithm=auth.algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a bearer token.

    Raises:
        AuthenticationError: Expired, tampered or malformed token
    """
    auth = get_config().auth
    try:
        payload = jwt.decode(token, auth.secret_key, algorithms=[auth.algorithm])
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError() from exc

    if not payload.get("userId"):
        raise AuthenticationError()
    return payload

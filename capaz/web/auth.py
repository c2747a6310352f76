"""Bearer token authentication for the Capaz API.

Every protected route depends on ``get_current_identity``. The token only
names the user; role and organization are re-read from the database so a
deactivated or re-scoped user takes effect immediately.
"""

from __future__ import annotations

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import Identity, require_role
from capaz.core.errors import AuthenticationError
from capaz.core.security import create_access_token, decode_access_token
from capaz.db.connection import get_db
from capaz.db.models import UserModel
from capaz.models import Role
from capaz.users.service import get_active_user

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def issue_token(user: UserModel) -> str:
    return create_access_token(
        user_id=user.id,
        email=user.email,
        organization_id=user.organization_id,
        role=user.role,
    )


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """Resolve the caller, failing with the same 401 whatever went wrong."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError()

    payload = decode_access_token(credentials.credentials)

    user = await get_active_user(db, payload["userId"])
    if user is None:
        logger.info(f"Rejected token for missing or inactive user {payload['userId']}")
        raise AuthenticationError()

    return Identity(
        user_id=user.id,
        organization_id=user.organization_id,
        role=Role(user.role),
        email=user.email,
    )


def require_roles(*roles: Role):
    """Dependency factory: authenticated identity holding one of ``roles``."""

    async def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        require_role(identity, roles)
        return identity

    return dependency

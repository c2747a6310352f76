"""Access control policy.

Two rules cover every endpoint:

- ``authorize``: platform admins see every organization, everyone else only their own.
- ``authorize_role``: plain membership test against an allowed role set.

Cross-tenant lookups fail as not-found so other organizations' ids can't be probed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from capaz.core.errors import AuthorizationError, NotFoundError
from capaz.models import Role

TEAM_VIEW_ROLES = (Role.PLATFORM_ADMIN, Role.ORG_ADMIN, Role.MANAGER)
CATALOG_EDIT_ROLES = (Role.PLATFORM_ADMIN, Role.ORG_ADMIN, Role.MANAGER)
CATALOG_DELETE_ROLES = (Role.PLATFORM_ADMIN, Role.ORG_ADMIN)
USER_ADMIN_ROLES = (Role.PLATFORM_ADMIN, Role.ORG_ADMIN)


@dataclass(frozen=True, slots=True)
class Identity:
    """Verified caller identity, built by the auth dependency."""

    user_id: str
    organization_id: str
    role: Role
    email: str = ""

    @property
    def is_platform_admin(self) -> bool:
        return self.role == Role.PLATFORM_ADMIN


def authorize(actor_role: Role | str, actor_org_id: str, target_org_id: str | None) -> bool:
    """Return True if the actor may touch data of ``target_org_id``."""
    if Role(actor_role) == Role.PLATFORM_ADMIN:
        return True
    return target_org_id is not None and target_org_id == actor_org_id


def authorize_role(actor_role: Role | str, required_roles: Iterable[Role | str]) -> bool:
    return Role(actor_role) in {Role(r) for r in required_roles}


def require_role(identity: Identity, roles: Iterable[Role | str]) -> None:
    """Raise AuthorizationError unless the identity holds one of ``roles``."""
    if not authorize_role(identity.role, roles):
        raise AuthorizationError("Insufficient permissions")


def require_org_scope(
    identity: Identity, target_org_id: str | None, resource: str = "Resource"
) -> None:
    """Raise NotFoundError if the target organization is out of the caller's scope."""
    if not authorize(identity.role, identity.organization_id, target_org_id):
        raise NotFoundError(f"{resource} not found")

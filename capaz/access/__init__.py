"""Access control policy."""

from capaz.access.policy import Identity, authorize, authorize_role, require_org_scope, require_role

__all__ = ["Identity", "authorize", "authorize_role", "require_org_scope", "require_role"]

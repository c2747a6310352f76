"""Unit tests for the access policy."""

from __future__ import annotations

import pytest

from capaz.access.policy import (
    CATALOG_DELETE_ROLES,
    CATALOG_EDIT_ROLES,
    TEAM_VIEW_ROLES,
    Identity,
    authorize,
    authorize_role,
    require_org_scope,
    require_role,
)
from capaz.core.errors import AuthorizationError, NotFoundError
from capaz.models import Role


class TestAuthorize:
    def test_platform_admin_reaches_every_organization(self):
        assert authorize(Role.PLATFORM_ADMIN, "org-a", "org-b")
        assert authorize("PLATFORM_ADMIN", "org-a", "org-a")

    @pytest.mark.parametrize("role", [Role.USER, Role.MANAGER, Role.ORG_ADMIN])
    def test_others_only_reach_their_own(self, role):
        assert authorize(role, "org-a", "org-a")
        assert not authorize(role, "org-a", "org-b")

    def test_unowned_target_is_denied(self):
        assert not authorize(Role.ORG_ADMIN, "org-a", None)


class TestAuthorizeRole:
    def test_membership(self):
        assert authorize_role(Role.MANAGER, TEAM_VIEW_ROLES)
        assert not authorize_role(Role.USER, TEAM_VIEW_ROLES)
        assert authorize_role("ORG_ADMIN", ["ORG_ADMIN"])

    def test_manager_edits_but_does_not_delete(self):
        assert authorize_role(Role.MANAGER, CATALOG_EDIT_ROLES)
        assert not authorize_role(Role.MANAGER, CATALOG_DELETE_ROLES)

    def test_role_rank_orders_privilege(self):
        assert Role.USER.rank < Role.MANAGER.rank < Role.ORG_ADMIN.rank < Role.PLATFORM_ADMIN.rank


class TestRequire:
    def test_require_role_raises_forbidden(self):
        identity = Identity(user_id="u", organization_id="org-a", role=Role.USER)

        with pytest.raises(AuthorizationError):
            require_role(identity, TEAM_VIEW_ROLES)

    def test_require_org_scope_hides_foreign_data(self):
        identity = Identity(user_id="u", organization_id="org-a", role=Role.ORG_ADMIN)

        require_org_scope(identity, "org-a")
        with pytest.raises(NotFoundError) as exc_info:
            require_org_scope(identity, "org-b", "User")

        assert exc_info.value.message == "User not found"

    def test_identity_flags_platform_admin(self):
        assert Identity("u", "o", Role.PLATFORM_ADMIN).is_platform_admin
        assert not Identity("u", "o", Role.ORG_ADMIN).is_platform_admin

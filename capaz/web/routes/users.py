"""User directory and profile routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import TEAM_VIEW_ROLES, USER_ADMIN_ROLES, Identity
from capaz.db.connection import get_db
from capaz.models import ManagerAssignment, ProfileUpdate
from capaz.users import service as users
from capaz.users.models import PersonRef, UserOut
from capaz.web.auth import get_current_identity, require_roles

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=users.MAX_PAGE_SIZE),
    search: str | None = None,
    department: str | None = None,
    identity: Identity = Depends(require_roles(*TEAM_VIEW_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    rows, pagination = await users.list_users(
        db, identity.organization_id, page=page, limit=limit, search=search, department=department
    )
    return {"users": [UserOut.model_validate(u) for u in rows], "pagination": pagination}


@router.get("/departments")
async def list_departments(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return {"departments": await users.list_departments(db, identity.organization_id)}


@router.patch("/me")
async def update_me(
    data: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    user = await users.update_profile(db, identity.user_id, data)
    return {"user": UserOut.model_validate(user)}


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    return {"user": await users.get_profile(db, identity, user_id)}


@router.put("/{user_id}/manager")
async def set_manager(
    user_id: str,
    data: ManagerAssignment,
    identity: Identity = Depends(require_roles(*USER_ADMIN_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Assign (or clear, with ``managerId: null``) a user's manager."""
    user = await users.assign_manager(db, identity, user_id, data.manager_id)
    return {"user": UserOut.model_validate(user), "manager": await _manager_ref(db, user.manager_id)}


async def _manager_ref(db: AsyncSession, manager_id: str | None) -> PersonRef | None:
    if manager_id is None:
        return None
    manager = await users.get_active_user(db, manager_id)
    return PersonRef.model_validate(manager) if manager else None

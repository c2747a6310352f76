"""Skill catalog routes.

Reads are open to every authenticated user; writes go through the catalog
repository, which applies the role and organization checks.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import CATALOG_DELETE_ROLES, CATALOG_EDIT_ROLES, Identity
from capaz.catalog import repository as catalog
from capaz.catalog.models import CategoryOut, SkillOut
from capaz.db.connection import get_db
from capaz.models import CategoryCreate, CategoryUpdate, SkillCreate, SkillUpdate
from capaz.web.auth import get_current_identity, require_roles

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("/categories")
async def list_categories(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    categories = await catalog.list_catalog(db, identity.organization_id)
    return {"categories": categories}


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    identity: Identity = Depends(require_roles(*CATALOG_EDIT_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    category = await catalog.create_category(db, identity, data)
    return {"category": CategoryOut.model_validate(category)}


@router.patch("/categories/{category_id}")
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    identity: Identity = Depends(require_roles(*CATALOG_EDIT_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    category = await catalog.update_category(db, identity, category_id, data)
    return {"category": CategoryOut.model_validate(category)}


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: str,
    identity: Identity = Depends(require_roles(*CATALOG_DELETE_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    await catalog.deactivate_category(db, identity, category_id)
    return {"success": True}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_skill(
    data: SkillCreate,
    identity: Identity = Depends(require_roles(*CATALOG_EDIT_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    skill = await catalog.create_skill(db, identity, data)
    return {"skill": SkillOut.model_validate(skill)}


@router.patch("/{skill_id}")
async def update_skill(
    skill_id: str,
    data: SkillUpdate,
    identity: Identity = Depends(require_roles(*CATALOG_EDIT_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    skill = await catalog.update_skill(db, identity, skill_id, data)
    return {"skill": SkillOut.model_validate(skill)}


@router.delete("/{skill_id}")
async def delete_skill(
    skill_id: str,
    identity: Identity = Depends(require_roles(*CATALOG_DELETE_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    await catalog.deactivate_skill(db, identity, skill_id)
    return {"success": True}

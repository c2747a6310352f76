"""Skill catalog queries and mutations.

Organizations see their own categories plus shared templates. Mutation is
limited to the caller's own private categories; templates are read-only here
and only change through ``seed_templates``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import CATALOG_DELETE_ROLES, CATALOG_EDIT_ROLES, Identity, require_role
from capaz.catalog.models import CatalogCategory, CategoryOut, ChildCategoryOut, SkillOut
from capaz.catalog.templates import MSP_TEMPLATE_CATALOG, TEMPLATE_TYPE_MSP, seed_id
from capaz.core.errors import NotFoundError, ValidationError
from capaz.db.models import SkillCategoryModel, SkillModel
from capaz.models import CategoryCreate, CategoryUpdate, SkillCreate, SkillUpdate

logger = structlog.get_logger(__name__)


def _visible_to(organization_id: str):
    return or_(
        SkillCategoryModel.organization_id == organization_id,
        SkillCategoryModel.is_template.is_(True),
    )


async def list_catalog(session: AsyncSession, organization_id: str) -> list[CatalogCategory]:
    """Return every active category owned by the organization or shared as a template.

    Each category carries its active skills (by sort order) and its active
    direct child categories.
    """
    stmt = (
        select(SkillCategoryModel)
        .where(_visible_to(organization_id), SkillCategoryModel.is_active.is_(True))
        .order_by(SkillCategoryModel.sort_order.asc(), SkillCategoryModel.name.asc())
    )
    categories = (await session.execute(stmt)).scalars().all()
    if not categories:
        return []

    category_ids = [c.id for c in categories]
    skill_stmt = (
        select(SkillModel)
        .where(SkillModel.category_id.in_(category_ids), SkillModel.is_active.is_(True))
        .order_by(SkillModel.sort_order.asc(), SkillModel.name.asc())
    )
    skills_by_category: dict[str, list[SkillOut]] = defaultdict(list)
    for skill in (await session.execute(skill_stmt)).scalars():
        skills_by_category[skill.category_id].append(SkillOut.model_validate(skill))

    children: dict[str, list[ChildCategoryOut]] = defaultdict(list)
    for category in categories:
        if category.parent_category_id:
            children[category.parent_category_id].append(ChildCategoryOut.model_validate(category))

    return [
        CatalogCategory(
            **CategoryOut.model_validate(category).model_dump(),
            skills=skills_by_category.get(category.id, []),
            child_categories=children.get(category.id, []),
        )
        for category in categories
    ]


async def list_visible_skills(session: AsyncSession, organization_id: str) -> list[SkillModel]:
    """Active skills in active categories visible to the organization."""
    stmt = (
        select(SkillModel)
        .join(SkillCategoryModel, SkillCategoryModel.id == SkillModel.category_id)
        .where(
            _visible_to(organization_id),
            SkillCategoryModel.is_active.is_(True),
            SkillModel.is_active.is_(True),
        )
        .order_by(SkillCategoryModel.sort_order.asc(), SkillModel.sort_order.asc(), SkillModel.name.asc())
    )
    return list((await session.execute(stmt)).scalars().all())


async def visible_skill_ids(session: AsyncSession, organization_id: str, skill_ids: Iterable[str]) -> set[str]:
    """Subset of ``skill_ids`` the organization may rate (active, in an active visible category)."""
    skill_ids = list(skill_ids)
    if not skill_ids:
        return set()
    stmt = (
        select(SkillModel.id)
        .join(SkillCategoryModel, SkillCategoryModel.id == SkillModel.category_id)
        .where(
            SkillModel.id.in_(skill_ids),
            _visible_to(organization_id),
            SkillCategoryModel.is_active.is_(True),
            SkillModel.is_active.is_(True),
        )
    )
    return set((await session.execute(stmt)).scalars().all())


# Columns that never accept NULL through a partial update
_NOT_NULL_FIELDS = frozenset(
    {"name", "category_id", "sort_order", "is_certifiable", "level_descriptions", "certification_names"}
)


def _apply(row, changes: dict) -> None:
    for field, value in changes.items():
        if value is None and field in _NOT_NULL_FIELDS:
            continue
        setattr(row, field, value)


async def _get_own_category(
    session: AsyncSession, organization_id: str, category_id: str
) -> SkillCategoryModel:
    stmt = select(SkillCategoryModel).where(
        SkillCategoryModel.id == category_id,
        SkillCategoryModel.organization_id == organization_id,
        SkillCategoryModel.is_template.is_(False),
    )
    category = (await session.execute(stmt)).scalar_one_or_none()
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def _check_parent(
    session: AsyncSession, organization_id: str, parent_id: str, category_id: str | None = None
) -> None:
    if parent_id == category_id:
        raise ValidationError.for_field("parentCategoryId", "A category cannot be its own parent")

    stmt = select(SkillCategoryModel).where(
        SkillCategoryModel.id == parent_id,
        SkillCategoryModel.is_active.is_(True),
        _visible_to(organization_id),
    )
    parent = (await session.execute(stmt)).scalar_one_or_none()
    if parent is None:
        raise ValidationError.for_field("parentCategoryId", "Invalid parent category")

    # One level of nesting: parents are top-level, children have no children
    if parent.parent_category_id is not None:
        raise ValidationError.for_field("parentCategoryId", "Parent category is itself a subcategory")
    if category_id is not None:
        child_stmt = select(SkillCategoryModel.id).where(SkillCategoryModel.parent_category_id == category_id).limit(1)
        if (await session.execute(child_stmt)).scalar_one_or_none() is not None:
            raise ValidationError.for_field("parentCategoryId", "A category with subcategories cannot be nested")


async def _check_skill_category(session: AsyncSession, organization_id: str, category_id: str) -> None:
    stmt = select(SkillCategoryModel.id).where(
        SkillCategoryModel.id == category_id,
        _visible_to(organization_id),
    )
    if (await session.execute(stmt)).scalar_one_or_none() is None:
        raise ValidationError("Invalid category", errors=[{"path": "categoryId", "message": "Invalid category"}])


async def create_category(
    session: AsyncSession, identity: Identity, data: CategoryCreate
) -> SkillCategoryModel:
    require_role(identity, CATALOG_EDIT_ROLES)
    if data.parent_category_id:
        await _check_parent(session, identity.organization_id, data.parent_category_id)

    category = SkillCategoryModel(
        organization_id=identity.organization_id,
        is_template=False,
        name=data.name,
        description=data.description,
        icon=data.icon,
        parent_category_id=data.parent_category_id,
        sort_order=data.sort_order,
    )
    session.add(category)
    await session.commit()
    await session.refresh(category)

    logger.info(
        "category_created",
        category_id=category.id,
        organization_id=identity.organization_id,
        actor=identity.user_id,
    )
    return category


async def update_category(
    session: AsyncSession, identity: Identity, category_id: str, data: CategoryUpdate
) -> SkillCategoryModel:
    require_role(identity, CATALOG_EDIT_ROLES)
    category = await _get_own_category(session, identity.organization_id, category_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("parent_category_id"):
        await _check_parent(session, identity.organization_id, changes["parent_category_id"], category.id)

    _apply(category, changes)
    await session.commit()
    await session.refresh(category)

    logger.info("category_updated", category_id=category.id, fields=sorted(changes))
    return category


async def deactivate_category(session: AsyncSession, identity: Identity, category_id: str) -> None:
    """Soft delete. Skills and historical responses stay resolvable."""
    require_role(identity, CATALOG_DELETE_ROLES)
    category = await _get_own_category(session, identity.organization_id, category_id)

    category.is_active = False
    await session.commit()
    logger.info("category_deactivated", category_id=category_id, actor=identity.user_id)


async def create_skill(session: AsyncSession, identity: Identity, data: SkillCreate) -> SkillModel:
    require_role(identity, CATALOG_EDIT_ROLES)
    await _check_skill_category(session, identity.organization_id, data.category_id)

    skill = SkillModel(**data.model_dump())
    session.add(skill)
    await session.commit()
    await session.refresh(skill)

    logger.info("skill_created", skill_id=skill.id, category_id=skill.category_id)
    return skill


async def _get_own_skill(session: AsyncSession, organization_id: str, skill_id: str) -> SkillModel:
    stmt = (
        select(SkillModel)
        .join(SkillCategoryModel, SkillCategoryModel.id == SkillModel.category_id)
        .where(
            SkillModel.id == skill_id,
            SkillCategoryModel.organization_id == organization_id,
        )
    )
    skill = (await session.execute(stmt)).scalar_one_or_none()
    if skill is None:
        raise NotFoundError("Skill not found")
    return skill


async def update_skill(
    session: AsyncSession, identity: Identity, skill_id: str, data: SkillUpdate
) -> SkillModel:
    require_role(identity, CATALOG_EDIT_ROLES)
    skill = await _get_own_skill(session, identity.organization_id, skill_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("category_id") and changes["category_id"] != skill.category_id:
        await _check_skill_category(session, identity.organization_id, changes["category_id"])

    _apply(skill, changes)
    await session.commit()
    await session.refresh(skill)

    logger.info("skill_updated", skill_id=skill.id, fields=sorted(changes))
    return skill


async def deactivate_skill(session: AsyncSession, identity: Identity, skill_id: str) -> None:
    """Soft delete. Past assessment responses keep pointing at the skill."""
    require_role(identity, CATALOG_DELETE_ROLES)
    skill = await _get_own_skill(session, identity.organization_id, skill_id)

    skill.is_active = False
    await session.commit()
    logger.info("skill_deactivated", skill_id=skill_id, actor=identity.user_id)


async def seed_templates(session: AsyncSession) -> tuple[int, int]:
    """Insert or refresh the shared MSP template catalog.

    Returns:
        (categories, skills) written
    """
    total_categories = 0
    total_skills = 0
    used_skill_ids: set[str] = set()

    for position, entry in enumerate(MSP_TEMPLATE_CATALOG):
        category_id = seed_id(entry["name"])
        category = await session.get(SkillCategoryModel, category_id)
        if category is None:
            category = SkillCategoryModel(
                id=category_id,
                organization_id=None,
                is_template=True,
                template_type=TEMPLATE_TYPE_MSP,
            )
            session.add(category)
        category.name = entry["name"]
        category.description = entry["description"]
        category.sort_order = position
        total_categories += 1

        for skill_position, (name, description) in enumerate(entry["skills"]):
            skill_id = seed_id(name)
            # Same skill name under two categories
            if skill_id in used_skill_ids:
                skill_id = seed_id(f"{entry['name']} {name}")
            used_skill_ids.add(skill_id)

            skill = await session.get(SkillModel, skill_id)
            if skill is None:
                skill = SkillModel(id=skill_id)
                session.add(skill)
            skill.name = name
            skill.description = description
            skill.category_id = category_id
            skill.sort_order = skill_position
            total_skills += 1

    await session.commit()
    logger.info("templates_seeded", categories=total_categories, skills=total_skills)
    return total_categories, total_skills

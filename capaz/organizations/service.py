"""Organization hierarchy: platform owner -> MSP reseller -> end client."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.core.errors import NotFoundError, ValidationError
from capaz.db.models import OrganizationModel
from capaz.models import OrganizationType

logger = structlog.get_logger(__name__)

# Required parent type for each organization type; None means "must be root"
_PARENT_TYPE = {
    OrganizationType.PLATFORM_OWNER: None,
    OrganizationType.MSP_RESELLER: OrganizationType.PLATFORM_OWNER,
    OrganizationType.END_CLIENT: OrganizationType.MSP_RESELLER,
}


async def get_organization(session: AsyncSession, organization_id: str) -> OrganizationModel:
    organization = await session.get(OrganizationModel, organization_id)
    if organization is None:
        raise NotFoundError("Organization not found")
    return organization


async def get_organization_by_slug(session: AsyncSession, slug: str) -> OrganizationModel | None:
    stmt = select(OrganizationModel).where(OrganizationModel.slug == slug)
    return (await session.execute(stmt)).scalar_one_or_none()


async def _check_parent(
    session: AsyncSession, org_type: OrganizationType, parent_org_id: str | None
) -> None:
    expected = _PARENT_TYPE[org_type]

    if parent_org_id is None:
        if org_type == OrganizationType.END_CLIENT:
            raise ValidationError.for_field("parentOrgId", "An end client must have an MSP parent")
        return

    if expected is None:
        raise ValidationError.for_field("parentOrgId", "A platform owner cannot have a parent")

    parent = await session.get(OrganizationModel, parent_org_id)
    if parent is None or not parent.is_active:
        raise ValidationError.for_field("parentOrgId", "Parent organization not found or inactive")
    if parent.type != expected.value:
        raise ValidationError.for_field(
            "parentOrgId", f"Parent of {org_type.value} must be {expected.value}"
        )


async def create_organization(
    session: AsyncSession,
    name: str,
    slug: str,
    org_type: OrganizationType | str,
    parent_org_id: str | None = None,
    description: str | None = None,
) -> OrganizationModel:
    """Create an organization, enforcing the hierarchy rules.

    - PLATFORM_OWNER has no parent
    - MSP_RESELLER may hang under the platform owner
    - END_CLIENT must hang under an MSP_RESELLER

    Raises:
        ValidationError: Bad type, duplicate slug or invalid parent
    """
    try:
        org_type = OrganizationType(org_type)
    except ValueError as exc:
        raise ValidationError.for_field("type", f"Unknown organization type: {org_type}") from exc

    slug = slug.strip().lower()
    if not slug:
        raise ValidationError.for_field("slug", "Slug is required")
    if await get_organization_by_slug(session, slug) is not None:
        raise ValidationError.for_field("slug", "Slug already in use")

    await _check_parent(session, org_type, parent_org_id)

    organization = OrganizationModel(
        name=name,
        slug=slug,
        type=org_type.value,
        parent_org_id=parent_org_id,
        description=description,
    )
    session.add(organization)
    await session.commit()
    await session.refresh(organization)

    logger.info("organization_created", organization_id=organization.id, slug=slug, type=org_type.value)
    return organization

"""User registration, login and directory operations."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from capaz.access.policy import USER_ADMIN_ROLES, Identity, require_org_scope, require_role
from capaz.core.errors import AuthenticationError, NotFoundError, ValidationError
from capaz.core.security import hash_password, verify_password
from capaz.db.models import UserModel
from capaz.models import ProfileUpdate, RegisterRequest, Role
from capaz.organizations.service import get_organization_by_slug
from capaz.users.models import Pagination, PersonRef, UserOut, UserProfile

logger = structlog.get_logger(__name__)

MAX_PAGE_SIZE = 200


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(session: AsyncSession, email: str) -> UserModel | None:
    stmt = select(UserModel).where(UserModel.email == normalize_email(email))
    return (await session.execute(stmt)).scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    organization_id: str,
    role: Role = Role.USER,
    job_title: str | None = None,
    department: str | None = None,
) -> UserModel:
    """Insert a user with a bcrypt-hashed password.

    Raises:
        ValidationError: Email already registered (case-insensitive)
    """
    if await get_user_by_email(session, email) is not None:
        raise ValidationError("Email already registered", errors=[{"path": "email", "message": "Email already registered"}])

    user = UserModel(
        email=normalize_email(email),
        hashed_password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        job_title=job_title,
        department=department,
        organization_id=organization_id,
        role=Role(role).value,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)

    logger.info("user_created", user_id=user.id, organization_id=organization_id, role=user.role)
    return user


async def register_user(session: AsyncSession, data: RegisterRequest) -> UserModel:
    """Self-registration into an existing, active organization as a USER."""
    organization = await get_organization_by_slug(session, data.organization_slug.strip().lower())
    if organization is None or not organization.is_active:
        raise ValidationError(
            "Organization not found or inactive",
            errors=[{"path": "organizationSlug", "message": "Organization not found or inactive"}],
        )

    return await create_user(
        session,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        organization_id=organization.id,
        role=Role.USER,
        job_title=data.job_title,
        department=data.department,
    )


async def authenticate_user(session: AsyncSession, email: str, password: str) -> UserModel:
    """Check credentials and stamp ``last_login``.

    Unknown email and wrong password fail identically.
    """
    user = await get_user_by_email(session, email)
    if user is None or not verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")
    if not user.is_active:
        raise AuthenticationError("Account is disabled")

    user.last_login = datetime.now(timezone.utc)
    await session.commit()
    await session.refresh(user)

    logger.info("user_logged_in", user_id=user.id)
    return user


async def get_active_user(session: AsyncSession, user_id: str) -> UserModel | None:
    user = await session.get(UserModel, user_id)
    if user is None or not user.is_active:
        return None
    return user


async def list_users(
    session: AsyncSession,
    organization_id: str,
    page: int = 1,
    limit: int = 50,
    search: str | None = None,
    department: str | None = None,
) -> tuple[list[UserModel], Pagination]:
    """Active users of the organization, ordered by last then first name."""
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    conditions = [UserModel.organization_id == organization_id, UserModel.is_active.is_(True)]
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                UserModel.first_name.ilike(pattern),
                UserModel.last_name.ilike(pattern),
                UserModel.email.ilike(pattern),
            )
        )
    if department:
        conditions.append(UserModel.department == department)

    total = (await session.execute(select(func.count()).select_from(UserModel).where(*conditions))).scalar_one()

    stmt = (
        select(UserModel)
        .where(*conditions)
        .order_by(UserModel.last_name.asc(), UserModel.first_name.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    users = list((await session.execute(stmt)).scalars().all())

    return users, Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))


async def list_departments(session: AsyncSession, organization_id: str) -> list[str]:
    stmt = (
        select(UserModel.department)
        .where(UserModel.organization_id == organization_id, UserModel.department.is_not(None))
        .distinct()
        .order_by(UserModel.department.asc())
    )
    return [d for d in (await session.execute(stmt)).scalars().all() if d]


async def get_profile(session: AsyncSession, identity: Identity, user_id: str) -> UserProfile:
    """User with manager and direct reports; other organizations look not-found."""
    user = await session.get(UserModel, user_id)
    if user is None:
        raise NotFoundError("User not found")
    require_org_scope(identity, user.organization_id, "User")

    manager = await session.get(UserModel, user.manager_id) if user.manager_id else None
    reports_stmt = (
        select(UserModel)
        .where(UserModel.manager_id == user.id)
        .order_by(UserModel.last_name.asc(), UserModel.first_name.asc())
    )
    reports = (await session.execute(reports_stmt)).scalars().all()

    return UserProfile(
        **UserOut.model_validate(user).model_dump(),
        manager=PersonRef.model_validate(manager) if manager else None,
        direct_reports=[PersonRef.model_validate(r) for r in reports],
    )


async def update_profile(session: AsyncSession, user_id: str, data: ProfileUpdate) -> UserModel:
    user = await session.get(UserModel, user_id)
    if user is None:
        raise NotFoundError("User not found")

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        # Names are required columns
        if value is None and field in ("first_name", "last_name"):
            continue
        setattr(user, field, value)
    await session.commit()
    await session.refresh(user)

    logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
    return user


async def assign_manager(
    session: AsyncSession, identity: Identity, user_id: str, manager_id: str | None
) -> UserModel:
    """Set or clear a user's manager.

    The manager must belong to the same organization, and the assignment may
    not make the reporting tree cyclic.

    Raises:
        AuthorizationError: Caller is below org admin
        NotFoundError: User outside the caller's scope
        ValidationError: Self-management, foreign manager or cycle
    """
    require_role(identity, USER_ADMIN_ROLES)

    user = await session.get(UserModel, user_id)
    if user is None:
        raise NotFoundError("User not found")
    require_org_scope(identity, user.organization_id, "User")

    if manager_id is not None:
        if manager_id == user_id:
            raise ValidationError.for_field("managerId", "A user cannot manage themselves")

        manager = await session.get(UserModel, manager_id)
        if manager is None or manager.organization_id != user.organization_id:
            raise ValidationError.for_field("managerId", "Manager must belong to the same organization")

        # Walk up from the new manager; reaching the user means a cycle
        seen: set[str] = set()
        cursor: UserModel | None = manager
        while cursor is not None and cursor.manager_id is not None:
            if cursor.manager_id == user_id:
                raise ValidationError.for_field("managerId", "Assignment would create a reporting cycle")
            if cursor.manager_id in seen:
                break
            seen.add(cursor.manager_id)
            cursor = await session.get(UserModel, cursor.manager_id)

    user.manager_id = manager_id
    await session.commit()
    await session.refresh(user)

    logger.info("manager_assigned", user_id=user_id, manager_id=manager_id, actor=identity.user_id)
    return user

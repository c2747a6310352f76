"""Pytest configuration and fixtures for Capaz tests.

Provides an in-memory database, a small tenant tree with users, a catalog,
and an HTTP client wired to the app.
"""

from __future__ import annotations

import os

# Must be set before capaz.web.app is imported (it builds the app at import)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from dataclasses import dataclass

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from capaz.config import reset_config
from capaz.db.connection import get_db
from capaz.db.models import Base, SkillCategoryModel, SkillModel, UserModel
from capaz.models import OrganizationType, Role
from capaz.organizations.service import create_organization
from capaz.users.service import create_user
from capaz.web.auth import issue_token

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Each test reads configuration from its own environment."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    reset_config()
    yield
    reset_config()


@pytest_asyncio.fixture()
async def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory) -> AsyncSession:
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


@dataclass
class Tenants:
    platform: object
    msp: object
    client: object


@pytest_asyncio.fixture()
async def tenants(db_session) -> Tenants:
    """Platform owner -> MSP -> end client."""
    platform = await create_organization(
        db_session, "Capaz Platform", "capaz-platform", OrganizationType.PLATFORM_OWNER
    )
    msp = await create_organization(
        db_session, "Demo MSP", "demo-msp", OrganizationType.MSP_RESELLER, parent_org_id=platform.id
    )
    client = await create_organization(
        db_session, "Demo Client", "demo-client", OrganizationType.END_CLIENT, parent_org_id=msp.id
    )
    return Tenants(platform=platform, msp=msp, client=client)


async def make_user(
    session: AsyncSession,
    organization_id: str,
    email: str,
    role: Role = Role.USER,
    first_name: str = "Test",
    last_name: str = "User",
    department: str | None = None,
) -> UserModel:
    return await create_user(
        session,
        email=email,
        password=TEST_PASSWORD,
        first_name=first_name,
        last_name=last_name,
        organization_id=organization_id,
        role=role,
        department=department,
    )


@dataclass
class People:
    platform_admin: UserModel
    admin: UserModel
    manager: UserModel
    alice: UserModel
    bob: UserModel
    outsider: UserModel


@pytest_asyncio.fixture()
async def people(db_session, tenants) -> People:
    """Users of the MSP (plus a platform admin and an end-client outsider)."""
    msp_id = tenants.msp.id
    return People(
        platform_admin=await make_user(
            db_session, tenants.platform.id, "root@capaz.io", Role.PLATFORM_ADMIN, "Platform", "Admin"
        ),
        admin=await make_user(db_session, msp_id, "admin@demo-msp.com", Role.ORG_ADMIN, "Olga", "Admin"),
        manager=await make_user(
            db_session, msp_id, "manager@demo-msp.com", Role.MANAGER, "Maria", "Manager", "Engineering"
        ),
        alice=await make_user(db_session, msp_id, "alice@demo-msp.com", Role.USER, "Alice", "Anders", "Engineering"),
        bob=await make_user(db_session, msp_id, "bob@demo-msp.com", Role.USER, "Bob", "Berg", "Support"),
        outsider=await make_user(db_session, tenants.client.id, "eve@demo-client.com", Role.ORG_ADMIN, "Eve", "Extern"),
    )


@dataclass
class Catalog:
    networking: SkillCategoryModel
    cloud: SkillCategoryModel
    template: SkillCategoryModel
    foreign: SkillCategoryModel
    switching: SkillModel
    routing: SkillModel
    firewalls: SkillModel
    azure: SkillModel
    template_skill: SkillModel
    foreign_skill: SkillModel


@pytest_asyncio.fixture()
async def catalog(db_session, tenants) -> Catalog:
    """Two MSP categories, one shared template and one end-client category."""
    networking = SkillCategoryModel(id="cat-net", organization_id=tenants.msp.id, name="Networking", sort_order=0)
    cloud = SkillCategoryModel(id="cat-cloud", organization_id=tenants.msp.id, name="Cloud", sort_order=1)
    template = SkillCategoryModel(
        id="cat-template", organization_id=None, is_template=True, template_type="MSP", name="Security", sort_order=2
    )
    foreign = SkillCategoryModel(id="cat-foreign", organization_id=tenants.client.id, name="Client Only")
    db_session.add_all([networking, cloud, template, foreign])

    skills = {
        "switching": SkillModel(id="sk-switching", category_id="cat-net", name="Switching", sort_order=0),
        "routing": SkillModel(id="sk-routing", category_id="cat-net", name="Routing", sort_order=1),
        "firewalls": SkillModel(id="sk-firewalls", category_id="cat-net", name="Firewalls", sort_order=2),
        "azure": SkillModel(id="sk-azure", category_id="cat-cloud", name="Azure"),
        "template_skill": SkillModel(id="sk-siem", category_id="cat-template", name="SIEM"),
        "foreign_skill": SkillModel(id="sk-foreign", category_id="cat-foreign", name="Client Tool"),
    }
    db_session.add_all(skills.values())
    await db_session.commit()

    return Catalog(networking=networking, cloud=cloud, template=template, foreign=foreign, **skills)


def auth_headers(user: UserModel) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client against the app, with request sessions from the test database."""
    from capaz.web.app import app

    async def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            await session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def headers():
    """``headers(user)`` -> bearer Authorization header for that user."""
    return auth_headers


@pytest.fixture
def user_factory(db_session):
    """``await user_factory(org_id, email, role=..., ...)`` creates a user."""

    async def factory(organization_id: str, email: str, role: Role = Role.USER, **kwargs) -> UserModel:
        return await make_user(db_session, organization_id, email, role, **kwargs)

    return factory

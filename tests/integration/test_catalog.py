"""Integration tests for the skill catalog repository."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from capaz.access.policy import Identity
from capaz.catalog import repository as catalog_repo
from capaz.catalog.templates import MSP_TEMPLATE_CATALOG, seed_id
from capaz.core.errors import AuthorizationError, NotFoundError, ValidationError
from capaz.db.models import SkillCategoryModel, SkillModel
from capaz.models import CategoryCreate, CategoryUpdate, Role, SkillCreate, SkillUpdate


def _identity(user) -> Identity:
    return Identity(user_id=user.id, organization_id=user.organization_id, role=Role(user.role))


@pytest.mark.asyncio
async def test_catalog_lists_own_and_template_categories(db_session, tenants, catalog):
    categories = await catalog_repo.list_catalog(db_session, tenants.msp.id)

    assert [c.name for c in categories] == ["Networking", "Cloud", "Security"]
    networking = categories[0]
    assert [s.name for s in networking.skills] == ["Switching", "Routing", "Firewalls"]
    assert categories[2].is_template is True


@pytest.mark.asyncio
async def test_catalog_hides_other_organizations(db_session, tenants, catalog):
    categories = await catalog_repo.list_catalog(db_session, tenants.client.id)

    assert {c.id for c in categories} == {"cat-foreign", "cat-template"}


@pytest.mark.asyncio
async def test_catalog_excludes_inactive_entries(db_session, tenants, catalog):
    catalog.cloud.is_active = False
    catalog.routing.is_active = False
    await db_session.commit()

    categories = await catalog_repo.list_catalog(db_session, tenants.msp.id)

    assert "Cloud" not in [c.name for c in categories]
    assert [s.name for s in categories[0].skills] == ["Switching", "Firewalls"]


@pytest.mark.asyncio
async def test_child_categories_are_listed(db_session, tenants, people, catalog):
    child = await catalog_repo.create_category(
        db_session,
        _identity(people.manager),
        CategoryCreate(name="Wireless", parent_category_id="cat-net", sort_order=5),
    )

    categories = {c.id: c for c in await catalog_repo.list_catalog(db_session, tenants.msp.id)}

    assert [c.id for c in categories["cat-net"].child_categories] == [child.id]
    assert categories[child.id].parent_category_id == "cat-net"


@pytest.mark.asyncio
async def test_visible_skills_respect_category_activity(db_session, tenants, catalog):
    catalog.networking.is_active = False
    await db_session.commit()

    skills = await catalog_repo.list_visible_skills(db_session, tenants.msp.id)

    assert [s.id for s in skills] == ["sk-azure", "sk-siem"]


@pytest.mark.asyncio
async def test_visible_skill_ids_filters_foreign_and_inactive(db_session, tenants, catalog):
    catalog.firewalls.is_active = False
    await db_session.commit()

    visible = await catalog_repo.visible_skill_ids(
        db_session, tenants.msp.id, ["sk-routing", "sk-firewalls", "sk-siem", "sk-foreign", "sk-missing"]
    )

    assert visible == {"sk-routing", "sk-siem"}
    assert await catalog_repo.visible_skill_ids(db_session, tenants.msp.id, []) == set()


class TestCategoryMutations:
    @pytest.mark.asyncio
    async def test_manager_creates_private_category(self, db_session, tenants, people):
        category = await catalog_repo.create_category(
            db_session, _identity(people.manager), CategoryCreate(name="Backup")
        )

        assert category.organization_id == tenants.msp.id
        assert category.is_template is False

    @pytest.mark.asyncio
    async def test_user_cannot_create(self, db_session, people):
        with pytest.raises(AuthorizationError):
            await catalog_repo.create_category(db_session, _identity(people.alice), CategoryCreate(name="x"))

    @pytest.mark.asyncio
    async def test_invalid_parent(self, db_session, people, catalog):
        with pytest.raises(ValidationError) as exc_info:
            await catalog_repo.create_category(
                db_session, _identity(people.manager), CategoryCreate(name="x", parent_category_id="cat-foreign")
            )

        assert exc_info.value.errors[0]["path"] == "parentCategoryId"

    @pytest.mark.asyncio
    async def test_category_cannot_parent_itself(self, db_session, people, catalog):
        with pytest.raises(ValidationError):
            await catalog_repo.update_category(
                db_session, _identity(people.manager), "cat-net", CategoryUpdate(parent_category_id="cat-net")
            )

    @pytest.mark.asyncio
    async def test_two_category_cycle_is_rejected(self, db_session, people, catalog):
        identity = _identity(people.manager)
        await catalog_repo.update_category(db_session, identity, "cat-cloud", CategoryUpdate(parent_category_id="cat-net"))

        with pytest.raises(ValidationError) as exc_info:
            await catalog_repo.update_category(
                db_session, identity, "cat-net", CategoryUpdate(parent_category_id="cat-cloud")
            )

        assert exc_info.value.errors == [
            {"path": "parentCategoryId", "message": "Parent category is itself a subcategory"}
        ]
        assert (await db_session.get(SkillCategoryModel, "cat-net")).parent_category_id is None

    @pytest.mark.asyncio
    async def test_subcategory_cannot_have_children(self, db_session, people, catalog):
        identity = _identity(people.manager)
        child = await catalog_repo.create_category(
            db_session, identity, CategoryCreate(name="Wireless", parent_category_id="cat-net")
        )

        with pytest.raises(ValidationError):
            await catalog_repo.create_category(
                db_session, identity, CategoryCreate(name="Wi-Fi 7", parent_category_id=child.id)
            )

    @pytest.mark.asyncio
    async def test_parent_with_children_cannot_be_nested(self, db_session, people, catalog):
        identity = _identity(people.manager)
        await catalog_repo.create_category(db_session, identity, CategoryCreate(name="Wireless", parent_category_id="cat-net"))

        with pytest.raises(ValidationError) as exc_info:
            await catalog_repo.update_category(
                db_session, identity, "cat-net", CategoryUpdate(parent_category_id="cat-cloud")
            )

        assert exc_info.value.errors[0]["message"] == "A category with subcategories cannot be nested"

    @pytest.mark.asyncio
    async def test_partial_update(self, db_session, people, catalog):
        category = await catalog_repo.update_category(
            db_session, _identity(people.manager), "cat-cloud", CategoryUpdate(description="Public cloud")
        )

        assert category.description == "Public cloud"
        assert category.name == "Cloud"

    @pytest.mark.asyncio
    async def test_templates_are_read_only(self, db_session, people, catalog):
        with pytest.raises(NotFoundError):
            await catalog_repo.update_category(
                db_session, _identity(people.admin), "cat-template", CategoryUpdate(name="Mine now")
            )

    @pytest.mark.asyncio
    async def test_foreign_category_is_not_found(self, db_session, people, catalog):
        with pytest.raises(NotFoundError):
            await catalog_repo.deactivate_category(db_session, _identity(people.admin), "cat-foreign")

    @pytest.mark.asyncio
    async def test_manager_cannot_delete(self, db_session, people, catalog):
        with pytest.raises(AuthorizationError):
            await catalog_repo.deactivate_category(db_session, _identity(people.manager), "cat-cloud")

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, db_session, people, catalog):
        await catalog_repo.deactivate_category(db_session, _identity(people.admin), "cat-cloud")

        row = await db_session.get(SkillCategoryModel, "cat-cloud")
        assert row is not None
        assert row.is_active is False


class TestSkillMutations:
    @pytest.mark.asyncio
    async def test_create_skill_in_own_category(self, db_session, people, catalog):
        skill = await catalog_repo.create_skill(
            db_session,
            _identity(people.manager),
            SkillCreate(name="BGP", category_id="cat-net", level_descriptions={"5": "Designs multi-homed edges"}),
        )

        assert skill.category_id == "cat-net"
        assert skill.level_descriptions == {"5": "Designs multi-homed edges"}
        assert skill.certification_names == []

    @pytest.mark.asyncio
    async def test_create_skill_in_foreign_category(self, db_session, people, catalog):
        with pytest.raises(ValidationError) as exc_info:
            await catalog_repo.create_skill(
                db_session, _identity(people.manager), SkillCreate(name="x", category_id="cat-foreign")
            )

        assert exc_info.value.message == "Invalid category"

    @pytest.mark.asyncio
    async def test_update_skill(self, db_session, people, catalog):
        skill = await catalog_repo.update_skill(
            db_session,
            _identity(people.manager),
            "sk-azure",
            SkillUpdate(is_certifiable=True, certification_names=["AZ-104"], category_id="cat-net"),
        )

        assert skill.is_certifiable is True
        assert skill.certification_names == ["AZ-104"]
        assert skill.category_id == "cat-net"

    @pytest.mark.asyncio
    async def test_template_skill_is_not_editable(self, db_session, people, catalog):
        with pytest.raises(NotFoundError):
            await catalog_repo.update_skill(db_session, _identity(people.admin), "sk-siem", SkillUpdate(name="x"))

    @pytest.mark.asyncio
    async def test_deactivate_skill(self, db_session, people, catalog):
        await catalog_repo.deactivate_skill(db_session, _identity(people.admin), "sk-routing")

        assert (await db_session.get(SkillModel, "sk-routing")).is_active is False


@pytest.mark.asyncio
async def test_seed_templates_is_idempotent(db_session):
    expected_skills = sum(len(entry["skills"]) for entry in MSP_TEMPLATE_CATALOG)

    first = await catalog_repo.seed_templates(db_session)
    second = await catalog_repo.seed_templates(db_session)

    assert first == second == (len(MSP_TEMPLATE_CATALOG), expected_skills)
    total = (await db_session.execute(select(func.count()).select_from(SkillModel))).scalar_one()
    assert total == expected_skills

    category = await db_session.get(SkillCategoryModel, seed_id("Network Engineering"))
    assert category.is_template is True
    assert category.organization_id is None
    assert category.template_type == "MSP"

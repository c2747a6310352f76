"""Tests for capaz.web.routes.users - directory, profile and manager assignment."""

from __future__ import annotations

import pytest

URL = "/api/v1/users"


class TestDirectory:
    @pytest.mark.asyncio
    async def test_manager_lists_org_users(self, client, people, headers):
        response = await client.get(URL, params={"limit": 2}, headers=headers(people.manager))

        assert response.status_code == 200
        body = response.json()
        assert [u["lastName"] for u in body["users"]] == ["Admin", "Anders"]
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 4, "totalPages": 2}

    @pytest.mark.asyncio
    async def test_user_cannot_list(self, client, people, headers):
        response = await client.get(URL, headers=headers(people.alice))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_limit_is_bounded(self, client, people, headers):
        response = await client.get(URL, params={"limit": 1000}, headers=headers(people.manager))

        assert response.status_code == 400
        assert response.json()["errors"][0]["path"] == "limit"

    @pytest.mark.asyncio
    async def test_departments(self, client, people, headers):
        response = await client.get(f"{URL}/departments", headers=headers(people.alice))

        assert response.json() == {"departments": ["Engineering", "Support"]}


class TestProfile:
    @pytest.mark.asyncio
    async def test_update_me(self, client, people, headers):
        response = await client.patch(
            f"{URL}/me", json={"jobTitle": "NOC Lead", "timezone": "Europe/Dublin"}, headers=headers(people.bob)
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["jobTitle"] == "NOC Lead"
        assert user["timezone"] == "Europe/Dublin"

    @pytest.mark.asyncio
    async def test_get_colleague(self, client, people, headers):
        response = await client.get(f"{URL}/{people.bob.id}", headers=headers(people.alice))

        assert response.status_code == 200
        assert response.json()["user"]["firstName"] == "Bob"

    @pytest.mark.asyncio
    async def test_other_organization_is_not_found(self, client, people, headers):
        response = await client.get(f"{URL}/{people.outsider.id}", headers=headers(people.admin))

        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "User not found"}


class TestManagerAssignment:
    @pytest.mark.asyncio
    async def test_assign_manager(self, client, people, headers):
        response = await client.put(
            f"{URL}/{people.alice.id}/manager", json={"managerId": people.manager.id}, headers=headers(people.admin)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["managerId"] == people.manager.id
        assert body["manager"] == {"id": people.manager.id, "firstName": "Maria", "lastName": "Manager"}

    @pytest.mark.asyncio
    async def test_clear_manager(self, client, people, headers):
        auth = headers(people.admin)
        await client.put(f"{URL}/{people.alice.id}/manager", json={"managerId": people.manager.id}, headers=auth)

        response = await client.put(f"{URL}/{people.alice.id}/manager", json={"managerId": None}, headers=auth)

        assert response.json()["manager"] is None
        assert response.json()["user"]["managerId"] is None

    @pytest.mark.asyncio
    async def test_cycle(self, client, people, headers):
        auth = headers(people.admin)
        await client.put(f"{URL}/{people.alice.id}/manager", json={"managerId": people.bob.id}, headers=auth)

        response = await client.put(f"{URL}/{people.bob.id}/manager", json={"managerId": people.alice.id}, headers=auth)

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"path": "managerId", "message": "Assignment would create a reporting cycle"}
        ]

    @pytest.mark.asyncio
    async def test_manager_role_cannot_assign(self, client, people, headers):
        response = await client.put(
            f"{URL}/{people.bob.id}/manager", json={"managerId": people.manager.id}, headers=headers(people.manager)
        )

        assert response.status_code == 403

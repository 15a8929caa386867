"""
Tests for user lookup, account updates and the member directory.
"""
import pytest
from sqlalchemy import select

from app.models import User, UserRole, Profile, EducationDetail, EmploymentDetail
from helpers import create_test_user, auth_headers

pytestmark = pytest.mark.asyncio


class TestGetUser:
    async def test_self_with_details(self, client, member_user, member_headers, db_session):
        db_session.add_all([
            Profile(user_id=member_user.id, district="Karimnagar"),
            EducationDetail(user_id=member_user.id, degree="BSc", institution="KU", year_of_passing=2010),
            EducationDetail(user_id=member_user.id, degree="MSc", institution="OU", year_of_passing=2012),
            EmploymentDetail(user_id=member_user.id, company_name="TCS", role="Analyst"),
        ])
        await db_session.commit()

        response = await client.get(f"/users/{member_user.id}", headers=member_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "member@test.com"
        assert "password_hash" not in body
        assert body["profile"]["district"] == "Karimnagar"
        assert [e["degree"] for e in body["education_details"]] == ["MSc", "BSc"]
        assert body["employment_details"][0]["company_name"] == "TCS"

    async def test_other_user_forbidden_for_member(self, client, admin_user, member_headers):
        response = await client.get(f"/users/{admin_user.id}", headers=member_headers)
        assert response.status_code == 403

    async def test_staff_can_read_and_missing_is_404(self, client, member_user, admin_headers):
        found = await client.get(f"/users/{member_user.id}", headers=admin_headers)
        missing = await client.get("/users/9999", headers=admin_headers)

        assert found.status_code == 200
        assert found.json()["profile"] is None
        assert missing.status_code == 404


class TestUpdateUser:
    async def test_self_update(self, client, member_user, member_headers, db_session):
        response = await client.put(
            f"/users/{member_user.id}",
            json={"full_name": "Renamed Member", "phone": "9111111111"},
            headers=member_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User updated"}
        user = (await db_session.execute(
            select(User).where(User.id == member_user.id).execution_options(populate_existing=True)
        )).scalar_one()
        assert (user.full_name, user.phone) == ("Renamed Member", "9111111111")

    async def test_email_or_phone_taken(self, client, member_user, admin_user, member_headers):
        response = await client.put(
            f"/users/{member_user.id}", json={"email": admin_user.email}, headers=member_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Email or phone already in use"

    async def test_keeping_own_email_is_allowed(self, client, member_user, member_headers):
        response = await client.put(
            f"/users/{member_user.id}", json={"email": member_user.email}, headers=member_headers
        )
        assert response.status_code == 200

    async def test_member_cannot_update_others(self, client, admin_user, member_headers):
        response = await client.put(
            f"/users/{admin_user.id}", json={"full_name": "Hacked"}, headers=member_headers
        )
        assert response.status_code == 403

    async def test_member_cannot_change_own_role(self, client, member_user, member_headers):
        response = await client.put(
            f"/users/{member_user.id}", json={"role": "admin"}, headers=member_headers
        )
        assert response.status_code == 403

    async def test_admin_changes_role(self, client, member_user, admin_headers, db_session):
        response = await client.put(
            f"/users/{member_user.id}", json={"role": "moderator"}, headers=admin_headers
        )

        assert response.status_code == 200
        role = (await db_session.execute(select(User.role).where(User.id == member_user.id))).scalar_one()
        assert role == UserRole.moderator

    async def test_moderator_edits_member_but_not_role(self, client, member_user, db_session):
        moderator = await create_test_user(
            db_session, email="mod@test.com", phone="9000000002", role=UserRole.moderator
        )
        headers = auth_headers(moderator)

        renamed = await client.put(f"/users/{member_user.id}", json={"full_name": "By Moderator"}, headers=headers)
        promoted = await client.put(f"/users/{member_user.id}", json={"role": "admin"}, headers=headers)

        assert renamed.status_code == 200
        assert promoted.status_code == 403


class TestMemberDirectory:
    async def _seed(self, db_session):
        names = ["Chandra", "Anitha", "Bhaskar"]
        users = []
        for index, name in enumerate(names):
            users.append(await create_test_user(
                db_session, email=f"{name.lower()}@example.com", phone=f"95000000{index:02d}", full_name=name
            ))
        db_session.add_all([
            Profile(user_id=users[0].id, village="Peddapalli", district="Karimnagar"),
            EducationDetail(user_id=users[0].id, degree="BA", institution="KU", year_of_passing=2001),
            EducationDetail(user_id=users[0].id, degree="MA", institution="KU", year_of_passing=2003),
            EmploymentDetail(user_id=users[0].id, company_name="SCCL", role="Foreman", currently_working=True),
        ])
        await db_session.commit()
        return users

    async def test_lists_only_members_with_latest_details(self, client, admin_user, member_headers, db_session):
        await self._seed(db_session)

        response = await client.get("/users/members", params={"sort_by": "name"}, headers=member_headers)

        assert response.status_code == 200
        body = response.json()
        names = [m["name"] for m in body["members"]]
        assert names == ["Anitha", "Bhaskar", "Chandra", "Member User"]
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 4, "pages": 1}
        chandra = body["members"][2]
        assert chandra["location"] == "Karimnagar"
        assert chandra["education"] == "MA"
        assert chandra["title"] == "Foreman"
        assert chandra["currently_working"] is True

    async def test_search_and_pagination(self, client, member_headers, db_session):
        await self._seed(db_session)

        search = await client.get("/users/members", params={"search": "bhas"}, headers=member_headers)
        page = await client.get(
            "/users/members", params={"page": 2, "limit": 2, "sort_by": "name"}, headers=member_headers
        )

        assert [m["name"] for m in search.json()["members"]] == ["Bhaskar"]
        assert page.json()["pagination"] == {"page": 2, "limit": 2, "total": 4, "pages": 2}
        assert [m["name"] for m in page.json()["members"]] == ["Chandra", "Member User"]

    async def test_requires_token(self, client):
        response = await client.get("/users/members")
        assert response.status_code == 401

"""
API Tests for announcements
"""
from datetime import datetime, timedelta, timezone
import pytest
from httpx import AsyncClient
from sqlalchemy import delete

from app.models.user import User, UserRole


def announcement(**overrides) -> dict:
    data = {
        "title": "Mid-term timetable",
        "content": "The mid-term timetable is now on the notice board.",
        "category": "academic",
        "target_audience": ["student", "lecturer"],
    }
    data.update(overrides)
    return data


def iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


async def post(client: AsyncClient, headers: dict, **overrides) -> str:
    response = await client.post("/api/v1/announcements", json=announcement(**overrides), headers=headers)
    assert response.status_code == 201
    return response.json()["announcement_id"]


class TestCreateAnnouncement:

    @pytest.mark.asyncio
    async def test_student_denied(self, client: AsyncClient, student_headers):
        response = await client.post("/api/v1/announcements", json=announcement(), headers=student_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_lecturer_can_post(self, client: AsyncClient, lecturer, lecturer_headers, student_headers):
        await post(client, lecturer_headers)

        response = await client.get("/api/v1/announcements", headers=student_headers)

        data = response.json()
        assert len(data) == 1
        assert data[0]["author_name"] == lecturer.name
        assert data[0]["author_role"] == "lecturer"

    @pytest.mark.asyncio
    async def test_missing_audience(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/v1/announcements", json=announcement(target_audience=[]), headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_category(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/v1/announcements", json=announcement(category="gossip"), headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_category_whitespace_trimmed(self, client: AsyncClient, admin_headers, student_headers):
        await post(client, admin_headers, category=" event ")

        response = await client.get("/api/v1/announcements", headers=student_headers)

        assert response.json()[0]["category"] == "event"


class TestListAnnouncements:

    @pytest.mark.asyncio
    async def test_expired_excluded_future_included(self, client: AsyncClient, admin_headers, lecturer_headers):
        await post(client, admin_headers, title="Expired", target_audience=["lecturer"],
                   expires_at=iso(-timedelta(days=1)))
        await post(client, admin_headers, title="Current", target_audience=["lecturer"],
                   expires_at=iso(timedelta(days=1)))

        response = await client.get("/api/v1/announcements", headers=lecturer_headers)

        assert [a["title"] for a in response.json()] == ["Current"]

    @pytest.mark.asyncio
    async def test_audience_filter(self, client: AsyncClient, admin_headers, student_headers):
        await post(client, admin_headers, title="Staff only", target_audience=["lecturer"])

        response = await client.get("/api/v1/announcements", headers=student_headers)

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_department_targeting(self, client: AsyncClient, admin_headers, make_user, auth_headers_for):
        cs_student = await make_user(UserRole.STUDENT, department="Computer Science")
        me_student = await make_user(UserRole.STUDENT, department="Mechanical Engineering")
        await post(client, admin_headers, title="CS lab closed", is_department_specific=True,
                   target_departments=["Computer Science"])

        cs = await client.get("/api/v1/announcements", headers=auth_headers_for(cs_student))
        me = await client.get("/api/v1/announcements", headers=auth_headers_for(me_student))

        assert [a["title"] for a in cs.json()] == ["CS lab closed"]
        assert me.json() == []

    @pytest.mark.asyncio
    async def test_lecturer_department_is_default_target(
        self, client: AsyncClient, lecturer_headers, make_user, auth_headers_for
    ):
        outsider = await make_user(UserRole.STUDENT, department="Physics")
        await post(client, lecturer_headers, is_department_specific=True)

        response = await client.get("/api/v1/announcements", headers=auth_headers_for(outsider))

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_pinned_first(self, client: AsyncClient, admin_headers, student_headers):
        await post(client, admin_headers, title="Pinned", is_pinned=True)
        await post(client, admin_headers, title="Newer")

        response = await client.get("/api/v1/announcements", headers=student_headers)

        assert [a["title"] for a in response.json()] == ["Pinned", "Newer"]

    @pytest.mark.asyncio
    async def test_mine_lists_own_posts_outside_audience(
        self, client: AsyncClient, admin_headers, lecturer_headers
    ):
        own = await post(client, lecturer_headers, title="For students", target_audience=["student"])
        await post(client, admin_headers, title="Someone else")

        everyone = await client.get("/api/v1/announcements", headers=lecturer_headers)
        mine = await client.get("/api/v1/announcements", params={"mine": "true"}, headers=lecturer_headers)

        assert [a["title"] for a in everyone.json()] == ["Someone else"]
        assert [a["id"] for a in mine.json()] == [own]

    @pytest.mark.asyncio
    async def test_missing_author_placeholders(
        self, client: AsyncClient, db_session, lecturer, lecturer_headers, student_headers
    ):
        await post(client, lecturer_headers)

        await db_session.execute(delete(User).where(User.id == lecturer.id))
        await db_session.commit()

        response = await client.get("/api/v1/announcements", headers=student_headers)

        assert response.status_code == 200
        [item] = response.json()
        assert item["author_name"] == "Unknown"
        assert item["author_role"] == "admin"


class TestModifyAnnouncement:

    @pytest.mark.asyncio
    async def test_author_updates(self, client: AsyncClient, lecturer_headers):
        announcement_id = await post(client, lecturer_headers)

        response = await client.patch(
            f"/api/v1/announcements/{announcement_id}",
            json={"title": "Updated title", "is_pinned": True},
            headers=lecturer_headers
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Updated title"
        assert response.json()["is_pinned"] is True
        assert response.json()["content"] == announcement()["content"]

    @pytest.mark.asyncio
    async def test_other_lecturer_cannot_update(self, client: AsyncClient, lecturer_headers, make_user, auth_headers_for):
        announcement_id = await post(client, lecturer_headers)
        other = await make_user(UserRole.LECTURER)

        response = await client.patch(
            f"/api/v1/announcements/{announcement_id}",
            json={"title": "Hijacked"},
            headers=auth_headers_for(other)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_deletes_any(self, client: AsyncClient, lecturer_headers, admin_headers):
        announcement_id = await post(client, lecturer_headers)

        response = await client.delete(f"/api/v1/announcements/{announcement_id}", headers=admin_headers)
        assert response.status_code == 200

        again = await client.delete(f"/api/v1/announcements/{announcement_id}", headers=admin_headers)
        assert again.status_code == 404

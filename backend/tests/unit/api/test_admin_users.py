"""
API Tests for admin user management
"""
import string
import pytest
from httpx import AsyncClient

from app.models.user import UserRole


class TestAdminAccess:

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, client: AsyncClient, lecturer_headers):
        response = await client.get("/api/v1/admin/users", headers=lecturer_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_unauthorized(self, client: AsyncClient):
        response = await client.get("/api/v1/admin/users")

        assert response.status_code == 401


class TestAdminUsers:

    @pytest.mark.asyncio
    async def test_list_and_filter(self, client: AsyncClient, admin_headers, student, lecturer):
        response = await client.get("/api/v1/admin/users", headers=admin_headers)
        assert response.status_code == 200
        assert len(response.json()) == 3

        response = await client.get(
            "/api/v1/admin/users", params={"role": "lecturer"}, headers=admin_headers
        )
        assert [u["id"] for u in response.json()] == [str(lecturer.id)]

    @pytest.mark.asyncio
    async def test_search(self, client: AsyncClient, admin_headers, make_user):
        await make_user(name="Priya Sharma")
        await make_user(name="John Smith")

        response = await client.get(
            "/api/v1/admin/users", params={"search": "priya"}, headers=admin_headers
        )

        assert [u["name"] for u in response.json()] == ["Priya Sharma"]

    @pytest.mark.asyncio
    async def test_create_user(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/v1/admin/users",
            json={
                "name": "New Lecturer",
                "email": "new.lecturer@example.com",
                "password": "welcome123",
                "role": "lecturer",
                "department": "Physics",
            },
            headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["role"] == "lecturer"
        assert response.json()["student_id"] is None

    @pytest.mark.asyncio
    async def test_create_duplicate_student_id(self, client: AsyncClient, admin_headers, student):
        response = await client.post(
            "/api/v1/admin/users",
            json={
                "name": "Copy Cat",
                "email": "copy@example.com",
                "password": "welcome123",
                "role": "student",
                "student_id": student.student_number,
            },
            headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Student ID already exists"

    @pytest.mark.asyncio
    async def test_update_user(self, client: AsyncClient, admin_headers, student):
        response = await client.patch(
            f"/api/v1/admin/users/{student.id}",
            json={"department": "Mathematics"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["department"] == "Mathematics"
        assert response.json()["name"] == student.name

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, client: AsyncClient, admin_headers):
        response = await client.patch(
            "/api/v1/admin/users/00000000-0000-0000-0000-000000000000",
            json={"department": "Mathematics"},
            headers=admin_headers
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_deactivate_user(self, client: AsyncClient, admin_headers, student, student_headers):
        response = await client.delete(f"/api/v1/admin/users/{student.id}", headers=admin_headers)
        assert response.status_code == 200

        me = await client.get("/api/v1/auth/me", headers=student_headers)
        assert me.status_code == 403

    @pytest.mark.asyncio
    async def test_cannot_deactivate_admin(self, client: AsyncClient, admin_headers, make_user):
        other_admin = await make_user(UserRole.ADMIN, department=None)

        response = await client.delete(f"/api/v1/admin/users/{other_admin.id}", headers=admin_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Cannot delete admin users"

    @pytest.mark.asyncio
    async def test_reset_password(self, client: AsyncClient, admin_headers, student):
        response = await client.post(
            "/api/v1/admin/users/reset-password",
            json={"user_id": str(student.id)},
            headers=admin_headers
        )

        assert response.status_code == 200
        new_password = response.json()["new_password"]
        assert len(new_password) == 8
        assert any(c in string.ascii_uppercase for c in new_password)
        assert any(c in string.ascii_lowercase for c in new_password)
        assert any(c in string.digits for c in new_password)

        login = await client.post(
            "/api/v1/auth/login", json={"email": student.email, "password": new_password}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_password_requires_user_id(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/v1/admin/users/reset-password", json={}, headers=admin_headers
        )

        assert response.status_code == 400

"""
API Tests for health checks and the app-wide error format
"""
import pytest
from httpx import AsyncClient


class TestHealth:

    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["environment"] == "testing"

    @pytest.mark.asyncio
    async def test_readiness(self, client: AsyncClient):
        response = await client.get("/api/v1/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["tables_ready"] is True

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200


class TestErrorFormat:

    @pytest.mark.asyncio
    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/v1/does-not-exist")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_security_headers(self, client: AsyncClient):
        response = await client.get("/api/v1/health")

        assert response.headers["x-content-type-options"] == "nosniff"

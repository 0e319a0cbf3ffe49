"""Tests for health check endpoints."""

from httpx import AsyncClient


class TestHealthEndpoint:
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        """Liveness probe returns healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_health_no_db_check(self, client: AsyncClient) -> None:
        """Health endpoint does not include database status."""
        response = await client.get("/health")

        assert response.json().get("database") is None


class TestReadyEndpoint:
    async def test_ready_returns_ready(self, client: AsyncClient) -> None:
        """Readiness probe returns ready when DB is connected."""
        response = await client.get("/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["database"] == "connected"

    async def test_ready_reports_counts(self, client: AsyncClient) -> None:
        """Ready endpoint reports stored challenge and library counts."""
        await client.put(
            "/library",
            json={"records": ["Obi Toppin - Dunk - May 1 2025, Series 7, Knicks"]},
        )

        data = (await client.get("/ready")).json()

        assert data["challenges"] == 0
        assert data["library_records"] == 1

"""Integration tests for health check endpoints."""

from fastapi.testclient import TestClient

from collabmatch.core.errors import TransientError
from collabmatch.store.factory import get_memory_backend


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    def test_ready_when_store_reachable(self, client: TestClient) -> None:
        response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"][0]["name"] == "store"
        assert data["checks"][0]["healthy"] is True

    def test_not_ready_when_store_down(self, client: TestClient) -> None:
        get_memory_backend().fail_next("ping", TransientError("connection refused"))

        response = client.get("/health/ready")

        assert response.status_code == 503
        check = response.json()["checks"][0]
        assert check["healthy"] is False
        assert check["error"] == "connection refused"

"""Tests for app-level endpoints, middleware and the unknown-route envelope."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from pytest_mock import MockerFixture
from sqlalchemy.exc import OperationalError

from app.middleware import REQUEST_ID_HEADER


class TestRoot:
    @pytest.mark.asyncio
    async def test_welcome(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["message"].startswith("Welcome to")


class TestHealth:
    @pytest.mark.asyncio
    async def test_database_up(self, client: AsyncClient, mocker: MockerFixture) -> None:
        mocker.patch("app.main.ping_db", AsyncMock(return_value=True))

        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "up"
        assert body["environment"] == "testing"

    @pytest.mark.asyncio
    async def test_database_down(self, client: AsyncClient, mocker: MockerFixture) -> None:
        mocker.patch(
            "app.main.ping_db",
            AsyncMock(side_effect=OperationalError("SELECT 1", {}, ConnectionRefusedError())),
        )

        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "down"


class TestUnknownRoute:
    @pytest.mark.asyncio
    async def test_not_found_envelope(self, client: AsyncClient) -> None:
        response = await client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Route not found",
            "message": "Cannot GET /does-not-exist",
        }

    @pytest.mark.asyncio
    async def test_wrong_method_keeps_framework_status(self, client: AsyncClient) -> None:
        response = await client.patch("/blogs/1")

        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}


class TestMiddleware:
    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/", headers={REQUEST_ID_HEADER: "abc-123"})

        assert response.headers[REQUEST_ID_HEADER] == "abc-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert len(response.headers[REQUEST_ID_HEADER]) == 32

    @pytest.mark.asyncio
    async def test_security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestMetricsEndpoint:
    @pytest.mark.asyncio
    async def test_counts_client_errors(self, client: AsyncClient, mocker: MockerFixture) -> None:
        mocker.patch("app.main.get_system_metrics", AsyncMock(return_value={"cpu_percent": 1.0}))
        await client.get("/blogs/5")

        response = await client.get("/metrics")

        assert response.status_code == 200
        api_metrics = response.json()["api_metrics"]
        assert api_metrics["request_counts"]["/blogs/by-id"] == 1
        assert api_metrics["client_error_counts"]["/blogs/by-id"] == 1
        assert api_metrics["server_error_counts"] == {}

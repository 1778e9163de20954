"""Tests for rate limiting."""

from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient

from app.managers.metrics import metrics_manager
from app.managers.rate_limiter import get_identifier, limiter


class TestGetIdentifier:
    def test_api_key_wins(self) -> None:
        request = MagicMock()
        request.headers = {"X-API-Key": "k-123"}

        assert get_identifier(request) == "apikey:k-123"

    def test_falls_back_to_ip(self) -> None:
        request = MagicMock()
        request.headers = {}
        request.client.host = "10.0.0.7"

        assert get_identifier(request) == "ip:10.0.0.7"


@pytest.mark.asyncio
async def test_login_is_limited_after_five_attempts(
    client: AsyncClient,
    user_repo: MagicMock,
) -> None:
    """The sixth login attempt inside the window is rejected with 429."""
    limiter.enabled = True
    limiter.reset()
    user_repo.get_by_email.return_value = None
    user_repo.verify_secret.return_value = False
    headers = {"X-API-Key": "login-limit-test"}
    body = {"email": "nobody@example.com", "password": "Password123"}

    statuses = [
        (await client.post("/auth/login", json=body, headers=headers)).status_code
        for _ in range(6)
    ]

    assert statuses == [401] * 5 + [429]
    response = await client.post("/auth/login", json=body, headers=headers)
    assert response.json()["error"] == "Too many requests, please try again later."
    assert metrics_manager.get_metrics()["rate_limit_hits"] == 2

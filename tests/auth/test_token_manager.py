"""Tests for the JWT token manager."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from app.configs import settings
from app.errors import InvalidTokenError, TokenExpiredError
from app.managers.token_manager import create_access_token, decode_access_token


def _encode(**overrides: object) -> str:
    now = datetime.now(UTC)
    claims: dict = {
        "sub": "1",
        "user_id": 1,
        "username": "johndoe",
        "jti": "abc",
        "iat": now,
        "exp": now + timedelta(minutes=5),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": "access",
    }
    claims.update(overrides)
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _expiry(token: str) -> datetime:
    return datetime.fromtimestamp(jwt.get_unverified_claims(token)["exp"], tz=UTC)


class TestCreateAccessToken:
    def test_claims_round_trip(self) -> None:
        """The decoded token carries the id and username it was issued for."""
        token = create_access_token(user_id=42, username="johndoe")
        token_data = decode_access_token(token)

        assert token_data.user_id == 42
        assert token_data.username == "johndoe"
        assert token_data.token_type == "access"
        assert token_data.jti

    def test_each_token_has_its_own_jti(self) -> None:
        first = decode_access_token(create_access_token(1, "a"))
        second = decode_access_token(create_access_token(1, "a"))

        assert first.jti != second.jti

    def test_default_expiry_is_seven_days(self) -> None:
        expiry = _expiry(create_access_token(1, "a"))

        remaining = expiry - datetime.now(UTC)
        assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)

    def test_custom_expiry(self) -> None:
        expiry = _expiry(create_access_token(1, "a", expires_delta=timedelta(hours=2)))

        assert expiry - datetime.now(UTC) <= timedelta(hours=2)


class TestDecodeAccessToken:
    def test_expired(self) -> None:
        token = create_access_token(1, "a", expires_delta=timedelta(seconds=-10))

        with pytest.raises(TokenExpiredError):
            decode_access_token(token)

    def test_malformed(self) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token("not.a.jwt")

    def test_wrong_signature(self) -> None:
        token = jwt.encode({"user_id": 1}, "another-secret", algorithm=settings.ALGORITHM)

        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": "refresh"},
            {"user_id": "1"},
            {"user_id": True},
            {"jti": ""},
            {"aud": "someone-else"},
            {"iss": "someone-else"},
        ],
    )
    def test_invalid_claims(self, overrides: dict) -> None:
        with pytest.raises(InvalidTokenError):
            decode_access_token(_encode(**overrides))

    def test_expired_is_a_distinct_error(self) -> None:
        token = _encode(exp=datetime.now(UTC) - timedelta(minutes=1))

        with pytest.raises(TokenExpiredError) as exc_info:
            decode_access_token(token)

        assert exc_info.value.detail == "Access denied. Token expired."

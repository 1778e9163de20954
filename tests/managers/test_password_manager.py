"""Tests for Argon2 password hashing."""

import pytest

from app.managers.password_manager import PasswordHasher, hash_password, verify_password


@pytest.fixture(scope="module")
def hasher() -> PasswordHasher:
    return PasswordHasher(level="low")


class TestPasswordHasher:
    def test_hash_is_argon2id_and_salted(self, hasher: PasswordHasher) -> None:
        first = hasher.hash("Password123")
        second = hasher.hash("Password123")

        assert first.startswith("$argon2id$")
        assert first != second
        assert "Password123" not in first

    def test_verify(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("Password123")

        assert hasher.verify("Password123", hashed)
        assert not hasher.verify("password123", hashed)

    def test_empty_password_is_rejected(self, hasher: PasswordHasher) -> None:
        with pytest.raises(ValueError, match="empty"):
            hasher.hash("")

    @pytest.mark.parametrize("stored", [None, "", "   "])
    def test_missing_hash_never_matches(self, hasher: PasswordHasher, stored: str | None) -> None:
        assert not hasher.verify("Password123", stored)

    def test_corrupted_hash_never_matches(self, hasher: PasswordHasher) -> None:
        assert not hasher.verify("Password123", "$argon2id$garbage")


@pytest.mark.asyncio
async def test_async_helpers_round_trip() -> None:
    hashed = await hash_password("Password123")

    assert await verify_password("Password123", hashed)
    assert not await verify_password("Wrong123", hashed)
    assert not await verify_password("Password123", None)

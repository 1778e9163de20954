"""Tests for the user repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.exc import IntegrityError

from app.errors import DatabaseError, DuplicateEntryError, RecordNotFoundError
from app.models import UserDB
from app.repositories import UserRepository
from app.schemas.user import UserCreate, UserUpdate


def _exists(found: bool) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = 1 if found else None
    return result


def _row(user: UserDB | None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    return result


@pytest.fixture
def session() -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def new_user() -> UserCreate:
    return UserCreate.model_validate(
        {"username": "johndoe", "email": "johndoe@example.com", "password": "Password123"},
    )


@pytest.fixture(autouse=True)
def fast_hash(mocker: MockerFixture) -> AsyncMock:
    return mocker.patch(
        "app.repositories.user.hash_password",
        AsyncMock(return_value="$argon2id$v=19$hashed"),
    )


class TestCreate:
    @pytest.mark.asyncio
    async def test_stores_hash_not_password(
        self,
        session: AsyncMock,
        new_user: UserCreate,
        fast_hash: AsyncMock,
    ) -> None:
        session.execute.side_effect = [_exists(False), _exists(False)]

        created = await UserRepository(session).create(new_user)

        fast_hash.assert_awaited_once_with("Password123")
        assert created.password_hash == "$argon2id$v=19$hashed"
        assert created.email == "johndoe@example.com"
        session.add.assert_called_once_with(created)
        session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_email_taken(self, session: AsyncMock, new_user: UserCreate) -> None:
        session.execute.side_effect = [_exists(True)]

        with pytest.raises(DuplicateEntryError) as exc_info:
            await UserRepository(session).create(new_user)

        assert exc_info.value.detail == "User with this email already exists"
        session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_username_taken(self, session: AsyncMock, new_user: UserCreate) -> None:
        session.execute.side_effect = [_exists(False), _exists(True)]

        with pytest.raises(DuplicateEntryError) as exc_info:
            await UserRepository(session).create(new_user)

        assert exc_info.value.detail == "Username already taken"

    @pytest.mark.asyncio
    async def test_racing_insert_is_still_a_duplicate(
        self,
        session: AsyncMock,
        new_user: UserCreate,
    ) -> None:
        session.execute.side_effect = [_exists(False), _exists(False)]
        session.flush.side_effect = IntegrityError(
            "INSERT",
            {},
            Exception("duplicate key value violates unique constraint"),
        )

        with pytest.raises(DuplicateEntryError):
            await UserRepository(session).create(new_user)

        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_integrity_errors(self, session: AsyncMock, new_user: UserCreate) -> None:
        session.execute.side_effect = [_exists(False), _exists(False)]
        session.flush.side_effect = IntegrityError("INSERT", {}, Exception("null value"))

        with pytest.raises(DatabaseError) as exc_info:
            await UserRepository(session).create(new_user)

        assert exc_info.value.status_code == 500


class TestLookups:
    @pytest.mark.asyncio
    async def test_email_lookup_is_case_insensitive(self, session: AsyncMock) -> None:
        session.execute.return_value = _row(None)

        await UserRepository(session).get_by_email("  JohnDoe@Example.COM ")

        statement = session.execute.await_args.args[0]
        assert "johndoe@example.com" in statement.compile().params.values()

    @pytest.mark.asyncio
    async def test_username_lookup(self, session: AsyncMock) -> None:
        stored = UserDB(id=1, username="johndoe", email="johndoe@example.com", password_hash="h")
        session.execute.return_value = _row(stored)

        found = await UserRepository(session).get_by_username("johndoe")

        assert found is stored
        statement = session.execute.await_args.args[0]
        assert "users.username = " in str(statement)
        assert "johndoe" in statement.compile().params.values()

    @pytest.mark.asyncio
    async def test_verify_secret_without_user(
        self,
        session: AsyncMock,
        mocker: MockerFixture,
    ) -> None:
        verify = mocker.patch(
            "app.repositories.user.verify_password",
            AsyncMock(return_value=False),
        )

        assert not await UserRepository(session).verify_secret(None, "Password123")
        verify.assert_awaited_once_with("Password123", None)


class TestUpdate:
    @pytest.mark.asyncio
    async def test_missing_user(self, session: AsyncMock) -> None:
        session.execute.return_value = _row(None)

        with pytest.raises(RecordNotFoundError):
            await UserRepository(session).update(1, UserUpdate())

    @pytest.mark.asyncio
    async def test_username_held_by_someone_else(self, session: AsyncMock) -> None:
        stored = UserDB(id=1, username="johndoe", email="johndoe@example.com", password_hash="h")
        session.execute.side_effect = [_row(stored), _exists(True)]

        with pytest.raises(DuplicateEntryError) as exc_info:
            await UserRepository(session).update(1, UserUpdate(username="janedoe"))

        assert exc_info.value.detail == "Username or email already exists"

    @pytest.mark.asyncio
    async def test_applies_changes(self, session: AsyncMock) -> None:
        stored = UserDB(
            id=1,
            username="johndoe",
            email="johndoe@example.com",
            password_hash="h",
            avatar="https://example.com/old.png",
        )
        session.execute.side_effect = [_row(stored), _exists(False)]

        updated = await UserRepository(session).update(1, UserUpdate(username="johnny"))

        assert updated.username == "johnny"
        assert updated.email == "johndoe@example.com"
        assert updated.avatar is None
        assert updated.password_hash == "h"

    @pytest.mark.asyncio
    async def test_bare_host_avatar_is_stored_normalised(self, session: AsyncMock) -> None:
        stored = UserDB(id=1, username="johndoe", email="johndoe@example.com", password_hash="h")
        session.execute.return_value = _row(stored)

        updated = await UserRepository(session).update(
            1,
            UserUpdate(avatar="https://example.com"),
        )

        assert updated.avatar == "https://example.com/"


def test_public_projection_has_no_hash() -> None:
    user = UserDB(id=1, username="johndoe", email="johndoe@example.com", password_hash="secret")

    public = UserRepository.to_public(user)

    assert "password_hash" not in public.model_dump()

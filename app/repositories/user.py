"""User repository for database operations."""

from datetime import UTC, datetime
from logging import getLogger

from sqlalchemy.exc import IntegrityError

from app.errors.database import DatabaseError, DuplicateEntryError, RecordNotFoundError
from app.managers.password_manager import hash_password, verify_password
from app.models.user import UserDB
from app.repositories.base import BaseRepository
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

EMAIL_TAKEN = "User with this email already exists"
USERNAME_TAKEN = "Username already taken"
IDENTITY_TAKEN = "Username or email already exists"


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    Uniqueness of username and email is checked before writing and enforced
    again by the unique indexes, so a racing insert still surfaces as
    ``DuplicateEntryError`` rather than a generic failure.
    """

    model = UserDB

    async def create(self, user: UserCreate) -> UserDB:
        """
        Create a new user in the database.

        Args:
            user: User schema with user data

        Returns:
            UserDB: Created user database model

        Raises:
            DuplicateEntryError: If username or email already exists
        """
        if await self._check_exists_by_field("email", user.email):
            raise DuplicateEntryError(detail=EMAIL_TAKEN)
        if await self._check_exists_by_field("username", user.username):
            raise DuplicateEntryError(detail=USERNAME_TAKEN)

        password_hash = await hash_password(user.password.get_secret_value())

        db_user = UserDB(
            username=user.username,
            email=user.email,
            password_hash=password_hash,
            avatar=str(user.avatar) if user.avatar else None,
        )
        created = await self._add_and_refresh(db_user, duplicate_detail=IDENTITY_TAKEN)
        logger.info(f"User {created.id} registered")
        return created

    async def get_by_username(self, username: str) -> UserDB | None:
        """
        Get user by username.

        Args:
            username: Username to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.get_by_field("username", username)

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email.

        Args:
            email: Email to search for (compared in lower case)

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.get_by_field("email", email.strip().lower())

    async def update(self, user_id: int, user_update: UserUpdate) -> UserDB:
        """
        Update username, email and avatar of a user.

        Callers pass a fully merged record: ``None`` for ``avatar`` clears it,
        while ``None`` for ``username`` or ``email`` keeps the stored value.

        Args:
            user_id: User ID
            user_update: Merged profile fields

        Returns:
            UserDB: Updated user

        Raises:
            RecordNotFoundError: If no user has this ID
            DuplicateEntryError: If another user holds the username or email
        """
        db_user = await self.get_by_id(user_id)
        if not db_user:
            raise RecordNotFoundError(detail="User not found")

        if user_update.username and await self._check_exists_by_field(
            "username",
            user_update.username,
            exclude_id=user_id,
        ):
            raise DuplicateEntryError(detail=IDENTITY_TAKEN)
        if user_update.email and await self._check_exists_by_field(
            "email",
            user_update.email,
            exclude_id=user_id,
        ):
            raise DuplicateEntryError(detail=IDENTITY_TAKEN)

        db_user.username = user_update.username or db_user.username
        db_user.email = user_update.email or db_user.email
        db_user.avatar = str(user_update.avatar) if user_update.avatar else None
        db_user.updated_at = datetime.now(tz=UTC)

        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
                raise DuplicateEntryError(detail=IDENTITY_TAKEN) from e
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e

        await self.session.refresh(db_user)
        return db_user

    async def verify_secret(self, user: UserDB | None, password: str) -> bool:
        """
        Check a candidate password against a user's stored hash.

        Never raises on mismatch. A missing user still runs a dummy
        verification so response timing does not reveal unknown emails.

        Args:
            user: User to check, or None when the lookup found nothing
            password: Plain text candidate

        Returns:
            bool: True if the password matches
        """
        return await verify_password(password, user.password_hash if user else None)

    @staticmethod
    def to_public(user: UserDB) -> UserResponse:
        """Project a stored user to its public shape (never includes the hash)."""
        return UserResponse.model_validate(user)

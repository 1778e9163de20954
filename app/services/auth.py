"""Authentication service for registration, login and bearer-token resolution."""

from logging import getLogger

from app.errors.auth import InvalidCredentialsError
from app.managers.token_manager import create_access_token, decode_access_token
from app.models import UserDB
from app.repositories import UserRepository
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, user_repo: UserRepository) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def register_user(self, user_create: UserCreate) -> tuple[UserDB, str]:
        """
        Create an identity and issue its first access token.

        Raises:
            DuplicateEntryError: If the email or username is taken
        """
        user = await self.user_repo.create(user_create)
        return user, self.create_token_for_user(user)

    async def authenticate_user(self, email: str, password: str) -> UserDB:
        """
        Authenticate a user by email and password.

        Unknown emails and wrong passwords fail the same way.

        Raises:
            InvalidCredentialsError: If authentication fails
        """
        user = await self.user_repo.get_by_email(email)
        if not await self.user_repo.verify_secret(user, password) or user is None:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError
        return user

    def create_token_for_user(self, user: UserDB) -> str:
        """Issue a signed access token carrying the user's id."""
        if user.id is None:
            mssg = "Cannot issue a token for an unsaved user"
            raise ValueError(mssg)
        return create_access_token(user_id=user.id, username=user.username)

    async def resolve_token(self, token: str) -> UserDB | None:
        """
        Resolve a bearer token to the user it was issued for.

        Returns:
            UserDB | None: The user, or None if it no longer exists

        Raises:
            InvalidTokenError: If the token is malformed or its claims are invalid
            TokenExpiredError: If the token is past its expiry
        """
        token_data = decode_access_token(token)
        return await self.user_repo.get_by_id(token_data.user_id)

    async def update_profile(self, user: UserResponse, changes: UserUpdate) -> UserDB:
        """
        Merge profile changes over the stored user and save the result.

        Fields the client did not send keep their stored value.
        """
        sent = changes.model_dump(exclude_unset=True)
        merged = UserUpdate.model_validate(
            {
                "username": sent.get("username") or user.username,
                "email": sent.get("email") or user.email,
                "avatar": sent["avatar"] if "avatar" in sent else user.avatar,
            },
        )
        return await self.user_repo.update(user.id, merged)

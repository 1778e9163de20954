"""Authentication and authorization errors."""

from logging import getLogger

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from app.errors.base import BaseAppError, create_exception_handler
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED, headers=BEARER_CHALLENGE)


class NotAuthenticatedError(UserAuthenticationError):
    """Raised when no usable credential was presented."""

    def __init__(self, detail: str = "Access denied. No token provided.") -> None:
        super().__init__(detail)


class InvalidCredentialsError(UserAuthenticationError):
    """Raised when email/password do not match a stored identity."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidTokenError(UserAuthenticationError):
    """Raised when a bearer token is malformed or its signature/claims are invalid."""

    def __init__(self, detail: str = "Access denied. Invalid token.") -> None:
        super().__init__(detail)


class TokenExpiredError(UserAuthenticationError):
    """Raised when a bearer token is past its expiry."""

    def __init__(self, detail: str = "Access denied. Token expired.") -> None:
        super().__init__(detail)


class ForbiddenError(BaseAppError):
    """Raised when an authenticated identity does not own the target resource."""

    def __init__(self, detail: str = "You do not have permission to perform this action") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)

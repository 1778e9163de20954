from app.errors.auth import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotAuthenticatedError,
    TokenExpiredError,
    UserAuthenticationError,
    auth_exception_handler,
)
from app.errors.base import BaseAppError, create_exception_handler
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    RecordNotFoundError,
    database_exception_handler,
)
from app.errors.http import http_exception_handler
from app.errors.password_hasher import (
    PasswordHashingError,
    password_hashing_exception_handler,
)
from app.errors.validation import (
    ValidationError,
    app_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NotAuthenticatedError",
    "PasswordHashingError",
    "RecordNotFoundError",
    "TokenExpiredError",
    "UserAuthenticationError",
    "ValidationError",
    "app_validation_exception_handler",
    "auth_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "http_exception_handler",
    "password_hashing_exception_handler",
    "validation_exception_handler",
]

from app.schemas.auth import AuthResponse, ProfileResponse, TokenData
from app.schemas.blog import (
    AuthorResponse,
    BlogCreate,
    BlogEnvelope,
    BlogPageResponse,
    BlogResponse,
    BlogUpdate,
    Pagination,
    SearchResponse,
)
from app.schemas.common import ErrorResponse, HealthResponse, MessageResponse
from app.schemas.user import UserCreate, UserLogin, UserResponse, UserUpdate

__all__ = [
    "AuthResponse",
    "AuthorResponse",
    "BlogCreate",
    "BlogEnvelope",
    "BlogPageResponse",
    "BlogResponse",
    "BlogUpdate",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "Pagination",
    "ProfileResponse",
    "SearchResponse",
    "TokenData",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserUpdate",
]

from pydantic import BaseModel

from app.schemas.user import UserResponse


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    user_id: int
    username: str | None = None
    jti: str
    token_type: str = "access"


class ProfileResponse(BaseModel):
    """Envelope carrying a single public user."""

    message: str
    user: UserResponse


class AuthResponse(ProfileResponse):
    """Envelope returned by register and login."""

    token: str

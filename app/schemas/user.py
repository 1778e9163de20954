"""
User schemas for request bodies and public projections.

The password hash never appears in any model in this module; ``UserResponse``
is the only shape an identity takes on the way out.
"""

from datetime import datetime
from re import compile as re_compile
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    SecretStr,
    StringConstraints,
    field_validator,
)

from app.configs.settings import PASSWORD_MIN_LENGTH, USERNAME_MAX_LENGTH, USERNAME_MIN_LENGTH

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"
_PASSWORD_STRENGTH = re_compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

Username = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
    ),
]


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class UserCreate(BaseModel):
    """User creation model (for request body - excludes auto-generated fields)."""

    model_config = ConfigDict(frozen=True)

    username: Username = Field(..., description="Username", examples=["johndoe"])
    email: EmailStr = Field(..., description="Email address", examples=["johndoe@example.com"])
    password: SecretStr = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        description="Password",
        examples=["Password123"],
    )
    avatar: HttpUrl | None = Field(default=None, description="Avatar URL")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        """Store and compare emails in lower case."""
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: SecretStr) -> SecretStr:
        """Require at least one lowercase letter, one uppercase letter and one digit."""
        if not _PASSWORD_STRENGTH.match(v.get_secret_value()):
            mssg = (
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number"
            )
            raise ValueError(mssg)
        return v


class UserLogin(BaseModel):
    """Credentials presented to the login endpoint."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr = Field(..., examples=["johndoe@example.com"])
    password: SecretStr = Field(..., min_length=1, examples=["Password123"])

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserUpdate(BaseModel):
    """Profile update model; omitted fields keep their current value."""

    username: Username | None = Field(default=None, description="Username")
    email: EmailStr | None = Field(default=None, description="Email address")
    avatar: HttpUrl | None = Field(default=None, description="Avatar URL")

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return _normalize_email(v) if v is not None else None


class UserResponse(BaseModel):
    """Public projection of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    avatar: str | None = None
    created_at: datetime
    updated_at: datetime

"""User database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from app.configs.settings import URL_MAX_LENGTH, USERNAME_MAX_LENGTH


class UserDB(SQLModel, table=True):
    """
    User database model for PostgreSQL.

    This model represents the users table in the database. The password hash
    lives here only; every outward projection goes through ``UserResponse``.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    # Primary key
    id: int | None = Field(
        default=None,
        primary_key=True,
        description="User ID",
    )

    # Required fields
    username: str = Field(
        sa_column=Column(String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True),
        description="Username (unique)",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique, lower case)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Argon2id password hash",
    )

    # Optional profile fields
    avatar: str | None = Field(
        default=None,
        sa_column=Column(String(URL_MAX_LENGTH)),
        description="Avatar URL",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "username": "johndoe",
                "email": "johndoe@example.com",
                "avatar": "https://example.com/avatar.png",
            },
        },
    )

"""Blog database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast

from pydantic import ConfigDict
from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, Relationship, SQLModel, String

from app.configs.settings import EXCERPT_MAX_LENGTH, TITLE_MAX_LENGTH, URL_MAX_LENGTH
from app.models.user import UserDB


class BlogDB(SQLModel, table=True):
    """
    Blog database model for PostgreSQL.

    This model represents the blogs table in the database with a foreign key
    to the users table. Deleting a user deletes their posts at the database
    level. The author is loaded with every select through a joined load.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (
        Index("ix_blogs_tags_gin", "tags", postgresql_using="gin"),
        Index("ix_blogs_author_created", "author_id", "created_at"),
    )

    # Primary key
    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Blog ID",
    )

    # Foreign key to User
    author_id: int = Field(
        sa_column=Column(
            "author_id",
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(TITLE_MAX_LENGTH), nullable=False),
        description="Blog title",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Blog content",
    )

    # Optional fields
    excerpt: str | None = Field(
        default=None,
        sa_column=Column(String(EXCERPT_MAX_LENGTH)),
        description="Short excerpt",
    )
    hero_image: str | None = Field(
        default=None,
        sa_column=Column(String(URL_MAX_LENGTH)),
        description="Hero image URL",
    )

    # Ordered tag list (stored as a JSON array in PostgreSQL)
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False, server_default="[]"),
        description="Blog tags for categorization",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    author: UserDB | None = Relationship(sa_relationship_kwargs={"lazy": "joined"})

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "author_id": 1,
                "title": "Getting started with PostgreSQL",
                "content": "PostgreSQL is a powerful relational database...",
                "excerpt": "A short tour of PostgreSQL",
                "tags": ["databases", "postgres"],
            },
        },
    )

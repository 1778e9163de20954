"""
Blog schemas for request bodies, projections and paginated envelopes.

Create and update bodies share the same field rules; the update body makes
every field optional so handlers can merge it over the stored post.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, StringConstraints

from app.configs.settings import (
    CONTENT_MIN_LENGTH,
    EXCERPT_MAX_LENGTH,
    TAG_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)

Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH),
]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=CONTENT_MIN_LENGTH)]
Excerpt = Annotated[str, StringConstraints(strip_whitespace=True, max_length=EXCERPT_MAX_LENGTH)]
Tag = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=TAG_MAX_LENGTH),
]


class AuthorResponse(BaseModel):
    """Author information for blog responses (without sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    avatar: str | None = None


class BlogCreate(BaseModel):
    """Blog creation model (for request body - excludes auto-generated fields)."""

    title: Title = Field(..., description="Blog title", examples=["Getting started with PostgreSQL"])
    content: Content = Field(
        ...,
        description="Blog content",
        examples=["PostgreSQL is a powerful, open source object-relational database."],
    )
    excerpt: Excerpt | None = Field(default=None, description="Short excerpt")
    hero_image: HttpUrl | None = Field(default=None, description="Hero image URL")
    tags: list[Tag] = Field(
        default_factory=list,
        description="Blog tags for categorization (order is kept)",
        examples=[["databases", "postgres"]],
    )


class BlogUpdate(BaseModel):
    """Blog update model; omitted fields keep their current value."""

    title: Title | None = None
    content: Content | None = None
    excerpt: Excerpt | None = None
    hero_image: HttpUrl | None = None
    tags: list[Tag] | None = None


class BlogResponse(BaseModel):
    """Blog post as returned to clients, with its author joined in."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    excerpt: str | None = None
    hero_image: str | None = None
    author_id: int
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    author: AuthorResponse | None = None


class BlogEnvelope(BaseModel):
    message: str
    blog: BlogResponse


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class BlogPageResponse(BaseModel):
    """One page of posts plus pagination metadata."""

    message: str
    blogs: list[BlogResponse]
    pagination: Pagination


class SearchResponse(BlogPageResponse):
    """Search results echo the search term back as ``searchTerm``."""

    model_config = ConfigDict(populate_by_name=True)

    search_term: str = Field(alias="searchTerm")

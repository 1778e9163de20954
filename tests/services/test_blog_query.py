"""Tests for listing filters and update merging."""

from datetime import UTC, datetime

import pytest

from app.errors import ValidationError
from app.models import BlogDB
from app.schemas.blog import BlogUpdate
from app.schemas.user import UserResponse
from app.services.blog_query import (
    BlogListQuery,
    build_blog_filter,
    merge_blog_update,
    parse_tags,
)

_NOW = datetime(2025, 1, 1, tzinfo=UTC)


@pytest.fixture
def caller() -> UserResponse:
    return UserResponse(
        id=1,
        username="johndoe",
        email="johndoe@example.com",
        created_at=_NOW,
        updated_at=_NOW,
    )


class TestParseTags:
    def test_none_and_empty(self) -> None:
        assert parse_tags(None) == ()
        assert parse_tags([]) == ()
        assert parse_tags([" , ,"]) == ()

    def test_comma_separated_and_repeated(self) -> None:
        assert parse_tags(["go, infra", "rust", "go"]) == ("go", "infra", "rust")

    def test_order_of_first_occurrence_is_kept(self) -> None:
        assert parse_tags(["b,a,b,c,a"]) == ("b", "a", "c")

    def test_tag_too_long(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_tags(["ok," + "x" * 51])

        assert exc_info.value.status_code == 400
        assert exc_info.value.details[0]["field"] == "tags"


class TestBuildBlogFilter:
    def test_authenticated_without_author_is_scoped(self, caller: UserResponse) -> None:
        assert build_blog_filter(BlogListQuery(), caller).author_id == caller.id

    def test_anonymous_without_author_sees_everyone(self) -> None:
        assert build_blog_filter(BlogListQuery(), None).author_id is None

    @pytest.mark.parametrize("authenticated", [True, False])
    def test_explicit_author(self, caller: UserResponse, authenticated: bool) -> None:
        blog_filter = build_blog_filter(
            BlogListQuery(author=7),
            caller if authenticated else None,
        )

        assert blog_filter.author_id == 7

    def test_scope_can_be_disabled(self, caller: UserResponse) -> None:
        blog_filter = build_blog_filter(BlogListQuery(), caller, scope_to_caller=False)

        assert blog_filter.author_id is None

    def test_search_is_trimmed_and_blank_dropped(self) -> None:
        assert build_blog_filter(BlogListQuery(search="  go  "), None).search == "go"
        assert build_blog_filter(BlogListQuery(search="   "), None).search is None

    def test_tags_and_paging_carry_over(self) -> None:
        blog_filter = build_blog_filter(
            BlogListQuery(page=4, limit=25, tags=("go", "infra")),
            None,
        )

        assert blog_filter.tags == ("go", "infra")
        assert blog_filter.page == 4
        assert blog_filter.limit == 25
        assert blog_filter.offset == 75


class TestMergeBlogUpdate:
    @pytest.fixture
    def stored(self) -> BlogDB:
        return BlogDB(
            id=5,
            author_id=1,
            title="Stored title",
            content="Stored content body",
            excerpt="Stored excerpt",
            hero_image="https://example.com/hero.png",
            tags=["go"],
            created_at=_NOW,
            updated_at=_NOW,
        )

    def test_unsent_fields_are_kept(self, stored: BlogDB) -> None:
        merged = merge_blog_update(stored, BlogUpdate.model_validate({"title": "New title"}))

        assert merged.title == "New title"
        assert merged.content == stored.content
        assert merged.excerpt == "Stored excerpt"
        assert str(merged.hero_image) == "https://example.com/hero.png"
        assert merged.tags == ["go"]

    def test_explicit_null_clears_optional_fields(self, stored: BlogDB) -> None:
        merged = merge_blog_update(
            stored,
            BlogUpdate.model_validate({"excerpt": None, "hero_image": None}),
        )

        assert merged.excerpt is None
        assert merged.hero_image is None
        assert merged.title == stored.title

    def test_null_tags_keep_stored_tags(self, stored: BlogDB) -> None:
        merged = merge_blog_update(stored, BlogUpdate.model_validate({"tags": None}))

        assert merged.tags == ["go"]

    def test_empty_tags_clear_them(self, stored: BlogDB) -> None:
        merged = merge_blog_update(stored, BlogUpdate.model_validate({"tags": []}))

        assert merged.tags == []

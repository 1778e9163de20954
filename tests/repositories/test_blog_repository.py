"""Tests for blog queries: filter translation and paging."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import and_
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql import ClauseElement

from app.errors import RecordNotFoundError
from app.models import BlogDB
from app.repositories import BlogFilter, BlogRepository
from app.repositories.blog import build_conditions, escape_like
from app.schemas.blog import BlogCreate


def _sql(clause: ClauseElement) -> str:
    return str(clause.compile(dialect=postgresql.dialect()))


def _params(clause: ClauseElement) -> dict:
    return clause.compile(dialect=postgresql.dialect()).params


def _result(*, scalar: int | None = None, rows: list | None = None) -> MagicMock:
    result = MagicMock()
    result.scalar.return_value = scalar
    result.scalar_one_or_none.return_value = rows[0] if rows else None
    result.scalars.return_value.all.return_value = rows or []
    return result


class TestEscapeLike:
    @pytest.mark.parametrize(
        ("term", "expected"),
        [
            ("plain", "plain"),
            ("100%", "100\\%"),
            ("snake_case", "snake\\_case"),
            ("back\\slash", "back\\\\slash"),
        ],
    )
    def test_wildcards_are_escaped(self, term: str, expected: str) -> None:
        assert escape_like(term) == expected


class TestBuildConditions:
    def test_empty_filter_has_no_conditions(self) -> None:
        assert build_conditions(BlogFilter()) == []

    def test_author(self) -> None:
        (condition,) = build_conditions(BlogFilter(author_id=3))

        assert "blogs.author_id = " in _sql(condition)
        assert 3 in _params(condition).values()

    def test_search_is_case_insensitive_over_three_columns(self) -> None:
        (condition,) = build_conditions(BlogFilter(search="50%_off"))

        sql = _sql(condition)
        assert sql.count("ILIKE") == 3
        for column in ("blogs.title", "blogs.content", "blogs.excerpt"):
            assert column in sql
        assert "ESCAPE" in sql
        assert "%50\\%\\_off%" in _params(condition).values()

    def test_tags_use_jsonb_overlap(self) -> None:
        (condition,) = build_conditions(BlogFilter(tags=("go", "infra")))

        sql = _sql(condition)
        assert "blogs.tags ?| ARRAY[" in sql
        assert set(_params(condition).values()) >= {"go", "infra"}

    def test_all_conditions_are_combined(self) -> None:
        conditions = build_conditions(BlogFilter(author_id=1, search="go", tags=("go",)))

        assert len(conditions) == 3
        assert _sql(and_(*conditions)).count(" AND ") >= 2


class TestFindAll:
    @pytest.mark.asyncio
    async def test_counts_then_pages_newest_first(self) -> None:
        blog = BlogDB(id=1, author_id=1, title="t", content="content", tags=[])
        session = AsyncMock()
        session.execute.side_effect = [_result(scalar=21), _result(rows=[blog])]
        repo = BlogRepository(session)

        page = await repo.find_all(BlogFilter(author_id=1, page=3, limit=10))

        assert page.total == 21
        assert page.items == [blog]
        count_stmt = session.execute.await_args_list[0].args[0]
        page_stmt = session.execute.await_args_list[1].args[0]
        assert "count(*)" in _sql(count_stmt)
        page_sql = _sql(page_stmt)
        assert "ORDER BY blogs.created_at DESC, blogs.id DESC" in page_sql
        assert "LIMIT" in page_sql
        assert "OFFSET" in page_sql
        assert {10, 20} <= set(_params(page_stmt).values())

    @pytest.mark.asyncio
    async def test_count_uses_the_same_filter(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = [_result(scalar=0), _result(rows=[])]

        page = await BlogRepository(session).find_all(BlogFilter(tags=("rust",)))

        assert page.total == 0
        assert page.items == []
        assert "?|" in _sql(session.execute.await_args_list[0].args[0])


class TestUpdate:
    @pytest.mark.asyncio
    async def test_missing_blog(self) -> None:
        session = AsyncMock()
        session.execute.return_value = _result(rows=[])

        with pytest.raises(RecordNotFoundError):
            await BlogRepository(session).update(
                5,
                BlogCreate(title="t", content="long enough content"),
            )

    @pytest.mark.asyncio
    async def test_fields_are_replaced(self) -> None:
        blog = BlogDB(id=5, author_id=1, title="old", content="old content", tags=["a"])
        session = AsyncMock()
        session.add = MagicMock()
        session.execute.return_value = _result(rows=[blog])

        updated = await BlogRepository(session).update(
            5,
            BlogCreate(title="new", content="new content here", tags=["b", "c"]),
        )

        assert updated is blog
        assert blog.title == "new"
        assert blog.tags == ["b", "c"]
        assert blog.excerpt is None
        session.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_by_id_reloads_already_loaded_rows() -> None:
    session = AsyncMock()
    session.execute.return_value = _result(rows=[])

    assert await BlogRepository(session).get_by_id(1) is None

    statement = session.execute.await_args.args[0]
    assert statement.get_execution_options()["populate_existing"] is True
    assert "blogs.id = " in _sql(statement)


@pytest.mark.asyncio
@pytest.mark.parametrize("blog_id", [0, 2**31, 3_000_000_000])
async def test_get_by_id_outside_integer_column_is_none(blog_id: int) -> None:
    session = AsyncMock()

    assert await BlogRepository(session).get_by_id(blog_id) is None
    session.execute.assert_not_awaited()

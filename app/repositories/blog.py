"""Blog repository for database operations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger

from sqlalchemy import Select, and_, desc, func, or_, select
from sqlalchemy.dialects.postgresql import array
from sqlalchemy.sql.expression import ColumnElement

from app.errors.database import DatabaseError, RecordNotFoundError
from app.models.blog import BlogDB
from app.repositories.base import BaseRepository
from app.schemas.blog import BlogCreate
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term only ever matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


@dataclass(frozen=True, slots=True)
class BlogFilter:
    """
    Effective listing filter.

    All present conditions are combined with AND. ``tags`` matches posts that
    share at least one tag with the list.
    """

    author_id: int | None = None
    search: str | None = None
    tags: tuple[str, ...] = ()
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class BlogPage:
    """A page of posts and the number of posts matching the filter overall."""

    items: list[BlogDB] = field(default_factory=list)
    total: int = 0


def build_conditions(blog_filter: BlogFilter) -> list[ColumnElement[bool]]:
    """
    Translate a filter into SQL conditions.

    Args:
        blog_filter: Filter to translate

    Returns:
        list: Conditions to be combined conjunctively
    """
    conditions: list[ColumnElement[bool]] = []

    if blog_filter.author_id is not None:
        conditions.append(BlogDB.author_id == blog_filter.author_id)  # type: ignore[arg-type]

    if blog_filter.search:
        pattern = f"%{escape_like(blog_filter.search)}%"
        conditions.append(
            or_(
                BlogDB.title.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore[attr-defined]
                BlogDB.content.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore[attr-defined]
                BlogDB.excerpt.ilike(pattern, escape=LIKE_ESCAPE),  # type: ignore[union-attr]
            ),
        )

    if blog_filter.tags:
        # jsonb ?| text[], served by the GIN index on tags
        conditions.append(BlogDB.tags.has_any(array(list(blog_filter.tags))))  # type: ignore[attr-defined]

    return conditions


class BlogRepository(BaseRepository[BlogDB]):
    """
    Repository for Blog database operations.

    Every post read through this repository carries its author, loaded by
    the joined relationship on ``BlogDB``.
    """

    model = BlogDB

    async def create(self, blog: BlogCreate, author_id: int) -> BlogDB:
        """
        Create a new blog post in the database.

        Args:
            blog: Blog schema with blog data
            author_id: ID of the blog author

        Returns:
            BlogDB: Created blog with its author loaded

        Raises:
            DatabaseError: If the post cannot be read back after insert
        """
        now = datetime.now(tz=UTC)
        db_blog = BlogDB(
            author_id=author_id,
            title=blog.title,
            content=blog.content,
            excerpt=blog.excerpt,
            hero_image=str(blog.hero_image) if blog.hero_image else None,
            tags=list(blog.tags),
            created_at=now,
            updated_at=now,
        )
        self.session.add(db_blog)
        await self.session.flush()

        if db_blog.id is None:
            raise DatabaseError(detail="Blog insert did not return an id")
        created = await self.get_by_id(db_blog.id)
        if created is None:
            raise DatabaseError(detail=f"Blog {db_blog.id} vanished after insert")
        logger.info(f"Blog {created.id} created by user {author_id}")
        return created

    def _select_filtered(self, conditions: list[ColumnElement[bool]]) -> Select:
        statement = select(BlogDB)
        if conditions:
            statement = statement.where(and_(*conditions))
        return statement

    def _count_filtered(self, conditions: list[ColumnElement[bool]]) -> Select:
        statement = select(func.count()).select_from(BlogDB)
        if conditions:
            statement = statement.where(and_(*conditions))
        return statement

    async def find_all(self, blog_filter: BlogFilter) -> BlogPage:
        """
        Get one page of posts matching a filter, newest first.

        Args:
            blog_filter: Effective filter including page and limit

        Returns:
            BlogPage: Posts on the requested page and the overall match count
        """
        conditions = build_conditions(blog_filter)

        total = (await self.session.execute(self._count_filtered(conditions))).scalar() or 0

        statement = (
            self._select_filtered(conditions)
            .order_by(desc(BlogDB.created_at), desc(BlogDB.id))  # type: ignore[arg-type]
            .offset(blog_filter.offset)
            .limit(blog_filter.limit)
        )
        result = await self.session.execute(statement)
        items = list(result.scalars().all())

        logger.debug(f"Found {total} blogs for {blog_filter}, returning {len(items)}")
        return BlogPage(items=items, total=total)

    async def update(self, blog_id: int, blog: BlogCreate) -> BlogDB:
        """
        Replace the editable fields of a post.

        Ownership is not checked here; callers must do it first.

        Args:
            blog_id: Blog ID
            blog: Fully merged post fields

        Returns:
            BlogDB: Updated blog with its author loaded

        Raises:
            RecordNotFoundError: If no post has this ID
        """
        db_blog = await self.get_by_id(blog_id)
        if not db_blog:
            raise RecordNotFoundError(detail="Blog not found")

        db_blog.title = blog.title
        db_blog.content = blog.content
        db_blog.excerpt = blog.excerpt
        db_blog.hero_image = str(blog.hero_image) if blog.hero_image else None
        db_blog.tags = list(blog.tags)
        db_blog.updated_at = datetime.now(tz=UTC)

        await self.session.flush()
        updated = await self.get_by_id(blog_id)
        if updated is None:
            raise RecordNotFoundError(detail="Blog not found")
        return updated

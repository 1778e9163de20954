"""
Listing filters and update merging for blog posts.

Everything here is pure: no I/O, no framework objects. Route handlers build a
``BlogListQuery`` from request parameters once, then derive the effective
``BlogFilter`` from it and from the caller's identity.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from app.configs.settings import TAG_MAX_LENGTH, settings
from app.errors.validation import ValidationError
from app.models import BlogDB
from app.repositories.blog import BlogFilter
from app.schemas.blog import BlogCreate, BlogUpdate
from app.schemas.user import UserResponse


@dataclass(frozen=True, slots=True)
class BlogListQuery:
    """Validated listing parameters as sent by the client."""

    page: int = 1
    limit: int = settings.DEFAULT_PAGE_SIZE
    search: str | None = None
    tags: tuple[str, ...] = ()
    author: int | None = None


def parse_tags(raw: Iterable[str] | None) -> tuple[str, ...]:
    """
    Normalise tag query values.

    Accepts repeated values and comma separated lists (or both). Values are
    trimmed, empties dropped and duplicates removed keeping first occurrence.

    Raises:
        ValidationError: If a tag is longer than the allowed length.

    Examples:
    --------
    >>> parse_tags(["go, infra", "go", " "])
    ('go', 'infra')
    """
    if not raw:
        return ()

    seen: dict[str, None] = {}
    for value in raw:
        for part in value.split(","):
            tag = part.strip()
            if not tag:
                continue
            if len(tag) > TAG_MAX_LENGTH:
                raise ValidationError(
                    details=[
                        {
                            "field": "tags",
                            "message": f"Each tag must be between 1 and {TAG_MAX_LENGTH} characters",
                            "type": "string_too_long",
                        },
                    ],
                )
            seen.setdefault(tag, None)
    return tuple(seen)


def build_blog_filter(
    query: BlogListQuery,
    caller: UserResponse | None,
    *,
    scope_to_caller: bool = True,
) -> BlogFilter:
    """
    Derive the effective listing filter.

    An explicit author wins for every caller. Without one, an authenticated
    caller is scoped to their own posts when ``scope_to_caller`` is set and
    anonymous callers see every author. Search and tags always apply.

    Args:
        query: Listing parameters from the request
        caller: Authenticated user, or None for anonymous requests
        scope_to_caller: Whether an authenticated caller defaults to their own posts

    Returns:
        BlogFilter: Filter to hand to the blog repository
    """
    if query.author is not None:
        author_id: int | None = query.author
    elif caller is not None and scope_to_caller:
        author_id = caller.id
    else:
        author_id = None

    search = query.search.strip() if query.search else None

    return BlogFilter(
        author_id=author_id,
        search=search or None,
        tags=query.tags,
        page=query.page,
        limit=query.limit,
    )


def merge_blog_update(current: BlogDB, changes: BlogUpdate) -> BlogCreate:
    """
    Overlay the fields present in an update body onto the stored post.

    Fields the client did not send keep their stored value. ``excerpt`` and
    ``hero_image`` sent as null are cleared; null title, content or tags are
    treated as not sent.
    """
    sent = changes.model_dump(exclude_unset=True)
    return BlogCreate.model_validate(
        {
            "title": sent.get("title") or current.title,
            "content": sent.get("content") or current.content,
            "excerpt": sent["excerpt"] if "excerpt" in sent else current.excerpt,
            "hero_image": sent["hero_image"] if "hero_image" in sent else current.hero_image,
            "tags": sent["tags"] if sent.get("tags") is not None else current.tags,
        },
    )

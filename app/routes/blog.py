"""
Blog routes.

Listing endpoints accept the optional bearer token: an identified caller
browsing ``/blogs`` without an ``author`` filter sees their own posts, while
anonymous callers see everyone's. Mutations require a token and ownership.
"""

from dataclasses import replace
from typing import Annotated

from fastapi import APIRouter, Path, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from app.auth import check_owner
from app.configs.settings import SEARCH_MAX_LENGTH
from app.decorators import timed
from app.dependencies import BlogQueryListDep, BlogRepoDep, CurrentUserDep, OptionalUserDep
from app.errors.database import RecordNotFoundError
from app.errors.validation import ValidationError
from app.managers import limiter
from app.managers.rate_limiter import READ_LIMIT, WRITE_LIMIT
from app.repositories import BlogPage
from app.schemas.blog import (
    BlogCreate,
    BlogEnvelope,
    BlogPageResponse,
    BlogResponse,
    BlogUpdate,
    Pagination,
    SearchResponse,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.blog_query import BlogListQuery, build_blog_filter, merge_blog_update
from app.utils.helpers import page_count

router = APIRouter(prefix="/blogs", tags=["📝 Blogs"])

_BLOG_EXAMPLE = {
    "id": 1,
    "title": "Getting started with PostgreSQL",
    "content": "PostgreSQL is a powerful, open source object-relational database.",
    "excerpt": "A short tour of PostgreSQL",
    "hero_image": None,
    "author_id": 1,
    "tags": ["databases", "postgres"],
    "created_at": "2025-01-01T10:00:00Z",
    "updated_at": "2025-01-01T10:00:00Z",
    "author": {"id": 1, "username": "johndoe", "email": "johndoe@example.com", "avatar": None},
}
_PAGINATION_EXAMPLE = {"page": 1, "limit": 10, "total": 1, "pages": 1}

_UNAUTHORIZED = {
    "model": ErrorResponse,
    "description": "Missing, invalid or expired token",
    "content": {"application/json": {"example": {"error": "Access denied. No token provided."}}},
}
_NOT_FOUND = {
    "model": ErrorResponse,
    "description": "Blog not found",
    "content": {"application/json": {"example": {"error": "Blog not found"}}},
}
_FORBIDDEN = {
    "model": ErrorResponse,
    "description": "Caller is not the author",
    "content": {
        "application/json": {"example": {"error": "You can only update your own blogs (blog 1)"}},
    },
}

BlogId = Annotated[int, Path(ge=1, description="Blog ID")]


def _pagination(page: BlogPage, query: BlogListQuery) -> tuple[list[BlogResponse], Pagination]:
    blogs = [BlogResponse.model_validate(blog) for blog in page.items]
    return blogs, Pagination(
        page=query.page,
        limit=query.limit,
        total=page.total,
        pages=page_count(page.total, query.limit),
    )


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=BlogPageResponse,
    summary="List blogs",
    description=(
        "Page through posts, newest first. Without an `author` filter an authenticated "
        "caller only sees their own posts and an anonymous caller sees all posts."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Blogs retrieved successfully",
                        "blogs": [_BLOG_EXAMPLE],
                        "pagination": _PAGINATION_EXAMPLE,
                    },
                },
            },
        },
        400: {"model": ErrorResponse, "description": "Malformed pagination or filters"},
    },
    operation_id="blogs_list",
)
@timed("/blogs")
@limiter.limit(READ_LIMIT)
async def list_blogs(
    request: Request,
    query: BlogQueryListDep,
    caller: OptionalUserDep,
    repo: BlogRepoDep,
) -> BlogPageResponse:
    """
    List posts with pagination and filters.

    Parameters
    ----------
    request : Request
        Current request context.
    query : BlogListQuery
        Validated page, limit, search, tags and author parameters.
    caller : UserResponse | None
        Caller if a valid token was sent.
    repo : BlogRepository
        Blog repository dependency.

    Returns
    -------
    BlogPageResponse
        Posts on the page and pagination metadata.
    """
    page = await repo.find_all(build_blog_filter(query, caller))
    blogs, pagination = _pagination(page, query)
    message = "Your blogs retrieved successfully" if caller else "Blogs retrieved successfully"
    return BlogPageResponse(message=message, blogs=blogs, pagination=pagination)


@router.get(
    "/search",
    response_class=ORJSONResponse,
    response_model=SearchResponse,
    summary="Search blogs",
    description="Case-insensitive substring search over title, content and excerpt of all posts.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Search results retrieved successfully",
                        "searchTerm": "postgres",
                        "blogs": [_BLOG_EXAMPLE],
                        "pagination": _PAGINATION_EXAMPLE,
                    },
                },
            },
        },
        400: {
            "model": ErrorResponse,
            "description": "Missing search term",
            "content": {"application/json": {"example": {"error": "Search term is required"}}},
        },
    },
    operation_id="blogs_search",
)
@timed("/blogs/search")
@limiter.limit(READ_LIMIT)
async def search_blogs(
    request: Request,
    query: BlogQueryListDep,
    caller: OptionalUserDep,
    repo: BlogRepoDep,
    q: str | None = None,
) -> SearchResponse:
    """
    Search posts by term.

    Unlike listing, search is never scoped to the caller; only an explicit
    ``author`` narrows it.

    Raises
    ------
    ValidationError
        If ``q`` is missing, blank or too long.
    """
    term = q.strip() if q else ""
    if not term:
        raise ValidationError("Search term is required")
    if len(term) > SEARCH_MAX_LENGTH:
        raise ValidationError(f"Search term must be at most {SEARCH_MAX_LENGTH} characters")

    search_query = replace(query, search=term)
    page = await repo.find_all(build_blog_filter(search_query, caller, scope_to_caller=False))
    blogs, pagination = _pagination(page, search_query)
    return SearchResponse(
        message="Search results retrieved successfully",
        searchTerm=term,
        blogs=blogs,
        pagination=pagination,
    )


@router.get(
    "/user/my-blogs",
    response_class=ORJSONResponse,
    response_model=BlogPageResponse,
    summary="List my blogs",
    description="Posts written by the caller; `search` and `tags` still apply.",
    responses={401: _UNAUTHORIZED},
    operation_id="blogs_list_mine",
)
@timed("/blogs/user/my-blogs")
@limiter.limit(READ_LIMIT)
async def list_my_blogs(
    request: Request,
    query: BlogQueryListDep,
    current_user: CurrentUserDep,
    repo: BlogRepoDep,
) -> BlogPageResponse:
    own_query = replace(query, author=current_user.id)
    page = await repo.find_all(build_blog_filter(own_query, current_user))
    blogs, pagination = _pagination(page, own_query)
    return BlogPageResponse(
        message="User blogs retrieved successfully",
        blogs=blogs,
        pagination=pagination,
    )


@router.get(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Get blog by ID",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog retrieved successfully", "blog": _BLOG_EXAMPLE},
                },
            },
        },
        404: _NOT_FOUND,
    },
    operation_id="blogs_get",
)
@timed("/blogs/by-id")
@limiter.limit(READ_LIMIT)
async def get_blog(
    request: Request,
    caller: OptionalUserDep,
    repo: BlogRepoDep,
    blog_id: BlogId,
) -> BlogEnvelope:
    """
    Get a single post with its author.

    Raises
    ------
    RecordNotFoundError
        If no post has this ID.
    """
    blog = await repo.get_by_id(blog_id)
    if blog is None:
        raise RecordNotFoundError(detail="Blog not found")
    return BlogEnvelope(message="Blog retrieved successfully", blog=BlogResponse.model_validate(blog))


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Create blog",
    description="Create a post authored by the caller.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog created successfully", "blog": _BLOG_EXAMPLE},
                },
            },
        },
        400: {"model": ErrorResponse, "description": "Validation failed"},
        401: _UNAUTHORIZED,
    },
    operation_id="blogs_create",
)
@timed("/blogs/create")
@limiter.limit(WRITE_LIMIT)
async def create_blog(
    request: Request,
    blog_create: BlogCreate,
    current_user: CurrentUserDep,
    repo: BlogRepoDep,
) -> BlogEnvelope:
    """
    Create a post.

    Parameters
    ----------
    request : Request
        Current request context.
    blog_create : BlogCreate
        Title, content and optional excerpt, hero image and tags.
    current_user : UserResponse
        Caller; always becomes the author.
    repo : BlogRepository
        Blog repository dependency.

    Returns
    -------
    BlogEnvelope
        The stored post with its author.
    """
    blog = await repo.create(blog_create, author_id=current_user.id)
    return BlogEnvelope(message="Blog created successfully", blog=BlogResponse.model_validate(blog))


@router.put(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Update blog",
    description="Fields that are not sent keep their current value. Only the author may update.",
    responses={
        400: {"model": ErrorResponse, "description": "Validation failed"},
        401: _UNAUTHORIZED,
        403: _FORBIDDEN,
        404: _NOT_FOUND,
    },
    operation_id="blogs_update",
)
@timed("/blogs/update")
@limiter.limit(WRITE_LIMIT)
async def update_blog(
    request: Request,
    changes: BlogUpdate,
    current_user: CurrentUserDep,
    repo: BlogRepoDep,
    blog_id: BlogId,
) -> BlogEnvelope:
    """
    Update a post owned by the caller.

    Raises
    ------
    RecordNotFoundError
        If no post has this ID (checked before ownership).
    ForbiddenError
        If the caller is not the author.
    """
    existing = check_owner(await repo.get_by_id(blog_id), current_user, blog_id, action="update")
    updated = await repo.update(blog_id, merge_blog_update(existing, changes))
    return BlogEnvelope(message="Blog updated successfully", blog=BlogResponse.model_validate(updated))


@router.delete(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete blog",
    responses={401: _UNAUTHORIZED, 403: _FORBIDDEN, 404: _NOT_FOUND},
    operation_id="blogs_delete",
)
@timed("/blogs/delete")
@limiter.limit(WRITE_LIMIT)
async def delete_blog(
    request: Request,
    current_user: CurrentUserDep,
    repo: BlogRepoDep,
    blog_id: BlogId,
) -> MessageResponse:
    """
    Delete a post owned by the caller.

    Raises
    ------
    RecordNotFoundError
        If no post has this ID, including one removed concurrently.
    ForbiddenError
        If the caller is not the author.
    """
    check_owner(await repo.get_by_id(blog_id), current_user, blog_id, action="delete")
    if not await repo.delete(blog_id):
        raise RecordNotFoundError(detail="Blog not found")
    return MessageResponse(message="Blog deleted successfully")

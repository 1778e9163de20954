# app/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, the auth gate and listing queries."""

from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs.settings import MAX_OFFSET, MAX_RECORD_ID, SEARCH_MAX_LENGTH, settings
from app.db import get_session
from app.errors.auth import NotAuthenticatedError, UserAuthenticationError
from app.monitoring import bind_user_id
from app.repositories import BlogRepository, UserRepository
from app.schemas.user import UserResponse
from app.services import AuthService
from app.services.blog_query import BlogListQuery, parse_tags

bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token")

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_user_repository(session: Annotated[AsyncSession, Depends(get_session)]) -> UserRepository:
    """
    Resolve the `UserRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    UserRepository
        Repository instance bound to the session.
    """
    return UserRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


def get_blog_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BlogRepository:
    """
    Resolve the `BlogRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    BlogRepository
        Repository instance bound to the session.
    """
    return BlogRepository(session)


BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]


def get_auth_service(user_repo: UserRepoDep) -> AuthService:
    return AuthService(user_repo)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def _resolve_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials,
    auth_service: AuthService,
) -> UserResponse:
    user = await auth_service.resolve_token(credentials.credentials)
    if user is None:
        raise NotAuthenticatedError("Access denied. User not found.")

    public = auth_service.user_repo.to_public(user)
    request.state.user = public
    bind_user_id(public.id)
    return public


async def get_current_user(
    request: Request,
    credentials: BearerCredentials,
    auth_service: AuthServiceDep,
) -> UserResponse:
    """
    Require an authenticated caller.

    Parameters
    ----------
    request : Request
        Incoming request; the caller is attached to ``request.state.user``.
    credentials : HTTPAuthorizationCredentials | None
        Bearer credentials, None when the header is absent or not a bearer.
    auth_service : AuthService
        Service resolving tokens to users.

    Returns
    -------
    UserResponse
        Public projection of the caller.

    Raises
    ------
    NotAuthenticatedError
        If no token was sent or its user no longer exists.
    InvalidTokenError
        If the token is malformed or its claims are invalid.
    TokenExpiredError
        If the token is past its expiry.
    """
    if credentials is None:
        raise NotAuthenticatedError
    return await _resolve_caller(request, credentials, auth_service)


async def get_optional_user(
    request: Request,
    credentials: BearerCredentials,
    auth_service: AuthServiceDep,
) -> UserResponse | None:
    """
    Identify the caller when possible, otherwise continue anonymously.

    Verification failures are treated as anonymous; store failures still
    propagate.
    """
    request.state.user = None
    if credentials is None:
        return None
    try:
        return await _resolve_caller(request, credentials, auth_service)
    except UserAuthenticationError:
        return None


CurrentUserDep = Annotated[UserResponse, Depends(get_current_user)]
OptionalUserDep = Annotated[UserResponse | None, Depends(get_optional_user)]


def get_blog_list_query(
    page: Annotated[
        int,
        Query(ge=1, le=MAX_OFFSET // settings.MAX_PAGE_SIZE, description="1-based page number"),
    ] = 1,
    limit: Annotated[
        int,
        Query(ge=1, le=settings.MAX_PAGE_SIZE, description="Maximum number of posts per page"),
    ] = settings.DEFAULT_PAGE_SIZE,
    search: Annotated[
        str | None,
        Query(max_length=SEARCH_MAX_LENGTH, description="Substring matched in title, content or excerpt"),
    ] = None,
    tags: Annotated[
        list[str] | None,
        Query(description="Tags, comma separated and/or repeated; any overlap matches"),
    ] = None,
    author: Annotated[
        int | None,
        Query(ge=1, le=MAX_RECORD_ID, description="Only posts by this author id"),
    ] = None,
) -> BlogListQuery:
    """
    Dependency to construct `BlogListQuery` from query parameters.

    Returns
    -------
    BlogListQuery
        Aggregated query parameters object.
    """
    return BlogListQuery(
        page=page,
        limit=limit,
        search=search,
        tags=parse_tags(tags),
        author=author,
    )


BlogQueryListDep = Annotated[BlogListQuery, Depends(get_blog_list_query)]

# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    AuthServiceDep,
    BlogQueryListDep,
    BlogRepoDep,
    CurrentUserDep,
    OptionalUserDep,
    UserRepoDep,
    get_auth_service,
    get_blog_list_query,
    get_blog_repository,
    get_current_user,
    get_optional_user,
    get_user_repository,
)

__all__ = [
    "AuthServiceDep",
    "BlogQueryListDep",
    "BlogRepoDep",
    "CurrentUserDep",
    "OptionalUserDep",
    "UserRepoDep",
    "get_auth_service",
    "get_blog_list_query",
    "get_blog_repository",
    "get_current_user",
    "get_optional_user",
    "get_user_repository",
]

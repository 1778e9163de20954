"""Repository layer for database operations."""

from app.repositories.base import BaseRepository
from app.repositories.blog import BlogFilter, BlogPage, BlogRepository
from app.repositories.user import UserRepository

__all__ = ["BaseRepository", "BlogFilter", "BlogPage", "BlogRepository", "UserRepository"]

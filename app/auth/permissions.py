"""Ownership checks for blog mutations."""

from typing import TYPE_CHECKING

from app.errors.auth import ForbiddenError
from app.errors.database import RecordNotFoundError

if TYPE_CHECKING:
    from app.models import BlogDB
    from app.schemas.user import UserResponse


def is_owner(blog: "BlogDB", caller: "UserResponse") -> bool:
    """Return True if the caller wrote the post."""
    return blog.author_id == caller.id


def check_owner(
    blog: "BlogDB | None",
    caller: "UserResponse",
    blog_id: int,
    action: str = "modify",
) -> "BlogDB":
    """
    Ensure a post exists and belongs to the caller.

    Existence is checked before ownership, so a missing post is always a 404
    whoever asks.

    Parameters
    ----------
    blog : BlogDB | None
        Post as loaded by the repository.
    caller : UserResponse
        Authenticated caller.
    blog_id : int
        Requested post id, used in the error message.
    action : str
        Verb for the error message ("update", "delete").

    Returns
    -------
    BlogDB
        The post, for chaining.

    Raises
    ------
    RecordNotFoundError
        If the post does not exist.
    ForbiddenError
        If the caller is not the author.
    """
    if blog is None:
        raise RecordNotFoundError(detail="Blog not found")
    if not is_owner(blog, caller):
        raise ForbiddenError(detail=f"You can only {action} your own blogs (blog {blog_id})")
    return blog

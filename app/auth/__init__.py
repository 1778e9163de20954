"""Authorization helpers."""

from app.auth.permissions import check_owner, is_owner

__all__ = ["check_owner", "is_owner"]

"""Utility helper functions."""

from app.utils.helpers import file_logger, get_summary, host, page_count, today_str

__all__ = [
    "file_logger",
    "get_summary",
    "host",
    "page_count",
    "today_str",
]

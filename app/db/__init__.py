"""Database engine, sessions and lifecycle helpers."""

from app.db.database import (
    async_session_maker,
    close_db,
    engine,
    get_session,
    init_db,
    ping_db,
    transaction,
)

__all__ = [
    "async_session_maker",
    "close_db",
    "engine",
    "get_session",
    "init_db",
    "ping_db",
    "transaction",
]

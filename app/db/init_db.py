"""
Database initialization and verification script.

This script verifies database connectivity and creates missing tables. It can
be run independently with ``python -m app.db.init_db``.

Note:
    Deployed schemas are managed by Alembic migrations.
    Run 'alembic upgrade head' to apply migrations.
"""

from asyncio import run as asyncio_run
from logging import getLogger

from sqlalchemy.exc import SQLAlchemyError

from app.db.database import close_db, init_db
from app.errors.database import DatabaseInitializationError
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))


async def main() -> None:
    """Verify database connection and create tables."""
    try:
        logger.info("Verifying database connection...")
        await init_db()
        logger.info("Database ready!")
    except (SQLAlchemyError, OSError) as e:
        logger.exception("Failed to connect to database")
        raise DatabaseInitializationError from e
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio_run(main())

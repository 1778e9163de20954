"""Base repository for database operations."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.configs.settings import MAX_RECORD_ID
from app.errors.database import DatabaseError, DuplicateEntryError

type FilterValue = str | int | float | bool | datetime | None


class BaseRepository[ModelT: SQLModel]:
    """
    Base repository implementing common CRUD operations.

    This class provides a generic implementation of database operations
    that can be extended by specific entity repositories.

    Attributes:
        model: The SQLModel database model type.
        id_field: The name of the primary key field (default: "id").
    """

    model: type[ModelT]
    id_field: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def get_by_id(self, record_id: int) -> ModelT | None:
        """
        Get a record by its ID.

        Args:
            record_id: Record ID

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        if not 1 <= record_id <= MAX_RECORD_ID:
            return None
        return await self.get_by_field(self.id_field, record_id)

    async def get_by_field(
        self,
        field_name: str,
        value: FilterValue,
    ) -> ModelT | None:
        """
        Get a record by a specific field value.

        Args:
            field_name: Name of the field to search
            value: Value to search for

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        field = getattr(self.model, field_name)
        statement = select(self.model).where(field == value).execution_options(populate_existing=True)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def delete(self, record_id: int) -> bool:
        """
        Delete a record by ID.

        Args:
            record_id: Record ID

        Returns:
            bool: True if record was deleted, False if not found
        """
        record = await self.get_by_id(record_id)
        if not record:
            return False

        await self.session.delete(record)
        await self.session.flush()
        return True

    async def _add_and_refresh(
        self,
        record: ModelT,
        duplicate_detail: str = "A record with this value already exists",
    ) -> ModelT:
        """
        Add a record, flush it and refresh it from the database.

        Args:
            record: Record to add
            duplicate_detail: Message used when a unique constraint is violated

        Returns:
            ModelT: Refreshed record

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            DatabaseError: For other integrity errors
        """
        try:
            self.session.add(record)
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
                raise DuplicateEntryError(detail=duplicate_detail) from e
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e
        await self.session.refresh(record)
        return record

    async def _check_exists_by_field(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: int | None = None,
    ) -> bool:
        """
        Check if a record exists with a specific field value.

        Args:
            field_name: Name of the field to check
            value: Value to check for
            exclude_id: Optional ID to exclude from check (for updates)

        Returns:
            bool: True if record exists, False otherwise
        """
        field = getattr(self.model, field_name)
        statement = select(1).where(field == value)

        if exclude_id is not None:
            id_column = getattr(self.model, self.id_field)
            statement = statement.where(id_column != exclude_id)

        statement = statement.limit(1)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none() is not None

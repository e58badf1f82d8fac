"""Base service class with transaction management for database operations."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, List, Optional, TypeVar

from sqlalchemy import Result, Select, func, select
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AppError,
    DatabaseConnectionError,
    InvalidFilterError,
    RecordNotFoundError,
)
from app.models.base import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseService(Generic[T]):
    """Base service class managing database transactions for model operations.

    Provides automatic transaction management using direct SQLAlchemy queries:
    - Write operations run inside ``transaction()`` and commit once at the end
    - Read operations (get_by_id, find, count) don't commit
    - All errors trigger automatic rollback

    Ownership: every user-facing lookup goes through ``get_owned_or_fail``,
    which treats "absent" and "owned by someone else" identically so the
    existence of other users' records is never revealed.

    Usage:
        class SubjectService(BaseService[Subject]):
            model = Subject

        service = SubjectService(db_session)
        subject = await service.get_owned_or_fail(subject_id, user_id)

    Attributes:
        db: Database session for operations
        model: Model class this service manages
    """

    model: type[T]

    def __init__(self, db: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            db: Database session for operations
        """
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Run a unit of work and commit it atomically.

        Application errors roll back and propagate unchanged; SQLAlchemy
        errors roll back and are re-raised as DatabaseConnectionError.

        Args:
            operation: Short name used in logs and error messages

        Yields:
            The service's database session
        """
        try:
            yield self.db
            await self.db.commit()
        except AppError:
            await self.db.rollback()
            raise
        except (IntegrityError, DBAPIError, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.error(
                f"Failed to {operation} {self.model_name}",
                extra={"model": self.model_name, "error": str(e)},
                exc_info=True,
            )
            if isinstance(e, IntegrityError):
                raise DatabaseConnectionError(
                    f"Integrity constraint violation: {str(e)}"
                ) from e
            raise DatabaseConnectionError(
                f"Database error during {operation}: {str(e)}"
            ) from e

    async def get_by_id(self, record_id: int) -> Optional[T]:
        """Retrieve a record by its primary key ID.

        This is a read operation and does not commit the transaction.

        Args:
            record_id: Primary key ID

        Returns:
            Model instance or None if not found

        Raises:
            DatabaseConnectionError: If database operation fails
        """
        try:
            result = await self.db.execute(
                select(self.model).where(self.model.id == record_id)
            )
            return result.scalar_one_or_none()
        except (DBAPIError, SQLAlchemyError) as e:
            logger.error(
                f"Failed to get {self.model_name} by id",
                extra={"model": self.model_name, "id": record_id, "error": str(e)},
                exc_info=True,
            )
            raise DatabaseConnectionError(f"Database error during get: {str(e)}") from e

    async def get_owned(self, record_id: int, user_id: int) -> Optional[T]:
        """Retrieve a record only if it belongs to ``user_id``.

        Models scoped through a parent override this.

        Args:
            record_id: Primary key ID
            user_id: Caller's user id

        Returns:
            Model instance or None if absent or owned by another user
        """
        record = await self.get_by_id(record_id)
        if record is None or record.user_id != user_id:
            return None
        return record

    async def get_owned_or_fail(self, record_id: int, user_id: int) -> T:
        """Retrieve an owned record or raise RecordNotFoundError.

        Args:
            record_id: Primary key ID
            user_id: Caller's user id

        Returns:
            Model instance

        Raises:
            RecordNotFoundError: If absent or owned by another user
        """
        record = await self.get_owned(record_id, user_id)
        if record is None:
            logger.debug(
                f"{self.model_name} not found for user",
                extra={"model": self.model_name, "id": record_id, "user_id": user_id},
            )
            raise RecordNotFoundError(self.model_name, record_id)
        return record

    def _where(self, query: Select, filters: dict[str, Any]) -> Select:
        """Add ``column == value`` clauses, rejecting unknown columns."""
        for key, value in filters.items():
            if not hasattr(self.model, key):
                raise InvalidFilterError(
                    f"Invalid filter key '{key}' for model {self.model_name}"
                )
            query = query.where(getattr(self.model, key) == value)
        return query

    async def _run_read(self, operation: str, query: Select, filters: dict) -> Result:
        try:
            return await self.db.execute(query)
        except (DBAPIError, SQLAlchemyError) as e:
            logger.error(
                f"Failed to {operation} {self.model_name}",
                extra={"model": self.model_name, "filters": filters, "error": str(e)},
                exc_info=True,
            )
            raise DatabaseConnectionError(
                f"Database error during {operation}: {str(e)}"
            ) from e

    async def find(self, **filters: Any) -> List[T]:
        """Records whose columns equal the given values. Does not commit.

        Raises:
            InvalidFilterError: If a filter names an unknown column
            DatabaseConnectionError: If database operation fails
        """
        query = self._where(select(self.model), filters)
        result = await self._run_read("find", query, filters)
        return list(result.scalars().all())

    async def count(self, **filters: Any) -> int:
        """Number of records matching ``filters``; see ``find``."""
        query = self._where(select(func.count(self.model.id)), filters)
        result = await self._run_read("count", query, filters)
        return result.scalar_one()

    def apply_changes(self, record: T, changes: dict[str, Any]) -> T:
        """Set attributes on a loaded record without flushing.

        Raises:
            InvalidFilterError: If an attribute does not exist on the model
        """
        for key, value in changes.items():
            if not hasattr(record, key):
                raise InvalidFilterError(
                    f"Invalid attribute '{key}' for model {self.model_name}"
                )
            setattr(record, key, value)
        return record

    async def delete_owned(self, record_id: int, user_id: int) -> None:
        """Delete an owned record and commit transaction.

        Args:
            record_id: Primary key ID of record to delete
            user_id: Caller's user id

        Raises:
            RecordNotFoundError: If absent or owned by another user
            DatabaseConnectionError: If database operation fails
        """
        record = await self.get_owned_or_fail(record_id, user_id)
        async with self.transaction("delete"):
            await self.db.delete(record)
            await self.db.flush()
        logger.debug(
            f"Deleted {self.model_name}",
            extra={"model": self.model_name, "id": record_id, "user_id": user_id},
        )

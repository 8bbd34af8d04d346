"""
Base Data Access Object (DAO) class.

WHY: The DAO pattern separates database operations from business logic,
making the service layer testable without a database.
"""

import logging
from typing import Generic, TypeVar, Type, Optional, List, Any

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from subs_aggregator.core.exceptions import StorageError
from subs_aggregator.models.base import Base

logger = logging.getLogger(__name__)

# Type variable for model class
ModelType = TypeVar("ModelType", bound=Base)


class BaseDAO(Generic[ModelType]):
    """
    Base Data Access Object providing CRUD operations for a model.

    Every database error is converted to ``StorageError`` here, so callers
    only ever see the application exception hierarchy.

    Type Parameters:
        ModelType: The SQLAlchemy model class this DAO manages
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize DAO with model class and database session.

        Args:
            model: The SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    def _storage_error(self, operation: str, exc: SQLAlchemyError) -> StorageError:
        """Log a driver failure and wrap it for the service layer."""
        logger.error(
            "%s.%s: database failure on %s: %s",
            self.__class__.__name__,
            operation,
            self.model.__tablename__,
            exc,
        )
        return StorageError(cause=exc, operation=operation)

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Field values for the new record

        Returns:
            The created model instance with database-generated fields populated

        Raises:
            StorageError: If the insert fails
        """
        instance = self.model(**kwargs)
        try:
            self.session.add(instance)
            await self.session.flush()  # Flush to get auto-generated fields
            await self.session.refresh(instance)
        except SQLAlchemyError as exc:
            raise self._storage_error("create", exc) from exc
        return instance

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """
        Retrieve a single record by primary key.

        Args:
            id: Primary key value

        Returns:
            The model instance if found, None otherwise
        """
        return await self._get_instance(id)

    async def _get_instance(self, id: int) -> Optional[ModelType]:
        """Primary key lookup shared by get_by_id, update and delete."""
        try:
            result = await self.session.execute(select(self.model).where(self.model.id == id))
        except SQLAlchemyError as exc:
            raise self._storage_error("get_by_id", exc) from exc
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: Optional[int] = None) -> List[ModelType]:
        """
        Retrieve records in primary key order, optionally paginated.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return (None = no limit)

        Returns:
            List of model instances
        """
        query = select(self.model).order_by(self.model.id).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise self._storage_error("get_all", exc) from exc
        return list(result.scalars().all())

    async def update(self, id: int, **kwargs: Any) -> Optional[ModelType]:
        """
        Overwrite fields of an existing record.

        Args:
            id: Primary key of the record to update
            **kwargs: Fields to update

        Returns:
            Updated model instance if found, None otherwise
        """
        instance = await self._get_instance(id)
        if instance is None:
            return None

        for field, value in kwargs.items():
            setattr(instance, field, value)
        try:
            await self.session.flush()
            await self.session.refresh(instance)
        except SQLAlchemyError as exc:
            raise self._storage_error("update", exc) from exc
        return instance

    async def delete(self, id: int) -> bool:
        """
        Hard-delete a record by primary key.

        Args:
            id: Primary key of the record to delete

        Returns:
            True if a record was deleted, False if not found
        """
        instance = await self._get_instance(id)
        if instance is None:
            return False

        try:
            await self.session.delete(instance)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise self._storage_error("delete", exc) from exc
        return True

    async def count(self) -> int:
        """
        Count all records of the model.

        Returns:
            Number of rows in the table
        """
        try:
            result = await self.session.execute(select(func.count()).select_from(self.model))
        except SQLAlchemyError as exc:
            raise self._storage_error("count", exc) from exc
        return int(result.scalar_one())

"""
Base repository with CRUD operations and error translation.

Repositories never commit: services own the transaction boundary, so
several repository calls can share one unit of work. Driver errors are
translated into the application's exception taxonomy.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from campusqa.core.exceptions import DuplicateError, NotFoundError, StorageError
from campusqa.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for one model.

    Provides CRUD helpers shared by every domain repository.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    def _wrap(self, error: SQLAlchemyError, operation: str) -> StorageError:
        if isinstance(error, IntegrityError):
            return DuplicateError(
                f"{self.model.__name__} violates a uniqueness or integrity constraint",
                table=self.table_name,
            )
        return StorageError(
            f"{operation} failed on {self.table_name}: {error}",
            operation=operation,
            table=self.table_name,
        )

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add a new entity and flush it so database defaults are populated.

        Raises:
            DuplicateError: If a unique constraint rejects the row
            StorageError: On any other database failure
        """
        try:
            self.db.add(entity)
            self.db.flush()
            return entity
        except SQLAlchemyError as e:
            raise self._wrap(e, "create") from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: Any, refresh: bool = False) -> Optional[ModelType]:
        """
        Find entity by primary key, or None.

        With refresh=True the row is re-read even if the session already
        holds it.
        """
        try:
            return self.db.get(self.model, id, populate_existing=refresh)
        except SQLAlchemyError as e:
            raise self._wrap(e, "find_by_id") from e

    def get_by_id(self, id: Any, refresh: bool = False) -> ModelType:
        """
        Get entity by primary key.

        Raises:
            NotFoundError: If entity not found
        """
        entity = self.find_by_id(id, refresh=refresh)
        if entity is None:
            raise NotFoundError(self.model.__name__, id)
        return entity

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        order_by: Optional[List[str]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
        refresh: bool = False,
    ) -> List[ModelType]:
        """
        Find entities matching equality criteria.

        Args:
            criteria: Column name to value (lists/tuples match with IN)
            order_by: Column names, prefix with - for descending
            skip: Number of records to skip
            limit: Maximum number of records
            refresh: Overwrite rows the session already holds with the
                stored values, so changes made through other sessions show
        """
        try:
            stmt = select(self.model)
            for key, value in criteria.items():
                column = getattr(self.model, key)
                if isinstance(value, (list, tuple, set, frozenset)):
                    stmt = stmt.where(column.in_(list(value)))
                else:
                    stmt = stmt.where(column == value)

            for name in order_by or []:
                if name.startswith("-"):
                    stmt = stmt.order_by(getattr(self.model, name[1:]).desc())
                else:
                    stmt = stmt.order_by(getattr(self.model, name))

            if skip:
                stmt = stmt.offset(skip)
            if limit is not None:
                stmt = stmt.limit(limit)
            if refresh:
                stmt = stmt.execution_options(populate_existing=True)

            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "find_by_criteria") from e

    def find_one_by_criteria(self, criteria: Dict[str, Any], refresh: bool = False) -> Optional[ModelType]:
        results = self.find_by_criteria(criteria, limit=1, refresh=refresh)
        return results[0] if results else None

    def count(self, criteria: Optional[Dict[str, Any]] = None) -> int:
        try:
            stmt = select(func.count()).select_from(self.model)
            for key, value in (criteria or {}).items():
                stmt = stmt.where(getattr(self.model, key) == value)
            return int(self.db.scalar(stmt) or 0)
        except SQLAlchemyError as e:
            raise self._wrap(e, "count") from e

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType) -> None:
        """Delete a loaded entity."""
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            raise self._wrap(e, "delete") from e

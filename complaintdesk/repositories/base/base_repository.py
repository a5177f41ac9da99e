"""
Base repository with standardized CRUD operations and error handling.

Repositories flush but do not commit unless asked to; services own the
transaction boundary so that paired writes succeed or fail together.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from complaintdesk.core.exceptions import (
    DuplicateEntryError,
    RepositoryError,
    ResourceNotFoundError,
)
from complaintdesk.core.logging import get_logger
from complaintdesk.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    CRUD over one mapped class. Database failures surface as
    RepositoryError, unique violations as DuplicateEntryError.
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

    # ==================== Create Operations ====================

    def create(self, entity: ModelType, commit: bool = False) -> ModelType:
        """
        Add a new entity.

        Args:
            entity: Entity to create
            commit: Whether to commit immediately

        Returns:
            Created entity

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            RepositoryError: On any other database failure
        """
        try:
            self.db.add(entity)
            if commit:
                self.db.commit()
                self.db.refresh(entity)
            else:
                self.db.flush()

            logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
            return entity

        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(
                f"{self.model.__name__} already exists"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Create failed: {str(e)}") from e

    def create_many(self, entities: List[ModelType]) -> List[ModelType]:
        """Add several entities in one flush."""
        try:
            self.db.add_all(entities)
            self.db.flush()
            return entities
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(
                f"{self.model.__name__} already exists"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Bulk create failed: {str(e)}") from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """
        Find entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None
        """
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by ID failed: {str(e)}") from e

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        order_by: Optional[List[str]] = None,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Find entities matching criteria.

        Args:
            criteria: Filter criteria as key-value pairs; list values use IN
            order_by: List of fields to order by (prefix with - for desc)
            limit: Maximum number of records

        Returns:
            List of matching entities
        """
        try:
            query = select(self.model)

            for key, value in criteria.items():
                column = getattr(self.model, key)
                if isinstance(value, (list, tuple, set, frozenset)):
                    query = query.where(column.in_(list(value)))
                else:
                    query = query.where(column == value)

            for field in order_by or []:
                if field.startswith('-'):
                    query = query.order_by(getattr(self.model, field[1:]).desc())
                else:
                    query = query.order_by(getattr(self.model, field))

            if limit is not None:
                query = query.limit(limit)

            return list(self.db.execute(query).unique().scalars().all())

        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by criteria failed: {str(e)}") from e

    def find_one_by_criteria(self, criteria: Dict[str, Any]) -> Optional[ModelType]:
        """Find single entity matching criteria."""
        results = self.find_by_criteria(criteria, limit=1)
        return results[0] if results else None

    # ==================== Update Operations ====================

    def update(self, entity: ModelType, data: Dict[str, Any], commit: bool = False) -> ModelType:
        """
        Apply ``data`` to a loaded entity and flush.

        Raises:
            ResourceNotFoundError: If the row was deleted concurrently
            RepositoryError: On database failure
        """
        entity_id = entity.id
        try:
            for key, value in data.items():
                setattr(entity, key, value)

            if commit:
                self.db.commit()
                self.db.refresh(entity)
            else:
                self.db.flush()

            logger.debug(f"Updated {self.model.__name__} with id: {entity.id}")
            return entity

        except StaleDataError as e:
            self.db.rollback()
            raise ResourceNotFoundError(self.model.__name__, entity_id) from e
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(f"{self.model.__name__} conflicts with an existing row") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Update failed: {str(e)}") from e

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType, commit: bool = False) -> None:
        """Hard delete a loaded entity (ORM cascades apply)."""
        try:
            self.db.delete(entity)
            if commit:
                self.db.commit()
            else:
                self.db.flush()

            logger.debug(f"Deleted {self.model.__name__} with id: {entity.id}")

        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Delete failed: {str(e)}") from e


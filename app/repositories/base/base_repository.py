"""
Base repository with standardized CRUD operations and error handling.

Repositories only flush; committing belongs to the UnitOfWork that owns
the session.
"""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.core.exceptions import EntityNotFoundError, TransactionError
from app.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Abstract base repository.

    Subclasses bind a model and are constructed with a session only, so
    UnitOfWork.get_repo can build them.
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

    # ==================== Read Operations ====================

    def get(self, entity_id: str) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def get_or_raise(self, entity_id: str) -> ModelType:
        """
        Get entity by id.

        Raises:
            EntityNotFoundError: If no row has this id
        """
        entity = self.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.model.__name__, entity_id)
        return entity

    def list_all(self, limit: Optional[int] = None, offset: int = 0) -> List[ModelType]:
        stmt = select(self.model).order_by(self.model.id).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    # ==================== Write Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add an entity and flush it so its id and defaults are populated.

        Args:
            entity: Entity to create

        Returns:
            Created entity
        """
        try:
            self.db.add(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise TransactionError(f"Failed to create {self.model.__name__}", e) from e

        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    def delete(self, entity: ModelType) -> None:
        """
        Mark an entity for deletion.

        The DELETE is emitted by the owning UnitOfWork's flush or commit, so
        version conflicts surface through its error translation.
        """
        self.db.delete(entity)
        logger.debug(f"Marked {self.model.__name__} {entity.id} for deletion")

    def refresh(self, entity: ModelType, attribute_names: Optional[List[str]] = None) -> ModelType:
        self.db.refresh(entity, attribute_names=attribute_names)
        return entity


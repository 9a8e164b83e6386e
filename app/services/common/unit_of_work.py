# app/services/common/unit_of_work.py
"""
Unit of Work pattern implementation.

Provides transaction management and repository coordination
for the service layer with SQLAlchemy.
"""
from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config.logging import get_logger
from app.core.exceptions import StaleWriteConflictError, TransactionError
from app.repositories.base import BaseRepository

logger = get_logger(__name__)

TRepository = TypeVar("TRepository", bound=BaseRepository)


def _translate(exc: SQLAlchemyError, message: str) -> Exception:
    """Map SQLAlchemy failures onto application exceptions."""
    if isinstance(exc, StaleDataError):
        return StaleWriteConflictError()
    return TransactionError(message, exc)


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    Unit of Work pattern for managing database transactions.

    Coordinates repositories and ensures atomic commits/rollbacks.
    A version conflict detected while flushing or committing surfaces as
    StaleWriteConflictError; any other database failure as TransactionError.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     bills = uow.get_repo(BillRepository)
        ...     bill = bills.get_or_raise(bill_id)
        ...     bill.notes = "Meter replaced"
        ...     # Auto-commits on __exit__ if no exception
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        auto_commit: bool = True,
    ) -> None:
        """
        Initialize Unit of Work.

        Args:
            session_factory: Factory function that returns a new Session
            auto_commit: Whether to auto-commit on successful context exit
        """
        self._session_factory = session_factory
        self._auto_commit = auto_commit

        self.session: Optional[Session] = None
        self._committed: bool = False
        self._rolled_back: bool = False
        self._repo_cache: dict[Type[BaseRepository], BaseRepository] = {}

    # ------------------------------------------------------------------ #
    # Context manager protocol
    # ------------------------------------------------------------------ #

    def __enter__(self) -> "UnitOfWork":
        if self.session is not None:
            raise RuntimeError("UnitOfWork context already entered")

        self.session = self._session_factory()
        self._committed = False
        self._rolled_back = False
        self._repo_cache.clear()

        logger.debug("UnitOfWork session started")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if self.session is None:
            return False

        try:
            if exc_type is None:
                if self._auto_commit and not self._committed and not self._rolled_back:
                    self.commit()
            elif not self._rolled_back:
                self.session.rollback()
                self._rolled_back = True
                logger.warning(f"UnitOfWork rolled back due to {exc_type.__name__}")
        finally:
            self.session.close()
            self.session = None
            self._repo_cache.clear()
            logger.debug("UnitOfWork session closed")

        # Propagate any exception
        return False

    # ------------------------------------------------------------------ #
    # Transaction control
    # ------------------------------------------------------------------ #

    def commit(self) -> None:
        """
        Explicitly commit the current transaction.

        Raises:
            RuntimeError: If called outside of context
            StaleWriteConflictError: If a versioned row changed underneath
            TransactionError: If commit fails
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.commit() called outside of context")

        if self._committed:
            logger.warning("commit() called on already-committed transaction")
            return

        if self._rolled_back:
            raise RuntimeError("Cannot commit a rolled-back transaction")

        try:
            self.session.commit()
            self._committed = True
            logger.debug("UnitOfWork committed")
        except SQLAlchemyError as exc:
            logger.error(f"Commit failed: {exc}")
            self.session.rollback()
            self._rolled_back = True
            raise _translate(exc, "Failed to commit transaction") from exc

    def rollback(self) -> None:
        if self.session is None:
            raise RuntimeError("UnitOfWork.rollback() called outside of context")

        if self._rolled_back:
            return

        self.session.rollback()
        self._rolled_back = True
        self._committed = False
        logger.debug("UnitOfWork explicitly rolled back")

    def flush(self) -> None:
        """
        Flush pending changes to the database without committing.

        Raises:
            RuntimeError: If called outside of context
            StaleWriteConflictError: If a versioned row changed underneath
            TransactionError: If flush fails
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.flush() called outside of context")

        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Flush failed: {exc}")
            raise _translate(exc, "Failed to flush changes") from exc

    # ------------------------------------------------------------------ #
    # Repository factory
    # ------------------------------------------------------------------ #

    def get_repo(self, repo_cls: Type[TRepository]) -> TRepository:
        """
        Get or create a repository instance bound to this UnitOfWork's session.

        Repositories are cached per UnitOfWork instance.

        Args:
            repo_cls: Repository class to instantiate

        Returns:
            Repository instance bound to current session
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.get_repo() called outside of context")

        if repo_cls in self._repo_cache:
            return self._repo_cache[repo_cls]  # type: ignore

        repo_instance = repo_cls(self.session)
        self._repo_cache[repo_cls] = repo_instance
        return repo_instance  # type: ignore

    @property
    def is_active(self) -> bool:
        return self.session is not None

    @property
    def is_committed(self) -> bool:
        return self._committed

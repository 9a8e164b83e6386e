# app/services/audit/bill_history_service.py
from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.config.settings import Settings, settings
from app.core.exceptions import AuditTrailError, BaseAppException
from app.models.billing import BillHistory
from app.repositories.billing import BillHistoryRepository
from app.schemas.audit import BillSnapshot, HistoryRecord
from app.schemas.common.enums import HistoryAction
from app.services.audit.bill_auditor import describe_change, diff_snapshots
from app.services.common import UnitOfWork
from app.services.common.permissions import is_owner_or_admin, require_owner_or_admin

logger = get_logger(__name__)


class BillHistoryService:
    """
    Audit trail of bill changes.

    - Record a history entry in its own transaction
    - Read the history of a bill, live or deleted
    - Read history across an owner's or a room's bills
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        config: Optional[Settings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._config = config or settings

    def _get_repo(self, uow: UnitOfWork) -> BillHistoryRepository:
        return uow.get_repo(BillHistoryRepository)

    def _page_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self._config.HISTORY_PAGE_LIMIT
        return max(1, min(limit, self._config.HISTORY_PAGE_LIMIT))

    # ------------------------------------------------------------------ #
    # Recording
    # ------------------------------------------------------------------ #
    def record_history(
        self,
        bill_id: str,
        action: HistoryAction,
        actor_id: Optional[str],
        old_snapshot: Optional[BillSnapshot],
        new_snapshot: Optional[BillSnapshot],
        description: Optional[str] = None,
    ) -> HistoryRecord:
        """
        Store one history entry.

        The entry of a deletion is stored without a live bill reference;
        original_bill_id always holds bill_id.

        Raises:
            AuditTrailError: If the entry cannot be stored
        """
        diff = diff_snapshots(old_snapshot, new_snapshot)
        context = new_snapshot or old_snapshot

        row = BillHistory(
            bill_id=None if action == HistoryAction.DELETE else bill_id,
            original_bill_id=bill_id,
            room_id=context.room_id if context else None,
            owner_id=context.owner_id if context else None,
            action=action,
            changed_by=actor_id,
            old_data=old_snapshot.to_storage() if old_snapshot else None,
            new_data=new_snapshot.to_storage() if new_snapshot else None,
            changes=diff.to_storage() if diff else None,
            description=description or describe_change(action, diff),
        )

        try:
            with UnitOfWork(self._session_factory) as uow:
                self._get_repo(uow).create(row)
                record = HistoryRecord.from_model(row)
        except (SQLAlchemyError, BaseAppException) as exc:
            raise AuditTrailError(bill_id, action.value, exc) from exc

        logger.info(
            record.description,
            extra={"bill_id": bill_id, "action": action.value, "actor_id": actor_id},
        )
        return record

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #
    @staticmethod
    def _record_owner(record: HistoryRecord) -> Optional[str]:
        snapshot = record.new_snapshot or record.old_snapshot
        if snapshot is not None:
            return snapshot.owner_id
        return record.owner_id

    def _authorize(
        self,
        records: Iterable[HistoryRecord],
        requester_id: Optional[str],
        is_admin: bool,
    ) -> None:
        for record in records:
            require_owner_or_admin(
                requester_id,
                self._record_owner(record),
                is_admin=is_admin,
                resource="bill history",
                resource_id=record.original_bill_id,
            )

    def get_history(
        self,
        bill_id: str,
        requester_id: Optional[str],
        is_admin: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[HistoryRecord]:
        """
        History of a bill, newest first.

        bill_id may be the id of a live bill or of a deleted one.

        Raises:
            AuthorizationError: If a non-admin requester does not own the bill
        """
        with UnitOfWork(self._session_factory) as uow:
            rows = self._get_repo(uow).list_for_bill(
                bill_id,
                limit=self._page_limit(limit),
                offset=offset,
            )
            records = [HistoryRecord.from_model(row) for row in rows]

        self._authorize(records, requester_id, is_admin)
        return records

    def list_history_for_owner(
        self,
        owner_id: str,
        requester_id: Optional[str],
        is_admin: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[HistoryRecord]:
        """History across every bill of an owner, deleted bills included."""
        require_owner_or_admin(
            requester_id,
            owner_id,
            is_admin=is_admin,
            resource="bill history",
        )
        with UnitOfWork(self._session_factory) as uow:
            rows = self._get_repo(uow).list_for_owner(
                owner_id,
                limit=self._page_limit(limit),
                offset=offset,
            )
            return [HistoryRecord.from_model(row) for row in rows]

    def list_history_for_room(
        self,
        room_id: str,
        requester_id: Optional[str],
        is_admin: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[HistoryRecord]:
        """
        History across every bill of a room.

        Entries the requester may not see are left out.
        """
        with UnitOfWork(self._session_factory) as uow:
            rows = self._get_repo(uow).list_for_room(
                room_id,
                limit=self._page_limit(limit),
                offset=offset,
            )
            records = [HistoryRecord.from_model(row) for row in rows]

        return [
            record
            for record in records
            if is_owner_or_admin(requester_id, self._record_owner(record), is_admin=is_admin)
        ]

# app/services/debt/debt_service.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.config.settings import Settings, settings
from app.repositories.billing import BillRepository
from app.repositories.room import RoomRepository
from app.schemas.debt import DebtRecord, DebtWarning
from app.services.common import UnitOfWork
from app.services.debt.debt_aggregator import aggregate_debt_warnings, fold_room_debt

logger = get_logger(__name__)


class DebtService:
    """
    Outstanding debt per room and system-wide debt warnings.

    All reads happen up front in one unit of work; the folds run on
    detached ledger entries afterwards.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        config: Optional[Settings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._config = config or settings

    def get_room_debt(self, room_id: str) -> DebtRecord:
        """
        Debt of a single room.

        Raises:
            EntityNotFoundError: If the room does not exist
        """
        with UnitOfWork(self._session_factory) as uow:
            uow.get_repo(RoomRepository).get_or_raise(room_id)
            entries = uow.get_repo(BillRepository).load_bills_for_room(room_id)

        return fold_room_debt(
            room_id,
            entries,
            warning_threshold=self._config.DEBT_WARNING_MIN_MONTHS,
        )

    def get_debt_warnings(self) -> List[DebtWarning]:
        """Occupied rooms in debt for consecutive months, most at risk first."""
        with UnitOfWork(self._session_factory) as uow:
            rooms = uow.get_repo(RoomRepository).list_occupied_rooms()
            room_info: Dict[str, dict] = {
                room.id: {
                    "room_code": room.code,
                    "room_name": room.name,
                    "tenant_name": room.tenant.full_name if room.tenant else None,
                    "tenant_phone": room.tenant.phone if room.tenant else None,
                }
                for room in rooms
            }
            ledgers = uow.get_repo(BillRepository).load_ledgers(room_info.keys())

        records = aggregate_debt_warnings(
            ledgers,
            max_workers=self._config.DEBT_WORKERS,
            warning_threshold=self._config.DEBT_WARNING_MIN_MONTHS,
        )

        warnings = [
            DebtWarning(
                room_id=record.room_id,
                consecutive_months=record.consecutive_months_at_risk,
                total_debt=record.total_debt,
                unpaid_bills=record.unpaid_bills,
                **room_info[record.room_id],
            )
            for record in records
        ]
        logger.info(
            "Computed debt warnings",
            extra={"rooms_checked": len(room_info), "warnings": len(warnings)},
        )
        return warnings

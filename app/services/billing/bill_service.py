# app/services/billing/bill_service.py
"""
Bill lifecycle service.

Every mutation follows the same cycle inside one unit of work: load the
bill, snapshot it, apply the change, rebuild the complete BillInputs from
storage, recompute, validate the payment against the new total and flush.
The Bill version column turns a concurrent write into a
StaleWriteConflictError, in which case the whole cycle is retried.

History is recorded after the bill transaction committed, in a separate
transaction. A failure there is logged and reported through
BillMutationResult.audit_recorded; it never undoes the bill change.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.logging import get_logger
from app.config.settings import Settings, settings
from app.core.exceptions import (
    AuditTrailError,
    BillAlreadyPaidError,
    DuplicateBillError,
    EntityNotFoundError,
    InvalidMeterConfigError,
    StaleWriteConflictError,
    TransactionError,
)
from app.models.billing import Bill, BillFee
from app.models.room import Room
from app.repositories.billing import BillHistoryRepository, BillRepository
from app.repositories.room import RoomRepository
from app.repositories.utility import UtilityRateRepository
from app.schemas.audit import BillSnapshot
from app.schemas.billing import (
    BillCalculation,
    BillCreate,
    BillFeeCreate,
    BillFeeUpdate,
    BillInputs,
    BillMutationResult,
    BillPaymentUpdate,
    BillReadingsUpdate,
    BillResponse,
    Fee,
    MeterPair,
    OpeningReadings,
    TypedFee,
    make_fee,
)
from app.schemas.common.enums import HistoryAction
from app.services.audit import BillHistoryService, describe_change, diff_snapshots, snapshot_bill
from app.services.billing.bill_composer import compute_bill, validate_payment
from app.services.billing.fee_aggregator import validate_fee_amount
from app.services.billing.meter_reading import resolve_meter_capacity
from app.services.billing.rate_resolver import resolve_rate_config
from app.services.common import UnitOfWork
from app.utils.formatters import CurrencyFormatter

logger = get_logger(__name__)

# A mutation receives the unit of work and the loaded bill, applies its
# change and returns the new calculation plus an optional description detail.
Mutation = Callable[[UnitOfWork, Bill], Tuple[Optional[BillCalculation], Optional[str]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BillService:
    """
    Bill orchestration:

    - Create bills from readings, rates, occupants and room fees
    - Correct readings and recalculate after configuration changes
    - Add, update and remove fees
    - Record payments
    - Delete bills while keeping their history
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        history_service: Optional[BillHistoryService] = None,
        config: Optional[Settings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._config = config or settings
        self._history = history_service or BillHistoryService(session_factory, self._config)

    # ------------------------------------------------------------------ #
    # Calculation helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _fees_of(bill: Bill) -> List[Fee]:
        return [
            make_fee(fee.name, fee.amount, fee_type_id=fee.fee_type_id, fee_id=fee.id)
            for fee in bill.fees
        ]

    def _calculate(
        self,
        uow: UnitOfWork,
        room: Room,
        *,
        old_electric_reading: int,
        new_electric_reading: int,
        old_water_reading: Optional[int],
        new_water_reading: Optional[int],
        fees: List[Fee],
        room_price: Decimal,
    ) -> BillCalculation:
        """Build the complete BillInputs of a room from storage and compute."""
        rooms = uow.get_repo(RoomRepository)
        rate_config = resolve_rate_config(uow.get_repo(UtilityRateRepository), room.id)
        occupant_count = rooms.load_occupant_count(room.id)

        info = rooms.get_property_info()
        max_electric = resolve_meter_capacity(
            room.max_electric_meter,
            info.max_electric_meter if info else None,
            self._config.DEFAULT_MAX_ELECTRIC_METER,
        )
        max_water = resolve_meter_capacity(
            room.max_water_meter,
            info.max_water_meter if info else None,
            self._config.DEFAULT_MAX_WATER_METER,
        )

        if (old_water_reading is None) != (new_water_reading is None):
            raise InvalidMeterConfigError(
                "Water readings must be given together",
                old_reading=old_water_reading,
                new_reading=new_water_reading,
                max_capacity=max_water,
                field="water",
            )
        water = None
        if old_water_reading is not None:
            water = MeterPair(
                old_reading=old_water_reading,
                new_reading=new_water_reading,
                max_capacity=max_water,
            )

        inputs = BillInputs(
            electricity=MeterPair(
                old_reading=old_electric_reading,
                new_reading=new_electric_reading,
                max_capacity=max_electric,
            ),
            water=water,
            rate_config=rate_config,
            occupant_count=occupant_count,
            fees=tuple(fees),
            room_price=room_price,
        )
        return compute_bill(
            inputs,
            inclusive_rollover=self._config.METER_ROLLOVER_INCLUSIVE,
            locale=self._config.AMOUNT_TEXT_LOCALE,
        )

    def _recalculate(self, uow: UnitOfWork, bill: Bill) -> BillCalculation:
        """Recompute a stored bill from its current inputs and store the result."""
        calculation = self._calculate(
            uow,
            bill.room,
            old_electric_reading=bill.old_electric_reading,
            new_electric_reading=bill.new_electric_reading,
            old_water_reading=bill.old_water_reading,
            new_water_reading=bill.new_water_reading,
            fees=self._fees_of(bill),
            room_price=bill.room_price,
        )
        validate_payment(calculation.total_cost, bill.paid_amount)
        self._apply_calculation(bill, calculation)
        return calculation

    @staticmethod
    def _apply_calculation(bill: Bill, calculation: BillCalculation) -> None:
        bill.electricity_usage = calculation.electricity_usage
        bill.electricity_rollover = calculation.electricity_rollover
        bill.electricity_cost = calculation.electricity_cost
        bill.water_usage = calculation.water_usage
        bill.water_rollover = calculation.water_rollover
        bill.water_cost = calculation.water_cost
        bill.room_price = calculation.room_price
        bill.fees_total = calculation.fees_total
        bill.total_cost = calculation.total_cost
        bill.total_cost_text = calculation.total_cost_text

    @staticmethod
    def _ensure_unpaid(bill: Bill, operation: str) -> None:
        if bill.is_paid:
            raise BillAlreadyPaidError(bill.id, operation)

    def _format_money(self, amount: Optional[Decimal]) -> Optional[str]:
        if amount is None:
            return None
        return CurrencyFormatter.format_amount(amount, self._config.CURRENCY)

    # ------------------------------------------------------------------ #
    # Mutation cycle
    # ------------------------------------------------------------------ #
    def _mutate(
        self,
        bill_id: str,
        action: HistoryAction,
        actor_id: Optional[str],
        mutation: Mutation,
    ) -> BillMutationResult:
        attempts = self._config.STALE_WRITE_RETRIES + 1

        for attempt in range(1, attempts + 1):
            try:
                with UnitOfWork(self._session_factory) as uow:
                    bill = uow.get_repo(BillRepository).get_or_raise(bill_id)
                    old_snapshot = snapshot_bill(bill)

                    calculation, detail = mutation(uow, bill)
                    uow.flush()

                    if action == HistoryAction.DELETE:
                        new_snapshot = None
                        response = None
                    else:
                        new_snapshot = snapshot_bill(bill)
                        response = BillResponse.model_validate(bill)
                break
            except StaleWriteConflictError:
                if attempt >= attempts:
                    logger.warning(
                        "Bill changed concurrently, giving up",
                        extra={"bill_id": bill_id, "action": action.value, "attempts": attempt},
                    )
                    raise StaleWriteConflictError(bill_id, attempts=attempt)
                logger.info(
                    "Bill changed concurrently, retrying",
                    extra={"bill_id": bill_id, "action": action.value, "attempt": attempt},
                )

        logger.info(
            "Bill mutation committed",
            extra={"bill_id": bill_id, "action": action.value, "actor_id": actor_id},
        )
        result = BillMutationResult(
            bill_id=bill_id,
            action=action,
            bill=response,
            calculation=calculation,
        )
        return self._record(result, actor_id, old_snapshot, new_snapshot, detail)

    def _record(
        self,
        result: BillMutationResult,
        actor_id: Optional[str],
        old_snapshot: Optional[BillSnapshot],
        new_snapshot: Optional[BillSnapshot],
        detail: Optional[str] = None,
    ) -> BillMutationResult:
        description = None
        if detail:
            description = describe_change(
                result.action,
                diff_snapshots(old_snapshot, new_snapshot),
                detail,
            )

        try:
            record = self._history.record_history(
                result.bill_id,
                result.action,
                actor_id,
                old_snapshot,
                new_snapshot,
                description=description,
            )
        except AuditTrailError:
            logger.error(
                "Bill history could not be recorded",
                extra={"bill_id": result.bill_id, "action": result.action.value, "actor_id": actor_id},
                exc_info=True,
            )
            result.audit_recorded = False
            return result

        result.history_id = record.id
        result.audit_recorded = True
        return result

    # ------------------------------------------------------------------ #
    # Create
    # ------------------------------------------------------------------ #
    def create_bill(self, data: BillCreate, actor_id: Optional[str] = None) -> BillMutationResult:
        """
        Create the bill of a room for one month.

        Active room fees are copied onto the bill.

        Raises:
            EntityNotFoundError: Unknown room
            DuplicateBillError: The room already has a bill for the month
            ConfigurationError / InputError: From the calculation
        """
        with UnitOfWork(self._session_factory) as uow:
            rooms = uow.get_repo(RoomRepository)
            bills = uow.get_repo(BillRepository)

            room = rooms.get_or_raise(data.room_id)
            if bills.find_by_period(room.id, data.month, data.year) is not None:
                raise DuplicateBillError(room.id, data.month, data.year)

            fees: List[Fee] = []
            for room_fee in rooms.get_active_room_fees(room.id):
                name = room_fee.fee_type.name
                fees.append(
                    TypedFee(
                        name=name,
                        amount=validate_fee_amount(name, room_fee.effective_amount),
                        fee_type_id=room_fee.fee_type_id,
                    )
                )

            calculation = self._calculate(
                uow,
                room,
                old_electric_reading=data.old_electric_reading,
                new_electric_reading=data.new_electric_reading,
                old_water_reading=data.old_water_reading,
                new_water_reading=data.new_water_reading,
                fees=fees,
                room_price=room.price,
            )

            bill = Bill(
                room=room,
                owner_id=room.owner_id,
                month=data.month,
                year=data.year,
                old_electric_reading=data.old_electric_reading,
                new_electric_reading=data.new_electric_reading,
                old_water_reading=data.old_water_reading,
                new_water_reading=data.new_water_reading,
                is_paid=False,
                notes=data.notes,
                fees=[
                    BillFee(name=fee.name, amount=fee.amount, fee_type_id=fee.fee_type_id)
                    for fee in fees
                ],
            )
            self._apply_calculation(bill, calculation)

            try:
                bills.create(bill)
            except TransactionError as exc:
                if isinstance(exc.original_error, IntegrityError):
                    raise DuplicateBillError(room.id, data.month, data.year) from exc
                raise

            new_snapshot = snapshot_bill(bill)
            response = BillResponse.model_validate(bill)

        logger.info(
            "Bill created",
            extra={"bill_id": bill.id, "room_id": room.id, "actor_id": actor_id, "action": "CREATE"},
        )
        result = BillMutationResult(
            bill_id=response.id,
            action=HistoryAction.CREATE,
            bill=response,
            calculation=calculation,
        )
        return self._record(result, actor_id, None, new_snapshot)

    # ------------------------------------------------------------------ #
    # Updates
    # ------------------------------------------------------------------ #
    def update_readings(
        self,
        bill_id: str,
        data: BillReadingsUpdate,
        actor_id: Optional[str] = None,
    ) -> BillMutationResult:
        """
        Correct meter readings or notes and recompute the bill.

        Raises:
            BillAlreadyPaidError: If the bill is paid
        """
        changes = data.model_dump(exclude_unset=True)

        def mutation(uow: UnitOfWork, bill: Bill):
            self._ensure_unpaid(bill, "update_readings")
            for field, value in changes.items():
                setattr(bill, field, value)
            return self._recalculate(uow, bill), None

        return self._mutate(bill_id, HistoryAction.UPDATE, actor_id, mutation)

    def recalculate_bill(self, bill_id: str, actor_id: Optional[str] = None) -> BillMutationResult:
        """Recompute an unpaid bill after rates, occupants or meter settings changed."""

        def mutation(uow: UnitOfWork, bill: Bill):
            self._ensure_unpaid(bill, "recalculate")
            return self._recalculate(uow, bill), None

        return self._mutate(bill_id, HistoryAction.UPDATE, actor_id, mutation)

    def add_fee(
        self,
        bill_id: str,
        data: BillFeeCreate,
        actor_id: Optional[str] = None,
    ) -> BillMutationResult:
        """
        Attach a fee and recompute.

        Raises:
            InvalidFeeAmountError: Before anything is written
            BillAlreadyPaidError: If the bill is paid
        """
        amount = validate_fee_amount(data.name, data.amount)

        def mutation(uow: UnitOfWork, bill: Bill):
            self._ensure_unpaid(bill, "add_fee")
            bill.fees.append(BillFee(name=data.name, amount=amount, fee_type_id=data.fee_type_id))
            return self._recalculate(uow, bill), data.name

        return self._mutate(bill_id, HistoryAction.ADD_FEE, actor_id, mutation)

    def update_fee(
        self,
        bill_id: str,
        fee_id: str,
        data: BillFeeUpdate,
        actor_id: Optional[str] = None,
    ) -> BillMutationResult:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("amount") is not None:
            changes["amount"] = validate_fee_amount(changes.get("name") or fee_id, changes["amount"])

        def mutation(uow: UnitOfWork, bill: Bill):
            self._ensure_unpaid(bill, "update_fee")
            fee = uow.get_repo(BillRepository).get_fee(bill, fee_id)
            if fee is None:
                raise EntityNotFoundError("BillFee", fee_id)
            for field, value in changes.items():
                if value is not None:
                    setattr(fee, field, value)
            return self._recalculate(uow, bill), fee.name

        return self._mutate(bill_id, HistoryAction.UPDATE_FEE, actor_id, mutation)

    def remove_fee(
        self,
        bill_id: str,
        fee_id: str,
        actor_id: Optional[str] = None,
    ) -> BillMutationResult:
        def mutation(uow: UnitOfWork, bill: Bill):
            self._ensure_unpaid(bill, "remove_fee")
            fee = uow.get_repo(BillRepository).get_fee(bill, fee_id)
            if fee is None:
                raise EntityNotFoundError("BillFee", fee_id)
            bill.fees.remove(fee)
            return self._recalculate(uow, bill), fee.name

        return self._mutate(bill_id, HistoryAction.REMOVE_FEE, actor_id, mutation)

    # ------------------------------------------------------------------ #
    # Payment
    # ------------------------------------------------------------------ #
    def apply_payment(
        self,
        bill_id: str,
        paid_amount: Decimal,
        actor_id: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> BillMutationResult:
        """
        Record the amount paid so far.

        The bill counts as paid once the amount reaches the recomputed total.

        Raises:
            InvalidPaymentAmountError: Negative amount
            OverpaymentRejectedError: Amount above the recomputed total
        """

        def mutation(uow: UnitOfWork, bill: Bill):
            bill.paid_amount = None
            calculation = self._recalculate(uow, bill)
            amount = validate_payment(calculation.total_cost, paid_amount)
            bill.paid_amount = amount
            bill.is_paid = amount is not None and amount >= calculation.total_cost
            bill.paid_at = (paid_at or _utcnow()) if bill.is_paid else None
            return calculation, self._format_money(amount)

        return self._mutate(bill_id, HistoryAction.STATUS_CHANGE, actor_id, mutation)

    def update_payment_status(
        self,
        bill_id: str,
        data: BillPaymentUpdate,
        actor_id: Optional[str] = None,
    ) -> BillMutationResult:
        """
        Mark a bill paid or unpaid.

        Marking paid without an amount records the full total.
        """

        def mutation(uow: UnitOfWork, bill: Bill):
            bill.paid_amount = None
            calculation = self._recalculate(uow, bill)
            if data.is_paid:
                amount = data.paid_amount if data.paid_amount is not None else calculation.total_cost
                bill.paid_amount = validate_payment(calculation.total_cost, amount)
                bill.is_paid = True
                bill.paid_at = data.paid_at or _utcnow()
            else:
                bill.paid_amount = validate_payment(calculation.total_cost, data.paid_amount)
                bill.is_paid = False
                bill.paid_at = None
            return calculation, self._format_money(bill.paid_amount)

        return self._mutate(bill_id, HistoryAction.STATUS_CHANGE, actor_id, mutation)

    # ------------------------------------------------------------------ #
    # Delete
    # ------------------------------------------------------------------ #
    def delete_bill(self, bill_id: str, actor_id: Optional[str] = None) -> BillMutationResult:
        """
        Delete an unpaid bill.

        Existing history entries lose their live bill reference but keep
        original_bill_id, so the trail stays readable.
        """

        def mutation(uow: UnitOfWork, bill: Bill):
            self._ensure_unpaid(bill, "delete")
            uow.get_repo(BillHistoryRepository).detach_bill(bill.id)
            uow.get_repo(BillRepository).delete(bill)
            return None, None

        return self._mutate(bill_id, HistoryAction.DELETE, actor_id, mutation)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def get_bill(self, bill_id: str) -> BillResponse:
        with UnitOfWork(self._session_factory) as uow:
            bill = uow.get_repo(BillRepository).get_or_raise(bill_id)
            return BillResponse.model_validate(bill)

    def suggest_opening_readings(self, room_id: str) -> OpeningReadings:
        """Opening readings of a new bill: the closing readings of the latest one."""
        with UnitOfWork(self._session_factory) as uow:
            uow.get_repo(RoomRepository).get_or_raise(room_id)
            latest = uow.get_repo(BillRepository).get_latest_for_room(room_id)

            if latest is None:
                return OpeningReadings(room_id=room_id)
            return OpeningReadings(
                room_id=room_id,
                old_electric_reading=latest.new_electric_reading,
                old_water_reading=latest.new_water_reading,
                source_bill_id=latest.id,
            )

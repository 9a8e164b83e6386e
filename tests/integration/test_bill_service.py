from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import text

from app.core.exceptions import (
    AuditTrailError,
    BillAlreadyPaidError,
    ConfigurationMissingError,
    DuplicateBillError,
    EntityNotFoundError,
    InvalidFeeAmountError,
    InvalidMeterConfigError,
    OverpaymentRejectedError,
    StaleWriteConflictError,
)
from app.repositories.billing import BillRepository
from app.schemas.billing import (
    BillCreate,
    BillFeeCreate,
    BillFeeUpdate,
    BillPaymentUpdate,
    BillReadingsUpdate,
)
from app.schemas.common.enums import HistoryAction, WaterMethod
from app.services.billing import BillService
from tests.conftest import OWNER_ID


def _create(bill_service, room, month=3, year=2024, **overrides):
    values = dict(
        room_id=room.id,
        month=month,
        year=year,
        old_electric_reading=1000,
        new_electric_reading=1120,
        old_water_reading=50,
        new_water_reading=55,
    )
    values.update(overrides)
    return bill_service.create_bill(BillCreate(**values), actor_id=OWNER_ID)


@pytest.fixture
def room(seed):
    seed.property_info()
    seed.global_rate()
    return seed.room("P101", price="2500000")


def test_create_bill_computes_totals(bill_service, room) -> None:
    result = _create(bill_service, room)

    bill = result.bill
    assert bill.electricity_usage == 120
    assert bill.electricity_cost == Decimal("210880")
    assert bill.water_usage == 5
    assert bill.water_cost == Decimal("100000")
    assert bill.total_cost == Decimal("2810880")
    assert bill.owner_id == OWNER_ID
    assert bill.is_paid is False
    assert bill.version == 1
    assert result.audit_recorded is True
    assert result.history_id is not None


def test_create_bill_copies_active_room_fees(bill_service, seed, room) -> None:
    seed.room_fee(room, "Internet", "100000")
    seed.room_fee(room, "Parking", "50000", is_active=False)

    bill = _create(bill_service, room).bill

    assert [fee.name for fee in bill.fees] == ["Internet"]
    assert bill.fees[0].fee_type_id is not None
    assert bill.fees_total == Decimal("100000")
    assert bill.total_cost == Decimal("2910880")


def test_duplicate_period_is_rejected(bill_service, room) -> None:
    _create(bill_service, room)

    with pytest.raises(DuplicateBillError):
        _create(bill_service, room)


def test_unknown_room(bill_service, room) -> None:
    with pytest.raises(EntityNotFoundError):
        _create(bill_service, room, room_id="missing-room")


def test_missing_rate_configuration(bill_service, seed) -> None:
    room = seed.room("P201")

    with pytest.raises(ConfigurationMissingError):
        _create(bill_service, room)


def test_room_specific_rate_wins(bill_service, seed, room) -> None:
    seed.global_rate(
        room_id=room.id,
        bands=(),
        use_tiered_pricing=False,
        electricity_price="3000",
    )

    bill = _create(bill_service, room).bill

    assert bill.electricity_cost == Decimal("360000")


def test_rollover_uses_room_capacity(bill_service, seed) -> None:
    seed.property_info()
    seed.global_rate()
    room = seed.room("P301", max_electric_meter=9999)

    bill = _create(bill_service, room, old_electric_reading=9990, new_electric_reading=50).bill

    assert bill.electricity_usage == 59
    assert bill.electricity_rollover is True


def test_headcount_water_counts_tenant_and_occupants(bill_service, seed) -> None:
    seed.global_rate(water_method=WaterMethod.BY_HEADCOUNT)
    room = seed.room("P401")
    seed.tenant(room, occupants=2)

    bill = _create(bill_service, room, old_water_reading=None, new_water_reading=None).bill

    assert bill.water_cost == Decimal("300000")
    assert bill.water_usage is None


def test_metered_water_requires_readings(bill_service, room) -> None:
    with pytest.raises(InvalidMeterConfigError):
        _create(bill_service, room, old_water_reading=None, new_water_reading=None)


def test_update_readings_recomputes(bill_service, room) -> None:
    created = _create(bill_service, room)

    result = bill_service.update_readings(
        created.bill_id,
        BillReadingsUpdate(new_electric_reading=1050, notes="Meter re-read"),
        actor_id=OWNER_ID,
    )

    assert result.bill.electricity_usage == 50
    assert result.bill.electricity_cost == Decimal("83900")
    assert result.bill.notes == "Meter re-read"
    assert result.bill.version == 2


def test_invalid_readings_leave_bill_unchanged(bill_service, room) -> None:
    created = _create(bill_service, room)

    with pytest.raises(InvalidMeterConfigError):
        bill_service.update_readings(created.bill_id, BillReadingsUpdate(new_electric_reading=20000))

    assert bill_service.get_bill(created.bill_id).new_electric_reading == 1120


def test_fee_lifecycle(bill_service, room) -> None:
    created = _create(bill_service, room)

    added = bill_service.add_fee(created.bill_id, BillFeeCreate(name="Repair", amount=Decimal("30000")))
    fee_id = added.bill.fees[0].id
    assert added.bill.fees_total == Decimal("30000")
    assert added.bill.total_cost == created.bill.total_cost + Decimal("30000")

    updated = bill_service.update_fee(created.bill_id, fee_id, BillFeeUpdate(amount=Decimal("45000")))
    assert updated.bill.fees_total == Decimal("45000")

    removed = bill_service.remove_fee(created.bill_id, fee_id)
    assert removed.bill.fees == []
    assert removed.bill.total_cost == created.bill.total_cost


def test_negative_fee_is_rejected(bill_service, room) -> None:
    created = _create(bill_service, room)

    with pytest.raises(InvalidFeeAmountError):
        bill_service.add_fee(created.bill_id, BillFeeCreate(name="Refund", amount=Decimal("-1")))


def test_unknown_fee(bill_service, room) -> None:
    created = _create(bill_service, room)

    with pytest.raises(EntityNotFoundError):
        bill_service.remove_fee(created.bill_id, "missing-fee")


def test_partial_then_full_payment(bill_service, room) -> None:
    created = _create(bill_service, room)
    total = created.bill.total_cost

    partial = bill_service.apply_payment(created.bill_id, Decimal("1000000"))
    assert partial.bill.is_paid is False
    assert partial.bill.paid_amount == Decimal("1000000")
    assert partial.bill.paid_at is None

    full = bill_service.apply_payment(created.bill_id, total)
    assert full.bill.is_paid is True
    assert full.bill.paid_at is not None


def test_overpayment_is_rejected(bill_service, room) -> None:
    created = _create(bill_service, room)

    with pytest.raises(OverpaymentRejectedError):
        bill_service.apply_payment(created.bill_id, created.bill.total_cost + Decimal("1"))

    assert bill_service.get_bill(created.bill_id).paid_amount is None


def test_mark_paid_records_full_total(bill_service, room) -> None:
    created = _create(bill_service, room)
    paid_at = datetime(2024, 4, 2, 9, 30, tzinfo=timezone.utc)

    result = bill_service.update_payment_status(
        created.bill_id,
        BillPaymentUpdate(is_paid=True, paid_at=paid_at),
    )

    assert result.bill.is_paid is True
    assert result.bill.paid_amount == created.bill.total_cost
    assert result.action == HistoryAction.STATUS_CHANGE


def test_mark_unpaid_clears_payment_date(bill_service, room) -> None:
    created = _create(bill_service, room)
    bill_service.update_payment_status(created.bill_id, BillPaymentUpdate(is_paid=True))

    result = bill_service.update_payment_status(created.bill_id, BillPaymentUpdate(is_paid=False))

    assert result.bill.is_paid is False
    assert result.bill.paid_at is None
    assert result.bill.paid_amount is None


def test_paid_bill_refuses_fee_changes_and_deletion(bill_service, room) -> None:
    created = _create(bill_service, room)
    bill_service.update_payment_status(created.bill_id, BillPaymentUpdate(is_paid=True))

    with pytest.raises(BillAlreadyPaidError):
        bill_service.add_fee(created.bill_id, BillFeeCreate(name="Repair", amount=Decimal("1")))
    with pytest.raises(BillAlreadyPaidError):
        bill_service.delete_bill(created.bill_id)


def test_paid_bill_refuses_reading_changes_and_recalculation(bill_service, room) -> None:
    created = _create(bill_service, room)
    bill_service.update_payment_status(created.bill_id, BillPaymentUpdate(is_paid=True))

    with pytest.raises(BillAlreadyPaidError):
        bill_service.update_readings(created.bill_id, BillReadingsUpdate(new_electric_reading=1300))
    with pytest.raises(BillAlreadyPaidError):
        bill_service.recalculate_bill(created.bill_id)

    bill = bill_service.get_bill(created.bill_id)
    assert bill.is_paid is True
    assert bill.new_electric_reading == 1120
    assert bill.total_cost == Decimal("2810880")
    assert bill.paid_amount == bill.total_cost


def test_delete_bill_keeps_history(bill_service, history_service, room) -> None:
    created = _create(bill_service, room)

    result = bill_service.delete_bill(created.bill_id, actor_id=OWNER_ID)

    assert result.bill is None
    assert result.audit_recorded is True
    with pytest.raises(EntityNotFoundError):
        bill_service.get_bill(created.bill_id)

    history = history_service.get_history(created.bill_id, requester_id=OWNER_ID)
    assert [record.action for record in history] == [HistoryAction.DELETE, HistoryAction.CREATE]
    assert all(record.bill_id is None for record in history)
    assert all(record.original_bill_id == created.bill_id for record in history)
    assert history[0].old_snapshot.total_cost == created.bill.total_cost


def test_suggest_opening_readings(bill_service, room) -> None:
    assert bill_service.suggest_opening_readings(room.id).old_electric_reading == 0

    created = _create(bill_service, room)
    suggestion = bill_service.suggest_opening_readings(room.id)

    assert suggestion.old_electric_reading == 1120
    assert suggestion.old_water_reading == 55
    assert suggestion.source_bill_id == created.bill_id


def _bump_version_on_load(monkeypatch, engine, times=None):
    original = BillRepository.get_or_raise
    calls = {"count": 0}

    def get_or_raise(self, entity_id):
        bill = original(self, entity_id)
        calls["count"] += 1
        if times is None or calls["count"] <= times:
            with engine.begin() as conn:
                conn.execute(text("UPDATE bills SET version = version + 1 WHERE id = :id"), {"id": entity_id})
        return bill

    monkeypatch.setattr(BillRepository, "get_or_raise", get_or_raise)
    return calls


def test_concurrent_write_is_retried(bill_service, engine, room, monkeypatch) -> None:
    created = _create(bill_service, room)
    calls = _bump_version_on_load(monkeypatch, engine, times=1)

    result = bill_service.update_readings(created.bill_id, BillReadingsUpdate(notes="retried"))

    assert calls["count"] == 2
    assert result.bill.notes == "retried"
    assert result.bill.version == 3


def test_concurrent_delete_is_retried(bill_service, history_service, engine, room, monkeypatch) -> None:
    created = _create(bill_service, room)
    calls = _bump_version_on_load(monkeypatch, engine, times=1)

    result = bill_service.delete_bill(created.bill_id, actor_id=OWNER_ID)

    assert calls["count"] == 2
    assert result.bill is None
    assert result.audit_recorded is True
    monkeypatch.undo()
    with pytest.raises(EntityNotFoundError):
        bill_service.get_bill(created.bill_id)
    history = history_service.get_history(created.bill_id, requester_id=OWNER_ID)
    assert [record.action for record in history] == [HistoryAction.DELETE, HistoryAction.CREATE]


def test_concurrent_write_gives_up_after_retries(bill_service, engine, room, monkeypatch) -> None:
    created = _create(bill_service, room)
    _bump_version_on_load(monkeypatch, engine)

    with pytest.raises(StaleWriteConflictError) as exc_info:
        bill_service.update_readings(created.bill_id, BillReadingsUpdate(notes="lost"))

    assert exc_info.value.attempts == 2
    monkeypatch.undo()
    assert bill_service.get_bill(created.bill_id).notes is None


class FailingHistoryService:
    def record_history(self, bill_id, action, *args, **kwargs):
        raise AuditTrailError(bill_id, action.value)


def test_history_failure_does_not_undo_bill(session_factory, config, room) -> None:
    service = BillService(session_factory, history_service=FailingHistoryService(), config=config)

    result = _create(service, room)

    assert result.audit_recorded is False
    assert result.history_id is None
    assert service.get_bill(result.bill_id).total_cost == result.bill.total_cost

from datetime import datetime, timezone
from decimal import Decimal

from app.schemas.audit import BillSnapshot, FeeSnapshot
from app.schemas.common.enums import ChangeType, HistoryAction
from app.services.audit.bill_auditor import describe_change, diff_snapshots


def _snapshot(**overrides) -> BillSnapshot:
    values = dict(
        bill_id="bill-1",
        room_id="room-1",
        owner_id="owner-1",
        month=3,
        year=2024,
        old_electric_reading=1000,
        new_electric_reading=1120,
        electricity_usage=120,
        electricity_rollover=False,
        room_price=Decimal("0.00"),
        electricity_cost=Decimal("210880.00"),
        water_cost=Decimal("0.00"),
        fees_total=Decimal("0.00"),
        total_cost=Decimal("210880.00"),
        total_cost_text="Hai trăm mười nghìn tám trăm tám mươi đồng",
        is_paid=False,
    )
    values.update(overrides)
    return BillSnapshot(**values)


def test_identical_snapshots_have_no_diff() -> None:
    assert diff_snapshots(_snapshot(), _snapshot()) is None


def test_update_lists_changed_fields() -> None:
    paid_at = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)
    new = _snapshot(is_paid=True, paid_amount=Decimal("210880.00"), paid_at=paid_at)

    diff = diff_snapshots(_snapshot(), new)

    assert diff.change_type == ChangeType.UPDATED
    assert diff.changed_fields == ["is_paid", "paid_amount", "paid_at"]
    assert diff.fields["is_paid"].old is False
    assert diff.fields["is_paid"].new is True


def test_fee_changes_compare_whole_collection() -> None:
    fee = FeeSnapshot(id="fee-1", name="Internet", amount=Decimal("100000.00"))
    new = _snapshot(fees=(fee,), fees_total=Decimal("100000.00"), total_cost=Decimal("310880.00"))

    diff = diff_snapshots(_snapshot(), new)

    assert "fees" in diff.changed_fields
    assert diff.fields["fees"].new[0]["name"] == "Internet"


def test_created_and_deleted_diffs() -> None:
    created = diff_snapshots(None, _snapshot())
    deleted = diff_snapshots(_snapshot(), None)

    assert created.change_type == ChangeType.CREATED
    assert created.fields["total_cost"].old is None
    assert deleted.change_type == ChangeType.DELETED
    assert deleted.fields["bill_id"].old == "bill-1"
    assert diff_snapshots(None, None) is None


def test_snapshot_survives_storage() -> None:
    snapshot = _snapshot(paid_at=datetime(2024, 3, 31, tzinfo=timezone.utc))

    assert BillSnapshot.from_storage(snapshot.to_storage()) == snapshot


def test_descriptions() -> None:
    diff = diff_snapshots(_snapshot(), _snapshot(notes="checked"))

    assert describe_change(HistoryAction.CREATE, diff_snapshots(None, _snapshot())) == "Created bill"
    assert describe_change(HistoryAction.UPDATE, diff) == "Updated bill: notes"
    assert describe_change(HistoryAction.ADD_FEE, diff, detail="Internet") == "Added fee Internet: notes"
    assert describe_change(HistoryAction.DELETE) == "Deleted bill"

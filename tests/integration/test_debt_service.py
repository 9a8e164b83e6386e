from decimal import Decimal

import pytest

from app.core.exceptions import EntityNotFoundError
from app.schemas.billing import BillCreate, BillPaymentUpdate
from app.schemas.common.enums import RoomStatus


def _bill(bill_service, room, month, year=2024):
    return bill_service.create_bill(
        BillCreate(
            room_id=room.id,
            month=month,
            year=year,
            old_electric_reading=0,
            new_electric_reading=120,
            old_water_reading=0,
            new_water_reading=0,
        )
    ).bill


@pytest.fixture
def rooms(seed):
    seed.property_info()
    seed.global_rate()
    return {
        "risky": seed.room("P101"),
        "single": seed.room("P102"),
        "vacant": seed.room("P103", status=RoomStatus.VACANT),
        "longest": seed.room("P104"),
    }


def test_room_debt(debt_service, bill_service, rooms) -> None:
    room = rooms["risky"]
    first = _bill(bill_service, room, 1)
    _bill(bill_service, room, 2)
    bill_service.apply_payment(first.id, Decimal("10880"))

    record = debt_service.get_room_debt(room.id)

    assert record.total_debt == Decimal("200000") + Decimal("210880")
    assert record.consecutive_months_at_risk == 2
    assert record.has_debt_warning is True
    assert [bill.month for bill in record.unpaid_bills] == [2, 1]


def test_room_without_bills(debt_service, rooms) -> None:
    record = debt_service.get_room_debt(rooms["single"].id)

    assert record.total_debt == 0
    assert record.has_debt_warning is False


def test_unknown_room(debt_service, rooms) -> None:
    with pytest.raises(EntityNotFoundError):
        debt_service.get_room_debt("missing-room")


def test_warnings_cover_occupied_rooms_only(debt_service, bill_service, seed, rooms) -> None:
    seed.tenant(rooms["risky"], name="Tran Thi B", phone="0911111111")
    for month in (1, 2):
        _bill(bill_service, rooms["risky"], month)
        _bill(bill_service, rooms["vacant"], month)
    for month in (1, 2, 3):
        _bill(bill_service, rooms["longest"], month)
    _bill(bill_service, rooms["single"], 1)

    warnings = debt_service.get_debt_warnings()

    assert [warning.room_code for warning in warnings] == ["P104", "P101"]
    assert warnings[0].consecutive_months == 3
    assert warnings[0].total_debt == Decimal("632640")
    assert warnings[1].tenant_name == "Tran Thi B"
    assert warnings[1].tenant_phone == "0911111111"


def test_paid_month_clears_warning(debt_service, bill_service, rooms) -> None:
    room = rooms["risky"]
    _bill(bill_service, room, 1)
    second = _bill(bill_service, room, 2)
    _bill(bill_service, room, 3)
    bill_service.update_payment_status(second.id, BillPaymentUpdate(is_paid=True))

    assert debt_service.get_debt_warnings() == []

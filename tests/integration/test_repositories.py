import pytest

from app.core.exceptions import ConfigurationMissingError
from app.repositories.billing import BillRepository
from app.repositories.room import RoomRepository
from app.repositories.utility import UtilityRateRepository
from app.schemas.billing import BillCreate
from app.schemas.common.enums import RateScope, RoomStatus, WaterMethod
from app.services.billing import resolve_rate_config
from app.services.common import UnitOfWork


def test_global_rate_is_the_fallback(session_factory, seed) -> None:
    seed.global_rate()
    room = seed.room("P101")

    with UnitOfWork(session_factory) as uow:
        config = resolve_rate_config(uow.get_repo(UtilityRateRepository), room.id)

    assert config.scope == RateScope.GLOBAL
    assert [band.min_usage for band in config.tier_bands] == [0, 50, 100, 200]


def test_room_rate_takes_precedence(session_factory, seed) -> None:
    seed.global_rate()
    room = seed.room("P101")
    seed.global_rate(room_id=room.id, water_method=WaterMethod.BY_HEADCOUNT)

    with UnitOfWork(session_factory) as uow:
        config = resolve_rate_config(uow.get_repo(UtilityRateRepository), room.id)

    assert config.scope == RateScope.ROOM
    assert config.room_id == room.id
    assert config.water_method == WaterMethod.BY_HEADCOUNT


def test_no_rate_at_all(session_factory, seed) -> None:
    room = seed.room("P101")

    with UnitOfWork(session_factory) as uow:
        with pytest.raises(ConfigurationMissingError) as exc_info:
            resolve_rate_config(uow.get_repo(UtilityRateRepository), room.id)

    assert exc_info.value.room_id == room.id


def test_occupant_count(session_factory, seed) -> None:
    empty = seed.room("P101")
    shared = seed.room("P102")
    seed.tenant(shared, occupants=3)

    with UnitOfWork(session_factory) as uow:
        rooms = uow.get_repo(RoomRepository)
        assert rooms.load_occupant_count(empty.id) == 1
        assert rooms.load_occupant_count(shared.id) == 4


def test_occupied_room_listing(session_factory, seed) -> None:
    seed.room("P102")
    seed.room("P101")
    seed.room("P103", status=RoomStatus.MAINTENANCE)

    with UnitOfWork(session_factory) as uow:
        codes = [room.code for room in uow.get_repo(RoomRepository).list_occupied_rooms()]

    assert codes == ["P101", "P102"]


def test_ledgers_include_rooms_without_bills(session_factory, seed, bill_service) -> None:
    seed.global_rate()
    billed = seed.room("P101")
    idle = seed.room("P102")
    for month in (2, 1):
        bill_service.create_bill(
            BillCreate(
                room_id=billed.id,
                month=month,
                year=2024,
                old_electric_reading=0,
                new_electric_reading=10,
                old_water_reading=0,
                new_water_reading=1,
            )
        )

    with UnitOfWork(session_factory) as uow:
        ledgers = uow.get_repo(BillRepository).load_ledgers([billed.id, idle.id])

    assert [entry.month for entry in ledgers[billed.id]] == [1, 2]
    assert ledgers[idle.id] == []

from decimal import Decimal
from typing import Iterator, List, Optional

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.config.settings import Settings
from app.db.init_db import init_db
from app.db.session import create_db_engine, create_session_factory
from app.models import (
    ElectricityTier,
    FeeType,
    Occupant,
    PropertyInfo,
    Room,
    RoomFee,
    Tenant,
    UtilityRate,
)
from app.schemas.billing import TierBand
from app.schemas.common.enums import RoomStatus, WaterMethod
from app.services.audit import BillHistoryService
from app.services.billing import BillService
from app.services.debt import DebtService

OWNER_ID = "owner-1"
OTHER_OWNER_ID = "owner-2"

SCENARIO_A_BANDS = (
    (0, 50, "1678"),
    (50, 100, "1734"),
    (100, 200, "2014"),
    (200, None, "2536"),
)


def tier_bands(rows=SCENARIO_A_BANDS) -> List[TierBand]:
    return [
        TierBand(min_usage=low, max_usage=high, price_per_unit=Decimal(price))
        for low, high, price in rows
    ]


@pytest.fixture
def config(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'billing.db'}",
        ENVIRONMENT="testing",
        LOG_TO_FILE=False,
        AMOUNT_TEXT_LOCALE="vi",
        METER_ROLLOVER_INCLUSIVE=False,
        DEBT_WARNING_MIN_MONTHS=2,
        DEBT_WORKERS=2,
        STALE_WRITE_RETRIES=1,
    )


@pytest.fixture
def engine(config: Settings) -> Iterator[Engine]:
    engine = create_db_engine(config)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return create_session_factory(engine)


@pytest.fixture
def history_service(session_factory, config) -> BillHistoryService:
    return BillHistoryService(session_factory, config)


@pytest.fixture
def bill_service(session_factory, history_service, config) -> BillService:
    return BillService(session_factory, history_service=history_service, config=config)


@pytest.fixture
def debt_service(session_factory, config) -> DebtService:
    return DebtService(session_factory, config)


class Seeder:
    """Inserts reference data through short-lived sessions."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def _add(self, *objects):
        with self._session_factory() as session:
            session.add_all(objects)
            session.commit()
        return objects[0]

    def property_info(self, max_electric_meter: Optional[int] = 9999, max_water_meter: Optional[int] = 9999) -> PropertyInfo:
        return self._add(
            PropertyInfo(
                name="Nha tro Hoa Mai",
                max_electric_meter=max_electric_meter,
                max_water_meter=max_water_meter,
            )
        )

    def global_rate(
        self,
        *,
        bands=SCENARIO_A_BANDS,
        water_method: WaterMethod = WaterMethod.BY_METER,
        water_price: Optional[str] = "20000",
        water_price_per_person: Optional[str] = "100000",
        use_tiered_pricing: bool = True,
        electricity_price: Optional[str] = None,
        room_id: Optional[str] = None,
    ) -> UtilityRate:
        rate = UtilityRate(
            room_id=room_id,
            is_global=room_id is None,
            use_tiered_pricing=use_tiered_pricing,
            electricity_price=Decimal(electricity_price) if electricity_price else None,
            water_method=water_method,
            water_price=Decimal(water_price) if water_price else None,
            water_price_per_person=Decimal(water_price_per_person) if water_price_per_person else None,
            electricity_tiers=[
                ElectricityTier(min_usage=low, max_usage=high, price_per_unit=Decimal(price))
                for low, high, price in bands
            ],
        )
        return self._add(rate)

    def room(
        self,
        code: str = "P101",
        *,
        owner_id: Optional[str] = OWNER_ID,
        price: str = "0",
        status: RoomStatus = RoomStatus.OCCUPIED,
        max_electric_meter: Optional[int] = None,
        max_water_meter: Optional[int] = None,
    ) -> Room:
        return self._add(
            Room(
                code=code,
                name=f"Phong {code}",
                owner_id=owner_id,
                price=Decimal(price),
                status=status,
                max_electric_meter=max_electric_meter,
                max_water_meter=max_water_meter,
            )
        )

    def tenant(self, room: Room, *, name: str = "Nguyen Van A", phone: str = "0901234567", occupants: int = 0) -> Tenant:
        tenant = Tenant(
            room_id=room.id,
            full_name=name,
            phone=phone,
            occupants=[Occupant(full_name=f"Occupant {i}") for i in range(occupants)],
        )
        return self._add(tenant)

    def room_fee(self, room: Room, name: str, amount: str, *, is_active: bool = True) -> RoomFee:
        fee_type = FeeType(name=name, default_amount=Decimal(amount))
        room_fee = RoomFee(room_id=room.id, fee_type=fee_type, amount=Decimal(amount), is_active=is_active)
        return self._add(room_fee)


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)

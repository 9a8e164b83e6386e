from decimal import Decimal

import pytest

from app.core.exceptions import (
    ConfigurationMissingError,
    InvalidMeterConfigError,
    InvalidOccupantCountError,
)
from app.schemas.billing import MeterPair, RateConfig
from app.schemas.common.enums import WaterMethod
from app.services.billing.water_calculator import calculate_water_cost


def _headcount(price="100000") -> RateConfig:
    return RateConfig(
        water_method=WaterMethod.BY_HEADCOUNT,
        water_price_per_person=Decimal(price) if price else None,
    )


def _metered(price="20000") -> RateConfig:
    return RateConfig(
        water_method=WaterMethod.BY_METER,
        water_unit_price=Decimal(price) if price else None,
    )


def test_headcount_scenario() -> None:
    charge = calculate_water_cost(_headcount(), occupant_count=3)

    assert charge.cost == Decimal("300000")
    assert charge.usage is None
    assert charge.rollover is None
    assert charge.breakdown[0].unit == "person"


def test_headcount_ignores_meter_readings() -> None:
    meter = MeterPair(old_reading=10, new_reading=20, max_capacity=9999)

    charge = calculate_water_cost(_headcount(), meter=meter, occupant_count=1)

    assert charge.cost == Decimal("100000")
    assert charge.usage is None


@pytest.mark.parametrize("count", [0, -2])
def test_headcount_requires_an_occupant(count) -> None:
    with pytest.raises(InvalidOccupantCountError):
        calculate_water_cost(_headcount(), occupant_count=count)


def test_headcount_without_price() -> None:
    with pytest.raises(ConfigurationMissingError):
        calculate_water_cost(_headcount(price=None), occupant_count=2)


def test_metered_cost() -> None:
    meter = MeterPair(old_reading=100, new_reading=112, max_capacity=9999)

    charge = calculate_water_cost(_metered(), meter=meter)

    assert charge.usage == 12
    assert charge.rollover is False
    assert charge.cost == Decimal("240000")


def test_metered_rollover() -> None:
    meter = MeterPair(old_reading=9998, new_reading=3, max_capacity=9999)

    charge = calculate_water_cost(_metered(), meter=meter)

    assert charge.usage == 4
    assert charge.rollover is True


def test_metered_requires_readings() -> None:
    with pytest.raises(InvalidMeterConfigError):
        calculate_water_cost(_metered())


def test_metered_without_price() -> None:
    meter = MeterPair(old_reading=0, new_reading=5, max_capacity=9999)

    with pytest.raises(ConfigurationMissingError):
        calculate_water_cost(_metered(price=None), meter=meter)

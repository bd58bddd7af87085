from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from simplenem12.types import (
    EnergyUnit,
    MeterRead,
    MeterVolume,
    ParseResult,
    Quality,
)


def _vol(value: str, quality: Quality = Quality.A) -> MeterVolume:
    return MeterVolume(volume=Decimal(value), quality=quality)


def test_append_volume_keeps_date_order():
    read = MeterRead(nmi="N1", energy_unit=EnergyUnit.KWH)
    read.append_volume(date(2024, 1, 3), _vol("3"))
    read.append_volume(date(2024, 1, 1), _vol("1"))
    read.append_volume(date(2024, 1, 2), _vol("2"))
    assert list(read.volumes) == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert read.start_date == date(2024, 1, 1)
    assert read.end_date == date(2024, 1, 3)


def test_append_volume_overwrites_same_day():
    read = MeterRead(nmi="N1", energy_unit=EnergyUnit.KWH)
    read.append_volume(date(2024, 1, 1), _vol("1"))
    read.append_volume(date(2024, 1, 2), _vol("2"))
    read.append_volume(date(2024, 1, 1), _vol("7", Quality.E))
    assert list(read.volumes) == [date(2024, 1, 1), date(2024, 1, 2)]
    assert read.volumes[date(2024, 1, 1)] == _vol("7", Quality.E)


def test_empty_read():
    read = MeterRead(nmi="N1", energy_unit=EnergyUnit.KWH)
    assert read.start_date is None
    assert read.end_date is None
    assert read.total_volume() == Decimal("0")


def test_total_volume_by_quality():
    read = MeterRead(nmi="N1", energy_unit=EnergyUnit.KWH)
    read.append_volume(date(2024, 1, 1), _vol("1.25"))
    read.append_volume(date(2024, 1, 2), _vol("2.50", Quality.E))
    assert read.total_volume() == Decimal("3.75")
    assert read.total_volume(Quality.A) == Decimal("1.25")
    assert read.total_volume(Quality.E) == Decimal("2.50")


def test_meter_volume_is_immutable():
    vol = _vol("1")
    with pytest.raises(ValidationError):
        vol.volume = Decimal("2")


def test_parse_result_lookup():
    read = MeterRead(nmi="N1", energy_unit=EnergyUnit.KWH)
    result = ParseResult(meter_reads={"N1": read})
    assert len(result) == 1
    assert "N1" in result
    assert "N2" not in result
    assert result["N1"] == read
    assert result.values() == [read]


def test_append_volume_reverse_order():
    read = MeterRead(nmi="N1", energy_unit=EnergyUnit.KWH)
    days = [date(2024, 1, d) for d in range(28, 0, -1)]
    for day in days:
        read.append_volume(day, _vol(str(day.day)))
    assert list(read.volumes) == sorted(days)
    assert read.volumes[date(2024, 1, 5)] == _vol("5")


def test_parse_result_iterates_nmis():
    result = ParseResult(
        meter_reads={
            "N1": MeterRead(nmi="N1", energy_unit=EnergyUnit.KWH),
            "N2": MeterRead(nmi="N2", energy_unit=EnergyUnit.KWH),
        }
    )
    assert list(result) == ["N1", "N2"]
    assert all(nmi in result for nmi in result)

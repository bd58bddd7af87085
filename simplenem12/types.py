from __future__ import annotations
from bisect import bisect_left
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from . import canon


class RecordKind(str, Enum):
    """Record types recognised in a Simple NEM12 file, valued by wire code."""

    FILE_START = canon.FILE_START
    METER_BLOCK = canon.METER_BLOCK
    METER_VOLUME = canon.METER_VOLUME
    FILE_END = canon.FILE_END


class EnergyUnit(str, Enum):
    KWH = "KWH"


class Quality(str, Enum):
    A = "A"  # actual
    E = "E"  # estimated


class MeterVolume(BaseModel):
    """One day's energy reading.

    Attributes:
        volume: Exact decimal energy value, as written in the file
        quality: Actual or estimated flag
    """

    model_config = ConfigDict(frozen=True)

    volume: Decimal
    quality: Quality


class MeterRead(BaseModel):
    """All daily volumes read for one meter.

    Attributes:
        nmi: National Metering Identifier (free text from the 200 record)
        energy_unit: Unit every volume is measured in
        volumes: Date -> volume, kept in ascending date order
    """

    nmi: str
    energy_unit: EnergyUnit
    volumes: Dict[date, MeterVolume] = Field(default_factory=dict)

    def append_volume(self, day: date, volume: MeterVolume) -> None:
        """Store ``volume`` for ``day``, replacing any earlier reading for that day."""
        if (
            day in self.volumes
            or not self.volumes
            or day > next(reversed(self.volumes))
        ):
            self.volumes[day] = volume
            return
        items = list(self.volumes.items())
        pos = bisect_left(items, day, key=lambda item: item[0])
        items.insert(pos, (day, volume))
        self.volumes = dict(items)

    @property
    def start_date(self) -> Optional[date]:
        return next(iter(self.volumes), None)

    @property
    def end_date(self) -> Optional[date]:
        return next(reversed(self.volumes), None)

    def total_volume(self, quality: Optional[Quality] = None) -> Decimal:
        """Sum of all volumes, or only those carrying ``quality`` when given."""
        return sum(
            (
                v.volume
                for v in self.volumes.values()
                if quality is None or v.quality == quality
            ),
            Decimal("0"),
        )


class ParseResult(BaseModel):
    """Meter reads from one file, keyed by NMI in first-seen order."""

    meter_reads: Dict[str, MeterRead] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.meter_reads)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.meter_reads)

    def __contains__(self, nmi: object) -> bool:
        return nmi in self.meter_reads

    def __getitem__(self, nmi: str) -> MeterRead:
        return self.meter_reads[nmi]

    def values(self) -> List[MeterRead]:
        return list(self.meter_reads.values())

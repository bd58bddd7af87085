from __future__ import annotations
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Sequence

from . import canon, exceptions
from .types import EnergyUnit, Quality, RecordKind

if TYPE_CHECKING:
    from .ingest import ParserState

_DATE8 = re.compile(r"\d{8}", re.ASCII)
# Plain or scientific decimal notation; no NaN/Infinity, spaces or underscores
_DECIMAL = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def classify(fields: Sequence[str]) -> RecordKind:
    """Map a split line to its record kind by the leading wire code."""
    try:
        return RecordKind(fields[0])
    except ValueError:
        raise exceptions.InvalidRecordType(
            f"Invalid record type {fields[0]!r}."
        ) from None


def _require_field_count(
    kind: RecordKind, fields: Sequence[str], exc: type[exceptions.ParseError]
) -> None:
    expected = canon.FIELD_COUNTS[kind.value]
    exceptions.require(
        len(fields) == expected,
        f"Record {kind.value} expects {expected} field(s), got {len(fields)}.",
        exc,
    )


def check_structure(
    kind: RecordKind, fields: Sequence[str], state: "ParserState"
) -> None:
    """
    Enforce file-level placement and per-record field shape for one record.

    Runs before the record mutates ``state``:
      - the first record must be a 100
      - 100 must be a single field and the first record of the file
      - 900 must be a single field and appear at most once
      - 200 needs three fields and a known energy unit
      - 300 needs four fields, an open meter read and a known quality flag
    """
    exceptions.require(
        state.index != 0 or kind is RecordKind.FILE_START,
        f"First record must be a file start, got {kind.value}.",
        exceptions.InvalidFileStart,
    )
    if kind is RecordKind.FILE_START:
        _require_field_count(kind, fields, exceptions.InvalidFileStart)
        exceptions.require(
            state.index == 0,
            "File start record must be the first record.",
            exceptions.InvalidFileStart,
        )
    elif kind is RecordKind.FILE_END:
        _require_field_count(kind, fields, exceptions.InvalidFileEnd)
        exceptions.require(
            not state.file_end_seen,
            "File end record appears more than once.",
            exceptions.InvalidFileEnd,
        )
    elif kind is RecordKind.METER_BLOCK:
        _require_field_count(kind, fields, exceptions.InvalidMeterBlock)
        parse_energy_unit(fields[2])
    elif kind is RecordKind.METER_VOLUME:
        _require_field_count(kind, fields, exceptions.InvalidMeterVolume)
        exceptions.require(
            state.current is not None,
            "Meter volume record has no preceding meter block.",
            exceptions.NoOpenMeterRead,
        )
        parse_quality(fields[3])


def parse_energy_unit(text: str) -> EnergyUnit:
    try:
        return EnergyUnit(text)
    except ValueError:
        raise exceptions.InvalidEnergyUnit(
            f"Unsupported energy unit {text!r}; expected one of "
            f"{', '.join(u.value for u in EnergyUnit)}."
        ) from None


def parse_quality(text: str) -> Quality:
    try:
        return Quality(text)
    except ValueError:
        raise exceptions.InvalidQuality(
            f"Invalid quality flag {text!r}; expected one of "
            f"{', '.join(q.value for q in Quality)}."
        ) from None


def parse_date(text: str) -> date:
    """Parse an 8-digit YYYYMMDD calendar date."""
    if not _DATE8.fullmatch(text):
        raise exceptions.InvalidDate(f"Invalid date {text!r}; expected YYYYMMDD.")
    try:
        return datetime.strptime(text, canon.DATE_FORMAT).date()
    except ValueError:
        raise exceptions.InvalidDate(f"Invalid calendar date {text!r}.") from None


def parse_number(text: str) -> Decimal:
    """Parse an exact decimal volume, keeping its scale."""
    if not _DECIMAL.fullmatch(text):
        raise exceptions.InvalidNumber(f"Invalid volume {text!r}.")
    try:
        return Decimal(text)
    except InvalidOperation:
        raise exceptions.InvalidNumber(f"Invalid volume {text!r}.") from None

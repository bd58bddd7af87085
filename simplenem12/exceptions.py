from __future__ import annotations
from typing import Optional


class ParseError(Exception):
    """Base error for a failed Simple NEM12 parse.

    ``line_no`` is the 1-based physical line of the offending record when known.
    """

    def __init__(self, message: str, line_no: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line_no = line_no

    def __str__(self) -> str:
        if self.line_no is None:
            return self.message
        return f"line {self.line_no}: {self.message}"


class InvalidRecordType(ParseError): ...


class InvalidFileStart(ParseError): ...


class InvalidFileEnd(ParseError): ...


class MissingFileEnd(InvalidFileEnd): ...


class InvalidMeterBlock(ParseError): ...


class InvalidEnergyUnit(InvalidMeterBlock): ...


class DuplicateMeterRead(InvalidMeterBlock): ...


class InvalidMeterVolume(ParseError): ...


class NoOpenMeterRead(InvalidMeterVolume): ...


class InvalidQuality(InvalidMeterVolume): ...


class InvalidDate(InvalidMeterVolume): ...


class InvalidNumber(InvalidMeterVolume): ...


class LineSourceError(ParseError): ...


def require(condition: bool, message: str, exc: type[ParseError] = ParseError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)

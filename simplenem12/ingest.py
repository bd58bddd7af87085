from __future__ import annotations
import io
import logging
import os
import zipfile
import zlib
from collections.abc import Callable, Generator, Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Optional

from . import exceptions, validate
from .config import ParserConfig
from .types import MeterRead, MeterVolume, ParseResult, RecordKind

log = logging.getLogger(__name__)

# Failures a text or ZIP line source can raise mid-read
_READ_ERRORS = (
    OSError,
    UnicodeDecodeError,
    EOFError,
    zipfile.BadZipFile,
    zlib.error,
)


@dataclass
class ParserState:
    """
    Cursor for a single parse call; never shared between files.

    ``index`` counts processed records (blank lines excluded) while
    ``line_no`` tracks the physical line for error messages.
    """

    meter_reads: dict[str, MeterRead] = field(default_factory=dict)
    current: Optional[MeterRead] = None
    index: int = 0
    line_no: int = 0
    file_end_seen: bool = False


def _split(line: str, delimiter: str) -> list[str]:
    fields = line.rstrip("\r\n").split(delimiter)
    # trailing empty fields are not significant: "100," is a one-field record
    while len(fields) > 1 and not fields[-1]:
        fields.pop()
    return fields


def _open_meter_read(
    fields: list[str], state: ParserState, config: ParserConfig
) -> None:
    nmi = fields[1]
    unit = validate.parse_energy_unit(fields[2])

    existing = state.meter_reads.get(nmi)
    if existing is not None:
        exceptions.require(
            config.duplicate_meters == "merge",
            f"Duplicate meter block for NMI {nmi!r}.",
            exceptions.DuplicateMeterRead,
        )
        exceptions.require(
            existing.energy_unit == unit,
            f"Meter block for NMI {nmi!r} changes unit from "
            f"{existing.energy_unit.value} to {unit.value}.",
            exceptions.InvalidEnergyUnit,
        )
        log.debug("Reopening meter read %s at line %d", nmi, state.line_no)
        state.current = existing
        return

    meter_read = MeterRead(nmi=nmi, energy_unit=unit)
    state.meter_reads[nmi] = meter_read
    state.current = meter_read
    log.debug("Opened meter read %s at line %d", nmi, state.line_no)


def _append_volume(
    fields: list[str], state: ParserState, config: ParserConfig
) -> None:
    exceptions.require(
        state.current is not None,
        "Meter volume record has no preceding meter block.",
        exceptions.NoOpenMeterRead,
    )
    day = validate.parse_date(fields[1])
    volume = validate.parse_number(fields[2])
    quality = validate.parse_quality(fields[3])
    state.current.append_volume(day, MeterVolume(volume=volume, quality=quality))


def _close_file(fields: list[str], state: ParserState, config: ParserConfig) -> None:
    state.file_end_seen = True


# 100 records carry no data; they only pass the placement check
_ASSEMBLERS: dict[
    RecordKind, Callable[[list[str], ParserState, ParserConfig], None]
] = {
    RecordKind.METER_BLOCK: _open_meter_read,
    RecordKind.METER_VOLUME: _append_volume,
    RecordKind.FILE_END: _close_file,
}


def _iter_source(lines: Iterable[str]) -> Iterator[str]:
    """Iterate a line source, surfacing read failures as LineSourceError."""
    try:
        for line in lines:
            yield line
    except _READ_ERRORS as e:
        raise exceptions.LineSourceError(f"Failed to read line source: {e}") from e


def _finish(state: ParserState, config: ParserConfig) -> None:
    if state.index == 0:
        raise exceptions.InvalidFileStart("No records found; file start is missing.")
    if not state.file_end_seen:
        if config.require_file_end:
            raise exceptions.MissingFileEnd(
                "Reached end of input without a file end record.", state.line_no
            )
        log.warning("Missing file end (900) record")


def parse(lines: Iterable[str], config: Optional[ParserConfig] = None) -> ParseResult:
    """
    Parse Simple NEM12 lines into meter reads.

    Each non-blank line is classified, structurally validated and then
    assembled into the result. The first invalid record raises the matching
    ``exceptions.ParseError`` subclass with its line number; nothing is
    returned for a file that fails part way.
    """
    config = config or ParserConfig()
    state = ParserState()

    for line_no, line in enumerate(_iter_source(lines), start=1):
        state.line_no = line_no
        if not line.strip():
            continue

        fields = _split(line, config.delimiter)
        try:
            kind = validate.classify(fields)
            validate.check_structure(kind, fields, state)
            assemble = _ASSEMBLERS.get(kind)
            if assemble is not None:
                assemble(fields, state, config)
        except exceptions.ParseError as e:
            if e.line_no is None:
                e.line_no = line_no
            raise
        state.index += 1

    _finish(state, config)
    log.debug(
        "Parsed %d meter read(s) from %d record(s)",
        len(state.meter_reads),
        state.index,
    )
    return ParseResult(meter_reads=state.meter_reads)


def _open_text(path: str | os.PathLike, stack: ExitStack) -> IO[str]:
    if zipfile.is_zipfile(path):
        zf = stack.enter_context(zipfile.ZipFile(path))
        names = zf.namelist()
        if len(names) != 1:
            raise exceptions.LineSourceError(
                f"ZIP must contain exactly one file, found {len(names)}"
            )
        try:
            binary = stack.enter_context(zf.open(names[0]))
        except (RuntimeError, NotImplementedError) as e:
            # encrypted member or unsupported compression method
            raise exceptions.LineSourceError(
                f"Cannot read {names[0]!r} from {path}: {e}"
            ) from e
        return stack.enter_context(io.TextIOWrapper(binary, encoding="utf-8-sig"))
    return stack.enter_context(Path(path).open(encoding="utf-8-sig"))


@contextmanager
def read_lines(path: str | os.PathLike) -> Generator[IO[str]]:
    """
    Open a Simple NEM12 file (plain text or a ZIP holding one file) for
    line-by-line reading. The file is closed when the block exits.
    """
    with ExitStack() as stack:
        try:
            handle = _open_text(path, stack)
        except (OSError, zipfile.BadZipFile) as e:
            raise exceptions.LineSourceError(f"Cannot open {path}: {e}") from e
        yield handle


def parse_file(
    source: IO[str] | str | os.PathLike,
    config: Optional[ParserConfig] = None,
) -> ParseResult:
    """
    Parse a Simple NEM12 file from a path or an open text handle.

    Paths are opened and closed here; handles stay open for their owner.
    """
    if isinstance(source, (str, os.PathLike)):
        with read_lines(source) as lines:
            return parse(lines, config)
    return parse(source, config)

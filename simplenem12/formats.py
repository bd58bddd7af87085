from __future__ import annotations
from datetime import datetime
from zoneinfo import ZoneInfo

import numpy as np
import pandas as pd

from . import canon
from .types import ParseResult


def to_lines(result: ParseResult, delimiter: str = canon.DELIMITER) -> list[str]:
    """
    Serialise parsed meter reads back to Simple NEM12 records.

    Layout: 100, then per meter a 200 record followed by its 300 records in
    date order, then 900. Volumes are written with ``str(Decimal)`` so scale
    and exponent survive a re-parse.
    """
    lines = [canon.FILE_START]
    for read in result.values():
        lines.append(
            delimiter.join([canon.METER_BLOCK, read.nmi, read.energy_unit.value])
        )
        for day, vol in read.volumes.items():
            lines.append(
                delimiter.join(
                    [
                        canon.METER_VOLUME,
                        day.strftime(canon.DATE_FORMAT),
                        str(vol.volume),
                        vol.quality.value,
                    ]
                )
            )
    lines.append(canon.FILE_END)
    return lines


def dumps(result: ParseResult, delimiter: str = canon.DELIMITER) -> str:
    return "\n".join(to_lines(result, delimiter)) + "\n"


def to_frame(result: ParseResult, *, tz: str = canon.DEFAULT_TZ) -> pd.DataFrame:
    """
    Flatten meter reads into a tidy, tz-aware DataFrame, one row per day.

    Index: tz-aware DatetimeIndex named 't_start' (local midnight)
    Columns: nmi, uom, kwh, quality

    Decimal volumes become floats here; use the model for exact values.
    """
    rows = [
        {
            canon.INDEX_NAME: datetime(day.year, day.month, day.day),
            "nmi": read.nmi,
            "uom": read.energy_unit.value,
            "kwh": float(vol.volume),
            "quality": vol.quality.value,
        }
        for read in result.values()
        for day, vol in read.volumes.items()
    ]

    if not rows:
        idx = pd.DatetimeIndex([], tz=ZoneInfo(tz), name=canon.INDEX_NAME)
        return pd.DataFrame(columns=canon.FRAME_COLS, index=idx)

    df = pd.DataFrame(rows)
    # Midnight inside a DST gap moves to the first valid time; a repeated
    # midnight resolves to standard time
    df[canon.INDEX_NAME] = df[canon.INDEX_NAME].dt.tz_localize(
        ZoneInfo(tz),
        ambiguous=np.zeros(len(df), dtype=bool),
        nonexistent="shift_forward",
    )
    df = df.sort_values(["nmi", canon.INDEX_NAME], kind="stable")
    return df.set_index(canon.INDEX_NAME)[canon.FRAME_COLS]

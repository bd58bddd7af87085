from __future__ import annotations
from typing import Final

DELIMITER: Final[str] = ","
DATE_FORMAT: Final[str] = "%Y%m%d"

# Wire codes of the four Simple NEM12 record types
FILE_START: Final[str] = "100"
METER_BLOCK: Final[str] = "200"
METER_VOLUME: Final[str] = "300"
FILE_END: Final[str] = "900"

# Expected field counts per record type
FIELD_COUNTS: Final[dict[str, int]] = {
    FILE_START: 1,
    METER_BLOCK: 3,
    METER_VOLUME: 4,
    FILE_END: 1,
}

# Tidy frame
INDEX_NAME: Final[str] = "t_start"
FRAME_COLS: Final[list[str]] = ["nmi", "uom", "kwh", "quality"]
DEFAULT_TZ: Final[str] = "Australia/Brisbane"

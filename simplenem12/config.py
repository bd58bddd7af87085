from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from . import canon


@dataclass(frozen=True)
class ParserConfig:
    delimiter: str = canon.DELIMITER

    # What a second 200 record for an already-seen NMI does:
    # "merge" reopens the existing read, "reject" fails the parse.
    duplicate_meters: Literal["merge", "reject"] = "merge"

    # Fail at end of input when no 900 record was seen
    require_file_end: bool = False

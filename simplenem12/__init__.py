import logging

from . import (
    canon,
    config,
    exceptions,
    types,
    validate,
    ingest,
    formats,
)
from .ingest import parse, parse_file

__all__ = [
    "canon",
    "config",
    "exceptions",
    "types",
    "validate",
    "ingest",
    "formats",
    "parse",
    "parse_file",
]

# Library logging stays silent unless the application configures it
logging.getLogger(__name__).addHandler(logging.NullHandler())

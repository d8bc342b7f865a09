"""Domain models: provenance (Origin, Located) and extractor state.

ColumnSpec lives in ``sheetmap.models.column_spec`` (it depends on the error
taxonomy, which in turn depends on Origin).
"""

from .extractor_state import ExtractorState, Message, Position
from .located import CellKind, CellValue, DecodeFailure, Located, kind_of, realize, unwrap
from .origin import Granularity, Origin, OriginKind, column_name, format_origin

__all__ = [
    # Provenance
    "Origin",
    "OriginKind",
    "Granularity",
    "Located",
    "column_name",
    "format_origin",
    "unwrap",
    "realize",
    # Values
    "CellValue",
    "CellKind",
    "kind_of",
    "DecodeFailure",
    # Extractors
    "ExtractorState",
    "Message",
    "Position",
]

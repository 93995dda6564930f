"""Data models for BIFF8 records.

This module provides typed Python classes for the records that carry
workbook structure: substream markers, sheet descriptors and defined
names. Everything else is kept as an opaque BiffRecord.
"""

from .bof import BIFF8_VERSION, Bof, BofDocType, Eof
from .boundsheet import BoundSheet8, SheetState, SheetType
from .label import BuiltinName, Lbl
from .record import (
    MAX_RECORD_LENGTH,
    RECORD_HEADER_SIZE,
    BiffRecord,
    RecordType,
    make_record,
    register_record,
    typed_record,
)
from .strings import XLUnicodeString

__all__ = [
    "BIFF8_VERSION",
    "MAX_RECORD_LENGTH",
    "RECORD_HEADER_SIZE",
    "BiffRecord",
    "Bof",
    "BofDocType",
    "BoundSheet8",
    "BuiltinName",
    "Eof",
    "Lbl",
    "RecordType",
    "SheetState",
    "SheetType",
    "XLUnicodeString",
    "make_record",
    "register_record",
    "typed_record",
]

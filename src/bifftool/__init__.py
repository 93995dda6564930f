"""bifftool - Structural editing for legacy Excel (BIFF8) workbook streams.

This library reads the Workbook stream out of an .xls file and lets you
edit it record by record while keeping the stream well-formed:
- Records are located by content, never by index
- Sheet boundaries (BOF ... EOF runs) are recovered by scanning
- BoundSheet8 offsets are recomputed after structural edits
- The Auto_Open label can be renamed to dodge naive signatures

Example:
    from bifftool import BoundSheet8, WorkbookStream

    stream = WorkbookStream.open("book.xls")
    stream = stream.add_sheet(BoundSheet8.create("Macro1"), sheet_bytes)
    stream = stream.obfuscate_auto_open()
    data = stream.to_bytes()
"""

__version__ = "0.1.0"

from .exceptions import (
    BiffError,
    CorruptedDataError,
    FormatError,
    InvalidContainerError,
    MalformedRecordError,
    MissingEofError,
    OffsetMismatchError,
    RecordNotFoundError,
    RecordTypeMismatchError,
    StreamNotFoundError,
    StructuralInconsistencyError,
    WorkbookError,
)
from .models import (
    BiffRecord,
    Bof,
    BofDocType,
    BoundSheet8,
    BuiltinName,
    Eof,
    Lbl,
    RecordType,
    SheetState,
    SheetType,
    XLUnicodeString,
)
from .obfuscation import AutoOpenObfuscation, is_auto_open_label, normalize_label_name
from .parsing import parse_records, read_workbook_stream, serialize_records
from .workbook import WorkbookStream

__all__ = [
    # Core classes
    "WorkbookStream",
    "AutoOpenObfuscation",
    # Records
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
    # Functions
    "is_auto_open_label",
    "normalize_label_name",
    "parse_records",
    "read_workbook_stream",
    "serialize_records",
    # Exceptions
    "BiffError",
    "FormatError",
    "CorruptedDataError",
    "InvalidContainerError",
    "StreamNotFoundError",
    "RecordTypeMismatchError",
    "WorkbookError",
    "RecordNotFoundError",
    "StructuralInconsistencyError",
    "MissingEofError",
    "OffsetMismatchError",
    "MalformedRecordError",
]

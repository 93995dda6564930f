"""Record builders for tests.

Real .xls files are awkward fixtures: they're binary, hard to review,
and every edit to them shifts offsets. These helpers build small but
structurally valid Workbook streams in code instead.

The streams are minimal: Excel needs many more records (fonts, formats,
window settings, ...) before it will open them. They carry exactly the
records that matter for structural editing.

Example:
    >>> stream = build_workbook(["Sheet1", "Sheet2"])
    >>> [d.name for d in stream.get_all_records_by_type(BoundSheet8)]
    ['Sheet1', 'Sheet2']
"""

from __future__ import annotations

import struct

from bifftool.models import (
    BiffRecord,
    Bof,
    BofDocType,
    BoundSheet8,
    BuiltinName,
    Eof,
    Lbl,
)
from bifftool.workbook import WorkbookStream

# Record ids used for filler records
CODEPAGE = 0x0042
WINDOW1 = 0x003D
NUMBER = 0x0203

# PtgRef3d-style formula bytes pointing at a macro sheet cell
DEFAULT_MACRO_FORMULA = bytes.fromhex("3a000000000000")


def build_cell(row: int, column: int, value: float) -> BiffRecord:
    """Build a NUMBER cell record."""
    return BiffRecord(NUMBER, struct.pack("<HHHd", row, column, 0x000F, value))


def build_sheet(
    cell_count: int = 1, doc_type: int = BofDocType.WORKSHEET
) -> list[BiffRecord]:
    """Build a sheet substream: BOF, cell_count NUMBER cells, EOF."""
    cells = [build_cell(row, 0, float(row)) for row in range(cell_count)]
    return [Bof.create(doc_type), *cells, Eof.create()]


def build_globals(
    sheet_names: list[str],
    labels: list[Lbl] | None = None,
) -> list[BiffRecord]:
    """Build the workbook globals substream.

    Positions in the BoundSheet8 records are left at zero; callers fix
    them up once the sheets are in place.
    """
    records: list[BiffRecord] = [
        Bof.create(BofDocType.GLOBALS),
        BiffRecord(CODEPAGE, struct.pack("<H", 1200)),
        BiffRecord(WINDOW1, b"\x00" * 18),
    ]
    records.extend(BoundSheet8.create(name) for name in sheet_names)
    records.extend(labels or [])
    records.append(Eof.create())
    return records


def build_workbook(
    sheet_names: list[str] | None = None,
    labels: list[Lbl] | None = None,
    cells_per_sheet: int = 1,
) -> WorkbookStream:
    """Build a Workbook stream with correct BoundSheet8 offsets.

    Args:
        sheet_names: One worksheet is built per name (default ["Sheet1"])
        labels: Lbl records to place in the globals
        cells_per_sheet: Number of cells in each sheet

    Returns:
        WorkbookStream with sheet positions fixed up
    """
    if sheet_names is None:
        sheet_names = ["Sheet1"]
    records = build_globals(sheet_names, labels)
    for _ in sheet_names:
        records.extend(build_sheet(cells_per_sheet))
    return WorkbookStream(records).fix_boundsheet_offsets()


def build_auto_open_label(builtin: bool = True) -> Lbl:
    """Build an Auto_Open label.

    Args:
        builtin: Use the built-in 0x01 name code rather than the text
            name "Auto_Open"
    """
    if builtin:
        return Lbl.create_builtin(BuiltinName.AUTO_OPEN, formula=DEFAULT_MACRO_FORMULA)
    return Lbl.create("Auto_Open", formula=DEFAULT_MACRO_FORMULA)

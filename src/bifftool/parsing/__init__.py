"""BIFF8 stream parsing and container access.

This module handles the low-level operations around the record core:
- Splitting a Workbook stream into records and joining them back
- Extracting the Workbook stream from an OLE compound document

Record parsing uses Python's struct module; containers are read with olefile.
"""

from .container import WORKBOOK_STREAM, list_streams, read_workbook_stream
from .records import iter_record_headers, parse_records, serialize_records

__all__ = [
    # Records
    "iter_record_headers",
    "parse_records",
    "serialize_records",
    # Container
    "WORKBOOK_STREAM",
    "list_streams",
    "read_workbook_stream",
]

"""BIFF8 record stream codec.

A Workbook stream is a flat run of records, each a 4-byte header
(id, payload length) followed by the payload. There is no index:
structure is recovered by walking the headers in order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from bifftool.exceptions import CorruptedDataError, MalformedRecordError
from bifftool.models import RECORD_HEADER_SIZE, BiffRecord, make_record
from bifftool.models.record import RECORD_HEADER

logger = logging.getLogger(__name__)


def iter_record_headers(data: bytes) -> Iterator[tuple[int, int, int]]:
    """Walk record headers without building records.

    Args:
        data: Raw record stream

    Yields:
        Tuples of (stream offset, record id, payload length)

    Raises:
        CorruptedDataError: If a header or payload runs past the end of data
    """
    offset = 0
    end = len(data)
    while offset < end:
        if offset + RECORD_HEADER_SIZE > end:
            raise CorruptedDataError(
                f"Truncated record header at offset {offset}", offset=offset
            )
        record_id, length = RECORD_HEADER.unpack_from(data, offset)
        if offset + RECORD_HEADER_SIZE + length > end:
            raise CorruptedDataError(
                f"Record 0x{record_id:04X} at offset {offset} declares "
                f"{length} bytes but only {end - offset - RECORD_HEADER_SIZE} remain",
                offset=offset,
            )
        yield offset, record_id, length
        offset += RECORD_HEADER_SIZE + length


def parse_records(data: bytes) -> list[BiffRecord]:
    """Split a record stream into records.

    Structural record ids (BOF, EOF, BoundSheet8, Lbl) come back as
    their typed classes; everything else as BiffRecord.

    Args:
        data: Raw record stream, e.g. the contents of a Workbook stream

    Returns:
        Records in stream order

    Raises:
        CorruptedDataError: If the stream is truncated
        MalformedRecordError: If a structural record's payload is malformed
    """
    records: list[BiffRecord] = []
    for offset, record_id, length in iter_record_headers(data):
        start = offset + RECORD_HEADER_SIZE
        try:
            records.append(make_record(record_id, data[start : start + length]))
        except MalformedRecordError as e:
            raise MalformedRecordError(
                f"Malformed record 0x{record_id:04X} at offset {offset}: {e}",
                offset=offset,
            ) from e
    logger.debug("Parsed %d records from %d bytes", len(records), len(data))
    return records


def serialize_records(records: Iterable[BiffRecord]) -> bytes:
    """Serialize records back to a record stream."""
    return b"".join(record.to_bytes() for record in records)

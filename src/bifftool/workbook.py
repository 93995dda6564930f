"""High-level editing API for BIFF8 Workbook streams.

This module provides the main interface for structural edits:
- Loading a Workbook stream from an .xls file, raw bytes or records
- Finding, inserting, removing and replacing records
- Adding sheets and keeping BoundSheet8 offsets in sync
- Obfuscating the Auto_Open label

A WorkbookStream is a value. Every edit returns a new WorkbookStream
and leaves the original untouched, so a failed edit never leaves a
half-modified stream behind.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from typing import TypeVar, overload

from .exceptions import (
    MissingEofError,
    OffsetMismatchError,
    RecordNotFoundError,
    StructuralInconsistencyError,
)
from .models import BiffRecord, Bof, BoundSheet8, Lbl, RecordType, typed_record
from .obfuscation import AutoOpenObfuscation, is_auto_open_label
from .parsing import (
    WORKBOOK_STREAM,
    parse_records,
    read_workbook_stream,
    serialize_records,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BiffRecord)


class WorkbookStream:
    """An ordered sequence of BIFF8 records.

    Records are located by structural equality (same id, same payload)
    rather than by index, since indexes shift with every edit while a
    record's content does not. Lookups scan the sequence each time.

    The stream layout is recovered by scanning: the first BOF opens the
    workbook globals, and each later BOF...EOF run is one sheet. Every
    BoundSheet8 in the globals stores the stream offset of its sheet's
    BOF; the Nth BoundSheet8 belongs to the Nth sheet BOF.
    """

    def __init__(self, records: Iterable[BiffRecord] = ()) -> None:
        """Create a stream from records.

        Generic records carrying a structural id (BOF, EOF, BoundSheet8,
        Lbl) are converted to their typed classes, so a malformed one is
        rejected here rather than during a later edit.

        Args:
            records: Records in stream order; the sequence is copied

        Raises:
            MalformedRecordError: If a structural record's payload is malformed
        """
        self._records: tuple[BiffRecord, ...] = tuple(
            typed_record(record) for record in records
        )

    @classmethod
    def open(
        cls,
        filepath: str | os.PathLike[str],
        stream_name: str = WORKBOOK_STREAM,
    ) -> WorkbookStream:
        """Load the Workbook stream of an .xls file.

        Args:
            filepath: Path to the compound document
            stream_name: Name of the record stream inside the container

        Returns:
            WorkbookStream holding the parsed records

        Raises:
            FileNotFoundError: If the file doesn't exist
            InvalidContainerError: If the file is not an OLE compound document
            StreamNotFoundError: If the container has no such stream
            CorruptedDataError: If the stream can't be split into records
        """
        return cls.open_bytes(read_workbook_stream(filepath, stream_name))

    @classmethod
    def open_bytes(cls, data: bytes) -> WorkbookStream:
        """Parse a raw Workbook stream."""
        return cls(parse_records(data))

    @property
    def records(self) -> tuple[BiffRecord, ...]:
        """Records in stream order."""
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BiffRecord]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WorkbookStream):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"WorkbookStream({len(self._records)} records)"

    # --- Lookup ---

    def contains_record(self, record: BiffRecord) -> bool:
        """Check whether a structurally equal record is in the stream."""
        return any(r == record for r in self._records if r.id == record.id)

    def _record_offset(self, record: BiffRecord) -> int:
        """Index of the first record equal to record.

        Raises:
            RecordNotFoundError: If no record matches
        """
        for index, candidate in enumerate(self._records):
            if candidate.id == record.id and candidate == record:
                return index
        raise RecordNotFoundError(f"Could not find record {record!r}")

    def get_record_byte_offset(self, record: BiffRecord) -> int:
        """Stream offset of a record's header.

        Args:
            record: Record to locate (first structural match is used)

        Returns:
            Sum of the serialized sizes of all preceding records

        Raises:
            RecordNotFoundError: If the record is not in the stream
        """
        index = self._record_offset(record)
        return sum(r.size for r in self._records[:index])

    @overload
    def get_all_records_by_type(self, record_type: type[R]) -> list[R]: ...

    @overload
    def get_all_records_by_type(self, record_type: int) -> list[BiffRecord]: ...

    def get_all_records_by_type(
        self, record_type: type[BiffRecord] | int
    ) -> list[BiffRecord]:
        """Get copies of all records of one type, in stream order.

        Args:
            record_type: A typed record class (Bof, BoundSheet8, Lbl, ...)
                to get typed records, or a record id to get generic ones

        Returns:
            Independent copies of the matching records
        """
        if isinstance(record_type, type):
            if record_type.record_type is None:
                raise ValueError(f"{record_type.__name__} is not bound to a record id")
            return [
                r.as_record_type(record_type)
                for r in self._records
                if r.id == record_type.record_type
            ]
        return [
            BiffRecord(r.id, r.data) for r in self._records if r.id == int(record_type)
        ]

    def get_records_for_bof(self, bof: Bof) -> list[BiffRecord]:
        """Get the records of the substream opened by a BOF.

        Args:
            bof: BOF record opening the substream

        Returns:
            Records from bof up to and including the next EOF

        Raises:
            RecordNotFoundError: If bof is not in the stream
            MissingEofError: If no EOF follows bof
        """
        start = self._record_offset(bof)
        for index in range(start, len(self._records)):
            if self._records[index].id == RecordType.EOF:
                return list(self._records[start : index + 1])
        raise MissingEofError(
            f"No EOF record follows the BOF at record index {start}"
        )

    # --- Editing ---

    def remove_record(self, record: BiffRecord) -> WorkbookStream:
        """Return a stream without the first record equal to record.

        Raises:
            RecordNotFoundError: If the record is not in the stream
        """
        index = self._record_offset(record)
        return WorkbookStream(self._records[:index] + self._records[index + 1 :])

    def insert_record(
        self, record: BiffRecord, after: BiffRecord | None = None
    ) -> WorkbookStream:
        """Return a stream with record inserted after another record.

        See insert_records.
        """
        return self.insert_records([record], after)

    def insert_records(
        self, records: Iterable[BiffRecord], after: BiffRecord | None = None
    ) -> WorkbookStream:
        """Return a stream with records inserted after another record.

        Args:
            records: Records to insert, in order
            after: Anchor record; the records are appended at the end
                of the stream when omitted

        Returns:
            New WorkbookStream

        Raises:
            RecordNotFoundError: If after is given but not in the stream
            MalformedRecordError: If an inserted structural record is malformed
        """
        new_records = tuple(records)
        if after is None:
            return WorkbookStream(self._records + new_records)

        index = self._record_offset(after) + 1
        return WorkbookStream(
            self._records[:index] + new_records + self._records[index:]
        )

    def replace_record(
        self, old_record: BiffRecord, new_record: BiffRecord
    ) -> WorkbookStream:
        """Return a stream with the first match of old_record swapped for new_record.

        Raises:
            RecordNotFoundError: If old_record is not in the stream
        """
        index = self._record_offset(old_record)
        return WorkbookStream(
            self._records[:index] + (new_record,) + self._records[index + 1 :]
        )

    # --- Sheets ---

    def add_sheet(
        self,
        sheet_header: BoundSheet8,
        sheet: bytes | Iterable[BiffRecord],
    ) -> WorkbookStream:
        """Return a stream with a new sheet.

        The descriptor goes right after the last existing BoundSheet8 and
        the sheet substream is appended at the end of the stream. Sheet
        offsets are fixed up afterwards.

        Args:
            sheet_header: BoundSheet8 describing the new sheet
            sheet: The sheet substream (BOF ... EOF), as raw bytes or records

        Returns:
            New WorkbookStream

        Raises:
            RecordNotFoundError: If the workbook has no BoundSheet8 yet
            StructuralInconsistencyError: If sheet is not a BOF ... EOF run
        """
        existing = self.get_all_records_by_type(BoundSheet8)
        if not existing:
            raise RecordNotFoundError(
                "Workbook has no BoundSheet8 record to insert the new sheet after"
            )

        if isinstance(sheet, (bytes, bytearray)):
            sheet_records = parse_records(bytes(sheet))
        else:
            sheet_records = list(sheet)
        if (
            not sheet_records
            or sheet_records[0].id != RecordType.BOF
            or sheet_records[-1].id != RecordType.EOF
        ):
            raise StructuralInconsistencyError(
                "Sheet records must start with a BOF and end with an EOF"
            )

        stream = self.insert_record(sheet_header, after=existing[-1])
        stream = stream.insert_records(sheet_records)
        logger.debug(
            "Added sheet %r with %d records", sheet_header.name, len(sheet_records)
        )
        return stream.fix_boundsheet_offsets()

    def fix_boundsheet_offsets(self) -> WorkbookStream:
        """Return a stream whose BoundSheet8 positions match their sheets.

        Needs to be called after any edit that moves a sheet's BOF:
        inserting, removing or resizing any record before it. The Nth
        BoundSheet8 is pointed at the Nth BOF after the globals BOF.

        Returns:
            New WorkbookStream with updated BoundSheet8 records

        Raises:
            OffsetMismatchError: If the number of BoundSheet8 records
                doesn't match the number of sheet BOF records
        """
        descriptor_indexes: list[int] = []
        bof_offsets: list[int] = []
        first_bof: BiffRecord | None = None
        offset = 0
        for index, record in enumerate(self._records):
            if record.id == RecordType.BOUNDSHEET8:
                descriptor_indexes.append(index)
            elif record.id == RecordType.BOF:
                if first_bof is None:
                    first_bof = record
                bof_offsets.append(offset)
            offset += record.size

        if first_bof is not None and not first_bof.as_record_type(Bof).is_globals:
            logger.warning("First BOF record does not open a workbook globals substream")

        # The first BOF opens the globals and has no BoundSheet8
        sheet_offsets = bof_offsets[1:]
        if len(descriptor_indexes) != len(sheet_offsets):
            raise OffsetMismatchError(len(descriptor_indexes), len(sheet_offsets))

        records = list(self._records)
        for index, sheet_offset in zip(descriptor_indexes, sheet_offsets):
            descriptor = records[index].as_record_type(BoundSheet8)
            if descriptor.position != sheet_offset:
                logger.debug(
                    "Moving sheet %r from offset %d to %d",
                    descriptor.name,
                    descriptor.position,
                    sheet_offset,
                )
            records[index] = descriptor.with_position(sheet_offset)
        return WorkbookStream(records)

    # --- Labels ---

    def get_auto_open_labels(self) -> list[Lbl]:
        """Get all labels that Excel treats as Auto_Open."""
        return [
            label
            for label in self.get_all_records_by_type(Lbl)
            if is_auto_open_label(label)
        ]

    def obfuscate_auto_open(
        self, settings: AutoOpenObfuscation | None = None
    ) -> WorkbookStream:
        """Return a stream with the Auto_Open label disguised.

        The first Auto_Open label loses its fBuiltin flag and is renamed
        to a mixed-case, NUL-interleaved spelling that Excel still runs
        but that doesn't match the usual byte signatures. Because the
        name changes length, sheet offsets are fixed up afterwards.

        Args:
            settings: Replacement name settings (defaults to
                AutoOpenObfuscation.default())

        Returns:
            New WorkbookStream

        Raises:
            RecordNotFoundError: If the workbook has no Auto_Open label
        """
        if settings is None:
            settings = AutoOpenObfuscation.default()

        labels = self.get_auto_open_labels()
        if not labels:
            raise RecordNotFoundError("Workbook has no Auto_Open label")

        auto_open = labels[0]
        replacement = auto_open.with_name(settings.label_name()).with_builtin(False)
        stream = self.replace_record(auto_open, replacement)
        logger.debug(
            "Renamed Auto_Open label (%d -> %d bytes)", auto_open.size, replacement.size
        )
        return stream.fix_boundsheet_offsets()

    # --- Serialization ---

    def to_bytes(self) -> bytes:
        """Serialize the stream to raw Workbook stream bytes."""
        return serialize_records(self._records)

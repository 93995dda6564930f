"""Custom exception hierarchy for bifftool.

This module provides the exceptions raised while parsing and editing
BIFF8 workbook streams. All exceptions inherit from BiffError.

Exception Hierarchy:
    BiffError (base)
    ├── FormatError
    │   ├── CorruptedDataError
    │   ├── InvalidContainerError
    │   └── StreamNotFoundError
    ├── RecordTypeMismatchError
    └── WorkbookError
        ├── RecordNotFoundError
        └── StructuralInconsistencyError
            ├── MissingEofError
            ├── OffsetMismatchError
            └── MalformedRecordError (also a CorruptedDataError)

Editing operations never leave a half-edited stream behind: when one of
these is raised, the WorkbookStream the call was made on is unchanged.
"""

from __future__ import annotations


class BiffError(Exception):
    """Base exception for all bifftool errors.

    All exceptions raised by bifftool inherit from this class,
    making it easy to catch all library-specific errors.
    """


# --- Format Errors ---


class FormatError(BiffError):
    """Error in the container or record stream format.

    Raised when input bytes don't form a valid OLE container or
    BIFF8 record stream.
    """


class CorruptedDataError(FormatError):
    """Record stream is truncated or malformed.

    A record header or payload runs past the end of the buffer,
    so the stream cannot be split into whole records.
    """

    def __init__(self, message: str, offset: int | None = None) -> None:
        self.offset = offset
        super().__init__(message)


class InvalidContainerError(FormatError):
    """Input is not an OLE compound document."""

    def __init__(self, message: str = "Not an OLE compound document") -> None:
        super().__init__(message)


class StreamNotFoundError(FormatError):
    """The compound document has no stream with the requested name.

    Legacy workbooks keep their records in a stream called "Workbook".
    """

    def __init__(self, stream_name: str) -> None:
        self.stream_name = stream_name
        super().__init__(f"Stream not found in container: {stream_name}")


# --- Type Errors ---


class RecordTypeMismatchError(BiffError):
    """A record was requested as a type that doesn't match its id.

    Raised by BiffRecord.as_record_type when, for example, an EOF
    record is viewed as a BoundSheet8.
    """

    def __init__(self, record_id: int, expected_id: int) -> None:
        self.record_id = record_id
        self.expected_id = expected_id
        super().__init__(
            f"Record id 0x{record_id:04X} does not match requested type "
            f"0x{expected_id:04X}"
        )


# --- Workbook Errors ---


class WorkbookError(BiffError):
    """Error in workbook stream operations.

    Base class for errors that occur while querying or editing
    a parsed record sequence.
    """


class RecordNotFoundError(WorkbookError):
    """Record not found in the workbook stream.

    The anchor, target or required record is not present. Matching
    is structural: same record id and identical payload.
    """

    def __init__(self, message: str = "Record not found") -> None:
        super().__init__(message)


class StructuralInconsistencyError(WorkbookError):
    """The stream's sheet structure is inconsistent.

    Continuing would produce a corrupt workbook, so the operation
    is abandoned.
    """


class MissingEofError(StructuralInconsistencyError):
    """A BOF record has no EOF record after it."""

    def __init__(self, message: str = "No EOF record follows the BOF record") -> None:
        super().__init__(message)


class OffsetMismatchError(StructuralInconsistencyError):
    """Sheet descriptors and sheet BOF records can't be paired.

    Every BoundSheet8 record must have exactly one matching
    non-global BOF record, in the same order.
    """

    def __init__(self, descriptor_count: int, bof_count: int) -> None:
        self.descriptor_count = descriptor_count
        self.bof_count = bof_count
        super().__init__(
            f"Found {descriptor_count} BoundSheet8 records but "
            f"{bof_count} sheet BOF records"
        )


class MalformedRecordError(CorruptedDataError, StructuralInconsistencyError):
    """A structural record's payload doesn't match its layout.

    Raised when a BOF, BoundSheet8 or Lbl record is too short for its
    fields, whether it came from a parsed stream or from the caller.
    """

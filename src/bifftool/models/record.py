"""Generic BIFF8 record and the record type registry."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import ClassVar, TypeVar

from bifftool.exceptions import RecordTypeMismatchError

# Record header: 2-byte id, 2-byte payload length
RECORD_HEADER = struct.Struct("<HH")
RECORD_HEADER_SIZE = RECORD_HEADER.size
MAX_RECORD_LENGTH = 0xFFFF


class RecordType(IntEnum):
    """Record ids that carry workbook structure.

    Any id not listed here is kept as an opaque BiffRecord.
    """

    EOF = 0x000A
    LBL = 0x0018
    BOUNDSHEET8 = 0x0085
    BOF = 0x0809


R = TypeVar("R", bound="BiffRecord")

# Record id -> typed record class, filled in by @register_record
_RECORD_CLASSES: dict[int, type[BiffRecord]] = {}


class BiffRecord:
    """A single record in a BIFF8 stream.

    Records are immutable values. Two records are equal when they have
    the same id and byte-identical payloads, regardless of which typed
    view they are accessed through.

    Attributes:
        id: Record type id
        data: Raw payload bytes (excluding the 4-byte header)
    """

    # Typed subclasses set this to their record id
    record_type: ClassVar[int | None] = None

    __slots__ = ("_id", "_data")

    def __init__(self, record_id: int, data: bytes = b"") -> None:
        if not 0 <= record_id <= 0xFFFF:
            raise ValueError(f"Record id out of range: {record_id}")
        if len(data) > MAX_RECORD_LENGTH:
            raise ValueError(
                f"Record payload too large: {len(data)} bytes "
                f"(maximum {MAX_RECORD_LENGTH})"
            )
        self._id = int(record_id)
        self._data = bytes(data)

    @property
    def id(self) -> int:
        """Record type id."""
        return self._id

    @property
    def data(self) -> bytes:
        """Raw payload bytes."""
        return self._data

    @property
    def length(self) -> int:
        """Payload length in bytes."""
        return len(self._data)

    @property
    def size(self) -> int:
        """Serialized size in bytes: header plus payload."""
        return RECORD_HEADER_SIZE + len(self._data)

    def to_bytes(self) -> bytes:
        """Serialize the record, header included."""
        return RECORD_HEADER.pack(self._id, len(self._data)) + self._data

    def clone(self: R) -> R:
        """Return an equal but independent record of the same type."""
        return self._with_data(self._data)

    def as_record_type(self, cls: type[R]) -> R:
        """View this record as a specific record type.

        Args:
            cls: Typed record class, e.g. Bof or BoundSheet8

        Returns:
            New instance of cls carrying this record's payload

        Raises:
            RecordTypeMismatchError: If cls describes a different record id
        """
        if cls.record_type is None:
            return cls(self._id, self._data)  # type: ignore[call-arg]
        if cls.record_type != self._id:
            raise RecordTypeMismatchError(self._id, cls.record_type)
        return cls(self._data)  # type: ignore[call-arg]

    def _with_data(self: R, data: bytes) -> R:
        """Build a record of the same type with a different payload."""
        if type(self).record_type is None:
            return type(self)(self._id, data)  # type: ignore[call-arg]
        return type(self)(data)  # type: ignore[call-arg]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BiffRecord):
            return NotImplemented
        return self._id == other._id and self._data == other._data

    def __hash__(self) -> int:
        return hash((self._id, self._data))

    def __repr__(self) -> str:
        try:
            name = RecordType(self._id).name
        except ValueError:
            name = f"0x{self._id:04X}"
        return f"{type(self).__name__}(id={name}, length={len(self._data)})"


def register_record(cls: type[R]) -> type[R]:
    """Class decorator registering a typed record class for its id."""
    if cls.record_type is None:
        raise ValueError(f"{cls.__name__} has no record_type")
    _RECORD_CLASSES[cls.record_type] = cls
    return cls


def make_record(record_id: int, data: bytes) -> BiffRecord:
    """Build the typed record for an id, or a generic BiffRecord.

    Args:
        record_id: Record type id from the record header
        data: Payload bytes

    Returns:
        Bof, Eof, BoundSheet8 or Lbl for structural ids, BiffRecord otherwise
    """
    cls = _RECORD_CLASSES.get(record_id)
    if cls is None:
        return BiffRecord(record_id, data)
    return cls(data)  # type: ignore[call-arg]


def typed_record(record: BiffRecord) -> BiffRecord:
    """Return the typed view of a generic record with a structural id.

    Typed records and records with unregistered ids are returned as-is.

    Raises:
        MalformedRecordError: If the payload doesn't fit the typed layout
    """
    if type(record) is BiffRecord and record.id in _RECORD_CLASSES:
        return make_record(record.id, record.data)
    return record

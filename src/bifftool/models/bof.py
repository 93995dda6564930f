"""BOF and EOF records delimiting the workbook globals and each sheet."""

from __future__ import annotations

import struct
from enum import IntEnum

from bifftool.exceptions import MalformedRecordError

from .record import BiffRecord, RecordType, register_record

BIFF8_VERSION = 0x0600

# Build/year/flags values written by Excel 2003
_DEFAULT_BUILD = 0x0DBB
_DEFAULT_YEAR = 0x07CC
_DEFAULT_HISTORY_FLAGS = 0x000080C9
_DEFAULT_LOWEST_VERSION = 0x00000206

_BOF_LAYOUT = struct.Struct("<HHHHII")


class BofDocType(IntEnum):
    """Substream type declared by a BOF record."""

    GLOBALS = 0x0005
    VB_MODULE = 0x0006
    WORKSHEET = 0x0010
    CHART = 0x0020
    MACRO_SHEET = 0x0040
    WORKSPACE = 0x0100


@register_record
class Bof(BiffRecord):
    """Beginning of a substream.

    The first BOF in a Workbook stream opens the workbook globals;
    each following BOF opens one sheet.
    """

    record_type = RecordType.BOF

    __slots__ = ()

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(RecordType.BOF, data)
        if len(data) < 4:
            raise MalformedRecordError(f"BOF payload too short: {len(data)} bytes")

    @property
    def version(self) -> int:
        return struct.unpack_from("<H", self._data, 0)[0]

    @property
    def doc_type(self) -> int:
        return struct.unpack_from("<H", self._data, 2)[0]

    @property
    def build(self) -> int:
        """Build identifier of the writing application, 0 if absent."""
        if len(self._data) < 6:
            return 0
        return struct.unpack_from("<H", self._data, 4)[0]

    @property
    def year(self) -> int:
        """Build year of the writing application, 0 if absent."""
        if len(self._data) < 8:
            return 0
        return struct.unpack_from("<H", self._data, 6)[0]

    @property
    def is_globals(self) -> bool:
        """Whether this BOF opens the workbook globals substream."""
        return self.doc_type == BofDocType.GLOBALS

    @classmethod
    def create(cls, doc_type: int = BofDocType.WORKSHEET) -> Bof:
        """Create a BIFF8 BOF record.

        Args:
            doc_type: Substream type (see BofDocType)

        Returns:
            16-byte BIFF8 BOF record
        """
        return cls(
            _BOF_LAYOUT.pack(
                BIFF8_VERSION,
                doc_type,
                _DEFAULT_BUILD,
                _DEFAULT_YEAR,
                _DEFAULT_HISTORY_FLAGS,
                _DEFAULT_LOWEST_VERSION,
            )
        )

    def __repr__(self) -> str:
        return f"Bof(doc_type=0x{self.doc_type:04X})"


@register_record
class Eof(BiffRecord):
    """End of a substream."""

    record_type = RecordType.EOF

    __slots__ = ()

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(RecordType.EOF, data)

    @classmethod
    def create(cls) -> Eof:
        return cls(b"")

    def __repr__(self) -> str:
        return "Eof()"

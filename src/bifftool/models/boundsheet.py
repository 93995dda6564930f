"""BoundSheet8 record: a sheet's name, type and stream position."""

from __future__ import annotations

import struct
from enum import IntEnum

from bifftool.exceptions import MalformedRecordError

from .record import BiffRecord, RecordType, register_record
from .strings import HIGH_BYTE_FLAG, XLUnicodeString, decode_chars

# lbPlyPos (u32), hsState (u8), dt (u8), cch (u8), fHighByte (u8)
_FIXED_LAYOUT = struct.Struct("<IBBBB")


class SheetState(IntEnum):
    """Sheet visibility (low two bits of hsState)."""

    VISIBLE = 0
    HIDDEN = 1
    VERY_HIDDEN = 2


class SheetType(IntEnum):
    """Sheet type byte of BoundSheet8."""

    WORKSHEET = 0
    MACRO_SHEET = 1
    CHART = 2
    VB_MODULE = 6


@register_record
class BoundSheet8(BiffRecord):
    """Sheet descriptor in the workbook globals.

    The position field holds the byte offset, within the Workbook
    stream, of the BOF record that opens the sheet. Descriptors appear
    in the same order as the sheets they describe.
    """

    record_type = RecordType.BOUNDSHEET8

    __slots__ = ()

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(RecordType.BOUNDSHEET8, data)
        if len(data) < _FIXED_LAYOUT.size:
            raise MalformedRecordError(
                f"BoundSheet8 payload too short: {len(data)} bytes"
            )
        # Validates the name fits in the payload
        self._parse_name()

    def _parse_name(self) -> XLUnicodeString:
        _, _, _, cch, flags = _FIXED_LAYOUT.unpack_from(self._data, 0)
        high_byte = bool(flags & HIGH_BYTE_FLAG)
        value, _ = decode_chars(self._data, _FIXED_LAYOUT.size, cch, high_byte)
        return XLUnicodeString(value, high_byte)

    @property
    def position(self) -> int:
        """Stream offset of the sheet's BOF record (lbPlyPos)."""
        return struct.unpack_from("<I", self._data, 0)[0]

    @property
    def hidden_state(self) -> int:
        return self._data[4] & 0x03

    @property
    def sheet_type(self) -> int:
        return self._data[5]

    @property
    def name(self) -> str:
        return self._parse_name().value

    def with_position(self, position: int) -> BoundSheet8:
        """Return a copy of this descriptor pointing at a new offset."""
        if not 0 <= position <= 0xFFFFFFFF:
            raise ValueError(f"Sheet position out of range: {position}")
        return self._with_data(struct.pack("<I", position) + self._data[4:])

    @classmethod
    def create(
        cls,
        name: str,
        position: int = 0,
        sheet_type: int = SheetType.WORKSHEET,
        hidden_state: int = SheetState.VISIBLE,
    ) -> BoundSheet8:
        """Create a sheet descriptor.

        Args:
            name: Sheet name (1-31 characters in Excel)
            position: Initial stream offset of the sheet's BOF
            sheet_type: Sheet type (see SheetType)
            hidden_state: Visibility (see SheetState)

        Returns:
            New BoundSheet8 record
        """
        if not name:
            raise ValueError("Sheet name must not be empty")
        sheet_name = XLUnicodeString.of(name)
        data = (
            struct.pack("<IBBB", position, hidden_state, sheet_type, sheet_name.cch)
            + sheet_name.flags_byte()
            + sheet_name.encode_chars()
        )
        return cls(data)

    def __repr__(self) -> str:
        return f"BoundSheet8(name={self.name!r}, position={self.position})"

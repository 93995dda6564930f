"""Lbl record: a defined name in the workbook globals.

Layout (BIFF8):
    flags       u16   option bits (fHidden, fFunc, ..., fBuiltin, ...)
    chKey       u8    keyboard shortcut
    cch         u8    name length in characters
    cce         u16   formula length in bytes
    reserved    u16
    itab        u16   sheet index for local names (0 = workbook scope)
    reserved    4 bytes
    name        XLUnicodeStringNoCch (flags byte + cch characters)
    rgce        cce bytes of parsed formula
    [trailing]  kept verbatim
"""

from __future__ import annotations

import struct
from enum import IntEnum

from bifftool.exceptions import MalformedRecordError

from .record import BiffRecord, RecordType, register_record
from .strings import HIGH_BYTE_FLAG, XLUnicodeString, decode_chars

_HEADER = struct.Struct("<HBBHHH4s")

FLAG_HIDDEN = 0x0001
FLAG_BUILTIN = 0x0020


class BuiltinName(IntEnum):
    """Single-character names used when fBuiltin is set."""

    CONSOLIDATE_AREA = 0x00
    AUTO_OPEN = 0x01
    AUTO_CLOSE = 0x02
    EXTRACT = 0x03
    DATABASE = 0x04
    CRITERIA = 0x05
    PRINT_AREA = 0x06
    PRINT_TITLES = 0x07
    RECORDER = 0x08
    DATA_FORM = 0x09
    AUTO_ACTIVATE = 0x0A
    AUTO_DEACTIVATE = 0x0B
    SHEET_TITLE = 0x0C
    FILTER_DATABASE = 0x0D


@register_record
class Lbl(BiffRecord):
    """Defined name (label).

    Auto_Open and friends are usually stored as built-in names whose
    one-character name is a BuiltinName code rather than text.
    """

    record_type = RecordType.LBL

    __slots__ = ()

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(RecordType.LBL, data)
        if len(data) < _HEADER.size + 1:
            raise MalformedRecordError(f"Lbl payload too short: {len(data)} bytes")
        _, formula_end = self._parse_name()
        if formula_end > len(data):
            raise MalformedRecordError(
                f"Lbl formula of {self.cce} bytes overruns payload"
            )

    def _parse_name(self) -> tuple[XLUnicodeString, int]:
        """Decode the name; returns it with the offset where rgce ends."""
        _, _, cch, cce, _, _, _ = _HEADER.unpack_from(self._data, 0)
        high_byte = bool(self._data[_HEADER.size] & HIGH_BYTE_FLAG)
        value, name_end = decode_chars(self._data, _HEADER.size + 1, cch, high_byte)
        return XLUnicodeString(value, high_byte), name_end + cce

    @property
    def flags(self) -> int:
        return struct.unpack_from("<H", self._data, 0)[0]

    @property
    def hidden(self) -> bool:
        return bool(self.flags & FLAG_HIDDEN)

    @property
    def builtin(self) -> bool:
        return bool(self.flags & FLAG_BUILTIN)

    @property
    def shortcut_key(self) -> int:
        """Keyboard shortcut character code (chKey), 0 for none."""
        return self._data[2]

    @property
    def cch(self) -> int:
        return self._data[3]

    @property
    def cce(self) -> int:
        return struct.unpack_from("<H", self._data, 4)[0]

    @property
    def itab(self) -> int:
        return struct.unpack_from("<H", self._data, 8)[0]

    @property
    def name(self) -> XLUnicodeString:
        """Name with its storage encoding."""
        return self._parse_name()[0]

    @property
    def formula(self) -> bytes:
        """Raw parsed-formula bytes (rgce)."""
        formula_end = self._parse_name()[1]
        return self._data[formula_end - self.cce : formula_end]

    def with_name(self, name: XLUnicodeString | str) -> Lbl:
        """Return a copy of this label with a different name.

        The formula, flags and any trailing bytes are carried over.
        """
        if isinstance(name, str):
            name = XLUnicodeString.of(name)
        formula_end = self._parse_name()[1]
        tail = self._data[formula_end - self.cce :]
        data = (
            self._data[0:3]
            + bytes([name.cch])
            + self._data[4 : _HEADER.size]
            + name.flags_byte()
            + name.encode_chars()
            + tail
        )
        return self._with_data(data)

    def with_builtin(self, builtin: bool) -> Lbl:
        """Return a copy of this label with fBuiltin set or cleared."""
        flags = self.flags | FLAG_BUILTIN if builtin else self.flags & ~FLAG_BUILTIN
        return self._with_data(struct.pack("<H", flags) + self._data[2:])

    @classmethod
    def create(
        cls,
        name: XLUnicodeString | str,
        formula: bytes = b"",
        builtin: bool = False,
        hidden: bool = False,
        itab: int = 0,
        high_byte: bool | None = None,
    ) -> Lbl:
        """Create a defined name.

        Args:
            name: Label name, or a one-character BuiltinName code
                when builtin is True
            formula: Parsed formula bytes (rgce)
            builtin: Set fBuiltin
            hidden: Set fHidden
            itab: 1-based sheet index for a sheet-local name, 0 for global
            high_byte: Storage encoding for a str name; None picks
                single-byte storage when the name allows it

        Returns:
            New Lbl record
        """
        if isinstance(name, str):
            if high_byte is None:
                name = XLUnicodeString.of(name)
            else:
                name = XLUnicodeString(name, high_byte=high_byte)
        if name.cch == 0:
            raise ValueError("Label name must not be empty")
        flags = (FLAG_BUILTIN if builtin else 0) | (FLAG_HIDDEN if hidden else 0)
        header = _HEADER.pack(flags, 0, name.cch, len(formula), 0, itab, b"\x00" * 4)
        return cls(header + name.flags_byte() + name.encode_chars() + formula)

    @classmethod
    def create_builtin(cls, code: BuiltinName, formula: bytes = b"") -> Lbl:
        """Create a built-in name such as Auto_Open."""
        return cls.create(chr(code), formula=formula, builtin=True)

    def __repr__(self) -> str:
        return f"Lbl(name={self.name.value!r}, builtin={self.builtin})"

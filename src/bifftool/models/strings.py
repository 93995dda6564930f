"""Character data shared by BoundSheet8 and Lbl records.

BIFF8 stores short strings as a character count, a flags byte whose low
bit (fHighByte) selects the encoding, and the characters themselves:
UTF-16LE when fHighByte is set, Latin-1 otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass

from bifftool.exceptions import MalformedRecordError

HIGH_BYTE_FLAG = 0x01
MAX_SHORT_STRING_CHARS = 0xFF


def _requires_high_byte(value: str) -> bool:
    return any(ord(ch) > 0xFF for ch in value)


@dataclass(frozen=True, slots=True)
class XLUnicodeString:
    """A record string value with its storage encoding.

    Attributes:
        value: Decoded characters (may contain embedded NUL characters)
        high_byte: True for two bytes per character (UTF-16LE)
    """

    value: str
    high_byte: bool = False

    def __post_init__(self) -> None:
        if not self.high_byte and _requires_high_byte(self.value):
            raise ValueError("String contains characters outside Latin-1")
        if self.cch > MAX_SHORT_STRING_CHARS:
            raise ValueError(
                f"String too long: {self.cch} characters "
                f"(maximum {MAX_SHORT_STRING_CHARS})"
            )

    @classmethod
    def of(cls, value: str) -> XLUnicodeString:
        """Create a string using single-byte storage when possible."""
        return cls(value, high_byte=_requires_high_byte(value))

    @property
    def cch(self) -> int:
        """Character count in storage units."""
        if self.high_byte:
            return len(self.encode_chars()) // 2
        return len(self.value)

    def encode_chars(self) -> bytes:
        """Encode the characters without count or flags."""
        if self.high_byte:
            return self.value.encode("utf-16-le", "surrogatepass")
        return self.value.encode("latin-1")

    def flags_byte(self) -> bytes:
        return bytes([HIGH_BYTE_FLAG if self.high_byte else 0])


def decode_chars(
    data: bytes, offset: int, cch: int, high_byte: bool
) -> tuple[str, int]:
    """Decode cch characters starting at offset.

    Returns:
        Tuple of (decoded string, offset just past the characters)

    Raises:
        MalformedRecordError: If the payload is too short
    """
    width = 2 if high_byte else 1
    end = offset + cch * width
    if end > len(data):
        raise MalformedRecordError(
            f"String of {cch} characters overruns payload of {len(data)} bytes"
        )
    raw = data[offset:end]
    if high_byte:
        return raw.decode("utf-16-le", "surrogatepass"), end
    return raw.decode("latin-1"), end

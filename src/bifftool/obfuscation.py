"""Auto_Open label detection and obfuscation settings.

Excel runs a workbook's Auto_Open macro when the workbook is opened. It
finds the macro through a defined name, normally stored as a built-in
name with the single character 0x01. Excel also accepts a plain text
name, and when it looks one up it ignores case and embedded NUL
characters. Scanners that match the built-in byte pattern or the
literal ASCII text "Auto_Open" miss names such as "Au\\0To_OpEn" stored
as UTF-16.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .models import BuiltinName, Lbl, XLUnicodeString

AUTO_OPEN_PREFIX = "auto_open"

# Default spelling: mixed case, NUL-interleaved, NUL-padded
DEFAULT_OBFUSCATED_NAME = "Au\u0000To_OpEn\u0000\u0000\u0000\u0000\u0000"


def normalize_label_name(value: str) -> str:
    """Normalize a label name the way Excel compares names."""
    return value.replace("\u0000", "").casefold()


def is_auto_open_label(label: Lbl) -> bool:
    """Check whether a label triggers Auto_Open.

    Matches the built-in form (fBuiltin with the 0x01 name code) and any
    text name whose normalized form starts with "auto_open".
    """
    name = label.name.value
    if label.builtin and name == chr(BuiltinName.AUTO_OPEN):
        return True
    return normalize_label_name(name).startswith(AUTO_OPEN_PREFIX)


@dataclass(frozen=True, slots=True)
class AutoOpenObfuscation:
    """Replacement name for an obfuscated Auto_Open label.

    Attributes:
        name: Label name; must still normalize to an Auto_Open name
        high_byte: Store the name as UTF-16 rather than Latin-1
    """

    name: str = DEFAULT_OBFUSCATED_NAME
    high_byte: bool = True

    def __post_init__(self) -> None:
        """Validate the replacement name."""
        if not normalize_label_name(self.name).startswith(AUTO_OPEN_PREFIX):
            raise ValueError(
                f"Obfuscated name {self.name!r} does not normalize to Auto_Open"
            )
        # Raises ValueError if the name can't be stored
        self.label_name()

    def label_name(self) -> XLUnicodeString:
        """Name as stored in the Lbl record."""
        return XLUnicodeString(self.name, high_byte=self.high_byte)

    @classmethod
    def default(cls) -> AutoOpenObfuscation:
        """Create settings with the default spelling."""
        return cls()

    @classmethod
    def mixed_case(
        cls, seed: int | None = None, max_padding: int = 5
    ) -> AutoOpenObfuscation:
        """Create settings with a randomized spelling.

        Each letter of "auto_open" gets a random case, with at least one
        upper- and one lowercase letter. At least one NUL is placed inside
        the keyword, and up to max_padding NULs are appended.

        Args:
            seed: Optional seed for reproducible names
            max_padding: Maximum number of trailing NUL characters

        Returns:
            AutoOpenObfuscation with the generated name
        """
        rng = random.Random(seed)
        letters = [
            ch.upper() if rng.random() < 0.5 else ch for ch in AUTO_OPEN_PREFIX
        ]
        alpha = [i for i, ch in enumerate(letters) if ch.isalpha()]
        if all(letters[i].islower() for i in alpha):
            i = rng.choice(alpha)
            letters[i] = letters[i].upper()
        elif all(letters[i].isupper() for i in alpha):
            i = rng.choice(alpha)
            letters[i] = letters[i].lower()
        # Never before the first letter, so the name manager shows something
        split_at = rng.randint(1, len(letters) - 1)
        letters.insert(split_at, "\u0000")
        padding = "\u0000" * rng.randint(0, max_padding)
        return cls(name="".join(letters) + padding)

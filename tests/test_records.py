"""Tests for BIFF8 record models."""

import struct

import pytest

from bifftool import (
    BiffRecord,
    Bof,
    BofDocType,
    BoundSheet8,
    BuiltinName,
    CorruptedDataError,
    Eof,
    Lbl,
    MalformedRecordError,
    RecordType,
    RecordTypeMismatchError,
    SheetState,
    SheetType,
    XLUnicodeString,
)
from bifftool.models import make_record, typed_record


def _minimal_payload(record_type: RecordType) -> bytes:
    return {
        RecordType.EOF: b"",
        RecordType.LBL: Lbl.create("A").data,
        RecordType.BOUNDSHEET8: BoundSheet8.create("A").data,
        RecordType.BOF: Bof.create().data,
    }[record_type]


class TestBiffRecord:
    """Tests for the generic record value."""

    def test_size_includes_header(self) -> None:
        """Test that size is the 4-byte header plus payload."""
        record = BiffRecord(0x0042, b"\xb0\x04")

        assert record.length == 2
        assert record.size == 6

    def test_to_bytes(self) -> None:
        """Test header layout of a serialized record."""
        record = BiffRecord(0x0042, b"\xb0\x04")

        assert record.to_bytes() == b"\x42\x00\x02\x00\xb0\x04"

    def test_structural_equality(self) -> None:
        """Test that equality depends on id and payload only."""
        assert BiffRecord(0x0042, b"\x01") == BiffRecord(0x0042, b"\x01")
        assert BiffRecord(0x0042, b"\x01") != BiffRecord(0x0042, b"\x02")
        assert BiffRecord(0x0042, b"\x01") != BiffRecord(0x0043, b"\x01")

    def test_typed_view_equals_generic_record(self) -> None:
        """Test that a typed record equals the generic record with its bytes."""
        sheet = BoundSheet8.create("Sheet1", position=70)
        generic = BiffRecord(RecordType.BOUNDSHEET8, sheet.data)

        assert sheet == generic
        assert hash(sheet) == hash(generic)

    def test_clone_is_equal_but_distinct(self) -> None:
        """Test that clone keeps type and content."""
        sheet = BoundSheet8.create("Sheet1")
        copy = sheet.clone()

        assert copy == sheet
        assert copy is not sheet
        assert isinstance(copy, BoundSheet8)

    def test_payload_too_large_raises(self) -> None:
        """Test that payloads beyond the 16-bit length field are rejected."""
        with pytest.raises(ValueError, match="too large"):
            BiffRecord(0x0042, b"\x00" * 0x10000)

    def test_record_id_out_of_range_raises(self) -> None:
        """Test that ids must fit in 16 bits."""
        with pytest.raises(ValueError, match="out of range"):
            BiffRecord(0x10000, b"")

    def test_as_record_type(self) -> None:
        """Test viewing a generic record as its typed class."""
        record = BiffRecord(RecordType.EOF, b"")

        eof = record.as_record_type(Eof)

        assert isinstance(eof, Eof)
        assert eof == record

    def test_as_record_type_mismatch_raises(self) -> None:
        """Test that viewing a record as the wrong type fails."""
        record = BiffRecord(RecordType.EOF, b"")

        with pytest.raises(RecordTypeMismatchError) as exc_info:
            record.as_record_type(BoundSheet8)

        assert exc_info.value.record_id == RecordType.EOF
        assert exc_info.value.expected_id == RecordType.BOUNDSHEET8

    def test_make_record_picks_typed_class(self) -> None:
        """Test that structural ids get their typed classes."""
        assert isinstance(make_record(RecordType.EOF, b""), Eof)
        assert isinstance(make_record(RecordType.BOF, Bof.create().data), Bof)
        assert type(make_record(0x0042, b"\xb0\x04")) is BiffRecord

    def test_every_record_type_has_typed_class(self) -> None:
        """Test that each listed structural id maps to its own typed class."""
        for record_type in RecordType:
            cls = type(make_record(record_type, _minimal_payload(record_type)))

            assert cls is not BiffRecord
            assert cls.record_type == record_type

    def test_typed_record(self) -> None:
        """Test that generic structural records get their typed view."""
        generic = BiffRecord(RecordType.BOF, Bof.create().data)
        other = BiffRecord(0x0042, b"\xb0\x04")

        assert isinstance(typed_record(generic), Bof)
        assert typed_record(generic) == generic
        assert typed_record(other) is other

    def test_typed_record_rejects_malformed_payload(self) -> None:
        """Test that a generic record too short for its typed layout is rejected."""
        with pytest.raises(MalformedRecordError):
            typed_record(BiffRecord(RecordType.LBL, b"\x00\x00"))


class TestBof:
    """Tests for BOF and EOF records."""

    def test_create_biff8(self) -> None:
        """Test that created BOF records are 16-byte BIFF8 records."""
        bof = Bof.create(BofDocType.MACRO_SHEET)

        assert bof.length == 16
        assert bof.version == 0x0600
        assert bof.doc_type == BofDocType.MACRO_SHEET
        assert not bof.is_globals

    def test_globals(self) -> None:
        """Test globals detection."""
        assert Bof.create(BofDocType.GLOBALS).is_globals

    def test_build_and_year(self) -> None:
        """Test the writing application's build fields."""
        data = struct.pack("<HHHHII", 0x0600, BofDocType.GLOBALS, 0x1234, 1997, 0, 0)
        bof = Bof(data)

        assert bof.build == 0x1234
        assert bof.year == 1997
        assert Bof.create().year == 0x07CC

    def test_build_and_year_absent(self) -> None:
        """Test that a minimal BOF reports zero build fields."""
        bof = Bof(struct.pack("<HH", 0x0600, BofDocType.WORKSHEET))

        assert bof.build == 0
        assert bof.year == 0

    def test_short_payload_raises(self) -> None:
        """Test that a truncated BOF is rejected."""
        with pytest.raises(MalformedRecordError):
            Bof(b"\x00\x06")

    def test_eof_is_empty(self) -> None:
        """Test EOF layout."""
        assert Eof.create().to_bytes() == b"\x0a\x00\x00\x00"


class TestBoundSheet8:
    """Tests for sheet descriptors."""

    def test_create(self) -> None:
        """Test field layout of a created descriptor."""
        sheet = BoundSheet8.create(
            "Macro1",
            position=1234,
            sheet_type=SheetType.MACRO_SHEET,
            hidden_state=SheetState.VERY_HIDDEN,
        )

        assert sheet.position == 1234
        assert sheet.name == "Macro1"
        assert sheet.sheet_type == SheetType.MACRO_SHEET
        assert sheet.hidden_state == SheetState.VERY_HIDDEN
        assert sheet.length == 8 + len("Macro1")

    def test_unicode_name(self) -> None:
        """Test that names outside Latin-1 are stored as UTF-16."""
        sheet = BoundSheet8.create("Лист1")

        assert sheet.name == "Лист1"
        assert sheet.length == 8 + 2 * len("Лист1")

    def test_with_position_returns_new_record(self) -> None:
        """Test that changing the position doesn't touch the original."""
        sheet = BoundSheet8.create("Sheet1", position=100)

        moved = sheet.with_position(200)

        assert moved.position == 200
        assert moved.name == "Sheet1"
        assert sheet.position == 100
        assert moved != sheet

    def test_with_position_out_of_range_raises(self) -> None:
        """Test that positions must fit in 32 bits."""
        with pytest.raises(ValueError):
            BoundSheet8.create("Sheet1").with_position(-1)

    def test_empty_name_raises(self) -> None:
        """Test that sheet names are required."""
        with pytest.raises(ValueError, match="empty"):
            BoundSheet8.create("")

    def test_name_overrunning_payload_raises(self) -> None:
        """Test that a cch larger than the payload is rejected."""
        data = struct.pack("<IBBBB", 0, 0, 0, 10, 0) + b"abc"

        with pytest.raises(CorruptedDataError):
            BoundSheet8(data)


class TestLbl:
    """Tests for defined names."""

    def test_create(self) -> None:
        """Test field layout of a created label."""
        label = Lbl.create("MyName", formula=b"\x1e\x01\x00")

        assert label.name == XLUnicodeString("MyName")
        assert label.cch == 6
        assert label.cce == 3
        assert label.formula == b"\x1e\x01\x00"
        assert not label.builtin
        assert not label.hidden

    def test_create_high_byte(self) -> None:
        """Test forcing UTF-16 storage for a Latin-1 name."""
        label = Lbl.create("Macro1", high_byte=True)

        assert label.name == XLUnicodeString("Macro1", high_byte=True)
        assert label.cch == 6
        assert label.length == Lbl.create("Macro1").length + 6

    def test_create_high_byte_false_rejects_wide_name(self) -> None:
        """Test that single-byte storage can't hold non-Latin-1 names."""
        with pytest.raises(ValueError):
            Lbl.create("\u0410\u0432\u0442\u043e", high_byte=False)

    def test_shortcut_key(self) -> None:
        """Test reading chKey."""
        data = bytearray(Lbl.create("Macro1").data)
        data[2] = ord("M")

        assert Lbl.create("Macro1").shortcut_key == 0
        assert Lbl(bytes(data)).shortcut_key == ord("M")

    def test_create_builtin(self) -> None:
        """Test that built-in names use a single code character."""
        label = Lbl.create_builtin(BuiltinName.AUTO_OPEN)

        assert label.builtin
        assert label.name.value == "\x01"
        assert label.cch == 1

    def test_with_name_keeps_formula(self) -> None:
        """Test that renaming carries the formula over."""
        label = Lbl.create("Short", formula=b"\x1e\x01\x00", hidden=True)

        renamed = label.with_name("A_Much_Longer_Name")

        assert renamed.name.value == "A_Much_Longer_Name"
        assert renamed.cch == len("A_Much_Longer_Name")
        assert renamed.formula == b"\x1e\x01\x00"
        assert renamed.hidden
        assert label.name.value == "Short"

    def test_with_name_wide(self) -> None:
        """Test renaming to a UTF-16 name with embedded NULs."""
        label = Lbl.create("Short")

        renamed = label.with_name(XLUnicodeString("A\x00b", high_byte=True))

        assert renamed.name == XLUnicodeString("A\x00b", high_byte=True)
        assert renamed.length == label.length - 5 + 6

    def test_with_builtin(self) -> None:
        """Test toggling fBuiltin."""
        label = Lbl.create_builtin(BuiltinName.AUTO_OPEN)

        cleared = label.with_builtin(False)

        assert not cleared.builtin
        assert cleared.with_builtin(True) == label
        assert label.builtin

    def test_trailing_bytes_preserved(self) -> None:
        """Test that bytes after the formula survive a rename."""
        label = Lbl(Lbl.create("Name", formula=b"\x1e\x01\x00").data + b"\xaa\xbb")

        renamed = label.with_name("Other")

        assert renamed.data.endswith(b"\x1e\x01\x00\xaa\xbb")

    def test_short_payload_raises(self) -> None:
        """Test that a truncated label is rejected."""
        with pytest.raises(CorruptedDataError):
            Lbl(b"\x00" * 5)

    def test_formula_overrunning_payload_raises(self) -> None:
        """Test that a cce larger than the payload is rejected."""
        data = bytearray(Lbl.create("Name").data)
        data[4] = 10

        with pytest.raises(CorruptedDataError):
            Lbl(bytes(data))


class TestXLUnicodeString:
    """Tests for record string values."""

    def test_of_picks_encoding(self) -> None:
        """Test that single-byte storage is used when possible."""
        assert not XLUnicodeString.of("Sheet1").high_byte
        assert XLUnicodeString.of("Sheet€").high_byte

    def test_non_latin1_without_high_byte_raises(self) -> None:
        """Test that single-byte strings must be Latin-1."""
        with pytest.raises(ValueError, match="Latin-1"):
            XLUnicodeString("€", high_byte=False)

    def test_too_long_raises(self) -> None:
        """Test the 255 character limit."""
        with pytest.raises(ValueError, match="too long"):
            XLUnicodeString("x" * 256)

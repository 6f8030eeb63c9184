"""Tests for canonical buffer assembly and extended title extraction."""

from __future__ import annotations

import struct

import pytest

from nacptool.core.compression import DecompressionError, DecompressionErrorKind
from nacptool.core.constants import Language
from nacptool.core.records import TitleEntry
from nacptool.core.title_block import (
    decode_fixed_string,
    extended_entries,
    read_title_entry,
    to_canonical,
)
from tests.conftest import (
    EXTENDED_TITLES,
    make_compressed_nacp,
    make_entry,
    make_legacy_nacp,
    make_metadata,
    make_title_block,
    raw_deflate,
    wrap_compressed,
)


class TestDecodeFixedString:
    def test_strips_padding(self):
        assert decode_fixed_string(b"Hello\x00\x00\x00") == "Hello"

    def test_no_nul(self):
        assert decode_fixed_string(b"Hello") == "Hello"

    def test_all_nul(self):
        assert decode_fixed_string(b"\x00" * 0x200) == ""

    def test_stops_at_first_nul(self):
        assert decode_fixed_string(b"Name\x00garbage\x00\x00") == "Name"

    def test_utf8(self):
        assert decode_fixed_string("ゼルダ".encode("utf-8") + b"\x00") == "ゼルダ"

    def test_invalid_utf8_replaced(self):
        assert decode_fixed_string(b"A\xffB\x00") == "A\ufffdB"


class TestReadTitleEntry:
    def test_reads_slot(self):
        table = make_entry("First", "Pub1") + make_entry("Second", "Pub2")
        assert read_title_entry(table, 1) == TitleEntry("Second", "Pub2")

    def test_publisher_field_boundary(self):
        # A name filling the whole field must not bleed into the publisher
        table = make_entry(b"N" * 0x200, "Pub")
        entry = read_title_entry(table, 0)
        assert entry.name == "N" * 0x200
        assert entry.publisher == "Pub"


class TestToCanonical:
    def test_legacy_is_identity(self, legacy_nacp):
        result = to_canonical(legacy_nacp)
        assert result == legacy_nacp
        assert isinstance(result, bytes)

    def test_legacy_copy_of_bytearray(self, legacy_nacp):
        buf = bytearray(legacy_nacp)
        result = to_canonical(buf)
        buf[0] = 0
        assert result == legacy_nacp

    def test_legacy_short_buffer_unchanged(self):
        data = b"\x01\x02\x03"
        assert to_canonical(data) == data

    def test_compressed_keeps_first_16_entries(self, title_table_20, compressed_nacp):
        result = to_canonical(compressed_nacp)
        assert len(result) == 0x4000
        assert result[:0x3000] == title_table_20[:0x3000]

    def test_compressed_keeps_metadata_verbatim(self, compressed_nacp):
        result = to_canonical(compressed_nacp)
        assert result[0x3000:] == compressed_nacp[0x3000:]
        # Flag byte is part of the metadata and is kept as-is
        assert result[0x3215] == 1

    def test_oversized_metadata_region(self, title_table_20):
        tail = make_metadata(flag=1, size=0x1800)
        data = wrap_compressed(raw_deflate(title_table_20)) + tail
        result = to_canonical(data)
        assert len(result) == 0x3000 + 0x1800
        assert result[0x3000:] == tail

    @pytest.mark.parametrize("meta_size", [0x216, 0x800, 0x1000, 0x2000])
    def test_length_law(self, title_table_20, meta_size):
        data = wrap_compressed(raw_deflate(title_table_20)) + make_metadata(flag=1, size=meta_size)
        assert len(to_canonical(data)) == 0x3000 + max(0, len(data) - 0x3000)

    def test_propagates_overflow(self):
        data = bytearray(make_compressed_nacp())
        struct.pack_into("<H", data, 0, 0x3000)
        with pytest.raises(DecompressionError) as exc_info:
            to_canonical(bytes(data))
        assert exc_info.value.kind is DecompressionErrorKind.COMPRESSED_REGION_OVERFLOW

    def test_propagates_inflate_failure(self):
        data = wrap_compressed(b"\xff" * 32) + make_metadata(flag=1)
        with pytest.raises(DecompressionError) as exc_info:
            to_canonical(data)
        assert exc_info.value.kind is DecompressionErrorKind.INFLATE_FAILURE


class TestExtendedEntries:
    def test_four_extended_languages(self, compressed_nacp):
        result = extended_entries(compressed_nacp)
        assert result == {
            Language.POLISH: TitleEntry("Gra", "Wydawca"),
            Language.THAI: TitleEntry("เกม", "ผู้จัดพิมพ์"),
            Language.INDONESIAN: TitleEntry("Permainan", "Penerbit"),
            Language.ROMANIAN: TitleEntry("Joc", "Editor"),
        }

    def test_legacy_returns_empty(self, legacy_nacp):
        assert extended_entries(legacy_nacp) == {}

    def test_exactly_16_entries_returns_empty(self):
        assert extended_entries(make_compressed_nacp(make_title_block(16))) == {}

    def test_all_31_languages(self):
        result = extended_entries(make_compressed_nacp(make_title_block(31)))
        assert sorted(result) == [lang for lang in Language if lang.value >= 16]
        assert result[Language.DANISH] == TitleEntry("Name 30", "Publisher 30")

    def test_32_slot_table(self):
        # Slot 31 has no language and is never reported
        result = extended_entries(make_compressed_nacp(make_title_block(32)))
        assert len(result) == 15
        assert max(result) is Language.DANISH

    def test_partial_trailing_entry_ignored(self):
        # 17 full entries plus half of an 18th
        table = make_title_block(18)[: 17 * 0x300 + 0x180]
        result = extended_entries(make_compressed_nacp(table))
        assert list(result) == [Language.POLISH]

    def test_empty_name_excluded(self):
        titles = {**EXTENDED_TITLES, 17: ("", "Publisher Only")}
        result = extended_entries(make_compressed_nacp(make_title_block(20, titles)))
        assert Language.THAI not in result
        assert len(result) == 3

    def test_name_trimmed_at_first_nul(self):
        titles = {16: (b"Gra\x00junk", b"Wyd\x00junk")}
        result = extended_entries(make_compressed_nacp(make_title_block(17, titles)))
        assert result[Language.POLISH] == TitleEntry("Gra", "Wyd")

    def test_overflow_header_returns_empty(self):
        data = bytearray(make_compressed_nacp())
        struct.pack_into("<H", data, 0, 0x3000)
        assert extended_entries(bytes(data)) == {}

    def test_corrupt_data_returns_empty(self):
        data = wrap_compressed(b"\xff" * 32) + make_metadata(flag=1)
        assert extended_entries(data) == {}

    def test_truncated_stream_returns_empty(self, title_table_20):
        compressed = raw_deflate(title_table_20)
        data = wrap_compressed(compressed[:-8]) + make_metadata(flag=1)
        assert extended_entries(data) == {}

    def test_too_short_returns_empty(self):
        assert extended_entries(make_compressed_nacp(make_title_block(10))) == {}

    def test_legacy_slots_not_included(self, compressed_nacp):
        result = extended_entries(compressed_nacp)
        assert all(lang.is_extended for lang in result)

    def test_legacy_with_legacy_layout_bytes(self):
        # Legacy buffer whose 16 slots are fully populated still gives nothing
        assert extended_entries(make_legacy_nacp()) == {}

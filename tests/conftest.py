"""Shared test fixtures for nacptool tests."""

from __future__ import annotations

import struct
import zlib
from pathlib import Path

import pytest

from nacptool.core.constants import (
    METADATA_OFFSET,
    NACP_SIZE,
    TITLE_BLOCK_SIZE,
    TITLE_COMPRESSION_FLAG_OFFSET,
    TITLE_NAME_SIZE,
    TITLE_PUBLISHER_SIZE,
)


def make_entry(name: str | bytes = "", publisher: str | bytes = "") -> bytes:
    """Build one 0x300-byte title entry (NUL-padded name + publisher)."""
    if isinstance(name, str):
        name = name.encode("utf-8")
    if isinstance(publisher, str):
        publisher = publisher.encode("utf-8")
    return name.ljust(TITLE_NAME_SIZE, b"\x00") + publisher.ljust(TITLE_PUBLISHER_SIZE, b"\x00")


def make_title_block(count: int = 16, titles: dict[int, tuple[str, str]] | None = None) -> bytes:
    """Build a title table of ``count`` entries.

    Slots not listed in ``titles`` get ``("Name <i>", "Publisher <i>")``.
    """
    titles = titles or {}
    entries = []
    for i in range(count):
        name, publisher = titles.get(i, (f"Name {i}", f"Publisher {i}"))
        entries.append(make_entry(name, publisher))
    return b"".join(entries)


def make_metadata(flag: int = 0, display_version: str = "1.0.0", size: int = NACP_SIZE - METADATA_OFFSET) -> bytes:
    """Build a metadata region with the compression flag and a display version."""
    meta = bytearray(size)
    version = display_version.encode("utf-8")
    meta[0x60 : 0x60 + len(version)] = version
    struct.pack_into("<Q", meta, 0x70, 0x0100000000001000)
    struct.pack_into("<Q", meta, 0x78, 0x0100000000000000)
    flag_pos = TITLE_COMPRESSION_FLAG_OFFSET - METADATA_OFFSET
    if flag_pos < size:
        meta[flag_pos] = flag
    return bytes(meta)


def raw_deflate(data: bytes) -> bytes:
    """Compress with raw DEFLATE (no zlib header), as the firmware does."""
    compressor = zlib.compressobj(level=9, wbits=-15)
    return compressor.compress(data) + compressor.flush()


def wrap_compressed(compressed: bytes, size_field: int | None = None) -> bytes:
    """Wrap compressed data into a 0x3000-byte title block region."""
    if size_field is None:
        size_field = len(compressed)
    block = struct.pack("<H", size_field) + compressed
    return block[:TITLE_BLOCK_SIZE].ljust(TITLE_BLOCK_SIZE, b"\x00")


def make_legacy_nacp(titles: dict[int, tuple[str, str]] | None = None, **meta_kwargs) -> bytes:
    """Build a 0x4000-byte legacy NACP (flag byte = 0)."""
    return make_title_block(16, titles) + make_metadata(flag=0, **meta_kwargs)


def make_compressed_nacp(
    table: bytes | None = None,
    flag: int = 1,
    **meta_kwargs,
) -> bytes:
    """Build a 0x4000-byte NACP with a compressed title block."""
    if table is None:
        table = make_title_block(20)
    return wrap_compressed(raw_deflate(table)) + make_metadata(flag=flag, **meta_kwargs)


EXTENDED_TITLES = {
    16: ("Gra", "Wydawca"),
    17: ("เกม", "ผู้จัดพิมพ์"),
    18: ("Permainan", "Penerbit"),
    19: ("Joc", "Editor"),
}


@pytest.fixture
def legacy_nacp() -> bytes:
    return make_legacy_nacp({0: ("Test Game", "Test Publisher")})


@pytest.fixture
def title_table_20() -> bytes:
    """A 20-entry decompressed table: 16 legacy slots + 4 extended."""
    return make_title_block(20, EXTENDED_TITLES)


@pytest.fixture
def compressed_nacp(title_table_20: bytes) -> bytes:
    return make_compressed_nacp(title_table_20)


@pytest.fixture
def nacp_file(tmp_path: Path, compressed_nacp: bytes) -> Path:
    path = tmp_path / "control.nacp"
    path.write_bytes(compressed_nacp)
    return path


@pytest.fixture
def legacy_nacp_file(tmp_path: Path, legacy_nacp: bytes) -> Path:
    path = tmp_path / "legacy.nacp"
    path.write_bytes(legacy_nacp)
    return path

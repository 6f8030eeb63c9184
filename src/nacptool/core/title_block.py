"""Title block decoding: canonical buffers and extended-language entries.

Title entry layout (legacy table and decompressed table alike):
  [name: 0x200 NUL-padded UTF-8] [publisher: 0x100 NUL-padded UTF-8]
"""

from __future__ import annotations

import logging

from nacptool.core.compression import (
    DecompressionError,
    decompress_title_block,
    is_compressed,
)
from nacptool.core.constants import (
    DEFAULT_ENCODING,
    EXTENDED_LANGUAGES,
    METADATA_OFFSET,
    TITLE_BLOCK_SIZE,
    TITLE_ENTRY_SIZE,
    TITLE_NAME_SIZE,
    TITLE_PUBLISHER_SIZE,
    Language,
)
from nacptool.core.records import TitleEntry

logger = logging.getLogger(__name__)


def decode_fixed_string(raw: bytes, encoding: str = DEFAULT_ENCODING) -> str:
    """Decode a fixed-width C string, cutting at the first NUL.

    Bytes after the first NUL are ignored even when they are not padding.
    Invalid sequences become U+FFFD instead of raising.
    """
    end = raw.find(b"\x00")
    if end != -1:
        raw = raw[:end]
    return bytes(raw).decode(encoding, errors="replace")


def read_title_entry(table: bytes, index: int) -> TitleEntry:
    """Read the title entry in slot ``index`` of a title table."""
    offset = index * TITLE_ENTRY_SIZE
    name = decode_fixed_string(table[offset : offset + TITLE_NAME_SIZE])
    pub_offset = offset + TITLE_NAME_SIZE
    publisher = decode_fixed_string(table[pub_offset : pub_offset + TITLE_PUBLISHER_SIZE])
    return TitleEntry(name=name, publisher=publisher)


def to_canonical(data: bytes) -> bytes:
    """Return ``data`` rearranged into the legacy NACP layout.

    Legacy buffers are returned as an unchanged copy. For compressed buffers
    the first 16 decompressed entries replace the title block and the
    metadata region is appended verbatim, so the result length is
    ``0x3000 + max(0, len(data) - 0x3000)``.

    Raises:
        DecompressionError: If the compressed title block cannot be decoded.
    """
    if not is_compressed(data):
        return bytes(data)

    return assemble_canonical(data, decompress_title_block(data))


def assemble_canonical(data: bytes, table: bytes) -> bytes:
    """Join the first 16 entries of a decompressed ``table`` with the metadata of ``data``."""
    return table[:TITLE_BLOCK_SIZE] + bytes(data[METADATA_OFFSET:])


def extended_entries(data: bytes) -> dict[Language, TitleEntry]:
    """Return title entries for the extended languages (Polish and later).

    Only compressed title blocks carry these languages. Entries with an empty
    name are left out. Never raises: a legacy buffer or a title block that
    fails to decompress yields an empty dict.
    """
    if not is_compressed(data):
        return {}

    try:
        decompressed = decompress_title_block(data)
    except DecompressionError as e:
        logger.debug("Skipping extended titles (%s): %s", e.kind.value, e)
        return {}
    return table_extended_entries(decompressed)


def table_extended_entries(table: bytes) -> dict[Language, TitleEntry]:
    """Read the named extended-language entries of a decompressed title table."""
    total_entries = len(table) // TITLE_ENTRY_SIZE
    result: dict[Language, TitleEntry] = {}
    for lang in EXTENDED_LANGUAGES:
        if lang.value >= total_entries:
            continue
        entry = read_title_entry(table, lang.value)
        if entry.name:
            result[lang] = entry
    return result

"""Binary reader: legacy-layout NACP bytes → ControlProperty.

Reads only what the legacy layout defines: the 16-entry title table and a
handful of metadata fields. Compressed buffers must go through
:func:`nacptool.core.title_block.to_canonical` first.
"""

from __future__ import annotations

import struct

from nacptool.core.constants import (
    LEGACY_LANGUAGES,
    NACP_SIZE,
    TITLE_COMPRESSION_FLAG_OFFSET,
)
from nacptool.core.records import ControlProperty
from nacptool.core.title_block import decode_fixed_string, read_title_entry

# (offset, size) of the fixed-width string fields
_ISBN = (0x3000, 0x25)
_DISPLAY_VERSION = (0x3060, 0x10)
_APPLICATION_ERROR_CODE_CATEGORY = (0x30A8, 0x8)
_BCAT_PASSPHRASE = (0x3100, 0x41)


def _string_field(data: bytes, span: tuple[int, int]) -> str:
    offset, size = span
    return decode_fixed_string(data[offset : offset + size])


def _id_field(data: bytes, offset: int) -> str:
    """Format a u64 application/program ID the usual way (16 hex digits)."""
    return f"{struct.unpack_from('<Q', data, offset)[0]:016X}"


def parse_control(data: bytes) -> ControlProperty:
    """Parse a canonical (legacy-layout) NACP buffer.

    Short buffers are zero-padded to 0x4000 bytes first, so missing fields
    read as empty strings and zeroes. Bytes past 0x4000 are ignored.
    """
    buf = bytes(data[:NACP_SIZE]).ljust(NACP_SIZE, b"\x00")

    control = ControlProperty()
    for lang in LEGACY_LANGUAGES:
        entry = read_title_entry(buf, lang.value)
        if entry.name:
            control.titles[lang] = entry

    control.isbn = _string_field(buf, _ISBN)
    control.startup_user_account = buf[0x3025]
    control.attribute_flag = struct.unpack_from("<I", buf, 0x3028)[0]
    control.supported_language_flag = struct.unpack_from("<I", buf, 0x302C)[0]
    control.parental_control_flag = struct.unpack_from("<I", buf, 0x3030)[0]
    control.screenshot = buf[0x3034]
    control.video_capture = buf[0x3035]
    control.presence_group_id = _id_field(buf, 0x3038)
    control.display_version = _string_field(buf, _DISPLAY_VERSION)
    control.add_on_content_base_id = _id_field(buf, 0x3070)
    control.save_data_owner_id = _id_field(buf, 0x3078)
    control.application_error_code_category = _string_field(
        buf, _APPLICATION_ERROR_CODE_CATEGORY,
    )
    control.logo_type = buf[0x30F0]
    control.logo_handling = buf[0x30F1]
    control.bcat_passphrase = _string_field(buf, _BCAT_PASSPHRASE)
    control.title_block_compressed = buf[TITLE_COMPRESSION_FLAG_OFFSET] != 0
    return control

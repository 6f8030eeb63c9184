"""Binary decoding of NACP control data."""

from nacptool.core.compression import (
    DecompressionError,
    DecompressionErrorKind,
    decompress_title_block,
    is_compressed,
)
from nacptool.core.constants import Language
from nacptool.core.records import TitleEntry
from nacptool.core.title_block import extended_entries, to_canonical

__all__ = [
    "DecompressionError",
    "DecompressionErrorKind",
    "Language",
    "TitleEntry",
    "decompress_title_block",
    "extended_entries",
    "is_compressed",
    "to_canonical",
]

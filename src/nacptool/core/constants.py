"""Constants for the NACP control-property binary format."""

from __future__ import annotations

from enum import IntEnum

# Title block: bytes [0x0000, 0x3000)
TITLE_BLOCK_SIZE = 0x3000

# Metadata region starts right after the title block and keeps the same
# layout whatever the title block format is.
METADATA_OFFSET = 0x3000
NACP_SIZE = 0x4000

# Title block format flag: 0 = legacy table, nonzero = compressed blob
TITLE_COMPRESSION_FLAG_OFFSET = 0x3215

# Compressed title block header: compressed_size(u16 LE)
COMPRESSED_HEADER_SIZE = 2

# Raw DEFLATE, no zlib/gzip wrapper
DEFLATE_WBITS = -15

# Title entry: Name(0x200) + Publisher(0x100)
TITLE_ENTRY_SIZE = 0x300
TITLE_NAME_SIZE = 0x200
TITLE_PUBLISHER_SIZE = 0x100

LEGACY_LANGUAGE_COUNT = 16
MAX_LANGUAGE_COUNT = 31

# Firmware tables hold up to 32 slots (0x6000 bytes); anything past 1 MiB
# is not a title table.
INFLATE_CHUNK_SIZE = 0x4000
INFLATE_LIMIT = 0x100000


class Language(IntEnum):
    """Title entry languages, indexed by their slot in the title table."""
    AMERICAN_ENGLISH = 0
    BRITISH_ENGLISH = 1
    JAPANESE = 2
    FRENCH = 3
    GERMAN = 4
    LATIN_AMERICAN_SPANISH = 5
    SPANISH = 6
    ITALIAN = 7
    DUTCH = 8
    CANADIAN_FRENCH = 9
    PORTUGUESE = 10
    RUSSIAN = 11
    KOREAN = 12
    TRADITIONAL_CHINESE = 13
    SIMPLIFIED_CHINESE = 14
    BRAZILIAN_PORTUGUESE = 15

    # Only present in the compressed title block
    POLISH = 16
    THAI = 17
    INDONESIAN = 18
    ROMANIAN = 19
    VIETNAMESE = 20
    ARABIC = 21
    UKRAINIAN = 22
    CZECH = 23
    SLOVAK = 24
    GREEK = 25
    HUNGARIAN = 26
    NORWEGIAN = 27
    FINNISH = 28
    SWEDISH = 29
    DANISH = 30

    @property
    def is_legacy(self) -> bool:
        return self.value < LEGACY_LANGUAGE_COUNT

    @property
    def is_extended(self) -> bool:
        return self.value >= LEGACY_LANGUAGE_COUNT

    @property
    def display_name(self) -> str:
        """CamelCase name as used by the console firmware, e.g. ``AmericanEnglish``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def from_name(cls, name: str) -> Language:
        """Look up a language by member name or CamelCase name, ignoring case."""
        key = name.replace("_", "").replace("-", "").replace(" ", "").lower()
        for lang in cls:
            if lang.name.replace("_", "").lower() == key:
                return lang
        raise ValueError(f"Unknown language: {name!r}")


LEGACY_LANGUAGES = tuple(lang for lang in Language if lang.is_legacy)
EXTENDED_LANGUAGES = tuple(lang for lang in Language if lang.is_extended)


# Fixed-width C strings
DEFAULT_ENCODING = "utf-8"

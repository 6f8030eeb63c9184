"""Raw-DEFLATE decompression for compressed NACP title blocks.

Compressed title block layout (within bytes [0x0000, 0x3000)):
  [compressed_size: u16 LE] [compressed_data: raw DEFLATE × compressed_size] [padding]

Inflating the data yields at least 16 title entries of 0x300 bytes each; the
firmware writes up to 32 slots, of which the first 31 have a language.
"""

from __future__ import annotations

import logging
import struct
import zlib
from enum import Enum

from nacptool.core.constants import (
    COMPRESSED_HEADER_SIZE,
    DEFLATE_WBITS,
    INFLATE_CHUNK_SIZE,
    INFLATE_LIMIT,
    TITLE_BLOCK_SIZE,
    TITLE_COMPRESSION_FLAG_OFFSET,
)

logger = logging.getLogger(__name__)


class DecompressionErrorKind(Enum):
    """Why a compressed title block could not be decoded."""
    BUFFER_TOO_SMALL = "buffer_too_small"
    COMPRESSED_REGION_OVERFLOW = "compressed_region_overflow"
    INFLATE_FAILURE = "inflate_failure"
    DECOMPRESSED_TOO_SHORT = "decompressed_too_short"


class DecompressionError(ValueError):
    """A compressed title block is malformed.

    Callers inspect ``kind`` to tell the failure modes apart.
    """

    def __init__(self, kind: DecompressionErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


def is_compressed(data: bytes) -> bool:
    """Return True if the title compression flag at 0x3215 is set.

    Buffers too short to hold the flag are treated as legacy.
    """
    return len(data) > TITLE_COMPRESSION_FLAG_OFFSET and data[TITLE_COMPRESSION_FLAG_OFFSET] != 0


def decompress_title_block(data: bytes) -> bytes:
    """Inflate the compressed title block at the start of a raw NACP buffer.

    Args:
        data: Raw NACP bytes (the metadata region may or may not be present).

    Returns:
        The decompressed title table, at least 0x3000 bytes long. Anything past
        0x3000 holds the extended-language entries.

    Raises:
        DecompressionError: On a short buffer, a size header overflowing the
            title block region, a corrupt or truncated DEFLATE stream, or an
            inflated table shorter than 16 entries.
    """
    if len(data) < COMPRESSED_HEADER_SIZE:
        raise DecompressionError(
            DecompressionErrorKind.BUFFER_TOO_SMALL,
            "NACP buffer too small to contain compressed title block header",
        )

    compressed_size = struct.unpack_from("<H", data, 0)[0]
    data_end = COMPRESSED_HEADER_SIZE + compressed_size
    if data_end > TITLE_BLOCK_SIZE:
        raise DecompressionError(
            DecompressionErrorKind.COMPRESSED_REGION_OVERFLOW,
            f"Compressed size 0x{compressed_size:X} ends at 0x{data_end:X}, "
            f"past the title block region (0x{TITLE_BLOCK_SIZE:X})",
        )
    if data_end > len(data):
        raise DecompressionError(
            DecompressionErrorKind.INFLATE_FAILURE,
            f"Compressed data truncated: need 0x{data_end:X} bytes, got 0x{len(data):X}",
        )

    compressed = bytes(data[COMPRESSED_HEADER_SIZE:data_end])
    decompressed = _inflate(compressed)

    if len(decompressed) < TITLE_BLOCK_SIZE:
        raise DecompressionError(
            DecompressionErrorKind.DECOMPRESSED_TOO_SHORT,
            f"Decompressed title block is 0x{len(decompressed):X} bytes; "
            f"expected at least 0x{TITLE_BLOCK_SIZE:X}",
        )

    logger.debug(
        "Inflated title block: 0x%X -> 0x%X bytes", compressed_size, len(decompressed),
    )
    return decompressed


def _inflate(compressed: bytes) -> bytes:
    """Inflate a raw DEFLATE stream to its end marker, in bounded chunks."""
    inflater = zlib.decompressobj(wbits=DEFLATE_WBITS)
    chunks: list[bytes] = []
    total = 0
    pending = compressed
    try:
        while not inflater.eof:
            chunk = inflater.decompress(pending, INFLATE_CHUNK_SIZE)
            chunks.append(chunk)
            total += len(chunk)
            if total > INFLATE_LIMIT:
                raise DecompressionError(
                    DecompressionErrorKind.INFLATE_FAILURE,
                    f"Decompressed title block exceeds 0x{INFLATE_LIMIT:X} bytes",
                )
            pending = inflater.unconsumed_tail
            if not chunk and not pending:
                break
    except zlib.error as e:
        raise DecompressionError(
            DecompressionErrorKind.INFLATE_FAILURE,
            f"Failed to decompress NACP title block: {e}",
        ) from e

    if not inflater.eof:
        raise DecompressionError(
            DecompressionErrorKind.INFLATE_FAILURE,
            "Compressed title block ended before the end of the DEFLATE stream",
        )
    return b"".join(chunks)

"""Facade for loading control.nacp files in either title block format."""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

from nacptool.core.compression import (
    DecompressionError,
    decompress_title_block,
    is_compressed,
)
from nacptool.core.control import parse_control
from nacptool.core.records import NacpFile
from nacptool.core.title_block import assemble_canonical, table_extended_entries

logger = logging.getLogger(__name__)


def nacp_from_bytes(data: bytes) -> NacpFile:
    """Decode raw control.nacp bytes.

    A compressed title block that fails to decompress does not abort the
    load: a warning is emitted and the raw bytes are read as if they were in
    the legacy layout. Metadata fields stay correct, titles are unreliable,
    and ``decompression_error`` records what went wrong.
    """
    compressed = is_compressed(data)
    error_kind = None
    canonical = bytes(data)
    extended = {}
    if compressed:
        # One inflate feeds both the canonical buffer and the extended titles
        try:
            table = decompress_title_block(data)
        except DecompressionError as e:
            warnings.warn(
                f"Decompression failed for NACP title block ({e.kind.value}): {e}",
                stacklevel=2,
            )
            error_kind = e.kind
        else:
            canonical = assemble_canonical(data, table)
            extended = table_extended_entries(table)

    control = parse_control(canonical)
    logger.debug(
        "Loaded NACP: compressed=%s legacy_titles=%d extended_titles=%d",
        compressed, len(control.titles), len(extended),
    )
    return NacpFile(
        control=control,
        extended_titles=extended,
        compressed=compressed,
        decompression_error=error_kind,
    )


def load_nacp(path: str | Path) -> NacpFile:
    """Load and decode a control.nacp file from disk."""
    path = Path(path)
    with open(path, "rb") as f:
        data = f.read()
    return nacp_from_bytes(data)

"""Gzip detection and the compression stage of the save pipeline."""

import gzip
import logging
import zlib

from .errors import CompressionError

log = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


def is_gzip(data: bytes) -> bool:
    """Return True if the buffer starts with the gzip magic bytes."""
    return data[:2] == GZIP_MAGIC


def compress(data: bytes, level: int = 9) -> bytes:
    """Gzip the whole buffer.

    The output is only stable in content; header fields may differ between
    encodings of the same input.
    """
    compressed = gzip.compress(data, compresslevel=level)
    log.debug(f"Compressed {len(data)} bytes to {len(compressed)} bytes")
    return compressed


def decompress(data: bytes) -> bytes:
    """Fully decompress a gzip buffer.

    Raises:
        CompressionError: If the buffer is not valid gzip or the stream ends early
    """
    if not is_gzip(data):
        raise CompressionError("Not a gzip stream")

    try:
        decompressed = gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise CompressionError(f"Invalid gzip stream: {e}") from e

    log.debug(f"Decompressed {len(data)} bytes to {len(decompressed)} bytes")
    return decompressed

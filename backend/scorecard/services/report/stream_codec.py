"""Deflate codec for page content streams.

Content streams are handled as Latin-1 text so every byte maps to exactly one
character and survives a decode/encode round trip unchanged.
"""

from __future__ import annotations

import zlib

from ...utils.logging import get_logger

logger = get_logger(__name__)

STREAM_ENCODING = "latin-1"
COMPRESSION_LEVEL = 6


def decompress(data: bytes) -> str:
    """Inflate ``data``; bytes that are not deflate-encoded are returned as text."""
    try:
        inflated = zlib.decompress(data)
    except zlib.error as exc:
        logger.debug("stream is not deflate-encoded, using raw bytes", error=str(exc))
        inflated = bytes(data)
    return inflated.decode(STREAM_ENCODING)


def compress(text: str) -> bytes:
    return zlib.compress(text.encode(STREAM_ENCODING), COMPRESSION_LEVEL)

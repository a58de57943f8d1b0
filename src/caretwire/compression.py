"""Compression stage for encoded strings.

Wraps the output of serialize() for channels that are size-limited or
accept only printable text:

    values --serialize--> encoded str --compress--> zlib bytes
           --encode_for_print--> URL-safe base64 str

The stage treats the encoded string as opaque bytes and never looks at the
tag grammar, so the round trip is lossless for every string serialize()
can produce (UTF-8 with surrogatepass, so even lone surrogates survive).

Security:
    decompress() bounds its output size, so a small hostile payload cannot
    expand into an unbounded allocation (decompression bomb).

Python 3.13+.
"""

from __future__ import annotations

import base64
import logging
import zlib

from caretwire.config import DEFAULT_CONFIG, CodecConfig
from caretwire.constants import DEFAULT_COMPRESSION_LEVEL, MAX_INPUT_SIZE
from caretwire.diagnostics import CompressionError, ErrorTemplate
from caretwire.values import Value
from caretwire.wire import DecodeResult, deserialize, serialize

__all__ = [
    "compress",
    "decode_for_print",
    "decompress",
    "encode_for_print",
    "pack",
    "unpack",
]

logger = logging.getLogger(__name__)

_TEXT_ENCODING = "utf-8"
_TEXT_ERRORS = "surrogatepass"


def compress(text: str, level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """Compress an encoded string into a zlib stream.

    Args:
        text: Encoded string (opaque to this stage)
        level: zlib compression level, 0-9 (default: 6)

    Returns:
        zlib-wrapped DEFLATE bytes
    """
    raw = text.encode(_TEXT_ENCODING, _TEXT_ERRORS)
    data = zlib.compress(raw, level)
    logger.debug("Compressed %d bytes into %d bytes", len(raw), len(data))
    return data


def decompress(data: bytes, max_size: int = MAX_INPUT_SIZE) -> str:
    """Restore the string passed to compress().

    Args:
        data: zlib stream produced by compress()
        max_size: Maximum decompressed size in bytes

    Returns:
        The original string

    Raises:
        CompressionError: If data is not exactly one complete zlib stream,
            expands beyond max_size, or does not hold UTF-8 text
    """
    decompressor = zlib.decompressobj()
    try:
        raw = decompressor.decompress(data, max_size + 1)
    except zlib.error as e:
        logger.warning("Decompression failed: %s", e)
        raise CompressionError(ErrorTemplate.decompression_failed(str(e))) from e

    if len(raw) > max_size or decompressor.unconsumed_tail:
        logger.warning("Decompressed payload exceeds %d bytes", max_size)
        raise CompressionError(ErrorTemplate.decompression_failed("output exceeds size limit"))
    if not decompressor.eof:
        logger.warning("Compressed payload is truncated")
        raise CompressionError(ErrorTemplate.decompression_failed("truncated stream"))
    if decompressor.unused_data:
        logger.warning("Compressed payload has %d trailing byte(s)", len(decompressor.unused_data))
        raise CompressionError(ErrorTemplate.decompression_failed("trailing data after stream"))

    try:
        return raw.decode(_TEXT_ENCODING, _TEXT_ERRORS)
    except UnicodeDecodeError as e:
        logger.warning("Decompressed payload is not UTF-8: %s", e)
        failure = ErrorTemplate.decompression_failed("payload is not UTF-8 text")
        raise CompressionError(failure) from e


def encode_for_print(data: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding.

    Example:
        >>> encode_for_print(b"\\x00\\xff")
        'AP8'
    """
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_for_print(text: str) -> bytes:
    """Invert encode_for_print().

    Raises:
        CompressionError: If text is not valid unpadded URL-safe base64
    """
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except ValueError as e:
        # binascii.Error, or non-ASCII characters in text
        raise CompressionError(ErrorTemplate.decompression_failed(str(e))) from e


def pack(
    *values: object,
    level: int = DEFAULT_COMPRESSION_LEVEL,
    config: CodecConfig | None = None,
) -> str:
    """Serialize, compress and encode values as printable text.

    Raises:
        UnsupportedTypeError: If a value has no production
        CircularReferenceError: If a container is its own ancestor
        DepthLimitExceededError: If containers nest deeper than max_depth

    Example:
        >>> unpack(pack({"a": 1}, None))
        (True, {'a': 1}, None)
    """
    return encode_for_print(compress(serialize(*values, config=config), level))


def unpack(text: object, config: CodecConfig | None = None) -> tuple[bool, *tuple[Value, ...]]:
    """Invert pack(). Never raises.

    Returns:
        ``(True, *values)`` on success, ``(False, message)`` on failure
    """
    if not isinstance(text, str):
        return deserialize(text, config)

    effective = config if config is not None else DEFAULT_CONFIG
    try:
        encoded = decompress(decode_for_print(text), max_size=effective.max_input_size)
    except CompressionError as e:
        return DecodeResult(diagnostic=e.diagnostic).as_tuple()
    return deserialize(encoded, effective)

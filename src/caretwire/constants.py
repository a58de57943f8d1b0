"""Shared constants for caretwire.

This module provides the wire-format vocabulary and the default limits used
by the encoder, decoder, and compression stage. Placing them here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Protocol: header, marker, and tag characters
- Escaping: reserved characters and their two-character escape pairs
- Limits: recursion and input-size bounds

Python 3.13+. Zero external dependencies.
"""

from enum import StrEnum

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "MARKER",
    "PROTOCOL_VERSION",
    "HEADER",
    "HEADER_LENGTH",
    "Tag",
    # Escaping
    "ESCAPE_MARKER",
    "ESCAPE_TABLE",
    "UNESCAPE_TABLE",
    # Limits
    "MAX_DEPTH",
    "MAX_INPUT_SIZE",
    "DEFAULT_COMPRESSION_LEVEL",
]

# ============================================================================
# PROTOCOL
# ============================================================================
#
# Every structural token is two characters: MARKER followed by a one-character
# code. The header uses the same shape with the protocol version as its code.
#
#   ^1          header (version 1, the only accepted version)
#   ^T ... ^t   container start / end
#   ^S<text>    text, escaped, ends at the next unescaped MARKER
#   ^N<digits>  integer
#   ^F<repr>^f  float, explicitly terminated
#   ^B ^b       true / false
#   ^Z          nil
#   ^I ^i       +infinity / -infinity
#
# ============================================================================

MARKER: str = "^"
PROTOCOL_VERSION: str = "1"
HEADER: str = MARKER + PROTOCOL_VERSION
HEADER_LENGTH: int = len(HEADER)


class Tag(StrEnum):
    """Code character following MARKER in a structural tag.

    StrEnum members are strings themselves: MARKER + Tag.NIL == "^Z"
    """

    TEXT = "S"
    INTEGER = "N"
    FLOAT = "F"
    FLOAT_END = "f"
    CONTAINER_START = "T"
    CONTAINER_END = "t"
    TRUE = "B"
    FALSE = "b"
    NIL = "Z"
    INF = "I"
    NEG_INF = "i"


# ============================================================================
# ESCAPING
# ============================================================================

# Escape marker: one of the reserved control characters, distinct from MARKER.
ESCAPE_MARKER: str = "\x01"

# Reserved raw character -> two-character escape pair.
ESCAPE_TABLE: dict[str, str] = {
    "\x01": "\x01\x01",
    "\x02": "\x01\x02",
    "\x03": "\x01\x03",
    "\x04": "\x01\x04",
    MARKER: "\x01\x05",
}

# Distinguishing character (second of the pair) -> reserved raw character.
UNESCAPE_TABLE: dict[str, str] = {pair[1]: raw for raw, pair in ESCAPE_TABLE.items()}

# ============================================================================
# LIMITS
# ============================================================================

# Maximum container nesting depth, shared by encoder and decoder.
# 100 levels is far beyond any legitimate payload and well inside the
# default Python recursion limit used by the recursive encoder.
MAX_DEPTH: int = 100

# Default maximum encoded input size accepted by the decoder (10 MB).
MAX_INPUT_SIZE: int = 10 * 1024 * 1024

# zlib level used by the compression stage.
DEFAULT_COMPRESSION_LEVEL: int = 6

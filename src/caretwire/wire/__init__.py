"""Tagged wire format: escaping, encoding and decoding.

Python 3.13+.
"""

from .cursor import Cursor, ParseResult
from .decoder import DecodeResult, Deserializer, decode, deserialize
from .encoder import Serializer, serialize
from .escape import escape, needs_escape, unescape

__all__ = [
    "Cursor",
    "DecodeResult",
    "Deserializer",
    "ParseResult",
    "Serializer",
    "decode",
    "deserialize",
    "escape",
    "needs_escape",
    "serialize",
    "unescape",
]

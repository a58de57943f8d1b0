"""caretwire - tagged text serialization for structured values.

Converts an ordered sequence of values (None, bool, int, float, str and
nested mappings) into one flat, transport-safe string and back. The format
is a caret-tagged, self-delimiting grammar with a version header, decoded
in a single pass.

Public API:
    serialize - Encode values to a string (raises on programming errors)
    deserialize - Decode a string to (True, *values) or (False, message)
    decode - Decode a string to a DecodeResult
    pack / unpack - serialize + zlib + printable base64, and back
    CodecConfig - Depth, size and key-ordering options

Exceptions:
    CaretwireError - Base exception class
    SerializationError - Encoding failed
    UnsupportedTypeError - Value kind has no wire production
    CircularReferenceError - Container is its own ancestor
    DepthLimitExceededError - Containers nest deeper than max_depth

Submodules:
    caretwire.wire - Escaper, encoder, decoder, cursor
    caretwire.values - Value model and classification
    caretwire.diagnostics - Error types, codes and formatting
    caretwire.compression - Optional compression stage
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .compression import pack, unpack
from .config import CodecConfig
from .constants import PROTOCOL_VERSION as __protocol_version__
from .diagnostics import (
    CaretwireError,
    CircularReferenceError,
    CompressionError,
    DepthLimitExceededError,
    SerializationError,
    UnsupportedTypeError,
)
from .wire import DecodeResult, decode, deserialize, serialize

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("caretwire")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CaretwireError",
    "CircularReferenceError",
    "CodecConfig",
    "CompressionError",
    "DecodeResult",
    "DepthLimitExceededError",
    "SerializationError",
    "UnsupportedTypeError",
    "__protocol_version__",
    "__version__",
    "decode",
    "deserialize",
    "pack",
    "serialize",
    "unpack",
]

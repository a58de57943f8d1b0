"""Error codes, spans and the Diagnostic record.

Every failure the codec reports, raised on encode or returned on decode,
is described by one Diagnostic carrying a stable numeric code.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
    "SourceSpan",
]


class ErrorCategory(StrEnum):
    """Broad class of a DiagnosticCode, taken from its thousands digit.

    Categories:
        ENCODE: Raised by the encoder (caller programming error)
        INPUT: Decoder rejected the input before reading any value
        GRAMMAR: Decoder found malformed or truncated tagged content
        COMPRESSION: Compression stage could not restore the encoded text
    """

    ENCODE = "encode"
    INPUT = "input"
    GRAMMAR = "grammar"
    COMPRESSION = "compression"


class DiagnosticCode(Enum):
    """Stable numeric identifiers, grouped by thousands.

    Ranges:
        1000-1999: Encode errors (raised by serialize)
        2000-2999: Input errors (header and envelope checks)
        3000-3999: Grammar errors (tag stream decoding)
        4000-4999: Compression stage errors
    """

    # Encode errors (1000-1999)
    UNSUPPORTED_TYPE = 1001
    CIRCULAR_REFERENCE = 1002
    MAX_DEPTH_EXCEEDED = 1003
    INVALID_KEY = 1004

    # Input errors (2000-2999)
    INPUT_TYPE_ERROR = 2001
    INPUT_TOO_SHORT = 2002
    INPUT_TOO_LARGE = 2003
    MISSING_HEADER = 2004
    UNSUPPORTED_VERSION = 2005

    # Grammar errors (3000-3999)
    INVALID_TAG = 3001
    UNTERMINATED_FLOAT = 3002
    UNEXPECTED_END_OF_INPUT = 3003
    MALFORMED_ESCAPE = 3004
    INVALID_NUMBER = 3005
    NESTING_DEPTH_EXCEEDED = 3006

    # Compression errors (4000-4999)
    DECOMPRESSION_FAILED = 4001

    @property
    def category(self) -> ErrorCategory:
        """Category derived from the code's numeric range."""
        match self.value // 1000:
            case 1:
                return ErrorCategory.ENCODE
            case 2:
                return ErrorCategory.INPUT
            case 3:
                return ErrorCategory.GRAMMAR
            case _:
                return ErrorCategory.COMPRESSION


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Location inside an encoded string.

    Offsets count characters (code points) of the encoded text, which is
    what the decoder walks.

    Attributes:
        start: First offset covered (0-based)
        end: Offset just past the covered text
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Reject negative or inverted spans.

        Raises:
            ValueError: If start is negative or end precedes start.
        """
        if self.start < 0:
            msg = f"span start cannot be negative (got {self.start})"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"span end {self.end} lies before start {self.start}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reported problem, rendered by DiagnosticFormatter.

    Attributes:
        code: Which failure this is
        message: One-line description
        span: Location in the encoded text (decode errors only)
        hint: What the caller can change to avoid it
        value_path: Key path from the top-level value to the offending
            value (encode errors only), e.g. ``("[0]", "'user'", "'tags'")``
        received_type: Python type name of the offending value
        severity: "error" or "warning"
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    value_path: tuple[str, ...] | None = None
    received_type: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """The message alone."""
        return self.message

    def format_error(self) -> str:
        """Render with the default (RUST) formatter.

        Example:
            error[CIRCULAR_REFERENCE]: Circular reference detected in container
              --> value [0] -> 'child'
              = help: Break the cycle before serializing
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)

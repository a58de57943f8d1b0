"""caretwire exception hierarchy with structured diagnostics.

All exceptions can carry a Diagnostic object for rich error information.
Encode-side errors propagate to the caller; decode-side errors are raised
only inside the decoder and converted to a failure result at the public
boundary.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "CaretwireError",
    "CircularReferenceError",
    "CompressionError",
    "DepthLimitExceededError",
    "DeserializationError",
    "MalformedEscapeError",
    "SerializationError",
    "UnsupportedTypeError",
]


class CaretwireError(Exception):
    """Base exception for all caretwire errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize CaretwireError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class SerializationError(CaretwireError):
    """Encoding failed.

    The whole serialize() call is aborted; no partial output is returned.
    """


class UnsupportedTypeError(SerializationError, TypeError):
    """Value kind has no wire production.

    Examples:
    - Functions, classes, modules, generators, coroutines
    - Open files, sockets, locks, threads
    - NaN, sequences, sets, bytes
    - Nil or container used as a container key
    """


class CircularReferenceError(SerializationError, ValueError):
    """Container is its own direct or indirect ancestor.

    Example:
        >>> data = {}
        >>> data["self"] = data
        >>> serialize(data)  # Raises CircularReferenceError
    """


class DepthLimitExceededError(SerializationError, RecursionError):
    """Container nesting exceeds the configured maximum depth."""


class DeserializationError(CaretwireError):
    """Decoding failed.

    Internal to the decoder: deserialize() catches it and returns
    ``(False, message)``. Always carries a Diagnostic, since the message
    returned to the caller is formatted from it.
    """

    def __init__(self, diagnostic: Diagnostic) -> None:
        """Initialize DeserializationError.

        Args:
            diagnostic: Diagnostic describing the failure
        """
        super().__init__(diagnostic)
        self.diagnostic: Diagnostic = diagnostic  # type: ignore[misc]


class MalformedEscapeError(DeserializationError, ValueError):
    """Escape marker followed by an unrecognized character.

    Attributes:
        position: Offset of the escape marker within the unescaped input
    """

    def __init__(self, diagnostic: Diagnostic, *, position: int = 0) -> None:
        """Initialize MalformedEscapeError.

        Args:
            diagnostic: Diagnostic describing the failure
            position: Offset of the escape marker
        """
        super().__init__(diagnostic)
        self.position = position


class CompressionError(CaretwireError, ValueError):
    """Compression stage could not restore the encoded text."""

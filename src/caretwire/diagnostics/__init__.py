"""Diagnostic system for caretwire errors.

Provides structured error diagnostics with codes, spans, value paths and
hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorCategory, SourceSpan
from .errors import (
    CaretwireError,
    CircularReferenceError,
    CompressionError,
    DepthLimitExceededError,
    DeserializationError,
    MalformedEscapeError,
    SerializationError,
    UnsupportedTypeError,
)
from .formatter import DiagnosticFormatter, OutputFormat, format_value_path
from .templates import ErrorTemplate

__all__ = [
    "CaretwireError",
    "CircularReferenceError",
    "CompressionError",
    "DepthLimitExceededError",
    "DeserializationError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorCategory",
    "ErrorTemplate",
    "MalformedEscapeError",
    "OutputFormat",
    "SerializationError",
    "SourceSpan",
    "UnsupportedTypeError",
    "format_value_path",
]

"""Rendering of diagnostics for logs, terminals and tools.

Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic, SourceSpan

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
    "format_value_path",
]

_RED = "\033[1;31m"
_YELLOW = "\033[1;33m"
_RESET = "\033[0m"


class OutputFormat(StrEnum):
    """How DiagnosticFormatter renders a diagnostic."""

    RUST = "rust"  # multi-line, compiler style (default)
    SIMPLE = "simple"  # CODE: message
    JSON = "json"  # one JSON object per diagnostic


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Renders Diagnostic objects as text.

    Decode diagnostics quote characters taken from untrusted input, so
    control characters are always escaped and a rendered field never spans
    more than one line.

    Attributes:
        output_format: RUST, SIMPLE or JSON
        sanitize: Cut message and hint text to max_content_length
        color: Wrap the severity label in ANSI color codes
        max_content_length: Limit applied when sanitize is set
        context_width: Characters of encoded input shown on each side of
            the failure offset in RUST excerpts

    Example:
        >>> from caretwire.diagnostics import ErrorTemplate
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.input_too_short(1)))
        INPUT_TOO_SHORT: Input too short (1 characters) to contain a header
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100
    context_width: int = 12

    def format(self, diagnostic: Diagnostic, source: str | None = None) -> str:
        """Render one diagnostic.

        Args:
            diagnostic: Diagnostic to render
            source: Encoded text the diagnostic's span points into. When
                given, RUST output adds an excerpt with a caret under the
                failure offset.

        Returns:
            Rendered text
        """
        match self.output_format:
            case OutputFormat.SIMPLE:
                return f"{diagnostic.code.name}: {self._clean(diagnostic.message)}"
            case OutputFormat.JSON:
                return json.dumps(self._as_dict(diagnostic), ensure_ascii=False)
            case _:
                return self._format_rust(diagnostic, source)

    def format_all(self, diagnostics: Iterable[Diagnostic], source: str | None = None) -> str:
        """Render several diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d, source) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic, source: str | None) -> str:
        """Compiler-style block.

        Example output:
            error[INVALID_TAG]: Unknown type tag 'X' at offset 4
              --> offset 4
               | ^1^Z^X^N1
               |     ^^
        """
        lines = [
            f"{self._label(diagnostic.severity)}[{diagnostic.code.name}]: "
            f"{self._clean(diagnostic.message)}"
        ]

        if diagnostic.span is not None:
            lines.append(f"  --> offset {diagnostic.span.start}")
            if source is not None:
                lines.extend(self._excerpt(source, diagnostic.span))
        elif diagnostic.value_path:
            lines.append(f"  --> value {format_value_path(diagnostic.value_path)}")

        if diagnostic.received_type:
            lines.append(f"  = received: {diagnostic.received_type}")
        if diagnostic.hint:
            lines.append(f"  = help: {self._clean(diagnostic.hint)}")
        return "\n".join(lines)

    def _label(self, severity: str) -> str:
        if not self.color:
            return severity
        color = _RED if severity == "error" else _YELLOW
        return f"{color}{severity}{_RESET}"

    def _excerpt(self, source: str, span: SourceSpan) -> list[str]:
        """Window of source around span plus a caret line under it.

        Characters are escaped one by one before measuring, so the caret
        stays aligned when the window contains control characters.
        """
        mark_end = min(max(span.end, span.start + 1), len(source))
        start = max(0, span.start - self.context_width)
        end = min(len(source), mark_end + self.context_width)

        head = ("..." if start > 0 else "") + _escape_controls(source[start : span.start])
        marked = _escape_controls(source[span.start : mark_end])
        tail = _escape_controls(source[mark_end:end]) + ("..." if end < len(source) else "")

        pointer = " " * len(head) + "^" * max(1, len(marked))
        return [f"   | {head}{marked}{tail}", f"   | {pointer}"]

    def _as_dict(self, diagnostic: Diagnostic) -> dict[str, str | int | list[str]]:
        data: dict[str, str | int | list[str]] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "category": str(diagnostic.code.category),
            "severity": diagnostic.severity,
            "message": self._truncate(diagnostic.message),
        }
        if diagnostic.span is not None:
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end
        if diagnostic.value_path:
            data["value_path"] = list(diagnostic.value_path)
        if diagnostic.received_type:
            data["received_type"] = diagnostic.received_type
        if diagnostic.hint:
            data["hint"] = self._truncate(diagnostic.hint)
        return data

    def _clean(self, text: str) -> str:
        return self._truncate(_escape_controls(text))

    def _truncate(self, text: str) -> str:
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text


def _escape_controls(text: str) -> str:
    """Replace non-printable characters with their backslash escapes."""
    if text.isprintable():
        return text
    return "".join(
        c if c.isprintable() else c.encode("unicode_escape").decode("ascii") for c in text
    )


def format_value_path(value_path: tuple[str, ...]) -> str:
    """Render a key path as ``[0] -> 'a' -> 3``."""
    return " -> ".join(value_path)

"""Decode the tagged wire format back into values.

Single-pass decoder using the immutable cursor pattern
(:class:`~caretwire.wire.cursor.Cursor`). Each loop iteration reads exactly
one tag and dispatches on its code character; no production needs more
than one tag of lookahead.

Architecture:
    Containers are decoded iteratively with an explicit stack of open
    frames, so nesting depth is bounded by configuration rather than by the
    interpreter's recursion limit:

        ExpectHeader -> ExpectTag(depth=0) -> production -> ExpectTag(depth) ...

    A container start tag pushes a frame (depth + 1), the matching end tag
    pops it (depth - 1) and hands the finished dict to the enclosing frame
    or to the top-level result list. Decoding succeeds when ExpectTag(0)
    reaches end of input.

Security:
    Input is assumed untrusted. Every failure is reported as a
    DecodeResult carrying a Diagnostic; deserialize() never raises.
    Configurable max_input_size and max_depth bound work and memory.

Python 3.13+.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field

from caretwire.config import DEFAULT_CONFIG, CodecConfig
from caretwire.constants import HEADER_LENGTH, MARKER, PROTOCOL_VERSION, Tag
from caretwire.diagnostics import (
    DeserializationError,
    Diagnostic,
    DiagnosticFormatter,
    ErrorTemplate,
    OutputFormat,
)
from caretwire.values import Key, Value

from .cursor import Cursor, ParseResult
from .escape import unescape

__all__ = ["DecodeResult", "Deserializer", "decode", "deserialize"]

logger = logging.getLogger(__name__)

_DIGITS: str = "0123456789"

# Shape produced by repr(float) for finite values; float() alone would also
# accept whitespace, underscores and words such as "nan" or "infinity".
_FLOAT_BODY = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

_MESSAGE_FORMATTER = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Outcome of decoding one encoded string.

    Attributes:
        values: Decoded values in their original order (empty on failure)
        diagnostic: Failure details, None on success

    Example:
        >>> result = decode("^1^N1^Z^Sx")
        >>> result.ok, result.values
        (True, (1, None, 'x'))
        >>> decode("^2").message
        "UNSUPPORTED_VERSION: Unsupported protocol version: '2' at offset 1"
    """

    values: tuple[Value, ...] = ()
    diagnostic: Diagnostic | None = None

    @property
    def ok(self) -> bool:
        """True when decoding succeeded."""
        return self.diagnostic is None

    @property
    def message(self) -> str | None:
        """Single-line failure description, None on success."""
        if self.diagnostic is None:
            return None
        return _MESSAGE_FORMATTER.format(self.diagnostic)

    def as_tuple(self) -> tuple[bool, *tuple[Value, ...]]:
        """Flatten to ``(True, *values)`` or ``(False, message)``."""
        if self.diagnostic is None:
            return (True, *self.values)
        return (False, _MESSAGE_FORMATTER.format(self.diagnostic))


@dataclass(slots=True)
class _Frame:
    """An open container awaiting its next key or value."""

    start: int
    entries: dict[Key, Value] = field(default_factory=dict)
    key: Key | None = None
    has_key: bool = False


class Deserializer:
    """Decoder for the tagged wire format.

    Thread-safe: holds only an immutable CodecConfig. The cursor, frame
    stack and result list are local to each decode() call, so decoding can
    be re-entered from any callback.

    Usage:
        >>> Deserializer().deserialize("^1^T^Sa^N1^Sb^B^t")
        (True, {'a': 1, 'b': True})
    """

    __slots__ = ("_config",)

    def __init__(self, config: CodecConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG

    @property
    def config(self) -> CodecConfig:
        """Configuration used by this deserializer."""
        return self._config

    def decode(self, text: object) -> DecodeResult:
        """Decode text into a DecodeResult. Never raises.

        Args:
            text: Encoded string (any object is accepted and rejected
                gracefully if it is not a str)

        Returns:
            DecodeResult with values on success or a diagnostic on failure
        """
        try:
            values = self._decode(text)
        except DeserializationError as e:
            diagnostic = e.diagnostic
            logger.debug(
                "Deserialization failed: %s (%s)",
                diagnostic.code.name,
                diagnostic.span.start if diagnostic.span else "no offset",
            )
            return DecodeResult(diagnostic=diagnostic)

        logger.debug("Deserialized %d value(s)", len(values))
        return DecodeResult(values=tuple(values))

    def deserialize(self, text: object) -> tuple[bool, *tuple[Value, ...]]:
        """Decode text into ``(True, *values)`` or ``(False, message)``.

        Never raises: input is presumed untrusted or corrupted.
        """
        return self.decode(text).as_tuple()

    def _decode(self, text: object) -> list[Value]:
        """Validate the envelope, then run the tag loop.

        Raises:
            DeserializationError: On any failure
        """
        if not isinstance(text, str):
            raise DeserializationError(ErrorTemplate.input_type_error(type(text).__name__))
        if len(text) < HEADER_LENGTH:
            raise DeserializationError(ErrorTemplate.input_too_short(len(text)))
        if len(text) > self._config.max_input_size:
            raise DeserializationError(
                ErrorTemplate.input_too_large(len(text), self._config.max_input_size)
            )
        if text[0] != MARKER:
            raise DeserializationError(ErrorTemplate.missing_header(text[0]))
        if text[1] != PROTOCOL_VERSION:
            raise DeserializationError(ErrorTemplate.unsupported_version(text[1]))

        return self._decode_values(Cursor(text, HEADER_LENGTH))

    def _decode_values(self, cursor: Cursor) -> list[Value]:
        """Tag loop: read productions until end of input at depth 0."""
        results: list[Value] = []
        stack: list[_Frame] = []
        max_depth = self._config.max_depth

        while not cursor.is_eof:
            tag_pos = cursor.pos
            tag_result = self._read_tag(cursor, stack)
            tag, cursor = tag_result.value, tag_result.cursor

            value: Value
            match tag:
                case Tag.CONTAINER_START:
                    if stack and not stack[-1].has_key:
                        raise DeserializationError(
                            ErrorTemplate.invalid_decoded_key("container", tag_pos)
                        )
                    if len(stack) >= max_depth:
                        raise DeserializationError(
                            ErrorTemplate.nesting_depth_exceeded(max_depth, tag_pos)
                        )
                    stack.append(_Frame(start=tag_pos))
                    continue
                case Tag.CONTAINER_END:
                    if not stack:
                        raise DeserializationError(
                            ErrorTemplate.unbalanced_container_end(tag_pos)
                        )
                    if stack[-1].has_key:
                        raise DeserializationError(ErrorTemplate.missing_entry_value(tag_pos))
                    value = stack.pop().entries
                case _:
                    scalar = self._read_scalar(tag, cursor, tag_pos)
                    value, cursor = scalar.value, scalar.cursor

            if not stack:
                results.append(value)
                continue

            frame = stack[-1]
            if frame.has_key:
                frame.entries[frame.key] = value  # type: ignore[index]
                frame.key = None
                frame.has_key = False
            elif value is None:
                raise DeserializationError(ErrorTemplate.invalid_decoded_key("nil", tag_pos))
            else:
                frame.key = value  # type: ignore[assignment]
                frame.has_key = True

        if stack:
            raise DeserializationError(
                ErrorTemplate.unexpected_end_of_input(len(stack), cursor.pos, stack[-1].start)
            )
        return results

    def _read_tag(self, cursor: Cursor, stack: list[_Frame]) -> ParseResult[str]:
        """Consume MARKER plus one code character.

        stack is only read to describe a truncated tag.
        """
        if cursor.current != MARKER:
            raise DeserializationError(ErrorTemplate.expected_marker(cursor.current, cursor.pos))
        code = cursor.peek(1)
        if code is None:
            raise DeserializationError(
                ErrorTemplate.unexpected_end_of_input(
                    len(stack), len(cursor.source), stack[-1].start if stack else None
                )
            )
        return ParseResult(code, cursor.advance(2))

    def _read_scalar(self, tag: str, cursor: Cursor, tag_pos: int) -> ParseResult[Value]:
        """Dispatch a non-container tag to its production."""
        match tag:
            case Tag.NIL:
                return ParseResult(None, cursor)
            case Tag.TRUE:
                return ParseResult(True, cursor)
            case Tag.FALSE:
                return ParseResult(False, cursor)
            case Tag.INF:
                return ParseResult(math.inf, cursor)
            case Tag.NEG_INF:
                return ParseResult(-math.inf, cursor)
            case Tag.INTEGER:
                return _read_integer(cursor)
            case Tag.FLOAT:
                return _read_float(cursor)
            case Tag.TEXT:
                return _read_text(cursor)
            case _:
                raise DeserializationError(ErrorTemplate.unknown_tag(tag, tag_pos))


def _read_integer(cursor: Cursor) -> ParseResult[Value]:
    """Optional minus sign followed by a maximal run of decimal digits."""
    start = cursor
    end = (cursor.expect("-") or cursor).skip_while(_DIGITS)
    raw = start.slice_to(end.pos)
    if raw in ("", "-"):
        raise DeserializationError(ErrorTemplate.invalid_number(raw, start.pos))
    try:
        value = int(raw)
    except ValueError:
        # Digit runs beyond sys.get_int_max_str_digits()
        raise DeserializationError(ErrorTemplate.invalid_number(raw, start.pos)) from None
    return ParseResult(value, end)


def _read_float(cursor: Cursor) -> ParseResult[Value]:
    """Float body up to the float end tag."""
    end = cursor.find(MARKER)
    raw = cursor.slice_to(end)
    terminator = Cursor(cursor.source, end)
    if terminator.is_eof or terminator.peek(1) != Tag.FLOAT_END:
        raise DeserializationError(ErrorTemplate.unterminated_float(end))
    if _FLOAT_BODY.fullmatch(raw) is None:
        raise DeserializationError(ErrorTemplate.invalid_number(raw, cursor.pos))
    value = float(raw)
    if not math.isfinite(value):
        # Exponent overflow such as 1e999
        raise DeserializationError(ErrorTemplate.invalid_number(raw, cursor.pos))
    return ParseResult(value, terminator.advance(2))


def _read_text(cursor: Cursor) -> ParseResult[Value]:
    """Escaped payload up to the next tag marker or end of input."""
    end = cursor.find(MARKER)
    value = unescape(cursor.slice_to(end), offset=cursor.pos)
    return ParseResult(value, Cursor(cursor.source, end))


def decode(text: object, config: CodecConfig | None = None) -> DecodeResult:
    """Decode text into a DecodeResult. Never raises.

    Convenience function for Deserializer.decode().
    """
    return Deserializer(config).decode(text)


def deserialize(text: object, config: CodecConfig | None = None) -> tuple[bool, *tuple[Value, ...]]:
    """Decode text into ``(True, *values)`` or ``(False, message)``.

    Convenience function for Deserializer.deserialize(). Never raises.

    Args:
        text: Encoded string
        config: Optional codec configuration

    Returns:
        ``(True, value_1, value_2, ...)`` on success, preserving order and
        count (including None slots); ``(False, message)`` on failure, where
        message names the failure code and offset

    Example:
        >>> deserialize("^1^Sa^Z^Sc")
        (True, 'a', None, 'c')
        >>> deserialize("")
        (False, 'INPUT_TOO_SHORT: Input too short (0 characters) to contain a header')
    """
    return Deserializer(config).deserialize(text)

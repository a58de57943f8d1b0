"""Constructors for every Diagnostic the codec produces.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


def _printable(char: str) -> str:
    """Render a single character for inclusion in a message."""
    if char.isprintable():
        return f"'{char}'"
    return f"U+{ord(char):04X}"


def _at(position: int, length: int = 1) -> SourceSpan:
    return SourceSpan(start=position, end=position + length)


class ErrorTemplate:
    """One static method per failure, each returning a Diagnostic.

    Raise sites pass the result to an error class instead of formatting
    text inline, so every message is defined (and tested) in one place.

    Decode-side templates always mention the character offset so the
    ``(False, message)`` result of ``deserialize`` identifies both the
    failure kind and its location.
    """

    # =========================================================================
    # ENCODE ERRORS (1000-1999)
    # =========================================================================

    @staticmethod
    def unsupported_type(type_name: str, value_path: tuple[str, ...]) -> Diagnostic:
        """Value kind has no production in the wire format.

        Args:
            type_name: Python type name of the rejected value
            value_path: Key path to the rejected value

        Returns:
            Diagnostic for UNSUPPORTED_TYPE
        """
        msg = f"Cannot serialize type '{type_name}'"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_TYPE,
            message=msg,
            hint=(
                "Only None, bool, int, finite or infinite float, str and "
                "mappings of those can be serialized"
            ),
            value_path=value_path,
            received_type=type_name,
        )

    @staticmethod
    def nan_not_supported(value_path: tuple[str, ...]) -> Diagnostic:
        """NaN has no production in the wire format.

        Args:
            value_path: Key path to the rejected value

        Returns:
            Diagnostic for UNSUPPORTED_TYPE
        """
        msg = "Cannot serialize NaN"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_TYPE,
            message=msg,
            hint="Replace NaN with None or a sentinel value before serializing",
            value_path=value_path,
            received_type="float",
        )

    @staticmethod
    def integer_too_large(max_digits: int, value_path: tuple[str, ...]) -> Diagnostic:
        """Integer has more decimal digits than the interpreter will convert.

        Args:
            max_digits: Current sys.get_int_max_str_digits() value
            value_path: Key path to the rejected value

        Returns:
            Diagnostic for UNSUPPORTED_TYPE
        """
        msg = f"Cannot serialize integer with more than {max_digits} decimal digits"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_TYPE,
            message=msg,
            hint="Raise sys.set_int_max_str_digits() or send the value as text",
            value_path=value_path,
            received_type="int",
        )

    @staticmethod
    def invalid_key(type_name: str, value_path: tuple[str, ...]) -> Diagnostic:
        """Container key is not a scalar, non-nil value.

        Args:
            type_name: Python type name of the rejected key
            value_path: Key path to the container holding the key

        Returns:
            Diagnostic for INVALID_KEY
        """
        msg = f"Invalid container key of type '{type_name}'"
        return Diagnostic(
            code=DiagnosticCode.INVALID_KEY,
            message=msg,
            hint="Container keys must be str, int, float or bool",
            value_path=value_path,
            received_type=type_name,
        )

    @staticmethod
    def circular_reference(value_path: tuple[str, ...]) -> Diagnostic:
        """Container is its own ancestor.

        Args:
            value_path: Key path at which the ancestor was revisited

        Returns:
            Diagnostic for CIRCULAR_REFERENCE
        """
        msg = "Circular reference detected in container"
        return Diagnostic(
            code=DiagnosticCode.CIRCULAR_REFERENCE,
            message=msg,
            hint="Break the cycle before serializing; shared non-ancestor containers are fine",
            value_path=value_path,
        )

    @staticmethod
    def max_depth_exceeded(max_depth: int, value_path: tuple[str, ...]) -> Diagnostic:
        """Container nesting exceeds the configured depth.

        Args:
            max_depth: The maximum allowed depth
            value_path: Key path at which the limit was reached

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum container nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Flatten the structure or raise CodecConfig.max_depth",
            value_path=value_path,
        )

    # =========================================================================
    # INPUT ERRORS (2000-2999)
    # =========================================================================

    @staticmethod
    def input_type_error(type_name: str) -> Diagnostic:
        """Decoder input is not a string.

        Args:
            type_name: Python type name of the input

        Returns:
            Diagnostic for INPUT_TYPE_ERROR
        """
        msg = f"Input must be a string, got '{type_name}'"
        return Diagnostic(
            code=DiagnosticCode.INPUT_TYPE_ERROR,
            message=msg,
            received_type=type_name,
        )

    @staticmethod
    def input_too_short(length: int) -> Diagnostic:
        """Input shorter than the protocol header.

        Args:
            length: Actual input length

        Returns:
            Diagnostic for INPUT_TOO_SHORT
        """
        msg = f"Input too short ({length} characters) to contain a header"
        return Diagnostic(
            code=DiagnosticCode.INPUT_TOO_SHORT,
            message=msg,
            span=SourceSpan(start=0, end=length),
        )

    @staticmethod
    def input_too_large(length: int, max_size: int) -> Diagnostic:
        """Input longer than the configured limit.

        Args:
            length: Actual input length
            max_size: Configured maximum

        Returns:
            Diagnostic for INPUT_TOO_LARGE
        """
        msg = f"Input too large ({length} characters, limit {max_size})"
        return Diagnostic(
            code=DiagnosticCode.INPUT_TOO_LARGE,
            message=msg,
            hint="Raise CodecConfig.max_input_size if the payload is trusted",
        )

    @staticmethod
    def missing_header(found: str) -> Diagnostic:
        """First character is not the header marker.

        Args:
            found: The character found at offset 0

        Returns:
            Diagnostic for MISSING_HEADER
        """
        msg = f"Missing header marker: found {_printable(found)} at offset 0"
        return Diagnostic(
            code=DiagnosticCode.MISSING_HEADER,
            message=msg,
            span=_at(0),
            hint="Input was not produced by serialize() or was truncated at the front",
        )

    @staticmethod
    def unsupported_version(version: str) -> Diagnostic:
        """Header names an unknown protocol version.

        Args:
            version: The version character found at offset 1

        Returns:
            Diagnostic for UNSUPPORTED_VERSION
        """
        msg = f"Unsupported protocol version: {_printable(version)} at offset 1"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_VERSION,
            message=msg,
            span=_at(1),
        )

    # =========================================================================
    # GRAMMAR ERRORS (3000-3999)
    # =========================================================================

    @staticmethod
    def unknown_tag(tag: str, position: int) -> Diagnostic:
        """Tag code is not part of the grammar.

        Args:
            tag: The code character following the marker
            position: Offset of the marker

        Returns:
            Diagnostic for INVALID_TAG
        """
        msg = f"Unknown type tag {_printable(tag)} at offset {position}"
        return Diagnostic(code=DiagnosticCode.INVALID_TAG, message=msg, span=_at(position, 2))

    @staticmethod
    def expected_marker(found: str, position: int) -> Diagnostic:
        """A tag was expected but a payload character was found.

        Args:
            found: The character found
            position: Its offset

        Returns:
            Diagnostic for INVALID_TAG
        """
        msg = f"Expected tag marker, found {_printable(found)} at offset {position}"
        return Diagnostic(code=DiagnosticCode.INVALID_TAG, message=msg, span=_at(position))

    @staticmethod
    def unbalanced_container_end(position: int) -> Diagnostic:
        """Container end tag with no open container.

        Args:
            position: Offset of the tag

        Returns:
            Diagnostic for INVALID_TAG
        """
        msg = f"Container end tag without matching start at offset {position}"
        return Diagnostic(code=DiagnosticCode.INVALID_TAG, message=msg, span=_at(position, 2))

    @staticmethod
    def missing_entry_value(position: int) -> Diagnostic:
        """Container closed between a key and its value.

        Args:
            position: Offset of the end tag

        Returns:
            Diagnostic for INVALID_TAG
        """
        msg = f"Container end tag where an entry value was expected at offset {position}"
        return Diagnostic(code=DiagnosticCode.INVALID_TAG, message=msg, span=_at(position, 2))

    @staticmethod
    def unterminated_float(position: int) -> Diagnostic:
        """Float body not followed by its terminator tag.

        Args:
            position: Offset where the terminator was expected

        Returns:
            Diagnostic for UNTERMINATED_FLOAT
        """
        msg = f"Unterminated float: expected float end tag at offset {position}"
        return Diagnostic(
            code=DiagnosticCode.UNTERMINATED_FLOAT,
            message=msg,
            span=_at(position),
            hint="Input was probably truncated",
        )

    @staticmethod
    def unexpected_end_of_input(
        depth: int, position: int, opened_at: int | None = None
    ) -> Diagnostic:
        """Input ended inside an open container.

        Args:
            depth: Number of containers still open
            position: Offset of the end of input
            opened_at: Offset of the innermost unclosed container tag, if known

        Returns:
            Diagnostic for UNEXPECTED_END_OF_INPUT
        """
        msg = f"Unexpected end of input with {depth} open container(s) at offset {position}"
        hint = "Input was probably truncated"
        if opened_at is not None:
            hint = f"Container opened at offset {opened_at} is never closed. {hint}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_END_OF_INPUT,
            message=msg,
            span=SourceSpan(start=position, end=position),
            hint=hint,
        )

    @staticmethod
    def malformed_escape(found: str | None, position: int) -> Diagnostic:
        """Escape marker followed by an unknown character or end of input.

        Args:
            found: Character following the escape marker, None at end of input
            position: Offset of the escape marker

        Returns:
            Diagnostic for MALFORMED_ESCAPE
        """
        following = "end of input" if found is None else _printable(found)
        msg = f"Malformed escape sequence: marker followed by {following} at offset {position}"
        return Diagnostic(code=DiagnosticCode.MALFORMED_ESCAPE, message=msg, span=_at(position, 2))

    @staticmethod
    def invalid_number(raw: str, position: int) -> Diagnostic:
        """Numeric body could not be parsed.

        Args:
            raw: The raw numeric text (may be empty)
            position: Offset of the numeric body

        Returns:
            Diagnostic for INVALID_NUMBER
        """
        msg = f"Invalid number {raw!r} at offset {position}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_NUMBER,
            message=msg,
            span=SourceSpan(start=position, end=position + len(raw)),
        )

    @staticmethod
    def invalid_decoded_key(kind: str, position: int) -> Diagnostic:
        """Container key production is not a valid key.

        Args:
            kind: Kind of the rejected key production
            position: Offset of the key's tag

        Returns:
            Diagnostic for INVALID_KEY
        """
        msg = f"Invalid container key of kind '{kind}' at offset {position}"
        return Diagnostic(code=DiagnosticCode.INVALID_KEY, message=msg, span=_at(position, 2))

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, position: int) -> Diagnostic:
        """Decoder nesting depth beyond the configured limit.

        Args:
            max_depth: The maximum allowed depth
            position: Offset of the container start tag

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Container nesting depth ({max_depth}) exceeded at offset {position}"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=_at(position, 2),
        )

    # =========================================================================
    # COMPRESSION ERRORS (4000-4999)
    # =========================================================================

    @staticmethod
    def decompression_failed(reason: str) -> Diagnostic:
        """Compressed payload could not be restored.

        Args:
            reason: Underlying error description

        Returns:
            Diagnostic for DECOMPRESSION_FAILED
        """
        msg = f"Decompression failed: {reason}"
        return Diagnostic(
            code=DiagnosticCode.DECOMPRESSION_FAILED,
            message=msg,
            hint="Payload was corrupted in transport or not produced by pack()",
        )

"""Escaping of reserved characters inside Text payloads.

Five characters are reserved: the four control characters U+0001..U+0004
and the tag marker ``^``. Each is replaced by a two-character pair made of
the escape marker U+0001 and a distinguishing character:

    U+0001 -> U+0001 U+0001
    U+0002 -> U+0001 U+0002
    U+0003 -> U+0001 U+0003
    U+0004 -> U+0001 U+0004
    ^      -> U+0001 U+0005

After escaping, a Text payload never contains a raw ``^``, so the next tag
marker unambiguously ends it. Structural tags are never escaped.

Both directions are a single pass over the input.

Python 3.13+. Zero external dependencies.
"""

from caretwire.constants import ESCAPE_MARKER, ESCAPE_TABLE, UNESCAPE_TABLE
from caretwire.diagnostics import ErrorTemplate, MalformedEscapeError

__all__ = ["escape", "needs_escape", "unescape"]

_ESCAPE_TRANSLATION = str.maketrans(ESCAPE_TABLE)


def needs_escape(text: str) -> bool:
    """Return True if text contains any reserved character."""
    return any(reserved in text for reserved in ESCAPE_TABLE)


def escape(text: str) -> str:
    """Replace every reserved character with its escape pair.

    Example:
        >>> escape("a^b")
        'a\\x01\\x05b'
    """
    return text.translate(_ESCAPE_TRANSLATION)


def unescape(text: str, offset: int = 0) -> str:
    """Invert escape().

    Args:
        text: Escaped payload
        offset: Position of text within the enclosing encoded string, added
            to the position reported on failure

    Returns:
        The original payload

    Raises:
        MalformedEscapeError: If an escape marker is followed by a character
            outside U+0001..U+0005 or ends the payload

    Example:
        >>> unescape("a\\x01\\x05b")
        'a^b'
    """
    marker = text.find(ESCAPE_MARKER)
    if marker < 0:
        return text

    parts: list[str] = []
    start = 0
    length = len(text)
    while marker >= 0:
        parts.append(text[start:marker])
        following = text[marker + 1] if marker + 1 < length else None
        raw = UNESCAPE_TABLE.get(following) if following is not None else None
        if raw is None:
            position = offset + marker
            raise MalformedEscapeError(
                ErrorTemplate.malformed_escape(following, position), position=position
            )
        parts.append(raw)
        start = marker + 2
        marker = text.find(ESCAPE_MARKER, start)

    parts.append(text[start:])
    return "".join(parts)

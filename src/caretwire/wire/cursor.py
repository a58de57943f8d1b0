"""Read position over an encoded string.

The decoder never mutates its position: every step produces a new Cursor,
so a loop that forgets to move forward is visible as a repeated offset in
the diagnostics instead of an index silently stuck in place. Offsets count
code points from the start of the encoded text. Encoded text is a single
run of characters to the decoder, so there are no lines or columns.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

__all__ = ["Cursor", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """A (source, pos) pair with scanning helpers.

    ``pos == len(source)`` is the end state; reading ``current`` there
    raises EOFError while ``peek`` answers None.

    Example:
        >>> cursor = Cursor("^1^Z", 0)
        >>> cursor.current
        '^'
        >>> cursor.advance(2).slice_ahead(2)
        '^Z'
        >>> Cursor("^1", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """True once every character has been consumed."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Character under the cursor.

        Raises:
            EOFError: At the end state
        """
        if self.pos >= len(self.source):
            msg = f"Unexpected end of input at offset {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Character ``offset`` places ahead, or None past the end."""
        at = self.pos + offset
        return self.source[at] if at < len(self.source) else None

    def advance(self, count: int = 1) -> "Cursor":
        """Cursor ``count`` places further on, stopping at the end state."""
        return Cursor(self.source, min(len(self.source), self.pos + count))

    def slice_to(self, end_pos: int) -> str:
        """Text between the cursor and end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def slice_ahead(self, n: int) -> str:
        """Up to n characters starting at the cursor."""
        return self.source[self.pos : self.pos + n]

    def find(self, char: str) -> int:
        """Offset of the next char at or after the cursor.

        Returns len(source) when char does not occur again, so the result can
        always be used as a slice bound.

        Example:
            >>> Cursor("ab^c", 0).find("^")
            2
            >>> Cursor("abc", 0).find("^")
            3
        """
        found = self.source.find(char, self.pos)
        return len(self.source) if found < 0 else found

    def skip_while(self, chars: str) -> "Cursor":
        """Cursor past the longest run of characters taken from chars.

        Example:
            >>> Cursor("123^Z", 0).skip_while("0123456789").pos
            3
        """
        end = self.pos
        size = len(self.source)
        while end < size and self.source[end] in chars:
            end += 1
        return Cursor(self.source, end)

    def expect(self, char: str) -> "Cursor | None":
        """Cursor past char when it is next, else None."""
        return self.advance() if self.peek() == char else None


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """A decoded value together with the cursor just after it.

    Example:
        >>> after = Cursor("^N42", 4)
        >>> ParseResult(42, after).cursor.is_eof
        True
    """

    value: T
    cursor: Cursor

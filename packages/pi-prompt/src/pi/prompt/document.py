"""Read-only view of the text being edited and the cursor inside it."""

from __future__ import annotations

from pi.prompt.utils import string_width


class Document:
    """Immutable snapshot of text plus a cursor offset.

    ``cursor_position`` counts code points, not columns; use
    :attr:`display_cursor_position` for the column the cursor sits in.
    """

    __slots__ = ("_text", "_cursor_position")

    def __init__(self, text: str = "", cursor_position: int | None = None) -> None:
        if cursor_position is None:
            cursor_position = len(text)
        if not 0 <= cursor_position <= len(text):
            raise ValueError(
                f"cursor_position {cursor_position} outside text of length {len(text)}"
            )
        self._text = text
        self._cursor_position = cursor_position

    def __repr__(self) -> str:
        return f"Document(text={self._text!r}, cursor_position={self._cursor_position})"

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor_position(self) -> int:
        return self._cursor_position

    @property
    def display_cursor_position(self) -> int:
        return string_width(self.text_before_cursor)

    @property
    def text_before_cursor(self) -> str:
        return self._text[: self._cursor_position]

    @property
    def text_after_cursor(self) -> str:
        return self._text[self._cursor_position :]

    @property
    def current_char(self) -> str:
        """The character under the cursor, or ``""`` at end of text."""
        return self._text[self._cursor_position : self._cursor_position + 1]

    def find_start_of_previous_word(self) -> int:
        """Offset just past the last space before the cursor."""
        return self.text_before_cursor.rfind(" ") + 1

    def get_word_before_cursor(self) -> str:
        return self.text_before_cursor[self.find_start_of_previous_word() :]

    def get_word_before_cursor_until_separator(self, sep: str) -> str:
        """Text between the last character in *sep* and the cursor.

        An empty *sep* falls back to :meth:`get_word_before_cursor`.
        """
        if not sep:
            return self.get_word_before_cursor()
        before = self.text_before_cursor
        start = max(before.rfind(ch) for ch in sep) + 1
        return before[start:]

    def newline_count(self) -> int:
        return self._text.count("\n")

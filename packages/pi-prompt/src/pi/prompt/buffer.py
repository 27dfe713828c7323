"""Mutable text buffer driven by key handlers and read by the renderer."""

from __future__ import annotations

from pi.prompt.document import Document
from pi.prompt.utils import string_width


class Buffer:
    """Working copy of the input line(s) with a clamped cursor."""

    def __init__(self, text: str = "", cursor_position: int | None = None) -> None:
        self._text = text
        self._cursor_position = len(text)
        if cursor_position is not None:
            self.cursor_position = cursor_position

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor_position(self) -> int:
        return self._cursor_position

    @cursor_position.setter
    def cursor_position(self, value: int) -> None:
        self._cursor_position = max(0, min(value, len(self._text)))

    @property
    def display_cursor_position(self) -> int:
        return string_width(self._text[: self._cursor_position])

    def document(self) -> Document:
        return Document(self._text, self._cursor_position)

    def newline_count(self) -> int:
        return self._text.count("\n")

    # -- editing ------------------------------------------------------------

    def set_text(self, text: str) -> None:
        """Replace the whole text; the cursor is kept where it still fits."""
        self._text = text
        self.cursor_position = self._cursor_position

    def insert_text(
        self, text: str, overwrite: bool = False, move_cursor: bool = True
    ) -> None:
        before = self._text[: self._cursor_position]
        after = self._text[self._cursor_position :]
        if overwrite:
            after = after[len(text) :]
        self._text = before + text + after
        if move_cursor:
            self._cursor_position += len(text)

    def new_line(self) -> None:
        self.insert_text("\n")

    def delete_before_cursor(self, count: int = 1) -> str:
        """Delete up to *count* characters left of the cursor and return them."""
        if count <= 0 or self._cursor_position == 0:
            return ""
        start = max(0, self._cursor_position - count)
        deleted = self._text[start : self._cursor_position]
        self._text = self._text[:start] + self._text[self._cursor_position :]
        self._cursor_position = start
        return deleted

    def delete(self, count: int = 1) -> str:
        """Delete up to *count* characters under/after the cursor and return them."""
        if count <= 0:
            return ""
        end = self._cursor_position + count
        deleted = self._text[self._cursor_position : end]
        self._text = self._text[: self._cursor_position] + self._text[end:]
        return deleted

    # -- cursor movement ----------------------------------------------------

    def cursor_left(self, count: int = 1) -> None:
        self.cursor_position = self._cursor_position - count

    def cursor_right(self, count: int = 1) -> None:
        self.cursor_position = self._cursor_position + count

"""Completion state and suggestion-column formatting for the popup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from pi.prompt.document import Document
from pi.prompt.utils import (
    delete_break_line_characters,
    string_width,
    truncate_to_width,
)

SHORTEN_SUFFIX = "..."
LEFT_PREFIX = " "
LEFT_SUFFIX = " "
RIGHT_PREFIX = " "
RIGHT_SUFFIX = " "

LEFT_MARGIN = string_width(LEFT_PREFIX + LEFT_SUFFIX)
RIGHT_MARGIN = string_width(RIGHT_PREFIX + RIGHT_SUFFIX)
COMPLETION_MARGIN = LEFT_MARGIN + RIGHT_MARGIN


@dataclass
class Suggest:
    text: str
    description: str = ""


Completer = Callable[[Document], list[Suggest]]


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _format_texts(
    texts: list[str], max_width: int, prefix: str, suffix: str
) -> tuple[list[str], int]:
    """Pad (or shorten) *texts* to one common column width.

    Returns the new strings and the column width including prefix and
    suffix.  A column that is empty, or that cannot fit even a shortened
    entry, comes back as empty strings with width 0.
    """
    empty = [""] * len(texts)
    len_prefix = string_width(prefix)
    len_suffix = string_width(suffix)
    min_width = len_prefix + len_suffix + string_width(SHORTEN_SUFFIX)

    texts = [delete_break_line_characters(t) for t in texts]
    width = max((string_width(t) for t in texts), default=0)
    if width == 0 or min_width >= max_width:
        return empty, 0
    if len_prefix + width + len_suffix > max_width:
        width = max_width - len_prefix - len_suffix

    formatted: list[str] = []
    for t in texts:
        if string_width(t) > width:
            t = truncate_to_width(t, width, SHORTEN_SUFFIX)
        # Truncating around a wide character can leave one column short
        formatted.append(prefix + t + " " * (width - string_width(t)) + suffix)
    return formatted, len_prefix + width + len_suffix


def format_suggestions(
    suggestions: list[Suggest], max_width: int
) -> tuple[list[Suggest], int]:
    """Lay suggestions out as two fixed-width columns within *max_width*.

    Returns the formatted rows and their total display width.
    """
    left, left_width = _format_texts(
        [s.text for s in suggestions], max_width, LEFT_PREFIX, LEFT_SUFFIX
    )
    if left_width == 0:
        return [], 0
    right, right_width = _format_texts(
        [s.description for s in suggestions],
        max_width - left_width,
        RIGHT_PREFIX,
        RIGHT_SUFFIX,
    )
    rows = [
        Suggest(text=text, description=description)
        for text, description in zip(left, right)
    ]
    return rows, left_width + right_width


# ---------------------------------------------------------------------------
# CompletionManager
# ---------------------------------------------------------------------------


class CompletionManager:
    """Tracks the current suggestions, the selection, and the scroll window.

    ``selected`` is an absolute index into the suggestions, ``-1`` when
    nothing is selected.  ``vertical_scroll`` is the index of the first
    suggestion shown in the popup.
    """

    def __init__(
        self,
        completer: Completer,
        max_visible: int = 6,
        word_separator: str = "",
    ) -> None:
        self.completer = completer
        self.max_visible = max_visible
        self.word_separator = word_separator
        self.selected = -1
        self.vertical_scroll = 0
        self._suggestions: list[Suggest] = []

    def get_suggestions(self) -> list[Suggest]:
        return self._suggestions

    def get_selected_suggestion(self) -> Suggest | None:
        if self.selected < 0 or self.selected >= len(self._suggestions):
            return None
        return self._suggestions[self.selected]

    def completing(self) -> bool:
        return self.selected != -1

    def update(self, document: Document) -> None:
        """Ask the completer for suggestions matching *document*."""
        self._suggestions = list(self.completer(document))

    def reset(self) -> None:
        self.selected = -1
        self.vertical_scroll = 0
        self.update(Document())

    def previous(self) -> None:
        if self.vertical_scroll == self.selected and self.selected > 0:
            self.vertical_scroll -= 1
        self.selected -= 1
        self._normalize()

    def next(self) -> None:
        if self.vertical_scroll + self.max_visible - 1 == self.selected:
            self.vertical_scroll += 1
        self.selected += 1
        self._normalize()

    def _normalize(self) -> None:
        visible = min(self.max_visible, len(self._suggestions))
        if self.selected >= len(self._suggestions):
            self.reset()
        elif self.selected < -1:
            # Moving up from "nothing selected" wraps to the last entry
            self.selected = len(self._suggestions) - 1
            self.vertical_scroll = len(self._suggestions) - visible

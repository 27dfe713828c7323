"""Incremental prompt renderer.

Brings the terminal in line with the editor state once per keystroke
without clearing the screen: the previous frame is erased from its first
row down, the prompt and input are redrawn, and the completion popup is
painted below the cursor.  Every public operation ends with exactly one
``flush`` of the writer, so each cycle reaches the terminal as one frame.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable

import grapheme

from pi.prompt.buffer import Buffer
from pi.prompt.colors import Color, DisplayAttribute
from pi.prompt.completion import (
    COMPLETION_MARGIN,
    CompletionManager,
    format_suggestions,
)
from pi.prompt.document import Document
from pi.prompt.layout import (
    end_position,
    is_scroll_thumb,
    needs_forced_wrap,
    position_of,
    row_count,
    scrollbar_thumb,
)
from pi.prompt.output import ConsoleWriter
from pi.prompt.terminal import WinSize
from pi.prompt.utils import string_width

logger = logging.getLogger(__name__)

WINDOW_TOO_SMALL_MESSAGE = "Your console window is too small..."

LivePrefix = Callable[[], tuple[str, bool]]
BreakLineCallback = Callable[[Document], None]


@dataclass
class RenderTheme:
    """Colors used for each part of the prompt and the completion popup."""

    prefix_text_color: Color = Color.BLUE
    prefix_bg_color: Color = Color.DEFAULT
    input_text_color: Color = Color.DEFAULT
    input_bg_color: Color = Color.DEFAULT
    preview_suggestion_text_color: Color = Color.GREEN
    preview_suggestion_bg_color: Color = Color.DEFAULT
    suggestion_text_color: Color = Color.WHITE
    suggestion_bg_color: Color = Color.CYAN
    selected_suggestion_text_color: Color = Color.BLACK
    selected_suggestion_bg_color: Color = Color.TURQUOISE
    description_text_color: Color = Color.BLACK
    description_bg_color: Color = Color.TURQUOISE
    selected_description_text_color: Color = Color.WHITE
    selected_description_bg_color: Color = Color.CYAN
    scrollbar_thumb_color: Color = Color.DARK_GRAY
    scrollbar_bg_color: Color = Color.CYAN


@dataclass
class RenderState:
    """Mutable state carried from one render cycle to the next.

    ``previous_cursor`` is a column offset from the start of the last
    rendered prompt, not a screen coordinate: it is mapped to a row and
    column with the *current* width every time it is used.  One full row
    is taken off it for every newline in the prompt and input, and
    :meth:`Render._move_for_render` adds those rows back, so it is
    negative when the cursor was left on a line above the last one.
    """

    rows: int = 0
    cols: int = 0
    previous_cursor: int = 0


class Render:
    """Draws a prompt, its input and a completion popup through a writer."""

    def __init__(
        self,
        out: ConsoleWriter,
        prefix: str = "> ",
        *,
        live_prefix: LivePrefix | None = None,
        break_line_callback: BreakLineCallback | None = None,
        title: str = "",
        theme: RenderTheme | None = None,
        platform_wraps: bool | None = None,
    ) -> None:
        self.out = out
        self.prefix = prefix
        self.live_prefix = live_prefix
        self.break_line_callback = break_line_callback
        self.title = title
        self.theme = theme if theme is not None else RenderTheme()
        self.state = RenderState()

        # Terminals that move to the next row as soon as the last column is
        # written need no forced newline at the width boundary
        self.platform_wraps: bool = (
            platform_wraps
            if platform_wraps is not None
            else os.environ.get("PI_PROMPT_PLATFORM_WRAPS") == "1"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @contextmanager
    def _frame(self) -> Iterator[None]:
        """Flush whatever the body wrote, however it exits."""
        try:
            yield
        finally:
            self.out.flush()

    def setup(self) -> None:
        with self._frame():
            if self.title:
                self.out.set_title(self.title)

    def tear_down(self) -> None:
        with self._frame():
            self.out.clear_title()
            self.out.erase_down()

    def clear_screen(self) -> None:
        with self._frame():
            self.out.erase_screen()
            self.out.cursor_go_to(0, 0)

    def update_win_size(self, size: WinSize) -> None:
        self.state.rows = size.rows
        self.state.cols = size.cols

    # ------------------------------------------------------------------
    # Prefix
    # ------------------------------------------------------------------

    def get_current_prefix(self) -> str:
        """Return the live prefix when the callback supplies one, else the static prompt."""
        if self.live_prefix is not None:
            prefix, use_live = self.live_prefix()
            if use_live:
                return prefix
        return self.prefix

    def _render_prefix(self) -> None:
        self.out.set_color(
            self.theme.prefix_text_color, self.theme.prefix_bg_color, False
        )
        self.out.write(self.get_current_prefix())
        self.out.set_color(Color.DEFAULT, Color.DEFAULT, False)

    # ------------------------------------------------------------------
    # Cursor motion
    # ------------------------------------------------------------------

    def _backward(self, from_pos: int, n: int) -> int:
        """Move the cursor *n* columns back from *from_pos*, across wrapped rows."""
        return self._move(from_pos, from_pos - n)

    def _move(self, from_pos: int, to_pos: int) -> int:
        """Move the cursor between two column offsets of the current input."""
        cols = self.state.cols
        from_x, from_y = position_of(from_pos, "", cols)
        to_x, to_y = position_of(to_pos, "", cols)
        logger.debug(
            "move %d -> %d: (%d,%d) -> (%d,%d)",
            from_pos, to_pos, from_x, from_y, to_x, to_y,
        )
        self.out.cursor_up(from_y - to_y)
        self.out.cursor_backward(from_x - to_x)
        return to_pos

    def _move_for_render(self, from_pos: int, to_pos: int, text: str) -> int:
        """Like :meth:`_move`, but *from_pos* is measured on the last row of *text*.

        Each newline in the previously rendered prompt plus *text* adds one
        full row above the offset.
        """
        text = self.get_current_prefix() + text
        cols = self.state.cols
        line_count = text.count("\n")

        from_x, from_y = position_of(cols * line_count + from_pos, "", cols)
        to_x, to_y = position_of(to_pos, "", cols)
        logger.debug(
            "move_for_render %d -> %d over %d line(s): (%d,%d) -> (%d,%d)",
            from_pos, to_pos, line_count, from_x, from_y, to_x, to_y,
        )
        self.out.cursor_up(from_y - to_y)
        self.out.cursor_backward(from_x - to_x)
        return to_pos

    def _line_wrap(self, cursor: int) -> None:
        if needs_forced_wrap(cursor, self.state.cols, self.platform_wraps):
            self.out.write_raw("\n")

    def _offset_after(self, text: str) -> int:
        """Raw offset (``row * cols + col``) reached after writing *text* from the origin.

        Rows come from the line structure of *text*, so each newline starts
        a fresh row however short the line before it was.
        """
        col, row = end_position(text, self.state.cols)
        return row * self.state.cols + col

    def _clear(self, cursor: int, text: str) -> None:
        """Erase from the first row of the input, however many rows it wrapped to."""
        self._move_for_render(cursor, 0, text)
        self.out.erase_line()
        self.out.erase_down()

    # ------------------------------------------------------------------
    # Render cycle
    # ------------------------------------------------------------------

    def _render_window_too_small(self) -> None:
        self.out.cursor_go_to(0, 0)
        self.out.erase_screen()
        self.out.set_color(Color.DARK_RED, Color.WHITE, False)
        self.out.write(WINDOW_TOO_SMALL_MESSAGE)

    def render(
        self,
        buffer: Buffer,
        previous_text: str,
        completion: CompletionManager,
    ) -> None:
        """Redraw the prompt for *buffer*, replacing the frame drawn for *previous_text*."""
        with self._frame():
            # A freshly allocated pty can report 0x0 until the first resize
            if self.state.cols == 0:
                return
            self._render_frame(buffer, previous_text, completion)

    def _render_frame(
        self,
        buffer: Buffer,
        previous_text: str,
        completion: CompletionManager,
    ) -> None:
        theme = self.theme
        cols = self.state.cols
        text = buffer.text
        logger.debug(
            "render: %dx%d previous_cursor=%d",
            cols, self.state.rows, self.state.previous_cursor,
        )

        self._move_for_render(self.state.previous_cursor, 0, previous_text)

        prefix = self.get_current_prefix()
        height = row_count(prefix + text, cols) + completion.max_visible
        if height > self.state.rows or COMPLETION_MARGIN > cols:
            logger.debug("window too small: need %d rows", height)
            self._render_window_too_small()
            return

        self.out.hide_cursor()
        self.out.erase_line()
        self.out.erase_down()

        self._render_prefix()

        document = buffer.document()
        multiline = buffer.newline_count() > 0
        if multiline:
            shown = prefix + self._render_multiline(document)
        else:
            self.out.write(text)
            shown = prefix + text

        end_col, _ = end_position(shown, cols)
        self._line_wrap(end_col)
        self.out.set_color(Color.DEFAULT, Color.DEFAULT, False)

        cursor = self._move(
            self._offset_after(shown),
            self._offset_after(prefix + document.text_before_cursor),
        )

        self._render_completion(buffer, completion)

        suggestion = completion.get_selected_suggestion()
        if suggestion is not None:
            word = document.get_word_before_cursor_until_separator(
                completion.word_separator
            )
            before = document.text_before_cursor
            head = prefix + before[: len(before) - len(word)]
            cursor = self._move(cursor, self._offset_after(head))

            self.out.set_color(
                theme.preview_suggestion_text_color,
                theme.preview_suggestion_bg_color,
                False,
            )
            self.out.write(suggestion.text)
            self.out.set_color(Color.DEFAULT, Color.DEFAULT, False)

            rest = document.text_after_cursor
            self.out.write(rest)
            shown = head + suggestion.text + rest
            end_col, _ = end_position(shown, cols)
            self._line_wrap(end_col)

            cursor = self._move(
                self._offset_after(shown), self._offset_after(head + suggestion.text)
            )

        self.state.previous_cursor = cursor - cols * (prefix + text).count("\n")

        # The multi-line view draws its own cursor cell
        if not multiline:
            self.out.show_cursor()

    def _render_multiline(self, document: Document) -> str:
        """Write the input with the cell under the cursor in reverse video.

        Returns the text as written, cursor cell included.
        """
        before = document.text_before_cursor
        after = document.text_after_cursor

        if not after:
            cell = " "
        else:
            cell = next(grapheme.graphemes(after))
            after = after[len(cell) :]
            if cell == "\n":
                cell = " \n"

        theme = self.theme
        self.out.set_color(theme.input_text_color, theme.input_bg_color, False)
        self.out.write(before)
        self.out.set_display_attributes(
            theme.input_text_color, theme.input_bg_color, DisplayAttribute.REVERSE
        )
        self.out.write(cell)
        self.out.set_color(theme.input_text_color, theme.input_bg_color, False)
        self.out.write(after)
        return before + cell + after

    # ------------------------------------------------------------------
    # Completion popup
    # ------------------------------------------------------------------

    def _prepare_area(self, lines: int) -> None:
        """Scroll the screen so *lines* rows exist below the cursor."""
        for _ in range(lines):
            self.out.scroll_down()
        for _ in range(lines):
            self.out.scroll_up()

    def _cursor_column(self, text: str) -> int:
        """Screen column reached after writing *text* from column 0."""
        return self._offset_after(text) % self.state.cols

    def _render_completion(self, buffer: Buffer, completion: CompletionManager) -> None:
        """Draw the suggestion popup under the cursor and put the cursor back."""
        suggestions = completion.get_suggestions()
        if not suggestions:
            return

        theme = self.theme
        cols = self.state.cols
        prefix = self.get_current_prefix()

        # One column is kept for the scrollbar
        formatted, width = format_suggestions(
            suggestions, cols - string_width(prefix) - 1
        )
        if not formatted:
            return
        width += 1

        window_height = min(len(formatted), completion.max_visible, self.state.rows - 1)
        scroll = completion.vertical_scroll
        visible = formatted[scroll : scroll + window_height]
        window_height = len(visible)
        if window_height == 0:
            return

        self._prepare_area(window_height)

        x = self._cursor_column(prefix + buffer.document().text_before_cursor)
        cursor = x
        overflow = x + width - cols
        if overflow >= 0:
            cursor = self._backward(cursor, overflow)

        thumb_top, thumb_height = scrollbar_thumb(
            window_height, len(suggestions), scroll
        )
        selected = completion.selected - scroll

        self.out.set_color(Color.WHITE, Color.CYAN, False)
        for i, row in enumerate(visible):
            self.out.cursor_down(1)

            if i == selected:
                self.out.set_color(
                    theme.selected_suggestion_text_color,
                    theme.selected_suggestion_bg_color,
                    True,
                )
            else:
                self.out.set_color(
                    theme.suggestion_text_color, theme.suggestion_bg_color, False
                )
            self.out.write(row.text)

            if i == selected:
                self.out.set_color(
                    theme.selected_description_text_color,
                    theme.selected_description_bg_color,
                    False,
                )
            else:
                self.out.set_color(
                    theme.description_text_color, theme.description_bg_color, False
                )
            self.out.write(row.description)

            if is_scroll_thumb(i, thumb_top, thumb_height):
                self.out.set_color(Color.DEFAULT, theme.scrollbar_thumb_color, False)
            else:
                self.out.set_color(Color.DEFAULT, theme.scrollbar_bg_color, False)
            self.out.write(" ")
            self.out.set_color(Color.DEFAULT, Color.DEFAULT, False)

            self._line_wrap(cursor + width)
            self._backward(cursor + width, width)

        if overflow >= 0:
            self.out.cursor_forward(overflow)

        self.out.cursor_up(window_height)
        self.out.set_color(Color.DEFAULT, Color.DEFAULT, False)

    # ------------------------------------------------------------------
    # Line commit
    # ------------------------------------------------------------------

    def break_line(self, buffer: Buffer) -> None:
        """Commit the input as a plain terminal line and start a fresh prompt."""
        document = buffer.document()
        with self._frame():
            if self.state.cols:
                before = document.text_before_cursor
                head = self.get_current_prefix() + before
                cursor = self._offset_after(head) - self.state.cols * head.count("\n")
                self._clear(cursor, before)
            self._render_prefix()
            self.out.set_color(
                self.theme.input_text_color, self.theme.input_bg_color, False
            )
            self.out.write(document.text + "\n")
            self.out.set_color(Color.DEFAULT, Color.DEFAULT, False)

        if self.break_line_callback is not None:
            self.break_line_callback(document)

        self.state.previous_cursor = 0

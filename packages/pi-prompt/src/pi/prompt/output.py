"""Terminal output sink for the prompt renderer.

Provides a ``ConsoleWriter`` protocol and a ``VT100Writer`` that buffers
ANSI escape sequences in memory until :meth:`flush`.  ``PosixWriter``
flushes that buffer to a file descriptor as one batch, so every render
cycle reaches the terminal as a single frame.
"""

from __future__ import annotations

import os
import sys
from typing import Protocol

from pi.prompt.colors import BACKGROUND_SGR, FOREGROUND_SGR, Color, DisplayAttribute

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ESC = "\x1b"

_ERASE_SCREEN = "\x1b[2J"
_ERASE_UP = "\x1b[1J"
_ERASE_DOWN = "\x1b[J"
_ERASE_START_OF_LINE = "\x1b[1K"
_ERASE_END_OF_LINE = "\x1b[K"
_ERASE_LINE = "\x1b[2K\r"

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?12l\x1b[?25h"
_CURSOR_HOME = "\x1b[H"
_CURSOR_GO_TO_FMT = "\x1b[{};{}H"
_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_FORWARD_FMT = "\x1b[{}C"
_CURSOR_BACKWARD_FMT = "\x1b[{}D"

_ASK_FOR_CPR = "\x1b[6n"
_SAVE_CURSOR = "\x1b[s"
_UNSAVE_CURSOR = "\x1b[u"

_SCROLL_DOWN = "\x1bD"
_SCROLL_UP = "\x1bM"

_SET_TITLE_FMT = "\x1b]2;{}\x07"
_CLEAR_TITLE = "\x1b]2;\x07"


# ---------------------------------------------------------------------------
# ConsoleWriter protocol
# ---------------------------------------------------------------------------


class ConsoleWriter(Protocol):
    """Interface the renderer draws through.

    Moves by zero cells are no-ops.  ``flush`` sends everything buffered
    since the previous flush and raises ``OSError`` if the stream is broken.
    """

    def write_raw(self, data: str) -> None: ...

    def write(self, data: str) -> None: ...

    def write_str(self, data: str) -> None: ...

    def flush(self) -> None: ...

    def erase_screen(self) -> None: ...

    def erase_up(self) -> None: ...

    def erase_down(self) -> None: ...

    def erase_start_of_line(self) -> None: ...

    def erase_end_of_line(self) -> None: ...

    def erase_line(self) -> None: ...

    def show_cursor(self) -> None: ...

    def hide_cursor(self) -> None: ...

    def cursor_go_to(self, row: int, col: int) -> None: ...

    def cursor_up(self, n: int) -> None: ...

    def cursor_down(self, n: int) -> None: ...

    def cursor_forward(self, n: int) -> None: ...

    def cursor_backward(self, n: int) -> None: ...

    def ask_for_cpr(self) -> None: ...

    def save_cursor(self) -> None: ...

    def unsave_cursor(self) -> None: ...

    def scroll_down(self) -> None: ...

    def scroll_up(self) -> None: ...

    def set_title(self, title: str) -> None: ...

    def clear_title(self) -> None: ...

    def set_color(self, fg: Color, bg: Color, bold: bool) -> None: ...

    def set_display_attributes(
        self, fg: Color, bg: Color, *attrs: DisplayAttribute
    ) -> None: ...


# ---------------------------------------------------------------------------
# VT100Writer
# ---------------------------------------------------------------------------


class VT100Writer:
    """Buffers VT100 sequences; subclasses decide where ``flush`` sends them."""

    def __init__(self) -> None:
        self._buffer: list[str] = []

    @property
    def buffered(self) -> str:
        """Everything written since the last flush."""
        return "".join(self._buffer)

    # -- writing ------------------------------------------------------------

    def write_raw(self, data: str) -> None:
        """Append *data* verbatim, escape sequences included."""
        self._buffer.append(data)

    def write(self, data: str) -> None:
        """Append user text with ESC replaced so it cannot act as a control code."""
        self.write_raw(data.replace(_ESC, "?"))

    def write_str(self, data: str) -> None:
        self.write(data)

    def flush(self) -> None:
        """Drop the buffered frame.  Overridden by writers with a real sink."""
        self._buffer.clear()

    def _take(self) -> str:
        data = "".join(self._buffer)
        self._buffer.clear()
        return data

    # -- erasing ------------------------------------------------------------

    def erase_screen(self) -> None:
        self.write_raw(_ERASE_SCREEN)

    def erase_up(self) -> None:
        self.write_raw(_ERASE_UP)

    def erase_down(self) -> None:
        self.write_raw(_ERASE_DOWN)

    def erase_start_of_line(self) -> None:
        self.write_raw(_ERASE_START_OF_LINE)

    def erase_end_of_line(self) -> None:
        self.write_raw(_ERASE_END_OF_LINE)

    def erase_line(self) -> None:
        """Clear the whole current row and return to its first column."""
        self.write_raw(_ERASE_LINE)

    # -- cursor -------------------------------------------------------------

    def show_cursor(self) -> None:
        self.write_raw(_SHOW_CURSOR)

    def hide_cursor(self) -> None:
        self.write_raw(_HIDE_CURSOR)

    def cursor_go_to(self, row: int, col: int) -> None:
        if row == 0 and col == 0:
            self.write_raw(_CURSOR_HOME)
            return
        self.write_raw(_CURSOR_GO_TO_FMT.format(row, col))

    def cursor_up(self, n: int) -> None:
        if n < 0:
            self.cursor_down(-n)
        elif n > 0:
            self.write_raw(_CURSOR_UP_FMT.format(n))

    def cursor_down(self, n: int) -> None:
        if n < 0:
            self.cursor_up(-n)
        elif n > 0:
            self.write_raw(_CURSOR_DOWN_FMT.format(n))

    def cursor_forward(self, n: int) -> None:
        if n < 0:
            self.cursor_backward(-n)
        elif n > 0:
            self.write_raw(_CURSOR_FORWARD_FMT.format(n))

    def cursor_backward(self, n: int) -> None:
        if n < 0:
            self.cursor_forward(-n)
        elif n > 0:
            self.write_raw(_CURSOR_BACKWARD_FMT.format(n))

    def ask_for_cpr(self) -> None:
        self.write_raw(_ASK_FOR_CPR)

    def save_cursor(self) -> None:
        self.write_raw(_SAVE_CURSOR)

    def unsave_cursor(self) -> None:
        self.write_raw(_UNSAVE_CURSOR)

    # -- scrolling ----------------------------------------------------------

    def scroll_down(self) -> None:
        self.write_raw(_SCROLL_DOWN)

    def scroll_up(self) -> None:
        self.write_raw(_SCROLL_UP)

    # -- title --------------------------------------------------------------

    def set_title(self, title: str) -> None:
        title = title.replace("\x13", "").replace("\x07", "")
        self.write_raw(_SET_TITLE_FMT.format(title))

    def clear_title(self) -> None:
        self.write_raw(_CLEAR_TITLE)

    # -- colors -------------------------------------------------------------

    def set_color(self, fg: Color, bg: Color, bold: bool) -> None:
        # RESET rather than DEFAULT_FONT: some terminals ignore SGR 10
        if bold:
            self.set_display_attributes(fg, bg, DisplayAttribute.BOLD)
        else:
            self.set_display_attributes(fg, bg, DisplayAttribute.RESET)

    def set_display_attributes(
        self, fg: Color, bg: Color, *attrs: DisplayAttribute
    ) -> None:
        params = [str(int(attr)) for attr in attrs]
        params.append(FOREGROUND_SGR.get(fg, FOREGROUND_SGR[Color.DEFAULT]))
        params.append(BACKGROUND_SGR.get(bg, BACKGROUND_SGR[Color.DEFAULT]))
        self.write_raw(f"\x1b[{';'.join(params)}m")


# ---------------------------------------------------------------------------
# PosixWriter
# ---------------------------------------------------------------------------


class PosixWriter(VT100Writer):
    """Writer that flushes each buffered frame to a file descriptor.

    Write errors are not caught: a terminal that stopped accepting output
    cannot be rendered to, so the caller has to see the ``OSError``.
    """

    def __init__(self, fd: int | None = None) -> None:
        super().__init__()
        self._fd = fd if fd is not None else sys.stdout.fileno()
        self._write_log_path: str = os.environ.get("PI_PROMPT_WRITE_LOG", "")

    def flush(self) -> None:
        data = self._take()
        if not data:
            return

        payload = data.encode("utf-8")
        while payload:
            written = os.write(self._fd, payload)
            payload = payload[written:]

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                pass

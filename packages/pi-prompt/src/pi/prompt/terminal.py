"""Window-size queries and SIGWINCH-based resize notification."""

from __future__ import annotations

import os
import signal
import sys
from dataclasses import dataclass
from typing import Callable

_DEFAULT_ROWS = 24
_DEFAULT_COLS = 80


@dataclass(frozen=True)
class WinSize:
    rows: int
    cols: int


def get_win_size(fd: int | None = None) -> WinSize:
    """Return the size of the terminal behind *fd* (stdout by default).

    A descriptor that is not a terminal reports 24x80.  A freshly
    allocated pseudo-terminal may legitimately report 0 columns.
    """
    if fd is None:
        fd = sys.stdout.fileno()
    try:
        size = os.get_terminal_size(fd)
    except (ValueError, OSError):
        return WinSize(rows=_DEFAULT_ROWS, cols=_DEFAULT_COLS)
    return WinSize(rows=size.lines, cols=size.columns)


def watch_win_size(
    on_resize: Callable[[WinSize], None],
    fd: int | None = None,
) -> Callable[[], None]:
    """Call *on_resize* with the new size whenever the terminal is resized.

    Returns a function that reinstates the previous SIGWINCH handler.
    """
    previous = signal.getsignal(signal.SIGWINCH) or signal.SIG_DFL

    def _on_sigwinch(signum: int, frame: object) -> None:
        on_resize(get_win_size(fd))

    signal.signal(signal.SIGWINCH, _on_sigwinch)

    def _restore() -> None:
        signal.signal(signal.SIGWINCH, previous)

    return _restore

"""Mapping between cursor offsets and screen coordinates.

Offsets here are display columns counted from the start of the rendered
text (prompt included), not indices into a Python string.  A newline is a
hard break; a line wider than the terminal is cut into width-sized rows.
"""

from __future__ import annotations

from dataclasses import dataclass

from pi.prompt.utils import string_width


@dataclass(frozen=True)
class LayoutBlock:
    """One screen row of rendered text, as an inclusive offset range.

    A row that ends a logical line includes one extra offset for its
    newline.
    """

    start: int
    end: int


def _check_width(width: int) -> None:
    if width < 1:
        raise ValueError(f"terminal width must be positive, got {width}")


def layout_blocks(text: str, width: int) -> list[LayoutBlock]:
    """Split *text* into screen rows for a terminal *width* columns wide.

    Blocks are contiguous: each one starts right after the previous end.
    They are rebuilt on every call since *text* changes between calls.
    """
    _check_width(width)

    blocks: list[LayoutBlock] = []
    start = 0
    for line in text.split("\n"):
        block = LayoutBlock(start, start + string_width(line))
        while block.end - block.start > width:
            blocks.append(LayoutBlock(block.start, block.start + width - 1))
            block = LayoutBlock(block.start + width, block.end)
        blocks.append(block)
        start = block.end + 1
    return blocks


def position_of(offset: int, text: str, width: int) -> tuple[int, int]:
    """Return the ``(col, row)`` of *offset* within *text*.

    With an empty *text* the offset is taken as a raw column count and
    simply divided by *width*.  Otherwise the offset must lie strictly
    inside a block: offsets equal to a block's start or end match no
    block and give ``(0, 0)``.
    """
    _check_width(width)

    if not text:
        row, col = divmod(offset, width)
        return col, row

    for row, block in enumerate(layout_blocks(text, width)):
        if block.start < offset < block.end:
            return offset - block.start, row
    return 0, 0


def row_count(text: str, width: int) -> int:
    """Number of screen rows *text* occupies at *width* columns."""
    return len(layout_blocks(text, width))


def end_position(text: str, width: int) -> tuple[int, int]:
    """Return the ``(col, row)`` the cursor reaches after writing *text*.

    ``col`` equals *width* when the last row is exactly full: the cursor
    is parked on that row until the terminal wraps it.
    """
    blocks = layout_blocks(text, width)
    last = blocks[-1]
    return last.end - last.start, len(blocks) - 1


def needs_forced_wrap(cursor_column: int, width: int, platform_wraps: bool) -> bool:
    """Whether a newline must be written after text ending at *cursor_column*.

    A VT100 terminal that has just filled the last column leaves the cursor
    on that column until the next character arrives.  Writing ``\\n`` puts
    it on the next row, where the motion arithmetic expects it.  Terminals
    that wrap eagerly (``platform_wraps``) need no help.
    """
    _check_width(width)
    return not platform_wraps and cursor_column > 0 and cursor_column % width == 0


# ---------------------------------------------------------------------------
# Scrollbar geometry
# ---------------------------------------------------------------------------


def _clamp(high: float, low: float, x: float) -> float:
    if high < x:
        return high
    if x < low:
        return low
    return x


def scrollbar_thumb(
    window_height: int, total: int, scroll_offset: int
) -> tuple[int, int]:
    """Return ``(top, height)`` of the scrollbar thumb in popup rows."""
    if total <= 0:
        raise ValueError(f"total suggestion count must be positive, got {total}")
    fraction_visible = window_height / total
    fraction_above = scroll_offset / total
    height = int(_clamp(window_height, 1, window_height * fraction_visible))
    top = int(window_height * fraction_above)
    return top, height


def is_scroll_thumb(row: int, top: int, height: int) -> bool:
    return top <= row <= top + height

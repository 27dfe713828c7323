"""Display-width helpers for prompt text.

Every column computation in the renderer goes through :func:`string_width`,
so wide (CJK) characters and emoji clusters occupy two cells exactly as the
terminal draws them.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def rune_width(g: str) -> int:
    """Return the number of columns a single grapheme cluster occupies.

    Control characters (``\\n`` included) and combining marks take no
    space; emoji presentation sequences take two.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def string_width(text: str) -> int:
    """Return the terminal display width of *text*."""
    if not text:
        return 0

    # Printable ASCII is one column per character
    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(rune_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


def truncate_to_width(text: str, max_width: int, tail: str = "...") -> str:
    """Cut *text* so that it, plus *tail*, fits in *max_width* columns.

    Text that already fits is returned unchanged (without the tail).
    """
    if string_width(text) <= max_width:
        return text

    budget = max_width - string_width(tail)
    width = 0
    kept: list[str] = []
    for g in grapheme.graphemes(text):
        w = rune_width(g)
        if width + w > budget:
            break
        width += w
        kept.append(g)
    return "".join(kept) + tail


def delete_break_line_characters(text: str) -> str:
    """Strip carriage returns and line feeds from *text*."""
    return text.replace("\n", "").replace("\r", "")

"""Color and display-attribute vocabulary shared by the writer and renderer."""

from __future__ import annotations

from enum import IntEnum


class Color(IntEnum):
    """The sixteen standard terminal colors plus the terminal default."""

    DEFAULT = 0
    # Low intensity
    BLACK = 1
    DARK_RED = 2
    DARK_GREEN = 3
    BROWN = 4
    DARK_BLUE = 5
    PURPLE = 6
    CYAN = 7
    LIGHT_GRAY = 8
    # High intensity
    DARK_GRAY = 9
    RED = 10
    GREEN = 11
    YELLOW = 12
    BLUE = 13
    FUCHSIA = 14
    TURQUOISE = 15
    WHITE = 16


class DisplayAttribute(IntEnum):
    """SGR display attributes; the value is the SGR parameter itself."""

    RESET = 0
    BOLD = 1
    LOW_INTENSITY = 2
    ITALIC = 3
    UNDERLINE = 4
    BLINK = 5
    RAPID_BLINK = 6
    REVERSE = 7
    INVISIBLE = 8
    CROSSED_OUT = 9
    DEFAULT_FONT = 10


FOREGROUND_SGR: dict[Color, str] = {
    Color.DEFAULT: "39",
    Color.BLACK: "30",
    Color.DARK_RED: "31",
    Color.DARK_GREEN: "32",
    Color.BROWN: "33",
    Color.DARK_BLUE: "34",
    Color.PURPLE: "35",
    Color.CYAN: "36",
    Color.LIGHT_GRAY: "37",
    Color.DARK_GRAY: "90",
    Color.RED: "91",
    Color.GREEN: "92",
    Color.YELLOW: "93",
    Color.BLUE: "94",
    Color.FUCHSIA: "95",
    Color.TURQUOISE: "96",
    Color.WHITE: "97",
}

BACKGROUND_SGR: dict[Color, str] = {
    Color.DEFAULT: "49",
    Color.BLACK: "40",
    Color.DARK_RED: "41",
    Color.DARK_GREEN: "42",
    Color.BROWN: "43",
    Color.DARK_BLUE: "44",
    Color.PURPLE: "45",
    Color.CYAN: "46",
    Color.LIGHT_GRAY: "47",
    Color.DARK_GRAY: "100",
    Color.RED: "101",
    Color.GREEN: "102",
    Color.YELLOW: "103",
    Color.BLUE: "104",
    Color.FUCHSIA: "105",
    Color.TURQUOISE: "106",
    Color.WHITE: "107",
}

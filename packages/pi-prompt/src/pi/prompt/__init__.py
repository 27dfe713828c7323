"""pi-prompt: incremental renderer for interactive line-editing prompts."""

# Text model
from pi.prompt.buffer import Buffer
from pi.prompt.document import Document

# Colors
from pi.prompt.colors import Color, DisplayAttribute

# Completion
from pi.prompt.completion import (
    COMPLETION_MARGIN,
    Completer,
    CompletionManager,
    Suggest,
    format_suggestions,
)

# Layout
from pi.prompt.layout import (
    LayoutBlock,
    end_position,
    is_scroll_thumb,
    layout_blocks,
    needs_forced_wrap,
    position_of,
    row_count,
    scrollbar_thumb,
)

# Output
from pi.prompt.output import ConsoleWriter, PosixWriter, VT100Writer

# Renderer
from pi.prompt.render import (
    WINDOW_TOO_SMALL_MESSAGE,
    Render,
    RenderState,
    RenderTheme,
)

# Terminal
from pi.prompt.terminal import WinSize, get_win_size, watch_win_size

# Utilities
from pi.prompt.utils import string_width, truncate_to_width

__all__ = [
    # Text model
    "Buffer",
    "Document",
    # Colors
    "Color",
    "DisplayAttribute",
    # Completion
    "COMPLETION_MARGIN",
    "Completer",
    "CompletionManager",
    "Suggest",
    "format_suggestions",
    # Layout
    "LayoutBlock",
    "end_position",
    "is_scroll_thumb",
    "layout_blocks",
    "needs_forced_wrap",
    "position_of",
    "row_count",
    "scrollbar_thumb",
    # Output
    "ConsoleWriter",
    "PosixWriter",
    "VT100Writer",
    # Renderer
    "WINDOW_TOO_SMALL_MESSAGE",
    "Render",
    "RenderState",
    "RenderTheme",
    # Terminal
    "WinSize",
    "get_win_size",
    "watch_win_size",
    # Utilities
    "string_width",
    "truncate_to_width",
]

# diffshade/box_drawing.py
"""Unicode box drawing for file and hunk headers.

Headers are decorated with single-line box-drawing characters. Each
helper returns rows of rich Segments so the caller decides how they are
styled and written.
"""

from typing import List

from rich.segment import Segment
from rich.style import Style

from .display_width import cell_width

# Box drawing characters (single line)
BOX_TR = "┐"  # Top-right corner
BOX_BR = "┘"  # Bottom-right corner
BOX_H = "─"   # Horizontal line
BOX_V = "│"   # Vertical line

# Decoration kinds for headers
DECORATION_BOX = "box"
DECORATION_UNDERLINE = "ul"

Row = List[Segment]


def horizontal_rule(width: int, style: Style = None) -> Row:
    """A full-width horizontal line."""
    return [Segment(BOX_H * max(0, width), style)]


def box_text(text: str, text_style: Style = None, box_style: Style = None,
             ambiguous_width: int = 1) -> List[Row]:
    """Frame text with a box open on the left edge.

    Returns:
        Three rows like::

            ────────┐
            text    │
            ────────┘
    """
    width = cell_width(text, ambiguous_width) + 1
    return [
        [Segment(BOX_H * width + BOX_TR, box_style)],
        [Segment(text, text_style), Segment(" " + BOX_V, box_style)],
        [Segment(BOX_H * width + BOX_BR, box_style)],
    ]


def decorate(text: str, decoration: str, text_style: Style = None,
             decoration_style: Style = None, width: int = 0,
             ambiguous_width: int = 1) -> List[Row]:
    """Render a header line with the given decoration.

    Args:
        text: Header text.
        decoration: DECORATION_BOX or DECORATION_UNDERLINE.
        text_style: Style for the text.
        decoration_style: Style for the box-drawing characters.
        width: Underline width; 0 means as wide as the text.
        ambiguous_width: Width of East Asian Ambiguous characters.

    Returns:
        Output rows in order.
    """
    if decoration == DECORATION_BOX:
        return box_text(text, text_style, decoration_style, ambiguous_width)

    rule_width = width or cell_width(text, ambiguous_width)
    return [[Segment(text, text_style)], horizontal_rule(rule_width, decoration_style)]


def separator_segment(style: Style = None) -> Segment:
    """The vertical divider between side-by-side panels."""
    return Segment(BOX_V, style)

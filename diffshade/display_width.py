# diffshade/display_width.py
"""Display width utilities for terminal rendering.

Provides display width measurement for strings containing wide characters
(CJK), ambiguous-width characters (box-drawing, some symbols), and
zero-width characters, plus the segment-level operations the renderers
need: tab expansion, wrapping, truncation and padding.

Widths are measured per grapheme cluster, so a base character and its
combining marks are never split across rows.
"""

import unicodedata
from typing import List, Sequence

import wcwidth
from rich.segment import Segment
from rich.style import Style

from .word_diff import split_graphemes

ELLIPSIS = "…"
VS16 = "\ufe0f"


def char_width(char: str, ambiguous_width: int = 1) -> int:
    """Display width of a single code point.

    Uses unicodedata.east_asian_width() for printable characters:
    - Fullwidth (F) and Wide (W) characters: 2 columns
    - Ambiguous (A) characters: ambiguous_width (1 on Western terminals)
    - Halfwidth (H), Narrow (Na), Neutral (N): 1 column
    Zero-width and non-printable characters (via wcwidth) take 0 columns.
    """
    wc = wcwidth.wcwidth(char)
    if wc <= 0:
        return 0

    eaw = unicodedata.east_asian_width(char)
    if eaw in ('F', 'W'):
        return 2
    if eaw == 'A':
        return ambiguous_width
    return wc


def cluster_width(cluster: str, ambiguous_width: int = 1) -> int:
    """Display width of one grapheme cluster (its base character decides)."""
    if not cluster:
        return 0
    width = char_width(cluster[0], ambiguous_width)
    if VS16 in cluster and width == 1:
        # Emoji presentation selector
        width = 2
    return width


def cell_width(text: str, ambiguous_width: int = 1) -> int:
    """Calculate the display width of a string in terminal columns.

    Args:
        text: The string to measure. Tabs count as zero; expand them first.
        ambiguous_width: Width of East Asian Ambiguous characters (1 or 2).

    Returns:
        The display width in terminal columns.
    """
    if text.isascii() and text.isprintable():
        return len(text)
    return sum(cluster_width(c, ambiguous_width) for c in split_graphemes(text))


def segments_width(segments: Sequence[Segment], ambiguous_width: int = 1) -> int:
    return sum(cell_width(seg.text, ambiguous_width) for seg in segments)


def pad_to_width(text: str, target_width: int, align: str = "left",
                 ambiguous_width: int = 1, fill: str = " ") -> str:
    """Pad a string to a target display width, accounting for wide characters.

    Args:
        text: The string to pad.
        target_width: The desired display width.
        align: Alignment - 'left', 'right', or 'center'.
        ambiguous_width: Width of East Asian Ambiguous characters.
        fill: Single-column padding character.

    Returns:
        The padded string.
    """
    current_width = cell_width(text, ambiguous_width)
    padding_needed = max(0, target_width - current_width)

    if align == "right":
        return fill * padding_needed + text
    elif align == "center":
        left_pad = padding_needed // 2
        right_pad = padding_needed - left_pad
        return fill * left_pad + text + fill * right_pad
    else:  # left
        return text + fill * padding_needed


def expand_tabs(segments: Sequence[Segment], tab_width: int = 4,
                start_column: int = 0, ambiguous_width: int = 1) -> List[Segment]:
    """Replace tabs with spaces up to the next tab stop.

    Each tab keeps the style of the segment it appears in. Tab stops are
    counted in display columns from start_column.
    """
    if not any("\t" in seg.text for seg in segments):
        return list(segments)

    column = start_column
    expanded: List[Segment] = []
    for seg in segments:
        if "\t" not in seg.text:
            expanded.append(seg)
            column += cell_width(seg.text, ambiguous_width)
            continue
        parts = []
        for cluster in split_graphemes(seg.text):
            if cluster == "\t":
                spaces = tab_width - (column % tab_width) if tab_width > 0 else 0
                parts.append(" " * spaces)
                column += spaces
            else:
                parts.append(cluster)
                column += cluster_width(cluster, ambiguous_width)
        expanded.append(Segment("".join(parts), seg.style))
    return expanded


def wrap_segments(segments: Sequence[Segment], width: int,
                  ambiguous_width: int = 1) -> List[List[Segment]]:
    """Split styled segments into rows no wider than width.

    Rows break between grapheme clusters only; a wide cluster that does not
    fit at the end of a row starts the next one. An empty input gives one
    empty row.
    """
    if width <= 0:
        return [list(segments)]

    rows: List[List[Segment]] = [[]]
    column = 0
    for seg in segments:
        if not seg.text:
            continue
        if column + cell_width(seg.text, ambiguous_width) <= width:
            rows[-1].append(seg)
            column += cell_width(seg.text, ambiguous_width)
            continue

        buffer = []
        for cluster in split_graphemes(seg.text):
            w = cluster_width(cluster, ambiguous_width)
            if column + w > width and column > 0:
                if buffer:
                    rows[-1].append(Segment("".join(buffer), seg.style))
                    buffer = []
                rows.append([])
                column = 0
            buffer.append(cluster)
            column += w
        if buffer:
            rows[-1].append(Segment("".join(buffer), seg.style))
    return rows


def truncate_segments(segments: Sequence[Segment], width: int,
                      ambiguous_width: int = 1, ellipsis: str = ELLIPSIS) -> List[Segment]:
    """Cut segments to width, ending with an ellipsis if anything was cut."""
    if segments_width(segments, ambiguous_width) <= width:
        return list(segments)
    if width <= 0:
        return []

    budget = width - cell_width(ellipsis, ambiguous_width)
    kept: List[Segment] = []
    column = 0
    style = segments[0].style if segments else None
    for seg in segments:
        buffer = []
        for cluster in split_graphemes(seg.text):
            w = cluster_width(cluster, ambiguous_width)
            if column + w > budget:
                break
            buffer.append(cluster)
            column += w
        else:
            kept.append(seg)
            style = seg.style
            continue
        if buffer:
            kept.append(Segment("".join(buffer), seg.style))
        style = seg.style
        break
    kept.append(Segment(ellipsis, style))
    return kept


def pad_segments(segments: Sequence[Segment], width: int, style: Style = None,
                 ambiguous_width: int = 1) -> List[Segment]:
    """Append spaces in the given style until the segments fill width."""
    padding = width - segments_width(segments, ambiguous_width)
    if padding <= 0:
        return list(segments)
    return list(segments) + [Segment(" " * padding, style)]

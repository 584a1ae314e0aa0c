# diffshade/line_numbers.py
"""Line number gutter for rendered hunks.

The gutter is described by two format strings, one for the left field and
one for the right. Each may contain ``{nm}`` (old line number) and
``{np}`` (new line number) placeholders with an optional
``:[fill]<align><width>`` format, e.g. ``"{nm:^4}⋮"``. Alignment defaults to
centre and the field is always at least as wide as the largest line
number in the hunk. The fill character is accepted but ignored.

In unified mode both fields are shown. In side-by-side mode the left
panel shows only the left field and the right panel only the right one.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from rich.segment import Segment
from rich.style import Style

from .classifier import LineKind
from .display_width import pad_to_width, segments_width
from .parser import Hunk

DEFAULT_LEFT_FORMAT = "{nm:^4}⋮"
DEFAULT_RIGHT_FORMAT = "{np:^4}│"

LINE_NUMBERS_PLACEHOLDER = re.compile(
    r"""
    \{
    (nm|np)             # 1: which number
    (?:
      :
      (?:
        ([^<^>])?       # 2: fill character (ignored)
        ([<^>])         # 3: alignment
      )?
      (\d+)             # 4: width
    )?
    \}
    """,
    re.VERBOSE,
)

ALIGNMENTS = {"<": "left", "^": "center", ">": "right"}

LEFT = "left"
RIGHT = "right"

LineNumberPair = Tuple[Optional[int], Optional[int]]


@dataclass(frozen=True)
class PlaceholderData:
    """One placeholder of a format string and the literal text around it."""
    prefix: str
    placeholder: Optional[str]
    alignment: Optional[str]
    width: Optional[int]
    suffix: str


def parse_line_number_format(format_string: str) -> List[PlaceholderData]:
    """Split a gutter format string into placeholders.

    Each entry's suffix runs to the end of the string; only the last
    entry's suffix is printed. A string with no placeholders yields one
    entry holding the whole string as suffix.
    """
    format_data: List[PlaceholderData] = []
    offset = 0
    for match in LINE_NUMBERS_PLACEHOLDER.finditer(format_string):
        format_data.append(PlaceholderData(
            prefix=format_string[offset:match.start()],
            placeholder=match.group(1),
            alignment=match.group(3),
            width=int(match.group(4)) if match.group(4) else None,
            suffix=format_string[match.end():],
        ))
        offset = match.end()

    if offset == 0:
        format_data.append(PlaceholderData("", None, None, None, format_string))
    return format_data


def format_line_number(number: Optional[int], alignment: str, width: int) -> str:
    """Format a number (or blanks for None) within width columns."""
    if number is None:
        return " " * width
    return pad_to_width(str(number), width, ALIGNMENTS.get(alignment, "center"))


def number_hunk_lines(hunk: Hunk) -> List[LineNumberPair]:
    """Old/new line numbers for each line of a hunk, in line order.

    Removed lines have only an old number, added lines only a new one,
    context lines both. Marker lines have neither.
    """
    minus = hunk.old_start
    plus = hunk.new_start
    numbers: List[LineNumberPair] = []
    for line in hunk.lines:
        if line.kind == LineKind.MINUS:
            numbers.append((minus, None))
            minus += 1
        elif line.kind == LineKind.PLUS:
            numbers.append((None, plus))
            plus += 1
        elif line.kind == LineKind.CONTEXT:
            numbers.append((minus, plus))
            minus += 1
            plus += 1
        else:
            numbers.append((None, None))
    return numbers


class LineNumbers:
    """Formats the gutter fields for the lines of one hunk at a time.

    Args:
        left_format: Format string of the left field.
        right_format: Format string of the right field.
        scheme: ColorScheme providing the line_numbers_* styles.
        ambiguous_width: Width of East Asian Ambiguous characters.
    """

    def __init__(self, left_format: str, right_format: str, scheme,
                 ambiguous_width: int = 1):
        self.left_format_data = parse_line_number_format(left_format)
        self.right_format_data = parse_line_number_format(right_format)
        self._scheme = scheme
        self._ambiguous_width = ambiguous_width
        self._numbers: List[LineNumberPair] = []
        self._kinds: List[LineKind] = []
        self.max_line_number_width = 1

    def initialize_hunk(self, hunk: Hunk) -> None:
        """Prepare numbering for a new hunk."""
        self._numbers = number_hunk_lines(hunk)
        self._kinds = [line.kind for line in hunk.lines]
        self.max_line_number_width = len(str(max(hunk.max_line_number, 0)))

    def field(self, index: Optional[int], side: Optional[str] = None) -> List[Segment]:
        """Gutter segments for a hunk line.

        Args:
            index: Index of the line in the hunk, or None for a blank gutter
                (wrapped continuation rows, empty side-by-side cells).
            side: None for both fields, LEFT or RIGHT for one panel.
        """
        scheme = self._scheme
        if index is None:
            numbers: LineNumberPair = (None, None)
            kind = LineKind.CONTEXT
        else:
            numbers = self._numbers[index]
            kind = self._kinds[index]

        if kind == LineKind.CONTEXT:
            minus_style = plus_style = scheme.line_numbers_zero
        else:
            minus_style = scheme.line_numbers_minus
            plus_style = scheme.line_numbers_plus

        segments: List[Segment] = []
        if side in (None, LEFT):
            segments.extend(self._format_field(
                self.left_format_data, scheme.line_numbers_left, numbers,
                minus_style, plus_style))
        if side in (None, RIGHT):
            segments.extend(self._format_field(
                self.right_format_data, scheme.line_numbers_right, numbers,
                minus_style, plus_style))
        return segments

    def width(self, side: Optional[str] = None) -> int:
        """Display width of the gutter for the current hunk."""
        return segments_width(self.field(None, side), self._ambiguous_width)

    def _format_field(self, format_data: Sequence[PlaceholderData], style: Style,
                      numbers: LineNumberPair, minus_style: Style,
                      plus_style: Style) -> List[Segment]:
        minus_number, plus_number = numbers
        segments: List[Segment] = []
        suffix = ""
        for data in format_data:
            if data.prefix:
                segments.append(Segment(data.prefix, style))

            alignment = data.alignment or "^"
            width = max(data.width or 0, self.max_line_number_width)
            if data.placeholder == "nm":
                segments.append(Segment(
                    format_line_number(minus_number, alignment, width), minus_style))
            elif data.placeholder == "np":
                segments.append(Segment(
                    format_line_number(plus_number, alignment, width), plus_style))
            suffix = data.suffix

        if suffix:
            segments.append(Segment(suffix, style))
        return segments

# diffshade/compose.py
"""Style composition for one rendered line.

Two independent layers describe a line's look:

- the syntax layer, (substring, style) pieces from a SyntaxHighlighter;
- the diff layer, EditSpans from the word diff (or the whole line when
  the line is unpaired or not an edit).

compose_line() merges them into one partition of the line where every
piece carries a single composed style: the syntax foreground with the
diff layer's background and emphasis laid on top. The diff layer only
contributes a foreground when the syntax layer has none for that piece.

The text itself is never changed. If the composed spans do not spell the
line exactly, CompositionError is raised.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from rich.segment import Segment
from rich.style import Style

from .display_width import expand_tabs, segments_width
from .errors import CompositionError
from .syntax_highlight import SyntaxSpans
from .word_diff import EditKind, EditSpan

logger = logging.getLogger(__name__)

_Interval = Tuple[int, int, Style]


@dataclass(frozen=True)
class StyledSpan:
    """A code point range [start, end) of a line with its composed style."""
    start: int
    end: int
    style: Style


@dataclass
class RenderedLine:
    """A line's text and the styled partition produced by compose_line()."""
    text: str
    spans: List[StyledSpan] = field(default_factory=list)
    display_width: int = 0

    @property
    def segments(self) -> List[Segment]:
        return [Segment(self.text[s.start:s.end], s.style) for s in self.spans]

    @property
    def plain(self) -> str:
        return "".join(self.text[s.start:s.end] for s in self.spans)


def diff_style_for(
    edit_kind: Optional[EditKind],
    line_style: Style,
    emph_style: Style,
    non_emph_style: Style,
) -> Style:
    """Pick the diff-layer style for a span.

    Args:
        edit_kind: The span's edit kind, or None for a line shown whole.
        line_style: Style of a whole minus/plus/context line.
        emph_style: Style of removed/added text in an edit.
        non_emph_style: Style of unchanged text in an edit.
    """
    if edit_kind is None:
        return line_style
    if edit_kind == EditKind.UNCHANGED:
        return non_emph_style
    return emph_style


def overlay_style(syntax_style: Style, diff_style: Style) -> Style:
    """Lay the diff layer's background and emphasis over a syntax style."""
    emphasis = Style(
        bgcolor=diff_style.bgcolor,
        bold=diff_style.bold,
        dim=diff_style.dim,
        italic=diff_style.italic,
        underline=diff_style.underline,
        strike=diff_style.strike,
        reverse=diff_style.reverse,
    )
    composed = syntax_style + emphasis
    if composed.color is None and diff_style.color is not None:
        composed += Style(color=diff_style.color)
    return composed


def _syntax_intervals(text: str, syntax_spans: Optional[SyntaxSpans]) -> Optional[List[_Interval]]:
    """Turn (substring, style) pieces into offsets, or None if unusable."""
    if not syntax_spans:
        return None

    intervals: List[_Interval] = []
    pos = 0
    for piece, style in syntax_spans:
        if not piece:
            continue
        end = pos + len(piece)
        if text[pos:end] != piece:
            logger.debug("syntax spans do not match line text; ignoring syntax layer")
            return None
        intervals.append((pos, end, style))
        pos = end

    if pos != len(text):
        logger.debug("syntax spans cover %d of %d chars; ignoring syntax layer", pos, len(text))
        return None
    return intervals


def _diff_intervals(
    text: str,
    edit_spans: Sequence[EditSpan],
    line_style: Style,
    emph_style: Style,
    non_emph_style: Style,
) -> List[_Interval]:
    if not edit_spans:
        return [(0, len(text), line_style)]

    intervals: List[_Interval] = []
    pos = 0
    for span in edit_spans:
        if span.start != pos or span.end < span.start:
            raise CompositionError(text, _describe(text, edit_spans))
        if span.end > span.start:
            style = diff_style_for(span.kind, line_style, emph_style, non_emph_style)
            intervals.append((span.start, span.end, style))
        pos = span.end
    if pos != len(text):
        raise CompositionError(text, _describe(text, edit_spans))
    return intervals


def _describe(text: str, edit_spans: Sequence[EditSpan]) -> str:
    return "".join(text[s.start:s.end] for s in edit_spans)


def compose_line(
    text: str,
    edit_spans: Sequence[EditSpan] = (),
    syntax_spans: Optional[SyntaxSpans] = None,
    line_style: Style = Style.null(),
    emph_style: Optional[Style] = None,
    non_emph_style: Optional[Style] = None,
    tab_width: int = 4,
    ambiguous_width: int = 1,
) -> RenderedLine:
    """Compose the syntax and diff layers of one line.

    Args:
        text: Line content without its diff marker.
        edit_spans: Partition of text from the word diff. Empty means the
            whole line takes line_style.
        syntax_spans: Highlighter output, or None when unavailable.
            Output that does not spell text exactly is ignored.
        line_style: Style of the whole line.
        emph_style: Style of removed/added spans (defaults to line_style).
        non_emph_style: Style of unchanged spans (defaults to line_style).
        tab_width: Tab stop distance used for display_width.
        ambiguous_width: Width of East Asian Ambiguous characters.

    Returns:
        RenderedLine whose spans partition text in order.

    Raises:
        CompositionError: If the spans would not reproduce text exactly.
    """
    if emph_style is None:
        emph_style = line_style
    if non_emph_style is None:
        non_emph_style = line_style

    if not text:
        return RenderedLine(text=text)

    diff = _diff_intervals(text, edit_spans, line_style, emph_style, non_emph_style)
    syntax = _syntax_intervals(text, syntax_spans)

    spans: List[StyledSpan] = []
    if syntax is None:
        for start, end, style in diff:
            _append(spans, start, end, style)
    else:
        i = j = 0
        pos = 0
        while pos < len(text):
            _, syntax_end, syntax_style = syntax[i]
            _, diff_end, diff_style = diff[j]
            end = min(syntax_end, diff_end)
            _append(spans, pos, end, overlay_style(syntax_style, diff_style))
            pos = end
            if syntax_end == end:
                i += 1
            if diff_end == end:
                j += 1

    rendered = RenderedLine(text=text, spans=spans)
    rendered.display_width = segments_width(
        expand_tabs(rendered.segments, tab_width, ambiguous_width=ambiguous_width),
        ambiguous_width,
    )
    joined = rendered.plain
    contiguous = all(a.end == b.start for a, b in zip(spans, spans[1:]))
    if joined != text or not contiguous or spans[0].start != 0:
        raise CompositionError(text, joined)
    return rendered


def _append(spans: List[StyledSpan], start: int, end: int, style: Style) -> None:
    """Append a span, merging it into the previous one when styles match."""
    if spans and spans[-1].style == style and spans[-1].end == start:
        spans[-1] = StyledSpan(spans[-1].start, end, style)
    else:
        spans.append(StyledSpan(start, end, style))

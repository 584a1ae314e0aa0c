# diffshade/renderers/base.py
"""Colour scheme and shared rendering logic for diff renderers.

A renderer turns assembled diff units (file headers, hunks, binary
notices, passthrough lines) into finished output lines. The work that does
not depend on layout lives here: pairing and word-diffing a hunk's lines,
composing syntax and diff styles, fitting content to a width, and drawing
the file and hunk headers. Subclasses only decide how the rows of a hunk
are laid out.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Dict, List, Optional, Tuple

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.segment import Segment
from rich.style import Style

from ..box_drawing import DECORATION_BOX, DECORATION_UNDERLINE, Row, decorate
from ..classifier import DiffLine, LineKind
from ..compose import RenderedLine, compose_line
from ..display_width import (
    expand_tabs,
    pad_segments,
    truncate_segments,
    wrap_segments,
)
from ..errors import ConfigError
from ..line_numbers import LineNumbers
from ..pairing import pair_hunk
from ..parser import FilePatch, Hunk
from ..syntax_highlight import SyntaxHighlighter, language_for_path, safe_highlight
from ..word_diff import EditSpan, compute_word_diff

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80


@dataclass(frozen=True)
class ColorScheme:
    """Styles used by the renderers, one per visual role."""
    minus: Style
    minus_emph: Style
    minus_non_emph: Style
    plus: Style
    plus_emph: Style
    plus_non_emph: Style
    zero: Style
    file: Style
    file_decoration: Style
    hunk_header: Style
    hunk_header_decoration: Style
    line_numbers_left: Style
    line_numbers_right: Style
    line_numbers_minus: Style
    line_numbers_zero: Style
    line_numbers_plus: Style
    no_newline: Style
    note: Style
    binary: Style
    passthrough: Style

    @classmethod
    def from_definitions(cls, definitions: Dict[str, str]) -> "ColorScheme":
        """Build a scheme from style definition strings such as "bold on #3f0001".

        Raises:
            ConfigError: If a definition is missing or cannot be parsed.
        """
        styles = {}
        for f in fields(cls):
            if f.name not in definitions:
                raise ConfigError(f"missing style definition: {f.name}")
            styles[f.name] = _parse_style(f.name, definitions[f.name])
        return cls(**styles)

    def with_overrides(self, overrides: Dict[str, str]) -> "ColorScheme":
        """Return a copy with some styles replaced. Unknown names are ignored."""
        names = {f.name for f in fields(self)}
        changes = {}
        for name, definition in overrides.items():
            if name not in names:
                logger.warning("ignoring unknown style %r", name)
                continue
            changes[name] = _parse_style(name, definition)
        return replace(self, **changes)

    def line_styles(self, kind: LineKind) -> Tuple[Style, Style, Style]:
        """(line, emph, non_emph) styles for a hunk line kind."""
        if kind == LineKind.MINUS:
            return self.minus, self.minus_emph, self.minus_non_emph
        if kind == LineKind.PLUS:
            return self.plus, self.plus_emph, self.plus_non_emph
        return self.zero, self.zero, self.zero


def _parse_style(name: str, definition: str) -> Style:
    try:
        return Style.parse(definition)
    except StyleSyntaxError as e:
        raise ConfigError(f"invalid style for {name}: {definition!r} ({e})") from e


DARK_STYLE_DEFINITIONS = {
    "minus": "on #3f0001",
    "minus_emph": "on #901011",
    "minus_non_emph": "on #3f0001",
    "plus": "on #002800",
    "plus_emph": "on #006000",
    "plus_non_emph": "on #002800",
    "zero": "",
    "file": "blue",
    "file_decoration": "blue",
    "hunk_header": "blue",
    "hunk_header_decoration": "blue",
    "line_numbers_left": "blue",
    "line_numbers_right": "blue",
    "line_numbers_minus": "color(88)",
    "line_numbers_zero": "#444444",
    "line_numbers_plus": "color(28)",
    "no_newline": "dim",
    "note": "dim",
    "binary": "bold yellow",
    "passthrough": "",
}

LIGHT_STYLE_DEFINITIONS = dict(
    DARK_STYLE_DEFINITIONS,
    minus="on #ffe0e0",
    minus_emph="on #ffc0c0",
    minus_non_emph="on #ffe0e0",
    plus="on #d0ffd0",
    plus_emph="on #a0efa0",
    plus_non_emph="on #d0ffd0",
    line_numbers_minus="red",
    line_numbers_zero="#dddddd",
    line_numbers_plus="green",
)

DARK_COLOR_SCHEME = ColorScheme.from_definitions(DARK_STYLE_DEFINITIONS)
LIGHT_COLOR_SCHEME = ColorScheme.from_definitions(LIGHT_STYLE_DEFINITIONS)


def build_color_scheme(light: bool = False, overrides: Optional[Dict[str, str]] = None) -> ColorScheme:
    """Pick the dark or light scheme and apply user style overrides."""
    scheme = LIGHT_COLOR_SCHEME if light else DARK_COLOR_SCHEME
    if overrides:
        scheme = scheme.with_overrides(overrides)
    return scheme


def to_ansi(segments: List[Segment], color_system: Optional[ColorSystem]) -> str:
    """Render segments as a terminal string; no escapes when color_system is None."""
    parts = []
    for segment in segments:
        if segment.style is None or color_system is None:
            parts.append(segment.text)
        else:
            parts.append(segment.style.render(segment.text, color_system=color_system))
    return "".join(parts)


class BaseRenderer:
    """Layout-independent rendering shared by the unified and side-by-side renderers.

    Args:
        config: DiffConfig with display options.
        colors: Colour scheme to paint with.
        highlighter: Syntax highlighter, or None for diff-only styling.
        color_system: Terminal colour capability; None writes plain text.
    """

    def __init__(self, config, colors: ColorScheme,
                 highlighter: Optional[SyntaxHighlighter] = None,
                 color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR):
        self.config = config
        self.colors = colors
        self.highlighter = highlighter
        self.color_system = color_system
        self.width = config.width or DEFAULT_WIDTH
        self.theme = config.effective_theme
        self.ambiguous_width = config.ambiguous_width
        # Without colour the markers are the only way to tell lines apart
        self.keep_markers = config.keep_markers or color_system is None
        self.line_numbers: Optional[LineNumbers] = None
        if config.line_numbers:
            self.line_numbers = LineNumbers(
                config.line_numbers_left_format,
                config.line_numbers_right_format,
                colors,
                ambiguous_width=config.ambiguous_width,
            )
        self._language: Optional[str] = None

    # ==================== File-level units ====================

    def render_file_header(self, patch: FilePatch) -> List[str]:
        """Render the header of a file patch and pick its syntax."""
        self._language = None
        if self.config.syntax and self.highlighter is not None:
            self._language = language_for_path(patch.language_path)
            logger.debug("language for %r: %s", patch.language_path, self._language)

        rows: List[Row] = []
        path = patch.display_path
        if path:
            rows.extend(decorate(
                self._clip(path, self.width),
                DECORATION_UNDERLINE,
                self.colors.file,
                self.colors.file_decoration,
                ambiguous_width=self.ambiguous_width,
            ))
        for note in patch.notes:
            rows.append([Segment(self._clip(note, self.width), self.colors.note)])
        return self._finish(rows)

    def render_binary(self, patch: FilePatch) -> List[str]:
        """The fixed one-line notice shown in place of binary content."""
        if patch.is_new_file:
            status = "added"
        elif patch.is_deleted_file:
            status = "removed"
        else:
            status = "modified"
        return self._finish([[Segment(f"binary file {status}", self.colors.binary)]])

    def render_passthrough(self, line: DiffLine) -> List[str]:
        """Lines outside any hunk are written unmodified."""
        if line.kind == LineKind.NO_NEWLINE:
            return self._finish([[Segment(line.raw_text, self.colors.no_newline)]])
        return [to_ansi([Segment(line.raw_text, self.colors.passthrough)], self.color_system)]

    def render_hunk(self, hunk: Hunk) -> List[str]:
        raise NotImplementedError

    # ==================== Hunk helpers ====================

    def render_hunk_header(self, hunk: Hunk) -> List[Row]:
        """Boxed hunk header; the code context only when line numbers are shown."""
        if self.line_numbers is not None:
            text = hunk.header_extra
            if not text:
                return []
        else:
            text = hunk.header_text
        return decorate(
            self._clip(text, self.width - 2),
            DECORATION_BOX,
            self.colors.hunk_header,
            self.colors.hunk_header_decoration,
            ambiguous_width=self.ambiguous_width,
        )

    def compose_hunk(self, hunk: Hunk) -> List[Optional[RenderedLine]]:
        """Pair, word-diff and style every line of a closed hunk.

        Returns:
            One RenderedLine per hunk line, None for marker lines.
        """
        edits: Dict[int, List[EditSpan]] = {}
        for pairing in pair_hunk(hunk):
            if not pairing.is_matched:
                continue
            minus = hunk.lines[pairing.minus_index]
            plus = hunk.lines[pairing.plus_index]
            word_diff = compute_word_diff(
                minus.content, plus.content, self.config.min_similarity)
            if word_diff.is_edit:
                edits[pairing.minus_index] = word_diff.old_spans
                edits[pairing.plus_index] = word_diff.new_spans

        rendered: List[Optional[RenderedLine]] = []
        for index, line in enumerate(hunk.lines):
            if line.kind == LineKind.NO_NEWLINE:
                rendered.append(None)
                continue
            line_style, emph_style, non_emph_style = self.colors.line_styles(line.kind)
            syntax = None
            if self._language is not None:
                syntax = safe_highlight(self.highlighter, line.content, self._language, self.theme)
            rendered.append(compose_line(
                line.content,
                edits.get(index, ()),
                syntax,
                line_style,
                emph_style,
                non_emph_style,
                tab_width=self.config.tab_width,
                ambiguous_width=self.ambiguous_width,
            ))
        return rendered

    def line_content(self, line: DiffLine,
                     rendered: Optional[RenderedLine]) -> Tuple[List[Segment], Optional[Style]]:
        """Content segments of a hunk line and the style to fill its row with."""
        if rendered is None:
            return [Segment(line.raw_text, self.colors.no_newline)], None

        line_style = self.colors.line_styles(line.kind)[0]
        segments = expand_tabs(rendered.segments, self.config.tab_width,
                               ambiguous_width=self.ambiguous_width)
        if self.keep_markers:
            segments = [Segment(line.marker, line_style)] + segments

        fill = None
        if line.kind in (LineKind.MINUS, LineKind.PLUS) and self.color_system is not None:
            fill = line_style
        return segments, fill

    def fit(self, segments: List[Segment], width: int,
            fill: Optional[Style] = None) -> List[Row]:
        """Wrap (or truncate) content to width, filling rows when a style is given."""
        width = max(1, width)
        if self.config.wrap:
            rows = wrap_segments(segments, width, self.ambiguous_width)
        else:
            rows = [truncate_segments(segments, width, self.ambiguous_width)]
        if fill is not None:
            rows = [pad_segments(row, width, fill, self.ambiguous_width) for row in rows]
        return rows

    def gutter(self, index: Optional[int], side: Optional[str] = None) -> List[Segment]:
        if self.line_numbers is None:
            return []
        return self.line_numbers.field(index, side)

    def gutter_width(self, side: Optional[str] = None) -> int:
        if self.line_numbers is None:
            return 0
        return self.line_numbers.width(side)

    def _clip(self, text: str, width: int) -> str:
        clipped = truncate_segments([Segment(text)], max(1, width), self.ambiguous_width)
        return "".join(seg.text for seg in clipped)

    def _finish(self, rows: List[Row]) -> List[str]:
        return [to_ansi(row, self.color_system) for row in rows]

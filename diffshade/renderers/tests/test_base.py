# diffshade/renderers/tests/test_base.py
"""Tests for colour schemes and shared renderer behaviour."""

import logging

import pytest
from rich.color import Color, ColorSystem
from rich.segment import Segment
from rich.style import Style

from ...classifier import LineClassifier, LineKind
from ...config import DiffConfig
from ...errors import ConfigError
from ...parser import parse_unified_diff
from ..base import (
    DARK_COLOR_SCHEME,
    DARK_STYLE_DEFINITIONS,
    LIGHT_COLOR_SCHEME,
    ColorScheme,
    build_color_scheme,
    to_ansi,
)
from .. import create_renderer


def plain_renderer(**options):
    settings = {"width": 40, "syntax": False}
    settings.update(options)
    return create_renderer(DiffConfig(**settings), None, None)


class TestColorScheme:
    """Tests for ColorScheme construction."""

    def test_dark_defaults(self):
        assert DARK_COLOR_SCHEME.plus.bgcolor == Color.parse("#002800")
        assert DARK_COLOR_SCHEME.minus_emph.bgcolor == Color.parse("#901011")

    def test_light_scheme(self):
        assert build_color_scheme(light=True) is LIGHT_COLOR_SCHEME
        assert LIGHT_COLOR_SCHEME.plus.bgcolor == Color.parse("#d0ffd0")

    def test_overrides(self):
        scheme = build_color_scheme(overrides={"minus_emph": "bold red"})

        assert scheme.minus_emph.bold
        assert scheme.minus_emph.color == Color.parse("red")
        assert scheme.plus == DARK_COLOR_SCHEME.plus

    def test_unknown_override_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="diffshade.renderers.base"):
            scheme = build_color_scheme(overrides={"purple": "red"})

        assert scheme == DARK_COLOR_SCHEME
        assert "purple" in caplog.text

    def test_invalid_style(self):
        with pytest.raises(ConfigError, match="minus"):
            build_color_scheme(overrides={"minus": "not-a-colour"})

    def test_missing_definition(self):
        definitions = dict(DARK_STYLE_DEFINITIONS)
        del definitions["zero"]
        with pytest.raises(ConfigError, match="zero"):
            ColorScheme.from_definitions(definitions)

    def test_line_styles(self):
        assert DARK_COLOR_SCHEME.line_styles(LineKind.PLUS) == (
            DARK_COLOR_SCHEME.plus,
            DARK_COLOR_SCHEME.plus_emph,
            DARK_COLOR_SCHEME.plus_non_emph,
        )
        assert DARK_COLOR_SCHEME.line_styles(LineKind.CONTEXT)[0] == DARK_COLOR_SCHEME.zero


class TestToAnsi:
    """Tests for to_ansi."""

    def test_plain(self):
        segments = [Segment("a", Style(color="red")), Segment("b")]
        assert to_ansi(segments, None) == "ab"

    def test_truecolor(self):
        segments = [Segment("a", Style(color="red")), Segment("b")]
        assert to_ansi(segments, ColorSystem.TRUECOLOR) == "\x1b[31ma\x1b[0mb"


class TestFileUnits:
    """Tests for file headers, binary notices and passthrough lines."""

    def test_file_header(self):
        diff = "diff --git a/src/x.py b/src/x.py\n--- a/src/x.py\n+++ b/src/x.py\n"
        patch = parse_unified_diff(diff + "@@ -1 +1 @@\n-a\n+b\n")[0]
        assert plain_renderer().render_file_header(patch) == ["src/x.py", "────────"]

    def test_rename_header_with_notes(self):
        diff = """diff --git a/old.py b/new.py
similarity index 90%
rename from old.py
rename to new.py
"""
        patch = parse_unified_diff(diff)[0]
        assert plain_renderer().render_file_header(patch) == [
            "old.py ⟶ new.py",
            "─" * 15,
            "similarity index 90%",
        ]

    def test_long_path_is_clipped(self):
        patch = parse_unified_diff(f"--- a/{'d' * 60}.py\n+++ b/{'d' * 60}.py\n")[0]
        header = plain_renderer().render_file_header(patch)
        assert header[0].endswith("…")
        assert len(header[0]) == 40

    @pytest.mark.parametrize("diff,status", [
        ("diff --git a/i.png b/i.png\nnew file mode 100644\n"
         "Binary files /dev/null and b/i.png differ\n", "added"),
        ("diff --git a/i.png b/i.png\ndeleted file mode 100644\n"
         "Binary files a/i.png and /dev/null differ\n", "removed"),
        ("diff --git a/i.png b/i.png\nBinary files a/i.png and b/i.png differ\n", "modified"),
    ])
    def test_binary_notice(self, diff, status):
        patch = parse_unified_diff(diff)[0]
        assert plain_renderer().render_binary(patch) == [f"binary file {status}"]

    def test_passthrough_is_verbatim(self):
        line = LineClassifier().classify("commit 1234  \t trailing")
        renderer = create_renderer(DiffConfig(width=10, syntax=False), None, ColorSystem.TRUECOLOR)
        assert renderer.render_passthrough(line) == ["commit 1234  \t trailing"]

    def test_no_color_mode_keeps_markers(self):
        assert plain_renderer().keep_markers
        colored = create_renderer(DiffConfig(syntax=False), None, ColorSystem.TRUECOLOR)
        assert not colored.keep_markers

    def test_default_width(self):
        renderer = create_renderer(DiffConfig(syntax=False), None, None)
        assert renderer.width == 80

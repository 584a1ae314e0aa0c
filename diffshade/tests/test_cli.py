# diffshade/tests/test_cli.py
"""Tests for the command line interface."""

import io
import sys

import pytest
from rich.color import ColorSystem

from ..cli import build_parser, detect_color_system, iter_input, main
from ..conftest import visible_lines

DIFF = """diff --git a/x.py b/x.py
--- a/x.py
+++ b/x.py
@@ -1 +1 @@
-foo
+foob
"""

PLAIN = ["--color", "never", "--width", "40", "--no-syntax"]


@pytest.fixture(autouse=True)
def clean_environment(tmp_path, monkeypatch):
    """Keep user config files and DIFFSHADE_* variables out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("DIFFSHADE_CONFIG", "DIFFSHADE_WIDTH", "DIFFSHADE_COLOR",
                 "DIFFSHADE_THEME", "DIFFSHADE_LOG_LEVEL", "FORCE_COLOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def diff_file(tmp_path):
    path = tmp_path / "change.diff"
    path.write_text(DIFF)
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_defaults_leave_config_alone(self):
        args = build_parser().parse_args([])
        assert args.files == []
        assert args.side_by_side is None
        assert args.light is None
        assert args.wrap is None
        assert args.syntax is None

    def test_flags(self):
        args = build_parser().parse_args(["-s", "-n", "--no-wrap", "--tabs", "8", "a.diff"])
        assert args.side_by_side
        assert args.line_numbers
        assert args.wrap is False
        assert args.tab_width == 8
        assert args.files == ["a.diff"]

    def test_light_and_dark_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--light", "--dark"])

    def test_dark(self):
        assert build_parser().parse_args(["--dark"]).light is False


class TestMain:
    """Tests for main()."""

    def test_list_themes(self, capsys):
        assert main(["--list-themes"]) == 0
        assert "monokai" in capsys.readouterr().out.split()

    def test_file_argument(self, diff_file, capsys):
        assert main([str(diff_file)] + PLAIN) == 0

        assert visible_lines(capsys.readouterr().out) == [
            "x.py",
            "────",
            "─" * 12 + "┐",
            "@@ -1 +1 @@ │",
            "─" * 12 + "┘",
            "-foo",
            "+foob",
        ]

    def test_files_are_concatenated(self, diff_file, capsys):
        assert main([str(diff_file), str(diff_file)] + PLAIN) == 0
        assert visible_lines(capsys.readouterr().out).count("+foob") == 2

    def test_standard_input(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(DIFF.encode())))
        assert main(PLAIN) == 0
        assert "+foob" in visible_lines(capsys.readouterr().out)

    def test_side_by_side(self, diff_file, capsys):
        assert main([str(diff_file), "-s", "--width", "41", "--color", "never", "--no-syntax"]) == 0
        lines = visible_lines(capsys.readouterr().out)
        assert lines[-1] == "-foo" + " " * 16 + "│+foob"

    def test_missing_config_file(self, diff_file, tmp_path, capsys):
        status = main([str(diff_file), "--config", str(tmp_path / "missing.yaml")])

        assert status == 2
        assert "config file not found" in capsys.readouterr().err

    def test_invalid_option_value(self, diff_file, capsys):
        assert main([str(diff_file), "--tabs", "0"] + PLAIN) == 2
        assert "tab_width" in capsys.readouterr().err

    def test_invalid_style_in_config(self, diff_file, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("styles:\n  minus: not-a-colour\n")

        assert main([str(diff_file), "--config", str(config)] + PLAIN) == 2
        assert "minus" in capsys.readouterr().err

    def test_config_file_settings(self, diff_file, tmp_path, capsys):
        config = tmp_path / "config.yaml"
        config.write_text("keep-markers: true\nwidth: 40\ncolor: never\nsyntax: false\n")

        assert main([str(diff_file), "--config", str(config)]) == 0
        assert "+foob" in visible_lines(capsys.readouterr().out)

    def test_missing_input_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.diff")] + PLAIN) == 1
        assert "nope.diff" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "diffshade" in capsys.readouterr().out


class TestHelpers:
    """Tests for terminal detection and input handling."""

    def test_color_never(self):
        assert detect_color_system("never", io.StringIO()) is None

    def test_color_auto_without_terminal(self):
        assert detect_color_system("auto", io.StringIO()) is None

    def test_color_always(self, monkeypatch):
        monkeypatch.setenv("TERM", "xterm-256color")
        monkeypatch.delenv("COLORTERM", raising=False)
        assert detect_color_system("always", io.StringIO()) == ColorSystem.EIGHT_BIT

    def test_iter_input_from_files(self, tmp_path):
        first = tmp_path / "a"
        second = tmp_path / "b"
        first.write_bytes(b"1\n2\n")
        second.write_bytes(b"3\xff\n")

        assert list(iter_input([str(first), str(second)], io.BytesIO())) == [
            b"1\n", b"2\n", b"3\xff\n"]

    def test_iter_input_from_stdin(self):
        assert list(iter_input([], io.BytesIO(b"x\ny\n"))) == [b"x\n", b"y\n"]

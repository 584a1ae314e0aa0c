# diffshade/tests/test_classifier.py
"""Tests for the line classifier."""

import pytest

from ..classifier import (
    LineClassifier,
    LineKind,
    classify_line,
    decode_line,
    parse_hunk_header,
    strip_ansi,
)


def classify_all(lines):
    classifier = LineClassifier()
    return [classifier.classify(line) for line in lines]


class TestParseHunkHeader:
    """Tests for hunk header parsing."""

    def test_full_header(self):
        hunk_range = parse_hunk_header("@@ -10,5 +12,7 @@ def main():")
        assert hunk_range.old_start == 10
        assert hunk_range.old_count == 5
        assert hunk_range.new_start == 12
        assert hunk_range.new_count == 7
        assert hunk_range.extra == "def main():"

    def test_missing_counts_default_to_one(self):
        hunk_range = parse_hunk_header("@@ -3 +4 @@")
        assert hunk_range.old_count == 1
        assert hunk_range.new_count == 1
        assert hunk_range.extra == ""

    def test_zero_count(self):
        hunk_range = parse_hunk_header("@@ -0,0 +1,2 @@")
        assert hunk_range.old_start == 0
        assert hunk_range.old_count == 0

    def test_not_a_header(self):
        assert parse_hunk_header("@@ nonsense @@") is None
        assert parse_hunk_header("@@@ -1,2 -1,2 +1,3 @@@") is None


class TestClassifyLine:
    """Tests for single-line classification."""

    @pytest.mark.parametrize("text,kind", [
        ("-removed", LineKind.MINUS),
        ("+added", LineKind.PLUS),
        (" context", LineKind.CONTEXT),
        ("", LineKind.CONTEXT),
        ("\\ No newline at end of file", LineKind.NO_NEWLINE),
    ])
    def test_in_hunk(self, text, kind):
        assert classify_line(text) == kind

    @pytest.mark.parametrize("text,kind", [
        ("diff --git a/x b/x", LineKind.FILE_META),
        ("--- a/x", LineKind.FILE_META),
        ("+++ b/x", LineKind.FILE_META),
        ("@@ -1 +1 @@", LineKind.HUNK_HEADER),
        ("Binary files a/x and b/x differ", LineKind.BINARY),
        ("GIT binary patch", LineKind.BINARY),
        ("just some text", LineKind.RAW),
    ])
    def test_outside_hunk(self, text, kind):
        assert classify_line(text, in_hunk=False) == kind


class TestLineClassifier:
    """Tests for stream classification."""

    def test_simple_patch(self):
        lines = classify_all([
            "diff --git a/f.py b/f.py",
            "index 123..456 100644",
            "--- a/f.py",
            "+++ b/f.py",
            "@@ -1,2 +1,2 @@",
            " keep",
            "-old",
            "+new",
        ])
        assert [line.kind for line in lines] == [
            LineKind.FILE_META,
            LineKind.FILE_META,
            LineKind.FILE_META,
            LineKind.FILE_META,
            LineKind.HUNK_HEADER,
            LineKind.CONTEXT,
            LineKind.MINUS,
            LineKind.PLUS,
        ]

    def test_dash_lines_inside_hunk_are_content(self):
        # "--- x" and "+++ y" inside a hunk are a removed/added line
        lines = classify_all([
            "@@ -1,1 +1,1 @@",
            "--- not a header",
            "+++ not a header",
        ])
        assert lines[1].kind == LineKind.MINUS
        assert lines[2].kind == LineKind.PLUS

    def test_dash_lines_after_hunk_are_headers(self):
        lines = classify_all([
            "@@ -1 +1 @@",
            "-a",
            "+b",
            "--- a/next",
            "+++ b/next",
        ])
        assert lines[3].kind == LineKind.FILE_META
        assert lines[4].kind == LineKind.FILE_META

    def test_index_line_outside_extended_header_is_raw(self):
        lines = classify_all(["index 123..456"])
        assert lines[0].kind == LineKind.RAW

    def test_short_hunk_drops_out(self):
        lines = classify_all([
            "@@ -1,5 +1,5 @@",
            " one",
            "commit 1234",
        ])
        assert lines[2].kind == LineKind.RAW

    def test_binary_patch_payload(self):
        lines = classify_all([
            "diff --git a/img.png b/img.png",
            "GIT binary patch",
            "literal 10",
            "zcmV+bla",
            "",
            "diff --git a/b.txt b/b.txt",
        ])
        assert [line.kind for line in lines[1:5]] == [LineKind.BINARY] * 4
        assert lines[5].kind == LineKind.FILE_META

    def test_origin_offsets(self):
        lines = classify_all(["a", "b", "c"])
        assert [line.origin_offset for line in lines] == [0, 1, 2]

    def test_content_and_marker(self):
        lines = classify_all(["@@ -1,2 +1,1 @@", "-gone", ""])
        assert lines[1].content == "gone"
        assert lines[1].marker == "-"
        assert lines[2].content == ""
        assert lines[2].marker == " "

    def test_ansi_is_stripped(self):
        lines = classify_all([
            "\x1b[1m@@ -1 +1 @@\x1b[0m",
            "\x1b[31m-red\x1b[0m",
            "\x1b[32m+green\x1b[0m",
        ])
        assert lines[0].kind == LineKind.HUNK_HEADER
        assert lines[1].raw_text == "-red"
        assert lines[2].raw_text == "+green"


class TestDecoding:
    """Tests for raw line decoding."""

    def test_strips_line_terminators(self):
        assert decode_line(b"abc\r\n") == "abc"
        assert decode_line("abc\n") == "abc"

    def test_invalid_utf8_round_trips(self):
        raw = b"+caf\xe9\n"
        text = decode_line(raw)
        assert text.encode("utf-8", errors="surrogateescape") == b"+caf\xe9"

    def test_strip_ansi_hyperlink(self):
        assert strip_ansi("\x1b]8;;http://x\x1b\\link\x1b]8;;\x1b\\") == "link"

# diffshade/classifier.py
"""Line classifier for unified diff input.

Turns each raw input line into an immutable DiffLine tagged with its kind.
Classification is prefix based with no lookahead; the only state kept is
what is needed to tell a content line from metadata:

- the remaining old/new line counts of the current hunk header (while
  either is non-zero, ``-foo`` is a removed line, not metadata),
- whether we are in a git extended header (``index``, ``new file mode``...),
- whether we are inside a ``GIT binary patch`` payload.

Anything that matches no rule is classified RAW and passed through
verbatim by later stages.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$")

# CSI sequences (colours, cursor movement) and OSC sequences (hyperlinks)
ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;:?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")

# Lines that may follow "diff --git" before the ---/+++ pair
EXTENDED_HEADER_PREFIXES = (
    "index ",
    "new file mode ",
    "deleted file mode ",
    "old mode ",
    "new mode ",
    "similarity index ",
    "dissimilarity index ",
    "rename from ",
    "rename to ",
    "copy from ",
    "copy to ",
)

BINARY_FILES_PREFIX = "Binary files "
BINARY_FILES_SUFFIX = " differ"
GIT_BINARY_PATCH = "GIT binary patch"


class LineKind(Enum):
    """Kind of a classified diff line."""
    FILE_META = "file_meta"
    HUNK_HEADER = "hunk_header"
    CONTEXT = "context"
    MINUS = "minus"
    PLUS = "plus"
    NO_NEWLINE = "no_newline"
    BINARY = "binary"
    RAW = "raw"  # unrecognized; treated like context and passed through


class HunkRange(NamedTuple):
    """Line ranges parsed from a hunk header."""
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    extra: str  # text after the closing @@ (usually the enclosing function)


@dataclass(frozen=True)
class DiffLine:
    """A single classified input line.

    Attributes:
        kind: The line's kind.
        raw_text: The line exactly as read (ANSI escapes removed, no newline).
        origin_offset: Zero-based index of the line in the input stream.
        hunk_range: Parsed ranges, set only for HUNK_HEADER lines.
    """
    kind: LineKind
    raw_text: str
    origin_offset: int
    hunk_range: Optional[HunkRange] = None

    @property
    def content(self) -> str:
        """Line text without its one-character diff marker."""
        if self.kind in (LineKind.MINUS, LineKind.PLUS, LineKind.CONTEXT):
            return self.raw_text[1:]
        return self.raw_text

    @property
    def marker(self) -> str:
        """The diff marker character, or an empty string."""
        if self.kind in (LineKind.MINUS, LineKind.PLUS, LineKind.CONTEXT):
            return self.raw_text[:1] or " "
        return ""


def strip_ansi(text: str) -> str:
    """Remove terminal escape sequences from text."""
    if "\x1b" not in text:
        return text
    return ANSI_ESCAPE.sub("", text)


def decode_line(raw: Union[bytes, str]) -> str:
    """Decode an input line, dropping its line terminator.

    Undecodable bytes are kept as surrogate escapes so they can be written
    back out unchanged.
    """
    if isinstance(raw, bytes):
        text = raw.decode("utf-8", errors="surrogateescape")
    else:
        text = raw
    if text.endswith("\n"):
        text = text[:-1]
    if text.endswith("\r"):
        text = text[:-1]
    return text


def parse_hunk_header(text: str) -> Optional[HunkRange]:
    """Parse ``@@ -a,b +c,d @@ extra``; a missing count means 1."""
    match = HUNK_HEADER.match(text)
    if not match:
        return None
    return HunkRange(
        old_start=int(match.group(1)),
        old_count=int(match.group(2)) if match.group(2) is not None else 1,
        new_start=int(match.group(3)),
        new_count=int(match.group(4)) if match.group(4) is not None else 1,
        extra=match.group(5).strip(),
    )


class LineClassifier:
    """Stateful, lookahead-free classifier for a stream of diff lines."""

    def __init__(self):
        self._offset = 0
        self._old_remaining = 0
        self._new_remaining = 0
        self._in_extended_header = False
        self._in_binary_patch = False

    @property
    def in_hunk(self) -> bool:
        """True while the current hunk header still expects content lines."""
        return self._old_remaining > 0 or self._new_remaining > 0

    def enter_hunk(self, old_count: int, new_count: int) -> None:
        """Start expecting hunk content, as if a header had just been read."""
        self._old_remaining = old_count
        self._new_remaining = new_count
        self._in_extended_header = False
        self._in_binary_patch = False

    def classify(self, raw: Union[bytes, str]) -> DiffLine:
        """Classify the next input line.

        Args:
            raw: One input line (bytes or str), with or without terminator.

        Returns:
            The classified line. Never raises for unexpected input.
        """
        text = strip_ansi(decode_line(raw))
        offset = self._offset
        self._offset += 1

        if self.in_hunk:
            kind = self._classify_in_hunk(text)
            if kind is not None:
                return DiffLine(kind, text, offset)

        return self._classify_outside_hunk(text, offset)

    def _classify_in_hunk(self, text: str) -> Optional[LineKind]:
        first = text[:1]
        if first == "-":
            self._old_remaining = max(0, self._old_remaining - 1)
            return LineKind.MINUS
        if first == "+":
            self._new_remaining = max(0, self._new_remaining - 1)
            return LineKind.PLUS
        if first == " " or text == "":
            self._old_remaining = max(0, self._old_remaining - 1)
            self._new_remaining = max(0, self._new_remaining - 1)
            return LineKind.CONTEXT
        if first == "\\":
            return LineKind.NO_NEWLINE

        # The header promised more lines than arrived. Drop out of the hunk
        # and let the outside rules decide (new header, new file, or raw).
        logger.debug(
            "hunk ended early with %d old / %d new lines outstanding",
            self._old_remaining, self._new_remaining,
        )
        self._old_remaining = 0
        self._new_remaining = 0
        return None

    def _classify_outside_hunk(self, text: str, offset: int) -> DiffLine:
        hunk_range = parse_hunk_header(text)
        if hunk_range is not None:
            self.enter_hunk(hunk_range.old_count, hunk_range.new_count)
            return DiffLine(LineKind.HUNK_HEADER, text, offset, hunk_range)

        if text.startswith("diff "):
            self._in_extended_header = True
            self._in_binary_patch = False
            return DiffLine(LineKind.FILE_META, text, offset)

        if text.startswith("--- ") or text.startswith("+++ "):
            self._in_binary_patch = False
            return DiffLine(LineKind.FILE_META, text, offset)

        if self._in_extended_header and text.startswith(EXTENDED_HEADER_PREFIXES):
            return DiffLine(LineKind.FILE_META, text, offset)

        if text.startswith(BINARY_FILES_PREFIX) and text.endswith(BINARY_FILES_SUFFIX):
            self._in_extended_header = False
            return DiffLine(LineKind.BINARY, text, offset)

        if text == GIT_BINARY_PATCH:
            self._in_extended_header = False
            self._in_binary_patch = True
            return DiffLine(LineKind.BINARY, text, offset)

        if self._in_binary_patch:
            return DiffLine(LineKind.BINARY, text, offset)

        if text.startswith("\\"):
            return DiffLine(LineKind.NO_NEWLINE, text, offset)

        self._in_extended_header = False
        return DiffLine(LineKind.RAW, text, offset)


def classify_line(text: str, in_hunk: bool = True) -> LineKind:
    """Classify a single line in isolation.

    Args:
        text: The line to classify.
        in_hunk: Whether to treat the line as appearing inside a hunk.

    Returns:
        The line's kind.
    """
    classifier = LineClassifier()
    if in_hunk:
        classifier.enter_hunk(1, 1)
    return classifier.classify(text).kind

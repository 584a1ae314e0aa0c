# diffshade/parser.py
"""Hunk assembler: groups classified lines into hunks and file patches.

The assembler consumes DiffLines one at a time and reports what became
ready to render as a list of AssemblerEvents. Only the currently open hunk
is buffered, so memory is bounded by the largest hunk, not by the input.

A hunk closes when the next hunk header or file header arrives, at end of
input, or as soon as the old and new counts from its header are both
satisfied (so interactive input renders without waiting for more lines).

For callers that want the whole structure at once, parse_unified_diff()
runs the classifier and assembler over a complete string and returns the
FilePatches with their hunks retained.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .classifier import DiffLine, LineClassifier, LineKind

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"

# git's default a/ b/ prefixes plus its diff.mnemonicPrefix variants; only
# stripped from git patches, where they never name a real directory
GIT_PATH_PREFIX = re.compile(r"^[abciow]/")
DIFF_GIT_PATHS = re.compile(r'^diff --git ("(?:[^"\\]|\\.)*"|\S+) ("(?:[^"\\]|\\.)*"|\S+)$')
BINARY_FILES_PATHS = re.compile(r"^Binary files (.+) and (.+) differ$")


@dataclass
class DiffStats:
    """Statistics about a diff."""
    added: int = 0
    deleted: int = 0
    modified: int = 0  # Minus/plus lines paired with each other

    @property
    def total_changes(self) -> int:
        return self.added + self.deleted + self.modified

    def __str__(self) -> str:
        parts = []
        if self.added:
            parts.append(f"+{self.added}")
        if self.deleted:
            parts.append(f"-{self.deleted}")
        if self.modified:
            parts.append(f"~{self.modified}")
        return ", ".join(parts) if parts else "no changes"


@dataclass
class Hunk:
    """A hunk of changes scoped to one region of a file.

    Mutable only while the assembler holds it open; frozen once closed.
    """
    old_range: Tuple[int, int]  # (start, count)
    new_range: Tuple[int, int]
    header_text: str
    header_extra: str = ""  # Text after the closing @@ (e.g., function name)
    lines: List[DiffLine] = field(default_factory=list)
    closed: bool = False
    old_seen: int = 0  # Old-side lines appended so far
    new_seen: int = 0

    @classmethod
    def from_header(cls, line: DiffLine) -> "Hunk":
        """Create an open hunk from a HUNK_HEADER line."""
        hunk_range = line.hunk_range
        if hunk_range is None:
            raise ValueError(f"not a hunk header: {line.raw_text!r}")
        return cls(
            old_range=(hunk_range.old_start, hunk_range.old_count),
            new_range=(hunk_range.new_start, hunk_range.new_count),
            header_text=line.raw_text,
            header_extra=hunk_range.extra,
        )

    @property
    def old_start(self) -> int:
        return self.old_range[0]

    @property
    def new_start(self) -> int:
        return self.new_range[0]

    @property
    def max_line_number(self) -> int:
        """Largest line number this hunk can display on either side."""
        return max(sum(self.old_range), sum(self.new_range))

    @property
    def is_complete(self) -> bool:
        """True once the header's old and new counts are both satisfied."""
        return self.old_seen >= self.old_range[1] and self.new_seen >= self.new_range[1]

    def append(self, line: DiffLine) -> None:
        if self.closed:
            raise ValueError("cannot append to a closed hunk")
        self.lines.append(line)
        if line.kind in (LineKind.CONTEXT, LineKind.MINUS):
            self.old_seen += 1
        if line.kind in (LineKind.CONTEXT, LineKind.PLUS):
            self.new_seen += 1

    def close(self) -> None:
        self.closed = True


@dataclass
class FilePatch:
    """The diff of a single file."""
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    hunks: List[Hunk] = field(default_factory=list)
    is_binary: bool = False
    meta_lines: List[DiffLine] = field(default_factory=list)
    rename_from: Optional[str] = None
    rename_to: Optional[str] = None
    is_git: bool = False  # Opened by a "diff --git" line

    @property
    def is_new_file(self) -> bool:
        """Check if this diff represents a new file."""
        return self.old_path == DEV_NULL or self._has_meta("new file mode ")

    @property
    def is_deleted_file(self) -> bool:
        """Check if this diff represents a deleted file."""
        return self.new_path == DEV_NULL or self._has_meta("deleted file mode ")

    @property
    def is_rename(self) -> bool:
        old, new = self._display_paths()
        return bool(old and new and old != new and not self.is_new_file
                    and not self.is_deleted_file)

    @property
    def display_path(self) -> str:
        """Get the most relevant path for display."""
        old, new = self._display_paths()
        if self.is_rename:
            return f"{old} ⟶ {new}"
        if self.is_deleted_file:
            return old or new or ""
        return new or old or ""

    @property
    def language_path(self) -> str:
        """Path used to pick a syntax for this file's content."""
        old, new = self._display_paths()
        if self.is_deleted_file:
            return old or ""
        return new or old or ""

    @property
    def notes(self) -> List[str]:
        """Extended-header facts worth showing under the file header."""
        notes = []
        for line in self.meta_lines:
            text = line.raw_text
            if text.startswith(("new file mode ", "deleted file mode ",
                                "old mode ", "new mode ", "similarity index ",
                                "dissimilarity index ", "copy from ", "copy to ")):
                notes.append(text)
        return notes

    @property
    def stats(self) -> DiffStats:
        """Calculate statistics from retained hunks."""
        from .pairing import compute_stats
        return compute_stats(self.hunks)

    def _has_meta(self, prefix: str) -> bool:
        return any(line.raw_text.startswith(prefix) for line in self.meta_lines)

    def _display_paths(self) -> Tuple[Optional[str], Optional[str]]:
        old = self.rename_from or self._display_path(self.old_path)
        new = self.rename_to or self._display_path(self.new_path)
        return old, new

    def _display_path(self, path: Optional[str]) -> Optional[str]:
        return _strip_path_prefix(path) if self.is_git else path


class EventKind(Enum):
    """What the assembler has made ready."""
    FILE_START = "file_start"    # File header can be rendered
    HUNK = "hunk"                # A hunk closed
    BINARY = "binary"            # Current file is binary; render the notice
    PASSTHROUGH = "passthrough"  # A line outside any hunk, render verbatim
    FILE_END = "file_end"        # Current file patch is finished


@dataclass(frozen=True)
class AssemblerEvent:
    kind: EventKind
    patch: Optional[FilePatch] = None
    hunk: Optional[Hunk] = None
    line: Optional[DiffLine] = None


def _strip_path_prefix(path: Optional[str]) -> Optional[str]:
    if path is None or path == DEV_NULL:
        return None if path is None else path
    return GIT_PATH_PREFIX.sub("", path, count=1)


def _unquote(path: str) -> str:
    """Undo git's C-style quoting of paths with unusual characters."""
    if len(path) >= 2 and path[0] == path[-1] == '"':
        # Octal escapes encode UTF-8 bytes one at a time
        unescaped = path[1:-1].encode("utf-8").decode("unicode_escape")
        return unescaped.encode("latin-1").decode("utf-8", errors="replace")
    return path


def _parse_header_path(text: str) -> str:
    """Extract the path from a ``--- path<TAB>timestamp`` line."""
    path = text[4:]
    if "\t" in path:
        path = path.split("\t", 1)[0]
    return _unquote(path.rstrip())


class HunkAssembler:
    """Streaming assembler from DiffLines to hunks and file patches.

    Args:
        retain_hunks: Keep closed hunks on their FilePatch. Off for
            streaming use, where each hunk is rendered and dropped.
    """

    def __init__(self, retain_hunks: bool = False):
        self._retain_hunks = retain_hunks
        self._patch: Optional[FilePatch] = None
        self._patch_started = False
        self._hunk: Optional[Hunk] = None
        self._binary_reported = False

    @property
    def current_patch(self) -> Optional[FilePatch]:
        return self._patch

    @property
    def current_hunk(self) -> Optional[Hunk]:
        return self._hunk

    def feed(self, line: DiffLine) -> List[AssemblerEvent]:
        """Accept the next classified line.

        Args:
            line: A classified line.

        Returns:
            Events for everything that became ready, in output order.
        """
        events: List[AssemblerEvent] = []
        kind = line.kind

        if kind == LineKind.FILE_META:
            self._close_hunk(events)
            self._on_file_meta(line, events)
        elif kind == LineKind.HUNK_HEADER:
            self._close_hunk(events)
            if self._patch is None:
                self._open_patch(events)
            self._start_patch(events)
            self._hunk = Hunk.from_header(line)
        elif kind in (LineKind.MINUS, LineKind.PLUS, LineKind.CONTEXT):
            if self._hunk is None:
                events.append(AssemblerEvent(EventKind.PASSTHROUGH, self._patch, line=line))
            else:
                self._hunk.append(line)
                if self._hunk.is_complete:
                    self._close_hunk(events)
        elif kind == LineKind.NO_NEWLINE:
            if self._hunk is None:
                events.append(AssemblerEvent(EventKind.PASSTHROUGH, self._patch, line=line))
            else:
                self._hunk.append(line)
        elif kind == LineKind.BINARY:
            self._close_hunk(events)
            if self._patch is None:
                self._open_patch(events)
            self._patch.is_binary = True
            self._binary_paths(line.raw_text)
            self._start_patch(events)
            if not self._binary_reported:
                self._binary_reported = True
                events.append(AssemblerEvent(EventKind.BINARY, self._patch, line=line))
        else:
            self._close_hunk(events)
            events.append(AssemblerEvent(EventKind.PASSTHROUGH, self._patch, line=line))

        return events

    def finish(self) -> List[AssemblerEvent]:
        """Flush the open hunk and file patch at end of input."""
        events: List[AssemblerEvent] = []
        self._close_hunk(events)
        self._close_patch(events)
        return events

    def _on_file_meta(self, line: DiffLine, events: List[AssemblerEvent]) -> None:
        text = line.raw_text

        if text.startswith("diff "):
            self._open_patch(events)
            self._patch.is_git = text.startswith("diff --git ")
            match = DIFF_GIT_PATHS.match(text)
            if match:
                self._patch.old_path = _unquote(match.group(1))
                self._patch.new_path = _unquote(match.group(2))
        elif text.startswith("--- "):
            # Plain "diff -u" output has no "diff" line; a second "---" after
            # content means the next file has begun.
            if (self._patch is None or self._patch_started
                    or self._has_meta_prefix("--- ")):
                self._open_patch(events)
            self._patch.old_path = _parse_header_path(text)
        elif text.startswith("+++ "):
            if self._patch is None or self._patch_started:
                self._open_patch(events)
            self._patch.new_path = _parse_header_path(text)
        elif self._patch is not None:
            if text.startswith("rename from "):
                self._patch.rename_from = _unquote(text[len("rename from "):])
            elif text.startswith("rename to "):
                self._patch.rename_to = _unquote(text[len("rename to "):])
        else:
            self._open_patch(events)

        self._patch.meta_lines.append(line)

    def _binary_paths(self, text: str) -> None:
        match = BINARY_FILES_PATHS.match(text)
        if match and self._patch.old_path is None and self._patch.new_path is None:
            self._patch.old_path = match.group(1)
            self._patch.new_path = match.group(2)

    def _has_meta_prefix(self, prefix: str) -> bool:
        return self._patch is not None and self._patch._has_meta(prefix)

    def _open_patch(self, events: List[AssemblerEvent]) -> None:
        self._close_patch(events)
        self._patch = FilePatch()
        self._patch_started = False
        self._binary_reported = False

    def _start_patch(self, events: List[AssemblerEvent]) -> None:
        if not self._patch_started:
            self._patch_started = True
            events.append(AssemblerEvent(EventKind.FILE_START, self._patch))

    def _close_patch(self, events: List[AssemblerEvent]) -> None:
        if self._patch is None:
            return
        self._start_patch(events)
        events.append(AssemblerEvent(EventKind.FILE_END, self._patch))
        self._patch = None
        self._patch_started = False

    def _close_hunk(self, events: List[AssemblerEvent]) -> None:
        if self._hunk is None:
            return
        hunk = self._hunk
        hunk.close()
        self._hunk = None
        if self._retain_hunks and self._patch is not None:
            self._patch.hunks.append(hunk)
        events.append(AssemblerEvent(EventKind.HUNK, self._patch, hunk=hunk))


def iter_events(lines: Iterable[str], retain_hunks: bool = False) -> Iterable[AssemblerEvent]:
    """Classify and assemble an iterable of raw lines into events."""
    classifier = LineClassifier()
    assembler = HunkAssembler(retain_hunks=retain_hunks)
    for raw in lines:
        yield from assembler.feed(classifier.classify(raw))
    yield from assembler.finish()


def parse_unified_diff(diff_text: str) -> List[FilePatch]:
    """Parse unified diff text into structured form.

    Args:
        diff_text: Standard unified diff output, possibly covering many files.

    Returns:
        One FilePatch per file, with hunks retained. Lines outside any
        file patch are ignored.
    """
    patches: List[FilePatch] = []
    for event in iter_events(diff_text.splitlines(), retain_hunks=True):
        if event.kind == EventKind.FILE_END and event.patch is not None:
            patches.append(event.patch)
    return patches

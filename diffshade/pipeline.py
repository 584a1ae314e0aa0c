# diffshade/pipeline.py
"""Streaming pipeline from raw diff lines to terminal output.

    raw line -> LineClassifier -> HunkAssembler -> renderer -> TerminalSink

Lines are read one at a time. Only the open hunk is buffered; each unit
(file header, hunk, binary notice, passthrough line) is written and
flushed as soon as it is ready, so the first output appears before the
input is exhausted.

If the consumer closes the output early (for example ``| head``), the
pipeline stops reading and reports success.
"""

import io
import logging
from enum import Enum
from typing import BinaryIO, Iterable, List, Optional, Union

from rich.color import ColorSystem

from .classifier import DiffLine, LineClassifier, LineKind
from .config import DiffConfig
from .parser import AssemblerEvent, EventKind, HunkAssembler
from .renderers import create_renderer
from .syntax_highlight import PygmentsHighlighter, SyntaxHighlighter

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Where the pipeline is in the input."""
    START = "start"                      # No file patch open yet
    IN_FILE_PATCH = "in_file_patch"      # Between hunks of a file
    IN_HUNK = "in_hunk"                  # Reading a hunk's context lines
    IN_CHANGE_BLOCK = "in_change_block"  # Reading removed/added lines
    END = "end"                          # Input finished or output closed


class TerminalSink:
    """Writes rendered lines to a binary stream.

    Text is encoded as UTF-8; bytes that were undecodable on input are
    written back unchanged.

    Args:
        stream: Binary output stream (e.g., sys.stdout.buffer).
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.lines_written = 0

    def write_lines(self, lines: List[str]) -> None:
        """Write one unit of output and flush it."""
        if not lines:
            return
        data = "".join(line + "\n" for line in lines)
        self._stream.write(data.encode("utf-8", errors="surrogateescape"))
        self._stream.flush()
        self.lines_written += len(lines)


class DiffPipeline:
    """Drives classification, assembly and rendering for one input stream.

    Args:
        config: Display options; defaults to DiffConfig().
        sink: Where output goes; defaults to an in-memory buffer.
        highlighter: Syntax highlighter; defaults to PygmentsHighlighter
            (ignored when config.syntax is False).
        color_system: Terminal colour capability; None for plain text.
    """

    def __init__(
        self,
        config: Optional[DiffConfig] = None,
        sink: Optional[TerminalSink] = None,
        highlighter: Optional[SyntaxHighlighter] = None,
        color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR,
    ):
        self.config = config or DiffConfig()
        self.sink = sink or TerminalSink(io.BytesIO())
        if not self.config.syntax:
            highlighter = None
        elif highlighter is None:
            highlighter = PygmentsHighlighter()

        self._classifier = LineClassifier()
        self._assembler = HunkAssembler()
        self._renderer = create_renderer(self.config, highlighter, color_system)
        self._state = PipelineState.START
        self.output_closed = False

    @property
    def state(self) -> PipelineState:
        return self._state

    def feed(self, raw: Union[bytes, str]) -> None:
        """Process one input line, writing whatever became ready.

        Raises:
            RuntimeError: If called after finish().
            BrokenPipeError: If the output was closed.
            CompositionError: If a line could not be rendered faithfully.
        """
        if self._state == PipelineState.END:
            raise RuntimeError("pipeline already finished")

        line = self._classifier.classify(raw)
        self._emit(self._assembler.feed(line))
        self._advance(line)

    def finish(self) -> None:
        """Flush the open hunk and file patch at end of input."""
        if self._state == PipelineState.END:
            return
        self._emit(self._assembler.finish())
        self._state = PipelineState.END

    def run(self, lines: Iterable[Union[bytes, str]]) -> int:
        """Process a whole input stream.

        Returns:
            Exit status: 0, including when the output was closed early.
        """
        try:
            for raw in lines:
                self.feed(raw)
            self.finish()
        except BrokenPipeError:
            logger.debug("output closed after %d lines; stopping", self.sink.lines_written)
            self._state = PipelineState.END
            self.output_closed = True
        return 0

    def _advance(self, line: DiffLine) -> None:
        if self._assembler.current_hunk is not None:
            if line.kind in (LineKind.MINUS, LineKind.PLUS):
                self._state = PipelineState.IN_CHANGE_BLOCK
            elif line.kind != LineKind.NO_NEWLINE:
                self._state = PipelineState.IN_HUNK
        elif self._assembler.current_patch is not None:
            self._state = PipelineState.IN_FILE_PATCH
        else:
            self._state = PipelineState.START

    def _emit(self, events: List[AssemblerEvent]) -> None:
        renderer = self._renderer
        for event in events:
            if event.kind == EventKind.FILE_START:
                lines = renderer.render_file_header(event.patch)
                if lines and self.sink.lines_written:
                    lines = [""] + lines
            elif event.kind == EventKind.HUNK:
                lines = renderer.render_hunk(event.hunk)
            elif event.kind == EventKind.BINARY:
                lines = renderer.render_binary(event.patch)
            elif event.kind == EventKind.PASSTHROUGH:
                lines = renderer.render_passthrough(event.line)
            else:
                continue
            self.sink.write_lines(lines)


def render_diff(
    diff_text: str,
    config: Optional[DiffConfig] = None,
    highlighter: Optional[SyntaxHighlighter] = None,
    color_system: Optional[ColorSystem] = None,
) -> str:
    """Render a complete diff to a string.

    Args:
        diff_text: Unified diff text.
        config: Display options.
        highlighter: Syntax highlighter (see DiffPipeline).
        color_system: Colour capability; None (the default) gives plain text.

    Returns:
        The rendered output.
    """
    buffer = io.BytesIO()
    pipeline = DiffPipeline(config, TerminalSink(buffer), highlighter, color_system)
    pipeline.run(diff_text.splitlines())
    return buffer.getvalue().decode("utf-8", errors="surrogateescape")

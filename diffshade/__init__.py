# diffshade/__init__.py
"""diffshade - syntax-highlighting pager filter for unified diffs.

Reads git/unified diff output as a stream and re-renders it for the
terminal: syntax highlighting of changed code, word-level emphasis of
what changed within paired lines, optional line numbers and a
side-by-side layout.

Usage:
    from diffshade import DiffConfig, render_diff

    print(render_diff(diff_text, DiffConfig(side_by_side=True, width=120)))
"""

__version__ = "0.1.0"

from .classifier import DiffLine, LineClassifier, LineKind, classify_line
from .compose import RenderedLine, StyledSpan, compose_line
from .config import DiffConfig, load_config
from .errors import CompositionError, ConfigError, DiffShadeError
from .pairing import ChangeBlock, LinePairing, get_paired_lines, pair_block, pair_hunk
from .parser import DiffStats, FilePatch, Hunk, HunkAssembler, parse_unified_diff
from .pipeline import DiffPipeline, PipelineState, TerminalSink, render_diff
from .syntax_highlight import NullHighlighter, PygmentsHighlighter, SyntaxHighlighter
from .word_diff import EditKind, EditSpan, WordDiff, compute_word_diff

__all__ = [
    "__version__",
    "ChangeBlock",
    "CompositionError",
    "ConfigError",
    "DiffConfig",
    "DiffLine",
    "DiffPipeline",
    "DiffShadeError",
    "DiffStats",
    "EditKind",
    "EditSpan",
    "FilePatch",
    "Hunk",
    "HunkAssembler",
    "LineClassifier",
    "LineKind",
    "LinePairing",
    "NullHighlighter",
    "PipelineState",
    "PygmentsHighlighter",
    "RenderedLine",
    "StyledSpan",
    "SyntaxHighlighter",
    "TerminalSink",
    "WordDiff",
    "classify_line",
    "compose_line",
    "compute_word_diff",
    "get_paired_lines",
    "load_config",
    "pair_block",
    "pair_hunk",
    "parse_unified_diff",
    "render_diff",
]

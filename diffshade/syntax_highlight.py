# diffshade/syntax_highlight.py
"""Syntax highlighting support for diff content.

The rest of diffshade only depends on the narrow SyntaxHighlighter
protocol: one line of text plus a language hint and a theme name in,
an ordered list of (substring, style) pieces covering the line out.
PygmentsHighlighter is the default implementation: Pygments lexes the
line and Rich's syntax themes turn token types into styles.

Highlighting is best effort. Unknown languages, unknown themes and lexer
errors all result in None, and callers fall back to diff-only styling.
"""

import logging
import os
from functools import lru_cache
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.styles import get_all_styles
from pygments.util import ClassNotFound
from rich.style import Style
from rich.syntax import RICH_SYNTAX_THEMES, Syntax, SyntaxTheme

logger = logging.getLogger(__name__)

SyntaxSpans = List[Tuple[str, Style]]

DEFAULT_THEME = "monokai"
DEFAULT_LIGHT_THEME = "default"

# File extension to Pygments lexer name mapping for common cases
EXTENSION_MAP = {
    '.py': 'python',
    '.pyi': 'python',
    '.js': 'javascript',
    '.mjs': 'javascript',
    '.ts': 'typescript',
    '.tsx': 'tsx',
    '.jsx': 'jsx',
    '.rb': 'ruby',
    '.go': 'go',
    '.rs': 'rust',
    '.java': 'java',
    '.c': 'c',
    '.cpp': 'cpp',
    '.cc': 'cpp',
    '.h': 'c',
    '.hpp': 'cpp',
    '.cs': 'csharp',
    '.php': 'php',
    '.swift': 'swift',
    '.kt': 'kotlin',
    '.scala': 'scala',
    '.sh': 'bash',
    '.bash': 'bash',
    '.zsh': 'zsh',
    '.json': 'json',
    '.yaml': 'yaml',
    '.yml': 'yaml',
    '.xml': 'xml',
    '.html': 'html',
    '.css': 'css',
    '.scss': 'scss',
    '.sql': 'sql',
    '.md': 'markdown',
    '.toml': 'toml',
    '.ini': 'ini',
    '.cfg': 'ini',
    '.lua': 'lua',
    '.r': 'r',
    '.pl': 'perl',
    '.pm': 'perl',
}

FILENAME_MAP = {
    'Dockerfile': 'docker',
    'Makefile': 'make',
    'GNUmakefile': 'make',
    'CMakeLists.txt': 'cmake',
}


@runtime_checkable
class SyntaxHighlighter(Protocol):
    """Turns one line of source text into styled pieces."""

    def highlight(
        self, line_text: str, language_hint: Optional[str], theme: str
    ) -> Optional[SyntaxSpans]:
        """Highlight a single line.

        Args:
            line_text: The line, without newline.
            language_hint: A lexer name such as "python", or None.
            theme: Syntax theme name.

        Returns:
            (substring, style) pieces whose concatenation is line_text,
            or None when the line cannot be highlighted.
        """
        ...


class NullHighlighter:
    """Highlighter that never highlights (syntax layer disabled)."""

    def highlight(
        self, line_text: str, language_hint: Optional[str], theme: str
    ) -> Optional[SyntaxSpans]:
        return None


def language_for_path(path: Optional[str]) -> Optional[str]:
    """Pick a Pygments lexer name for a file path.

    Args:
        path: File path or name (may be None for headerless diffs).

    Returns:
        Lexer name, or None if no lexer matches.
    """
    if not path:
        return None

    basename = os.path.basename(path)
    if basename in FILENAME_MAP:
        return FILENAME_MAP[basename]

    # Try extension mapping first
    _, ext = os.path.splitext(basename)
    if ext.lower() in EXTENSION_MAP:
        return EXTENSION_MAP[ext.lower()]

    # Fall back to Pygments filename detection
    return _language_from_pygments(basename)


@lru_cache(maxsize=256)
def _language_from_pygments(basename: str) -> Optional[str]:
    try:
        lexer = get_lexer_for_filename(basename)
    except ClassNotFound:
        logger.debug("no lexer for %s", basename)
        return None
    return lexer.aliases[0] if lexer.aliases else lexer.name


@lru_cache(maxsize=64)
def _get_lexer(language: str) -> Optional[Lexer]:
    """Get a Pygments lexer that preserves line text exactly (cached)."""
    try:
        return get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        logger.debug("unknown language %r", language)
        return None


@lru_cache(maxsize=16)
def _get_theme(theme: str) -> SyntaxTheme:
    """Get a Rich syntax theme (cached). Unknown names fall back to Pygments' default."""
    return Syntax.get_theme(theme)


def available_themes() -> List[str]:
    """Names accepted as syntax themes."""
    return sorted(set(get_all_styles()) | set(RICH_SYNTAX_THEMES))


def is_known_theme(theme: str) -> bool:
    return theme in RICH_SYNTAX_THEMES or theme in set(get_all_styles())


def _foreground_only(style: Style) -> Style:
    # Theme backgrounds would paint over the terminal and the diff layer.
    return Style(
        color=style.color,
        bold=style.bold,
        italic=style.italic,
        underline=style.underline,
    )


class PygmentsHighlighter:
    """SyntaxHighlighter backed by Pygments lexers and Rich syntax themes."""

    def highlight(
        self, line_text: str, language_hint: Optional[str], theme: str
    ) -> Optional[SyntaxSpans]:
        if not language_hint:
            return None

        lexer = _get_lexer(language_hint)
        if lexer is None:
            return None

        syntax_theme = _get_theme(theme)
        spans: SyntaxSpans = []
        for token_type, value in lexer.get_tokens(line_text):
            if not value:
                continue
            style = _foreground_only(syntax_theme.get_style_for_token(token_type))
            if spans and spans[-1][1] == style:
                spans[-1] = (spans[-1][0] + value, style)
            else:
                spans.append((value, style))
        return spans


def safe_highlight(
    highlighter: Optional[SyntaxHighlighter],
    line_text: str,
    language_hint: Optional[str],
    theme: str,
) -> Optional[SyntaxSpans]:
    """Call a highlighter, turning any engine failure into None."""
    if highlighter is None:
        return None
    try:
        return highlighter.highlight(line_text, language_hint, theme)
    except Exception as e:
        logger.debug("syntax highlighting failed for %r: %s", language_hint, e)
        return None


# diffshade/conftest.py
"""Shared fixtures for diffshade tests."""

import re

import pytest
from rich.style import Style

from .classifier import strip_ansi
from .config import DiffConfig

IDENTIFIER_STYLE = Style(color="green")
WORD_OR_NOT = re.compile(r"\w+|\W+")


class FakeHighlighter:
    """Colours identifiers green and leaves everything else unstyled."""

    def __init__(self):
        self.calls = []

    def highlight(self, line_text, language_hint, theme):
        self.calls.append((line_text, language_hint, theme))
        return [
            (piece, IDENTIFIER_STYLE if piece[0].isalnum() or piece[0] == "_" else Style())
            for piece in WORD_OR_NOT.findall(line_text)
        ]


class FailingHighlighter:
    def highlight(self, line_text, language_hint, theme):
        raise RuntimeError("lexer exploded")


class MismatchedHighlighter:
    """Returns pieces that do not spell the line."""

    def highlight(self, line_text, language_hint, theme):
        return [(line_text.upper() + "!", IDENTIFIER_STYLE)]


@pytest.fixture
def fake_highlighter():
    return FakeHighlighter()


@pytest.fixture
def plain_config():
    """Config without syntax highlighting at a fixed width."""
    return DiffConfig(width=40, syntax=False)


def visible_lines(output: str):
    """Output lines with escapes and trailing fill removed."""
    return [strip_ansi(line).rstrip() for line in output.split("\n")][:-1]

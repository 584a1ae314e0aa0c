# diffshade/renderers/__init__.py
"""Diff renderers for unified and side-by-side layouts."""

from typing import Optional

from rich.color import ColorSystem

from ..syntax_highlight import SyntaxHighlighter
from .base import (
    BaseRenderer,
    ColorScheme,
    DARK_COLOR_SCHEME,
    LIGHT_COLOR_SCHEME,
    build_color_scheme,
)
from .side_by_side import SideBySideRenderer
from .unified import UnifiedRenderer


def create_renderer(config, highlighter: Optional[SyntaxHighlighter] = None,
                    color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR) -> BaseRenderer:
    """Create the renderer selected by config.side_by_side.

    Raises:
        ConfigError: If config.styles holds an invalid style definition.
    """
    colors = build_color_scheme(config.light, config.styles)
    renderer_class = SideBySideRenderer if config.side_by_side else UnifiedRenderer
    return renderer_class(config, colors, highlighter, color_system)


__all__ = [
    "BaseRenderer",
    "ColorScheme",
    "DARK_COLOR_SCHEME",
    "LIGHT_COLOR_SCHEME",
    "build_color_scheme",
    "create_renderer",
    "UnifiedRenderer",
    "SideBySideRenderer",
]

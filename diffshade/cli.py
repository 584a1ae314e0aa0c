# diffshade/cli.py
"""Command line interface for diffshade.

Reads a unified diff from files or standard input and writes it with
syntax highlighting and word-level change emphasis.

Usage:
    git diff | diffshade
    git diff | diffshade --side-by-side --line-numbers
    diffshade changes.patch --theme ansi_dark --width 120
    diffshade --list-themes
"""

import argparse
import logging
import os
import sys
from typing import BinaryIO, Iterator, List, Optional

from rich.color import ColorSystem
from rich.console import Console

from . import __version__
from .config import COLOR_CHOICES, load_config
from .errors import ConfigError
from .pipeline import DiffPipeline, TerminalSink
from .syntax_highlight import available_themes

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "DIFFSHADE_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffshade",
        description="Syntax-highlighting pager filter for unified diffs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  git diff | diffshade
  git diff | diffshade --side-by-side --line-numbers
  diff -u old.py new.py | diffshade --light
        """,
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Diff files to read (default: standard input)",
    )

    # Layout
    parser.add_argument(
        "--side-by-side", "-s",
        action="store_true",
        default=None,
        help="Show old and new versions in two panels",
    )
    parser.add_argument(
        "--line-numbers", "-n",
        action="store_true",
        default=None,
        help="Show a line-number gutter",
    )
    parser.add_argument(
        "--width", "-w",
        type=int,
        metavar="COLUMNS",
        help="Output width (default: terminal width)",
    )
    parser.add_argument(
        "--tabs",
        type=int,
        dest="tab_width",
        metavar="N",
        help="Tab stop distance (default: 4)",
    )
    parser.add_argument(
        "--no-wrap",
        action="store_false",
        dest="wrap",
        default=None,
        help="Truncate long lines instead of wrapping them",
    )
    parser.add_argument(
        "--keep-markers",
        action="store_true",
        default=None,
        help="Keep the +/- marker column",
    )

    # Highlighting
    parser.add_argument(
        "--theme",
        help="Syntax theme (see --list-themes)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--light",
        action="store_true",
        default=None,
        help="Use colours for a light terminal background",
    )
    mode.add_argument(
        "--dark",
        action="store_false",
        dest="light",
        help="Use colours for a dark terminal background (default)",
    )
    parser.add_argument(
        "--no-syntax",
        action="store_false",
        dest="syntax",
        default=None,
        help="Disable syntax highlighting",
    )
    parser.add_argument(
        "--min-similarity",
        type=float,
        metavar="RATIO",
        help="Least similarity (0-1) for word-level highlighting (default: 0.4)",
    )
    parser.add_argument(
        "--color",
        choices=COLOR_CHOICES,
        help="When to use colour (default: auto)",
    )

    # Configuration
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Config file (default: $DIFFSHADE_CONFIG or ~/.config/diffshade/config.yaml)",
    )
    parser.add_argument(
        "--list-themes",
        action="store_true",
        help="List available syntax themes and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help=f"Diagnostic log level (default: ${LOG_LEVEL_ENV_VAR} or WARNING)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging (same as --log-level DEBUG)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def configure_logging(args: argparse.Namespace) -> None:
    """Send diagnostics to stderr so they never mix with diff output."""
    if args.verbose:
        level = "DEBUG"
    else:
        level = args.log_level or os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    if level not in LOG_LEVELS:
        level = "WARNING"
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def detect_color_system(mode: str, stream) -> Optional[ColorSystem]:
    """Resolve the --color mode to the terminal's colour capability."""
    if mode == "never":
        return None
    console = Console(file=stream, force_terminal=True if mode == "always" else None)
    name = console.color_system
    return _COLOR_SYSTEMS.get(name) if name else None


def detect_width(stream) -> int:
    return Console(file=stream).width


def iter_input(paths: List[str], stdin: BinaryIO) -> Iterator[bytes]:
    """Yield raw lines from the given files in order, or from stdin."""
    if not paths:
        yield from stdin
        return
    for path in paths:
        with open(path, "rb") as f:
            yield from f


def main(argv: Optional[List[str]] = None) -> int:
    """Run diffshade.

    Returns:
        Exit status: 0 on success (including a closed output pipe),
        1 for unreadable input, 2 for configuration errors, 130 on Ctrl-C.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args)

    if args.list_themes:
        for name in available_themes():
            print(name)
        return 0

    overrides = {
        "theme": args.theme,
        "light": args.light,
        "side_by_side": args.side_by_side,
        "width": args.width,
        "tab_width": args.tab_width,
        "line_numbers": args.line_numbers,
        "min_similarity": args.min_similarity,
        "keep_markers": args.keep_markers,
        "wrap": args.wrap,
        "color": args.color,
        "syntax": args.syntax,
    }
    try:
        config = load_config(args.config, overrides)
    except ConfigError as e:
        print(f"diffshade: error: {e}", file=sys.stderr)
        return 2

    if config.width is None:
        config.width = detect_width(sys.stdout)
    color_system = detect_color_system(config.color, sys.stdout)
    logger.debug("width=%d color_system=%s", config.width, color_system)

    try:
        pipeline = DiffPipeline(config, TerminalSink(sys.stdout.buffer),
                                color_system=color_system)
    except ConfigError as e:
        print(f"diffshade: error: {e}", file=sys.stderr)
        return 2

    try:
        status = pipeline.run(iter_input(args.files, sys.stdin.buffer))
    except OSError as e:
        print(f"diffshade: error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    if pipeline.output_closed:
        # Python would report the broken pipe again when flushing stdout at exit
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    return status


def run() -> None:
    sys.exit(main())

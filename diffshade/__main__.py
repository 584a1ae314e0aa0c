# diffshade/__main__.py
"""Entry point for ``python -m diffshade``."""

from .cli import run

if __name__ == "__main__":
    run()

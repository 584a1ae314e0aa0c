# diffshade/errors.py
"""Exception types raised by diffshade.

Malformed diff input and syntax highlighting failures are never raised;
they degrade to passthrough or diff-only styling. Only configuration
problems and internal consistency violations surface as exceptions.
"""


class DiffShadeError(Exception):
    """Base class for all diffshade errors."""


class ConfigError(DiffShadeError):
    """Invalid configuration value or unreadable configuration file."""


class CompositionError(DiffShadeError, AssertionError):
    """Composed spans no longer reproduce the line they were built from.

    This is a programming error, not a runtime condition: the pipeline
    never catches it.
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"composed spans changed line text: expected {expected!r}, got {actual!r}"
        )

"""Exception hierarchy for the Tiny YAML reader and writer.

Every error raised by :mod:`tinyyaml` derives from :class:`TinyYAMLError`.
Parse errors remember where they happened so callers (and the CLI) can point
at the offending line.
"""

from __future__ import annotations


class TinyYAMLError(Exception):
    """Base exception for all tinyyaml failures."""


class ParseError(TinyYAMLError):
    """Raised when text cannot be read as Tiny YAML.

    Attributes:
        problem: Description of what went wrong
        line: 1-based line number, when known
        text: The offending source line, when known
    """

    def __init__(self, problem: str, line: int | None = None, text: str | None = None) -> None:
        super().__init__(problem)
        self.problem = problem
        self.line = line
        self.text = text

    def locate(self, line: int, text: str | None = None) -> "ParseError":
        """Attach a position unless one was already recorded."""

        if self.line is None:
            self.line = line
            self.text = text
        return self

    def __str__(self) -> str:
        if self.line is None:
            return self.problem
        where = f"{self.problem} at line {self.line}"
        if self.text is not None:
            where += f": {self.text.strip()!r}"
        return where


class YAMLSyntaxError(ParseError):
    """Malformed indentation, tab indentation or an unparseable line."""


class UnsupportedFeatureError(ParseError):
    """Valid YAML that falls outside the Tiny dialect."""


class UnsupportedEscapeError(ParseError):
    """A 16 or 32-bit unicode escape inside a double-quoted scalar."""


class SerializeError(TinyYAMLError):
    """Raised when a value cannot be written as Tiny YAML."""


class CircularReferenceError(SerializeError):
    """A container is reachable through more than one path."""


class UnsupportedTypeError(SerializeError):
    """A Python object with no Tiny YAML representation."""


class EncodingError(TinyYAMLError):
    """Input bytes are not valid UTF-8."""

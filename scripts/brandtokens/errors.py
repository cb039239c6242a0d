"""
Error taxonomy for token loading and export.

Every error is detected at load (or render) time and aborts the run before
any output file is written.
"""

from __future__ import annotations

from typing import Optional


class TokenError(Exception):
    """Base class for all token registry errors.

    Carries the identifying fields of the offending entry so the CLI can
    point at it: ``source:line: [category/name] message``.
    """

    def __init__(
        self,
        message: str,
        *,
        category: Optional[str] = None,
        name: Optional[str] = None,
        line: Optional[int] = None,
        source: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.name = name
        self.line = line
        self.source = source

    def __str__(self) -> str:
        location = ""
        if self.source:
            location = self.source
            if self.line is not None:
                location += f":{self.line}"
            location += ": "
        elif self.line is not None:
            location = f"line {self.line}: "

        ident = ""
        if self.category or self.name:
            ident = f"[{self.category or '?'}/{self.name or '?'}] "

        return f"{location}{ident}{self.message}"


class UnknownCategory(TokenError):
    """A token declares a category outside the closed set."""


class InvalidColorFormat(TokenError):
    """A color value is not a 6-digit hex string."""


class DuplicateToken(TokenError):
    """Two entries share (category, name), or two tokens render to one CSS name."""


class MissingField(TokenError):
    """A required field is absent from an entry."""


class InvalidToken(TokenError):
    """A token name, font record or spacing value is malformed."""


class IOFailure(TokenError):
    """Input unreadable, unparsable, or output unwritable."""

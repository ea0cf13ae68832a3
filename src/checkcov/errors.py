"""Centralised exception hierarchy for checkcov."""

from __future__ import annotations


class CheckcovError(Exception):
    """Base class for all custom checkcov exceptions."""


class NoInputError(CheckcovError):
    """A required input (profile, source root, config file) does not exist."""


class ParseError(CheckcovError):
    """A source file could not be turned into a syntax tree."""

    def __init__(self, path: str, message: str, *, line: int | None = None, column: int | None = None) -> None:
        self.path = path
        self.line = line
        self.column = column
        where = path if line is None else f"{path}:{line}:{column}"
        super().__init__(f"{where}: {message}")


class InvalidTreeError(CheckcovError):
    """A syntax tree was malformed mid-traversal (missing container or sub-part)."""

    def __init__(self, path: str, message: str, *, line: int | None = None, column: int | None = None) -> None:
        self.path = path
        self.line = line
        self.column = column
        where = path if line is None else f"{path}:{line}:{column}"
        super().__init__(f"{where}: {message}")


class ProfileFormatError(CheckcovError):
    """A coverage profile line could not be parsed."""

    def __init__(self, source: str, message: str, *, lineno: int | None = None) -> None:
        self.source = source
        self.lineno = lineno
        where = source if lineno is None else f"{source}:{lineno}"
        super().__init__(f"{where}: {message}")


class ConfigFormatError(CheckcovError):
    """Configuration content is malformed."""

    def __init__(self, source: str, message: str, *, key: str | None = None) -> None:
        self.source = source
        self.key = key
        detail = message if key is None else f"{key}: {message}"
        super().__init__(f"{source}: {detail}")


class LookupMiss(CheckcovError, LookupError):  # noqa: N818
    """A package, file or function has no corresponding coverage or config entry.

    Always recovered where it is raised: callers fall back to defaults.
    """


__all__ = [
    "CheckcovError",
    "ConfigFormatError",
    "InvalidTreeError",
    "LookupMiss",
    "NoInputError",
    "ParseError",
    "ProfileFormatError",
]

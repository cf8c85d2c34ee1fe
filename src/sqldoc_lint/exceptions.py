"""Custom exceptions for sqldoc-lint."""

from __future__ import annotations

from pathlib import Path


class SqldocLintError(Exception):
    """Base exception for sqldoc-lint operations."""


class ReadError(SqldocLintError):
    """A source file could not be read or decoded as text."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ParseError(SqldocLintError):
    """A document could not be split into sections and blocks."""

    def __init__(self, message: str, *, line: int, path: str | None = None) -> None:
        self.message = message
        self.line = line
        self.path = path
        location = f"{path}:{line}" if path else f"line {line}"
        super().__init__(f"{location}: {message}")


class ConfigError(SqldocLintError):
    """Invalid configuration value."""

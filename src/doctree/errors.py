"""Exceptions raised by doctree."""

from __future__ import annotations


class DocTreeError(Exception):
    """Base exception for doctree operations."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ConfigError(DocTreeError):
    """Raised when run options contain an unknown key or an invalid value."""

    pass


class OutputWriteError(DocTreeError):
    """Raised when the generated document cannot be written."""

    pass

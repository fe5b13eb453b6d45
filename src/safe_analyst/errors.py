"""Exceptions raised at the import boundary."""

from __future__ import annotations


class SafeAnalystError(Exception):
    """Base class for safe_analyst errors."""


class InvalidConfigDocument(SafeAnalystError, ValueError):
    """A rule-set document could not be parsed or lacks a ``rules`` array.

    Nothing from the document is applied when this is raised.
    """

    def __init__(self, message: str, *, source: str | None = None) -> None:
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)

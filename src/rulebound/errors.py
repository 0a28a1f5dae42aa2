"""Exceptions raised at the parser and snapshot-loading boundaries.

Selectors never raise; these only surface where a caller invokes the parser
or deserializes a snapshot.
"""
from __future__ import annotations

from pathlib import Path


class RulesParseError(ValueError):
    """Base class for fatal parse failures."""


class SourceNotFoundError(RulesParseError):
    """Raised when the rules source file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Rules source not found: {path}")
        self.path = path


class EmptySourceError(RulesParseError):
    """Raised when the rules source is empty or whitespace only."""


class NoRulesFoundError(RulesParseError):
    """Raised when a non-empty source contains zero recognized rule labels."""


class DatasetFormatError(ValueError):
    """Raised when a serialized dataset payload is structurally invalid."""

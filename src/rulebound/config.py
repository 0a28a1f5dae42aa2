"""Parser and search configuration.

Both objects carry working defaults and can be loaded from a JSON file so
that a rulebook with a different numbering convention needs a config file,
not a code change. Unknown keys in the JSON are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from rulebound.io_utils import load_json


@dataclass(frozen=True, slots=True)
class SearchWeights:
    """Score contributed by each matching field. Scores sum across fields."""
    label: int = 15
    title: int = 10
    content: int = 5
    tags: int = 3
    snippet_context_chars: int = 50

    def __post_init__(self) -> None:
        if self.snippet_context_chars < 0:
            raise ValueError("snippet_context_chars must be >= 0")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchWeights:
        _reject_unknown_keys(cls, data)
        return cls(**data)


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Numbering convention and metadata detection for a rules source.

    section_modulus:
        A bare 3-digit label divisible by this number is a top-level section
        ("400."); any other bare 3-digit label is a rule ("401.").
    header_prefixes / header_scan_lines:
        Lines within the first ``header_scan_lines`` lines starting with one
        of these prefixes are document header, not content.
    """
    section_modulus: int = 100
    default_version: str = "1.2"
    version_pattern: str = r"v\.?(\d+\.\d+)"
    last_updated_pattern: str = r"Last Updated: (.+)"
    header_prefixes: tuple[str, ...] = ("Riftbound Core Rules", "Last Updated")
    header_scan_lines: int = 3
    search: SearchWeights = SearchWeights()

    def __post_init__(self) -> None:
        if self.section_modulus <= 0:
            raise ValueError(
                f"section_modulus must be > 0, got {self.section_modulus}"
            )
        if self.header_scan_lines < 0:
            raise ValueError("header_scan_lines must be >= 0")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParserConfig:
        _reject_unknown_keys(cls, data)
        kwargs = dict(data)
        if "header_prefixes" in kwargs:
            kwargs["header_prefixes"] = tuple(kwargs["header_prefixes"])
        if "search" in kwargs:
            kwargs["search"] = SearchWeights.from_dict(kwargs["search"])
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: Path) -> ParserConfig:
        """Load from a parser config JSON file."""
        data = load_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid parser config payload in {path}")
        return cls.from_dict(data)


DEFAULT_CONFIG = ParserConfig()


def _reject_unknown_keys(cls: type, data: dict[str, Any]) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {', '.join(unknown)}")

"""Deterministic normalization of rules source text."""

from __future__ import annotations

from dataclasses import dataclass


_ZERO_WIDTH_CHARS = frozenset({"\u200b", "\u200c", "\u200d", "\ufeff"})


@dataclass(frozen=True, slots=True)
class NormalizedSource:
    """Normalized source text plus the transforms that fired."""

    text: str
    normalization_flags: dict[str, bool]

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")


def normalize_source(text: str) -> NormalizedSource:
    """Normalize rules source text before line classification.

    Current deterministic transforms:
    1. Collapse CRLF and CR to LF.
    2. Convert non-breaking space to plain space.
    3. Remove zero-width characters (including a stray BOM).
    """

    raw = text or ""
    out: list[str] = []
    flags = {
        "crlf_normalized": False,
        "cr_normalized": False,
        "nbsp_normalized": False,
        "zero_width_removed": False,
    }

    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\r" and i + 1 < len(raw) and raw[i + 1] == "\n":
            out.append("\n")
            flags["crlf_normalized"] = True
            i += 2
            continue
        if ch == "\r":
            out.append("\n")
            flags["cr_normalized"] = True
        elif ch == "\u00a0":
            out.append(" ")
            flags["nbsp_normalized"] = True
        elif ch in _ZERO_WIDTH_CHARS:
            flags["zero_width_removed"] = True
        else:
            out.append(ch)
        i += 1

    return NormalizedSource(text="".join(out), normalization_flags=flags)

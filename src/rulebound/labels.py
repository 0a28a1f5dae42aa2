"""Rule label recognition: level classification and label/content split.

Label shapes, from least to most specific:

  DDD.            100. / 401.         section (DDD % modulus == 0) or rule
  DDD.N.          100.1. / 103.1.     base + 1
  DDD.N.x.        103.1.a.            base + 2
  DDD.N.x.N.      103.1.a.1.          base + 3
  DDD.N.x.N.x.    103.1.a.1.b.        base + 4

``base`` is 0 when the 3-digit block is a hundred-block section and 1
otherwise, so "100.1." is a rule under section 100 while "103.1." is a
sub-rule under rule 103. A label must be followed by whitespace or end of
line; anything else is continuation text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

NOT_A_LABEL = -1

# Canonical id body (no trailing period). Reused by the cross-ref matchers.
RULE_ID_PATTERN = r"\d{3}(?:\.\d+(?:\.[a-z](?:\.\d+(?:\.[a-z])?)?)?)?"


@dataclass(frozen=True, slots=True)
class LabelShape:
    name: str
    regex: re.Pattern[str]
    depth: int          # Parts beyond the 3-digit block


@dataclass(frozen=True, slots=True)
class LabelMatch:
    """A recognized label at the start of a line."""

    id: str             # "103.1.a"
    label: str          # "103.1.a."
    level: int
    content: str        # Everything after the label, trimmed


_LABEL_SHAPES: tuple[LabelShape, ...] = (
    LabelShape("block", re.compile(r"^(\d{3})\.(?=\s|$)"), 0),
    LabelShape("rule", re.compile(r"^(\d{3}\.\d+)\.(?=\s|$)"), 1),
    LabelShape("detail", re.compile(r"^(\d{3}\.\d+\.[a-z])\.(?=\s|$)"), 2),
    LabelShape("sub_detail", re.compile(r"^(\d{3}\.\d+\.[a-z]\.\d+)\.(?=\s|$)"), 3),
    LabelShape("deep_detail", re.compile(r"^(\d{3}\.\d+\.[a-z]\.\d+\.[a-z])\.(?=\s|$)"), 4),
)


def is_section_block(block: str, *, section_modulus: int = 100) -> bool:
    """True when a bare 3-digit block is a top-level section number."""
    return int(block) % section_modulus == 0


def match_label(line: str, *, section_modulus: int = 100) -> LabelMatch | None:
    """Match the leading label of a line, or None for continuation text.

    Every shape is tried and the deepest full match wins.
    """
    trimmed = line.strip()
    best: tuple[LabelShape, re.Match[str]] | None = None
    for shape in _LABEL_SHAPES:
        m = shape.regex.match(trimmed)
        if m is not None and (best is None or shape.depth > best[0].depth):
            best = (shape, m)
    if best is None:
        return None

    shape, m = best
    rule_id = m.group(1)
    block = rule_id[:3]
    base = 0 if is_section_block(block, section_modulus=section_modulus) else 1
    return LabelMatch(
        id=rule_id,
        label=rule_id + ".",
        level=base + shape.depth,
        content=trimmed[m.end():].strip(),
    )


def classify_level(line: str, *, section_modulus: int = 100) -> int:
    """Hierarchy depth of a line from its label, or NOT_A_LABEL (-1)."""
    m = match_label(line, section_modulus=section_modulus)
    return m.level if m is not None else NOT_A_LABEL


def hundred_block(rule_id: str, *, section_modulus: int = 100) -> str | None:
    """Enclosing section block for a bare 3-digit id ("103" -> "100").

    Returns None for multi-part ids, non-numeric ids, and ids that are
    themselves a section block.
    """
    if "." in rule_id or not rule_id.isdigit():
        return None
    value = int(rule_id)
    block = (value // section_modulus) * section_modulus
    if block == value:
        return None
    return str(block).zfill(len(rule_id))

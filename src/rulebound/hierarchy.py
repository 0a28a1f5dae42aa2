"""Hierarchy builder: parent/child links from rule ids.

Two passes over the drafts:
    1. Collect the complete id -> source position map (first occurrence of an
       id wins; later duplicates are dropped).
    2. Resolve every parent against the complete map, so the builder does not
       depend on ancestors appearing before their descendants.

Parent resolution for an id, first hit wins:
    a. Proper prefixes of the dotted id, longest first ("103.1.a" ->
       "103.1" -> "103").
    b. For a bare 3-digit id, the enclosing section block ("103" -> "100").
    c. Otherwise the entity is a root and its level is forced to 0.

Irregularities are not corrected; they are returned as HierarchyAnomaly
records for later audit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from rulebound.labels import hundred_block
from rulebound.rule_types import HierarchyAnomaly
from rulebound.splitter import DraftEntity


@dataclass(slots=True)
class HierarchyLinks:
    """Resolved structure for a list of drafts."""

    drafts: list[DraftEntity]                       # De-duplicated, source order
    parent_of: dict[str, str | None]
    children_of: dict[str, list[str]]
    level_of: dict[str, int]
    anomalies: list[HierarchyAnomaly] = field(default_factory=list[HierarchyAnomaly])


def find_parent_id(
    rule_id: str,
    known_ids: set[str] | dict[str, int],
    *,
    section_modulus: int = 100,
) -> tuple[str | None, str]:
    """Resolve the parent of ``rule_id`` against a set of known ids.

    Returns:
        (parent_id, method) where method is "prefix", "hundred_block" or
        "" when no parent exists.
    """
    parts = rule_id.split(".")
    for i in range(len(parts) - 1, 0, -1):
        candidate = ".".join(parts[:i])
        if candidate in known_ids:
            return candidate, "prefix"
    if len(parts) == 1:
        block = hundred_block(rule_id, section_modulus=section_modulus)
        if block is not None and block in known_ids:
            return block, "hundred_block"
    return None, ""


def build_hierarchy(
    drafts: Sequence[DraftEntity],
    *,
    section_modulus: int = 100,
) -> HierarchyLinks:
    """Link drafts into a hierarchy and record every accepted anomaly."""
    anomalies: list[HierarchyAnomaly] = []

    # Pass 1: complete id map
    kept: list[DraftEntity] = []
    position: dict[str, int] = {}
    for draft in drafts:
        if draft.id in position:
            first = kept[position[draft.id]]
            anomalies.append(HierarchyAnomaly(
                entity_id=draft.id,
                kind="duplicate_id",
                detail=(
                    f"line {draft.line_number} repeats id first seen on "
                    f"line {first.line_number}; later occurrence dropped"
                ),
            ))
            continue
        position[draft.id] = len(kept)
        kept.append(draft)

    # Pass 2: parents against the complete map
    parent_of: dict[str, str | None] = {}
    method_of: dict[str, str] = {}
    for draft in kept:
        parent_id, method = find_parent_id(
            draft.id, position, section_modulus=section_modulus,
        )
        parent_of[draft.id] = parent_id
        method_of[draft.id] = method

    level_of: dict[str, int] = {}
    for draft in kept:
        if parent_of[draft.id] is None:
            level_of[draft.id] = 0
            if draft.level != 0:
                anomalies.append(HierarchyAnomaly(
                    entity_id=draft.id,
                    kind="orphan",
                    detail=(
                        f"no parent found for level-{draft.level} label "
                        f"{draft.label}; treated as a root"
                    ),
                ))
        else:
            level_of[draft.id] = draft.level

    children_of: dict[str, list[str]] = {draft.id: [] for draft in kept}
    for draft in kept:
        parent_id = parent_of[draft.id]
        if parent_id is None:
            continue
        children_of[parent_id].append(draft.id)

        if method_of[draft.id] == "hundred_block":
            anomalies.append(HierarchyAnomaly(
                entity_id=draft.id,
                kind="hundred_block_fallback",
                detail=f"parent {parent_id} resolved from enclosing section block",
            ))
        if position[parent_id] > position[draft.id]:
            anomalies.append(HierarchyAnomaly(
                entity_id=draft.id,
                kind="parent_after_child",
                detail=f"parent {parent_id} appears after its child in the source",
            ))
        expected = level_of[parent_id] + 1
        if level_of[draft.id] != expected:
            anomalies.append(HierarchyAnomaly(
                entity_id=draft.id,
                kind="level_skip",
                detail=(
                    f"level {level_of[draft.id]} under level-"
                    f"{level_of[parent_id]} parent {parent_id} "
                    f"(expected {expected})"
                ),
            ))

    return HierarchyLinks(
        drafts=kept,
        parent_of=parent_of,
        children_of=children_of,
        level_of=level_of,
        anomalies=anomalies,
    )

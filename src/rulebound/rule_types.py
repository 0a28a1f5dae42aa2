"""Core types shared by the rules parser and the query layer.

Type hierarchy:
  Ok[T] / Err[E]    Strict algebraic Result type
  RuleEntity        One node of the rule hierarchy (section, rule, detail)
  RuleDataset       Flattened entities plus the id -> entity index
  HierarchyAnomaly  Recorded irregularity found while linking parents
  ParseResult       Dataset plus the anomalies found while building it
  SearchMatch       Where a query matched inside one entity
  SearchResult      Ranked search hit
  LoadError         Typed failure for dataset loading

Entities and datasets are frozen: the parser builds them once and every
consumer afterwards only reads.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, Literal, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")

# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case of Result[T, E].

    Usage::

        result: Result[RuleDataset, LoadError] = store.load(loader)
        match result:
            case Ok(value=dataset): print(len(dataset.sections))
            case Err(error=e): print(e.reason)
    """
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure case of Result[T, E]."""
    error: E


Result: TypeAlias = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# RuleEntity
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RuleEntity:
    """A node in the rule hierarchy (e.g., rule 103.1.a).

    Invariants (enforced in __post_init__):
        - id is non-empty
        - level >= 0
        - parent_id is None only for level-0 entities
        - cross_refs never contains the entity's own id
    """
    id: str                         # "103.1.a"
    label: str                      # "103.1.a."
    title: str                      # First line of content
    content: str                    # Continuation lines joined with "\n"
    level: int                      # 0=section, 1=rule, 2=sub-rule, ...
    parent_id: str | None
    children: tuple[str, ...]       # Source order
    cross_refs: tuple[str, ...]     # First-appearance order, de-duplicated
    dataset_version: str
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("RuleEntity.id cannot be empty")
        if self.level < 0:
            raise ValueError(f"RuleEntity.level must be >= 0, got {self.level}")
        if self.parent_id is None and self.level != 0:
            raise ValueError(
                f"RuleEntity {self.id!r} has no parent but level {self.level}"
            )
        if self.id in self.cross_refs:
            raise ValueError(f"RuleEntity {self.id!r} cannot reference itself")

    @property
    def is_leaf(self) -> bool:
        return not self.children


# ---------------------------------------------------------------------------
# RuleDataset
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RuleDataset:
    """The serialized/loaded whole: metadata, entities and their index.

    ``index`` may be empty on a freshly deserialized legacy snapshot; run it
    through ``index.ensure_index`` before querying.
    """
    version: str
    last_updated: str
    sections: tuple[RuleEntity, ...]
    index: Mapping[str, RuleEntity] = field(default_factory=dict[str, RuleEntity])


# ---------------------------------------------------------------------------
# Parse diagnostics
# ---------------------------------------------------------------------------

AnomalyKind: TypeAlias = Literal[
    "hundred_block_fallback",
    "level_skip",
    "orphan",
    "parent_after_child",
    "duplicate_id",
]


@dataclass(frozen=True, slots=True)
class HierarchyAnomaly:
    """An irregularity accepted while building the hierarchy, kept for audit."""
    entity_id: str
    kind: AnomalyKind
    detail: str


@dataclass(frozen=True, slots=True)
class ParseResult:
    dataset: RuleDataset
    anomalies: tuple[HierarchyAnomaly, ...] = ()

    def anomaly_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for anomaly in self.anomalies:
            counts[anomaly.kind] = counts.get(anomaly.kind, 0) + 1
        return dict(sorted(counts.items()))


# ---------------------------------------------------------------------------
# Search types
# ---------------------------------------------------------------------------

MatchField: TypeAlias = Literal["label", "title", "content", "tags"]


@dataclass(frozen=True, slots=True)
class SearchMatch:
    field: MatchField
    snippet: str        # Matched field text, ellipsized for content
    position: int       # Char offset of the first match inside the field


@dataclass(frozen=True, slots=True)
class SearchResult:
    entity: RuleEntity
    score: int
    matches: tuple[SearchMatch, ...]


# ---------------------------------------------------------------------------
# Load failures
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LoadError:
    """Typed failure reason for a dataset load (transport or format)."""
    reason: str
    exception_type: str = ""

"""Read-only selectors over a loaded RuleDataset.

This is the only sanctioned way consumers read the model. Every selector is
total: unknown ids and dangling references resolve to empty/None, never an
exception.
"""

from __future__ import annotations

from rulebound.config import SearchWeights
from rulebound.index import ensure_index
from rulebound.rule_types import RuleDataset, RuleEntity, SearchResult
from rulebound.search import search_entities


class RuleQuery:
    """Selector facade over an immutable dataset.

    Safe to share across threads: nothing is written after construction.
    """

    def __init__(
        self,
        dataset: RuleDataset,
        *,
        weights: SearchWeights = SearchWeights(),
    ) -> None:
        self._dataset = ensure_index(dataset)
        self._weights = weights

    @property
    def version(self) -> str:
        return self._dataset.version

    @property
    def last_updated(self) -> str:
        return self._dataset.last_updated

    def __len__(self) -> int:
        return len(self._dataset.sections)

    def get_top_level_sections(self) -> list[RuleEntity]:
        """Level-0 entities in source order."""
        return [entity for entity in self._dataset.sections if entity.level == 0]

    def get_by_id(self, rule_id: str) -> RuleEntity | None:
        return self._dataset.index.get(rule_id)

    def get_children(self, rule_id: str) -> list[RuleEntity]:
        """Resolved children; ids missing from the index are skipped."""
        entity = self.get_by_id(rule_id)
        if entity is None:
            return []
        index = self._dataset.index
        return [index[child] for child in entity.children if child in index]

    def get_referenced_by(self, rule_id: str) -> list[RuleEntity]:
        """Entities whose text cites ``rule_id`` (linear scan, uncached)."""
        return [
            entity for entity in self._dataset.sections
            if rule_id in entity.cross_refs
        ]

    def get_ancestors(self, rule_id: str) -> list[RuleEntity]:
        """Parent chain from the root down to the direct parent."""
        chain: list[RuleEntity] = []
        seen: set[str] = set()
        entity = self.get_by_id(rule_id)
        while entity is not None and entity.parent_id and entity.parent_id not in seen:
            seen.add(entity.parent_id)
            entity = self.get_by_id(entity.parent_id)
            if entity is not None:
                chain.append(entity)
        chain.reverse()
        return chain

    def search(self, query: str, *, limit: int | None = None) -> list[SearchResult]:
        return search_entities(
            self._dataset.sections, query, weights=self._weights, limit=limit,
        )

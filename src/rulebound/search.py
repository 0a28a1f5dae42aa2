"""Ranked free-text search over rule entities.

Trimmed, case-insensitive substring matching against fixed-weight fields.
Weights sum when several fields of one entity match. Results are ordered by
descending score; ties keep source order.
"""

from __future__ import annotations

from collections.abc import Iterable

from rulebound.config import SearchWeights
from rulebound.rule_types import RuleEntity, SearchMatch, SearchResult

ELLIPSIS = "..."


def extract_snippet(text: str, position: int, match_len: int, context_chars: int) -> str:
    """Bounded window around a match, ellipsized where the text was cut.

    Args:
        text: Field text the match was found in.
        position: Char offset of the match.
        match_len: Length of the matched query.
        context_chars: Characters kept on each side of the match.
    """
    start = max(0, position - context_chars)
    end = min(len(text), position + match_len + context_chars)
    prefix = ELLIPSIS if start > 0 else ""
    suffix = ELLIPSIS if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"


def match_entity(
    entity: RuleEntity,
    needle: str,
    weights: SearchWeights,
) -> SearchResult | None:
    """Score one entity against a lowercased, trimmed query."""
    matches: list[SearchMatch] = []
    score = 0

    pos = entity.label.lower().find(needle)
    if pos >= 0:
        score += weights.label
        matches.append(SearchMatch("label", entity.label, pos))

    pos = entity.title.lower().find(needle)
    if pos >= 0:
        score += weights.title
        matches.append(SearchMatch("title", entity.title, pos))

    pos = entity.content.lower().find(needle)
    if pos >= 0:
        score += weights.content
        snippet = extract_snippet(
            entity.content, pos, len(needle), weights.snippet_context_chars,
        )
        matches.append(SearchMatch("content", snippet, pos))

    for tag in entity.tags:
        pos = tag.lower().find(needle)
        if pos >= 0:
            score += weights.tags
            matches.append(SearchMatch("tags", tag, pos))
            break

    if not matches:
        return None
    return SearchResult(entity=entity, score=score, matches=tuple(matches))


def search_entities(
    sections: Iterable[RuleEntity],
    query: str,
    *,
    weights: SearchWeights = SearchWeights(),
    limit: int | None = None,
) -> list[SearchResult]:
    """Rank entities matching ``query``. Blank query -> []."""
    needle = (query or "").strip().lower()
    if not needle:
        return []

    results: list[SearchResult] = []
    for entity in sections:
        hit = match_entity(entity, needle, weights)
        if hit is not None:
            results.append(hit)

    # sorted() is stable: equal scores stay in source order
    ranked = sorted(results, key=lambda r: -r.score)
    if limit is not None:
        return ranked[:max(0, limit)]
    return ranked

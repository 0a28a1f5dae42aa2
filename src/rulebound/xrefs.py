"""Cross-reference extraction from assembled rule text.

Each citation style is a matcher: a callable returning ``(position, id)``
candidates for one surface form. The extractor only merges candidates,
orders them by first appearance and drops duplicates and self references.
Adding a citation style means appending a matcher, nothing else.

References are a textual heuristic. A reference to an id that does not exist
is kept as-is; resolution happens (and quietly fails) at query time.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from typing import TypeAlias

from rulebound.labels import RULE_ID_PATTERN

CrossRefCandidate: TypeAlias = tuple[int, str]
CrossRefMatcher: TypeAlias = Callable[[str], Iterable[CrossRefCandidate]]


def regex_matcher(pattern: str) -> CrossRefMatcher:
    """Build a matcher from a regex whose group 1 captures the rule id.

    Matching ignores case; captured ids are lowercased to the canonical form.
    """
    compiled = re.compile(pattern, re.IGNORECASE)

    def _match(content: str) -> Iterable[CrossRefCandidate]:
        for m in compiled.finditer(content):
            yield m.start(1), m.group(1).lower()

    return _match


# "See rule 346." / "rule 103.1.a." / "rules 100.2."
rule_keyword_matcher = regex_matcher(rf"\brules?\s+({RULE_ID_PATTERN})\.(?!\w)")
# "see 103.2."
see_matcher = regex_matcher(rf"\bsee\s+({RULE_ID_PATTERN})\.(?!\w)")
# "(103.2)" / "(103.2.)"
parenthesized_matcher = regex_matcher(rf"\(({RULE_ID_PATTERN})\.?\)")

DEFAULT_MATCHERS: tuple[CrossRefMatcher, ...] = (
    rule_keyword_matcher,
    see_matcher,
    parenthesized_matcher,
)


def extract_cross_refs(
    content: str,
    *,
    self_id: str | None = None,
    matchers: Sequence[CrossRefMatcher] = DEFAULT_MATCHERS,
) -> tuple[str, ...]:
    """Return referenced ids in order of first appearance, de-duplicated.

    Args:
        content: The entity's fully assembled text.
        self_id: The entity's own id; never returned.
        matchers: Citation-style matchers to merge.
    """
    if not content:
        return ()
    candidates: list[CrossRefCandidate] = []
    for matcher in matchers:
        candidates.extend(matcher(content))
    candidates.sort(key=lambda c: c[0])

    seen: set[str] = set()
    refs: list[str] = []
    for _, ref_id in candidates:
        if ref_id == self_id or ref_id in seen:
            continue
        seen.add(ref_id)
        refs.append(ref_id)
    return tuple(refs)

"""Tests for rulebound.selectors.RuleQuery."""
import dataclasses

import pytest

from rulebound.rule_types import RuleDataset
from rulebound.rules_parser import parse_rules_text
from rulebound.selectors import RuleQuery

RULES = """100. Combat
100.1. Initiative
Determines turn order.
100.2. Attack Resolution
See rule 100.1.
100.2.a. Damage is simultaneous (see 100.1.).
200. Movement
201. Moving units
Units move once (100.2).
201.1. A unit may not move twice. See rule 999.9.
"""


@pytest.fixture()
def query() -> RuleQuery:
    return RuleQuery(parse_rules_text(RULES).dataset)


class TestTopLevel:
    def test_sections_in_source_order(self, query: RuleQuery) -> None:
        assert [e.id for e in query.get_top_level_sections()] == ["100", "200"]

    def test_metadata(self, query: RuleQuery) -> None:
        assert query.version == "1.2"
        assert query.last_updated == ""
        assert len(query) == 7


class TestGetById:
    def test_known_id(self, query: RuleQuery) -> None:
        entity = query.get_by_id("100.2.a")
        assert entity is not None
        assert entity.parent_id == "100.2"

    @pytest.mark.parametrize("rule_id", ["", "999", "100.9", "100."])
    def test_unknown_id(self, query: RuleQuery, rule_id: str) -> None:
        assert query.get_by_id(rule_id) is None


class TestChildren:
    def test_children_resolved_in_order(self, query: RuleQuery) -> None:
        assert [e.id for e in query.get_children("100")] == ["100.1", "100.2"]

    def test_leaf_has_no_children(self, query: RuleQuery) -> None:
        assert query.get_children("100.1") == []

    def test_unknown_id(self, query: RuleQuery) -> None:
        assert query.get_children("999") == []

    def test_dangling_child_skipped(self) -> None:
        parsed = parse_rules_text(RULES).dataset
        section = dataclasses.replace(
            parsed.sections[0], children=("100.1", "100.7", "100.2"),
        )
        dataset = RuleDataset(
            parsed.version, parsed.last_updated, (section, *parsed.sections[1:]),
        )
        assert [e.id for e in RuleQuery(dataset).get_children("100")] == ["100.1", "100.2"]


class TestReferencedBy:
    def test_scenario_initiative(self, query: RuleQuery) -> None:
        assert [e.id for e in query.get_referenced_by("100.1")] == ["100.2", "100.2.a"]

    def test_unreferenced(self, query: RuleQuery) -> None:
        assert query.get_referenced_by("200") == []

    def test_dangling_reference_is_kept_but_unresolvable(self, query: RuleQuery) -> None:
        assert [e.id for e in query.get_referenced_by("999.9")] == ["201.1"]
        assert query.get_by_id("999.9") is None


class TestAncestors:
    def test_chain_is_root_first(self, query: RuleQuery) -> None:
        assert [e.id for e in query.get_ancestors("100.2.a")] == ["100", "100.2"]

    def test_hundred_block_chain(self, query: RuleQuery) -> None:
        assert [e.id for e in query.get_ancestors("201.1")] == ["200", "201"]

    def test_root_and_unknown(self, query: RuleQuery) -> None:
        assert query.get_ancestors("100") == []
        assert query.get_ancestors("999") == []


class TestSearch:
    def test_delegates_with_limit(self, query: RuleQuery) -> None:
        assert [r.entity.id for r in query.search("move")] == ["200", "201.1", "201"]
        assert len(query.search("move", limit=1)) == 1

    def test_blank(self, query: RuleQuery) -> None:
        assert query.search("  ") == []

"""Tests for rulebound.xrefs module."""
import re

import pytest

from rulebound.xrefs import (
    DEFAULT_MATCHERS,
    extract_cross_refs,
    parenthesized_matcher,
    regex_matcher,
    rule_keyword_matcher,
    see_matcher,
)


class TestDefaultMatchers:
    def test_rule_keyword(self) -> None:
        assert extract_cross_refs("See rule 346. Playing Cards") == ("346",)

    def test_rule_keyword_deep_id(self) -> None:
        assert extract_cross_refs("as in rule 103.1.a.") == ("103.1.a",)

    def test_see_without_rule_keyword(self) -> None:
        assert extract_cross_refs("For timing, see 410.2.") == ("410.2",)

    def test_parenthesized(self) -> None:
        assert extract_cross_refs("Units may move (140.3) once.") == ("140.3",)

    def test_parenthesized_with_trailing_period(self) -> None:
        assert extract_cross_refs("Units may move (140.3.) once.") == ("140.3",)

    def test_case_insensitive(self) -> None:
        assert extract_cross_refs("SEE RULE 100.1.") == ("100.1",)

    @pytest.mark.parametrize("text", [
        "See rule 103.1.A.",
        "see 103.1.A.",
        "Units may move (103.1.A).",
    ])
    def test_uppercase_letter_normalized_to_canonical_id(self, text: str) -> None:
        assert extract_cross_refs(text) == ("103.1.a",)

    def test_uppercase_self_reference_dropped(self) -> None:
        assert extract_cross_refs("As in rule 103.1.A.", self_id="103.1.a") == ()

    def test_requires_trailing_period_for_keyword_forms(self) -> None:
        assert extract_cross_refs("rule 100.1 applies") == ()

    def test_no_references(self) -> None:
        assert extract_cross_refs("Determines turn order.") == ()

    def test_empty_content(self) -> None:
        assert extract_cross_refs("") == ()


class TestMerging:
    def test_first_appearance_order_across_patterns(self) -> None:
        text = "Use (200.1) first, then see 150.2. and finally rule 100.1."
        assert extract_cross_refs(text) == ("200.1", "150.2", "100.1")

    def test_duplicates_collapse_to_first(self) -> None:
        text = "See rule 100.1. Also (100.1) and see 100.1."
        assert extract_cross_refs(text) == ("100.1",)

    def test_self_reference_dropped(self) -> None:
        text = "This rule (100.2) refers to rule 100.1."
        assert extract_cross_refs(text, self_id="100.2") == ("100.1",)

    def test_dangling_reference_preserved(self) -> None:
        assert extract_cross_refs("See rule 999.9.") == ("999.9",)


class TestPluggableMatchers:
    def test_default_matchers_registered(self) -> None:
        assert DEFAULT_MATCHERS == (
            rule_keyword_matcher,
            see_matcher,
            parenthesized_matcher,
        )

    def test_custom_matcher_is_additive(self) -> None:
        cf_matcher = regex_matcher(r"\bcf\.\s+(\d{3}(?:\.\d+)?)\b")
        text = "Compare cf. 300.4 with rule 100.1."
        assert extract_cross_refs(text) == ("100.1",)
        assert extract_cross_refs(
            text, matchers=(*DEFAULT_MATCHERS, cf_matcher),
        ) == ("300.4", "100.1")

    def test_callable_matcher(self) -> None:
        def section_sign(content: str) -> list[tuple[int, str]]:
            return [(m.start(1), m.group(1)) for m in re.finditer(r"§(\d{3})", content)]

        assert extract_cross_refs("Per §500 and §500.", matchers=[section_sign]) == ("500",)

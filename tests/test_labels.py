"""Tests for rulebound.labels module."""
import pytest

from rulebound.labels import (
    NOT_A_LABEL,
    classify_level,
    hundred_block,
    is_section_block,
    match_label,
)


class TestClassifyLevel:
    @pytest.mark.parametrize(
        ("line", "level"),
        [
            ("000. Golden Rules", 0),
            ("100. Combat", 0),
            ("400. Turn Structure", 0),
            ("401. Start of Turn", 1),
            ("100.1. Initiative", 1),
            ("103.1. Deck size", 2),
            ("103.1.a. Minimum", 3),
            ("103.1.a.1. Exception", 4),
            ("103.1.a.1.b. Deep exception", 5),
            ("100.1.a. Detail under a section rule", 2),
        ],
    )
    def test_label_shapes(self, line: str, level: int) -> None:
        assert classify_level(line) == level

    def test_surrounding_whitespace_ignored(self) -> None:
        assert classify_level("   100.1. Initiative  ") == 1

    def test_label_alone_on_line(self) -> None:
        assert classify_level("100.") == 0

    @pytest.mark.parametrize(
        "line",
        [
            "Determines turn order.",
            "",
            "1. Not three digits",
            "1000. Four digits",
            "100.1 missing trailing period",
            "100.1.A. uppercase letter",
            "100.1.a.b. letter after letter",
            "100.Combat no space after label",
            "See rule 100.1. for details",
        ],
    )
    def test_non_labels_are_continuation(self, line: str) -> None:
        assert classify_level(line) == NOT_A_LABEL

    def test_section_modulus_is_configurable(self) -> None:
        assert classify_level("150. Half block", section_modulus=50) == 0
        assert classify_level("150. Half block") == 1


class TestMatchLabel:
    def test_splits_id_label_and_content(self) -> None:
        m = match_label("103.1.a. Each player needs a deck.")
        assert m is not None
        assert m.id == "103.1.a"
        assert m.label == "103.1.a."
        assert m.content == "Each player needs a deck."
        assert m.level == 3

    def test_deepest_shape_wins(self) -> None:
        m = match_label("103.1.a.1.b. Deep")
        assert m is not None
        assert m.id == "103.1.a.1.b"

    def test_empty_content(self) -> None:
        m = match_label("200.")
        assert m is not None
        assert m.content == ""

    def test_none_for_text(self) -> None:
        assert match_label("Just words") is None


class TestHundredBlock:
    def test_rule_maps_to_section(self) -> None:
        assert hundred_block("103") == "100"

    def test_zero_padding_preserved(self) -> None:
        assert hundred_block("001") == "000"
        assert hundred_block("050") == "000"

    def test_section_itself_has_no_block(self) -> None:
        assert hundred_block("100") is None

    def test_multi_part_ids_have_no_block(self) -> None:
        assert hundred_block("103.1") is None

    def test_is_section_block(self) -> None:
        assert is_section_block("300") is True
        assert is_section_block("301") is False

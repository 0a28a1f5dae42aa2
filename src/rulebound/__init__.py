"""Rulebook hierarchy parser and indexed query layer."""

from rulebound.config import ParserConfig, SearchWeights
from rulebound.errors import (
    DatasetFormatError,
    EmptySourceError,
    NoRulesFoundError,
    RulesParseError,
    SourceNotFoundError,
)
from rulebound.index import (
    build_index,
    dataset_from_dict,
    dataset_to_dict,
    ensure_index,
    load_dataset,
    save_dataset,
)
from rulebound.labels import classify_level, match_label
from rulebound.rule_types import (
    Err,
    HierarchyAnomaly,
    LoadError,
    Ok,
    ParseResult,
    RuleDataset,
    RuleEntity,
    SearchMatch,
    SearchResult,
)
from rulebound.rules_parser import parse_rules_file, parse_rules_text
from rulebound.selectors import RuleQuery
from rulebound.store import LoadState, RulesStore
from rulebound.xrefs import extract_cross_refs

__all__ = [
    "DatasetFormatError",
    "EmptySourceError",
    "Err",
    "HierarchyAnomaly",
    "LoadError",
    "LoadState",
    "NoRulesFoundError",
    "Ok",
    "ParseResult",
    "ParserConfig",
    "RuleDataset",
    "RuleEntity",
    "RuleQuery",
    "RulesParseError",
    "RulesStore",
    "SearchMatch",
    "SearchResult",
    "SearchWeights",
    "SourceNotFoundError",
    "build_index",
    "classify_level",
    "dataset_from_dict",
    "dataset_to_dict",
    "ensure_index",
    "extract_cross_refs",
    "load_dataset",
    "match_label",
    "parse_rules_file",
    "parse_rules_text",
    "save_dataset",
]

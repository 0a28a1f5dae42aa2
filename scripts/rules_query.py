#!/usr/bin/env python3
"""Query a serialized rules dataset through the selector layer.

Structured JSON results go to stdout, summary messages to stderr.

Usage:
    python3 scripts/rules_query.py --data public/data/rules.json sections
    python3 scripts/rules_query.py --data public/data/rules.json show 103.1
    python3 scripts/rules_query.py --data public/data/rules.json children 103
    python3 scripts/rules_query.py --data public/data/rules.json referenced-by 346
    python3 scripts/rules_query.py --data public/data/rules.json search "combat" --limit 20
    python3 scripts/rules_query.py --data public/data/rules.json --config parser.json search "combat"
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from rulebound.config import DEFAULT_CONFIG, ParserConfig
from rulebound.index import entity_to_dict
from rulebound.io_utils import dumps_json
from rulebound.rule_types import Err, RuleEntity, SearchResult
from rulebound.store import RulesStore

log = logging.getLogger("rules_query")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query a serialized rules dataset."
    )
    parser.add_argument(
        "--data", required=True, type=Path, help="Path to rules dataset JSON"
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Parser config JSON; its 'search' block sets the ranking weights",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("sections", help="List top-level sections")

    show = sub.add_parser("show", help="Show one rule with its children")
    show.add_argument("rule_id")

    children = sub.add_parser("children", help="List direct children of a rule")
    children.add_argument("rule_id")

    refs = sub.add_parser("referenced-by", help="List rules citing a rule")
    refs.add_argument("rule_id")

    search = sub.add_parser("search", help="Ranked free-text search")
    search.add_argument("query")
    search.add_argument(
        "--limit", type=int, default=None,
        help="Maximum number of results (default: all)",
    )
    return parser


def _brief(entity: RuleEntity) -> dict[str, Any]:
    return {"id": entity.id, "label": entity.label, "title": entity.title, "level": entity.level}


def _search_row(result: SearchResult) -> dict[str, Any]:
    return {
        **_brief(result.entity),
        "score": result.score,
        "matches": [
            {"field": m.field, "snippet": m.snippet, "position": m.position}
            for m in result.matches
        ],
    }


def run_command(store: RulesStore, args: argparse.Namespace) -> Any:
    """Execute the selected sub-command against a loaded store."""
    if args.command == "sections":
        return [_brief(e) for e in store.get_top_level_sections()]
    if args.command == "show":
        entity = store.get_by_id(args.rule_id)
        if entity is None:
            return None
        return {
            **entity_to_dict(entity),
            "isLeaf": entity.is_leaf,
            "ancestors": [_brief(e) for e in store.get_ancestors(args.rule_id)],
            "referencedBy": [_brief(e) for e in store.get_referenced_by(args.rule_id)],
        }
    if args.command == "children":
        return [_brief(e) for e in store.get_children(args.rule_id)]
    if args.command == "referenced-by":
        return [_brief(e) for e in store.get_referenced_by(args.rule_id)]
    if args.command == "search":
        return [_search_row(r) for r in store.search(args.query, limit=args.limit)]
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    config: ParserConfig = DEFAULT_CONFIG
    if args.config is not None:
        if not args.config.exists():
            log.error("Config not found: %s", args.config)
            return 2
        config = ParserConfig.from_json(args.config)

    store = RulesStore(weights=config.search)
    outcome = store.load_file(args.data)
    if isinstance(outcome, Err):
        log.error("Data failed to load: %s", outcome.error.reason)
        return 1

    payload = run_command(store, args)
    if payload is None:
        log.error("Rule not found: %s", args.rule_id)
        return 1
    if isinstance(payload, list):
        log.info("%d results", len(payload))

    sys.stdout.buffer.write(dumps_json(payload))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())

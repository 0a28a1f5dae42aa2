#!/usr/bin/env python3
"""Parse a numbered rules text file into a serialized rules dataset.

Writes ``{version, lastUpdated, sections, index}`` JSON to --output (or to
stdout) and a parse summary to stderr. Hierarchy anomalies can be written to
a separate audit file.

Usage:
    python3 scripts/parse_rules.py "Riftbound Core Rules v1.2.txt" \
      --output public/data/rules.json --anomalies plans/rules_anomalies.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rulebound.config import DEFAULT_CONFIG, ParserConfig
from rulebound.errors import RulesParseError
from rulebound.index import dataset_to_dict, save_dataset
from rulebound.io_utils import dumps_json, save_json
from rulebound.rule_types import ParseResult
from rulebound.rules_parser import parse_rules_file

log = logging.getLogger("parse_rules")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse a numbered rules text file into dataset JSON."
    )
    parser.add_argument("source", type=Path, help="Rules text file (UTF-8)")
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Dataset JSON path (default: stdout)",
    )
    parser.add_argument(
        "--anomalies", type=Path, default=None,
        help="Write hierarchy anomalies to this JSON file",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Parser config JSON (numbering convention and metadata detection)",
    )
    parser.add_argument(
        "--version", dest="dataset_version", default=None,
        help="Dataset version (default: detected from file name)",
    )
    parser.add_argument(
        "--last-updated", default=None,
        help="Last-updated value (default: detected from 'Last Updated:' line)",
    )
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def anomalies_payload(result: ParseResult) -> dict[str, object]:
    return {
        "version": result.dataset.version,
        "counts": result.anomaly_counts(),
        "anomalies": [
            {"id": a.entity_id, "kind": a.kind, "detail": a.detail}
            for a in result.anomalies
        ],
    }


def log_summary(result: ParseResult) -> None:
    dataset = result.dataset
    log.info("Parsed %d rules", len(dataset.sections))
    log.info("Version: %s", dataset.version)
    log.info("Last Updated: %s", dataset.last_updated or "(unknown)")
    if dataset.sections:
        first = dataset.sections[0]
        last = dataset.sections[-1]
        log.info("First rule: %s %s", first.label, first.title)
        log.info("Last rule: %s %s", last.label, last.title)
    for kind, count in result.anomaly_counts().items():
        log.info("  anomalies %-24s %d", kind, count)


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

    log.info("Parsing %s...", args.source)
    try:
        result = parse_rules_file(
            args.source,
            version=args.dataset_version,
            last_updated=args.last_updated,
            config=config,
        )
    except RulesParseError as exc:
        log.error("Error parsing rules: %s", exc)
        return 1

    log_summary(result)

    if args.output is not None:
        save_dataset(result.dataset, args.output, pretty=not args.compact)
        log.info("Output written to %s", args.output)
    else:
        sys.stdout.buffer.write(
            dumps_json(dataset_to_dict(result.dataset), pretty=not args.compact)
        )
        sys.stdout.flush()

    if args.anomalies is not None:
        save_json(anomalies_payload(result), args.anomalies, pretty=True)
        log.info("Anomalies written to %s", args.anomalies)

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Rules text parser: numbered rulebook text -> RuleDataset.

Pipeline:
    1. Normalize line endings and invisible characters.
    2. Split lines into draft entities (labelled line + continuation text),
       skipping document header lines.
    3. Link drafts into a hierarchy (two passes, anomalies recorded).
    4. Extract cross-references per entity.
    5. Freeze entities and build the id index.

A source with no recognized rule labels is a parse failure reported here,
never an empty dataset discovered later.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from rulebound.config import DEFAULT_CONFIG, ParserConfig
from rulebound.errors import EmptySourceError, NoRulesFoundError, SourceNotFoundError
from rulebound.hierarchy import build_hierarchy
from rulebound.index import build_index
from rulebound.io_utils import read_text
from rulebound.normalization import normalize_source
from rulebound.rule_types import ParseResult, RuleDataset, RuleEntity
from rulebound.splitter import DraftEntity, EntityAccumulator
from rulebound.xrefs import DEFAULT_MATCHERS, CrossRefMatcher, extract_cross_refs

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Source metadata
# ---------------------------------------------------------------------------

def detect_version(source_name: str, config: ParserConfig = DEFAULT_CONFIG) -> str:
    """Version tag from a source file name ("Core Rules v.1.2.txt" -> "1.2")."""
    m = re.search(config.version_pattern, source_name or "")
    return m.group(1) if m else config.default_version


def detect_last_updated(text: str, config: ParserConfig = DEFAULT_CONFIG) -> str:
    """Value of the first "Last Updated: ..." line, or "" when absent."""
    m = re.search(config.last_updated_pattern, text)
    return m.group(1).strip() if m else ""


def _is_header_line(line_index: int, trimmed: str, config: ParserConfig) -> bool:
    if line_index >= config.header_scan_lines:
        return False
    return any(trimmed.startswith(prefix) for prefix in config.header_prefixes)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def split_entities(lines: Sequence[str], config: ParserConfig = DEFAULT_CONFIG) -> list[DraftEntity]:
    """Run the splitter state machine over already-normalized lines."""
    acc = EntityAccumulator()
    for i, line in enumerate(lines):
        if _is_header_line(i, line.strip(), config):
            continue
        acc.feed(line, i + 1, section_modulus=config.section_modulus)
    drafts = acc.finalize()
    if acc.discarded_preamble_lines:
        log.debug("Discarded %d preamble lines", acc.discarded_preamble_lines)
    return drafts


def parse_rules_text(
    text: str,
    *,
    source_name: str = "",
    version: str | None = None,
    last_updated: str | None = None,
    config: ParserConfig = DEFAULT_CONFIG,
    matchers: Sequence[CrossRefMatcher] = DEFAULT_MATCHERS,
) -> ParseResult:
    """Parse rules text into a dataset plus recorded hierarchy anomalies.

    Args:
        text: Raw rules text, either line-ending style.
        source_name: File name used for version detection.
        version: Explicit version tag (overrides detection).
        last_updated: Explicit last-updated value (overrides detection).
        config: Numbering convention and header settings.
        matchers: Cross-reference citation styles.

    Raises:
        EmptySourceError: ``text`` is empty or whitespace only.
        NoRulesFoundError: no line carries a recognized rule label.
    """
    if not text or not text.strip():
        raise EmptySourceError(f"Rules source is empty: {source_name or '<text>'}")

    normalized = normalize_source(text)
    fired = [name for name, on in normalized.normalization_flags.items() if on]
    if fired:
        log.debug("Normalized %s: %s", source_name or "<text>", ", ".join(fired))
    dataset_version = version if version is not None else detect_version(source_name, config)
    updated = (
        last_updated if last_updated is not None
        else detect_last_updated(normalized.text, config)
    )

    drafts = split_entities(normalized.lines, config)
    if not drafts:
        raise NoRulesFoundError(
            f"No rule labels recognized in {source_name or '<text>'}"
        )

    links = build_hierarchy(drafts, section_modulus=config.section_modulus)
    sections = tuple(
        RuleEntity(
            id=draft.id,
            label=draft.label,
            title=draft.title,
            content=draft.content,
            level=links.level_of[draft.id],
            parent_id=links.parent_of[draft.id],
            children=tuple(links.children_of[draft.id]),
            cross_refs=extract_cross_refs(
                draft.content, self_id=draft.id, matchers=matchers,
            ),
            dataset_version=dataset_version,
        )
        for draft in links.drafts
    )

    dataset = RuleDataset(
        version=dataset_version,
        last_updated=updated,
        sections=sections,
        index=build_index(sections),
    )
    result = ParseResult(dataset=dataset, anomalies=tuple(links.anomalies))

    log.info(
        "Parsed %d rules (version %s, %d anomalies)",
        len(sections), dataset_version, len(result.anomalies),
    )
    for anomaly in result.anomalies:
        log.debug("Anomaly %s on %s: %s", anomaly.kind, anomaly.entity_id, anomaly.detail)
    return result


def parse_rules_file(
    path: Path,
    *,
    version: str | None = None,
    last_updated: str | None = None,
    config: ParserConfig = DEFAULT_CONFIG,
) -> ParseResult:
    """Parse a UTF-8 rules text file.

    Raises:
        SourceNotFoundError: ``path`` does not exist.
        EmptySourceError / NoRulesFoundError: see ``parse_rules_text``.
    """
    if not path.is_file():
        raise SourceNotFoundError(path)
    return parse_rules_text(
        read_text(path),
        source_name=path.name,
        version=version,
        last_updated=last_updated,
        config=config,
    )

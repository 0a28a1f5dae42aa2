"""Index builder and dataset (de)serialization.

Serialized payload::

    {"version": "1.2", "lastUpdated": "...",
     "sections": [entity, ...],
     "index": {"103.1": entity, ...}}

``index`` is derived data. It may be empty or missing in hand-edited or
legacy snapshots; ``ensure_index`` rebuilds it from ``sections`` alone.
Legacy snapshots used ``number`` for the label and ``version`` for the
per-entity dataset version; both spellings are accepted on load.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from rulebound.errors import DatasetFormatError
from rulebound.io_utils import load_json, save_json
from rulebound.rule_types import RuleDataset, RuleEntity


def build_index(sections: Iterable[RuleEntity]) -> dict[str, RuleEntity]:
    """Map every entity id to its entity."""
    return {entity.id: entity for entity in sections}


def index_matches_sections(dataset: RuleDataset) -> bool:
    """True when ``index`` is a bijection with ``sections`` by id."""
    if len(dataset.index) != len(dataset.sections):
        return False
    for entity in dataset.sections:
        indexed = dataset.index.get(entity.id)
        if indexed is None or indexed.id != entity.id:
            return False
    return True


def ensure_index(dataset: RuleDataset) -> RuleDataset:
    """Return the dataset with a usable index, rebuilding it when needed."""
    if dataset.index and index_matches_sections(dataset):
        return dataset
    return dataclasses.replace(dataset, index=build_index(dataset.sections))


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def entity_to_dict(entity: RuleEntity) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": entity.id,
        "label": entity.label,
        "title": entity.title,
        "content": entity.content,
        "level": entity.level,
    }
    if entity.parent_id is not None:
        row["parentId"] = entity.parent_id
    row["children"] = list(entity.children)
    row["crossRefs"] = list(entity.cross_refs)
    row["datasetVersion"] = entity.dataset_version
    if entity.tags:
        row["tags"] = list(entity.tags)
    return row


def entity_from_dict(
    row: Mapping[str, Any],
    *,
    default_version: str = "",
) -> RuleEntity:
    """Decode one serialized entity (current or legacy key spelling)."""
    if not isinstance(row, Mapping):
        raise DatasetFormatError(f"Entity must be an object, got {type(row).__name__}")
    try:
        entity_id = str(row["id"])
        label = str(row.get("label") or row.get("number") or f"{entity_id}.")
        parent = row.get("parentId")
        return RuleEntity(
            id=entity_id,
            label=label,
            title=str(row.get("title", "")),
            content=str(row.get("content", "")),
            level=int(row.get("level", 0)),
            parent_id=str(parent) if parent else None,
            children=tuple(str(c) for c in row.get("children") or ()),
            # Older extractors did not exclude self references
            cross_refs=tuple(
                str(r) for r in row.get("crossRefs") or () if str(r) != entity_id
            ),
            dataset_version=str(
                row.get("datasetVersion") or row.get("version") or default_version
            ),
            tags=tuple(str(t) for t in row.get("tags") or ()),
        )
    except KeyError as exc:
        raise DatasetFormatError(f"Entity missing required key {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise DatasetFormatError(f"Invalid entity {row.get('id')!r}: {exc}") from exc


def dataset_to_dict(dataset: RuleDataset) -> dict[str, Any]:
    rows = [entity_to_dict(entity) for entity in dataset.sections]
    index = build_index(dataset.sections) if not dataset.index else dataset.index
    return {
        "version": dataset.version,
        "lastUpdated": dataset.last_updated,
        "sections": rows,
        "index": {entity_id: entity_to_dict(entity) for entity_id, entity in index.items()},
    }


def dataset_from_dict(payload: Any) -> RuleDataset:
    """Decode a serialized dataset and make sure its index is usable."""
    if not isinstance(payload, Mapping):
        raise DatasetFormatError("Dataset payload must be a JSON object")
    raw_sections = payload.get("sections")
    if not isinstance(raw_sections, list):
        raise DatasetFormatError("Dataset payload is missing a 'sections' list")

    version = str(payload.get("version", ""))
    sections = tuple(
        entity_from_dict(row, default_version=version) for row in raw_sections
    )
    by_id: dict[str, RuleEntity] = {}
    for entity in sections:
        if entity.id in by_id:
            raise DatasetFormatError(f"Duplicate entity id {entity.id!r}")
        by_id[entity.id] = entity

    # Index values are derived; only the keys are taken from the payload so
    # every index entry is the very object held in sections.
    raw_index = payload.get("index")
    index: dict[str, RuleEntity] = {}
    if isinstance(raw_index, Mapping):
        index = {key: by_id[key] for key in raw_index if key in by_id}

    dataset = RuleDataset(
        version=version,
        last_updated=str(payload.get("lastUpdated", "")),
        sections=sections,
        index=index,
    )
    return ensure_index(dataset)


def load_dataset(path: Path) -> RuleDataset:
    """Load a serialized dataset from a JSON file."""
    return dataset_from_dict(load_json(path))


def save_dataset(dataset: RuleDataset, path: Path, *, pretty: bool = True) -> None:
    save_json(dataset_to_dict(dataset), path, pretty=pretty)

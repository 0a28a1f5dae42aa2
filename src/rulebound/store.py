"""Runtime rules store: load lifecycle plus the selector layer.

A load moves the store through ``pending`` to ``success`` or ``failure``.
Failures come back as ``Err(LoadError)``, never as exceptions. Until a load
succeeds every selector reports "no data" (empty list / None).

A second load supersedes the first. When loads overlap, the result of an
older load that finishes after a newer one has already been applied is
dropped.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import TypeAlias

from rulebound.config import SearchWeights
from rulebound.index import ensure_index, load_dataset
from rulebound.rule_types import Err, LoadError, Ok, Result, RuleDataset, RuleEntity, SearchResult
from rulebound.selectors import RuleQuery

log = logging.getLogger(__name__)

DatasetLoader: TypeAlias = Callable[[], RuleDataset]


class LoadState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class RulesStore:
    """Holds the current dataset and answers selector calls against it."""

    def __init__(self, *, weights: SearchWeights = SearchWeights()) -> None:
        self._weights = weights
        self._lock = threading.Lock()
        self._state = LoadState.IDLE
        self._query: RuleQuery | None = None
        self._error: LoadError | None = None
        self._issued = 0
        self._applied = 0

    # -- lifecycle -----------------------------------------------------------

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def error(self) -> LoadError | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._state is LoadState.PENDING

    @property
    def version(self) -> str | None:
        query = self._query
        return query.version if query is not None else None

    def load(self, loader: DatasetLoader) -> Result[RuleDataset, LoadError]:
        """Run ``loader`` and apply its outcome unless a newer load already won.

        Any exception raised by the loader (transport, format, or a bug in a
        custom loader) is returned as ``Err``; the store moves to ``failure``
        and keeps no data.
        """
        with self._lock:
            self._issued += 1
            ticket = self._issued
            self._state = LoadState.PENDING
            self._error = None

        outcome: Result[RuleDataset, LoadError]
        try:
            dataset = ensure_index(loader())
        except Exception as exc:
            outcome = Err(LoadError(reason=str(exc), exception_type=type(exc).__name__))
        else:
            outcome = Ok(dataset)

        with self._lock:
            if ticket < self._applied:
                log.info("Dropping stale load #%d (load #%d already applied)", ticket, self._applied)
                return outcome
            self._applied = ticket
            match outcome:
                case Ok(value=ds):
                    self._query = RuleQuery(ds, weights=self._weights)
                    self._error = None
                    self._state = LoadState.SUCCESS
                    log.info("Loaded %d rules (version %s)", len(ds.sections), ds.version)
                case Err(error=err):
                    self._query = None
                    self._error = err
                    self._state = LoadState.FAILURE
                    log.warning("Rules load failed: %s", err.reason)
        return outcome

    def load_file(self, path: Path) -> Result[RuleDataset, LoadError]:
        """Load a serialized dataset JSON file."""
        return self.load(lambda: load_dataset(path))

    # -- selectors -----------------------------------------------------------

    def get_top_level_sections(self) -> list[RuleEntity]:
        query = self._query
        return query.get_top_level_sections() if query is not None else []

    def get_by_id(self, rule_id: str) -> RuleEntity | None:
        query = self._query
        return query.get_by_id(rule_id) if query is not None else None

    def get_children(self, rule_id: str) -> list[RuleEntity]:
        query = self._query
        return query.get_children(rule_id) if query is not None else []

    def get_referenced_by(self, rule_id: str) -> list[RuleEntity]:
        query = self._query
        return query.get_referenced_by(rule_id) if query is not None else []

    def get_ancestors(self, rule_id: str) -> list[RuleEntity]:
        query = self._query
        return query.get_ancestors(rule_id) if query is not None else []

    def search(self, query_text: str, *, limit: int | None = None) -> list[SearchResult]:
        query = self._query
        return query.search(query_text, limit=limit) if query is not None else []

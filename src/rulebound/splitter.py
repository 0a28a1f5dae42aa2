"""Number/content splitter: a single-pass state machine over source lines.

The accumulator holds one piece of state, the entity under construction and
its pending text. Each transition has its own method so the lifecycle
(including the end-of-input flush) is testable without any I/O:

  on_labelled_line     finalize the open entity, open a new one
  on_continuation_line append text to the open entity (preamble is dropped)
  on_blank_line        keep a paragraph break inside the open entity
  finalize             flush the open entity and return every draft
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rulebound.labels import LabelMatch, match_label


@dataclass(slots=True)
class DraftEntity:
    """Entity text assembled by the splitter, before hierarchy linking."""

    id: str
    label: str
    level: int
    title: str
    content: str
    line_number: int    # 1-based line of the label in the source


@dataclass(slots=True)
class _OpenEntity:
    match: LabelMatch
    line_number: int
    pending: list[str] = field(default_factory=list[str])


class EntityAccumulator:
    """Accumulates labelled lines and their continuation text into drafts."""

    def __init__(self) -> None:
        self._open: _OpenEntity | None = None
        self._drafts: list[DraftEntity] = []
        self.discarded_preamble_lines = 0

    @property
    def has_open_entity(self) -> bool:
        return self._open is not None

    def on_labelled_line(self, match: LabelMatch, line_number: int) -> None:
        self._close_open()
        self._open = _OpenEntity(
            match=match,
            line_number=line_number,
            pending=[match.content],
        )

    def on_continuation_line(self, text: str) -> None:
        if self._open is None:
            self.discarded_preamble_lines += 1
            return
        self._open.pending.append(text.strip())

    def on_blank_line(self) -> None:
        if self._open is not None and self._open.pending:
            self._open.pending.append("")

    def feed(self, line: str, line_number: int, *, section_modulus: int = 100) -> None:
        """Classify one raw line and dispatch it to the matching transition."""
        trimmed = line.strip()
        if not trimmed:
            self.on_blank_line()
            return
        match = match_label(trimmed, section_modulus=section_modulus)
        if match is None:
            self.on_continuation_line(trimmed)
        else:
            self.on_labelled_line(match, line_number)

    def finalize(self) -> list[DraftEntity]:
        """Flush the open entity (end of input) and return all drafts."""
        self._close_open()
        return list(self._drafts)

    def _close_open(self) -> None:
        if self._open is None:
            return
        match = self._open.match
        content = "\n".join(self._open.pending).strip()
        self._drafts.append(DraftEntity(
            id=match.id,
            label=match.label,
            level=match.level,
            title=_title_for(match.content, content),
            content=content,
            line_number=self._open.line_number,
        ))
        self._open = None


def _title_for(first_line: str, content: str) -> str:
    """First line after the label; else the first line of the whole content."""
    if first_line:
        return first_line
    return content.split("\n", 1)[0] or content

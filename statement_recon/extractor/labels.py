"""Header label rules and the field locator.

A :class:`LabelRule` describes one way a header cell may name a field: any of
``contains`` appearing in the cell, or the cell being exactly one of
``equals``, unless one of ``excludes`` appears. Cell text is normalised first
(lowercase, internal whitespace collapsed, trimmed).

:func:`locate_header` walks the first rows of a grid, remembers which column
each field lives in, and confirms the header at the first row where every
required field is known.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from statement_recon.extractor.types import CellGrid, FieldMatch
from statement_recon.utils.diagnostics import resolve_logger
from statement_recon.utils.parsing import normalize_cell

__all__ = [
    "CellClassifier",
    "HeaderScan",
    "LabelRule",
    "build_label_rules",
    "locate_header",
    "match_field",
    "matches_any",
]

# (row_index, col_index, normalised_text, row) -> field name or None
CellClassifier = Callable[[int, int, str, list[Any]], str | None]


@dataclass(frozen=True)
class LabelRule:
    """One header-label pattern for a field."""

    contains: tuple[str, ...] = ()
    equals: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, raw: Mapping[str, Iterable[str]]) -> LabelRule:
        """Build a rule from a ``{"contains": [...], "equals": [...], "excludes": [...]}`` block."""
        return cls(
            contains=tuple(s.lower() for s in raw.get("contains", ())),
            equals=tuple(s.lower() for s in raw.get("equals", ())),
            excludes=tuple(s.lower() for s in raw.get("excludes", ())),
        )

    def matches(self, text: str) -> bool:
        """Return True when normalised ``text`` satisfies this rule."""
        if not text:
            return False
        if any(token in text for token in self.excludes):
            return False
        return any(token in text for token in self.contains) or text in self.equals


def build_label_rules(raw: Mapping[str, list[Mapping[str, Any]]]) -> dict[str, tuple[LabelRule, ...]]:
    """Convert a ``labels`` config block into rules keyed by field name.

    Field order is preserved; :func:`match_field` tries fields in that order.
    """
    return {field: tuple(LabelRule.from_config(rule) for rule in rules) for field, rules in raw.items()}


def matches_any(text: str, rules: Iterable[LabelRule]) -> bool:
    """Return True when any rule matches ``text``."""
    return any(rule.matches(text) for rule in rules)


def match_field(text: str, rules_by_field: Mapping[str, tuple[LabelRule, ...]]) -> str | None:
    """Return the first field whose rules match normalised ``text``."""
    for field, rules in rules_by_field.items():
        if matches_any(text, rules):
            return field
    return None


@dataclass(frozen=True)
class HeaderScan:
    """Result of a successful header search."""

    header_row: int
    fields: FieldMatch


def locate_header(
    grid: CellGrid,
    classify: CellClassifier,
    required: Iterable[str],
    scan_rows: int,
    logger: logging.Logger | None = None,
    allow_partial: bool = False,
) -> HeaderScan | None:
    """Find the header row of a sheet.

    Parameters
    ----------
    grid : CellGrid
        Sheet rows.
    classify : CellClassifier
        Decides which field (if any) a non-empty cell names.
    required : Iterable[str]
        Fields that must all be located before the header is confirmed.
    scan_rows : int
        Number of leading rows to inspect.
    logger : logging.Logger, optional
        Diagnostic sink.
    allow_partial : bool, optional
        Return the fields seen so far (with ``header_row=-1``) instead of
        ``None`` when the header is never confirmed.

    Returns
    -------
    HeaderScan | None
        Header row and frozen field columns, or ``None`` when the required
        fields never all appear within the window.

    Notes
    -----
    Inside one row the first cell naming a field wins. Fields seen on earlier
    rows are remembered (first one wins) and merged with the confirming row,
    whose own columns take precedence.
    """
    log = resolve_logger(logger)
    required = tuple(required)
    remembered: FieldMatch = {}

    for r, row in enumerate(grid[:scan_rows]):
        row_fields: FieldMatch = {}
        for c, cell in enumerate(row):
            text = normalize_cell(cell)
            if not text:
                continue
            field = classify(r, c, text, row)
            if field is not None and field not in row_fields:
                row_fields[field] = c

        candidate = {**remembered, **row_fields}
        if required and all(name in candidate for name in required):
            log.debug("Header confirmed at row %d with fields %s", r, candidate)
            return HeaderScan(header_row=r, fields=candidate)

        for field, c in row_fields.items():
            remembered.setdefault(field, c)

    log.debug("No header within first %d rows (seen fields: %s)", scan_rows, sorted(remembered))
    if allow_partial:
        return HeaderScan(header_row=-1, fields=remembered)
    return None

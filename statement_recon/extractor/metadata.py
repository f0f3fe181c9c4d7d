"""Document metadata discovery: issuing institution and statement date.

Metadata is found independently of code discovery. Each cell goes through
three heuristics in turn:

1. Vertical: a column already marked by a keyword yields the first
   acceptable value below it.
2. Same cell: ``"Người thu: Ngân hàng X"`` carries its own value.
3. Horizontal: otherwise the cell to the right holds the value.

Variants may also declare period rules (``"Kỳ sao kê: 01/06/2024 - ..."``)
that yield a statement date when no collection date is present. The first
accepted value for each item is never overwritten.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from statement_recon.config import compile_config_pattern, get_metadata_config
from statement_recon.extractor.types import CellGrid, MetadataResult
from statement_recon.utils.dates import format_date_value, iso_to_display
from statement_recon.utils.diagnostics import resolve_logger
from statement_recon.utils.parsing import cell_text

__all__ = ["MetadataRules", "PeriodRule", "extract_metadata"]


@dataclass(frozen=True)
class PeriodRule:
    """Keyword-triggered statement-period date pattern."""

    keywords: tuple[str, ...]
    pattern: re.Pattern[str]
    iso: bool = False

    def parse(self, value: str) -> str | None:
        """Return the first date in ``value``; ISO dates become ``dd/mm/yyyy``."""
        match = self.pattern.search(value)
        if not match:
            return None
        found = match.group(1)
        return iso_to_display(found) if self.iso else found


@dataclass(frozen=True)
class MetadataRules:
    """Keywords, same-cell patterns and denylists for one variant."""

    enabled: bool = True
    institution_keywords: tuple[str, ...] = ("người thu", "nguoi thu")
    date_keywords: tuple[str, ...] = ("ngày thu", "ngay thu")
    institution_pattern: re.Pattern[str] | None = None
    date_pattern: re.Pattern[str] | None = None
    denylist_contains: tuple[str, ...] = ()
    denylist_equals: tuple[str, ...] = ()
    period_rules: tuple[PeriodRule, ...] = field(default_factory=tuple)

    @classmethod
    def from_spec(cls, spec: Mapping[str, Any]) -> MetadataRules:
        """Merge shared keyword settings with a variant's ``metadata`` block."""
        shared = get_metadata_config()
        own = spec.get("metadata", {})
        institution_pattern = shared.get("institution_same_cell_pattern")
        date_pattern = shared.get("date_same_cell_pattern")
        return cls(
            enabled=bool(own.get("enabled", True)),
            institution_keywords=tuple(shared.get("institution_keywords", cls.institution_keywords)),
            date_keywords=tuple(shared.get("date_keywords", cls.date_keywords)),
            institution_pattern=compile_config_pattern(institution_pattern) if institution_pattern else None,
            date_pattern=compile_config_pattern(date_pattern) if date_pattern else None,
            denylist_contains=tuple(s.lower() for s in own.get("denylist_contains", ())),
            denylist_equals=tuple(s.lower() for s in own.get("denylist_equals", ())),
            period_rules=tuple(
                PeriodRule(
                    keywords=tuple(k.lower() for k in rule["keywords"]),
                    pattern=compile_config_pattern(rule["pattern"]),
                    iso=bool(rule.get("iso", False)),
                )
                for rule in own.get("period_rules", ())
            ),
        )

    def is_denied(self, value: str) -> bool:
        """Return True when ``value`` looks like another header label."""
        lower = value.lower()
        return any(token in lower for token in self.denylist_contains) or lower in self.denylist_equals


def _collapse(value: Any) -> str:
    return re.sub(r"\s+", " ", cell_text(value)).strip()


class _Scan:
    """Mutable state for one metadata pass over a sheet."""

    def __init__(self, rules: MetadataRules, log: logging.Logger) -> None:
        self.rules = rules
        self.log = log
        self.result = MetadataResult()
        self.institution_col: int | None = None
        self.date_col: int | None = None

    # -- acceptance ---------------------------------------------------------

    def accept_institution(self, value: str, r: int, how: str) -> None:
        if self.result.institution is None and value and not self.rules.is_denied(value):
            self.result.institution = value
            self.result.institution_row = r
            self.log.debug("Institution %r found at row %d (%s)", value, r, how)

    def accept_date(self, raw: Any, r: int, how: str) -> None:
        if self.result.statement_date is not None:
            return
        if isinstance(raw, str) and self.rules.is_denied(raw):
            return
        value = format_date_value(raw)
        if value:
            self.result.statement_date = value
            self.result.date_row = r
            self.log.debug("Statement date %r found at row %d (%s)", value, r, how)

    # -- per cell -----------------------------------------------------------

    def visit(self, r: int, c: int, row: list[Any]) -> None:
        raw = row[c]
        text = _collapse(raw)
        lower = text.lower()

        if c == self.institution_col and self.result.institution is None:
            if not any(k in lower for k in self.rules.institution_keywords):
                self.accept_institution(text, r, "vertical")
        if c == self.date_col and self.result.statement_date is None:
            if not any(k in lower for k in self.rules.date_keywords):
                self.accept_date(raw, r, "vertical")

        if not lower:
            return

        neighbour = row[c + 1] if c + 1 < len(row) else None

        if any(k in lower for k in self.rules.institution_keywords):
            self.institution_col = c
            same = self.rules.institution_pattern.search(text) if self.rules.institution_pattern else None
            if same:
                self.accept_institution(same.group(1).strip(), r, "same cell")
            elif neighbour is not None:
                self.accept_institution(_collapse(neighbour), r, "horizontal")

        if any(k in lower for k in self.rules.date_keywords):
            self.date_col = c
            same = self.rules.date_pattern.search(text) if self.rules.date_pattern else None
            if same:
                self.accept_date(same.group(1).strip(), r, "same cell")
            elif neighbour is not None:
                self.accept_date(neighbour, r, "horizontal")

        if self.result.statement_date is None:
            self.visit_period(r, lower, text, neighbour)

    def visit_period(self, r: int, lower: str, text: str, neighbour: Any) -> None:
        for rule in self.rules.period_rules:
            if not any(k in lower for k in rule.keywords):
                continue
            parts = text.split(":", 1)
            value = parts[1] if len(parts) > 1 and parts[1].strip() else cell_text(neighbour)
            found = rule.parse(value)
            if found:
                self.result.statement_date = found
                self.result.date_row = r
                self.log.debug("Statement date %r found at row %d (period)", found, r)
                return
            self.log.debug("Period keyword at row %d but no date in %r", r, value)


def extract_metadata(
    grid: CellGrid,
    rules: MetadataRules,
    scan_rows: int | None = None,
    logger: logging.Logger | None = None,
) -> MetadataResult:
    """Scan a sheet for institution name and statement date.

    Parameters
    ----------
    grid : CellGrid
        Sheet rows.
    rules : MetadataRules
        Keyword, pattern and denylist settings.
    scan_rows : int, optional
        Limit the scan to the leading rows; whole sheet when omitted.
    logger : logging.Logger, optional
        Diagnostic sink.

    Returns
    -------
    MetadataResult
        Values found, each with the row where it was accepted. No default
        institution is applied here.
    """
    scan = _Scan(rules, resolve_logger(logger))
    if not rules.enabled:
        return scan.result

    rows = grid if scan_rows is None else grid[:scan_rows]
    for r, row in enumerate(rows):
        for c in range(len(row)):
            scan.visit(r, c, row)
        if scan.result.complete:
            break
    return scan.result

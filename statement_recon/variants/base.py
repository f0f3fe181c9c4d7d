"""Template for grid-based layout variants.

A variant is configured by its block in ``config/variants.json`` and
implements three steps:

1. :meth:`GridVariant.match` decides whether a sheet follows the layout,
   returning :class:`VariantMatch` or :class:`Declined` (never raising).
2. :meth:`GridVariant.extract_records` turns every data row that carries a
   customer code into a :class:`CodeRecord`.
3. :meth:`GridVariant.extract_metadata` finds the issuing institution and
   statement date, falling back to the variant's institution name.

Subclasses override the narrow hooks (``extract_code``,
``extract_description``, ``extract_amount``) where an institution's layout
differs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from statement_recon.config import get_variant_spec
from statement_recon.extractor.branding import BrandingRules, accept_generic_candidate
from statement_recon.extractor.labels import (
    LabelRule,
    build_label_rules,
    locate_header,
    match_field,
    matches_any,
)
from statement_recon.extractor.metadata import MetadataRules, extract_metadata
from statement_recon.extractor.types import (
    AMOUNT,
    CODE,
    DESCRIPTION,
    CellGrid,
    CodeRecord,
    Declined,
    MatchOutcome,
    MetadataResult,
    VariantMatch,
)
from statement_recon.utils.diagnostics import resolve_logger
from statement_recon.utils.parsing import (
    Amount,
    cell_text,
    find_embedded_code,
    is_code,
    normalize_code,
    parse_amount,
)

__all__ = ["GridVariant", "cell_at"]


def cell_at(row: list[Any], col: int | None) -> Any:
    """Return ``row[col]``, or ``None`` when the column is unknown or out of range."""
    if col is None or col < 0 or col >= len(row):
        return None
    return row[col]


class GridVariant:
    """Rule-driven matcher and extractor for one statement layout."""

    key: ClassVar[str] = ""
    # Columns tried in order for the record description
    description_fields: ClassVar[tuple[str, ...]] = (DESCRIPTION,)
    # Columns tried in order for the record amount
    amount_fields: ClassVar[tuple[str, ...]] = (AMOUNT,)

    def __init__(self, spec: Mapping[str, Any] | None = None, logger: logging.Logger | None = None) -> None:
        self.spec: dict[str, Any] = dict(spec) if spec is not None else get_variant_spec(self.key)
        self.institution: str = self.spec["institution"]
        self.scan_rows = int(self.spec.get("scan_rows", 50))
        self.required_fields: tuple[str, ...] = tuple(self.spec.get("required_fields", [CODE]))
        self.labels = build_label_rules(self.spec.get("labels", {}))
        self.generic_labels = tuple(LabelRule.from_config(r) for r in self.spec.get("generic_code_labels") or ())
        self.branding = BrandingRules.from_spec(self.spec)
        self.metadata_rules = MetadataRules.from_spec(self.spec)
        self.accept_any_code = bool(self.spec.get("accept_any_code", False))
        self.sheet_names = tuple(name.lower() for name in self.spec.get("sheet_names", ()))
        self.logger = resolve_logger(logger)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"

    # =========================================================================
    # Matching
    # =========================================================================

    def accepts_sheet_name(self, sheet_name: str) -> bool:
        """Return True unless the variant is limited to specific sheet names."""
        return not self.sheet_names or sheet_name.strip().lower() in self.sheet_names

    def scan_metadata(self, grid: CellGrid) -> MetadataResult:
        """Run the metadata heuristics over the header window."""
        return extract_metadata(grid, self.metadata_rules, self.scan_rows, self.logger)

    def classify_cell(self, grid: CellGrid, r: int, text: str, metadata: MetadataResult) -> str | None:
        """Return the field a header cell names, or None.

        Generic code labels take precedence over every other rule and are
        only accepted with brand evidence.
        """
        if self.generic_labels and matches_any(text, self.generic_labels):
            institution = None
            if metadata.institution_row is not None and metadata.institution_row <= r:
                institution = metadata.institution
            if accept_generic_candidate(grid, r, text, self.branding, institution, self.logger):
                return CODE
            return None
        return match_field(text, self.labels)

    def match(self, grid: CellGrid, sheet_name: str = "") -> MatchOutcome:
        """Decide whether ``grid`` follows this layout."""
        if not self.accepts_sheet_name(sheet_name):
            return Declined(self.key, f"sheet {sheet_name!r} is not handled")
        if not grid:
            return Declined(self.key, "empty sheet")

        metadata = self.scan_metadata(grid)
        scan = locate_header(
            grid,
            lambda r, _c, text, _row: self.classify_cell(grid, r, text, metadata),
            self.required_fields,
            self.scan_rows,
            self.logger,
        )
        if scan is None:
            return Declined(self.key, "no header found")

        self.logger.debug("[%s] header at row %d: %s", self.key, scan.header_row, scan.fields)
        return VariantMatch(self.key, scan.header_row, scan.header_row + 1, scan.fields)

    # =========================================================================
    # Record extraction
    # =========================================================================

    def extract_code(self, row: list[Any], match: VariantMatch) -> str | None:
        """Return the row's customer code: strict full-cell first, else embedded."""
        text = cell_text(cell_at(row, match.column(CODE)))
        if not text:
            return None
        if self.accept_any_code or is_code(text):
            return normalize_code(text)
        return find_embedded_code(text)

    def extract_amount(self, row: list[Any], match: VariantMatch) -> Amount | None:
        """Parse the first populated amount column."""
        for name in self.amount_fields:
            value = cell_at(row, match.column(name))
            if cell_text(value):
                return parse_amount(value)
        return None

    def extract_description(self, row: list[Any], match: VariantMatch, code: str) -> str | None:
        """Return the first non-empty description column."""
        for name in self.description_fields:
            text = cell_text(cell_at(row, match.column(name)))
            if text:
                return text
        return None

    def extract_records(self, grid: CellGrid, match: VariantMatch) -> list[CodeRecord]:
        """Build one record per data row carrying a code; duplicates are kept."""
        records: list[CodeRecord] = []
        for r in range(max(match.data_start, 0), len(grid)):
            row = grid[r]
            code = self.extract_code(row, match)
            if code is None:
                continue
            records.append(
                CodeRecord(
                    code=code,
                    amount=self.extract_amount(row, match),
                    description=self.extract_description(row, match, code),
                    row=r,
                    source="excel",
                ),
            )
        self.logger.debug("[%s] %d records from row %d", self.key, len(records), match.data_start)
        return records

    # =========================================================================
    # Metadata
    # =========================================================================

    def sheet_metadata(self, grid: CellGrid) -> MetadataResult:
        """Find institution and date on any sheet of a claimed document.

        Used for sheets this variant declined as well; the institution
        defaults to this variant's.
        """
        metadata = self.scan_metadata(grid)
        if metadata.institution is None:
            metadata.institution = self.institution
        return metadata

    def extract_metadata(self, grid: CellGrid, match: VariantMatch) -> MetadataResult:
        """Find institution and date for a matched sheet."""
        return self.sheet_metadata(grid)

"""Agribank collection lists, also the generic fallback layout.

The fallback claims any sheet whose first rows carry no other institution's
branding. It locates a code column from a ``Mã KH`` label or from the first
cell that is itself a code; in the latter case data starts on that row. With
no code column at all, every cell of every row is searched.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from statement_recon.extractor.branding import accept_generic_candidate, find_token
from statement_recon.extractor.labels import locate_header, match_field, matches_any
from statement_recon.extractor.types import CODE, DESCRIPTION, CellGrid, Declined, MatchOutcome, VariantMatch
from statement_recon.utils.parsing import (
    cell_text,
    code_regex,
    find_embedded_code,
    is_code,
    normalize_code,
    row_text,
)
from statement_recon.variants.base import GridVariant, cell_at

__all__ = ["AgribankVariant"]


class AgribankVariant(GridVariant):
    key = "agribank"

    def __init__(self, spec: Mapping[str, Any] | None = None, logger: logging.Logger | None = None) -> None:
        super().__init__(spec, logger)
        self.document_competitors = tuple(t.lower() for t in self.spec.get("document_competitor_tokens", ()))
        self.document_competitor_rows = int(self.spec.get("document_competitor_rows", 10))
        pattern = self.spec.get("description_pattern", "{code},[^#]+#[^#]+").replace("{code}", code_regex())
        self.description_pattern = re.compile(pattern, re.IGNORECASE)

    def document_competitor(self, grid: CellGrid) -> str | None:
        """Return another institution's token found in the leading rows, if any."""
        for row in grid[: self.document_competitor_rows]:
            token = find_token(row_text(row), self.document_competitors)
            if token:
                return token
        return None

    def _classify(self, grid: CellGrid, r: int, cell: Any, text: str) -> str | None:
        if matches_any(text, self.generic_labels) or is_code(cell):
            if accept_generic_candidate(grid, r, text, self.branding, logger=self.logger):
                return CODE
            return None
        return match_field(text, self.labels)

    def match(self, grid: CellGrid, sheet_name: str = "") -> MatchOutcome:
        if not grid:
            return Declined(self.key, "empty sheet")

        competitor = self.document_competitor(grid)
        if competitor:
            self.logger.debug("[%s] declined: leading rows mention %r", self.key, competitor)
            return Declined(self.key, f"document branded {competitor!r}")

        scan = locate_header(
            grid,
            lambda r, c, text, row: self._classify(grid, r, row[c], text),
            self.required_fields,
            self.scan_rows,
            self.logger,
            allow_partial=True,
        )
        if scan is None or scan.header_row < 0:
            self.logger.debug("[%s] no code column, scanning every cell", self.key)
            return VariantMatch(self.key, -1, 0, scan.fields if scan else {})

        header_row = scan.header_row
        code_cell = cell_at(grid[header_row], scan.fields[CODE])
        data_start = header_row if is_code(code_cell) else header_row + 1
        return VariantMatch(self.key, header_row, data_start, scan.fields)

    def extract_code(self, row: list[Any], match: VariantMatch) -> str | None:
        if match.has_code_column:
            text = cell_text(cell_at(row, match.column(CODE)))
            return normalize_code(text) if is_code(text) else None

        embedded: str | None = None
        for cell in row:
            text = cell_text(cell)
            if not text:
                continue
            if is_code(text):
                return normalize_code(text)
            if embedded is None:
                embedded = find_embedded_code(text)
        return embedded

    def extract_description(self, row: list[Any], match: VariantMatch, code: str) -> str | None:
        text = cell_text(cell_at(row, match.column(DESCRIPTION)))
        if not text:
            return None
        found = self.description_pattern.search(text)
        return found.group(0).strip() if found else text

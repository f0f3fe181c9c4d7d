"""LPBank (LienVietPostBank) statements and history files.

Description prefers the payer name, then the transaction narrative, then the
code cell itself when it holds more than the bare code. The bill total wins
over the credit column for the amount. A ``Nội dung giao dịch`` header names
both the code and the narrative column.
"""

from __future__ import annotations

from typing import Any

from statement_recon.extractor.labels import matches_any
from statement_recon.extractor.types import (
    AMOUNT,
    BILL_AMOUNT,
    CODE,
    DESCRIPTION,
    PARTY_NAME,
    CellGrid,
    MatchOutcome,
    VariantMatch,
)
from statement_recon.utils.parsing import cell_text, normalize_cell
from statement_recon.variants.base import GridVariant, cell_at

__all__ = ["LPBankVariant"]


class LPBankVariant(GridVariant):
    key = "lpbank"
    description_fields = (PARTY_NAME, DESCRIPTION)
    amount_fields = (BILL_AMOUNT, AMOUNT)

    def match(self, grid: CellGrid, sheet_name: str = "") -> MatchOutcome:
        outcome = super().match(grid, sheet_name)
        if not isinstance(outcome, VariantMatch) or DESCRIPTION in outcome.fields:
            return outcome

        code_col = outcome.fields[CODE]
        header = normalize_cell(cell_at(grid[outcome.header_row], code_col))
        if not matches_any(header, self.labels.get(DESCRIPTION, ())):
            return outcome
        self.logger.debug("[%s] code column %d is also the description column", self.key, code_col)
        fields = {**outcome.fields, DESCRIPTION: code_col}
        return VariantMatch(outcome.variant, outcome.header_row, outcome.data_start, fields)

    def extract_description(self, row: list[Any], match: VariantMatch, code: str) -> str | None:
        description = super().extract_description(row, match, code)
        if description:
            return description
        # Code cell doubles as narrative only when it carries more than the code
        text = cell_text(cell_at(row, match.column(CODE)))
        return text if len(text) > len(code) + 5 else None

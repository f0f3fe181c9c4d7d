"""Sacombank statements.

Header needs booking-date, description and credit columns. The code is
embedded in the description; credit cells holding ``-`` or nothing mean no
amount. The statement date is the first booking date in the data rows.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from statement_recon.extractor.types import AMOUNT, BOOKING_DATE, DESCRIPTION, CellGrid, MetadataResult, VariantMatch
from statement_recon.utils.dates import format_date_value, is_date_serial, serial_to_date
from statement_recon.utils.parsing import Amount, cell_text, find_code, parse_amount
from statement_recon.variants.base import GridVariant, cell_at

__all__ = ["SacombankVariant"]

_DISPLAY_DATE = re.compile(r"\d{2}/\d{2}/\d{4}")


class SacombankVariant(GridVariant):
    key = "sacombank"

    def extract_code(self, row: list[Any], match: VariantMatch) -> str | None:
        return find_code(cell_at(row, match.column(DESCRIPTION)))

    def extract_amount(self, row: list[Any], match: VariantMatch) -> Amount | None:
        value = cell_at(row, match.column(AMOUNT))
        if cell_text(value) in ("", "-"):
            return None
        return parse_amount(value)

    @staticmethod
    def booking_date(value: Any) -> str | None:
        """Return ``dd/mm/yyyy`` for a serial, or the leading date token of a timestamp string."""
        if isinstance(value, date):
            return format_date_value(value)
        if is_date_serial(value) and not isinstance(value, str):
            return serial_to_date(float(value))
        tokens = cell_text(value).split()
        if tokens and _DISPLAY_DATE.search(tokens[0]):
            return tokens[0]
        return None

    def extract_metadata(self, grid: CellGrid, match: VariantMatch) -> MetadataResult:
        metadata = MetadataResult(institution=self.institution)
        for r in range(match.data_start, len(grid)):
            found = self.booking_date(cell_at(grid[r], match.column(BOOKING_DATE)))
            if found:
                metadata.statement_date = found
                metadata.date_row = r
                break
        return metadata

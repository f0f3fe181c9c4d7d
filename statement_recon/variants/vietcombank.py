"""Vietcombank statements.

The ``Mô tả`` column carries both the code and the payment narrative; the
narrative after the configured marker (``GENPCO_``) is kept as description.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from statement_recon.extractor.types import CODE, VariantMatch
from statement_recon.utils.parsing import cell_text
from statement_recon.variants.base import GridVariant, cell_at

__all__ = ["VietcombankVariant"]


class VietcombankVariant(GridVariant):
    key = "vietcombank"

    def __init__(self, spec: Mapping[str, Any] | None = None, logger: logging.Logger | None = None) -> None:
        super().__init__(spec, logger)
        self.description_marker: str = self.spec.get("description_marker", "GENPCO_")

    def extract_description(self, row: list[Any], match: VariantMatch, code: str) -> str | None:
        text = cell_text(cell_at(row, match.column(CODE)))
        if not text:
            return None
        _, marker, tail = text.partition(self.description_marker)
        if marker and tail.strip():
            return tail.strip()
        return text

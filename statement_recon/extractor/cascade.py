"""Variant matcher cascade.

Variants are tried in priority order against a whole document. A variant
claims the document as soon as it accepts any one sheet; it then owns every
sheet of that document, including the ones it declined.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from statement_recon.extractor.types import CellGrid, MatchOutcome, VariantMatch
from statement_recon.utils.diagnostics import resolve_logger
from statement_recon.variants import GridVariant, build_cascade

__all__ = ["CascadeResult", "run_cascade"]


@dataclass(frozen=True)
class CascadeResult:
    """Winning variant and its per-sheet outcomes (empty when nothing matched)."""

    variant: GridVariant | None
    outcomes: dict[str, MatchOutcome] = field(default_factory=dict)

    @property
    def matched(self) -> bool:
        return self.variant is not None


def run_cascade(
    sheets: Mapping[str, CellGrid],
    variants: Sequence[GridVariant] | None = None,
    logger: logging.Logger | None = None,
) -> CascadeResult:
    """Find the first variant that accepts at least one sheet.

    Parameters
    ----------
    sheets : Mapping[str, CellGrid]
        Sheet name to grid, in workbook order.
    variants : Sequence[GridVariant], optional
        Matchers in priority order; the configured cascade when omitted.
    logger : logging.Logger, optional
        Diagnostic sink.

    Returns
    -------
    CascadeResult
        Winning variant with every sheet's outcome, or no variant.
    """
    log = resolve_logger(logger)
    variants = variants if variants is not None else build_cascade(logger)

    for variant in variants:
        outcomes = {name: variant.match(grid, name) for name, grid in sheets.items()}
        accepted = [name for name, outcome in outcomes.items() if isinstance(outcome, VariantMatch)]
        if accepted:
            log.debug("Cascade: %s accepted sheet(s) %s", variant.key, accepted)
            return CascadeResult(variant, outcomes)
        log.debug("Cascade: %s declined every sheet", variant.key)

    log.debug("Cascade: no variant matched")
    return CascadeResult(None)

"""Brand evidence for generic code labels.

A header like ``Mã KH`` appears in nearly every collection list, so a variant
only claims it when the document carries that institution's branding near the
header and no competitor's branding in the header row itself.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from statement_recon.extractor.types import CellGrid
from statement_recon.utils.diagnostics import resolve_logger
from statement_recon.utils.parsing import row_text

__all__ = ["BrandingRules", "find_token", "find_brand_evidence", "accept_generic_candidate"]


def find_token(text: str, tokens: Iterable[str]) -> str | None:
    """Return the first token found in lowercase ``text``."""
    for token in tokens:
        if token in text:
            return token
    return None


@dataclass(frozen=True)
class BrandingRules:
    """Brand and competitor tokens for one variant."""

    brand_tokens: tuple[str, ...] = ()
    competitor_tokens: tuple[str, ...] = ()
    lookahead: int = 0

    @classmethod
    def from_spec(cls, spec: Mapping[str, Any]) -> BrandingRules:
        return cls(
            brand_tokens=tuple(t.lower() for t in spec.get("brand_tokens", ())),
            competitor_tokens=tuple(t.lower() for t in spec.get("competitor_tokens", ())),
            lookahead=int(spec.get("brand_lookahead", 0)),
        )

    @property
    def needs_evidence(self) -> bool:
        return bool(self.brand_tokens)


def find_brand_evidence(
    grid: CellGrid,
    row_index: int,
    cell: str,
    rules: BrandingRules,
    institution: str | None = None,
) -> str | None:
    """Locate brand evidence for a generic code label at ``row_index``.

    Sources are checked in order: the institution name accepted so far, the
    label cell itself, the rest of its row, then ``rules.lookahead`` rows
    below it.

    Returns
    -------
    str | None
        Name of the source that carried a brand token, or ``None``.
    """
    if institution and find_token(institution.lower(), rules.brand_tokens):
        return "institution"
    if find_token(cell.lower(), rules.brand_tokens):
        return "cell"
    if find_token(row_text(grid[row_index]), rules.brand_tokens):
        return "row"
    for lr in range(row_index + 1, min(len(grid), row_index + 1 + rules.lookahead)):
        if find_token(row_text(grid[lr]), rules.brand_tokens):
            return "lookahead"
    return None


def accept_generic_candidate(
    grid: CellGrid,
    row_index: int,
    cell: str,
    rules: BrandingRules,
    institution: str | None = None,
    logger: logging.Logger | None = None,
) -> bool:
    """Decide whether a generic code label belongs to this variant.

    A competitor token anywhere in the row rejects the candidate outright.
    Variants without brand tokens accept every remaining candidate.
    """
    log = resolve_logger(logger)
    row = grid[row_index]
    competitor = find_token(row_text(row), rules.competitor_tokens)
    if competitor:
        log.debug("Generic code label at row %d rejected: row mentions %r", row_index, competitor)
        return False
    if not rules.needs_evidence:
        return True

    source = find_brand_evidence(grid, row_index, cell, rules, institution)
    if source is None:
        log.debug("Generic code label at row %d rejected: no brand evidence", row_index)
        return False
    log.debug("Generic code label at row %d accepted via %s", row_index, source)
    return True

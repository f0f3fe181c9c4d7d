"""VNPT wallet exports: any non-empty customer code, customer name as description."""

from __future__ import annotations

from statement_recon.extractor.types import PARTY_NAME
from statement_recon.variants.base import GridVariant

__all__ = ["VnptVariant"]


class VnptVariant(GridVariant):
    key = "vnpt"
    description_fields = (PARTY_NAME,)

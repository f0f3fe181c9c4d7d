"""MoMo wallet exports: only the ``data`` sheet, any partner code accepted."""

from __future__ import annotations

from statement_recon.extractor.types import PARTY_NAME
from statement_recon.variants.base import GridVariant

__all__ = ["MomoVariant"]


class MomoVariant(GridVariant):
    key = "momo"
    description_fields = (PARTY_NAME,)

"""Payoo wallet exports."""

from __future__ import annotations

from statement_recon.extractor.types import PARTY_NAME
from statement_recon.variants.base import GridVariant

__all__ = ["PayooVariant"]


class PayooVariant(GridVariant):
    key = "payoo"
    description_fields = (PARTY_NAME,)

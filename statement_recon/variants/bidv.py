"""BIDV collection lists: a branded ``Mã KH`` column plus description and amount."""

from __future__ import annotations

from statement_recon.variants.base import GridVariant

__all__ = ["BidvVariant"]


class BidvVariant(GridVariant):
    key = "bidv"

"""VietinBank statements and collection lists.

Codes sit inside the transaction-description column (or a branded
``Mã KH`` column); the description is the counterpart account name.
"""

from __future__ import annotations

from statement_recon.variants.base import GridVariant

__all__ = ["VietinVariant"]


class VietinVariant(GridVariant):
    key = "vietin"

"""Layout variants and their cascade registry.

Each variant class handles one institution's statement layout. The registry
maps variant keys to classes; :func:`build_cascade` instantiates them in the
priority order configured in ``variants.json`` (generic fallback last).
"""

from __future__ import annotations

import logging

from statement_recon.config import get_cascade_order
from statement_recon.variants.agribank import AgribankVariant
from statement_recon.variants.base import GridVariant
from statement_recon.variants.bidv import BidvVariant
from statement_recon.variants.lpbank import LPBankVariant
from statement_recon.variants.momo import MomoVariant
from statement_recon.variants.payoo import PayooVariant
from statement_recon.variants.sacombank import SacombankVariant
from statement_recon.variants.vietcombank import VietcombankVariant
from statement_recon.variants.vietin import VietinVariant
from statement_recon.variants.vnpt import VnptVariant

__all__ = [
    "VARIANT_REGISTRY",
    "AgribankVariant",
    "BidvVariant",
    "GridVariant",
    "LPBankVariant",
    "MomoVariant",
    "PayooVariant",
    "SacombankVariant",
    "VietcombankVariant",
    "VietinVariant",
    "VnptVariant",
    "build_cascade",
    "get_variant",
]

VARIANT_REGISTRY: dict[str, type[GridVariant]] = {
    cls.key: cls
    for cls in (
        VietinVariant,
        VietcombankVariant,
        LPBankVariant,
        BidvVariant,
        SacombankVariant,
        MomoVariant,
        VnptVariant,
        PayooVariant,
        AgribankVariant,
    )
}


def get_variant(key: str, logger: logging.Logger | None = None) -> GridVariant:
    """Instantiate one variant by key.

    Raises
    ------
    KeyError
        If no variant class is registered under ``key``.
    """
    if key not in VARIANT_REGISTRY:
        msg = f"No variant registered for {key!r}. Available: {sorted(VARIANT_REGISTRY)}"
        raise KeyError(msg)
    return VARIANT_REGISTRY[key](logger=logger)


def build_cascade(logger: logging.Logger | None = None) -> list[GridVariant]:
    """Instantiate every variant in configured cascade order."""
    return [get_variant(key, logger) for key in get_cascade_order()]

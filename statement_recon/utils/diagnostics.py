"""Injectable diagnostic loggers.

Scan components accept an optional :class:`logging.Logger`. When none is
given they write to :data:`NULL_LOGGER`, which has a ``NullHandler`` and does
not propagate, so library use stays silent unless a caller opts in.
"""

from __future__ import annotations

import logging

__all__ = ["NULL_LOGGER", "resolve_logger"]

NULL_LOGGER = logging.getLogger("statement_recon.diagnostics.null")
NULL_LOGGER.addHandler(logging.NullHandler())
NULL_LOGGER.propagate = False


def resolve_logger(logger: logging.Logger | None) -> logging.Logger:
    """Return ``logger`` or the silent default."""
    return logger if logger is not None else NULL_LOGGER

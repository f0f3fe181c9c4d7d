"""Spreadsheet date-serial conversion.

Excel stores dates as day counts from the 1899-12-30 epoch. Statement dates
arrive either as those serials, as numeric strings holding one, as
``datetime`` objects, or as free text.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

import pandas as pd

from statement_recon.config import get_date_config
from statement_recon.utils.parsing import cell_text

__all__ = ["format_date_value", "is_date_serial", "iso_to_display", "serial_to_date"]


def _as_serial(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str) and re.fullmatch(r"\s*\d+(?:\.\d+)?\s*", value):
        return float(value)
    return None


def is_date_serial(value: Any) -> bool:
    """Return ``True`` for a number (or numeric string) inside the serial window.

    Bounds are exclusive: with the default config 30000 and 60000 are rejected.
    """
    serial = _as_serial(value)
    if serial is None:
        return False
    cfg = get_date_config()
    return float(cfg["serial_min"]) < serial < float(cfg["serial_max"])


def serial_to_date(serial: float) -> str:
    """Convert a date serial to ``dd/mm/yyyy``; the time fraction is dropped.

    Examples
    --------
    - ``45000`` -> ``"15/03/2023"``
    - ``45000.75`` -> ``"15/03/2023"``
    """
    cfg = get_date_config()
    stamp = pd.Timestamp(cfg["epoch"]) + pd.Timedelta(days=int(serial))
    return stamp.strftime(cfg["output_format"])


def iso_to_display(iso_date: str) -> str:
    """Reformat ``yyyy-mm-dd`` as ``dd/mm/yyyy``."""
    return pd.Timestamp(iso_date).strftime(get_date_config()["output_format"])


def format_date_value(value: Any) -> str | None:
    """Normalise a statement-date candidate.

    Parameters
    ----------
    value
        Raw cell value next to (or containing) a date keyword.

    Returns
    -------
    str | None
        ``dd/mm/yyyy`` for serials and datetimes, the trimmed text for any
        other digit-bearing string or non-zero number, else ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime | date | pd.Timestamp):
        return value.strftime(get_date_config()["output_format"])
    if is_date_serial(value):
        serial = _as_serial(value)
        return serial_to_date(serial) if serial is not None else None
    if isinstance(value, str | int | float) and value:
        text = cell_text(value)
        return text if re.search(r"\d", text) else None
    return None

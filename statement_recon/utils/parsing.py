"""Shared parsing utilities for statement cells and text.

Cell text normalisation, customer-code matching and amount parsing used by
every layout variant and by the text transaction extractor.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime
from functools import lru_cache
from typing import Any

from statement_recon.config import get_code_pattern_config

logger = logging.getLogger(__name__)

__all__ = [
    "Amount",
    "cell_text",
    "code_regex",
    "find_code",
    "find_embedded_code",
    "format_amount",
    "is_code",
    "normalize_cell",
    "normalize_code",
    "parse_amount",
    "row_text",
]

Amount = int | float | str


# =============================================================================
# Cell Text
# =============================================================================


def cell_text(value: Any) -> str:
    """Render a raw grid value as trimmed text.

    ``None`` and NaN become ``""``; integral floats lose their ``.0`` suffix so
    numeric code or amount cells read the way they were typed.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value).strip()


def normalize_cell(value: Any) -> str:
    """Lowercase, collapse internal whitespace and trim a cell for label matching.

    Examples
    --------
    - ``"  Mã   KH "`` -> ``"mã kh"``
    - ``"Có /\\nCredit"`` -> ``"có / credit"``
    """
    return re.sub(r"\s+", " ", cell_text(value).lower()).strip()


def row_text(row: list[Any]) -> str:
    """Join every cell of a row into one lowercase string for token searches."""
    return " ".join(cell_text(cell) for cell in row).lower()


# =============================================================================
# Customer Codes
# =============================================================================


@lru_cache(maxsize=4)
def code_regex(letter: str | None = None, digits: int | None = None) -> str:
    """Return the bare regex for one customer code (e.g. ``X\\d{6}``)."""
    default_letter, default_digits = get_code_pattern_config()
    letter = letter or default_letter
    digits = digits or default_digits
    return f"{re.escape(letter)}\\d{{{digits}}}"


def normalize_code(code: str) -> str:
    """Uppercase and trim a code; idempotent on already-normalised codes."""
    return code.strip().upper()


def is_code(value: Any) -> bool:
    """Return ``True`` when the whole cell is exactly one customer code."""
    return re.fullmatch(code_regex(), cell_text(value), re.IGNORECASE) is not None


def find_code(value: Any) -> str | None:
    """Return the first code found anywhere inside a cell, uppercased.

    Examples
    --------
    - ``"TTHD Tien nuoc Ma KH-X139595 Ma HD-Ky 1/2026"`` -> ``"X139595"``
    - ``"x052373"`` -> ``"X052373"``
    """
    match = re.search(code_regex(), cell_text(value), re.IGNORECASE)
    return normalize_code(match.group(0)) if match else None


def find_embedded_code(value: Any) -> str | None:
    """Find a code inside a longer string, preferring one delimited by non-word chars.

    ``"MA_GD:541541323|X039209,..."`` yields ``"X039209"`` even though the
    underscore-joined prefix also contains digits.
    """
    text = cell_text(value)
    bounded = re.search(rf"(?:^|[^\w])({code_regex()})(?:$|[^\w])", text, re.IGNORECASE)
    if bounded:
        return normalize_code(bounded.group(1))
    return find_code(text)


# =============================================================================
# Amounts
# =============================================================================


def parse_amount(value: Any) -> Amount | None:
    """Parse a monetary cell, keeping unparsable text verbatim.

    Thousands separators (``,``) and whitespace are stripped before parsing.
    Whole numbers come back as ``int``; fractional values as ``float``.

    Examples
    --------
    - ``"1,250,000"`` -> ``1250000``
    - ``1250000.0`` -> ``1250000``
    - ``"12.5"`` -> ``12.5``
    - ``"N/A"`` -> ``"N/A"``

    Parameters
    ----------
    value
        Raw cell value.

    Returns
    -------
    int | float | str | None
        Parsed number, the raw string when parsing fails, or ``None`` for an
        empty cell.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return None
        return int(value) if value.is_integer() else value

    raw = str(value)
    if not raw.strip():
        return None

    cleaned = re.sub(r"[,\s]", "", raw)
    try:
        number = float(cleaned)
    except ValueError:
        logger.debug("Keeping non-numeric amount as text: %r", raw)
        return raw

    if math.isnan(number) or math.isinf(number):
        return raw
    return int(number) if number.is_integer() else number


def format_amount(amount: Amount | None) -> str:
    """Format an amount for display with ``en-US`` grouping, rounded to units.

    Strings are returned unchanged and ``None`` becomes ``""``.
    """
    if amount is None:
        return ""
    if isinstance(amount, str):
        return amount
    return f"{round(amount):,}"

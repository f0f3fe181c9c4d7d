"""Shared utility functions for statement_recon package."""

from statement_recon.utils.dates import format_date_value, is_date_serial, serial_to_date
from statement_recon.utils.diagnostics import NULL_LOGGER, resolve_logger
from statement_recon.utils.parsing import (
    cell_text,
    find_code,
    find_embedded_code,
    format_amount,
    is_code,
    normalize_cell,
    normalize_code,
    parse_amount,
    row_text,
)

__all__ = [
    "NULL_LOGGER",
    "cell_text",
    "find_code",
    "find_embedded_code",
    "format_amount",
    "format_date_value",
    "is_code",
    "is_date_serial",
    "normalize_cell",
    "normalize_code",
    "parse_amount",
    "resolve_logger",
    "row_text",
    "serial_to_date",
]

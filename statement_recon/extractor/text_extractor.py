"""Transaction extraction from statement text (BIDV PDF transfers).

The text is split before every ``REM Tfr`` marker. Each block carrying a
customer code yields one record:

    REM Tfr Ac:7010519754 ... KH:PHAN XUAN QUI, SODB:X029302 TT TIEN NUOC
    THANG:1 - NAM:2026, SOTIEN: 62860 42 26/01/2026

gives code ``X029302``, amount ``62860`` and description
``KH:PHAN XUAN QUI, SODB:X029302 TT TIEN NUOC THANG:1 - NAM:2026``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from statement_recon.config import compile_config_pattern, get_text_extraction_config
from statement_recon.extractor.types import CodeRecord
from statement_recon.utils.diagnostics import resolve_logger
from statement_recon.utils.parsing import find_code, parse_amount

__all__ = ["TextPatterns", "extract_text_records", "split_blocks"]


@dataclass(frozen=True)
class TextPatterns:
    """Compiled block marker and field patterns."""

    block_marker: re.Pattern[str]
    amount: re.Pattern[str]
    description: re.Pattern[str]

    @classmethod
    def from_config(cls) -> TextPatterns:
        cfg = get_text_extraction_config()
        marker = cfg.get("block_marker", r"REM\s+Tfr")
        return cls(
            block_marker=compile_config_pattern(f"(?={marker})"),
            amount=compile_config_pattern(cfg.get("amount_pattern", r"SOTIEN:\s*([0-9,.]+)")),
            description=compile_config_pattern(cfg["description_pattern"]),
        )


def split_blocks(text: str, patterns: TextPatterns | None = None) -> list[str]:
    """Split text before each block marker, dropping blank pieces."""
    patterns = patterns or TextPatterns.from_config()
    return [block for block in patterns.block_marker.split(text) if block.strip()]


def extract_text_records(
    text: str,
    patterns: TextPatterns | None = None,
    logger: logging.Logger | None = None,
) -> list[CodeRecord]:
    """Extract one record per coded transaction block.

    Parameters
    ----------
    text : str
        Concatenated document text.
    patterns : TextPatterns, optional
        Precompiled patterns; loaded from config when omitted.
    logger : logging.Logger, optional
        Diagnostic sink.

    Returns
    -------
    list[CodeRecord]
        Records in block order; ``row`` holds the block index. Blocks without
        a code are skipped and repeated codes are all kept.
    """
    log = resolve_logger(logger)
    patterns = patterns or TextPatterns.from_config()
    records: list[CodeRecord] = []

    for index, block in enumerate(split_blocks(text, patterns)):
        code = find_code(block)
        if code is None:
            continue

        amount_match = patterns.amount.search(block)
        amount = parse_amount(amount_match.group(1).strip()) if amount_match else None
        description_match = patterns.description.search(block)
        description = description_match.group(0) if description_match else None

        records.append(CodeRecord(code=code, amount=amount, description=description, row=index, source="pdf"))

    log.debug("Text extraction: %d coded blocks", len(records))
    return records

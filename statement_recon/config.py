"""Configuration management for statement-recon.

This module centralizes file-system paths, environment variables, and split
configuration loaders used by the extraction pipeline.

Split configuration files
-------------------------
* ``config.json``: shared project config (code pattern, date serial range,
  text-extraction markers, supported extensions, error messages)
* ``variants.json``: per-institution layout rules (label rules, brand tokens,
  scan windows, metadata denylists) and the cascade order

Environment variables
---------------------
``CONFIG_DIR`` points the loaders at an alternative config tree and
``LOGS_DIR`` overrides where :func:`setup_logging` writes its daily log file.
Both are read from a ``.env`` file when present.
"""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import UTC, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = Path(os.getenv("CONFIG_DIR", PROJECT_ROOT / "config"))
LOGS_DIR = Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs"))


def _load_json(filename: str) -> dict[str, Any]:
    """Read one JSON file from ``CONFIG_DIR``.

    Raises
    ------
    FileNotFoundError
        If the file is missing.
    json.JSONDecodeError
        If the file exists but is not valid JSON.
    """
    config_path = CONFIG_DIR / filename
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with Path(config_path).open(encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


@lru_cache(maxsize=1)
def get_config() -> dict[str, Any]:
    """Load the primary project configuration.

    Returns
    -------
    dict[str, Any]
        Parsed contents of ``config/config.json``.

    Raises
    ------
    FileNotFoundError
        If ``config/config.json`` is missing.
    """
    return _load_json("config.json")


@lru_cache(maxsize=1)
def get_variant_specs() -> dict[str, Any]:
    """Load the layout-variant rules from ``variants.json``.

    Returns
    -------
    dict[str, Any]
        Mapping with ``cascade_order``, ``generic_code_label`` and ``variants``.
    """
    return _load_json("variants.json")


def get_variant_spec(key: str) -> dict[str, Any]:
    """Return the rule block for one variant.

    Parameters
    ----------
    key : str
        Variant key such as ``"vietin"`` or ``"agribank"``.

    Returns
    -------
    dict[str, Any]
        Variant rules with ``generic_code_labels: "default"`` resolved to the
        shared generic code label rules.

    Raises
    ------
    KeyError
        If ``key`` is not declared in ``variants.json``.
    """
    specs = get_variant_specs()
    variants = specs.get("variants", {})
    if key not in variants:
        msg = f"Unknown variant: {key}. Known variants: {sorted(variants)}"
        raise KeyError(msg)

    spec = dict(variants[key])
    if spec.get("generic_code_labels") == "default":
        spec["generic_code_labels"] = specs.get("generic_code_label", [])
    return spec


def get_cascade_order() -> list[str]:
    """Return variant keys in matcher priority order (fallback last)."""
    return cast("list[str]", get_variant_specs().get("cascade_order", []))


def get_code_pattern_config() -> tuple[str, int]:
    """Return ``(letter, digit_count)`` describing a customer code."""
    codes = get_config().get("codes", {})
    return cast("str", codes.get("letter", "X")), int(codes.get("digits", 6))


def get_date_config() -> dict[str, Any]:
    """Return the spreadsheet date-serial settings.

    Returns
    -------
    dict[str, Any]
        ``serial_min``/``serial_max`` (exclusive bounds), ``epoch`` and
        ``output_format``.
    """
    defaults = {"serial_min": 30000, "serial_max": 60000, "epoch": "1899-12-30", "output_format": "%d/%m/%Y"}
    return {**defaults, **get_config().get("dates", {})}


def get_metadata_config() -> dict[str, Any]:
    """Return institution/date keyword settings shared by all variants."""
    return cast("dict[str, Any]", get_config().get("metadata", {}))


def get_text_extraction_config() -> dict[str, Any]:
    """Return block marker and field patterns for text documents."""
    return cast("dict[str, Any]", get_config().get("text_extraction", {}))


def get_document_config() -> dict[str, Any]:
    """Return supported extensions and synthetic sheet labels."""
    return cast("dict[str, Any]", get_config().get("documents", {}))


def get_error_messages() -> dict[str, str]:
    """Return the per-sheet error messages keyed by error kind.

    Returns
    -------
    dict[str, str]
        Keys ``empty_sheet``, ``no_header``, ``no_codes`` and ``unreadable``.
    """
    defaults = {
        "empty_sheet": "empty sheet",
        "no_header": "no header found",
        "no_codes": "no codes found",
        "unreadable": "document unreadable",
    }
    return {**defaults, **get_config().get("errors", {})}


def compile_config_pattern(pattern: str, flags: int = re.IGNORECASE) -> re.Pattern[str]:
    """Compile a regex read from config, case-insensitive by default."""
    return re.compile(pattern, flags)


def setup_logging(name: str = "statement_recon") -> logging.Logger:
    """Configure a console+file logger if not already present.

    Parameters
    ----------
    name : str, optional
        Logger namespace; reused to avoid duplicate handlers.

    Returns
    -------
    logging.Logger
        Logger with INFO-level console handler and DEBUG-level file handler
        under ``LOGS_DIR``.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)

        # File handler
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        log_filename = f"{datetime.now(UTC).strftime('%Y-%m-%d')}_run.log"
        file_handler = logging.FileHandler(LOGS_DIR / log_filename)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger

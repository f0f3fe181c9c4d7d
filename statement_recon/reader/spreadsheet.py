"""Spreadsheet reader built on pandas.

Every sheet is read without a header row so the grid keeps the statement's
title block, header and data rows exactly as laid out.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Any

import pandas as pd
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from statement_recon.errors import DocumentReadError, UnsupportedDocumentError
from statement_recon.extractor.types import CellGrid

logger = logging.getLogger(__name__)

__all__ = ["dataframe_to_grid", "read_workbook"]

# Legacy binary workbooks need xlrd; everything else goes through openpyxl
_EXCEL_ENGINES = {".xlsx": "openpyxl", ".xlsm": "openpyxl", ".xls": "xlrd"}


def _clean(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def dataframe_to_grid(df: pd.DataFrame) -> CellGrid:
    """Convert a headerless DataFrame to rows of raw values.

    NaN/NaT become ``None``; trailing empty cells and trailing empty rows are
    dropped.
    """
    grid: CellGrid = []
    for values in df.itertuples(index=False, name=None):
        row = [_clean(v) for v in values]
        while row and row[-1] is None:
            row.pop()
        grid.append(row)
    while grid and not grid[-1]:
        grid.pop()
    return grid


def read_workbook(path: Path | str) -> dict[str, CellGrid]:
    """Read every sheet of a workbook (or a CSV file) into cell grids.

    Parameters
    ----------
    path : Path | str
        ``.xlsx``, ``.xlsm``, ``.xls`` or ``.csv`` file.

    Returns
    -------
    dict[str, CellGrid]
        Sheet name to grid, in workbook order. A CSV file becomes one sheet
        named after the file stem.

    Raises
    ------
    UnsupportedDocumentError
        If the extension is not a spreadsheet format.
    DocumentReadError
        If pandas (or its engine) cannot parse the file.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix != ".csv" and suffix not in _EXCEL_ENGINES:
        raise UnsupportedDocumentError(path, f"unsupported spreadsheet type {suffix or '(none)'}")
    logger.info("Reading workbook: %s", path.name)

    try:
        if suffix == ".csv":
            frames = {path.stem: pd.read_csv(path, header=None, dtype=object, skip_blank_lines=False)}
        else:
            frames = pd.read_excel(path, sheet_name=None, header=None, dtype=object, engine=_EXCEL_ENGINES[suffix])
    except (
        OSError,
        ValueError,
        ImportError,
        KeyError,
        zipfile.BadZipFile,
        pd.errors.ParserError,
        xlrd.XLRDError,
        InvalidFileException,
    ) as e:
        raise DocumentReadError(path, str(e)) from e

    sheets = {str(name): dataframe_to_grid(df) for name, df in frames.items()}
    logger.debug("Workbook %s: %s", path.name, {name: len(grid) for name, grid in sheets.items()})
    return sheets

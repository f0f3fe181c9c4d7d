"""Document readers: spreadsheets to cell grids, PDFs to text."""

from statement_recon.reader.pdf_text import read_pdf_text
from statement_recon.reader.spreadsheet import dataframe_to_grid, read_workbook

__all__ = ["dataframe_to_grid", "read_pdf_text", "read_workbook"]

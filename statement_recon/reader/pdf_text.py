"""PDF text reader using pdfplumber."""

from __future__ import annotations

import logging
from pathlib import Path

import pdfplumber
from pdfminer.pdfdocument import PDFPasswordIncorrect

from statement_recon.errors import DocumentReadError, PasswordRequiredError

logger = logging.getLogger(__name__)

__all__ = ["is_password_error", "read_pdf_text"]


def is_password_error(exc: BaseException) -> bool:
    """Return True when ``exc`` (or anything it wraps) is a pdfminer password failure.

    pdfplumber re-raises pdfminer errors wrapped in its own exception type, so
    the wrapped arguments and the exception chain are both inspected.
    """
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, PDFPasswordIncorrect):
            return True
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)
    return False


def read_pdf_text(path: Path | str, password: str | None = None) -> str:
    """Extract the text of every page, joined with newlines.

    Parameters
    ----------
    path : Path | str
        PDF to read.
    password : str, optional
        User password for encrypted documents.

    Returns
    -------
    str
        Page texts in order, one ``"\\n"`` after each page.

    Raises
    ------
    PasswordRequiredError
        If the document is encrypted and ``password`` is missing or wrong.
    DocumentReadError
        If the file is missing or cannot be parsed.
    """
    path = Path(path)
    logger.info("Extracting text from PDF: %s", path.name)

    if not path.exists():
        raise DocumentReadError(path, "file not found")

    try:
        with pdfplumber.open(path, password=password or "") as pdf:
            pages = [(page.extract_text() or "") for page in pdf.pages]
    except Exception as e:
        if is_password_error(e):
            logger.info("PDF %s needs a password", path.name)
            raise PasswordRequiredError(path, attempted=bool(password)) from e
        raise DocumentReadError(path, str(e) or type(e).__name__) from e

    logger.debug("PDF %s: %d pages", path.name, len(pages))
    return "".join(f"{text}\n" for text in pages)

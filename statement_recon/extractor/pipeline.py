"""Document and batch extraction pipeline.

Flow for one document:

1. Read it (spreadsheet -> cell grids, PDF -> text).
2. Grids go through the variant cascade; text goes through the transaction
   extractor.
3. Every sheet yields one :class:`SheetResult`, errored or not.

Batches run documents one after another. An encrypted PDF pauses the batch
on the password callback and is retried until it opens or the callback gives
up. Aggregation helpers then combine the selected results.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path

from statement_recon.config import get_document_config, get_error_messages, get_text_extraction_config
from statement_recon.errors import DocumentReadError, PasswordRequiredError, UnsupportedDocumentError
from statement_recon.extractor.cascade import run_cascade
from statement_recon.extractor.text_extractor import TextPatterns, extract_text_records
from statement_recon.extractor.types import CellGrid, CodeRecord, DocumentKind, SheetResult, VariantMatch
from statement_recon.reader import read_pdf_text, read_workbook
from statement_recon.utils.diagnostics import resolve_logger
from statement_recon.utils.parsing import cell_text
from statement_recon.variants import GridVariant

pipeline_logger = logging.getLogger(__name__)

__all__ = [
    "PasswordProvider",
    "build_enrichment_index",
    "collect_codes",
    "collect_records",
    "extract_batch",
    "extract_document",
    "extract_grid_document",
    "extract_text_document",
    "first_metadata",
    "selected_results",
]

# Called with the document path; returns a password, or None to give up
PasswordProvider = Callable[[Path], str | None]


# =============================================================================
# Helpers
# =============================================================================


def make_sheet_id(file_name: str, sheet_name: str, index: int) -> str:
    """Build a result id unique within a session: ``file-sheet-millis-index``."""
    return f"{file_name}-{sheet_name}-{time.time_ns() // 1_000_000}-{index}"


def is_empty_grid(grid: CellGrid) -> bool:
    """Return True when no cell of the grid holds any text."""
    return not any(cell_text(cell) for row in grid for cell in row)


def error_result(file_name: str, kind: DocumentKind, error: str | None = None) -> SheetResult:
    """Build the single result reported for an unreadable document."""
    label = get_document_config().get("error_sheet_label", "error")
    return SheetResult(
        id=make_sheet_id(file_name, label, 0),
        file_name=file_name,
        sheet_name=label,
        error=error or get_error_messages()["unreadable"],
        included=False,
        kind=kind,
    )


def _document_kind(path: Path) -> DocumentKind | None:
    docs = get_document_config()
    suffix = path.suffix.lower()
    if suffix in docs.get("text_extensions", [".pdf"]):
        return "pdf"
    if suffix in docs.get("spreadsheet_extensions", [".xlsx", ".xls", ".csv"]):
        return "excel"
    return None


# =============================================================================
# Extraction
# =============================================================================


def extract_grid_document(
    sheets: Mapping[str, CellGrid],
    file_name: str,
    extract_metadata: bool = True,
    variants: Sequence[GridVariant] | None = None,
    logger: logging.Logger | None = None,
) -> list[SheetResult]:
    """Run the variant cascade over a workbook and extract every sheet.

    Parameters
    ----------
    sheets : Mapping[str, CellGrid]
        Sheet name to grid, in workbook order.
    file_name : str
        Source file name, carried into every result.
    extract_metadata : bool, optional
        When False, institution and statement date are left empty.
    variants : Sequence[GridVariant], optional
        Cascade override (configured order when omitted).
    logger : logging.Logger, optional
        Diagnostic sink passed to the cascade.

    Returns
    -------
    list[SheetResult]
        One result per sheet, in input order.
    """
    log = resolve_logger(logger)
    errors = get_error_messages()
    cascade = run_cascade(sheets, variants, logger)
    variant = cascade.variant
    results: list[SheetResult] = []

    for index, (sheet_name, grid) in enumerate(sheets.items()):
        sheet_id = make_sheet_id(file_name, sheet_name, index)
        base = {"id": sheet_id, "file_name": file_name, "sheet_name": sheet_name, "kind": "excel"}

        if is_empty_grid(grid):
            results.append(SheetResult(**base, error=errors["empty_sheet"], included=False))
            continue

        outcome = cascade.outcomes.get(sheet_name) if variant is not None else None
        if variant is None:
            results.append(SheetResult(**base, error=errors["no_header"], included=False))
            continue

        if not isinstance(outcome, VariantMatch):
            # Declined sheets of a claimed document still report its metadata
            institution = statement_date = None
            if extract_metadata:
                metadata = variant.sheet_metadata(grid)
                institution, statement_date = metadata.institution, metadata.statement_date
            results.append(
                SheetResult(
                    **base,
                    institution=institution,
                    statement_date=statement_date,
                    error=errors["no_header"],
                    included=False,
                    variant=variant.key,
                ),
            )
            continue

        records = variant.extract_records(grid, outcome)
        institution = statement_date = None
        if extract_metadata:
            metadata = variant.extract_metadata(grid, outcome)
            institution, statement_date = metadata.institution, metadata.statement_date

        error = None if records else errors["no_codes"]
        log.debug("%s/%s: %d codes via %s", file_name, sheet_name, len(records), variant.key)
        results.append(
            SheetResult(
                **base,
                codes=tuple(record.code for record in records),
                records=tuple(records),
                institution=institution,
                statement_date=statement_date,
                error=error,
                included=error is None,
                variant=variant.key,
            ),
        )

    return results


def extract_text_document(
    text: str,
    file_name: str,
    extract_metadata: bool = True,
    patterns: TextPatterns | None = None,
    logger: logging.Logger | None = None,
) -> SheetResult:
    """Extract transaction records from a whole text document.

    Returns
    -------
    SheetResult
        A single result labelled as the full document; errored with
        *no codes found* when no block carries a code.
    """
    records = extract_text_records(text, patterns, logger)
    text_cfg = get_text_extraction_config()
    error = None if records else get_error_messages()["no_codes"]
    return SheetResult(
        id=make_sheet_id(file_name, "pdf", 0),
        file_name=file_name,
        sheet_name=get_document_config().get("full_document_label", "Toàn bộ file"),
        codes=tuple(record.code for record in records),
        records=tuple(records),
        institution=text_cfg.get("default_institution") if extract_metadata else None,
        error=error,
        included=error is None,
        kind="pdf",
        variant=text_cfg.get("variant", "bidv"),
    )


def extract_document(
    path: Path | str,
    password: str | None = None,
    extract_metadata: bool = True,
    logger: logging.Logger | None = None,
) -> list[SheetResult]:
    """Read and extract one document.

    Parameters
    ----------
    path : Path | str
        Spreadsheet or PDF.
    password : str, optional
        Password for an encrypted PDF.
    extract_metadata : bool, optional
        Disable institution/date discovery when False.
    logger : logging.Logger, optional
        Diagnostic sink.

    Returns
    -------
    list[SheetResult]
        Per-sheet results, or one ``error`` result when the document cannot
        be read.

    Raises
    ------
    PasswordRequiredError
        If a PDF is encrypted and ``password`` is missing or wrong.
    """
    path = Path(path)
    kind = _document_kind(path)

    try:
        if kind == "pdf":
            text = read_pdf_text(path, password)
            return [extract_text_document(text, path.name, extract_metadata, logger=logger)]
        if kind == "excel":
            sheets = read_workbook(path)
            return extract_grid_document(sheets, path.name, extract_metadata, logger=logger)
        raise UnsupportedDocumentError(path, f"unsupported file type {path.suffix or '(none)'}")
    except PasswordRequiredError:
        raise
    except DocumentReadError as e:
        pipeline_logger.warning("Unreadable document %s: %s", path.name, e.reason)
        return [error_result(path.name, kind or "excel")]


def extract_batch(
    paths: Iterable[Path | str],
    password_provider: PasswordProvider | None = None,
    extract_metadata: bool = True,
    logger: logging.Logger | None = None,
) -> list[SheetResult]:
    """Extract several documents in order, prompting for PDF passwords.

    A document that needs a password is retried with whatever
    ``password_provider`` returns until it opens. A ``None`` answer (or no
    provider at all) skips that document; the rest of the batch continues.
    """
    results: list[SheetResult] = []
    for raw_path in paths:
        path = Path(raw_path)
        password: str | None = None
        while True:
            try:
                results.extend(extract_document(path, password, extract_metadata, logger))
                break
            except PasswordRequiredError:
                if password_provider is None:
                    pipeline_logger.warning("Skipping %s: password required", path.name)
                    break
                password = password_provider(path)
                if password is None:
                    pipeline_logger.info("Password entry cancelled for %s", path.name)
                    break
    return results


# =============================================================================
# Aggregation
# =============================================================================


def selected_results(results: Iterable[SheetResult], include_ids: Iterable[str] = ()) -> list[SheetResult]:
    """Return results that contribute downstream.

    A result counts when it is included and error-free, or when its id is
    listed in ``include_ids``.
    """
    forced = set(include_ids)
    return [r for r in results if (r.included and r.error is None) or r.id in forced]


def collect_codes(results: Iterable[SheetResult], include_ids: Iterable[str] = ()) -> str:
    """Join the codes of the selected results into newline-separated text."""
    return "\n".join(code for r in selected_results(results, include_ids) for code in r.codes)


def collect_records(results: Iterable[SheetResult], include_ids: Iterable[str] = ()) -> list[CodeRecord]:
    """Concatenate the records of the selected results."""
    return [record for r in selected_results(results, include_ids) for record in r.records]


def first_metadata(
    results: Iterable[SheetResult],
    include_ids: Iterable[str] = (),
) -> tuple[str | None, str | None]:
    """Return ``(institution, statement_date)`` of the first selected result carrying either."""
    for r in selected_results(results, include_ids):
        if r.institution or r.statement_date:
            return r.institution, r.statement_date
    return None, None


def build_enrichment_index(records: Iterable[CodeRecord]) -> dict[str, CodeRecord]:
    """Map each code to the first record seen for it."""
    index: dict[str, CodeRecord] = {}
    for record in records:
        index.setdefault(record.code, record)
    return index

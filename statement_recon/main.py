#!/usr/bin/env python3
"""Command-line entry point: extract codes from statements and compare lists.

Usage (from project root):
    python -m statement_recon.main extract june.xlsx bidv.pdf
    python -m statement_recon.main extract june.xlsx --json --no-metadata
    python -m statement_recon.main compare reference.txt codes.txt
    python -m statement_recon.main compare reference.xlsx june.xlsx --extract

Commands:
    extract FILE...     Print per-sheet results for each document
    compare A B         Compare two newline lists (or documents with --extract)

CLI Flags:
    --json              Emit JSON instead of the text report
    --verbose, -v       Show per-variant scan diagnostics
    --no-metadata       Skip institution/date discovery
    --extract           Treat compare inputs as statements to extract
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from pathlib import Path
from typing import Any

from statement_recon.config import setup_logging
from statement_recon.extractor.pipeline import (
    build_enrichment_index,
    collect_codes,
    collect_records,
    extract_batch,
    first_metadata,
)
from statement_recon.extractor.types import CodeRecord, SheetResult
from statement_recon.reconcile import ComparisonResult, compare_lists
from statement_recon.utils.parsing import format_amount

logger = setup_logging(__name__)


def prompt_password(path: Path) -> str | None:
    """Ask for a PDF password on the terminal; empty input cancels."""
    password = getpass.getpass(f"Password for {path.name} (leave empty to skip): ")
    return password or None


def diagnostics_logger(verbose: bool) -> logging.Logger | None:
    """Return a console logger for scan diagnostics when ``verbose`` is set."""
    if not verbose:
        return None
    diagnostics = setup_logging("statement_recon.scan")
    for handler in diagnostics.handlers:
        handler.setLevel(logging.DEBUG)
    return diagnostics


# =============================================================================
# Reports
# =============================================================================


def print_extraction_report(results: list[SheetResult]) -> None:
    """Print one block per sheet result."""
    for result in results:
        status = "OK" if result.error is None else f"ERROR: {result.error}"
        print(f"{result.file_name} :: {result.sheet_name} [{result.variant or '-'}] {status}")
        if result.institution or result.statement_date:
            print(f"    institution: {result.institution or '-'}  date: {result.statement_date or '-'}")
        for record in result.records:
            amount = format_amount(record.amount)
            print(f"    {record.code}  {amount:>15}  {record.description or ''}")
    print(f"\nTotal codes (selected sheets): {len(collect_records(results))}")


def _describe(code: str, index: dict[str, CodeRecord]) -> str:
    record = index.get(code)
    if record is None:
        return code
    return f"{code}  {format_amount(record.amount):>15}  {record.description or ''}"


def print_comparison_report(
    result: ComparisonResult,
    index_a: dict[str, CodeRecord],
    index_b: dict[str, CodeRecord],
) -> None:
    """Print missing, extra and matching codes."""
    print(f"List A: {result.total_a} unique codes, list B: {result.total_b} unique codes")
    print(f"\nOnly in A ({len(result.in_a_only)}):")
    for code in result.in_a_only:
        print(f"    {_describe(code, index_a)}")
    print(f"\nOnly in B ({len(result.in_b_only)}):")
    for code in result.in_b_only:
        print(f"    {_describe(code, index_b)}")
    print(f"\nIn both: {len(result.intersection)}")
    if result.duplicates_a or result.duplicates_b:
        print(f"Duplicates in A: {sorted(set(result.duplicates_a))}")
        print(f"Duplicates in B: {sorted(set(result.duplicates_b))}")


def comparison_to_dict(result: ComparisonResult) -> dict[str, Any]:
    """Serialise the summary lists of a comparison."""
    return {
        "in_a_only": result.in_a_only,
        "in_b_only": result.in_b_only,
        "intersection": result.intersection,
        "total_a": result.total_a,
        "total_b": result.total_b,
        "duplicates_a": result.duplicates_a,
        "duplicates_b": result.duplicates_b,
    }


# =============================================================================
# Commands
# =============================================================================


def run_extract(args: argparse.Namespace) -> int:
    """Extract every document and print the results.

    Returns
    -------
    int
        ``0`` when at least one sheet produced codes; ``1`` otherwise.
    """
    results = extract_batch(
        args.files,
        password_provider=prompt_password,
        extract_metadata=not args.no_metadata,
        logger=diagnostics_logger(args.verbose),
    )
    if args.json:
        print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
    else:
        print_extraction_report(results)
        institution, statement_date = first_metadata(results)
        if institution or statement_date:
            print(f"Document metadata: {institution or '-'} / {statement_date or '-'}")

    return 0 if collect_codes(results) else 1


def _load_side(path: Path, args: argparse.Namespace) -> tuple[str, dict[str, CodeRecord]]:
    if not args.extract:
        return path.read_text(encoding="utf-8"), {}
    results = extract_batch(
        [path],
        password_provider=prompt_password,
        extract_metadata=False,
        logger=diagnostics_logger(args.verbose),
    )
    return collect_codes(results), build_enrichment_index(collect_records(results))


def run_compare(args: argparse.Namespace) -> int:
    """Compare two lists and print the differences.

    Returns
    -------
    int
        ``0`` when both lists hold the same codes; ``1`` otherwise.
    """
    raw_a, index_a = _load_side(args.list_a, args)
    raw_b, index_b = _load_side(args.list_b, args)
    result = compare_lists(raw_a, raw_b)
    logger.info("Compared %s and %s", args.list_a.name, args.list_b.name)

    if args.json:
        print(json.dumps(comparison_to_dict(result), ensure_ascii=False, indent=2))
    else:
        print_comparison_report(result, index_a, index_b)

    return 0 if not result.in_a_only and not result.in_b_only else 1


# =============================================================================
# CLI
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with ``extract`` and ``compare`` subcommands."""
    parser = argparse.ArgumentParser(
        description="Extract customer codes from bank/e-wallet statements and reconcile code lists.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m statement_recon.main extract june.xlsx bidv.pdf
  python -m statement_recon.main extract june.xlsx --json
  python -m statement_recon.main compare reference.txt codes.txt
  python -m statement_recon.main compare reference.xlsx june.xlsx --extract
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Extract codes from statements")
    extract.add_argument("files", type=Path, nargs="+", help="Spreadsheets or PDFs")
    extract.add_argument("--json", action="store_true", help="Emit JSON")
    extract.add_argument("--verbose", "-v", action="store_true", help="Show scan diagnostics")
    extract.add_argument("--no-metadata", action="store_true", help="Skip institution/date discovery")
    extract.set_defaults(handler=run_extract)

    compare = sub.add_parser("compare", help="Compare two code lists")
    compare.add_argument("list_a", type=Path, help="Reference list (A)")
    compare.add_argument("list_b", type=Path, help="List to check (B)")
    compare.add_argument("--extract", action="store_true", help="Extract codes from both inputs first")
    compare.add_argument("--json", action="store_true", help="Emit JSON")
    compare.add_argument("--verbose", "-v", action="store_true", help="Show scan diagnostics")
    compare.set_defaults(handler=run_compare)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and dispatch to the selected command."""
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())

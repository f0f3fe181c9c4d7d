"""List reconciliation."""

from statement_recon.reconcile.compare import ComparisonResult, ProcessedItem, clean_input, compare_lists

__all__ = ["ComparisonResult", "ProcessedItem", "clean_input", "compare_lists"]

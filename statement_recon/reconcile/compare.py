"""Compare two newline-separated code lists.

Lines are trimmed. Blank lines never take part in set membership but keep
their slot in the per-line detail. Equality is exact and case-sensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = ["ComparisonResult", "ProcessedItem", "clean_input", "compare_lists"]


@dataclass(frozen=True)
class ProcessedItem:
    """One input line with its comparison flags."""

    value: str
    original_index: int
    exists_in_other: bool
    is_valid: bool
    is_duplicate: bool


@dataclass
class ComparisonResult:
    """Outcome of comparing list A against list B.

    Attributes
    ----------
        in_a_only: Lines of A missing from B, in order, duplicates kept
        in_b_only: Lines of B missing from A, in order, duplicates kept
        intersection: Unique values present in both, in A's first-seen order
        total_a: Count of unique non-empty values in A
        total_b: Count of unique non-empty values in B
        processed_a: Per-line detail for A
        processed_b: Per-line detail for B
    """

    in_a_only: list[str] = field(default_factory=list)
    in_b_only: list[str] = field(default_factory=list)
    intersection: list[str] = field(default_factory=list)
    total_a: int = 0
    total_b: int = 0
    processed_a: list[ProcessedItem] = field(default_factory=list)
    processed_b: list[ProcessedItem] = field(default_factory=list)

    @property
    def duplicates_a(self) -> list[str]:
        """Values repeated in A (each repeat listed once per extra occurrence)."""
        return [item.value for item in self.processed_a if item.is_duplicate]

    @property
    def duplicates_b(self) -> list[str]:
        """Values repeated in B (each repeat listed once per extra occurrence)."""
        return [item.value for item in self.processed_b if item.is_duplicate]


def clean_input(raw: str) -> list[str]:
    """Split on ``\\n`` or ``\\r\\n`` and trim every line."""
    return [line.strip() for line in re.split(r"\r?\n", raw)]


def _process(lines: list[str], other: set[str]) -> list[ProcessedItem]:
    seen: set[str] = set()
    items: list[ProcessedItem] = []
    for index, value in enumerate(lines):
        items.append(
            ProcessedItem(
                value=value,
                original_index=index,
                exists_in_other=value in other,
                is_valid=bool(value),
                is_duplicate=bool(value) and value in seen,
            ),
        )
        if value:
            seen.add(value)
    return items


def compare_lists(raw_a: str, raw_b: str) -> ComparisonResult:
    """Compare two newline-delimited lists.

    Examples
    --------
    ``compare_lists("A\\nB\\nB", "B\\nC")`` gives ``in_a_only == ["A"]``,
    ``in_b_only == ["C"]``, ``intersection == ["B"]`` and flags the second
    ``B`` of list A as a duplicate.
    """
    list_a = clean_input(raw_a)
    list_b = clean_input(raw_b)
    # dict keeps first-seen order
    unique_a = dict.fromkeys(v for v in list_a if v)
    unique_b = dict.fromkeys(v for v in list_b if v)
    set_a, set_b = set(unique_a), set(unique_b)

    return ComparisonResult(
        in_a_only=[v for v in list_a if v and v not in set_b],
        in_b_only=[v for v in list_b if v and v not in set_a],
        intersection=[v for v in unique_a if v in set_b],
        total_a=len(unique_a),
        total_b=len(unique_b),
        processed_a=_process(list_a, set_b),
        processed_b=_process(list_b, set_a),
    )

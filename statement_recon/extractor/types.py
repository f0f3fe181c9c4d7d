"""Extraction dataclasses and type definitions.

This module contains pure data structures with no business logic dependencies,
ensuring they can be imported without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from statement_recon.utils.parsing import Amount

__all__ = [
    "AMOUNT",
    "BILL_AMOUNT",
    "BOOKING_DATE",
    "CODE",
    "DESCRIPTION",
    "PARTY_NAME",
    "CellGrid",
    "CodeRecord",
    "Declined",
    "DocumentKind",
    "FieldMatch",
    "MatchOutcome",
    "MetadataResult",
    "SheetResult",
    "VariantMatch",
]

# Field names used in a FieldMatch
CODE = "code"
AMOUNT = "amount"
DESCRIPTION = "description"
PARTY_NAME = "party_name"
BILL_AMOUNT = "bill_amount"
BOOKING_DATE = "booking_date"

CellGrid = list[list[Any]]
FieldMatch = dict[str, int]
DocumentKind = Literal["excel", "pdf"]


@dataclass(frozen=True)
class VariantMatch:
    """A matcher accepted a sheet.

    Attributes
    ----------
        variant: Variant key (e.g. "vietin")
        header_row: Row index where the header was confirmed (-1 when the
            fallback found codes without any header)
        data_start: First row scanned for records
        fields: Field name -> column index, frozen at confirmation
    """

    variant: str
    header_row: int
    data_start: int
    fields: FieldMatch = field(default_factory=dict)

    @property
    def has_code_column(self) -> bool:
        """True when a code column was located."""
        return "code" in self.fields

    def column(self, name: str) -> int | None:
        """Return the column for a field, or None when it was not located."""
        return self.fields.get(name)


@dataclass(frozen=True)
class Declined:
    """A matcher rejected a sheet; ``reason`` is diagnostic only."""

    variant: str
    reason: str


MatchOutcome = VariantMatch | Declined


@dataclass(frozen=True)
class CodeRecord:
    """One customer code pulled from a statement row or text block."""

    code: str
    amount: Amount | None = None
    description: str | None = None
    row: int = -1
    source: DocumentKind = "excel"

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        return {
            "code": self.code,
            "amount": self.amount,
            "description": self.description,
            "row": self.row,
            "source": self.source,
        }


@dataclass
class MetadataResult:
    """Institution name and statement date found in one sheet."""

    institution: str | None = None
    statement_date: str | None = None
    institution_row: int | None = None
    date_row: int | None = None

    @property
    def complete(self) -> bool:
        """True once both values have been accepted."""
        return self.institution is not None and self.statement_date is not None


@dataclass(frozen=True)
class SheetResult:
    """Extraction outcome for one sheet (or one whole text document).

    ``codes`` keeps duplicates in row order. An errored result is excluded
    from aggregation unless a caller re-includes it by id.
    """

    id: str
    file_name: str
    sheet_name: str
    codes: tuple[str, ...] = ()
    records: tuple[CodeRecord, ...] = ()
    institution: str | None = None
    statement_date: str | None = None
    error: str | None = None
    included: bool = True
    kind: DocumentKind = "excel"
    variant: str | None = None

    @property
    def ok(self) -> bool:
        """True when the sheet produced codes without error."""
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        return {
            "id": self.id,
            "file_name": self.file_name,
            "sheet_name": self.sheet_name,
            "codes": list(self.codes),
            "records": [record.to_dict() for record in self.records],
            "institution": self.institution,
            "statement_date": self.statement_date,
            "error": self.error,
            "included": self.included,
            "kind": self.kind,
            "variant": self.variant,
        }

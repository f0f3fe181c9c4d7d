"""Exceptions raised at the document-reader boundary."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "DocumentReadError",
    "PasswordRequiredError",
    "StatementReconError",
    "UnsupportedDocumentError",
]


class StatementReconError(Exception):
    """Base class for statement-recon errors."""


class DocumentReadError(StatementReconError):
    """The reader could not open or decode a document."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path.name}: {reason}")


class UnsupportedDocumentError(DocumentReadError):
    """The file extension is not handled by any reader."""


class PasswordRequiredError(StatementReconError):
    """The document is encrypted and the supplied password is missing or wrong.

    This is a recoverable condition: the caller prompts for a password and
    re-runs extraction for this one document.
    """

    def __init__(self, path: Path | str, attempted: bool = False) -> None:
        self.path = Path(path)
        self.attempted = attempted
        detail = "incorrect password" if attempted else "password required"
        super().__init__(f"{self.path.name}: {detail}")

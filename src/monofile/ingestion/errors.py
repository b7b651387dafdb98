"""Ingestion error taxonomy."""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for ingestion failures."""


class DecodeError(IngestionError):
    """Raised when a single file's bytes cannot be read.

    Readers recover from this locally; it never reaches the ingestion caller.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ArchiveError(IngestionError):
    """Raised when a ZIP archive cannot be opened or read."""

    def __init__(self, archive_name: str, message: str = "Failed to process ZIP file.") -> None:
        super().__init__(message)
        self.archive_name = archive_name


class EmptyInputError(IngestionError):
    """Raised when no records survive reading and filtering."""

    def __init__(self, message: str = "No valid files found.") -> None:
        super().__init__(message)


__all__ = ["IngestionError", "DecodeError", "ArchiveError", "EmptyInputError"]

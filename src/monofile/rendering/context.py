"""Build the context input handed to a generative-text collaborator."""

from __future__ import annotations

from typing import Iterable

from monofile.ingestion.models import FileRecord

DEFAULT_CONTEXT_MAX_CHARS = 500_000


def build_context_input(
    records: Iterable[FileRecord],
    flattened: str,
    max_chars: int = DEFAULT_CONTEXT_MAX_CHARS,
) -> str:
    """Return the path listing followed by the flattened document.

    The document is cut at exactly ``max_chars`` characters, mid-line if need be.
    """
    if max_chars < 0:
        raise ValueError("max_chars must be non-negative")
    structure = "\n".join(record.path for record in records)
    return f"Structure:\n{structure}\n\nContent:\n{flattened[:max_chars]}"


__all__ = ["DEFAULT_CONTEXT_MAX_CHARS", "build_context_input"]

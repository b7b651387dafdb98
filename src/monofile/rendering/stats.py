"""Statistics aggregation for snapshots."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from monofile.ingestion.models import FileRecord

from .models import ProcessingStats

UNKNOWN_TYPE = "UNKNOWN"


def line_count(content: str) -> int:
    """Return the number of ``\\n``-delimited segments.

    A trailing newline produces one extra empty segment, so ``"a\\n"`` counts 2.
    """
    return len(content.split("\n"))


def compute_stats(records: Iterable[FileRecord]) -> ProcessingStats:
    """Compute totals and the extension histogram for ``records``.

    Safe on an empty input, which yields all-zero stats.
    """
    total_files = 0
    total_lines = 0
    total_size = 0
    file_types: Counter[str] = Counter()

    for record in records:
        total_files += 1
        total_lines += line_count(record.content)
        total_size += record.size
        file_types[record.extension.upper() or UNKNOWN_TYPE] += 1

    return ProcessingStats(
        total_files=total_files,
        total_lines=total_lines,
        total_size=total_size,
        file_types=dict(file_types),
    )


__all__ = ["UNKNOWN_TYPE", "compute_stats", "line_count"]

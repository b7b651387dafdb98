"""Render a snapshot into one flattened text document."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from monofile.ingestion.models import FileRecord

DOCUMENT_TITLE = "# MONOFILE GENERATED CODEBASE"
HEADER_RULE = "=" * 80
SECTION_RULE = "-" * 80
BREADCRUMB_SEPARATOR = " > "


def format_timestamp(moment: datetime) -> str:
    """Return ``moment`` as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    stamp = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def breadcrumb(path: str) -> str:
    """Return the directory segments of ``path`` joined with ``" > "``."""
    return BREADCRUMB_SEPARATOR.join(path.split("/")[:-1])


def render_header(file_count: int, generated_at: datetime) -> str:
    return (
        f"{DOCUMENT_TITLE}\n"
        f"# Generated at: {format_timestamp(generated_at)}\n"
        f"# File Count: {file_count}\n"
        f"{HEADER_RULE}\n\n"
    )


def render_section(record: FileRecord) -> str:
    """Render one fenced file section.

    Content is emitted verbatim; a file containing its own fence will break
    the section boundaries.
    """
    parts = ["\n"]
    crumb = breadcrumb(record.path)
    if crumb:
        parts.append(f"### PATH: {crumb}\n")
    parts.append(f"## FILE: {record.path.split('/')[-1]}\n")
    parts.append(f"```{record.extension}\n")
    parts.append(record.content)
    parts.append("\n```\n")
    parts.append(f"\n{SECTION_RULE}\n")
    return "".join(parts)


def flatten(records: Sequence[FileRecord], generated_at: datetime | None = None) -> str:
    """Serialize ``records`` in order into the flattened document.

    Args:
        records: Snapshot (or any sequence of records) in output order.
        generated_at: Timestamp for the header; defaults to now in UTC.

    Returns:
        str: The complete document.
    """
    moment = generated_at or datetime.now(timezone.utc)
    sections = [render_section(record) for record in records]
    return render_header(len(records), moment) + "".join(sections)


__all__ = ["breadcrumb", "flatten", "format_timestamp", "render_header", "render_section"]

"""Derived views over a codebase snapshot."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class ProcessingStats(BaseModel):
    """Aggregate figures for one snapshot.

    Serialized with ``by_alias=True`` the keys match the camelCase form the
    display and session collaborators read (``totalFiles`` and so on).

    Attributes:
        total_files: Number of records.
        total_lines: Sum of newline-split segment counts.
        total_size: Sum of record sizes.
        file_types: Upper-cased extension (or ``UNKNOWN``) to record count.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_files: int = Field(default=0, alias="totalFiles")
    total_lines: int = Field(default=0, alias="totalLines")
    total_size: int = Field(default=0, alias="totalSize")
    file_types: Dict[str, int] = Field(default_factory=dict, alias="fileTypes")


__all__ = ["ProcessingStats"]

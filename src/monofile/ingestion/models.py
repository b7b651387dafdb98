"""Data models produced by the ingestion pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, Iterator, overload

from pydantic import BaseModel, ConfigDict, Field

from .classifier import file_extension, file_name


class FileRecord(BaseModel):
    """One ingested text file.

    Attributes:
        path: Slash-separated relative path.
        name: Final path segment.
        extension: Text after the last ``.`` of the name, case preserved.
        content: Full decoded text.
        size: Byte length, or decoded length for archive entries.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    extension: str = ""
    content: str
    size: int = Field(ge=0)

    @classmethod
    def build(cls, path: str, content: str, size: int) -> "FileRecord":
        """Create a record deriving ``name`` and ``extension`` from ``path``."""
        return cls(
            path=path,
            name=file_name(path),
            extension=file_extension(path),
            content=content,
            size=size,
        )


@dataclass(frozen=True)
class CodebaseSnapshot(Sequence[FileRecord]):
    """Immutable collection of records ordered by path.

    Attributes:
        files: Records sorted by ``path``; duplicates sit next to each other.
        warnings: Messages for inputs skipped because they could not be read.
    """

    files: tuple[FileRecord, ...] = ()
    warnings: tuple[str, ...] = ()

    @classmethod
    def from_records(
        cls, records: Iterable[FileRecord], warnings: Iterable[str] = ()
    ) -> "CodebaseSnapshot":
        """Sort records by path and freeze them into a snapshot.

        The sort is stable, so records sharing a path keep their reader order.
        """
        ordered = sorted(records, key=lambda record: record.path)
        return cls(files=tuple(ordered), warnings=tuple(warnings))

    def paths(self) -> list[str]:
        return [record.path for record in self.files]

    @overload
    def __getitem__(self, index: int) -> FileRecord: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[FileRecord, ...]: ...

    def __getitem__(self, index):
        return self.files[index]

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.files)


__all__ = ["FileRecord", "CodebaseSnapshot"]

"""File-like input handles consumed by the source readers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class FileHandle(Protocol):
    """A named, sized input whose bytes can be read on demand.

    Attributes:
        name: Bare file name; archives are recognized by a ``.zip`` suffix.
        relative_path: Slash-separated path hint for directory selections.
        size: Byte size reported by the source.
    """

    name: str
    relative_path: Optional[str]
    size: int

    def read(self) -> bytes:
        """Return the full content of the handle."""
        ...


def is_archive(handle: FileHandle) -> bool:
    """Return True when the handle should be opened as a ZIP container."""
    return handle.name.endswith(".zip")


def effective_path(handle: FileHandle) -> str:
    """Return the relative-path hint when present, else the bare name."""
    return handle.relative_path or handle.name


@dataclass(slots=True)
class LocalFileHandle:
    """Handle backed by a file on the local filesystem.

    Attributes:
        path: Location of the file on disk.
        name: Bare file name.
        relative_path: Optional path hint rooted at the selected directory.
        size: Byte size captured when the handle was created.
    """

    path: Path
    name: str = ""
    relative_path: Optional[str] = None
    size: int = -1

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.path.name
        if self.size < 0:
            self.size = self.path.stat().st_size

    def read(self) -> bytes:
        return self.path.read_bytes()


@dataclass(slots=True)
class MemoryFileHandle:
    """Handle holding its content in memory.

    Attributes:
        name: Bare file name.
        data: Raw content.
        relative_path: Optional path hint.
        size: Byte size; defaults to ``len(data)``.
    """

    name: str
    data: bytes = field(repr=False, default=b"")
    relative_path: Optional[str] = None
    size: int = -1

    def __post_init__(self) -> None:
        if self.size < 0:
            self.size = len(self.data)

    @classmethod
    def from_path(cls, path: str, content: str | bytes) -> "MemoryFileHandle":
        """Build a handle whose relative-path hint is ``path`` when it has directories."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        name = path.rsplit("/", 1)[-1]
        return cls(name=name, data=data, relative_path=path if "/" in path else None)

    def read(self) -> bytes:
        return self.data


__all__ = [
    "FileHandle",
    "LocalFileHandle",
    "MemoryFileHandle",
    "effective_path",
    "is_archive",
]

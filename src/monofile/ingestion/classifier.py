"""Path classification rules for binary and ignored inputs.

Classification looks only at path strings. Binary detection is by extension,
never by sniffing content, so a text file named ``notes.bin`` is still
excluded and a binary blob named ``blob.txt`` is still read.
"""

from __future__ import annotations

from typing import Iterable

from monofile.config.models import (
    DEFAULT_BINARY_EXTENSIONS,
    DEFAULT_IGNORED_FILES,
    DEFAULT_IGNORED_FOLDERS,
    IngestionOptions,
)

IGNORED_FOLDERS = frozenset(DEFAULT_IGNORED_FOLDERS)
IGNORED_FILES = frozenset(DEFAULT_IGNORED_FILES)
BINARY_EXTENSIONS = frozenset(DEFAULT_BINARY_EXTENSIONS)


def file_name(path: str) -> str:
    """Return the final ``/``-separated segment of ``path``."""
    return path.rsplit("/", 1)[-1]


def file_extension(path: str) -> str:
    """Return the text after the last ``.`` of the file name, or ``""`` without one.

    Case is preserved; callers lower- or upper-case on use.
    """
    name = file_name(path)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1]


def is_binary(path: str, binary_extensions: Iterable[str] = BINARY_EXTENSIONS) -> bool:
    """Return True when the path's lower-cased extension is a known binary type."""
    extension = file_extension(path).lower()
    if not extension:
        return False
    return extension in frozenset(binary_extensions)


def should_ignore(
    path: str,
    ignored_folders: Iterable[str] = IGNORED_FOLDERS,
    ignored_files: Iterable[str] = IGNORED_FILES,
) -> bool:
    """Return True when any segment is an ignored folder or the file name is ignored.

    Matching is exact and case-sensitive.
    """
    segments = path.split("/")
    folders = frozenset(ignored_folders)
    if any(segment in folders for segment in segments):
        return True
    return segments[-1] in frozenset(ignored_files)


class FileClassifier:
    """Apply configurable ignore and binary rules to input paths."""

    def __init__(
        self,
        *,
        ignored_folders: Iterable[str] = IGNORED_FOLDERS,
        ignored_files: Iterable[str] = IGNORED_FILES,
        binary_extensions: Iterable[str] = BINARY_EXTENSIONS,
    ) -> None:
        self.ignored_folders = frozenset(ignored_folders)
        self.ignored_files = frozenset(ignored_files)
        self.binary_extensions = frozenset(ext.lower() for ext in binary_extensions)

    @classmethod
    def from_options(cls, options: IngestionOptions) -> "FileClassifier":
        """Build a classifier from the configured ingestion filters."""
        return cls(
            ignored_folders=options.ignored_folders,
            ignored_files=options.ignored_files,
            binary_extensions=options.binary_extensions,
        )

    def is_binary(self, path: str) -> bool:
        return is_binary(path, self.binary_extensions)

    def should_ignore(self, path: str) -> bool:
        return should_ignore(path, self.ignored_folders, self.ignored_files)

    def accepts(self, path: str) -> bool:
        """Return True when the path is neither ignored nor binary."""
        return not self.should_ignore(path) and not self.is_binary(path)


__all__ = [
    "IGNORED_FOLDERS",
    "IGNORED_FILES",
    "BINARY_EXTENSIONS",
    "FileClassifier",
    "file_extension",
    "file_name",
    "is_binary",
    "should_ignore",
]

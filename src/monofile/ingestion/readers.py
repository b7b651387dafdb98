"""Source readers that turn handles into file records."""

from __future__ import annotations

import io
import logging
import zipfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .classifier import FileClassifier
from .errors import ArchiveError, DecodeError
from .handles import FileHandle, effective_path
from .models import FileRecord

LOGGER = logging.getLogger(__name__)

# RuntimeError is raised for encrypted entries, NotImplementedError for unknown compression.
_ARCHIVE_FAILURES = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    OSError,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


@dataclass(slots=True)
class ReaderResult:
    """Records and warnings produced by one reader.

    Attributes:
        records: Records in the order the reader produced them.
        warnings: One message per input skipped because it could not be read.
    """

    records: list[FileRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def decode_text(data: bytes) -> str:
    """Decode ``data`` as UTF-8, substituting U+FFFD for invalid sequences."""
    return data.decode("utf-8", errors="replace")


class LooseFileReader:
    """Read standalone and directory-tree handles.

    Accepted handles are read and decoded on a thread pool. Invalid UTF-8 is
    replaced rather than rejected; a handle whose bytes cannot be read is
    skipped with a warning instead of failing the batch.
    """

    def __init__(self, classifier: FileClassifier, *, max_workers: int = 8) -> None:
        self.classifier = classifier
        self.max_workers = max_workers

    def read(self, handles: Iterable[FileHandle]) -> ReaderResult:
        accepted = [
            (effective_path(handle), handle)
            for handle in handles
            if self.classifier.accepts(effective_path(handle))
        ]
        result = ReaderResult()
        if not accepted:
            return result

        workers = min(self.max_workers, len(accepted))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(lambda item: self._read_one(*item), accepted))

        for outcome in outcomes:
            if isinstance(outcome, DecodeError):
                LOGGER.warning("Failed to read file: %s", outcome)
                result.warnings.append(f"Failed to read file: {outcome}")
            else:
                result.records.append(outcome)
        return result

    def _read_one(self, path: str, handle: FileHandle) -> FileRecord | DecodeError:
        try:
            data = handle.read()
        except OSError as exc:
            return DecodeError(path, str(exc))
        return FileRecord.build(path, decode_text(data), handle.size)


class ArchiveReader:
    """Read every text entry of ZIP handles.

    An archive is all-or-nothing: failing to open it, or to read any entry's
    bytes, raises :class:`ArchiveError`. Entries that are not valid UTF-8 are
    kept with replacement characters.
    """

    def __init__(self, classifier: FileClassifier) -> None:
        self.classifier = classifier

    def read(self, handles: Sequence[FileHandle]) -> ReaderResult:
        result = ReaderResult()
        for handle in handles:
            self._read_archive(handle, result)
        return result

    def _read_archive(self, handle: FileHandle, result: ReaderResult) -> None:
        LOGGER.debug("Opening archive %s", handle.name)
        try:
            with zipfile.ZipFile(io.BytesIO(handle.read())) as archive:
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    path = info.filename
                    if not self.classifier.accepts(path):
                        continue
                    content = decode_text(archive.read(info))
                    result.records.append(FileRecord.build(path, content, len(content)))
        except _ARCHIVE_FAILURES as exc:
            LOGGER.error("Error unzipping %s: %s", handle.name, exc)
            raise ArchiveError(handle.name) from exc


__all__ = ["ArchiveReader", "LooseFileReader", "ReaderResult", "decode_text"]

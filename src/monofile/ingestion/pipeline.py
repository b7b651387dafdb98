"""High-level ingestion orchestration."""

from __future__ import annotations

import logging
from typing import Iterable

from monofile.config.models import IngestionOptions

from .classifier import FileClassifier
from .errors import EmptyInputError
from .handles import FileHandle, is_archive
from .models import CodebaseSnapshot
from .readers import ArchiveReader, LooseFileReader

LOGGER = logging.getLogger(__name__)


class IngestionPipeline:
    """Coordinate the source readers and produce one sorted snapshot.

    The pipeline is stateless between calls but not reentrant-safe by
    contract: callers run one ingestion at a time.
    """

    def __init__(
        self,
        loose_reader: LooseFileReader,
        archive_reader: ArchiveReader,
    ) -> None:
        self.loose_reader = loose_reader
        self.archive_reader = archive_reader

    @classmethod
    def from_options(cls, options: IngestionOptions | None = None) -> "IngestionPipeline":
        """Build a pipeline whose readers share one classifier from ``options``."""
        options = options or IngestionOptions()
        classifier = FileClassifier.from_options(options)
        return cls(
            loose_reader=LooseFileReader(classifier, max_workers=options.max_workers),
            archive_reader=ArchiveReader(classifier),
        )

    def ingest(self, handles: Iterable[FileHandle]) -> CodebaseSnapshot:
        """Read, filter, merge and sort ``handles`` into a snapshot.

        Raises:
            ArchiveError: If any ZIP handle cannot be opened or read.
            EmptyInputError: If no records survive filtering.
        """
        items = list(handles)
        archives = [handle for handle in items if is_archive(handle)]
        loose = [handle for handle in items if not is_archive(handle)]
        LOGGER.info(
            "Ingesting %d input(s): %d loose, %d archive(s)", len(items), len(loose), len(archives)
        )

        loose_result = self.loose_reader.read(loose)
        archive_result = self.archive_reader.read(archives) if archives else None

        records = list(loose_result.records)
        warnings = list(loose_result.warnings)
        if archive_result is not None:
            records.extend(archive_result.records)
            warnings.extend(archive_result.warnings)

        if not records:
            raise EmptyInputError()

        snapshot = CodebaseSnapshot.from_records(records, warnings)
        LOGGER.info("Ingested %d file(s), skipped %d unreadable", len(snapshot), len(warnings))
        return snapshot


def ingest(
    handles: Iterable[FileHandle], options: IngestionOptions | None = None
) -> CodebaseSnapshot:
    """Ingest ``handles`` with a pipeline built from ``options``."""
    return IngestionPipeline.from_options(options).ingest(handles)


__all__ = ["IngestionPipeline", "ingest"]

"""Ingestion pipeline package."""

from .classifier import FileClassifier, is_binary, should_ignore
from .discovery import DirectoryScanner
from .errors import ArchiveError, DecodeError, EmptyInputError, IngestionError
from .handles import FileHandle, LocalFileHandle, MemoryFileHandle
from .models import CodebaseSnapshot, FileRecord
from .pipeline import IngestionPipeline, ingest
from .readers import ArchiveReader, LooseFileReader

__all__ = [
    "ArchiveError",
    "ArchiveReader",
    "CodebaseSnapshot",
    "DecodeError",
    "DirectoryScanner",
    "EmptyInputError",
    "FileClassifier",
    "FileHandle",
    "FileRecord",
    "IngestionError",
    "IngestionPipeline",
    "LocalFileHandle",
    "LooseFileReader",
    "MemoryFileHandle",
    "ingest",
    "is_binary",
    "should_ignore",
]

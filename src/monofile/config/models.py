"""Configuration models describing Monofile settings."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_IGNORED_FOLDERS = [
    ".git",
    "node_modules",
    "dist",
    "build",
    ".next",
    "coverage",
    "__pycache__",
]
DEFAULT_IGNORED_FILES = [".DS_Store", "package-lock.json", "yarn.lock", "pnpm-lock.yaml"]
DEFAULT_BINARY_EXTENSIONS = [
    "png",
    "jpg",
    "jpeg",
    "gif",
    "ico",
    "pdf",
    "exe",
    "bin",
    "zip",
    "tar",
    "gz",
]


class MonofileBaseModel(BaseModel):
    """Shared configuration for Monofile Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class IngestionOptions(MonofileBaseModel):
    """Options governing how inputs are filtered and read.

    Attributes:
        ignored_folders: Directory names that exclude any path containing them.
        ignored_files: File names that are always excluded.
        binary_extensions: Extensions (lower-case, no dot) treated as binary.
        max_workers: Thread pool size used when decoding loose files.
        follow_symlinks: Whether directory scans follow symbolic links.
    """

    ignored_folders: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_FOLDERS))
    ignored_files: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_FILES))
    binary_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BINARY_EXTENSIONS)
    )
    max_workers: int = Field(default=8, ge=1)
    follow_symlinks: bool = False


class OutputOptions(MonofileBaseModel):
    """Settings for rendered artifacts.

    Attributes:
        context_max_chars: Character budget for the generative-service context input.
        default_filename: File name suggested for the flattened document.
    """

    context_max_chars: int = Field(default=500_000, ge=0)
    default_filename: str = "monofile.md"


class SessionSettings(MonofileBaseModel):
    """Session persistence settings used by the CLI.

    Attributes:
        enabled: Whether the CLI stores the last result bundle.
        path: Location of the session JSON file.
        key: Storage key written into the bundle.
    """

    enabled: bool = True
    path: str = "~/.monofile/session.json"
    key: str = "monofile_session"


class LoggingSettings(MonofileBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(MonofileBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class MonofileConfig(MonofileBaseModel):
    """Top-level configuration struct for Monofile.

    Attributes:
        ingestion: Input filtering and reading settings.
        output: Rendering settings.
        session: Session persistence settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    ingestion: IngestionOptions = Field(default_factory=IngestionOptions)
    output: OutputOptions = Field(default_factory=OutputOptions)
    session: SessionSettings = Field(default_factory=SessionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DEFAULT_BINARY_EXTENSIONS",
    "DEFAULT_IGNORED_FILES",
    "DEFAULT_IGNORED_FOLDERS",
    "MonofileBaseModel",
    "IngestionOptions",
    "OutputOptions",
    "SessionSettings",
    "LoggingSettings",
    "CLIOptions",
    "MonofileConfig",
]

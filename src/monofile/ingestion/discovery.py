"""Turn local filesystem paths into ingestion handles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from .handles import LocalFileHandle

LOGGER = logging.getLogger(__name__)


class DirectoryScanner:
    """Expand files and directory selections into :class:`LocalFileHandle` objects.

    A directory contributes one handle per regular file beneath it, with a
    relative-path hint that starts with the directory's own name. This matches
    how a browser directory picker reports ``webkitRelativePath``. Filtering is
    left to the readers, so ignored trees are still enumerated here.
    """

    def __init__(self, *, follow_symlinks: bool = False) -> None:
        self.follow_symlinks = follow_symlinks

    def scan(
        self, roots: Iterable[Path], *, exclude: Iterable[Path] = ()
    ) -> Iterator[LocalFileHandle]:
        """Yield handles for every root, in the order the roots were given.

        Args:
            roots: Files or directories selected by the user.
            exclude: Files never to yield, such as the document being written.
        """
        excluded = {path.expanduser().resolve() for path in exclude}
        for root in roots:
            root = root.expanduser()
            if not root.exists():
                LOGGER.warning("Skipping missing input %s", root)
                continue
            if root.is_file():
                if root.resolve() in excluded:
                    LOGGER.info("Skipping excluded input %s", root)
                    continue
                yield LocalFileHandle(path=root)
                continue
            yield from self._scan_directory(root, excluded)

    def _scan_directory(self, root: Path, excluded: set[Path]) -> Iterator[LocalFileHandle]:
        prefix = root.resolve().name
        for path in sorted(self._iter_files(root)):
            if path.resolve() in excluded:
                LOGGER.info("Skipping excluded file %s", path)
                continue
            relative = path.relative_to(root).as_posix()
            try:
                yield LocalFileHandle(path=path, relative_path=f"{prefix}/{relative}")
            except OSError as exc:
                LOGGER.warning("Unable to stat %s: %s", path, exc)

    def _iter_files(self, root: Path) -> Iterator[Path]:
        for path in root.rglob("*"):
            if path.is_symlink() and not self.follow_symlinks:
                continue
            if path.is_file():
                yield path


__all__ = ["DirectoryScanner"]

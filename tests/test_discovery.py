"""Tests for turning local paths into handles."""

from __future__ import annotations

import zipfile
from pathlib import Path

from monofile.ingestion import DirectoryScanner, LocalFileHandle, ingest
from monofile.ingestion.handles import effective_path, is_archive


def _make_project(root: Path) -> None:
    (root / "src").mkdir(parents=True)
    (root / "src" / "a.ts").write_text("line1\nline2\n", encoding="utf-8")
    (root / "README.md").write_text("hello", encoding="utf-8")
    (root / "node_modules" / "x").mkdir(parents=True)
    (root / "node_modules" / "x" / "y.js").write_text("ignored", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")


def test_directory_handles_carry_prefixed_relative_paths(tmp_path: Path) -> None:
    project = tmp_path / "proj"
    _make_project(project)

    handles = list(DirectoryScanner().scan([project]))
    hints = sorted(handle.relative_path or "" for handle in handles)

    assert hints == [
        "proj/README.md",
        "proj/logo.png",
        "proj/node_modules/x/y.js",
        "proj/src/a.ts",
    ]
    readme = next(handle for handle in handles if handle.name == "README.md")
    assert readme.size == 5
    assert readme.read() == b"hello"


def test_loose_files_have_no_relative_path(tmp_path: Path) -> None:
    note = tmp_path / "note.txt"
    note.write_text("hi", encoding="utf-8")

    handles = list(DirectoryScanner().scan([note, tmp_path / "missing.txt"]))

    assert len(handles) == 1
    assert handles[0].relative_path is None
    assert effective_path(handles[0]) == "note.txt"
    assert not is_archive(handles[0])


def test_scanned_directory_ingests_end_to_end(tmp_path: Path) -> None:
    project = tmp_path / "proj"
    _make_project(project)
    archive_path = tmp_path / "extra.zip"
    with zipfile.ZipFile(archive_path, "w") as archive:
        archive.writestr("extra/tool.sh", "echo hi\n")

    handles = list(DirectoryScanner().scan([project, archive_path]))
    snapshot = ingest(handles)

    assert is_archive(LocalFileHandle(path=archive_path))
    assert snapshot.paths() == ["extra/tool.sh", "proj/README.md", "proj/src/a.ts"]
    assert snapshot[2].size == len(b"line1\nline2\n")


def test_excluded_paths_are_not_yielded(tmp_path: Path) -> None:
    project = tmp_path / "proj"
    _make_project(project)
    previous_output = project / "monofile.md"
    previous_output.write_text("# MONOFILE GENERATED CODEBASE\n", encoding="utf-8")

    handles = list(DirectoryScanner().scan([project, previous_output], exclude=[previous_output]))

    assert all(handle.name != "monofile.md" for handle in handles)
    assert len(handles) == 4

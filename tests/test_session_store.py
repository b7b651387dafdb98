"""Session store tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from monofile.rendering import ProcessingStats
from monofile.session import (
    ConceptBundle,
    MissingSessionError,
    SessionBundle,
    SessionError,
    SessionStore,
)


def _bundle() -> SessionBundle:
    """Return a sample bundle configured for tests."""
    stats = ProcessingStats(total_files=1, total_lines=2, total_size=3, file_types={"PY": 1})
    bundle = SessionBundle.from_outputs(stats, "# MONOFILE GENERATED CODEBASE\n")
    bundle.outputs.concepts.append(
        ConceptBundle(id="data-layer", name="Data Layer", description="Persistence.")
    )
    return bundle


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "session.json")
    bundle = _bundle()

    store.save(bundle)
    loaded = store.load()

    assert loaded == bundle
    assert loaded.outputs.concepts[0].id == "data-layer"


def test_saved_payload_uses_external_key_names(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "nested" / "session.json")

    store.save(_bundle())
    payload = json.loads(store.path.read_text(encoding="utf-8"))

    assert payload["version"] == 1
    assert payload["key"] == "monofile_session"
    assert payload["stats"]["totalFiles"] == 1
    assert payload["stats"]["fileTypes"] == {"PY": 1}
    assert "aiContext" in payload["outputs"]
    assert "timestamp" in payload


def test_load_missing_session_raises(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "session.json")

    assert not store.exists()
    with pytest.raises(MissingSessionError):
        store.load()


def test_load_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SessionError):
        SessionStore(path).load()


def test_load_non_utf8_file_raises_session_error(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(SessionError) as excinfo:
        SessionStore(path).load()

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_load_directory_at_session_path_raises_session_error(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.mkdir()

    with pytest.raises(SessionError) as excinfo:
        SessionStore(path).load()

    assert isinstance(excinfo.value.__cause__, OSError)


def test_load_rejects_unknown_version(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "session.json")
    store.save(_bundle())
    payload = json.loads(store.path.read_text(encoding="utf-8"))
    payload["version"] = 99
    store.path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(SessionError):
        store.load()


def test_load_rejects_incomplete_bundle(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"version": 1, "stats": {}}), encoding="utf-8")

    with pytest.raises(SessionError):
        SessionStore(path).load()


def test_clear_removes_session(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "session.json")
    store.save(_bundle())

    assert store.clear() is True
    assert store.clear() is False
    assert not store.exists()

"""CLI tests for ingestion commands."""

from __future__ import annotations

import io
import json
import os
import zipfile
from pathlib import Path

from click.testing import CliRunner

from monofile.cli import cli


def _env_with_home(tmp_path: Path) -> dict[str, str]:
    """Return environment variables pointing HOME to a temp directory."""
    env = dict(os.environ)
    env["HOME"] = str(tmp_path / "home")
    return env


def _make_project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    (root / "src" / "a.ts").write_text("line1\nline2\n", encoding="utf-8")
    (root / "README.md").write_text("hello", encoding="utf-8")
    (root / "node_modules" / "x").mkdir(parents=True)
    (root / "node_modules" / "x" / "y.js").write_text("ignored", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    return root


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Monofile flattens files" in result.output
    for command in ("flatten", "stats", "context", "session", "config"):
        assert command in result.output


def test_flatten_writes_document_and_session(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    output = tmp_path / "out" / "codebase.md"
    runner = CliRunner()

    result = runner.invoke(
        cli, ["flatten", str(root), "-o", str(output)], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0, result.output
    document = output.read_text(encoding="utf-8")
    assert "# File Count: 2" in document
    assert "### PATH: proj\n## FILE: README.md" in document
    assert "### PATH: proj > src\n## FILE: a.ts" in document
    assert "node_modules" not in document
    assert "logo.png" not in document
    assert "Flatten summary" in result.output

    session_path = tmp_path / "home" / ".monofile" / "session.json"
    session = json.loads(session_path.read_text(encoding="utf-8"))
    assert session["stats"]["totalFiles"] == 2
    assert session["stats"]["totalLines"] == 4
    assert session["outputs"]["flattened"] == document


def test_flatten_no_session_and_stdout(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["flatten", str(root), "--stdout", "--no-session"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0, result.output
    assert result.output.startswith("# MONOFILE GENERATED CODEBASE\n")
    assert not (tmp_path / "home" / ".monofile" / "session.json").exists()


def test_flatten_reports_empty_input(tmp_path: Path) -> None:
    root = tmp_path / "only-ignored"
    (root / ".git").mkdir(parents=True)
    (root / ".git" / "HEAD").write_text("ref", encoding="utf-8")
    (root / "photo.png").write_bytes(b"png")
    runner = CliRunner()

    result = runner.invoke(
        cli, ["flatten", str(root), "-o", str(tmp_path / "x.md")], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0
    assert "No valid files found." in result.output
    assert not (tmp_path / "x.md").exists()


def test_flatten_reports_corrupt_archive_as_json(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    broken = tmp_path / "broken.zip"
    broken.write_bytes(b"not a zip at all")
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["flatten", str(root), str(broken), "--json", "-o", str(tmp_path / "x.md")],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 1
    assert '"archive_error"' in result.output
    assert "Failed to process ZIP file." in result.output


def test_stats_json_includes_archive_entries(tmp_path: Path) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("lib/util.py", "x = 1\n")
    archive_path = tmp_path / "lib.zip"
    archive_path.write_bytes(buffer.getvalue())
    runner = CliRunner()

    result = runner.invoke(
        cli, ["stats", str(archive_path), "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0, result.output
    assert '"totalFiles": 1' in result.output
    assert '"totalLines": 2' in result.output
    assert '"PY": 1' in result.output


def test_context_respects_max_chars(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["context", str(root), "--max-chars", "12"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0, result.output
    assert result.output == (
        "Structure:\nproj/README.md\nproj/src/a.ts\n\nContent:\n# MONOFILE G"
    )


def test_session_show_and_clear(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    empty = runner.invoke(cli, ["session", "show"], env=env)
    assert empty.exit_code == 0
    assert "No stored session" in empty.output

    runner.invoke(cli, ["flatten", str(root), "-o", str(tmp_path / "doc.md")], env=env)
    shown = runner.invoke(cli, ["session", "show", "--json"], env=env)
    assert shown.exit_code == 0, shown.output
    assert '"totalFiles": 2' in shown.output

    cleared = runner.invoke(cli, ["session", "clear"], env=env)
    assert "Session cleared" in cleared.output
    assert not (tmp_path / "home" / ".monofile" / "session.json").exists()


def test_session_show_discards_corrupt_session(tmp_path: Path) -> None:
    env = _env_with_home(tmp_path)
    session_path = tmp_path / "home" / ".monofile" / "session.json"
    session_path.parent.mkdir(parents=True)
    session_path.write_text("{broken", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["session", "show"], env=env)

    assert result.exit_code != 0
    assert "Discarded unreadable session" in result.output
    assert not session_path.exists()


def test_session_show_discards_non_utf8_session(tmp_path: Path) -> None:
    env = _env_with_home(tmp_path)
    session_path = tmp_path / "home" / ".monofile" / "session.json"
    session_path.parent.mkdir(parents=True)
    session_path.write_bytes(b"\xff\xfe\x00garbage")
    runner = CliRunner()

    result = runner.invoke(cli, ["session", "show", "--json"], env=env)

    assert result.exit_code == 1
    assert '"session_error"' in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert not session_path.exists()


def test_flatten_twice_does_not_ingest_its_own_output(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    with runner.isolated_filesystem(temp_dir=tmp_path):
        Path("main.py").write_text("print('hi')\n", encoding="utf-8")

        first = runner.invoke(cli, ["flatten", ".", "--no-session"], env=env)
        first_document = Path("monofile.md").read_text(encoding="utf-8")
        second = runner.invoke(cli, ["flatten", ".", "--no-session"], env=env)
        second_document = Path("monofile.md").read_text(encoding="utf-8")

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert "# File Count: 1" in first_document
    assert "# File Count: 1" in second_document
    assert "## FILE: main.py" in second_document
    assert "## FILE: monofile.md" not in second_document


def test_flatten_rejects_stdout_with_output_or_json(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    with_output = runner.invoke(
        cli, ["flatten", str(root), "--stdout", "-o", str(tmp_path / "x.md")], env=env
    )
    with_json = runner.invoke(cli, ["flatten", str(root), "--stdout", "--json"], env=env)

    assert with_output.exit_code == 2
    assert "--stdout cannot be combined with --output" in with_output.output
    assert not (tmp_path / "x.md").exists()
    assert with_json.exit_code == 2
    assert "--stdout cannot be combined with --json" in with_json.output
    assert "MONOFILE GENERATED CODEBASE" not in with_json.output


def test_set_option_overrides_configuration_for_one_run(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli,
        ["--set", "output.context_max_chars=12", "context", str(root)],
        env=env,
    )
    unchanged = runner.invoke(cli, ["config", "view", "--env"], env=env)

    assert result.exit_code == 0, result.output
    assert result.output.endswith("Content:\n# MONOFILE G")
    assert "MONOFILE__OUTPUT__CONTEXT_MAX_CHARS=500000" in unchanged.output


def test_set_option_rejects_malformed_assignment(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["--set", "no-equals-sign", "stats", str(root)], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 2
    assert "Expected KEY=VALUE" in result.output

"""Command line interface for the Monofile project."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any, Iterable, NoReturn

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from monofile.config import (
    ConfigError,
    ConfigManager,
    MonofileConfig,
    flatten_for_env,
    parse_assignments,
)
from monofile.ingestion import (
    ArchiveError,
    CodebaseSnapshot,
    DirectoryScanner,
    EmptyInputError,
    IngestionError,
    IngestionPipeline,
)
from monofile.rendering import ProcessingStats, build_context_input, compute_stats, flatten
from monofile.session import MissingSessionError, SessionBundle, SessionError, SessionStore

console = Console()
LOGGER = logging.getLogger(__name__)

_INPUT_PATHS = click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path)
)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _cli_overrides() -> dict[str, Any]:
    """Return the ``--set`` assignments given to the root command."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return {}
    state = ctx.find_root().obj or {}
    return dict(state.get("overrides", {}))


def _load_config(json_output: bool = False) -> MonofileConfig:
    """Load the effective configuration and apply its logging level."""
    manager = ConfigManager()
    try:
        config = manager.load(cli_overrides=_cli_overrides())
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    _configure_logging(config.logging.level)
    return config


def _configure_logging(level: str) -> None:
    """Attach a stderr handler to the package logger at ``level``.

    The handler is replaced on every call so it writes to the current stderr.
    """
    package_logger = logging.getLogger("monofile")
    package_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.propagate = False


def _ingest_paths(
    paths: Iterable[Path],
    config: MonofileConfig,
    *,
    json_output: bool,
    exclude: Iterable[Path] = (),
) -> CodebaseSnapshot:
    """Scan ``paths`` and run the ingestion pipeline, mapping failures to CLI errors."""
    scanner = DirectoryScanner(follow_symlinks=config.ingestion.follow_symlinks)
    pipeline = IngestionPipeline.from_options(config.ingestion)
    try:
        return pipeline.ingest(scanner.scan(paths, exclude=exclude))
    except IngestionError as exc:
        if isinstance(exc, ArchiveError):
            code = "archive_error"
        elif isinstance(exc, EmptyInputError):
            code = "empty_input"
        else:
            code = "ingestion_error"
        _handle_cli_error(str(exc), code=code, json_output=json_output, original=exc)


def _stats_table(stats: ProcessingStats) -> Table:
    table = Table(title="Codebase statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Files", str(stats.total_files))
    table.add_row("Lines", str(stats.total_lines))
    table.add_row("Bytes", str(stats.total_size))
    for file_type, count in sorted(stats.file_types.items()):
        table.add_row(f"Type {file_type}", str(count))
    return table


def _format_summary_line(command: str, metrics: dict[str, Any]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary: {parts}.[/green]"


def _emit_warnings(warnings: Iterable[str], *, quiet: bool, summary_only: bool) -> None:
    for warning in warnings:
        _emit_message(
            f"[yellow]{warning}[/yellow]", mode="warning", quiet=quiet, summary_only=summary_only
        )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="monofile")
@click.option(
    "--set",
    "overrides",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a configuration value for this run (repeatable).",
)
@click.pass_context
def cli(ctx: click.Context, overrides: tuple[str, ...]) -> None:
    """Monofile flattens files, directories and ZIP archives into one document."""
    try:
        ctx.obj = {"overrides": parse_assignments(overrides)}
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="--set") from exc


@cli.command("flatten")
@_INPUT_PATHS
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write the flattened document to.",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Write the document to stdout.")
@click.option("--no-session", is_flag=True, help="Do not store the result as the last session.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the result.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
def flatten_command(
    paths: tuple[Path, ...],
    output: Path | None,
    to_stdout: bool,
    no_session: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Ingest PATHS and write the flattened document."""
    if to_stdout and output is not None:
        raise click.UsageError("--stdout cannot be combined with --output.")
    if to_stdout and json_output:
        raise click.UsageError("--stdout cannot be combined with --json.")

    config = _load_config(json_output)
    quiet = quiet or config.cli.quiet_default
    summary_only = summary_mode or config.cli.summary_default

    destination: Path | None = None
    if not to_stdout:
        destination = output or Path(config.output.default_filename)
    snapshot = _ingest_paths(
        paths,
        config,
        json_output=json_output,
        exclude=[destination] if destination is not None else (),
    )
    stats = compute_stats(snapshot)
    document = flatten(snapshot)

    if destination is None:
        click.echo(document, nl=False)
    else:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(document, encoding="utf-8")

    if config.session.enabled and not no_session:
        store = SessionStore(Path(config.session.path))
        store.save(SessionBundle.from_outputs(stats, document, key=config.session.key))
        LOGGER.debug("Session saved to %s", store.path)

    if json_output:
        console.print_json(
            data={
                "stats": stats.model_dump(by_alias=True),
                "files": snapshot.paths(),
                "warnings": list(snapshot.warnings),
                "output": str(destination) if destination else None,
            }
        )
        return
    if to_stdout:
        return

    _emit_message(_stats_table(stats), mode="detail", quiet=quiet, summary_only=summary_only)
    _emit_warnings(snapshot.warnings, quiet=quiet, summary_only=summary_only)
    _emit_message(
        _format_summary_line(
            "Flatten",
            {
                "files": stats.total_files,
                "lines": stats.total_lines,
                "skipped": len(snapshot.warnings),
                "output": destination,
            },
        ),
        mode="summary",
        quiet=quiet,
        summary_only=summary_only,
    )


@cli.command("stats")
@_INPUT_PATHS
@click.option("--json", "json_output", is_flag=True, help="Emit statistics as JSON.")
def stats_command(paths: tuple[Path, ...], json_output: bool) -> None:
    """Print statistics for PATHS without writing a document."""
    config = _load_config(json_output)
    snapshot = _ingest_paths(paths, config, json_output=json_output)
    stats = compute_stats(snapshot)

    if json_output:
        console.print_json(data=stats.model_dump(by_alias=True))
        return
    console.print(_stats_table(stats))
    _emit_warnings(snapshot.warnings, quiet=False, summary_only=False)


@cli.command("context")
@_INPUT_PATHS
@click.option("--max-chars", type=click.IntRange(min=0), help="Character budget for content.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write the context input to (defaults to stdout).",
)
def context_command(paths: tuple[Path, ...], max_chars: int | None, output: Path | None) -> None:
    """Emit the path listing plus truncated document for a generative service."""
    config = _load_config()
    snapshot = _ingest_paths(
        paths, config, json_output=False, exclude=[output] if output is not None else ()
    )
    budget = config.output.context_max_chars if max_chars is None else max_chars
    text = build_context_input(snapshot, flatten(snapshot), max_chars=budget)

    if output is None:
        click.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    console.print(f"[green]Wrote context input to {output}.[/green]")


@cli.group()
def session() -> None:
    """Inspect or clear the stored last session."""


def _session_store() -> SessionStore:
    config = _load_config()
    return SessionStore(Path(config.session.path))


@session.command("show")
@click.option("--json", "json_output", is_flag=True, help="Emit the stored bundle as JSON.")
def session_show(json_output: bool) -> None:
    """Display the stored session bundle."""
    store = _session_store()
    try:
        bundle = store.load()
    except MissingSessionError:
        console.print("[yellow]No stored session.[/yellow]")
        return
    except SessionError as exc:
        message = f"Discarded unreadable session: {exc}"
        try:
            store.clear()
        except SessionError as clear_exc:
            message = f"Unreadable session could not be discarded: {clear_exc}"
        _handle_cli_error(message, code="session_error", json_output=json_output, original=exc)

    if json_output:
        console.print_json(data=bundle.model_dump(mode="json", by_alias=True))
        return

    table = _stats_table(bundle.stats)
    table.title = f"Session {bundle.key} ({bundle.timestamp.isoformat()})"
    console.print(table)
    console.print(f"Flattened document: {len(bundle.outputs.flattened)} characters")


@session.command("clear")
def session_clear() -> None:
    """Delete the stored session bundle."""
    try:
        cleared = _session_store().clear()
    except SessionError as exc:
        raise click.ClickException(str(exc)) from exc
    if cleared:
        console.print("[green]Session cleared.[/green]")
    else:
        console.print("[yellow]No stored session.[/yellow]")


@cli.group()
def config() -> None:
    """Manage Monofile configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.option(
    "--env",
    "as_env",
    is_flag=True,
    help="Print the effective values as MONOFILE__ environment assignments.",
)
def config_view(no_env: bool, as_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        effective = manager.load(cli_overrides=_cli_overrides(), include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_env:
        for name, value in flatten_for_env(effective).items():
            click.echo(f"{name}={value}")
        return
    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a YAML-literal VALUE at the dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        update = ConfigManager().update(key, parsed_value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    before, after = update.body_lines()
    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key.strip()}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return
    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        manager.replace(edited)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()

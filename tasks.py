"""Invoke tasks for development workflows.

Every task shells out to `uv` so local runs match CI.
"""

from __future__ import annotations

import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"
SOURCE_DIRS = ("src", "tests")


def _uv(ctx: Context, args: Sequence[str], *, dry_run: bool = False) -> None:
    """Run `uv` with the given arguments.

    Args:
        ctx: Invoke execution context.
        args: Arguments appended after the `uv` executable.
        dry_run: Print the command instead of running it.
    """
    command = shlex.join(("uv", *args))
    if dry_run:
        print(f"[dry-run] {command}")
        return
    ctx.run(command, echo=True, pty=True)


@task
def sync(ctx: Context) -> None:
    """Install the project and its dev extras into the uv environment."""
    _uv(ctx, ["sync", "--extra", "dev"])


@task(help={"clean": "Remove existing artifacts from dist/ before building."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build sdist and wheel into `dist/`."""
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _uv(ctx, ["build"])


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "options": "Additional flags forwarded verbatim to pytest.",
    }
)
def tests(ctx: Context, k: str = "", options: str = "") -> None:
    """Run the pytest suite."""
    args = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    if options:
        args.extend(shlex.split(options))
    _uv(ctx, args)


@task(help={"fix": "Apply Ruff auto-fixes."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _uv(ctx, ["run", "ruff", "format", "--check", *SOURCE_DIRS])
    args = ["run", "ruff", "check", *SOURCE_DIRS]
    if fix:
        args.append("--fix")
    _uv(ctx, args)


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _uv(ctx, ["run", "mypy", "src"])


@task(help={"output": "Where to write the flattened document."})
def dogfood(ctx: Context, output: str = "dist/monofile-self.md") -> None:
    """Flatten this repository with the local CLI as a smoke check."""
    Path(output).parent.mkdir(parents=True, exist_ok=True)
    _uv(ctx, ["run", "monofile", "flatten", "src", "tests", "--no-session", "-o", output])


@task
def ci(ctx: Context) -> None:
    """Run lint, type checks and tests in sequence."""
    ctx.invoke(lint)
    ctx.invoke(mypy)
    ctx.invoke(tests)


namespace = Collection(sync, build, tests, lint, mypy, dogfood, ci)

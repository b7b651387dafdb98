"""Configuration management for Monofile.

Settings come from four layers: model defaults, ``~/.monofile/config.yaml``,
``MONOFILE__SECTION__KEY`` environment variables and per-run ``--set``
assignments. :class:`ConfigManager` owns the YAML file and assembles the
layers; merging and validation live in :mod:`monofile.config.resolver`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import MonofileConfig
from .resolver import (
    ENV_PREFIX,
    expand_dotted,
    flatten_for_env,
    parse_assignments,
    resolve_with_precedence,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.monofile/config.yaml")
_STAMP_PREFIX = "# Last updated:"
_HEADER_LINES = (
    "# Monofile configuration file",
    "# Edit with `monofile config edit` or `monofile config set KEY --value VALUE`.",
    f"# Per-run overrides: {ENV_PREFIX}SECTION__KEY=value or `monofile --set section.key=value`.",
)


@dataclass(frozen=True)
class ConfigUpdate:
    """Before and after text of a configuration file rewrite."""

    before: str
    after: str

    def body_lines(self) -> tuple[list[str], list[str]]:
        """Return both versions without the volatile timestamp line."""
        return _without_stamp(self.before), _without_stamp(self.after)


class ConfigManager:
    """Read, validate and rewrite the Monofile configuration file."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> MonofileConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted-key values from ``--set``; the highest layer.
            include_env: Whether ``MONOFILE__*`` variables participate.
            ensure_file: Create the YAML file with defaults when it is missing.
            env_overrides: Environment to read instead of the one given at init.

        Raises:
            ConfigError: If any layer is malformed or the result fails validation.
        """
        if ensure_file:
            self.ensure_exists()
        environment = None
        if include_env:
            environment = self.environment_overrides(
                self._env if env_overrides is None else env_overrides
            )
        return resolve_with_precedence(
            defaults=MonofileConfig(),
            file_overrides=self._read_file(),
            env_overrides=environment or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored in the YAML file."""
        return self._read_file()

    def environment_overrides(self, env: Mapping[str, str]) -> dict[str, Any]:
        """Collect ``MONOFILE__SECTION__KEY`` variables as dotted-key overrides.

        Values are parsed as YAML so lists and numbers survive; a value that is
        not valid YAML is kept as the raw string.
        """
        overrides: dict[str, Any] = {}
        for name, raw in env.items():
            if not name.startswith(ENV_PREFIX):
                continue
            segments = name[len(ENV_PREFIX) :].lower().split("__")
            if not all(segments):
                LOGGER.warning("Ignoring malformed configuration variable %s", name)
                continue
            try:
                overrides[".".join(segments)] = yaml.safe_load(raw)
            except yaml.YAMLError:
                overrides[".".join(segments)] = raw
        return overrides

    def save(self, config: MonofileConfig | Mapping[str, Any]) -> None:
        """Write ``config`` to disk with the standard header."""
        if isinstance(config, MonofileConfig):
            config = config.model_dump(mode="python")
        self._write_file(config)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            LOGGER.info("Writing default configuration to %s", self._config_path)
            self._write_file(MonofileConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents, or ``""``."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def update(self, key: str, value: Any) -> ConfigUpdate:
        """Store ``value`` at the dotted ``key`` after validating the result.

        Raises:
            ConfigError: If the key is empty, collides with a scalar, or the
                resulting configuration is invalid.
        """
        segments = [segment.strip() for segment in key.split(".")]
        if not all(segments):
            raise ConfigError("KEY must be a dotted path such as 'output.context_max_chars'.")
        self.ensure_exists()
        before = self.read_text()
        updated = _merge_file_data(self._read_file(), {".".join(segments): value})
        resolve_with_precedence(defaults=MonofileConfig(), file_overrides=updated)
        self._write_file(updated)
        return ConfigUpdate(before=before, after=self.read_text())

    def replace(self, text: str) -> None:
        """Replace the file with edited YAML ``text`` once it validates.

        Raises:
            ConfigError: If ``text`` is not a YAML mapping of valid settings.
        """
        try:
            parsed = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ConfigError("Configuration file must contain a top-level mapping.")
        resolve_with_precedence(defaults=MonofileConfig(), file_overrides=parsed)
        self._write_file(parsed)

    def _read_file(self) -> dict[str, Any]:
        text = self.read_text()
        try:
            raw = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        stamp = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
        lines = [*_HEADER_LINES, f"{_STAMP_PREFIX} {stamp}"]
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text("\n".join(lines) + "\n" + body, encoding="utf-8")


def _without_stamp(text: str) -> list[str]:
    return [line for line in text.splitlines() if not line.startswith(_STAMP_PREFIX)]


def _merge_file_data(stored: Mapping[str, Any], assignment: Mapping[str, Any]) -> dict[str, Any]:
    """Fold a dotted assignment into the file mapping without adding defaults."""
    result = dict(stored)
    for section, value in expand_dotted(assignment, source_name="cli").items():
        current = result.get(section)
        if isinstance(value, dict) and isinstance(current, dict):
            result[section] = _merge_file_data(current, value)
        elif isinstance(value, dict) and current is not None:
            raise ConfigError(f"Cannot assign into '{section}' because it is not a mapping.")
        else:
            result[section] = value
    return result


__all__ = [
    "ConfigError",
    "ConfigManager",
    "ConfigUpdate",
    "DEFAULT_CONFIG_PATH",
    "MonofileConfig",
    "flatten_for_env",
    "parse_assignments",
    "resolve_with_precedence",
]

"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import MonofileConfig

ENV_PREFIX = "MONOFILE__"


def resolve_with_precedence(
    *,
    defaults: MonofileConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> MonofileConfig:
    """Merge configuration layers, later layers winning.

    Order is defaults, then the YAML file, then environment variables, then
    CLI overrides. Keys in any layer may be dotted (``output.context_max_chars``).

    Raises:
        ConfigError: If a layer is malformed or the merged values fail validation.
    """
    merged = defaults.model_dump(mode="python")
    layers = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for source_name, layer in layers:
        if layer is None:
            continue
        merged = _deep_merge(merged, expand_dotted(layer, source_name=source_name))

    try:
        return MonofileConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: MonofileConfig) -> Dict[str, str]:
    """Render the config as ``MONOFILE__SECTION__KEY`` environment mappings."""
    flat: Dict[str, str] = {}

    def _walk(prefix: list[str], value: Any) -> None:
        if isinstance(value, dict):
            for key, child in value.items():
                _walk(prefix + [str(key)], child)
            return
        env_key = ENV_PREFIX + "__".join(part.upper() for part in prefix)
        if isinstance(value, list):
            flat[env_key] = yaml.safe_dump(value, default_flow_style=True).strip()
        elif value is None:
            flat[env_key] = "null"
        elif isinstance(value, bool):
            flat[env_key] = "true" if value else "false"
        else:
            flat[env_key] = str(value)

    _walk([], config.model_dump(mode="python"))
    return flat


def parse_assignments(pairs: Iterable[str]) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into dotted-key overrides.

    Values are parsed as YAML, so ``ingestion.max_workers=2`` yields an int
    and ``ingestion.ignored_folders=[vendor]`` a list. Later pairs win.

    Raises:
        ConfigError: If a pair has no ``=`` or an empty key.
    """
    overrides: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"Expected KEY=VALUE, got '{pair}'.")
        try:
            overrides[key] = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse value for {key}: {exc}") from exc
    return overrides


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Return a nested mapping where dotted keys become nested dictionaries."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = expand_dotted(value, source_name=source_name)
        *parents, leaf = key.split(".")
        node = result
        for segment in parents:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{source_name.capitalize()} override for {key} conflicts with existing value."
                )
            node = child
        existing = node.get(leaf)
        if isinstance(value, dict) and isinstance(existing, dict):
            node[leaf] = _deep_merge(existing, value)
        else:
            node[leaf] = value
    return result


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = [
    "ENV_PREFIX",
    "expand_dotted",
    "flatten_for_env",
    "parse_assignments",
    "resolve_with_precedence",
]

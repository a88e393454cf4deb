"""YAML configuration files and ``KEY=VALUE`` overrides."""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

__all__ = ["coerce_literal", "deep_update", "load_config", "parse_overrides"]


def load_config(path: str | Path) -> dict[str, Any]:
    """Return the parsed YAML mapping stored at ``path``.

    An empty file yields ``{}``; anything other than a mapping at the root is
    rejected with :class:`ValueError`.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"configuration file not found: {config_path}")
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse configuration {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("configuration root must be a mapping")
    return data


def deep_update(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``updates`` recursively merged."""

    result: dict[str, Any] = dict(base)
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_update(result[key], value)
        else:
            result[key] = value
    return result


def parse_overrides(raw: Sequence[str] | None) -> dict[str, Any]:
    """Turn ``["output.indent=4", ...]`` into a nested mapping."""

    overrides: dict[str, Any] = {}
    for item in raw or ():
        key, sep, value_text = item.partition("=")
        if not sep:
            raise ValueError(f"override '{item}' is missing '='")
        key_parts = [part for part in key.split(".") if part]
        if not key_parts:
            raise ValueError("override key must not be empty")
        cursor = overrides
        for part in key_parts[:-1]:
            cursor = cursor.setdefault(part, {})
            if not isinstance(cursor, dict):
                raise ValueError(f"override '{key}' conflicts with an existing value")
        cursor[key_parts[-1]] = coerce_literal(value_text)
    return overrides


def coerce_literal(value: str) -> Any:
    """Read ``value`` as a Python literal, falling back to the raw string.

    ``true``/``false``/``null`` are accepted too, so YAML-style spellings work
    on the command line.
    """

    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("null", "none"):
        return None
    try:
        return ast.literal_eval(value)
    except (ValueError, SyntaxError):
        return value

"""Logging setup shared by the translator, the runner and the CLI."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

import yaml

ROOT_LOGGER = "pfajs"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"

_CONFIG_LOCK = RLock()
_CONFIGURED = False
_SECTIONS = ("version", "disable_existing_loggers", "formatters", "handlers", "root", "loggers")

_DEFAULT_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "standard",
        }
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"],
    },
    "loggers": {
        ROOT_LOGGER: {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        }
    },
}


def _load_config() -> dict[str, Any]:
    config_path = DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return dict(_DEFAULT_CONFIG)
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:  # pragma: no cover - broken config on disk
        logging.basicConfig(level=logging.WARNING)
        logging.getLogger(f"{ROOT_LOGGER}.telemetry").warning(
            "failed to parse %s: %s", config_path.name, exc
        )
        return dict(_DEFAULT_CONFIG)
    if not isinstance(data, Mapping):
        return dict(_DEFAULT_CONFIG)
    merged = dict(_DEFAULT_CONFIG)
    merged.update({key: value for key, value in data.items() if key in _SECTIONS})
    return merged


def configure() -> None:
    """Apply the logging configuration once per process."""

    global _CONFIGURED
    with _CONFIG_LOCK:
        if _CONFIGURED:
            return
        logging.config.dictConfig(_load_config())
        _CONFIGURED = True


def set_level(level: int | str) -> None:
    """Change the level of the ``pfajs`` logger tree (e.g. from ``--verbose``)."""

    configure()
    logging.getLogger(ROOT_LOGGER).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured via ``configs/logging.yaml``."""

    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    configure()
    return logging.getLogger(name)


__all__ = ["DEFAULT_CONFIG_PATH", "ROOT_LOGGER", "configure", "get_logger", "set_level"]

"""Typed configuration and result objects for translation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from packages.utils.config import deep_update

OUTPUT_FORMATS = ("json", "yaml")


def _as_path(value: Path | str | None) -> Path | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, Path) else Path(value)


def _coerce_int(value: Any, *, fallback: int | None = None) -> int | None:
    if value is None:
        return fallback
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


@dataclass(slots=True)
class OutputOptions:
    """How translated documents are rendered and where they are written."""

    format: str = "json"
    indent: int | None = 2
    sort_keys: bool = False
    directory: Path | None = None

    def __post_init__(self) -> None:
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(
                f"unsupported output format '{self.format}' (expected one of {OUTPUT_FORMATS})"
            )


@dataclass(slots=True)
class TranslatorConfig:
    """Top-level configuration bundle read from ``configs/translator.yaml``."""

    with_locations: bool = True
    output: OutputOptions = field(default_factory=OutputOptions)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "TranslatorConfig":
        payload = dict(data or {})
        return cls(
            with_locations=bool(payload.get("with_locations", True)),
            output=cls._build_output_options(payload.get("output")),
        )

    def merge(self, overrides: Mapping[str, Any] | None) -> "TranslatorConfig":
        if not overrides:
            return self
        return TranslatorConfig.from_mapping(deep_update(self.to_dict(), overrides))

    def to_dict(self) -> dict[str, Any]:
        return {
            "with_locations": self.with_locations,
            "output": {
                "format": self.output.format,
                "indent": self.output.indent,
                "sort_keys": self.output.sort_keys,
                "directory": str(self.output.directory) if self.output.directory else None,
            },
        }

    @staticmethod
    def _build_output_options(data: Any) -> OutputOptions:
        if not isinstance(data, Mapping):
            return OutputOptions()
        return OutputOptions(
            format=str(data.get("format", "json")).lower(),
            indent=_coerce_int(data.get("indent"), fallback=None) if "indent" in data else 2,
            sort_keys=bool(data.get("sort_keys", False)),
            directory=_as_path(data.get("directory")),
        )


@dataclass(slots=True)
class TranslationReport:
    """Outcome of translating one ESTree file."""

    source: Path
    document: dict[str, Any]
    fields: tuple[str, ...]
    duration: float
    with_locations: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": str(self.source),
            "fields": list(self.fields),
            "duration": self.duration,
            "with_locations": self.with_locations,
            "created_at": self.created_at.astimezone(timezone.utc)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
        }

    def summary(self) -> str:
        return (
            f"source={self.source.name} fields={len(self.fields)} "
            f"duration={self.duration * 1000:.1f}ms"
        )


@dataclass(slots=True)
class ExportResult:
    """Where an exported document ended up."""

    path: Path
    format: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": str(self.path), "format": self.format}


__all__ = [
    "ExportResult",
    "OUTPUT_FORMATS",
    "OutputOptions",
    "TranslationReport",
    "TranslatorConfig",
]

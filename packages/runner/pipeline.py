"""File-level translation runs: load, translate, render and export."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Mapping

import yaml

from packages.jsast import loader
from packages.pfa import TranslationError, strip_locations, translate
from packages.telemetry import hooks
from packages.telemetry.logger import get_logger
from packages.utils import config as config_loader

from .types import OUTPUT_FORMATS, ExportResult, TranslationReport, TranslatorConfig

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "translator.yaml"

_LOGGER = get_logger("pfajs.runner")


def load_configuration(
    config_path: str | Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> TranslatorConfig:
    """Return a :class:`TranslatorConfig` from ``config_path`` and overrides."""

    data: Mapping[str, Any] | None = None
    if config_path is not None:
        data = config_loader.load_config(config_path)
    config = TranslatorConfig.from_mapping(data)
    return config.merge(overrides)


def translate_file(path: str | Path, config: TranslatorConfig | None = None) -> TranslationReport:
    """Translate the ESTree JSON file at ``path``.

    Hooks registered for :data:`hooks.TRANSLATION_COMPLETED` or
    :data:`hooks.TRANSLATION_FAILED` are told about the outcome; translation
    errors are re-raised after the failure event is dispatched.
    """

    config = config or TranslatorConfig()
    source = Path(path)
    started = time.perf_counter()
    try:
        program = loader.load_file(source)
        document = translate(program, with_locations=config.with_locations)
    except TranslationError as exc:
        _LOGGER.warning("translation of %s failed: %s", source, exc)
        hooks.dispatch(hooks.TRANSLATION_FAILED, {"source": str(source), **exc.to_dict()})
        raise

    report = TranslationReport(
        source=source,
        document=document,
        fields=tuple(document),
        duration=time.perf_counter() - started,
        with_locations=config.with_locations,
    )
    _LOGGER.info("translated %s", report.summary())
    hooks.dispatch(hooks.TRANSLATION_COMPLETED, report.to_dict())
    return report


def render_document(
    document: Mapping[str, Any],
    fmt: str = "json",
    *,
    indent: int | None = 2,
    sort_keys: bool = False,
) -> str:
    """Serialise ``document`` as JSON or YAML text."""

    if fmt == "json":
        return json.dumps(document, indent=indent, sort_keys=sort_keys) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(
            dict(document), sort_keys=sort_keys, allow_unicode=True, default_flow_style=False
        )
    raise ValueError(f"unsupported output format '{fmt}' (expected one of {OUTPUT_FORMATS})")


def export_document(
    report: TranslationReport,
    destination: str | Path,
    *,
    config: TranslatorConfig | None = None,
) -> ExportResult:
    """Write ``report.document`` to ``destination``.

    A directory destination (an existing directory, or a path without a
    suffix) receives ``<source stem>.<format>``.
    """

    output = (config or TranslatorConfig()).output
    target = Path(destination)
    if target.is_dir() or not target.suffix:
        target = target / f"{report.source.stem}.{output.format}"
    target.parent.mkdir(parents=True, exist_ok=True)
    text = render_document(
        report.document, output.format, indent=output.indent, sort_keys=output.sort_keys
    )
    target.write_text(text, encoding="utf-8")
    result = ExportResult(path=target, format=output.format)
    hooks.dispatch(hooks.DOCUMENT_EXPORTED, result.to_dict())
    return result


def strip_file(path: str | Path) -> dict[str, Any]:
    """Load a PFA JSON document and drop its location markers."""

    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"document not found: {source}")
    return strip_locations(json.loads(source.read_text(encoding="utf-8")))


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "export_document",
    "load_configuration",
    "render_document",
    "strip_file",
    "translate_file",
]

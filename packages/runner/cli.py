"""pfajs command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from packages.pfa import TranslationError
from packages.telemetry import logger
from packages.utils.config import parse_overrides

from . import pipeline
from .types import OUTPUT_FORMATS, TranslatorConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pfajs", description="Translate ESTree JavaScript ASTs into PFA documents"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=pipeline.DEFAULT_CONFIG_PATH if pipeline.DEFAULT_CONFIG_PATH.exists() else None,
        help="Optional path to a translator configuration YAML file.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        metavar="KEY=VALUE",
        help="Override configuration values using dot notation (e.g. output.format=yaml).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log translation progress to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_translate_parser(subparsers)
    _add_strip_parser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.verbose:
        logger.set_level(logging.DEBUG)

    try:
        config = pipeline.load_configuration(
            args.config, overrides=parse_overrides(args.overrides)
        )
        if args.command == "translate":
            return _cmd_translate(args, config)
        if args.command == "strip":
            return _cmd_strip(args, config)
    except TranslationError as exc:
        print(f"[pfajs] {exc.kind.value}: {exc.message}", file=sys.stderr)
        if exc.location:
            print(f"[pfajs] at {exc.location}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"[pfajs] error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


# ---------------------------------------------------------------------------
# Sub-command wiring


def _add_translate_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("translate", help="Translate an ESTree JSON file to PFA")
    parser.add_argument("ast", type=Path, help="ESTree JSON produced by esprima, acorn, ...")
    parser.add_argument(
        "--no-locations",
        dest="with_locations",
        action="store_false",
        default=None,
        help='Drop the "@" source-location markers.',
    )
    parser.add_argument(
        "--format", choices=OUTPUT_FORMATS, help="Output format (default from config)"
    )
    parser.add_argument(
        "--output", type=Path, help="File or directory to write (default: stdout)"
    )


def _add_strip_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "strip", help="Remove location markers from a translated PFA JSON document"
    )
    parser.add_argument("document", type=Path, help="PFA document in JSON")
    parser.add_argument("--output", type=Path, help="File to write (default: stdout)")


# ---------------------------------------------------------------------------
# Command implementations


def _cmd_translate(args: argparse.Namespace, config: TranslatorConfig) -> int:
    overrides: dict[str, object] = {}
    if args.with_locations is not None:
        overrides["with_locations"] = args.with_locations
    if args.format:
        overrides["output"] = {"format": args.format}
    config = config.merge(overrides)

    report = pipeline.translate_file(args.ast, config)
    destination = args.output or config.output.directory
    if destination:
        export = pipeline.export_document(report, destination, config=config)
        print(f"[pfajs] {report.summary()} -> {export.path}", file=sys.stderr)
        return 0
    sys.stdout.write(
        pipeline.render_document(
            report.document,
            config.output.format,
            indent=config.output.indent,
            sort_keys=config.output.sort_keys,
        )
    )
    return 0


def _cmd_strip(args: argparse.Namespace, config: TranslatorConfig) -> int:
    document = pipeline.strip_file(args.document)
    text = pipeline.render_document(
        document, "json", indent=config.output.indent, sort_keys=config.output.sort_keys
    )
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        print(f"[pfajs] stripped document written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())

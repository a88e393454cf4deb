"""Source-location markers attached to translated PFA nodes."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from packages.jsast import nodes

from .errors import ErrorKind, TranslationError

LOCATION_KEY = "@"


def describe(span: Optional[nodes.Span]) -> Optional[str]:
    """Return ``"JS lines <start> to <end>"`` for ``span`` (``None`` if unknown)."""

    if span is None:
        return None
    return f"JS lines {span.start_line} to {span.end_line}"


def location_of(node: Optional[nodes.Node]) -> Optional[str]:
    if node is None:
        return None
    return describe(node.span)


def tagged(node: nodes.Node, entries: Mapping[str, Any]) -> dict[str, Any]:
    """Build a PFA node from ``entries`` with ``node``'s location marker first.

    Nodes without a span get no marker at all rather than a placeholder.
    """

    out: dict[str, Any] = {}
    where = location_of(node)
    if where is not None:
        out[LOCATION_KEY] = where
    out.update(entries)
    return out


def error(kind: ErrorKind, message: str, node: Optional[nodes.Node] = None) -> TranslationError:
    return TranslationError(kind, message, location_of(node))


def strip_locations(value: Any) -> Any:
    """Return a copy of ``value`` with every ``@`` key removed, recursively.

    Stripping an already-stripped document returns an equal document.
    """

    if isinstance(value, dict):
        return {
            key: strip_locations(item) for key, item in value.items() if key != LOCATION_KEY
        }
    if isinstance(value, list):
        return [strip_locations(item) for item in value]
    return value


def has_locations(value: Any) -> bool:
    if isinstance(value, dict):
        return LOCATION_KEY in value or any(has_locations(item) for item in value.values())
    if isinstance(value, list):
        return any(has_locations(item) for item in value)
    return False


__all__ = [
    "LOCATION_KEY",
    "describe",
    "error",
    "has_locations",
    "location_of",
    "strip_locations",
    "tagged",
]

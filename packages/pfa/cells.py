"""Declarations of shared state: the ``cells`` and ``pools`` fields."""

from __future__ import annotations

from typing import Any

from packages.jsast import nodes

from .errors import ErrorKind
from .literals import object_entries, translate_literal
from .locations import error, tagged

SLOT_KEYS = frozenset({"type", "init", "shared", "rollback"})
FLAG_KEYS = frozenset({"shared", "rollback"})


def translate_storage(node: nodes.Node, *, is_cell: bool) -> dict[str, Any]:
    """Translate ``{name: {type: ..., init: ..., shared: ..., rollback: ...}, ...}``.

    Cells must be initialized; pools may start empty.
    """

    what = "cells" if is_cell else "pools"
    if not isinstance(node, nodes.ObjectExpression):
        raise error(ErrorKind.INVALID_SLOT_DECLARATION, f"{what} must be an object", node)

    slots: dict[str, Any] = {}
    for name, declaration in object_entries(node):
        slots[name] = _slot(name, declaration, is_cell=is_cell)
    return tagged(node, slots)


def _slot(name: str, node: nodes.Node, *, is_cell: bool) -> dict[str, Any]:
    kind = "cell" if is_cell else "pool"
    if not isinstance(node, nodes.ObjectExpression):
        raise error(ErrorKind.INVALID_SLOT_DECLARATION, f'{kind} "{name}" must be an object', node)

    slot: dict[str, Any] = {}
    for key, value in object_entries(node):
        if key not in SLOT_KEYS:
            raise error(
                ErrorKind.INVALID_SLOT_DECLARATION,
                f'unrecognized key "{key}" in {kind} "{name}"',
                value,
            )
        literal = translate_literal(value)
        if key in FLAG_KEYS and not isinstance(literal, bool):
            raise error(
                ErrorKind.INVALID_SLOT_DECLARATION,
                f'"{key}" of {kind} "{name}" must be true or false',
                value,
            )
        slot[key] = literal

    required = ("type", "init") if is_cell else ("type",)
    for key in required:
        if key not in slot:
            raise error(
                ErrorKind.INVALID_SLOT_DECLARATION, f'{kind} "{name}" is missing "{key}"', node
            )
    return tagged(node, slot)


__all__ = ["SLOT_KEYS", "translate_storage"]

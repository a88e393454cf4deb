"""Constant JSON values and object-literal keys."""

from __future__ import annotations

from typing import Any, Iterator

from packages.jsast import nodes

from .errors import ErrorKind
from .locations import LOCATION_KEY, error, tagged


def property_key(entry: nodes.Node) -> str:
    """Return the string key of one object-literal entry.

    Only ``"quoted": ...`` and ``bare: ...`` keys are accepted; computed keys,
    numeric keys, getters/setters, methods and spreads are rejected.
    """

    if not isinstance(entry, nodes.Property) or entry.kind != "init" or entry.computed:
        raise error(
            ErrorKind.INVALID_OBJECT_KEY,
            "object should contain only string-valued properties",
            entry,
        )
    match entry.key:
        case nodes.Literal(value=str() as text):
            return text
        case nodes.Identifier(name=name):
            return name
    raise error(
        ErrorKind.INVALID_OBJECT_KEY, "object should contain only string-valued properties", entry
    )


def object_entries(obj: nodes.ObjectExpression) -> Iterator[tuple[str, nodes.Node]]:
    """Yield ``(key, value node)`` pairs of an object literal in source order.

    The ``@`` key is reserved for location markers and is rejected.
    """

    for entry in obj.properties:
        key = property_key(entry)
        if key == LOCATION_KEY:
            raise error(
                ErrorKind.INVALID_OBJECT_KEY,
                f'"{LOCATION_KEY}" is reserved for source locations',
                entry,
            )
        assert isinstance(entry, nodes.Property)
        yield key, entry.value


def translate_literal(node: nodes.Node) -> Any:
    """Translate a compile-time constant into a plain JSON value.

    Object results carry a location marker; scalars and arrays do not.
    """

    match node:
        case nodes.Literal(regex=str()):
            raise error(
                ErrorKind.UNSUPPORTED_LITERAL_KIND,
                "regular expressions are not JSON values",
                node,
            )
        case nodes.Literal(value=value):
            return value
        case nodes.UnaryExpression(
            operator="-", argument=nodes.Literal(value=int() | float() as number)
        ) if not isinstance(number, bool):
            return -number
        case nodes.ArrayExpression(elements=elements):
            out = []
            for element in elements:
                if element is None:
                    raise error(
                        ErrorKind.UNSUPPORTED_LITERAL_KIND,
                        "array literals may not have holes",
                        node,
                    )
                out.append(translate_literal(element))
            return out
        case nodes.ObjectExpression():
            entries = {key: translate_literal(value) for key, value in object_entries(node)}
            return tagged(node, entries)
    raise error(
        ErrorKind.UNSUPPORTED_LITERAL_KIND,
        f"not a literal expression: {node.node_type}",
        node,
    )


def is_string_literal(node: nodes.Node) -> bool:
    return isinstance(node, nodes.Literal) and isinstance(node.value, str) and node.regex is None


__all__ = ["is_string_literal", "object_entries", "property_key", "translate_literal"]

"""Function names and attribute paths built from member-access chains."""

from __future__ import annotations

from typing import Any

from packages.jsast import nodes

from . import expressions
from .errors import ErrorKind
from .locations import error, tagged


def resolve_function_name(node: nodes.Node) -> str:
    """Join ``a.b.c`` into ``"a.b.c"``.

    PFA needs statically known function names, so computed access
    (``a[b]()``) and any other callee shape are rejected.
    """

    match node:
        case nodes.Identifier(name=name):
            return name
        case nodes.MemberExpression(computed=False, object=obj, property=prop):
            return resolve_function_name(obj) + "." + resolve_function_name(prop)
    raise error(ErrorKind.INVALID_FUNCTION_NAME, "illegal function name", node)


def resolve_attribute_path(node: nodes.MemberExpression) -> dict[str, Any]:
    """Translate ``base.x[i].y`` into ``{"attr": base, "path": ["x", i, "y"]}``.

    Segments are collected from the outermost access inward and then reversed
    to restore source order.
    """

    reversed_path: list[Any] = []
    walk: nodes.Node = node
    while isinstance(walk, nodes.MemberExpression):
        match walk:
            case nodes.MemberExpression(computed=False, property=nodes.Identifier(name=name)):
                reversed_path.append(tagged(walk.property, {"string": name}))
            case nodes.MemberExpression(computed=True, property=prop):
                reversed_path.append(expressions.translate_expression(prop))
            case _:
                raise error(
                    ErrorKind.UNRECOGNIZED_MEMBER_EXPRESSION,
                    "unrecognized member expression",
                    walk,
                )
        walk = walk.object

    reversed_path.reverse()
    return tagged(node, {"attr": expressions.translate_expression(walk), "path": reversed_path})


__all__ = ["resolve_attribute_path", "resolve_function_name"]

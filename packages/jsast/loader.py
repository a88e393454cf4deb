"""Build :mod:`nodes` trees from ESTree JSON.

The loader accepts the output of esprima 1.x (function ``defaults``/``rest``
arrays) as well as current ESTree producers (``AssignmentPattern`` and
``RestElement`` parameters).  Babel's literal node types are folded into
:class:`nodes.Literal` so that ``@babel/parser`` output without the ``estree``
plugin can be fed in too.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from packages.pfa.errors import ErrorKind, TranslationError

from . import nodes

Builder = Callable[[Mapping[str, Any]], nodes.Node]

_BUILDERS: dict[str, Builder] = {}


def _register(*type_names: str) -> Callable[[Builder], Builder]:
    def decorator(func: Builder) -> Builder:
        for name in type_names:
            _BUILDERS[name] = func
        return func

    return decorator


def load_program(payload: Mapping[str, Any]) -> nodes.Program:
    """Convert an ESTree ``Program`` (or Babel ``File``) payload."""

    if isinstance(payload, Mapping) and payload.get("type") == "File":
        payload = payload.get("program")  # type: ignore[assignment]
    node = load_node(payload)
    if not isinstance(node, nodes.Program):
        raise TranslationError(
            ErrorKind.MALFORMED_AST, f"expected a Program node, found {node.node_type}"
        )
    return node


def load_file(path: str | Path) -> nodes.Program:
    """Read an ESTree JSON file from ``path`` and convert it."""

    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"AST file not found: {source}")
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TranslationError(
            ErrorKind.MALFORMED_AST, f"{source} is not valid JSON: {exc}"
        ) from exc
    return load_program(payload)


def load_node(payload: Any) -> nodes.Node:
    """Convert one ESTree node; unknown types become :class:`nodes.Unsupported`."""

    if not isinstance(payload, Mapping):
        raise TranslationError(
            ErrorKind.MALFORMED_AST, f"expected an ESTree node, found {type(payload).__name__}"
        )
    type_name = payload.get("type")
    if not isinstance(type_name, str) or not type_name:
        raise TranslationError(ErrorKind.MALFORMED_AST, "ESTree node is missing its 'type'")
    builder = _BUILDERS.get(type_name)
    if builder is None:
        node: nodes.Node = nodes.Unsupported(type_name=type_name)
        node.metadata["estree"] = dict(payload)
    else:
        node = builder(payload)
    node.span = _span(payload.get("loc"))
    return node


# ---------------------------------------------------------------------------
# Field helpers


def _span(loc: Any) -> Optional[nodes.Span]:
    if not isinstance(loc, Mapping):
        return None
    start = loc.get("start")
    end = loc.get("end")
    if not isinstance(start, Mapping) or not isinstance(end, Mapping):
        return None
    try:
        return nodes.Span(
            int(start["line"]),
            int(start.get("column", 0)),
            int(end["line"]),
            int(end.get("column", 0)),
        )
    except (KeyError, TypeError, ValueError):
        return None


def _child(payload: Mapping[str, Any], key: str) -> nodes.Node:
    if key not in payload or payload[key] is None:
        raise TranslationError(
            ErrorKind.MALFORMED_AST, f"{payload.get('type')} node is missing '{key}'"
        )
    return load_node(payload[key])


def _optional(payload: Mapping[str, Any], key: str) -> Optional[nodes.Node]:
    value = payload.get(key)
    if value is None:
        return None
    return load_node(value)


def _children(payload: Mapping[str, Any], key: str) -> list[nodes.Node]:
    return [item for item in _sparse_children(payload, key) if item is not None]


def _sparse_children(payload: Mapping[str, Any], key: str) -> list[Optional[nodes.Node]]:
    raw = payload.get(key, [])
    if not isinstance(raw, list):
        raise TranslationError(
            ErrorKind.MALFORMED_AST, f"{payload.get('type')}.{key} must be a list"
        )
    return [None if item is None else load_node(item) for item in raw]


# ---------------------------------------------------------------------------
# Expressions


@_register("Literal")
def _literal(payload: Mapping[str, Any]) -> nodes.Node:
    regex = payload.get("regex")
    pattern = regex.get("pattern") if isinstance(regex, Mapping) else None
    literal = nodes.Literal(value=payload.get("value"), regex=pattern)
    if "raw" in payload:
        literal.metadata["raw"] = payload["raw"]
    return literal


@_register("StringLiteral", "NumericLiteral", "BooleanLiteral")
def _babel_literal(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.Literal(value=payload.get("value"))


@_register("NullLiteral")
def _babel_null(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.Literal(value=None)


@_register("RegExpLiteral")
def _babel_regex(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.Literal(value=None, regex=str(payload.get("pattern", "")))


@_register("Identifier")
def _identifier(payload: Mapping[str, Any]) -> nodes.Node:
    name = payload.get("name")
    if not isinstance(name, str):
        raise TranslationError(ErrorKind.MALFORMED_AST, "Identifier node is missing 'name'")
    return nodes.Identifier(name=name)


@_register("ArrayExpression")
def _array(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.ArrayExpression(elements=_sparse_children(payload, "elements"))


@_register("ObjectExpression")
def _object(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.ObjectExpression(properties=_children(payload, "properties"))


@_register("Property", "ObjectProperty")
def _property(payload: Mapping[str, Any]) -> nodes.Node:
    kind = payload.get("kind", "init")
    if payload.get("method"):
        kind = "method"
    return nodes.Property(
        key=_child(payload, "key"),
        value=_child(payload, "value"),
        kind=str(kind),
        computed=bool(payload.get("computed", False)),
    )


@_register("MemberExpression")
def _member(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.MemberExpression(
        object=_child(payload, "object"),
        property=_child(payload, "property"),
        computed=bool(payload.get("computed", False)),
    )


@_register("UnaryExpression")
def _unary(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.UnaryExpression(
        operator=str(payload.get("operator")),
        argument=_child(payload, "argument"),
        prefix=bool(payload.get("prefix", True)),
    )


@_register("BinaryExpression", "LogicalExpression")
def _binary(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.BinaryExpression(
        operator=str(payload.get("operator")),
        left=_child(payload, "left"),
        right=_child(payload, "right"),
    )


@_register("ConditionalExpression")
def _conditional(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.ConditionalExpression(
        test=_child(payload, "test"),
        consequent=_child(payload, "consequent"),
        alternate=_child(payload, "alternate"),
    )


@_register("CallExpression")
def _call(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.CallExpression(
        callee=_child(payload, "callee"), arguments=_children(payload, "arguments")
    )


@_register("NewExpression")
def _new(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.NewExpression(
        callee=_child(payload, "callee"), arguments=_children(payload, "arguments")
    )


@_register("FunctionExpression")
def _function(payload: Mapping[str, Any]) -> nodes.Node:
    params: list[nodes.Node] = []
    defaults: list[Optional[nodes.Node]] = []
    rest = _optional(payload, "rest")
    legacy_defaults = _sparse_children(payload, "defaults")
    for index, param in enumerate(_children(payload, "params")):
        if isinstance(param, nodes.Unsupported) and param.type_name == "AssignmentPattern":
            raw = param.metadata["estree"]
            assert isinstance(raw, Mapping)
            params.append(_child(raw, "left"))
            defaults.append(_child(raw, "right"))
            continue
        if isinstance(param, nodes.Unsupported) and param.type_name == "RestElement":
            raw = param.metadata["estree"]
            assert isinstance(raw, Mapping)
            rest = _child(raw, "argument")
            continue
        params.append(param)
        defaults.append(legacy_defaults[index] if index < len(legacy_defaults) else None)
    return nodes.FunctionExpression(
        params=params,
        defaults=defaults,
        body=_child(payload, "body"),
        id=_optional(payload, "id"),  # type: ignore[arg-type]
        rest=rest,
        generator=bool(payload.get("generator", False)),
        expression=bool(payload.get("expression", False)),
        is_async=bool(payload.get("async", False)),
    )


@_register("VariableDeclarator")
def _declarator(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.VariableDeclarator(id=_child(payload, "id"), init=_optional(payload, "init"))


@_register("VariableDeclaration")
def _declaration(payload: Mapping[str, Any]) -> nodes.Node:
    declarations = _children(payload, "declarations")
    for item in declarations:
        if not isinstance(item, nodes.VariableDeclarator):
            raise TranslationError(
                ErrorKind.MALFORMED_AST,
                f"VariableDeclaration contains a {item.node_type} instead of a declarator",
            )
    return nodes.VariableDeclaration(
        declarations=declarations,  # type: ignore[arg-type]
        kind=str(payload.get("kind", "var")),
    )


@_register("AssignmentExpression")
def _assignment(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.AssignmentExpression(
        operator=str(payload.get("operator")),
        left=_child(payload, "left"),
        right=_child(payload, "right"),
    )


@_register("UpdateExpression")
def _update(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.UpdateExpression(
        operator=str(payload.get("operator")),
        argument=_child(payload, "argument"),
        prefix=bool(payload.get("prefix", False)),
    )


@_register("SequenceExpression")
def _sequence(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.SequenceExpression(expressions=_children(payload, "expressions"))


# ---------------------------------------------------------------------------
# Statements


@_register("Program")
def _program(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.Program(body=_children(payload, "body"))


@_register("BlockStatement")
def _block(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.BlockStatement(body=_children(payload, "body"))


@_register("ExpressionStatement")
def _expression_statement(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.ExpressionStatement(expression=_child(payload, "expression"))


@_register("IfStatement")
def _if(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.IfStatement(
        test=_child(payload, "test"),
        consequent=_child(payload, "consequent"),
        alternate=_optional(payload, "alternate"),
    )


@_register("WhileStatement")
def _while(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.WhileStatement(test=_child(payload, "test"), body=_child(payload, "body"))


@_register("DoWhileStatement")
def _do_while(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.DoWhileStatement(body=_child(payload, "body"), test=_child(payload, "test"))


@_register("ForStatement")
def _for(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.ForStatement(
        init=_optional(payload, "init"),
        test=_optional(payload, "test"),
        update=_optional(payload, "update"),
        body=_child(payload, "body"),
    )


@_register("ForInStatement")
def _for_in(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.ForInStatement(
        left=_child(payload, "left"), right=_child(payload, "right"), body=_child(payload, "body")
    )


@_register("ThrowStatement")
def _throw(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.ThrowStatement(argument=_child(payload, "argument"))


@_register("EmptyStatement")
def _empty(payload: Mapping[str, Any]) -> nodes.Node:
    return nodes.EmptyStatement()


__all__ = ["load_file", "load_node", "load_program"]

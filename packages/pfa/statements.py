"""Statement-level translation: control flow, loops and ``throw``."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from packages.jsast import nodes

from . import expressions
from .errors import ErrorKind
from .literals import is_string_literal
from .locations import error, tagged


def translate_statements(body: Iterable[nodes.Node]) -> list[Any]:
    """Translate a statement list; empty statements contribute nothing."""

    out: list[Any] = []
    for statement in body:
        translated = translate_statement(statement)
        if translated is not None:
            out.append(translated)
    return out


def translate_statement(node: nodes.Node) -> Optional[Any]:
    match node:
        case nodes.ExpressionStatement(expression=expression):
            return expressions.translate_expression(expression)
        case nodes.IfStatement():
            return _if_chain(node)
        case nodes.WhileStatement(test=test, body=body):
            return tagged(
                node, {"while": expressions.translate_expression(test), "do": _body(body)}
            )
        case nodes.DoWhileStatement(body=body, test=test):
            until = tagged(test, {"not": expressions.translate_expression(test)})
            return tagged(node, {"do": _body(body), "until": until})
        case nodes.ForStatement():
            return _for(node)
        case nodes.ForInStatement():
            return _for_in(node)
        case nodes.ThrowStatement(argument=argument):
            if not is_string_literal(argument):
                raise error(
                    ErrorKind.INVALID_THROW_FORM, "only literal strings can be thrown", node
                )
            return tagged(node, {"error": argument.value})  # type: ignore[attr-defined]
        case (
            nodes.VariableDeclaration()
            | nodes.AssignmentExpression()
            | nodes.SequenceExpression()
            | nodes.BlockStatement()
        ):
            return expressions.translate_expression(node)
        case nodes.EmptyStatement():
            return None
    raise error(
        ErrorKind.UNRECOGNIZED_STATEMENT, f"unrecognized statement: {node.node_type}", node
    )


def _body(node: nodes.Node) -> list[Any]:
    if isinstance(node, nodes.BlockStatement):
        return translate_statements(node.body)
    return translate_statements([node])


def _if_chain(node: nodes.IfStatement) -> dict[str, Any]:
    """Flatten ``if / else if / ... / else`` into one ``if`` or ``cond`` node."""

    arms: list[dict[str, Any]] = []
    otherwise: Optional[list[Any]] = None
    walk: nodes.IfStatement = node
    while True:
        arms.append(
            tagged(
                walk,
                {
                    "if": expressions.translate_expression(walk.test),
                    "then": _body(walk.consequent),
                },
            )
        )
        alternate = walk.alternate
        if isinstance(alternate, nodes.IfStatement):
            walk = alternate
            continue
        if alternate is not None:
            otherwise = _body(alternate)
        break

    if len(arms) == 1:
        out = arms[0]
    else:
        out = tagged(node, {"cond": arms})
    if otherwise is not None:
        out["else"] = otherwise
    return out


def _for(node: nodes.ForStatement) -> dict[str, Any]:
    if not isinstance(node.init, nodes.VariableDeclaration):
        raise error(
            ErrorKind.INVALID_FOR_INIT,
            "initialization of a for loop must be a variable declaration",
            node.init or node,
        )
    bindings = expressions.translate_expression(node.init)["let"]

    if isinstance(node.update, nodes.SequenceExpression):
        parts = node.update.expressions
    else:
        parts = [node.update]
    if not parts or not all(_is_simple_step(part) for part in parts):
        raise error(
            ErrorKind.INVALID_FOR_STEP,
            "step of a for loop must assign to simple variable names",
            node.update or node,
        )
    step: dict[str, Any] = {}
    for part in parts:
        step.update(expressions.translate_expression(part)["set"])

    test = True if node.test is None else expressions.translate_expression(node.test)
    return tagged(node, {"for": bindings, "while": test, "step": step, "do": _body(node.body)})


def _is_simple_step(node: Optional[nodes.Node]) -> bool:
    match node:
        case nodes.AssignmentExpression(operator=operator, left=nodes.Identifier()):
            return operator == "=" or operator in expressions.COMPOUND_OPERATORS
        case nodes.UpdateExpression(operator="++" | "--", argument=nodes.Identifier()):
            return True
    return False


def _for_in(node: nodes.ForInStatement) -> dict[str, Any]:
    match node.left:
        case nodes.VariableDeclaration(
            kind="var",
            declarations=[
                nodes.VariableDeclarator(id=nodes.Identifier(name=name), init=None),
            ],
        ):
            pass
        case _:
            raise error(
                ErrorKind.INVALID_FOR_IN_TARGET,
                'for-in loop variable must be a single, uninitialized "var" declaration',
                node.left,
            )
    collection = expressions.translate_expression(node.right)
    return tagged(node, {"foreach": name, "in": collection, "do": _body(node.body)})


__all__ = ["translate_statement", "translate_statements"]

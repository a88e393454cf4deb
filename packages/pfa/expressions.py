"""Recursive translation of JavaScript expressions into PFA expression nodes.

Every composite result carries an ``@`` location marker (see
:mod:`locations`); bare identifiers and non-string scalars pass through as
plain JSON.  Two forms are only recognised in call-argument position (and as
the value of an attribute-path assignment), where PFA accepts functions:

* ``function(x = "double") { ... } >> "double"`` declares an inline function
  with parameter types taken from the defaults and the return type after
  ``>>``;
* ``fcn("name")`` or ``fcn(name)`` references a named function.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from packages.jsast import nodes

from . import names, statements
from .errors import ErrorKind
from .literals import is_string_literal, object_entries, translate_literal
from .locations import error, tagged

UNARY_RENAMES = {"-": "u-", "!": "not"}
UNARY_OPERATORS = frozenset({"u-", "not", "~"})

# JavaScript's '%' is a remainder like C and Java, PFA's '%' is a modulo.
BINARY_RENAMES = {"%": "%%", "&&": "and", "||": "or"}
BINARY_OPERATORS = frozenset(
    {"+", "-", "*", "/", "%%", "==", "!=", "<", ">", "<=", ">=", "and", "or", "&", "^", "|"}
)

COMPOUND_OPERATORS = {"+=": "+", "-=": "-", "*=": "*", "/=": "/"}

RETURN_TYPE_OPERATOR = ">>"
FUNCTION_REFERENCE = "fcn"
LOG_FUNCTION = "console.log"
DOC_FUNCTION = "doc"

CONSTRUCTORS: dict[str, type[nodes.Node]] = {
    "Array": nodes.ArrayExpression,
    "Map": nodes.ObjectExpression,
    "Record": nodes.ObjectExpression,
}


def translate_expression(node: nodes.Node, allow_function_forms: bool = False) -> Any:
    """Translate ``node`` into its PFA JSON equivalent."""

    if allow_function_forms:
        special = _function_form(node)
        if special is not None:
            return special

    match node:
        case nodes.Literal(regex=str()):
            raise error(
                ErrorKind.UNSUPPORTED_LITERAL_KIND, "regular expressions have no PFA form", node
            )
        case nodes.Literal(value=str() as text):
            return tagged(node, {"string": text})
        case nodes.Literal(value=value):
            return value
        case nodes.Identifier(name=name):
            return name
        case nodes.MemberExpression():
            return names.resolve_attribute_path(node)
        case nodes.UnaryExpression():
            return _unary(node)
        case nodes.BinaryExpression():
            return _binary(node)
        case nodes.ConditionalExpression(test=test, consequent=consequent, alternate=alternate):
            return tagged(
                node,
                {
                    "if": translate_expression(test),
                    "then": translate_expression(consequent),
                    "else": translate_expression(alternate),
                },
            )
        case nodes.CallExpression():
            return _call(node)
        case nodes.NewExpression():
            return _new(node)
        case nodes.VariableDeclaration():
            return _let(node)
        case nodes.UpdateExpression():
            return _update(node)
        case nodes.AssignmentExpression():
            return _assign(node)
        case nodes.SequenceExpression():
            return _multi_assign(node)
        case nodes.BlockStatement(body=body):
            return tagged(node, {"do": statements.translate_statements(body)})
    raise error(
        ErrorKind.UNSUPPORTED_CONSTRUCT,
        f'Javascript\'s "{node.node_type}" construct has no PFA translation',
        node,
    )


def translate_function_definition(node: nodes.Node) -> dict[str, Any]:
    """Translate ``function(a = typeA, ...) { body } >> returnType``.

    Every parameter must carry a default, which is read as its PFA type.
    """

    match node:
        case nodes.BinaryExpression(
            operator=operator, left=nodes.FunctionExpression() as function, right=ret
        ) if operator == RETURN_TYPE_OPERATOR:
            pass
        case _:
            raise error(
                ErrorKind.INVALID_FUNCTION_DEFINITION,
                'functions must have the form function(x = type, ...) { ... } >> returnType',
                node,
            )

    if (
        function.id is not None
        or function.rest is not None
        or function.generator
        or function.is_async
        or function.expression
        or not isinstance(function.body, nodes.BlockStatement)
    ):
        raise error(
            ErrorKind.INVALID_FUNCTION_DEFINITION,
            "function must be anonymous with a block body",
            function,
        )

    params: list[dict[str, Any]] = []
    for param, default in zip(function.params, function.defaults):
        if not isinstance(param, nodes.Identifier):
            raise error(
                ErrorKind.INVALID_FUNCTION_DEFINITION,
                "function parameters must be simple identifiers",
                param,
            )
        if default is None:
            raise error(
                ErrorKind.INVALID_FUNCTION_DEFINITION,
                f'parameter "{param.name}" needs a type as its default value',
                param,
            )
        params.append({param.name: translate_literal(default)})

    return tagged(
        node,
        {
            "params": params,
            "ret": translate_literal(ret),
            "do": statements.translate_statements(function.body.body),
        },
    )


def is_function_definition(value: Any) -> bool:
    return isinstance(value, dict) and "params" in value and "ret" in value


# ---------------------------------------------------------------------------
# Special forms


def _function_form(node: nodes.Node) -> Optional[dict[str, Any]]:
    match node:
        case nodes.BinaryExpression(operator=operator, left=nodes.FunctionExpression()) if (
            operator == RETURN_TYPE_OPERATOR
        ):
            return translate_function_definition(node)
        case nodes.CallExpression(
            callee=nodes.Identifier(name=callee), arguments=[nodes.Literal(value=str() as name)]
        ) if callee == FUNCTION_REFERENCE:
            return tagged(node, {"fcn": name})
        case nodes.CallExpression(
            callee=nodes.Identifier(name=callee), arguments=[nodes.Identifier(name=name)]
        ) if callee == FUNCTION_REFERENCE:
            return tagged(node, {"fcn": name})
    return None


# ---------------------------------------------------------------------------
# Operators


def _unary(node: nodes.UnaryExpression) -> dict[str, Any]:
    name = UNARY_RENAMES.get(node.operator, node.operator)
    if name not in UNARY_OPERATORS:
        raise error(
            ErrorKind.UNSUPPORTED_OPERATOR,
            f'Javascript\'s "{node.operator}" unary operator has no PFA translation',
            node,
        )
    return tagged(node, {name: [translate_expression(node.argument)]})


def _binary(node: nodes.BinaryExpression) -> dict[str, Any]:
    name = BINARY_RENAMES.get(node.operator, node.operator)
    if name not in BINARY_OPERATORS:
        raise error(
            ErrorKind.UNSUPPORTED_OPERATOR,
            f'Javascript\'s "{node.operator}" binary operator has no PFA translation',
            node,
        )
    return tagged(node, {name: [translate_expression(node.left), translate_expression(node.right)]})


# ---------------------------------------------------------------------------
# Calls and constructors


def _call(node: nodes.CallExpression) -> dict[str, Any]:
    name = names.resolve_function_name(node.callee)
    if name == "cell":
        return _state_access(node, "cell", max_args=3)
    if name == "pool":
        return _state_access(node, "pool", max_args=4)
    if name == DOC_FUNCTION:
        if len(node.arguments) != 1 or not is_string_literal(node.arguments[0]):
            raise error(ErrorKind.ARITY_ERROR, '"doc" takes 1 literal string argument', node)
        return tagged(node, {"doc": node.arguments[0].value})  # type: ignore[attr-defined]

    args = [translate_expression(arg, allow_function_forms=True) for arg in node.arguments]
    if name == LOG_FUNCTION:
        return tagged(node, {"log": args})
    return tagged(node, {name: args})


def _state_access(node: nodes.CallExpression, kind: str, *, max_args: int) -> dict[str, Any]:
    """``cell(name, path?, to?)`` and ``pool(name, path?, to?, init?)``."""

    args = node.arguments
    if not 1 <= len(args) <= max_args:
        raise error(ErrorKind.ARITY_ERROR, f'"{kind}" takes 1-{max_args} arguments', node)

    match args[0]:
        case nodes.Literal(value=str() as name):
            pass
        case nodes.Identifier(name=name):
            pass
        case _:
            raise error(
                ErrorKind.INVALID_STATE_ACCESS,
                f'first argument of "{kind}" must be its name',
                args[0],
            )
    out: dict[str, Any] = {kind: name}

    if len(args) >= 2:
        path = args[1]
        if not isinstance(path, nodes.ArrayExpression) or None in path.elements:
            raise error(
                ErrorKind.INVALID_STATE_ACCESS,
                f'second argument of "{kind}" must be a path in square brackets',
                path,
            )
        out["path"] = [translate_expression(segment) for segment in path.elements if segment]
    if len(args) >= 3:
        out["to"] = translate_expression(args[2], allow_function_forms=True)
    if len(args) == 4:
        out["init"] = translate_expression(args[3], allow_function_forms=True)
    return tagged(node, out)


def _new(node: nodes.NewExpression) -> dict[str, Any]:
    callee = node.callee
    if not isinstance(callee, nodes.Identifier) or callee.name not in CONSTRUCTORS:
        raise error(
            ErrorKind.INVALID_CONSTRUCTOR_FORM,
            "new can only be used to create PFA Arrays, Maps, or Records",
            node,
        )
    if len(node.arguments) != 2:
        raise error(
            ErrorKind.INVALID_CONSTRUCTOR_FORM,
            f"{callee.name} constructor has two arguments, value and type",
            node,
        )

    contents, type_node = node.arguments
    if not isinstance(contents, CONSTRUCTORS[callee.name]):
        brackets = "square" if callee.name == "Array" else "curly"
        raise error(
            ErrorKind.INVALID_CONSTRUCTOR_FORM,
            f"first argument of {callee.name} must be a literal in {brackets} brackets",
            contents,
        )
    if not isinstance(type_node, (nodes.ArrayExpression, nodes.ObjectExpression)) and not (
        is_string_literal(type_node)
    ):
        raise error(
            ErrorKind.INVALID_CONSTRUCTOR_FORM,
            f"second argument of {callee.name} must be a literal type",
            type_node,
        )

    value: Any
    if isinstance(contents, nodes.ArrayExpression):
        if None in contents.elements:
            raise error(
                ErrorKind.INVALID_CONSTRUCTOR_FORM, "array literals may not have holes", contents
            )
        value = [translate_expression(item) for item in contents.elements if item]
    else:
        assert isinstance(contents, nodes.ObjectExpression)
        value = {key: translate_expression(item) for key, item in object_entries(contents)}

    return tagged(node, {"new": value, "type": translate_literal(type_node)})


# ---------------------------------------------------------------------------
# Bindings and assignments


def _let(node: nodes.VariableDeclaration) -> dict[str, Any]:
    pairs: dict[str, Any] = {}
    for declarator in node.declarations:
        if not isinstance(declarator.id, nodes.Identifier):
            raise error(
                ErrorKind.INVALID_DECLARATION_TARGET,
                "unrecognized variable declaration l-value",
                declarator,
            )
        if declarator.init is None:
            raise error(
                ErrorKind.INVALID_DECLARATION_TARGET,
                f'variable "{declarator.id.name}" must be initialized',
                declarator,
            )
        pairs[declarator.id.name] = translate_expression(declarator.init)
    return tagged(node, {"let": pairs})


def _update(node: nodes.UpdateExpression) -> dict[str, Any]:
    if not isinstance(node.argument, nodes.Identifier) or node.operator not in ("++", "--"):
        raise error(
            ErrorKind.UNSUPPORTED_UPDATE_TARGET,
            f'"{node.operator}" can only be applied to a simple variable name',
            node,
        )
    name = node.argument.name
    step = tagged(node, {node.operator[0]: [name, 1]})
    return tagged(node, {"set": {name: step}})


def _assign(node: nodes.AssignmentExpression) -> dict[str, Any]:
    operator = node.operator
    if operator != "=" and operator not in COMPOUND_OPERATORS:
        raise error(
            ErrorKind.INVALID_COMPOUND_ASSIGNMENT,
            f'assignment with "{operator}" is not handled',
            node,
        )

    target: Any
    match node.left:
        case nodes.Identifier(name=name):
            target = name
            value = translate_expression(node.right)
        case nodes.MemberExpression() as member:
            target = names.resolve_attribute_path(member)
            value = translate_expression(node.right, allow_function_forms=True)
        case _:
            raise error(
                ErrorKind.INVALID_ASSIGNMENT_FORM,
                "assignments must target a variable name or an attribute path",
                node,
            )

    if operator != "=":
        if is_function_definition(value):
            raise error(
                ErrorKind.INVALID_ASSIGNMENT_FORM,
                f"can't mix function-updates with {operator}",
                node,
            )
        # The read side gets its own copy so the written path never aliases it.
        value = tagged(node, {COMPOUND_OPERATORS[operator]: [copy.deepcopy(target), value]})

    if isinstance(target, str):
        return tagged(node, {"set": {target: value}})
    target["to"] = value
    return target


def _multi_assign(node: nodes.SequenceExpression) -> dict[str, Any]:
    pairs: dict[str, Any] = {}
    for item in node.expressions:
        if not isinstance(item, nodes.AssignmentExpression):
            raise error(
                ErrorKind.UNSUPPORTED_CONSTRUCT,
                "comma-separated expressions are only allowed as multiple assignments",
                item,
            )
        if item.operator != "=":
            raise error(
                ErrorKind.INVALID_ASSIGNMENT_FORM,
                f'assignment with "{item.operator}" rather than "="',
                item,
            )
        if not isinstance(item.left, nodes.Identifier):
            raise error(
                ErrorKind.INVALID_ASSIGNMENT_FORM,
                "only simple identifiers allowed as lvalues in multi-assignments",
                item,
            )
        pairs[item.left.name] = translate_expression(item.right)
    return tagged(node, {"set": pairs})


__all__ = [
    "BINARY_OPERATORS",
    "BINARY_RENAMES",
    "COMPOUND_OPERATORS",
    "UNARY_OPERATORS",
    "UNARY_RENAMES",
    "is_function_definition",
    "translate_expression",
    "translate_function_definition",
]

"""Assemble a PFA document from the top-level field assignments of a program.

A program is a list of statements of the form ``field = value;`` where
``field`` is one of the PFA document fields::

    input = "double";
    output = "double";
    action = function(input) { input + 1; };

Each field has its own shape rules; the handlers below enforce them and
delegate to the literal, expression, statement and storage translators.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from packages.jsast import loader, nodes
from packages.telemetry.logger import get_logger

from . import cells, expressions, statements
from .errors import ErrorKind
from .literals import object_entries, translate_literal
from .locations import error, strip_locations, tagged

FieldHandler = Callable[[str, nodes.Node], Any]

REQUIRED_FIELDS = ("input", "output", "action")
ACTION_PARAMETERS = ("input", "tally")

_FIELDS: dict[str, FieldHandler] = {}
_LOGGER = get_logger("pfajs.translator")


def _field(*names: str) -> Callable[[FieldHandler], FieldHandler]:
    def decorator(fn: FieldHandler) -> FieldHandler:
        for name in names:
            _FIELDS[name] = fn
        return fn

    return decorator


def translate(
    source: Union[nodes.Program, Mapping[str, Any]], *, with_locations: bool = True
) -> dict[str, Any]:
    """Translate an ESTree program (raw mapping or loaded) into a PFA document.

    With ``with_locations=False`` every ``@`` marker is removed before the
    document is returned.  Any problem raises :class:`TranslationError`; no
    partial document is ever returned.
    """

    program = source if isinstance(source, nodes.Program) else loader.load_program(source)
    document = translate_program(program)
    _LOGGER.info("translated %d fields: %s", len(document), ", ".join(document))
    if not with_locations:
        return strip_locations(document)
    return document


def translate_program(program: nodes.Program) -> dict[str, Any]:
    document: dict[str, Any] = {}
    for statement in program.body:
        match statement:
            case nodes.ExpressionStatement(
                expression=nodes.AssignmentExpression(
                    operator="=", left=nodes.Identifier(name=field), right=value
                )
            ):
                pass
            case _:
                raise error(
                    ErrorKind.INVALID_TOP_LEVEL_STATEMENT,
                    "top-level statements must be assignments to PFA fields",
                    statement,
                )

        handler = _FIELDS.get(field)
        if handler is None:
            raise error(
                ErrorKind.UNRECOGNIZED_FIELD, f'unrecognized top-level field "{field}"', statement
            )
        if field in document:
            raise error(ErrorKind.DUPLICATE_FIELD, f'field "{field}" is assigned twice', statement)
        document[field] = handler(field, value)
        _LOGGER.debug("field %s translated", field)

    for field in REQUIRED_FIELDS:
        if field not in document:
            raise error(ErrorKind.MISSING_REQUIRED_FIELD, f'required field "{field}" is missing')
    return document


# ---------------------------------------------------------------------------
# Field handlers


@_field("name", "doc")
def _string_field(field: str, value: nodes.Node) -> str:
    match value:
        case nodes.Literal(value=str() as text, regex=None):
            return text
    raise error(ErrorKind.INVALID_FIELD_VALUE, f"{field} must be a string", value)


@_field("method")
def _method(field: str, value: nodes.Node) -> str:
    match value:
        case nodes.Literal(value=str() as text, regex=None):
            return text
        case nodes.Identifier(name=name):
            return name
    raise error(ErrorKind.INVALID_FIELD_VALUE, "method must be a string or a name", value)


@_field("input", "output", "zero", "metadata")
def _constant(field: str, value: nodes.Node) -> Any:
    return translate_literal(value)


@_field("begin", "end")
def _begin_end(field: str, value: nodes.Node) -> list[Any]:
    function = _simple_function(field, value)
    if function.params:
        raise error(ErrorKind.INVALID_FIELD_VALUE, f"{field} must not have parameters", value)
    return statements.translate_statements(function.body.body)


@_field("action")
def _action(field: str, value: nodes.Node) -> list[Any]:
    function = _simple_function(field, value)
    seen: list[str] = []
    for param, default in zip(function.params, function.defaults):
        name = param.name if isinstance(param, nodes.Identifier) else None
        if name not in ACTION_PARAMETERS or name in seen or default is not None:
            raise error(
                ErrorKind.INVALID_FIELD_VALUE,
                'action parameters may only be "input" and "tally", each at most once',
                param,
            )
        seen.append(name)
    if "input" not in seen:
        raise error(ErrorKind.INVALID_FIELD_VALUE, 'action must take an "input" parameter', value)
    return statements.translate_statements(function.body.body)


@_field("fcns")
def _fcns(field: str, value: nodes.Node) -> dict[str, Any]:
    if not isinstance(value, nodes.ObjectExpression):
        raise error(
            ErrorKind.INVALID_FIELD_VALUE, "fcns must be an object of function definitions", value
        )
    definitions = {
        name: expressions.translate_function_definition(definition)
        for name, definition in object_entries(value)
    }
    return tagged(value, definitions)


@_field("cells", "pools")
def _storage(field: str, value: nodes.Node) -> dict[str, Any]:
    return cells.translate_storage(value, is_cell=field == "cells")


@_field("randseed")
def _randseed(field: str, value: nodes.Node) -> int:
    number = _constant_number(value)
    if number is None or isinstance(number, float) and not number.is_integer():
        raise error(ErrorKind.INVALID_FIELD_VALUE, "randseed must be an integer", value)
    return int(number)


@_field("options")
def _options(field: str, value: nodes.Node) -> dict[str, Any]:
    if not isinstance(value, nodes.ObjectExpression):
        raise error(ErrorKind.INVALID_FIELD_VALUE, "options must be an object", value)
    return tagged(value, {key: translate_literal(item) for key, item in object_entries(value)})


# ---------------------------------------------------------------------------
# Helpers


def _simple_function(field: str, value: nodes.Node) -> nodes.FunctionExpression:
    if (
        not isinstance(value, nodes.FunctionExpression)
        or value.id is not None
        or value.rest is not None
        or value.generator
        or value.is_async
        or value.expression
        or not isinstance(value.body, nodes.BlockStatement)
    ):
        raise error(
            ErrorKind.INVALID_FIELD_VALUE,
            f"{field} must be an anonymous function with a block body",
            value,
        )
    return value


def _constant_number(value: nodes.Node) -> Optional[float]:
    match value:
        case nodes.Literal(value=int() | float() as number) if not isinstance(number, bool):
            return number
        case nodes.UnaryExpression(
            operator="-", argument=nodes.Literal(value=int() | float() as number)
        ) if not isinstance(number, bool):
            return -number
    return None


__all__ = ["REQUIRED_FIELDS", "translate", "translate_program"]

"""Expression translation: operators, calls, constructors and assignments."""

from __future__ import annotations

import pytest

import estree_factory as js
from packages.jsast import loader
from packages.pfa import ErrorKind, TranslationError, strip_locations
from packages.pfa.expressions import translate_expression


def expr(payload, **kwargs):
    return translate_expression(loader.load_node(payload), **kwargs)


def plain(payload, **kwargs):
    return strip_locations(expr(payload, **kwargs))


def expect_error(kind, payload, **kwargs):
    with pytest.raises(TranslationError) as exc:
        expr(payload, **kwargs)
    assert exc.value.kind is kind
    return exc.value


# ---------------------------------------------------------------------------
# Leaves


def test_string_literal_is_wrapped() -> None:
    assert expr(js.lit("hello")) == {"@": "JS lines 1 to 1", "string": "hello"}


@pytest.mark.parametrize("value", [0, 1.5, True, None])
def test_scalars_are_bare(value) -> None:
    assert expr(js.lit(value)) == value


def test_identifier_is_a_bare_reference() -> None:
    assert expr(js.ident("input")) == "input"


def test_regex_literal_is_rejected() -> None:
    expect_error(ErrorKind.UNSUPPORTED_LITERAL_KIND, js.regex("x*"))


# ---------------------------------------------------------------------------
# Operators


@pytest.mark.parametrize(
    "operator, renamed",
    [
        ("+", "+"),
        ("-", "-"),
        ("*", "*"),
        ("/", "/"),
        ("%", "%%"),
        ("==", "=="),
        ("!=", "!="),
        ("<", "<"),
        (">", ">"),
        ("<=", "<="),
        (">=", ">="),
        ("&", "&"),
        ("^", "^"),
        ("|", "|"),
    ],
)
def test_binary_operator_table(operator, renamed) -> None:
    result = expr(js.binary(operator, js.ident("a"), js.lit(2)))
    assert result == {"@": "JS lines 1 to 1", renamed: ["a", 2]}


@pytest.mark.parametrize("operator, renamed", [("&&", "and"), ("||", "or")])
def test_logical_operators_are_renamed(operator, renamed) -> None:
    assert plain(js.logical(operator, js.ident("a"), js.ident("b"))) == {renamed: ["a", "b"]}


@pytest.mark.parametrize("operator", ["===", "!==", "<<", ">>>", "in", "instanceof", "**"])
def test_unsupported_binary_operators(operator) -> None:
    error = expect_error(
        ErrorKind.UNSUPPORTED_OPERATOR, js.binary(operator, js.ident("a"), js.ident("b"))
    )
    assert operator in error.message


@pytest.mark.parametrize("operator, renamed", [("-", "u-"), ("!", "not"), ("~", "~")])
def test_unary_operator_table(operator, renamed) -> None:
    assert plain(js.unary(operator, js.ident("x"))) == {renamed: ["x"]}


@pytest.mark.parametrize("operator", ["typeof", "void", "delete", "+"])
def test_unsupported_unary_operators(operator) -> None:
    expect_error(ErrorKind.UNSUPPORTED_OPERATOR, js.unary(operator, js.ident("x")))


def test_nested_operators() -> None:
    payload = js.binary("*", js.binary("+", js.ident("a"), js.ident("b")), js.lit(2))
    assert plain(payload) == {"*": [{"+": ["a", "b"]}, 2]}


def test_conditional_expression() -> None:
    payload = js.conditional(js.ident("flag"), js.lit("yes"), js.lit(0))
    assert plain(payload) == {"if": "flag", "then": {"string": "yes"}, "else": 0}


# ---------------------------------------------------------------------------
# Calls


def test_generic_call_uses_dotted_name() -> None:
    payload = js.call("m.link.logit", js.ident("x"), js.lit(1))
    assert plain(payload) == {"m.link.logit": ["x", 1]}


def test_console_log_becomes_log() -> None:
    payload = js.call("console.log", js.lit("value"), js.ident("x"))
    assert plain(payload) == {"log": [{"string": "value"}, "x"]}


def test_doc_call() -> None:
    assert plain(js.call("doc", js.lit("explains the step"))) == {"doc": "explains the step"}


def test_doc_requires_one_string() -> None:
    expect_error(ErrorKind.ARITY_ERROR, js.call("doc", js.ident("x")))


def test_cell_read_write() -> None:
    assert plain(js.call("cell", js.lit("x"), js.array(), js.lit(5))) == {
        "cell": "x",
        "path": [],
        "to": 5,
    }


def test_cell_name_only() -> None:
    assert plain(js.call("cell", js.ident("counter"))) == {"cell": "counter"}


def test_pool_with_init() -> None:
    payload = js.call("pool", js.lit("p"), js.array(js.lit("k")), js.lit(1), js.lit(0))
    assert plain(payload) == {"pool": "p", "path": [{"string": "k"}], "to": 1, "init": 0}


def test_cell_update_with_function_reference() -> None:
    payload = js.call("cell", js.lit("total"), js.array(), js.call("fcn", js.lit("u.add")))
    assert plain(payload) == {"cell": "total", "path": [], "to": {"fcn": "u.add"}}


@pytest.mark.parametrize(
    "payload",
    [
        js.call("cell"),
        js.call("cell", js.lit("x"), js.array(), js.lit(1), js.lit(2)),
        js.call("pool"),
        js.call("pool", js.lit("x"), js.array(), js.lit(1), js.lit(2), js.lit(3)),
    ],
)
def test_state_access_arity(payload) -> None:
    expect_error(ErrorKind.ARITY_ERROR, payload)


@pytest.mark.parametrize(
    "payload",
    [
        js.call("cell", js.lit(7)),
        js.call("cell", js.lit("x"), js.ident("path")),
        js.call("pool", js.binary("+", js.lit("a"), js.lit("b"))),
    ],
)
def test_state_access_shapes(payload) -> None:
    expect_error(ErrorKind.INVALID_STATE_ACCESS, payload)


def test_function_reference_by_string_and_identifier() -> None:
    by_string = js.call("a.map", js.ident("xs"), js.call("fcn", js.lit("u.square")))
    by_name = js.call("a.map", js.ident("xs"), js.call("fcn", js.ident("u.square")))
    assert plain(by_string) == {"a.map": ["xs", {"fcn": "u.square"}]}
    assert plain(by_name) == plain(by_string)


def test_inline_function_definition_in_argument() -> None:
    square = js.typed_function(
        {"x": js.lit("double")},
        js.lit("double"),
        js.stmt(js.binary("*", js.ident("x"), js.ident("x"))),
    )
    assert plain(js.call("a.map", js.ident("xs"), square)) == {
        "a.map": [
            "xs",
            {"params": [{"x": "double"}], "ret": "double", "do": [{"*": ["x", "x"]}]},
        ]
    }


def test_inline_function_with_schema_types() -> None:
    fn = js.typed_function(
        {"a": js.lit("int"), "b": js.obj({"type": js.lit("array"), "items": js.lit("int")})},
        js.obj({"type": js.lit("array"), "items": js.lit("int")}),
        js.stmt(js.ident("b")),
    )
    result = plain(js.call("a.filter", js.ident("xs"), fn))
    definition = result["a.filter"][1]
    assert definition["params"] == [{"a": "int"}, {"b": {"type": "array", "items": "int"}}]
    assert definition["ret"] == {"type": "array", "items": "int"}


def test_function_definition_outside_arguments_is_rejected() -> None:
    fn = js.typed_function({"x": js.lit("int")}, js.lit("int"), js.stmt(js.ident("x")))
    expect_error(ErrorKind.UNSUPPORTED_OPERATOR, fn)


def test_function_parameter_needs_a_type() -> None:
    fn = js.binary(">>", js.function(["x"], js.stmt(js.ident("x"))), js.lit("int"))
    error = expect_error(
        ErrorKind.INVALID_FUNCTION_DEFINITION, js.call("a.map", js.ident("xs"), fn)
    )
    assert '"x"' in error.message


def test_named_function_definition_is_rejected() -> None:
    fn = js.typed_function({"x": js.lit("int")}, js.lit("int"), js.stmt(js.ident("x")))
    fn["left"]["id"] = js.ident("named")
    expect_error(ErrorKind.INVALID_FUNCTION_DEFINITION, js.call("a.map", js.ident("xs"), fn))


def test_bare_function_literal_is_unsupported() -> None:
    expect_error(ErrorKind.UNSUPPORTED_CONSTRUCT, js.function([], js.stmt(js.lit(1))))


# ---------------------------------------------------------------------------
# Constructors


def test_new_array() -> None:
    payload = js.new(
        "Array",
        js.array(js.lit(1), js.ident("x")),
        js.obj({"type": js.lit("array"), "items": js.lit("int")}),
    )
    assert plain(payload) == {"new": [1, "x"], "type": {"type": "array", "items": "int"}}


def test_new_map_and_record() -> None:
    map_type = js.obj({"type": js.lit("map"), "values": js.lit("string")})
    payload = js.new("Map", js.obj({"one": js.lit("uno")}), map_type)
    assert plain(payload) == {
        "new": {"one": {"string": "uno"}},
        "type": {"type": "map", "values": "string"},
    }
    record = plain(js.new("Record", js.obj({"x": js.lit(1.0)}), js.lit("Point")))
    assert record == {"new": {"x": 1.0}, "type": "Point"}


def test_map_contents_cannot_use_the_location_key() -> None:
    contents = js.obj({"@": js.lit(1)}, quoted=True)
    expect_error(ErrorKind.INVALID_OBJECT_KEY, js.new("Map", contents, js.lit("int")))


@pytest.mark.parametrize(
    "payload",
    [
        js.new("Set", js.array(), js.lit("int")),
        js.new("Array", js.array()),
        js.new("Array", js.obj({}), js.lit("int")),
        js.new("Map", js.array(), js.lit("int")),
        js.new("Array", js.array(), js.ident("t")),
    ],
)
def test_constructor_shapes(payload) -> None:
    expect_error(ErrorKind.INVALID_CONSTRUCTOR_FORM, payload)


# ---------------------------------------------------------------------------
# Bindings and assignments


def test_variable_declaration() -> None:
    payload = js.var({"x": js.lit(1), "y": js.ident("x")})
    assert plain(payload) == {"let": {"x": 1, "y": "x"}}


def test_uninitialised_declaration_is_rejected() -> None:
    expect_error(ErrorKind.INVALID_DECLARATION_TARGET, js.var({"x": None}))


@pytest.mark.parametrize("operator, op", [("++", "+"), ("--", "-")])
def test_update_expressions(operator, op) -> None:
    assert plain(js.update(operator, js.ident("i"))) == {"set": {"i": {op: ["i", 1]}}}


def test_update_on_path_is_rejected() -> None:
    expect_error(ErrorKind.UNSUPPORTED_UPDATE_TARGET, js.update("++", js.dotted("a.b")))


def test_simple_assignment() -> None:
    assert plain(js.assign(js.ident("x"), js.lit(1))) == {"set": {"x": 1}}


@pytest.mark.parametrize("operator, op", [("+=", "+"), ("-=", "-"), ("*=", "*"), ("/=", "/")])
def test_compound_assignment(operator, op) -> None:
    payload = js.assign(js.ident("x"), js.lit(2), operator)
    assert plain(payload) == {"set": {"x": {op: ["x", 2]}}}


@pytest.mark.parametrize("operator", ["%=", "<<=", "|=", "**="])
def test_other_compound_operators_are_rejected(operator) -> None:
    expect_error(
        ErrorKind.INVALID_COMPOUND_ASSIGNMENT, js.assign(js.ident("x"), js.lit(2), operator)
    )


def test_path_assignment_carries_to() -> None:
    payload = js.assign(js.dotted("rec.x"), js.lit(1))
    assert plain(payload) == {"attr": "rec", "path": [{"string": "x"}], "to": 1}


def test_path_assignment_accepts_function_reference() -> None:
    payload = js.assign(js.dotted("rec.x"), js.call("fcn", js.lit("u.inc")))
    assert plain(payload)["to"] == {"fcn": "u.inc"}


def test_compound_assignment_on_path() -> None:
    payload = js.assign(js.dotted("obj.x.y"), js.lit(1), "+=")
    reference = {"attr": "obj", "path": [{"string": "x"}, {"string": "y"}]}
    assert plain(payload) == {**reference, "to": {"+": [reference, 1]}}


def test_compound_assignment_does_not_alias() -> None:
    payload = js.assign(js.dotted("obj.x.y"), js.lit(1), "+=")
    first = expr(payload)
    second = expr(payload)
    assert first == second

    read_side = first["to"]["+"][0]
    assert read_side is not first
    assert read_side["path"] is not first["path"]
    read_side["path"].append("mutated")
    assert len(first["path"]) == 2
    assert second["to"]["+"][0]["path"] == second["path"]


def test_function_update_cannot_be_compound() -> None:
    fn = js.typed_function({"v": js.lit("int")}, js.lit("int"), js.stmt(js.ident("v")))
    payload = js.assign(js.dotted("rec.x"), fn, "+=")
    expect_error(ErrorKind.INVALID_ASSIGNMENT_FORM, payload)


def test_assignment_to_call_is_rejected() -> None:
    expect_error(ErrorKind.INVALID_ASSIGNMENT_FORM, js.assign(js.call("f"), js.lit(1)))


def test_multiple_assignment() -> None:
    payload = js.sequence(
        js.assign(js.ident("a"), js.lit(1)), js.assign(js.ident("b"), js.ident("a"))
    )
    assert plain(payload) == {"set": {"a": 1, "b": "a"}}


def test_sequence_of_non_assignments_is_rejected() -> None:
    payload = js.sequence(js.assign(js.ident("a"), js.lit(1)), js.call("f"))
    expect_error(ErrorKind.UNSUPPORTED_CONSTRUCT, payload)


@pytest.mark.parametrize(
    "item",
    [
        js.assign(js.ident("a"), js.lit(1), "+="),
        js.assign(js.dotted("a.b"), js.lit(1)),
    ],
)
def test_sequence_requires_simple_assignments(item) -> None:
    expect_error(ErrorKind.INVALID_ASSIGNMENT_FORM, js.sequence(item))


def test_block_becomes_do() -> None:
    payload = js.block(js.stmt(js.call("f")), js.empty())
    assert plain(payload) == {"do": [{"f": []}]}


@pytest.mark.parametrize(
    "payload",
    [
        js.node("ThisExpression"),
        js.array(js.lit(1)),
        js.obj({"a": js.lit(1)}),
        js.node("ArrowFunctionExpression", params=[], body=js.lit(1)),
    ],
)
def test_unsupported_constructs_name_their_type(payload) -> None:
    error = expect_error(ErrorKind.UNSUPPORTED_CONSTRUCT, payload)
    assert payload["type"] in error.message

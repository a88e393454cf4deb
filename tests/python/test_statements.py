"""Statement translation: branching, loops, throw."""

from __future__ import annotations

import pytest

import estree_factory as js
from packages.jsast import loader
from packages.pfa import ErrorKind, TranslationError, strip_locations
from packages.pfa.statements import translate_statements


def run(*payloads):
    return strip_locations(translate_statements([loader.load_node(p) for p in payloads]))


def expect_error(kind, payload):
    with pytest.raises(TranslationError) as exc:
        translate_statements([loader.load_node(payload)])
    assert exc.value.kind is kind
    return exc.value


def count_key(value, key):
    if isinstance(value, dict):
        return (key in value) + sum(count_key(item, key) for item in value.values())
    if isinstance(value, list):
        return sum(count_key(item, key) for item in value)
    return 0


def test_expression_statements_and_empty_statements() -> None:
    result = run(js.stmt(js.call("f")), js.empty(), js.var({"x": js.lit(1)}))
    assert result == [{"f": []}, {"let": {"x": 1}}]


def test_single_if() -> None:
    payload = js.if_(js.ident("a"), js.block(js.stmt(js.call("f"))))
    assert run(payload) == [{"if": "a", "then": [{"f": []}]}]


def test_if_else_with_unbraced_bodies() -> None:
    payload = js.if_(js.ident("a"), js.stmt(js.call("f")), js.stmt(js.call("g")))
    assert run(payload) == [{"if": "a", "then": [{"f": []}], "else": [{"g": []}]}]


def test_else_if_chain_is_flattened() -> None:
    payload = js.if_(
        js.ident("a"),
        js.block(js.stmt(js.lit(1))),
        js.if_(
            js.ident("b"),
            js.block(js.stmt(js.lit(2))),
            js.if_(
                js.ident("c"),
                js.block(js.stmt(js.lit(3))),
                js.block(js.stmt(js.lit(4))),
            ),
        ),
    )
    (result,) = run(payload)
    assert result == {
        "cond": [
            {"if": "a", "then": [1]},
            {"if": "b", "then": [2]},
            {"if": "c", "then": [3]},
        ],
        "else": [4],
    }
    assert count_key(result, "else") == 1
    assert count_key(result, "cond") == 1


def test_else_if_chain_without_else() -> None:
    payload = js.if_(js.ident("a"), js.block(), js.if_(js.ident("b"), js.block()))
    assert run(payload) == [{"cond": [{"if": "a", "then": []}, {"if": "b", "then": []}]}]


def test_cond_arms_keep_their_own_locations() -> None:
    payload = js.if_(js.ident("a"), js.block(), js.if_(js.ident("b"), js.block()))
    (result,) = translate_statements([loader.load_node(payload)])
    assert result["@"] == "JS lines 1 to 1"
    assert all("@" in arm for arm in result["cond"])


def test_while_loop() -> None:
    payload = js.while_(
        js.binary("<", js.ident("i"), js.lit(3)), js.stmt(js.update("++", js.ident("i")))
    )
    assert run(payload) == [
        {"while": {"<": ["i", 3]}, "do": [{"set": {"i": {"+": ["i", 1]}}}]}
    ]


def test_do_while_negates_once() -> None:
    payload = js.do_while(js.block(js.stmt(js.call("step"))), js.ident("more"))
    (result,) = run(payload)
    assert result == {"do": [{"step": []}], "until": {"not": "more"}}
    assert count_key(result, "not") == 1


def test_do_while_with_negated_condition_is_not_simplified() -> None:
    payload = js.do_while(js.block(), js.unary("!", js.ident("done")))
    assert run(payload) == [{"do": [], "until": {"not": {"not": ["done"]}}}]


def test_for_loop() -> None:
    payload = js.for_(
        js.var({"i": js.lit(0)}),
        js.binary("<", js.ident("i"), js.lit(10)),
        js.update("++", js.ident("i")),
        js.block(js.stmt(js.call("f", js.ident("i")))),
    )
    assert run(payload) == [
        {
            "for": {"i": 0},
            "while": {"<": ["i", 10]},
            "step": {"i": {"+": ["i", 1]}},
            "do": [{"f": ["i"]}],
        }
    ]


def test_for_loop_with_assignment_and_sequence_steps() -> None:
    step = js.sequence(
        js.assign(js.ident("i"), js.binary("+", js.ident("i"), js.lit(1))),
        js.assign(js.ident("j"), js.lit(0)),
    )
    payload = js.for_(js.var({"i": js.lit(0), "j": js.lit(0)}), None, step, js.block())
    (result,) = run(payload)
    assert result["while"] is True
    assert result["step"] == {"i": {"+": ["i", 1]}, "j": 0}

    single = js.for_(
        js.var({"i": js.lit(0)}), None, js.assign(js.ident("i"), js.lit(2), "*="), js.block()
    )
    assert run(single)[0]["step"] == {"i": {"*": ["i", 2]}}


def test_for_loop_mixes_increments_and_compound_steps() -> None:
    step = js.sequence(js.update("++", js.ident("i")), js.assign(js.ident("j"), js.lit(2), "-="))
    payload = js.for_(js.var({"i": js.lit(0), "j": js.lit(9)}), None, step, js.block())
    assert run(payload)[0]["step"] == {"i": {"+": ["i", 1]}, "j": {"-": ["j", 2]}}


@pytest.mark.parametrize(
    "init",
    [None, js.assign(js.ident("i"), js.lit(0))],
)
def test_for_requires_declaration(init) -> None:
    payload = js.for_(init, None, js.update("++", js.ident("i")), js.block())
    expect_error(ErrorKind.INVALID_FOR_INIT, payload)


@pytest.mark.parametrize(
    "step",
    [
        None,
        js.call("advance"),
        js.assign(js.dotted("a.b"), js.lit(1)),
        js.sequence(js.update("++", js.ident("i")), js.call("f")),
        js.assign(js.ident("i"), js.lit(2), "%="),
        js.sequence(js.assign(js.ident("i"), js.lit(1)), js.assign(js.dotted("a.b"), js.lit(2))),
    ],
)
def test_for_requires_simple_step(step) -> None:
    payload = js.for_(js.var({"i": js.lit(0)}), None, step, js.block())
    expect_error(ErrorKind.INVALID_FOR_STEP, payload)


def test_for_in_loop() -> None:
    payload = js.for_in(js.var({"x": None}), js.ident("xs"), js.stmt(js.call("f", js.ident("x"))))
    assert run(payload) == [{"foreach": "x", "in": "xs", "do": [{"f": ["x"]}]}]


@pytest.mark.parametrize(
    "left",
    [
        js.var({"x": None}, kind="let"),
        js.var({"x": js.lit(0)}),
        js.var({"x": None, "y": None}),
        js.ident("x"),
    ],
)
def test_for_in_target_shapes(left) -> None:
    expect_error(ErrorKind.INVALID_FOR_IN_TARGET, js.for_in(left, js.ident("xs"), js.block()))


def test_throw_string() -> None:
    assert run(js.throw(js.lit("bad input"))) == [{"error": "bad input"}]


@pytest.mark.parametrize("argument", [js.ident("err"), js.lit(3), js.call("f")])
def test_throw_requires_literal_string(argument) -> None:
    expect_error(ErrorKind.INVALID_THROW_FORM, js.throw(argument))


def test_nested_block_statement() -> None:
    assert run(js.block(js.stmt(js.lit(1)))) == [{"do": [1]}]


@pytest.mark.parametrize(
    "payload",
    [
        js.return_(js.lit(1)),
        js.node("SwitchStatement", discriminant=js.ident("x"), cases=[]),
        js.node("BreakStatement"),
    ],
)
def test_unrecognized_statements(payload) -> None:
    error = expect_error(ErrorKind.UNRECOGNIZED_STATEMENT, payload)
    assert payload["type"] in error.message

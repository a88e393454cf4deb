"""Function names and attribute paths."""

from __future__ import annotations

import pytest

import estree_factory as js
from packages.jsast import loader
from packages.pfa import ErrorKind, TranslationError, strip_locations
from packages.pfa.names import resolve_attribute_path, resolve_function_name


def test_identifier_name() -> None:
    assert resolve_function_name(loader.load_node(js.ident("sqrt"))) == "sqrt"


def test_dotted_name_is_joined() -> None:
    node = loader.load_node(js.dotted("model.reg.linear"))
    assert resolve_function_name(node) == "model.reg.linear"


@pytest.mark.parametrize(
    "payload",
    [
        js.member(js.ident("a"), js.lit("b"), computed=True),
        js.call("f"),
        js.lit("a.b"),
    ],
)
def test_dynamic_function_names_are_rejected(payload) -> None:
    with pytest.raises(TranslationError) as exc:
        resolve_function_name(loader.load_node(payload))
    assert exc.value.kind is ErrorKind.INVALID_FUNCTION_NAME


def test_attribute_path_in_source_order() -> None:
    payload = js.member(js.member(js.ident("rec"), "x"), js.lit(0), computed=True)
    result = resolve_attribute_path(loader.load_node(payload))
    assert result["@"] == "JS lines 1 to 1"
    assert strip_locations(result) == {"attr": "rec", "path": [{"string": "x"}, 0]}


def test_computed_segments_are_translated() -> None:
    index = js.binary("+", js.ident("i"), js.lit(1))
    payload = js.member(js.member(js.ident("xs"), index, computed=True), "name")
    result = strip_locations(resolve_attribute_path(loader.load_node(payload)))
    assert result == {"attr": "xs", "path": [{"+": ["i", 1]}, {"string": "name"}]}


def test_string_index_is_a_string_segment() -> None:
    payload = js.member(js.ident("m"), js.lit("key"), computed=True)
    result = strip_locations(resolve_attribute_path(loader.load_node(payload)))
    assert result == {"attr": "m", "path": [{"string": "key"}]}


def test_base_may_be_a_call() -> None:
    payload = js.member(js.call("input.get"), "x")
    result = strip_locations(resolve_attribute_path(loader.load_node(payload)))
    assert result == {"attr": {"input.get": []}, "path": [{"string": "x"}]}


def test_non_identifier_dot_property_is_rejected() -> None:
    payload = js.member(js.ident("a"), js.lit("b"), computed=False)
    with pytest.raises(TranslationError) as exc:
        resolve_attribute_path(loader.load_node(payload))
    assert exc.value.kind is ErrorKind.UNRECOGNIZED_MEMBER_EXPRESSION

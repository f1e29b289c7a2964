"""Property-based tests for jsontrail deserialization."""

import json

from hypothesis import given
from hypothesis import strategies as st

from jsontrail import (
    Err,
    Ok,
    TypeMismatch,
    deserialize,
    make_path,
    parse_path,
    render_path,
    translate,
)
from jsontrail.schema import I64, U32, Optional

SCHEMA = {
    "name": str,
    "age": U32,
    "email": Optional(str),
    "scores": [float],
    "flags": {str: bool},
    "nested": {"items": [I64], "meta": {"label": str}},
}

finite_floats = st.floats(allow_nan=False, allow_infinity=False)


@st.composite
def conforming_documents(draw):
    """Generate documents that match SCHEMA."""
    return {
        "name": draw(st.text()),
        "age": draw(st.integers(min_value=0, max_value=2**32 - 1)),
        "email": draw(st.one_of(st.none(), st.text())),
        "scores": draw(st.lists(finite_floats, max_size=5)),
        "flags": draw(st.dictionaries(st.text(), st.booleans(), max_size=5)),
        "nested": {
            "items": draw(
                st.lists(st.integers(min_value=-(2**63), max_value=2**63 - 1), max_size=5)
            ),
            "meta": {"label": draw(st.text())},
        },
    }


field_names = st.text(max_size=8)
paths = st.lists(
    st.one_of(field_names, st.integers(min_value=0, max_value=10**6)), max_size=6
).map(lambda parts: make_path(*parts))


@given(conforming_documents())
def test_round_trip(doc):
    assert deserialize(json.dumps(doc).encode("utf-8"), SCHEMA) == Ok(doc)


@given(st.lists(st.integers(), max_size=10), st.data())
def test_bad_element_index_is_reported(items, data):
    position = data.draw(st.integers(min_value=0, max_value=len(items)))
    items = items[:position] + ["x"] + items[position:]

    result = deserialize(json.dumps({"items": items}), {"items": [int]})

    assert isinstance(result, Err)
    assert result.error.path == make_path("items", position)
    assert result.error.cause == TypeMismatch(expected="integer", found="string")
    assert result.error.record.path == f"items[{position}]"


@given(paths)
def test_rendered_paths_parse_back(path):
    assert parse_path(render_path(path)) == path


@given(paths, st.text(), st.text())
def test_translate_is_pure(path, expected, found):
    cause = TypeMismatch(expected=expected, found=found)
    assert translate(path, cause) == translate(path, cause)

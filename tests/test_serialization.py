"""Tests for syntax tree serialization (to_dict, from_dict, to_json, from_json)."""

import json

import pytest

from erlpretty import (
    Atom,
    Clause,
    Comment,
    ErrorInfo,
    ErrorMarker,
    Float,
    Function,
    InfixExpr,
    Integer,
    Operator,
    Placement,
    SourceLocation,
    String,
    Variable,
    format,
)
from erlpretty.errors import SerializationError
from erlpretty.serialization import from_dict, from_json, to_dict, to_json


def _function() -> Function:
    body = InfixExpr(Variable("X"), Operator("+"), Integer(1, "16#1"))
    clause = Clause(
        (Variable("X"),),
        None,
        (body,),
        comments=(Comment((" bump",), 3, Placement.TRAILING),),
    )
    return Function(
        Atom("inc"),
        (clause,),
        comments=(Comment((" Increment",)),),
        location=SourceLocation(4, 1, "src/inc.erl"),
    )


class TestToDict:
    def test_type_discriminator(self) -> None:
        assert to_dict(Atom("ok")) == {"_type": "Atom", "value": "ok"}

    def test_empty_comments_and_unknown_location_omitted(self) -> None:
        data = to_dict(Variable("X"))
        assert "comments" not in data
        assert "location" not in data

    def test_location_and_placement(self) -> None:
        data = to_dict(_function())
        assert data["location"] == {
            "_type": "SourceLocation",
            "line": 4,
            "column": 1,
            "source_file": "src/inc.erl",
        }
        assert data["clauses"][0]["comments"][0]["placement"] == "trailing"

    def test_json_compatible(self) -> None:
        json.dumps(to_dict(_function()))


class TestRoundTrip:
    def test_function_with_comments(self) -> None:
        tree = _function()
        restored = from_json(to_json(tree))
        assert restored == tree
        assert format(restored) == format(tree)

    def test_float_and_string(self) -> None:
        tree = InfixExpr(Float(1.5), Operator("++"), String("a\nb"))
        assert from_dict(to_dict(tree)) == tree

    def test_error_marker_with_error_info(self) -> None:
        marker = ErrorMarker(ErrorInfo(7, "erl_parse", ("syntax error before", "'end'")))
        assert from_json(to_json(marker)) == marker

    def test_dict_payload(self) -> None:
        marker = ErrorMarker({"reason": "badarg", 1: (2, 3)})
        assert from_json(to_json(marker)) == marker

    def test_lists_in_payload_come_back_as_tuples(self) -> None:
        marker = ErrorMarker(["a", "b"])
        assert from_json(to_json(marker)) == ErrorMarker(("a", "b"))


class TestDeterminism:
    def test_sorted_keys(self) -> None:
        assert to_json(_function()) == to_json(_function())
        data = json.loads(to_json(Atom("ok")))
        assert list(data) == sorted(data)

    def test_indent(self) -> None:
        assert "\n" in to_json(Atom("ok"), indent=2)


class TestErrors:
    def test_missing_type(self) -> None:
        with pytest.raises(SerializationError, match="Missing '_type'"):
            from_dict({"value": "ok"})

    def test_unknown_type(self) -> None:
        with pytest.raises(SerializationError, match="Unknown node type: 'Frobnicate'"):
            from_dict({"_type": "Frobnicate"})

    def test_bad_placement(self) -> None:
        with pytest.raises(SerializationError, match="placement"):
            from_dict({"_type": "Comment", "lines": [" x"], "placement": "sideways"})

    def test_invalid_json(self) -> None:
        with pytest.raises(SerializationError, match="Invalid JSON"):
            from_json("{not json")

    def test_not_a_node(self) -> None:
        with pytest.raises(SerializationError, match="got list"):
            from_json("[1, 2]")

    def test_missing_required_field(self) -> None:
        with pytest.raises(SerializationError, match="Cannot build Atom"):
            from_dict({"_type": "Atom"})

    def test_unknown_fields_ignored(self) -> None:
        assert from_dict({"_type": "Atom", "value": "ok", "extra": 1}) == Atom("ok")

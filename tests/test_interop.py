"""
Tests for mosaic.interop.
"""

import pydantic
import pytest

from mosaic import (
    array,
    enumeration,
    integer,
    literal,
    number,
    object_,
    optional,
    record,
    reference,
    string,
    to_pydantic,
    union,
)


def tree():
    return object_({"value": integer(), "children": array(tree)})


class TestToPydantic:
    @pytest.fixture
    def user_model(self, user_type):
        return to_pydantic(user_type, "User")

    def test_model(self, user_model):
        assert user_model.__name__ == "User"
        user = user_model(username="alice", kind="ADMIN")
        assert user.username == "alice"
        assert user.age is None

    @pytest.mark.parametrize(
        "fields",
        [
            {"username": "", "kind": "ADMIN"},
            {"username": "alice", "kind": "OTHER"},
            {"username": "alice", "kind": "ADMIN", "age": -1},
            {"kind": "ADMIN"},
        ],
    )
    def test_constraints(self, user_model, fields):
        with pytest.raises(pydantic.ValidationError):
            user_model(**fields)

    def test_default_name(self):
        assert to_pydantic(object_({})).__name__ == "Model"
        assert to_pydantic(object_({}, name="Thing")).__name__ == "Thing"

    def test_nested_objects(self):
        shape = to_pydantic(object_({"origin": object_({"x": number(), "y": number()})}), "Shape")
        assert shape(origin={"x": 1, "y": 2}).origin.y == 2
        with pytest.raises(pydantic.ValidationError):
            shape(origin={"x": 1})

    def test_arrays(self):
        model = to_pydantic(object_({"tags": array(string(), max_items=2)}), "Tagged")
        assert model(tags=["a"]).tags == ["a"]
        with pytest.raises(pydantic.ValidationError):
            model(tags=["a", "b", "c"])

    def test_literals_and_unions(self):
        model = to_pydantic(
            object_({"type": literal("box"), "size": union({"named": enumeration(["S", "L"]), "exact": integer()})}),
            "Box",
        )
        assert model(type="box", size="S").size == "S"
        assert model(type="box", size=3).size == 3
        with pytest.raises(pydantic.ValidationError):
            model(type="crate", size=3)

    def test_recursive_type(self):
        model = to_pydantic(tree, "Tree")
        node = model(value=1, children=[{"value": 2, "children": []}])
        assert node.children[0] == {"value": 2, "children": []}

    def test_optional_field_behind_reference(self):
        model = to_pydantic(object_({"nickname": reference(optional(string(min_length=1)))}), "Profile")
        assert model().nickname is None
        assert model(nickname="al").nickname == "al"
        with pytest.raises(pydantic.ValidationError):
            model(nickname="")

    def test_custom_types_are_unchecked(self):
        model = to_pydantic(object_({"scores": record(integer())}), "Scores")
        assert model(scores={"a": 1}).scores == {"a": 1}

    def test_root_must_be_an_object(self):
        with pytest.raises(TypeError):
            to_pydantic(string())

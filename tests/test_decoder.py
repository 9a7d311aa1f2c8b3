"""
Tests for mosaic.decoder.
"""

import json

import pydantic
import pytest

from mosaic import (
    UNDEFINED,
    DecodeOptions,
    DecodingError,
    Err,
    Ok,
    Path,
    array,
    boolean,
    decode,
    decode_and_validate,
    enumeration,
    integer,
    literal,
    nullable,
    number,
    object_,
    optional,
    record,
    string,
    union,
)
from mosaic.decoder import format_number, number_from_string, object_to_array

CASTING = {"type_casting_strategy": "try_casting"}
ALL_ERRORS = {"error_reporting_strategy": "all_errors"}


class TestScalars:
    def test_boolean(self):
        assert decode(boolean(), True) == Ok(True)
        assert decode(boolean(), "true") == Err([DecodingError("boolean", "true")])
        assert decode(boolean(), "true", CASTING) == Ok(True)
        assert decode(boolean(), "false", CASTING) == Ok(False)
        assert decode(boolean(), 0, CASTING) == Ok(False)
        assert decode(boolean(), 2.5, CASTING) == Ok(True)
        assert decode(boolean(), "yes", CASTING).is_err()

    def test_number(self):
        assert decode(number(), 1.5) == Ok(1.5)
        assert decode(number(), "42") == Err([DecodingError("number", "42")])
        result = decode(number(), "42", CASTING)
        assert result == Ok(42)
        assert isinstance(result.value, int)
        assert decode(number(), "-1.5", CASTING) == Ok(-1.5)
        assert decode(number(), "abc", CASTING) == Err([DecodingError("number", "abc")])

    def test_booleans_are_not_numbers(self):
        assert decode(number(), True).is_err()
        assert decode(number(), True, CASTING).is_err()

    def test_number_does_not_check_refinements(self):
        assert decode(integer(maximum=1), 5) == Ok(5)

    @pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_numbers(self, raw):
        result = decode(number(), raw)
        assert isinstance(result, Err)
        assert result.error[0].expected == "number"
        assert decode(string(), raw, CASTING).is_err()
        assert decode(boolean(), raw, CASTING).is_err()

    def test_non_json_numbers_from_a_parser(self):
        raw = json.loads('{"x": Infinity, "y": NaN}')
        node = object_({"x": number(), "y": number()})
        assert decode_and_validate(node, raw).is_err()
        result = decode(node, raw, ALL_ERRORS)
        assert [error.path.format() for error in result.error] == ["$.x", "$.y"]

    def test_large_integers(self):
        assert decode(number(), 10**400) == Ok(10**400)

    def test_string(self):
        assert decode(string(), "a") == Ok("a")
        assert decode(string(), 1) == Err([DecodingError("string", 1)])
        assert decode(string(), 1, CASTING) == Ok("1")
        assert decode(string(), 1.5, CASTING) == Ok("1.5")
        assert decode(string(), 2.0, CASTING) == Ok("2")
        assert decode(string(), True, CASTING) == Ok("true")
        assert decode(string(), None, CASTING).is_err()

    def test_literal(self):
        assert decode(literal("a"), "a") == Ok("a")
        assert decode(literal("a"), "b") == Err([DecodingError("literal ('a')", "b")])
        assert decode(literal(1), True).is_err()
        assert decode(literal(False), 0).is_err()
        assert decode(literal(1), "1").is_err()

    def test_literal_with_casting(self):
        assert decode(literal(1), "1", CASTING) == Ok(1)
        assert decode(literal(True), "true", CASTING) == Ok(True)
        assert decode(literal(None), "null", CASTING) == Ok(None)
        assert decode(literal("1"), 1, CASTING) == Ok("1")
        assert decode(literal(1), "2", CASTING).is_err()

    def test_enumeration(self):
        kind = enumeration(["A", "B"])
        assert decode(kind, "A") == Ok("A")
        assert decode(kind, "C") == Err([DecodingError('enum ("A" | "B")', "C")])


class TestHelpers:
    @pytest.mark.parametrize(
        "raw, expected",
        [(" 42 ", 42), ("-7", -7), ("1e3", 1000.0), ("1.", 1.0), (".5", 0.5), ("+2.5", 2.5)],
    )
    def test_number_from_string(self, raw, expected):
        assert number_from_string(raw) == Ok(expected)

    @pytest.mark.parametrize("raw", ["", "abc", "0x10", "1e999", "1,5", "nan", "Infinity"])
    def test_number_from_string_rejects(self, raw):
        assert number_from_string(raw).is_err()

    def test_format_number(self):
        assert format_number(1.0) == "1"
        assert format_number(1.5) == "1.5"
        assert format_number(10) == "10"

    def test_object_to_array(self):
        assert object_to_array({"1": "b", "0": "a"}) == ["a", "b"]
        assert object_to_array({}) == []
        assert object_to_array({"0": "a", "2": "c"}) is None
        assert object_to_array({"01": "a"}) is None
        assert object_to_array({"a": 1}) is None


class TestDecorators:
    def test_optional(self):
        assert decode(optional(number()), UNDEFINED) == Ok(UNDEFINED)
        assert decode(optional(number()), 1) == Ok(1)
        assert decode(optional(number()), "x") == Err([DecodingError("number or undefined", "x")])

    def test_optional_accepts_null_as_absent(self):
        assert decode(optional(number()), None) == Ok(UNDEFINED)

    def test_optional_keeps_null_its_type_accepts(self):
        assert decode(optional(nullable(number())), None) == Ok(None)

    def test_nullable(self):
        assert decode(nullable(number()), None) == Ok(None)
        assert decode(nullable(number()), 1) == Ok(1)
        assert decode(nullable(number()), "x") == Err([DecodingError("number or null", "x")])

    def test_nullable_missing_value(self):
        assert decode(nullable(number()), UNDEFINED).is_err()
        assert decode(nullable(number()), UNDEFINED, CASTING) == Ok(None)

    def test_reference_is_transparent(self):
        assert decode(number().reference(), 3) == Ok(3)


class TestObjects:
    def test_decode(self, user_type, raw_user):
        assert decode(user_type, raw_user) == Ok(raw_user)

    def test_absent_optional_field_is_omitted(self, user_type):
        assert decode(user_type, {"username": "a", "kind": "ADMIN"}) == Ok({"username": "a", "kind": "ADMIN"})
        assert decode(user_type, {"username": "a", "age": None, "kind": "ADMIN"}) == Ok(
            {"username": "a", "kind": "ADMIN"}
        )

    def test_missing_required_field(self, user_type):
        result = decode(user_type, {"username": "a"})
        assert result == Err([DecodingError('enum ("ADMIN" | "NORMAL")', UNDEFINED, Path.of_field("kind"))])

    def test_not_an_object(self, user_type):
        assert decode(user_type, [1]) == Err([DecodingError("object", [1])])
        assert decode(user_type, None).is_err()

    def test_null_is_an_empty_object_with_casting(self):
        assert decode(object_({"a": optional(number())}), None, CASTING) == Ok({})

    def test_error_path(self):
        node = object_({"a": array(number())})
        result = decode(node, {"a": [1, "x"]})
        assert isinstance(result, Err)
        (error,) = result.error
        assert error.path.format() == "$.a[1]"
        assert error.expected == "number"
        assert error.got == "x"

    def test_additional_fields(self, user_type, raw_user):
        raw = {**raw_user, "extra": 1}
        assert decode(user_type, raw) == Err([DecodingError("undefined", 1, Path.of_field("extra"))])
        assert decode(user_type, raw, {"field_strictness": "allow_additional_fields"}) == Ok(raw_user)

    def test_additional_fields_are_reported_first(self, user_type):
        result = decode(user_type, {"username": 1, "extra": 1})
        assert result == Err([DecodingError("undefined", 1, Path.of_field("extra"))])

    def test_all_errors(self, user_type):
        raw = {"username": 1, "kind": "OTHER", "extra": True}
        result = decode(user_type, raw, ALL_ERRORS)
        assert isinstance(result, Err)
        assert [error.path.format() for error in result.error] == ["$.username", "$.kind", "$.extra"]
        assert len(decode(user_type, raw).error) == 1

    def test_two_wrong_fields(self):
        node = object_({"a": number(), "b": string()})
        result = decode(node, {"a": "x", "b": 1}, ALL_ERRORS)
        assert result == Err(
            [
                DecodingError("number", "x", Path.of_field("a")),
                DecodingError("string", 1, Path.of_field("b")),
            ]
        )


class TestArrays:
    def test_decode(self):
        assert decode(array(number()), [1, 2]) == Ok([1, 2])
        assert decode(array(number()), (1, 2)) == Ok([1, 2])
        assert decode(array(number()), "12") == Err([DecodingError("array", "12")])

    def test_array_like_object_with_casting(self):
        raw = {"1": "b", "0": "a"}
        assert decode(array(string()), raw).is_err()
        assert decode(array(string()), raw, CASTING) == Ok(["a", "b"])
        assert decode(array(string()), {"0": "a", "2": "c"}, CASTING).is_err()

    def test_item_errors(self):
        raw = ["x", 1, "y"]
        assert decode(array(number()), raw) == Err([DecodingError("number", "x", Path.of_index(0))])
        result = decode(array(number()), raw, ALL_ERRORS)
        assert [error.path.format() for error in result.error] == ["$[0]", "$[2]"]

    def test_sizes_are_not_checked(self):
        assert decode(array(number(), max_items=1), [1, 2]) == Ok([1, 2])


class TestUnions:
    def test_first_matching_variant(self):
        node = union({"a": number(), "b": string()})
        assert decode(node, 5) == Ok({"a": 5})
        assert decode(node, "x") == Ok({"b": "x"})

    def test_no_matching_variant(self):
        node = union({"a": number(), "b": string()})
        assert decode(node, True) == Err(
            [
                DecodingError("number", True, Path.of_variant("a")),
                DecodingError("string", True, Path.of_variant("b")),
            ]
        )

    def test_exact_match_before_casting(self):
        node = union({"s": string(), "n": number()})
        assert decode(node, 5, CASTING) == Ok({"n": 5})
        assert decode(node, "5", CASTING) == Ok({"s": "5"})

    def test_exact_fields_before_additional_fields(self):
        node = union({"small": object_({"a": number()}), "large": object_({"a": number(), "b": number()})})
        options = {"field_strictness": "allow_additional_fields"}
        assert decode(node, {"a": 1, "b": 2}, options) == Ok({"large": {"a": 1, "b": 2}})
        assert decode(node, {"a": 1, "c": 2}, options) == Ok({"small": {"a": 1}})

    def test_validating_variant_wins(self):
        node = union({"small": integer(maximum=10), "big": integer(minimum=11)})
        assert decode(node, 3) == Ok({"small": 3})
        assert decode(node, 50) == Ok({"big": 50})

    def test_best_effort_variant(self):
        node = union({"small": integer(maximum=10), "tiny": integer(maximum=5)})
        assert decode(node, 50) == Ok({"small": 50})

    def test_discriminant(self):
        shape = union(
            {
                "circle": object_({"type": literal("circle"), "radius": number()}),
                "square": object_({"type": literal("square"), "side": number()}),
            },
            discriminant="type",
        )
        assert decode(shape, {"type": "square", "side": 2}) == Ok({"square": {"type": "square", "side": 2}})
        assert decode(shape, {"type": "hexagon"}) == Err(
            [DecodingError("one of ('circle' | 'square')", "hexagon", Path.of_field("type"))]
        )

    def test_variant_checks(self):
        parity = union(
            {"even": integer(), "odd": integer()},
            is_={"even": lambda n: n % 2 == 0, "odd": lambda n: n % 2 == 1},
        )
        assert decode(parity, 4) == Ok({"even": 4})
        assert decode(parity, 3) == Ok({"odd": 3})

    def test_errors_inside_variants(self):
        node = union({"point": object_({"x": number()})})
        result = decode(node, {"x": "1"})
        assert [error.path.format() for error in result.error] == ["$.point.x"]


class TestOptions:
    def test_options_instance(self):
        assert decode(number(), "1", DecodeOptions(type_casting_strategy="try_casting")) == Ok(1)

    def test_node_method(self):
        assert number().decode_without_validation("1", CASTING) == Ok(1)

    def test_unknown_option_value(self):
        with pytest.raises(pydantic.ValidationError):
            decode(number(), 1, {"type_casting_strategy": "sometimes"})

    def test_unknown_option(self):
        with pytest.raises(pydantic.ValidationError):
            decode(number(), 1, {"casting": True})


class TestDepthGuard:
    def test_max_depth(self):
        node = array(array(array(number())))
        assert decode(node, [[[1]]]) == Ok([[[1]]])
        result = decode(node, [[[1]]], {"max_depth": 2})
        path = Path.of_index(0).prepend_index(0).prepend_index(0)
        assert result == Err([DecodingError("value nested at most 2 levels deep", 1, path)])

    def test_deep_input_fails_closed(self, tree_type):
        raw = {"value": 0, "children": []}
        for level in range(1, 200):
            raw = {"value": level, "children": [raw]}
        result = decode(tree_type, raw)
        assert isinstance(result, Err)
        assert result.error[0].expected == "value nested at most 128 levels deep"

    def test_recursive_type(self, tree_type):
        raw = {"value": 1, "children": [{"value": 2, "children": []}]}
        assert decode(tree_type, raw) == Ok(raw)

    def test_depth_is_carried_through_records(self):
        node = record(record(number()))
        assert decode(node, {"a": {"b": 1}}, {"max_depth": 2}) == Ok({"a": {"b": 1}})
        result = decode(node, {"a": {"b": 1}}, {"max_depth": 1})
        path = Path.of_field("b").prepend_field("a")
        assert result == Err([DecodingError("value nested at most 1 levels deep", 1, path)])

    def test_deeply_nested_record_fails_closed(self):
        def json_value():
            return union({"n": number(), "r": record(json_value)})

        raw = 3
        for _ in range(3000):
            raw = {"k": raw}
        result = decode(json_value, raw)
        assert isinstance(result, Err)
        assert "value nested at most 128 levels deep" in [error.expected for error in result.error]

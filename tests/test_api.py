"""
Tests for the composed operations in mosaic.api.
"""

import logging

import mosaic
from mosaic import (
    DecodingError,
    Err,
    Ok,
    Path,
    ValidationError,
    decode,
    decode_and_validate,
    integer,
    number,
    object_,
    string,
    union,
    validate_and_encode,
)

CASTING = {"type_casting_strategy": "try_casting"}


class TestDecodeAndValidate:
    def test_valid(self, user_type):
        raw = {"username": "alice", "age": "42", "kind": "ADMIN"}
        assert decode_and_validate(user_type, raw, CASTING) == Ok({"username": "alice", "age": 42, "kind": "ADMIN"})

    def test_decoding_errors_come_first(self, user_type):
        assert decode_and_validate(user_type, {"username": "", "age": "x", "kind": "ADMIN"}) == Err(
            [DecodingError("number or undefined", "x", Path.of_field("age"))]
        )

    def test_validation_errors(self):
        assert decode_and_validate(integer(minimum=0), "-1", CASTING) == Err(
            [ValidationError("number must be greater than or equal to 0", -1)]
        )

    def test_separate_validate_options(self):
        node = object_({"a": integer(maximum=0), "b": string(max_length=1)})
        raw = {"a": 1, "b": "long"}
        assert len(decode_and_validate(node, raw).error) == 1
        result = decode_and_validate(node, raw, validate_options={"error_reporting_strategy": "all_errors"})
        assert [error.path.format() for error in result.error] == ["$.a", "$.b"]

    def test_union_reports_errors_of_best_effort_variant(self):
        node = union({"small": integer(maximum=10), "tiny": integer(maximum=5)})
        assert decode(node, 50) == Ok({"small": 50})
        assert decode_and_validate(node, 50) == Err(
            [ValidationError("number must be less than or equal to 10", 50, Path.of_variant("small"))]
        )

    def test_node_method(self, user_type):
        assert user_type.decode({"username": "", "kind": "ADMIN"}).error[0].path.format() == "$.username"


class TestValidateAndEncode:
    def test_valid(self, user_type, raw_user):
        assert validate_and_encode(user_type, raw_user) == Ok(raw_user)

    def test_invalid_values_are_not_encoded(self, user_type):
        assert validate_and_encode(user_type, {"username": "", "kind": "ADMIN"}) == Err(
            [ValidationError("string shorter than min length (1)", "", Path.of_field("username"))]
        )

    def test_options(self):
        node = object_({"token": string().as_sensitive()})
        assert validate_and_encode(node, {"token": "t"}) == Ok({"token": None})
        assert validate_and_encode(node, {"token": "t"}, {"sensitive_information_strategy": "keep"}) == Ok(
            {"token": "t"}
        )


class TestPackage:
    def test_exports(self):
        for name in mosaic.__all__:
            assert getattr(mosaic, name) is not None

    def test_debug_logging(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="mosaic"):
            assert decode(union({"n": number()}), "5", CASTING) == Ok({"n": 5})
        assert "retrying with relaxed options" in caplog.text

"""
Custom types built on the plugin contract.

- record: a string-keyed map whose values all share one type
- datetime: an ISO-8601 string on the wire, a `datetime.datetime` in memory
- uuid: a canonical UUID string on the wire, a `uuid.UUID` in memory

Their plugins are registered in the default registry, so `custom("uuid")`
works as well as `uuid_()`.
"""

from __future__ import annotations

import datetime as dt
import uuid
from typing import Any, Mapping

from hypothesis import strategies as st

from .arbitrary import arbitrary
from .decoder import decode_without_validation
from .encoder import encode_without_validation
from .errors import (
    DecodingErrors,
    DecodingResult,
    ValidationErrors,
    ValidationResult,
    decoding_fail,
    decoding_fail_with_errors,
    decoding_succeed,
    validation_fail,
    validation_fail_with_errors,
    validation_succeed,
)
from .model.builders import custom
from .model.nodes import FORBIDDEN_FIELD_NAMES, CustomType, JSONValue, Type
from .model.plugins import default_registry
from .options import DecodeOptions, EncodeOptions, ValidateOptions
from .result import Err, Ok
from .validator import validate


class RecordPlugin:
    """Values are dicts; each entry is handled by the `fields_type` option."""

    def encode(self, value: Mapping[str, Any], encode_options: EncodeOptions, options: Mapping[str, Any]) -> JSONValue:
        fields_type = options["fields_type"]
        return {
            key: encode_without_validation(fields_type, field_value, encode_options)
            for key, field_value in value.items()
        }

    def decode(self, raw: Any, decode_options: DecodeOptions, options: Mapping[str, Any]) -> DecodingResult:
        if not isinstance(raw, Mapping):
            return decoding_fail("object", raw)
        fields_type = options["fields_type"]
        decoded: dict[str, Any] = {}
        errors: DecodingErrors = []
        for key, field_value in raw.items():
            if not isinstance(key, str) or key in FORBIDDEN_FIELD_NAMES:
                errors.extend(error.prepend_field(str(key)) for error in decoding_fail("a valid key", key).error)
            else:
                result = decode_without_validation(fields_type, field_value, decode_options)
                if isinstance(result, Ok):
                    decoded[key] = result.value
                    continue
                errors.extend(error.prepend_field(key) for error in result.error)
            if decode_options.stop_at_first_error:
                break
        if errors:
            return decoding_fail_with_errors(errors)
        return decoding_succeed(decoded)

    def validate(
        self, value: Mapping[str, Any], validate_options: ValidateOptions, options: Mapping[str, Any]
    ) -> ValidationResult:
        fields_type = options["fields_type"]
        errors: ValidationErrors = []
        for key, field_value in value.items():
            result = validate(fields_type, field_value, validate_options)
            if isinstance(result, Err):
                errors.extend(error.prepend_field(key) for error in result.error)
                if validate_options.stop_at_first_error:
                    break
        if errors:
            return validation_fail_with_errors(errors)
        return validation_succeed()

    def arbitrary(self, max_depth: int, options: Mapping[str, Any]) -> st.SearchStrategy[Any]:
        if max_depth <= 0:
            return st.just({})
        keys = st.text(max_size=10).filter(lambda key: key not in FORBIDDEN_FIELD_NAMES)
        return st.dictionaries(keys, arbitrary(options["fields_type"], max_depth - 1), max_size=5)


class DatetimePlugin:
    """
    ISO-8601 strings. With `try_casting`, a number is also accepted as a
    timestamp in milliseconds since the epoch (UTC).

    Options: `minimum` / `maximum` (inclusive datetimes).
    """

    def encode(self, value: dt.datetime, encode_options: EncodeOptions, options: Mapping[str, Any]) -> JSONValue:
        return value.isoformat()

    def decode(self, raw: Any, decode_options: DecodeOptions, options: Mapping[str, Any]) -> DecodingResult:
        if decode_options.try_casting:
            return _datetime_from_timestamp(raw).lazy_or(lambda _: _datetime_from_string(raw))
        return _datetime_from_string(raw)

    def validate(
        self, value: dt.datetime, validate_options: ValidateOptions, options: Mapping[str, Any]
    ) -> ValidationResult:
        minimum, maximum = options.get("minimum"), options.get("maximum")
        if minimum is not None and value < minimum:
            return validation_fail(f"datetime must be on or after {minimum.isoformat()}", value)
        if maximum is not None and value > maximum:
            return validation_fail(f"datetime must be on or before {maximum.isoformat()}", value)
        return validation_succeed()

    def arbitrary(self, max_depth: int, options: Mapping[str, Any]) -> st.SearchStrategy[Any]:
        bounds = {}
        if options.get("minimum") is not None:
            bounds["min_value"] = _naive_utc(options["minimum"])
        if options.get("maximum") is not None:
            bounds["max_value"] = _naive_utc(options["maximum"])
        return st.datetimes(timezones=st.just(dt.timezone.utc), **bounds)


def _naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def _datetime_from_timestamp(raw: Any) -> DecodingResult:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return decoding_succeed(dt.datetime.fromtimestamp(raw / 1000, tz=dt.timezone.utc))
        except (OverflowError, OSError, ValueError):
            pass
    return decoding_fail("timestamp", raw)


def _datetime_from_string(raw: Any) -> DecodingResult:
    if isinstance(raw, str):
        try:
            return decoding_succeed(dt.datetime.fromisoformat(raw))
        except ValueError:
            pass
    return decoding_fail("ISO date-time", raw)


class UUIDPlugin:
    def encode(self, value: uuid.UUID, encode_options: EncodeOptions, options: Mapping[str, Any]) -> JSONValue:
        return str(value)

    def decode(self, raw: Any, decode_options: DecodeOptions, options: Mapping[str, Any]) -> DecodingResult:
        if isinstance(raw, str):
            try:
                return decoding_succeed(uuid.UUID(raw))
            except ValueError:
                pass
        return decoding_fail("UUID", raw)

    def validate(self, value: uuid.UUID, validate_options: ValidateOptions, options: Mapping[str, Any]) -> ValidationResult:
        return validation_succeed()

    def arbitrary(self, max_depth: int, options: Mapping[str, Any]) -> st.SearchStrategy[Any]:
        return st.uuids()


RECORD = default_registry.register("record", RecordPlugin())
DATETIME = default_registry.register("datetime", DatetimePlugin())
UUID = default_registry.register("uuid", UUIDPlugin())


def record(fields_type: Type, **options: Any) -> CustomType:
    """
    Usage:
        scores = record(integer(minimum=0))
        # {"alice": 3, "bob": 5}
    """
    return custom("record", RECORD, {"fields_type": fields_type}, **options)


def datetime_(
    minimum: dt.datetime | None = None, maximum: dt.datetime | None = None, **options: Any
) -> CustomType:
    return custom("datetime", DATETIME, {"minimum": minimum, "maximum": maximum}, **options)


def uuid_(**options: Any) -> CustomType:
    return custom("uuid", UUID, **options)

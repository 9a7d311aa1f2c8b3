"""
Decoding: untrusted JSON-shaped input -> value of the shape a type describes.

Decoding only checks structure. Refinements (bounds, lengths, patterns) are
the validator's job, with one exception: unions look ahead with validation
to pick the variant a value semantically belongs to.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import (
    UNDEFINED,
    DecodingError,
    DecodingErrors,
    DecodingResult,
    ValidationErrors,
    add_expected,
    decoding_fail,
    decoding_fail_with_errors,
    decoding_succeed,
    fail_with_internal_error,
)
from .model.concretise import concretise
from .model.nodes import (
    ArrayType,
    BooleanType,
    CustomType,
    EnumType,
    LiteralType,
    NullableType,
    NumberType,
    ObjectType,
    OptionalType,
    ReferenceType,
    StringType,
    Type,
    UnionType,
    is_finite_number,
    is_number,
)
from .options import DecodeOptions, OptionsLike, ValidateOptions, fill_options
from .path import Path
from .result import Err, Ok, Result
from .validator import validate_node

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
ARRAY_INDEX_PATTERN = re.compile(r"^(0|[1-9][0-9]*)$")


def decode_without_validation(
    type_: Type, raw: Any, options: OptionsLike[DecodeOptions] = None
) -> DecodingResult:
    """
    Decode `raw` as a value of `type_`, without checking refinements.

    Returns:
        Ok(value) if `raw` has the structure described by `type_`
        Err([DecodingError, ...]) otherwise, each error located by its path

    Usage:
        decode_without_validation(number(), "42", {"type_casting_strategy": "try_casting"})
        # Ok(42)
    """
    options = fill_options(DecodeOptions, options)
    return decode_node(type_, raw, options, options.depth_offset)


def decode_node(type_: Type, raw: Any, options: DecodeOptions, depth: int) -> DecodingResult:
    if depth > options.max_depth:
        return decoding_fail(f"value nested at most {options.max_depth} levels deep", raw)
    node = concretise(type_)
    match node:
        case BooleanType():
            return _decode_boolean(raw, options)
        case NumberType():
            return _decode_number(raw, options)
        case StringType():
            return _decode_string(raw, options)
        case LiteralType():
            return _decode_literal(node, raw, options)
        case EnumType():
            return _decode_enum(node, raw)
        case OptionalType():
            return _decode_optional(node, raw, options, depth)
        case NullableType():
            return _decode_nullable(node, raw, options, depth)
        case ReferenceType():
            return decode_node(node.wrapped_type, raw, options, depth + 1)
        case ObjectType():
            return _decode_object(node, raw, options, depth)
        case ArrayType():
            return _decode_array(node, raw, options, depth)
        case UnionType():
            return _decode_union(node, raw, options, depth)
        case CustomType():
            nested_options = options.model_copy(update={"depth_offset": depth + 1})
            return node.plugin.decode(raw, nested_options, node.options)
        case _:
            fail_with_internal_error(f"Cannot decode values of unknown type node {node!r}")


# Scalars


def _decode_boolean(raw: Any, options: DecodeOptions) -> DecodingResult:
    if isinstance(raw, bool):
        return decoding_succeed(raw)
    if options.try_casting:
        if raw == "true":
            return decoding_succeed(True)
        if raw == "false":
            return decoding_succeed(False)
        if is_finite_number(raw):
            return decoding_succeed(raw != 0)
    return decoding_fail("boolean", raw)


def _decode_number(raw: Any, options: DecodeOptions) -> DecodingResult:
    if is_finite_number(raw):
        return decoding_succeed(raw)
    if options.try_casting and isinstance(raw, str):
        return number_from_string(raw)
    return decoding_fail("number", raw)


def number_from_string(raw: str) -> DecodingResult:
    """
    Parse a decimal literal ("42", "-1.5", "1e3"); surrounding whitespace is
    ignored. Integer literals become ints, anything else a float.
    """
    text = raw.strip()
    if INTEGER_PATTERN.match(text):
        return decoding_succeed(int(text))
    if NUMBER_PATTERN.match(text):
        number = float(text)
        if math.isfinite(number):
            return decoding_succeed(number)
    return decoding_fail("number", raw)


def _decode_string(raw: Any, options: DecodeOptions) -> DecodingResult:
    if isinstance(raw, str):
        return decoding_succeed(raw)
    if options.try_casting:
        if isinstance(raw, bool):
            return decoding_succeed("true" if raw else "false")
        if is_finite_number(raw):
            return decoding_succeed(format_number(raw))
    return decoding_fail("string", raw)


def format_number(number: int | float) -> str:
    if isinstance(number, float) and number.is_integer() and abs(number) < 1e16:
        return str(int(number))
    return repr(number) if isinstance(number, float) else str(number)


def _decode_literal(node: LiteralType, raw: Any, options: DecodeOptions) -> DecodingResult:
    if same_literal(raw, node.value):
        return decoding_succeed(node.value)
    if options.try_casting:
        if node.value is None and raw == "null":
            return decoding_succeed(None)
        casted = _cast_like(node.value, raw, options)
        if isinstance(casted, Ok) and same_literal(casted.value, node.value):
            return decoding_succeed(node.value)
    return decoding_fail(f"literal ({node.value!r})", raw)


def _cast_like(literal: Any, raw: Any, options: DecodeOptions) -> DecodingResult:
    if isinstance(literal, bool):
        return _decode_boolean(raw, options)
    if is_number(literal):
        return _decode_number(raw, options)
    if isinstance(literal, str):
        return _decode_string(raw, options)
    return decoding_fail("literal", raw)


def same_literal(value: Any, literal: Any) -> bool:
    """Equality that does not confuse True with 1 or 0 with False."""
    if literal is None or isinstance(literal, bool):
        return value is literal
    if isinstance(literal, str):
        return isinstance(value, str) and value == literal
    return is_number(value) and value == literal


def _decode_enum(node: EnumType, raw: Any) -> DecodingResult:
    if isinstance(raw, str) and raw in node.variants:
        return decoding_succeed(raw)
    variants = " | ".join(f'"{variant}"' for variant in node.variants)
    return decoding_fail(f"enum ({variants})", raw)


# Decorators


def _widen_root_errors(errors: DecodingErrors, other: str) -> DecodingErrors:
    widen = add_expected(other)
    return [
        widen(error) if error.path.is_empty() and error.expected != other else error
        for error in errors
    ]


def _decode_optional(
    node: OptionalType, raw: Any, options: DecodeOptions, depth: int
) -> DecodingResult:
    if raw is UNDEFINED:
        return decoding_succeed(UNDEFINED)
    result = decode_node(node.wrapped_type, raw, options, depth + 1).map_error(
        lambda errors: _widen_root_errors(errors, "undefined")
    )
    # Absent optionals are encoded as null, so null must decode back to absent
    if result.is_err() and raw is None:
        return decoding_succeed(UNDEFINED)
    return result


def _decode_nullable(
    node: NullableType, raw: Any, options: DecodeOptions, depth: int
) -> DecodingResult:
    if raw is None:
        return decoding_succeed(None)
    result = decode_node(node.wrapped_type, raw, options, depth + 1).map_error(
        lambda errors: _widen_root_errors(errors, "null")
    )
    if result.is_err() and raw is UNDEFINED and options.try_casting:
        return decoding_succeed(None)
    return result


# Composites


def _decode_object(
    node: ObjectType, raw: Any, options: DecodeOptions, depth: int
) -> DecodingResult:
    if raw is None and options.try_casting:
        raw = {}
    if not isinstance(raw, Mapping):
        return decoding_fail("object", raw)

    expect_exact_fields = options.expect_exact_fields
    stop_at_first_error = options.stop_at_first_error
    additional_keys = [key for key in raw if key not in node.fields]

    if stop_at_first_error and expect_exact_fields:
        for key in additional_keys:
            if raw[key] is not UNDEFINED:
                return decoding_fail_with_errors(
                    [DecodingError(expected="undefined", got=raw[key], path=Path.of_field(str(key)))]
                )

    errors: DecodingErrors = []
    decoded: dict[str, Any] = {}
    for field_name, field_type in node.fields.items():
        result = decode_node(field_type, raw.get(field_name, UNDEFINED), options, depth + 1)
        if isinstance(result, Ok):
            if result.value is not UNDEFINED:
                decoded[field_name] = result.value
        else:
            errors.extend(error.prepend_field(field_name) for error in result.error)
            if stop_at_first_error:
                return decoding_fail_with_errors(errors)

    if expect_exact_fields:
        for key in additional_keys:
            if raw[key] is not UNDEFINED:
                errors.append(
                    DecodingError(expected="undefined", got=raw[key], path=Path.of_field(str(key)))
                )

    if errors:
        return decoding_fail_with_errors(errors)
    return decoding_succeed(decoded)


def _decode_array(node: ArrayType, raw: Any, options: DecodeOptions, depth: int) -> DecodingResult:
    if isinstance(raw, (list, tuple)):
        items = raw
    elif options.try_casting and isinstance(raw, Mapping):
        items = object_to_array(raw)
        if items is None:
            return decoding_fail("array", raw)
    else:
        return decoding_fail("array", raw)

    errors: DecodingErrors = []
    decoded: list[Any] = []
    for index, item in enumerate(items):
        result = decode_node(node.wrapped_type, item, options, depth + 1)
        if isinstance(result, Ok):
            decoded.append(result.value)
        else:
            errors.extend(error.prepend_index(index) for error in result.error)
            if options.stop_at_first_error:
                break

    if errors:
        return decoding_fail_with_errors(errors)
    return decoding_succeed(decoded)


def object_to_array(raw: Mapping[Any, Any]) -> list[Any] | None:
    """
    The values of `raw` ordered by key, if its keys are exactly "0".."n-1";
    None otherwise.

    Usage:
        object_to_array({"1": "b", "0": "a"})  # ["a", "b"]
        object_to_array({"0": "a", "2": "c"})  # None
    """
    indices = set()
    for key in raw:
        if not isinstance(key, str) or not ARRAY_INDEX_PATTERN.match(key):
            return None
        indices.add(int(key))
    if indices != set(range(len(indices))):
        return None
    return [raw[str(index)] for index in range(len(indices))]


# Unions


@dataclass(frozen=True, slots=True)
class VariantMatch:
    """The variant a raw value was decoded into."""

    variant_name: str
    value: Any
    validated: bool
    validation_errors: ValidationErrors


def _decode_union(node: UnionType, raw: Any, options: DecodeOptions, depth: int) -> DecodingResult:
    return select_variant(node, raw, options, depth).map(
        lambda match: {match.variant_name: match.value}
    )


def select_variant(
    node: UnionType, raw: Any, options: DecodeOptions, depth: int
) -> Result[VariantMatch, DecodingErrors]:
    """
    Find the variant `raw` belongs to.

    With relaxed options (casting or additional fields) a strict pass runs
    first, so that a casted match on the wrong variant cannot shadow an exact
    match on another one. Within a pass, the first variant that decodes and
    validates wins; failing that, the first variant that decodes is returned
    with its validation errors attached.
    """
    if options.try_casting or not options.expect_exact_fields:
        strict_options = options.model_copy(
            update={
                "type_casting_strategy": "expect_exact_types",
                "field_strictness": "expect_exact_fields",
            }
        )
        strict_match = select_variant(node, raw, strict_options, depth)
        if isinstance(strict_match, Ok):
            return strict_match
        logger.debug("No exact variant match for union %s, retrying with relaxed options", _describe(node))

    candidates = _candidate_variants(node, raw)
    if isinstance(candidates, Err):
        return candidates

    validate_options = ValidateOptions(
        error_reporting_strategy=options.error_reporting_strategy, max_depth=options.max_depth
    )
    errors: DecodingErrors = []
    best_effort: VariantMatch | None = None
    for variant_name, variant_type in candidates.value:
        result = decode_node(variant_type, raw, options, depth + 1)
        if isinstance(result, Err):
            errors.extend(error.prepend_variant(variant_name) for error in result.error)
            continue
        check = node.checks.get(variant_name)
        if check is not None and not check(result.value):
            errors.append(
                DecodingError(
                    expected=f"a value accepted by variant {variant_name}",
                    got=raw,
                    path=Path.of_variant(variant_name),
                )
            )
            continue
        validation = validate_node(variant_type, result.value, validate_options, depth + 1)
        if isinstance(validation, Ok):
            return Ok(VariantMatch(variant_name, result.value, True, []))
        if best_effort is None:
            best_effort = VariantMatch(
                variant_name,
                result.value,
                False,
                [error.prepend_variant(variant_name) for error in validation.error],
            )

    if best_effort is not None:
        logger.debug(
            "Union %s decoded into variant %r which does not validate",
            _describe(node),
            best_effort.variant_name,
        )
        return Ok(best_effort)
    if not errors:
        return decoding_fail(f"union ({' | '.join(node.variants)})", raw)
    return decoding_fail_with_errors(errors)


def _candidate_variants(node: UnionType, raw: Any) -> Result[list[tuple[str, Type]], DecodingErrors]:
    if node.discriminant is None:
        return Ok(list(node.variants.items()))

    tag = raw.get(node.discriminant, UNDEFINED) if isinstance(raw, Mapping) else UNDEFINED
    tags = []
    for variant_name, variant_type in node.variants.items():
        variant = concretise(variant_type)
        tag_type = variant.fields.get(node.discriminant) if isinstance(variant, ObjectType) else None
        tag_node = concretise(tag_type) if tag_type is not None else None
        if not isinstance(tag_node, LiteralType):
            continue
        if same_literal(tag, tag_node.value):
            return Ok([(variant_name, variant_type)])
        tags.append(repr(tag_node.value))
    return decoding_fail_with_errors(
        [
            DecodingError(
                expected=f"one of ({' | '.join(tags)})",
                got=tag,
                path=Path.of_field(node.discriminant),
            )
        ]
    )


def _describe(node: UnionType) -> str:
    return node.name or f"({' | '.join(node.variants)})"

"""
Validation: check the refinements of an already typed value.

Structure is assumed to be right (the value comes from decoding or from
code that built it with the right shape); only constraints that structural
decoding cannot express are checked: number bounds, string lengths and
patterns, array sizes, custom type rules.
"""

from __future__ import annotations

from typing import Any, Mapping

from .errors import (
    UNDEFINED,
    ValidationError,
    ValidationErrors,
    ValidationResult,
    fail_with_internal_error,
    validation_fail,
    validation_fail_with_errors,
    validation_succeed,
)
from .model.concretise import concretise, is_optional
from .model.nodes import (
    ArrayType,
    BooleanType,
    Check,
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
    is_number,
)
from .options import OptionsLike, ValidateOptions, fill_options
from .result import Err


def validate(
    type_: Type, value: Any, options: OptionsLike[ValidateOptions] = None
) -> ValidationResult:
    """
    Validate a typed value against the refinements of `type_`.

    Returns:
        Ok(True) if every constraint holds
        Err([ValidationError, ...]) otherwise

    Usage:
        validate(number(maximum=10), 11)  # Err([... "number must be less than or equal to 10" ...])
    """
    options = fill_options(ValidateOptions, options)
    return validate_node(type_, value, options, options.depth_offset)


def validate_node(type_: Type, value: Any, options: ValidateOptions, depth: int) -> ValidationResult:
    if depth > options.max_depth:
        return validation_fail(f"value nested at most {options.max_depth} levels deep", value)
    node = concretise(type_)
    match node:
        case BooleanType() | LiteralType() | EnumType():
            return validation_succeed()
        case NumberType():
            if not is_number(value):
                fail_with_internal_error(f"Expected a number for a number type, got {value!r}")
            return run_checks(value, node.checks, options)
        case StringType():
            if not isinstance(value, str):
                fail_with_internal_error(f"Expected a str for a string type, got {value!r}")
            return run_checks(value, node.checks, options)
        case OptionalType():
            if value is UNDEFINED:
                return validation_succeed()
            return validate_node(node.wrapped_type, value, options, depth + 1)
        case NullableType():
            if value is None:
                return validation_succeed()
            return validate_node(node.wrapped_type, value, options, depth + 1)
        case ReferenceType():
            return validate_node(node.wrapped_type, value, options, depth + 1)
        case ObjectType():
            return _validate_object(node, value, options, depth)
        case ArrayType():
            return _validate_array(node, value, options, depth)
        case UnionType():
            return _validate_union(node, value, options, depth)
        case CustomType():
            nested_options = options.model_copy(update={"depth_offset": depth + 1})
            return node.plugin.validate(value, nested_options, node.options)
        case _:
            fail_with_internal_error(f"Cannot validate values of unknown type node {node!r}")


def run_checks(value: Any, checks: tuple[Check, ...], options: ValidateOptions) -> ValidationResult:
    """
    Apply `(assertion, predicate)` pairs to a value; a pair fails when its
    predicate returns False.
    """
    errors: ValidationErrors = []
    for assertion, predicate in checks:
        if not predicate(value):
            errors.append(ValidationError(assertion=assertion, got=value))
            if options.stop_at_first_error:
                break
    if errors:
        return validation_fail_with_errors(errors)
    return validation_succeed()


def _validate_object(node: ObjectType, value: Any, options: ValidateOptions, depth: int) -> ValidationResult:
    if not isinstance(value, Mapping):
        fail_with_internal_error(f"Expected a dict to validate against an object type, got {value!r}")
    errors: ValidationErrors = []
    for field_name, field_type in node.fields.items():
        field_value = value.get(field_name, UNDEFINED)
        if field_value is UNDEFINED and not is_optional(field_type):
            fail_with_internal_error(f"Missing required field {field_name!r} in {value!r}")
        result = validate_node(field_type, field_value, options, depth + 1)
        if isinstance(result, Err):
            errors.extend(error.prepend_field(field_name) for error in result.error)
            if options.stop_at_first_error:
                break
    if errors:
        return validation_fail_with_errors(errors)
    return validation_succeed()


def _validate_array(node: ArrayType, value: Any, options: ValidateOptions, depth: int) -> ValidationResult:
    if not isinstance(value, (list, tuple)):
        fail_with_internal_error(f"Expected a list to validate against an array type, got {value!r}")
    errors: ValidationErrors = []
    if node.max_items is not None and len(value) > node.max_items:
        errors.append(
            ValidationError(assertion=f"array must have at most {node.max_items} items", got=len(value))
        )
    if node.min_items is not None and len(value) < node.min_items:
        errors.append(
            ValidationError(assertion=f"array must have at least {node.min_items} items", got=len(value))
        )
    if errors and options.stop_at_first_error:
        return validation_fail_with_errors(errors)

    for index, item in enumerate(value):
        result = validate_node(node.wrapped_type, item, options, depth + 1)
        if isinstance(result, Err):
            errors.extend(error.prepend_index(index) for error in result.error)
            if options.stop_at_first_error:
                break
    if errors:
        return validation_fail_with_errors(errors)
    return validation_succeed()


def _validate_union(node: UnionType, value: Any, options: ValidateOptions, depth: int) -> ValidationResult:
    variant_name, variant_value = node.variant_of(value)
    check = node.checks.get(variant_name)
    if check is not None and not check(variant_value):
        return validation_fail_with_errors(
            [
                ValidationError(
                    assertion=f"value must be accepted by variant {variant_name}", got=variant_value
                ).prepend_variant(variant_name)
            ]
        )
    return validate_node(node.variants[variant_name], variant_value, options, depth + 1).map_error(
        lambda errors: [error.prepend_variant(variant_name) for error in errors]
    )

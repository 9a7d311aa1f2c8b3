"""
Encoding: typed value -> JSON-safe tree, the structural inverse of decoding.

No validation takes place here; combine with the validator (or use
`validate_and_encode`) to encode only valid values.
"""

from __future__ import annotations

from typing import Any, Mapping

from .errors import UNDEFINED, fail_with_internal_error
from .model.concretise import concretise, is_optional
from .model.nodes import (
    ArrayType,
    BooleanType,
    CustomType,
    EnumType,
    JSONValue,
    LiteralType,
    NullableType,
    NumberType,
    ObjectType,
    OptionalType,
    ReferenceType,
    StringType,
    Type,
    UnionType,
)
from .options import EncodeOptions, OptionsLike, fill_options


def encode_without_validation(
    type_: Type, value: Any, options: OptionsLike[EncodeOptions] = None
) -> JSONValue:
    """
    Encode a typed value.

    Absent optionals become null (and are omitted from objects), union values
    are encoded with their variant's encoder, and sensitive types are
    replaced by null unless `sensitive_information_strategy` is "keep".

    Usage:
        encode_without_validation(union({"a": number(), "b": string()}), {"a": 5})  # 5
    """
    return encode_node(type_, value, fill_options(EncodeOptions, options))


def encode_node(type_: Type, value: Any, options: EncodeOptions) -> JSONValue:
    node = concretise(type_)
    if node.sensitive and options.sensitive_information_strategy == "hide":
        return None
    match node:
        case BooleanType() | NumberType() | StringType() | LiteralType() | EnumType():
            return value
        case OptionalType():
            if value is UNDEFINED:
                return None
            return encode_node(node.wrapped_type, value, options)
        case NullableType():
            if value is None:
                return None
            return encode_node(node.wrapped_type, value, options)
        case ReferenceType():
            return encode_node(node.wrapped_type, value, options)
        case ObjectType():
            return _encode_object(node, value, options)
        case ArrayType():
            return [encode_node(node.wrapped_type, item, options) for item in value]
        case UnionType():
            variant_name, variant_value = node.variant_of(value)
            return encode_node(node.variants[variant_name], variant_value, options)
        case CustomType():
            return node.plugin.encode(value, options, node.options)
        case _:
            fail_with_internal_error(f"Cannot encode values of unknown type node {node!r}")


def _encode_object(node: ObjectType, value: Mapping[str, Any], options: EncodeOptions) -> JSONValue:
    encoded: dict[str, JSONValue] = {}
    for field_name, field_type in node.fields.items():
        field_value = value.get(field_name, UNDEFINED)
        if field_value is UNDEFINED:
            if is_optional(field_type):
                continue
            fail_with_internal_error(f"Cannot encode an object missing its required field {field_name!r}")
        encoded[field_name] = encode_node(field_type, field_value, options)
    return encoded

"""
Factory functions building type descriptors.

Every builder accepts the base options (`name`, `description`, `sensitive`)
as keyword arguments next to its kind-specific ones, and fails eagerly with
a TypeDefinitionError on inconsistent options.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .nodes import (
    ArrayType,
    BooleanType,
    CustomType,
    EnumType,
    LiteralType,
    Mutability,
    NullableType,
    NumberType,
    ObjectType,
    OptionalType,
    ReferenceType,
    StringType,
    Type,
    UnionType,
)
from .plugins import CustomTypePlugin, default_registry


def boolean(**options: Any) -> BooleanType:
    return BooleanType(**options)


def number(**options: Any) -> NumberType:
    """
    Usage:
        number()                                   # any number
        number(minimum=0, exclusive_maximum=100)   # 0 <= n < 100
        number(multiple_of=0.5)
    """
    return NumberType(**options)


def integer(**options: Any) -> NumberType:
    """
    A number that must be an integer; all its bounds must be integers too.

    Usage:
        age = integer(minimum=0, name="age")
    """
    return NumberType(is_integer=True, **options)


def string(**options: Any) -> StringType:
    """
    Usage:
        string(min_length=1)
        string(regex=r"^[a-z]+$")
    """
    return StringType(**options)


def literal(value: str | int | float | bool | None, **options: Any) -> LiteralType:
    return LiteralType(value=value, **options)


def enumeration(variants: list[str] | tuple[str, ...], **options: Any) -> EnumType:
    """
    Usage:
        user_kind = enumeration(["ADMIN", "NORMAL"])
    """
    return EnumType(variants=tuple(variants), **options)


def object_(fields: Mapping[str, Type], **options: Any) -> ObjectType:
    """
    Usage:
        user = object_({
            "username": string(),
            "age": integer(minimum=0).optional(),
        })
    """
    return ObjectType(fields=fields, mutability=Mutability.IMMUTABLE, **options)


def mutable_object(fields: Mapping[str, Type], **options: Any) -> ObjectType:
    return ObjectType(fields=fields, mutability=Mutability.MUTABLE, **options)


def array(wrapped_type: Type, **options: Any) -> ArrayType:
    """
    Usage:
        array(string(), max_items=3)
    """
    return ArrayType(wrapped_type=wrapped_type, mutability=Mutability.IMMUTABLE, **options)


def mutable_array(wrapped_type: Type, **options: Any) -> ArrayType:
    return ArrayType(wrapped_type=wrapped_type, mutability=Mutability.MUTABLE, **options)


def union(
    variants: Mapping[str, Type],
    *,
    discriminant: str | None = None,
    is_: Mapping[str, Callable[[Any], bool]] | None = None,
    **options: Any,
) -> UnionType:
    """
    Usage:
        response = union({
            "success": number(),
            "failure": object_({"code": integer(), "message": string()}),
        })
        # a value of `response` is {"success": 1} or {"failure": {...}}
    """
    return UnionType(variants=variants, discriminant=discriminant, checks=is_ or {}, **options)


def optional(wrapped_type: Type, **options: Any) -> OptionalType:
    return OptionalType(wrapped_type=wrapped_type, **options)


def nullable(wrapped_type: Type, **options: Any) -> NullableType:
    return NullableType(wrapped_type=wrapped_type, **options)


def reference(wrapped_type: Type, **options: Any) -> ReferenceType:
    return ReferenceType(wrapped_type=wrapped_type, **options)


def custom(
    type_name: str,
    plugin: CustomTypePlugin | None = None,
    options: Mapping[str, Any] | None = None,
    **base_options: Any,
) -> CustomType:
    """
    Build a custom type. Without an explicit plugin, the plugin registered
    under `type_name` in the default registry is used.

    Raises:
        InternalError: if no plugin is given and none is registered
    """
    if plugin is None:
        plugin = default_registry.get(type_name)
    return CustomType(type_name=type_name, plugin=plugin, options=options or {}, **base_options)

"""
Pydantic interop: compile an object type descriptor to a pydantic model
describing its encoded (wire) shape.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, create_model

from .model.concretise import concretise, is_optional
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
)


def to_pydantic(type_: Type, name: str | None = None) -> type[BaseModel]:
    """
    Compile an object type to a Pydantic model.

    Args:
        type_: An object type (or a thunk returning one)
        name: Name of the generated model class; defaults to the type's name

    Returns:
        A Pydantic BaseModel subclass

    Usage:
        User = to_pydantic(object_({
            "username": string(min_length=1),
            "age": integer(minimum=0).optional(),
        }), "User")
        user = User(username="alice")
    """
    node = concretise(type_)
    if not isinstance(node, ObjectType):
        raise TypeError("Only object types can be compiled to a Pydantic model")
    return _model(node, name or node.name or "Model", set())


def _model(node: ObjectType, name: str, building: set[int]) -> type[BaseModel]:
    building = building | {id(node)}
    fields: dict[str, Any] = {}
    for field_name, field_type in node.fields.items():
        annotation = _annotation(field_type, f"{name}_{field_name}", building)
        if is_optional(field_type):
            fields[field_name] = (annotation, None)
        else:
            fields[field_name] = (annotation, ...)
    return create_model(name, **fields)


def _annotation(type_: Type, name: str, building: set[int]) -> Any:
    node = concretise(type_)
    # Recursive types reference themselves; the cycle is left unchecked.
    if id(node) in building:
        return Any

    match node:
        case BooleanType():
            return bool
        case NumberType():
            constraints = _constraints(
                ge=node.minimum,
                gt=node.exclusive_minimum,
                le=node.maximum,
                lt=node.exclusive_maximum,
                multiple_of=node.multiple_of,
            )
            return Annotated[int if node.is_integer else float, Field(**constraints)]
        case StringType():
            pattern = node.regex.pattern if node.regex is not None else None
            constraints = _constraints(min_length=node.min_length, max_length=node.max_length, pattern=pattern)
            return Annotated[str, Field(**constraints)]
        case LiteralType():
            return Literal[node.value]
        case EnumType():
            return Literal[node.variants]
        case OptionalType() | NullableType():
            return Optional[_annotation(node.wrapped_type, name, building | {id(node)})]
        case ReferenceType():
            return _annotation(node.wrapped_type, name, building | {id(node)})
        case ObjectType():
            return _model(node, node.name or name, building)
        case ArrayType():
            item = _annotation(node.wrapped_type, name, building | {id(node)})
            constraints = _constraints(min_length=node.min_items, max_length=node.max_items)
            return Annotated[list[item], Field(**constraints)]  # type: ignore[valid-type]
        case UnionType():
            variants = tuple(
                _annotation(variant_type, f"{name}_{variant_name}", building | {id(node)})
                for variant_name, variant_type in node.variants.items()
            )
            return Union[variants]
        case CustomType():
            return Any

    return Any


def _constraints(**constraints: Any) -> dict[str, Any]:
    return {key: value for key, value in constraints.items() if value is not None}

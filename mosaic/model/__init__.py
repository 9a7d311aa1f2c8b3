"""
Type descriptor model: nodes, builders, lazy resolution and the custom
plugin contract.
"""

from .builders import (
    array,
    boolean,
    custom,
    enumeration,
    integer,
    literal,
    mutable_array,
    mutable_object,
    nullable,
    number,
    object_,
    optional,
    reference,
    string,
    union,
)
from .concretise import concretise, is_optional, unwrap_references
from .nodes import (
    FORBIDDEN_FIELD_NAMES,
    ArrayType,
    BaseType,
    BooleanType,
    CustomType,
    EnumType,
    JSONValue,
    Kind,
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
from .plugins import CustomTypePlugin, FunctionPlugin, PluginRegistry, default_registry

__all__ = [
    # Nodes
    "Kind",
    "Mutability",
    "Type",
    "JSONValue",
    "BaseType",
    "BooleanType",
    "NumberType",
    "StringType",
    "LiteralType",
    "EnumType",
    "ObjectType",
    "ArrayType",
    "UnionType",
    "OptionalType",
    "NullableType",
    "ReferenceType",
    "CustomType",
    "FORBIDDEN_FIELD_NAMES",
    # Builders
    "boolean",
    "number",
    "integer",
    "string",
    "literal",
    "enumeration",
    "object_",
    "mutable_object",
    "array",
    "mutable_array",
    "union",
    "optional",
    "nullable",
    "reference",
    "custom",
    # Resolution
    "concretise",
    "unwrap_references",
    "is_optional",
    # Plugins
    "CustomTypePlugin",
    "FunctionPlugin",
    "PluginRegistry",
    "default_registry",
]

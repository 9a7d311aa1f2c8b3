"""
mosaic: type descriptors that decode, validate, encode and generate values.

Usage:
    from mosaic import decode_and_validate, integer, object_, string

    user = object_({"username": string(min_length=1), "age": integer(minimum=0).optional()})
    decode_and_validate(user, {"username": "alice", "age": "42"}, {"type_casting_strategy": "try_casting"})
    # Ok(value={'username': 'alice', 'age': 42})
"""

import logging

from .api import arbitrary, decode, decode_and_validate, encode, validate, validate_and_encode
from .custom_types import datetime_, record, uuid_
from .errors import (
    UNDEFINED,
    DecodingError,
    InternalError,
    TypeDefinitionError,
    ValidationError,
    decoding_fail,
    decoding_succeed,
    validation_fail,
    validation_succeed,
)
from .interop import to_pydantic
from .model import (
    CustomTypePlugin,
    FunctionPlugin,
    PluginRegistry,
    array,
    boolean,
    concretise,
    custom,
    default_registry,
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
from .options import DecodeOptions, EncodeOptions, ValidateOptions
from .path import Path
from .result import Err, Ok

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Operations
    "decode",
    "validate",
    "encode",
    "decode_and_validate",
    "validate_and_encode",
    "arbitrary",
    "to_pydantic",
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
    "record",
    "datetime_",
    "uuid_",
    "concretise",
    # Plugins
    "CustomTypePlugin",
    "FunctionPlugin",
    "PluginRegistry",
    "default_registry",
    # Options
    "DecodeOptions",
    "ValidateOptions",
    "EncodeOptions",
    # Results and errors
    "Ok",
    "Err",
    "Path",
    "UNDEFINED",
    "DecodingError",
    "ValidationError",
    "InternalError",
    "TypeDefinitionError",
    "decoding_succeed",
    "decoding_fail",
    "validation_succeed",
    "validation_fail",
]

"""
The operations downstream code depends on: decode, validate, encode, their
compositions, and value generation.
"""

from __future__ import annotations

from typing import Any

from hypothesis.strategies import SearchStrategy

from .arbitrary import arbitrary as _arbitrary
from .decoder import decode_without_validation
from .encoder import encode_without_validation
from .errors import DecodingErrors, DecodingResult, ValidationErrors, ValidationResult
from .model.nodes import JSONValue, Type
from .options import DecodeOptions, EncodeOptions, OptionsLike, ValidateOptions, fill_options
from .result import Result
from .validator import validate as _validate


def decode(type_: Type, raw: Any, options: OptionsLike[DecodeOptions] = None) -> DecodingResult:
    """Decode `raw` as a value of `type_`, checking structure only."""
    return decode_without_validation(type_, raw, options)


def validate(type_: Type, value: Any, options: OptionsLike[ValidateOptions] = None) -> ValidationResult:
    """Check the refinements of an already typed value."""
    return _validate(type_, value, options)


def encode(type_: Type, value: Any, options: OptionsLike[EncodeOptions] = None) -> JSONValue:
    """Encode a typed value to a JSON-safe tree, without validating it."""
    return encode_without_validation(type_, value, options)


def decode_and_validate(
    type_: Type,
    raw: Any,
    decode_options: OptionsLike[DecodeOptions] = None,
    validate_options: OptionsLike[ValidateOptions] = None,
) -> Result[Any, DecodingErrors | ValidationErrors]:
    """
    Decode `raw`, then validate the decoded value.

    Usage:
        result = decode_and_validate(integer(minimum=0), "-1", {"type_casting_strategy": "try_casting"})
        # Err([ValidationError(assertion="number must be greater than or equal to 0", got=-1, ...)])
    """
    validate_options = fill_options(ValidateOptions, validate_options)
    return decode_without_validation(type_, raw, decode_options).chain(
        lambda value: _validate(type_, value, validate_options).replace(value)
    )


def validate_and_encode(
    type_: Type,
    value: Any,
    encode_options: OptionsLike[EncodeOptions] = None,
    validate_options: OptionsLike[ValidateOptions] = None,
) -> Result[JSONValue, ValidationErrors]:
    """Validate `value`; encode it only if it is valid."""
    return _validate(type_, value, validate_options).map(
        lambda _: encode_without_validation(type_, value, encode_options)
    )


def arbitrary(type_: Type, max_depth: int = 3) -> SearchStrategy[Any]:
    """A hypothesis strategy producing valid values of `type_`."""
    return _arbitrary(type_, max_depth)

"""
Per-call options for decoding, validation and encoding.

Options are always passed explicitly; there is no process-wide default that
callers could mutate. Every public operation accepts None, a mapping of
overrides, or an options instance, and merges it over the defaults here.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_DEPTH = 128


class _Options(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class DecodeOptions(_Options):
    """
    - type_casting_strategy:
        "expect_exact_types" (default): no casts are attempted
        "try_casting": "42" may decode as a number, "true" as a boolean, ...
    - field_strictness:
        "expect_exact_fields" (default): unknown object keys are an error
        "allow_additional_fields": unknown object keys are dropped
    - error_reporting_strategy:
        "stop_at_first_error" (default) or "all_errors"
    - max_depth: nesting level past which decoding fails closed
    - depth_offset: nesting level the walk starts at; set when a custom type
      hands nested values back to the decoder
    """

    type_casting_strategy: Literal["expect_exact_types", "try_casting"] = "expect_exact_types"
    field_strictness: Literal["expect_exact_fields", "allow_additional_fields"] = "expect_exact_fields"
    error_reporting_strategy: Literal["stop_at_first_error", "all_errors"] = "stop_at_first_error"
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    depth_offset: int = Field(default=0, ge=0)

    @property
    def try_casting(self) -> bool:
        return self.type_casting_strategy == "try_casting"

    @property
    def expect_exact_fields(self) -> bool:
        return self.field_strictness == "expect_exact_fields"

    @property
    def stop_at_first_error(self) -> bool:
        return self.error_reporting_strategy == "stop_at_first_error"


class ValidateOptions(_Options):
    """
    - error_reporting_strategy:
        "stop_at_first_error" (default) or "all_errors"
    - max_depth: nesting level past which validation fails closed
    - depth_offset: nesting level the walk starts at; set when a custom type
      hands nested values back to the validator
    """

    error_reporting_strategy: Literal["stop_at_first_error", "all_errors"] = "stop_at_first_error"
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    depth_offset: int = Field(default=0, ge=0)

    @property
    def stop_at_first_error(self) -> bool:
        return self.error_reporting_strategy == "stop_at_first_error"


class EncodeOptions(_Options):
    """
    - sensitive_information_strategy:
        "hide" (default): values of sensitive types are encoded as null
        "keep": sensitive types are encoded like any other
    """

    sensitive_information_strategy: Literal["hide", "keep"] = "hide"


OptionsT = TypeVar("OptionsT", bound=_Options)
OptionsLike = Union[OptionsT, Mapping[str, Any], None]


def fill_options(cls: type[OptionsT], options: OptionsLike[OptionsT]) -> OptionsT:
    """
    Merge the given options over the defaults of `cls`.

    Raises:
        pydantic.ValidationError: if an override is not a known option value
    """
    if options is None:
        return cls()
    if isinstance(options, cls):
        return options
    if isinstance(options, BaseModel):
        return cls.model_validate(options.model_dump(include=set(cls.model_fields)))
    return cls.model_validate(dict(options))

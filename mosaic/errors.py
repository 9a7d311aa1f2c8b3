"""
Error records produced by decoding and validation, plus the internal error
raised when an invariant the library itself guarantees is broken.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, NoReturn

from .path import Path
from .result import Err, Ok, Result


class Undefined(Enum):
    """
    Sentinel for a missing value, distinct from JSON null (None).

    Object keys that are absent from a raw input are seen by decoders as
    UNDEFINED, and an absent Optional decodes to UNDEFINED.
    """

    UNDEFINED = 0

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = Undefined.UNDEFINED


@dataclass(frozen=True, slots=True)
class DecodingError:
    """
    A structural failure: `expected` describes the wanted shape, `got` is the
    offending raw value.

    Example:
        DecodingError(expected="string", got=1, path=<$[1].foo>)
    """

    expected: str
    got: Any
    path: Path = Path()

    def prepend_field(self, name: str) -> DecodingError:
        return replace(self, path=self.path.prepend_field(name))

    def prepend_index(self, idx: int) -> DecodingError:
        return replace(self, path=self.path.prepend_index(idx))

    def prepend_variant(self, name: str) -> DecodingError:
        return replace(self, path=self.path.prepend_variant(name))


@dataclass(frozen=True, slots=True)
class ValidationError:
    """A refinement failure: `assertion` describes the check that did not hold."""

    assertion: str
    got: Any
    path: Path = Path()

    def prepend_field(self, name: str) -> ValidationError:
        return replace(self, path=self.path.prepend_field(name))

    def prepend_index(self, idx: int) -> ValidationError:
        return replace(self, path=self.path.prepend_index(idx))

    def prepend_variant(self, name: str) -> ValidationError:
        return replace(self, path=self.path.prepend_variant(name))


DecodingErrors = list[DecodingError]
ValidationErrors = list[ValidationError]
DecodingResult = Result[Any, DecodingErrors]
ValidationResult = Result[bool, ValidationErrors]


class TypeDefinitionError(ValueError):
    """Raised when a type descriptor (or a generator for it) is inconsistent."""


class InternalError(Exception):
    """
    Raised when an invariant of the type system is violated.

    This signals a bug in the calling code (or in this library), never a
    data-quality problem: it is not meant to be caught and reported to users
    as a validation failure.
    """

    HEADER = "[mosaic internal error]"

    def __init__(self, message: str):
        super().__init__(f"{self.HEADER} {message}")
        self.detail = message


def fail_with_internal_error(message: str) -> NoReturn:
    raise InternalError(message)


# Decoding helpers


def decoding_succeed(value: Any) -> Ok[Any]:
    return Ok(value)


def decoding_fail(expected: str, got: Any) -> Err[DecodingErrors]:
    """
    Fail with a single error located at the root.

    Usage:
        def decode_even(value, decode_options, options):
            if isinstance(value, int) and value % 2 == 0:
                return decoding_succeed(value)
            return decoding_fail("an even number", value)
    """
    return Err([DecodingError(expected=expected, got=got)])


def decoding_fail_with_errors(errors: DecodingErrors) -> Err[DecodingErrors]:
    return Err(list(errors))


def add_expected(other: str) -> Callable[[DecodingError], DecodingError]:
    """
    Returns a function widening the `expected` description of an error.

    Usage:
        add_expected("null")(DecodingError("number", "x"))  # expected="number or null"
    """

    def widen(error: DecodingError) -> DecodingError:
        return replace(error, expected=f"{error.expected} or {other}")

    return widen


# Validation helpers


def validation_succeed() -> Ok[bool]:
    return Ok(True)


def validation_fail(assertion: str, got: Any) -> Err[ValidationErrors]:
    return Err([ValidationError(assertion=assertion, got=got)])


def validation_fail_with_errors(errors: ValidationErrors) -> Err[ValidationErrors]:
    return Err(list(errors))

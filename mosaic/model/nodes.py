"""
Type descriptor nodes.

The node set is closed: scalars (boolean, number, string, literal, enum),
composites (object, array, union), decorators (optional, nullable, reference)
and the custom extension point. Each node is an immutable dataclass; the four
walkers (decoder, validator, encoder, arbitrary) dispatch over these classes
with structural pattern matching.

A descriptor is either a node or a zero-argument thunk returning a
descriptor, which is how recursive types are declared:

    tree = lambda: object_({"value": number(), "children": array(tree)})
"""

from __future__ import annotations

import math
import re
import warnings
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Mapping, Union

from ..errors import TypeDefinitionError, Undefined, fail_with_internal_error

if TYPE_CHECKING:
    from hypothesis.strategies import SearchStrategy

    from ..errors import DecodingResult, ValidationErrors, ValidationResult
    from ..options import DecodeOptions, EncodeOptions, ValidateOptions
    from ..result import Result
    from .plugins import CustomTypePlugin

JSONValue = Union[None, bool, int, float, str, list["JSONValue"], dict[str, "JSONValue"]]

# A refinement: the assertion reported when the predicate returns False
Check = tuple[str, Callable[[Any], bool]]

# Names that would shadow attribute machinery when values are turned into objects
FORBIDDEN_FIELD_NAMES = frozenset(
    {"__proto__", "__class__", "__dict__", "__slots__", "__weakref__"}
)


class Kind(Enum):
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    LITERAL = auto()
    ENUM = auto()
    OBJECT = auto()
    ARRAY = auto()
    UNION = auto()
    OPTIONAL = auto()
    NULLABLE = auto()
    REFERENCE = auto()
    CUSTOM = auto()


class Mutability(Enum):
    IMMUTABLE = auto()
    MUTABLE = auto()


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class BaseType:
    """
    Options shared by every node kind.

    - name / description: documentation for consumers
    - sensitive: when set, encoding replaces the value with null
    """

    kind: ClassVar[Kind]

    name: str | None = None
    description: str | None = None
    sensitive: bool = False

    # Per-node operations, each one delegating to its walker

    def decode_without_validation(
        self, raw: Any, options: DecodeOptions | Mapping[str, Any] | None = None
    ) -> DecodingResult:
        from ..decoder import decode_without_validation

        return decode_without_validation(self, raw, options)

    def validate(
        self, value: Any, options: ValidateOptions | Mapping[str, Any] | None = None
    ) -> ValidationResult:
        from ..validator import validate

        return validate(self, value, options)

    def encode_without_validation(
        self, value: Any, options: EncodeOptions | Mapping[str, Any] | None = None
    ) -> JSONValue:
        from ..encoder import encode_without_validation

        return encode_without_validation(self, value, options)

    def arbitrary(self, max_depth: int = 3) -> SearchStrategy[Any]:
        from ..arbitrary import arbitrary

        return arbitrary(self, max_depth)

    def decode(
        self,
        raw: Any,
        decode_options: DecodeOptions | Mapping[str, Any] | None = None,
        validate_options: ValidateOptions | Mapping[str, Any] | None = None,
    ) -> Result[Any, list]:
        """Decode `raw` and validate the decoded value."""
        from ..api import decode_and_validate

        return decode_and_validate(self, raw, decode_options, validate_options)

    def encode(
        self,
        value: Any,
        encode_options: EncodeOptions | Mapping[str, Any] | None = None,
        validate_options: ValidateOptions | Mapping[str, Any] | None = None,
    ) -> Result[JSONValue, ValidationErrors]:
        """Validate `value` and, if valid, encode it."""
        from ..api import validate_and_encode

        return validate_and_encode(self, value, encode_options, validate_options)

    def example(self, max_depth: int = 3) -> Any:
        """Draw a single random value, for exploration in a REPL (not in tests)."""
        from hypothesis.errors import NonInteractiveExampleWarning

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NonInteractiveExampleWarning)
            return self.arbitrary(max_depth).example()

    # Decorator shortcuts

    def optional(self, **options: Any) -> OptionalType:
        return OptionalType(wrapped_type=self, **options)

    def nullable(self, **options: Any) -> NullableType:
        return NullableType(wrapped_type=self, **options)

    def array(self, **options: Any) -> ArrayType:
        return ArrayType(wrapped_type=self, **options)

    def reference(self, **options: Any) -> ReferenceType:
        return ReferenceType(wrapped_type=self, **options)

    def with_options(self, **options: Any) -> BaseType:
        """Return a copy of this node with some options replaced."""
        return replace(self, **options)

    def set_name(self, name: str) -> BaseType:
        return replace(self, name=name)

    def as_sensitive(self) -> BaseType:
        return replace(self, sensitive=True)


Type = Union[BaseType, Callable[[], "Type"]]


# Scalars


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class BooleanType(BaseType):
    kind: ClassVar[Kind] = Kind.BOOLEAN


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class NumberType(BaseType):
    """
    A number (int or float, never bool).

    When both an inclusive and an exclusive bound are given on the same side,
    the tighter one is effective; `lower_bound`/`upper_bound` expose it as a
    `(value, exclusive)` pair.
    """

    kind: ClassVar[Kind] = Kind.NUMBER

    minimum: float | None = None
    exclusive_minimum: float | None = None
    maximum: float | None = None
    exclusive_maximum: float | None = None
    multiple_of: float | None = None
    is_integer: bool = False

    lower_bound: tuple[float, bool] | None = field(init=False, repr=False, default=None)
    upper_bound: tuple[float, bool] | None = field(init=False, repr=False, default=None)
    checks: tuple[Check, ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        for option in ("minimum", "exclusive_minimum", "maximum", "exclusive_maximum", "multiple_of"):
            bound = getattr(self, option)
            if bound is None:
                continue
            if not is_finite_number(bound):
                raise TypeDefinitionError(f"{option} must be a finite number, got {bound!r}")
            if self.is_integer and not is_integral(bound):
                raise TypeDefinitionError(
                    f"On integer types {option} must be an integer number, got {bound!r}"
                )
        if self.multiple_of is not None and self.multiple_of <= 0:
            raise TypeDefinitionError(f"multiple_of must be greater than 0, got {self.multiple_of}")

        lower = _tighter(self.minimum, self.exclusive_minimum, max)
        upper = _tighter(self.maximum, self.exclusive_maximum, min)
        object.__setattr__(self, "lower_bound", lower)
        object.__setattr__(self, "upper_bound", upper)
        object.__setattr__(self, "checks", _number_checks(self))

        if lower is not None and upper is not None:
            (low, low_excluded), (high, high_excluded) = lower, upper
            if low > high:
                raise TypeDefinitionError(
                    f"Lower bound ({low}) must be lower or equal to the upper bound ({high})"
                )
            if low == high and (low_excluded or high_excluded):
                raise TypeDefinitionError(
                    f"Lower bound ({low}) cannot be equal to upper bound ({high}) when one is exclusive"
                )
            if self.is_integer and integer_range(lower, upper) is None:
                raise TypeDefinitionError(
                    f"No integer lies between the lower bound ({low}) and the upper bound ({high})"
                )


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class StringType(BaseType):
    kind: ClassVar[Kind] = Kind.STRING

    min_length: int | None = None
    max_length: int | None = None
    regex: re.Pattern[str] | str | None = None

    checks: tuple[Check, ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        for option in ("min_length", "max_length"):
            length = getattr(self, option)
            if length is None:
                continue
            if not isinstance(length, int) or isinstance(length, bool):
                raise TypeDefinitionError(f"The {option} ({length!r}) must be an integer")
            if length < 0:
                raise TypeDefinitionError(f"The {option} ({length}) cannot be negative")
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise TypeDefinitionError(
                f"String type's minimum length ({self.min_length}) should be lower than "
                f"its maximum length ({self.max_length})"
            )
        if isinstance(self.regex, str):
            try:
                object.__setattr__(self, "regex", re.compile(self.regex))
            except re.error as e:
                raise TypeDefinitionError(f"Invalid regex {self.regex!r}: {e}") from e
        object.__setattr__(self, "checks", _string_checks(self))


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class LiteralType(BaseType):
    kind: ClassVar[Kind] = Kind.LITERAL

    value: str | int | float | bool | None

    def __post_init__(self) -> None:
        if self.value is not None and not isinstance(self.value, (str, int, float, bool)):
            raise TypeDefinitionError(
                f"A literal must be a string, number, boolean or None, got {self.value!r}"
            )


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class EnumType(BaseType):
    kind: ClassVar[Kind] = Kind.ENUM

    variants: tuple[str, ...]

    def __post_init__(self) -> None:
        variants = tuple(self.variants)
        if not variants:
            raise TypeDefinitionError("An enumeration must have at least one variant")
        if not all(isinstance(variant, str) for variant in variants):
            raise TypeDefinitionError(f"Enumeration variants must be strings, got {variants!r}")
        if len(set(variants)) != len(variants):
            raise TypeDefinitionError(f"Enumeration variants must be unique, got {variants!r}")
        object.__setattr__(self, "variants", variants)


# Composites


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class ObjectType(BaseType):
    kind: ClassVar[Kind] = Kind.OBJECT

    fields: Mapping[str, Type]
    mutability: Mutability = Mutability.IMMUTABLE

    def __post_init__(self) -> None:
        for field_name in self.fields:
            if not isinstance(field_name, str):
                raise TypeDefinitionError(f"Field names must be strings, got {field_name!r}")
            if field_name in FORBIDDEN_FIELD_NAMES:
                raise TypeDefinitionError(f"Forbidden field name: {field_name!r}")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class ArrayType(BaseType):
    kind: ClassVar[Kind] = Kind.ARRAY

    wrapped_type: Type
    min_items: int | None = None
    max_items: int | None = None
    mutability: Mutability = Mutability.IMMUTABLE

    def __post_init__(self) -> None:
        for option in ("min_items", "max_items"):
            count = getattr(self, option)
            if count is None:
                continue
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise TypeDefinitionError(f"The {option} ({count!r}) must be a non negative integer")
        if (
            self.min_items is not None
            and self.max_items is not None
            and self.min_items > self.max_items
        ):
            raise TypeDefinitionError(
                f"Array type's min_items ({self.min_items}) should be lower than "
                f"its max_items ({self.max_items})"
            )


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class UnionType(BaseType):
    """
    A union of named variants.

    A union value is a one-key dict `{variant_name: variant_value}`; on the
    wire only `variant_value`'s encoding is present.

    - discriminant: name of a field whose raw value selects the object
      variant declaring that field as a matching literal
    - checks: per-variant predicates a decoded variant value must satisfy
    """

    kind: ClassVar[Kind] = Kind.UNION

    variants: Mapping[str, Type]
    discriminant: str | None = None
    checks: Mapping[str, Callable[[Any], bool]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.variants:
            raise TypeDefinitionError("A union must have at least one variant")
        for variant_name in self.variants:
            if not isinstance(variant_name, str):
                raise TypeDefinitionError(f"Variant names must be strings, got {variant_name!r}")
        unknown = set(self.checks) - set(self.variants)
        if unknown:
            raise TypeDefinitionError(f"Checks given for unknown variants: {sorted(unknown)}")
        object.__setattr__(self, "variants", MappingProxyType(dict(self.variants)))
        object.__setattr__(self, "checks", MappingProxyType(dict(self.checks)))

    def variant_of(self, value: Any) -> tuple[str, Any]:
        """
        Split a union value into its variant name and the wrapped value.

        Raises:
            InternalError: if `value` is not a one-key dict naming a variant
        """
        if not isinstance(value, Mapping) or len(value) != 1:
            fail_with_internal_error(
                f"A union value must be a dict with exactly one variant key, got {value!r}"
            )
        ((variant_name, variant_value),) = value.items()
        if variant_name not in self.variants:
            fail_with_internal_error(
                f"{variant_name!r} is not a variant of this union "
                f"(expected one of {', '.join(self.variants)})"
            )
        return variant_name, variant_value


# Decorators


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class OptionalType(BaseType):
    kind: ClassVar[Kind] = Kind.OPTIONAL

    wrapped_type: Type


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class NullableType(BaseType):
    kind: ClassVar[Kind] = Kind.NULLABLE

    wrapped_type: Type


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class ReferenceType(BaseType):
    """Transparent wrapper marking a relation boundary for external consumers."""

    kind: ClassVar[Kind] = Kind.REFERENCE

    wrapped_type: Type


# Extension point


@dataclass(frozen=True, slots=True, kw_only=True, eq=False)
class CustomType(BaseType):
    kind: ClassVar[Kind] = Kind.CUSTOM

    type_name: str
    plugin: CustomTypePlugin
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))


# Helpers shared by the walkers


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    """JSON numbers only: no infinities, no NaN."""
    return is_number(value) and (isinstance(value, int) or math.isfinite(value))


def is_integral(value: Any) -> bool:
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


def integer_range(
    lower: tuple[float, bool] | None, upper: tuple[float, bool] | None
) -> tuple[int | None, int | None] | None:
    """Inclusive integer bounds for the given effective bounds, None if empty."""
    low = high = None
    if lower is not None:
        value, excluded = lower
        low = math.floor(value) + 1 if excluded else math.ceil(value)
    if upper is not None:
        value, excluded = upper
        high = math.ceil(value) - 1 if excluded else math.floor(value)
    if low is not None and high is not None and low > high:
        return None
    return low, high


def _tighter(
    inclusive: float | None, exclusive: float | None, pick: Callable[[float, float], float]
) -> tuple[float, bool] | None:
    if inclusive is None and exclusive is None:
        return None
    if exclusive is None:
        return (inclusive, False)
    if inclusive is None:
        return (exclusive, True)
    # On a tie the exclusive bound is the tighter one
    if pick(inclusive, exclusive) == inclusive and inclusive != exclusive:
        return (inclusive, False)
    return (exclusive, True)


def is_undefined(value: Any) -> bool:
    return isinstance(value, Undefined)


def is_multiple_of(value: float, multiple_of: float) -> bool:
    if isinstance(value, int) and isinstance(multiple_of, int):
        return value % multiple_of == 0
    quotient = value / multiple_of
    return math.isclose(quotient, round(quotient), rel_tol=1e-9, abs_tol=1e-9)


def _number_checks(node: NumberType) -> tuple[Check, ...]:
    checks: list[Check] = []
    if node.maximum is not None:
        maximum = node.maximum
        checks.append((f"number must be less than or equal to {maximum}", lambda v: v <= maximum))
    if node.exclusive_maximum is not None:
        exclusive_maximum = node.exclusive_maximum
        checks.append((f"number must be less than {exclusive_maximum}", lambda v: v < exclusive_maximum))
    if node.minimum is not None:
        minimum = node.minimum
        checks.append((f"number must be greater than or equal to {minimum}", lambda v: v >= minimum))
    if node.exclusive_minimum is not None:
        exclusive_minimum = node.exclusive_minimum
        checks.append((f"number must be greater than {exclusive_minimum}", lambda v: v > exclusive_minimum))
    if node.is_integer:
        checks.append(("number must be an integer", is_integral))
    if node.multiple_of is not None:
        multiple_of = node.multiple_of
        checks.append(
            (f"number must be a multiple of {multiple_of}", lambda v: is_multiple_of(v, multiple_of))
        )
    return tuple(checks)


def _string_checks(node: StringType) -> tuple[Check, ...]:
    checks: list[Check] = []
    if node.max_length is not None:
        max_length = node.max_length
        checks.append(
            (f"string longer than max length ({max_length})", lambda v: len(v) <= max_length)
        )
    if node.min_length is not None:
        min_length = node.min_length
        checks.append(
            (f"string shorter than min length ({min_length})", lambda v: len(v) >= min_length)
        )
    if node.regex is not None:
        regex = node.regex
        checks.append(
            (f"string regex mismatch ({regex.pattern})", lambda v: regex.search(v) is not None)
        )
    return tuple(checks)

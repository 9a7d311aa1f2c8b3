"""
Hypothesis strategies generating valid values of a type descriptor.

Every value drawn from `arbitrary(type_)` passes `validate(type_, value)`.
Recursive descriptors terminate thanks to `max_depth`: each composite level
consumes one unit, and once it is used up optionals are always absent,
nullables always null and arrays without `min_items` always empty.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from hypothesis import strategies as st

from .errors import UNDEFINED, TypeDefinitionError, fail_with_internal_error
from .model.concretise import concretise
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
    integer_range,
    is_multiple_of,
)

logger = logging.getLogger(__name__)

# Arrays with `min_items` keep generating below depth 0; this stops descriptors
# that can never produce a finite value.
DEPTH_FLOOR = -100


def arbitrary(type_: Type, max_depth: int = 3) -> st.SearchStrategy[Any]:
    """
    Build a strategy for `type_`.

    Raises:
        TypeDefinitionError: if some constraint combination cannot be
            generated (e.g. a string with both a regex and length bounds)

    Usage:
        @given(user.arbitrary(max_depth=3))
        def test_round_trip(value): ...
    """
    logger.debug("Building strategy for %r with max depth %d", type_, max_depth)
    return _StrategyBuilder().build(type_, max_depth)


class _StrategyBuilder:
    """Builds strategies, sharing the ones of nodes seen at the same depth."""

    def __init__(self) -> None:
        self._built: dict[tuple[int, int], st.SearchStrategy[Any]] = {}

    def build(self, type_: Type, max_depth: int) -> st.SearchStrategy[Any]:
        if max_depth < DEPTH_FLOOR:
            raise TypeDefinitionError(
                "Impossible to generate an arbitrary value: the type has no finite values"
            )
        node = concretise(type_)
        key = (id(node), max_depth)
        strategy = self._built.get(key)
        if strategy is None:
            strategy = self._build_node(node, max_depth)
            self._built[key] = strategy
        return strategy

    def _build_node(self, node: Any, max_depth: int) -> st.SearchStrategy[Any]:
        match node:
            case BooleanType():
                return st.booleans()
            case NumberType():
                return number_strategy(node)
            case StringType():
                return string_strategy(node)
            case LiteralType():
                return st.just(node.value)
            case EnumType():
                return st.sampled_from(node.variants)
            case OptionalType():
                if max_depth <= 1:
                    return st.just(UNDEFINED)
                return st.one_of(st.just(UNDEFINED), self.build(node.wrapped_type, max_depth - 1))
            case NullableType():
                if max_depth <= 1:
                    return st.none()
                return st.one_of(st.none(), self.build(node.wrapped_type, max_depth - 1))
            case ReferenceType():
                return self.build(node.wrapped_type, max_depth)
            case ObjectType():
                fields = {
                    field_name: self.build(field_type, max_depth - 1)
                    for field_name, field_type in node.fields.items()
                }
                return st.fixed_dictionaries(fields).map(_drop_undefined)
            case ArrayType():
                min_items = node.min_items or 0
                if max_depth <= 0 and min_items == 0:
                    return st.just([])
                max_items = node.max_items
                if max_depth <= 0:
                    max_items = min_items
                return st.lists(
                    self.build(node.wrapped_type, max_depth - 1),
                    min_size=min_items,
                    max_size=max_items,
                )
            case UnionType():
                return st.one_of(
                    [
                        self._variant_strategy(node, variant_name, variant_type, max_depth - 1)
                        for variant_name, variant_type in node.variants.items()
                    ]
                )
            case CustomType():
                return node.plugin.arbitrary(max_depth, node.options)
            case _:
                fail_with_internal_error(f"Cannot generate values of unknown type node {node!r}")

    def _variant_strategy(
        self, node: UnionType, variant_name: str, variant_type: Type, max_depth: int
    ) -> st.SearchStrategy[Any]:
        strategy = self.build(variant_type, max_depth)
        check = node.checks.get(variant_name)
        if check is not None:
            strategy = strategy.filter(check)
        return strategy.map(lambda value: {variant_name: value})


def _drop_undefined(fields: dict[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in fields.items() if value is not UNDEFINED}


def number_strategy(node: NumberType) -> st.SearchStrategy[Any]:
    if node.multiple_of is not None:
        return _multiple_of_strategy(node)
    if node.is_integer:
        low, high = integer_range(node.lower_bound, node.upper_bound)
        return st.integers(min_value=low, max_value=high)

    low, low_excluded = node.lower_bound or (None, False)
    high, high_excluded = node.upper_bound or (None, False)
    return st.floats(
        min_value=low,
        max_value=high,
        exclude_min=low_excluded,
        exclude_max=high_excluded,
        allow_nan=False,
        allow_infinity=False,
    )


def _multiple_of_strategy(node: NumberType) -> st.SearchStrategy[Any]:
    multiple_of = node.multiple_of
    low_factor = high_factor = None
    if node.lower_bound is not None:
        low, excluded = node.lower_bound
        low_factor = math.ceil(low / multiple_of)
        if excluded and low_factor * multiple_of <= low:
            low_factor += 1
    if node.upper_bound is not None:
        high, excluded = node.upper_bound
        high_factor = math.floor(high / multiple_of)
        if excluded and high_factor * multiple_of >= high:
            high_factor -= 1
    if low_factor is not None and high_factor is not None and low_factor > high_factor:
        raise TypeDefinitionError(
            f"No multiple of {multiple_of} lies between the bounds of this number type"
        )

    def in_bounds(value: float) -> bool:
        if node.lower_bound is not None:
            low, excluded = node.lower_bound
            if value < low or (excluded and value == low):
                return False
        if node.upper_bound is not None:
            high, excluded = node.upper_bound
            if value > high or (excluded and value == high):
                return False
        return is_multiple_of(value, multiple_of)

    if isinstance(multiple_of, float) and multiple_of.is_integer():
        multiple_of = int(multiple_of)
    factors = st.integers(min_value=low_factor, max_value=high_factor)
    return factors.map(lambda factor: factor * multiple_of).filter(in_bounds)


def string_strategy(node: StringType) -> st.SearchStrategy[str]:
    if node.regex is not None:
        if node.min_length is not None or node.max_length is not None:
            raise TypeDefinitionError(
                "Cannot generate values of string types that have both a regex and min/max length"
            )
        return st.from_regex(node.regex, fullmatch=True)
    return st.text(min_size=node.min_length or 0, max_size=node.max_length)

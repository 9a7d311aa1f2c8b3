"""
Paths locating a position inside a (possibly deeply nested) value.

Renders with JSONPath-like notation:
- root: "$"
- field: ".name" (or "['weird name']" when not a plain identifier)
- index: "[0]"
- variant: ".variant"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class FragmentType(Enum):
    FIELD = auto()
    INDEX = auto()
    VARIANT = auto()


@dataclass(frozen=True, slots=True)
class Fragment:
    """A single access step inside a path."""

    type: FragmentType
    value: str | int

    @classmethod
    def field(cls, name: str) -> Fragment:
        return cls(FragmentType.FIELD, name)

    @classmethod
    def index(cls, idx: int) -> Fragment:
        return cls(FragmentType.INDEX, idx)

    @classmethod
    def variant(cls, name: str) -> Fragment:
        return cls(FragmentType.VARIANT, name)

    def format(self) -> str:
        if self.type == FragmentType.INDEX:
            return f"[{self.value}]"
        name = str(self.value)
        if SIMPLE_NAME_PATTERN.match(name):
            return f".{name}"
        return f"[{name!r}]"


SIMPLE_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


@dataclass(frozen=True, slots=True)
class Path:
    """
    Immutable root-to-leaf sequence of fragments.

    Every operation returns a new Path; the receiver is never mutated.

    Examples:
        Path.empty().append_variant("bar").append_index(0).append_field("foo")
        # -> $.bar[0].foo
    """

    fragments: tuple[Fragment, ...] = ()

    @classmethod
    def empty(cls) -> Path:
        return _ROOT

    @classmethod
    def of_field(cls, name: str) -> Path:
        return cls((Fragment.field(name),))

    @classmethod
    def of_index(cls, idx: int) -> Path:
        return cls((Fragment.index(idx),))

    @classmethod
    def of_variant(cls, name: str) -> Path:
        return cls((Fragment.variant(name),))

    def prepend_field(self, name: str) -> Path:
        return Path((Fragment.field(name), *self.fragments))

    def prepend_index(self, idx: int) -> Path:
        return Path((Fragment.index(idx), *self.fragments))

    def prepend_variant(self, name: str) -> Path:
        return Path((Fragment.variant(name), *self.fragments))

    def append_field(self, name: str) -> Path:
        return Path((*self.fragments, Fragment.field(name)))

    def append_index(self, idx: int) -> Path:
        return Path((*self.fragments, Fragment.index(idx)))

    def append_variant(self, name: str) -> Path:
        return Path((*self.fragments, Fragment.variant(name)))

    def is_empty(self) -> bool:
        return not self.fragments

    def format(self) -> str:
        return "$" + "".join(fragment.format() for fragment in self.fragments)

    def equals(self, other: Path) -> bool:
        if self is other:
            return True
        return self.fragments == other.fragments

    def __str__(self) -> str:
        return self.format()

    def __len__(self) -> int:
        return len(self.fragments)


_ROOT = Path()

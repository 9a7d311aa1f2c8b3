"""
Minimal Result type (Ok/Err) used to thread values or error lists
through decoding and validation without raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """
        Transform the held value.

        Usage:
            Ok(1).map(lambda n: n + 1)    # Ok(2)
            Err("e").map(lambda n: n + 1) # Err("e")
        """
        return Ok(f(self.value))

    def map_error(self, f: Callable[[Any], Any]) -> Ok[T]:
        return self

    def chain(self, f: Callable[[T], Result[U, F]]) -> Result[U, F]:
        """
        Sequence a dependent fallible step, short-circuiting on failure.

        Usage:
            Ok(1).chain(lambda n: Ok(n + 1))   # Ok(2)
            Ok(1).chain(lambda n: Err("fail")) # Err("fail")
        """
        return f(self.value)

    then = chain

    def replace(self, value: U) -> Ok[U]:
        return Ok(value)

    def match(self, on_ok: Callable[[T], U], on_err: Callable[[Any], U]) -> U:
        return on_ok(self.value)

    def or_(self, other: Result[Any, Any]) -> Ok[T]:
        return self

    def lazy_or(self, other: Callable[[Any], Result[Any, Any]]) -> Ok[T]:
        return self

    def recover(self, from_error: Callable[[Any], Any]) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_error(self, f: Callable[[E], F]) -> Err[F]:
        """
        Transform the held error, e.g. to prepend a path fragment to every error.

        Usage:
            Err("error").map_error(lambda e: f"scary {e}") # Err("scary error")
        """
        return Err(f(self.error))

    def chain(self, f: Callable[[Any], Any]) -> Err[E]:
        return self

    then = chain

    def replace(self, value: Any) -> Err[E]:
        return self

    def match(self, on_ok: Callable[[Any], U], on_err: Callable[[E], U]) -> U:
        return on_err(self.error)

    def or_(self, other: Result[U, F]) -> Result[U, F]:
        """
        Fall back to another (eagerly computed) result.

        Usage:
            Err("e").or_(Ok(1))  # Ok(1)
            Ok(2).or_(Ok(1))     # Ok(2)
        """
        return other

    def lazy_or(self, other: Callable[[E], Result[U, F]]) -> Result[U, F]:
        """
        Like `or_` but the alternative is only computed on failure.

        Usage:
            parse_timestamp(raw).lazy_or(lambda _: parse_iso_string(raw))
        """
        return other(self.error)

    def recover(self, from_error: Callable[[E], U]) -> U:
        return from_error(self.error)


Result = Union[Ok[T], Err[E]]

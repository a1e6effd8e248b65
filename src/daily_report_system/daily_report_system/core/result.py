"""Two-variant result type returned by every workflow operation.

Workflows return ``Ok(value)`` on success and ``Err(DomainError)`` for
expected business failures instead of raising.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map(self, f: Callable[[T], U]) -> "Ok[U]":
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return f(self.value)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, f: Callable) -> "Err[E]":
        return self

    def and_then(self, f: Callable) -> "Err[E]":
        return self

    def unwrap(self):
        raise ValueError(f"Called unwrap() on Err: {self.error!r}")


Result = Union[Ok[T], Err[E]]

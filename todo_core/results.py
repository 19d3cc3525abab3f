"""
Lookup results for operations keyed by id.

A lookup either yields ``Found(value)`` or ``NotFound(key)``; callers branch on
``is_found`` (or ``isinstance``) instead of checking for ``None``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Found(Generic[T]):
    """A lookup that matched a record."""
    value: T

    @property
    def is_found(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> "Found[U]":
        return Found(fn(self.value))


@dataclass(frozen=True)
class NotFound:
    """A lookup that matched nothing."""
    key: Any = None

    @property
    def is_found(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> "NotFound":
        return self


LookupResult = Union[Found[T], NotFound]

"""Composable predicates and sort orders for filtering site content."""

from __future__ import annotations

import enum
import operator
import typing as typ

T = typ.TypeVar("T")


class SortOrder(enum.Enum):
    """Direction used when sorting items."""

    ASCENDING = "ascending"
    DESCENDING = "descending"

    @property
    def reverse(self) -> bool:
        return self is SortOrder.DESCENDING


class Predicate(typ.Generic[T]):
    """Wrap a boolean test so it can be combined with ``&``, ``|`` and ``~``.

    Examples
    --------
    >>> short = Predicate(lambda text: len(text) < 4)
    >>> shouty = Predicate(str.isupper)
    >>> (short & ~shouty).matches("abc")
    True
    """

    __slots__ = ("_test",)

    def __init__(self, test: typ.Callable[[T], bool]) -> None:
        self._test = test

    def matches(self, candidate: T) -> bool:
        return bool(self._test(candidate))

    __call__ = matches

    def __and__(self, other: Predicate[T]) -> Predicate[T]:
        return Predicate(lambda candidate: self.matches(candidate) and other.matches(candidate))

    def __or__(self, other: Predicate[T]) -> Predicate[T]:
        return Predicate(lambda candidate: self.matches(candidate) or other.matches(candidate))

    def __invert__(self) -> Predicate[T]:
        return Predicate(lambda candidate: not self.matches(candidate))

    def inverse(self) -> Predicate[T]:
        return ~self

    @classmethod
    def any(cls) -> Predicate[typ.Any]:
        """Return a predicate matching every candidate."""
        return cls(lambda _candidate: True)


def _attribute(name: str) -> typ.Callable[[typ.Any], typ.Any]:
    return operator.attrgetter(name)


def attribute_equals(name: str, value: object) -> Predicate[typ.Any]:
    """Match candidates whose dotted attribute ``name`` equals ``value``."""
    getter = _attribute(name)
    return Predicate(lambda candidate: getter(candidate) == value)


def attribute_contains(name: str, value: object) -> Predicate[typ.Any]:
    """Match candidates whose dotted attribute ``name`` contains ``value``."""
    getter = _attribute(name)
    return Predicate(lambda candidate: value in getter(candidate))


def attribute_greater_than(name: str, value: typ.Any) -> Predicate[typ.Any]:
    getter = _attribute(name)
    return Predicate(lambda candidate: getter(candidate) > value)


def attribute_less_than(name: str, value: typ.Any) -> Predicate[typ.Any]:
    getter = _attribute(name)
    return Predicate(lambda candidate: getter(candidate) < value)


__all__ = [
    "Predicate",
    "SortOrder",
    "attribute_contains",
    "attribute_equals",
    "attribute_greater_than",
    "attribute_less_than",
]

"""Runtime wrapper types backing the built-in wrapper configs."""
from __future__ import annotations

from functools import cached_property
from typing import Generic, Hashable, TypeVar

T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


class Example(Generic[T]):
    """Read-only wrapper around a single value."""

    def __init__(self, wrapped_value: T) -> None:
        self._wrapped_value = wrapped_value

    @property
    def wrapped_value(self) -> T:
        return self._wrapped_value


class ExampleSettable(Generic[T]):
    def __init__(self, wrapped_value: T) -> None:
        self.wrapped_value = wrapped_value


class ExampleWithProjected(Generic[H]):
    """Projects the hash of the wrapped value."""

    def __init__(self, wrapped_value: H) -> None:
        self.wrapped_value = wrapped_value

    @property
    def projected_value(self) -> int:
        return hash(self.wrapped_value)


class ExampleWithSettableProjected(Generic[H]):
    """Like :class:`ExampleWithProjected`, but the projection can be overwritten."""

    def __init__(self, wrapped_value: H) -> None:
        self.wrapped_value = wrapped_value

    @cached_property
    def projected_value(self) -> int:
        return hash(self.wrapped_value)


class ExampleWithWrappedValue(Generic[H]):
    def __init__(self, *, wrapped_value: H) -> None:
        self.wrapped_value = wrapped_value

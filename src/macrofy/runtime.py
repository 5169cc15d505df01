"""Markers recognized by the expander; both are no-ops at runtime."""
from __future__ import annotations

from typing import Any, Optional, TypeVar

T = TypeVar("T")


def _marker(target: Optional[T] = None, **_: Any) -> Any:
    if target is None:
        def decorate(inner: T) -> T:
            return inner

        return decorate
    return target


def macrofy(target: Optional[T] = None, **options: Any) -> Any:
    """Mark a class as a property wrapper.

    Usable as ``@macrofy`` or ``@macrofy()``. Running ``macrofy expand`` on
    the module replaces the marker with a generated ``<Name>Macro`` config.
    """

    return _marker(target, **options)


def actor(target: Optional[T] = None, **options: Any) -> Any:
    """Mark a class as an actor, a reference type with serialized access."""

    return _marker(target, **options)

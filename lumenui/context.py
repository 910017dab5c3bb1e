"""Runtime-wide context values keyed by their type."""

from __future__ import annotations

from typing import Any, Optional, TypeVar

from .reactive import runtime

T = TypeVar("T")


def provide_context(value: Any) -> None:
    """Store ``value`` under its exact type, replacing any earlier value."""
    runtime().contexts[type(value)] = value


def use_context(cls: type[T]) -> Optional[T]:
    """Return the value provided for exactly ``cls``, or None."""
    value = runtime().contexts.get(cls)
    return value if type(value) is cls else None
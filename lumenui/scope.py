"""Scopes that own reactive resources, memos and triggers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

from .reactive import (
    ReadSignal,
    RwSignal,
    WriteSignal,
    create_effect,
    create_rw_signal,
    create_signal,
    next_id,
    runtime,
)

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

_UNSET: Any = object()


@dataclass(frozen=True)
class Scope:
    """An owner of signals, effects and child scopes.

    Disposing a scope drops everything created under it, including the
    contents of its child scopes.
    """

    id: int = field(default_factory=next_id)

    @classmethod
    def current(cls) -> "Scope":
        """The scope new signals, effects and memos are created under."""
        return cls(runtime().current_scope)

    def create_child(self) -> "Scope":
        """Create a scope that is disposed together with this one."""
        child = next_id()
        runtime().children.setdefault(self.id, set()).add(child)
        return Scope(child)

    def create_signal(self, value: T) -> tuple[ReadSignal[T], WriteSignal[T]]:
        """Create a signal owned by this scope."""
        return with_scope(self, lambda: create_signal(value))

    def create_rw_signal(self, value: T) -> RwSignal[T]:
        """Create a read-write signal owned by this scope."""
        return with_scope(self, lambda: create_rw_signal(value))

    def create_memo(self, f: Callable[[Optional[T]], T]) -> "Memo[T]":
        """Create a memo owned by this scope."""
        return with_scope(self, lambda: create_memo(f))

    def create_trigger(self) -> "Trigger":
        """Create a trigger owned by this scope."""
        return with_scope(self, create_trigger)

    def create_effect(self, f: Callable[[Optional[T]], T]) -> None:
        """Create an effect owned by this scope."""
        with_scope(self, lambda: create_effect(f))

    def track(self) -> None:
        """Bind the running effect's lifetime to this scope."""
        runtime().track_scope(self.id)

    def dispose(self) -> None:
        """Drop every signal, effect and child scope owned by this scope."""
        runtime().dispose(self.id)


def with_scope(scope: Scope, f: Callable[[], R]) -> R:
    """Call ``f`` with ``scope`` as the current scope."""
    with runtime().scoped(scope.id):
        return f()


def as_child_of_current_scope(f: Callable[[T], U]) -> Callable[[T], tuple[U, Scope]]:
    """Wrap ``f`` so every call runs in a new child of the current scope.

    The wrapper returns ``f``'s result together with the child scope.
    """
    parent = Scope.current()

    def wrapped(arg: T) -> tuple[U, Scope]:
        scope = parent.create_child()
        with runtime().scoped(scope.id):
            result = f(arg)
        return result, scope

    return wrapped


@dataclass(frozen=True)
class Memo(Generic[T]):
    """A derived value that notifies readers only when it actually changes."""

    _getter: ReadSignal[Any]

    def get(self) -> T:
        """Return the value and subscribe the running effect."""
        return self._getter.get()

    def get_untracked(self) -> T:
        """Return the value without subscribing."""
        return self._getter.get_untracked()

    def with_(self, f: Callable[[T], R]) -> R:
        """Apply ``f`` to the value and subscribe the running effect."""
        return self._getter.with_(f)

    def with_untracked(self, f: Callable[[T], R]) -> R:
        """Apply ``f`` to the value without subscribing."""
        return self._getter.with_untracked(f)

    def track(self) -> None:
        """Subscribe the running effect without reading the value."""
        signal = runtime().signal(self._getter.id)
        if signal is None:
            raise LookupError(f"memo {self._getter.id} has been disposed")
        signal.subscribe()


def create_memo(f: Callable[[Optional[T]], T]) -> Memo[T]:
    """Create a memo computed by ``f``.

    ``f`` receives the previously computed value (None on the first run).
    Readers are rerun only when the new value differs from the old one.
    """
    owner = Scope.current()
    getter, setter = create_signal(_UNSET)

    def recompute(_previous: Any) -> None:
        owner.track()
        current = getter.get_untracked()
        new_value = f(None if current is _UNSET else current)
        if current is _UNSET or current != new_value:
            setter.set(new_value)

    create_effect(recompute)
    return Memo(getter)


@dataclass(frozen=True)
class Trigger:
    """A value-less signal used only to rerun the effects that track it."""

    _signal: RwSignal[None]

    def notify(self) -> None:
        """Rerun every effect tracking this trigger."""
        self._signal.set(None)

    def track(self) -> None:
        """Subscribe the running effect to this trigger."""
        self._signal.with_(lambda _value: None)


def create_trigger() -> Trigger:
    """Create a trigger in the current scope."""
    return Trigger(create_rw_signal(None))
"""Fine-grained reactive core: signals, effects, batching and the runtime."""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")
S = TypeVar("S")

_id_counter = itertools.count()
_id_lock = threading.Lock()


def next_id() -> int:
    """Return a fresh id, unique within the process and increasing."""
    with _id_lock:
        return next(_id_counter)


class _EffectBase:
    """Shared bookkeeping for effects: identity and observed signal ids."""

    def __init__(self, effect_id: int) -> None:
        self.id = effect_id
        self.value: Any = None
        self._observers: Optional[set[int]] = None

    def run(self) -> bool:
        raise NotImplementedError

    def add_observer(self, signal_id: int) -> None:
        if self._observers is None:
            self._observers = {signal_id}
        else:
            self._observers.add(signal_id)

    def clear_observers(self) -> Optional[set[int]]:
        observers, self._observers = self._observers, None
        return observers


class _Effect(_EffectBase):
    def __init__(self, effect_id: int, f: Callable[[Any], Any]) -> None:
        super().__init__(effect_id)
        self._f = f

    def run(self) -> bool:
        current, self.value = self.value, None
        self.value = self._f(current)
        return True


class _UpdaterEffect(_EffectBase):
    def __init__(
        self,
        effect_id: int,
        compute: Callable[[Any], tuple[Any, Any]],
        on_change: Callable[[Any, Any], Any],
    ) -> None:
        super().__init__(effect_id)
        self.compute = compute
        self._on_change = on_change

    def run(self) -> bool:
        current, self.value = self.value, None
        result, state = self.compute(current)
        self.value = self._on_change(result, state)
        return True


@dataclass(eq=False)
class Signal:
    """The stored value of a signal together with the effects subscribed to it."""

    id: int
    value: Any
    subscribers: dict[int, _EffectBase] = field(default_factory=dict)

    def subscribe(self) -> None:
        """Subscribe the currently running effect, if any, to this signal."""
        effect = runtime().current_effect
        if effect is not None:
            self.subscribers[effect.id] = effect
            effect.add_observer(self.id)

    def run_effects(self) -> None:
        """Run every subscriber, or queue them while batching."""
        rt = runtime()
        subscribers = list(self.subscribers.values())
        if rt.batching:
            for effect in subscribers:
                rt.add_pending_effect(effect)
            return
        for effect in subscribers:
            run_effect(effect)


class Runtime:
    """Per-thread state of the reactive system."""

    def __init__(self) -> None:
        self.current_effect: Optional[_EffectBase] = None
        self.current_scope: int = next_id()
        self.children: dict[int, set[int]] = {}
        self.signals: dict[int, Signal] = {}
        self.contexts: dict[type, Any] = {}
        self.batching: bool = False
        self.pending_effects: list[_EffectBase] = []

    def add_pending_effect(self, effect: _EffectBase) -> None:
        """Queue an effect to run when the batch ends, once per effect id."""
        if not any(e.id == effect.id for e in self.pending_effects):
            self.pending_effects.append(effect)

    def run_pending_effects(self) -> None:
        """Run and clear every queued effect."""
        pending, self.pending_effects = self.pending_effects, []
        for effect in pending:
            run_effect(effect)

    def signal(self, id: int) -> Optional[Signal]:
        """Return the signal linked to ``id``, or None if there is none."""
        return self.signals.get(id)

    def add_signal(self, id: int, signal: Signal) -> None:
        """Link ``signal`` to ``id``."""
        self.signals[id] = signal

    def set_scope(self, id: int) -> None:
        """Make ``id`` a child of the current scope."""
        self.children.setdefault(self.current_scope, set()).add(id)

    def dispose(self, id: int) -> None:
        """Drop the signal and all descendants linked to ``id``."""
        children = self.children.pop(id, None)
        signal = self.signals.pop(id, None)
        if children:
            for child in children:
                self.dispose(child)
        if signal is not None:
            for effect in list(signal.subscribers.values()):
                observer_clean_up(effect)

    def track_scope(self, id: int) -> None:
        """Subscribe the current effect to the lifetime tracker of scope ``id``."""
        tracker = self.signal(id)
        if tracker is None:
            tracker = Signal(id=id, value=None)
            self.add_signal(id, tracker)
        tracker.subscribe()

    @contextmanager
    def scoped(self, id: int) -> Iterator[int]:
        """Make ``id`` the current scope for the duration of the block."""
        previous = self.current_scope
        self.current_scope = id
        try:
            yield id
        finally:
            self.current_scope = previous


_local = threading.local()


def runtime() -> Runtime:
    """Return the runtime of the calling thread, creating it on first use."""
    rt = getattr(_local, "runtime", None)
    if rt is None:
        rt = Runtime()
        _local.runtime = rt
    return rt


def observer_clean_up(effect: _EffectBase) -> None:
    """Unsubscribe ``effect`` from every signal it observed last run."""
    observers = effect.clear_observers()
    if not observers:
        return
    rt = runtime()
    for signal_id in observers:
        signal = rt.signal(signal_id)
        if signal is not None:
            signal.subscribers.pop(effect.id, None)


def run_effect(effect: _EffectBase) -> None:
    """Run ``effect``, re-tracking the signals it reads."""
    rt = runtime()
    rt.dispose(effect.id)
    observer_clean_up(effect)
    rt.current_effect = effect
    try:
        with rt.scoped(effect.id):
            rt.track_scope(effect.id)
            effect.run()
    finally:
        rt.current_effect = None


def _require_signal(id: int) -> Signal:
    signal = runtime().signal(id)
    if signal is None:
        raise LookupError(f"signal {id} has been disposed")
    return signal


def _update_value(signal: Signal, f: Callable[[Any], tuple[Any, R]]) -> R:
    new_value, result = f(signal.value)
    signal.value = new_value
    signal.run_effects()
    return result


def _set_value(signal: Signal, new_value: Any) -> None:
    _update_value(signal, lambda _old: (new_value, None))


def _replace_with(f: Callable[[Any], Any]) -> Callable[[Any], tuple[Any, None]]:
    return lambda old: (f(old), None)


@dataclass(frozen=True)
class RwSignal(Generic[T]):
    """A signal that can be both read and written."""

    id: int

    def set(self, new_value: T) -> None:
        """Store ``new_value`` and run subscribers; ignored once disposed."""
        signal = runtime().signal(self.id)
        if signal is not None:
            _set_value(signal, new_value)

    def update(self, f: Callable[[T], T]) -> None:
        """Replace the value with ``f(value)``; ignored once disposed."""
        signal = runtime().signal(self.id)
        if signal is not None:
            _update_value(signal, _replace_with(f))

    def try_update(self, f: Callable[[T], tuple[T, R]]) -> R:
        """``f`` returns ``(new_value, result)``; store the value, return the result."""
        return _update_value(_require_signal(self.id), f)

    def with_(self, f: Callable[[T], R]) -> R:
        signal = _require_signal(self.id)
        signal.subscribe()
        return f(signal.value)

    def with_untracked(self, f: Callable[[T], R]) -> R:
        return f(_require_signal(self.id).value)

    def try_with_untracked(self, f: Callable[[Optional[T]], R]) -> R:
        """Apply ``f`` to the value, or to None if the signal is disposed."""
        signal = runtime().signal(self.id)
        return f(signal.value if signal is not None else None)

    def track(self) -> None:
        _require_signal(self.id).subscribe()

    def read_only(self) -> "ReadSignal[T]":
        return ReadSignal(self.id)

    def write_only(self) -> "WriteSignal[T]":
        return WriteSignal(self.id)

    def get(self) -> T:
        signal = _require_signal(self.id)
        signal.subscribe()
        return signal.value

    def get_untracked(self) -> T:
        return _require_signal(self.id).value

    def try_get_untracked(self) -> Optional[T]:
        signal = runtime().signal(self.id)
        return signal.value if signal is not None else None


@dataclass(frozen=True)
class ReadSignal(Generic[T]):
    """The reading half of a signal."""

    id: int

    def get(self) -> T:
        signal = _require_signal(self.id)
        signal.subscribe()
        return signal.value

    def get_untracked(self) -> T:
        return _require_signal(self.id).value

    def with_(self, f: Callable[[T], R]) -> R:
        signal = _require_signal(self.id)
        signal.subscribe()
        return f(signal.value)

    def with_untracked(self, f: Callable[[T], R]) -> R:
        return f(_require_signal(self.id).value)


@dataclass(frozen=True)
class WriteSignal(Generic[T]):
    """The writing half of a signal."""

    id: int

    def set(self, new_value: T) -> None:
        _set_value(_require_signal(self.id), new_value)

    def try_set(self, new_value: T) -> None:
        """Set the value only if the signal still exists."""
        signal = runtime().signal(self.id)
        if signal is not None:
            _set_value(signal, new_value)

    def update(self, f: Callable[[T], T]) -> None:
        _update_value(_require_signal(self.id), _replace_with(f))

    def try_update(self, f: Callable[[T], tuple[T, R]]) -> R:
        return _update_value(_require_signal(self.id), f)


def _new_signal(value: Any) -> int:
    rt = runtime()
    signal_id = next_id()
    rt.add_signal(signal_id, Signal(id=signal_id, value=value))
    rt.set_scope(signal_id)
    return signal_id


def create_signal(value: T) -> tuple[ReadSignal[T], WriteSignal[T]]:
    """Create a signal in the current scope and return its read and write halves."""
    signal_id = _new_signal(value)
    return ReadSignal(signal_id), WriteSignal(signal_id)


def create_rw_signal(value: T) -> RwSignal[T]:
    """Create a read-write signal in the current scope."""
    return RwSignal(_new_signal(value))


def create_effect(f: Callable[[Optional[T]], T]) -> None:
    """Run ``f`` now and again whenever a signal it read changes.

    ``f`` receives the value it returned on its previous run (None at first).
    """
    effect = _Effect(next_id(), f)
    runtime().set_scope(effect.id)
    run_effect(effect)


def create_stateful_updater(
    compute: Callable[[Optional[S]], tuple[R, S]],
    on_change: Callable[[R, S], S],
) -> R:
    """Run ``compute`` now and return its result; on change pass it to ``on_change``."""
    rt = runtime()
    effect = _UpdaterEffect(next_id(), compute, on_change)
    rt.set_scope(effect.id)
    rt.current_effect = effect
    try:
        with rt.scoped(effect.id):
            rt.track_scope(effect.id)
            result, state = compute(None)
        effect.value = state
    finally:
        rt.current_effect = None
    return result


def create_updater(compute: Callable[[], R], on_change: Callable[[R], Any]) -> R:
    """Run ``compute`` now and return its result; later results go to ``on_change``."""
    return create_stateful_updater(
        lambda _state: (compute(), None),
        lambda result, _state: on_change(result),
    )


def untrack(f: Callable[[], R]) -> R:
    """Call ``f`` without subscribing the current effect to what it reads."""
    rt = runtime()
    previous, rt.current_effect = rt.current_effect, None
    try:
        return f()
    finally:
        rt.current_effect = previous


def batch(f: Callable[[], R]) -> R:
    """Call ``f``, deferring effect runs until the outermost batch ends."""
    rt = runtime()
    if rt.batching:
        return f()
    rt.batching = True
    try:
        result = f()
    finally:
        rt.batching = False
    rt.run_pending_effects()
    return result
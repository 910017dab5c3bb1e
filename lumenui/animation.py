"""Animations: timing, repetition, easing and property updates."""

from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Optional

from .anim_prop import AnimatedProp, AnimDirection, AnimPropKind, AnimValue, Color
from .easing import Easing, EasingFn, EasingMode, assert_valid_time
from .reactive import create_effect

_anim_ids = itertools.count(1)
_anim_id_lock = threading.Lock()
_local = threading.local()


def _pending_messages() -> list["AnimUpdateMsg"]:
    messages = getattr(_local, "messages", None)
    if messages is None:
        messages = []
        _local.messages = messages
    return messages


def take_update_messages() -> list["AnimUpdateMsg"]:
    """Return and clear the property updates queued on this thread."""
    messages = _pending_messages()
    taken = list(messages)
    messages.clear()
    return taken


@dataclass(frozen=True, order=True)
class AnimId:
    """Identifies an animation."""

    value: int

    @classmethod
    def next(cls) -> "AnimId":
        """A fresh, increasing id."""
        with _anim_id_lock:
            return cls(next(_anim_ids))

    def update_prop(self, kind: AnimPropKind, val: AnimValue) -> None:
        """Queue a new target value for a property of this animation."""
        _pending_messages().append(AnimUpdateMsg(self, kind, val))

    def update_style_prop(self, prop: Hashable, val: Any) -> None:
        """Queue a new target value for the style property ``prop``."""
        self.update_prop(AnimPropKind.style(prop), AnimValue.of_prop(val))


@dataclass(frozen=True)
class AnimUpdateMsg:
    """A new target value for one animated property."""

    id: AnimId
    kind: AnimPropKind
    val: AnimValue


class AnimStateKind(Enum):
    IDLE = "idle"
    PASS_IN_PROGRESS = "pass_in_progress"
    PASS_FINISHED = "pass_finished"
    COMPLETED = "completed"


@dataclass(frozen=True)
class AnimState:
    """Where an animation is; times are in seconds on the monotonic clock."""

    kind: AnimStateKind
    started_on: Optional[float] = None
    elapsed: Optional[float] = None

    @classmethod
    def idle(cls) -> "AnimState":
        return cls(AnimStateKind.IDLE)

    @classmethod
    def in_progress(cls, started_on: float, elapsed: float = 0.0) -> "AnimState":
        return cls(AnimStateKind.PASS_IN_PROGRESS, started_on, elapsed)

    @classmethod
    def finished(cls, elapsed: float) -> "AnimState":
        return cls(AnimStateKind.PASS_FINISHED, elapsed=elapsed)

    @classmethod
    def completed(cls, elapsed: Optional[float]) -> "AnimState":
        return cls(AnimStateKind.COMPLETED, elapsed=elapsed)


@dataclass(frozen=True)
class RepeatMode:
    """How many passes an animation makes; ``times=None`` loops forever."""

    times: Optional[int] = 1

    @classmethod
    def forever(cls) -> "RepeatMode":
        return cls(None)

    @classmethod
    def count(cls, times: int) -> "RepeatMode":
        return cls(times)

    @property
    def loops_forever(self) -> bool:
        return self.times is None


class Animation:
    """An animation of one or more properties; durations are in seconds."""

    def __init__(self) -> None:
        self.id = AnimId.next()
        self.state = AnimState.idle()
        self.easing = Easing()
        self.skip: Optional[float] = None
        self.repeat_mode = RepeatMode.count(1)
        self.repeat_count = 0
        self.animated_props: dict[AnimPropKind, AnimatedProp] = {}
        self._auto_reverse = False
        self._duration = 1.0

    def duration(self, duration: float) -> "Animation":
        self._duration = duration
        return self

    def is_idle(self) -> bool:
        return self.state_kind() is AnimStateKind.IDLE

    def is_in_progress(self) -> bool:
        return self.state_kind() is AnimStateKind.PASS_IN_PROGRESS

    def is_completed(self) -> bool:
        return self.state_kind() is AnimStateKind.COMPLETED

    def is_auto_reverse(self) -> bool:
        return self._auto_reverse

    def _follow(self, compute: Callable[[], Any], push: Callable[[Any], None]) -> "Animation":
        create_effect(lambda _prev: push(compute()))
        return self

    def border_radius(self, border_radius_fn: Callable[[], float]) -> "Animation":
        return self._follow(
            border_radius_fn, lambda v: self.id.update_style_prop("border_radius", float(v))
        )

    def color(self, color_fn: Callable[[], Color]) -> "Animation":
        return self._follow(color_fn, lambda v: self.id.update_style_prop("color", v))

    def border_color(self, border_color_fn: Callable[[], Color]) -> "Animation":
        return self._follow(
            border_color_fn, lambda v: self.id.update_style_prop("border_color", v)
        )

    def background(self, bg_fn: Callable[[], Color]) -> "Animation":
        return self._follow(bg_fn, lambda v: self.id.update_style_prop("background", v))

    def width(self, width_fn: Callable[[], float]) -> "Animation":
        return self._follow(
            width_fn, lambda v: self.id.update_prop(AnimPropKind.WIDTH, AnimValue.of_float(v))
        )

    def height(self, height_fn: Callable[[], float]) -> "Animation":
        return self._follow(
            height_fn,
            lambda v: self.id.update_prop(AnimPropKind.HEIGHT, AnimValue.of_float(v)),
        )

    def auto_reverse(self, auto_rev: bool) -> "Animation":
        self._auto_reverse = auto_rev
        return self

    def repeat(self, repeat: bool) -> "Animation":
        """Loop forever, or make a single pass."""
        self.repeat_mode = RepeatMode.forever() if repeat else RepeatMode.count(1)
        return self

    def repeat_times(self, times: int) -> "Animation":
        """Make ``times`` passes before completing."""
        self.repeat_mode = RepeatMode.count(times)
        return self

    def easing_fn(self, easing_fn: EasingFn) -> "Animation":
        self.easing.func = easing_fn
        return self

    def ease_mode(self, mode: EasingMode) -> "Animation":
        self.easing.mode = mode
        return self

    def ease_in(self) -> "Animation":
        return self.ease_mode(EasingMode.IN)

    def ease_out(self) -> "Animation":
        return self.ease_mode(EasingMode.OUT)

    def ease_in_out(self) -> "Animation":
        return self.ease_mode(EasingMode.IN_OUT)

    def begin(self) -> None:
        """Start the first pass now."""
        self.repeat_count = 0
        self.state = AnimState.in_progress(time.monotonic())

    def stop(self) -> None:
        """Complete a pass that is in progress; other states are left alone."""
        state = self.state
        if state.kind is AnimStateKind.PASS_IN_PROGRESS:
            elapsed = state.elapsed + (time.monotonic() - state.started_on)
            self.state = AnimState.completed(elapsed)

    def state_kind(self) -> AnimStateKind:
        return self.state.kind

    def elapsed(self) -> Optional[float]:
        """Seconds spent in the current pass, or None when idle."""
        state = self.state
        if state.kind is AnimStateKind.PASS_IN_PROGRESS:
            return state.elapsed + (time.monotonic() - state.started_on)
        return state.elapsed

    def advance(self) -> None:
        """Move the state machine one step forward."""
        state = self.state
        if state.kind is AnimStateKind.IDLE:
            self.begin()
        elif state.kind is AnimStateKind.PASS_IN_PROGRESS:
            elapsed = state.elapsed + (time.monotonic() - state.started_on)
            if elapsed >= self._duration:
                self.state = AnimState.finished(elapsed)
        elif state.kind is AnimStateKind.PASS_FINISHED:
            if self.repeat_mode.loops_forever:
                self.state = AnimState.in_progress(time.monotonic())
                return
            self.repeat_count += 1
            if self.repeat_count >= self.repeat_mode.times:
                self.state = AnimState.completed(state.elapsed)
            else:
                self.state = AnimState.in_progress(time.monotonic())

    def animate_prop(self, elapsed: float, prop_kind: AnimPropKind) -> AnimValue:
        """The value of a property after ``elapsed`` seconds of the pass."""
        prop = self.animated_props[prop_kind]
        if self.skip is not None:
            elapsed += self.skip
        if self._duration == 0:
            return prop.from_value()
        elapsed = min(elapsed, self._duration)
        t = self.easing.ease(elapsed / self._duration)
        assert_valid_time(t)
        if self._auto_reverse:
            if t > 0.5:
                return prop.animate(t * 2.0 - 1.0, AnimDirection.BACKWARD)
            return prop.animate(t * 2.0, AnimDirection.FORWARD)
        return prop.animate(t, AnimDirection.FORWARD)


def animation() -> Animation:
    """A new idle animation: one pass of one second, linear easing."""
    return Animation()
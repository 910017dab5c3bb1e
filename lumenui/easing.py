"""Easing curves that shape how an animation moves through time."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from enum import Enum


class EasingMode(Enum):
    """How an easing curve is applied over the course of an animation."""

    IN = "in"
    """Follow the curve as it is."""
    OUT = "out"
    """Mirror the curve: one minus the curve at the reversed time."""
    IN_OUT = "in_out"
    """Use IN for the first half and OUT for the second half."""


class EasingFn(Enum):
    """The shape of an easing curve."""

    LINEAR = "linear"
    BACK = "back"
    BOUNCE = "bounce"
    CIRCLE = "circle"
    ELASTIC = "elastic"
    EXPONENTIAL = "exponential"
    POWER = "power"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"
    QUARTIC = "quartic"
    QUINTIC = "quintic"
    SINE = "sine"


_UNSUPPORTED = frozenset({EasingFn.POWER, EasingFn.BACK, EasingFn.BOUNCE})


def assert_valid_time(time: float) -> None:
    """Reject a time value that is not comparable at all (NaN)."""
    if not (time >= 0.0 or time <= 1.0):
        raise ValueError(f"invalid animation time: {time!r}")


def elastic_easing(time: float) -> float:
    """A spring-like curve that oscillates before settling."""
    c4 = (2.0 * math.pi) / 3.0
    if time == 0.0:
        return 0.0
    if abs(1.0 - time) < sys.float_info.epsilon:
        return 1.0
    return -(2.0 ** (10.0 * time - 10.0) * math.sin((time * 10.0 - 10.75) * c4))


@dataclass
class Easing:
    """An easing curve together with the mode it is applied in."""

    mode: EasingMode = EasingMode.IN
    func: EasingFn = EasingFn.LINEAR

    def apply_easing_fn(self, time: float) -> float:
        """Evaluate the bare curve at ``time``."""
        assert_valid_time(time)
        func = self.func
        if func in _UNSUPPORTED:
            raise ValueError(f"easing function {func.value!r} is not supported")
        if func is EasingFn.LINEAR:
            return time
        if func is EasingFn.CIRCLE:
            return 1.0 - math.sqrt(1.0 - time**2)
        if func is EasingFn.ELASTIC:
            return elastic_easing(time)
        if func is EasingFn.EXPONENTIAL:
            return 0.0 if time == 0.0 else 2.0 ** (10.0 * time - 10.0)
        if func is EasingFn.QUADRATIC:
            return time**2.0
        if func is EasingFn.CUBIC:
            return time**3.0
        if func is EasingFn.QUARTIC:
            return time**4.0
        if func is EasingFn.QUINTIC:
            return time**5.0
        return 1.0 - math.cos((time * math.pi) / 2.0)

    def ease(self, time: float) -> float:
        """Evaluate the curve at ``time`` according to the mode."""
        assert_valid_time(time)
        if self.mode is EasingMode.IN:
            return self.apply_easing_fn(time)
        if self.mode is EasingMode.OUT:
            return 1.0 - self.apply_easing_fn(1.0 - time)
        if time < 0.5:
            return self.apply_easing_fn(time * 2.0) / 2.0
        return 1.0 - self.apply_easing_fn(2.0 - time * 2.0) / 2.0
"""Animated property values and the interpolation between them."""

from __future__ import annotations

import struct
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Hashable

from .easing import assert_valid_time


@dataclass(frozen=True)
class Color:
    """An 8-bit-per-channel RGBA colour."""

    r: int
    g: int
    b: int
    a: int = 255


class AnimDirection(Enum):
    """Whether an animation runs from start to end or back."""

    FORWARD = "forward"
    BACKWARD = "backward"


class SizeUnit(Enum):
    """The unit of an animated size."""

    PX = "px"
    PCT = "pct"


class AnimValueKind(Enum):
    FLOAT = "float"
    COLOR = "color"
    PROP = "prop"


@dataclass(frozen=True)
class AnimValue:
    """A value produced by an animation step."""

    kind: AnimValueKind
    value: Any

    @classmethod
    def of_float(cls, value: float) -> "AnimValue":
        return cls(AnimValueKind.FLOAT, float(value))

    @classmethod
    def of_color(cls, value: Color) -> "AnimValue":
        return cls(AnimValueKind.COLOR, value)

    @classmethod
    def of_prop(cls, value: Any) -> "AnimValue":
        return cls(AnimValueKind.PROP, value)

    def get_f32(self) -> float:
        """The value as a number rounded to single precision."""
        return struct.unpack("f", struct.pack("f", self.get_f64()))[0]

    def get_f64(self) -> float:
        """The value as a number."""
        if self.kind is AnimValueKind.FLOAT:
            return self.value
        if self.kind is AnimValueKind.PROP and _is_number(self.value):
            return float(self.value)
        raise TypeError(f"{self.kind.value} animation value is not a number")

    def get_color(self) -> Color:
        """The value as a colour."""
        if self.kind is not AnimValueKind.FLOAT and isinstance(self.value, Color):
            return self.value
        raise TypeError(f"{self.kind.value} animation value is not a color")

    def get_any(self) -> Any:
        """The raw value of a style property."""
        if self.kind is AnimValueKind.PROP:
            return self.value
        raise TypeError(f"{self.kind.value} animation value is not a property value")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_u8(value: float) -> int:
    if value != value:
        return 0
    return max(0, min(255, int(value)))


@dataclass(frozen=True)
class AnimPropKind:
    """Which property an animation drives; style properties carry their key."""

    name: str
    prop: Hashable = None

    SCALE: ClassVar["AnimPropKind"]
    WIDTH: ClassVar["AnimPropKind"]
    HEIGHT: ClassVar["AnimPropKind"]

    @classmethod
    def style(cls, prop: Hashable) -> "AnimPropKind":
        """The kind for the style property ``prop``."""
        return cls("prop", prop)


AnimPropKind.SCALE = AnimPropKind("scale")
AnimPropKind.WIDTH = AnimPropKind("width")
AnimPropKind.HEIGHT = AnimPropKind("height")


@dataclass(frozen=True)
class AnimatedProp:
    """A property animated between two values."""

    kind: AnimPropKind
    from_: Any
    to: Any
    unit: SizeUnit = SizeUnit.PX

    @classmethod
    def width(cls, from_: float, to: float, unit: SizeUnit = SizeUnit.PX) -> "AnimatedProp":
        return cls(AnimPropKind.WIDTH, from_, to, unit)

    @classmethod
    def height(cls, from_: float, to: float, unit: SizeUnit = SizeUnit.PX) -> "AnimatedProp":
        return cls(AnimPropKind.HEIGHT, from_, to, unit)

    @classmethod
    def scale(cls, from_: float, to: float) -> "AnimatedProp":
        return cls(AnimPropKind.SCALE, from_, to)

    @classmethod
    def style(cls, prop: Hashable, from_: Any, to: Any) -> "AnimatedProp":
        return cls(AnimPropKind.style(prop), from_, to)

    def from_value(self) -> AnimValue:
        """The starting value of the animation."""
        name = self.kind.name
        if name == "prop":
            return AnimValue.of_prop(self.from_)
        if name in ("width", "height"):
            return AnimValue.of_float(self.from_)
        raise ValueError("scale animation is not supported")

    def animate_float(
        self, from_: float, to: float, time: float, direction: AnimDirection
    ) -> float:
        """Interpolate linearly between two numbers."""
        assert_valid_time(time)
        if direction is AnimDirection.BACKWARD:
            from_, to = to, from_
        if time == 0.0:
            return from_
        if abs(1.0 - time) < sys.float_info.epsilon:
            return to
        if abs(from_ - to) < sys.float_info.epsilon:
            return from_
        return from_ * (1.0 - time) + to * time

    def animate_usize(self, from_: int, to: int, time: float, direction: AnimDirection) -> int:
        """Interpolate between two byte values, rounding away from the start."""
        assert_valid_time(time)
        if direction is AnimDirection.BACKWARD:
            from_, to = to, from_
        if time == 0.0:
            return from_
        if abs(1.0 - time) < sys.float_info.epsilon:
            return to
        if from_ == to:
            return from_
        value = from_ * (1.0 - time) + to * time
        return _to_u8(value + 0.5 if to >= from_ else value - 0.5)

    def animate_color(
        self, from_: Color, to: Color, time: float, direction: AnimDirection
    ) -> Color:
        """Interpolate each channel of two colours."""
        return Color(
            r=self.animate_usize(from_.r, to.r, time, direction),
            g=self.animate_usize(from_.g, to.g, time, direction),
            b=self.animate_usize(from_.b, to.b, time, direction),
            a=self.animate_usize(from_.a, to.a, time, direction),
        )

    def animate(self, time: float, direction: AnimDirection) -> AnimValue:
        """The value of the property at eased ``time``."""
        name = self.kind.name
        if name == "prop":
            return AnimValue.of_prop(self._animate_style(time, direction))
        if name in ("width", "height"):
            return AnimValue.of_float(self.animate_float(self.from_, self.to, time, direction))
        raise ValueError("scale animation is not supported")

    def _animate_style(self, time: float, direction: AnimDirection) -> Any:
        from_, to = self.from_, self.to
        if isinstance(from_, Color):
            if not isinstance(to, Color):
                raise TypeError(f"mismatched values for {self.kind.prop!r}")
            return self.animate_color(from_, to, time, direction)
        if _is_number(from_):
            if not _is_number(to):
                raise TypeError(f"mismatched values for {self.kind.prop!r}")
            return self.animate_float(from_, to, time, direction)
        if from_ is None:
            raise ValueError(f"no starting value for {self.kind.prop!r}")
        raise TypeError(f"unknown type for {self.kind.prop!r}")
"""Reactive signals, effects, scopes, context, easing and property animations."""

__version__ = "0.1.0"

__all__ = ["reactive", "scope", "context", "easing", "anim_prop", "animation"]
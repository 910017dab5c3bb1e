# lumenui

A small reactive core for user interfaces (signals, effects, scopes, memos,
triggers and context), plus a model of property animations with easing.

## Installation

```
pip install lumenui
```

The package has no runtime dependencies.

## Signals and effects (`lumenui.reactive`)

A signal holds a value. An effect runs at once and runs again each time a
signal it read is set.

```python
from lumenui.reactive import batch, create_effect, create_rw_signal

name = create_rw_signal("John")
age = create_rw_signal(20)

create_effect(lambda _prev: print(name.get(), age.get()))

name.set("Mary")                              # the effect runs again
batch(lambda: (name.set("John"), age.set(21)))  # one run for both changes
```

- `create_signal(value)` returns a `(ReadSignal, WriteSignal)` pair;
  `create_rw_signal(value)` returns an `RwSignal`, which can hand out
  `read_only()` and `write_only()` halves.
- `get()` and `with_(f)` subscribe the running effect; `get_untracked()` and
  `with_untracked(f)` do not. `track()` only subscribes.
- `set(value)` stores a value; `update(f)` stores `f(old)`. `try_update(f)`
  expects `f` to return `(new_value, result)` and returns `result`.
- The function given to `create_effect` receives the value it returned on its
  previous run (`None` the first time).
- `untrack(f)` calls `f` without subscribing the running effect to what it
  reads. `batch(f)` defers effect runs until the outermost batch ends; each
  effect then runs once.
- `create_updater(compute, on_change)` runs `compute` now and returns its
  result; when a signal read by `compute` changes, the new result is passed
  to `on_change`. `create_stateful_updater` does the same while threading a
  state value through both functions.
- Reading or writing a signal that has been disposed through `get`, `with_`,
  `track` or a `WriteSignal` raises `LookupError`. `RwSignal.set`,
  `RwSignal.update` and `WriteSignal.try_set` ignore a disposed signal;
  `try_get_untracked` and `try_with_untracked` give `None` for it.

Each thread has its own `Runtime`, returned by `runtime()`.

## Scopes, memos and triggers (`lumenui.scope`)

```python
from lumenui.scope import Scope, create_memo, create_trigger

scope = Scope.current().create_child()
count = scope.create_rw_signal(1)
doubled = scope.create_memo(lambda _prev: count.get() * 2)
doubled.get_untracked()   # 2
scope.dispose()           # drops every signal and effect made in the scope
```

- `with_scope(scope, f)` calls `f` with `scope` as the current scope.
- `as_child_of_current_scope(f)` wraps `f` so that each call runs in a new
  child scope; the wrapper returns `(result, child_scope)`.
- A `Memo` reruns its readers only when its newly computed value differs
  from the previous one.
- A `Trigger` carries no value: `track()` subscribes the running effect,
  `notify()` reruns the effects that track it.

## Context (`lumenui.context`)

```python
from lumenui.context import provide_context, use_context

provide_context(my_theme)
theme = use_context(type(my_theme))   # None if nothing of that exact type was provided
```

## Animations

### Easing (`lumenui.easing`)

`Easing(mode, func)` maps a time in `[0, 1]` to progress. `EasingMode` is
`IN`, `OUT` or `IN_OUT`; `EasingFn` is one of `LINEAR`, `CIRCLE`, `ELASTIC`,
`EXPONENTIAL`, `QUADRATIC`, `CUBIC`, `QUARTIC`, `QUINTIC` and `SINE`.
`POWER`, `BACK` and `BOUNCE` are listed but raise `ValueError` when used.

### Property values (`lumenui.anim_prop`)

`AnimatedProp.width`, `.height` and `.style(prop, from_, to)` describe a
property moving between two values. `animate(time, direction)` interpolates
numbers linearly and `Color` values channel by channel, `FORWARD` or
`BACKWARD`, and returns an `AnimValue`. Scale animations raise `ValueError`.

### Animation state (`lumenui.animation`)

```python
from lumenui.anim_prop import AnimatedProp, AnimPropKind
from lumenui.animation import animation, take_update_messages
from lumenui.easing import EasingFn

anim = (
    animation()
    .width(lambda: 400.0)       # queues a width update message
    .easing_fn(EasingFn.CUBIC)
    .ease_in_out()
    .auto_reverse(True)
    .duration(2.0)              # seconds
)
messages = take_update_messages()   # [AnimUpdateMsg(id=..., kind=AnimPropKind.WIDTH, ...)]

anim.animated_props[AnimPropKind.WIDTH] = AnimatedProp.width(0.0, 400.0)
anim.animate_prop(1.0, AnimPropKind.WIDTH).get_f64()

anim.advance()              # Idle -> pass in progress
anim.is_in_progress()       # True
```

Durations and elapsed times are seconds on the monotonic clock. `advance()`
steps the state through idle, pass in progress, pass finished and completed;
`repeat(True)` loops forever and `repeat_times(n)` makes `n` passes.
`border_radius`, `color`, `border_color`, `background`, `width` and `height`
each install an effect that queues an `AnimUpdateMsg` whenever the given
function's value changes; `take_update_messages()` returns and clears the
messages queued on the current thread.

## What this package does not do

There are no windows, views, layout, styling, rendering or event loop here.
Animation update messages are only queued; nothing in the package applies
them to anything on screen, and nothing advances animations on a timer.

## Running the tests

```
pip install lumenui[test]
pytest
```
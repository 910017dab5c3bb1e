from unittest.mock import patch

import pytest

from lumenui.anim_prop import AnimatedProp, AnimPropKind, AnimValue, Color
from lumenui.animation import (
    AnimId,
    AnimStateKind,
    AnimUpdateMsg,
    RepeatMode,
    animation,
    take_update_messages,
)
from lumenui.easing import EasingFn, EasingMode
from lumenui.reactive import create_rw_signal


class _Clock:
    def __init__(self):
        self.now = 100.0


@pytest.fixture
def clock():
    c = _Clock()
    with patch("time.monotonic", side_effect=lambda: c.now):
        yield c


@pytest.fixture(autouse=True)
def _drain_messages():
    take_update_messages()
    yield
    take_update_messages()


def test_new_animation_is_idle():
    anim = animation()
    assert anim.is_idle()
    assert anim.elapsed() is None
    assert anim.repeat_mode == RepeatMode.count(1)
    assert not anim.is_auto_reverse()


def test_anim_ids_increase():
    first = AnimId.next()
    second = AnimId.next()
    assert second > first
    assert animation().id != animation().id


def test_advance_from_idle_begins(clock):
    anim = animation()
    anim.advance()
    assert anim.is_in_progress()
    assert anim.elapsed() == 0.0


def test_single_pass_completes(clock):
    anim = animation().duration(1.0)
    anim.begin()
    clock.now += 0.25
    anim.advance()
    assert anim.is_in_progress()
    assert anim.elapsed() == pytest.approx(0.25)
    clock.now += 1.0
    anim.advance()
    assert anim.state_kind() is AnimStateKind.PASS_FINISHED
    finished = anim.elapsed()
    assert finished == pytest.approx(1.25)
    anim.advance()
    assert anim.is_completed()
    assert anim.elapsed() == finished
    anim.advance()
    assert anim.is_completed()


def test_repeat_times(clock):
    anim = animation().duration(1.0).repeat_times(2)
    anim.begin()
    clock.now += 2.0
    anim.advance()
    anim.advance()
    assert anim.is_in_progress()
    assert anim.repeat_count == 1
    clock.now += 2.0
    anim.advance()
    anim.advance()
    assert anim.is_completed()
    assert anim.repeat_count == 2


def test_repeat_forever_never_completes(clock):
    anim = animation().duration(1.0).repeat(True)
    assert anim.repeat_mode.loops_forever
    anim.begin()
    for _ in range(5):
        clock.now += 2.0
        anim.advance()
        assert anim.state_kind() is AnimStateKind.PASS_FINISHED
        anim.advance()
        assert anim.is_in_progress()
    assert anim.repeat(False).repeat_mode == RepeatMode.count(1)


def test_stop_in_progress_completes(clock):
    anim = animation()
    anim.begin()
    clock.now += 0.5
    anim.stop()
    assert anim.is_completed()
    assert anim.elapsed() == pytest.approx(0.5)


def test_stop_when_idle_does_nothing():
    anim = animation()
    anim.stop()
    assert anim.is_idle()


def test_builders_chain():
    anim = animation().easing_fn(EasingFn.CUBIC).ease_in_out().auto_reverse(True)
    assert anim.easing.func is EasingFn.CUBIC
    assert anim.easing.mode is EasingMode.IN_OUT
    assert anim.is_auto_reverse()
    assert anim.ease_out().easing.mode is EasingMode.OUT
    assert anim.ease_in().easing.mode is EasingMode.IN


def test_width_queues_message():
    anim = animation().width(lambda: 10.0)
    messages = take_update_messages()
    assert messages == [AnimUpdateMsg(anim.id, AnimPropKind.WIDTH, AnimValue.of_float(10.0))]
    assert take_update_messages() == []


def test_height_follows_signal():
    size = create_rw_signal(200.0)
    anim = animation().height(lambda: size.get())
    size.set(500.0)
    values = [m.val.get_f64() for m in take_update_messages() if m.id == anim.id]
    assert values == [200.0, 500.0]


def test_style_messages():
    cyan = Color(0, 255, 255)
    anim = (
        animation()
        .border_radius(lambda: 40.0)
        .color(lambda: cyan)
        .border_color(lambda: cyan)
        .background(lambda: cyan)
    )
    messages = take_update_messages()
    assert [m.kind for m in messages] == [
        AnimPropKind.style("border_radius"),
        AnimPropKind.style("color"),
        AnimPropKind.style("border_color"),
        AnimPropKind.style("background"),
    ]
    assert all(m.id == anim.id for m in messages)
    assert messages[0].val.get_f64() == 40.0
    assert messages[3].val.get_color() == cyan


def test_animate_prop_endpoints_and_clamp():
    anim = animation().duration(2.0)
    anim.animated_props[AnimPropKind.WIDTH] = AnimatedProp.width(0.0, 10.0)
    assert anim.animate_prop(0.0, AnimPropKind.WIDTH).get_f64() == 0.0
    assert anim.animate_prop(2.0, AnimPropKind.WIDTH).get_f64() == 10.0
    assert anim.animate_prop(5.0, AnimPropKind.WIDTH).get_f64() == 10.0
    mid = anim.animate_prop(1.0, AnimPropKind.WIDTH).get_f64()
    assert 0.0 < mid < 10.0


def test_animate_prop_zero_duration_gives_start():
    anim = animation().duration(0.0)
    anim.animated_props[AnimPropKind.HEIGHT] = AnimatedProp.height(3.0, 9.0)
    assert anim.animate_prop(1.0, AnimPropKind.HEIGHT).get_f64() == 3.0


def test_animate_prop_auto_reverse():
    anim = animation().duration(2.0).auto_reverse(True)
    anim.animated_props[AnimPropKind.WIDTH] = AnimatedProp.width(0.0, 10.0)
    assert anim.animate_prop(1.0, AnimPropKind.WIDTH).get_f64() == 10.0
    assert anim.animate_prop(2.0, AnimPropKind.WIDTH).get_f64() == 0.0


def test_animate_prop_skip():
    anim = animation().duration(2.0)
    anim.skip = 2.0
    anim.animated_props[AnimPropKind.WIDTH] = AnimatedProp.width(0.0, 10.0)
    assert anim.animate_prop(0.0, AnimPropKind.WIDTH).get_f64() == 10.0


def test_animate_prop_missing_kind():
    with pytest.raises(KeyError):
        animation().animate_prop(0.5, AnimPropKind.WIDTH)
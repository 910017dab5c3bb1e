import pytest

from lumenui.reactive import (
    ReadSignal,
    RwSignal,
    WriteSignal,
    batch,
    create_effect,
    create_rw_signal,
    create_signal,
    create_stateful_updater,
    create_updater,
    next_id,
    runtime,
    untrack,
)


def _counting_effect(*signals):
    count = [0]

    def effect(_prev):
        for s in signals:
            s.track()
        count[0] += 1

    create_effect(effect)
    return count


def test_batch_simple():
    name = create_rw_signal("John")
    age = create_rw_signal(20)
    count = _counting_effect(name, age)
    assert count[0] == 1
    name.set("Mary")
    assert count[0] == 2
    age.set(21)
    assert count[0] == 3

    def body():
        name.set("John")
        age.set(20)

    batch(body)
    assert count[0] == 4


def test_batch_batch():
    name = create_rw_signal("John")
    age = create_rw_signal(20)
    count = _counting_effect(name, age)
    assert count[0] == 1

    def inner():
        name.set("John")
        age.set(20)

    def outer():
        name.set("Mary")
        age.set(21)
        batch(inner)

    batch(outer)
    assert count[0] == 2


def test_batch_returns_result():
    assert batch(lambda: 42) == 42


def test_effect_receives_previous_value():
    seen = []
    sig = create_rw_signal(1)

    def effect(prev):
        seen.append(prev)
        return sig.get() * 10

    create_effect(effect)
    sig.set(2)
    sig.set(3)
    assert sig.get_untracked() == 3
    assert seen == [None, 10, 20]


def test_effect_retracks_only_last_run_signals():
    cond = create_rw_signal(True)
    a = create_rw_signal(0)
    b = create_rw_signal(0)
    runs = [0]

    def effect(_prev):
        runs[0] += 1
        (a if cond.get() else b).get()

    create_effect(effect)
    assert runs[0] == 1
    cond.set(False)
    assert cond.get_untracked() is False
    assert runs[0] == 2
    a.set(5)
    assert a.get_untracked() == 5
    assert runs[0] == 2
    b.set(5)
    assert b.get_untracked() == 5
    assert runs[0] == 3


def test_untrack_does_not_subscribe():
    sig = create_rw_signal(0)
    values = []

    def effect(_prev):
        values.append(untrack(sig.get))

    create_effect(effect)
    sig.set(1)
    assert sig.get_untracked() == 1
    assert values == [0]


def test_untrack_returns_value():
    sig = create_rw_signal("value")
    assert untrack(sig.get) == "value"


def test_create_signal_halves():
    read, write = create_signal(3)
    assert read.get() == 3
    write.set(4)
    assert read.get_untracked() == 4
    write.update(lambda v: v + 1)
    assert read.with_(lambda v: v * 2) == 10
    assert read.with_untracked(lambda v: v) == 5
    assert read.id == write.id


def test_rw_signal_read_write_only():
    sig = create_rw_signal([1])
    assert sig.read_only() == ReadSignal(sig.id)
    assert sig.write_only() == WriteSignal(sig.id)
    assert sig == RwSignal(sig.id)
    sig.write_only().set([2])
    assert sig.read_only().get() == [2]


def test_update_and_try_update():
    sig = create_rw_signal(10)
    sig.update(lambda v: v * 2)
    assert sig.get() == 20
    result = sig.try_update(lambda v: (v + 1, "done"))
    assert result == "done"
    assert sig.get_untracked() == 21
    w = sig.write_only()
    assert w.try_update(lambda v: (0, v)) == 21
    assert sig.get() == 0


def test_update_triggers_effect():
    read, write = create_signal(0)
    seen = []
    create_effect(lambda _p: seen.append(read.get()))
    write.update(lambda v: v + 1)
    assert read.get_untracked() == 1
    assert seen == [0, 1]


def test_disposed_signal_behaviour():
    sig = create_rw_signal(1)
    runtime().dispose(sig.id)
    assert sig.try_get_untracked() is None
    assert sig.try_with_untracked(lambda v: v) is None
    sig.set(5)
    assert sig.try_get_untracked() is None
    with pytest.raises(LookupError):
        sig.get()
    with pytest.raises(LookupError):
        sig.write_only().set(2)
    sig.write_only().try_set(2)
    assert sig.try_get_untracked() is None


def test_try_with_untracked_present():
    sig = create_rw_signal(7)
    assert sig.try_with_untracked(lambda v: v + 1) == 8


def test_create_updater():
    sig = create_rw_signal(1)
    changes = []
    initial = create_updater(lambda: sig.get() * 2, changes.append)
    assert initial == 2
    assert changes == []
    sig.set(4)
    assert changes == [8]


def test_create_stateful_updater():
    sig = create_rw_signal(1)
    records = []

    def compute(prev):
        return sig.get(), (prev or 0) + 1

    def on_change(value, state):
        records.append((value, state))
        return state

    assert create_stateful_updater(compute, on_change) == 1
    sig.set(5)
    sig.set(6)
    assert records == [(5, 2), (6, 3)]


def test_pending_effects_deduplicated():
    a = create_rw_signal(0)
    count = _counting_effect(a)

    def body():
        a.set(1)
        a.set(2)
        a.set(3)
        assert len(runtime().pending_effects) == 1

    batch(body)
    assert count[0] == 2
    assert runtime().pending_effects == []


def test_next_id_increases():
    first = next_id()
    second = next_id()
    assert second > first


def test_scoped_restores_scope():
    rt = runtime()
    before = rt.current_scope
    with rt.scoped(12345) as sid:
        assert rt.current_scope == 12345 == sid
    assert rt.current_scope == before


def test_set_scope_registers_child_and_dispose_cascades():
    rt = runtime()
    parent = next_id()
    with rt.scoped(parent):
        sig = create_rw_signal("x")
    assert sig.id in rt.children[parent]
    rt.dispose(parent)
    assert rt.signal(sig.id) is None
    assert parent not in rt.children


def test_track_scope_creates_tracker():
    rt = runtime()
    sid = next_id()
    assert rt.signal(sid) is None
    rt.track_scope(sid)
    assert rt.signal(sid) is not None
    assert rt.signal(sid).id == sid


def test_effect_disposed_with_signal_stops_running():
    sig = create_rw_signal(0)
    rt = runtime()
    scope = next_id()
    runs = [0]

    def effect(_prev):
        runs[0] += 1
        sig.get()

    with rt.scoped(scope):
        create_effect(effect)
    assert len(rt.children[scope]) == 1
    rt.dispose(scope)
    assert scope not in rt.children
    sig.set(1)
    assert sig.get_untracked() == 1
    assert runs[0] == 1
"""Tests for action dispatch, counters and the dispatch stack on Hooks."""

import threading

import pytest

from hookwork.engine import Hooks


class Recorder:
    def __init__(self) -> None:
        self.events = []

    def action_callback(self, *args):
        self.events.append({"action": "action_callback", "args": args})


@pytest.fixture
def hooks():
    return Hooks()


def test_action_runs_callback(hooks):
    done = []
    hooks.add_action("bar", lambda: done.append(True))
    assert hooks.do_action("bar") is None
    assert done == [True]


def test_accepted_args_slices_dispatch_arguments(hooks):
    received = []
    hooks.add_action("act", lambda *args: received.append(args), 10, 2)

    hooks.do_action("act", "x", "y", "z")

    assert received == [("x", "y")]


def test_zero_accepted_args_receives_nothing(hooks):
    recorder = Recorder()
    hooks.add_action("no_args", recorder.action_callback, 33, 0)

    hooks.do_action("no_args", "ignored")

    assert recorder.events[0]["args"] == ()


def test_do_action_ref_array(hooks):
    received = []
    hooks.add_action("ref", lambda a, b: received.append((a, b)), 10, 2)

    hooks.do_action_ref_array("ref", ["one", "two", "three"])

    assert received == [("one", "two")]
    assert hooks.did_action("ref") == 1


def test_mutable_argument_is_shared(hooks):
    """Callbacks see, and may change, the caller's object."""
    context = {"seen": []}
    hooks.add_action("ctx", lambda ctx: ctx["seen"].append("first"))
    hooks.add_action("ctx", lambda ctx: ctx["seen"].append("second"))

    hooks.do_action("ctx", context)

    assert context["seen"] == ["first", "second"]


def test_fire_count_counts_every_dispatch(hooks):
    """The counter moves even when nothing is registered."""
    hooks.do_action("action1")
    assert hooks.fire_count("action1") == 1
    assert hooks.fire_count("action2") == 0

    for _ in range(7):
        hooks.do_action("action2")

    assert hooks.fire_count("action1") == 1
    assert hooks.fire_count("action2") == 7


def test_has_action_lifecycle(hooks):
    func = lambda: None  # noqa: E731

    assert hooks.has_action("tag", func) is False
    hooks.add_action("tag", func)
    assert hooks.has_action("tag", func) == 10
    assert hooks.has_action("tag") is True

    hooks.remove_action("tag", func)
    assert hooks.has_action("tag", func) is False
    assert hooks.has_action("tag") is False


def test_remove_all_actions(hooks):
    hooks.add_action("testAction", len)
    assert hooks.remove_all_actions("testAction") is True
    assert hooks.has_action("testAction") is False


def test_current_hook_and_nesting(hooks):
    seen = {}

    def inner():
        seen["current"] = hooks.current_hook()
        seen["outer_active"] = hooks.is_dispatching("outer")
        seen["inner_active"] = hooks.doing_action("inner")
        seen["other_active"] = hooks.is_dispatching("other")

    def outer():
        seen["before"] = hooks.current_action()
        hooks.do_action("inner")
        seen["after"] = hooks.current_filter()

    hooks.add_action("inner", inner, accepted_args=0)
    hooks.add_action("outer", outer, accepted_args=0)

    assert hooks.current_hook() == ""
    assert hooks.is_dispatching() is False

    hooks.do_action("outer")

    assert seen == {
        "before": "outer",
        "current": "inner",
        "outer_active": True,
        "inner_active": True,
        "other_active": False,
        "after": "outer",
    }
    assert hooks.current_hook() == ""
    assert hooks.doing_filter() is False


def test_filter_inside_action_is_on_the_stack(hooks):
    seen = []
    hooks.add_filter("inside", lambda v: seen.append(hooks.current_hook()) or v)
    hooks.add_action("outside", lambda: hooks.apply_filter("inside", 1))

    hooks.do_action("outside")

    assert seen == ["inside"]


def test_exception_propagates_and_stack_unwinds(hooks):
    """A failing callback aborts the pass but leaves no frame behind."""
    ran = []

    def boom():
        raise RuntimeError("Hook failed!")

    hooks.add_action("fail", boom, 10, 0)
    hooks.add_action("fail", lambda: ran.append(True), 20, 0)

    with pytest.raises(RuntimeError, match="Hook failed!"):
        hooks.do_action("fail")

    assert ran == []
    assert hooks.is_dispatching() is False
    assert hooks.current_hook() == ""
    assert hooks.fire_count("fail") == 1


def test_all_hook_runs_first_with_hook_name(hooks):
    order = []
    hooks.add_action("all", lambda name, *args: order.append(("all", name, args)))
    hooks.add_action("all", lambda name, *args: order.append(("current", hooks.current_hook())))
    hooks.add_action("save", lambda post: order.append(("save", post)))

    hooks.do_action("save", "post-1")

    assert order == [
        ("all", "save", ("post-1",)),
        ("current", "save"),
        ("save", "post-1"),
    ]


def test_all_hook_failure_unwinds_stack(hooks):
    def boom(*args):
        raise ValueError("all failed")

    hooks.add_action("all", boom)

    with pytest.raises(ValueError):
        hooks.do_action("anything")
    assert hooks.is_dispatching() is False


def test_dispatching_all_directly_runs_once(hooks):
    calls = []
    hooks.add_action("all", lambda *args: calls.append(args))

    hooks.do_action("all", "x")

    assert calls == [("x",)]


def test_reset(hooks):
    callback = lambda: None  # noqa: E731
    hooks.add_action("x", callback)
    hooks.do_action("x")

    assert hooks.reset() is hooks
    assert hooks.has_action("x", callback) is False
    assert hooks.fire_count("x") == 0
    assert hooks.current_hook() == ""


def test_instances_are_isolated():
    first, second = Hooks(), Hooks()
    first.add_action("x", len)
    first.do_action("x", "abc")

    assert second.has_action("x") is False
    assert second.fire_count("x") == 0


def test_concurrent_registration_is_serialised(hooks):
    callbacks = [lambda: None for _ in range(400)]

    def register(chunk):
        for callback in chunk:
            hooks.add_action("busy", callback)

    threads = [
        threading.Thread(target=register, args=(callbacks[i::8],)) for i in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(hooks.registered("busy")) == 400


def test_reset_during_dispatch_stops_the_pass(hooks):
    ran = []
    hooks.add_action("x", lambda: hooks.reset(), 10, 0)
    hooks.add_action("x", lambda: ran.append(True), 20, 0)

    hooks.do_action("x")

    assert ran == []
    assert hooks.is_dispatching() is False
    assert hooks.has_action("x") is False

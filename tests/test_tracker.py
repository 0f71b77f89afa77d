import io

from pulith.tracker import ProgressTrackerBuilder


def test_with_len_returns_new_builder():
    base = ProgressTrackerBuilder()
    sized = base.with_len(100)
    assert sized.length == 100
    assert base.length is None


def test_builder_chaining_keeps_all_settings():
    builder = ProgressTrackerBuilder().with_len(10).with_prefix("fetch").with_finish("ok")
    assert (builder.length, builder.prefix, builder.finish) == (10, "fetch", "ok")


def test_step_accumulates_and_chains():
    out = io.StringIO()
    tracker = ProgressTrackerBuilder().with_len(100).build(out)
    returned = tracker.step(10).step(5)
    assert returned is tracker
    assert tracker.count == 15
    assert tracker.total == 100
    tracker.finish()


def test_without_length_is_spinner():
    out = io.StringIO()
    tracker = ProgressTrackerBuilder().build(out)
    tracker.step(3)
    assert tracker.total is None
    assert tracker.count == 3
    tracker.finish()


def test_prefix_is_shown():
    out = io.StringIO()
    tracker = ProgressTrackerBuilder().with_len(8).with_prefix("download").build(out)
    tracker.finish()
    assert "download" in out.getvalue()


def test_finish_message_is_shown():
    out = io.StringIO()
    tracker = ProgressTrackerBuilder().with_len(4).with_finish("complete").build(out)
    tracker.step(4)
    tracker.finish()
    assert "complete" in out.getvalue()


def test_context_manager_finishes():
    out = io.StringIO()
    with ProgressTrackerBuilder().with_len(2).with_finish("all-done").build(out) as tracker:
        tracker.step(2)
    assert "all-done" in out.getvalue()
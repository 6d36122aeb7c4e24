"""
Tests for the tick-driven scheduler and the input gate.
"""

import pytest

from ..engine_core.scheduler import InputGate, Scheduler


class TestScheduler:
    """Tests for Scheduler."""

    def test_nothing_runs_before_deadline(self):
        scheduler = Scheduler()
        ran = []
        scheduler.call_later(0.5, lambda: ran.append("a"))

        assert scheduler.advance(0.4) == 0
        assert ran == []
        assert scheduler.advance(0.1) == 1
        assert ran == ["a"]

    def test_deadline_order_and_fifo_ties(self):
        scheduler = Scheduler()
        ran = []
        scheduler.call_later(0.3, lambda: ran.append("late"))
        scheduler.call_later(0.1, lambda: ran.append("first"))
        scheduler.call_later(0.1, lambda: ran.append("second"))

        scheduler.advance(1.0)
        assert ran == ["first", "second", "late"]

    def test_cancel(self):
        scheduler = Scheduler()
        ran = []
        timer = scheduler.call_later(0.1, lambda: ran.append("x"))
        scheduler.cancel(timer)

        assert scheduler.advance(1.0) == 0
        assert ran == []
        assert not timer.active
        scheduler.cancel(timer)  # second cancel is a no-op

    def test_chained_callbacks_run_in_same_advance(self):
        """A callback scheduling another that is already due runs it too."""
        scheduler = Scheduler()
        ran = []

        def first():
            ran.append(("first", scheduler.now))
            scheduler.call_later(0.2, lambda: ran.append(("second", scheduler.now)))

        scheduler.call_later(0.1, first)
        scheduler.advance(1.0)

        assert [name for name, _ in ran] == ["first", "second"]
        assert ran[0][1] == pytest.approx(0.1)
        assert ran[1][1] == pytest.approx(0.3)
        assert scheduler.now == pytest.approx(1.0)

    def test_pending_and_clear(self):
        scheduler = Scheduler()
        scheduler.call_later(0.2, lambda: None, name="b")
        scheduler.call_later(0.1, lambda: None, name="a")

        assert [t.name for t in scheduler.pending()] == ["a", "b"]
        assert scheduler.has_pending()

        scheduler.clear()
        assert not scheduler.has_pending()

    def test_negative_advance_rejected(self):
        with pytest.raises(ValueError):
            Scheduler().advance(-0.1)


class TestInputGate:

    def test_lock_and_release(self):
        gate = InputGate()
        assert not gate.locked

        gate.lock("preview")
        assert gate.locked
        assert gate.reason == "preview"

        gate.release()
        assert not gate.locked
        assert gate.reason is None

"""Tests for the debounce scheduler."""

import threading

import pytest

from reflex_datatable.debounce import DebounceScheduler
from reflex_datatable.exceptions import GridConfigurationError, GridDisposedError


class TestDebounceScheduler:
    """Tests for DebounceScheduler with a manual clock."""

    def test_fires_after_delay(self, clock):
        received = []
        scheduler = DebounceScheduler(clock.factory)
        scheduler.schedule("a", 300, received.append)
        clock.advance(299)
        assert received == []
        assert scheduler.pending
        clock.advance(1)
        assert received == ["a"]
        assert not scheduler.pending

    def test_burst_delivers_last_value_once(self, clock):
        """Each schedule restarts the wait; only the final value arrives."""
        received = []
        scheduler = DebounceScheduler(clock.factory)
        for value in ("f", "fo", "foo"):
            scheduler.schedule(value, 300, received.append)
            clock.advance(100)
        assert received == []
        clock.advance(300)
        assert received == ["foo"]

    def test_zero_delay_is_synchronous(self, clock):
        received = []
        scheduler = DebounceScheduler(clock.factory)
        scheduler.schedule("now", 0, received.append)
        assert received == ["now"]
        assert clock.timers == []

    def test_zero_delay_supersedes_pending(self, clock):
        received = []
        scheduler = DebounceScheduler(clock.factory)
        scheduler.schedule("late", 300, received.append)
        scheduler.schedule("now", 0, received.append)
        clock.advance(1000)
        assert received == ["now"]

    def test_negative_delay_rejected(self, clock):
        scheduler = DebounceScheduler(clock.factory)
        with pytest.raises(GridConfigurationError):
            scheduler.schedule("x", -1, print)

    def test_cancel(self, clock):
        received = []
        scheduler = DebounceScheduler(clock.factory)
        scheduler.schedule("a", 300, received.append)
        assert scheduler.cancel()
        assert not scheduler.cancel()
        clock.advance(1000)
        assert received == []

    def test_stale_timer_does_nothing(self, clock):
        """A timer that fires after cancel() is ignored."""
        received = []
        scheduler = DebounceScheduler(clock.factory)
        scheduler.schedule("a", 300, received.append)
        timer = clock.timers[0]
        scheduler.cancel()
        timer.callback()
        assert received == []

    def test_flush(self, clock):
        received = []
        scheduler = DebounceScheduler(clock.factory)
        scheduler.schedule("a", 300, received.append)
        assert scheduler.flush()
        assert received == ["a"]
        assert not scheduler.flush()
        clock.advance(1000)
        assert received == ["a"]

    def test_close(self, clock):
        received = []
        scheduler = DebounceScheduler(clock.factory)
        scheduler.schedule("a", 300, received.append)
        scheduler.close()
        clock.advance(1000)
        assert received == []
        assert scheduler.closed
        with pytest.raises(GridDisposedError):
            scheduler.schedule("b", 300, received.append)


class TestThreadTimer:
    """Tests using the default threading.Timer."""

    def test_real_timer_fires(self):
        fired = threading.Event()
        received = []

        def on_fire(value):
            received.append(value)
            fired.set()

        scheduler = DebounceScheduler()
        scheduler.schedule("a", 500, on_fire)
        scheduler.schedule("b", 20, on_fire)
        assert fired.wait(timeout=5)
        assert received == ["b"]
        scheduler.close()

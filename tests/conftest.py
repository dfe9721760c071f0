"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable
from typing import Any

import pytest

from reflex_datatable.config import clear_settings
from reflex_datatable.models import ColumnDescriptor


# =============================================================================
# Manual clock for debounce timers
# =============================================================================


class ManualTimer:
    """Timer that fires only when the owning clock is advanced past it."""

    def __init__(self, clock: "ManualClock", interval: float, callback: Callable[[], None]) -> None:
        self.clock = clock
        self.interval = interval
        self.callback = callback
        self.due: float | None = None
        self.cancelled = False

    def start(self) -> None:
        self.due = self.clock.now + self.interval
        self.clock.timers.append(self)

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """Deterministic stand-in for ``threading.Timer``.

    Pass :attr:`factory` as ``timer_factory`` and call :meth:`advance` with
    milliseconds to fire every timer that became due.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[ManualTimer] = []

    def factory(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        return ManualTimer(self, interval, callback)

    @property
    def live_timers(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and t.due is not None]

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0
        due = sorted(
            (t for t in self.live_timers if t.due <= self.now + 1e-9),
            key=lambda t: t.due,
        )
        for timer in due:
            self.timers.remove(timer)
            if timer.cancelled:
                continue
            timer.callback()


@pytest.fixture
def clock() -> ManualClock:
    """A fresh manual clock."""
    return ManualClock()


# =============================================================================
# Settings isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Drop cached settings and DATATABLE_* variables around every test."""
    for key in list(os.environ):
        if key.startswith("DATATABLE_"):
            monkeypatch.delenv(key, raising=False)
    clear_settings()
    yield
    clear_settings()


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
def loads() -> list[dict[str, Any]]:
    """A small freight-load board: 23 rows with nested pickup data."""
    statuses = ["AVAILABLE", "BOOKED", "CANCELLED"]
    cities = ["Reno", "Boise", "Austin", "Denver"]
    rows = []
    for i in range(1, 24):
        rows.append(
            {
                "id": i,
                "status": statuses[i % 3],
                "rate": 1000 + (i * 37) % 500,
                "pickup": {"city": cities[i % 4]},
            }
        )
    return rows


@pytest.fixture
def load_columns() -> list[ColumnDescriptor]:
    return [
        ColumnDescriptor(field="id"),
        ColumnDescriptor(field="status"),
        ColumnDescriptor(field="rate"),
        ColumnDescriptor(field="pickup.city", header="Pickup"),
    ]


@pytest.fixture
def numbers() -> list[dict[str, Any]]:
    """Rows ``{"id": 1..23, "n": 1..23}``."""
    return [{"id": i, "n": i} for i in range(1, 24)]


@pytest.fixture
def number_columns() -> list[ColumnDescriptor]:
    return [ColumnDescriptor(field="id"), ColumnDescriptor(field="n")]

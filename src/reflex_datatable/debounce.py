"""Debounce scheduler: deliver only the last value of a burst.

Each :meth:`DebounceScheduler.schedule` call supersedes the previous one, so
a burst of keystrokes produces exactly one delivery, carrying the final
value, once the input has been quiet for ``delay_ms``.

Timers come from a ``timer_factory(interval_seconds, callback)`` returning an
object with ``start()`` and ``cancel()``; :class:`threading.Timer` by default.
Tests pass a manual clock instead of sleeping.
"""

import threading
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from reflex_datatable.exceptions import GridConfigurationError, GridDisposedError
from reflex_datatable.log import debug

V = TypeVar("V")


class Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


def _thread_timer(interval: float, callback: Callable[[], None]) -> Timer:
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    return timer


class DebounceScheduler(Generic[V]):
    """Owns at most one pending timer and delivers the last scheduled value.

    A generation counter tags every scheduled delivery.  A timer whose
    generation is no longer current does nothing when it fires, which covers
    the window where :meth:`cancel` runs while the timer thread is already
    starting its callback.

    Example::

        scheduler = DebounceScheduler()
        scheduler.schedule("f", 300, apply)
        scheduler.schedule("fo", 300, apply)
        scheduler.schedule("foo", 300, apply)  # only apply("foo") runs
    """

    def __init__(self, timer_factory: TimerFactory | None = None, name: str = "debounce") -> None:
        self._timer_factory: TimerFactory = timer_factory or _thread_timer
        self._name = name
        self._lock = threading.Lock()
        self._timer: Timer | None = None
        self._generation: int = 0
        self._pending: tuple[V, Callable[[V], Any]] | None = None
        self._closed: bool = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def pending(self) -> bool:
        """Whether a value is waiting to be delivered."""
        with self._lock:
            return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, value: V, delay_ms: int, on_fire: Callable[[V], Any]) -> None:
        """Deliver *value* to *on_fire* after *delay_ms* of quiet.

        Cancels any pending delivery.  ``delay_ms == 0`` delivers
        synchronously before returning.

        Raises:
            GridConfigurationError: If *delay_ms* is negative.
            GridDisposedError: If the scheduler has been closed.
        """
        if delay_ms < 0:
            raise GridConfigurationError("delay_ms must be >= 0", delay_ms=delay_ms)

        with self._lock:
            if self._closed:
                raise GridDisposedError("Cannot schedule on a closed scheduler", name=self._name)
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            if delay_ms > 0:
                self._pending = (value, on_fire)
                self._timer = self._timer_factory(
                    delay_ms / 1000.0, lambda: self._fire(generation)
                )
                self._timer.start()
                debug(f"[Debounce:{self._name}] scheduled in {delay_ms}ms (gen={generation})")
                return

        on_fire(value)

    def cancel(self) -> bool:
        """Discard the pending delivery without firing it.

        Returns:
            ``True`` if something was pending.
        """
        with self._lock:
            had_pending = self._pending is not None
            self._cancel_locked()
            self._generation += 1
        if had_pending:
            debug(f"[Debounce:{self._name}] cancelled")
        return had_pending

    def flush(self) -> bool:
        """Deliver the pending value now instead of waiting.

        Returns:
            ``True`` if a value was delivered.
        """
        with self._lock:
            pending = self._pending
            self._cancel_locked()
            self._generation += 1
        if pending is None:
            return False
        value, on_fire = pending
        on_fire(value)
        return True

    def close(self) -> None:
        """Cancel the pending delivery and refuse further scheduling."""
        self.cancel()
        self._closed = True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            value, on_fire = self._pending
            self._pending = None
            self._timer = None
        debug(f"[Debounce:{self._name}] fired (gen={generation})")
        on_fire(value)

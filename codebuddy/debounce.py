"""Per-key debouncing on timer threads."""
import itertools
import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Runs a callable once input for a key has paused for `delay` seconds.

    Scheduling again for the same key cancels the pending call. Every
    schedule draws a fresh generation from one counter, so a timer that
    already fired before it could be cancelled still drops its work when it
    is no longer the latest one. Keys are only tracked while a call is
    pending.
    """

    def __init__(self, delay: float = 0.5):
        self.delay = delay
        self._timers: dict[str, threading.Timer] = {}
        self._generations: dict[str, int] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def schedule(self, key: str, fn: Callable, *args) -> None:
        """Cancel whatever is pending for `key` and schedule `fn(*args)`."""
        with self._lock:
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
            generation = next(self._counter)
            self._generations[key] = generation

            timer = threading.Timer(self.delay, self._fire, args=(key, generation, fn, args))
            timer.daemon = True
            self._timers[key] = timer
            timer.start()

    def _fire(self, key: str, generation: int, fn: Callable, args: tuple) -> None:
        with self._lock:
            if self._generations.get(key) != generation:
                return
            self._timers.pop(key, None)
            del self._generations[key]
        try:
            fn(*args)
        except Exception:
            logger.exception("Debounced task for %s failed", key)

    def pending(self, key: str) -> bool:
        with self._lock:
            return key in self._timers

    def cancel(self, key: str) -> bool:
        """Cancel the pending call for `key`. Returns True if one was pending."""
        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is None:
                return False
            # A timer already past cancel() finds no generation and drops its work
            self._generations.pop(key, None)
        timer.cancel()
        return True

    def cancel_all(self) -> None:
        with self._lock:
            keys = list(self._timers)
        for key in keys:
            self.cancel(key)

"""Latest-value streams for device heading and location updates."""

import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


class LatestValue:
    """
    Holds the most recent value published by an event source and fans it
    out to subscribers.

    Every publish overwrites the cached value; there is no buffering or
    debouncing, so a burst of sensor events leaves only the last one.
    """

    def __init__(self, initial: Any = None):
        self._value = initial
        self._subscribers: list = []
        self._lock = threading.Lock()

    @property
    def value(self) -> Any:
        return self._value

    def publish(self, value: Any) -> None:
        with self._lock:
            self._value = value
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(value)
            except Exception:
                logger.exception("Subscriber %r failed on %r", callback, value)

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Register callback; returns a function that removes it again."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

"""Thread-safe non-blocking pub/sub bus for simulation-to-host signals."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from concurrent.futures import ThreadPoolExecutor
from threading import Lock, Semaphore
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)

Callback = Callable[[Any], None]
Unsubscribe = Callable[[], None]

# Published once per completed epoch with a ``GenerationStats`` payload.
GENERATION_STATS = "generation_stats"
# Published once when the driver halts, with the error message as payload.
HALTED = "halted"


class EventBus:
    """Deliver simulation events to host callbacks off the tick thread.

    ``publish`` only queues work on a small thread pool, so a slow subscriber
    never stalls the simulation. At most ``max_pending`` callbacks may be
    queued at once; further deliveries are dropped and counted in
    ``dropped``.
    """

    def __init__(self, max_workers: int = 4, max_pending: int = 2048) -> None:
        self._subscribers: dict[str, list[Callback]] = defaultdict(list)
        self._lock = Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="event-bus")
        self._slots = Semaphore(max(1, int(max_pending)))
        self._closed = False
        self.dropped: Counter[str] = Counter()

    def subscribe(self, event_type: str, callback: Callback) -> Unsubscribe:
        """Register ``callback`` and return a function that removes it."""
        with self._lock:
            self._subscribers[event_type].append(callback)
        return lambda: self.unsubscribe(event_type, callback)

    def unsubscribe(self, event_type: str, callback: Callback) -> None:
        with self._lock:
            callbacks = self._subscribers.get(event_type, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def publish(self, event_type: str, payload: Any) -> None:
        with self._lock:
            if self._closed:
                LOGGER.debug("Ignoring '%s' event published after close", event_type)
                return
            callbacks = list(self._subscribers.get(event_type, ()))

        for callback in callbacks:
            if not self._slots.acquire(blocking=False):
                self.dropped[event_type] += 1
                LOGGER.warning("Dropping '%s' event: too many pending callbacks", event_type)
                continue
            future = self._executor.submit(_deliver, event_type, callback, payload)
            future.add_done_callback(lambda _future: self._slots.release())

    def close(self) -> None:
        """Finish queued deliveries and stop the worker threads."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "EventBus":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _deliver(event_type: str, callback: Callback, payload: Any) -> None:
    try:
        callback(payload)
    except Exception:
        LOGGER.exception("Subscriber for '%s' raised", event_type)

"""Cooperative loop that drives recurring sampling tasks."""

from __future__ import annotations

import threading
from typing import List, Optional, Protocol


class LoopSubscriber(Protocol):
    """Anything that performs one bounded pass per tick."""

    def tick(self) -> None:
        """Run one pass."""
        ...


class Loop:
    """Simple pub/sub loop that notifies subscribers on tick().

    Everything runs on the thread that calls tick() or run(); there is no
    internal locking. stop() may be called from a subscriber or from another
    thread to end run().
    """

    def __init__(self, interval: float = 0.001):
        if interval < 0:
            raise ValueError("Loop interval must be >= 0")
        self._interval = interval
        self._tick_count = 0
        self._subscribers: List[LoopSubscriber] = []
        self._stop_event = threading.Event()
        self._running = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def running(self) -> bool:
        return self._running

    def subscribe(self, subscriber: LoopSubscriber) -> None:
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: LoopSubscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def is_subscribed(self, subscriber: LoopSubscriber) -> bool:
        return subscriber in self._subscribers

    def tick(self, cycles: int = 1) -> None:
        if cycles < 0:
            raise ValueError("cycles must be >= 0")

        for _ in range(cycles):
            self._tick_count += 1
            # Subscribers may unsubscribe while being notified
            for subscriber in list(self._subscribers):
                subscriber.tick()

    def run(self, interval: Optional[float] = None, max_ticks: Optional[int] = None) -> None:
        """Tick repeatedly until stop() is called or max_ticks is reached."""
        if interval is None:
            interval = self._interval
        self._stop_event.clear()
        self._running = True
        ticks = 0
        try:
            while not self._stop_event.is_set():
                if max_ticks is not None and ticks >= max_ticks:
                    break
                self.tick()
                ticks += 1
                if interval:
                    self._stop_event.wait(interval)
        finally:
            self._running = False

    def stop(self) -> None:
        self._stop_event.set()

    def reset(self) -> None:
        self._tick_count = 0

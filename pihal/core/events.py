"""Synchronous publish/subscribe for named notifications."""

from __future__ import annotations

from typing import Any, Callable, Optional

Listener = Callable[..., Any]


class EventEmitter:
    """Per-instance listener lists keyed by event name.

    emit() calls listeners synchronously, in subscription order, on the
    caller's thread. It iterates over a snapshot, so listeners may subscribe
    or unsubscribe while an event is being delivered.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> None:
        """Subscribe listener to event."""
        self._listeners.setdefault(event, []).append(listener)
        self._listener_added(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        """Unsubscribe listener from event. Unknown listeners are ignored."""
        listeners = self._listeners.get(event)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[event]
        self._listener_removed(event, listener)

    def remove_all_listeners(self, event: Optional[str] = None) -> None:
        """Unsubscribe everything from event, or from every event."""
        events = [event] if event is not None else list(self._listeners)
        for name in events:
            for listener in list(self._listeners.get(name, ())):
                self.off(name, listener)

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, ()))

    def listener_count(self, event: Optional[str] = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners.get(event, ())):
            listener(*args)

    # Subscription hooks ----------------------------------------------------

    def _listener_added(self, event: str, listener: Listener) -> None:
        """Called after a listener is subscribed."""

    def _listener_removed(self, event: str, listener: Listener) -> None:
        """Called after a listener is unsubscribed."""

"""Edge detector interface.

An edge detector watches a set of pins and converts level transitions it
observes into calls to Pin.invert_internal_level(). It never writes
registers.

States:
- idle: watch set empty, not scheduled
- watching: watch set non-empty, one poll() per loop tick
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pihal.core.pin import Pin
    from pihal.interfaces.gpio_enums import PinLevel


class EdgeDetector(ABC):
    """Edge detection backend contract."""

    @abstractmethod
    def add_pin(self, pin: Pin) -> None:
        """Start watching pin. Adding a watched pin again is a no-op."""
        ...

    @abstractmethod
    def remove_pin(self, pin: Pin) -> None:
        """Stop watching pin. Unknown pins are ignored."""
        ...

    @property
    @abstractmethod
    def watched_pins(self) -> list[Pin]:
        """Pins currently watched, in pin-number order."""
        ...

    @property
    @abstractmethod
    def is_watching(self) -> bool:
        ...

    @abstractmethod
    def poll(self) -> int:
        """Run one bounded sampling pass.

        Returns:
            Number of transitions delivered during the pass.
        """
        ...

    def tick(self) -> None:
        """Loop hook: one sampling pass per tick."""
        self.poll()

    def sync(self, pin: Pin, level: PinLevel) -> None:
        """Record level as the last known level of a watched pin.

        Called by the pin whenever its cached level changes, so a software
        write is not seen as a transition on the next pass.
        """

    @abstractmethod
    def close(self) -> None:
        """Stop watching everything and release backend resources."""
        ...

"""Edge detection on top of level registers.

The BCM283x exposes no interrupt delivery to user space through its
registers, so level transitions are found by sampling. Backends differ in
how a pass learns the current level; the bookkeeping is shared:

- the detector keeps a last-known bit per pin, seeded from a fresh
  pin.get_level() when watching starts and kept equal to the pin's cached
  level through sync()
- every observed difference results in exactly one invert_internal_level()
  call on that pin, in detection order
- pins are held weakly; a pin removed between passes is simply skipped
"""

from __future__ import annotations

import logging
import weakref
from abc import abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

from pihal.bcm283x.consts import GPLEV
from pihal.interfaces.edge_detector import EdgeDetector

if TYPE_CHECKING:
    from pihal.core.board import Board
    from pihal.core.pin import Pin
    from pihal.interfaces.gpio_enums import PinLevel

logger = logging.getLogger(__name__)


class BaseEdgeDetector(EdgeDetector):
    """Idle/watching state machine shared by all backends."""

    def __init__(self, board: Board):
        self._board = board
        self._pins: weakref.WeakValueDictionary[int, Pin] = weakref.WeakValueDictionary()
        self._last_bits: dict[int, int] = {}

    @property
    def watched_pins(self) -> list[Pin]:
        return [pin for _, pin in sorted(self._pins.items())]

    @property
    def is_watching(self) -> bool:
        return len(self._pins) > 0

    def add_pin(self, pin: Pin) -> None:
        number = pin.pin_number
        if number in self._pins:
            return

        was_idle = not self.is_watching
        self._watch(pin)
        self._pins[number] = pin
        # The pin's cache may be stale; refresh it and start from the same bit
        self._last_bits[number] = int(pin.get_level())

        if was_idle:
            self._board.loop.subscribe(self)
            logger.debug("%s watching", type(self).__name__)

    def remove_pin(self, pin: Pin) -> None:
        number = pin.pin_number
        if number not in self._pins:
            return

        del self._pins[number]
        self._last_bits.pop(number, None)
        self._unwatch(number)

        if not self.is_watching:
            self._board.loop.unsubscribe(self)
            logger.debug("%s idle", type(self).__name__)

    def sync(self, pin: Pin, level: PinLevel) -> None:
        if pin.pin_number in self._last_bits:
            self._last_bits[pin.pin_number] = int(level)

    def poll(self) -> int:
        transitions = 0
        for number, bit in self._sample_all().items():
            pin = self._pins.get(number)
            last = self._last_bits.get(number)
            if pin is None or last is None:
                continue
            if bit != last:
                self._last_bits[number] = bit
                pin.invert_internal_level()
                transitions += 1
        return transitions

    def close(self) -> None:
        for pin in self.watched_pins:
            self.remove_pin(pin)
        self._board.loop.unsubscribe(self)

    # Backend hooks ---------------------------------------------------------

    def _watch(self, pin: Pin) -> None:
        """Prepare backend resources for pin."""

    def _unwatch(self, pin_number: int) -> None:
        """Release backend resources for pin_number."""

    @abstractmethod
    def _sample_all(self) -> dict[int, int]:
        """Current bits of the pins that may have changed, pin -> bit."""
        ...


class PollingEdgeDetector(BaseEdgeDetector):
    """Samples GPLEV on every pass, one register read per bank."""

    def __init__(self, board: Board):
        super().__init__(board)
        self._gpio = board.get_gpio_register()

    def _sample_all(self) -> dict[int, int]:
        levels: dict[int, int] = {}
        bits: dict[int, int] = {}
        for number, pin in list(self._pins.items()):
            bank, mask, _ = pin.get_address_mask()
            if bank not in levels:
                levels[bank] = self._gpio.read(GPLEV[bank])
            bits[number] = 1 if levels[bank] & mask else 0
        return bits


EdgeDetectorFactory = Callable[["Board"], EdgeDetector]


def create_edge_detector(board: Board, sysfs_root: Optional[str] = None) -> EdgeDetector:
    """Pick the edge detection backend the running platform supports.

    Hardware-backed boards use the kernel's sysfs edge interrupts when the
    GPIO class directory is writable; everything else falls back to polling
    the level registers.
    """
    # sysfs builds on BaseEdgeDetector from this module
    from pihal.core.sysfs import SysfsEdgeDetector  # pylint: disable=import-outside-toplevel

    if board.hardware_backed and SysfsEdgeDetector.is_supported(sysfs_root):
        logger.info("Using sysfs edge detection")
        return SysfsEdgeDetector(board, root=sysfs_root)

    logger.info("Using register polling edge detection")
    return PollingEdgeDetector(board)

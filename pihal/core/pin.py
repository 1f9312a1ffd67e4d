"""GPIO pin.

A Pin is one logical I/O line. All hardware access goes through the owning
board's GPIO register window; the pin itself only knows which bits of which
banked registers belong to it.

The pin keeps "last known" caches of its function and level. They are not a
mirror of the hardware: they exist to detect transitions. A notification
fires only when a cache was already set and the new value differs, so the
first observation never fires and a listener that reads the same state back
cannot recurse.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Iterable, Optional, Union

from pihal.bcm283x.consts import (
    FUNCTION_SELECT_WIDTH,
    GPCLR,
    GPFSEL,
    GPLEV,
    GPPUD,
    GPPUDCLK,
    GPSET,
    LEVEL_WIDTH,
    PULL_SETTLE_SECONDS,
)
from pihal.core.bitfield import BitFieldAddress, compute_address
from pihal.core.events import EventEmitter, Listener
from pihal.core.exceptions import InvalidPinFunctionError
from pihal.interfaces.edge_detector import EdgeDetector
from pihal.interfaces.gpio_enums import PinFunction, PinLevel, PullDirection

if TYPE_CHECKING:
    from pihal.core.board import Board

logger = logging.getLogger(__name__)


class Pin(EventEmitter):
    """One GPIO line, addressed by its BCM number."""

    EVENT_FUNCTION_CHANGE = "function.change"
    EVENT_LEVEL_CHANGE = "level.change"
    EVENT_LEVEL_HIGH = "level.high"
    EVENT_LEVEL_LOW = "level.low"

    LEVEL_EVENTS = (EVENT_LEVEL_CHANGE, EVENT_LEVEL_HIGH, EVENT_LEVEL_LOW)

    def __init__(self, board: Board, pin_number: int):
        super().__init__()
        self._board = board
        self._gpio = board.get_gpio_register()
        self._pin_number = pin_number

        # Unknowable at start; stays unset until set_pull() is called
        self._pull: Optional[PullDirection] = None

        self._internal_function: Optional[PinFunction] = None
        self._internal_level: Optional[PinLevel] = None
        self._mask_cache: dict[int, BitFieldAddress] = {}
        self._watched = False
        self._detector: Optional[EdgeDetector] = None

        # Prime the caches from hardware
        self.get_level()
        self.get_function()

    def __repr__(self) -> str:
        return f"Pin({self._pin_number})"

    @property
    def pin_number(self) -> int:
        return self._pin_number

    @property
    def board(self) -> Board:
        return self._board

    @property
    def watched(self) -> bool:
        """True while the board's edge detector is watching this pin."""
        return self._watched

    # ==========================================================
    # Function select
    # ==========================================================

    def set_function(self, function: Union[int, str]) -> Pin:
        """Set the pin function from a code (INPUT/OUTPUT/ALTn) or a name.

        Names are looked up in the board's pin-function matrix (e.g. "PWM0").

        Raises:
            InvalidPinFunctionError: If the name is not offered by this pin or
                the code is not a function-select code.
        """
        if isinstance(function, str):
            function = self.get_alt_code_for_pin_function(function)
        try:
            function = PinFunction(function)
        except ValueError as exc:
            raise InvalidPinFunctionError(
                self._pin_number, message=f"Pin {self._pin_number}: invalid function code {function!r}"
            ) from exc

        bank, mask, shift = self.get_address_mask(FUNCTION_SELECT_WIDTH)
        offset = GPFSEL[bank]
        reg = self._gpio.read(offset)
        self._gpio.write(offset, (reg & ~mask) | (function << shift))

        self._set_internal_function(function)
        return self

    def get_function(self) -> PinFunction:
        """Read the function from hardware and refresh the cache."""
        bank, mask, shift = self.get_address_mask(FUNCTION_SELECT_WIDTH)
        function = PinFunction((self._gpio.read(GPFSEL[bank]) & mask) >> shift)

        self._set_internal_function(function)
        return function

    def get_function_name(self) -> Optional[str]:
        """Return "in", "out", the alternate function name, or None."""
        function = self.get_function()
        if function == PinFunction.INPUT:
            return "in"
        if function == PinFunction.OUTPUT:
            return "out"

        for name, code in self.get_alt_functions().items():
            if code == function:
                return name
        return None

    def get_alt_code_for_pin_function(self, name: str) -> PinFunction:
        """Resolve an alternate function name to its code for this pin.

        Raises:
            InvalidPinFunctionError: If the pin does not offer name.
        """
        functions = self.get_alt_functions()
        if name in functions:
            return functions[name]

        raise InvalidPinFunctionError(
            self._pin_number, message=f"Pin {self._pin_number} does not support [{name}]"
        )

    def get_alt_functions(self) -> dict[str, PinFunction]:
        """Alternate functions offered by this pin, name -> code."""
        return dict(self._board.get_pin_function_matrix().get(self._pin_number, {}))

    def assert_function(
        self, valid_functions: Iterable[int], operation: str = "assert_function"
    ) -> bool:
        """Check the live function is one of valid_functions.

        Raises:
            InvalidPinFunctionError: Naming the pin, its function and operation
                (defaults to "assert_function").
        """
        valid_functions = list(valid_functions)
        function = self.get_function()
        if function not in valid_functions:
            raise InvalidPinFunctionError(
                self._pin_number,
                function=function,
                operation=operation,
                valid_functions=valid_functions,
            )
        return True

    def _set_internal_function(self, function: PinFunction) -> PinFunction:
        if self._internal_function is None:
            self._internal_function = function
        elif self._internal_function != function:
            # Update before emitting so listeners reading back see no change
            old_function = self._internal_function
            self._internal_function = function
            self.emit(self.EVENT_FUNCTION_CHANGE, function, old_function)

        return self._internal_function

    # ==========================================================
    # Level
    # ==========================================================

    def high(self, fast: bool = False) -> Pin:
        """Drive the pin high through GPSET.

        With fast=True the output check, cache update and events are skipped.
        """
        if not fast:
            self.assert_function([PinFunction.OUTPUT], operation="high")

        bank, mask, _ = self.get_address_mask()
        self._gpio.write(GPSET[bank], mask)

        if not fast:
            self._set_internal_level(PinLevel.HIGH)
        return self

    def low(self, fast: bool = False) -> Pin:
        """Drive the pin low through GPCLR.

        With fast=True the output check, cache update and events are skipped.
        """
        if not fast:
            self.assert_function([PinFunction.OUTPUT], operation="low")

        bank, mask, _ = self.get_address_mask()
        self._gpio.write(GPCLR[bank], mask)

        if not fast:
            self._set_internal_level(PinLevel.LOW)
        return self

    def get_level(self) -> PinLevel:
        """Read the level from hardware, whatever the pin function."""
        bank, mask, shift = self.get_address_mask()
        level = PinLevel((self._gpio.read(GPLEV[bank]) & mask) >> shift)

        self._set_internal_level(level)
        return level

    def invert_internal_level(self) -> None:
        """Flip the cached level and notify, without touching hardware.

        This is the edge detector's hook: it has already observed the
        transition, so there is nothing to read back.
        """
        self._set_internal_level(
            PinLevel.LOW if self._internal_level == PinLevel.HIGH else PinLevel.HIGH
        )

    def _set_internal_level(self, level: PinLevel) -> PinLevel:
        if self._internal_level is None:
            self._internal_level = level
        elif self._internal_level != level:
            self._internal_level = level
            # The detector must not report this change again
            if self._detector is not None:
                self._detector.sync(self, level)
            self.emit(self.EVENT_LEVEL_CHANGE, level)

        return self._internal_level

    # ==========================================================
    # Pull resistor
    # ==========================================================

    def set_pull(self, direction: int) -> Pin:
        """Configure the pull resistor. The pin must be an input."""
        self.assert_function([PinFunction.INPUT], operation="set_pull")
        direction = PullDirection(direction)

        bank, mask, _ = self.get_address_mask()
        self._gpio.write(GPPUD, direction)
        time.sleep(PULL_SETTLE_SECONDS)
        self._gpio.write(GPPUDCLK[bank], mask)
        time.sleep(PULL_SETTLE_SECONDS)
        self._gpio.write(GPPUDCLK[bank], 0)

        self._pull = direction
        return self

    def get_pull(self) -> Optional[PullDirection]:
        """Last configured pull direction; None if never set."""
        return self._pull

    # ==========================================================
    # Addressing
    # ==========================================================

    def get_address_mask(self, bits: int = LEVEL_WIDTH) -> BitFieldAddress:
        """(bank, mask, shift) of this pin's field for a field width."""
        address = self._mask_cache.get(bits)
        if address is None:
            address = compute_address(self._pin_number, bits)
            self._mask_cache[bits] = address
        return address

    # ==========================================================
    # Edge detection wiring
    # ==========================================================

    def _on_level_change(self, level: PinLevel) -> None:
        if level == PinLevel.HIGH:
            self.emit(self.EVENT_LEVEL_HIGH)
        elif level == PinLevel.LOW:
            self.emit(self.EVENT_LEVEL_LOW)

    def _external_level_listener_count(self) -> int:
        count = sum(self.listener_count(event) for event in self.LEVEL_EVENTS)
        # Discount the internal change -> high/low translator
        return count - 1 if self._watched else count

    def _listener_added(self, event: str, listener: Listener) -> None:
        if event not in self.LEVEL_EVENTS or self._watched:
            return

        detector = self._board.get_edge_detector()
        self._detector = detector
        self._watched = True
        self.on(self.EVENT_LEVEL_CHANGE, self._on_level_change)
        try:
            detector.add_pin(self)
        except Exception:
            # Leave the pin as it was before the subscription
            self._watched = False
            self._detector = None
            self.off(self.EVENT_LEVEL_CHANGE, self._on_level_change)
            self.off(event, listener)
            raise
        logger.debug("Pin %d added to edge detection", self._pin_number)

    def _listener_removed(self, event: str, listener: Listener) -> None:
        if event not in self.LEVEL_EVENTS or not self._watched:
            return
        if self._external_level_listener_count() > 0:
            return

        if self._detector is not None:
            self._detector.remove_pin(self)
        self._watched = False
        self._detector = None
        self.off(self.EVENT_LEVEL_CHANGE, self._on_level_change)
        logger.debug("Pin %d removed from edge detection", self._pin_number)

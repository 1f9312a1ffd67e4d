"""Clock manager handle (GPCLK0-2, PCM and PWM clocks).

Every write to a clock manager register must carry the 0x5A password in
the top byte or the hardware ignores it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pihal.bcm283x.consts import (
    CM_BUSY_POLLS,
    CM_CTL,
    CM_CTL_BUSY,
    CM_CTL_ENAB,
    CM_CTL_SRC_MASK,
    CM_DIV_FRACTION_MASK,
    CM_DIV_INTEGER_MASK,
    CM_DIV_INTEGER_SHIFT,
    CM_DIV_OFFSET,
    CM_PASSWORD,
    CM_SRC_OSCILLATOR,
)
from pihal.peripherals.base import BasePeripheral

if TYPE_CHECKING:
    from pihal.core.board import Board


class Clock(BasePeripheral):
    """One clock generator of the clock manager."""

    KIND = "clock"

    GP0 = 0
    GP1 = 1
    GP2 = 2
    PCM = 3
    PWM = 4

    # General purpose clocks that can be routed to a header pin
    _GPCLK_PINS = {GP0: 4, GP1: 5, GP2: 6}

    def __init__(self, board: Board, number: int):
        super().__init__(board, number)
        self._register = board.get_clock_register()
        self._ctl = CM_CTL[number]
        self._div = self._ctl + CM_DIV_OFFSET

    @classmethod
    def supported_numbers(cls, board: Board) -> tuple[int, ...]:
        return tuple(n for n in board.soc.clocks if n in CM_CTL)

    def setup_pin(self) -> Clock:
        """Route a general purpose clock to its header pin."""
        if self._number not in self._GPCLK_PINS:
            raise ValueError(f"{self.name} has no output pin")
        self._configure_pins({self._GPCLK_PINS[self._number]: f"GPCLK{self._number}"})
        return self

    def start(self, source: int = CM_SRC_OSCILLATOR) -> Clock:
        if not 0 <= source <= CM_CTL_SRC_MASK:
            raise ValueError(f"Invalid clock source {source}")
        # Source must be set before (not together with) the enable bit
        self._register.write(self._ctl, CM_PASSWORD | source)
        self._register.write(self._ctl, CM_PASSWORD | source | CM_CTL_ENAB)
        return self

    def stop(self) -> Clock:
        ctl = self._register.read(self._ctl) & 0xFFFF
        self._register.write(self._ctl, CM_PASSWORD | (ctl & ~CM_CTL_ENAB))
        for _ in range(CM_BUSY_POLLS):
            if not self.is_running():
                break
        return self

    def is_running(self) -> bool:
        return bool(self._register.read(self._ctl) & CM_CTL_BUSY)

    def set_divisor(self, integer: int, fraction: int = 0) -> Clock:
        """Write the raw DIVI/DIVF divisor fields."""
        if not 1 <= integer <= CM_DIV_INTEGER_MASK:
            raise ValueError(f"Integer divisor {integer} out of range")
        if not 0 <= fraction <= CM_DIV_FRACTION_MASK:
            raise ValueError(f"Fractional divisor {fraction} out of range")
        self._register.write(
            self._div, CM_PASSWORD | (integer << CM_DIV_INTEGER_SHIFT) | fraction
        )
        return self

    def get_divisor(self) -> tuple[int, int]:
        div = self._register.read(self._div)
        return (
            (div >> CM_DIV_INTEGER_SHIFT) & CM_DIV_INTEGER_MASK,
            div & CM_DIV_FRACTION_MASK,
        )

"""PWM channel handle.

Raw control of one PWM channel: enable bits, range and data registers.
Duty-cycle and frequency math are left to callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pihal.bcm283x.consts import PWM_CTL, PWM_CTL_MSEN, PWM_CTL_PWEN, PWM_DAT, PWM_RNG
from pihal.peripherals.base import BasePeripheral
from pihal.utils.consts import ConstUtils

if TYPE_CHECKING:
    from pihal.core.board import Board


class PWM(BasePeripheral):
    """One of the two PWM channels of the PWM block."""

    KIND = "pwm"

    def __init__(self, board: Board, number: int):
        super().__init__(board, number)
        self._register = board.get_pwm_register()

    @classmethod
    def supported_numbers(cls, board: Board) -> tuple[int, ...]:
        return board.soc.pwm_channels

    def setup_pin(self, pin_number: int) -> PWM:
        """Route this channel to pin_number (e.g. 18 for PWM0)."""
        self._configure_pins({pin_number: f"PWM{self._number}"})
        return self

    def start(self) -> PWM:
        self._update_control(PWM_CTL_PWEN[self._number], True)
        return self

    def stop(self) -> PWM:
        self._update_control(PWM_CTL_PWEN[self._number], False)
        return self

    def is_running(self) -> bool:
        return bool(self._register.read(PWM_CTL) & PWM_CTL_PWEN[self._number])

    def set_mark_space(self, enabled: bool = True) -> PWM:
        """Select mark/space output (True) or the balanced algorithm."""
        self._update_control(PWM_CTL_MSEN[self._number], enabled)
        return self

    def set_range(self, value: int) -> PWM:
        self._register.write(PWM_RNG[self._number], self._check(value))
        return self

    def get_range(self) -> int:
        return self._register.read(PWM_RNG[self._number])

    def set_data(self, value: int) -> PWM:
        self._register.write(PWM_DAT[self._number], self._check(value))
        return self

    def get_data(self) -> int:
        return self._register.read(PWM_DAT[self._number])

    def _update_control(self, bits: int, enabled: bool) -> None:
        ctl = self._register.read(PWM_CTL)
        ctl = ctl | bits if enabled else ctl & ~bits
        self._register.write(PWM_CTL, ctl)

    @staticmethod
    def _check(value: int) -> int:
        if not 0 <= value <= ConstUtils.MASK_32_BITS:
            raise ValueError(f"PWM register value {value} out of range")
        return value

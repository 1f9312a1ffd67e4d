"""I2C bus handle.

Transactions go through the kernel's i2c-dev driver; this handle only
muxes the bus pins and names the device node.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pihal.peripherals.base import BasePeripheral

if TYPE_CHECKING:
    from pihal.core.board import Board


class I2C(BasePeripheral):
    KIND = "i2c"

    # Header pins of each bus, SDA first
    _BUS_PINS = {
        0: (0, 1),
        1: (2, 3),
    }

    @classmethod
    def supported_numbers(cls, board: Board) -> tuple[int, ...]:
        return tuple(n for n in board.soc.i2c_buses if n in cls._BUS_PINS)

    @property
    def pins(self) -> tuple[int, int]:
        return self._BUS_PINS[self._number]

    @property
    def device_path(self) -> str:
        return f"/dev/i2c-{self._number}"

    def enable(self) -> I2C:
        sda, scl = self.pins
        self._configure_pins({sda: f"SDA{self._number}", scl: f"SCL{self._number}"})
        return self

    def is_enabled(self) -> bool:
        sda, scl = self.pins
        return (
            self._board.get_pin(sda).get_function_name() == f"SDA{self._number}"
            and self._board.get_pin(scl).get_function_name() == f"SCL{self._number}"
        )

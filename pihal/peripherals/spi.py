"""SPI bus handle.

SPI0 is the main SPI controller with its own register block; SPI1 and
SPI2 live in the auxiliary block and are switched on through AUX_ENABLES.
Transfers are not handled here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pihal.bcm283x.consts import (
    AUX_ENABLE_SPI,
    AUX_ENABLES,
    AUX_SPI_CNTL0,
    AUX_SPI_CNTL0_ENABLE,
    SPI0_CLK,
    SPI0_CS,
    SPI0_CS_CLEAR,
    SPI0_CS_TA,
)
from pihal.peripherals.base import BasePeripheral

if TYPE_CHECKING:
    from pihal.core.board import Board
    from pihal.interfaces.window import RegisterWindow


class SPI(BasePeripheral):
    KIND = "spi"

    # Header pins of SPI0 on every 26/40-pin layout
    _SPI0_PINS = {
        7: "SPI0_CE1_N",
        8: "SPI0_CE0_N",
        9: "SPI0_MISO",
        10: "SPI0_MOSI",
        11: "SPI0_SCLK",
    }

    def __init__(self, board: Board, number: int):
        super().__init__(board, number)
        self._register: RegisterWindow = (
            board.get_spi_register() if number == 0 else board.get_aux_register()
        )

    @classmethod
    def supported_numbers(cls, board: Board) -> tuple[int, ...]:
        return board.soc.spi_buses

    @property
    def auxiliary(self) -> bool:
        return self._number != 0

    def enable(self) -> SPI:
        if self.auxiliary:
            enables = self._register.read(AUX_ENABLES)
            self._register.write(AUX_ENABLES, enables | AUX_ENABLE_SPI[self._number])
            cntl = self._register.read(AUX_SPI_CNTL0[self._number])
            self._register.write(AUX_SPI_CNTL0[self._number], cntl | AUX_SPI_CNTL0_ENABLE)
        else:
            self._configure_pins(self._SPI0_PINS)
            self._register.write(SPI0_CS, SPI0_CS_CLEAR)
        return self

    def disable(self) -> SPI:
        if self.auxiliary:
            cntl = self._register.read(AUX_SPI_CNTL0[self._number])
            self._register.write(AUX_SPI_CNTL0[self._number], cntl & ~AUX_SPI_CNTL0_ENABLE)
            enables = self._register.read(AUX_ENABLES)
            self._register.write(AUX_ENABLES, enables & ~AUX_ENABLE_SPI[self._number])
        else:
            cs = self._register.read(SPI0_CS)
            self._register.write(SPI0_CS, (cs & ~SPI0_CS_TA) | SPI0_CS_CLEAR)
        return self

    def is_enabled(self) -> bool:
        if self.auxiliary:
            return bool(self._register.read(AUX_ENABLES) & AUX_ENABLE_SPI[self._number])
        return all(
            self._board.get_pin(pin).get_function_name() == name
            for pin, name in self._SPI0_PINS.items()
        )

    def set_clock_divider(self, divider: int) -> SPI:
        """Write the raw SPI0 CDIV field (0 means 65536)."""
        if self.auxiliary:
            raise ValueError(f"{self.name} has no CLK register")
        if not 0 <= divider <= 0xFFFF:
            raise ValueError(f"SPI clock divider {divider} out of range")
        self._register.write(SPI0_CLK, divider)
        return self

"""Register windows held in process memory.

Simulated windows accept the same accesses as mapped ones, with the same
alignment and bounds checks, so a Board can run without /dev/mem. The GPIO
window reproduces the BCM283x register semantics pins depend on:

  GPSETn / GPCLRn   write-1-to-act, drive the matching GPLEVn bits
  GPLEVn            read-only, reflects driven and external levels
  GPPUD / GPPUDCLKn a clock pulse latches the GPPUD code into each pin
                    whose clock bit rises
"""

from __future__ import annotations

from typing import Optional

from pihal.bcm283x.consts import GPCLR, GPLEV, GPPUD, GPPUDCLK, GPSET
from pihal.core.exceptions import InitializationError
from pihal.core.register import (
    ReadOnlyRegister,
    Register,
    RegisterFile,
    SimpleRegister,
    WriteOnlyRegister,
)
from pihal.interfaces.gpio_enums import PinLevel, PullDirection
from pihal.interfaces.window import AddressRange, PeripheralFamily, RegisterWindow
from pihal.utils.consts import ConstUtils

BITS_PER_BANK = 32


class SimulatedWindow(RegisterWindow):
    """Plain register storage; unknown offsets read 0."""

    def __init__(self, family: PeripheralFamily, size: int):
        super().__init__(family, size)
        self._registers = RegisterFile()
        self._closed = False
        self.writes: list[tuple[int, int]] = []

    def read(self, offset: int) -> int:
        self._check_open()
        self._check_offset(offset)
        return self._registers.read(offset)

    def write(self, offset: int, value: int) -> None:
        self._check_open()
        self._check_offset(offset)
        value &= ConstUtils.MASK_32_BITS
        self.writes.append((offset, value))
        self._registers.write(offset, value)

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def peek(self, offset: int) -> int:
        """Read without access checks or side effects on the write log."""
        return self._registers.read(offset)

    def writes_to(self, offset: int) -> list[int]:
        """Values written to offset, oldest first."""
        return [value for off, value in self.writes if off == offset]

    def reset(self) -> None:
        self._registers.reset()
        self.writes.clear()

    def _check_open(self) -> None:
        if self._closed:
            raise InitializationError(self.family.value, "window is closed")


class LevelRegister(ReadOnlyRegister):
    """GPLEVn: software cannot write it, the pins drive it."""

    def drive(self, mask: int, high: bool) -> None:
        if high:
            self.value |= mask
        else:
            self.value &= ~mask
        self.value &= ConstUtils.MASK_32_BITS


class SetRegister(WriteOnlyRegister):
    """GPSETn: every 1 bit drives the matching level bit high."""

    def __init__(self, offset: int, level: LevelRegister):
        super().__init__(offset)
        self.level = level

    def write(self, val: int) -> None:
        self.level.drive(val, True)


class ClearRegister(WriteOnlyRegister):
    """GPCLRn: every 1 bit drives the matching level bit low."""

    def __init__(self, offset: int, level: LevelRegister):
        super().__init__(offset)
        self.level = level

    def write(self, val: int) -> None:
        self.level.drive(val, False)


class PullClockRegister(SimpleRegister):
    """GPPUDCLKn: rising clock bits latch the current GPPUD code."""

    def __init__(self, offset: int, bank: int, pud: Register, latched: dict[int, int]):
        super().__init__(offset)
        self.bank = bank
        self.pud = pud
        self.latched = latched

    def write(self, val: int) -> None:
        rising = val & ~self.value
        code = self.pud.read() & 0b11
        for bit in range(BITS_PER_BANK):
            if rising & (1 << bit):
                self.latched[self.bank * BITS_PER_BANK + bit] = code
        super().write(val)


class SimulatedGPIOWindow(SimulatedWindow):
    """GPIO block with set/clear/level and pull-latch behavior."""

    def __init__(self, size: int):
        super().__init__(PeripheralFamily.GPIO, size)
        self._pulls: dict[int, int] = {}
        self._levels: list[LevelRegister] = []

        pud = SimpleRegister(GPPUD)
        self._registers.add(pud)

        for bank, level_offset in enumerate(GPLEV):
            level = LevelRegister(level_offset)
            self._levels.append(level)
            self._registers.add(level)
            self._registers.add(SetRegister(GPSET[bank], level))
            self._registers.add(ClearRegister(GPCLR[bank], level))
            self._registers.add(PullClockRegister(GPPUDCLK[bank], bank, pud, self._pulls))

    def drive(self, pin_number: int, level: int) -> None:
        """Simulate an external signal on a pin."""
        bank, bit = divmod(pin_number, BITS_PER_BANK)
        if not 0 <= bank < len(self._levels):
            raise ValueError(f"Invalid pin {pin_number}")
        self._levels[bank].drive(1 << bit, PinLevel(level) == PinLevel.HIGH)

    def level(self, pin_number: int) -> PinLevel:
        bank, bit = divmod(pin_number, BITS_PER_BANK)
        return PinLevel((self._levels[bank].value >> bit) & 1)

    def pull_state(self, pin_number: int) -> Optional[PullDirection]:
        """Pull code latched into the pin, None if it was never clocked."""
        code = self._pulls.get(pin_number)
        return None if code is None else PullDirection(code)

    def reset(self) -> None:
        super().reset()
        self._pulls.clear()


class SimulatedWindowFactory:
    """Window factory for a Board running without hardware.

    Builds one simulated window per request and remembers it by family.
    """

    def __init__(self):
        self.windows: dict[PeripheralFamily, SimulatedWindow] = {}
        self.created: list[tuple[PeripheralFamily, AddressRange]] = []

    def __call__(self, family: PeripheralFamily, address_range: AddressRange) -> SimulatedWindow:
        window: SimulatedWindow
        if family is PeripheralFamily.GPIO:
            window = SimulatedGPIOWindow(address_range.size)
        else:
            window = SimulatedWindow(family, address_range.size)

        self.windows[family] = window
        self.created.append((family, address_range))
        return window

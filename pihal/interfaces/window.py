"""Register window abstraction - behavioral contract.

A RegisterWindow is a block of 32-bit peripheral registers for one
peripheral family. Offsets are window-relative byte offsets (0x00+) and must
be word aligned.

PROTOCOL CONTRACT:
- read(offset) returns the 32-bit word at offset
- write(offset, value) is visible immediately, only at offset, and is not
  reordered against other accesses issued on the same window
- close() releases the underlying resource and may be called any number of
  times, including when the window was never mapped

One window exists per (Board, peripheral family); the Board enforces this,
not the window.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from pihal.core.exceptions import RegisterAlignmentError, RegisterBoundsError
from pihal.utils.consts import ConstUtils


class PeripheralFamily(str, Enum):
    """Peripheral blocks that get their own register window."""

    GPIO = "gpio"
    PWM = "pwm"
    CLOCK = "clock"
    SPI = "spi"
    AUX = "aux"


@dataclass(frozen=True)
class AddressRange:
    """An immutable physical address range."""

    base: int
    size: int

    def contains(self, address: int) -> bool:
        return self.base <= address < self.base + self.size

    def __str__(self) -> str:
        return f"0x{self.base:08X}-0x{self.base + self.size:08X}"


class RegisterWindow(ABC):
    """Base class for register windows."""

    def __init__(self, family: PeripheralFamily, size: int):
        self.family = family
        self.size = size

    @abstractmethod
    def read(self, offset: int) -> int:
        """Read the 32-bit register at offset."""
        ...

    @abstractmethod
    def write(self, offset: int, value: int) -> None:
        """Write a 32-bit value to the register at offset."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the window. Idempotent."""
        ...

    @property
    @abstractmethod
    def closed(self) -> bool:
        """True once close() has run (or the window was never opened)."""
        ...

    def _check_offset(self, offset: int) -> None:
        if offset % ConstUtils.WORD_SIZE:
            raise RegisterAlignmentError(offset)
        if not 0 <= offset <= self.size - ConstUtils.WORD_SIZE:
            raise RegisterBoundsError(offset, self.family.value, self.size)

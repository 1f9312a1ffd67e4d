"""Word register storage.

Registers are the fundamental unit of peripheral behavior. This module
provides a contract for 32-bit register behavior that simulated register
windows build on; real windows talk to the mapped memory directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pihal.utils.consts import ConstUtils


class Register(ABC):
    """Base class for any 32-bit register with custom read/write behavior.

    For simple registers (just storage), use SimpleRegister.
    For registers with special behavior (like GPSET), subclass and override
    read() / write().
    """

    def __init__(self, offset: int, reset_value: int = 0):
        """Initialize a register.

        Args:
            offset: Byte offset within the peripheral window
            reset_value: Value to return to on reset()
        """
        self.offset = offset
        self.reset_value = reset_value & ConstUtils.MASK_32_BITS
        self.value = self.reset_value

    @abstractmethod
    def read(self) -> int:
        """Read the 32-bit register value.

        Subclasses should override for registers with side effects on read.
        """
        ...

    @abstractmethod
    def write(self, val: int) -> None:
        """Update register value from a write.

        Subclasses should override for registers with side effects on write,
        or if the register is read-only/write-only.
        """
        ...

    @abstractmethod
    def reset(self) -> None:
        """Reset to default state."""
        ...


class SimpleRegister(Register):
    """A register that is just storage (no side effects)."""

    def read(self) -> int:
        return self.value

    def write(self, val: int) -> None:
        self.value = val & ConstUtils.MASK_32_BITS

    def reset(self) -> None:
        self.value = self.reset_value


class ReadOnlyRegister(SimpleRegister):
    """A read-only register. Writes are silently ignored."""

    def write(self, val: int) -> None:
        pass  # Ignore writes


class WriteOnlyRegister(SimpleRegister):
    """A write-only register. Reads always return reset value."""

    def read(self) -> int:
        return self.reset_value


class RegisterFile:
    """Storage and dispatch for a set of registers.

    Maps offset -> Register. Offsets nobody registered behave as plain
    storage, which matches how unused slots of a mapped window behave.
    """

    def __init__(self):
        self._registers: dict[int, Register] = {}

    def add(self, reg: Register) -> None:
        """Add a register to this file.

        Raises:
            ValueError: If a register already exists at this offset
        """
        if reg.offset in self._registers:
            raise ValueError(f"Register at offset 0x{reg.offset:X} already exists")
        self._registers[reg.offset] = reg

    def read(self, offset: int) -> int:
        """Read from offset, creating plain storage on first access."""
        return self._get_or_create(offset).read()

    def write(self, offset: int, val: int) -> None:
        """Write to offset, creating plain storage on first access."""
        self._get_or_create(offset).write(val)

    def reset(self) -> None:
        """Reset all registers."""
        for reg in self._registers.values():
            reg.reset()

    def get_register(self, offset: int) -> Optional[Register]:
        """Return the register at offset, or None."""
        return self._registers.get(offset)

    # Private helpers -------------------------------------------------------

    def _get_or_create(self, offset: int) -> Register:
        reg = self._registers.get(offset)
        if reg is None:
            reg = SimpleRegister(offset)
            self._registers[offset] = reg
        return reg

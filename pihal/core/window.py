"""Memory-mapped register windows.

Maps one peripheral block of the SoC into the process with mmap. GPIO can
be mapped without root through /dev/gpiomem, which exposes exactly the GPIO
block at offset 0; every other family needs /dev/mem at the physical
address.
"""

from __future__ import annotations

import logging
import mmap
import os
from typing import Optional, Sequence

from pihal.core.exceptions import InitializationError
from pihal.interfaces.window import AddressRange, PeripheralFamily, RegisterWindow
from pihal.utils.consts import ConstUtils, align_to_page

logger = logging.getLogger(__name__)

DEV_GPIOMEM = "/dev/gpiomem"
DEV_MEM = "/dev/mem"


class MemoryMappedWindow(RegisterWindow):
    """Register window backed by an mmap of the physical peripheral block."""

    def __init__(
        self,
        family: PeripheralFamily,
        address_range: AddressRange,
        devices: Optional[Sequence[str]] = None,
    ):
        super().__init__(family, address_range.size)
        self.address_range = address_range
        self.device: Optional[str] = None
        self._mmap: Optional[mmap.mmap] = None
        self._words: Optional[memoryview] = None

        if devices is None:
            devices = (DEV_GPIOMEM, DEV_MEM) if family is PeripheralFamily.GPIO else (DEV_MEM,)

        errors: list[str] = []
        for device in devices:
            try:
                self._map(device)
            except OSError as exc:
                errors.append(f"{device}: {exc}")
                continue
            break
        else:
            raise InitializationError(
                family.value,
                "; ".join(errors) or "no device to map",
                details={"range": str(address_range)},
            )

    def _map(self, device: str) -> None:
        # /dev/gpiomem only exposes the GPIO block, starting at offset 0
        offset = 0 if device == DEV_GPIOMEM else self.address_range.base
        if offset % ConstUtils.PAGE_SIZE:
            raise OSError(f"physical address 0x{offset:08X} is not page aligned")

        fd = os.open(device, os.O_RDWR | os.O_SYNC)
        try:
            mapped = mmap.mmap(
                fd,
                align_to_page(self.size),
                flags=mmap.MAP_SHARED,
                prot=mmap.PROT_READ | mmap.PROT_WRITE,
                offset=offset,
            )
        finally:
            # The mapping stays valid after the descriptor is closed
            os.close(fd)

        self._mmap = mapped
        self._words = memoryview(mapped).cast("I")
        self.device = device
        logger.debug(
            "Mapped %s registers %s through %s",
            self.family.value,
            self.address_range,
            device,
        )

    def read(self, offset: int) -> int:
        if self._words is None:
            raise InitializationError(self.family.value, "window is closed")
        self._check_offset(offset)
        return self._words[offset // ConstUtils.WORD_SIZE]

    def write(self, offset: int, value: int) -> None:
        if self._words is None:
            raise InitializationError(self.family.value, "window is closed")
        self._check_offset(offset)
        self._words[offset // ConstUtils.WORD_SIZE] = value & ConstUtils.MASK_32_BITS

    def close(self) -> None:
        if self._words is not None:
            self._words.release()
            self._words = None
        if self._mmap is not None:
            self._mmap.close()
            self._mmap = None
            logger.debug("Unmapped %s registers", self.family.value)

    @property
    def closed(self) -> bool:
        return self._mmap is None


def mmap_window_factory(
    family: PeripheralFamily, address_range: AddressRange
) -> RegisterWindow:
    """Default register-window factory: map the real peripheral block."""
    return MemoryMappedWindow(family, address_range)

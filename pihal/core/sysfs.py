"""Kernel edge-interrupt backend through the sysfs GPIO class.

The register set cannot deliver interrupts to user space, but the kernel
can: a pin exported under /sys/class/gpio with edge=both raises POLLPRI on
its value file whenever the level changes. Each pass polls those files with
a zero timeout, so it never blocks.
"""

from __future__ import annotations

import logging
import os
import select
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Callable, Optional

from pihal.core.edge_detector import BaseEdgeDetector
from pihal.core.exceptions import InitializationError

if TYPE_CHECKING:
    from pihal.core.board import Board
    from pihal.core.pin import Pin

logger = logging.getLogger(__name__)

SYSFS_GPIO_ROOT = "/sys/class/gpio"

EDGE_NONE = "none"
EDGE_RISING = "rising"
EDGE_FALLING = "falling"
EDGE_BOTH = "both"


class SysfsGPIO:
    """Export bookkeeping for the sysfs GPIO class.

    Only pins exported through this instance are unexported again; pins
    somebody else exported are used but left alone.
    """

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or SYSFS_GPIO_ROOT)
        self._exported: set[int] = set()

    @property
    def exported(self) -> set[int]:
        return set(self._exported)

    def pin_path(self, pin_number: int) -> Path:
        return self.root / f"gpio{pin_number}"

    def export(self, pin_number: int) -> None:
        if self.pin_path(pin_number).exists():
            return
        self._write(self.root / "export", str(pin_number))
        self._exported.add(pin_number)

    def unexport(self, pin_number: int) -> None:
        if pin_number not in self._exported:
            return
        self._write(self.root / "unexport", str(pin_number))
        self._exported.discard(pin_number)

    def set_edge(self, pin_number: int, edge: str = EDGE_BOTH) -> None:
        if edge not in (EDGE_NONE, EDGE_RISING, EDGE_FALLING, EDGE_BOTH):
            raise ValueError(f"Invalid edge {edge!r}")
        self._write(self.pin_path(pin_number) / "edge", edge)

    def open_value(self, pin_number: int) -> BinaryIO:
        return open(self.pin_path(pin_number) / "value", "rb", buffering=0)

    def cleanup(self) -> None:
        """Unexport every pin this instance exported."""
        for pin_number in sorted(self._exported):
            try:
                self.unexport(pin_number)
            except OSError as exc:
                logger.warning("Failed to unexport GPIO %d: %s", pin_number, exc)

    @staticmethod
    def _write(path: Path, text: str) -> None:
        with open(path, "w", encoding="ascii") as fh:
            fh.write(text)


class SysfsEdgeDetector(BaseEdgeDetector):
    """Edge detector driven by kernel edge interrupts on sysfs value files."""

    def __init__(
        self,
        board: Board,
        root: Optional[str] = None,
        poller_factory: Callable[[], Any] = select.poll,
    ):
        super().__init__(board)
        self._sysfs = SysfsGPIO(root)
        self._poller = poller_factory()
        self._files: dict[int, BinaryIO] = {}
        self._fd_pins: dict[int, int] = {}

    @staticmethod
    def is_supported(root: Optional[str] = None) -> bool:
        export = Path(root or SYSFS_GPIO_ROOT) / "export"
        return export.exists() and os.access(export, os.W_OK)

    @property
    def sysfs(self) -> SysfsGPIO:
        return self._sysfs

    def close(self) -> None:
        super().close()
        self._sysfs.cleanup()

    def _watch(self, pin: Pin) -> None:
        number = pin.pin_number
        try:
            self._sysfs.export(number)
            self._sysfs.set_edge(number, EDGE_BOTH)
            fh = self._sysfs.open_value(number)
        except OSError as exc:
            raise InitializationError(
                "sysfs", f"cannot watch GPIO {number}: {exc}", device=str(self._sysfs.root)
            ) from exc

        self._files[number] = fh
        self._fd_pins[fh.fileno()] = number
        self._poller.register(fh.fileno(), select.POLLPRI | select.POLLERR)

    def _unwatch(self, pin_number: int) -> None:
        fh = self._files.pop(pin_number, None)
        if fh is not None:
            self._poller.unregister(fh.fileno())
            self._fd_pins.pop(fh.fileno(), None)
            fh.close()
        self._sysfs.unexport(pin_number)

    def _sample_all(self) -> dict[int, int]:
        bits: dict[int, int] = {}
        for fd, _events in self._poller.poll(0):
            number = self._fd_pins.get(fd)
            if number is None:
                continue
            bits[number] = self._read_value(self._files[number])
        return bits

    @staticmethod
    def _read_value(fh: BinaryIO) -> int:
        # Reading from the start acknowledges the pending edge
        fh.seek(0)
        return 1 if fh.read().strip() == b"1" else 0

"""Board composition root, registry and factory.

A Board owns everything that must exist at most once per physical device:
one register window per peripheral family, one Pin per GPIO number, one
handle per peripheral instance and one edge detector. All of them are
created lazily on first request and returned unchanged afterwards.

Board variants are registered globally by name (see register_board());
importing pihal.bcm283x registers the Raspberry Pi models.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from pihal.core.edge_detector import EdgeDetectorFactory, create_edge_detector
from pihal.core.exceptions import InitializationError, InvalidValueError
from pihal.core.loop import Loop
from pihal.core.pin import Pin
from pihal.core.window import mmap_window_factory
from pihal.interfaces.edge_detector import EdgeDetector
from pihal.interfaces.window import AddressRange, PeripheralFamily, RegisterWindow
from pihal.peripherals import I2C, PWM, SPI, Clock
from pihal.peripherals.base import BasePeripheral
from pihal.utils.config_loader import HeaderLayout, PinFunctionMatrix, SoCConfig

logger = logging.getLogger(__name__)

WindowFactory = Callable[[PeripheralFamily, AddressRange], RegisterWindow]

P = TypeVar("P", bound=BasePeripheral)


class Board:
    """A Raspberry Pi board variant.

    THREAD SAFETY: Not thread-safe. The board, its pins and its edge
    detector are meant to be driven from a single thread of control.
    """

    def __init__(
        self,
        name: str,
        soc: SoCConfig,
        header: Optional[HeaderLayout] = None,
        hdmi: bool = False,
        ethernet: bool = False,
        window_factory: Optional[WindowFactory] = None,
        edge_detector_factory: Optional[EdgeDetectorFactory] = None,
        loop: Optional[Loop] = None,
    ):
        self._name = name
        self._soc = soc
        self._header: HeaderLayout = dict(header or {})
        self._hdmi = hdmi
        self._ethernet = ethernet
        self._window_factory = window_factory or mmap_window_factory
        self._edge_detector_factory = edge_detector_factory or create_edge_detector
        self._loop = loop or Loop()

        self._windows: dict[PeripheralFamily, RegisterWindow] = {}
        self._edge_detector: Optional[EdgeDetector] = None
        self._pins: dict[int, Pin] = {}
        self._pwms: dict[int, PWM] = {}
        self._clocks: dict[int, Clock] = {}
        self._spis: dict[int, SPI] = {}
        self._i2cs: dict[int, I2C] = {}
        self._closed = False

    def __repr__(self) -> str:
        return f"Board({self._name!r}, soc={self._soc.name!r})"

    def __enter__(self) -> Board:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ==========================================================
    # Identity and capabilities
    # ==========================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def soc(self) -> SoCConfig:
        return self._soc

    @property
    def has_hdmi(self) -> bool:
        return self._hdmi

    @property
    def has_ethernet(self) -> bool:
        return self._ethernet

    @property
    def hardware_backed(self) -> bool:
        """True when registers are mapped from the real device."""
        return self._window_factory is mmap_window_factory

    @property
    def loop(self) -> Loop:
        return self._loop

    @property
    def closed(self) -> bool:
        return self._closed

    def get_pin_function_matrix(self) -> PinFunctionMatrix:
        return self._soc.pin_functions

    def get_physical_pins(self) -> HeaderLayout:
        """Header layout, physical pin -> GPIO number (None for power/ground)."""
        return dict(self._header)

    # ==========================================================
    # Pins and peripherals
    # ==========================================================

    def get_pin(self, pin_number: int) -> Pin:
        if pin_number not in self._pins:
            if not 0 <= pin_number < self._soc.gpio_count:
                raise InvalidValueError(
                    "pin number", pin_number, range(self._soc.gpio_count)
                )
            self._pins[pin_number] = Pin(self, pin_number)
            logger.debug("Created pin %d on %s", pin_number, self._name)

        return self._pins[pin_number]

    def get_physical_pin(self, physical_number: int) -> Pin:
        """Pin wired to a physical header position."""
        gpio = self._header.get(physical_number)
        if gpio is None:
            raise InvalidValueError(
                "physical pin",
                physical_number,
                [n for n, g in self._header.items() if g is not None],
            )
        return self.get_pin(gpio)

    def get_pwm(self, pwm_number: int) -> PWM:
        return self._get_peripheral(self._pwms, PWM, pwm_number)

    def get_clock(self, clock_number: int) -> Clock:
        return self._get_peripheral(self._clocks, Clock, clock_number)

    def get_spi(self, spi_number: int) -> SPI:
        return self._get_peripheral(self._spis, SPI, spi_number)

    def get_i2c(self, i2c_number: int) -> I2C:
        return self._get_peripheral(self._i2cs, I2C, i2c_number)

    def _get_peripheral(self, registry: dict[int, P], cls: type[P], number: int) -> P:
        if number not in registry:
            registry[number] = cls(self, number)
        return registry[number]

    # ==========================================================
    # Register windows
    # ==========================================================

    def get_gpio_register(self) -> RegisterWindow:
        return self._get_register(PeripheralFamily.GPIO)

    def get_pwm_register(self) -> RegisterWindow:
        return self._get_register(PeripheralFamily.PWM)

    def get_clock_register(self) -> RegisterWindow:
        return self._get_register(PeripheralFamily.CLOCK)

    def get_aux_register(self) -> RegisterWindow:
        return self._get_register(PeripheralFamily.AUX)

    def get_spi_register(self) -> RegisterWindow:
        return self._get_register(PeripheralFamily.SPI)

    def _get_register(self, family: PeripheralFamily) -> RegisterWindow:
        if self._closed:
            raise InitializationError(family.value, f"board {self._name} is closed")
        if family not in self._windows:
            address_range = self._soc.window_range(family)
            # Failures propagate; nothing is cached so the caller sees the error
            self._windows[family] = self._window_factory(family, address_range)
            logger.debug("Opened %s window at %s", family.value, address_range)

        return self._windows[family]

    # ==========================================================
    # Edge detection and scheduling
    # ==========================================================

    def get_edge_detector(self) -> EdgeDetector:
        if self._closed:
            raise InitializationError("edge_detector", f"board {self._name} is closed")
        if self._edge_detector is None:
            self._edge_detector = self._edge_detector_factory(self)
            logger.debug("Created %s", type(self._edge_detector).__name__)

        return self._edge_detector

    def step(self, cycles: int = 1) -> None:
        """Run cycles loop ticks (edge detection passes) right now."""
        self._loop.tick(cycles)

    def run(self, interval: Optional[float] = None, max_ticks: Optional[int] = None) -> None:
        """Tick the loop until loop.stop() is called or max_ticks is reached."""
        self._loop.run(interval=interval, max_ticks=max_ticks)

    # ==========================================================
    # Teardown
    # ==========================================================

    def close(self) -> None:
        """Stop edge detection and release every register window once."""
        if self._closed:
            return
        self._closed = True

        detector, self._edge_detector = self._edge_detector, None
        windows, self._windows = self._windows, {}

        closers: list[tuple[str, Callable[[], None]]] = []
        if detector is not None:
            closers.append(("edge detector", detector.close))
        closers.extend((f"{family.value} window", window.close) for family, window in windows.items())

        # Every resource gets its close() even if an earlier one fails
        first_error: Optional[Exception] = None
        for what, close in closers:
            try:
                close()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.error("Failed to close %s of %s: %s", what, self._name, exc)
                if first_error is None:
                    first_error = exc
            else:
                logger.debug("Closed %s", what)

        if first_error is not None:
            raise first_error


class BoardRegistry:
    """Registry of available board variants.

    Maps a variant name to a factory returning a ready Board. This
    decouples board discovery from board construction.

    THREAD SAFETY: Not thread-safe. All board registration should happen
    during module initialization before any threads are spawned.
    """

    def __init__(self):
        self._boards: dict[str, Callable[..., Board]] = {}

    def register(self, name: str, factory: Callable[..., Board]) -> None:
        """Register a board factory."""
        if name in self._boards:
            raise ValueError(f"Board '{name}' already registered")
        self._boards[name] = factory

    def get(self, name: str) -> Callable[..., Board]:
        """Get a board factory by name."""
        if name not in self._boards:
            raise ValueError(
                f"Unknown board '{name}'. Available: {list(self._boards.keys())}"
            )
        return self._boards[name]

    def list_boards(self) -> list[str]:
        """List all registered board names."""
        return list(self._boards.keys())

    def create(self, name: str, **kwargs: Any) -> Board:
        """Instantiate a board by name."""
        return self.get(name)(**kwargs)


# Global registry
_REGISTRY = BoardRegistry()


def register_board(name: str, factory: Callable[..., Board]) -> None:
    """Register a board globally."""
    _REGISTRY.register(name, factory)


def get_board(name: str) -> Callable[..., Board]:
    """Get a board factory by name."""
    return _REGISTRY.get(name)


def create_board(name: str, **kwargs: Any) -> Board:
    """Create a board instance by name."""
    return _REGISTRY.create(name, **kwargs)


def list_available_boards() -> list[str]:
    """List all registered boards."""
    return _REGISTRY.list_boards()


def verify_boards_registered() -> None:
    """Verify that at least one board is registered.

    Raises:
        RuntimeError: If no boards are registered
    """
    boards = list_available_boards()
    if not boards:
        raise RuntimeError(
            "No boards registered! Ensure board modules are imported. "
            "Example: import pihal.bcm283x"
        )

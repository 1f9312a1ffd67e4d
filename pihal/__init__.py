"""Raspberry Pi hardware abstraction layer.

Drives BCM283x GPIO, PWM, clock, SPI and I2C peripherals through
memory-mapped register windows, with pin-level change events fed by an
edge detector.

Getting started:
    from pihal import PinFunction, create_board

    board = create_board("rpi3_b")
    pin = board.get_pin(18)
    pin.set_function(PinFunction.OUTPUT)
    pin.high()

Without hardware, pass window_factory=SimulatedWindowFactory().
"""

# Core abstractions
from pihal.core.board import (
    Board,
    create_board,
    list_available_boards,
    verify_boards_registered,
)
from pihal.core.builders import BoardBuilder
from pihal.core.exceptions import (
    ConfigurationError,
    InitializationError,
    InvalidPinFunctionError,
    InvalidValueError,
    PiHalError,
)
from pihal.core.loop import Loop
from pihal.core.pin import Pin
from pihal.interfaces.gpio_enums import PinFunction, PinLevel, PullDirection
from pihal.sim import SimulatedWindowFactory

# Board variants (auto-registers when imported)
from pihal.bcm283x.boards import detect_board

__all__ = [
    # Core
    "Board",
    "BoardBuilder",
    "Loop",
    "Pin",
    "PinFunction",
    "PinLevel",
    "PullDirection",
    "SimulatedWindowFactory",
    # Errors
    "PiHalError",
    "ConfigurationError",
    "InitializationError",
    "InvalidPinFunctionError",
    "InvalidValueError",
    # Board creation
    "create_board",
    "detect_board",
    "list_available_boards",
    "verify_boards_registered",
]

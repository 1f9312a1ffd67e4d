"""Core modules for pihal.

Board-agnostic infrastructure:
- bitfield: pin number -> (bank, mask, shift) for packed register fields
- register: word register storage used by simulated windows
- window: mmap-backed register windows
- events: synchronous event emitter
- pin: GPIO pin with change-detecting caches
- edge_detector / sysfs: level-transition detection backends
- loop: cooperative scheduler driving edge detection
- board / builders: Board composition root, registry and builder
"""

from pihal.core.bitfield import BitFieldAddress, compute_address
from pihal.core.board import (
    Board,
    BoardRegistry,
    create_board,
    get_board,
    list_available_boards,
    register_board,
    verify_boards_registered,
)
from pihal.core.builders import BoardBuilder
from pihal.core.edge_detector import (
    BaseEdgeDetector,
    PollingEdgeDetector,
    create_edge_detector,
)
from pihal.core.events import EventEmitter
from pihal.core.loop import Loop
from pihal.core.pin import Pin
from pihal.core.register import (
    ReadOnlyRegister,
    Register,
    RegisterFile,
    SimpleRegister,
    WriteOnlyRegister,
)
from pihal.core.sysfs import SysfsEdgeDetector, SysfsGPIO
from pihal.core.window import MemoryMappedWindow, mmap_window_factory

__all__ = [
    # Addressing
    "BitFieldAddress",
    "compute_address",
    # Register abstractions
    "Register",
    "SimpleRegister",
    "ReadOnlyRegister",
    "WriteOnlyRegister",
    "RegisterFile",
    "MemoryMappedWindow",
    "mmap_window_factory",
    # Pins and events
    "EventEmitter",
    "Pin",
    # Edge detection
    "BaseEdgeDetector",
    "PollingEdgeDetector",
    "SysfsEdgeDetector",
    "SysfsGPIO",
    "create_edge_detector",
    "Loop",
    # Board
    "Board",
    "BoardBuilder",
    "BoardRegistry",
    "create_board",
    "get_board",
    "list_available_boards",
    "register_board",
    "verify_boards_registered",
]

"""Interfaces package.

Defines the abstract contracts the core builds on: register windows, edge
detection backends and the GPIO enumerations.
"""

from pihal.interfaces.edge_detector import EdgeDetector
from pihal.interfaces.gpio_enums import PinFunction, PinLevel, PullDirection
from pihal.interfaces.window import AddressRange, PeripheralFamily, RegisterWindow

__all__ = [
    "AddressRange",
    "EdgeDetector",
    "PeripheralFamily",
    "PinFunction",
    "PinLevel",
    "PullDirection",
    "RegisterWindow",
]

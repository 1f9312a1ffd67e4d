"""GPIO enumeration types."""

from enum import IntEnum


class PinFunction(IntEnum):
    """GPIO function-select codes.

    Values are the raw 3-bit codes written to the GPFSELn registers. The
    alternate function codes are not in numeric order on BCM283x parts.
    """

    INPUT = 0b000
    """GPIO pin configured as digital input."""

    OUTPUT = 0b001
    """GPIO pin configured as digital output."""

    ALT0 = 0b100
    ALT1 = 0b101
    ALT2 = 0b110
    ALT3 = 0b111
    ALT4 = 0b011
    ALT5 = 0b010


class PinLevel(IntEnum):
    """GPIO pin logic level enumeration.

    Represents the digital logic level on a GPIO pin.
    """

    LOW = 0
    """Logic level LOW (0V, digital 0)."""

    HIGH = 1
    """Logic level HIGH (3.3V, digital 1)."""


class PullDirection(IntEnum):
    """Pull resistor codes written to GPPUD."""

    NONE = 0b00
    DOWN = 0b01
    UP = 0b10

"""Numbered peripheral handles handed out by a Board."""

from pihal.peripherals.base import BasePeripheral
from pihal.peripherals.clock import Clock
from pihal.peripherals.i2c import I2C
from pihal.peripherals.pwm import PWM
from pihal.peripherals.spi import SPI

__all__ = ["BasePeripheral", "Clock", "I2C", "PWM", "SPI"]

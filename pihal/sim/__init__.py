"""In-memory register windows for running boards without hardware."""

from pihal.sim.window import SimulatedGPIOWindow, SimulatedWindow, SimulatedWindowFactory

__all__ = ["SimulatedGPIOWindow", "SimulatedWindow", "SimulatedWindowFactory"]

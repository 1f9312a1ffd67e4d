import argparse
import sys
from pathlib import Path

# Ensure local repo package is used even if another "pihal" is on PYTHONPATH.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pihal import PinFunction, SimulatedWindowFactory, create_board
from pihal.core.edge_detector import PollingEdgeDetector


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch a GPIO input on a simulated Raspberry Pi while a square wave drives it."
    )
    parser.add_argument("--board", default="rpi3_b", help="Registered board variant")
    parser.add_argument("--pin", type=int, default=17, help="BCM GPIO number to watch")
    parser.add_argument("--steps", type=int, default=10, help="Number of loop ticks to run")
    parser.add_argument(
        "--period",
        type=int,
        default=3,
        help="Ticks between simulated level flips",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    factory = SimulatedWindowFactory()
    with create_board(
        args.board, window_factory=factory, edge_detector_factory=PollingEdgeDetector
    ) as board:
        pin = board.get_pin(args.pin).set_function(PinFunction.INPUT)
        pin.on(pin.EVENT_LEVEL_HIGH, lambda: print(f"tick {board.loop.tick_count}: HIGH"))
        pin.on(pin.EVENT_LEVEL_LOW, lambda: print(f"tick {board.loop.tick_count}: LOW"))

        gpio = board.get_gpio_register()
        level = 0
        for step in range(args.steps):
            if step and step % args.period == 0:
                level ^= 1
                gpio.drive(args.pin, level)
            board.step()


if __name__ == "__main__":
    main()

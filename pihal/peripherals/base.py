"""Base peripheral helpers for shared behavior."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pihal.core.exceptions import InvalidValueError

if TYPE_CHECKING:
    from pihal.core.board import Board


class BasePeripheral:
    """Base class for numbered peripheral handles.

    Validates the instance number against the board's SoC tables and
    provides pin-muxing helpers. Concrete handles add register access.
    """

    KIND = "peripheral"

    def __init__(self, board: Board, number: int):
        supported = self.supported_numbers(board)
        if number not in supported:
            raise InvalidValueError(f"{self.KIND} number", number, supported)
        self._board = board
        self._number = number

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._number})"

    @classmethod
    def supported_numbers(cls, board: Board) -> tuple[int, ...]:
        """Instance numbers the board's SoC offers (override in subclasses)."""
        raise NotImplementedError("supported_numbers() must be implemented by subclasses")

    @property
    def board(self) -> Board:
        return self._board

    @property
    def number(self) -> int:
        return self._number

    @property
    def name(self) -> str:
        return f"{self.KIND}{self._number}"

    def _configure_pins(self, assignments: dict[int, str]) -> None:
        """Switch pins to the named alternate functions, pin -> name."""
        for pin_number, function in assignments.items():
            self._board.get_pin(pin_number).set_function(function)

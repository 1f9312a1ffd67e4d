"""Composition helpers for boards.

Board variants differ only in data: which SoC they carry, what their header
looks like and a couple of capability flags. BoardBuilder assembles those
pieces explicitly so a variant is a configuration entry, not a subclass.
"""

from __future__ import annotations

from typing import Optional

from pihal.core.board import Board, WindowFactory
from pihal.core.edge_detector import EdgeDetectorFactory
from pihal.core.exceptions import ConfigurationError
from pihal.core.loop import Loop
from pihal.utils.config_loader import BoardSpec, HalConfig, HeaderLayout, SoCConfig


class BoardBuilder:
    """Step-by-step Board composition.

    Example:
        board = (
            BoardBuilder("bench")
            .with_soc(cfg.socs["bcm2837"])
            .with_header(cfg.headers["j8_40"])
            .with_hdmi()
            .with_window_factory(SimulatedWindowFactory())
            .build()
        )
    """

    def __init__(self, name: str):
        self._name = name
        self._soc: Optional[SoCConfig] = None
        self._header: HeaderLayout = {}
        self._hdmi = False
        self._ethernet = False
        self._window_factory: Optional[WindowFactory] = None
        self._edge_detector_factory: Optional[EdgeDetectorFactory] = None
        self._loop: Optional[Loop] = None

    @classmethod
    def from_spec(cls, spec: BoardSpec, config: HalConfig) -> BoardBuilder:
        """Builder pre-populated from a configured board variant."""
        return (
            cls(spec.name)
            .with_soc(config.socs[spec.soc])
            .with_header(config.headers[spec.header])
            .with_hdmi(spec.hdmi)
            .with_ethernet(spec.ethernet)
        )

    def with_soc(self, soc: SoCConfig) -> BoardBuilder:
        self._soc = soc
        return self

    def with_header(self, header: HeaderLayout) -> BoardBuilder:
        self._header = dict(header)
        return self

    def with_hdmi(self, present: bool = True) -> BoardBuilder:
        self._hdmi = present
        return self

    def with_ethernet(self, present: bool = True) -> BoardBuilder:
        self._ethernet = present
        return self

    def with_window_factory(self, factory: Optional[WindowFactory]) -> BoardBuilder:
        self._window_factory = factory
        return self

    def with_edge_detector_factory(
        self, factory: Optional[EdgeDetectorFactory]
    ) -> BoardBuilder:
        self._edge_detector_factory = factory
        return self

    def with_loop(self, loop: Optional[Loop]) -> BoardBuilder:
        self._loop = loop
        return self

    def build(self) -> Board:
        """Create the board.

        Raises:
            ConfigurationError: If no SoC was given
        """
        if self._soc is None:
            raise ConfigurationError(
                f"boards.{self._name}.soc", "a board cannot be built without an SoC"
            )

        return Board(
            self._name,
            self._soc,
            self._header,
            hdmi=self._hdmi,
            ethernet=self._ethernet,
            window_factory=self._window_factory,
            edge_detector_factory=self._edge_detector_factory,
            loop=self._loop,
        )

"""Raspberry Pi board variants.

Every variant listed under `boards` in the bundled configuration is
registered with the global board registry when this module is imported.
A variant's factory accepts the Board composition overrides (window
factory, edge detector factory, loop) as keyword arguments.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from pihal.core.board import Board, WindowFactory, list_available_boards, register_board
from pihal.core.builders import BoardBuilder
from pihal.core.edge_detector import EdgeDetectorFactory
from pihal.core.exceptions import InvalidValueError
from pihal.core.loop import Loop
from pihal.utils.config_loader import BoardSpec, HalConfig, get_config
from pihal.utils.meta import CPUINFO_PATH, get_meta

logger = logging.getLogger(__name__)


def _board_factory(spec: BoardSpec, config: HalConfig) -> Callable[..., Board]:
    def create(
        window_factory: Optional[WindowFactory] = None,
        edge_detector_factory: Optional[EdgeDetectorFactory] = None,
        loop: Optional[Loop] = None,
    ) -> Board:
        return (
            BoardBuilder.from_spec(spec, config)
            .with_window_factory(window_factory)
            .with_edge_detector_factory(edge_detector_factory)
            .with_loop(loop)
            .build()
        )

    return create


def register_bcm283x_boards(config: Optional[HalConfig] = None) -> list[str]:
    """Register every configured variant that is not registered yet."""
    config = config or get_config()
    available = set(list_available_boards())
    registered = []
    for name, spec in config.boards.items():
        if name in available:
            continue
        register_board(name, _board_factory(spec, config))
        registered.append(name)

    logger.debug("Registered boards: %s", ", ".join(registered))
    return registered


def detect_board(cpuinfo_path: str = CPUINFO_PATH, **kwargs: Any) -> Board:
    """Create the board variant matching the host's revision code.

    Raises:
        InvalidValueError: If the host reports no revision, or one no
            configured variant lists
    """
    config = get_config()
    meta = get_meta(cpuinfo_path, use_lscpu=False, config=config)
    if meta.board_name is None:
        supported = sorted(r for spec in config.boards.values() for r in spec.revisions)
        raise InvalidValueError("board revision", meta.revision, supported)

    logger.info("Detected %s (revision %s)", meta.board_name, meta.revision)
    return _board_factory(config.boards[meta.board_name], config)(**kwargs)


register_bcm283x_boards()

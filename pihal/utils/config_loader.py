"""Helpers for loading and validating SoC and board configuration."""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml  # type: ignore[import-untyped]

from pihal.core.exceptions import ConfigurationError
from pihal.interfaces.gpio_enums import PinFunction
from pihal.interfaces.window import AddressRange, PeripheralFamily

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "bcm283x" / "config.yaml"

PinFunctionMatrix = dict[int, dict[str, PinFunction]]
HeaderLayout = dict[int, Optional[int]]


@dataclass(frozen=True)
class WindowConfig:
    offset: int
    size: int


@dataclass(frozen=True)
class SoCConfig:
    """Capability object for one SoC: address map, peripherals, pin matrix."""

    name: str
    peripheral_base: int
    gpio_count: int
    windows: dict[PeripheralFamily, WindowConfig]
    pwm_channels: tuple[int, ...]
    clocks: tuple[int, ...]
    spi_buses: tuple[int, ...]
    i2c_buses: tuple[int, ...]
    pin_functions: PinFunctionMatrix

    def window_range(self, family: PeripheralFamily) -> AddressRange:
        try:
            window = self.windows[family]
        except KeyError as exc:
            raise ConfigurationError(
                f"soc.{self.name}.windows", f"no {family.value} window"
            ) from exc
        return AddressRange(self.peripheral_base + window.offset, window.size)


@dataclass(frozen=True)
class BoardSpec:
    name: str
    soc: str
    header: str
    hdmi: bool = False
    ethernet: bool = False
    revisions: tuple[str, ...] = ()


@dataclass(frozen=True)
class HalConfig:
    socs: dict[str, SoCConfig]
    headers: dict[str, HeaderLayout]
    boards: dict[str, BoardSpec] = field(default_factory=dict)

    def board_for_revision(self, revision: str) -> Optional[str]:
        """Return the board name whose revision list contains revision."""
        revision = revision.strip().lower()
        candidates = [revision]
        # Over-voltage / warranty bits are prefixed to old-style codes
        if len(revision) > 4 and not revision.startswith(("9", "a", "b", "c")):
            candidates.append(revision[-4:])
        for candidate in candidates:
            for spec in self.boards.values():
                if candidate in spec.revisions:
                    return spec.name
        return None


# Configuration cache with thread safety
_LOADER_CACHE: dict[str, HalConfig] = {}
_CACHE_LOCK = threading.RLock()


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse config: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config root must be a mapping: {path}")
    return raw


def _build_pin_functions(raw: dict[Any, Any]) -> PinFunctionMatrix:
    matrix: PinFunctionMatrix = {}
    for pin, functions in raw.items():
        try:
            matrix[int(pin)] = {
                str(name): PinFunction[str(code)] for name, code in (functions or {}).items()
            }
        except KeyError as exc:
            raise ConfigurationError(
                f"pin_functions.{pin}", f"unknown function code {exc}"
            ) from exc
    return matrix


def _build_windows(raw: dict[str, Any]) -> dict[PeripheralFamily, WindowConfig]:
    windows = {}
    for name, window in raw.items():
        try:
            family = PeripheralFamily(name)
        except ValueError as exc:
            raise ConfigurationError(f"windows.{name}", "unknown peripheral family") from exc
        windows[family] = WindowConfig(offset=int(window["offset"]), size=int(window["size"]))
    return windows


def _build_soc_cfg(name: str, family_raw: dict[str, Any], soc_raw: dict[str, Any]) -> SoCConfig:
    merged = {**family_raw, **(soc_raw or {})}
    peripherals = merged.get("peripherals", {})

    return SoCConfig(
        name=name,
        peripheral_base=int(merged["peripheral_base"]),
        gpio_count=int(merged["gpio_count"]),
        windows=_build_windows(merged["windows"]),
        pwm_channels=tuple(int(n) for n in peripherals.get("pwm", ())),
        clocks=tuple(int(n) for n in peripherals.get("clock", ())),
        spi_buses=tuple(int(n) for n in peripherals.get("spi", ())),
        i2c_buses=tuple(int(n) for n in peripherals.get("i2c", ())),
        pin_functions=_build_pin_functions(merged.get("pin_functions", {})),
    )


def _build_header(name: str, raw: list[Any]) -> HeaderLayout:
    if not isinstance(raw, list):
        raise ConfigurationError(f"headers.{name}", "must be a list of GPIO numbers")
    return {physical: (None if gpio is None else int(gpio)) for physical, gpio in enumerate(raw, start=1)}


def _build_board_spec(name: str, raw: dict[str, Any]) -> BoardSpec:
    return BoardSpec(
        name=name,
        soc=str(raw["soc"]),
        header=str(raw["header"]),
        hdmi=bool(raw.get("hdmi", False)),
        ethernet=bool(raw.get("ethernet", False)),
        revisions=tuple(str(r).lower() for r in raw.get("revisions", ())),
    )


def _parse_hal_cfg_from_dict(raw: dict[str, Any]) -> HalConfig:
    try:
        family_raw = raw.get("family", {})
        socs = {
            name: _build_soc_cfg(name, family_raw, soc_raw)
            for name, soc_raw in raw["socs"].items()
        }
        headers = {name: _build_header(name, layout) for name, layout in raw.get("headers", {}).items()}
        boards = {name: _build_board_spec(name, spec) for name, spec in raw.get("boards", {}).items()}
        cfg = HalConfig(socs=socs, headers=headers, boards=boards)
    except KeyError as exc:
        raise ConfigurationError(f"Missing required config key: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config schema: {exc}") from exc

    _validate_hal_config(cfg)
    return cfg


def _validate_hal_config(cfg: HalConfig) -> None:
    """Cross-reference checks to fail fast on bad configs."""
    for soc in cfg.socs.values():
        if soc.gpio_count <= 0:
            raise ConfigurationError(f"soc.{soc.name}.gpio_count", "must be positive")
        for family, window in soc.windows.items():
            if window.size <= 0:
                raise ConfigurationError(f"soc.{soc.name}.windows.{family.value}", "size must be positive")
        for pin in soc.pin_functions:
            if not 0 <= pin < soc.gpio_count:
                raise ConfigurationError(f"soc.{soc.name}.pin_functions", f"pin {pin} out of range")

    for board in cfg.boards.values():
        if board.soc not in cfg.socs:
            raise ConfigurationError(f"boards.{board.name}.soc", f"unknown SoC '{board.soc}'")
        if board.header not in cfg.headers:
            raise ConfigurationError(f"boards.{board.name}.header", f"unknown header '{board.header}'")


def load_config(path: Optional[str] = None) -> HalConfig:
    """Load and validate configuration from a YAML file.

    Args:
        path: Optional path to YAML config. If None, load the bundled
            pihal/bcm283x/config.yaml.

    Returns:
        HalConfig instance

    Raises:
        ConfigurationError: on parse or validation errors
    """
    p = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    logger.debug("Loading configuration from %s", p)
    raw = _load_yaml_file(p)

    return _parse_hal_cfg_from_dict(raw=raw)


def get_config(path: Optional[str] = None) -> HalConfig:
    """Return the loaded config for path, loading and caching if necessary.

    THREAD SAFETY: This function is thread-safe. Multiple threads can
    safely call this concurrently.
    """
    key = str(path) if path is not None else str(DEFAULT_CONFIG_PATH)
    with _CACHE_LOCK:
        if key not in _LOADER_CACHE:
            _LOADER_CACHE[key] = load_config(path)
        return _LOADER_CACHE[key]


def clear_config_cache() -> None:
    """Clear all cached configurations.

    All subsequent calls to get_config() will reload from disk.
    """
    with _CACHE_LOCK:
        _LOADER_CACHE.clear()

"""Host board metadata read from /proc/cpuinfo and lscpu."""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from pihal.utils.config_loader import HalConfig, get_config

logger = logging.getLogger(__name__)

CPUINFO_PATH = "/proc/cpuinfo"


@dataclass
class BoardMeta:
    serial: str = "unknown"
    speed: float = 0.0
    cpu: str = "unknown"
    num_cores: int = 0
    revision: Optional[str] = None
    board_name: Optional[str] = None


def _read_cpuinfo(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as fh:
            return fh.read()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return ""


def _run_lscpu() -> str:
    try:
        result = subprocess.run(
            ["lscpu"], capture_output=True, text=True, check=False, timeout=5
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("lscpu unavailable: %s", exc)
        return ""
    return result.stdout


def parse_meta(text: str) -> BoardMeta:
    """Parse "tag : value" lines; unknown tags are ignored."""
    meta = BoardMeta()
    for line in text.splitlines():
        tag, sep, value = line.partition(":")
        if not sep:
            continue
        tag = tag.strip().lower()
        value = value.strip()

        if tag == "revision":
            meta.revision = value
        elif tag == "serial":
            meta.serial = value
        elif tag == "model name":
            meta.cpu = value
        elif tag == "cpu(s)":
            try:
                meta.num_cores = int(value)
            except ValueError:
                logger.debug("Ignoring CPU count %r", value)
        elif tag == "cpu max mhz":
            try:
                meta.speed = float(value)
            except ValueError:
                logger.debug("Ignoring CPU speed %r", value)
    return meta


def get_meta(
    cpuinfo_path: str = CPUINFO_PATH,
    use_lscpu: bool = True,
    config: Optional[HalConfig] = None,
) -> BoardMeta:
    """Describe the host: serial, CPU, cores, speed, revision and board name.

    board_name is the registered variant whose revision list contains the
    host's revision code, or None on unknown hardware.
    """
    text = _read_cpuinfo(cpuinfo_path)
    if use_lscpu:
        text += "\n" + _run_lscpu()

    meta = parse_meta(text)
    if meta.revision:
        meta.board_name = (config or get_config()).board_for_revision(meta.revision)
    return meta

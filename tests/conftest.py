"""
Pytest configuration and shared fixtures for the pihal test suite.
"""

import copy
import sys
import tempfile
from pathlib import Path

import pytest
import yaml

# Ensure project root is on PYTHONPATH so 'pihal' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# pylint: disable=wrong-import-position
from pihal.core.builders import BoardBuilder
from pihal.core.edge_detector import PollingEdgeDetector
from pihal.sim import SimulatedWindowFactory
from pihal.utils.config_loader import clear_config_cache, get_config


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


WINDOWS_CFG = {
    "gpio": {"offset": 0x200000, "size": 0x1000},
    "pwm": {"offset": 0x20C000, "size": 0x1000},
    "clock": {"offset": 0x101000, "size": 0x1000},
    "spi": {"offset": 0x204000, "size": 0x1000},
    "aux": {"offset": 0x215000, "size": 0x1000},
}


@pytest.fixture
def minimal_hal_config_dict():
    """
    Fixture providing a minimal valid configuration dictionary.

    Returns:
        dict: One SoC, one header and one board
    """
    return {
        "family": {
            "gpio_count": 54,
            "windows": copy.deepcopy(WINDOWS_CFG),
            "peripherals": {"pwm": [0, 1], "clock": [0, 1, 2], "spi": [0], "i2c": [1]},
            "pin_functions": {
                2: {"SDA1": "ALT0"},
                3: {"SCL1": "ALT0"},
                18: {"PCM_CLK": "ALT0", "PWM0": "ALT5"},
            },
        },
        "socs": {"testsoc": {"peripheral_base": 0x3F000000}},
        "headers": {"tiny": [None, None, 2, None, 3]},
        "boards": {
            "test_board": {
                "soc": "testsoc",
                "header": "tiny",
                "hdmi": True,
                "revisions": ["c0ffee"],
            }
        },
    }


@pytest.fixture
def temp_config_yaml_file(temp_yaml_file, minimal_hal_config_dict):
    """
    Fixture that creates a temporary YAML file with valid configuration.

    Yields:
        Path: Path to the temporary YAML file with valid configuration
    """
    with open(temp_yaml_file, "w", encoding="utf-8") as f:
        yaml.dump(minimal_hal_config_dict, f)

    yield temp_yaml_file


@pytest.fixture
def hal_config():
    """The bundled BCM283x configuration."""
    return get_config()


@pytest.fixture
def window_factory():
    return SimulatedWindowFactory()


@pytest.fixture
def board(hal_config, window_factory):
    """A Raspberry Pi 3 style board running on simulated registers."""
    sim_board = (
        BoardBuilder("sim_rpi3")
        .with_soc(hal_config.socs["bcm2837"])
        .with_header(hal_config.headers["j8_40"])
        .with_hdmi()
        .with_ethernet()
        .with_window_factory(window_factory)
        .with_edge_detector_factory(PollingEdgeDetector)
        .build()
    )
    yield sim_board
    sim_board.close()


@pytest.fixture
def gpio(board):
    """The simulated GPIO window of the board fixture."""
    return board.get_gpio_register()


@pytest.fixture(autouse=True)
def pull_settle_sleeps(monkeypatch):
    """Skip the pull-resistor settle delay; records requested durations."""
    sleeps = []
    monkeypatch.setattr("pihal.core.pin.time.sleep", sleeps.append)
    return sleeps


@pytest.fixture(autouse=True)
def fresh_config_cache():
    yield
    clear_config_cache()


def pytest_configure(config):
    """
    Hook for initial pytest configuration.

    Used to add custom markers and configuration.
    """
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")

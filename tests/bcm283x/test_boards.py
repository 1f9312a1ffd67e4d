import pytest

from pihal.bcm283x.boards import detect_board, register_bcm283x_boards
from pihal.core.board import BoardRegistry, create_board, list_available_boards
from pihal.core.edge_detector import PollingEdgeDetector
from pihal.core.exceptions import InvalidValueError
from pihal.core.loop import Loop
from pihal.sim import SimulatedWindowFactory
from pihal.utils.config_loader import load_config


@pytest.fixture
def cpuinfo(tmp_path):
    def write(revision):
        path = tmp_path / "cpuinfo"
        path.write_text(f"Hardware\t: BCM2835\nRevision\t: {revision}\n", encoding="utf-8")
        return str(path)

    return write


def test_bundled_variants_registered():
    names = list_available_boards()
    for name in ("rpi_b_rev1", "rpi_b_rev2", "rpi_zero", "rpi2_b", "rpi3_b", "rpi3_b_plus"):
        assert name in names


def test_create_registered_variant():
    loop = Loop()
    with create_board(
        "rpi3_b",
        window_factory=SimulatedWindowFactory(),
        edge_detector_factory=PollingEdgeDetector,
        loop=loop,
    ) as board:
        assert board.name == "rpi3_b"
        assert board.soc.name == "bcm2837"
        assert board.has_hdmi and board.has_ethernet
        assert board.loop is loop
        assert not board.hardware_backed
        assert board.get_physical_pin(12).pin_number == 18


def test_rev1_header_differs():
    with create_board("rpi_b_rev1", window_factory=SimulatedWindowFactory()) as board:
        assert board.get_physical_pin(3).pin_number == 0
        assert board.soc.peripheral_base == 0x20000000


def test_register_skips_existing(monkeypatch):
    registry = BoardRegistry()
    monkeypatch.setattr("pihal.core.board._REGISTRY", registry)

    first = register_bcm283x_boards()
    assert "rpi3_b" in first
    assert register_bcm283x_boards() == []


def test_register_custom_config(monkeypatch, temp_config_yaml_file):
    registry = BoardRegistry()
    monkeypatch.setattr("pihal.core.board._REGISTRY", registry)

    cfg = load_config(str(temp_config_yaml_file))
    assert register_bcm283x_boards(cfg) == ["test_board"]

    board = registry.create("test_board", window_factory=SimulatedWindowFactory())
    assert board.get_physical_pins() == {1: None, 2: None, 3: 2, 4: None, 5: 3}
    board.close()


def test_detect_known_board(cpuinfo):
    board = detect_board(cpuinfo("a22082"), window_factory=SimulatedWindowFactory())
    try:
        assert board.name == "rpi3_b"
    finally:
        board.close()


def test_detect_unknown_revision(cpuinfo):
    with pytest.raises(InvalidValueError, match="board revision") as excinfo:
        detect_board(cpuinfo("ffffff"))
    assert "a02082" in excinfo.value.details["supported"]


def test_detect_without_cpuinfo(tmp_path):
    with pytest.raises(InvalidValueError):
        detect_board(str(tmp_path / "absent"))

import sys

import pytest

import pihal.core.window as window_module
from pihal.core.exceptions import (
    InitializationError,
    RegisterAlignmentError,
    RegisterBoundsError,
)
from pihal.core.window import MemoryMappedWindow, mmap_window_factory
from pihal.interfaces.window import AddressRange, PeripheralFamily


@pytest.fixture
def device_file(tmp_path):
    """A regular file standing in for a memory device, two pages long."""
    path = tmp_path / "mem"
    path.write_bytes(bytes(8192))
    return path


def test_maps_device_and_writes_through(device_file):
    window = MemoryMappedWindow(
        PeripheralFamily.PWM, AddressRange(0, 0x1000), devices=[str(device_file)]
    )
    window.write(0x4, 0xDEADBEEF)
    assert window.read(0x4) == 0xDEADBEEF
    window.close()

    data = device_file.read_bytes()
    assert int.from_bytes(data[4:8], sys.byteorder) == 0xDEADBEEF
    assert window.device == str(device_file)


def test_maps_at_physical_offset(device_file):
    raw = bytearray(8192)
    raw[0x1010:0x1014] = (0x1234).to_bytes(4, sys.byteorder)
    device_file.write_bytes(bytes(raw))

    window = MemoryMappedWindow(
        PeripheralFamily.CLOCK, AddressRange(0x1000, 0x1000), devices=[str(device_file)]
    )
    try:
        assert window.read(0x10) == 0x1234
    finally:
        window.close()


def test_write_masks_to_32_bits(device_file):
    window = MemoryMappedWindow(
        PeripheralFamily.PWM, AddressRange(0, 0x1000), devices=[str(device_file)]
    )
    window.write(0, 0x1_0000_0001)
    assert window.read(0) == 1
    window.close()


def test_gpio_prefers_gpiomem_at_offset_zero(device_file, tmp_path, monkeypatch):
    monkeypatch.setattr(window_module, "DEV_GPIOMEM", str(device_file))
    monkeypatch.setattr(window_module, "DEV_MEM", str(tmp_path / "no-mem"))

    window = mmap_window_factory(PeripheralFamily.GPIO, AddressRange(0x3F200000, 0x1000))

    assert window.device == str(device_file)
    window.close()


def test_gpio_falls_back_to_dev_mem(device_file, tmp_path, monkeypatch):
    monkeypatch.setattr(window_module, "DEV_GPIOMEM", str(tmp_path / "no-gpiomem"))
    monkeypatch.setattr(window_module, "DEV_MEM", str(device_file))

    window = mmap_window_factory(PeripheralFamily.GPIO, AddressRange(0x1000, 0x1000))

    assert window.device == str(device_file)
    window.close()


def test_mapping_failure_raises_initialization_error(tmp_path):
    with pytest.raises(InitializationError) as exc_info:
        MemoryMappedWindow(
            PeripheralFamily.SPI,
            AddressRange(0x3F204000, 0x1000),
            devices=[str(tmp_path / "missing")],
        )

    exc = exc_info.value
    assert exc.family == "spi"
    assert exc.details["range"] == "0x3F204000-0x3F205000"
    assert "missing" in str(exc)


def test_unaligned_physical_base_rejected(device_file):
    with pytest.raises(InitializationError):
        MemoryMappedWindow(
            PeripheralFamily.PWM, AddressRange(0x10, 0x1000), devices=[str(device_file)]
        )


class TestAccessChecks:
    @pytest.fixture
    def window(self, device_file):
        win = MemoryMappedWindow(
            PeripheralFamily.PWM, AddressRange(0, 0x1000), devices=[str(device_file)]
        )
        yield win
        win.close()

    def test_unaligned_offset(self, window):
        with pytest.raises(RegisterAlignmentError):
            window.read(0x2)

    @pytest.mark.parametrize("offset", [-4, 0x1000, 0x2000])
    def test_out_of_bounds_offset(self, window, offset):
        with pytest.raises(RegisterBoundsError):
            window.write(offset, 0)

    def test_last_word_is_accessible(self, window):
        window.write(0xFFC, 7)
        assert window.read(0xFFC) == 7

    def test_close_is_idempotent(self, window):
        assert not window.closed
        window.close()
        window.close()
        assert window.closed

    def test_access_after_close_fails(self, window):
        window.close()
        with pytest.raises(InitializationError):
            window.read(0)
        with pytest.raises(InitializationError):
            window.write(0, 1)

import pytest

from pihal.bcm283x.consts import (
    CM_CTL,
    CM_CTL_BUSY,
    CM_CTL_ENAB,
    CM_PASSWORD,
    CM_SRC_OSCILLATOR,
    CM_SRC_PLLD,
)
from pihal.core.exceptions import InvalidValueError
from pihal.interfaces.gpio_enums import PinFunction
from pihal.peripherals import Clock


@pytest.fixture
def clock_window(board):
    return board.get_clock_register()


def test_start_sets_source_before_enable(board, clock_window):
    board.get_clock(Clock.GP0).start(CM_SRC_PLLD)

    assert clock_window.writes_to(CM_CTL[0]) == [
        CM_PASSWORD | CM_SRC_PLLD,
        CM_PASSWORD | CM_SRC_PLLD | CM_CTL_ENAB,
    ]


def test_default_source_is_oscillator(board, clock_window):
    board.get_clock(Clock.PWM).start()
    assert clock_window.read(CM_CTL[4]) & 0xF == CM_SRC_OSCILLATOR


def test_invalid_source(board):
    with pytest.raises(ValueError):
        board.get_clock(Clock.GP1).start(16)


def test_stop_clears_enable_with_password(board, clock_window):
    clock = board.get_clock(Clock.GP2).start()
    clock.stop()

    assert clock_window.writes_to(CM_CTL[2])[-1] == CM_PASSWORD | CM_SRC_OSCILLATOR
    assert not clock.is_running()


def test_is_running_follows_busy_flag(board, clock_window):
    clock = board.get_clock(Clock.PCM)
    assert not clock.is_running()
    clock_window.write(CM_CTL[3], CM_CTL_BUSY)
    assert clock.is_running()


def test_divisor_round_trip(board, clock_window):
    clock = board.get_clock(Clock.GP0).set_divisor(19, 2048)

    assert clock_window.read(CM_CTL[0] + 4) == CM_PASSWORD | (19 << 12) | 2048
    assert clock.get_divisor() == (19, 2048)


@pytest.mark.parametrize("integer, fraction", [(0, 0), (0x1000, 0), (2, 0x1000), (2, -1)])
def test_divisor_out_of_range(board, integer, fraction):
    with pytest.raises(ValueError):
        board.get_clock(Clock.GP0).set_divisor(integer, fraction)


def test_general_purpose_clock_pin(board):
    board.get_clock(Clock.GP0).setup_pin()
    assert board.get_pin(4).get_function() == PinFunction.ALT0
    assert board.get_pin(4).get_function_name() == "GPCLK0"


def test_pcm_clock_has_no_pin(board):
    with pytest.raises(ValueError):
        board.get_clock(Clock.PCM).setup_pin()


def test_unknown_clock(board):
    with pytest.raises(InvalidValueError):
        board.get_clock(7)

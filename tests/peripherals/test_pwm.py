import pytest

from pihal.bcm283x.consts import PWM_CTL, PWM_DAT, PWM_RNG
from pihal.core.exceptions import InvalidValueError
from pihal.interfaces.gpio_enums import PinFunction
from pihal.peripherals import PWM


@pytest.fixture
def pwm_window(board):
    return board.get_pwm_register()


def test_channels_come_from_soc(board):
    assert PWM.supported_numbers(board) == (0, 1)
    with pytest.raises(InvalidValueError) as exc_info:
        PWM(board, 2)
    assert exc_info.value.kind == "pwm number"


def test_start_and_stop_toggle_only_own_enable_bit(board, pwm_window):
    pwm0, pwm1 = board.get_pwm(0), board.get_pwm(1)

    pwm1.start()
    pwm0.start()
    assert pwm_window.read(PWM_CTL) == (1 << 0) | (1 << 8)
    assert pwm0.is_running() and pwm1.is_running()

    pwm1.stop()
    assert pwm_window.read(PWM_CTL) == 1
    assert not pwm1.is_running()


def test_mark_space_bit(board, pwm_window):
    board.get_pwm(1).set_mark_space()
    assert pwm_window.read(PWM_CTL) == 1 << 15
    board.get_pwm(1).set_mark_space(False)
    assert pwm_window.read(PWM_CTL) == 0


def test_range_and_data_registers(board, pwm_window):
    pwm = board.get_pwm(1).set_range(1024).set_data(256)

    assert pwm_window.read(PWM_RNG[1]) == 1024
    assert pwm_window.read(PWM_DAT[1]) == 256
    assert pwm.get_range() == 1024
    assert pwm.get_data() == 256


@pytest.mark.parametrize("value", [-1, 1 << 32])
def test_register_values_must_fit_a_word(board, value):
    with pytest.raises(ValueError):
        board.get_pwm(0).set_range(value)


def test_setup_pin_routes_channel(board):
    board.get_pwm(0).setup_pin(18)
    assert board.get_pin(18).get_function() == PinFunction.ALT5
    assert board.get_pin(18).get_function_name() == "PWM0"


def test_name(board):
    assert board.get_pwm(1).name == "pwm1"
    assert repr(board.get_pwm(1)) == "PWM(1)"

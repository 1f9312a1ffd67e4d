import pytest

from pihal.core.bitfield import FIELD_WIDTHS, BitFieldAddress, compute_address


@pytest.mark.parametrize("width", FIELD_WIDTHS)
def test_mask_is_width_contiguous_bits_at_shift(width):
    for pin in range(0, 120):
        bank, mask, shift = compute_address(pin, width)

        assert shift < 32
        assert mask >> shift == (1 << width) - 1
        assert mask & ((1 << shift) - 1) == 0
        assert mask < 1 << 32
        assert bank == pin // (32 // width)


def test_pin_18_function_select_field():
    # 10 fields of 3 bits per bank: 18 -> bank 1, index 8
    assert compute_address(18, 3) == BitFieldAddress(bank=1, mask=0b111 << 24, shift=24)


def test_level_field_crosses_into_second_bank():
    assert compute_address(31, 1) == BitFieldAddress(0, 1 << 31, 31)
    assert compute_address(32, 1) == BitFieldAddress(1, 1, 0)
    assert compute_address(53, 1) == BitFieldAddress(1, 1 << 21, 21)


def test_two_bit_fields_pack_sixteen_per_bank():
    assert compute_address(15, 2) == BitFieldAddress(0, 0b11 << 30, 30)
    assert compute_address(16, 2) == BitFieldAddress(1, 0b11, 0)


def test_default_width_is_one_bit():
    assert compute_address(5) == compute_address(5, 1)


def test_top_bits_of_function_select_bank_unused():
    masks = 0
    for pin in range(10):
        masks |= compute_address(pin, 3).mask
    assert masks == (1 << 30) - 1


@pytest.mark.parametrize("width", [0, 4, 8, 32])
def test_unsupported_width_rejected(width):
    with pytest.raises(ValueError):
        compute_address(1, width)


def test_negative_pin_rejected():
    with pytest.raises(ValueError):
        compute_address(-1, 1)

"""Bit-field addressing for banked 32-bit registers.

Peripheral registers pack one field per pin into consecutive 32-bit words.
With a field width of ``w`` bits, ``32 // w`` pins fit into one word (the
bank); a pin's field then sits at ``(pin % per_bank) * w`` inside it.

    width 1 -> 32 pins per bank (GPLEV, GPSET, GPCLR, GPPUDCLK)
    width 3 -> 10 pins per bank (GPFSEL, top two bits unused)
"""

from __future__ import annotations

from typing import NamedTuple

FIELD_WIDTHS = (1, 2, 3)
REGISTER_BITS = 32


class BitFieldAddress(NamedTuple):
    """Location of one pin's field inside a banked register array."""

    bank: int
    mask: int
    shift: int


def compute_address(pin_number: int, width: int = 1) -> BitFieldAddress:
    """Return the (bank, mask, shift) triple for a pin's field.

    Args:
        pin_number: Logical pin index (>= 0). Range checks against a concrete
            register array belong to the caller.
        width: Field width in bits, one of FIELD_WIDTHS.

    Raises:
        ValueError: If the width is unsupported or the pin number negative.
    """
    if width not in FIELD_WIDTHS:
        raise ValueError(f"Invalid field width {width}; must be one of {FIELD_WIDTHS}")
    if pin_number < 0:
        raise ValueError(f"Invalid pin number {pin_number}; must be >= 0")

    per_bank = REGISTER_BITS // width
    bank, index = divmod(pin_number, per_bank)
    shift = index * width
    mask = ((1 << width) - 1) << shift
    return BitFieldAddress(bank, mask, shift)

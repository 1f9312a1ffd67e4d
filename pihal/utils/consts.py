"""Constants and utility values for pihal."""


class ConstUtils:
    """Bitwise masks and register constants."""

    MASK_32_BITS = 0xFFFFFFFF
    """32-bit mask: 0xFFFFFFFF"""

    WORD_SIZE = 4
    """Register word size in bytes."""

    PAGE_SIZE = 4096
    """mmap offsets must be multiples of the page size."""


def align_to_page(size: int) -> int:
    """Round size up to the mmap page boundary (4 KiB)."""
    page = ConstUtils.PAGE_SIZE
    return ((size + page - 1) // page) * page

"""BCM283x peripheral register offsets and bit definitions.

Offsets are relative to the start of each peripheral window. Banked
registers are tuples indexed by bank number.
"""

# GPIO -----------------------------------------------------------------------

GPFSEL = (0x00, 0x04, 0x08, 0x0C, 0x10, 0x14)
GPSET = (0x1C, 0x20)
GPCLR = (0x28, 0x2C)
GPLEV = (0x34, 0x38)
GPPUD = 0x94
GPPUDCLK = (0x98, 0x9C)

FUNCTION_SELECT_WIDTH = 3
LEVEL_WIDTH = 1

# GPPUD needs 150 core cycles between steps; 5us is comfortably above that.
PULL_SETTLE_SECONDS = 5e-6

# PWM ------------------------------------------------------------------------

PWM_CTL = 0x00
PWM_STA = 0x04
PWM_RNG = (0x10, 0x20)
PWM_DAT = (0x14, 0x24)

PWM_CTL_PWEN = (1 << 0, 1 << 8)
PWM_CTL_MSEN = (1 << 7, 1 << 15)

# Clock manager --------------------------------------------------------------

CM_PASSWORD = 0x5A000000
CM_CTL_SRC_MASK = 0x0F
CM_CTL_ENAB = 1 << 4
CM_CTL_KILL = 1 << 5
CM_CTL_BUSY = 1 << 7
CM_DIV_INTEGER_SHIFT = 12
CM_DIV_INTEGER_MASK = 0xFFF
CM_DIV_FRACTION_MASK = 0xFFF

# Control register offset per clock; the divisor register follows at +4.
CM_CTL = {
    0: 0x70,  # GP0
    1: 0x78,  # GP1
    2: 0x80,  # GP2
    3: 0x98,  # PCM
    4: 0xA0,  # PWM
}
CM_DIV_OFFSET = 0x04

CM_SRC_GND = 0
CM_SRC_OSCILLATOR = 1
CM_SRC_PLLA = 4
CM_SRC_PLLC = 5
CM_SRC_PLLD = 6
CM_SRC_HDMI = 7

# Stop requests poll BUSY at most this many times.
CM_BUSY_POLLS = 1000

# SPI0 -----------------------------------------------------------------------

SPI0_CS = 0x00
SPI0_FIFO = 0x04
SPI0_CLK = 0x08
SPI0_DLEN = 0x0C

SPI0_CS_CLEAR = 0b11 << 4
SPI0_CS_TA = 1 << 7

# Auxiliary (mini UART, SPI1, SPI2) ------------------------------------------

AUX_IRQ = 0x00
AUX_ENABLES = 0x04
AUX_ENABLE_SPI = {1: 1 << 1, 2: 1 << 2}
AUX_SPI_CNTL0 = {1: 0x80, 2: 0xC0}
AUX_SPI_CNTL0_ENABLE = 1 << 11

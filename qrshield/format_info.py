"""
BCH-protected format and version information.
"""

from typing import List

from qrshield.capacity import ECLevel
from qrshield.exceptions import InvalidMask
from qrshield.matrix import ModuleMatrix

# BCH generator polynomial: x^10 + x^8 + x^5 + x^4 + x^2 + x + 1
FORMAT_GENERATOR = 0b10100110111  # 0x537

# Format mask pattern
FORMAT_MASK = 0b101010000010010  # 0x5412

# Version BCH generator: x^12 + x^11 + x^10 + x^9 + x^8 + x^5 + x^2 + 1
VERSION_GENERATOR = 0b1111100100101  # 0x1F25


def bch_remainder(value: int, generator: int) -> int:
    """Remainder of ``value`` divided by ``generator`` over GF(2)."""
    gen_degree = generator.bit_length() - 1
    remainder = value
    for i in range(value.bit_length() - 1, gen_degree - 1, -1):
        if remainder & (1 << i):
            remainder ^= generator << (i - gen_degree)
    return remainder


def format_word(ec_level: ECLevel, mask_id: int) -> int:
    """
    15-bit format information word.

    Args:
        ec_level: Error correction level
        mask_id: Mask pattern id (0-7)

    Returns:
        (level bits, mask bits, 10 BCH bits) XOR 0x5412
    """
    if not 0 <= mask_id <= 7:
        raise InvalidMask(f"Mask id must be 0..7, got {mask_id}")
    data = (ECLevel.parse(ec_level).format_bits << 3) | mask_id
    return ((data << 10) | bch_remainder(data << 10, FORMAT_GENERATOR)) ^ FORMAT_MASK


def version_word(version: int) -> int:
    """18-bit version information word (6 version bits, 12 BCH bits)."""
    return (version << 12) | bch_remainder(version << 12, VERSION_GENERATOR)


def format_bits_to_list(format_int: int) -> List[int]:
    """Convert 15-bit integer to list of bits, MSB first."""
    return [(format_int >> (14 - i)) & 1 for i in range(15)]


def write_format_info(matrix: ModuleMatrix, ec_level: ECLevel, mask_id: int) -> None:
    """Write both copies of the format information."""
    bits = format_bits_to_list(format_word(ec_level, mask_id))
    size = matrix.size

    # Around the top-left finder: row 8 columns 0-5, 7, 8, then column 8
    # rows 7 and 5 down to 0 (row and column 6 are timing)
    for i in range(6):
        matrix.set_function(8, i, bits[i])
    matrix.set_function(8, 7, bits[6])
    matrix.set_function(8, 8, bits[7])
    matrix.set_function(7, 8, bits[8])
    for i in range(6):
        matrix.set_function(5 - i, 8, bits[9 + i])

    # Second copy: column 8 bottom-up, then row 8 at the right edge
    for i in range(7):
        matrix.set_function(size - 1 - i, 8, bits[i])
    for i in range(8):
        matrix.set_function(8, size - 8 + i, bits[7 + i])


def write_version_info(matrix: ModuleMatrix) -> None:
    """Write both 6x3 version blocks; no-op below version 7."""
    if matrix.version < 7:
        return
    word = version_word(matrix.version)
    size = matrix.size
    for i in range(18):
        bit = (word >> i) & 1
        a, b = size - 11 + i % 3, i // 3
        matrix.set_function(b, a, bit)
        matrix.set_function(a, b, bit)

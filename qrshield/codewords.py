"""
Byte-mode data encoding.

Turns a payload into the padded data codeword sequence for one
version/level: mode indicator, character count, payload bytes,
terminator, bit padding and alternating pad codewords.
"""

import logging
from typing import List, Union

from qrshield.capacity import ECLevel, capacity, data_codewords
from qrshield.exceptions import EncodingOverflow

logger = logging.getLogger(__name__)

# Mode indicators (4-bit values)
MODE_BYTE = 0b0100
MODE_TERMINATOR = 0b0000

PAD_CODEWORDS = (0xEC, 0x11)

Payload = Union[bytes, bytearray, str]


def as_bytes(payload: Payload) -> bytes:
    """Payload as raw bytes; text is UTF-8 encoded."""
    if isinstance(payload, str):
        return payload.encode('utf-8')
    return bytes(payload)


def get_character_count_bits(version: int) -> int:
    """Width of the byte-mode character count indicator."""
    return 8 if version <= 9 else 16


def int_to_bits(value: int, length: int) -> List[int]:
    """Convert integer to list of bits with specified length, MSB first."""
    return [(value >> (length - 1 - i)) & 1 for i in range(length)]


def bits_to_bytes(bits: List[int]) -> List[int]:
    """Pack bits into bytes, MSB first. Length must be a multiple of 8."""
    codewords = []
    for i in range(0, len(bits), 8):
        byte = 0
        for bit in bits[i:i + 8]:
            byte = (byte << 1) | bit
        codewords.append(byte)
    return codewords


def encode_byte_segment(data: bytes, version: int) -> List[int]:
    """Mode indicator, count indicator and payload bits."""
    bits = int_to_bits(MODE_BYTE, 4)
    bits.extend(int_to_bits(len(data), get_character_count_bits(version)))
    for byte in data:
        bits.extend(int_to_bits(byte, 8))
    return bits


def encode_codewords(payload: Payload, version: int, level: ECLevel) -> List[int]:
    """
    Encode a payload into the padded data codewords of one version/level.

    Args:
        payload: Bytes to encode (text is UTF-8 encoded)
        version: Symbol version the stream is sized for
        level: Error correction level

    Returns:
        Exactly ``data_codewords(version, level)`` bytes

    Raises:
        EncodingOverflow: the payload does not fit the version. Callers pick
            the version with ``select_version`` first, so this is a defect.
    """
    data = as_bytes(payload)
    level = ECLevel.parse(level)
    if len(data) > capacity(version, level):
        raise EncodingOverflow(
            f"{len(data)} bytes do not fit version {version}-{level.name} "
            f"(capacity {capacity(version, level)})"
        )

    num_codewords = data_codewords(version, level)
    capacity_bits = num_codewords * 8
    bits = encode_byte_segment(data, version)
    if len(bits) > capacity_bits:
        raise EncodingOverflow(f"Segment of {len(bits)} bits exceeds {capacity_bits} bits")

    # Terminator (up to 4 bits)
    bits.extend([MODE_TERMINATOR] * min(4, capacity_bits - len(bits)))

    # Pad to byte boundary
    while len(bits) % 8 != 0:
        bits.append(0)

    codewords = bits_to_bytes(bits)

    i = 0
    while len(codewords) < num_codewords:
        codewords.append(PAD_CODEWORDS[i % 2])
        i += 1

    logger.debug("Encoded %d bytes into %d data codewords for version %d-%s",
                 len(data), num_codewords, version, level.name)
    return codewords

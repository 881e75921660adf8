"""
Version and capacity tables.

Byte-mode capacities and error correction block structure for every
supported version, taken from ISO/IEC 18004 Table 7 and Table 9.

References:
- https://www.thonky.com/qr-code-tutorial/error-correction-table
"""

from enum import IntEnum
from typing import Dict, List, NamedTuple, Tuple, Union

from qrshield.config import MAX_VERSION
from qrshield.exceptions import InvalidEcLevel, PayloadTooLarge


class ECLevel(IntEnum):
    """Error correction levels, ordered by robustness."""

    L = 0  # ~7% recovery
    M = 1  # ~15% recovery
    Q = 2  # ~25% recovery
    H = 3  # ~30% recovery

    @property
    def format_bits(self) -> int:
        """2-bit code written into the format information."""
        return EC_LEVEL_BITS[self]

    @classmethod
    def parse(cls, value: Union['ECLevel', str, int]) -> 'ECLevel':
        """Accept an ECLevel, its letter ('L', 'M', 'Q', 'H') or its index."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise InvalidEcLevel(f"Invalid error correction level: {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise InvalidEcLevel(f"Invalid error correction level: {value!r}") from None
        raise InvalidEcLevel(f"Invalid error correction level: {value!r}")


EC_LEVEL_BITS: Dict[ECLevel, int] = {
    ECLevel.L: 0b01,
    ECLevel.M: 0b00,
    ECLevel.Q: 0b11,
    ECLevel.H: 0b10,
}


# (block count, total codewords per block, data codewords per block),
# repeated for the second group where a level has one
BlockGroups = Tuple[int, ...]


class VersionInfo(NamedTuple):
    version: int
    size: int
    capacity: Tuple[int, int, int, int]  # byte-mode payload bytes for L, M, Q, H
    blocks: Tuple[BlockGroups, BlockGroups, BlockGroups, BlockGroups]


VERSIONS: Tuple[VersionInfo, ...] = (
    VersionInfo(1, 21, (17, 14, 11, 7),
                ((1, 26, 19), (1, 26, 16), (1, 26, 13), (1, 26, 9))),
    VersionInfo(2, 25, (32, 26, 20, 14),
                ((1, 44, 34), (1, 44, 28), (1, 44, 22), (1, 44, 16))),
    VersionInfo(3, 29, (53, 42, 32, 24),
                ((1, 70, 55), (1, 70, 44), (2, 35, 17), (2, 35, 13))),
    VersionInfo(4, 33, (78, 62, 46, 34),
                ((1, 100, 80), (2, 50, 32), (2, 50, 24), (4, 25, 9))),
    VersionInfo(5, 37, (106, 84, 60, 44),
                ((1, 134, 108), (2, 67, 43), (2, 33, 15, 2, 34, 16), (2, 33, 11, 2, 34, 12))),
    VersionInfo(6, 41, (134, 106, 74, 58),
                ((2, 86, 68), (4, 43, 27), (4, 43, 19), (4, 43, 15))),
    VersionInfo(7, 45, (154, 122, 86, 64),
                ((2, 98, 78), (4, 49, 31), (2, 32, 14, 4, 33, 15), (4, 39, 13, 1, 40, 14))),
    VersionInfo(8, 49, (192, 152, 108, 84),
                ((2, 121, 97), (2, 60, 38, 2, 61, 39), (4, 40, 18, 2, 41, 19), (4, 40, 14, 2, 41, 15))),
    VersionInfo(9, 53, (230, 180, 130, 98),
                ((2, 146, 116), (3, 58, 36, 2, 59, 37), (4, 36, 16, 4, 37, 17), (4, 36, 12, 4, 37, 13))),
    VersionInfo(10, 57, (271, 213, 151, 119),
                ((2, 86, 68, 2, 87, 69), (4, 69, 43, 1, 70, 44), (6, 43, 19, 2, 44, 20), (6, 43, 15, 2, 44, 16))),
)


def version_info(version: int) -> VersionInfo:
    if not 1 <= version <= MAX_VERSION:
        raise ValueError(f"Version must be 1..{MAX_VERSION}, got {version}")
    return VERSIONS[version - 1]


def symbol_size(version: int) -> int:
    return 21 + 4 * (version - 1)


def rs_blocks(version: int, level: ECLevel) -> List[Tuple[int, int]]:
    """Expand the block structure into one (total, data) pair per block."""
    row = version_info(version).blocks[ECLevel.parse(level)]
    blocks = []
    for i in range(0, len(row), 3):
        count, total_count, data_count = row[i:i + 3]
        for _ in range(count):
            blocks.append((total_count, data_count))
    return blocks


def data_codewords(version: int, level: ECLevel) -> int:
    return sum(data for _, data in rs_blocks(version, level))


def total_codewords(version: int) -> int:
    """Data plus ECC codewords; independent of the level."""
    return sum(total for total, _ in rs_blocks(version, ECLevel.L))


def capacity(version: int, level: ECLevel) -> int:
    return version_info(version).capacity[ECLevel.parse(level)]


def select_version(length: int, level: ECLevel) -> int:
    """
    Smallest version whose byte-mode capacity holds ``length`` bytes.

    Raises:
        PayloadTooLarge: no supported version is large enough.
    """
    level = ECLevel.parse(level)
    for info in VERSIONS:
        if info.capacity[level] >= length:
            return info.version
    raise PayloadTooLarge(length, level.name, VERSIONS[-1].capacity[level])

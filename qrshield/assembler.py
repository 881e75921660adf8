"""
Matrix assembly: ECC blocks, interleaving and zig-zag data placement.

The output is an unmasked symbol without format information. Masking and
format info are applied afterwards so the same assembly can be finalized
with any mask.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from qrshield.capacity import ECLevel, data_codewords, rs_blocks, total_codewords
from qrshield.codewords import int_to_bits
from qrshield.exceptions import EncodingOverflow
from qrshield.matrix import ModuleMatrix
from qrshield.patterns import place_function_patterns
from qrshield.reed_solomon import rs_encoder

logger = logging.getLogger(__name__)

# Owner marker for modules that carry no codeword bit
NO_BLOCK = -1


@dataclass
class EccBlock:
    data: List[int]
    ecc: List[int]


@dataclass
class AssembledMatrix:
    """
    An unmasked matrix plus the bookkeeping protection noise needs.

    ``owner[row][col]`` is the index of the RS block whose codeword the
    module carries, or ``NO_BLOCK`` for function cells and remainder bits.
    """

    matrix: ModuleMatrix
    ec_level: ECLevel
    blocks: List[EccBlock]
    owner: List[List[int]]

    @property
    def version(self) -> int:
        return self.matrix.version

    def ecc_lengths(self) -> List[int]:
        return [len(block.ecc) for block in self.blocks]

    def remainder_cells(self) -> List[Tuple[int, int]]:
        """Data-region cells left over after the last codeword."""
        size = self.matrix.size
        return [(r, c) for r in range(size) for c in range(size)
                if not self.matrix.function[r][c] and self.owner[r][c] == NO_BLOCK]


def split_blocks(codewords: Sequence[int], version: int, level: ECLevel) -> List[EccBlock]:
    """Split data codewords into RS blocks and compute each block's ECC."""
    blocks = []
    offset = 0
    for total, data_count in rs_blocks(version, level):
        data = list(codewords[offset:offset + data_count])
        offset += data_count
        blocks.append(EccBlock(data, rs_encoder.compute_ecc(data, total - data_count)))
    return blocks


def interleave(blocks: List[EccBlock]) -> Tuple[List[int], List[int]]:
    """
    Interleave data codewords block by block, then ECC codewords.

    Returns:
        The final codeword stream and, for each codeword in it, the index of
        the block it came from.
    """
    stream = []
    block_of = []
    for field in ('data', 'ecc'):
        longest = max(len(getattr(block, field)) for block in blocks)
        for i in range(longest):
            for index, block in enumerate(blocks):
                words = getattr(block, field)
                if i < len(words):
                    stream.append(words[i])
                    block_of.append(index)
    return stream, block_of


def zigzag_positions(matrix: ModuleMatrix) -> List[Tuple[int, int]]:
    """
    Data module coordinates in placement order.

    Two-column strips from the right edge, alternating upward and downward,
    skipping the vertical timing column and every function cell.
    """
    size = matrix.size
    positions = []
    x = size - 1
    upward = True
    while x >= 0:
        if x == 6:
            x -= 1
        y_range = range(size - 1, -1, -1) if upward else range(size)
        for y in y_range:
            for col in (x, x - 1):
                if col < 0 or matrix.function[y][col]:
                    continue
                positions.append((y, col))
        x -= 2
        upward = not upward
    return positions


def assemble(codewords: Sequence[int], version: int, level: ECLevel) -> AssembledMatrix:
    """
    Build the unmasked matrix for a padded data codeword stream.

    Args:
        codewords: Output of ``encode_codewords`` for this version/level
        version: Symbol version
        level: Error correction level

    Raises:
        EncodingOverflow: the stream length does not match the version
        AllocationFailed: no matrix buffer for this version
    """
    level = ECLevel.parse(level)
    expected = data_codewords(version, level)
    if len(codewords) != expected:
        raise EncodingOverflow(
            f"Version {version}-{level.name} takes {expected} data codewords, got {len(codewords)}"
        )

    matrix = ModuleMatrix(version)
    place_function_patterns(matrix)

    blocks = split_blocks(codewords, version, level)
    stream, block_of = interleave(blocks)
    if len(stream) != total_codewords(version):
        raise EncodingOverflow(f"Interleaved {len(stream)} codewords, expected {total_codewords(version)}")

    bits = []
    for byte in stream:
        bits.extend(int_to_bits(byte, 8))

    positions = zigzag_positions(matrix)
    if len(bits) > len(positions):
        raise EncodingOverflow(f"{len(bits)} bits do not fit {len(positions)} data modules")

    owner = [[NO_BLOCK] * matrix.size for _ in range(matrix.size)]
    for index, (row, col) in enumerate(positions):
        if index < len(bits):
            matrix.set_data(row, col, bits[index])
            owner[row][col] = block_of[index // 8]
        else:
            matrix.set_data(row, col, 0)

    logger.debug("Placed %d bits (%d remainder) in %dx%d matrix, %d block(s)",
                 len(bits), len(positions) - len(bits), matrix.size, matrix.size, len(blocks))
    return AssembledMatrix(matrix, level, blocks, owner)

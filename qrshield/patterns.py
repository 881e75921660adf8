"""
Function pattern placement.

References:
- https://www.thonky.com/qr-code-tutorial/module-placement-matrix
"""

from typing import Dict, List

from qrshield.matrix import DARK, LIGHT, ModuleMatrix

# Alignment pattern centre coordinates per version
ALIGNMENT_POSITIONS: Dict[int, List[int]] = {
    1: [],
    2: [6, 18],
    3: [6, 22],
    4: [6, 26],
    5: [6, 30],
    6: [6, 34],
    7: [6, 22, 38],
    8: [6, 24, 42],
    9: [6, 26, 46],
    10: [6, 28, 50],
}


def place_function_patterns(matrix: ModuleMatrix) -> None:
    """Place every function pattern and reserve the format/version areas."""
    place_finder_patterns(matrix)
    place_separators(matrix)
    place_timing_patterns(matrix)
    place_alignment_patterns(matrix)
    place_dark_module(matrix)
    reserve_format_area(matrix)
    if matrix.version >= 7:
        reserve_version_area(matrix)


def place_finder_patterns(matrix: ModuleMatrix) -> None:
    size = matrix.size
    for row, col in ((0, 0), (0, size - 7), (size - 7, 0)):
        _place_finder_pattern(matrix, row, col)


def _place_finder_pattern(matrix: ModuleMatrix, row: int, col: int) -> None:
    for dy in range(7):
        for dx in range(7):
            if (dy in (0, 6) or dx in (0, 6) or
                    (2 <= dx <= 4 and 2 <= dy <= 4)):
                value = DARK
            else:
                value = LIGHT
            matrix.set_function(row + dy, col + dx, value)


def place_separators(matrix: ModuleMatrix) -> None:
    """Light one-module borders that complete each finder to an 8x8 block."""
    size = matrix.size
    for i in range(8):
        # Horizontal
        matrix.set_function(7, i, LIGHT)
        matrix.set_function(7, size - 8 + i, LIGHT)
        matrix.set_function(size - 8, i, LIGHT)
        # Vertical
        matrix.set_function(i, 7, LIGHT)
        matrix.set_function(i, size - 8, LIGHT)
        matrix.set_function(size - 8 + i, 7, LIGHT)


def place_timing_patterns(matrix: ModuleMatrix) -> None:
    """Alternating strips on row 6 and column 6, dark on even indices."""
    for i in range(8, matrix.size - 8):
        value = DARK if i % 2 == 0 else LIGHT
        matrix.set_function(6, i, value)
        matrix.set_function(i, 6, value)


def place_alignment_patterns(matrix: ModuleMatrix) -> None:
    positions = ALIGNMENT_POSITIONS[matrix.version]
    for row in positions:
        for col in positions:
            if overlaps_finder(matrix.size, row, col):
                continue
            _place_alignment_pattern(matrix, row, col)


def overlaps_finder(size: int, row: int, col: int) -> bool:
    """Check if an alignment pattern centred here would overlap a finder."""
    if row <= 8 and col <= 8:
        return True
    if row <= 8 and col >= size - 9:
        return True
    if row >= size - 9 and col <= 8:
        return True
    return False


def _place_alignment_pattern(matrix: ModuleMatrix, row: int, col: int) -> None:
    for dy in range(-2, 3):
        for dx in range(-2, 3):
            if abs(dy) == 2 or abs(dx) == 2 or (dy == 0 and dx == 0):
                value = DARK
            else:
                value = LIGHT
            matrix.set_function(row + dy, col + dx, value)


def place_dark_module(matrix: ModuleMatrix) -> None:
    matrix.set_function(matrix.size - 8, 8, DARK)


def reserve_format_area(matrix: ModuleMatrix) -> None:
    size = matrix.size
    for i in range(9):
        matrix.reserve(8, i)
        matrix.reserve(i, 8)
    for i in range(8):
        matrix.reserve(8, size - 1 - i)
        matrix.reserve(size - 1 - i, 8)


def reserve_version_area(matrix: ModuleMatrix) -> None:
    """Two 6x3 blocks beside the top-right and bottom-left finders (version 7+)."""
    size = matrix.size
    for i in range(6):
        for j in range(3):
            matrix.reserve(i, size - 11 + j)
            matrix.reserve(size - 11 + j, i)

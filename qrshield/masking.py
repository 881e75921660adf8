"""
Data masking with penalty scoring.

References:
- https://www.thonky.com/qr-code-tutorial/data-masking
"""

import logging
from typing import Callable, List, Sequence, Tuple

from qrshield.capacity import ECLevel
from qrshield.exceptions import InvalidMask
from qrshield.format_info import write_format_info, write_version_info
from qrshield.matrix import ModuleMatrix

logger = logging.getLogger(__name__)

Grid = Sequence[Sequence[int]]

MASK_PATTERNS: List[Callable[[int, int], bool]] = [
    lambda r, c: (r + c) % 2 == 0,
    lambda r, c: r % 2 == 0,
    lambda r, c: c % 3 == 0,
    lambda r, c: (r + c) % 3 == 0,
    lambda r, c: (r // 2 + c // 3) % 2 == 0,
    lambda r, c: (r * c) % 2 + (r * c) % 3 == 0,
    lambda r, c: ((r * c) % 2 + (r * c) % 3) % 2 == 0,
    lambda r, c: ((r + c) % 2 + (r * c) % 3) % 2 == 0,
]

# Dark-light-dark-dark-dark-light-dark with four light modules on one side
FINDER_LIKE = (
    [1, 0, 1, 1, 1, 0, 1, 0, 0, 0, 0],
    [0, 0, 0, 0, 1, 0, 1, 1, 1, 0, 1],
)


def check_mask(mask_id: int) -> int:
    if isinstance(mask_id, bool) or not isinstance(mask_id, int) or not 0 <= mask_id <= 7:
        raise InvalidMask(f"Mask id must be 0..7, got {mask_id!r}")
    return mask_id


def apply_mask(matrix: ModuleMatrix, mask_id: int) -> None:
    """XOR the mask pattern into every non-function module, in place."""
    mask_func = MASK_PATTERNS[check_mask(mask_id)]
    for r in range(matrix.size):
        for c in range(matrix.size):
            if not matrix.function[r][c] and mask_func(r, c):
                matrix.modules[r][c] ^= 1


def masked_candidate(matrix: ModuleMatrix, ec_level: ECLevel, mask_id: int) -> ModuleMatrix:
    """Copy of an unmasked matrix with the mask and its format info applied."""
    candidate = matrix.copy()
    apply_mask(candidate, mask_id)
    write_format_info(candidate, ec_level, mask_id)
    write_version_info(candidate)
    return candidate


#==============================================================================
# PENALTY RULES
#==============================================================================

def calculate_penalty(grid: Grid) -> int:
    """Calculate total penalty score for a masked matrix."""
    size = len(grid)
    return (_penalty_runs(grid, size) + _penalty_boxes(grid, size) +
            _penalty_finder_like(grid, size) + _penalty_balance(grid, size))


def _run_penalty(line: Sequence[int]) -> int:
    penalty = 0
    run_length = 1
    for prev, curr in zip(line, line[1:]):
        if curr == prev:
            run_length += 1
        else:
            if run_length >= 5:
                penalty += 3 + (run_length - 5)
            run_length = 1
    if run_length >= 5:
        penalty += 3 + (run_length - 5)
    return penalty


def _penalty_runs(grid: Grid, size: int) -> int:
    """Penalty for runs of 5+ same-color modules in rows and columns."""
    penalty = sum(_run_penalty(list(row)) for row in grid)
    penalty += sum(_run_penalty([grid[r][c] for r in range(size)]) for c in range(size))
    return penalty


def _penalty_boxes(grid: Grid, size: int) -> int:
    """Penalty for 2x2 same-color boxes."""
    penalty = 0
    for r in range(size - 1):
        for c in range(size - 1):
            color = grid[r][c]
            if grid[r][c + 1] == color and grid[r + 1][c] == color and grid[r + 1][c + 1] == color:
                penalty += 3
    return penalty


def _penalty_finder_like(grid: Grid, size: int) -> int:
    """Penalty for 1:1:3:1:1 patterns that resemble a finder."""
    penalty = 0
    for r in range(size):
        row = list(grid[r])
        for c in range(size - 10):
            if row[c:c + 11] in FINDER_LIKE:
                penalty += 40

    for c in range(size):
        col = [grid[r][c] for r in range(size)]
        for r in range(size - 10):
            if col[r:r + 11] in FINDER_LIKE:
                penalty += 40

    return penalty


def _penalty_balance(grid: Grid, size: int) -> int:
    """10 points per 5% step of the dark ratio away from 50%."""
    dark_count = sum(sum(row) for row in grid)
    percent = (dark_count * 100) // (size * size)

    prev_multiple = percent - (percent % 5)
    next_multiple = prev_multiple + 5

    return min(
        abs(prev_multiple - 50) // 5,
        abs(next_multiple - 50) // 5
    ) * 10


def select_best_mask(matrix: ModuleMatrix, ec_level: ECLevel) -> Tuple[int, int]:
    """
    Choose the mask pattern with the lowest penalty.

    Each candidate is scored with its format (and version) information
    written, exactly as it would be emitted. Ties go to the lower mask id.

    Returns:
        (mask id, penalty)
    """
    best_mask = 0
    best_penalty = None

    for mask_id in range(8):
        penalty = calculate_penalty(masked_candidate(matrix, ec_level, mask_id).modules)
        logger.debug("Mask %d penalty %d", mask_id, penalty)
        if best_penalty is None or penalty < best_penalty:
            best_penalty = penalty
            best_mask = mask_id

    return best_mask, best_penalty

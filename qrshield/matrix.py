"""
Module grids.

``ModuleMatrix`` is the mutable working grid a symbol is assembled on.
``QrSymbol`` is the frozen result handed to renderers.
"""

from dataclasses import dataclass
from typing import List, Tuple

from qrshield.capacity import ECLevel, symbol_size
from qrshield.config import MAX_VERSION
from qrshield.exceptions import AllocationFailed

LIGHT = 0
DARK = 1


class ModuleMatrix:
    """
    Working size x size grid for one symbol.

    ``modules[row][col]`` holds 0 (light) or 1 (dark). ``function[row][col]``
    marks cells owned by a function pattern or a reserved format/version
    area; data placement and masking must skip those.
    """

    def __init__(self, version: int):
        if not 1 <= version <= MAX_VERSION:
            raise AllocationFailed(
                f"No matrix buffer for version {version}; supported versions are 1..{MAX_VERSION}"
            )
        self.version = version
        self.size = symbol_size(version)
        try:
            self.modules: List[List[int]] = [[LIGHT] * self.size for _ in range(self.size)]
            self.function: List[List[bool]] = [[False] * self.size for _ in range(self.size)]
        except MemoryError as exc:
            raise AllocationFailed(f"Out of memory allocating a {self.size}x{self.size} matrix") from exc

    def set_function(self, row: int, col: int, value: int) -> None:
        """Set a function module. Coordinates outside the grid are ignored."""
        if 0 <= row < self.size and 0 <= col < self.size:
            self.modules[row][col] = value
            self.function[row][col] = True

    def reserve(self, row: int, col: int) -> None:
        """Mark a cell as function without choosing its value yet."""
        self.function[row][col] = True

    def set_data(self, row: int, col: int, value: int) -> None:
        if self.function[row][col]:
            raise ValueError(f"Module ({row}, {col}) belongs to a function pattern")
        self.modules[row][col] = value

    def flip(self, row: int, col: int) -> None:
        """Invert a data module."""
        if self.function[row][col]:
            raise ValueError(f"Module ({row}, {col}) belongs to a function pattern")
        self.modules[row][col] ^= 1

    def copy(self) -> 'ModuleMatrix':
        clone = ModuleMatrix.__new__(ModuleMatrix)
        clone.version = self.version
        clone.size = self.size
        clone.modules = [list(row) for row in self.modules]
        clone.function = [list(row) for row in self.function]
        return clone

    def freeze(self, ec_level: ECLevel, mask_id: int) -> 'QrSymbol':
        return QrSymbol(
            version=self.version,
            ec_level=ECLevel.parse(ec_level),
            mask_id=mask_id,
            modules=tuple(tuple(row) for row in self.modules),
            function=tuple(tuple(row) for row in self.function),
        )


@dataclass(frozen=True)
class QrSymbol:
    """A finished QR symbol. Immutable; safe to share with any number of readers."""

    version: int
    ec_level: ECLevel
    mask_id: int
    modules: Tuple[Tuple[int, ...], ...]
    function: Tuple[Tuple[bool, ...], ...]

    def __post_init__(self):
        size = symbol_size(self.version)
        if len(self.modules) != size or any(len(row) != size for row in self.modules):
            raise ValueError(f"Version {self.version} symbols must be {size}x{size}")

    @property
    def size(self) -> int:
        return len(self.modules)

    def is_dark(self, row: int, col: int) -> bool:
        return self.modules[row][col] == DARK

    def is_function(self, row: int, col: int) -> bool:
        return self.function[row][col]

    def dark_count(self) -> int:
        return sum(sum(row) for row in self.modules)

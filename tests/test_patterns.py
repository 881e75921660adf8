import pytest

from qrshield.capacity import total_codewords
from qrshield.config import MAX_SIZE, MAX_VERSION
from qrshield.exceptions import AllocationFailed
from qrshield.matrix import ModuleMatrix
from qrshield.patterns import overlaps_finder, place_function_patterns

REMAINDER_BITS = {1: 0, 2: 7, 3: 7, 4: 7, 5: 7, 6: 7, 7: 0, 8: 0, 9: 0, 10: 0}


def build(version: int) -> ModuleMatrix:
    matrix = ModuleMatrix(version)
    place_function_patterns(matrix)
    return matrix


def test_finders_and_separators():
    m = build(1)
    size = m.size
    for row, col in ((0, 0), (0, size - 7), (size - 7, 0)):
        assert m.modules[row][col] == 1
        assert m.modules[row + 1][col + 1] == 0
        assert m.modules[row + 3][col + 3] == 1
    assert m.modules[7][7] == 0 and m.function[7][7]
    assert m.modules[7][size - 8] == 0 and m.function[7][size - 8]
    assert m.modules[size - 8][7] == 0 and m.function[size - 8][7]
    # Bottom-right corner is data
    assert not m.function[size - 1][size - 1]


def test_timing_strips_start_dark():
    m = build(2)
    row = [m.modules[6][c] for c in range(8, m.size - 8)]
    col = [m.modules[r][6] for r in range(8, m.size - 8)]
    assert row == col == [1, 0, 1, 0, 1, 0, 1, 0, 1]


def test_dark_module():
    for version in (1, 4, 10):
        m = build(version)
        assert m.modules[m.size - 8][8] == 1
        assert m.function[m.size - 8][8]


def test_single_alignment_pattern_in_version_2():
    m = build(2)
    assert m.modules[18][18] == 1
    assert m.modules[17][17] == 0
    assert m.modules[16][16] == 1
    assert all(m.function[r][c] for r in range(16, 21) for c in range(16, 21))


def test_alignment_patterns_skip_finders():
    assert overlaps_finder(45, 6, 6)
    assert overlaps_finder(45, 6, 38)
    assert overlaps_finder(45, 38, 6)
    assert not overlaps_finder(45, 6, 22)
    m = build(7)
    assert m.modules[22][22] == 1 and m.modules[6][22] == 1
    assert m.modules[22][38] == 1 and m.modules[38][38] == 1


def test_version_area_reserved_from_version_7():
    assert not build(6).function[0][41 - 11]
    m = build(7)
    assert all(m.function[r][m.size - 11 + j] for r in range(6) for j in range(3))
    assert all(m.function[m.size - 11 + j][c] for c in range(6) for j in range(3))


@pytest.mark.parametrize("version", range(1, MAX_VERSION + 1))
def test_data_module_count(version):
    m = build(version)
    data_modules = sum(not cell for row in m.function for cell in row)
    assert data_modules == total_codewords(version) * 8 + REMAINDER_BITS[version]


def test_unsupported_version_has_no_buffer():
    assert ModuleMatrix(MAX_VERSION).size == MAX_SIZE
    with pytest.raises(AllocationFailed):
        ModuleMatrix(MAX_VERSION + 1)


def test_function_cells_refuse_data():
    m = build(1)
    with pytest.raises(ValueError):
        m.set_data(0, 0, 1)
    with pytest.raises(ValueError):
        m.flip(6, 10)

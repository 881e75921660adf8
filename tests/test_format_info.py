import pytest

from qrshield.capacity import ECLevel
from qrshield.exceptions import InvalidMask
from qrshield.format_info import (format_word, version_word, write_format_info,
                                  write_version_info)
from qrshield.matrix import ModuleMatrix
from qrshield.patterns import place_function_patterns
from tests.qr_reader import FORMAT_WORDS, read_format


@pytest.mark.parametrize("level", list(ECLevel))
def test_format_words_match_iso_table(level):
    assert [format_word(level, mask) for mask in range(8)] == list(FORMAT_WORDS[level])


def test_version_words():
    assert version_word(7) == 0x07C94
    assert version_word(8) == 0x085BC
    assert version_word(9) == 0x09A99
    assert version_word(10) == 0x0A4D3


def test_invalid_mask():
    with pytest.raises(InvalidMask):
        format_word(ECLevel.M, 8)


def test_both_copies_written():
    m = ModuleMatrix(3)
    place_function_patterns(m)
    write_format_info(m, ECLevel.H, 5)
    assert read_format(m.modules) == (ECLevel.H, 5)
    # Dark module is untouched
    assert m.modules[m.size - 8][8] == 1


def test_version_blocks_are_transposed_copies():
    m = ModuleMatrix(7)
    place_function_patterns(m)
    write_version_info(m)
    word = 0
    for i in range(17, -1, -1):
        word = (word << 1) | m.modules[i // 3][m.size - 11 + i % 3]
    assert word == version_word(7)
    for i in range(6):
        for j in range(3):
            assert m.modules[i][m.size - 11 + j] == m.modules[m.size - 11 + j][i]


def test_version_info_skipped_below_7():
    m = ModuleMatrix(6)
    before = [list(row) for row in m.modules]
    write_version_info(m)
    assert m.modules == before

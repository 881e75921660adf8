import pytest

from qrshield.capacity import (VERSIONS, ECLevel, capacity, data_codewords, rs_blocks,
                               select_version, symbol_size, total_codewords)
from qrshield.codewords import get_character_count_bits
from qrshield.config import MAX_VERSION
from qrshield.exceptions import InvalidEcLevel, PayloadTooLarge

LEVELS = list(ECLevel)


def test_table_covers_every_supported_version():
    assert [info.version for info in VERSIONS] == list(range(1, MAX_VERSION + 1))


def test_sizes_follow_version_formula():
    for info in VERSIONS:
        assert info.size == 21 + 4 * (info.version - 1) == symbol_size(info.version)
        assert info.size % 2 == 1


@pytest.mark.parametrize("level", LEVELS)
def test_capacity_matches_block_structure(level):
    for version in range(1, MAX_VERSION + 1):
        header_bits = 4 + get_character_count_bits(version)
        assert capacity(version, level) == (data_codewords(version, level) * 8 - header_bits) // 8


def test_total_codewords_do_not_depend_on_level():
    for version in range(1, MAX_VERSION + 1):
        totals = {sum(t for t, _ in rs_blocks(version, level)) for level in LEVELS}
        assert totals == {total_codewords(version)}


def test_block_expansion():
    assert rs_blocks(5, ECLevel.Q) == [(33, 15), (33, 15), (34, 16), (34, 16)]
    assert rs_blocks(1, "L") == [(26, 19)]


@pytest.mark.parametrize("level", LEVELS)
def test_select_version_is_minimal(level):
    for length in range(1, capacity(MAX_VERSION, level) + 1):
        version = select_version(length, level)
        assert capacity(version, level) >= length
        assert version == 1 or capacity(version - 1, level) < length


@pytest.mark.parametrize("level", LEVELS)
def test_one_past_capacity(level):
    for version in range(1, MAX_VERSION):
        assert select_version(capacity(version, level) + 1, level) == version + 1
    with pytest.raises(PayloadTooLarge):
        select_version(capacity(MAX_VERSION, level) + 1, level)


def test_single_byte_at_level_l_is_version_1():
    assert select_version(1, "L") == 1


def test_too_large_at_level_h():
    with pytest.raises(PayloadTooLarge) as info:
        select_version(200, ECLevel.H)
    assert info.value.capacity == capacity(MAX_VERSION, ECLevel.H)


def test_typical_address_lengths_fit():
    assert select_version(154, ECLevel.L) == 7


def test_parse_levels():
    assert ECLevel.parse("q") is ECLevel.Q
    assert ECLevel.parse(ECLevel.H) is ECLevel.H
    assert ECLevel.parse(0) is ECLevel.L
    for bad in ("X", 4, None, 1.5):
        with pytest.raises(InvalidEcLevel):
            ECLevel.parse(bad)


def test_format_bits():
    assert [level.format_bits for level in LEVELS] == [0b01, 0b00, 0b11, 0b10]

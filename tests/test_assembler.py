import pytest

from qrshield.assembler import NO_BLOCK, EccBlock, assemble, interleave, split_blocks
from qrshield.capacity import ECLevel, rs_blocks
from qrshield.codewords import encode_codewords
from qrshield.exceptions import EncodingOverflow
from qrshield.reed_solomon import rs_encoder


def test_interleave_order():
    blocks = [EccBlock([1, 2], [9]), EccBlock([3, 4, 5], [8])]
    stream, block_of = interleave(blocks)
    assert stream == [1, 3, 2, 4, 5, 9, 8]
    assert block_of == [0, 1, 0, 1, 1, 0, 1]


def test_split_blocks_uses_version_structure():
    codewords = encode_codewords(b"block split", 5, ECLevel.Q)
    blocks = split_blocks(codewords, 5, ECLevel.Q)
    assert [len(b.data) for b in blocks] == [15, 15, 16, 16]
    assert [len(b.ecc) for b in blocks] == [18, 18, 18, 18]
    assert sum((b.data for b in blocks), []) == codewords
    for block in blocks:
        assert rs_encoder.syndromes(block.data + block.ecc, len(block.ecc)) == [0] * 18


@pytest.mark.parametrize("version, level", [(1, "M"), (2, "Q"), (5, "H"), (7, "Q"), (10, "M")])
def test_every_block_owns_its_modules(version, level):
    assembled = assemble(encode_codewords(b"owner map", version, level), version, level)
    counts = {}
    for row in assembled.owner:
        for block in row:
            if block != NO_BLOCK:
                counts[block] = counts.get(block, 0) + 1
    assert [counts[i] for i in range(len(counts))] == [8 * t for t, _ in rs_blocks(version, level)]


def test_remainder_cells():
    one = assemble(encode_codewords(b"r", 1, "L"), 1, "L")
    two = assemble(encode_codewords(b"r", 2, "L"), 2, "L")
    assert one.remainder_cells() == []
    assert len(two.remainder_cells()) == 7
    assert all(two.matrix.modules[r][c] == 0 for r, c in two.remainder_cells())


def test_wrong_stream_length():
    with pytest.raises(EncodingOverflow):
        assemble([0xEC] * 10, 1, "L")


def test_function_cells_untouched_by_placement():
    assembled = assemble(encode_codewords(b"\xff" * 17, 1, "L"), 1, "L")
    m = assembled.matrix
    assert m.modules[1][1] == 0  # finder ring stays light
    assert m.modules[6][9] == 0  # timing

import random

import pytest
import reedsolo

from qrshield.reed_solomon import (ReedSolomonEncoder, compute_ecc, max_correctable_errors,
                                   rs_encoder)

# "HELLO WORLD" at 1-M, from Thonky's QR code tutorial
HELLO_WORLD_DATA = [32, 91, 11, 120, 209, 114, 220, 77, 67, 64, 236, 17, 236, 17, 236, 17]
HELLO_WORLD_ECC = [196, 35, 39, 119, 235, 215, 231, 226, 93, 23]


def test_known_ecc_vector():
    assert compute_ecc(HELLO_WORLD_DATA, 10) == HELLO_WORLD_ECC


def test_first_generators():
    assert rs_encoder.generator(1).coeffs == [1, 1]
    assert rs_encoder.generator(2).coeffs == [2, 3, 1]


def test_generators_stored_up_to_degree_68():
    assert rs_encoder.generator(68).degree == 68
    with pytest.raises(ValueError):
        rs_encoder.generator(69)
    with pytest.raises(ValueError):
        rs_encoder.compute_ecc([1, 2, 3], 0)


@pytest.mark.parametrize("data_len, ecc_len", [(19, 7), (16, 10), (9, 17), (15, 18), (68, 18), (43, 26)])
def test_matches_reference_codec(data_len, ecc_len):
    rng = random.Random(data_len * 100 + ecc_len)
    data = [rng.randrange(256) for _ in range(data_len)]
    expected = list(reedsolo.RSCodec(ecc_len).encode(bytearray(data)))[data_len:]
    assert compute_ecc(data, ecc_len) == expected


def test_all_zero_data_has_zero_ecc():
    assert compute_ecc([0] * 20, 10) == [0] * 10


def test_syndromes_vanish_for_intact_block():
    block = HELLO_WORLD_DATA + HELLO_WORLD_ECC
    assert rs_encoder.syndromes(block, 10) == [0] * 10

    block[3] ^= 0x40
    assert any(rs_encoder.syndromes(block, 10))


def test_max_correctable_errors():
    assert max_correctable_errors(7) == 3
    assert max_correctable_errors(10) == 5
    assert max_correctable_errors(30) == 15


def test_smaller_table():
    encoder = ReedSolomonEncoder(max_degree=10)
    assert encoder.compute_ecc(HELLO_WORLD_DATA, 10) == HELLO_WORLD_ECC
    with pytest.raises(ValueError):
        encoder.generator(11)

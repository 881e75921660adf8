import pytest

from qrshield.galois import GF256, gf


def test_exp_and_log_are_inverse():
    for a in range(1, 256):
        assert gf.exp_table[gf.log_table[a]] == a


def test_alpha_powers_wrap_at_255():
    assert gf.alpha(0) == 1
    assert gf.alpha(8) == 0x1D
    assert gf.alpha(255) == 1


@pytest.mark.parametrize("a, b", [(3, 7), (83, 202), (255, 255), (0x80, 2), (1, 99)])
def test_multiply_matches_carryless_reduction(a, b):
    assert gf.multiply(a, b) == gf._multiply_no_table(a, b)


def test_multiply_by_zero():
    assert gf.multiply(0, 57) == 0
    assert gf.multiply(57, 0) == 0


def test_inverse():
    for a in range(1, 256):
        assert gf.multiply(a, gf.inverse(a)) == 1


def test_inverse_of_zero_is_undefined():
    with pytest.raises(ZeroDivisionError):
        gf.inverse(0)


def test_divide_and_power():
    assert gf.divide(gf.multiply(83, 202), 202) == 83
    assert gf.power(2, 8) == 0x1D
    assert gf.power(0, 0) == 1
    with pytest.raises(ZeroDivisionError):
        gf.divide(5, 0)


def test_build_tables_is_idempotent():
    field = GF256()
    exp, log = list(field.exp_table), list(field.log_table)
    field.build_tables()
    field.build_tables()
    assert field.exp_table == exp
    assert field.log_table == log

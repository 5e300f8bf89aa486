import pytest

from arkfront.utils import MAX_DECIMAL_PLACES, dec_places, dig_places


def test_dec_places_single_digit():
    assert dec_places(0.5) == 1


def test_dec_places_three_digits():
    assert dec_places(0.125) == 3


def test_dec_places_integer_counts_one():
    assert dec_places(7.0) == dec_places(0.5)


def test_dec_places_is_capped():
    assert dec_places(1 / 3) == MAX_DECIMAL_PLACES


@pytest.mark.parametrize("n", [1, 9, 10, 42, 999, 1000, 123456])
def test_dig_places_matches_decimal_length(n):
    assert dig_places(n) == len(str(n))


def test_dig_places_zero():
    assert dig_places(0) == 0


def test_dig_places_ignores_fraction():
    assert dig_places(12.75) == dig_places(12)


def test_dig_places_negative_same_as_positive():
    assert dig_places(-4567) == dig_places(4567)
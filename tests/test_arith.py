import math

import pytest

from mpecdsa.arith import (
    int_from_bytes,
    int_to_bytes,
    is_probable_prime,
    mod_inv,
    mod_pow,
    random_prime,
    sample_below,
    sample_bits,
    sample_coprime,
    sample_range,
)
from mpecdsa.curve import Scalar


@pytest.mark.parametrize("value", [0, 1, 255, 256, 2**64 + 3, 2**521 - 1])
def test_bytes_round_trip(value):
    assert int_from_bytes(int_to_bytes(value)) == value


def test_int_to_bytes_is_big_endian_and_minimal():
    assert int_to_bytes(256) == b"\x01\x00"


def test_int_to_bytes_uses_magnitude():
    assert int_to_bytes(-300) == int_to_bytes(300)


def test_mod_inv_is_inverse():
    modulus = Scalar.group_order()
    for value in (2, 12345, modulus - 1):
        assert value * mod_inv(value, modulus) % modulus == 1


def test_mod_inv_rejects_non_invertible():
    with pytest.raises(ValueError):
        mod_inv(6, 9)


def test_mod_pow_matches_builtin_and_handles_negative_exponent():
    assert mod_pow(5, 117, 1009) == pow(5, 117, 1009)
    inverse = mod_pow(3, -1, 7)
    assert inverse * 3 % 7 == 1


def test_mod_pow_negative_exponent_without_inverse():
    with pytest.raises(ValueError):
        mod_pow(4, -1, 8)


def test_sample_below_bounds():
    samples = [sample_below(10) for _ in range(200)]
    assert all(0 <= s < 10 for s in samples)
    with pytest.raises(ValueError):
        sample_below(0)


def test_sample_range_bounds():
    samples = [sample_range(5, 8) for _ in range(200)]
    assert all(5 <= s < 8 for s in samples)
    with pytest.raises(ValueError):
        sample_range(8, 8)


def test_sample_bits_bounds():
    assert all(0 <= sample_bits(16) < 2**16 for _ in range(100))
    with pytest.raises(ValueError):
        sample_bits(-1)


def test_sample_coprime():
    modulus = 2 * 3 * 5 * 7 * 11
    for _ in range(50):
        assert math.gcd(sample_coprime(modulus), modulus) == 1
    with pytest.raises(ValueError):
        sample_coprime(1)


@pytest.mark.parametrize("n,expected", [(0, False), (1, False), (2, True), (97, True), (91, False)])
def test_is_probable_prime_small(n, expected):
    assert is_probable_prime(n) is expected


def test_is_probable_prime_large():
    order = Scalar.group_order()
    assert is_probable_prime(order)
    assert not is_probable_prime(order * 3)


def test_random_prime_has_exact_size():
    prime = random_prime(64)
    assert prime.bit_length() == 64
    assert is_probable_prime(prime)
    with pytest.raises(ValueError):
        random_prime(1)
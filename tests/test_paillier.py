import math

import pytest

from mpecdsa.paillier import DecryptionKey, EncryptionKey, keypair


@pytest.fixture(scope="module")
def keys():
    return keypair(512)


def test_keypair_shape(keys):
    ek, dk = keys
    assert ek.n.bit_length() == 512
    assert dk.n == ek.n
    assert dk.encryption_key() == ek
    assert ek.nn == ek.n * ek.n


@pytest.mark.parametrize("message", [0, 1, 42, 2**200 + 7])
def test_round_trip(keys, message):
    ek, dk = keys
    assert dk.decrypt(ek.encrypt(message)) == message


def test_plaintext_reduced_modulo_n(keys):
    ek, dk = keys
    assert dk.decrypt(ek.encrypt(ek.n + 9)) == 9


def test_encryption_is_randomised_but_deterministic_with_fixed_randomness(keys):
    ek, dk = keys
    r = ek.sample_randomness()
    assert ek.encrypt_with_randomness(77, r) == ek.encrypt_with_randomness(77, r)
    assert ek.encrypt(77) != ek.encrypt(77)
    assert dk.decrypt(ek.encrypt_with_randomness(77, r)) == 77


def test_homomorphic_addition(keys):
    ek, dk = keys
    m1, m2 = 2**100, ek.n - 5
    assert dk.decrypt(ek.add(ek.encrypt(m1), ek.encrypt(m2))) == (m1 + m2) % ek.n


def test_homomorphic_scalar_multiplication(keys):
    ek, dk = keys
    m, k = 123456789, 2**150 + 1
    assert dk.decrypt(ek.mul(ek.encrypt(m), k)) == m * k % ek.n


def test_sample_randomness_is_unit(keys):
    ek, _ = keys
    for _ in range(20):
        r = ek.sample_randomness()
        assert 0 < r < ek.n and math.gcd(r, ek.n) == 1


def test_small_key_decrypts():
    dk = DecryptionKey(1009, 1013)
    ek = dk.encryption_key()
    assert ek == EncryptionKey(1009 * 1013)
    assert dk.decrypt(ek.encrypt(500000)) == 500000


@pytest.mark.parametrize("bits", [8, 513])
def test_keypair_rejects_bad_sizes(bits):
    with pytest.raises(ValueError):
        keypair(bits)
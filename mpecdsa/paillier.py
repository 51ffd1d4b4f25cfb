"""Paillier encryption with generator n + 1."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property

from .arith import random_prime, sample_coprime


@dataclass(frozen=True)
class EncryptionKey:
    """A Paillier public key."""

    n: int

    @property
    def nn(self) -> int:
        return self.n * self.n

    def sample_randomness(self) -> int:
        """Random encryption randomness coprime to n."""
        return sample_coprime(self.n)

    def encrypt(self, plaintext: int) -> int:
        return self.encrypt_with_randomness(plaintext, self.sample_randomness())

    def encrypt_with_randomness(self, plaintext: int, randomness: int) -> int:
        nn = self.nn
        gm = ((plaintext % self.n) * self.n + 1) % nn
        return gm * pow(randomness, self.n, nn) % nn

    def add(self, c1: int, c2: int) -> int:
        """Ciphertext of the sum of the two plaintexts."""
        return c1 * c2 % self.nn

    def mul(self, ciphertext: int, plaintext: int) -> int:
        """Ciphertext of the plaintext of ``ciphertext`` times ``plaintext``."""
        return pow(ciphertext, plaintext, self.nn)


@dataclass(frozen=True)
class DecryptionKey:
    """A Paillier private key, held as its two primes."""

    p: int
    q: int

    @property
    def n(self) -> int:
        return self.p * self.q

    def encryption_key(self) -> EncryptionKey:
        return EncryptionKey(self.n)

    @staticmethod
    def _h(prime: int, n: int) -> int:
        square = prime * prime
        return pow((pow(n + 1, prime - 1, square) - 1) // prime, -1, prime)

    @cached_property
    def _crt(self) -> tuple[int, int, int]:
        n = self.n
        return self._h(self.p, n), self._h(self.q, n), pow(self.q, -1, self.p)

    def decrypt(self, ciphertext: int) -> int:
        p, q = self.p, self.q
        hp, hq, q_inv = self._crt
        mp = (pow(ciphertext, p - 1, p * p) - 1) // p * hp % p
        mq = (pow(ciphertext, q - 1, q * q) - 1) // q * hq % q
        return mq + q * ((mp - mq) * q_inv % p)


def keypair(bits: int = 2048) -> tuple[EncryptionKey, DecryptionKey]:
    """A fresh key pair whose modulus has exactly ``bits`` bits."""
    if bits < 16 or bits % 2:
        raise ValueError("modulus size must be an even number of at least 16 bits")
    half = bits // 2
    while True:
        p, q = random_prime(half), random_prime(half)
        if p == q:
            continue
        n = p * q
        if n.bit_length() == bits and math.gcd(n, (p - 1) * (q - 1)) == 1:
            dk = DecryptionKey(p, q)
            return dk.encryption_key(), dk
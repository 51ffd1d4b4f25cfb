"""Zero-knowledge proofs about Paillier keys, ciphertexts and RSA-type groups."""

from __future__ import annotations

import hashlib
import math
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from .arith import int_to_bytes, is_probable_prime, sample_below, sample_range
from .errors import IncorrectProof, ProofError
from .hashing import hash_bigints
from .paillier import DecryptionKey, EncryptionKey

SALT_STRING = b"correct-key-proof"
CHALLENGE_BITS = 128
HIDING_BITS = 128
CORRECT_KEY_ROUNDS = 11
SMALL_PRIME_BOUND = 6370
RANGE_ROUNDS = 40


@dataclass(frozen=True)
class DLogStatement:
    """The claim ``ni = g ** -x mod n`` for a secret exponent ``x``."""

    n: int
    g: int
    ni: int


def _composite_challenge(commitment: int, statement: DLogStatement) -> int:
    digest = hash_bigints(commitment, statement.g, statement.n, statement.ni)
    return digest % (1 << CHALLENGE_BITS)


@dataclass(frozen=True)
class CompositeDLogProof:
    """Proof of knowledge of a discrete log in the group of units modulo ``n``."""

    x: int
    y: int

    @classmethod
    def prove(cls, statement: DLogStatement, secret: int) -> CompositeDLogProof:
        bound = statement.n << (CHALLENGE_BITS + HIDING_BITS)
        r = sample_below(bound)
        commitment = pow(statement.g, r, statement.n)
        e = _composite_challenge(commitment, statement)
        return cls(commitment, r + e * secret)

    def verify(self, statement: DLogStatement) -> None:
        """Raise ProofError unless the proof holds for ``statement``."""
        n = statement.n
        if n < 2 or self.y < 0:
            raise ProofError("malformed composite discrete log proof")
        for value in (statement.g, statement.ni, self.x):
            if not 0 < value < n or math.gcd(value, n) != 1:
                raise ProofError("composite discrete log statement is not a unit")
        e = _composite_challenge(self.x, statement)
        if pow(statement.g, self.y, n) * pow(statement.ni, e, n) % n != self.x:
            raise ProofError("composite discrete log proof rejected")


def _salt_bytes(salt: bytes | str | None) -> bytes:
    if salt is None:
        return SALT_STRING
    if isinstance(salt, str):
        return salt.encode()
    return bytes(salt)


def _rho(n: int, salt: bytes, index: int) -> int:
    length = (n.bit_length() + 7) // 8 + 16
    blocks = -(-length // 32)
    prefix = int_to_bytes(n) + salt + index.to_bytes(4, "big")
    counter = 0
    while True:
        stream = b"".join(
            hashlib.sha256(
                prefix + counter.to_bytes(4, "big") + block.to_bytes(4, "big")
            ).digest()
            for block in range(blocks)
        )
        candidate = int.from_bytes(stream[:length], "big") % n
        if candidate > 1 and math.gcd(candidate, n) == 1:
            return candidate
        counter += 1


@lru_cache(maxsize=None)
def _small_primorial() -> int:
    return math.prod(
        p for p in range(2, SMALL_PRIME_BOUND) if is_probable_prime(p, 1)
    )


@dataclass(frozen=True)
class NiCorrectKeyProof:
    """Non-interactive proof that a Paillier modulus is well formed."""

    sigma: tuple[int, ...]

    @classmethod
    def prove(cls, dk: DecryptionKey, salt: bytes | str | None = None) -> NiCorrectKeyProof:
        salt_bytes = _salt_bytes(salt)
        n = dk.n
        phi = (dk.p - 1) * (dk.q - 1)
        exponent = pow(n, -1, phi)
        return cls(
            tuple(
                pow(_rho(n, salt_bytes, index), exponent, n)
                for index in range(CORRECT_KEY_ROUNDS)
            )
        )

    def verify(self, ek: EncryptionKey, salt: bytes | str | None = SALT_STRING) -> None:
        """Raise IncorrectProof unless ``ek`` is proven correct."""
        salt_bytes = _salt_bytes(salt)
        n = ek.n
        if n < 2 or math.gcd(n, _small_primorial()) != 1:
            raise IncorrectProof("modulus has a small prime factor")
        if len(self.sigma) != CORRECT_KEY_ROUNDS:
            raise IncorrectProof("wrong number of proof elements")
        for index, sigma in enumerate(self.sigma):
            if not 0 < sigma < n or pow(sigma, n, n) != _rho(n, salt_bytes, index):
                raise IncorrectProof("correct key proof rejected")


@dataclass(frozen=True)
class EncryptedPair:
    c1: int
    c2: int


@dataclass(frozen=True)
class PairOpening:
    """Both values of an encrypted pair with their randomness."""

    w1: int
    r1: int
    w2: int
    r2: int


@dataclass(frozen=True)
class MaskedOpening:
    """The secret masked by one value of a pair, with the combined randomness."""

    j: int
    z: int
    r: int


RangeResponse = Union[PairOpening, MaskedOpening]


def _range_challenge(
    ek: EncryptionKey, range_: int, ciphertext: int, pairs: tuple[EncryptedPair, ...]
) -> int:
    flat = [value for pair in pairs for value in (pair.c1, pair.c2)]
    return hash_bigints(ek.n, range_, ciphertext, *flat)


@dataclass(frozen=True)
class RangeProofNi:
    """Non-interactive proof that a ciphertext holds a value below ``range_ / 3``."""

    range_: int
    encrypted_pairs: tuple[EncryptedPair, ...]
    responses: tuple[RangeResponse, ...]

    @classmethod
    def prove(
        cls, ek: EncryptionKey, range_: int, ciphertext: int, secret: int, randomness: int
    ) -> RangeProofNi:
        low = range_ // 3
        if low <= 0:
            raise ValueError("range must be at least 3")
        openings = []
        pairs = []
        for _ in range(RANGE_ROUNDS):
            big = sample_range(low, 2 * low)
            values = [big, big - low]
            if secrets.randbits(1):
                values.reverse()
            w1, w2 = values
            r1, r2 = ek.sample_randomness(), ek.sample_randomness()
            openings.append(PairOpening(w1, r1, w2, r2))
            pairs.append(
                EncryptedPair(
                    ek.encrypt_with_randomness(w1, r1), ek.encrypt_with_randomness(w2, r2)
                )
            )
        pairs_tuple = tuple(pairs)
        challenge = _range_challenge(ek, range_, ciphertext, pairs_tuple)
        responses: list[RangeResponse] = []
        for index, opening in enumerate(openings):
            if (challenge >> index) & 1 == 0:
                responses.append(opening)
                continue
            candidates = {1: (opening.w1, opening.r1), 2: (opening.w2, opening.r2)}
            j = next(
                (k for k, (w, _) in candidates.items() if low <= secret + w < 2 * low), 1
            )
            w, r = candidates[j]
            responses.append(MaskedOpening(j, secret + w, randomness * r % ek.n))
        return cls(range_, pairs_tuple, tuple(responses))

    def verify(self, ek: EncryptionKey, ciphertext: int) -> None:
        """Raise IncorrectProof unless ``ciphertext`` is proven in range."""
        low = self.range_ // 3
        if (
            low <= 0
            or len(self.encrypted_pairs) != RANGE_ROUNDS
            or len(self.responses) != RANGE_ROUNDS
        ):
            raise IncorrectProof("malformed range proof")
        challenge = _range_challenge(ek, self.range_, ciphertext, self.encrypted_pairs)
        for index, (pair, response) in enumerate(zip(self.encrypted_pairs, self.responses)):
            if (challenge >> index) & 1 == 0:
                ok = isinstance(response, PairOpening) and _check_pair(ek, pair, response, low)
            else:
                ok = isinstance(response, MaskedOpening) and _check_masked(
                    ek, ciphertext, pair, response, low
                )
            if not ok:
                raise IncorrectProof(f"range proof round {index} rejected")


def _check_pair(ek: EncryptionKey, pair: EncryptedPair, opening: PairOpening, low: int) -> bool:
    small, big = sorted((opening.w1, opening.w2))
    return (
        0 <= small < low
        and big == small + low
        and ek.encrypt_with_randomness(opening.w1, opening.r1) == pair.c1
        and ek.encrypt_with_randomness(opening.w2, opening.r2) == pair.c2
    )


def _check_masked(
    ek: EncryptionKey, ciphertext: int, pair: EncryptedPair, opening: MaskedOpening, low: int
) -> bool:
    if opening.j not in (1, 2) or not low <= opening.z < 2 * low:
        return False
    c_j = pair.c1 if opening.j == 1 else pair.c2
    return ek.add(ciphertext, c_j) == ek.encrypt_with_randomness(opening.z, opening.r)
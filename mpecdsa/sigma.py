"""Sigma proofs: knowledge of a discrete log and equality of discrete logs."""

from __future__ import annotations

from dataclasses import dataclass

from .curve import Point, Scalar
from .errors import ProofError
from .hashing import hash_points


def _dlog_challenge(commitment: Point, pk: Point) -> Scalar:
    return Scalar(hash_points(commitment, Point.generator(), pk))


@dataclass(frozen=True)
class DLogProof:
    """Non-interactive Schnorr proof of knowledge of ``sk`` with ``pk = sk * G``."""

    pk: Point
    pk_t_rand_commitment: Point
    challenge_response: Scalar

    @classmethod
    def prove(cls, secret: Scalar) -> DLogProof:
        generator = Point.generator()
        nonce = Scalar.random()
        commitment = generator * nonce
        pk = generator * secret
        challenge = _dlog_challenge(commitment, pk)
        return cls(pk, commitment, nonce - challenge * secret)

    def verify(self) -> None:
        """Raise ProofError unless the proof is valid."""
        challenge = _dlog_challenge(self.pk_t_rand_commitment, self.pk)
        expected = Point.generator() * self.challenge_response + self.pk * challenge
        if expected != self.pk_t_rand_commitment:
            raise ProofError("discrete log proof rejected")


@dataclass(frozen=True)
class ECDDHStatement:
    """The claim ``h1 = x * g1`` and ``h2 = x * g2`` for one unknown ``x``."""

    g1: Point
    h1: Point
    g2: Point
    h2: Point


@dataclass(frozen=True)
class ECDDHWitness:
    x: Scalar


def _ddh_challenge(statement: ECDDHStatement, a1: Point, a2: Point) -> Scalar:
    return Scalar(
        hash_points(statement.g1, statement.h1, statement.g2, statement.h2, a1, a2)
    )


@dataclass(frozen=True)
class ECDDHProof:
    """Non-interactive proof of equality of two discrete logs."""

    a1: Point
    a2: Point
    z: Scalar

    @classmethod
    def prove(cls, witness: ECDDHWitness, statement: ECDDHStatement) -> ECDDHProof:
        nonce = Scalar.random()
        a1 = statement.g1 * nonce
        a2 = statement.g2 * nonce
        challenge = _ddh_challenge(statement, a1, a2)
        return cls(a1, a2, nonce + challenge * witness.x)

    def verify(self, statement: ECDDHStatement) -> None:
        """Raise ProofError unless the proof holds for ``statement``."""
        challenge = _ddh_challenge(statement, self.a1, self.a2)
        first_ok = statement.g1 * self.z == self.a1 + statement.h1 * challenge
        second_ok = statement.g2 * self.z == self.a2 + statement.h2 * challenge
        if not (first_ok and second_ok):
            raise ProofError("ECDDH proof rejected")
"""Proof that a Paillier ciphertext encrypts the discrete log of a curve point.

Statement ``(c, ek, Q, G)``, witness ``(x, r)`` with ``Q = x * G`` and
``c = Enc(ek, x, r)``. The range part leaves a slack: ``x`` is only bound
to ``[-q^3, q^3]``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .arith import mod_inv, mod_pow, sample_below, sample_range
from .curve import Point, Scalar
from .errors import ZkPdlWithSlackError
from .hashing import hash_bigints, point_to_bigint
from .paillier import EncryptionKey


@dataclass(frozen=True)
class PDLwSlackStatement:
    ciphertext: int
    ek: EncryptionKey
    Q: Point
    G: Point
    h1: int
    h2: int
    n_tilde: int


@dataclass(frozen=True)
class PDLwSlackWitness:
    x: Scalar
    r: int


def commitment_unknown_order(h1: int, h2: int, n_tilde: int, x: int, r: int) -> int:
    """``h1 ** x * h2 ** r mod n_tilde``; a negative ``r`` inverts ``h2``."""
    h1_x = mod_pow(h1, x, n_tilde)
    if r < 0:
        h2_r = mod_pow(mod_inv(h2, n_tilde), -r, n_tilde)
    else:
        h2_r = mod_pow(h2, r, n_tilde)
    return h1_x * h2_r % n_tilde


def _challenge(statement: PDLwSlackStatement, z: int, u1: Point, u2: int, u3: int) -> int:
    return hash_bigints(
        point_to_bigint(statement.G),
        point_to_bigint(statement.Q),
        statement.ciphertext,
        z,
        point_to_bigint(u1),
        u2,
        u3,
    )


@dataclass(frozen=True)
class PDLwSlackProof:
    z: int
    u1: Point
    u2: int
    u3: int
    s1: int
    s2: int
    s3: int

    @classmethod
    def prove(cls, witness: PDLwSlackWitness, statement: PDLwSlackStatement) -> PDLwSlackProof:
        q = Scalar.group_order()
        q3 = q**3
        n = statement.ek.n
        nn = statement.ek.nn

        alpha = sample_below(q3)
        beta = sample_range(1, n - 1)
        rho = sample_below(q * statement.n_tilde)
        gamma = sample_below(q3 * statement.n_tilde)
        x = witness.x.to_int()

        z = commitment_unknown_order(statement.h1, statement.h2, statement.n_tilde, x, rho)
        u1 = statement.G * Scalar(alpha)
        u2 = commitment_unknown_order(n + 1, beta, nn, alpha, n)
        u3 = commitment_unknown_order(
            statement.h1, statement.h2, statement.n_tilde, alpha, gamma
        )
        e = _challenge(statement, z, u1, u2, u3)

        s1 = e * x + alpha
        s2 = commitment_unknown_order(witness.r, beta, n, e, 1)
        s3 = e * rho + gamma
        return cls(z, u1, u2, u3, s1, s2, s3)

    def verify(self, statement: PDLwSlackStatement) -> None:
        """Raise ZkPdlWithSlackError unless the proof holds for ``statement``."""
        n = statement.ek.n
        nn = statement.ek.nn
        e = _challenge(statement, self.z, self.u1, self.u2, self.u3)
        try:
            g_s1 = statement.G * Scalar(self.s1)
            y_minus_e = statement.Q * Scalar(Scalar.group_order() - e)
            u1_test = g_s1 + y_minus_e

            u2_tmp = commitment_unknown_order(n + 1, self.s2, nn, self.s1, n)
            u2_test = commitment_unknown_order(u2_tmp, statement.ciphertext, nn, 1, -e)

            u3_tmp = commitment_unknown_order(
                statement.h1, statement.h2, statement.n_tilde, self.s1, self.s3
            )
            u3_test = commitment_unknown_order(u3_tmp, self.z, statement.n_tilde, 1, -e)
        except ValueError as exc:
            raise ZkPdlWithSlackError() from exc

        if not (self.u1 == u1_test and self.u2 == u2_test and self.u3 == u3_test):
            raise ZkPdlWithSlackError()
"""Zero-knowledge range proofs for the MtA protocol.

Alice proves that her Paillier ciphertext holds a small value. Bob proves
that his MtA answer was formed from a small multiplier and a known offset.
The extended Bob proof also proves that the multiplier is the discrete log
of a public curve point. All proofs are non-interactive, with the challenge
computed by Fiat-Shamir.
"""

from __future__ import annotations

from dataclasses import dataclass

from .arith import mod_inv, mod_pow, sample_below, sample_coprime
from .curve import Point, Scalar
from .hashing import hash_bigints
from .paillier import EncryptionKey
from .zkp_paillier import DLogStatement


def sample_from_paillier_key(ek: EncryptionKey) -> int:
    """A random unit modulo the Paillier modulus of ``ek``."""
    return sample_coprime(ek.n)


def _inverse_of_power(base: int, exponent: int, modulus: int) -> int | None:
    try:
        return mod_inv(mod_pow(base, exponent, modulus), modulus)
    except ValueError:
        return None


def _pedersen(statement: DLogStatement, x: int, r: int) -> int:
    n_tilde = statement.n
    return mod_pow(statement.g, x, n_tilde) * mod_pow(statement.ni, r, n_tilde) % n_tilde


@dataclass(frozen=True)
class AliceProof:
    """Alice's proof that her ciphertext encrypts a value below ``q^3``."""

    z: int
    e: int
    s: int
    s1: int
    s2: int

    @classmethod
    def generate(
        cls,
        a: int,
        cipher: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        r: int,
    ) -> AliceProof:
        """Prove that ``cipher`` encrypts ``a`` with randomness ``r``."""
        q = Scalar.group_order()
        n, nn = alice_ek.n, alice_ek.nn
        n_tilde = dlog_statement.n

        alpha = sample_below(q**3)
        beta = sample_from_paillier_key(alice_ek)
        gamma = sample_below(q**3 * n_tilde)
        ro = sample_below(q * n_tilde)

        z = _pedersen(dlog_statement, a, ro)
        u = (alpha * n + 1) * mod_pow(beta, n, nn) % nn
        w = _pedersen(dlog_statement, alpha, gamma)

        e = hash_bigints(n, n + 1, cipher, z, u, w)
        return cls(
            z=z,
            e=e,
            s=mod_pow(r, e, n) * beta % n,
            s1=e * a + alpha,
            s2=e * ro + gamma,
        )

    def verify(
        self, cipher: int, alice_ek: EncryptionKey, dlog_statement: DLogStatement
    ) -> bool:
        """Check the proof against the ciphertext and the public keys."""
        n, nn = alice_ek.n, alice_ek.nn
        n_tilde = dlog_statement.n

        if self.s1 > Scalar.group_order() ** 3:
            return False

        z_e_inv = _inverse_of_power(self.z, self.e, n_tilde)
        if z_e_inv is None:
            return False
        w = (
            mod_pow(dlog_statement.g, self.s1, n_tilde)
            * mod_pow(dlog_statement.ni, self.s2, n_tilde)
            * z_e_inv
            % n_tilde
        )

        cipher_e_inv = _inverse_of_power(cipher, self.e, nn)
        if cipher_e_inv is None:
            return False
        gs1 = (self.s1 * n + 1) % nn
        u = gs1 * mod_pow(self.s, n, nn) * cipher_e_inv % nn

        return hash_bigints(n, n + 1, cipher, self.z, u, w) == self.e


@dataclass(frozen=True)
class BobCheck:
    """The extra values hashed into Bob's proof when MtA runs with check."""

    u: Point
    x: Point


def _point_coords(*points: Point) -> list[int]:
    return [coord for point in points for coord in (point.x_coord(), point.y_coord())]


@dataclass(frozen=True)
class BobProof:
    """Bob's proof that his MtA answer is well formed."""

    t: int
    z: int
    e: int
    s: int
    s1: int
    s2: int
    t1: int
    t2: int

    @classmethod
    def generate(
        cls,
        a_encrypted: int,
        mta_encrypted: int,
        b: Scalar,
        beta_prim: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        r: int,
        check: bool,
    ) -> tuple[BobProof, Point | None]:
        """Prove the MtA answer; with ``check`` also return the point ``u``."""
        q = Scalar.group_order()
        n, nn = alice_ek.n, alice_ek.nn
        n_tilde = dlog_statement.n
        b_int = b.to_int()

        alpha = sample_below(q**3)
        beta = sample_from_paillier_key(alice_ek)
        gamma = sample_below(q**2 * n)
        ro = sample_below(q * n_tilde)
        ro_prim = sample_below(q**3 * n_tilde)
        sigma = sample_below(q * n_tilde)
        tau = sample_below(q**3 * n_tilde)

        z = _pedersen(dlog_statement, b_int, ro)
        z_prim = _pedersen(dlog_statement, alpha, ro_prim)
        t = _pedersen(dlog_statement, beta_prim, sigma)
        w = _pedersen(dlog_statement, gamma, tau)
        v = (
            mod_pow(a_encrypted, alpha, nn)
            * (gamma * n + 1)
            * mod_pow(beta, n, nn)
            % nn
        )

        values = [n, n + 1, a_encrypted, mta_encrypted, z, z_prim, t, v, w]
        check_u = None
        if check:
            generator = Point.generator()
            big_x = generator * b
            check_u = generator * Scalar(alpha)
            values.extend(_point_coords(big_x, check_u))
        e = hash_bigints(*values)

        proof = cls(
            t=t,
            z=z,
            e=e,
            s=mod_pow(r, e, n) * beta % n,
            s1=e * b_int + alpha,
            s2=e * ro + ro_prim,
            t1=e * beta_prim + gamma,
            t2=e * sigma + tau,
        )
        return proof, check_u

    def verify(
        self,
        a_enc: int,
        mta_avc_out: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        check: BobCheck | None = None,
    ) -> bool:
        """Check the proof; ``check`` must be given when it was generated with one."""
        n, nn = alice_ek.n, alice_ek.nn
        n_tilde = dlog_statement.n
        h1, h2 = dlog_statement.g, dlog_statement.ni

        if self.s1 > Scalar.group_order() ** 3:
            return False

        z_e_inv = _inverse_of_power(self.z, self.e, n_tilde)
        if z_e_inv is None:
            return False
        z_prim = (
            mod_pow(h1, self.s1, n_tilde) * mod_pow(h2, self.s2, n_tilde) * z_e_inv % n_tilde
        )

        mta_e_inv = _inverse_of_power(mta_avc_out, self.e, nn)
        if mta_e_inv is None:
            return False
        v = (
            mod_pow(a_enc, self.s1, nn)
            * mod_pow(self.s, n, nn)
            * (self.t1 * n + 1)
            * mta_e_inv
            % nn
        )

        t_e_inv = _inverse_of_power(self.t, self.e, n_tilde)
        if t_e_inv is None:
            return False
        w = mod_pow(h1, self.t1, n_tilde) * mod_pow(h2, self.t2, n_tilde) * t_e_inv % n_tilde

        values = [n, n + 1, a_enc, mta_avc_out, self.z, z_prim, self.t, v, w]
        if check is not None:
            try:
                values.extend(_point_coords(check.x, check.u))
            except ValueError:
                return False
        return hash_bigints(*values) == self.e


@dataclass(frozen=True)
class BobProofExt:
    """Bob's proof extended with knowledge of ``b`` for ``X = b * G``."""

    proof: BobProof
    u: Point

    @classmethod
    def generate(
        cls,
        a_encrypted: int,
        mta_encrypted: int,
        b: Scalar,
        beta_prim: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        r: int,
    ) -> BobProofExt:
        proof, u = BobProof.generate(
            a_encrypted, mta_encrypted, b, beta_prim, alice_ek, dlog_statement, r, True
        )
        assert u is not None
        return cls(proof=proof, u=u)

    def verify(
        self,
        a_enc: int,
        mta_avc_out: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        x: Point,
    ) -> bool:
        """Check the basic proof with its check values, then the curve relation."""
        if not self.proof.verify(
            a_enc, mta_avc_out, alice_ek, dlog_statement, BobCheck(u=self.u, x=x)
        ):
            return False
        left = Point.generator() * Scalar(self.proof.s1)
        right = x * Scalar(self.proof.e) + self.u
        return left == right
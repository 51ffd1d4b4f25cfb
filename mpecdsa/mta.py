"""Multiplicative-to-additive share conversion (MtA).

Alice holds ``a``, Bob holds ``b``; after the exchange Alice learns ``alpha``
and Bob ``beta`` with ``alpha + beta = a * b`` modulo the group order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .arith import sample_below
from .curve import Point, Scalar
from .errors import InvalidKey, ProofError
from .paillier import DecryptionKey, EncryptionKey
from .range_proofs import AliceProof
from .sigma import DLogProof
from .zkp_paillier import DLogStatement


@dataclass
class MessageA:
    """Alice's Paillier ciphertext of ``a`` with one range proof per verifier."""

    c: int
    range_proofs: list[AliceProof] = field(default_factory=list)

    @classmethod
    def a(
        cls,
        a: Scalar,
        alice_ek: EncryptionKey,
        dlog_statements: Sequence[DLogStatement] = (),
    ) -> tuple[MessageA, int]:
        """Encrypt ``a`` with fresh randomness; return the message and the randomness.

        ``dlog_statements`` may be empty when no range proofs are wanted.
        """
        randomness = sample_below(alice_ek.n)
        message = cls.a_with_predefined_randomness(a, alice_ek, randomness, dlog_statements)
        return message, randomness

    @classmethod
    def a_with_predefined_randomness(
        cls,
        a: Scalar,
        alice_ek: EncryptionKey,
        randomness: int,
        dlog_statements: Sequence[DLogStatement] = (),
    ) -> MessageA:
        a_int = a.to_int()
        c_a = alice_ek.encrypt_with_randomness(a_int, randomness)
        proofs = [
            AliceProof.generate(a_int, c_a, alice_ek, statement, randomness)
            for statement in dlog_statements
        ]
        return cls(c=c_a, range_proofs=proofs)


@dataclass(frozen=True)
class MessageB:
    """Bob's answer: ``b * Enc(a) + Enc(beta')`` with proofs of ``b`` and ``beta'``."""

    c: int
    b_proof: DLogProof
    beta_tag_proof: DLogProof

    @classmethod
    def b(
        cls,
        b: Scalar,
        alice_ek: EncryptionKey,
        m_a: MessageA,
        dlog_statements: Sequence[DLogStatement] = (),
    ) -> tuple[MessageB, Scalar, int, int]:
        """Answer ``m_a``; return the message, ``beta``, the randomness and ``beta'``.

        Raises InvalidKey if Alice's range proofs do not verify.
        """
        beta_tag = sample_below(alice_ek.n)
        randomness = sample_below(alice_ek.n)
        message, beta = cls.b_with_predefined_randomness(
            b, alice_ek, m_a, randomness, beta_tag, dlog_statements
        )
        return message, beta, randomness, beta_tag

    @classmethod
    def b_with_predefined_randomness(
        cls,
        b: Scalar,
        alice_ek: EncryptionKey,
        m_a: MessageA,
        randomness: int,
        beta_tag: int,
        dlog_statements: Sequence[DLogStatement] = (),
    ) -> tuple[MessageB, Scalar]:
        statements = list(dlog_statements)
        if len(m_a.range_proofs) != len(statements):
            raise InvalidKey("number of range proofs does not match the statements")
        if not all(
            proof.verify(m_a.c, alice_ek, statement)
            for proof, statement in zip(m_a.range_proofs, statements)
        ):
            raise InvalidKey("range proof of message A rejected")

        beta_tag_fe = Scalar(beta_tag)
        c_beta_tag = alice_ek.encrypt_with_randomness(beta_tag, randomness)
        b_c_a = alice_ek.mul(m_a.c, b.to_int())
        c_b = alice_ek.add(b_c_a, c_beta_tag)
        beta = Scalar.zero() - beta_tag_fe

        message = cls(
            c=c_b,
            b_proof=DLogProof.prove(b),
            beta_tag_proof=DLogProof.prove(beta_tag_fe),
        )
        return message, beta

    def verify_proofs_get_alpha(
        self, dk: DecryptionKey, a: Scalar
    ) -> tuple[Scalar, int]:
        """Decrypt Alice's share and check it against Bob's proofs.

        Returns ``alpha`` as a scalar and the raw decrypted value; raises
        InvalidKey if the proofs or the ciphertext do not check out.
        """
        alice_share = dk.decrypt(self.c)
        alpha = Scalar(alice_share)
        g_alpha = Point.generator() * alpha
        ba_btag = self.b_proof.pk * a + self.beta_tag_proof.pk
        try:
            self.b_proof.verify()
            self.beta_tag_proof.verify()
        except ProofError as exc:
            raise InvalidKey("discrete log proof of message B rejected") from exc
        if ba_btag != g_alpha:
            raise InvalidKey("message B ciphertext does not match its proofs")
        return alpha, alice_share

    @staticmethod
    def verify_b_against_public(public_gb: Point, mta_gb: Point) -> bool:
        return public_gb == mta_gb
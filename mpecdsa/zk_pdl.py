"""Interactive proof that a Paillier ciphertext decrypts to the discrete log of a point.

Statement ``(c, ek, Q, G)``, witness ``(x, r, dk)`` with ``Q = x * G``,
``c = Enc(ek, x, r)`` and ``Dec(dk, c) = x``. Because of the range proof the
proof is sound only for ``x < q / 3``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .arith import sample_below
from .curve import Point, Scalar
from .errors import IncorrectProof, ZkPdlError
from .hashing import create_commitment, point_to_bigint
from .paillier import DecryptionKey, EncryptionKey
from .zkp_paillier import RangeProofNi


@dataclass(frozen=True)
class PDLStatement:
    ciphertext: int
    ek: EncryptionKey
    Q: Point
    G: Point


@dataclass(frozen=True)
class PDLWitness:
    x: Scalar
    r: int
    dk: DecryptionKey


@dataclass
class PDLVerifierState:
    c_tag: int
    c_tag_tag: int
    a: int
    b: int
    blindness: int
    q_tag: Point
    c_hat: int = 0


@dataclass(frozen=True)
class PDLProverDecommit:
    q_hat: Point
    blindness: int


@dataclass(frozen=True)
class PDLProverState:
    decommit: PDLProverDecommit
    alpha: int


@dataclass(frozen=True)
class PDLVerifierFirstMessage:
    c_tag: int
    c_tag_tag: int


@dataclass(frozen=True)
class PDLProverFirstMessage:
    c_hat: int
    range_proof: RangeProofNi


@dataclass(frozen=True)
class PDLVerifierSecondMessage:
    a: int
    b: int
    blindness: int


@dataclass(frozen=True)
class PDLProverSecondMessage:
    decommit: PDLProverDecommit


def _concat(a: int, b: int) -> int:
    return a + (b << a.bit_length())


def verifier_message1(
    statement: PDLStatement,
) -> tuple[PDLVerifierFirstMessage, PDLVerifierState]:
    """Blind the ciphertext as ``a * x + b`` and commit to ``(a, b)``."""
    q = Scalar.group_order()
    a_fe = Scalar.random()
    a = a_fe.to_int()
    b = sample_below(q**2)
    b_fe = Scalar(b)
    ek = statement.ek
    c_tag = ek.add(ek.mul(statement.ciphertext, a), ek.encrypt(b))
    blindness = sample_below(q)
    c_tag_tag = create_commitment(_concat(a, b), blindness)
    q_tag = statement.Q * a_fe + statement.G * b_fe
    message = PDLVerifierFirstMessage(c_tag=c_tag, c_tag_tag=c_tag_tag)
    state = PDLVerifierState(
        c_tag=c_tag,
        c_tag_tag=c_tag_tag,
        a=a,
        b=b,
        blindness=blindness,
        q_tag=q_tag,
    )
    return message, state


def verifier_message2(
    prover_first_message: PDLProverFirstMessage,
    statement: PDLStatement,
    state: PDLVerifierState,
) -> PDLVerifierSecondMessage:
    """Record the prover's commitment, check the range proof and open ``(a, b)``."""
    decommit = PDLVerifierSecondMessage(a=state.a, b=state.b, blindness=state.blindness)
    state.c_hat = prover_first_message.c_hat
    try:
        prover_first_message.range_proof.verify(statement.ek, statement.ciphertext)
    except IncorrectProof as exc:
        raise ZkPdlError("zk pdl message2 failed") from exc
    return decommit


def verifier_finalize(
    prover_first_message: PDLProverFirstMessage,
    prover_second_message: PDLProverSecondMessage,
    state: PDLVerifierState,
) -> None:
    """Raise ZkPdlError unless the prover's opening matches ``a * Q + b * G``."""
    decommit = prover_second_message.decommit
    c_hat_test = create_commitment(point_to_bigint(decommit.q_hat), decommit.blindness)
    if prover_first_message.c_hat != c_hat_test or decommit.q_hat != state.q_tag:
        raise ZkPdlError("zk pdl finalize failed")


def prover_message1(
    witness: PDLWitness,
    statement: PDLStatement,
    verifier_first_message: PDLVerifierFirstMessage,
) -> tuple[PDLProverFirstMessage, PDLProverState]:
    """Decrypt the blinded ciphertext, commit to its point and prove the range."""
    q = Scalar.group_order()
    alpha = witness.dk.decrypt(verifier_first_message.c_tag)
    q_hat = statement.G * Scalar(alpha)
    blindness = sample_below(q)
    c_hat = create_commitment(point_to_bigint(q_hat), blindness)
    range_proof = RangeProofNi.prove(
        statement.ek, q, statement.ciphertext, witness.x.to_int(), witness.r
    )
    message = PDLProverFirstMessage(c_hat=c_hat, range_proof=range_proof)
    state = PDLProverState(
        decommit=PDLProverDecommit(q_hat=q_hat, blindness=blindness), alpha=alpha
    )
    return message, state


def prover_message2(
    verifier_first_message: PDLVerifierFirstMessage,
    verifier_second_message: PDLVerifierSecondMessage,
    witness: PDLWitness,
    state: PDLProverState,
) -> PDLProverSecondMessage:
    """Check the verifier's opening and reveal the committed point."""
    a, b = verifier_second_message.a, verifier_second_message.b
    c_tag_tag_test = create_commitment(_concat(a, b), verifier_second_message.blindness)
    alpha_test = a * witness.x.to_int() + b
    if alpha_test != state.alpha or verifier_first_message.c_tag_tag != c_tag_tag_test:
        raise ZkPdlError("zk pdl message2 failed")
    return PDLProverSecondMessage(decommit=state.decommit)
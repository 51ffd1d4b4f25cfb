"""Party two of two-party ECDSA signing with a Paillier-encrypted key share.

Party two holds its own secret share and party one's share encrypted under
party one's Paillier key. It computes partial signatures homomorphically.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..arith import mod_inv, sample_below, sample_bits
from ..curve import Point, Scalar
from ..errors import IncorrectProof, PartyTwoError, ProofError, ZkPdlWithSlackError
from ..hashing import create_commitment, hash_points, point_to_bigint
from ..mta import MessageA, MessageB
from ..paillier import EncryptionKey
from ..sigma import DLogProof, ECDDHProof, ECDDHStatement, ECDDHWitness
from ..zk_pdl_with_slack import PDLwSlackProof, PDLwSlackStatement
from ..zkp_paillier import SALT_STRING, CompositeDLogProof, DLogStatement, NiCorrectKeyProof

SECURITY_BITS = 256
PAILLIER_KEY_SIZE = 2048


@dataclass(frozen=True)
class EcKeyPair:
    public_share: Point
    secret_share: Scalar = field(repr=False)


@dataclass(frozen=True)
class KeyGenFirstMsg:
    """Party two's public share with a proof of knowledge of its discrete log."""

    d_log_proof: DLogProof
    public_share: Point

    @classmethod
    def create(cls) -> tuple[KeyGenFirstMsg, EcKeyPair]:
        """Start key generation with a fresh random secret share."""
        return cls.create_with_fixed_secret_share(Scalar.random())

    @classmethod
    def create_with_fixed_secret_share(
        cls, secret_share: Scalar
    ) -> tuple[KeyGenFirstMsg, EcKeyPair]:
        public_share = Point.generator() * secret_share
        d_log_proof = DLogProof.prove(secret_share)
        return (
            cls(d_log_proof=d_log_proof, public_share=public_share),
            EcKeyPair(public_share=public_share, secret_share=secret_share),
        )


@dataclass(frozen=True)
class KeyGenSecondMsg:
    @classmethod
    def verify_commitments_and_dlog_proof(
        cls, party_one_first_message, party_one_second_message
    ) -> KeyGenSecondMsg:
        """Open party one's commitments and check its discrete log proof.

        Raises ProofError if a commitment or the proof does not check out.
        """
        witness = party_one_second_message.comm_witness
        proof = witness.d_log_proof
        pk_ok = party_one_first_message.pk_commitment == create_commitment(
            point_to_bigint(witness.public_share), witness.pk_commitment_blind_factor
        )
        zk_ok = party_one_first_message.zk_pok_commitment == create_commitment(
            point_to_bigint(proof.pk_t_rand_commitment), witness.zk_pok_blind_factor
        )
        if not (pk_ok and zk_ok):
            raise ProofError("key generation commitments do not open")
        proof.verify()
        return cls()


def compute_pubkey(local_share: EcKeyPair, other_share_public_share: Point) -> Point:
    """The joint public key ``x1 * x2 * G``."""
    return other_share_public_share * local_share.secret_share


@dataclass(frozen=True)
class PaillierPublic:
    """Party one's Paillier key and the encryption of its secret share."""

    ek: EncryptionKey
    encrypted_secret_share: int

    def pdl_verify(
        self,
        composite_dlog_proof: CompositeDLogProof,
        pdl_w_slack_statement: PDLwSlackStatement,
        pdl_w_slack_proof: PDLwSlackProof,
        q1: Point,
    ) -> None:
        """Raise PartyTwoError unless the encrypted share is the discrete log of ``q1``."""
        if (
            pdl_w_slack_statement.ek != self.ek
            or pdl_w_slack_statement.ciphertext != self.encrypted_secret_share
            or pdl_w_slack_statement.Q != q1
        ):
            raise PartyTwoError()
        dlog_statement = DLogStatement(
            n=pdl_w_slack_statement.n_tilde,
            g=pdl_w_slack_statement.h1,
            ni=pdl_w_slack_statement.h2,
        )
        try:
            composite_dlog_proof.verify(dlog_statement)
            pdl_w_slack_proof.verify(pdl_w_slack_statement)
        except (ProofError, ZkPdlWithSlackError) as exc:
            raise PartyTwoError() from exc

    @staticmethod
    def verify_ni_proof_correct_key(proof: NiCorrectKeyProof, ek: EncryptionKey) -> None:
        """Raise IncorrectProof unless ``ek`` is large enough and proven well formed."""
        if ek.n.bit_length() < PAILLIER_KEY_SIZE - 1:
            raise IncorrectProof("Paillier modulus is too small")
        proof.verify(ek, SALT_STRING)


@dataclass(frozen=True)
class Party2Private:
    x2: Scalar = field(repr=False)

    @classmethod
    def set_private_key(cls, ec_key: EcKeyPair) -> Party2Private:
        return cls(x2=ec_key.secret_share)

    def update_private_key(self, factor: int) -> Party2Private:
        """The share multiplied by ``factor``."""
        return Party2Private(x2=self.x2 * Scalar(factor))

    def to_mta_message_b(
        self, ek: EncryptionKey, ciphertext: int
    ) -> tuple[MessageB, Scalar]:
        """Answer an MtA exchange whose Alice input is the given ciphertext."""
        message_a = MessageA(c=ciphertext, range_proofs=[])
        message_b, beta, _, _ = MessageB.b(self.x2, ek, message_a, [])
        return message_b, beta


@dataclass(frozen=True)
class EphEcKeyPair:
    public_share: Point
    secret_share: Scalar = field(repr=False)


@dataclass(frozen=True)
class EphCommWitness:
    """The openings of party two's ephemeral commitments."""

    pk_commitment_blind_factor: int
    zk_pok_blind_factor: int
    public_share: Point
    d_log_proof: ECDDHProof
    c: Point


@dataclass(frozen=True)
class EphKeyGenFirstMsg:
    pk_commitment: int
    zk_pok_commitment: int

    @classmethod
    def create_commitments(cls) -> tuple[EphKeyGenFirstMsg, EphCommWitness, EphEcKeyPair]:
        """Commit to a fresh ephemeral share ``k2 * G`` and its DDH proof."""
        generator = Point.generator()
        secret_share = Scalar.random()
        public_share = generator * secret_share
        h = Point.base_point2()
        c = h * secret_share
        statement = ECDDHStatement(g1=generator, h1=public_share, g2=h, h2=c)
        d_log_proof = ECDDHProof.prove(ECDDHWitness(x=secret_share), statement)

        pk_commitment_blind_factor = sample_bits(SECURITY_BITS)
        pk_commitment = create_commitment(
            point_to_bigint(public_share), pk_commitment_blind_factor
        )
        zk_pok_blind_factor = sample_bits(SECURITY_BITS)
        zk_pok_commitment = create_commitment(
            hash_points(d_log_proof.a1, d_log_proof.a2), zk_pok_blind_factor
        )

        witness = EphCommWitness(
            pk_commitment_blind_factor=pk_commitment_blind_factor,
            zk_pok_blind_factor=zk_pok_blind_factor,
            public_share=public_share,
            d_log_proof=d_log_proof,
            c=c,
        )
        return (
            cls(pk_commitment=pk_commitment, zk_pok_commitment=zk_pok_commitment),
            witness,
            EphEcKeyPair(public_share=public_share, secret_share=secret_share),
        )


@dataclass(frozen=True)
class EphKeyGenSecondMsg:
    comm_witness: EphCommWitness

    @classmethod
    def verify_and_decommit(
        cls, comm_witness: EphCommWitness, party_one_first_message
    ) -> EphKeyGenSecondMsg:
        """Check party one's DDH proof, then open the commitments.

        Raises ProofError if the proof is rejected.
        """
        statement = ECDDHStatement(
            g1=Point.generator(),
            h1=party_one_first_message.public_share,
            g2=Point.base_point2(),
            h2=party_one_first_message.c,
        )
        party_one_first_message.d_log_proof.verify(statement)
        return cls(comm_witness)


@dataclass(frozen=True)
class PartialSig:
    c3: int

    @classmethod
    def compute(
        cls,
        ek: EncryptionKey,
        encrypted_secret_share: int,
        local_share: Party2Private,
        ephemeral_local_share: EphEcKeyPair,
        ephemeral_other_public_share: Point,
        message: int,
    ) -> PartialSig:
        """Encrypt ``k2^-1 * (m + r * x1 * x2)`` masked by a multiple of q."""
        q = Scalar.group_order()
        r = ephemeral_other_public_share * ephemeral_local_share.secret_share
        rx = r.x_coord() % q
        rho = sample_below(q**2)
        k2_inv = mod_inv(ephemeral_local_share.secret_share.to_int(), q)
        partial_sig = rho * q + k2_inv * message % q
        c1 = ek.encrypt(partial_sig)
        v = k2_inv * (rx * local_share.x2.to_int() % q) % q
        c2 = ek.mul(encrypted_secret_share, v)
        return cls(c3=ek.add(c2, c1))
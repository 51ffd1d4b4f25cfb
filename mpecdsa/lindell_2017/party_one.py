"""Party one of two-party ECDSA signing with a Paillier-encrypted key share.

Party one holds the Paillier key pair. Party two holds an encryption of
party one's share and produces partial signatures that party one decrypts
and finishes.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass, field

from ..arith import int_to_bytes, mod_inv, sample_below, sample_bits
from ..curve import Point, Scalar
from ..errors import InvalidSig, ProofError
from ..hashing import create_commitment, hash_points, point_to_bigint
from ..mta import MessageB
from ..paillier import DecryptionKey, EncryptionKey, keypair
from ..sigma import DLogProof, ECDDHProof, ECDDHStatement, ECDDHWitness
from ..zk_pdl_with_slack import PDLwSlackProof, PDLwSlackStatement, PDLwSlackWitness
from ..zkp_paillier import CompositeDLogProof, DLogStatement, NiCorrectKeyProof

SECURITY_BITS = 256
PAILLIER_KEY_BITS = 2048


@dataclass(frozen=True)
class EcKeyPair:
    public_share: Point
    secret_share: Scalar = field(repr=False)


@dataclass(frozen=True)
class CommWitness:
    """The openings of party one's key generation commitments."""

    pk_commitment_blind_factor: int
    zk_pok_blind_factor: int
    public_share: Point
    d_log_proof: DLogProof


@dataclass(frozen=True)
class KeyGenFirstMsg:
    """Commitments to party one's public share and to its proof of knowledge."""

    pk_commitment: int
    zk_pok_commitment: int

    @classmethod
    def create_commitments(cls) -> tuple[KeyGenFirstMsg, CommWitness, EcKeyPair]:
        """Commit to a fresh random secret share."""
        return cls.create_commitments_with_fixed_secret_share(Scalar.random())

    @classmethod
    def create_commitments_with_fixed_secret_share(
        cls, secret_share: Scalar
    ) -> tuple[KeyGenFirstMsg, CommWitness, EcKeyPair]:
        """Commit to the given secret share."""
        public_share = Point.generator() * secret_share
        d_log_proof = DLogProof.prove(secret_share)

        pk_commitment_blind_factor = sample_bits(SECURITY_BITS)
        pk_commitment = create_commitment(
            point_to_bigint(public_share), pk_commitment_blind_factor
        )
        zk_pok_blind_factor = sample_bits(SECURITY_BITS)
        zk_pok_commitment = create_commitment(
            point_to_bigint(d_log_proof.pk_t_rand_commitment), zk_pok_blind_factor
        )

        ec_key_pair = EcKeyPair(public_share=public_share, secret_share=secret_share)
        witness = CommWitness(
            pk_commitment_blind_factor=pk_commitment_blind_factor,
            zk_pok_blind_factor=zk_pok_blind_factor,
            public_share=public_share,
            d_log_proof=d_log_proof,
        )
        return cls(pk_commitment, zk_pok_commitment), witness, ec_key_pair


@dataclass(frozen=True)
class KeyGenSecondMsg:
    comm_witness: CommWitness

    @classmethod
    def verify_and_decommit(
        cls, comm_witness: CommWitness, proof: DLogProof
    ) -> KeyGenSecondMsg:
        """Check party two's proof, then open the commitments.

        Raises ProofError if the proof is rejected.
        """
        proof.verify()
        return cls(comm_witness)


@dataclass(frozen=True)
class Party1Private:
    """Party one's secret material for signing."""

    x1: Scalar = field(repr=False)
    paillier_priv: DecryptionKey = field(repr=False)
    c_key_randomness: int = field(repr=False)

    @classmethod
    def set_private_key(
        cls, ec_key: EcKeyPair, paillier_key: PaillierKeyPair
    ) -> Party1Private:
        return cls(
            x1=ec_key.secret_share,
            paillier_priv=paillier_key.dk,
            c_key_randomness=paillier_key.randomness,
        )

    def refresh_private_key(self, factor: int) -> RefreshedKey:
        """Multiply the share by ``factor`` under a fresh Paillier key, with proofs."""
        ek_new, dk_new = keypair(PAILLIER_KEY_BITS)
        randomness = ek_new.sample_randomness()
        x1_new = self.x1 * Scalar(factor)
        c_key_new = ek_new.encrypt_with_randomness(x1_new.to_int(), randomness)
        correct_key_proof = NiCorrectKeyProof.prove(dk_new, None)

        paillier_key_pair = PaillierKeyPair(
            ek=ek_new, dk=dk_new, encrypted_share=c_key_new, randomness=randomness
        )
        private_new = Party1Private(
            x1=x1_new, paillier_priv=dk_new, c_key_randomness=randomness
        )
        statement, proof, composite_proof = paillier_key_pair.pdl_proof(private_new)
        return RefreshedKey(
            ek=ek_new,
            encrypted_share=c_key_new,
            private=private_new,
            correct_key_proof=correct_key_proof,
            pdl_statement=statement,
            pdl_proof=proof,
            composite_dlog_proof=composite_proof,
        )

    def to_mta_message_b(self, message_b: MessageB) -> tuple[Scalar, int]:
        """Finish an MtA exchange in which party one's share is the Alice input."""
        return message_b.verify_proofs_get_alpha(self.paillier_priv, self.x1)


@dataclass(frozen=True)
class RefreshedKey:
    """Everything produced when party one refreshes its share."""

    ek: EncryptionKey
    encrypted_share: int
    private: Party1Private
    correct_key_proof: NiCorrectKeyProof
    pdl_statement: PDLwSlackStatement
    pdl_proof: PDLwSlackProof
    composite_dlog_proof: CompositeDLogProof


@dataclass(frozen=True)
class PaillierKeyPair:
    ek: EncryptionKey
    dk: DecryptionKey = field(repr=False)
    encrypted_share: int
    randomness: int = field(repr=False)

    @classmethod
    def generate_keypair_and_encrypted_share(cls, keygen: EcKeyPair) -> PaillierKeyPair:
        """A fresh Paillier key pair and an encryption of the secret share under it."""
        ek, dk = keypair(PAILLIER_KEY_BITS)
        return cls.generate_encrypted_share_from_fixed_paillier_keypair(ek, dk, keygen)

    @classmethod
    def generate_encrypted_share_from_fixed_paillier_keypair(
        cls, ek: EncryptionKey, dk: DecryptionKey, keygen: EcKeyPair
    ) -> PaillierKeyPair:
        randomness = ek.sample_randomness()
        encrypted_share = ek.encrypt_with_randomness(
            keygen.secret_share.to_int(), randomness
        )
        return cls(ek=ek, dk=dk, encrypted_share=encrypted_share, randomness=randomness)

    def generate_ni_proof_correct_key(self) -> NiCorrectKeyProof:
        return NiCorrectKeyProof.prove(self.dk, None)

    def pdl_proof(
        self, party1_private: Party1Private
    ) -> tuple[PDLwSlackStatement, PDLwSlackProof, CompositeDLogProof]:
        """Prove that the encrypted share is the discrete log of the public share."""
        n_tilde, h1, h2, xhi = generate_h1_h2_n_tilde()
        dlog_statement = DLogStatement(n=n_tilde, g=h1, ni=h2)
        composite_dlog_proof = CompositeDLogProof.prove(dlog_statement, xhi)

        generator = Point.generator()
        statement = PDLwSlackStatement(
            ciphertext=self.encrypted_share,
            ek=self.ek,
            Q=generator * party1_private.x1,
            G=generator,
            h1=dlog_statement.g,
            h2=dlog_statement.ni,
            n_tilde=dlog_statement.n,
        )
        witness = PDLwSlackWitness(x=party1_private.x1, r=party1_private.c_key_randomness)
        proof = PDLwSlackProof.prove(witness, statement)
        return statement, proof, composite_dlog_proof


@dataclass(frozen=True)
class EphEcKeyPair:
    public_share: Point
    secret_share: Scalar = field(repr=False)


@dataclass(frozen=True)
class EphKeyGenFirstMsg:
    """Party one's ephemeral share ``k1 * G`` with ``c = k1 * H`` and a DDH proof."""

    d_log_proof: ECDDHProof
    public_share: Point
    c: Point

    @classmethod
    def create(cls) -> tuple[EphKeyGenFirstMsg, EphEcKeyPair]:
        generator = Point.generator()
        secret_share = Scalar.random()
        public_share = generator * secret_share
        h = Point.base_point2()
        c = h * secret_share
        statement = ECDDHStatement(g1=generator, h1=public_share, g2=h, h2=c)
        d_log_proof = ECDDHProof.prove(ECDDHWitness(x=secret_share), statement)
        return (
            cls(d_log_proof=d_log_proof, public_share=public_share, c=c),
            EphEcKeyPair(public_share=public_share, secret_share=secret_share),
        )


@dataclass(frozen=True)
class EphKeyGenSecondMsg:
    @classmethod
    def verify_commitments_and_dlog_proof(
        cls, party_two_first_message, party_two_second_message
    ) -> EphKeyGenSecondMsg:
        """Open party two's ephemeral commitments and check its DDH proof.

        Raises ProofError if a commitment or the proof does not check out.
        """
        witness = party_two_second_message.comm_witness
        proof = witness.d_log_proof
        pk_ok = party_two_first_message.pk_commitment == create_commitment(
            point_to_bigint(witness.public_share), witness.pk_commitment_blind_factor
        )
        zk_ok = party_two_first_message.zk_pok_commitment == create_commitment(
            hash_points(proof.a1, proof.a2), witness.zk_pok_blind_factor
        )
        if not (pk_ok and zk_ok):
            raise ProofError("ephemeral key commitments do not open")
        statement = ECDDHStatement(
            g1=Point.generator(),
            h1=witness.public_share,
            g2=Point.base_point2(),
            h2=witness.c,
        )
        proof.verify(statement)
        return cls()


def _finish_signature(
    party_one_private: Party1Private,
    partial_sig_c3: int,
    ephemeral_local_share: EphEcKeyPair,
    ephemeral_other_public_share: Point,
) -> tuple[Point, int, int]:
    q = Scalar.group_order()
    r = ephemeral_other_public_share * ephemeral_local_share.secret_share
    k1_inv = ephemeral_local_share.secret_share.invert()
    s_tag = party_one_private.paillier_priv.decrypt(partial_sig_c3)
    s_tag_tag = (Scalar(s_tag) * k1_inv).to_int()
    return r, r.x_coord() % q, s_tag_tag


@dataclass(frozen=True)
class Signature:
    s: int
    r: int

    @classmethod
    def compute(
        cls,
        party_one_private: Party1Private,
        partial_sig_c3: int,
        ephemeral_local_share: EphEcKeyPair,
        ephemeral_other_public_share: Point,
    ) -> Signature:
        """Decrypt party two's partial signature and finish it with low ``s``."""
        _, rx, s_tag_tag = _finish_signature(
            party_one_private,
            partial_sig_c3,
            ephemeral_local_share,
            ephemeral_other_public_share,
        )
        q = Scalar.group_order()
        return cls(s=min(s_tag_tag, q - s_tag_tag), r=rx)


@dataclass(frozen=True)
class SignatureRecid:
    s: int
    r: int
    recid: int

    @classmethod
    def compute(
        cls,
        party_one_private: Party1Private,
        partial_sig_c3: int,
        ephemeral_local_share: EphEcKeyPair,
        ephemeral_other_public_share: Point,
    ) -> SignatureRecid:
        """As Signature.compute, with a recovery id for the public key."""
        r, rx, s_tag_tag = _finish_signature(
            party_one_private,
            partial_sig_c3,
            ephemeral_local_share,
            ephemeral_other_public_share,
        )
        q = Scalar.group_order()
        ry = r.y_coord() % q
        recid = ry & 1
        if s_tag_tag > q - s_tag_tag:
            recid ^= 1
        return cls(s=min(s_tag_tag, q - s_tag_tag), r=rx, recid=recid)


def compute_pubkey(
    party_one_private: Party1Private, other_share_public_share: Point
) -> Point:
    """The joint public key ``x1 * x2 * G``."""
    return other_share_public_share * party_one_private.x1


def verify(signature: Signature, pubkey: Point, message: int) -> None:
    """Raise InvalidSig unless ``signature`` is a low-``s`` ECDSA signature of ``message``."""
    q = Scalar.group_order()
    try:
        s_inv = Scalar(signature.s).invert()
    except ZeroDivisionError as exc:
        raise InvalidSig() from exc
    e = Scalar(message % q)
    u1 = Point.generator() * (e * s_inv)
    u2 = pubkey * (Scalar(signature.r) * s_inv)
    try:
        x = (u1 + u2).x_coord()
    except ValueError as exc:
        raise InvalidSig() from exc
    same_r = hmac.compare_digest(int_to_bytes(signature.r), int_to_bytes(x))
    if not (same_r and signature.s < q - signature.s):
        raise InvalidSig()


def generate_h1_h2_n_tilde() -> tuple[int, int, int, int]:
    """A modulus ``N~`` with ``h2 = h1 ** -xhi``; returns ``(N~, h1, h2, xhi)``."""
    ek_tilde, dk_tilde = keypair(PAILLIER_KEY_BITS)
    phi = (dk_tilde.p - 1) * (dk_tilde.q - 1)
    h1 = sample_below(phi)
    xhi = sample_below(1 << 256)
    h1_inv = mod_inv(h1, ek_tilde.n)
    h2 = pow(h1_inv, xhi, ek_tilde.n)
    return ek_tilde.n, h1, h2, xhi
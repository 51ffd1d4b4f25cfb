import dataclasses

import pytest

from mpecdsa.arith import mod_inv, mod_pow, sample_below
from mpecdsa.curve import Point, Scalar
from mpecdsa.errors import ZkPdlWithSlackError
from mpecdsa.paillier import keypair
from mpecdsa.zk_pdl_with_slack import (
    PDLwSlackProof,
    PDLwSlackStatement,
    PDLwSlackWitness,
    commitment_unknown_order,
)
from mpecdsa.zkp_paillier import CompositeDLogProof, DLogStatement

BITS = 1024


@pytest.fixture(scope="module")
def setup():
    ek_tilde, dk_tilde = keypair(BITS)
    n_tilde = ek_tilde.n
    phi = (dk_tilde.p - 1) * (dk_tilde.q - 1)
    while True:
        h1 = sample_below(phi)
        try:
            h1_inv = mod_inv(h1, n_tilde)
        except ValueError:
            continue
        break
    xhi = sample_below(2**256)
    h2 = mod_pow(h1_inv, xhi, n_tilde)
    dlog_statement = DLogStatement(n=n_tilde, g=h1, ni=h2)
    composite = CompositeDLogProof.prove(dlog_statement, xhi)
    ek, _ = keypair(BITS)
    return dlog_statement, composite, ek


def _statement(setup, offset=0):
    dlog_statement, _, ek = setup
    randomness = ek.sample_randomness()
    x = Scalar.random()
    q_point = Point.generator() * x
    c = ek.encrypt_with_randomness(x.to_int() + offset, randomness)
    statement = PDLwSlackStatement(
        ciphertext=c,
        ek=ek,
        Q=q_point,
        G=Point.generator(),
        h1=dlog_statement.g,
        h2=dlog_statement.ni,
        n_tilde=dlog_statement.n,
    )
    return statement, PDLwSlackWitness(x=x, r=randomness)


def test_zk_pdl_with_slack(setup):
    dlog_statement, composite, _ = setup
    statement, witness = _statement(setup)
    proof = PDLwSlackProof.prove(witness, statement)
    composite.verify(dlog_statement)
    proof.verify(statement)
    assert 0 <= proof.s2 < statement.ek.n
    with pytest.raises(ZkPdlWithSlackError):
        dataclasses.replace(proof, s1=proof.s1 + 1).verify(statement)


def test_zk_pdl_with_slack_soundness(setup):
    dlog_statement, composite, _ = setup
    statement, witness = _statement(setup, offset=1)
    proof = PDLwSlackProof.prove(witness, statement)
    composite.verify(dlog_statement)
    with pytest.raises(ZkPdlWithSlackError):
        proof.verify(statement)


def test_rejects_other_public_point(setup):
    statement, witness = _statement(setup)
    proof = PDLwSlackProof.prove(witness, statement)
    other = dataclasses.replace(statement, Q=statement.Q + Point.generator())
    with pytest.raises(ZkPdlWithSlackError):
        proof.verify(other)


def test_rejects_tampered_paillier_commitment(setup):
    statement, witness = _statement(setup)
    proof = PDLwSlackProof.prove(witness, statement)
    with pytest.raises(ZkPdlWithSlackError):
        dataclasses.replace(proof, u2=proof.u2 + 1).verify(statement)


def test_rejects_tampered_ring_pedersen_commitment(setup):
    statement, witness = _statement(setup)
    proof = PDLwSlackProof.prove(witness, statement)
    with pytest.raises(ZkPdlWithSlackError):
        dataclasses.replace(proof, s3=proof.s3 + 1).verify(statement)


def test_commitment_negative_exponent_inverts(setup):
    dlog_statement, _, _ = setup
    n = dlog_statement.n
    h1, h2 = dlog_statement.g, dlog_statement.ni
    x, r = 12345, 678
    negative = commitment_unknown_order(h1, h2, n, x, -r)
    h2_r = commitment_unknown_order(1, h2, n, 0, r)
    assert negative * h2_r % n == pow(h1, x, n)
    assert commitment_unknown_order(h1, h2, n, x, r) == pow(h1, x, n) * pow(h2, r, n) % n


def test_commitment_negative_exponent_needs_inverse():
    with pytest.raises(ValueError):
        commitment_unknown_order(2, 6, 9, 1, -1)
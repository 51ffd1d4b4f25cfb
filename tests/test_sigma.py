import dataclasses

import pytest

from mpecdsa.curve import Point, Scalar
from mpecdsa.errors import ProofError
from mpecdsa.sigma import DLogProof, ECDDHProof, ECDDHStatement, ECDDHWitness


def _ddh_statement(x):
    g1 = Point.generator()
    g2 = Point.base_point2()
    return ECDDHStatement(g1=g1, h1=g1 * x, g2=g2, h2=g2 * x)


def test_dlog_proof_binds_public_key_and_verifies():
    secret = Scalar.random()
    proof = DLogProof.prove(secret)
    assert proof.pk == Point.generator() * secret
    assert proof.verify() is None


def test_dlog_proof_with_tampered_response_fails():
    proof = DLogProof.prove(Scalar.random())
    forged = dataclasses.replace(proof, challenge_response=proof.challenge_response + Scalar(1))
    with pytest.raises(ProofError):
        forged.verify()


def test_dlog_proof_for_other_key_fails():
    proof = DLogProof.prove(Scalar.random())
    forged = dataclasses.replace(proof, pk=Point.generator() * Scalar.random())
    with pytest.raises(ProofError):
        forged.verify()


def test_ecddh_proof_verifies():
    x = Scalar.random()
    statement = _ddh_statement(x)
    proof = ECDDHProof.prove(ECDDHWitness(x), statement)
    assert statement.h2 == Point.base_point2() * x
    assert proof.verify(statement) is None


def test_ecddh_proof_rejects_unequal_logs():
    x = Scalar.random()
    statement = _ddh_statement(x)
    bad = dataclasses.replace(statement, h2=Point.base_point2() * (x + Scalar(1)))
    proof = ECDDHProof.prove(ECDDHWitness(x), bad)
    with pytest.raises(ProofError):
        proof.verify(bad)


def test_ecddh_proof_does_not_transfer_to_another_statement():
    x = Scalar.random()
    proof = ECDDHProof.prove(ECDDHWitness(x), _ddh_statement(x))
    with pytest.raises(ProofError):
        proof.verify(_ddh_statement(Scalar.random()))
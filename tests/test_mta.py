import dataclasses
import math

import pytest

from mpecdsa.arith import sample_below
from mpecdsa.curve import Point, Scalar
from mpecdsa.errors import InvalidKey
from mpecdsa.mta import MessageA, MessageB
from mpecdsa.paillier import keypair
from mpecdsa.zkp_paillier import DLogStatement

KEY_BITS = 1024


@pytest.fixture(scope="module")
def setup():
    ek_tilde, dk_tilde = keypair(KEY_BITS)
    phi = (dk_tilde.p - 1) * (dk_tilde.q - 1)
    h1 = sample_below(ek_tilde.n)
    while True:
        xhi = sample_below(phi)
        if math.gcd(xhi, phi) == 1:
            break
    h2 = pow(h1, xhi, ek_tilde.n)
    ek, dk = keypair(KEY_BITS)
    return DLogStatement(n=ek_tilde.n, g=h1, ni=h2), ek, dk


def test_mta(setup):
    dlog_statement, ek_alice, dk_alice = setup
    alice_input = Scalar.random()
    bob_input = Scalar.random()
    m_a, _ = MessageA.a(alice_input, ek_alice, [dlog_statement])
    m_b, beta, _, _ = MessageB.b(bob_input, ek_alice, m_a, [dlog_statement])
    alpha, _ = m_b.verify_proofs_get_alpha(dk_alice, alice_input)
    assert alpha + beta == alice_input * bob_input


def test_mta_without_range_proofs(setup):
    _, ek, dk = setup
    a, b = Scalar.random(), Scalar.random()
    m_a, _ = MessageA.a(a, ek, [])
    assert m_a.range_proofs == []
    m_b, beta, _, _ = MessageB.b(b, ek, m_a, [])
    alpha, raw = m_b.verify_proofs_get_alpha(dk, a)
    assert alpha + beta == a * b
    assert Scalar(raw) == alpha


def test_beta_is_negated_beta_tag(setup):
    _, ek, _ = setup
    m_a, _ = MessageA.a(Scalar.random(), ek)
    _, beta, _, beta_tag = MessageB.b(Scalar.random(), ek, m_a)
    assert beta + Scalar(beta_tag) == Scalar.zero()


def test_message_a_randomness_reproduces_ciphertext(setup):
    _, ek, dk = setup
    a = Scalar.random()
    m_a, randomness = MessageA.a(a, ek)
    again = MessageA.a_with_predefined_randomness(a, ek, randomness)
    assert again.c == m_a.c
    assert dk.decrypt(m_a.c) == a.to_int()


def test_message_b_predefined_randomness_is_deterministic(setup):
    _, ek, _ = setup
    m_a, _ = MessageA.a(Scalar.random(), ek)
    b = Scalar.random()
    first, beta1 = MessageB.b_with_predefined_randomness(b, ek, m_a, 12345, 678, [])
    second, beta2 = MessageB.b_with_predefined_randomness(b, ek, m_a, 12345, 678, [])
    assert first.c == second.c
    assert beta1 == beta2 == -Scalar(678)


def test_proof_count_mismatch_is_rejected(setup):
    dlog_statement, ek, _ = setup
    m_a, _ = MessageA.a(Scalar.random(), ek, [dlog_statement])
    with pytest.raises(InvalidKey):
        MessageB.b(Scalar.random(), ek, m_a, [])


def test_range_proof_for_other_ciphertext_is_rejected(setup):
    dlog_statement, ek, _ = setup
    m_a, _ = MessageA.a(Scalar.random(), ek, [dlog_statement])
    forged = dataclasses.replace(m_a, c=ek.encrypt(5))
    with pytest.raises(InvalidKey):
        MessageB.b(Scalar.random(), ek, forged, [dlog_statement])


def test_wrong_alice_input_is_rejected(setup):
    _, ek, dk = setup
    a = Scalar.random()
    m_a, _ = MessageA.a(a, ek)
    m_b, _, _, _ = MessageB.b(Scalar.random(), ek, m_a)
    with pytest.raises(InvalidKey):
        m_b.verify_proofs_get_alpha(dk, a + Scalar(1))


def test_tampered_ciphertext_is_rejected(setup):
    _, ek, dk = setup
    a = Scalar.random()
    m_a, _ = MessageA.a(a, ek)
    m_b, _, _, _ = MessageB.b(Scalar.random(), ek, m_a)
    tampered = dataclasses.replace(m_b, c=ek.add(m_b.c, ek.encrypt(1)))
    with pytest.raises(InvalidKey):
        tampered.verify_proofs_get_alpha(dk, a)


def test_verify_b_against_public(setup):
    _, ek, _ = setup
    b = Scalar.random()
    m_a, _ = MessageA.a(Scalar.random(), ek)
    m_b, _, _, _ = MessageB.b(b, ek, m_a)
    g = Point.generator()
    assert MessageB.verify_b_against_public(g * b, m_b.b_proof.pk) is True
    assert MessageB.verify_b_against_public(g * (b + Scalar(1)), m_b.b_proof.pk) is False
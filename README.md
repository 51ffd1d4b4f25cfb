# mpecdsa

Two-party ECDSA signing over secp256k1 after Lindell (2017), in pure Python,
together with the building blocks it relies on: Paillier encryption,
Schnorr and EC-DDH sigma proofs, proofs about Paillier keys and ciphertexts,
and multiplicative-to-additive (MtA) share conversion with range proofs.

The package has no dependencies outside the standard library.

## Modules

- `mpecdsa.arith`: big-integer helpers: `int_to_bytes`, `int_from_bytes`,
  `mod_inv`, `mod_pow`, random sampling (`sample_bits`, `sample_below`,
  `sample_range`, `sample_coprime`) and primes (`is_probable_prime`,
  `random_prime`).
- `mpecdsa.curve`: secp256k1 `Scalar` (arithmetic modulo the group order)
  and `Point` (addition, negation, scalar multiplication, SEC1 encoding with
  `to_bytes` / `from_bytes`, `generator()` and a second generator
  `base_point2()`).
- `mpecdsa.hashing`: SHA-256 over integers (`hash_bigints`) and points
  (`hash_points`), `point_to_bigint`, and the hash commitment
  `create_commitment`.
- `mpecdsa.paillier`: `EncryptionKey`, `DecryptionKey` and `keypair(bits)`
  (2048 bits by default), with homomorphic `add` and `mul`.
- `mpecdsa.sigma`: `DLogProof` (knowledge of a discrete log) and `ECDDHProof`
  with `ECDDHStatement` and `ECDDHWitness` (equality of two discrete logs).
- `mpecdsa.zkp_paillier`: `DLogStatement`, `CompositeDLogProof`,
  `NiCorrectKeyProof` (a Paillier modulus is well formed) and `RangeProofNi`
  (a ciphertext holds a value below a third of the range).
- `mpecdsa.zk_pdl_with_slack`: `PDLwSlackProof` over a `PDLwSlackStatement`
  and `PDLwSlackWitness`: a Paillier ciphertext encrypts the discrete log of
  a point, with slack in the range. Also `commitment_unknown_order`.
- `mpecdsa.zk_pdl`: the interactive PDL proof, as the functions
  `verifier_message1`, `prover_message1`, `verifier_message2`,
  `prover_message2` and `verifier_finalize` and their message and state
  classes.
- `mpecdsa.range_proofs`: `AliceProof`, `BobProof`, `BobProofExt` and
  `BobCheck`, the range proofs used in MtA, and `sample_from_paillier_key`.
- `mpecdsa.mta`: `MessageA` and `MessageB`, the two messages of MtA.
- `mpecdsa.lindell_2017.party_one` and `mpecdsa.lindell_2017.party_two`:
  the two parties of the signing protocol.
- `mpecdsa.errors`: the exceptions, all subclasses of `MpcError`:
  `InvalidKey`, `InvalidSig`, `ProofError`, `IncorrectProof`, `ZkPdlError`,
  `ZkPdlWithSlackError` and `PartyTwoError`.

Verification functions raise one of these exceptions on failure and return
`None` on success. The exceptions are `AliceProof.verify`, `BobProof.verify`,
`BobProofExt.verify` and `MessageB.verify_b_against_public`, which return a
`bool`.

## Installation

```
pip install .
```

## Signing with two parties

```python
from mpecdsa.lindell_2017 import party_one, party_two

# Key generation, run once.
p1_first, comm_witness, p1_keys = party_one.KeyGenFirstMsg.create_commitments()
p2_first, p2_keys = party_two.KeyGenFirstMsg.create()
p1_second = party_one.KeyGenSecondMsg.verify_and_decommit(comm_witness, p2_first.d_log_proof)
party_two.KeyGenSecondMsg.verify_commitments_and_dlog_proof(p1_first, p1_second)

paillier_pair = party_one.PaillierKeyPair.generate_keypair_and_encrypted_share(p1_keys)
p1_private = party_one.Party1Private.set_private_key(p1_keys, paillier_pair)
p2_private = party_two.Party2Private.set_private_key(p2_keys)

# Party two checks party one's Paillier key and encrypted share.
p2_paillier = party_two.PaillierPublic(
    ek=paillier_pair.ek, encrypted_secret_share=paillier_pair.encrypted_share
)
party_two.PaillierPublic.verify_ni_proof_correct_key(
    paillier_pair.generate_ni_proof_correct_key(), p2_paillier.ek
)
statement, proof, composite_proof = paillier_pair.pdl_proof(p1_private)
p2_paillier.pdl_verify(composite_proof, statement, proof, p1_second.comm_witness.public_share)

# Ephemeral keys, once per signature.
eph2_first, eph_witness, eph2_keys = party_two.EphKeyGenFirstMsg.create_commitments()
eph1_first, eph1_keys = party_one.EphKeyGenFirstMsg.create()
eph2_second = party_two.EphKeyGenSecondMsg.verify_and_decommit(eph_witness, eph1_first)
party_one.EphKeyGenSecondMsg.verify_commitments_and_dlog_proof(eph2_first, eph2_second)

message = 1234
partial = party_two.PartialSig.compute(
    paillier_pair.ek,
    paillier_pair.encrypted_share,
    p2_private,
    eph2_keys,
    eph1_first.public_share,
    message,
)
signature = party_one.Signature.compute(
    p1_private, partial.c3, eph1_keys, eph2_second.comm_witness.public_share
)

pubkey = party_one.compute_pubkey(p1_private, p2_first.public_share)
party_one.verify(signature, pubkey, message)  # raises InvalidSig on failure
```

`Signature.compute` always returns the low-`s` form, and `verify` rejects a
signature whose `s` is not low. `SignatureRecid.compute` takes the same
arguments and also returns a recovery id.

Party one can refresh its share with `Party1Private.refresh_private_key(factor)`.
This returns a `RefreshedKey` that holds a new Paillier key, the new encrypted
share, the new private state and the proofs for party two. Party two applies
the matching factor with `Party2Private.update_private_key(factor)`.

`PaillierPublic.verify_ni_proof_correct_key` raises `IncorrectProof` for a
modulus shorter than 2047 bits.

## MtA share conversion

```python
from mpecdsa.curve import Scalar
from mpecdsa.mta import MessageA, MessageB
from mpecdsa.paillier import keypair

ek, dk = keypair()
a, b = Scalar.random(), Scalar.random()

m_a, _ = MessageA.a(a, ek)                 # Alice
m_b, beta, _, _ = MessageB.b(b, ek, m_a)   # Bob
alpha, _ = m_b.verify_proofs_get_alpha(dk, a)  # Alice

assert alpha + beta == a * b
```

Pass a list of `DLogStatement`s, one per verifier, to `MessageA.a` to attach
`AliceProof` range proofs. Pass the same list to `MessageB.b`, which raises
`InvalidKey` if the number of proofs does not match or any proof fails. To
build such a statement, take `n_tilde, h1, h2, _` from
`party_one.generate_h1_h2_n_tilde()` and use `DLogStatement(n=n_tilde, g=h1, ni=h2)`.

The two parties of the signing protocol can also feed their shares into MtA,
with `Party2Private.to_mta_message_b` and `Party1Private.to_mta_message_b`.

## What the package does not do

- It does not send anything. The parties' messages are Python objects, and
  the caller carries them between the two sides. There is no wire format
  and no networking.
- It does not hash messages. `PartialSig.compute` and `verify` take the
  message as an integer, so hash it yourself before signing.
- `generate_h1_h2_n_tilde` builds its modulus from ordinary random primes,
  not safe primes.
- It is written for clarity, not speed. All arithmetic is pure Python and
  takes no care against timing side channels, apart from a constant-time
  comparison of `r` in `verify`.

## Running the tests

```
pip install .[test]
pytest
```

Paillier key generation uses 2048-bit moduli, so the full test run takes a while.
"""Two-party ECDSA over secp256k1 with Paillier encryption, zero-knowledge proofs and MtA."""

__version__ = "0.1.0"
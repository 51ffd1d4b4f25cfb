"""Exceptions raised by the protocols and proofs."""

from __future__ import annotations


class MpcError(Exception):
    """Base class for every protocol failure."""

    default_message = "multi-party ECDSA error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidKey(MpcError):
    """A key, a ciphertext or a proof bound to a key did not check out."""

    default_message = "invalid key"


class InvalidSig(MpcError):
    """A signature failed verification."""

    default_message = "invalid signature"


class ProofError(MpcError):
    """A zero-knowledge proof or a commitment opening was rejected."""

    default_message = "proof verification failed"


class IncorrectProof(MpcError):
    """A proof about a Paillier key or ciphertext was rejected."""

    default_message = "incorrect proof"


class ZkPdlError(MpcError):
    """A step of the interactive PDL proof failed."""

    default_message = "zk pdl failed"


class ZkPdlWithSlackError(MpcError):
    """The PDL proof with slack was rejected."""

    default_message = "zk pdl with slack verification failed"


class PartyTwoError(MpcError):
    """Party two rejected party one's PDL proof."""

    default_message = "party two pdl verify failed (lindell 2017)"
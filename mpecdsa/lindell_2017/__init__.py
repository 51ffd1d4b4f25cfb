"""The two parties of Lindell's 2017 two-party ECDSA key generation and signing."""

__all__ = ["party_one", "party_two"]
"""SHA-256 based hashing of integers and points, and hash commitments."""

from __future__ import annotations

import hashlib

from .arith import int_from_bytes, int_to_bytes
from .curve import Point


def hash_bigints(*args: int) -> int:
    """SHA-256 over the minimal big-endian encodings of the arguments."""
    digest = hashlib.sha256()
    for value in args:
        digest.update(int_to_bytes(value))
    return int_from_bytes(digest.digest())


def hash_points(*args: Point) -> int:
    """SHA-256 over the uncompressed encodings of the points."""
    digest = hashlib.sha256()
    for point in args:
        digest.update(point.to_bytes(False))
    return int_from_bytes(digest.digest())


def point_to_bigint(point: Point) -> int:
    """The compressed encoding of a point read as an integer."""
    return int_from_bytes(point.to_bytes(True))


def create_commitment(message: int, blind_factor: int) -> int:
    """Hash commitment to ``message`` under ``blind_factor``."""
    return hash_bigints(message, blind_factor)
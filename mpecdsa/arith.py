"""Big-integer helpers: encoding, modular arithmetic, sampling and primes."""

from __future__ import annotations

import math
import secrets


def _small_primes(limit: int) -> tuple[int, ...]:
    sieve = bytearray([1]) * limit
    sieve[0:2] = b"\x00\x00"
    for candidate in range(2, math.isqrt(limit) + 1):
        if sieve[candidate]:
            sieve[candidate * candidate :: candidate] = bytearray(
                len(range(candidate * candidate, limit, candidate))
            )
    return tuple(index for index, flag in enumerate(sieve) if flag)


_SMALL_PRIMES = _small_primes(1000)


def int_to_bytes(value: int) -> bytes:
    """Minimal big-endian encoding of the magnitude of ``value``; zero is empty."""
    magnitude = abs(value)
    return magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "big")


def int_from_bytes(data: bytes) -> int:
    """Read an unsigned big-endian integer."""
    return int.from_bytes(bytes(data), "big")


def mod_inv(value: int, modulus: int) -> int:
    """Inverse of ``value`` modulo ``modulus``; ValueError if there is none."""
    try:
        return pow(value, -1, modulus)
    except ValueError as exc:
        raise ValueError(f"value has no inverse modulo {modulus}") from exc


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """``base ** exponent % modulus``; a negative exponent uses the inverse."""
    try:
        return pow(base, exponent, modulus)
    except ValueError as exc:
        raise ValueError(f"base has no inverse modulo {modulus}") from exc


def sample_bits(bits: int) -> int:
    """A uniformly random integer below ``2 ** bits``."""
    if bits < 0:
        raise ValueError("bit count must not be negative")
    return secrets.randbits(bits)


def sample_below(upper: int) -> int:
    """A uniformly random integer in ``[0, upper)``."""
    if upper <= 0:
        raise ValueError("upper bound must be positive")
    return secrets.randbelow(upper)


def sample_range(low: int, high: int) -> int:
    """A uniformly random integer in ``[low, high)``."""
    if high <= low:
        raise ValueError("empty sampling range")
    return low + secrets.randbelow(high - low)


def sample_coprime(modulus: int) -> int:
    """A random element of the multiplicative group modulo ``modulus``."""
    if modulus < 2:
        raise ValueError("modulus must be at least 2")
    while True:
        candidate = sample_below(modulus)
        if math.gcd(candidate, modulus) == 1:
            return candidate


def is_probable_prime(n: int, rounds: int = 40) -> bool:
    """Miller-Rabin test preceded by trial division."""
    if n < 2:
        return False
    for prime in _SMALL_PRIMES:
        if n % prime == 0:
            return n == prime
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for _ in range(rounds):
        x = pow(sample_range(2, n - 1), d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def random_prime(bits: int) -> int:
    """A random prime of exactly ``bits`` bits with its two top bits set."""
    if bits < 2:
        raise ValueError("a prime needs at least 2 bits")
    top = (1 << (bits - 1)) | (1 << (bits - 2))
    while True:
        candidate = secrets.randbits(bits) | top | 1
        if is_probable_prime(candidate):
            return candidate
"""The secp256k1 curve: scalars modulo the group order and curve points."""

from __future__ import annotations

import hashlib
from functools import lru_cache

from .arith import sample_below

_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8
_B = 7

_J_INF = (1, 1, 0)


def _on_curve(x: int, y: int) -> bool:
    return 0 <= x < _P and 0 <= y < _P and (y * y - x * x * x - _B) % _P == 0


def _sqrt_mod_p(value: int) -> int | None:
    root = pow(value, (_P + 1) // 4, _P)
    return root if root * root % _P == value % _P else None


def _jdouble(point: tuple[int, int, int]) -> tuple[int, int, int]:
    x, y, z = point
    if z == 0 or y == 0:
        return _J_INF
    ysq = y * y % _P
    s = 4 * x * ysq % _P
    m = 3 * x * x % _P
    nx = (m * m - 2 * s) % _P
    ny = (m * (s - nx) - 8 * ysq * ysq) % _P
    nz = 2 * y * z % _P
    return nx, ny, nz


def _jadd(a: tuple[int, int, int], b: tuple[int, int, int]) -> tuple[int, int, int]:
    x1, y1, z1 = a
    x2, y2, z2 = b
    if z1 == 0:
        return b
    if z2 == 0:
        return a
    z1sq = z1 * z1 % _P
    z2sq = z2 * z2 % _P
    u1 = x1 * z2sq % _P
    u2 = x2 * z1sq % _P
    s1 = y1 * z2sq * z2 % _P
    s2 = y2 * z1sq * z1 % _P
    if u1 == u2:
        return _jdouble(a) if s1 == s2 else _J_INF
    h = (u2 - u1) % _P
    r = (s2 - s1) % _P
    hsq = h * h % _P
    hcu = hsq * h % _P
    u1hsq = u1 * hsq % _P
    nx = (r * r - hcu - 2 * u1hsq) % _P
    ny = (r * (u1hsq - nx) - s1 * hcu) % _P
    nz = h * z1 * z2 % _P
    return nx, ny, nz


class Scalar:
    """An element of the scalar field of secp256k1."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        self._value = int(value) % _N

    @classmethod
    def random(cls) -> Scalar:
        """A uniformly random non-zero scalar."""
        return cls(sample_below(_N - 1) + 1)

    @classmethod
    def zero(cls) -> Scalar:
        return cls(0)

    @classmethod
    def group_order(cls) -> int:
        return _N

    def invert(self) -> Scalar:
        if self._value == 0:
            raise ZeroDivisionError("the zero scalar has no inverse")
        return Scalar(pow(self._value, -1, _N))

    def to_int(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __add__(self, other: object) -> Scalar:
        if not isinstance(other, Scalar):
            return NotImplemented
        return Scalar(self._value + other._value)

    def __sub__(self, other: object) -> Scalar:
        if not isinstance(other, Scalar):
            return NotImplemented
        return Scalar(self._value - other._value)

    def __mul__(self, other: object) -> Scalar:
        if not isinstance(other, Scalar):
            return NotImplemented
        return Scalar(self._value * other._value)

    def __neg__(self) -> Scalar:
        return Scalar(-self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(("Scalar", self._value))

    def __repr__(self) -> str:
        return f"Scalar({self._value:#x})"


class Point:
    """A point of secp256k1 in affine coordinates, or the point at infinity."""

    __slots__ = ("_x", "_y")

    def __init__(self, x: int | None = None, y: int | None = None) -> None:
        if x is None and y is None:
            self._x = self._y = None
            return
        if x is None or y is None or not _on_curve(x, y):
            raise ValueError("point is not on the curve")
        self._x, self._y = x, y

    @classmethod
    def _make(cls, x: int | None, y: int | None) -> Point:
        point = object.__new__(cls)
        point._x, point._y = x, y
        return point

    @classmethod
    def _from_jacobian(cls, point: tuple[int, int, int]) -> Point:
        x, y, z = point
        if z == 0:
            return cls._make(None, None)
        zinv = pow(z, -1, _P)
        zinv2 = zinv * zinv % _P
        return cls._make(x * zinv2 % _P, y * zinv2 * zinv % _P)

    def _jacobian(self) -> tuple[int, int, int]:
        if self._x is None:
            return _J_INF
        return self._x, self._y, 1

    @classmethod
    def generator(cls) -> Point:
        return cls._make(_GX, _GY)

    @classmethod
    def base_point2(cls) -> Point:
        """A second generator whose discrete log relative to G is unknown."""
        return _second_generator()

    @classmethod
    def zero(cls) -> Point:
        return cls._make(None, None)

    @classmethod
    def from_bytes(cls, data: bytes) -> Point:
        data = bytes(data)
        if data in (bytes(33), bytes(65)):
            return cls.zero()
        if len(data) == 33 and data[0] in (2, 3):
            x = int.from_bytes(data[1:], "big")
            if x >= _P:
                raise ValueError("x coordinate out of range")
            y = _sqrt_mod_p((x * x * x + _B) % _P)
            if y is None:
                raise ValueError("point is not on the curve")
            if (y & 1) != (data[0] & 1):
                y = _P - y
            return cls._make(x, y)
        if len(data) == 65 and data[0] == 4:
            return cls(int.from_bytes(data[1:33], "big"), int.from_bytes(data[33:], "big"))
        raise ValueError("malformed point encoding")

    def is_zero(self) -> bool:
        return self._x is None

    def x_coord(self) -> int:
        if self._x is None:
            raise ValueError("the point at infinity has no coordinates")
        return self._x

    def y_coord(self) -> int:
        if self._y is None:
            raise ValueError("the point at infinity has no coordinates")
        return self._y

    def to_bytes(self, compressed: bool = True) -> bytes:
        """SEC1 encoding; the point at infinity encodes as all zero bytes."""
        if self._x is None:
            return bytes(33 if compressed else 65)
        x_bytes = self._x.to_bytes(32, "big")
        if compressed:
            return bytes([2 + (self._y & 1)]) + x_bytes
        return b"\x04" + x_bytes + self._y.to_bytes(32, "big")

    def __add__(self, other: object) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point._from_jacobian(_jadd(self._jacobian(), other._jacobian()))

    def __neg__(self) -> Point:
        if self._x is None:
            return self
        return Point._make(self._x, (_P - self._y) % _P)

    def __sub__(self, other: object) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return self + (-other)

    def __mul__(self, scalar: object) -> Point:
        if isinstance(scalar, Scalar):
            k = scalar.to_int()
        elif isinstance(scalar, int) and not isinstance(scalar, bool):
            k = scalar % _N
        else:
            return NotImplemented
        if k == 0 or self._x is None:
            return Point.zero()
        result = _J_INF
        addend = self._jacobian()
        for bit in bin(k)[2:]:
            result = _jdouble(result)
            if bit == "1":
                result = _jadd(result, addend)
        return Point._from_jacobian(result)

    def __rmul__(self, scalar: object) -> Point:
        return self.__mul__(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self._x == other._x and self._y == other._y

    def __hash__(self) -> int:
        return hash(("Point", self._x, self._y))

    def __repr__(self) -> str:
        if self._x is None:
            return "Point(infinity)"
        return f"Point({self._x:#x}, {self._y:#x})"


@lru_cache(maxsize=None)
def _second_generator() -> Point:
    seed = Point.generator().to_bytes(True)
    counter = 0
    while True:
        digest = hashlib.sha256(seed + counter.to_bytes(4, "big")).digest()
        x = int.from_bytes(digest, "big") % _P
        y = _sqrt_mod_p((x * x * x + _B) % _P)
        if y is not None:
            if y & 1:
                y = _P - y
            return Point._make(x, y)
        counter += 1
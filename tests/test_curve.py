import pytest

from mpecdsa.curve import Point, Scalar


def test_generator_x_coordinate():
    assert Point.generator().x_coord() == 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798


def test_order_minus_one_times_generator_is_negation():
    g = Point.generator()
    q = Scalar.group_order()
    assert g * (q - 1) == -g
    assert (g * Scalar(q - 1) + g).is_zero()


def test_scalar_reduces_modulo_order():
    assert Scalar(Scalar.group_order() + 5) == Scalar(5)
    assert Scalar(-1) == Scalar(Scalar.group_order() - 1)


def test_scalar_arithmetic_invariants():
    a, b = Scalar.random(), Scalar.random()
    assert a + b - b == a
    assert a + (-a) == Scalar.zero()
    assert a * a.invert() == Scalar(1)
    assert (a * b).to_int() == a.to_int() * b.to_int() % Scalar.group_order()


def test_zero_scalar_cannot_be_inverted():
    with pytest.raises(ZeroDivisionError):
        Scalar.zero().invert()


def test_scalar_multiplication_is_linear():
    g = Point.generator()
    a, b = Scalar.random(), Scalar.random()
    assert g * (a + b) == g * a + g * b
    assert a * g == g * a
    assert g * 2 == g + g


def test_point_negation_and_subtraction():
    p = Point.generator() * Scalar.random()
    assert (p + (-p)).is_zero()
    assert (p - p).is_zero()
    assert p + Point.zero() == p


@pytest.mark.parametrize("compressed", [True, False])
def test_encoding_round_trip(compressed):
    p = Point.generator() * Scalar.random()
    assert Point.from_bytes(p.to_bytes(compressed)) == p


def test_encoding_lengths_and_prefixes():
    p = Point.generator() * Scalar.random()
    compressed = p.to_bytes(True)
    uncompressed = p.to_bytes(False)
    assert len(compressed) == 33 and compressed[0] in (2, 3)
    assert len(uncompressed) == 65 and uncompressed[0] == 4
    assert compressed[1:] == uncompressed[1:33]


def test_zero_point_encoding():
    zero = Point.zero()
    assert zero.to_bytes(True) == bytes(33)
    assert Point.from_bytes(bytes(33)).is_zero()
    with pytest.raises(ValueError):
        zero.x_coord()


def test_malformed_encodings_are_rejected():
    with pytest.raises(ValueError):
        Point.from_bytes(b"\x05" + bytes(32))
    with pytest.raises(ValueError):
        Point.from_bytes(b"\x04" + (1).to_bytes(32, "big") + (1).to_bytes(32, "big"))


def test_off_curve_point_is_rejected():
    with pytest.raises(ValueError):
        Point(1, 1)


def test_base_point2_is_a_distinct_curve_point():
    h = Point.base_point2()
    assert h != Point.generator()
    assert Point(h.x_coord(), h.y_coord()) == h
    assert h == Point.base_point2()
    assert (h * (Scalar.group_order() - 1) + h).is_zero()


def test_points_hash_consistently():
    s = Scalar.random()
    assert len({Point.generator() * s, Point.generator() * s}) == 1
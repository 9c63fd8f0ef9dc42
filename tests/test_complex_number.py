from decimal import Decimal

import numpy as np
import pytest

from zenfractal.complex_number import (
    Complex, abs_, abs_sq, add, mul, resolve_scalar_type, scale, sub,
)


def test_arithmetic():
    a = Complex(1.0, 2.0)
    b = Complex(3.0, 4.0)
    assert add(a, b) == Complex(4.0, 6.0)
    assert sub(a, b) == Complex(-2.0, -2.0)
    assert mul(a, b) == Complex(-5.0, 10.0)
    assert a + b == add(a, b)
    assert a - b == sub(a, b)
    assert a * b == mul(a, b)


def test_square_of_one_plus_i():
    z = Complex(1.0, 1.0)
    assert z * z == Complex(0.0, 2.0)


def test_scalar_multiplication():
    z = Complex(1.0, -2.0)
    assert scale(z, 2.0) == Complex(2.0, -4.0)
    assert mul(z, 2.0) == Complex(2.0, -4.0)
    assert z * 2.0 == Complex(2.0, -4.0)
    assert 2.0 * z == Complex(2.0, -4.0)


def test_magnitude():
    z = Complex(3.0, 4.0)
    assert abs_sq(z) == 25.0
    assert abs_(z) == 5.0
    assert abs(z) == 5.0


def test_equality():
    assert Complex(1.0, 2.0) == Complex(1.0, 2.0)
    assert Complex(1.0, 2.0) != Complex(2.0, 1.0)
    assert Complex(1.0, 2.0) != (1.0, 2.0)
    assert hash(Complex(1.0, 2.0)) == hash(Complex(1.0, 2.0))


def test_default_is_zero():
    assert Complex() == Complex(0.0, 0.0)
    assert Complex.zero(np.float32) == Complex(0.0, 0.0)


def test_immutable():
    z = Complex(1.0, 1.0)
    with pytest.raises(AttributeError):
        z.real = 2.0


def test_compound_assignment_rebinds():
    a = Complex(1.0, 1.0)
    b = a
    a += Complex(1.0, 0.0)
    a *= Complex(0.0, 1.0)
    assert a == Complex(-1.0, 2.0)
    assert b == Complex(1.0, 1.0)


def test_float32_stays_float32():
    z = Complex(np.float32(1.5), np.float32(-0.5))
    w = z * z + z
    assert type(w.real) is np.float32
    assert type(w.imag) is np.float32


def test_decimal_scalars():
    z = Complex(Decimal(3), Decimal(4))
    assert abs_sq(z) == Decimal(25)
    assert abs_(z) == Decimal(5)
    w = Complex(Decimal('1.5'), Decimal(0)) * Complex(Decimal('1.5'), Decimal(0))
    assert w == Complex(Decimal('2.25'), Decimal(0))


def test_builtin_conversion():
    z = Complex.from_builtin(1 - 2j, np.float64)
    assert type(z.real) is np.float64
    assert z == Complex(1.0, -2.0)
    assert z.to_builtin() == 1 - 2j
    assert Complex.from_builtin(3).imag == 0.0


def test_str():
    assert str(Complex(1.0, 2.0)) == "(1.0, 2.0i)"


def test_resolve_scalar_type():
    assert resolve_scalar_type('float32') is np.float32
    assert resolve_scalar_type('decimal') is Decimal
    assert resolve_scalar_type(np.float64) is np.float64
    with pytest.raises(ValueError):
        resolve_scalar_type('float16')

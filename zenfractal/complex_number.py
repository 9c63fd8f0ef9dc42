"""
Complex number value type, generic over the scalar type.

The same arithmetic runs on Python floats, numpy float32/float64/longdouble
and decimal.Decimal, so one expression can be evaluated at several
precisions. The scalar only needs + - * == and numpy.sqrt support.
"""

from decimal import Decimal

import numpy as np


# Named scalar types, selectable from settings and the command line
SCALAR_TYPES = {
    'float': float,
    'float32': np.float32,
    'float64': np.float64,
    'float128': np.longdouble,
    'decimal': Decimal,
}


def resolve_scalar_type(scalar_type):
    """
    Turn a scalar type name (or the type itself) into a type.

    Raises:
        ValueError if the name is unknown
    """
    if isinstance(scalar_type, str):
        try:
            return SCALAR_TYPES[scalar_type]
        except KeyError:
            raise ValueError(
                f"Unknown scalar type {scalar_type!r}, expected one of {sorted(SCALAR_TYPES)}"
            ) from None
    return scalar_type


class Complex:
    """
    Immutable complex value with `real` and `imag` parts.

    Arithmetic always builds a new instance. `z += w` rebinds z to
    `add(z, w)`; nothing is modified in place.
    """

    __slots__ = ('real', 'imag')

    def __init__(self, real=0.0, imag=0.0):
        object.__setattr__(self, 'real', real)
        object.__setattr__(self, 'imag', imag)

    def __setattr__(self, name, value):
        raise AttributeError("Complex values are immutable")

    def __delattr__(self, name):
        raise AttributeError("Complex values are immutable")

    @classmethod
    def zero(cls, scalar_type=float):
        """Zero value expressed in the given scalar type."""
        scalar_type = resolve_scalar_type(scalar_type)
        return cls(scalar_type(0), scalar_type(0))

    @classmethod
    def from_builtin(cls, value, scalar_type=float):
        """Build from a Python complex (or real number)."""
        scalar_type = resolve_scalar_type(scalar_type)
        value = complex(value)
        return cls(scalar_type(value.real), scalar_type(value.imag))

    def to_builtin(self):
        return complex(float(self.real), float(self.imag))

    def astype(self, scalar_type):
        """Convert both parts to another scalar type."""
        scalar_type = resolve_scalar_type(scalar_type)
        return Complex(scalar_type(self.real), scalar_type(self.imag))

    def __add__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return add(self, other)

    def __sub__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return sub(self, other)

    def __mul__(self, other):
        return mul(self, other)

    def __rmul__(self, other):
        return scale(self, other)

    def __eq__(self, other):
        if not isinstance(other, Complex):
            return NotImplemented
        return self.real == other.real and self.imag == other.imag

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.real, self.imag))

    def __abs__(self):
        return abs_(self)

    def __reduce__(self):
        return (Complex, (self.real, self.imag))

    def __repr__(self):
        return f"Complex(real={self.real!r}, imag={self.imag!r})"

    def __str__(self):
        return f"({self.real}, {self.imag}i)"


def add(lhs, rhs):
    """Complex number addition."""
    return Complex(lhs.real + rhs.real, lhs.imag + rhs.imag)


def sub(lhs, rhs):
    """Complex number subtraction."""
    return Complex(lhs.real - rhs.real, lhs.imag - rhs.imag)


def mul(lhs, rhs):
    """
    Complex number multiplication.

    A non-Complex right-hand side is treated as a real scalar and scales
    both components.
    """
    if not isinstance(rhs, Complex):
        return scale(lhs, rhs)
    return Complex(lhs.real * rhs.real - lhs.imag * rhs.imag,
                   lhs.real * rhs.imag + rhs.real * lhs.imag)


def scale(value, scalar):
    """Scale a complex number by a real scalar."""
    return Complex(value.real * scalar, value.imag * scalar)


def abs_sq(value):
    """Absolute value squared: real² + imag²."""
    return value.real * value.real + value.imag * value.imag


def abs_(value):
    """Absolute value (magnitude) of a complex number."""
    return np.sqrt(abs_sq(value))

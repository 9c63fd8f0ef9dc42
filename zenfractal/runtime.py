"""
Evaluation runtime: a binding table for the variables a..z plus parse and
evaluate entry points.

A Runtime is meant to be created once per render session (one per worker
thread when rendering in parallel) and reused for every pixel and every
iteration by rebinding variables with set_value(). It is not safe to share
one instance between threads: set_value() followed by eval() is not atomic.
"""

import logging
from numbers import Number

import numpy as np

from .complex_number import Complex, resolve_scalar_type
from .errors import BindingOutOfRangeError
from .parser import Parser
from .syntax_tree import dump, evaluate, node_count

logger = logging.getLogger(__name__)


TABLE_SIZE = ord('z') - ord('a') + 1


def make_index(letter):
    """
    Slot index for a variable name.

    Raises:
        BindingOutOfRangeError unless letter is a single character a..z
    """
    if not isinstance(letter, str) or len(letter) != 1 or not 'a' <= letter <= 'z':
        raise BindingOutOfRangeError(letter)
    return ord(letter) - ord('a')


class BindingTable:
    """Fixed table of 26 Complex values, zero until bound."""

    def __init__(self, scalar_type=float):
        self.scalar_type = resolve_scalar_type(scalar_type)
        self._zero = Complex.zero(self.scalar_type)
        self._values = [self._zero] * TABLE_SIZE

    def get(self, letter):
        return self._values[make_index(letter)]

    def set(self, letter, value):
        self._values[make_index(letter)] = value

    def reset(self):
        """Put every slot back to zero."""
        self._values = [self._zero] * TABLE_SIZE

    def snapshot(self):
        """Dict of the slots that hold a non-zero value."""
        return {
            chr(ord('a') + i): value
            for i, value in enumerate(self._values)
            if value != self._zero
        }


class CompiledExpression:
    """
    An expression parsed once into Variable leaves.

    evaluate() reads the owning runtime's current bindings, giving the same
    result as Runtime.eval(source) without parsing again.
    """

    def __init__(self, source, tree, runtime):
        self.source = source
        self.tree = tree
        self.runtime = runtime

    def evaluate(self):
        if self.tree is None:
            return self.runtime.bindings._zero
        return evaluate(self.tree, self.runtime.bindings)

    def __repr__(self):
        shown = dump(self.tree) if self.tree is not None else ''
        return f"CompiledExpression({self.source!r} -> {shown})"


class Runtime:
    """
    Owns one binding table and evaluates expressions against it.

    Usage:
        runtime = Runtime()
        runtime.set_value('z', Complex(1.0, 1.0))
        runtime.set_value('c', Complex(0.0, 0.0))
        runtime.eval('z*z+c')   # Complex(real=0.0, imag=2.0)
    """

    def __init__(self, scalar_type=np.float64):
        self.scalar_type = resolve_scalar_type(scalar_type)
        self.bindings = BindingTable(self.scalar_type)
        self._compiled = {}

    @classmethod
    def float32(cls):
        return cls(np.float32)

    @classmethod
    def float64(cls):
        return cls(np.float64)

    @classmethod
    def float128(cls):
        return cls(np.longdouble)

    @classmethod
    def decimal(cls):
        return cls('decimal')

    def coerce(self, value):
        """Convert a Complex, complex or real number to this runtime's scalar type."""
        if isinstance(value, Complex):
            if type(value.real) is self.scalar_type and type(value.imag) is self.scalar_type:
                return value
            return value.astype(self.scalar_type)
        if isinstance(value, Number):
            return Complex.from_builtin(value, self.scalar_type)
        raise TypeError(f"cannot bind {type(value).__name__} as a complex value")

    def set_value(self, letter, value):
        """
        Bind a variable.

        Raises:
            BindingOutOfRangeError if letter is not a..z
        """
        self.bindings.set(letter, self.coerce(value))

    def get_value(self, letter):
        return self.bindings.get(letter)

    def parse(self, source):
        """Parse with every variable replaced by its currently bound value."""
        return Parser(source, self.bindings.get).parse()

    def eval(self, source):
        """
        Parse `source` against the current bindings and evaluate it.

        The tree is thrown away afterwards. Empty input evaluates to zero.

        Raises:
            ExpressionSyntaxError if source is malformed
        """
        tree = self.parse(source)
        if tree is None:
            return self.bindings._zero
        return evaluate(tree)

    def compile(self, source):
        """
        Parse `source` once into a reusable expression.

        Raises:
            ExpressionSyntaxError if source is malformed
        """
        compiled = self._compiled.get(source)
        if compiled is None:
            tree = Parser(source).parse()
            compiled = CompiledExpression(source, tree, self)
            self._compiled[source] = compiled
            if tree is not None and logger.isEnabledFor(logging.DEBUG):
                logger.debug("Compiled %r into %d nodes: %s", source, node_count(tree), dump(tree))
        return compiled

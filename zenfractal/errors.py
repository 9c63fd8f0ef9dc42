"""
Exception types raised by the expression runtime.

All of them derive from FractalError so callers driving a render loop can
catch everything coming out of the core in one place. Each one also derives
from the closest builtin exception so generic handlers keep working.
"""


class FractalError(Exception):
    """Base class for errors raised by zenfractal."""


class ExpressionSyntaxError(FractalError, ValueError):
    """
    Raised when a recurrence expression does not match the grammar.

    Attributes:
        source: The full expression text
        position: Index into source where the problem was found
    """

    def __init__(self, message, source="", position=0):
        self.message = message
        self.source = source
        self.position = position
        super().__init__(f"{message} at position {position} in {source!r}")


class BindingOutOfRangeError(FractalError, IndexError):
    """Raised when a variable name outside a..z is bound or looked up."""

    def __init__(self, letter):
        self.letter = letter
        super().__init__(f"variable name must be a single letter a..z, got {letter!r}")


class EvaluationError(FractalError, RuntimeError):
    """Internal error: the evaluator met a node or operator it doesn't know."""
